"""Error types raised while generating and executing calculation plans."""

from typing import Optional


class PlanError(Exception):
    """Base class for every failure of a calculation plan.

    The executor annotates the error with the position of the failing step so
    the caller can build a user-facing message without re-running anything.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.step_number: Optional[int] = None
        self.step_name: Optional[str] = None
        self.formula_name: Optional[str] = None

    def annotate(self, step_number: int, step_name: str, formula_name: str) -> "PlanError":
        self.step_number = step_number
        self.step_name = step_name
        if self.formula_name is None:
            self.formula_name = formula_name
        return self

    def __str__(self) -> str:
        if self.step_number is None:
            return self.message
        return f"Step {self.step_number} ({self.formula_name}): {self.message}"


class UnknownFormula(PlanError):
    def __init__(self, formula_name: str) -> None:
        super().__init__(f"Formula '{formula_name}' is not implemented in the calculation engine.")
        self.formula_name = formula_name


class InvalidReference(PlanError):
    def __init__(self, reference: str) -> None:
        super().__init__(f"Invalid variable reference: '{reference}'.")
        self.reference = reference


class UndefinedVariable(PlanError):
    def __init__(self, variable: str) -> None:
        super().__init__(f"Variable '{variable}' not found.")
        self.variable = variable


class InvalidResult(PlanError):
    def __init__(self, formula_name: str, detail: Optional[str] = None) -> None:
        message = f"Calculation for '{formula_name}' resulted in an invalid value."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.formula_name = formula_name


class InvalidExpression(PlanError):
    """The expression given to the experimental formula is not plain arithmetic."""

    def __init__(self, expression: Optional[str], reason: str) -> None:
        super().__init__(f"Invalid expression {expression!r}: {reason}")
        self.expression = expression


class MalformedPlan(PlanError):
    """Raw provider output could not be decoded into a plan."""


class InsufficientData(PlanError):
    """The provider answered with the error variant instead of a plan."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Insufficient data: {reason}")
        self.reason = reason


class ProviderError(Exception):
    """AI provider is unknown, misconfigured or failed to answer."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider
