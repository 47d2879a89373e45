"""Plan executor: runs calculation steps in order over a growing variable environment."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .errors import InsufficientData, PlanError, UndefinedVariable
from .formulas import evaluate
from .plan import AnyPlan, ExecutedStep, InsufficientDataPlan, Plan, load_plan
from .resolver import resolve_inputs

logger = logging.getLogger(__name__)


class ExecutionResult(BaseModel):
    """Executed steps plus the variable environment they produced."""

    model_config = ConfigDict(frozen=True)

    interpretation: str = ""
    steps: List[ExecutedStep]
    variables: Dict[str, Any]
    final_variable: Optional[str] = None

    @property
    def final_value(self) -> Any:
        if self.final_variable is None:
            return None
        if self.final_variable not in self.variables:
            raise UndefinedVariable(self.final_variable)
        return self.variables[self.final_variable]


def _as_plan(plan: Any) -> Plan:
    loaded: AnyPlan = load_plan(plan)
    if isinstance(loaded, InsufficientDataPlan):
        raise InsufficientData(loaded.error)
    return loaded


def run_plan(plan: Any) -> ExecutionResult:
    """
    Execute every step of ``plan`` in declared order.

    Each step resolves its inputs against the bindings made so far, evaluates
    its formula and binds ``target_variable`` to the result. The first failure
    aborts the run; the error is re-raised annotated with the step number,
    step name and formula name, and nothing partial is returned.
    """
    plan = _as_plan(plan)
    variables: Dict[str, Any] = dict(plan.initial_data)
    executed: List[ExecutedStep] = []

    for number, step in enumerate(plan.calculation_steps, start=1):
        try:
            resolved = resolve_inputs(step.inputs, variables)
            result, substituted = evaluate(step.formula_name, resolved, expression=step.generated_formula)
        except PlanError as e:
            e.annotate(number, step.step_name, step.formula_name)
            logger.error(f"Plan execution aborted at step {number} ('{step.step_name}'): {e}")
            raise
        variables[step.target_variable] = result
        record = step.model_dump()
        record.update(inputs=resolved, result=result, substituted_formula=substituted)
        executed.append(ExecutedStep(**record))
        logger.debug(f"Step {number}: {step.target_variable} = {result} via {step.formula_name}")

    logger.info(f"Executed {len(executed)} step(s); final variable: {plan.final_variable}")
    return ExecutionResult(
        interpretation=plan.interpretation,
        steps=executed,
        variables=variables,
        final_variable=plan.final_variable,
    )


def execute_plan(plan: Any) -> List[ExecutedStep]:
    """Execute ``plan`` and return only the ordered executed steps."""
    return run_plan(plan).steps
