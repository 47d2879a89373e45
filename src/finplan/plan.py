"""Calculation plan models and decoding of raw provider output."""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedPlan
from .resolver import IDENTIFIER_RE
from .utils import strip_code_fences

logger = logging.getLogger(__name__)

Value = Union[int, float, str]


def _check_identifier(name: str) -> str:
    if not IDENTIFIER_RE.match(name):
        raise ValueError(f"'{name}' is not a valid variable name (letters, digits and '_' only)")
    return name


class Step(BaseModel):
    """One formula application: resolved inputs in, one binding out."""

    model_config = ConfigDict(frozen=True, extra="allow")

    step_name: str = ""
    formula_name: str
    inputs: Dict[str, Any] = Field(default_factory=dict)
    target_variable: str
    generated_formula: Optional[str] = None

    @field_validator("target_variable")
    @classmethod
    def _valid_target(cls, value: str) -> str:
        return _check_identifier(value)


class ExecutedStep(Step):
    """A step after execution: literal inputs, numeric result and display trace."""

    result: Union[int, float]
    substituted_formula: str


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    interpretation: str = ""
    initial_data: Dict[str, Value] = Field(default_factory=dict)
    calculation_steps: List[Step]
    final_variable: Optional[str] = None

    @field_validator("initial_data")
    @classmethod
    def _valid_names(cls, value: Dict[str, Value]) -> Dict[str, Value]:
        for name in value:
            _check_identifier(name)
        return value


class InsufficientDataPlan(BaseModel):
    """What the provider returns when the problem lacks data to be solved."""

    model_config = ConfigDict(frozen=True)

    error: str


AnyPlan = Union[Plan, InsufficientDataPlan]


def load_plan(data: Any) -> AnyPlan:
    """
    Validate decoded JSON into a Plan or an InsufficientDataPlan.

    ``{"error": ...}`` without steps is the insufficient-data variant; anything
    else must carry ``calculation_steps`` or it is a MalformedPlan.
    """
    if isinstance(data, (Plan, InsufficientDataPlan)):
        return data
    if not isinstance(data, Mapping):
        raise MalformedPlan(f"Plan must be a JSON object, got {type(data).__name__}.")
    if "error" in data and "calculation_steps" not in data:
        return InsufficientDataPlan(error=str(data["error"]))
    try:
        return Plan.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MalformedPlan(f"Plan does not match the expected shape: {details}") from e


def parse_plan_text(raw_text: str) -> AnyPlan:
    """Strip code fences from provider output, decode the JSON and validate it."""
    text = strip_code_fences(raw_text)
    if not text:
        raise MalformedPlan("Provider returned an empty response.")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as first_err:
        # Fallback: models sometimes wrap the object in prose
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise MalformedPlan(f"Provider response is not valid JSON: {first_err}") from first_err
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise MalformedPlan(f"Provider response is not valid JSON: {e}") from e
        logger.warning("Fallback brace extraction used to decode plan JSON.")
    return load_plan(data)


def serialize_plan(plan: AnyPlan) -> str:
    """Serialize a plan back into the JSON shape the provider produces."""
    return plan.model_dump_json(indent=2, exclude_none=True)


def steps_as_dicts(steps: List[ExecutedStep]) -> List[Dict[str, Any]]:
    return [step.model_dump() for step in steps]
