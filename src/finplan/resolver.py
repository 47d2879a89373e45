"""Resolution of ``{{name}}`` references inside step inputs."""

import re
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidReference, UndefinedVariable

REF_OPEN = "{{"
REF_CLOSE = "}}"
IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_]+$")


def is_reference(value: Any) -> bool:
    """True for any string shaped like a reference attempt, valid or not."""
    return (
        isinstance(value, str)
        and len(value) >= len(REF_OPEN) + len(REF_CLOSE)
        and value.startswith(REF_OPEN)
        and value.endswith(REF_CLOSE)
    )


def reference_name(value: str) -> str:
    """Return the variable name inside ``{{name}}`` or raise InvalidReference."""
    name = value[len(REF_OPEN):-len(REF_CLOSE)]
    if not IDENTIFIER_RE.match(name):
        raise InvalidReference(value)
    return name


def make_reference(name: str) -> str:
    return f"{REF_OPEN}{name}{REF_CLOSE}"


def resolve_value(value: Any, variables: Mapping[str, Any]) -> Any:
    if not is_reference(value):
        return value
    name = reference_name(value)
    if name not in variables:
        raise UndefinedVariable(name)
    return variables[name]


def resolve_inputs(inputs: Optional[Mapping[str, Any]], variables: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Replace every reference in ``inputs`` with its bound value.

    Literals pass through untouched. Neither ``inputs`` nor ``variables`` is
    modified; a new dict is returned.
    """
    resolved: Dict[str, Any] = {}
    for key, value in (inputs or {}).items():
        resolved[key] = resolve_value(value, variables)
    return resolved
