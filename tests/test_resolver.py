import pytest

from finplan.errors import InvalidReference, UndefinedVariable
from finplan.resolver import is_reference, make_reference, reference_name, resolve_inputs, resolve_value


def test_literals_pass_through_unchanged() -> None:
    variables = {"P": 1000}
    assert resolve_value(0.05, variables) == 0.05
    assert resolve_value("2024-01-15", variables) == "2024-01-15"
    assert resolve_value(None, variables) is None


def test_reference_resolves_to_bound_value():
    assert resolve_value("{{P}}", {"P": 1000}) == 1000
    assert reference_name(make_reference("n_dias")) == "n_dias"


@pytest.mark.parametrize("raw", ["{{ P }}", "{{}}", "{{P-1}}", "{{a.b}}"])
def test_malformed_reference_is_rejected(raw):
    with pytest.raises(InvalidReference) as exc:
        resolve_value(raw, {"P": 1})
    assert exc.value.reference == raw


@pytest.mark.parametrize("raw", ["{P}", "{{P}", "P}}", "x{{P}}"])
def test_partial_braces_are_literals(raw):
    assert not is_reference(raw)
    assert resolve_value(raw, {"P": 1}) == raw


def test_undefined_variable_names_the_variable():
    with pytest.raises(UndefinedVariable) as exc:
        resolve_inputs({"P": "{{capital}}"}, {"P": 1000})
    assert exc.value.variable == "capital"


def test_resolve_inputs_does_not_mutate():
    inputs = {"P": "{{P}}", "j": 0.1}
    variables = {"P": 500}
    resolved = resolve_inputs(inputs, variables)
    assert resolved == {"P": 500, "j": 0.1}
    assert inputs == {"P": "{{P}}", "j": 0.1}
    assert variables == {"P": 500}
    assert resolve_inputs(None, variables) == {}
