import json

import pytest

from finplan.errors import MalformedPlan
from finplan.plan import InsufficientDataPlan, Plan, load_plan, parse_plan_text, serialize_plan

PLAN = {
    "interpretation": "Interés simple",
    "initial_data": {"P": 1000, "j": 0.05, "n": 2},
    "calculation_steps": [
        {
            "step_name": "Interés",
            "formula_name": "formula_is_I_from_Pjn",
            "inputs": {"P": "{{P}}", "j": "{{j}}", "n": "{{n}}"},
            "target_variable": "I",
        }
    ],
    "final_variable": "I",
}


def test_parse_fenced_plan() -> None:
    raw = "```json\n" + json.dumps(PLAN) + "\n```"
    plan = parse_plan_text(raw)
    assert isinstance(plan, Plan)
    assert plan.calculation_steps[0].target_variable == "I"
    assert plan.initial_data["P"] == 1000


def test_parse_plan_wrapped_in_prose(caplog):
    raw = "Aquí está el plan:\n" + json.dumps(PLAN) + "\nEspero que ayude."
    plan = parse_plan_text(raw)
    assert plan.final_variable == "I"
    assert "Fallback brace extraction" in caplog.text


@pytest.mark.parametrize("raw", ["", "no json here", "{not valid}", "[1, 2]"])
def test_undecodable_output_is_malformed(raw):
    with pytest.raises(MalformedPlan):
        parse_plan_text(raw)


def test_error_variant():
    plan = parse_plan_text('{"error": "Falta la tasa de interés"}')
    assert isinstance(plan, InsufficientDataPlan)
    assert plan.error == "Falta la tasa de interés"


def test_missing_steps_is_malformed():
    with pytest.raises(MalformedPlan) as exc:
        load_plan({"interpretation": "x", "initial_data": {}})
    assert "calculation_steps" in str(exc.value)


def test_invalid_variable_names_are_rejected():
    bad_target = dict(PLAN, calculation_steps=[dict(PLAN["calculation_steps"][0], target_variable="tasa anual")])
    with pytest.raises(MalformedPlan):
        load_plan(bad_target)
    with pytest.raises(MalformedPlan):
        load_plan(dict(PLAN, initial_data={"capital-inicial": 1}))


def test_serialize_keeps_extra_step_fields():
    step = dict(PLAN["calculation_steps"][0], nota="pasa sin cambios")
    plan = load_plan(dict(PLAN, calculation_steps=[step]))
    data = json.loads(serialize_plan(plan))
    assert data["calculation_steps"][0]["nota"] == "pasa sin cambios"
    assert load_plan(data).calculation_steps[0].inputs == plan.calculation_steps[0].inputs
