from datetime import date

from finplan.formulas import FORMULAS, list_formulas
from finplan.prompts import build_system_prompt, build_user_prompt, formula_catalogue
from finplan.resolver import make_reference
from finplan.templates import FORMULA_TEMPLATES, MISSING_TEMPLATE, template_for


def test_every_formula_has_a_template() -> None:
    assert set(FORMULA_TEMPLATES) == set(FORMULAS)
    assert template_for("formula_no_existe") == MISSING_TEMPLATE


def test_catalogue_lists_every_formula_with_params():
    catalogue = formula_catalogue()
    for f in list_formulas():
        assert f"- {f.name}({', '.join(f.parameter_names)})" in catalogue
    assert "## Utilidad general" in catalogue


def test_system_prompt_mentions_year_and_reference_syntax():
    prompt = build_system_prompt(today=date(2031, 5, 4))
    assert "asume el año 2031" in prompt
    assert f'"{make_reference("nombre")}"' in prompt
    assert '"{{nombre}}"' in prompt
    assert '{"error": "<qué dato falta>"}' in prompt
    assert '"calculation_steps"' in prompt


def test_user_prompt_quotes_problem():
    assert build_user_prompt("Calcula el VF") == 'Problema a resolver: "Calcula el VF"'
