"""System prompt that tells the provider how to write a calculation plan.

The list of formulas and their parameter names is generated from the formula
registry, so the vocabulary the model is told about is always the one the
executor accepts.
"""

from datetime import date
from itertools import groupby
from typing import Optional

from .formulas import list_formulas
from .resolver import make_reference
from .templates import template_for

PLAN_FORMAT = """\
{
  "interpretation": "<Breve descripción de cómo interpretaste el problema>",
  "initial_data": { "<variable_1>": <valor_1>, "<variable_2>": <valor_2> },
  "calculation_steps": [
    {
      "step_name": "<Nombre del paso>",
      "formula_name": "<nombre_de_la_formula>",
      "inputs": { "<param_1>": "{{variable}}", "<param_2>": <valor_literal> },
      "target_variable": "<nombre_de_la_variable_resultado>"
    }
  ],
  "final_variable": "<nombre_de_la_variable_final>"
}"""

RULES = """\
Reglas:
- Utiliza ÚNICAMENTE las fórmulas de la lista y EXACTAMENTE los nombres de parámetros indicados.
- No inventes fórmulas. Si ninguna aplica, usa "formula_experimental" y agrega al paso la clave
  "generated_formula" con una expresión que solo use + - * / ^, paréntesis y los nombres de sus inputs.
- Los nombres de variables solo pueden contener letras, dígitos y '_'.
- Para usar una variable escribe "{reference}"; solo puedes referirte a initial_data o a pasos anteriores.
- Las tasas van en decimal (5% = 0.05). Las fechas van en formato AAAA-MM-DD.
- Si una fecha no indica el año, asume el año {year}.
- No incluyas la respuesta final en el plan.
- Si faltan datos para resolver el problema responde solo con {{"error": "<qué dato falta>"}}.
- Responde únicamente con el objeto JSON, sin texto adicional."""


def formula_catalogue() -> str:
    """One line per formula, grouped: identifier(params): display template."""
    lines = []
    for group, formulas in groupby(list_formulas(), key=lambda f: f.group):
        lines.append(f"## {group}")
        for f in formulas:
            params = ", ".join(f.parameter_names)
            lines.append(f"- {f.name}({params}): {template_for(f.name)}")
    return "\n".join(lines)


def build_system_prompt(today: Optional[date] = None) -> str:
    today = today or date.today()
    return (
        "Eres un experto en finanzas que crea planes de cálculo para resolver problemas de "
        "matemática financiera.\n"
        "Tu respuesta DEBE ser un objeto JSON con la siguiente estructura:\n\n"
        f"{PLAN_FORMAT}\n\n"
        f"{RULES.format(year=today.year, reference=make_reference('nombre'))}\n\n"
        "Fórmulas disponibles:\n"
        f"{formula_catalogue()}\n"
    )


def build_user_prompt(problem: str) -> str:
    return f'Problema a resolver: "{problem}"'
