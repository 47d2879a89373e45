"""
Manual test for run_plan with a hand-written plan, rendered to solution.png.
Run with:
    python manual_test.py
"""
import json
from pathlib import Path

from finplan.executor import run_plan
from finplan.plan import steps_as_dicts
from finplan.renderer import render_solution

if __name__ == "__main__":
    plan = {
        "interpretation": "Interés simple de un préstamo del 15/03 al 10/09 al 18% anual",
        "initial_data": {"P": 5000, "j": 0.18, "inicio": "2025-03-15", "fin": "2025-09-10"},
        "calculation_steps": [
            {
                "step_name": "Días transcurridos",
                "formula_name": "formula_util_dias_entre_fechas",
                "inputs": {"fecha_inicial": "{{inicio}}", "fecha_final": "{{fin}}"},
                "target_variable": "n_dias",
            },
            {
                "step_name": "Fracción de año",
                "formula_name": "formula_util_fraccion_anio",
                "inputs": {"n_dias": "{{n_dias}}"},
                "target_variable": "n",
            },
            {
                "step_name": "Interés",
                "formula_name": "formula_is_I_from_Pjn",
                "inputs": {"P": "{{P}}", "j": "{{j}}", "n": "{{n}}"},
                "target_variable": "I",
            },
        ],
        "final_variable": "I",
    }
    result = run_plan(plan)
    print(json.dumps(steps_as_dicts(result.steps), indent=2, ensure_ascii=False))
    png = render_solution(result.interpretation, result.steps, result.final_variable, result.final_value)
    Path("solution.png").write_bytes(png)
    print("Wrote solution.png")
