"""CLI for finplan."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import finplan.logging_conf  # configure global logging
from finplan import config
from finplan.errors import InsufficientData, PlanError, ProviderError
from finplan.executor import ExecutionResult, run_plan
from finplan.plan import InsufficientDataPlan, parse_plan_text, serialize_plan, steps_as_dicts
from finplan.renderer import render_solution
from finplan.utils import format_number


def print_result(result: ExecutionResult, as_json: bool = False) -> None:
    if as_json:
        payload = {"steps": steps_as_dicts(result.steps), "variables": result.variables}
        print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
        return
    if result.interpretation:
        print(result.interpretation)
    for number, step in enumerate(result.steps, start=1):
        print(f"{number}. {step.step_name} [{step.formula_name}]")
        print(f"   {step.substituted_formula}")
    if result.final_variable is not None and result.final_variable in result.variables:
        print(f"{result.final_variable} = {format_number(result.variables[result.final_variable])}")


def _finish(result: ExecutionResult, args: argparse.Namespace) -> None:
    print_result(result, as_json=args.json)
    if args.image:
        png = render_solution(
            result.interpretation,
            result.steps,
            result.final_variable,
            result.variables.get(result.final_variable) if result.final_variable else None,
        )
        Path(args.image).write_bytes(png)
        print(f"Image written to {args.image}", file=sys.stderr)


def cmd_run(args: argparse.Namespace) -> None:
    plan = parse_plan_text(Path(args.plan).read_text(encoding="utf-8"))
    _finish(run_plan(plan), args)


def cmd_solve(args: argparse.Namespace) -> None:
    from finplan.agent import generate_plan

    plan = generate_plan(args.provider, args.problem)
    if args.save_plan:
        Path(args.save_plan).write_text(serialize_plan(plan), encoding="utf-8")
    if isinstance(plan, InsufficientDataPlan):
        raise InsufficientData(plan.error)
    _finish(run_plan(plan), args)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="finplan: execute financial calculation plans")
    sub = parser.add_subparsers(dest="command", required=True)

    run_parser = sub.add_parser("run", help="Execute a plan JSON file")
    run_parser.add_argument("plan", help="Path to the plan JSON (code fences allowed)")
    run_parser.set_defaults(func=cmd_run)

    solve_parser = sub.add_parser("solve", help="Generate a plan with an AI provider and execute it")
    solve_parser.add_argument("problem", help="Problem statement in natural language")
    solve_parser.add_argument("--provider", choices=config.PROVIDERS, default=config.GEMINI_PROVIDER)
    solve_parser.add_argument("--save-plan", default=None, help="Write the generated plan to this path")
    solve_parser.set_defaults(func=cmd_solve)

    for p in (run_parser, solve_parser):
        p.add_argument("--image", default=None, help="Write the rendered PNG to this path")
        p.add_argument("--json", action="store_true", help="Print executed steps as JSON")

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (PlanError, ProviderError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
