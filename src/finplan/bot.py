"""WhatsApp bot logic: command routing, plan solving and user-facing replies."""

import logging
from typing import Any, Callable, Optional, Tuple

from finplan import config
from finplan.agent import generate_plan
from finplan.errors import (
    InsufficientData,
    InvalidExpression,
    InvalidReference,
    InvalidResult,
    MalformedPlan,
    PlanError,
    ProviderError,
    UndefinedVariable,
    UnknownFormula,
)
from finplan.executor import ExecutionResult, run_plan
from finplan.plan import AnyPlan, InsufficientDataPlan
from finplan.renderer import render_solution

logger = logging.getLogger(__name__)

COMMAND_PREFIXES = ("!", "/", "#")
RESOLVERS = {
    "resolver1": "gemini_studio",
    "resolver2": "kimi",
    "resolver3": "mistral",
    "resolver4": "llama",
    "resolver5": "deepseek",
}
COMMAND_MAP = {f"{prefix}{name}": provider for name, provider in RESOLVERS.items() for prefix in COMMAND_PREFIXES}
MENU_COMMANDS = {f"{prefix}menu" for prefix in COMMAND_PREFIXES}

WELCOME_MESSAGE = """👋 ¡Hola! Soy tu asistente de Matemática Financiera.

Puedes usar los siguientes comandos para resolver problemas:
* *!resolver1* (Recomendado ✨)
* *!resolver2*
* *!resolver3*
* *!resolver4*
* *!resolver5*

Simplemente escribe el comando seguido de tu problema.
*Ejemplo:* `!resolver1 ¿Cuál es el interés simple de S/1000 al 5% anual por 2 años?`"""

PlanGenerator = Callable[[str, str], AnyPlan]


def match_command(message_text: str) -> Optional[str]:
    """Return the command the (lower-cased) message starts with, if any."""
    for command in COMMAND_MAP:
        if message_text.startswith(command):
            return command
    return None


def _at_step(error: PlanError) -> str:
    return f" (paso {error.step_number})" if error.step_number is not None else ""


def describe_error(provider: str, error: Exception) -> str:
    """Turn an execution or provider failure into a message for the user."""
    if isinstance(error, InsufficientData):
        return f"No hay datos suficientes para resolver el problema: {error.reason}"
    if isinstance(error, UnknownFormula):
        return f"El plan de {provider} usó una fórmula no disponible: {error.formula_name}{_at_step(error)}."
    if isinstance(error, UndefinedVariable):
        return (
            f"El plan de {provider} usa la variable '{error.variable}' antes de calcularla{_at_step(error)}."
        )
    if isinstance(error, InvalidReference):
        return f"El plan de {provider} tiene una referencia inválida: {error.reference}{_at_step(error)}."
    if isinstance(error, InvalidResult):
        return (
            f"El cálculo {error.formula_name}{_at_step(error)} dio un resultado inválido "
            "(por ejemplo, división por cero o logaritmo de un número negativo)."
        )
    if isinstance(error, InvalidExpression):
        return f"La fórmula generada por {provider} no es válida{_at_step(error)}."
    if isinstance(error, MalformedPlan):
        return f"La respuesta de {provider} no es un plan de cálculo válido. Intenta reformular el problema."
    return f"Lo siento, ocurrió un error con el proveedor {provider}. Detalles: {error}"


def solve_problem(
    provider: str,
    problem: str,
    generate: Optional[PlanGenerator] = None,
) -> Tuple[ExecutionResult, bytes]:
    """Generate, execute and render a plan. Returns the execution and the PNG."""
    plan = (generate or generate_plan)(provider, problem)
    if isinstance(plan, InsufficientDataPlan):
        raise InsufficientData(plan.error)
    if len(plan.calculation_steps) > config.MAX_PLAN_STEPS:
        raise MalformedPlan(
            f"Plan has {len(plan.calculation_steps)} steps; the limit is {config.MAX_PLAN_STEPS}."
        )
    result = run_plan(plan)
    final_value = None
    if result.final_variable is not None:
        final_value = result.variables.get(result.final_variable)
        if final_value is None:
            logger.warning(f"Final variable '{result.final_variable}' was never bound.")
    image = render_solution(result.interpretation, result.steps, result.final_variable, final_value)
    return result, image


def handle_message(
    message_body: str,
    sender: str,
    messenger: Any,
    generate: Optional[PlanGenerator] = None,
) -> None:
    """
    React to one incoming WhatsApp message.

    ``messenger`` needs ``send_text(text, to)`` and ``send_image(png, to)``.
    Messages that are neither the menu nor a resolver command are ignored.
    """
    text = (message_body or "").strip()
    lowered = text.lower()

    if lowered in MENU_COMMANDS:
        messenger.send_text(WELCOME_MESSAGE, sender)
        return

    command = match_command(lowered)
    if command is None:
        return

    provider = COMMAND_MAP[command]
    problem = text[len(command):].strip()
    if not problem:
        messenger.send_text(f"Por favor, escribe un problema después del comando {command}.", sender)
        return

    logger.info(f"[+] Comando: {command} | Proveedor: {provider} | Problema: \"{problem}\"")
    messenger.send_text(f"Analizando con {provider}... 🧠✨", sender)
    try:
        _, image = solve_problem(provider, problem, generate)
    except (PlanError, ProviderError) as e:
        logger.error(f"Error procesando con {provider}: {e}")
        messenger.send_text(describe_error(provider, e), sender)
        return
    except Exception as e:
        logger.error(f"Unexpected error processing with {provider}: {e}", exc_info=True)
        messenger.send_text(describe_error(provider, e), sender)
        return

    if messenger.send_image(image, sender):
        logger.info(f"[+] Solución enviada a {sender}")
