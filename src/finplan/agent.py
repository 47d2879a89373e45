"""
########################################################################
# finplan Plan Generator (agent.py)
#
# Turns a natural-language financial-math problem into a calculation plan:
# 1. Build the system prompt (formula vocabulary comes from the registry).
# 2. Call the selected AI provider through the OpenAI-compatible chat API
#    (Google AI Studio for gemini_studio, OpenRouter for the others).
# 3. Strip code fences from the raw answer and decode it into a Plan or an
#    InsufficientDataPlan (finplan.plan.parse_plan_text).
#
# Main functions:
# - llm_completion(provider, system_prompt, user_prompt): raw provider text.
# - generate_plan(provider, problem): decoded plan, ready for the executor.
########################################################################
"""

import logging
from typing import Any, Tuple

import openai

from finplan import config
from finplan.errors import ProviderError
from finplan.plan import AnyPlan, parse_plan_text
from finplan.prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)


def provider_settings(provider: str) -> Tuple[str, str, str]:
    """Return ``(base_url, model, api_key)`` for ``provider`` or raise ProviderError."""
    if provider == config.GEMINI_PROVIDER:
        base_url, model = config.GEMINI_BASE_URL, config.GEMINI_MODEL
    elif provider in config.OPENROUTER_MODELS:
        base_url, model = config.OPENROUTER_BASE_URL, config.OPENROUTER_MODELS[provider]
    else:
        raise ProviderError(provider, f"Unknown AI provider '{provider}'.")
    api_key = config.api_key_for(provider)
    if not api_key or "..." in api_key:
        raise ProviderError(provider, f"API key for {provider} is not configured.")
    return base_url, model, api_key


def llm_completion(provider: str, system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
    """Call the provider's chat completion endpoint and return the message text."""
    base_url, model, api_key = provider_settings(provider)
    client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=config.LLM_TIMEOUT_SECONDS)
    logger.info(f"Using model {model} via {base_url} for provider {provider}.")
    response = client.chat.completions.create(
        model=kwargs.get("model", model),
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        temperature=kwargs.get("temperature", 0),
    )
    return response.choices[0].message.content or ""


def generate_plan(provider: str, problem: str) -> AnyPlan:
    """
    Ask ``provider`` for a calculation plan solving ``problem``.

    Raises ProviderError when the provider is unknown, unconfigured or the call
    fails, and MalformedPlan when the answer cannot be decoded.
    """
    logger.info(f"[AI Service] Calling provider: {provider}")
    try:
        raw_text = llm_completion(provider, build_system_prompt(), build_user_prompt(problem))
    except ProviderError:
        raise
    except openai.OpenAIError as e:
        logger.error(f"[AI Service] Error calling {provider}: {e}")
        raise ProviderError(provider, f"Failed to generate calculation plan from {provider}.") from e
    logger.info(f"[AI Service] Raw response from {provider}: {raw_text}")
    return parse_plan_text(raw_text)
