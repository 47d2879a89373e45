# src/finplan/utils.py
import math
import os
import re
import unicodedata

CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def clean_env(key, default=""):
    """Cleans environment variable values: handles None, normalizes Unicode, replaces dashes."""
    val = os.getenv(key, default)
    if val is None:
        return ""
    # Normalize to ASCII compatible characters
    val = unicodedata.normalize("NFKC", str(val))
    # Replace any kind of Unicode dash with ASCII hyphen
    val = re.sub(r"[\u2010\u2011\u2012\u2013\u2014\u2015\u2212]", "-", val)
    return val.strip()


def env_int(key, default):
    """Integer environment value, falling back to ``default`` when unset or invalid."""
    val = clean_env(key)
    try:
        return int(val) if val else default
    except ValueError:
        return default


def strip_code_fences(text):
    """Remove markdown code fences (```json ... ```) and surrounding whitespace."""
    return CODE_FENCE_RE.sub("", text or "").strip()


def format_number(value):
    """Render a number for display: integral floats lose their trailing '.0'."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)
