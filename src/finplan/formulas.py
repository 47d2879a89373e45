"""Formula library for finplan.

Every supported financial formula is registered under its identifier together
with the parameter names it reads. ``evaluate`` looks the identifier up,
feeds it the resolved step inputs and checks that the result is a finite
real number.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import InvalidResult, UnknownFormula
from .expression import evaluate_expression, substitute_names
from .utils import format_number as _f

logger = logging.getLogger(__name__)

Number = Union[int, float]
FormulaResult = Tuple[Number, str]

DAY_COUNT_BASIS = 360

# Faults Python raises where the arithmetic has no finite real answer.
ARITHMETIC_ERRORS = (ZeroDivisionError, OverflowError, ValueError, TypeError)


class Formula:
    """A registered formula: identifier, declared parameters and evaluator."""

    def __init__(
        self,
        name: str,
        params: Tuple[str, ...],
        func: Callable[..., FormulaResult],
        group: str,
        optional: Optional[Dict[str, Number]] = None,
        dates: Tuple[str, ...] = (),
        takes_expression: bool = False,
    ) -> None:
        self.name = name
        self.params = params
        self.func = func
        self.group = group
        self.optional = optional or {}
        self.dates = dates
        self.takes_expression = takes_expression

    @property
    def parameter_names(self) -> List[str]:
        return list(self.params) + list(self.optional)

    def compute(self, params: Mapping[str, Any], expression: Optional[str] = None) -> FormulaResult:
        if self.takes_expression:
            numeric = {key: to_number(value) for key, value in params.items()}
            return self.func(expression, numeric)
        kwargs: Dict[str, Any] = {}
        for name in self.params:
            # missing parameters flow in as NaN and fail the result check
            kwargs[name] = params.get(name) if name in self.dates else to_number(params.get(name))
        for name, default in self.optional.items():
            # missing or zero falls back to the default
            raw = params.get(name)
            kwargs[name] = to_number(raw) if raw else default
        return self.func(**kwargs)

    def __repr__(self) -> str:
        return f"Formula({self.name!r}, {list(self.params)})"


FORMULAS: Dict[str, Formula] = {}


def formula(
    name: str,
    *params: str,
    group: str,
    optional: Optional[Dict[str, Number]] = None,
    dates: Tuple[str, ...] = (),
    takes_expression: bool = False,
) -> Callable[[Callable[..., FormulaResult]], Callable[..., FormulaResult]]:
    """Register the decorated function as formula ``name``."""

    def decorator(func: Callable[..., FormulaResult]) -> Callable[..., FormulaResult]:
        if name in FORMULAS:
            raise ValueError(f"Formula '{name}' registered twice")
        FORMULAS[name] = Formula(name, params, func, group, optional, dates, takes_expression)
        return func

    return decorator


def to_number(value: Any) -> float:
    """Coerce a resolved input to a number; anything non-numeric becomes NaN."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        # float arithmetic overflows to inf instead of building huge ints
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO date string, got {value!r}")
    return date.fromisoformat(value.strip().split("T", 1)[0])


def is_valid_result(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def get_formula(formula_name: str) -> Formula:
    found = FORMULAS.get(formula_name)
    if found is None:
        raise UnknownFormula(formula_name)
    return found


def evaluate(
    formula_name: str,
    params: Mapping[str, Any],
    expression: Optional[str] = None,
) -> FormulaResult:
    """
    Evaluate ``formula_name`` with resolved ``params``.

    Returns ``(result, substituted_formula)``. Raises UnknownFormula for an
    unregistered identifier and InvalidResult when the result is NaN, infinite,
    complex or the arithmetic itself fails.
    """
    found = get_formula(formula_name)
    try:
        result, substituted = found.compute(params, expression)
        valid = is_valid_result(result)
    except ARITHMETIC_ERRORS as e:
        logger.debug(f"Arithmetic failure in {formula_name} with {dict(params)}: {e}")
        raise InvalidResult(formula_name, str(e)) from e
    if not valid:
        raise InvalidResult(formula_name)
    return result, substituted


def list_formulas() -> List[Formula]:
    return list(FORMULAS.values())


# --- Utilidad general ---

UTIL = "Utilidad general"


@formula("formula_util_dias_entre_fechas", "fecha_inicial", "fecha_final", group=UTIL,
         dates=("fecha_inicial", "fecha_final"))
def util_dias_entre_fechas(fecha_inicial: Any, fecha_final: Any) -> FormulaResult:
    delta = to_date(fecha_final) - to_date(fecha_inicial)
    result = math.ceil(abs(delta.days))
    return result, f"DiasEntre({fecha_final}, {fecha_inicial}) = {result}"


@formula("formula_util_fraccion_anio", "n_dias", group=UTIL)
def util_fraccion_anio(n_dias: Number) -> FormulaResult:
    result = n_dias / DAY_COUNT_BASIS
    return result, f"{_f(n_dias)} / {DAY_COUNT_BASIS} = {_f(result)}"


@formula("formula_util_suma", "valor1", "valor2", group=UTIL)
def add(valor1: Number, valor2: Number) -> FormulaResult:
    result = valor1 + valor2
    return result, f"{_f(valor1)} + {_f(valor2)} = {_f(result)}"


@formula("formula_util_resta", "valor1", "valor2", group=UTIL)
def subtract(valor1: Number, valor2: Number) -> FormulaResult:
    result = valor1 - valor2
    return result, f"{_f(valor1)} - {_f(valor2)} = {_f(result)}"


@formula("formula_util_multiplicacion", "valor1", "valor2", group=UTIL)
def multiply(valor1: Number, valor2: Number) -> FormulaResult:
    result = valor1 * valor2
    return result, f"{_f(valor1)} * {_f(valor2)} = {_f(result)}"


@formula("formula_util_division", "valor1", "valor2", group=UTIL)
def divide(valor1: Number, valor2: Number) -> FormulaResult:
    result = valor1 / valor2
    return result, f"{_f(valor1)} / {_f(valor2)} = {_f(result)}"


# --- Interés simple ---

IS = "Interés simple"


@formula("formula_is_I_from_Pjn", "P", "j", "n", group=IS)
def is_I_from_Pjn(P: Number, j: Number, n: Number) -> FormulaResult:
    result = P * j * n
    return result, f"{_f(P)} * {_f(j)} * {_f(n)} = {_f(result)}"


@formula("formula_is_S_from_Pjn", "P", "j", "n", group=IS)
def is_S_from_Pjn(P: Number, j: Number, n: Number) -> FormulaResult:
    result = P * (1 + j * n)
    return result, f"{_f(P)} * (1 + {_f(j)} * {_f(n)}) = {_f(result)}"


@formula("formula_is_P_from_Sjn", "S", "j", "n", group=IS)
def is_P_from_Sjn(S: Number, j: Number, n: Number) -> FormulaResult:
    result = S / (1 + j * n)
    return result, f"{_f(S)} / (1 + {_f(j)} * {_f(n)}) = {_f(result)}"


@formula("formula_is_P_from_Ijn", "I", "j", "n", group=IS)
def is_P_from_Ijn(I: Number, j: Number, n: Number) -> FormulaResult:
    result = I / (j * n)
    return result, f"{_f(I)} / ({_f(j)} * {_f(n)}) = {_f(result)}"


@formula("formula_is_n_from_SPI", "S", "P", "j", group=IS)
def is_n_from_SPI(S: Number, P: Number, j: Number) -> FormulaResult:
    result = (S / P - 1) / j
    return result, f"({_f(S)} / {_f(P)} - 1) / {_f(j)} = {_f(result)}"


@formula("formula_is_n_from_IPj", "I", "P", "j", group=IS)
def is_n_from_IPj(I: Number, P: Number, j: Number) -> FormulaResult:
    result = I / (P * j)
    return result, f"{_f(I)} / ({_f(P)} * {_f(j)}) = {_f(result)}"


@formula("formula_is_j_from_SPn", "S", "P", "n", group=IS)
def is_j_from_SPn(S: Number, P: Number, n: Number) -> FormulaResult:
    result = (S / P - 1) / n
    return result, f"({_f(S)} / {_f(P)} - 1) / {_f(n)} = {_f(result)}"


@formula("formula_is_j_from_IPn", "I", "P", "n", group=IS)
def is_j_from_IPn(I: Number, P: Number, n: Number) -> FormulaResult:
    result = I / (P * n)
    return result, f"{_f(I)} / ({_f(P)} * {_f(n)}) = {_f(result)}"


# --- Interés compuesto ---

IC = "Interés compuesto"


@formula("formula_ic_S_from_Pin", "P", "i", "n", group=IC)
def ic_S_from_Pin(P: Number, i: Number, n: Number) -> FormulaResult:
    result = P * (1 + i) ** n
    return result, f"{_f(P)} * (1 + {_f(i)})^{_f(n)} = {_f(result)}"


@formula("formula_ic_P_from_Sin", "S", "i", "n", group=IC)
def ic_P_from_Sin(S: Number, i: Number, n: Number) -> FormulaResult:
    result = S * (1 + i) ** -n
    return result, f"{_f(S)} * (1 + {_f(i)})^-{_f(n)} = {_f(result)}"


@formula("formula_ic_I_from_Pin", "P", "i", "n", group=IC)
def ic_I_from_Pin(P: Number, i: Number, n: Number) -> FormulaResult:
    result = P * ((1 + i) ** n - 1)
    return result, f"{_f(P)} * ((1 + {_f(i)})^{_f(n)} - 1) = {_f(result)}"


@formula("formula_ic_P_from_Iin", "I", "i", "n", group=IC)
def ic_P_from_Iin(I: Number, i: Number, n: Number) -> FormulaResult:
    result = I / ((1 + i) ** n - 1)
    return result, f"{_f(I)} / ((1 + {_f(i)})^{_f(n)} - 1) = {_f(result)}"


@formula("formula_ic_n_from_SPi", "S", "P", "i", group=IC)
def ic_n_from_SPi(S: Number, P: Number, i: Number) -> FormulaResult:
    result = math.log(S / P) / math.log(1 + i)
    return result, f"log({_f(S)} / {_f(P)}) / log(1 + {_f(i)}) = {_f(result)}"


@formula("formula_ic_i_from_SPn", "S", "P", "n", group=IC)
def ic_i_from_SPn(S: Number, P: Number, n: Number) -> FormulaResult:
    result = (S / P) ** (1 / n) - 1
    return result, f"({_f(S)} / {_f(P)})^(1/{_f(n)}) - 1 = {_f(result)}"


@formula("formula_ic_S_from_Pjm", "P", "j", "m", "n", group=IC)
def ic_S_from_Pjm(P: Number, j: Number, m: Number, n: Number) -> FormulaResult:
    result = P * (1 + j / m) ** n
    return result, f"{_f(P)} * (1 + {_f(j)} / {_f(m)})^{_f(n)} = {_f(result)}"


@formula("formula_ic_P_from_Sjm", "S", "j", "m", "n", group=IC)
def ic_P_from_Sjm(S: Number, j: Number, m: Number, n: Number) -> FormulaResult:
    result = S * (1 + j / m) ** -n
    return result, f"{_f(S)} * (1 + {_f(j)} / {_f(m)})^-{_f(n)} = {_f(result)}"


@formula("formula_ic_n_from_IPi", "I", "P", "i", group=IC)
def ic_n_from_IPi(I: Number, P: Number, i: Number) -> FormulaResult:
    result = math.log(I / P + 1) / math.log(1 + i)
    return result, f"log({_f(I)} / {_f(P)} + 1) / log(1 + {_f(i)}) = {_f(result)}"


@formula("formula_ic_i_from_IPn", "I", "P", "n", group=IC)
def ic_i_from_IPn(I: Number, P: Number, n: Number) -> FormulaResult:
    result = (I / P + 1) ** (1 / n) - 1
    return result, f"({_f(I)} / {_f(P)} + 1)^(1/{_f(n)}) - 1 = {_f(result)}"


@formula("formula_ic_j_from_SPnm", "S", "P", "n", "m", group=IC)
def ic_j_from_SPnm(S: Number, P: Number, n: Number, m: Number) -> FormulaResult:
    result = m * ((S / P) ** (1 / n) - 1)
    return result, f"{_f(m)} * (({_f(S)} / {_f(P)})^(1/{_f(n)}) - 1) = {_f(result)}"


# --- Tasas de interés ---

TASAS = "Tasas de interés"


@formula("formula_tasa_proporcional", "j", "n_dias_conocido", "n_dias_deseado", group=TASAS)
def tasa_proporcional(j: Number, n_dias_conocido: Number, n_dias_deseado: Number) -> FormulaResult:
    result = j * (n_dias_deseado / n_dias_conocido)
    return result, f"{_f(j)} * ({_f(n_dias_deseado)} / {_f(n_dias_conocido)}) = {_f(result)}"


@formula("formula_tasa_efectiva_from_nominal", "j", "m", group=TASAS, optional={"t": 1})
def tasa_efectiva_from_nominal(j: Number, m: Number, t: Number = 1) -> FormulaResult:
    result = (1 + j / m) ** (m * t) - 1
    return result, f"(1 + {_f(j)} / {_f(m)})^({_f(m)}*{_f(t)}) - 1 = {_f(result)}"


@formula("formula_tasa_equivalente", "i_conocida", "n_dias_conocido", "n_dias_deseado", group=TASAS)
def tasa_equivalente(i_conocida: Number, n_dias_conocido: Number, n_dias_deseado: Number) -> FormulaResult:
    result = (1 + i_conocida) ** (n_dias_deseado / n_dias_conocido) - 1
    return result, (
        f"(1 + {_f(i_conocida)})^({_f(n_dias_deseado)}/{_f(n_dias_conocido)}) - 1 = {_f(result)}"
    )


@formula("formula_tasa_real", "i", "pi", group=TASAS)
def tasa_real(i: Number, pi: Number) -> FormulaResult:
    result = (i - pi) / (1 + pi)
    return result, f"({_f(i)} - {_f(pi)}) / (1 + {_f(pi)}) = {_f(result)}"


# --- Descuentos ---

DESC = "Descuentos"


@formula("formula_drs_D_from_Sjn", "S", "j", "n", group=DESC)
def drs_D_from_Sjn(S: Number, j: Number, n: Number) -> FormulaResult:
    result = (S * j * n) / (1 + j * n)
    return result, f"({_f(S)} * {_f(j)} * {_f(n)}) / (1 + {_f(j)} * {_f(n)}) = {_f(result)}"


@formula("formula_dr_D_from_Sin", "S", "i", "n", group=DESC)
def dr_D_from_Sin(S: Number, i: Number, n: Number) -> FormulaResult:
    result = S * (1 - (1 + i) ** -n)
    return result, f"{_f(S)} * (1 - (1 + {_f(i)})^-{_f(n)}) = {_f(result)}"


@formula("formula_dr_P_from_Sin", "S", "i", "n", group=DESC)
def dr_P_from_Sin(S: Number, i: Number, n: Number) -> FormulaResult:
    result = S * (1 + i) ** -n
    return result, f"{_f(S)} * (1 + {_f(i)})^-{_f(n)} = {_f(result)}"


@formula("formula_dbs_DB_from_Sdn", "S", "d", "n", group=DESC)
def dbs_DB_from_Sdn(S: Number, d: Number, n: Number) -> FormulaResult:
    result = S * d * n
    return result, f"{_f(S)} * {_f(d)} * {_f(n)} = {_f(result)}"


@formula("formula_dbs_P_from_Sdn", "S", "d", "n", group=DESC)
def dbs_P_from_Sdn(S: Number, d: Number, n: Number) -> FormulaResult:
    result = S * (1 - d * n)
    return result, f"{_f(S)} * (1 - {_f(d)} * {_f(n)}) = {_f(result)}"


@formula("formula_dbs_S_from_DBdn", "DB", "d", "n", group=DESC)
def dbs_S_from_DBdn(DB: Number, d: Number, n: Number) -> FormulaResult:
    result = DB / (d * n)
    return result, f"{_f(DB)} / ({_f(d)} * {_f(n)}) = {_f(result)}"


@formula("formula_dbs_d_from_DBSn", "DB", "S", "n", group=DESC)
def dbs_d_from_DBSn(DB: Number, S: Number, n: Number) -> FormulaResult:
    result = DB / (S * n)
    return result, f"{_f(DB)} / ({_f(S)} * {_f(n)}) = {_f(result)}"


@formula("formula_dbs_n_from_DBSd", "DB", "S", "d", group=DESC)
def dbs_n_from_DBSd(DB: Number, S: Number, d: Number) -> FormulaResult:
    result = DB / (S * d)
    return result, f"{_f(DB)} / ({_f(S)} * {_f(d)}) = {_f(result)}"


@formula("formula_db_DB_from_Sden", "S", "de", "n", group=DESC)
def db_DB_from_Sden(S: Number, de: Number, n: Number) -> FormulaResult:
    result = S * (1 - (1 - de) ** n)
    return result, f"{_f(S)} * (1 - (1 - {_f(de)})^{_f(n)}) = {_f(result)}"


@formula("formula_db_P_from_Sden", "S", "de", "n", group=DESC)
def db_P_from_Sden(S: Number, de: Number, n: Number) -> FormulaResult:
    result = S * (1 - de) ** n
    return result, f"{_f(S)} * (1 - {_f(de)})^{_f(n)} = {_f(result)}"


@formula("formula_db_S_from_DBden", "DB", "de", "n", group=DESC)
def db_S_from_DBden(DB: Number, de: Number, n: Number) -> FormulaResult:
    result = DB / (1 - (1 - de) ** n)
    return result, f"{_f(DB)} / (1 - (1 - {_f(de)})^{_f(n)}) = {_f(result)}"


@formula("formula_db_de_from_DBSn", "DB", "S", "n", group=DESC)
def db_de_from_DBSn(DB: Number, S: Number, n: Number) -> FormulaResult:
    result = 1 - (1 - DB / S) ** (1 / n)
    return result, f"1 - (1 - {_f(DB)}/{_f(S)})^(1/{_f(n)}) = {_f(result)}"


@formula("formula_db_de_from_Psn", "P", "S", "n", group=DESC)
def db_de_from_Psn(P: Number, S: Number, n: Number) -> FormulaResult:
    result = 1 - (P / S) ** (1 / n)
    return result, f"1 - ({_f(P)}/{_f(S)})^(1/{_f(n)}) = {_f(result)}"


@formula("formula_db_n_from_DBSde", "DB", "S", "de", group=DESC)
def db_n_from_DBSde(DB: Number, S: Number, de: Number) -> FormulaResult:
    result = math.log(1 - DB / S) / math.log(1 - de)
    return result, f"log(1 - {_f(DB)}/{_f(S)}) / log(1 - {_f(de)}) = {_f(result)}"


# --- Anualidades vencidas ---

AV = "Anualidades vencidas"


@formula("formula_av_S_from_Rin", "R", "i", "n", group=AV)
def av_S_from_Rin(R: Number, i: Number, n: Number) -> FormulaResult:
    result = R * (((1 + i) ** n - 1) / i)
    return result, f"{_f(R)} * ((1 + {_f(i)})^{_f(n)} - 1) / {_f(i)} = {_f(result)}"


@formula("formula_av_P_from_Rin", "R", "i", "n", group=AV)
def av_P_from_Rin(R: Number, i: Number, n: Number) -> FormulaResult:
    result = R * ((1 - (1 + i) ** -n) / i)
    return result, f"{_f(R)} * (1 - (1 + {_f(i)})^-{_f(n)}) / {_f(i)} = {_f(result)}"


@formula("formula_av_R_from_Sin", "S", "i", "n", group=AV)
def av_R_from_Sin(S: Number, i: Number, n: Number) -> FormulaResult:
    result = S * (i / ((1 + i) ** n - 1))
    return result, f"{_f(S)} * ({_f(i)} / ((1 + {_f(i)})^{_f(n)} - 1)) = {_f(result)}"


@formula("formula_av_R_from_Pin", "P", "i", "n", group=AV)
def av_R_from_Pin(P: Number, i: Number, n: Number) -> FormulaResult:
    result = P * (i / (1 - (1 + i) ** -n))
    return result, f"{_f(P)} * ({_f(i)} / (1 - (1 + {_f(i)})^-{_f(n)})) = {_f(result)}"


@formula("formula_av_n_from_SRi", "S", "R", "i", group=AV)
def av_n_from_SRi(S: Number, R: Number, i: Number) -> FormulaResult:
    result = math.log((S * i / R) + 1) / math.log(1 + i)
    return result, f"log(({_f(S)} * {_f(i)} / {_f(R)}) + 1) / log(1 + {_f(i)}) = {_f(result)}"


@formula("formula_av_n_from_PRi", "P", "R", "i", group=AV)
def av_n_from_PRi(P: Number, R: Number, i: Number) -> FormulaResult:
    result = -math.log(1 - (P * i / R)) / math.log(1 + i)
    return result, f"-log(1 - ({_f(P)} * {_f(i)} / {_f(R)})) / log(1 + {_f(i)}) = {_f(result)}"


# --- Anualidades anticipadas ---

AA = "Anualidades anticipadas"


@formula("formula_aa_S_from_Rin", "R", "i", "n", group=AA)
def aa_S_from_Rin(R: Number, i: Number, n: Number) -> FormulaResult:
    result = R * (((1 + i) ** n - 1) / i) * (1 + i)
    return result, f"{_f(R)} * (((1 + {_f(i)})^{_f(n)} - 1) / {_f(i)}) * (1 + {_f(i)}) = {_f(result)}"


@formula("formula_aa_P_from_Rin", "R", "i", "n", group=AA)
def aa_P_from_Rin(R: Number, i: Number, n: Number) -> FormulaResult:
    result = R * ((1 - (1 + i) ** -n) / i) * (1 + i)
    return result, f"{_f(R)} * ((1 - (1 + {_f(i)})^-{_f(n)}) / {_f(i)}) * (1 + {_f(i)}) = {_f(result)}"


@formula("formula_aa_R_from_Sin", "S", "i", "n", group=AA)
def aa_R_from_Sin(S: Number, i: Number, n: Number) -> FormulaResult:
    result = (S / (1 + i)) * (i / ((1 + i) ** n - 1))
    return result, f"({_f(S)} / (1 + {_f(i)})) * ({_f(i)} / ((1 + {_f(i)})^{_f(n)} - 1)) = {_f(result)}"


@formula("formula_aa_R_from_Pin", "P", "i", "n", group=AA)
def aa_R_from_Pin(P: Number, i: Number, n: Number) -> FormulaResult:
    result = (P / (1 + i)) * (i / (1 - (1 + i) ** -n))
    return result, f"({_f(P)} / (1 + {_f(i)})) * ({_f(i)} / (1 - (1 + {_f(i)})^-{_f(n)})) = {_f(result)}"


@formula("formula_aa_n_from_PRi", "P", "R", "i", group=AA)
def aa_n_from_PRi(P: Number, R: Number, i: Number) -> FormulaResult:
    result = -math.log(1 - (P * i / (R * (1 + i)))) / math.log(1 + i)
    return result, (
        f"-log(1 - ({_f(P)} * {_f(i)} / ({_f(R)} * (1+{_f(i)})))) / log(1 + {_f(i)}) = {_f(result)}"
    )


@formula("formula_aa_n_from_SRi", "S", "R", "i", group=AA)
def aa_n_from_SRi(S: Number, R: Number, i: Number) -> FormulaResult:
    result = math.log((S * i / (R * (1 + i))) + 1) / math.log(1 + i)
    return result, (
        f"log(({_f(S)} * {_f(i)} / ({_f(R)}*(1+{_f(i)}))) + 1) / log(1 + {_f(i)}) = {_f(result)}"
    )


# --- Anualidades diferidas ---

AD = "Anualidades diferidas"


@formula("formula_adv_P_from_Rink", "R", "i", "n", "k", group=AD)
def adv_P_from_Rink(R: Number, i: Number, n: Number, k: Number) -> FormulaResult:
    result = R * ((1 - (1 + i) ** -n) / i) * (1 + i) ** -k
    return result, (
        f"{_f(R)} * ((1 - (1 + {_f(i)})^-{_f(n)}) / {_f(i)}) * (1 + {_f(i)})^-{_f(k)} = {_f(result)}"
    )


@formula("formula_ada_P_from_Rink", "R", "i", "n", "k", group=AD)
def ada_P_from_Rink(R: Number, i: Number, n: Number, k: Number) -> FormulaResult:
    result = R * ((1 - (1 + i) ** -n) / i) * (1 + i) * (1 + i) ** -k
    return result, (
        f"{_f(R)} * ((1 - (1 + {_f(i)})^-{_f(n)}) / {_f(i)}) * (1 + {_f(i)}) * (1 + {_f(i)})^-{_f(k)}"
        f" = {_f(result)}"
    )


@formula("formula_adv_n_from_PRik", "P", "R", "i", "k", group=AD)
def adv_n_from_PRik(P: Number, R: Number, i: Number, k: Number) -> FormulaResult:
    result = -math.log(1 - (P * (1 + i) ** k * i / R)) / math.log(1 + i)
    return result, (
        f"-log(1 - ({_f(P)} * (1+{_f(i)})^{_f(k)} * {_f(i)} / {_f(R)})) / log(1+{_f(i)}) = {_f(result)}"
    )


@formula("formula_adv_k_from_PRin", "P", "R", "i", "n", group=AD)
def adv_k_from_PRin(P: Number, R: Number, i: Number, n: Number) -> FormulaResult:
    result = math.log(R * (1 - (1 + i) ** -n) / (P * i)) / math.log(1 + i)
    return result, (
        f"log({_f(R)} * (1 - (1+{_f(i)})^-{_f(n)}) / ({_f(P)}*{_f(i)})) / log(1+{_f(i)}) = {_f(result)}"
    )


@formula("formula_ada_n_from_PRik", "P", "R", "i", "k", group=AD)
def ada_n_from_PRik(P: Number, R: Number, i: Number, k: Number) -> FormulaResult:
    result = -math.log(1 - (P * i / (R * (1 + i) ** (1 - k)))) / math.log(1 + i)
    return result, (
        f"-log(1 - ({_f(P)}*{_f(i)}/({_f(R)}*(1+{_f(i)})^(1-{_f(k)}))))/log(1+{_f(i)})={_f(result)}"
    )


@formula("formula_ada_k_from_PRin", "P", "R", "i", "n", group=AD)
def ada_k_from_PRin(P: Number, R: Number, i: Number, n: Number) -> FormulaResult:
    result = math.log(R * (1 - (1 + i) ** -n) * (1 + i) / (P * i)) / math.log(1 + i)
    return result, (
        f"log({_f(R)}*(1-(1+{_f(i)})^-{_f(n)})*(1+{_f(i)})/({_f(P)}*{_f(i)}))/log(1+{_f(i)})={_f(result)}"
    )


# --- Gradientes ---

GRAD = "Gradientes"


@formula("formula_ga_P_from_Gin", "G", "i", "n", group=GRAD)
def ga_P_from_Gin(G: Number, i: Number, n: Number) -> FormulaResult:
    result = (G / i) * (((1 - (1 + i) ** -n) / i) - (n * (1 + i) ** -n))
    return result, (
        f"({_f(G)}/{_f(i)}) * (((1-(1+{_f(i)})^-{_f(n)})/{_f(i)}) - ({_f(n)}*(1+{_f(i)})^-{_f(n)}))"
        f" = {_f(result)}"
    )


@formula("formula_ga_S_from_Gin", "G", "i", "n", group=GRAD)
def ga_S_from_Gin(G: Number, i: Number, n: Number) -> FormulaResult:
    result = (G / i) * ((((1 + i) ** n - 1) / i) - n)
    return result, f"({_f(G)}/{_f(i)}) * ((((1+{_f(i)})^{_f(n)}-1)/{_f(i)}) - {_f(n)}) = {_f(result)}"


@formula("formula_ga_R_from_Gin", "G", "i", "n", group=GRAD)
def ga_R_from_Gin(G: Number, i: Number, n: Number) -> FormulaResult:
    result = G * (1 / i - n / ((1 + i) ** n - 1))
    return result, f"{_f(G)} * (1/{_f(i)} - {_f(n)}/((1+{_f(i)})^{_f(n)}-1)) = {_f(result)}"


@formula("formula_gg_P_from_Rgin", "R", "g", "i", "n", group=GRAD)
def gg_P_from_Rgin(R: Number, g: Number, i: Number, n: Number) -> FormulaResult:
    if i == g:
        # limit of the general form as g -> i
        result = n * R / (1 + i)
        return result, f"{_f(n)}*{_f(R)}/(1+{_f(i)})={_f(result)}"
    result = R * ((1 - ((1 + g) / (1 + i)) ** n) / (i - g))
    return result, f"{_f(R)}*((1-((1+{_f(g)})/(1+{_f(i)}))^{_f(n)})/({_f(i)}-{_f(g)}))={_f(result)}"


@formula("formula_gg_S_from_Rgin", "R", "g", "i", "n", group=GRAD)
def gg_S_from_Rgin(R: Number, g: Number, i: Number, n: Number) -> FormulaResult:
    if i == g:
        result = n * R * (1 + i) ** (n - 1)
        return result, f"{_f(n)}*{_f(R)}*(1+{_f(i)})^({_f(n)}-1)={_f(result)}"
    result = R * (((1 + i) ** n - (1 + g) ** n) / (i - g))
    return result, f"{_f(R)}*(((1+{_f(i)})^{_f(n)}-(1+{_f(g)})^{_f(n)})/({_f(i)}-{_f(g)}))={_f(result)}"


# --- Préstamos ---

PREST = "Préstamos"


def _installment(P: Number, i: Number, n: Number) -> float:
    """Level installment of a loan of P over n periods at rate i."""
    return P * (i / (1 - (1 + i) ** -n))


@formula("formula_prestamo_saldo_N", "P", "i", "n", "N", group=PREST)
def prestamo_saldo_N(P: Number, i: Number, n: Number, N: Number) -> FormulaResult:
    result = P * (((1 + i) ** n - (1 + i) ** N) / ((1 + i) ** n - 1))
    return result, (
        f"{_f(P)} * (((1+{_f(i)})^{_f(n)}-(1+{_f(i)})^{_f(N)})/((1+{_f(i)})^{_f(n)}-1)) = {_f(result)}"
    )


@formula("formula_prestamo_amortizacion_N", "P", "i", "n", "N", group=PREST)
def prestamo_amortizacion_N(P: Number, i: Number, n: Number, N: Number) -> FormulaResult:
    result = _installment(P, i, n) * (1 + i) ** (N - 1 - n)
    return result, (
        f"({_f(P)}*{_f(i)}/(1-(1+{_f(i)})^-{_f(n)})) * (1+{_f(i)})^({_f(N)}-1-{_f(n)}) = {_f(result)}"
    )


@formula("formula_prestamo_interes_N", "P", "i", "n", "N", group=PREST)
def prestamo_interes_N(P: Number, i: Number, n: Number, N: Number) -> FormulaResult:
    result = _installment(P, i, n) * (1 - (1 + i) ** (N - 1 - n))
    return result, (
        f"({_f(P)}*{_f(i)}/(1-(1+{_f(i)})^-{_f(n)})) * (1-(1+{_f(i)})^({_f(N)}-1-{_f(n)})) = {_f(result)}"
    )


@formula("formula_prestamo_A1_from_Pin", "P", "i", "n", group=PREST)
def prestamo_A1_from_Pin(P: Number, i: Number, n: Number) -> FormulaResult:
    result = _installment(P, i, n) * (1 + i) ** -n
    return result, f"({_f(P)}*{_f(i)}/(1-(1+{_f(i)})^-{_f(n)}))*(1+{_f(i)})^-{_f(n)}={_f(result)}"


@formula("formula_prestamo_de_from_RinN", "R", "i", "n", "N", group=PREST)
def prestamo_de_from_RinN(R: Number, i: Number, n: Number, N: Number) -> FormulaResult:
    result = R * (1 + i) ** -n * (((1 + i) ** N - 1) / i)
    return result, f"{_f(R)}*(1+{_f(i)})^-{_f(n)}*(((1+{_f(i)})^{_f(N)}-1)/{_f(i)})={_f(result)}"


@formula("formula_prestamo_de_from_PinN", "P", "i", "n", "N", group=PREST)
def prestamo_de_from_PinN(P: Number, i: Number, n: Number, N: Number) -> FormulaResult:
    result = P * (((1 + i) ** N - 1) / ((1 + i) ** n - 1))
    return result, f"{_f(P)}*(((1+{_f(i)})^{_f(N)}-1)/((1+{_f(i)})^{_f(n)}-1))={_f(result)}"


@formula("formula_prestamo_de_from_A1iN", "A1", "i", "N", group=PREST)
def prestamo_de_from_A1iN(A1: Number, i: Number, N: Number) -> FormulaResult:
    result = A1 * (((1 + i) ** N - 1) / i)
    return result, f"{_f(A1)}*(((1+{_f(i)})^{_f(N)}-1)/{_f(i)})={_f(result)}"


# --- Fórmula experimental ---


@formula("formula_experimental", group="Fórmula experimental", takes_expression=True)
def experimental(expression: Optional[str], variables: Dict[str, float]) -> FormulaResult:
    result = evaluate_expression(expression, variables)
    return result, f"{substitute_names(expression, variables)} = {_f(result)}"
