import math

import pytest

from finplan.errors import InvalidExpression, InvalidResult, UnknownFormula
from finplan.formulas import FORMULAS, evaluate, get_formula, to_number


def test_simple_interest_trace() -> None:
    result, trace = evaluate("formula_is_I_from_Pjn", {"P": 1000, "j": 0.05, "n": 2})
    assert result == pytest.approx(100)
    assert trace == "1000 * 0.05 * 2 = 100"


def test_basic_arithmetic():
    assert evaluate("formula_util_suma", {"valor1": 2, "valor2": 3})[0] == 5
    assert evaluate("formula_util_resta", {"valor1": 5, "valor2": 3})[0] == 2
    assert evaluate("formula_util_multiplicacion", {"valor1": 2, "valor2": 4})[0] == 8
    assert evaluate("formula_util_division", {"valor1": 10, "valor2": 2})[0] == 5.0
    with pytest.raises(InvalidResult):
        evaluate("formula_util_division", {"valor1": 1, "valor2": 0})


def test_unknown_formula_never_falls_through():
    with pytest.raises(UnknownFormula) as exc:
        evaluate("formula_does_not_exist", {"valor1": 1, "valor2": 2})
    assert exc.value.formula_name == "formula_does_not_exist"


def test_missing_parameter_surfaces_as_invalid_result():
    with pytest.raises(InvalidResult) as exc:
        evaluate("formula_is_I_from_Pjn", {"P": 1000, "j": 0.05})
    assert exc.value.formula_name == "formula_is_I_from_Pjn"


def test_numeric_strings_are_accepted():
    result, _ = evaluate("formula_is_S_from_Pjn", {"P": "1000", "j": "0.1", "n": 2})
    assert result == pytest.approx(1200)
    assert math.isnan(to_number("mil"))
    assert math.isnan(to_number(True))


def test_logarithm_of_negative_is_invalid():
    with pytest.raises(InvalidResult):
        evaluate("formula_ic_n_from_SPi", {"S": -100, "P": 100, "i": 0.1})


def test_fractional_power_of_negative_is_invalid():
    # Python returns a complex number here; it must not leak out as a result
    with pytest.raises(InvalidResult):
        evaluate("formula_ic_i_from_SPn", {"S": -100, "P": 100, "n": 2})


def test_compound_interest_round_trip_values():
    S, _ = evaluate("formula_ic_S_from_Pin", {"P": 1000, "i": 0.1, "n": 2})
    assert S == pytest.approx(1210)
    P, _ = evaluate("formula_ic_P_from_Sin", {"S": S, "i": 0.1, "n": 2})
    assert P == pytest.approx(1000)
    n, _ = evaluate("formula_ic_n_from_SPi", {"S": S, "P": 1000, "i": 0.1})
    assert n == pytest.approx(2)
    i, _ = evaluate("formula_ic_i_from_SPn", {"S": S, "P": 1000, "n": 2})
    assert i == pytest.approx(0.1)


def test_equivalent_rate():
    result, trace = evaluate(
        "formula_tasa_equivalente",
        {"i_conocida": 0.0168, "n_dias_conocido": 72.8, "n_dias_deseado": 187},
    )
    assert result == pytest.approx(1.0168 ** (187 / 72.8) - 1)
    assert 0.04 < result < 0.05
    assert trace.startswith("(1 + 0.0168)^(187/72.8) - 1 = ")


def test_effective_rate_defaults_to_one_year():
    result, trace = evaluate("formula_tasa_efectiva_from_nominal", {"j": 0.12, "m": 12})
    assert result == pytest.approx(1.01 ** 12 - 1)
    assert "^(12*1)" in trace
    two_years, _ = evaluate("formula_tasa_efectiva_from_nominal", {"j": 0.12, "m": 12, "t": 2})
    assert two_years == pytest.approx(1.01 ** 24 - 1)


def test_real_rate():
    result, _ = evaluate("formula_tasa_real", {"i": 0.1, "pi": 0.04})
    assert result == pytest.approx(0.06 / 1.04)


def test_days_between_dates_ignores_order():
    forward, trace = evaluate(
        "formula_util_dias_entre_fechas", {"fecha_inicial": "2024-01-15", "fecha_final": "2024-03-15"}
    )
    backward, _ = evaluate(
        "formula_util_dias_entre_fechas", {"fecha_inicial": "2024-03-15", "fecha_final": "2024-01-15"}
    )
    assert forward == backward == 60
    assert trace == "DiasEntre(2024-03-15, 2024-01-15) = 60"


def test_invalid_date_is_invalid_result():
    with pytest.raises(InvalidResult):
        evaluate("formula_util_dias_entre_fechas", {"fecha_inicial": "15/01/2024", "fecha_final": "2024-03-15"})
    with pytest.raises(InvalidResult):
        evaluate("formula_util_dias_entre_fechas", {"fecha_final": "2024-03-15"})


def test_day_count_fraction():
    result, trace = evaluate("formula_util_fraccion_anio", {"n_dias": 90})
    assert result == pytest.approx(0.25)
    assert trace == "90 / 360 = 0.25"


def test_ordinary_annuity_matches_discounted_sum():
    R, i, n = 250, 0.02, 12
    expected = sum(R / (1 + i) ** t for t in range(1, n + 1))
    result, _ = evaluate("formula_av_P_from_Rin", {"R": R, "i": i, "n": n})
    assert result == pytest.approx(expected)
    due, _ = evaluate("formula_aa_P_from_Rin", {"R": R, "i": i, "n": n})
    assert due == pytest.approx(expected * (1 + i))


def test_annuity_payment_inverts_present_value():
    P, _ = evaluate("formula_av_P_from_Rin", {"R": 500, "i": 0.01, "n": 24})
    R, _ = evaluate("formula_av_R_from_Pin", {"P": P, "i": 0.01, "n": 24})
    assert R == pytest.approx(500)
    n, _ = evaluate("formula_av_n_from_PRi", {"P": P, "R": 500, "i": 0.01})
    assert n == pytest.approx(24)


def test_deferred_annuity_discounts_k_periods():
    base, _ = evaluate("formula_av_P_from_Rin", {"R": 100, "i": 0.05, "n": 6})
    deferred, _ = evaluate("formula_adv_P_from_Rink", {"R": 100, "i": 0.05, "n": 6, "k": 3})
    assert deferred == pytest.approx(base * 1.05 ** -3)
    k, _ = evaluate("formula_adv_k_from_PRin", {"P": deferred, "R": 100, "i": 0.05, "n": 6})
    assert k == pytest.approx(3)


def test_growing_annuity_equal_rates_uses_limit():
    result, trace = evaluate("formula_gg_P_from_Rgin", {"R": 100, "g": 0.05, "i": 0.05, "n": 10})
    assert result == pytest.approx(10 * 100 / 1.05)
    assert trace.startswith("10*100/(1+0.05)=")
    future, _ = evaluate("formula_gg_S_from_Rgin", {"R": 100, "g": 0.1, "i": 0.1, "n": 3})
    assert future == pytest.approx(3 * 100 * 1.1 ** 2)


def test_growing_annuity_general_case_matches_sum():
    R, g, i, n = 100, 0.02, 0.05, 10
    expected = sum(R * (1 + g) ** (t - 1) / (1 + i) ** t for t in range(1, n + 1))
    result, _ = evaluate("formula_gg_P_from_Rgin", {"R": R, "g": g, "i": i, "n": n})
    assert result == pytest.approx(expected)


def test_arithmetic_gradient_present_value_matches_sum():
    G, i, n = 50, 0.04, 8
    expected = sum(G * (t - 1) / (1 + i) ** t for t in range(1, n + 1))
    result, _ = evaluate("formula_ga_P_from_Gin", {"G": G, "i": i, "n": n})
    assert result == pytest.approx(expected)


def test_loan_principal_and_interest_add_up_to_installment():
    P, i, n = 10000, 0.015, 12
    installment, _ = evaluate("formula_av_R_from_Pin", {"P": P, "i": i, "n": n})
    for N in (1, 6, 12):
        principal, _ = evaluate("formula_prestamo_amortizacion_N", {"P": P, "i": i, "n": n, "N": N})
        interest, _ = evaluate("formula_prestamo_interes_N", {"P": P, "i": i, "n": n, "N": N})
        assert principal + interest == pytest.approx(installment)
    balance, _ = evaluate("formula_prestamo_saldo_N", {"P": P, "i": i, "n": n, "N": n})
    assert balance == pytest.approx(0)


def test_discount_formulas():
    DB, _ = evaluate("formula_dbs_DB_from_Sdn", {"S": 2000, "d": 0.1, "n": 0.5})
    assert DB == pytest.approx(100)
    P, _ = evaluate("formula_dbs_P_from_Sdn", {"S": 2000, "d": 0.1, "n": 0.5})
    assert P == pytest.approx(1900)
    de, _ = evaluate("formula_db_de_from_Psn", {"P": 810, "S": 1000, "n": 2})
    assert de == pytest.approx(0.1)


def test_experimental_formula():
    result, trace = evaluate(
        "formula_experimental", {"P": 1000, "i": 0.1, "n": 2}, expression="P * (1 + i)^n"
    )
    assert result == pytest.approx(1210)
    assert trace.startswith("1000 * (1 + 0.1)^2 = ")


def test_experimental_formula_requires_expression():
    with pytest.raises(InvalidExpression):
        evaluate("formula_experimental", {"P": 1000})


def test_registry_shape():
    assert "formula_is_I_from_Pjn" in FORMULAS
    assert get_formula("formula_tasa_efectiva_from_nominal").parameter_names == ["j", "m", "t"]
    assert len(FORMULAS) == 74


def test_huge_integer_inputs_are_invalid_results():
    with pytest.raises(InvalidResult) as exc:
        evaluate("formula_util_multiplicacion", {"valor1": 10**200, "valor2": 10**200})
    assert exc.value.formula_name == "formula_util_multiplicacion"
    with pytest.raises(InvalidResult):
        evaluate("formula_ic_S_from_Pin", {"P": 1, "i": 1, "n": 3000000})
    with pytest.raises(InvalidResult):
        evaluate("formula_util_suma", {"valor1": 10**400, "valor2": 1})


def test_zero_optional_parameter_uses_default():
    result, trace = evaluate("formula_tasa_efectiva_from_nominal", {"j": 0.12, "m": 12, "t": 0})
    assert result == pytest.approx(1.01 ** 12 - 1)
    assert "^(12*1)" in trace
