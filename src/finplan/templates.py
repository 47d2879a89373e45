"""Display templates shown next to each executed step in the rendered solution."""

FORMULA_TEMPLATES = {
    # Utilidad general
    "formula_util_dias_entre_fechas": "n = |fecha_final − fecha_inicial| (días)",
    "formula_util_fraccion_anio": "t = n_días / 360",
    "formula_util_suma": "valor1 + valor2",
    "formula_util_resta": "valor1 − valor2",
    "formula_util_multiplicacion": "valor1 × valor2",
    "formula_util_division": "valor1 ÷ valor2",
    # Interés simple
    "formula_is_I_from_Pjn": "I = P · j · n",
    "formula_is_S_from_Pjn": "S = P · (1 + j · n)",
    "formula_is_P_from_Sjn": "P = S / (1 + j · n)",
    "formula_is_P_from_Ijn": "P = I / (j · n)",
    "formula_is_n_from_SPI": "n = (S / P − 1) / j",
    "formula_is_n_from_IPj": "n = I / (P · j)",
    "formula_is_j_from_SPn": "j = (S / P − 1) / n",
    "formula_is_j_from_IPn": "j = I / (P · n)",
    # Interés compuesto
    "formula_ic_S_from_Pin": "S = P · (1 + i)^n",
    "formula_ic_P_from_Sin": "P = S · (1 + i)^−n",
    "formula_ic_I_from_Pin": "I = P · [(1 + i)^n − 1]",
    "formula_ic_P_from_Iin": "P = I / [(1 + i)^n − 1]",
    "formula_ic_n_from_SPi": "n = log(S / P) / log(1 + i)",
    "formula_ic_i_from_SPn": "i = (S / P)^(1/n) − 1",
    "formula_ic_S_from_Pjm": "S = P · (1 + j/m)^n",
    "formula_ic_P_from_Sjm": "P = S · (1 + j/m)^−n",
    "formula_ic_n_from_IPi": "n = log(I / P + 1) / log(1 + i)",
    "formula_ic_i_from_IPn": "i = (I / P + 1)^(1/n) − 1",
    "formula_ic_j_from_SPnm": "j = m · [(S / P)^(1/n) − 1]",
    # Tasas de interés
    "formula_tasa_proporcional": "i' = j · (n_deseado / n_conocido)",
    "formula_tasa_efectiva_from_nominal": "TEA = (1 + j/m)^(m·t) − 1",
    "formula_tasa_equivalente": "i' = (1 + i)^(n_deseado / n_conocido) − 1",
    "formula_tasa_real": "r = (i − π) / (1 + π)",
    # Descuentos
    "formula_drs_D_from_Sjn": "D = S · j · n / (1 + j · n)",
    "formula_dr_D_from_Sin": "D = S · [1 − (1 + i)^−n]",
    "formula_dr_P_from_Sin": "P = S · (1 + i)^−n",
    "formula_dbs_DB_from_Sdn": "DB = S · d · n",
    "formula_dbs_P_from_Sdn": "P = S · (1 − d · n)",
    "formula_dbs_S_from_DBdn": "S = DB / (d · n)",
    "formula_dbs_d_from_DBSn": "d = DB / (S · n)",
    "formula_dbs_n_from_DBSd": "n = DB / (S · d)",
    "formula_db_DB_from_Sden": "DB = S · [1 − (1 − d)^n]",
    "formula_db_P_from_Sden": "P = S · (1 − d)^n",
    "formula_db_S_from_DBden": "S = DB / [1 − (1 − d)^n]",
    "formula_db_de_from_DBSn": "d = 1 − (1 − DB/S)^(1/n)",
    "formula_db_de_from_Psn": "d = 1 − (P/S)^(1/n)",
    "formula_db_n_from_DBSde": "n = log(1 − DB/S) / log(1 − d)",
    # Anualidades vencidas
    "formula_av_S_from_Rin": "S = R · [(1 + i)^n − 1] / i",
    "formula_av_P_from_Rin": "P = R · [1 − (1 + i)^−n] / i",
    "formula_av_R_from_Sin": "R = S · i / [(1 + i)^n − 1]",
    "formula_av_R_from_Pin": "R = P · i / [1 − (1 + i)^−n]",
    "formula_av_n_from_SRi": "n = log(S·i/R + 1) / log(1 + i)",
    "formula_av_n_from_PRi": "n = −log(1 − P·i/R) / log(1 + i)",
    # Anualidades anticipadas
    "formula_aa_S_from_Rin": "S = R · [(1 + i)^n − 1] / i · (1 + i)",
    "formula_aa_P_from_Rin": "P = R · [1 − (1 + i)^−n] / i · (1 + i)",
    "formula_aa_R_from_Sin": "R = S / (1 + i) · i / [(1 + i)^n − 1]",
    "formula_aa_R_from_Pin": "R = P / (1 + i) · i / [1 − (1 + i)^−n]",
    "formula_aa_n_from_PRi": "n = −log(1 − P·i / (R·(1 + i))) / log(1 + i)",
    "formula_aa_n_from_SRi": "n = log(S·i / (R·(1 + i)) + 1) / log(1 + i)",
    # Anualidades diferidas
    "formula_adv_P_from_Rink": "P = R · [1 − (1 + i)^−n] / i · (1 + i)^−k",
    "formula_ada_P_from_Rink": "P = R · [1 − (1 + i)^−n] / i · (1 + i)^(1−k)",
    "formula_adv_n_from_PRik": "n = −log(1 − P·(1 + i)^k·i / R) / log(1 + i)",
    "formula_adv_k_from_PRin": "k = log(R·[1 − (1 + i)^−n] / (P·i)) / log(1 + i)",
    "formula_ada_n_from_PRik": "n = −log(1 − P·i / (R·(1 + i)^(1−k))) / log(1 + i)",
    "formula_ada_k_from_PRin": "k = log(R·[1 − (1 + i)^−n]·(1 + i) / (P·i)) / log(1 + i)",
    # Gradientes
    "formula_ga_P_from_Gin": "P = G/i · {[1 − (1 + i)^−n] / i − n·(1 + i)^−n}",
    "formula_ga_S_from_Gin": "S = G/i · {[(1 + i)^n − 1] / i − n}",
    "formula_ga_R_from_Gin": "R = G · [1/i − n / ((1 + i)^n − 1)]",
    "formula_gg_P_from_Rgin": "P = R · [1 − ((1 + g)/(1 + i))^n] / (i − g)",
    "formula_gg_S_from_Rgin": "S = R · [(1 + i)^n − (1 + g)^n] / (i − g)",
    # Préstamos
    "formula_prestamo_saldo_N": "Saldo_N = P · [(1 + i)^n − (1 + i)^N] / [(1 + i)^n − 1]",
    "formula_prestamo_amortizacion_N": "A_N = R · (1 + i)^(N−1−n)",
    "formula_prestamo_interes_N": "I_N = R · [1 − (1 + i)^(N−1−n)]",
    "formula_prestamo_A1_from_Pin": "A_1 = R · (1 + i)^−n",
    "formula_prestamo_de_from_RinN": "DE_N = R · (1 + i)^−n · [(1 + i)^N − 1] / i",
    "formula_prestamo_de_from_PinN": "DE_N = P · [(1 + i)^N − 1] / [(1 + i)^n − 1]",
    "formula_prestamo_de_from_A1iN": "DE_N = A_1 · [(1 + i)^N − 1] / i",
    # Fórmula experimental
    "formula_experimental": "Fórmula generada",
}

MISSING_TEMPLATE = "Fórmula no encontrada"


def template_for(formula_name: str) -> str:
    return FORMULA_TEMPLATES.get(formula_name, MISSING_TEMPLATE)
