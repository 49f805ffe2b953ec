# outreach/prompts/scenario_prompts.py
"""
Scenario context templates.

Each scenario compiles to a label line followed by one details line.
Placeholders use the wire names of the scenario form fields; empty
values are substituted as empty text.
"""

# ============================================================================
# LABEL LINE
# ============================================================================

SCENARIO_HEADER_TEMPLATE = "CENÁRIO: {label}.\n"

# ============================================================================
# DETAIL LINES
# ============================================================================

SURGERY_SCHEDULING_TEMPLATE = (
    "DETALHES: Cirurgia agendada para {date} às {time} no {location}. "
    "Reforçar jejum de 8h e levar exames."
)

POST_OP_CHECK_TEMPLATE = (
    "DETALHES: Paciente com {daysPostOp} dias de operado. "
    "Perguntar sobre nível de dor (0-10) e se o curativo está limpo/seco."
)

EXAM_RESULT_TEMPLATE = (
    "DETALHES: Resultado de {examType}. Diagnóstico resumido: {diagnosis}. "
    "Explicar de forma calma e propor conduta."
)

CONSERVATIVE_TREATMENT_TEMPLATE = (
    "DETALHES: Orientar início de Fisioterapia. Status atual: {physioStatus}. "
    "Motivar a constância no tratamento."
)
