# outreach/core/scenario_registry.py
"""
Static catalog of supported contact scenarios.

Order is significant: it is the order the selection step displays.
"""

from typing import Tuple, Union

from outreach.core.exceptions import ValidationError
from outreach.models.flow_models import ScenarioInfo, ScenarioType

SCENARIOS: Tuple[ScenarioInfo, ...] = (
    ScenarioInfo(
        id=ScenarioType.SURGERY_SCHEDULING,
        label="Agendar Cirurgia",
        description="Confirmar data e jejum.",
    ),
    ScenarioInfo(
        id=ScenarioType.POST_OP_CHECK,
        label="Pós-Operatório",
        description="Acompanhar dor e curativo.",
    ),
    ScenarioInfo(
        id=ScenarioType.EXAM_RESULT,
        label="Explicar Exame",
        description="Resultado de RM ou RX.",
    ),
    ScenarioInfo(
        id=ScenarioType.CONSERVATIVE_TREATMENT,
        label="Tratamento",
        description="Fisioterapia e remédios.",
    ),
)


def list_scenarios() -> Tuple[ScenarioInfo, ...]:
    return SCENARIOS


def parse_scenario(scenario: Union[ScenarioType, str]) -> ScenarioType:
    """Accept an enum member or its wire value."""
    try:
        return ScenarioType(scenario)
    except ValueError:
        raise ValidationError(f"Unknown scenario: {scenario}", field="scenario", value=scenario)


def get_scenario(scenario: Union[ScenarioType, str]) -> ScenarioInfo:
    scenario = parse_scenario(scenario)
    for info in SCENARIOS:
        if info.id == scenario:
            return info
    raise ValidationError(f"Scenario not registered: {scenario.value}", field="scenario", value=scenario.value)
