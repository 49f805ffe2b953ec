# tests/core/test_scenario_registry.py

import pytest

from outreach.core.exceptions import ValidationError
from outreach.core.scenario_registry import get_scenario, list_scenarios, parse_scenario
from outreach.models.flow_models import ScenarioType


@pytest.mark.unit
class TestScenarioRegistry:

    def test_catalog_order_and_labels(self):
        scenarios = list_scenarios()
        assert [s.id for s in scenarios] == [
            ScenarioType.SURGERY_SCHEDULING,
            ScenarioType.POST_OP_CHECK,
            ScenarioType.EXAM_RESULT,
            ScenarioType.CONSERVATIVE_TREATMENT,
        ]
        assert [s.label for s in scenarios] == [
            "Agendar Cirurgia", "Pós-Operatório", "Explicar Exame", "Tratamento"
        ]

    def test_descriptions(self):
        assert get_scenario(ScenarioType.SURGERY_SCHEDULING).description == "Confirmar data e jejum."
        assert get_scenario("conservative").description == "Fisioterapia e remédios."

    def test_catalog_covers_every_scenario(self):
        assert {s.id for s in list_scenarios()} == set(ScenarioType)

    def test_parse_accepts_enum_and_wire_value(self):
        assert parse_scenario(ScenarioType.EXAM_RESULT) is ScenarioType.EXAM_RESULT
        assert parse_scenario("post_op_check") is ScenarioType.POST_OP_CHECK

    def test_parse_rejects_unknown_value(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_scenario("dental_cleaning")
        assert exc_info.value.field == "scenario"
