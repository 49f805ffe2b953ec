# tests/core/test_context_compiler.py
"""
Tests for the scenario context compiler.
"""

import pytest

from outreach.core.context_compiler import DETAIL_PROMPTS, compile_context
from outreach.models.flow_models import ScenarioType
from outreach.models.wizard_state import ScenarioFieldSet


def _fields(**values) -> ScenarioFieldSet:
    fields = ScenarioFieldSet()
    for key, value in values.items():
        fields.set_field(key, value)
    return fields


@pytest.mark.unit
class TestCompileContext:

    def test_post_op_context(self, prompt_manager):
        context = compile_context(ScenarioType.POST_OP_CHECK, _fields(daysPostOp="3"), prompt_manager)

        assert context == (
            "CENÁRIO: Pós-Operatório.\n"
            "DETALHES: Paciente com 3 dias de operado. "
            "Perguntar sobre nível de dor (0-10) e se o curativo está limpo/seco."
        )

    def test_surgery_context(self, prompt_manager):
        fields = _fields(date="10/12", time="07:00", location="Hospital Sírio-Libanês")
        context = compile_context(ScenarioType.SURGERY_SCHEDULING, fields, prompt_manager)

        assert context.startswith("CENÁRIO: Agendar Cirurgia.\n")
        assert "Cirurgia agendada para 10/12 às 07:00 no Hospital Sírio-Libanês." in context
        assert "jejum de 8h" in context

    def test_exam_context(self, prompt_manager):
        fields = _fields(examType="RM", diagnosis="lesão de menisco")
        context = compile_context(ScenarioType.EXAM_RESULT, fields, prompt_manager)

        assert "Resultado de RM. Diagnóstico resumido: lesão de menisco." in context

    def test_conservative_context(self, prompt_manager):
        context = compile_context(
            ScenarioType.CONSERVATIVE_TREATMENT, _fields(physioStatus="iniciando"), prompt_manager
        )
        assert "Status atual: iniciando." in context

    @pytest.mark.parametrize("scenario", list(ScenarioType))
    def test_empty_fields_compile(self, scenario, prompt_manager):
        context = compile_context(scenario, ScenarioFieldSet(), prompt_manager)

        assert context.startswith("CENÁRIO: ")
        assert "\nDETALHES: " in context

    def test_empty_value_substituted_as_empty_text(self, prompt_manager):
        context = compile_context(ScenarioType.POST_OP_CHECK, ScenarioFieldSet(), prompt_manager)
        assert "Paciente com  dias de operado." in context

    def test_other_scenarios_fields_are_ignored(self, prompt_manager):
        fields = _fields(daysPostOp="3", examType="RM", diagnosis="fratura")
        context = compile_context(ScenarioType.POST_OP_CHECK, fields, prompt_manager)

        assert "RM" not in context
        assert "fratura" not in context

    def test_accepts_wire_value(self, prompt_manager):
        context = compile_context("exam_result", ScenarioFieldSet(), prompt_manager)
        assert context.startswith("CENÁRIO: Explicar Exame.\n")

    def test_uses_shared_manager_by_default(self):
        context = compile_context(ScenarioType.POST_OP_CHECK, _fields(daysPostOp="7"))
        assert "7 dias de operado" in context

    def test_every_scenario_has_a_template(self):
        assert set(DETAIL_PROMPTS) == set(ScenarioType)
