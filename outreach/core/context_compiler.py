# outreach/core/context_compiler.py
"""
Scenario context compiler.

Turns the selected scenario and the collected form fields into the
context description handed to message generation. Pure and total: any
field values, including all-empty ones, compile without error.
"""

from typing import Dict, Optional
import logging

from outreach.core.exceptions import ConfigurationError
from outreach.core.prompt_manager import PromptManager, PromptType, get_prompt_manager
from outreach.core.scenario_registry import get_scenario
from outreach.models.flow_models import ScenarioType
from outreach.models.wizard_state import SCENARIO_FIELDS, ScenarioFieldSet

logger = logging.getLogger(__name__)

DETAIL_PROMPTS: Dict[ScenarioType, PromptType] = {
    ScenarioType.SURGERY_SCHEDULING: PromptType.SURGERY_SCHEDULING,
    ScenarioType.POST_OP_CHECK: PromptType.POST_OP_CHECK,
    ScenarioType.EXAM_RESULT: PromptType.EXAM_RESULT,
    ScenarioType.CONSERVATIVE_TREATMENT: PromptType.CONSERVATIVE_TREATMENT,
}

_uncovered = set(ScenarioType) - set(DETAIL_PROMPTS)
if _uncovered:
    raise ConfigurationError(
        f"Scenarios without a context template: {sorted(s.value for s in _uncovered)}",
        component="context_compiler"
    )


def compile_context(
    scenario: ScenarioType,
    fields: ScenarioFieldSet,
    prompt_manager: Optional[PromptManager] = None
) -> str:
    """
    Build the context description for ``scenario``.

    Args:
        scenario: Selected scenario
        fields: Form values; only the scenario's own fields are read
        prompt_manager: Template source (shared manager if omitted)

    Returns:
        Label line followed by the scenario's details line
    """
    pm = prompt_manager or get_prompt_manager()
    scenario = ScenarioType(scenario)

    header = pm.get_prompt(PromptType.SCENARIO_HEADER, label=get_scenario(scenario).label)
    values = {key: fields.get_field(key) for key in SCENARIO_FIELDS[scenario]}
    details = pm.get_prompt(DETAIL_PROMPTS[scenario], **values)

    logger.debug(f"Compiled context for {scenario.value} ({len(header) + len(details)} chars)")
    return header + details
