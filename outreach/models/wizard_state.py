# outreach/models/wizard_state.py

import re
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from outreach.core.exceptions import ValidationError
from outreach.models.flow_models import ScenarioType, Tone, WizardStep

_NON_DIGITS = re.compile(r"\D")


class ContactProfile(BaseModel):
    """Operator-entered patient identification."""
    name: str = ""
    phone: str = ""

    def set_name(self, name: str) -> None:
        self.name = name

    def set_phone(self, phone: str) -> None:
        self.phone = phone

    def can_advance(self) -> bool:
        # Presence only: whitespace-only names pass
        return self.name != ""

    def phone_digits(self) -> str:
        return _NON_DIGITS.sub("", self.phone)


# Fields each scenario template reads, in template order (wire names)
SCENARIO_FIELDS: Dict[ScenarioType, Tuple[str, ...]] = {
    ScenarioType.SURGERY_SCHEDULING: ("date", "time", "location"),
    ScenarioType.POST_OP_CHECK: ("daysPostOp",),
    ScenarioType.EXAM_RESULT: ("examType", "diagnosis"),
    ScenarioType.CONSERVATIVE_TREATMENT: ("physioStatus",),
}


class ScenarioFieldSet(BaseModel):
    """
    Union of every scenario-specific form field.

    Values are free text and default to "". Switching scenario does not
    clear anything; only a full wizard reset does.
    """
    model_config = {"populate_by_name": True}

    date: str = ""
    time: str = ""
    location: str = ""
    exam_type: str = Field(default="", alias="examType")
    diagnosis: str = ""
    days_post_op: str = Field(default="", alias="daysPostOp")
    pain_level: str = Field(default="", alias="painLevel")
    physio_status: str = Field(default="", alias="physioStatus")

    @classmethod
    def resolve_key(cls, key: str) -> str:
        """Map a wire key (camelCase) or attribute name to the attribute name."""
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        raise ValidationError(f"Unknown scenario field: {key}", field=key)

    def set_field(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise ValidationError("Scenario field values must be text", field=key, value=value)
        setattr(self, self.resolve_key(key), value)

    def get_field(self, key: str) -> str:
        return getattr(self, self.resolve_key(key))

    def relevant_fields(self, scenario: ScenarioType) -> Tuple[str, ...]:
        return SCENARIO_FIELDS[ScenarioType(scenario)]

    def missing_fields(self, scenario: ScenarioType) -> List[str]:
        """Relevant fields that are still empty. Informational only."""
        return [key for key in self.relevant_fields(scenario) if not self.get_field(key)]

    def is_ready(self, scenario: ScenarioType) -> bool:
        """
        Whether the detail form allows generation for ``scenario``.

        Always True: field completeness is never enforced, so an operator
        may generate a message from an entirely empty form. The only gate
        on leaving the detail step is an in-flight generation.
        """
        return True

    def values(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class WizardState(BaseModel):
    """
    Complete state of one wizard pass.

    Owned by a single WizardController; nothing here is shared between
    sessions.
    """
    step: WizardStep = WizardStep.IDENTIFICATION
    contact: ContactProfile = Field(default_factory=ContactProfile)
    scenario: Optional[ScenarioType] = None
    fields: ScenarioFieldSet = Field(default_factory=ScenarioFieldSet)
    tone: Tone = Tone.EMPATHETIC
    message: Optional[str] = None
    is_generating: bool = False

    def reset(self) -> None:
        """Restore every attribute to its default, step 1 included."""
        for name, info in type(self).model_fields.items():
            setattr(self, name, info.get_default(call_default_factory=True))
