# outreach/models/flow_models.py

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class WizardStep(int, Enum):
    IDENTIFICATION = 1
    SCENARIO_SELECTION = 2
    SCENARIO_DETAILS = 3
    RESULT = 4


class ScenarioType(str, Enum):
    SURGERY_SCHEDULING = "surgery_sched"
    POST_OP_CHECK = "post_op_check"
    EXAM_RESULT = "exam_result"
    CONSERVATIVE_TREATMENT = "conservative"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    EMPATHETIC = "empathetic"
    MOTIVATIONAL = "motivational"


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class ScenarioInfo(BaseModel):
    """Catalog entry shown on the scenario selection step"""
    model_config = {"frozen": True}

    id: ScenarioType
    label: str
    description: str


class Notice(BaseModel):
    level: NoticeLevel
    text: str
    created_at: datetime = Field(default_factory=datetime.now)
