# outreach/services/message_service.py
"""
Message generation boundary.

Turns a compiled scenario context plus tone into the finished patient
message. Every failure on the way surfaces as GenerationError.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Optional
import logging

from pydantic import BaseModel, Field

from outreach.core.config import Settings, settings as default_settings
from outreach.core.exceptions import GenerationError, OutreachError
from outreach.core.prompt_manager import PromptManager, PromptType, get_prompt_manager
from outreach.models.flow_models import Tone
from outreach.services.gpt_service import GPTConfig, GPTService

logger = logging.getLogger(__name__)

TONE_PROMPTS: Dict[Tone, PromptType] = {
    Tone.PROFESSIONAL: PromptType.TONE_PROFESSIONAL,
    Tone.EMPATHETIC: PromptType.TONE_EMPATHETIC,
    Tone.MOTIVATIONAL: PromptType.TONE_MOTIVATIONAL,
}


class GenerationRequest(BaseModel):
    """Appointment-like payload for one generation call"""
    patient_name: str
    phone: str = ""
    tone: Tone = Tone.EMPATHETIC
    context_note: str
    date: str = Field(default_factory=lambda: date.today().isoformat())


class MessageGenerator(ABC):
    """Anything that can turn a GenerationRequest into message text"""

    @abstractmethod
    async def generate_message(self, request: GenerationRequest) -> str:
        """
        Raises:
            GenerationError: On any network or service failure
        """


class MessageGenerationService(MessageGenerator):
    """Generates patient messages through the GPT service."""

    def __init__(
        self,
        gpt_service: Optional[GPTService] = None,
        prompt_manager: Optional[PromptManager] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or default_settings
        self.gpt_service = gpt_service or GPTService(GPTConfig.from_settings(self.settings))
        self.prompt_manager = prompt_manager or get_prompt_manager()

    def build_prompts(self, request: GenerationRequest) -> Dict[str, str]:
        """Render the system and user prompts for ``request``."""
        system_prompt = self.prompt_manager.get_prompt(
            PromptType.MESSAGE_SYSTEM,
            practitioner_name=self.settings.PRACTITIONER_NAME
        )
        user_prompt = self.prompt_manager.get_prompt(
            PromptType.MESSAGE_REQUEST,
            patient_name=request.patient_name,
            date=request.date,
            tone_instruction=self.prompt_manager.get_prompt(TONE_PROMPTS[request.tone]),
            context_note=request.context_note
        )
        return {"system": system_prompt, "user": user_prompt}

    async def generate_message(self, request: GenerationRequest) -> str:
        prompts = self.build_prompts(request)

        try:
            message = await self.gpt_service.complete(
                prompts["user"],
                system_prompt=prompts["system"]
            )
        except OutreachError as e:
            logger.error(f"Message generation failed: {e}")
            raise GenerationError(
                "Failed to generate message",
                details={"cause": e.message, "error_type": type(e).__name__}
            ) from e
        except Exception as e:
            logger.error(f"Unexpected error during message generation: {e}", exc_info=True)
            raise GenerationError(
                "Failed to generate message",
                details={"cause": str(e), "error_type": type(e).__name__}
            ) from e

        logger.info(f"Generated message with tone {request.tone.value} ({len(message)} chars)")
        return message

    async def health_check(self):
        return await self.gpt_service.health_check()

    async def shutdown(self) -> None:
        await self.gpt_service.shutdown()
