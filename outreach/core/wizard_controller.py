# outreach/core/wizard_controller.py
"""
Wizard Controller - single entry point for operating the wizard.

The controller owns one WizardState and is the only code that mutates
it. Step changes go through the WizardEngine; message generation, card
sharing, clipboard and deep-link delivery go through the boundary
services, whose failures are turned into operator notices here.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from outreach.core.config import Settings, settings as default_settings
from outreach.core.context_compiler import compile_context
from outreach.core.exceptions import (
    CaptureError,
    GenerationError,
    ValidationError,
    WizardFlowError
)
from outreach.core.prompt_manager import PromptManager, PromptType, get_prompt_manager
from outreach.core.scenario_registry import get_scenario, parse_scenario
from outreach.core.wizard_engine import WizardEngine, WizardEvent
from outreach.models.flow_models import Notice, NoticeLevel, ScenarioType, Tone, WizardStep
from outreach.models.wizard_state import ScenarioFieldSet, WizardState
from outreach.prompts.common_prompts import TONE_LABELS
from outreach.services.message_service import (
    GenerationRequest,
    MessageGenerationService,
    MessageGenerator
)
from outreach.services.messaging_service import ClipboardService, MessagingService
from outreach.services.share_service import CardRenderer, MessageCard, ShareResult, ShareService

logger = logging.getLogger(__name__)


class WizardController:
    """
    Drives one wizard pass from identification to the finished message.

    This controller:
    1. Applies operator input to the owned WizardState
    2. Fires step transitions through the WizardEngine
    3. Compiles the scenario context and calls message generation
    4. Delivers the result (copy, share card, deep-link)
    5. Converts boundary failures into notices
    """

    def __init__(
        self,
        message_generator: Optional[MessageGenerator] = None,
        state: Optional[WizardState] = None,
        engine: Optional[WizardEngine] = None,
        prompt_manager: Optional[PromptManager] = None,
        card_renderer: Optional[CardRenderer] = None,
        share_service: Optional[ShareService] = None,
        clipboard: Optional[ClipboardService] = None,
        messaging: Optional[MessagingService] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or default_settings
        self.state = state or WizardState()
        self.engine = engine or WizardEngine()
        self.prompt_manager = prompt_manager or get_prompt_manager()
        self.message_generator = message_generator or MessageGenerationService(
            prompt_manager=self.prompt_manager,
            settings=self.settings
        )
        self.card_renderer = card_renderer or CardRenderer()
        self.share_service = share_service or ShareService(prompt_manager=self.prompt_manager)
        self.clipboard = clipboard or ClipboardService(feedback_seconds=self.settings.COPY_FEEDBACK_SECONDS)
        self.messaging = messaging or MessagingService(country_code=self.settings.WHATSAPP_COUNTRY_CODE)

        self.notices: List[Notice] = []
        # Bumped on reset so a generation finishing afterwards is discarded
        self._pass_id = 0
        # Held until the boundary call resolves, even across a reset
        self._in_flight = False

    # ===========================================
    # NOTICES
    # ===========================================

    def _notify(self, level: NoticeLevel, prompt_type: PromptType, **kwargs) -> Notice:
        notice = Notice(level=level, text=self.prompt_manager.get_prompt(prompt_type, **kwargs))
        self.notices.append(notice)
        return notice

    def pop_notices(self) -> List[Notice]:
        notices, self.notices = self.notices, []
        return notices

    def _require_step(self, step: WizardStep, operation: str) -> None:
        if self.state.step != step:
            raise WizardFlowError(
                f"{operation} is only available on step {step.value}",
                current_step=self.state.step.value
            )

    # ===========================================
    # STEP 1 - IDENTIFICATION
    # ===========================================

    def set_name(self, name: str) -> None:
        self.state.contact.set_name(name)

    def set_phone(self, phone: str) -> None:
        self.state.contact.set_phone(phone)

    def can_continue(self) -> bool:
        return self.engine.can_transition(self.state, WizardEvent.CONTINUE)

    def continue_to_scenarios(self) -> bool:
        """
        Leave the identification step.

        An empty name is a closed gate, not an error: the wizard stays on
        step 1 and False is returned.
        """
        if self.state.step == WizardStep.IDENTIFICATION and not self.can_continue():
            logger.debug("Continue blocked: patient name is empty")
            return False

        self.engine.fire(self.state, WizardEvent.CONTINUE)
        return True

    def back(self) -> WizardStep:
        return self.engine.fire(self.state, WizardEvent.BACK)

    # ===========================================
    # STEP 2 - SCENARIO SELECTION
    # ===========================================

    def select_scenario(self, scenario: Union[ScenarioType, str]) -> WizardStep:
        return self.engine.fire(
            self.state,
            WizardEvent.SELECT_SCENARIO,
            {"scenario": parse_scenario(scenario)}
        )

    # ===========================================
    # STEP 3 - DETAILS
    # ===========================================

    def set_field(self, key: str, value: str) -> None:
        self.state.fields.set_field(key, value)

    def set_fields(self, values: Mapping[str, str]) -> None:
        """Set several fields; nothing is applied if any key is unknown."""
        for key in values:
            ScenarioFieldSet.resolve_key(key)
        for key, value in values.items():
            self.state.fields.set_field(key, value)

    def set_tone(self, tone: Union[Tone, str]) -> None:
        try:
            self.state.tone = Tone(tone)
        except ValueError:
            raise ValidationError(f"Unknown tone: {tone}", field="tone", value=tone)

    def build_context(self) -> str:
        if self.state.scenario is None:
            raise WizardFlowError("No scenario selected", current_step=self.state.step.value)
        return compile_context(self.state.scenario, self.state.fields, self.prompt_manager)

    async def generate(self) -> Optional[str]:
        """
        Generate the patient message for the current scenario.

        Ignored (returns None) while a generation is already in flight,
        including one started before a reset. On success the returned text
        is stored unmodified and the wizard moves to the result step. On
        failure an error notice is recorded and the wizard stays on the
        detail step. A call that resolves after a reset is discarded
        without a notice.

        Raises:
            WizardFlowError: If called outside the detail step
        """
        state = self.state
        if self._in_flight or state.is_generating:
            logger.info("Generation already in progress; request ignored")
            return None

        self._require_step(WizardStep.SCENARIO_DETAILS, "Message generation")

        pass_id = self._pass_id
        self._in_flight = True
        state.is_generating = True
        try:
            request = GenerationRequest(
                patient_name=state.contact.name,
                phone=state.contact.phone,
                tone=state.tone,
                context_note=self.build_context()
            )
            logger.info(f"Generating message for scenario {state.scenario.value} with tone {state.tone.value}")
            message = await self.message_generator.generate_message(request)
        except GenerationError as e:
            logger.error(f"Generation failed: {e}")
            if self._pass_id == pass_id:
                self._notify(NoticeLevel.ERROR, PromptType.GENERATION_FAILED)
            return None
        except Exception as e:
            logger.error(f"Unexpected generation failure: {e}", exc_info=True)
            if self._pass_id == pass_id:
                self._notify(NoticeLevel.ERROR, PromptType.GENERATION_FAILED)
            return None
        finally:
            self._in_flight = False
            if self._pass_id == pass_id:
                state.is_generating = False

        if self._pass_id != pass_id:
            logger.info("Wizard was reset during generation; result discarded")
            return None

        self.engine.fire(state, WizardEvent.GENERATION_SUCCEEDED, {"message": message})
        self._notify(NoticeLevel.SUCCESS, PromptType.GENERATION_SUCCEEDED, patient_name=state.contact.name)
        return message

    @property
    def generation_pending(self) -> bool:
        """True while a boundary call is outstanding, whichever pass started it."""
        return self._in_flight

    # ===========================================
    # STEP 4 - RESULT
    # ===========================================

    def edit_message(self, text: str) -> None:
        self._require_step(WizardStep.RESULT, "Message editing")
        self.state.message = text

    def copy_message(self) -> bool:
        self._require_step(WizardStep.RESULT, "Copy")
        copied = self.clipboard.copy(self.state.message)
        if not copied:
            self._notify(NoticeLevel.ERROR, PromptType.COPY_FAILED)
        return copied

    @property
    def copied(self) -> bool:
        return self.clipboard.is_copied

    def build_card(self) -> MessageCard:
        return MessageCard(
            patient_name=self.state.contact.name,
            message=self.state.message or "",
            practitioner_name=self.settings.PRACTITIONER_NAME,
            title=self.settings.PRACTITIONER_TITLE,
            registry=self.settings.PRACTITIONER_REGISTRY,
            website=self.settings.PRACTITIONER_WEBSITE
        )

    async def share_image(self) -> Optional[ShareResult]:
        """
        Render the result card and share or download it.

        Returns:
            The share result, or None if the card could not be rendered
        """
        self._require_step(WizardStep.RESULT, "Image sharing")

        try:
            image = self.card_renderer.render(self.build_card())
        except CaptureError as e:
            logger.error(f"Card capture failed: {e}")
            self._notify(NoticeLevel.ERROR, PromptType.CAPTURE_FAILED)
            return None

        result = await self.share_service.share_or_download(image, self.state.contact.name)
        if not result.delivered:
            self._notify(NoticeLevel.ERROR, PromptType.SHARE_FAILED)
        elif result.path is not None:
            self._notify(NoticeLevel.INFO, PromptType.DOWNLOAD_READY, filename=result.filename)
        return result

    def messaging_link(self) -> str:
        self._require_step(WizardStep.RESULT, "Messaging link")
        return self.messaging.build_link(self.state.contact.phone, self.state.message)

    def open_messaging_link(self) -> str:
        url = self.messaging_link()
        if not self.messaging.open_link(self.state.contact.phone, self.state.message):
            self._notify(NoticeLevel.ERROR, PromptType.LINK_OPEN_FAILED)
        return url

    # ===========================================
    # RESET & VIEW
    # ===========================================

    def reset(self) -> None:
        """
        Start a new wizard pass from any step.

        A generation still in flight keeps its slot until it resolves; its
        result is then discarded.
        """
        self._pass_id += 1
        self.engine.fire(self.state, WizardEvent.RESET)
        self.clipboard.clear()
        self.notices.clear()

    def snapshot(self, consume_notices: bool = False) -> Dict[str, Any]:
        """Serializable view of the wizard for a front end."""
        state = self.state
        scenario = state.scenario
        notices = self.pop_notices() if consume_notices else list(self.notices)

        return {
            "step": state.step.value,
            "step_label": self.prompt_manager.get_prompt(
                PromptType.STEP_COUNTER, step=state.step.value, total=len(WizardStep)
            ),
            "contact": state.contact.model_dump(),
            "phone_digits": state.contact.phone_digits(),
            "can_continue": self.can_continue() if state.step == WizardStep.IDENTIFICATION else None,
            "scenario": scenario.value if scenario else None,
            "scenario_label": get_scenario(scenario).label if scenario else None,
            "fields": state.fields.values(),
            "relevant_fields": list(state.fields.relevant_fields(scenario)) if scenario else [],
            "missing_fields": state.fields.missing_fields(scenario) if scenario else [],
            "ready": state.fields.is_ready(scenario) and not self.generation_pending if scenario else False,
            "tone": state.tone.value,
            "tone_label": TONE_LABELS[state.tone.value],
            "message": state.message,
            "is_generating": state.is_generating,
            "generation_pending": self.generation_pending,
            "copied": self.copied,
            "notices": [notice.model_dump(mode="json") for notice in notices],
        }


def create_controller(
    settings: Optional[Settings] = None,
    share_handler=None,
    clipboard_writer=None,
    link_opener=None
) -> WizardController:
    """Build a controller wired to the real boundary services."""
    settings = settings or default_settings
    prompt_manager = get_prompt_manager()

    return WizardController(
        message_generator=MessageGenerationService(prompt_manager=prompt_manager, settings=settings),
        prompt_manager=prompt_manager,
        share_service=ShareService(
            share_handler=share_handler,
            export_dir=settings.EXPORT_DIR,
            prompt_manager=prompt_manager
        ),
        clipboard=ClipboardService(writer=clipboard_writer, feedback_seconds=settings.COPY_FEEDBACK_SECONDS),
        messaging=MessagingService(opener=link_opener, country_code=settings.WHATSAPP_COUNTRY_CODE),
        settings=settings
    )
