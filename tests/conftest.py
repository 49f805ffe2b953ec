# tests/conftest.py
"""
Shared fixtures for the outreach wizard tests.

Provides stubbed boundary services and controllers positioned at the
different wizard steps.
"""

import os

os.environ.setdefault("LOG_DIR", "test_logs")

import pytest
from unittest.mock import AsyncMock, Mock

from outreach.core.config import Settings
from outreach.core.exceptions import CaptureError
from outreach.core.prompt_manager import PromptManager
from outreach.core.wizard_controller import WizardController
from outreach.models.flow_models import ScenarioType
from outreach.services.messaging_service import ClipboardService, MessagingService
from outreach.services.share_service import CardRenderer, ShareService


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    return Settings(
        WHATSAPP_COUNTRY_CODE="55",
        COPY_FEEDBACK_SECONDS=2.0,
        PRACTITIONER_NAME="Dra. Teste",
        PRACTITIONER_REGISTRY="CRM 000001",
        PRACTITIONER_WEBSITE="exemplo.com"
    )


@pytest.fixture
def prompt_manager():
    pm = PromptManager()
    pm.load_prompts()
    return pm


@pytest.fixture
def echo_generator():
    """Generation boundary that echoes the compiled context"""
    mock = AsyncMock()

    async def generate_side_effect(request):
        return request.context_note

    mock.generate_message.side_effect = generate_side_effect
    return mock


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def clipboard_writer():
    return Mock()


@pytest.fixture
def link_opener():
    return Mock()


@pytest.fixture
def controller(echo_generator, test_settings, prompt_manager, fake_clock, clipboard_writer, link_opener):
    """Fresh controller on step 1 with stubbed boundaries"""
    return WizardController(
        message_generator=echo_generator,
        prompt_manager=prompt_manager,
        card_renderer=CardRenderer(width=200, scale=1),
        share_service=ShareService(prompt_manager=prompt_manager),
        clipboard=ClipboardService(writer=clipboard_writer, feedback_seconds=2.0, clock=fake_clock),
        messaging=MessagingService(opener=link_opener, country_code="55"),
        settings=test_settings
    )


@pytest.fixture
def details_controller(controller):
    """Controller on step 3 with the post-op scenario selected"""
    controller.set_name("Maria Souza")
    controller.set_phone("11 99999-9999")
    controller.continue_to_scenarios()
    controller.select_scenario(ScenarioType.POST_OP_CHECK)
    controller.set_field("daysPostOp", "3")
    return controller


@pytest.fixture
async def result_controller(details_controller):
    """Controller on step 4 with a generated message"""
    await details_controller.generate()
    details_controller.pop_notices()
    return details_controller


@pytest.fixture
def failing_renderer():
    renderer = Mock(spec=CardRenderer)
    renderer.render.side_effect = CaptureError("canvas unavailable")
    return renderer
