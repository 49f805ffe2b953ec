# tests/services/test_share_service.py
"""
Unit tests for card rendering and sharing.
"""
import pytest
from unittest.mock import AsyncMock, Mock, patch

from outreach.core.exceptions import CaptureError
from outreach.services.share_service import (
    DOWNLOAD_FILENAME,
    SHARE_FILENAME,
    CardRenderer,
    MessageCard,
    ShareMethod,
    ShareService
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def card():
    return MessageCard(
        patient_name="Maria Souza",
        message="Olá Maria! Sua cirurgia está agendada para 10/12 às 07:00.\n\nLembre-se do jejum de 8h.",
        practitioner_name="Dr. Carlos Franciozi",
        title="Orientação Médica",
        registry="CRM 111501",
        website="seujoelho.com"
    )


@pytest.mark.unit
class TestCardRenderer:

    def test_render_png(self, card):
        image = CardRenderer(width=300, scale=1).render(card)
        assert image.startswith(PNG_SIGNATURE)

    def test_render_empty_message(self, card):
        card.message = ""
        assert CardRenderer(width=300, scale=1).render(card).startswith(PNG_SIGNATURE)

    def test_long_message_grows_card(self, card):
        renderer = CardRenderer(width=300, scale=1)
        short = renderer.render(card)
        card.message = " ".join(["palavra"] * 200)
        long = renderer.render(card)
        assert len(long) > len(short)

    def test_wrap_respects_width_and_breaks(self):
        draw = Mock()
        draw.textlength.side_effect = lambda text, font=None: len(text)

        lines = CardRenderer._wrap(draw, "um dois tres\nquatro", None, 7)

        assert lines == ["um dois", "tres", "quatro"]

    def test_render_failure_raises_capture_error(self, card):
        renderer = CardRenderer()
        with patch.object(renderer, "_draw", side_effect=OSError("encoder missing")):
            with pytest.raises(CaptureError) as exc_info:
                renderer.render(card)

        assert exc_info.value.details["error_type"] == "OSError"
        assert exc_info.value.service_name == "CardRenderer"


@pytest.mark.unit
class TestShareService:

    async def test_download_without_export_dir(self, prompt_manager):
        result = await ShareService(prompt_manager=prompt_manager).share_or_download(b"png", "Ana")

        assert result.method == ShareMethod.DOWNLOAD
        assert result.filename == DOWNLOAD_FILENAME
        assert result.delivered
        assert result.path is None

    async def test_download_to_directory(self, prompt_manager, tmp_path):
        export_dir = tmp_path / "exports"
        service = ShareService(export_dir=export_dir, prompt_manager=prompt_manager)

        result = await service.share_or_download(b"png", "Ana")

        assert result.path == export_dir / "orientacao.png"
        assert result.path.read_bytes() == b"png"

    async def test_download_write_failure(self, prompt_manager, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        service = ShareService(export_dir=blocker, prompt_manager=prompt_manager)

        result = await service.share_or_download(b"png", "Ana")

        assert result.delivered is False

    async def test_share_with_sync_handler(self, prompt_manager):
        handler = Mock()
        service = ShareService(share_handler=handler, prompt_manager=prompt_manager)

        result = await service.share_or_download(b"png", "Ana")

        assert result.method == ShareMethod.SHARE
        assert result.filename == SHARE_FILENAME
        assert result.delivered
        request = handler.call_args.args[0]
        assert request.filename == "orientacao_medica.png"
        assert request.text == "Olá Ana, segue orientação médica."
        assert request.image == b"png"

    async def test_share_with_async_handler(self, prompt_manager):
        handler = AsyncMock()
        service = ShareService(share_handler=handler, prompt_manager=prompt_manager)

        result = await service.share_or_download(b"png", "Ana")

        assert result.delivered
        handler.assert_awaited_once()

    async def test_share_cancelled(self, prompt_manager):
        handler = AsyncMock(side_effect=RuntimeError("AbortError"))
        service = ShareService(share_handler=handler, prompt_manager=prompt_manager)

        result = await service.share_or_download(b"png", "Ana")

        assert result.method == ShareMethod.SHARE
        assert result.delivered is False
