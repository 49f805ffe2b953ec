# outreach/services/share_service.py
"""
Card rendering and sharing for generated messages.

CardRenderer draws the result card (branding header, message, footer)
to a PNG. ShareService hands the image to a platform share handler when
one is configured and otherwise falls back to a download.
"""
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, List, Optional
import inspect
import logging

from PIL import Image, ImageDraw, ImageFont
from pydantic import BaseModel

from outreach.core.exceptions import CaptureError
from outreach.core.prompt_manager import PromptManager, PromptType, get_prompt_manager

logger = logging.getLogger(__name__)

SHARE_FILENAME = "orientacao_medica.png"
DOWNLOAD_FILENAME = "orientacao.png"

# Palette (RGB)
WHITE = (255, 255, 255)
SLATE_900 = (15, 23, 42)
SLATE_600 = (71, 85, 105)
SLATE_500 = (100, 116, 139)
SLATE_400 = (148, 163, 184)
SLATE_100 = (241, 245, 249)
BLUE_500 = (59, 130, 246)
INDIGO_500 = (99, 102, 241)


class MessageCard(BaseModel):
    """Everything printed on the shareable card"""
    patient_name: str
    message: str
    practitioner_name: str
    title: str
    registry: str
    website: str


class CardRenderer:
    """Renders a MessageCard to PNG bytes at ``scale`` times the base width."""

    def __init__(self, width: int = 540, scale: int = 2, padding: int = 32):
        self.width = width
        self.scale = scale
        self.padding = padding

    def render(self, card: MessageCard) -> bytes:
        """
        Raises:
            CaptureError: If the image cannot be produced
        """
        try:
            return self._draw(card)
        except Exception as e:
            logger.error(f"Card rendering failed: {e}", exc_info=True)
            raise CaptureError(
                "Failed to render message card",
                details={"cause": str(e), "error_type": type(e).__name__}
            ) from e

    def _font(self, size: int) -> ImageFont.ImageFont:
        return ImageFont.load_default(size=size * self.scale)

    @staticmethod
    def _wrap(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> List[str]:
        """Greedy word wrap by rendered width, keeping explicit line breaks."""
        lines = []
        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if current and draw.textlength(candidate, font=font) > max_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def _draw(self, card: MessageCard) -> bytes:
        s = self.scale
        width = self.width * s
        pad = self.padding * s
        bar_height = 8 * s
        logo_size = 40 * s

        name_font = self._font(14)
        title_font = self._font(10)
        body_font = self._font(14)
        footer_font = self._font(10)

        measure = ImageDraw.Draw(Image.new("RGB", (1, 1)))
        body_lines = self._wrap(measure, card.message, body_font, width - 2 * pad)
        line_height = int(14 * s * 1.6)

        header_bottom = pad + bar_height + logo_size + 16 * s
        body_top = header_bottom + 24 * s
        body_bottom = body_top + line_height * len(body_lines)
        footer_top = body_bottom + 24 * s
        height = footer_top + 16 * s + 10 * s + pad

        image = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(image)

        # Gradient top bar
        for x in range(width):
            ratio = x / max(width - 1, 1)
            color = tuple(int(a + (b - a) * ratio) for a, b in zip(BLUE_500, INDIGO_500))
            draw.line([(x, 0), (x, bar_height)], fill=color)

        # Branding header
        logo_top = pad + bar_height
        draw.rounded_rectangle(
            [(pad, logo_top), (pad + logo_size, logo_top + logo_size)],
            radius=12 * s,
            fill=SLATE_900
        )
        # Skip honorifics such as "Dr." / "Dra."
        names = [word for word in card.practitioner_name.split() if not word.endswith(".")]
        initial = (names[0][:1] if names else "+").upper()
        left, top, right, bottom = draw.textbbox((0, 0), initial, font=name_font)
        draw.text(
            (pad + (logo_size - (right - left)) / 2 - left, logo_top + (logo_size - (bottom - top)) / 2 - top),
            initial, font=name_font, fill=WHITE
        )
        text_left = pad + logo_size + 12 * s
        draw.text((text_left, logo_top + 2 * s), card.practitioner_name, font=name_font, fill=SLATE_900)
        draw.text((text_left, logo_top + 24 * s), card.title.upper(), font=title_font, fill=SLATE_500)
        draw.line([(pad, header_bottom), (width - pad, header_bottom)], fill=SLATE_100, width=s)

        # Message body
        y = body_top
        for line in body_lines:
            draw.text((pad, y), line, font=body_font, fill=SLATE_600)
            y += line_height

        # Footer
        draw.line([(pad, footer_top), (width - pad, footer_top)], fill=SLATE_100, width=s)
        footer_y = footer_top + 16 * s
        draw.text((pad, footer_y), card.registry.upper(), font=footer_font, fill=SLATE_400)
        website = card.website.upper()
        website_width = draw.textlength(website, font=footer_font)
        draw.text((width - pad - website_width, footer_y), website, font=footer_font, fill=SLATE_400)

        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


class ShareMethod(str, Enum):
    SHARE = "share"
    DOWNLOAD = "download"


class ShareRequest(BaseModel):
    """Payload handed to a platform share handler"""
    title: str
    text: str
    filename: str
    image: bytes


class ShareResult(BaseModel):
    method: ShareMethod
    filename: str
    delivered: bool
    image: bytes
    path: Optional[Path] = None


ShareHandler = Callable[[ShareRequest], Any]


class ShareService:
    """
    Delivers a rendered card.

    With a share handler the card goes to the platform share sheet; a
    handler exception means the share was cancelled or failed. Without
    one the card is saved to ``export_dir`` or, when no directory is
    configured, returned for the caller to deliver as a download.
    """

    def __init__(
        self,
        share_handler: Optional[ShareHandler] = None,
        export_dir: Optional[Path] = None,
        prompt_manager: Optional[PromptManager] = None
    ):
        self.share_handler = share_handler
        self.export_dir = Path(export_dir) if export_dir else None
        self.prompt_manager = prompt_manager or get_prompt_manager()

    async def share_or_download(self, image: bytes, patient_name: str) -> ShareResult:
        if self.share_handler is not None:
            return await self._share(image, patient_name)
        return self._download(image)

    async def _share(self, image: bytes, patient_name: str) -> ShareResult:
        request = ShareRequest(
            title=self.prompt_manager.get_prompt(PromptType.SHARE_TITLE),
            text=self.prompt_manager.get_prompt(PromptType.SHARE_TEXT, patient_name=patient_name),
            filename=SHARE_FILENAME,
            image=image
        )
        try:
            result = self.share_handler(request)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.info(f"Share cancelled or failed: {e}")
            return ShareResult(method=ShareMethod.SHARE, filename=SHARE_FILENAME, delivered=False, image=image)

        logger.info("Card handed to share handler")
        return ShareResult(method=ShareMethod.SHARE, filename=SHARE_FILENAME, delivered=True, image=image)

    def _download(self, image: bytes) -> ShareResult:
        if self.export_dir is None:
            return ShareResult(method=ShareMethod.DOWNLOAD, filename=DOWNLOAD_FILENAME, delivered=True, image=image)

        path = self.export_dir / DOWNLOAD_FILENAME
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image)
        except OSError as e:
            logger.error(f"Could not save card to {path}: {e}")
            return ShareResult(method=ShareMethod.DOWNLOAD, filename=DOWNLOAD_FILENAME, delivered=False, image=image)

        logger.info(f"Card saved to {path}")
        return ShareResult(method=ShareMethod.DOWNLOAD, filename=DOWNLOAD_FILENAME, delivered=True, image=image, path=path)
