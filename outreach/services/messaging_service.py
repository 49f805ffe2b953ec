# outreach/services/messaging_service.py
"""
Clipboard and messaging deep-link delivery.
"""
from typing import Any, Callable, Optional
from urllib.parse import quote
import logging
import re
import time

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"

_NON_DIGITS = re.compile(r"\D")


def build_whatsapp_link(phone: str, message: str, country_code: str = "55") -> str:
    """
    Build a WhatsApp click-to-chat link.

    The country code is prepended to the phone digits. An empty phone
    yields an empty recipient segment (``https://wa.me/?text=...``),
    which lets the operator pick the contact in WhatsApp itself.
    """
    recipient = f"{country_code}{_NON_DIGITS.sub('', phone)}" if phone else ""
    return f"{WHATSAPP_BASE_URL}{recipient}?text={quote(message, safe='')}"


class MessagingService:
    """Builds deep-links and passes them to an optional opener."""

    def __init__(
        self,
        opener: Optional[Callable[[str], Any]] = None,
        country_code: str = "55"
    ):
        self.opener = opener
        self.country_code = country_code

    def build_link(self, phone: str, message: str) -> str:
        return build_whatsapp_link(phone, message, self.country_code)

    def open_link(self, phone: str, message: str) -> bool:
        """
        Open the deep-link for ``phone``.

        Returns:
            False if an opener is configured and failed, True otherwise
        """
        url = self.build_link(phone, message)
        if self.opener is None:
            logger.debug("No link opener configured; link returned to caller")
            return True

        try:
            self.opener(url)
        except Exception as e:
            logger.warning(f"Could not open messaging link: {e}")
            return False

        logger.info("Messaging link opened")
        return True


class ClipboardService:
    """
    Best-effort clipboard writes with a transient "copied" indicator.

    ``is_copied`` stays true for ``feedback_seconds`` after a successful
    copy.
    """

    def __init__(
        self,
        writer: Optional[Callable[[str], Any]] = None,
        feedback_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self.writer = writer
        self.feedback_seconds = feedback_seconds
        self.clock = clock
        self._copied_until: Optional[float] = None

    def copy(self, text: str) -> bool:
        if self.writer is not None:
            try:
                self.writer(text)
            except Exception as e:
                logger.warning(f"Clipboard write failed: {e}")
                self._copied_until = None
                return False

        self._copied_until = self.clock() + self.feedback_seconds
        return True

    @property
    def is_copied(self) -> bool:
        return self._copied_until is not None and self.clock() < self._copied_until

    def clear(self) -> None:
        self._copied_until = None
