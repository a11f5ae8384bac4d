"""Reminder text templates per locale."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "expiry_title": "Expiry Alert",
        "expiry_body": "{name} will expire in {days} days.",
    },
    "vi": {
        "expiry_title": "Cảnh báo hết hạn",
        "expiry_body": "{name} sẽ hết hạn sau {days} ngày.",
    },
}


class MessageCatalog:
    """Formats notification text for one locale.

    Unknown locales fall back to English; a missing key formats as the key
    itself so a reminder is never dropped over a translation gap.
    """

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        messages: dict[str, dict[str, str]] | None = None,
    ) -> None:
        self._messages = messages if messages is not None else _MESSAGES
        if locale not in self._messages:
            logger.warning("Unknown locale %r, falling back to %r", locale, DEFAULT_LOCALE)
            locale = DEFAULT_LOCALE
        self.locale = locale

    @property
    def locales(self) -> list[str]:
        return sorted(self._messages)

    def format(self, key: str, **params) -> str:
        template = self._messages.get(self.locale, {}).get(key)
        if template is None:
            template = self._messages.get(DEFAULT_LOCALE, {}).get(key, key)
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            logger.warning("Missing parameters for message %r: %s", key, params)
            return template
