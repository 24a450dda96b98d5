"""Phone number helpers — canonical form used as the natural key everywhere."""

from __future__ import annotations

import re

from site_bot.config import settings

_NON_DIGITS = re.compile(r"\D")
_E164 = re.compile(r"^\+[1-9]\d{1,14}$")

LOCAL_SUBSCRIBER_LENGTH = 10


def normalize_phone(raw: str, country_code: str | None = None) -> str:
    """Return *raw* in canonical ``+<digits>`` form.

    Numbers that already carry the default country code are kept, bare
    10-digit local numbers get the country code prepended, anything else is
    rendered as-is with a leading ``+``.  Never raises; validation is left to
    :func:`is_valid_phone`.
    """
    cc = country_code or settings.default_country_code
    digits = _NON_DIGITS.sub("", raw or "")

    if digits.startswith(cc) and len(digits) == len(cc) + LOCAL_SUBSCRIBER_LENGTH:
        return f"+{digits}"
    if len(digits) == LOCAL_SUBSCRIBER_LENGTH:
        return f"+{cc}{digits}"
    return f"+{digits}"


def is_valid_phone(raw: str) -> bool:
    """``True`` when the normalized form of *raw* is a plausible E.164 number."""
    return bool(_E164.match(normalize_phone(raw)))


def mask_phone(raw: str) -> str:
    """Mask a phone for logs: ``+91*******10``."""
    normalized = normalize_phone(raw)
    if len(normalized) < 8:
        return normalized
    return normalized[:3] + "*" * (len(normalized) - 5) + normalized[-2:]
