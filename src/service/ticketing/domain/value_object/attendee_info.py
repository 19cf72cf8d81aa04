from typing import Optional

import attrs


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


@attrs.frozen
class AttendeeInfo:
    """Who holds a booking: an account (user_id) or, for web RSVP, a captured email."""

    user_id: Optional[str] = None
    email: Optional[str] = attrs.field(default=None, converter=_normalize_email)
    name: Optional[str] = attrs.field(default=None, converter=_strip_or_none)
    phone: Optional[str] = attrs.field(default=None, converter=_strip_or_none)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None
