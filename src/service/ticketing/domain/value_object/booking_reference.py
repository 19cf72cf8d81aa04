import secrets
import string
import time


_ALPHABET = string.ascii_uppercase + string.digits
_BASE36 = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 6


def _to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return ''.join(reversed(digits))


def generate_booking_reference(prefix: str) -> str:
    """
    Human-shareable booking reference, e.g. ``TKT-M5X2K9QZ-7KQ2ZD``.

    The millisecond timestamp keeps references roughly ordered; the random suffix
    makes same-millisecond collisions unlikely. Stores still enforce uniqueness and
    callers regenerate on collision.
    """
    timestamp = _to_base36(time.time_ns() // 1_000_000)
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f'{prefix}-{timestamp}-{suffix}'
