from typing import Any

import pytest


@pytest.fixture
def booking_state() -> dict[str, Any]:
    """Event, booking and last response shared between the steps of one scenario."""
    return {}
