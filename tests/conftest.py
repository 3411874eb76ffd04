from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def escdelay():
    """curses.set_escdelay needs a real terminal behind it."""
    with patch("curses.set_escdelay") as set_escdelay:
        yield set_escdelay
