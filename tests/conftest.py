"""Shared fixtures for the test suite."""

from unittest.mock import MagicMock, Mock

import pytest
from blessed import Terminal

from term_ui import TUIContext


def create_mock_terminal(width=80, height=24):
    """Create a mock Terminal with specified dimensions."""
    term = Mock(spec=Terminal)
    term.width = width
    term.height = height
    term.move = Mock(return_value='')
    term.color = Mock(return_value='')
    term.on_color = Mock(return_value='')
    term.normal = ''
    term.home = ''
    term.clear = ''
    term.normal_cursor = ''
    term.hide_cursor = ''
    term.fullscreen = MagicMock()
    term.cbreak = MagicMock()
    term.hidden_cursor = MagicMock()
    return term


@pytest.fixture
def term():
    return create_mock_terminal()


@pytest.fixture
def context(term):
    """A context whose display writes nowhere."""
    ctx = TUIContext(term)
    ctx.display = Mock()
    return ctx
