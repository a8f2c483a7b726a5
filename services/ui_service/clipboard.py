"""
Browser clipboard bridge for Streamlit.

The write itself happens in the browser, on the user's click, inside a small
bidirectional component. The component reports whether
``navigator.clipboard.writeText`` succeeded; Python only ever acts on that
report, never on the assumption that an injected script ran.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import streamlit.components.v1 as components

from services.chat_service.errors import ClipboardError

_FRONTEND_DIR = Path(__file__).parent / "frontend" / "copy_button"

_copy_button = components.declare_component("nova_copy_button", path=str(_FRONTEND_DIR))

COPIED = "copied"


def copy_button(text: str, copied: bool, key: str) -> Optional[Dict[str, Any]]:
    """
    Render a copy button that writes ``text`` to the clipboard when clicked

    Args:
        text: Text to copy
        copied: Show the "just copied" state
        key: Widget key, one per message

    Returns:
        The browser's latest report ``{"event_id", "status", "error"}``, or
        None before the first click
    """
    return _copy_button(text=text, copied=copied, key=key, default=None)


class BrowserClipboard:
    """
    Clipboard whose outcome comes from the browser.

    The renderer hands each copy-button report to ``record``; ``write_text``
    then confirms the copy of that text or raises ClipboardError.
    """

    def __init__(self):
        self._outcomes: Dict[str, Dict[str, Any]] = {}

    def record(self, text: str, outcome: Dict[str, Any]):
        self._outcomes[text] = outcome

    def write_text(self, text: str) -> None:
        outcome = self._outcomes.pop(text, None)
        if outcome is None:
            raise ClipboardError("The browser has not reported a copy of this text")
        if outcome.get("status") != COPIED:
            raise ClipboardError(f"Browser rejected the copy: {outcome.get('error') or 'unknown error'}")
