"""
Keeps one SessionController per browser session in Streamlit session state.
"""

from typing import Optional

import streamlit as st

from config.app_config import get_config
from services.chat_service.session_controller import SessionController
from services.ui_service.clipboard import BrowserClipboard
from utils.logging_config import get_logger

SESSION_KEY = "chat_session"
UPLOADER_KEY = "uploader_generation"
PROCESSED_UPLOADS_KEY = "processed_upload_ids"
PROCESSED_COPIES_KEY = "processed_copy_events"

logger = get_logger(__name__)


def get_session_controller() -> SessionController:
    """Get the controller for the current browser session, creating it on first access"""
    controller: Optional[SessionController] = st.session_state.get(SESSION_KEY)
    if controller is None:
        controller = SessionController(config=get_config(), clipboard=BrowserClipboard())
        st.session_state[SESSION_KEY] = controller
        logger.info("Created chat session")
    return controller


def get_uploader_generation() -> int:
    """Counter baked into the uploader widget key; bumping it empties the widget"""
    if UPLOADER_KEY not in st.session_state:
        st.session_state[UPLOADER_KEY] = 0
    return st.session_state[UPLOADER_KEY]


def reset_uploader():
    st.session_state[UPLOADER_KEY] = get_uploader_generation() + 1
    st.session_state[PROCESSED_UPLOADS_KEY] = set()


def _mark_once(state_key: str, item_id: str) -> bool:
    processed = st.session_state.get(state_key)
    if processed is None:
        processed = set()
        st.session_state[state_key] = processed
    if item_id in processed:
        return False
    processed.add(item_id)
    return True


def mark_upload_processed(file_id: str) -> bool:
    """
    Remember an uploader file so reruns do not stage it twice

    Returns:
        True the first time a file id is seen
    """
    return _mark_once(PROCESSED_UPLOADS_KEY, file_id)


def mark_copy_event_processed(event_id: str) -> bool:
    """Copy buttons keep returning their last report; handle each click once"""
    return _mark_once(PROCESSED_COPIES_KEY, event_id)


def reset_session():
    """Drop the session controller (debug tooling)"""
    for key in (SESSION_KEY, UPLOADER_KEY, PROCESSED_UPLOADS_KEY, PROCESSED_COPIES_KEY):
        if key in st.session_state:
            del st.session_state[key]
    logger.info("Reset chat session")
