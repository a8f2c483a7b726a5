"""
UI service - Streamlit rendering of the chat session.
"""


# Imported on demand so session_binding and clipboard load without the full interface
def get_chat_interface():
    from .chat_interface import get_chat_interface as _get_chat_interface
    return _get_chat_interface()


__all__ = ['get_chat_interface']
