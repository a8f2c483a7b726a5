import streamlit as st

from config.app_config import get_config
from services.ui_service import get_chat_interface
from utils.logging_config import initialize_logging, get_logger

# Get configuration
config = get_config()

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)


def main_app():
    """Main application content"""
    st.markdown("""
    <style>
    .main-header {
        text-align: center;
        padding: 0.5rem 0;
        border-bottom: 2px solid #e3f2fd;
        margin-bottom: 1rem;
    }
    </style>
    """, unsafe_allow_html=True)

    st.markdown(
        f'<div class="main-header"><h1>{config.ui.app_title}</h1><p>{config.ui.app_subtitle}</p></div>',
        unsafe_allow_html=True,
    )

    try:
        interface = get_chat_interface()
    except Exception as e:
        error_tracker.track_error(e, "session_initialization")
        st.error("Failed to start the chat session. Please refresh the page.")
        return

    interface.render()


def main():
    st.set_page_config(page_title=config.ui.app_title, page_icon="💬", layout="wide")
    main_app()


if __name__ == "__main__":
    main()
