"""
NOESIS registration scanner
Scan QR badges, register attendees locally and export to Excel.
"""
import logging
import streamlit as st

from src.ui.dashboard import render_dashboard
from src.utils.config import get_log_level

logger = logging.getLogger(__name__)


# Streamlit page configuration
st.set_page_config(
    page_title="NOESIS Scanner",
    page_icon="📷",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def configure_logging():
    """Configure root logging once per process."""
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def apply_custom_css():
    """Apply global CSS."""
    st.markdown("""
        <style>
        .stApp {
            background: linear-gradient(135deg, #0f0c29 0%, #1a1a2e 50%, #16213e 100%);
        }

        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button, .stDownloadButton > button {
            border-radius: 12px;
            font-weight: 600;
            border: none;
        }

        .stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #7c3aed 0%, #a855f7 100%);
            color: white;
        }

        .stTextInput > div > div > input {
            background: #16213e;
            border: 1px solid #7c3aed;
            border-radius: 8px;
            color: #f1f5f9;
        }
        </style>
    """, unsafe_allow_html=True)


def main():
    """Application entry point."""
    try:
        configure_logging()
        apply_custom_css()
        render_dashboard()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("Something went wrong, please reload the page")
        st.code(str(e))

        if st.button("🔄 Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
