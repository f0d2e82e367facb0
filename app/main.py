"""
app/main.py

MyHealth Portal — Streamlit entry point.
- Role sign-in (Administrator / Caregiver / Patient)
- Page gating through PortalSession.can_access()
- Global theme + display preferences (text size, dark, high contrast)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from portal.auth import PortalSession  # noqa: E402
from portal.config import get_settings  # noqa: E402
from portal.container import get_portal  # noqa: E402

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="MyHealth Portal",
    page_icon="🏥",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "current_page" not in st.session_state:
    st.session_state["current_page"] = "home"

portal = get_portal()
session = PortalSession(portal.users, st.session_state)


def _import_render(module_name: str):
    mod = __import__(f"app.pages.{module_name}", fromlist=["render"])
    return mod.render


def _logout() -> None:
    session.logout()
    st.session_state["current_page"] = "home"
    st.rerun()


# ---------------------------------------------------------------------------
# Global theme injection
# ---------------------------------------------------------------------------
from app.ui import display_controls, inject_theme  # noqa: E402

inject_theme()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("🩺 MyHealth")
st.sidebar.divider()

nav_options = [("Sign in", "home")]
if session.admin_logged_in:
    nav_options.append(("Administration", "admin"))
user = session.current_user()
if user is not None and user.role == "caregiver":
    nav_options.append(("Caregiver workspace", "caregiver"))
if user is not None and user.role == "patient":
    nav_options.append(("My health", "patient"))

if session.admin_logged_in or user is not None:
    who = user.full_name if user is not None else "Site Admin"
    st.sidebar.success(f"**{who}**")
    if st.sidebar.button("↩️ Sign out"):
        _logout()
else:
    st.sidebar.info("Not signed in")

labels = [x[0] for x in nav_options]
keys = [x[1] for x in nav_options]

try:
    current_idx = keys.index(st.session_state["current_page"])
except ValueError:
    current_idx = 0
    st.session_state["current_page"] = keys[0]

page_label = st.sidebar.radio("Navigate", options=labels, index=current_idx)
page_key = dict(nav_options)[page_label]
st.session_state["current_page"] = page_key

st.sidebar.divider()
display_controls()

# ---------------------------------------------------------------------------
# Page routing
# ---------------------------------------------------------------------------
if not session.can_access(page_key):
    logger.info("Blocked access to page %r", page_key)
    st.error("Page not found.")
    st.session_state["current_page"] = "home"
    st.stop()

_import_render(page_key)(portal, session)
