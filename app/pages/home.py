"""
app/pages/home.py

Sign-in landing page: one login form per portal.
"""

from __future__ import annotations

import streamlit as st

from app.ui import portal_choice
from portal.auth import PortalSession
from portal.container import Portal

_PORTALS = (
    ("admin", "Administrator", "Manage users and review caregiver tickets", "🛡", "admin"),
    ("caregiver", "Caregiver", "Update patient charts, message patients, report issues", "🩺", "caregiver"),
    ("patient", "Patient", "See your medications and message your caregiver", "👤", "patient"),
)


def render(portal: Portal, session: PortalSession) -> None:
    st.markdown(
        """
<div style="padding: 10px 4px;">
  <div style="font-weight:1000; font-size:36px;">Sign in as</div>
  <div style="margin-top:6px; opacity:0.6; font-size:15px;">Choose your portal to continue</div>
</div>
        """,
        unsafe_allow_html=True,
    )

    cols = st.columns(len(_PORTALS), gap="large")
    for col, (role, title, subtitle, icon, page) in zip(cols, _PORTALS):
        with col:
            portal_choice(title, subtitle, icon_text=icon)
            with st.form(f"{role}-login-form"):
                username = st.text_input("Username", key=f"{role}-user")
                password = st.text_input("Password", type="password", key=f"{role}-pass")
                submitted = st.form_submit_button(f"Sign in as {title}", use_container_width=True)
            if submitted:
                user = session.login(role, username, password)
                if user is None:
                    st.error(f"Invalid {title.lower()} credentials.")
                else:
                    st.session_state["current_page"] = page
                    st.rerun()
