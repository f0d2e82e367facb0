"""
app/pages/admin.py

Administrator portal
- Create / update users (upsert by username)
- User list with edit + delete
- Role summary chips
- Caregiver ticket queue (resolve / reopen / delete)
"""

from __future__ import annotations

import streamlit as st

from app.ui import _esc, card_close, card_open, format_timestamp, list_row, pill
from portal.auth import PortalSession
from portal.container import Portal

ROLES = ["admin", "caregiver", "patient"]


def _user_form(portal: Portal) -> None:
    editing = st.session_state.get("admin_edit_user") or {}

    card_open("Add or update user", "Saving an existing username updates that user.")
    with st.form("user-form", clear_on_submit=True):
        role = st.selectbox(
            "Role", ROLES,
            index=ROLES.index(editing.get("role", "caregiver")),
        )
        full_name = st.text_input("Full name", value=editing.get("full_name", ""))
        username = st.text_input("Username", value=editing.get("username", ""))
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Save user", type="primary")
    card_close()

    if submitted:
        try:
            portal.actions.save_user_from_form(role, full_name, username, password)
        except ValueError as exc:
            st.error(str(exc))
            return
        st.session_state.pop("admin_edit_user", None)
        st.success("User saved successfully.")
        st.rerun()


def _user_list(portal: Portal) -> None:
    card_open("Users")
    users = portal.users.list()
    if not users:
        st.caption("No users yet.")
    for u in users:
        left, mid, right = st.columns([4, 1, 1])
        with left:
            st.markdown(
                f"**{_esc(u.full_name)}** {pill(u.role)}<br>"
                f"<span class='mc-row-meta'>username: {_esc(u.username or '(none)')}</span>",
                unsafe_allow_html=True,
            )
        if mid.button("Edit", key=f"edit-{u.id}"):
            st.session_state["admin_edit_user"] = {
                "role": u.role, "full_name": u.full_name, "username": u.username,
            }
            st.rerun()
        if right.button("Delete", key=f"delete-{u.id}"):
            portal.users.delete(u.id)
            st.rerun()
    card_close()


def _role_summary(portal: Portal) -> None:
    users = portal.users.list()
    parts = []
    for role, label, attr in (("admin", "Site Admin", "username"),
                              ("caregiver", "Caregiver", "username"),
                              ("patient", "Patient", "full_name")):
        match = next((u for u in users if u.role == role), None)
        if match is not None:
            parts.append(f"{pill(label)} {_esc(getattr(match, attr))}")
    if parts:
        st.markdown(" &nbsp; ".join(parts), unsafe_allow_html=True)


def _ticket_panel(portal: Portal) -> None:
    card_open("Caregiver tickets", "Every caregiver message opens a ticket here.")
    tickets = portal.tickets.render_order()
    if not tickets:
        st.caption("No tickets yet.")
    for t in tickets:
        list_row(
            f"{t.from_caregiver_name or 'Caregiver'} → {t.patient_name}",
            f"{format_timestamp(t.timestamp)} · {t.status}",
            t.text,
            resolved=t.resolved,
        )
        c1, c2, _ = st.columns([1, 1, 4])
        if c1.button("Reopen" if t.resolved else "Resolve", key=f"resolve-{t.id}"):
            portal.tickets.toggle_resolved(t.id)
            st.rerun()
        if c2.button("Delete", key=f"ticket-delete-{t.id}"):
            portal.tickets.delete(t.id)
            st.rerun()
    card_close()


def render(portal: Portal, session: PortalSession) -> None:
    st.title("Administration")
    _role_summary(portal)

    left, right = st.columns([1, 1.2], gap="large")
    with left:
        _user_form(portal)
        _user_list(portal)
    with right:
        _ticket_panel(portal)
