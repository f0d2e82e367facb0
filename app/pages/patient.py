"""
app/pages/patient.py

Patient portal
- Header: initials, MRN / DOB / blood type, allergy alert
- Medication list
- Chat with the care team
"""

from __future__ import annotations

import streamlit as st

from app.ui import card_close, card_open, format_timestamp, initials_badge, list_row, pill
from portal.auth import PortalSession
from portal.container import Portal
from portal.medications import split_medication_line


def render(portal: Portal, session: PortalSession) -> None:
    patient = session.current_user()
    if patient is None or not patient.is_patient:
        st.warning("Please sign in as a patient.")
        return
    session.select_patient(patient.id)

    top_l, top_r = st.columns([1, 12])
    with top_l:
        initials_badge(patient.full_name)
    with top_r:
        st.title(patient.full_name)
        st.caption(
            f"MRN: {patient.mrn or '—'} · DOB: {patient.dob or '—'} · Blood Type: {patient.blood or '—'}"
        )
        if patient.allergies:
            st.markdown(pill(f"Allergy: {patient.allergies}", alert=True), unsafe_allow_html=True)

    left, right = st.columns([1, 1], gap="large")

    with left:
        card_open("Medications")
        meds = patient.meds or []
        if not meds:
            st.caption("No medications on file.")
        for line in meds:
            name, details = split_medication_line(line)
            list_row(name, details)
        card_close()

    with right:
        card_open("Messages", "Talk to your caregiver")
        with st.form("chat-form", clear_on_submit=True):
            text = st.text_input("Message")
            sent = st.form_submit_button("Send")
        if sent:
            portal.actions.send_patient_message(patient.id, text)

        messages = portal.messages.render_order(patient.id)
        if not messages:
            st.caption("No messages yet.")
        for m in messages:
            list_row("Caregiver" if m.sender == "caregiver" else "Patient", format_timestamp(m.timestamp), m.text)
        card_close()
