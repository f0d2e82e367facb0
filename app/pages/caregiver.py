"""
app/pages/caregiver.py

Caregiver portal
- Patient selector (remembers the last patient viewed)
- Patient chart form + medication builder
- Chat with the selected patient (each send also opens an admin ticket)
- Issue reporting for the selected patient
"""

from __future__ import annotations

import streamlit as st

from app.ui import card_close, card_open, format_timestamp, initials_badge, list_row
from portal.auth import PortalSession
from portal.container import Portal
from portal.medications import format_medication_line, parse_medication_lines, split_medication_line
from storage.models import User

_MEDS_KEY = "cg_meds_text"
_PENDING_MED_KEY = "cg_pending_med"


def _select_patient(portal: Portal, session: PortalSession) -> User | None:
    patients = portal.users.find_by_role("patient")
    if not patients:
        st.info("No patients on file yet. Ask an administrator to add one.")
        return None

    default = session.default_patient()
    ids = [p.id for p in patients]
    index = ids.index(default.id) if default is not None and default.id in ids else 0
    chosen = st.selectbox(
        "Patient",
        ids,
        index=index,
        format_func=lambda pid: next(p.full_name for p in patients if p.id == pid),
    )
    if chosen != session.current_patient_id():
        st.session_state.pop(_MEDS_KEY, None)
    return session.select_patient(chosen)


def _chart_form(portal: Portal, patient: User) -> None:
    card_open("Patient chart")
    if _MEDS_KEY not in st.session_state:
        st.session_state[_MEDS_KEY] = "\n".join(patient.meds or [])
    # widget state can only be written before the text area is created
    pending = st.session_state.pop(_PENDING_MED_KEY, None)
    if pending:
        meds = parse_medication_lines(st.session_state[_MEDS_KEY])
        meds.append(pending)
        st.session_state[_MEDS_KEY] = "\n".join(meds)

    full_name = st.text_input("Full name", value=patient.full_name, key=f"f-name-{patient.id}")
    c1, c2, c3 = st.columns(3)
    mrn = c1.text_input("MRN", value=patient.mrn or "", key=f"f-mrn-{patient.id}")
    dob = c2.text_input("Date of birth", value=patient.dob or "", key=f"f-dob-{patient.id}")
    blood = c3.text_input("Blood type", value=patient.blood or "", key=f"f-blood-{patient.id}")
    allergies = st.text_input("Allergies", value=patient.allergies or "", key=f"f-allergies-{patient.id}")
    meds_text = st.text_area("Medications (one per line)", key=_MEDS_KEY, height=140)

    for line in parse_medication_lines(meds_text):
        name, details = split_medication_line(line)
        list_row(name, details)

    if st.button("Save patient", type="primary"):
        portal.actions.save_patient_chart(
            patient.id, full_name, mrn=mrn, dob=dob, blood=blood,
            allergies=allergies, meds_text=meds_text,
        )
        st.success("Patient information saved.")
    card_close()


def _medication_builder() -> None:
    card_open("Add medication")
    with st.form("med-form", clear_on_submit=True):
        c1, c2, c3, c4 = st.columns([2, 1, 1, 1])
        name = c1.text_input("Name")
        strength = c2.text_input("Strength")
        unit = c3.text_input("Unit")
        form = c4.selectbox("Form", ["tablet", "capsule", "liquid", "inhaler"])
        directions = st.text_input("Directions")
        c5, c6 = st.columns(2)
        quantity = c5.text_input("Quantity")
        refills = c6.text_input("Refills")
        notes = st.text_input("Notes")
        submitted = st.form_submit_button("Add to list")
    card_close()

    if submitted:
        line = format_medication_line(
            name, strength, unit, form=form, directions=directions,
            quantity=quantity, refills=refills, notes=notes,
        )
        if line:
            st.session_state[_PENDING_MED_KEY] = line
            st.rerun()


def _chat(portal: Portal, session: PortalSession, patient: User) -> None:
    card_open("Messages", f"Conversation with {patient.full_name}")
    with st.form("chat-form", clear_on_submit=True):
        text = st.text_input("Message")
        sent = st.form_submit_button("Send")
    if sent:
        caregiver = session.current_user()
        portal.actions.send_caregiver_message(caregiver.id if caregiver else None, patient.id, text)

    messages = portal.messages.render_order(patient.id)
    if not messages:
        st.caption("No messages yet.")
    for m in messages:
        list_row("Caregiver" if m.sender == "caregiver" else "Patient", format_timestamp(m.timestamp), m.text)
    card_close()


def _issues(portal: Portal, patient: User) -> None:
    card_open("Issues", "Report a problem with this patient's care.")
    with st.form("issue-form", clear_on_submit=True):
        text = st.text_area("Describe the issue", height=80)
        reported = st.form_submit_button("Report issue")
    if reported:
        portal.actions.report_issue(patient.id, text)

    issues = portal.issues.render_order(patient.id)
    if not issues:
        st.caption("No issues reported.")
    for issue in issues:
        list_row("Issue", format_timestamp(issue.timestamp), issue.text)
    card_close()


def render(portal: Portal, session: PortalSession) -> None:
    st.title("Caregiver workspace")

    patient = _select_patient(portal, session)
    if patient is None:
        return

    top_l, top_r = st.columns([1, 12])
    with top_l:
        initials_badge(patient.full_name)
    with top_r:
        st.subheader(patient.full_name)

    left, right = st.columns([1.3, 1], gap="large")
    with left:
        _chart_form(portal, patient)
        _medication_builder()
    with right:
        _chat(portal, session, patient)
        _issues(portal, patient)
