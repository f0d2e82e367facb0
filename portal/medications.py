"""
portal/medications.py

Medications are stored as single formatted lines on the patient record:

    "<name> <strength> <unit> — <directions> · <qty> <qty unit> · <n> refill(s) · <notes>"

There is no structured medication entity; these helpers build and split the
line for the caregiver and patient pages.
"""

from __future__ import annotations

from typing import Optional

SEPARATOR = " — "
DETAIL_SEPARATOR = " · "

_QUANTITY_UNITS = {"liquid": "mL", "inhaler": "puffs"}


def quantity_unit(form: str) -> str:
    return _QUANTITY_UNITS.get(form, "tabs")


def format_medication_line(
    name: str,
    strength: str = "",
    unit: str = "",
    form: str = "tablet",
    directions: str = "",
    quantity: str = "",
    refills: str = "",
    notes: str = "",
) -> Optional[str]:
    """Return the formatted line, or ``None`` when *name* is blank."""
    name, strength, unit = name.strip(), strength.strip(), unit.strip()
    if not name:
        return None

    dose = f"{strength} {unit}" if strength and unit else strength or unit
    name_part = " ".join(p for p in (name, dose) if p)

    details = []
    if directions.strip():
        details.append(directions.strip())
    if quantity.strip():
        details.append(f"{quantity.strip()} {quantity_unit(form)}")
    if refills.strip():
        n = refills.strip()
        details.append(f"{n} refill{'' if n == '1' else 's'}")
    if notes.strip():
        details.append(notes.strip())

    return f"{name_part}{SEPARATOR}{DETAIL_SEPARATOR.join(details)}"


def split_medication_line(line: str) -> tuple[str, str]:
    """Split a stored line into ``(name, details)`` for display."""
    parts = line.split(SEPARATOR)
    return parts[0], SEPARATOR.join(parts[1:])


def parse_medication_lines(text: str) -> list[str]:
    """One medication per non-blank line, trimmed."""
    return [s.strip() for s in text.split("\n") if s.strip()]
