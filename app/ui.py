# =========================
# app/ui.py
# =========================
from __future__ import annotations

import html
from datetime import datetime

import streamlit as st

from portal.preferences import DisplayPreferences


def inject_theme() -> None:
    prefs = DisplayPreferences(st.session_state)

    canvas, card, text, muted, border = "#F6F8FB", "#FFFFFF", "rgba(15,23,42,0.92)", "rgba(15,23,42,0.55)", "rgba(15,23,42,0.10)"
    if prefs.dark:
        canvas, card, text, muted, border = "#0F172A", "#1E293B", "rgba(241,245,249,0.95)", "rgba(241,245,249,0.60)", "rgba(241,245,249,0.12)"
    if prefs.high_contrast:
        text, muted, border = ("#FFFFFF", "#FFFFFF", "#FFFFFF") if prefs.dark else ("#000000", "#000000", "#000000")

    st.markdown(
        f"""
<style>
/* Hide Streamlit built-in multipage nav (we route ourselves) */
[data-testid="stSidebarNav"] {{ display: none !important; }}

:root{{
  --primary: 212 72% 20%;
  --accent: 177 60% 38%;
  --canvas: {canvas};
  --card: {card};
  --border: {border};
  --muted: {muted};
  --text: {text};
  --base-font: {prefs.font_size}px;
}}

.stApp {{ background: var(--canvas); }}
.stApp, .stMarkdown, .stMarkdown p, .stCaption, label,
h1, h2, h3, h4, div[data-testid="stMarkdownContainer"] {{
  color: var(--text) !important;
}}
html, body, .stMarkdown p, label {{ font-size: var(--base-font) !important; }}

div.block-container {{ padding-top: 2.2rem; padding-bottom: 2.2rem; }}

.mc-card{{
  background: var(--card);
  border: 1px solid var(--border);
  border-radius: 16px;
  padding: 16px 18px;
  margin-bottom: 14px;
}}
.mc-title{{ font-weight: 900; font-size: 1.05em; color: var(--text); }}
.mc-sub{{ color: var(--muted); font-size: 0.85em; margin-top: 2px; }}

.mc-row{{ border-top: 1px solid var(--border); padding: 10px 0; }}
.mc-row.resolved{{ opacity: 0.55; }}
.mc-row-title{{ font-weight: 800; color: var(--text); }}
.mc-row-meta{{ color: var(--muted); font-size: 0.8em; }}

.mc-pill{{
  display:inline-block; padding: 2px 10px; border-radius: 999px;
  background: hsla(var(--accent),0.12); color: hsl(var(--accent));
  font-weight: 800; font-size: 0.8em;
}}
.mc-pill-alert{{ background: hsla(0,72%,45%,0.12); color: hsl(0 72% 45%); }}

.mc-portal{{
  display:flex; gap:12px; align-items:center;
  background: var(--card); border: 1px solid var(--border);
  border-radius: 16px; padding: 14px 16px; margin-bottom: 8px;
}}
.mc-portal-ico{{
  width:42px; height:42px; border-radius:12px;
  background: hsla(var(--accent),0.12);
  display:flex; align-items:center; justify-content:center;
  font-weight: 900; color: hsl(var(--accent));
}}
.mc-portal-title{{ font-weight: 900; color: var(--text); }}
.mc-portal-sub{{ color: var(--muted); font-size: 13px; }}

.mc-initials{{
  width:56px; height:56px; border-radius:50%;
  background: hsl(var(--primary)); color: white;
  display:flex; align-items:center; justify-content:center;
  font-weight: 900; font-size: 20px;
}}
</style>
        """,
        unsafe_allow_html=True,
    )


def _esc(x: str) -> str:
    """Escape any user/DB-provided strings before injecting into HTML."""
    return html.escape(str(x or ""), quote=True)


def card_open(title: str, subtitle: str = "") -> None:
    sub = f'<div class="mc-sub">{_esc(subtitle)}</div>' if subtitle else ""
    st.markdown(
        f'<div class="mc-card"><div class="mc-title">{_esc(title)}</div>{sub}',
        unsafe_allow_html=True,
    )


def card_close() -> None:
    st.markdown("</div>", unsafe_allow_html=True)


def list_row(title: str, meta: str, body: str = "", resolved: bool = False) -> None:
    cls = "mc-row resolved" if resolved else "mc-row"
    st.markdown(
        f"""
<div class="{cls}">
  <div class="mc-row-title">{_esc(title)}</div>
  <div class="mc-row-meta">{_esc(meta)}</div>
  <div>{_esc(body)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def pill(text: str, alert: bool = False) -> str:
    cls = "mc-pill mc-pill-alert" if alert else "mc-pill"
    return f'<span class="{cls}">{_esc(text)}</span>'


def initials_badge(full_name: str) -> None:
    st.markdown(f'<div class="mc-initials">{_esc(initials(full_name))}</div>', unsafe_allow_html=True)


def initials(full_name: str) -> str:
    return "".join(part[0].upper() for part in (full_name or "").split()[:2] if part)


def format_timestamp(iso: str) -> str:
    if not iso:
        return ""
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).strftime("%d %b %Y, %H:%M")
    except ValueError:
        return ""


def portal_choice(title: str, subtitle: str, icon_text: str = "•") -> None:
    st.markdown(
        f"""
<div class="mc-portal">
  <div class="mc-portal-ico">{_esc(icon_text)}</div>
  <div>
    <div class="mc-portal-title">{_esc(title)}</div>
    <div class="mc-portal-sub">{_esc(subtitle)}</div>
  </div>
</div>
        """,
        unsafe_allow_html=True,
    )


def display_controls() -> None:
    """Sidebar font size / dark mode / contrast controls."""
    prefs = DisplayPreferences(st.session_state)
    st.sidebar.caption(f"Text size: {prefs.font_size}px")
    c1, c2 = st.sidebar.columns(2)
    if c1.button("A−", use_container_width=True):
        prefs.step_font(up=False)
        st.rerun()
    if c2.button("A+", use_container_width=True):
        prefs.step_font(up=True)
        st.rerun()
    if st.sidebar.button("🌙 Dark mode" + (" (on)" if prefs.dark else ""), use_container_width=True):
        prefs.toggle_dark()
        st.rerun()
    if st.sidebar.button("◐ High contrast" + (" (on)" if prefs.high_contrast else ""), use_container_width=True):
        prefs.toggle_contrast()
        st.rerun()
