"""Lunisolar Hijri Calendar — Streamlit app overlaying moon phases with estimated Hijri dates."""

import pandas as pd
import streamlit as st
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from lunisolarhijri.calendar_view import build_calendar, entries_in_month  # noqa: E402
from lunisolarhijri.config import load_settings  # noqa: E402
from lunisolarhijri.i18n import gregorian_month_name, t  # noqa: E402
from lunisolarhijri.models import CalendarView  # noqa: E402
from lunisolarhijri.renderers.plotly_calendar import render_month_chart  # noqa: E402
from lunisolarhijri.sources import EventSourceError, PhaseTableSource  # noqa: E402

_settings = load_settings()

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ar" if _browser_lang.lower().startswith("ar") else _settings.lang

_lang: str = st.session_state.get("lang", _settings.lang)

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="☾",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0d1b35 !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    h1, label, [data-testid="stWidgetLabel"] p {
        color: #e8e8e8 !important;
    }
    .overlay-box {
        border-radius: 12px;
        padding: 1.2rem 1.6rem;
        margin-bottom: 0.5rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)


@st.cache_data(show_spinner=False)
def _load_view(location: str, lang: str, timeout: float) -> CalendarView:
    return build_calendar(PhaseTableSource(location, timeout=timeout), lang=lang)


st.title(t("page_title", _lang))

location = st.text_input(t("label_source", _lang), value=_settings.phase_table)

with st.spinner(t("loading", _lang)):
    try:
        view = _load_view(location, _lang, _settings.http_timeout)
    except EventSourceError as e:
        st.markdown(
            f"<div class='overlay-box' style='border:1px solid #ff6b6b; color:#ff9999;'>"
            f"{t('error', _lang).format(error=e)}</div>",
            unsafe_allow_html=True,
        )
        st.stop()

if not view.entries or view.earliest is None:
    st.info(t("no_events", _lang))
    st.stop()

# --- Month selection (initial view: earliest event) ---
if "view_month" not in st.session_state:
    st.session_state.view_month = (view.earliest.year, view.earliest.month)

_first_year = view.earliest.year
_last_year = max(e.start.year for e in view.entries)
_init_year, _init_month = st.session_state.view_month

col1, col2 = st.columns(2)
with col1:
    year = st.number_input(
        t("label_year", _lang),
        min_value=_first_year,
        max_value=_last_year,
        value=min(max(_init_year, _first_year), _last_year),
        step=1,
    )
with col2:
    month = st.selectbox(
        t("label_month", _lang),
        options=list(range(1, 13)),
        index=_init_month - 1,
        format_func=lambda m: gregorian_month_name(m, _lang),
    )
st.session_state.view_month = (int(year), int(month))

fig = render_month_chart(view, int(year), int(month), lang=_lang)
st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})

month_entries = entries_in_month(view, int(year), int(month))
if month_entries:
    st.dataframe(
        pd.DataFrame(
            {
                t("column_gregorian", _lang): [e.gregorian_date for e in month_entries],
                t("column_phase", _lang): [e.title.split(" - ")[0] for e in month_entries],
                t("column_hijri", _lang): [e.hijri_date for e in month_entries],
                t("column_eclipse", _lang): [e.eclipse or "" for e in month_entries],
            }
        ),
        hide_index=True,
        use_container_width=True,
    )
