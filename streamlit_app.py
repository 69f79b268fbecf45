"""
Lighthouse Score Tracker - Streamlit viewer
Browse saved run summaries and the score history of a URL.

Run with: streamlit run streamlit_app.py
"""

import sys
from pathlib import Path

import streamlit as st
import streamlit.components.v1 as components

# Ensure project root is on the path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from engines.devices import DEVICES
from utils.config import Settings, get_secret, load_env_file, load_url_config
from utils.errors import ConfigError
from utils.result_store import ResultStore

load_env_file()

st.set_page_config(
    page_title="Lighthouse Score Tracker",
    page_icon="\U0001f4ca",
    layout="wide",
)


def viewer_unlocked() -> bool:
    """Gate the viewer behind APP_PASSWORD when one is configured."""
    expected = get_secret("APP_PASSWORD")
    if not expected or st.session_state.get("viewer_unlocked"):
        return True

    st.subheader("Lighthouse Score Tracker")
    with st.form("unlock"):
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Open viewer")
    if submitted:
        if password == expected:
            st.session_state["viewer_unlocked"] = True
            st.rerun()
        st.error("Incorrect password.")
    return False


if not viewer_unlocked():
    st.stop()

settings = Settings.from_env()
store = ResultStore(settings.results_dir)

with st.sidebar:
    st.caption("Lighthouse Score Tracker")
    st.text(f"Results: {store.root}")
    st.divider()
    view = st.radio("View", ["Run summaries", "Score history"])

# ---------------------------------------------------------------------------
# Run summaries
# ---------------------------------------------------------------------------

if view == "Run summaries":
    st.header("Run Summaries")

    summaries = store.list_summaries()
    if not summaries:
        st.info("No summaries yet. A summary is written once a URL has been audited twice.")
        st.stop()

    selected = st.selectbox(
        "Select Summary",
        [p.name for p in summaries],
        help="Summaries are listed most-recent first.",
    )

    summary_path = store.summary_dir / selected
    try:
        html_content = summary_path.read_text(encoding="utf-8")
    except OSError as e:
        st.error(f"Could not read summary: {e}")
        st.stop()

    components.html(html_content, height=800, scrolling=True)

    st.download_button(
        "Download Summary",
        html_content,
        file_name=selected,
        mime="text/html",
    )

# ---------------------------------------------------------------------------
# Score history for one URL/device
# ---------------------------------------------------------------------------

else:
    st.header("Score History")

    regions = store.list_regions()
    if not regions:
        st.info("No results found. Run `python audit.py` first.")
        st.stop()

    col1, col2 = st.columns(2)
    region = col1.selectbox("Region", regions)
    device = col2.selectbox("Device", DEVICES)

    urls = []
    try:
        urls = load_url_config(settings.urls_file).get(region, [])
    except ConfigError as e:
        st.warning(f"Could not read URL config: {e}")

    url = st.selectbox("URL", urls) if urls else st.text_input("URL")
    if not url:
        st.stop()

    history = store.history(region, device, url)
    if not history:
        st.info(f"No reports for **{url}** on {device} in {region}.")
        st.stop()

    rows = []
    for snapshot, report in history:
        row = {"Run": snapshot.timestamp}
        for category in report.categories.values():
            row[category.title] = round(category.percentage, 2)
        rows.append(row)

    st.dataframe(rows, use_container_width=True)

    st.line_chart(list(reversed(rows)), x="Run")

    latest_snapshot = history[0][0]
    artifact = latest_snapshot.report_path(device, url).with_suffix(".html")
    if artifact.exists():
        with st.expander(f"Latest Lighthouse report ({latest_snapshot.timestamp})"):
            components.html(artifact.read_text(encoding="utf-8"), height=800, scrolling=True)
