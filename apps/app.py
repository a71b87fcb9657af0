"""
CCK-8 Viability Calculator: Streamlit UI for loading plate readings and computing viability.

Upload a CSV or Excel export with Blank and Control groups; the app shows the
per-treatment results table, a viability bar chart, and CSV/PDF downloads.
"""

import matplotlib.pyplot as plt
import streamlit as st

from cck8_viability.assessment import compute_viability, results_to_frame
from cck8_viability.constants import BLANK_GROUP, CONTROL_GROUP, OUTLIER_SD_FRACTION
from cck8_viability.data import (
    load_viability_data,
    readings_to_frame,
    validate_readings,
)
from cck8_viability.exceptions import ViabilityAnalysisError
from cck8_viability.report import build_viability_pdf, viability_report_key
from cck8_viability.visualization import plot_viability_bar

st.set_page_config(
    page_title="CCK-8 Viability Calculator",
    page_icon="🧪",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------


@st.cache_data
def _load_from_uploaded(filename: str, _content: bytes, content_key: int) -> list:
    """
    Parse uploaded file bytes into readings.

    Args:
        filename: Upload name; its extension selects the parser.
        _content: Raw file bytes. Leading underscore excludes it from hashing.
        content_key: Hash of the bytes, used as the cache key instead.

    Returns:
        List of Reading records.
    """
    return load_viability_data(_content, filename=filename)


st.sidebar.markdown("# 📁 Data Loading")
uploaded = st.sidebar.file_uploader(
    "Upload plate data (.csv, .xlsx, .xls)",
    type=["csv", "xlsx", "xls"],
    help=(
        "Wide layout: first row holds group names, each column holds replicate "
        "OD450 values. Long layout: Treatment and OD450 columns."
    ),
)

st.sidebar.markdown("#### Analysis settings")
blank_label = st.sidebar.text_input("Blank group name", value=BLANK_GROUP)
control_label = st.sidebar.text_input("Control group name", value=CONTROL_GROUP)
outlier_threshold = st.sidebar.slider(
    "Outlier trigger (SD / mean)",
    min_value=0.05,
    max_value=0.5,
    value=OUTLIER_SD_FRACTION,
    step=0.05,
    help=(
        "Groups of 3+ replicates whose SD exceeds this fraction of the mean "
        "lose their lowest and highest value."
    ),
)

st.title("CCK-8 Cell Viability")

if uploaded is None:
    st.info("👆 Upload a CSV or Excel file using the sidebar.")
    st.stop()

content = uploaded.getvalue()
try:
    readings = _load_from_uploaded(uploaded.name, content, hash(content))
except (ViabilityAnalysisError, FileNotFoundError) as e:
    st.error(f"Could not load `{uploaded.name}`: {e}")
    st.stop()

st.sidebar.success(f"Loaded **{len(readings)}** readings from `{uploaded.name}`.")

with st.expander("Parsed readings", expanded=False):
    st.dataframe(readings_to_frame(readings), use_container_width=True, hide_index=True)

problems = validate_readings(
    readings, blank_label=blank_label, control_label=control_label
)
if problems:
    for problem in problems:
        st.error(problem)
    st.stop()

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
try:
    results = compute_viability(
        readings,
        blank_label=blank_label,
        control_label=control_label,
        outlier_threshold=outlier_threshold,
    )
except ViabilityAnalysisError as e:
    st.error(str(e))
    st.stop()

if not results:
    st.warning("No treatment groups besides the blank were found.")
    st.stop()

st.markdown(f"### Results for `{uploaded.name}`")
st.dataframe(results_to_frame(results), use_container_width=True, hide_index=True)

trimmed = [r.treatment for r in results if r.outliers_removed]
if trimmed:
    st.caption(f"Lowest and highest replicate excluded for: {', '.join(trimmed)}")

try:
    fig = plot_viability_bar(results, control_label=control_label)
    st.pyplot(fig, use_container_width=True)
except ValueError as e:
    fig = None
    st.error(f"Plot error: {e}")

# ---------------------------------------------------------------------------
# Downloads
# ---------------------------------------------------------------------------
c_csv, c_pdf = st.columns(2)
with c_csv:
    st.download_button(
        label="Download CSV",
        data=results_to_frame(results, formatted=False).to_csv(index=False),
        file_name="cck8_viability_results.csv",
        mime="text/csv",
        key="csv_download",
    )
report_key = viability_report_key(
    uploaded.name,
    content,
    blank_label=blank_label,
    control_label=control_label,
    outlier_threshold=outlier_threshold,
)
if st.session_state.get("viability_pdf_key") != report_key:
    st.session_state.pop("viability_pdf", None)

with c_pdf:
    if st.button("Generate PDF report", key="generate_pdf"):
        try:
            st.session_state["viability_pdf"] = build_viability_pdf(
                results,
                chart_fig=fig,
                source_name=uploaded.name,
                outlier_threshold=outlier_threshold,
            )
            st.session_state["viability_pdf_key"] = report_key
            st.success("Report generated. Click Download below.")
        except Exception as e:
            st.error(f"Report generation failed: {e}")
    if "viability_pdf" in st.session_state:
        st.download_button(
            label="Download PDF",
            data=st.session_state["viability_pdf"],
            file_name="cck8_viability_report.pdf",
            mime="application/pdf",
            key="pdf_download",
        )

if fig is not None:
    plt.close(fig)
