"""
PDF report generation for CCK-8 viability results.

Uses ReportLab to compile the results table, a short method note, and the
viability bar chart into a single document.
"""

import hashlib
import io
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from cck8_viability.assessment.viability import ViabilityResult, results_to_frame
from cck8_viability.constants import (
    BLANK_GROUP,
    CONTROL_GROUP,
    OUTLIER_SD_FRACTION,
)


def viability_report_key(
    source_name: str,
    content: bytes,
    *,
    blank_label: str = BLANK_GROUP,
    control_label: str = CONTROL_GROUP,
    outlier_threshold: float = OUTLIER_SD_FRACTION,
) -> str:
    """
    Fingerprint the inputs a report is built from.

    A stored report is only valid while this key is unchanged; a new upload
    or different analysis settings give a different key.
    """
    digest = hashlib.sha256(content)
    digest.update(
        f"\0{source_name}\0{blank_label}\0{control_label}\0{outlier_threshold!r}".encode()
    )
    return digest.hexdigest()


def _df_to_table_data(df: pd.DataFrame) -> list[list[str]]:
    """Convert an already formatted DataFrame to list of lists for ReportLab Table."""
    df_str = df.fillna("—").astype(str)
    headers = [str(c) for c in df_str.columns]
    return [headers] + df_str.values.tolist()


def _figure_to_image_bytes(fig, *, dpi: int = 150, format: str = "png") -> bytes:
    """Serialize matplotlib Figure to PNG bytes."""
    buf = io.BytesIO()
    fig.savefig(buf, format=format, dpi=dpi, bbox_inches="tight")
    buf.seek(0)
    return buf.getvalue()


def build_viability_pdf(
    results: Sequence[ViabilityResult],
    *,
    chart_fig: Optional[Any] = None,
    source_name: Optional[str] = None,
    outlier_threshold: float = OUTLIER_SD_FRACTION,
    report_title: str = "CCK-8 Cell Viability Report",
    output_path: Optional[str | Path] = None,
) -> bytes:
    """
    Compile viability results into a PDF report.

    Args:
        results: Output of compute_viability.
        chart_fig: Optional matplotlib Figure (e.g. from plot_viability_bar).
        source_name: Input file name shown under the title.
        outlier_threshold: SD-to-mean fraction used for trimming (for report text).
        report_title: Title on first page.
        output_path: If provided, also save PDF to this path.

    Returns:
        PDF file contents as bytes (for Streamlit download).
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=18,
        spaceAfter=12,
    )
    heading_style = ParagraphStyle(
        "SectionHeading",
        parent=styles["Heading2"],
        fontSize=14,
        spaceBefore=18,
        spaceAfter=8,
    )
    body_style = styles["Normal"]

    flow: list = []

    flow.append(Paragraph(report_title, title_style))
    flow.append(
        Paragraph(
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
            body_style,
        )
    )
    if source_name:
        flow.append(Paragraph(f"Source file: {escape(source_name)}", body_style))
    flow.append(Spacer(1, 0.25 * inch))

    # 1. Results table
    flow.append(Paragraph("1. Viability by Treatment", heading_style))
    flow.append(
        Paragraph(
            f"OD450 values are corrected by the mean of the {BLANK_GROUP} wells. "
            f"Viability is the blank-corrected treatment mean as a percentage of "
            f"the blank-corrected {CONTROL_GROUP} mean ({CONTROL_GROUP} = 100%). "
            f"When a group of three or more replicates has a standard deviation "
            f"above {outlier_threshold:.0%} of its mean, its lowest and highest "
            f"values are excluded. SD is reported before exclusion.",
            body_style,
        )
    )
    flow.append(Spacer(1, 0.1 * inch))

    if results:
        table_data = _df_to_table_data(results_to_frame(results))
        col_widths = [
            0.9 * inch,
            1.5 * inch,
            1.5 * inch,
            0.7 * inch,
            0.75 * inch,
            0.65 * inch,
            0.5 * inch,
        ]
        cell_style = ParagraphStyle("Cell", parent=body_style, fontSize=8, leading=10)
        wrapped = [table_data[0]] + [
            [Paragraph(escape(cell), cell_style) for cell in row] for row in table_data[1:]
        ]
        t = Table(wrapped, colWidths=col_widths, repeatRows=1)
        t.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4472C4")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 8),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#f5f5f5")],
                    ),
                ]
            )
        )
        flow.append(t)
        trimmed = [r.treatment for r in results if r.outliers_removed]
        if trimmed:
            flow.append(Spacer(1, 0.1 * inch))
            flow.append(
                Paragraph(
                    f"<i>Extreme replicates excluded for: {escape(', '.join(trimmed))}</i>",
                    body_style,
                )
            )
    else:
        flow.append(Paragraph("<i>No results.</i>", body_style))
    flow.append(Spacer(1, 0.3 * inch))

    # 2. Chart
    if chart_fig is not None:
        flow.append(Paragraph("2. Viability Chart", heading_style))
        img_bytes = _figure_to_image_bytes(chart_fig)
        img = Image(io.BytesIO(img_bytes), width=5.5 * inch, height=3.5 * inch)
        flow.append(img)

    doc.build(flow)
    pdf_bytes = buffer.getvalue()

    if output_path is not None:
        Path(output_path).write_bytes(pdf_bytes)

    return pdf_bytes
