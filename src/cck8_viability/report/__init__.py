"""
PDF report generation for viability results.
"""

from .pdf_builder import build_viability_pdf, viability_report_key

__all__ = [
    "build_viability_pdf",
    "viability_report_key",
]
