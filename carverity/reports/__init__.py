"""Report export for analysis results."""

from .pdf_report import build_report_pdf

__all__ = ['build_report_pdf']
