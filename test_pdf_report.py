"""Tests for the PDF report export."""

import pytest

from carverity import analyse_in_person_inspection, build_in_person_explanation
from carverity.reports import pdf_report
from carverity.reports.pdf_report import build_report_pdf
from carverity.utils.errors import ErrorType, ReportRenderingError


def test_report_renders_pdf_bytes(full_progress):
    full_progress["checks"]["aircon"] = {"value": "concern", "note": "<blows> warm & smells"}
    result = analyse_in_person_inspection(full_progress)
    
    pdf = build_report_pdf(
        result,
        explanation=build_in_person_explanation(result),
        title="Inspection report",
        scan_id="scan-full",
    )
    
    assert pdf.startswith(b"%PDF")


def test_report_renders_for_empty_record_on_letter(empty_progress):
    result = analyse_in_person_inspection(empty_progress)
    
    assert build_report_pdf(result, page_size="letter").startswith(b"%PDF")


def test_rendering_failure_is_wrapped(monkeypatch, empty_progress):
    def broken_build(self, story):
        raise ValueError("layout exploded")
    
    monkeypatch.setattr(pdf_report.SimpleDocTemplate, "build", broken_build)
    result = analyse_in_person_inspection(empty_progress)
    
    with pytest.raises(ReportRenderingError) as exc_info:
        build_report_pdf(result, scan_id="scan-1")
    
    assert exc_info.value.context.error_type == ErrorType.REPORT_RENDERING_FAILED
    assert exc_info.value.context.details == {"scan_id": "scan-1"}
    assert isinstance(exc_info.value.__cause__, ValueError)
