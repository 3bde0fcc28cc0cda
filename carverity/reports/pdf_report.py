"""Printable PDF export of an inspection analysis, built with ReportLab."""

import io
import logging
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from ..models.analysis import AnalysisResult, DeterministicExplanation
from ..utils.errors import handle_report_error

logger = logging.getLogger(__name__)

PAGE_SIZES = {"A4": A4, "letter": letter}

VERDICT_COLOURS = {
    "proceed": colors.HexColor('#047857'),
    "caution": colors.HexColor('#b45309'),
    "walk-away": colors.HexColor('#b91c1c'),
}

VERDICT_TITLES = {
    "proceed": "Proceed",
    "caution": "Proceed with caution",
    "walk-away": "Walk away",
}


def _format_aud(value: int) -> str:
    return f"${value:,}"


def _bullets(lines: List[str], style) -> List[Paragraph]:
    return [Paragraph(f"• {escape(line)}", style) for line in lines]


def build_report_pdf(
    result: AnalysisResult,
    explanation: Optional[DeterministicExplanation] = None,
    title: Optional[str] = None,
    page_size: str = "A4",
    scan_id: Optional[str] = None,
) -> bytes:
    """
    Render an analysis result as a PDF document.
    
    Args:
        result: Analysis result to render
        explanation: Optional deterministic explanation to include
        title: Document title
        page_size: "A4" or "letter"
        scan_id: Optional scan identifier shown under the title
        
    Returns:
        PDF file contents
        
    Raises:
        ReportRenderingError: If ReportLab fails to build the document
    """
    buffer = io.BytesIO()
    title = title or "In-person inspection report"
    
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=PAGE_SIZES.get(page_size, A4),
            title=title,
            leftMargin=0.8*inch,
            rightMargin=0.8*inch,
        )
        story = []
        styles = getSampleStyleSheet()
        
        title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=18,
            textColor=colors.HexColor('#0f172a'),
            spaceAfter=6,
            alignment=TA_CENTER
        )
        verdict_style = ParagraphStyle(
            'Verdict',
            parent=styles['Heading2'],
            textColor=VERDICT_COLOURS.get(result.verdict, colors.black),
        )
        body = styles['Normal']
        
        story.append(Paragraph(escape(title), title_style))
        if scan_id:
            story.append(Paragraph(f"Scan {escape(scan_id)}", styles['Italic']))
        story.append(Spacer(1, 0.2*inch))
        
        # Verdict and scores
        story.append(Paragraph(VERDICT_TITLES.get(result.verdict, result.verdict), verdict_style))
        story.append(Paragraph(escape(result.verdict_reason), body))
        story.append(Spacer(1, 0.15*inch))
        
        score_table = Table(
            [
                ['Confidence:', f"{result.confidence_score}/100"],
                ['Evidence coverage:', f"{result.completeness_score}/100"],
                ['Photos captured:', str(result.evidence_summary.photos_captured)],
                ['Checks completed:', str(result.evidence_summary.checks_completed)],
            ],
            colWidths=[2*inch, 4*inch]
        )
        score_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), colors.lightgrey),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        story.append(score_table)
        story.append(Spacer(1, 0.2*inch))
        
        if explanation is not None:
            story.append(Paragraph(escape(explanation.headline), styles['Heading2']))
            for section in explanation.sections:
                story.append(Paragraph(f"<b>{escape(section.title)}</b>", body))
                story.append(Paragraph(escape(section.body), body))
                story.append(Spacer(1, 0.08*inch))
            story.append(Paragraph(f"<b>Next step:</b> {escape(explanation.next_best_action)}", body))
            story.append(Spacer(1, 0.2*inch))
        
        # Risks
        story.append(Paragraph("Recorded risks", styles['Heading2']))
        if result.risks:
            risk_rows = [['Severity', 'Finding']]
            for risk in result.risks:
                risk_rows.append([
                    risk.severity.capitalize(),
                    Paragraph(f"<b>{escape(risk.label)}</b><br/>{escape(risk.explanation)}", body),
                ])
            risk_table = Table(risk_rows, colWidths=[1.1*inch, 5.2*inch], repeatRows=1)
            risk_table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e2e8f0')),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 9),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ]))
            story.append(risk_table)
        else:
            story.append(Paragraph("No risks were recorded.", body))
        story.append(Spacer(1, 0.2*inch))
        
        # Evidence
        story.append(Paragraph("What you captured", styles['Heading2']))
        story.append(Paragraph(escape(result.evidence_summary.summary), body))
        story.extend(_bullets(result.evidence_summary.bullets, body))
        story.append(Spacer(1, 0.2*inch))
        
        # Negotiation
        story.append(Paragraph("Negotiation positioning", styles['Heading2']))
        positioning = result.negotiation_positioning
        band_rows = [['Stance', 'Range (AUD)', 'Rationale']]
        for stance, band in (
            ('Conservative', positioning.conservative),
            ('Balanced', positioning.balanced),
            ('Aggressive', positioning.aggressive),
        ):
            band_rows.append([
                stance,
                f"{_format_aud(band.aud_low)} – {_format_aud(band.aud_high)}",
                Paragraph(escape(band.rationale), body),
            ])
        band_table = Table(band_rows, colWidths=[1.1*inch, 1.5*inch, 3.7*inch])
        band_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e2e8f0')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        story.append(Paragraph(escape(positioning.balanced.label), styles['Italic']))
        story.append(band_table)
        story.append(Spacer(1, 0.2*inch))
        
        for group in result.negotiation_leverage:
            story.append(Paragraph(escape(group.category), styles['Heading3']))
            story.extend(Paragraph(escape(point), body) for point in group.points)
        story.append(Spacer(1, 0.2*inch))
        
        # What would change the outcome
        story.append(Paragraph("What would change this result", styles['Heading2']))
        story.extend(_bullets(result.counterfactuals, body))
        story.append(Spacer(1, 0.2*inch))
        
        story.append(Paragraph("Guidance by buyer type", styles['Heading2']))
        for item in result.buyer_context_interpretation:
            story.append(Paragraph(f"<b>{escape(item.buyer_type)}:</b> {escape(item.guidance)}", body))
        
        doc.build(story)
    except Exception as e:
        handle_report_error(e, logger, scan_id=scan_id)
    
    pdf = buffer.getvalue()
    logger.info(f"Rendered inspection report ({len(pdf)} bytes)")
    return pdf
