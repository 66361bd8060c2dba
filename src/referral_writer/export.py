"""Clipboard and PDF export for generated documents."""

from datetime import datetime
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

import pyperclip
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .bold import from_bold, is_bold_char
from .config import get_output_directory
from .logging_config import get_logger
from .models import GeneratedDocument
from .utils import create_export_name

logger = get_logger(__name__)

PAGE_MARGIN = 20 * mm
FONT_NAME = "Helvetica"
FONT_SIZE = 12


def format_for_clipboard(document: GeneratedDocument) -> str:
    """``Subject: <subject>`` header plus blank line when a subject exists, then the body."""
    return document.to_clipboard_text()


def copy_to_clipboard(text: str) -> None:
    """Copy text to the system clipboard.

    Raises:
        pyperclip.PyperclipException: If no clipboard mechanism is available
    """
    pyperclip.copy(text)
    logger.debug("Copied %d chars to clipboard", len(text))


def to_paragraph_markup(text: str) -> str:
    """Convert one paragraph to reportlab markup.

    Bold code points have no glyphs in the standard PDF fonts, so runs of
    them are mapped back to ASCII inside <b> tags. Line breaks are kept.
    """
    pieces = []
    run = []
    run_is_bold = False

    def close_run():
        if not run:
            return
        chunk = escape("".join(run))
        if run_is_bold:
            chunk = f"<b>{from_bold(chunk)}</b>"
        pieces.append(chunk)
        run.clear()

    for char in text:
        char_is_bold = is_bold_char(char)
        if char_is_bold != run_is_bold:
            close_run()
            run_is_bold = char_is_bold
        run.append(char)
    close_run()

    return "".join(pieces).replace("\n", "<br/>")


def create_document_pdf(text: str, output_path: Path) -> Path:
    """Render plain text to an A4 PDF (Helvetica 12, 20 mm margins, reflowed).

    Args:
        text: Document text; blank lines separate paragraphs
        output_path: Path where the PDF will be saved

    Returns:
        Path to the created PDF file
    """
    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        rightMargin=PAGE_MARGIN,
        leftMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
    )

    styles = getSampleStyleSheet()
    body_style = ParagraphStyle(
        'DocumentBody',
        parent=styles['Normal'],
        fontName=FONT_NAME,
        fontSize=FONT_SIZE,
        leading=FONT_SIZE * 1.25,
        alignment=TA_LEFT,
    )

    story = []
    for para in text.strip().split('\n\n'):
        if para.strip():
            story.append(Paragraph(to_paragraph_markup(para.strip()), body_style))
            story.append(Spacer(1, FONT_SIZE))

    doc.build(story)
    return output_path


def export_pdf(
    document: GeneratedDocument,
    company_name: str = "",
    role: str = "",
    output_dir: Optional[Path] = None,
    filename: Optional[str] = None,
) -> Path:
    """Export a generated document to PDF with an automatic filename.

    Args:
        document: Document to export (subject header included when present)
        company_name: Company name for the filename
        role: Role for the filename
        output_dir: Directory to save the PDF (default: OUTPUT_DIR)
        filename: Custom filename (default: built from company, role and date)

    Returns:
        Path to the generated PDF
    """
    if output_dir is None:
        output_dir = get_output_directory()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{create_export_name(company_name, role, document.kind, timestamp)}.pdf"

    output_path = output_dir / filename
    create_document_pdf(format_for_clipboard(document), output_path)
    logger.info("Exported PDF to %s", output_path)
    return output_path
