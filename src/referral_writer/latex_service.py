"""Compile LaTeX resumes through a remote service and estimate their length."""

import io
import math
import re
from dataclasses import dataclass
from typing import Optional

import requests
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .config import get_latex_compile_url
from .errors import CompileError
from .logging_config import get_logger

logger = get_logger(__name__)

TEX_FILENAME = "resume.tex"
REQUEST_TIMEOUT_SECONDS = 60

_SECTION_PATTERN = re.compile(r"\\section")
_SUBSECTION_PATTERN = re.compile(r"\\subsection")
_ITEM_PATTERN = re.compile(r"\\item")


@dataclass
class CompiledPdf:
    """PDF bytes returned by the compile service."""
    content: bytes
    page_count: int


def estimate_page_count(latex_code: str) -> int:
    """Rough page estimate without compiling.

    Weights: 0.15 per section, 0.08 per subsection, 0.03 per item and
    0.001 per non-empty line, rounded up, at least 1. Empty input is 0.
    """
    if not latex_code.strip():
        return 0

    sections = len(_SECTION_PATTERN.findall(latex_code))
    subsections = len(_SUBSECTION_PATTERN.findall(latex_code))
    items = len(_ITEM_PATTERN.findall(latex_code))
    lines = sum(1 for line in latex_code.split("\n") if line.strip())

    estimated = sections * 0.15 + subsections * 0.08 + items * 0.03 + lines * 0.001
    return max(1, math.ceil(estimated))


def count_pdf_pages(content: bytes) -> int:
    """Number of pages in a PDF.

    Raises:
        CompileError: If the bytes are not a readable PDF
    """
    try:
        return len(PdfReader(io.BytesIO(content)).pages)
    except PdfReadError as e:
        raise CompileError(
            "Compilation did not produce a valid PDF. Check your LaTeX syntax."
        ) from e


def compile_latex_to_pdf(latex_code: str, compile_url: Optional[str] = None) -> CompiledPdf:
    """Compile a LaTeX document with the remote compile service.

    Args:
        latex_code: Complete LaTeX source
        compile_url: Service endpoint (default: LATEX_COMPILE_URL)

    Returns:
        CompiledPdf with the PDF bytes and page count

    Raises:
        CompileError: If the service rejects the document or returns no PDF
    """
    if not latex_code.strip():
        raise CompileError("Please provide your LaTeX resume code first.")

    url = compile_url or get_latex_compile_url()
    files = {"filecontents[]": (TEX_FILENAME, latex_code.encode("utf-8"), "text/plain")}
    data = {"filename[]": TEX_FILENAME}

    try:
        response = requests.post(
            url,
            params={"target": TEX_FILENAME},
            files=files,
            data=data,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("LaTeX compile request failed: %s", e)
        raise CompileError(f"Failed to reach the LaTeX compile service: {e}") from e

    if not response.ok:
        logger.error("LaTeX compilation error (%s): %s", response.status_code, response.text)
        raise CompileError(response.text.strip() or "LaTeX compilation failed. Please check your code for syntax errors.")

    content_type = response.headers.get("Content-Type", "")
    if "pdf" not in content_type.lower():
        raise CompileError("Compilation did not produce a valid PDF. Check your LaTeX syntax.")

    pdf = CompiledPdf(content=response.content, page_count=count_pdf_pages(response.content))
    logger.info("Compiled LaTeX to %d page(s)", pdf.page_count)
    return pdf
