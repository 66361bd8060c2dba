"""Turn raw LLM output into a finished GeneratedDocument."""

import re
from typing import List, Tuple

from .bold import to_bold
from .logging_config import get_logger
from .models import COVER_LETTER, REFERRAL_EMAIL, ClosingItem, GeneratedDocument, JobRequest
from .prompts import ASK_PARAGRAPH, SIGN_OFF, THANK_YOU_LINE

logger = get_logger(__name__)

# Closing labels in output order, with the (flag, value) attributes backing each
CLOSING_FIELDS = (
    ("Resume", "include_resume_link", "resume_link"),
    ("Job ID", "include_job_id", "job_id"),
    ("Job Link", "include_job_link", "job_link"),
    ("Email", "include_email_id", "email_id"),
    ("Contact", "include_contact", "contact"),
)
CLOSING_LABELS = tuple(label for label, _, _ in CLOSING_FIELDS)

_THANK_YOU_PATTERN = re.compile(re.escape(THANK_YOU_LINE), re.IGNORECASE)
_SIGN_OFF_PATTERN = re.compile(re.escape(SIGN_OFF), re.IGNORECASE)
_SUBJECT_PREFIX = re.compile(r"^subject:\s*", re.IGNORECASE)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

# A line that starts with a closing label, plain or already bolded
_CLOSING_LINE_PATTERN = re.compile(
    r"^[ \t]*(?:"
    + "|".join(re.escape(label) for label in CLOSING_LABELS)
    + "|"
    + "|".join(re.escape(to_bold(label)) for label in CLOSING_LABELS)
    + r"):[^\n]*(?:\n|$)",
    re.IGNORECASE | re.MULTILINE,
)


def build_closing_items(request: JobRequest) -> List[ClosingItem]:
    """Closing items whose flag is set and whose value is non-empty, in fixed order."""
    items = []
    for label, flag, attr in CLOSING_FIELDS:
        value = (getattr(request, attr) or "").strip()
        if getattr(request, flag) and value:
            items.append(ClosingItem(label, value))
    return items


def strip_closing_lines(text: str) -> str:
    """Remove lines that start with a closing label and collapse blank runs."""
    cleaned = _CLOSING_LINE_PATTERN.sub("", text)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()


def _split_at_anchor(text: str) -> Tuple[str, str, str]:
    """Split text into (before, after, anchor name) at the closing anchor.

    Falls back from the thank-you line to the sign-off to the end of the text.
    """
    match = _THANK_YOU_PATTERN.search(text)
    if match:
        return text[:match.start()].strip(), text[match.start():], "thank_you"

    match = _SIGN_OFF_PATTERN.search(text)
    if match:
        return text[:match.start()].strip(), text[match.start():], "sign_off"

    return text, "", "end"


def insert_closing_items(text: str, items: List[ClosingItem]) -> str:
    """Insert the closing block before the thank-you line (or its fallbacks).

    Lines that already look like closing items are removed from the part
    before the anchor first, so re-running on finished output is stable.
    """
    before, after, anchor = _split_at_anchor(text)
    if anchor == "end" and items:
        logger.warning("No closing anchor found; appending closing items at the end")

    parts = [strip_closing_lines(before)]
    if items:
        parts.append("\n\n".join(item.render() for item in items))
    if after:
        parts.append(after)
    return "\n\n".join(part for part in parts if part)


def apply_label_styling(text: str) -> str:
    """Bold each closing label (label only) and the fixed ask paragraph."""
    for label in CLOSING_LABELS:
        text = text.replace(f"{label}:", f"{to_bold(label)}:")
    if ASK_PARAGRAPH in text:
        text = text.replace(ASK_PARAGRAPH, to_bold(ASK_PARAGRAPH), 1)
    return text


def split_subject_body(text: str) -> Tuple[str, str]:
    """Split "Subject: ..." off the first line.

    Returns:
        Tuple of (subject, body); subject is "" when the first line is not a
        subject line, in which case the body is the whole text.
    """
    lines = text.split("\n")
    first_line = lines[0]
    if not first_line.lower().startswith("subject:"):
        return "", text

    subject = _SUBJECT_PREFIX.sub("", first_line).strip()
    body_lines = lines[1:]
    while body_lines and not body_lines[0].strip():
        body_lines.pop(0)
    return subject, "\n".join(body_lines)


def finalize_referral_email(raw_text: str, request: JobRequest) -> GeneratedDocument:
    """Post-process raw model output into the final referral email.

    Args:
        raw_text: Text returned by the LLM
        request: The request the email was generated for (closing flags/values)

    Returns:
        GeneratedDocument with subject and body
    """
    text = raw_text.strip()
    items = build_closing_items(request)
    text = insert_closing_items(text, items)
    text = apply_label_styling(text)
    subject, body = split_subject_body(text.strip())
    return GeneratedDocument(subject=subject, body=body, kind=REFERRAL_EMAIL)


def finalize_cover_letter(raw_text: str) -> GeneratedDocument:
    """Cover letters get the subject/body split only."""
    subject, body = split_subject_body(raw_text.strip())
    return GeneratedDocument(subject=subject, body=body, kind=COVER_LETTER)


def repair_subject(document: GeneratedDocument, request: JobRequest) -> GeneratedDocument:
    """Append the job ID to a subject line that lost it.

    The prompt asks for "Referral Request for <role> - Job ID: <id>" but the
    model does not always comply. Empty subjects are left alone.
    """
    job_id = request.job_id.strip()
    if not document.subject or not job_id or job_id in document.subject:
        return document

    logger.info("Subject line missing job ID %s; repairing", job_id)
    subject = f"{document.subject} - {to_bold('Job ID')}: {job_id}"
    return GeneratedDocument(subject=subject, body=document.body, kind=document.kind)
