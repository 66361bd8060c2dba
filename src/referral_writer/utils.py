"""Utility functions for naming exported files."""

import re
from typing import Optional

from .models import COVER_LETTER

# Longest file stem we produce, before the extension
MAX_NAME_LENGTH = 120

DOCUMENT_TITLES = {
    COVER_LETTER: "Cover Letter",
}
DEFAULT_DOCUMENT_TITLE = "Referral Email"


def clean_name_part(value: str) -> str:
    """Remove characters that are not allowed in file names."""
    return re.sub(r'[<>:"/\\|?*]', '', value).strip()


def create_export_name(
    company_name: Optional[str],
    role: Optional[str],
    kind: str,
    timestamp: str,
) -> str:
    """Create a file stem from company, role and document kind with the date.

    Args:
        company_name: Company name
        role: Role applied for
        kind: Document kind ("email" or "cover_letter")
        timestamp: Timestamp string in format YYYYMMDD_HHMMSS

    Returns:
        Name like "Company - Role - Referral Email - YYYY-MM-DD" or a
        timestamp-based fallback
    """
    title = DOCUMENT_TITLES.get(kind, DEFAULT_DOCUMENT_TITLE)
    date_created = f"{timestamp[:4]}-{timestamp[4:6]}-{timestamp[6:8]}"
    suffix = f"{title} - {date_created}"

    clean_company = clean_name_part(company_name or "")
    clean_role = clean_name_part(role or "")

    if clean_company and clean_role:
        base_name = f"{clean_company} - {clean_role}"
        # Truncate company and role while keeping the suffix
        max_base_length = MAX_NAME_LENGTH - len(suffix) - 3
        if len(base_name) > max_base_length:
            base_name = base_name[:max_base_length].rstrip()
        return f"{base_name} - {suffix}"
    elif clean_company:
        return f"{clean_company[:MAX_NAME_LENGTH - len(suffix) - 3]} - {suffix}"
    else:
        return f"{title.replace(' ', '_')}_{timestamp}"
