"""JSON-file stores for the profile, generation history and form templates."""

import json
import time
import uuid
from pathlib import Path
from typing import List, Optional

from .config import get_data_directory
from .errors import StorageError
from .logging_config import get_logger
from .models import REFERRAL_EMAIL, GeneratedDocument, HistoryRecord, JobRequest, Profile, TemplateRecord

logger = get_logger(__name__)

PROFILE_FILE = "profile.json"
HISTORY_FILE = "history.json"
TEMPLATES_FILE = "templates.json"
RESUME_FILE = "resume.tex"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


class JsonFileStore:
    """Read and write one JSON document on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self, default):
        """Load the document, or ``default`` if the file does not exist yet.

        Raises:
            StorageError: If the file cannot be read or parsed
        """
        if not self.path.exists():
            return default
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not load {self.path.name}: {e}") from e

    def read_records(self, from_dict) -> list:
        """Load a JSON list and build one record per entry with ``from_dict``.

        Raises:
            StorageError: If the file is unreadable or not a list of valid entries
        """
        data = self.read(default=[])
        if not isinstance(data, list):
            raise StorageError(f"Could not load {self.path.name}: expected a list of entries")
        try:
            return [from_dict(entry) for entry in data]
        except (TypeError, KeyError, AttributeError) as e:
            raise StorageError(f"Could not load {self.path.name}: malformed entry ({e})") from e

    def write(self, data) -> None:
        """Replace the document on disk.

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Could not save {self.path.name}: {e}") from e

    def delete(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {self.path.name}: {e}") from e


class ProfileRepository:
    """The candidate profile, written wholesale on save."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = get_data_directory()
        self.store = JsonFileStore(Path(data_dir) / PROFILE_FILE)

    def load(self) -> Profile:
        """Saved profile with empty fields filled from USER_* variables."""
        data = self.store.read(default=None)
        defaults = Profile.from_env()
        if not data:
            return defaults
        return Profile.from_dict(data).merged_over(defaults)

    def save(self, profile: Profile) -> None:
        self.store.write(profile.to_dict())
        logger.info("Saved profile to %s", self.store.path)


class HistoryRepository:
    """Generated documents, newest first, capped at MAX_ENTRIES."""

    MAX_ENTRIES = 50

    def __init__(self, data_dir: Optional[Path] = None, max_entries: int = MAX_ENTRIES):
        if data_dir is None:
            data_dir = get_data_directory()
        self.store = JsonFileStore(Path(data_dir) / HISTORY_FILE)
        self.max_entries = max_entries

    def list(self) -> List[HistoryRecord]:
        return self.store.read_records(HistoryRecord.from_dict)

    def _write(self, records: List[HistoryRecord]) -> None:
        self.store.write([record.to_dict() for record in records])

    def append(
        self,
        document: GeneratedDocument,
        request: JobRequest,
        timestamp: Optional[int] = None,
    ) -> HistoryRecord:
        """Record a successful generation.

        Returns:
            The stored record
        """
        record = HistoryRecord(
            id=_new_id(),
            timestamp=timestamp if timestamp is not None else _now_ms(),
            subject=document.subject,
            company_name=request.company_name,
            role=request.role,
            email=document.to_clipboard_text(),
            type=document.kind or REFERRAL_EMAIL,
        )
        records = [record] + self.list()
        self._write(records[:self.max_entries])
        return record

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        for record in self.list():
            if record.id == record_id:
                return record
        return None

    def search(self, term: str) -> List[HistoryRecord]:
        """Records whose company, role or subject contains ``term`` (case-insensitive)."""
        term = term.strip().lower()
        if not term:
            return self.list()
        return [
            record for record in self.list()
            if term in record.company_name.lower()
            or term in record.role.lower()
            or term in record.subject.lower()
        ]

    def delete(self, record_id: str) -> bool:
        """Delete one record.

        Returns:
            True if a record was removed
        """
        records = self.list()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        return True

    def clear(self) -> None:
        self.store.delete()


class TemplateRepository:
    """Named JobRequest snapshots that can be re-applied to the form."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = get_data_directory()
        self.store = JsonFileStore(Path(data_dir) / TEMPLATES_FILE)

    def list(self) -> List[TemplateRecord]:
        return self.store.read_records(TemplateRecord.from_dict)

    def _write(self, templates: List[TemplateRecord]) -> None:
        self.store.write([template.to_dict() for template in templates])

    def save(self, name: str, request: JobRequest, timestamp: Optional[int] = None) -> TemplateRecord:
        """Save the current form as a template (newest first).

        Raises:
            ValueError: If the name is empty
        """
        name = name.strip()
        if not name:
            raise ValueError("Template name cannot be empty")
        template = TemplateRecord(
            id=_new_id(),
            name=name,
            timestamp=timestamp if timestamp is not None else _now_ms(),
            data=JobRequest.from_dict(request.to_dict()),
        )
        self._write([template] + self.list())
        return template

    def get(self, template_id: str) -> Optional[TemplateRecord]:
        for template in self.list():
            if template.id == template_id:
                return template
        return None

    def apply(self, template_id: str) -> JobRequest:
        """Return a copy of the template's JobRequest to overwrite the form with.

        Raises:
            KeyError: If no template has this id
        """
        template = self.get(template_id)
        if template is None:
            raise KeyError(template_id)
        return JobRequest.from_dict(template.data.to_dict())

    def search(self, term: str) -> List[TemplateRecord]:
        """Templates whose name, company or role contains ``term``."""
        term = term.strip().lower()
        if not term:
            return self.list()
        return [
            template for template in self.list()
            if term in template.name.lower()
            or term in template.data.company_name.lower()
            or term in template.data.role.lower()
        ]

    def delete(self, template_id: str) -> bool:
        templates = self.list()
        remaining = [template for template in templates if template.id != template_id]
        if len(remaining) == len(templates):
            return False
        self._write(remaining)
        return True


class ResumeRepository:
    """The LaTeX source the resume builder is working on."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = get_data_directory()
        self.path = Path(data_dir) / RESUME_FILE

    def load(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not load {self.path.name}: {e}") from e

    def save(self, latex_code: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(latex_code, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not save {self.path.name}: {e}") from e
