"""Data model for referral emails and cover letters."""

import os
from dataclasses import asdict, dataclass, field, fields
from typing import List

# Request kinds
REFERRAL_EMAIL = "email"
COVER_LETTER = "cover_letter"

# Fields that must be filled before a request of each kind is issued
REQUIRED_FIELDS = {
    REFERRAL_EMAIL: ("company_name", "role", "job_id"),
    COVER_LETTER: ("company_name", "role"),
}

FIELD_LABELS = {
    "company_name": "Company Name",
    "role": "Role",
    "job_id": "Job ID",
}

DEFAULT_SKILLS = """- Languages: Java, Python, C/C++, JavaScript, TypeScript
- Frontend: React.js, Next.js, Tailwind CSS, Bootstrap
- Backend: Node.js, Express.js, RESTful APIs, JWT/OAuth, WebSockets
- Databases: PostgreSQL, MySQL, MongoDB, Redis
- CS Core: DSA, OOP, Operating Systems, DBMS, Software Architecture
- Tools: Git, GitHub, Postman, Figma
- Cloud/DevOps: AWS (EC2, S3), GCP, Docker, Linux
- Methodologies: Agile (Scrum, Kanban)"""


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _camel_dict(obj) -> dict:
    return {_to_camel(key): value for key, value in asdict(obj).items()}


def _from_camel_dict(cls, data: dict):
    """Build a dataclass from a camelCase (or snake_case) dict, ignoring unknown keys."""
    kwargs = {}
    for f in fields(cls):
        for key in (_to_camel(f.name), f.name):
            if key in data:
                kwargs[f.name] = data[key]
                break
    return cls(**kwargs)


@dataclass
class JobRequest:
    """Form input describing one job and the formatting preferences."""
    company_name: str = ""
    role: str = ""
    job_id: str = ""
    job_description: str = ""
    job_link: str = ""
    resume_link: str = ""
    additional_instructions: str = ""
    email_id: str = ""
    contact: str = ""
    include_resume_link: bool = False
    include_job_id: bool = False
    include_job_link: bool = False
    include_email_id: bool = False
    include_contact: bool = False
    include_projects: bool = False
    include_experience: bool = False

    def missing_fields(self, kind: str = REFERRAL_EMAIL) -> List[str]:
        """Names of required fields that are empty for this request kind."""
        return [
            name for name in REQUIRED_FIELDS[kind]
            if not str(getattr(self, name) or "").strip()
        ]

    def to_dict(self) -> dict:
        return _camel_dict(self)

    @staticmethod
    def from_dict(data: dict) -> "JobRequest":
        return _from_camel_dict(JobRequest, data)


@dataclass
class Profile:
    """Candidate identity, contact and background data."""
    name: str = ""
    degree: str = ""
    graduation_year: str = ""
    university: str = ""
    cgpa: str = ""
    resume_link: str = ""
    email_id: str = ""
    contact: str = ""
    website: str = ""
    experience: str = ""
    projects: str = ""
    skills: str = DEFAULT_SKILLS

    @staticmethod
    def from_env() -> "Profile":
        """Profile defaults from USER_* environment variables."""
        return Profile(
            name=os.getenv("USER_NAME", ""),
            degree=os.getenv("USER_DEGREE", ""),
            graduation_year=os.getenv("USER_GRADUATION_YEAR", ""),
            university=os.getenv("USER_UNIVERSITY", ""),
            cgpa=os.getenv("USER_CGPA", ""),
            resume_link=os.getenv("USER_RESUME_LINK", ""),
            email_id=os.getenv("USER_EMAIL", ""),
            contact=os.getenv("USER_PHONE", ""),
            website=os.getenv("USER_WEBSITE", ""),
        )

    def merged_over(self, defaults: "Profile") -> "Profile":
        """Return a copy where empty fields fall back to ``defaults``."""
        values = {}
        for f in fields(self):
            value = getattr(self, f.name)
            values[f.name] = value if str(value or "").strip() else getattr(defaults, f.name)
        return Profile(**values)

    def to_dict(self) -> dict:
        return _camel_dict(self)

    @staticmethod
    def from_dict(data: dict) -> "Profile":
        return _from_camel_dict(Profile, data)


@dataclass(frozen=True)
class ClosingItem:
    """One mechanically injected contact/reference line."""
    label: str
    value: str

    def render(self) -> str:
        return f"{self.label}: {self.value}"


@dataclass
class GeneratedDocument:
    """Subject/body pair produced by one successful generation."""
    subject: str = ""
    body: str = ""
    kind: str = REFERRAL_EMAIL

    def to_clipboard_text(self) -> str:
        """Text copied to the clipboard: subject header only when present."""
        if self.subject:
            return f"Subject: {self.subject}\n\n{self.body}"
        return self.body


@dataclass
class HistoryRecord:
    """One generated document in the history store."""
    id: str
    timestamp: int
    subject: str
    company_name: str
    role: str
    email: str
    type: str = REFERRAL_EMAIL

    def to_dict(self) -> dict:
        return _camel_dict(self)

    @staticmethod
    def from_dict(data: dict) -> "HistoryRecord":
        return _from_camel_dict(HistoryRecord, data)


@dataclass
class TemplateRecord:
    """A saved JobRequest that can be re-applied to the form."""
    id: str
    name: str
    timestamp: int
    data: JobRequest = field(default_factory=JobRequest)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "data": self.data.to_dict(),
        }

    @staticmethod
    def from_dict(data: dict) -> "TemplateRecord":
        return TemplateRecord(
            id=data["id"],
            name=data.get("name", ""),
            timestamp=data.get("timestamp", 0),
            data=JobRequest.from_dict(data.get("data") or {}),
        )
