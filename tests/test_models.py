"""Unit tests for the data model."""

from unittest.mock import patch

from src.referral_writer.models import (
    COVER_LETTER,
    DEFAULT_SKILLS,
    REFERRAL_EMAIL,
    ClosingItem,
    GeneratedDocument,
    HistoryRecord,
    JobRequest,
    Profile,
    TemplateRecord,
)


class TestJobRequest:
    """Tests for JobRequest."""

    def test_missing_fields_referral(self):
        request = JobRequest(company_name="Acme", role=" ", job_id="")
        assert request.missing_fields(REFERRAL_EMAIL) == ["role", "job_id"]

    def test_missing_fields_cover_letter_ignores_job_id(self):
        request = JobRequest(company_name="Acme", role="SWE")
        assert request.missing_fields(COVER_LETTER) == []

    def test_to_dict_uses_camel_case(self):
        data = JobRequest(company_name="Acme", include_job_id=True).to_dict()
        assert data["companyName"] == "Acme"
        assert data["includeJobId"] is True
        assert data["additionalInstructions"] == ""
        assert "company_name" not in data

    def test_from_dict_accepts_both_key_styles(self):
        request = JobRequest.from_dict({"companyName": "Acme", "job_id": "J1", "unknown": 1})
        assert request.company_name == "Acme"
        assert request.job_id == "J1"
        assert request.role == ""

    def test_dict_round_trip(self):
        request = JobRequest(company_name="Acme", role="SWE", job_id="J1", include_contact=True)
        assert JobRequest.from_dict(request.to_dict()) == request


class TestProfile:
    """Tests for Profile."""

    def test_default_skills(self):
        assert Profile().skills == DEFAULT_SKILLS

    def test_from_env(self):
        with patch.dict("os.environ", {"USER_NAME": "Jane Doe", "USER_EMAIL": "jane@example.com"}):
            profile = Profile.from_env()
        assert profile.name == "Jane Doe"
        assert profile.email_id == "jane@example.com"

    def test_merged_over_keeps_saved_values(self):
        saved = Profile(name="Saved Name", cgpa="")
        defaults = Profile(name="Env Name", cgpa="9.1")
        merged = saved.merged_over(defaults)
        assert merged.name == "Saved Name"
        assert merged.cgpa == "9.1"

    def test_to_dict_keys(self):
        data = Profile(graduation_year="2025").to_dict()
        assert data["graduationYear"] == "2025"
        assert "emailId" in data


class TestClosingItem:
    def test_render(self):
        assert ClosingItem("Job ID", "J1").render() == "Job ID: J1"


class TestGeneratedDocument:
    """Tests for the clipboard format."""

    def test_with_subject(self):
        document = GeneratedDocument(subject="Hello", body="Body text")
        assert document.to_clipboard_text() == "Subject: Hello\n\nBody text"

    def test_without_subject(self):
        document = GeneratedDocument(subject="", body="Body text")
        assert document.to_clipboard_text() == "Body text"


class TestRecords:
    """Tests for stored record shapes."""

    def test_history_record_shape(self):
        record = HistoryRecord(
            id="1", timestamp=1700000000000, subject="S", company_name="Acme",
            role="SWE", email="Subject: S\n\nBody", type=COVER_LETTER,
        )
        data = record.to_dict()
        assert set(data) == {"id", "timestamp", "subject", "companyName", "role", "email", "type"}
        assert HistoryRecord.from_dict(data) == record

    def test_history_record_default_type(self):
        record = HistoryRecord.from_dict({
            "id": "1", "timestamp": 1, "subject": "", "companyName": "A", "role": "R", "email": "",
        })
        assert record.type == REFERRAL_EMAIL

    def test_template_record_round_trip(self):
        template = TemplateRecord(id="t1", name="Backend", timestamp=5, data=JobRequest(role="SWE"))
        data = template.to_dict()
        assert data["data"]["role"] == "SWE"
        assert TemplateRecord.from_dict(data) == template
