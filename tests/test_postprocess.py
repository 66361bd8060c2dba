"""Unit tests for the response post-processor."""

import pytest

from src.referral_writer.bold import to_bold
from src.referral_writer.models import COVER_LETTER, REFERRAL_EMAIL, ClosingItem, GeneratedDocument, JobRequest
from src.referral_writer.postprocess import (
    apply_label_styling,
    build_closing_items,
    finalize_cover_letter,
    finalize_referral_email,
    insert_closing_items,
    repair_subject,
    split_subject_body,
    strip_closing_lines,
)
from src.referral_writer.prompts import ASK_PARAGRAPH

RAW_EMAIL = (
    "Subject: Referral\n\n"
    "Hi Sir,\n...\n"
    "Thank you for your time and consideration.\n\n"
    "Warm regards,\nX"
)

CLOSING_LABELS = ("Resume:", "Job ID:", "Job Link:", "Email:", "Contact:")


def full_request(**overrides):
    values = dict(
        company_name="Acme",
        role="SDE",
        job_id="J1",
        job_link="https://acme.example/jobs/J1",
        resume_link="https://example.com/resume.pdf",
        email_id="jane@example.com",
        contact="+1 555 0100",
    )
    values.update(overrides)
    return JobRequest(**values)


def all_flags_request(**overrides):
    return full_request(
        include_resume_link=True,
        include_job_id=True,
        include_job_link=True,
        include_email_id=True,
        include_contact=True,
        **overrides,
    )


class TestClosingItems:
    """Tests for build_closing_items."""

    def test_fixed_order(self):
        items = build_closing_items(all_flags_request())
        assert [item.label for item in items] == ["Resume", "Job ID", "Job Link", "Email", "Contact"]

    def test_flag_false_excludes(self):
        assert build_closing_items(full_request()) == []

    def test_empty_value_excludes(self):
        items = build_closing_items(all_flags_request(contact="  ", job_link=""))
        assert [item.label for item in items] == ["Resume", "Job ID", "Email"]

    def test_values_trimmed(self):
        items = build_closing_items(full_request(job_id=" J1 ", include_job_id=True))
        assert items == [ClosingItem("Job ID", "J1")]


class TestSplitSubjectBody:
    """Tests for split_subject_body."""

    def test_subject_line(self):
        assert split_subject_body("Subject: Hello\n\n\nBody") == ("Hello", "Body")

    def test_case_insensitive(self):
        assert split_subject_body("SUBJECT:Hello\nBody") == ("Hello", "Body")

    def test_no_subject(self):
        assert split_subject_body("Hi Sir,\nBody") == ("", "Hi Sir,\nBody")

    def test_subject_only(self):
        assert split_subject_body("Subject: Hello") == ("Hello", "")


class TestStripClosingLines:
    def test_removes_plain_and_bold_labels(self):
        text = f"Hi\nResume: link\n{to_bold('Job ID')}: J1\nJob Link: x\nBye"
        assert strip_closing_lines(text) == "Hi\nBye"

    def test_collapses_blank_runs(self):
        assert strip_closing_lines("A\n\nEmail: x\n\nB") == "A\n\nB"

    def test_mid_line_label_kept(self):
        text = "Please see my Resume: attached"
        assert strip_closing_lines(text) == text


class TestInsertClosingItems:
    """Tests for anchor selection."""

    def test_inserts_before_thank_you(self):
        text = "Body\n\nThank you for your time and consideration.\n\nWarm regards,\nX"
        result = insert_closing_items(text, [ClosingItem("Job ID", "J1")])
        assert result == (
            "Body\n\nJob ID: J1\n\nThank you for your time and consideration.\n\nWarm regards,\nX"
        )

    def test_thank_you_case_insensitive(self):
        text = "Body\nTHANK YOU FOR YOUR TIME AND CONSIDERATION.\nWarm regards,"
        result = insert_closing_items(text, [ClosingItem("Email", "a@b.c")])
        assert result.index("Email: a@b.c") < result.index("THANK YOU")

    def test_falls_back_to_sign_off(self):
        text = "Body\n\nWarm regards,\nX"
        result = insert_closing_items(text, [ClosingItem("Contact", "123")])
        assert result == "Body\n\nContact: 123\n\nWarm regards,\nX"

    def test_falls_back_to_end(self):
        result = insert_closing_items("Body only", [ClosingItem("Contact", "123")])
        assert result == "Body only\n\nContact: 123"

    def test_no_items_still_strips_model_closing_lines(self):
        text = "Body\nResume: http://x\n\nThank you for your time and consideration."
        assert insert_closing_items(text, []) == "Body\n\nThank you for your time and consideration."


class TestLabelStyling:
    def test_labels_bolded(self):
        styled = apply_label_styling("Job ID: J1\nEmail: a@b.c")
        assert styled == f"{to_bold('Job ID')}: J1\n{to_bold('Email')}: a@b.c"

    def test_value_not_bolded(self):
        assert apply_label_styling("Resume: https://x").endswith(": https://x")

    def test_ask_paragraph_bolded(self):
        styled = apply_label_styling(f"Intro\n\n{ASK_PARAGRAPH}\n\nThanks")
        assert to_bold(ASK_PARAGRAPH) in styled
        assert ASK_PARAGRAPH not in styled


class TestFinalizeReferralEmail:
    """Tests for the full referral pipeline."""

    def test_job_id_scenario(self):
        request = JobRequest(company_name="Acme", role="SDE", job_id="J1", include_job_id=True)
        document = finalize_referral_email(RAW_EMAIL, request)

        assert document.subject == "Referral"
        assert document.kind == REFERRAL_EMAIL
        assert document.body == (
            "Hi Sir,\n...\n\n"
            f"{to_bold('Job ID')}: J1\n\n"
            "Thank you for your time and consideration.\n\n"
            "Warm regards,\nX"
        )
        lines = document.body.split("\n")
        assert lines.index("𝐉𝐨𝐛 𝐈𝐃: J1") < lines.index("Thank you for your time and consideration.")

    def test_all_flags_false_has_no_closing_lines(self):
        raw = (
            "Subject: Referral Request for SDE - Job ID: J1\n\n"
            "Hi Sir,\nBody\nResume: https://model-added\nEmail: model@added\n"
            "Thank you for your time and consideration.\n\nWarm regards,\nX"
        )
        document = finalize_referral_email(raw, full_request())
        for line in document.body.split("\n"):
            for label in CLOSING_LABELS:
                assert not line.startswith(label)
                assert not line.startswith(to_bold(label[:-1]) + ":")

    def test_all_flags_true_order(self):
        document = finalize_referral_email(RAW_EMAIL, all_flags_request())
        positions = [document.body.index(to_bold(label[:-1]) + ":") for label in CLOSING_LABELS]
        assert positions == sorted(positions)

    @pytest.mark.parametrize("flags", [
        {},
        {"include_job_id": True},
        {"include_resume_link": True, "include_contact": True},
        {"include_resume_link": True, "include_job_id": True, "include_job_link": True,
         "include_email_id": True, "include_contact": True},
    ])
    def test_idempotent(self, flags):
        request = full_request(**flags)
        raw = f"Subject: Referral\n\nHi Sir,\n\n{ASK_PARAGRAPH}\n\nThank you for your time and consideration.\n\nWarm regards,\nX"
        first = finalize_referral_email(raw, request)
        second = finalize_referral_email(first.to_clipboard_text(), request)
        assert second == first

    def test_idempotent_without_anchor(self):
        request = full_request(include_job_id=True)
        first = finalize_referral_email("Subject: S\n\nBody", request)
        second = finalize_referral_email(first.to_clipboard_text(), request)
        assert second == first

    def test_subject_job_id_kept_and_label_styled(self):
        raw = "Subject: Referral Request for SDE - Job ID: J1\n\nHi Sir,\nThank you for your time and consideration."
        document = finalize_referral_email(raw, full_request(include_job_id=True))
        assert document.subject == f"Referral Request for SDE - {to_bold('Job ID')}: J1"

    def test_trims_input(self):
        document = finalize_referral_email("\n\n  Subject: S\n\nBody\n\n", full_request())
        assert document == GeneratedDocument(subject="S", body="Body", kind=REFERRAL_EMAIL)


class TestFinalizeCoverLetter:
    def test_split_only(self):
        raw = "  Dear Hiring Manager,\n\nJob ID: J1\n\nSincerely,\nJane  "
        document = finalize_cover_letter(raw)
        assert document.subject == ""
        assert document.body == "Dear Hiring Manager,\n\nJob ID: J1\n\nSincerely,\nJane"
        assert document.kind == COVER_LETTER


class TestRepairSubject:
    """Tests for repair_subject."""

    def test_appends_missing_job_id(self):
        document = GeneratedDocument(subject="Referral Request for SDE", body="B")
        repaired = repair_subject(document, JobRequest(job_id="J1"))
        assert repaired.subject == f"Referral Request for SDE - {to_bold('Job ID')}: J1"
        assert repaired.body == "B"

    def test_present_job_id_untouched(self):
        document = GeneratedDocument(subject="Referral - Job ID: J1", body="B")
        assert repair_subject(document, JobRequest(job_id="J1")) is document

    def test_empty_subject_untouched(self):
        document = GeneratedDocument(subject="", body="B")
        assert repair_subject(document, JobRequest(job_id="J1")) is document
