"""Generation flow: form + profile -> prompt -> LLM -> finished document."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from . import config
from .errors import GenerationError, ReferralWriterError, StorageError, ValidationError
from .llm_client import LLMClient
from .logging_config import get_logger
from .models import COVER_LETTER, REFERRAL_EMAIL, GeneratedDocument, JobRequest, Profile
from .postprocess import finalize_cover_letter, finalize_referral_email, repair_subject
from .prompts import (
    CLARIFICATION_MARKER,
    build_cover_letter_prompt,
    build_referral_prompt,
    build_resume_edit_prompt,
    validate_request,
)
from .storage import HistoryRepository, ProfileRepository

logger = get_logger(__name__)

# User-facing messages for failed LLM calls, by operation
FAILURE_MESSAGES = {
    REFERRAL_EMAIL: "Failed to generate email. Please try again.",
    COVER_LETTER: "Failed to generate cover letter. Please try again.",
    "resume": "Failed to modify resume. Please try again.",
}


@dataclass
class ResumeEdit:
    """Outcome of a resume edit request: new LaTeX or a question back."""
    latex: str = ""
    clarification: Optional[str] = None

    @property
    def needs_clarification(self) -> bool:
        return self.clarification is not None


class DocumentGenerator:
    """Generate referral emails, cover letters and resume edits.

    Validation happens before any network call. Each successful email or
    cover letter is appended to the history store.
    """

    def __init__(
        self,
        client: LLMClient,
        profile_repository: Optional[ProfileRepository] = None,
        history_repository: Optional[HistoryRepository] = None,
        repair_subjects: Optional[bool] = None,
    ):
        """Initialize the generator.

        Args:
            client: LLM client adapter
            profile_repository: Source of the saved profile (default: USER_* env only)
            history_repository: Where successful generations are recorded (default: none)
            repair_subjects: Append missing job IDs to subjects (default: REPAIR_SUBJECT)
        """
        self.client = client
        self.profile_repository = profile_repository
        self.history_repository = history_repository
        if repair_subjects is None:
            repair_subjects = config.repair_subject_enabled()
        self.repair_subjects = repair_subjects

    def load_profile(self) -> Profile:
        if self.profile_repository is None:
            return Profile.from_env()
        return self.profile_repository.load()

    def _record(self, document: GeneratedDocument, request: JobRequest) -> None:
        if self.history_repository is None:
            return
        try:
            self.history_repository.append(document, request)
        except StorageError as e:
            # The document is still returned to the user
            logger.warning("Could not save to history: %s", e)

    async def generate_referral_email(
        self, request: JobRequest, profile: Optional[Profile] = None
    ) -> GeneratedDocument:
        """Generate a referral email for ``request``.

        Raises:
            ValidationError: If company name, role or job ID is empty
            GenerationError: If the LLM call fails or returns nothing usable
        """
        validate_request(request, REFERRAL_EMAIL)
        if profile is None:
            profile = self.load_profile()

        prompt = build_referral_prompt(request, profile)
        raw_text = await self.client.generate(prompt)

        document = finalize_referral_email(raw_text, request)
        if self.repair_subjects:
            document = repair_subject(document, request)

        self._record(document, request)
        logger.info("Generated referral email for %s / %s", request.company_name, request.role)
        return document

    async def generate_cover_letter(
        self, request: JobRequest, profile: Optional[Profile] = None
    ) -> GeneratedDocument:
        """Generate a cover letter for ``request``.

        Raises:
            ValidationError: If company name or role is empty
            GenerationError: If the LLM call fails or returns nothing usable
        """
        validate_request(request, COVER_LETTER)
        if profile is None:
            profile = self.load_profile()

        prompt = build_cover_letter_prompt(request, profile)
        raw_text = await self.client.generate(prompt)

        document = finalize_cover_letter(raw_text)
        self._record(document, request)
        logger.info("Generated cover letter for %s / %s", request.company_name, request.role)
        return document

    async def modify_resume(self, latex_code: str, user_request: str) -> ResumeEdit:
        """Apply a plain-language change to a LaTeX resume.

        Returns:
            ResumeEdit holding either the full modified LaTeX or the model's
            clarification question
        """
        prompt = build_resume_edit_prompt(latex_code, user_request)
        text = (await self.client.generate(prompt)).strip()

        if text.startswith(CLARIFICATION_MARKER):
            question = text[len(CLARIFICATION_MARKER):].strip()
            logger.info("Model asked for clarification on resume edit")
            return ResumeEdit(latex=latex_code, clarification=question)
        return ResumeEdit(latex=text)


class GenerationSession:
    """Loading flag plus mutually exclusive result/error slots for one view.

    Callers check ``is_loading`` before submitting. Overlapping submissions
    are still accepted: every completion overwrites the slots (last write
    wins) and ``is_loading`` clears when the last in-flight call finishes.
    """

    def __init__(self):
        self.result: Any = None
        self.error: Optional[str] = None
        self._in_flight = 0

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def clear(self) -> None:
        self.result = None
        self.error = None

    def _set_result(self, result: Any) -> None:
        self.result = result
        self.error = None

    def _set_error(self, message: str) -> None:
        self.result = None
        self.error = message

    async def submit(
        self,
        operation: Callable[[], Awaitable[Any]],
        failure_message: str = FAILURE_MESSAGES[REFERRAL_EMAIL],
    ) -> Any:
        """Run ``operation`` and store its outcome.

        Args:
            operation: Zero-argument coroutine function performing the generation
            failure_message: Shown when the LLM call fails

        Returns:
            The operation's result, or None if it failed
        """
        self._in_flight += 1
        self.error = None
        try:
            result = await operation()
        except ValidationError as e:
            self._set_error(str(e))
            return None
        except GenerationError as e:
            logger.error("Generation failed: %s", e)
            self._set_error(failure_message)
            return None
        except ReferralWriterError as e:
            self._set_error(str(e))
            return None
        except Exception:
            logger.exception("Unexpected error during generation")
            self._set_error(failure_message)
            return None
        finally:
            self._in_flight -= 1

        self._set_result(result)
        return result
