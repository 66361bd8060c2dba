"""Error types raised by the referral writer."""


class ReferralWriterError(Exception):
    """Base class for all referral writer errors."""


class ValidationError(ReferralWriterError):
    """Required JobRequest fields are missing.

    Raised before any network activity. The message is meant to be shown
    to the user verbatim.
    """

    def __init__(self, message: str, missing_fields=None):
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])


class GenerationError(ReferralWriterError):
    """The LLM call failed or returned something unusable."""


class EmptyResponseError(GenerationError):
    """The LLM response contained no text after trimming."""


class MalformedResponseError(GenerationError):
    """No text could be extracted from the LLM response envelope.

    Attributes:
        payload: Diagnostic dump of the envelope shape (for logs only)
    """

    def __init__(self, message: str, payload: str = ""):
        super().__init__(message)
        self.payload = payload


class StorageError(ReferralWriterError):
    """A profile, history or template store could not be read or written."""


class CompileError(ReferralWriterError):
    """The remote LaTeX compile service rejected the document."""
