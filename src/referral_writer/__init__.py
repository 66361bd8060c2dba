"""Referral Writer - AI-generated job referral emails and cover letters."""

__version__ = "0.1.0"

# Expose main classes and functions for external use
from .bold import to_bold
from .edit_history import EditHistory
from .editor import EditorController
from .generator import DocumentGenerator, GenerationSession
from .llm_client import LLMClient
from .models import GeneratedDocument, JobRequest, Profile
from .postprocess import finalize_cover_letter, finalize_referral_email
from .prompts import build_cover_letter_prompt, build_referral_prompt

__all__ = [
    "DocumentGenerator",
    "EditHistory",
    "EditorController",
    "GeneratedDocument",
    "GenerationSession",
    "JobRequest",
    "LLMClient",
    "Profile",
    "build_cover_letter_prompt",
    "build_referral_prompt",
    "finalize_cover_letter",
    "finalize_referral_email",
    "to_bold",
]
