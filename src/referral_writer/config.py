"""Environment-driven configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_MODEL = "gemini"
DEFAULT_LATEX_COMPILE_URL = "https://latexonline.cc/compile"

# Provider API key variable for each model family
API_KEY_ENV_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
}


def _clean_path(value: str) -> Path:
    """Remove quotes if present and expand ~ to home directory."""
    value_clean = value.strip('"').strip("'")
    return Path(value_clean).expanduser().resolve()


def get_data_directory() -> Path:
    """Get the directory holding profile, history and template files.

    Returns:
        Path: DATA_DIR if set, otherwise ~/.referral_writer

    Examples:
        >>> # With DATA_DIR set to ~/Drive/Referrals
        >>> get_data_directory()
        PosixPath('/Users/username/Drive/Referrals')
    """
    data_dir_env = os.getenv("DATA_DIR")
    if data_dir_env:
        return _clean_path(data_dir_env)
    return Path.home() / ".referral_writer"


def get_output_directory() -> Path:
    """Get the directory where exported PDFs are written."""
    output_dir_env = os.getenv("OUTPUT_DIR")
    if output_dir_env:
        return _clean_path(output_dir_env)
    return Path.home() / "Documents" / "Referral Writer"


def get_model_selection() -> str:
    """Model shortcut from LLM_MODEL (e.g. "gemini", "gpt-4o", "opus")."""
    return os.getenv("LLM_MODEL", DEFAULT_MODEL)


def get_api_key(provider: str) -> str:
    """Return the API key for a provider.

    Raises:
        ValueError: If the key is not configured
    """
    env_var = API_KEY_ENV_VARS[provider]
    api_key = os.getenv(env_var)
    if not api_key:
        raise ValueError(f"{env_var} not found in environment variables")
    return api_key


def repair_subject_enabled() -> bool:
    """Whether generated subjects missing the job ID are repaired."""
    return os.getenv("REPAIR_SUBJECT", "1").strip().lower() not in ("0", "false", "no", "off")


def get_latex_compile_url() -> str:
    return os.getenv("LATEX_COMPILE_URL", DEFAULT_LATEX_COMPILE_URL)
