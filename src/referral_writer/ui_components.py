"""User interface components for the CLI."""

from dataclasses import fields
from typing import List, Optional

from prompt_toolkit import print_formatted_text, prompt
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory

from .models import GeneratedDocument, JobRequest, Profile

# UI formatting constants
SEPARATOR_LINE = "=" * 80
DASH_LINE = "-" * 80

QUIT_WORDS = ("quit", "exit", "q")

# (attribute, label, multiline) for the form screens
JOB_REQUEST_FIELDS = (
    ("company_name", "Company Name", False),
    ("role", "Role", False),
    ("job_id", "Job ID", False),
    ("job_link", "Job Link", False),
    ("job_description", "Job Description", True),
    ("additional_instructions", "Additional Instructions", True),
    ("resume_link", "Resume Link", False),
    ("email_id", "Email", False),
    ("contact", "Contact", False),
)

JOB_REQUEST_FLAGS = (
    ("include_resume_link", "Include Resume link"),
    ("include_job_id", "Include Job ID"),
    ("include_job_link", "Include Job Link"),
    ("include_email_id", "Include Email"),
    ("include_contact", "Include Contact"),
    ("include_projects", "Include Projects"),
    ("include_experience", "Include Experience"),
)

PROFILE_FIELDS = (
    ("name", "Name", False),
    ("degree", "Degree", False),
    ("graduation_year", "Graduation Year", False),
    ("university", "University", False),
    ("cgpa", "CGPA", False),
    ("resume_link", "Resume Link", False),
    ("email_id", "Email", False),
    ("contact", "Contact", False),
    ("website", "Website", False),
    ("experience", "Experience", True),
    ("projects", "Projects", True),
    ("skills", "Skills", True),
)


def print_header(title: str):
    """Print a formatted header."""
    print("\n" + SEPARATOR_LINE)
    print(title)
    print(SEPARATOR_LINE)


def print_divider():
    """Print a divider line."""
    print("\n" + DASH_LINE)


def read_multiline_input(prompt_text: str, default: str = "") -> Optional[str]:
    """Read multiline input from the user.

    Args:
        prompt_text: Prompt to display to the user
        default: Text pre-filled in the editor

    Returns:
        The input text as a string, or None if cancelled
    """
    if prompt_text:
        print(prompt_text)

    print_formatted_text(
        HTML(
            "<b><style color='ansigray'>Press [Esc] followed by [Enter] to submit. Press [Ctrl-c] to cancel.</style></b>"
        )
    )
    try:
        text = prompt(
            "",
            default=default,
            multiline=True,
            mouse_support=False,  # Keep native terminal copy/paste
            history=InMemoryHistory(),
        )
        return text.strip()
    except KeyboardInterrupt:
        print("\nCancelled.")
        return None
    except EOFError:
        return None


def get_user_choice(options: List[str], default: str = "1", prompt_text: str = "Choice") -> str:
    """Get a validated user choice from a list of options.

    Args:
        options: List of valid option strings (e.g. ['1', '2', '3'])
        default: Default option if user presses Enter
        prompt_text: Prompt text

    Returns:
        The selected option, or "q" if the user quits
    """
    while True:
        try:
            choice = prompt(f"\n{prompt_text} [{default}]: ", mouse_support=False).strip()
            choice = choice or default

            if choice in options:
                return choice
            if choice.lower() in QUIT_WORDS:
                return "q"
            print(f"Invalid choice. Please select from: {', '.join(options)}")
        except (KeyboardInterrupt, EOFError):
            return "q"


def read_line(prompt_text: str, default: str = "") -> Optional[str]:
    """Read one line, pre-filled with ``default``. None if cancelled."""
    try:
        return prompt(f"{prompt_text}: ", default=default, mouse_support=False).strip()
    except (KeyboardInterrupt, EOFError):
        return None


def confirm(question: str, default: bool = True) -> bool:
    """Ask a yes/no question."""
    hint = "Y/n" if default else "y/N"
    answer = read_line(f"{question} ({hint})")
    if not answer:
        return default
    return answer.lower().startswith("y")


def edit_field(field_name: str, current_value: str, multiline: bool = False) -> str:
    """Allow user to edit a form field.

    Args:
        field_name: Name of the field being edited
        current_value: Current value
        multiline: Whether this is a multiline field

    Returns:
        Updated value, or the current value if cancelled
    """
    if multiline:
        print(f"\n{field_name} ({len(current_value)} characters):")
        new_value = read_multiline_input("", default=current_value)
        return current_value if new_value is None else new_value

    new_value = read_line(field_name, default=current_value)
    return current_value if new_value is None else new_value


def _summarize(value: str, multiline: bool) -> str:
    if multiline:
        return f"({len(value)} characters)" if value else "(empty)"
    return value or "(empty)"


def edit_job_request(request: JobRequest, title: str = "JOB DETAILS") -> Optional[JobRequest]:
    """Review and edit a JobRequest field by field.

    Returns:
        The edited request (a copy), or None if the user backs out
    """
    request = JobRequest.from_dict(request.to_dict())
    field_count = len(JOB_REQUEST_FIELDS)

    while True:
        print_header(title)
        for i, (attr, label, multiline) in enumerate(JOB_REQUEST_FIELDS, start=1):
            print(f"  ({i}) {label}: {_summarize(getattr(request, attr), multiline)}")
        for i, (attr, label) in enumerate(JOB_REQUEST_FLAGS, start=field_count + 1):
            mark = "✓" if getattr(request, attr) else " "
            print(f"  ({i}) [{mark}] {label}")
        print("  (0) Done")

        options = [str(i) for i in range(field_count + len(JOB_REQUEST_FLAGS) + 1)]
        choice = get_user_choice(options, default="0")
        if choice == "q":
            return None
        if choice == "0":
            return request

        index = int(choice) - 1
        if index < field_count:
            attr, label, multiline = JOB_REQUEST_FIELDS[index]
            setattr(request, attr, edit_field(label, getattr(request, attr), multiline))
        else:
            attr, _ = JOB_REQUEST_FLAGS[index - field_count]
            setattr(request, attr, not getattr(request, attr))


def edit_profile(profile: Profile) -> Optional[Profile]:
    """Review and edit the profile field by field.

    Returns:
        The edited profile (a copy), or None if the user backs out
    """
    values = {f.name: getattr(profile, f.name) for f in fields(profile)}

    while True:
        print_header("PROFILE")
        for i, (attr, label, multiline) in enumerate(PROFILE_FIELDS, start=1):
            print(f"  ({i}) {label}: {_summarize(values[attr], multiline)}")
        print("  (0) Save")

        options = [str(i) for i in range(len(PROFILE_FIELDS) + 1)]
        choice = get_user_choice(options, default="0")
        if choice == "q":
            return None
        if choice == "0":
            return Profile(**values)

        attr, label, multiline = PROFILE_FIELDS[int(choice) - 1]
        values[attr] = edit_field(label, values[attr], multiline)


def show_document(document: GeneratedDocument, title: str = "GENERATED EMAIL"):
    """Display a generated document."""
    print_header(title)
    if document.subject:
        print(f"Subject: {document.subject}")
        print(DASH_LINE)
    print(document.body)
    print(SEPARATOR_LINE)
