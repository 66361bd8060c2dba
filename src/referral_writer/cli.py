"""Command-line interface for referral emails and cover letters."""

import asyncio
import functools
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pyperclip

from .config import get_output_directory
from .editor import run_editor
from .errors import CompileError, StorageError
from .export import copy_to_clipboard, export_pdf, format_for_clipboard
from .generator import FAILURE_MESSAGES, DocumentGenerator, GenerationSession
from .latex_service import compile_latex_to_pdf, estimate_page_count
from .llm_client import LLMClient
from .logging_config import configure_logging
from .models import COVER_LETTER, REFERRAL_EMAIL, GeneratedDocument, JobRequest
from .storage import HistoryRepository, ProfileRepository, ResumeRepository, TemplateRepository
from .ui_components import (
    DASH_LINE,
    SEPARATOR_LINE,
    confirm,
    edit_job_request,
    edit_profile,
    get_user_choice,
    print_divider,
    print_header,
    read_line,
    read_multiline_input,
    show_document,
)

DOCUMENT_NAMES = {
    REFERRAL_EMAIL: "email",
    COVER_LETTER: "cover letter",
}


class App:
    """Repositories, generator and per-view session state."""

    def __init__(self, generator: DocumentGenerator, data_dir: Optional[Path] = None):
        self.generator = generator
        self.profiles = generator.profile_repository or ProfileRepository(data_dir)
        self.history = generator.history_repository or HistoryRepository(data_dir)
        self.templates = TemplateRepository(data_dir)
        self.resumes = ResumeRepository(data_dir)
        self.sessions = {
            REFERRAL_EMAIL: GenerationSession(),
            COVER_LETTER: GenerationSession(),
            "resume": GenerationSession(),
        }
        # Current form contents, shared by the email and cover letter views
        self.form = JobRequest()


def print_welcome():
    """Print welcome message."""
    print_header("Referral Writer")
    print("\nThis tool writes job referral emails and cover letters from a job description.")
    print("\nInstructions:")
    print("  1. Fill in the job details (company, role, job ID, description)")
    print("  2. Choose which contact lines to include")
    print("  3. Review, edit, copy or export the result")
    print("\nType 'quit' or 'exit' at a menu to go back.")
    print(SEPARATOR_LINE + "\n")


def initialize_app(model_name: Optional[str] = None) -> App:
    """Initialize all system components."""
    configure_logging()

    try:
        client = LLMClient(model_name=model_name)
    except ValueError as e:
        print(f"Error: {e}")
        print("\nPlease set the API key for your model (e.g. GEMINI_API_KEY) in your .env file.")
        sys.exit(1)

    profiles = ProfileRepository()
    history = HistoryRepository()
    generator = DocumentGenerator(client, profile_repository=profiles, history_repository=history)
    return App(generator)


def run_session(session: GenerationSession, operation, failure_message: str):
    """Run one generation to completion and report errors."""
    if session.is_loading:
        print("A generation is already running.")
        return None
    result = asyncio.run(session.submit(operation, failure_message))
    if session.error:
        print(f"\n⚠ {session.error}")
    return result


def copy_text(text: str):
    try:
        copy_to_clipboard(text)
        print("\n✓ Copied to clipboard!")
    except pyperclip.PyperclipException as e:
        print(f"\nError copying to clipboard: {e}")


def save_as_template(app: App, request: JobRequest):
    name = read_line("Template name")
    if not name:
        print("No name entered. Template not saved.")
        return
    try:
        app.templates.save(name, request)
        print(f"✓ Saved template '{name}'")
    except StorageError as e:
        print(f"Error: {e}")


def handle_document_actions(app: App, document: GeneratedDocument, request: JobRequest) -> None:
    """Edit, copy, export or save the generated document."""
    name = DOCUMENT_NAMES[document.kind]

    while True:
        print("\nOptions:")
        print("  (1) Edit subject")
        print("  (2) Edit body (Ctrl-B bold, Ctrl-Z undo, Ctrl-Y redo)")
        print(f"  (3) Copy {name} to clipboard")
        print("  (4) Export as PDF")
        print("  (5) Save form as template")
        print("  (6) Back")

        choice = get_user_choice(["1", "2", "3", "4", "5", "6"], default="3")

        if choice == "1":
            subject = read_line("Subject", default=document.subject)
            if subject is None:
                print("✓ Changes discarded")
            else:
                document = GeneratedDocument(subject=subject, body=document.body, kind=document.kind)
                print(f"✓ Subject: {subject}")

        elif choice == "2":
            edited = run_editor(document.body, title=document.subject or "Body")
            if edited is None:
                print("✓ Changes discarded")
            else:
                document = GeneratedDocument(subject=document.subject, body=edited, kind=document.kind)
                show_document(document, title=f"EDITED {name.upper()}")

        elif choice == "3":
            copy_text(format_for_clipboard(document))

        elif choice == "4":
            try:
                path = export_pdf(document, request.company_name, request.role)
                print(f"\n✓ PDF saved: {path}")
            except OSError as e:
                print(f"\nError saving PDF: {e}")

        elif choice == "5":
            save_as_template(app, request)

        else:
            return


def generate_document(app: App, kind: str) -> None:
    """Form -> generation -> review loop for one document kind."""
    title = "REFERRAL EMAIL" if kind == REFERRAL_EMAIL else "COVER LETTER"
    session = app.sessions[kind]

    while True:
        request = edit_job_request(app.form, title=f"{title}: JOB DETAILS")
        if request is None:
            return
        app.form = request

        if kind == REFERRAL_EMAIL:
            operation = functools.partial(app.generator.generate_referral_email, request)
        else:
            operation = functools.partial(app.generator.generate_cover_letter, request)

        print(f"\nGenerating {DOCUMENT_NAMES[kind]} with {app.generator.client.model_name}...")
        document = run_session(session, operation, FAILURE_MESSAGES[kind])
        if document is None:
            continue

        show_document(document, title=f"GENERATED {title}")
        handle_document_actions(app, document, request)
        if not confirm("Write another?", default=False):
            return


def history_menu(app: App) -> None:
    """Browse, search, copy and delete past generations."""
    term = ""
    while True:
        try:
            records = app.history.search(term)
        except StorageError as e:
            print(f"Error: {e}")
            return

        print_header(f"HISTORY{f' (search: {term})' if term else ''}")
        if not records:
            print("No history yet." if not term else "No matches.")
        for i, record in enumerate(records, start=1):
            created = datetime.fromtimestamp(record.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
            kind = "Cover Letter" if record.type == COVER_LETTER else "Email"
            print(f"  ({i}) [{kind}] {record.company_name} - {record.role}  {created}")
        print_divider()
        print("  (s) Search  (c) Clear all  (b) Back")

        options = [str(i) for i in range(1, len(records) + 1)] + ["s", "c", "b"]
        choice = get_user_choice(options, default="b")

        if choice in ("b", "q"):
            return
        if choice == "s":
            term = read_line("Search company, role or subject", default=term) or ""
            continue
        if choice == "c":
            if confirm("Delete all history?", default=False):
                try:
                    app.history.clear()
                    print("✓ History cleared")
                except StorageError as e:
                    print(f"Error: {e}")
            continue

        record = records[int(choice) - 1]
        print_header(record.subject or f"{record.company_name} - {record.role}")
        print(record.email)
        print(SEPARATOR_LINE)
        print("  (1) Copy  (2) Delete  (3) Back")
        action = get_user_choice(["1", "2", "3"], default="1")
        if action == "1":
            copy_text(record.email)
        elif action == "2":
            try:
                app.history.delete(record.id)
                print("✓ Deleted")
            except StorageError as e:
                print(f"Error: {e}")


def templates_menu(app: App) -> None:
    """Apply, search and delete saved form templates."""
    term = ""
    while True:
        try:
            templates = app.templates.search(term)
        except StorageError as e:
            print(f"Error: {e}")
            return

        print_header("TEMPLATES")
        if not templates:
            print("No templates saved yet.")
        for i, template in enumerate(templates, start=1):
            data = template.data
            print(f"  ({i}) {template.name}  [{data.company_name} - {data.role}]")
        print_divider()
        print("  (n) Save current form  (s) Search  (b) Back")

        options = [str(i) for i in range(1, len(templates) + 1)] + ["n", "s", "b"]
        choice = get_user_choice(options, default="b")

        if choice in ("b", "q"):
            return
        if choice == "n":
            save_as_template(app, app.form)
            continue
        if choice == "s":
            term = read_line("Search name, company or role", default=term) or ""
            continue

        template = templates[int(choice) - 1]
        print("  (1) Apply to form  (2) Delete  (3) Back")
        action = get_user_choice(["1", "2", "3"], default="1")
        if action == "1":
            try:
                app.form = app.templates.apply(template.id)
                print(f"✓ Applied template '{template.name}'")
            except KeyError:
                print(f"Template '{template.name}' no longer exists")
            except StorageError as e:
                print(f"Error: {e}")
        elif action == "2":
            try:
                app.templates.delete(template.id)
                print("✓ Deleted")
            except StorageError as e:
                print(f"Error: {e}")


def profile_menu(app: App) -> None:
    try:
        profile = app.profiles.load()
    except StorageError as e:
        print(f"Error: {e}")
        return

    edited = edit_profile(profile)
    if edited is None:
        return
    try:
        app.profiles.save(edited)
        print("✓ Profile saved")
    except StorageError as e:
        print(f"Error: {e}")


def compile_resume(latex_code: str) -> None:
    print("\nCompiling...")
    try:
        pdf = compile_latex_to_pdf(latex_code)
    except CompileError as e:
        print(f"\n⚠ LaTeX compilation failed:\n{e}")
        return

    output_dir = get_output_directory()
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = output_dir / f"Resume_{timestamp}.pdf"
    path.write_bytes(pdf.content)
    print(f"✓ Resume PDF saved: {path} ({pdf.page_count} page(s))")


def resume_builder(app: App) -> None:
    """Chat-style LaTeX resume editing."""
    session = app.sessions["resume"]
    try:
        latex_code = app.resumes.load()
    except StorageError as e:
        print(f"Error: {e}")
        latex_code = ""

    print_header("RESUME BUILDER")
    print("Paste your LaTeX resume, then tell me what to change.")
    print('For example: "Add skill: Docker" or "Change CGPA to 9.2"')

    while True:
        status = f"{len(latex_code)} characters, ~{estimate_page_count(latex_code)} page(s)" if latex_code else "empty"
        print(f"\nLaTeX code: {status}")
        print("  (1) Request a change")
        print("  (2) Paste / edit LaTeX code")
        print("  (3) Compile to PDF")
        print("  (4) Copy LaTeX code")
        print("  (5) Back")

        choice = get_user_choice(["1", "2", "3", "4", "5"], default="1")

        if choice == "1":
            change = read_line("Change")
            if not change:
                continue
            print("\nEditing resume...")
            edit = run_session(
                session,
                functools.partial(app.generator.modify_resume, latex_code, change),
                FAILURE_MESSAGES["resume"],
            )
            if edit is None:
                continue
            if edit.needs_clarification:
                print(f"\n? {edit.clarification}")
                continue
            latex_code = edit.latex
            print("\n✓ Done! Your resume has been updated.")

        elif choice == "2":
            new_code = read_multiline_input("LaTeX code:", default=latex_code)
            if new_code is None:
                continue
            latex_code = new_code

        elif choice == "3":
            compile_resume(latex_code)
            continue

        elif choice == "4":
            copy_text(latex_code)
            continue

        else:
            return

        try:
            app.resumes.save(latex_code)
        except StorageError as e:
            print(f"Error: {e}")


def main():
    """Main CLI function."""
    try:
        app = initialize_app()
        print_welcome()
        print(f"Using model: {app.generator.client.model_name}")

        while True:
            print_divider()
            print("What would you like to do?")
            print("  (1) Referral email")
            print("  (2) Cover letter")
            print("  (3) History")
            print("  (4) Templates")
            print("  (5) Profile")
            print("  (6) Resume builder")
            print("  (7) Exit")
            print(DASH_LINE)

            choice = get_user_choice(["1", "2", "3", "4", "5", "6", "7"], default="1")

            if choice == "1":
                generate_document(app, REFERRAL_EMAIL)
            elif choice == "2":
                generate_document(app, COVER_LETTER)
            elif choice == "3":
                history_menu(app)
            elif choice == "4":
                templates_menu(app)
            elif choice == "5":
                profile_menu(app)
            elif choice == "6":
                resume_builder(app)
            else:
                print("\nExiting...")
                break

    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)


if __name__ == "__main__":
    main()
