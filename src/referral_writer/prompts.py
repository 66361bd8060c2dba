"""Prompt templates for referral emails, cover letters and resume edits."""

from datetime import date
from typing import Optional

from .errors import ValidationError
from .models import COVER_LETTER, FIELD_LABELS, REFERRAL_EMAIL, JobRequest, Profile

# Reproduced verbatim in every referral email and bolded after generation
ASK_PARAGRAPH = (
    "I'd be sincerely grateful if you could refer me for this opportunity. "
    "I completely understand a referral doesn't ensure selection, but it would "
    "mean a lot to have my profile considered."
)

THANK_YOU_LINE = "Thank you for your time and consideration."
SIGN_OFF = "Warm regards,"

# Passion statement examples keyed by job description keyword category
PASSION_EXAMPLES = (
    ("backend development, system design, APIs, Java, scalability, distributed systems",
     "passionate about building scalable and reliable systems with strong fundamentals "
     "in Java, backend development, and system design."),
    ("full-stack development, web technologies, React, Node.js",
     "passionate about building full-stack applications and creating seamless user experiences."),
    ("software engineering, software development, coding, programming languages",
     "passionate about software engineering and building robust, efficient solutions."),
    ("cloud technologies, AWS, microservices, DevOps",
     "passionate about cloud-native development and building scalable distributed systems."),
    ("machine learning, AI, data science, Python",
     "passionate about leveraging data and machine learning to solve complex problems."),
    ("mobile development, iOS, Android, React Native",
     "passionate about mobile application development and creating intuitive user experiences."),
)

REFERRAL_PROMPT_TEMPLATE = """You are an expert career assistant. Your task is to craft a concise, professional, and personalized referral request email.

**Output Format Rules:**
1. The entire output MUST be plain text. Do not use Markdown, bold, or italics.
2. The output MUST start with a "Subject:" line.
3. After the subject line, there MUST be exactly one blank line.
4. The rest of the output is the email body.

**Candidate Information:**
- Name: {name}
- Education: {degree} ({graduation_year}), {university} (CGPA: {cgpa})

{resume_context}
**Job Details:**
- Company: {company_name}
- Role: {role}
- Job ID: {job_id}
- Full Job Description:
{job_description}

**Additional Instructions:**
{additional_instructions}

**Email Structure (FOLLOW THIS EXACTLY):**

**Subject Line:**
CRITICAL: The subject line MUST include the complete job ID number.
Write EXACTLY this format (do not use parentheses for the Job ID):
"Referral Request for [ROLE_NAME] - Job ID: [JOB_ID_NUMBER]"

For this email:
- ROLE_NAME = {role}
- JOB_ID_NUMBER = {job_id}

Example output: "Referral Request for Data Scientist - Job ID: ABC123"
The job ID MUST be included.

**Email Body:**

**Paragraph 1 (Introduction - FIXED FORMAT):**
Start with "Hi Sir," followed by a new line.
Then write: "{intro}"

After the comma, continue in the SAME sentence with a passion statement that aligns with the job description. The complete sentence should be:
"{intro} [passion statement based on JD]"

Analyze the job description carefully to determine what the role requires, then create an appropriate passion statement. Most roles will be technical, so prioritize technical skills and technologies. Examples:
{passion_examples}
- For non-technical roles (if JD focuses on business analysis, product management, etc.) → "passionate about [relevant non-technical focus from JD]"
- Analyze the JD and create a relevant passion statement that matches what the role actually requires, prioritizing technical aspects for technical roles.

**Paragraph 2 (Expressing Interest - DYNAMIC):**
This paragraph should be 2-3 sentences. Analyze the job description carefully and:
- Express your interest in the specific role at the company
- When mentioning the role, write: "{role} role at {company_name} (Job ID: {job_id})"
- CRITICAL: Include the COMPLETE phrase with job ID. Do NOT write just "(" or omit the job ID number.
- Show that you understand what the role entails by referencing specific aspects from the job description
- Connect your interest to specific requirements or responsibilities mentioned in the job description
- Be concise and authentic

**Paragraph 3 (Highlighting Relevant Experience - DYNAMIC):**
Keep this to 1-2 sentences. Based on the job description AND the candidate's skills/projects/experience context provided above:
- CRITICAL: First, analyze the job description to identify what technologies, tools, and skills are required
- Then, from the candidate's skills list, select ONLY 2-4 skills that match what's mentioned in the JD
- Do NOT mention skills that are not in the job description, even if they're in the candidate's skills list
{project_rule}{experience_rule}- Connect the candidate's background ({degree}) and relevant skills/experiences to what the role requires
- Focus on quality over quantity - mention fewer, more relevant skills rather than listing many skills
- For non-technical roles, focus on relevant analytical, communication, or business skills from the JD

**Paragraph 4 (The Ask - FIXED TEXT):**
Use this EXACT text (do not modify):
"{ask_paragraph}"

**Closing Section:**
After the ask paragraph, go directly to:
{thank_you_line}

{sign_off}
{signature}

**IMPORTANT - Closing Section:**
- Do NOT include Resume link, Job ID, Job Link, Email, or Contact in the closing section
- These will be added automatically based on user preferences
- End the ask paragraph and go directly to "{thank_you_line}"
- After "{sign_off}" include only the name and education (degree, university){website_rule}
- Do NOT include any other contact info in the AI-generated part

**GENERAL INSTRUCTIONS:**
- Read the entire job description carefully
- Only mention skills, technologies, and experiences that are directly relevant to this role based on the JD
- Do NOT make assumptions about what to include - base everything on the job description provided
- Make the email unique and tailored specifically to this role and company
- The introduction and ask paragraph are fixed - only the middle paragraphs (2 and 3) should be customized based on the JD"""

COVER_LETTER_PROMPT_TEMPLATE = """You are an expert career coach and professional writer. Write a compelling, professional cover letter for the role below.

**Candidate Details:**
- Name: {name}
- Education: {degree} ({graduation_year}), {university} (CGPA: {cgpa})
- Email: {email_id}
- Phone: {contact}
- Website: {website}

{resume_context}
**Job Details:**
- Company: {company_name}
- Role: {role}
- Job ID: {job_id}
- Job Link: {job_link}
- Description: {job_description}

**Additional Instructions:**
{additional_instructions}

**Requirements:**
1. **Format:** Standard business letter format.
   - Header: Candidate Name, Contact Info.
   - Date: {today}.
   - Recipient: Hiring Manager, {company_name}.
   - Address: [Company Address] (Keep this placeholder exactly as is).
   - Salutation: "Dear Hiring Manager,"
2. **Tone:** Professional, confident, enthusiastic, and authentic.
3. **Content:**
   - **Opening:** State the role applied for and express strong interest. Mention the Job ID if available.
   - **Body Paragraph 1 (Experience/Skills):** Connect the candidate's skills and experience to the specific requirements in the Job Description. Highlight relevant projects.
   - **Body Paragraph 2 (Why this company/role):** Demonstrate understanding of the company/role and why the candidate is a strong fit. Align the passion statement with the JD (e.g., scalable systems, full-stack, AI).
   - **Closing:** Reiterate enthusiasm and request an interview.
   - **Sign-off:** "Sincerely," followed by Candidate Name.
4. **Style:** Clear, concise paragraphs. No bullet points unless absolutely necessary for impact.
5. **Length:** ~300-400 words.

**Output:**
Provide ONLY the body of the cover letter (including header/date/salutation/sign-off). Do not include any conversational filler before or after."""

RESUME_EDIT_PROMPT_TEMPLATE = """You are a LaTeX resume editor assistant. The user has a resume in LaTeX format and wants to make changes.

**Current LaTeX Code:**
```latex
{latex_code}
```

**User Request:** "{user_request}"

**Instructions:**
1. Analyze the user's request carefully
2. Modify ONLY the content that the user requested to change
3. Maintain the EXACT formatting, spacing, structure, and style
4. Do NOT change:
   - Document class or packages
   - Custom commands or macros
   - Overall layout or margins
   - Section formatting
5. If the request is unclear or ambiguous, ask for clarification

**Output Format:**
If the request is clear and can be executed:
- Return ONLY the complete modified LaTeX code
- Do NOT include any explanations before or after the code
- Do NOT use markdown code blocks

If the request is unclear:
- Start with "{clarification_marker}" followed by your question
- Do NOT modify the LaTeX code

Now, process the user's request:"""

CLARIFICATION_MARKER = "CLARIFICATION NEEDED:"


def validate_request(request: JobRequest, kind: str = REFERRAL_EMAIL) -> None:
    """Raise ValidationError if required fields for ``kind`` are empty."""
    missing = request.missing_fields(kind)
    if not missing:
        return
    names = [FIELD_LABELS[name] for name in missing]
    document = "email" if kind == REFERRAL_EMAIL else "cover letter"
    if len(names) > 2:
        listed = ", ".join(names[:-1]) + f", and {names[-1]}"
    else:
        listed = " and ".join(names)
    raise ValidationError(
        f"Please provide {listed} before generating the {document}.",
        missing_fields=missing,
    )


def _text_or(value: str, fallback: str) -> str:
    value = (value or "").strip()
    return value if value else fallback


def build_resume_context(request: JobRequest, profile: Profile, filtered: bool = True) -> str:
    """Skills block plus the projects/experience blocks enabled by the request flags.

    Args:
        request: Job request holding the include_projects/include_experience flags
        profile: Candidate profile supplying the text
        filtered: Add the "only mention if relevant" qualifiers (referral emails)
    """
    qualifier = " (Only mention if relevant to the job description)" if filtered else ""
    sections = []
    if profile.skills.strip():
        sections.append(
            f"**Candidate's Skills (Available for Reference):**\n{profile.skills.strip()}\n"
        )
    if request.include_projects and profile.projects.strip():
        sections.append(f"**Projects{qualifier}:**\n{profile.projects.strip()}\n")
    if request.include_experience and profile.experience.strip():
        sections.append(f"**Experience{qualifier}:**\n{profile.experience.strip()}\n")
    return "\n".join(sections)


def build_intro_sentence(profile: Profile) -> str:
    """Fixed opening sentence; the model appends the passion statement."""
    return (
        f"I'm {profile.name}, a {profile.degree} student ({profile.graduation_year}) "
        f"from {profile.university} (CGPA: {profile.cgpa}),"
    )


def build_referral_prompt(request: JobRequest, profile: Profile) -> str:
    """Render the referral email prompt.

    Args:
        request: Job details and inclusion flags
        profile: Candidate profile

    Returns:
        The complete prompt string

    Raises:
        ValidationError: If company name, role or job ID is empty
    """
    validate_request(request, REFERRAL_EMAIL)

    passion_examples = "\n".join(
        f'- If JD mentions {keywords} → "{statement}"' for keywords, statement in PASSION_EXAMPLES
    )

    project_rule = ""
    if request.include_projects and profile.projects.strip():
        project_rule = "- If projects are included and relevant: only mention a project if it uses technologies mentioned in the JD\n"
    experience_rule = ""
    if request.include_experience and profile.experience.strip():
        experience_rule = "- If experience is included and relevant: only mention it if it relates to technologies/skills in the JD\n"

    signature_lines = [profile.name, f"{profile.degree}, {profile.university}"]
    website_rule = ""
    if profile.website.strip():
        signature_lines.append(profile.website.strip())
        website_rule = "\n- Include the website on a new line after the education"

    return REFERRAL_PROMPT_TEMPLATE.format(
        name=profile.name,
        degree=profile.degree,
        graduation_year=profile.graduation_year,
        university=profile.university,
        cgpa=profile.cgpa,
        resume_context=build_resume_context(request, profile),
        company_name=request.company_name.strip(),
        role=request.role.strip(),
        job_id=request.job_id.strip(),
        job_description=_text_or(request.job_description, "No job description provided."),
        additional_instructions=_text_or(
            request.additional_instructions, "No additional instructions provided."
        ),
        intro=build_intro_sentence(profile),
        passion_examples=passion_examples,
        project_rule=project_rule,
        experience_rule=experience_rule,
        ask_paragraph=ASK_PARAGRAPH,
        thank_you_line=THANK_YOU_LINE,
        sign_off=SIGN_OFF,
        signature="\n".join(signature_lines),
        website_rule=website_rule,
    )


def build_cover_letter_prompt(
    request: JobRequest,
    profile: Profile,
    today: Optional[date] = None,
) -> str:
    """Render the cover letter prompt.

    Projects and experience are always offered to the model here; only the
    company name and role are required.

    Raises:
        ValidationError: If company name or role is empty
    """
    validate_request(request, COVER_LETTER)

    if today is None:
        today = date.today()

    context_request = JobRequest(include_projects=True, include_experience=True)

    return COVER_LETTER_PROMPT_TEMPLATE.format(
        name=profile.name,
        degree=profile.degree,
        graduation_year=profile.graduation_year,
        university=profile.university,
        cgpa=profile.cgpa,
        email_id=profile.email_id,
        contact=profile.contact,
        website=profile.website,
        resume_context=build_resume_context(context_request, profile, filtered=False),
        company_name=request.company_name.strip(),
        role=request.role.strip(),
        job_id=_text_or(request.job_id, "N/A"),
        job_link=_text_or(request.job_link, "N/A"),
        job_description=_text_or(request.job_description, "Not provided"),
        additional_instructions=_text_or(request.additional_instructions, "None"),
        today=f"{today:%B} {today.day}, {today.year}",
    )


def build_resume_edit_prompt(latex_code: str, user_request: str) -> str:
    """Render the LaTeX resume edit prompt.

    Raises:
        ValidationError: If the LaTeX code or the request is empty
    """
    if not latex_code.strip():
        raise ValidationError("Please provide your LaTeX resume code first.")
    if not user_request.strip():
        raise ValidationError("Please tell me what you'd like to change.")

    return RESUME_EDIT_PROMPT_TEMPLATE.format(
        latex_code=latex_code,
        user_request=user_request.strip(),
        clarification_marker=CLARIFICATION_MARKER,
    )
