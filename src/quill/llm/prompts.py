from __future__ import annotations

from quill.types import JobData, ResumeData

EMAIL_PLACEHOLDER = "[email redacted]"
PHONE_PLACEHOLDER = "[phone number]"
ADDRESS_PLACEHOLDER = "[address]"

RESUME_TASK_MARKER = "You are an expert resume writer and ATS optimization specialist."
COVER_LETTER_TASK_MARKER = "You are an expert cover letter writer."
REDACTION_TASK_MARKER = "Remove all email addresses and phone numbers from the following HTML content."
REDACTION_CONTENT_HEADER = "HTML CONTENT:"
REDACTION_OUTPUT_FOOTER = "OUTPUT ONLY THE MODIFIED HTML:"

RESUME_TAILOR_PROMPT = """
{marker} Your task is to tailor a resume for a specific job posting while maintaining 100% accuracy of existing information.

CRITICAL RULES:
1. NEVER invent, add, or fabricate any dates, company names, job titles, or personal information
2. ONLY use information that already exists in the original resume
3. Optimize keyword matching with the job posting
4. Convert prose paragraphs to concise bullet points where appropriate
5. Emphasize relevant experience and skills that match the job requirements
6. Output clean HTML that renders well in browsers and is ATS-friendly

ORIGINAL RESUME:
{resume_text}

JOB POSTING:
{job_text}

TASK:
Tailor the resume above for this specific job posting. Focus on:
- Highlighting relevant keywords from the job posting
- Reordering sections to emphasize the most relevant experience first
- Converting descriptions to bullet points with action verbs
- Ensuring ATS compatibility with proper HTML structure

OUTPUT FORMAT:
Return clean HTML with semantic structure:
- Use <h1> for name, <h2> for section headers, <h3> for job titles
- Use <ul> and <li> for lists and achievements
- Include contact information if present in original
- Use <div class="section"> for major sections
- Include <div class="summary"> for professional summary if applicable

OUTPUT ONLY THE HTML, NO EXPLANATIONS:
""".strip()

COVER_LETTER_PROMPT = """
{marker} Create a compelling, personalized letter that connects the candidate's background to the specific job opportunity.

CRITICAL RULES:
1. NEVER invent personal details, company names, or specific experiences not in the resume
2. Use only information that exists in the provided resume
3. Match the tone to the job posting and company culture
4. Keep it concise (3-4 paragraphs maximum)
5. Include specific keywords from the job posting
6. End with a strong call to action

CANDIDATE RESUME:
{resume_text}

JOB POSTING:
{job_text}

TASK:
Write a compelling letter that:
- Opens with enthusiasm for the specific role and company
- Highlights 2-3 most relevant experiences/skills from the resume
- Connects candidate's background to job requirements
- Shows genuine interest in the company/role
- Closes with next steps

OUTPUT FORMAT:
Return clean HTML formatted letter:
- Use <div class="cover-letter"> wrapper
- Use <p> tags for paragraphs
- Include proper salutation and closing
- Use <strong> for emphasis sparingly

OUTPUT ONLY THE HTML, NO EXPLANATIONS:
""".strip()

REDACTION_PROMPT = """
{marker} Replace them with placeholder text.

RULES:
1. Replace email addresses with "{email_placeholder}"
2. Replace phone numbers with "{phone_placeholder}"
3. Preserve all HTML structure and formatting
4. Do not modify any other content

{content_header}
{html}

{output_footer}
""".strip()


def build_resume_prompt(resume: ResumeData, job: JobData) -> str:
    return RESUME_TAILOR_PROMPT.format(
        marker=RESUME_TASK_MARKER,
        resume_text=resume.full_text,
        job_text=job.full_text,
    )


def build_cover_letter_prompt(resume: ResumeData, job: JobData) -> str:
    return COVER_LETTER_PROMPT.format(
        marker=COVER_LETTER_TASK_MARKER,
        resume_text=resume.full_text,
        job_text=job.full_text,
    )


def build_redaction_prompt(html: str) -> str:
    return REDACTION_PROMPT.format(
        marker=REDACTION_TASK_MARKER,
        email_placeholder=EMAIL_PLACEHOLDER,
        phone_placeholder=PHONE_PLACEHOLDER,
        content_header=REDACTION_CONTENT_HEADER,
        html=html,
        output_footer=REDACTION_OUTPUT_FOOTER,
    )


def extract_redaction_payload(prompt: str) -> str:
    """Return the HTML embedded in a redaction prompt, or ``""`` if the prompt is not one."""
    head, sep, tail = prompt.partition(f"{REDACTION_CONTENT_HEADER}\n")
    if not sep:
        return ""
    body, _, _ = tail.rpartition(f"\n\n{REDACTION_OUTPUT_FOOTER}")
    return body
