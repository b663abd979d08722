"""Heuristic résumé field extraction.

Everything here is best effort: a field that cannot be found is simply
left empty, and no input makes ``extract_resume_data`` raise.
"""
import logging
import re
from typing import List, Optional

from interview_assistant.schemas.candidate import ExtractedFields
from interview_assistant.services.extraction_config import (
    CERTIFICATION_KEYWORDS,
    EDUCATION_KEYWORDS,
    EXPERIENCE_HEADERS,
    EXTRACTION_LIMITS,
    JOB_TITLE_KEYWORDS,
    NAME_MAX_TOKENS,
    NAME_MIN_TOKENS,
    NAME_SCAN_LINES,
    SECTION_END_KEYWORDS,
    SKILL_VOCABULARY,
)
from interview_assistant.utils.helpers import format_phone

logger = logging.getLogger(__name__)

NAME_TOKEN_RE = re.compile(r"^[a-zA-Z][a-zA-Z'.,-]*$")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")

# \b does not work around terms such as "c++" or "c#", so word edges are
# spelled out as lookarounds.
SKILL_PATTERNS = [
    (skill, re.compile(rf"(?<![A-Za-z0-9_]){re.escape(skill)}(?![A-Za-z0-9_])", re.IGNORECASE))
    for skill in SKILL_VOCABULARY
]


def extract_resume_data(raw_text: Optional[str]) -> ExtractedFields:
    text = raw_text or ""
    if not text.strip():
        return ExtractedFields(raw_text=text)

    lines = text.splitlines()
    non_empty = [line.strip() for line in lines if line.strip()]

    fields = ExtractedFields(
        name=extract_name(non_empty),
        email=extract_email(text),
        phone=extract_phone(text),
        skills=extract_skills(text),
        experience=extract_experience(lines),
        education=_collect_keyword_lines(lines, EDUCATION_KEYWORDS, **EXTRACTION_LIMITS["education"]),
        certifications=_collect_keyword_lines(
            lines, CERTIFICATION_KEYWORDS, **EXTRACTION_LIMITS["certifications"]
        ),
        raw_text=text,
    )

    logger.debug(
        "Extracted resume fields: name=%s email=%s phone=%s skills=%d experience=%d",
        bool(fields.name),
        bool(fields.email),
        bool(fields.phone),
        len(fields.skills),
        len(fields.experience),
    )
    return fields


def extract_name(lines: List[str]) -> Optional[str]:
    for line in lines[:NAME_SCAN_LINES]:
        tokens = line.split()
        if not NAME_MIN_TOKENS <= len(tokens) <= NAME_MAX_TOKENS:
            continue
        if all(NAME_TOKEN_RE.match(token) for token in tokens):
            return line
    return None


def extract_email(text: str) -> Optional[str]:
    match = EMAIL_RE.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> Optional[str]:
    match = PHONE_RE.search(text)
    if not match:
        return None
    return format_phone(match.group(0))


def extract_skills(text: str) -> List[str]:
    """Vocabulary terms present in the text, in vocabulary order."""
    return [skill for skill, pattern in SKILL_PATTERNS if pattern.search(text)]


def extract_experience(lines: List[str]) -> List[str]:
    limits = EXTRACTION_LIMITS["experience"]
    experience = []
    in_section = False

    for raw_line in lines:
        original = raw_line.strip()
        line = original.lower()

        if any(header in line for header in EXPERIENCE_HEADERS):
            in_section = True
            continue

        if in_section or any(keyword in line for keyword in JOB_TITLE_KEYWORDS):
            if limits["min_length"] < len(original) < limits["max_length"]:
                experience.append(original)

        if any(keyword in line for keyword in SECTION_END_KEYWORDS):
            in_section = False

    return experience[: limits["max_entries"]]


def _collect_keyword_lines(
    lines: List[str],
    keywords: List[str],
    min_length: int,
    max_length: int,
    max_entries: int,
) -> List[str]:
    collected = []
    for raw_line in lines:
        original = raw_line.strip()
        lowered = original.lower()
        if not any(keyword in lowered for keyword in keywords):
            continue
        if min_length < len(original) < max_length:
            collected.append(original)
    return collected[:max_entries]
