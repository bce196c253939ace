"""
Content preprocessing -- whitespace normalization and markdown sanity checks.

Runs before the injection gate. Nothing here rejects a request; the
warnings and structure report travel with the ConsensusResult so the
caller can show them next to the scores.

extract_topic() is a helper for callers that receive content without an
assignment (the CLI uses it for --infer-topic).
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SHORT_CONTENT_WARNING = 50
LONG_CONTENT_WARNING = 10_000
MIN_MEANINGFUL_LENGTH = 10
DEFAULT_TOPIC = "General Content"

_TITLE_PREFIX_RE = re.compile(r"^(LECTURE NOTE|ASSIGNMENT|PRE-READ):\s*", re.IGNORECASE)
_HEADER_RE = re.compile(r"^#+\s", re.MULTILINE)
_HEADER_TEXT_RE = re.compile(r"^#+\s*(.+)$", re.MULTILINE)
_LIST_RE = re.compile(r"^\s*([-*+]|\d+\.)\s", re.MULTILINE)
_CODE_WORDS_RE = re.compile(r"function|class|import|const|let|var", re.IGNORECASE)


@dataclass
class ContentMetadata:
    original_length: int
    cleaned_length: int
    has_code_blocks: bool
    has_headers: bool
    has_lists: bool


@dataclass
class PreprocessResult:
    cleaned_content: str
    warnings: list[str] = field(default_factory=list)
    metadata: ContentMetadata | None = None


@dataclass
class StructureReport:
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def preprocess_content(content: str) -> PreprocessResult:
    """Normalize whitespace, close a dangling code fence, collect warnings."""
    warnings: list[str] = []
    original_length = len(content)

    cleaned = content.replace("\r\n", "\n")
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    cleaned = re.sub(r"[ \t]+$", "", cleaned, flags=re.MULTILINE)
    cleaned = cleaned.strip()

    if cleaned.count("```") % 2 != 0:
        warnings.append("Unclosed code blocks detected")
        if not cleaned.endswith("```"):
            cleaned += "\n```"

    if cleaned.count("**") % 2 != 0:
        warnings.append("Unclosed bold formatting detected")
    if cleaned.count("*") % 2 != 0:
        warnings.append("Unclosed italic formatting detected")

    if len(cleaned) < SHORT_CONTENT_WARNING:
        warnings.append("Content is very short - may result in low validation scores")
    if len(cleaned) > LONG_CONTENT_WARNING:
        warnings.append("Content is very long - may impact processing time")

    metadata = ContentMetadata(
        original_length=original_length,
        cleaned_length=len(cleaned),
        has_code_blocks="```" in cleaned,
        has_headers=bool(_HEADER_RE.search(cleaned)),
        has_lists=bool(_LIST_RE.search(cleaned)),
    )

    if warnings:
        logger.info(f"[Preprocess] {len(warnings)} warning(s) for {original_length} chars")
    return PreprocessResult(cleaned_content=cleaned, warnings=warnings, metadata=metadata)


def check_structure(content: str) -> StructureReport:
    """Report structural issues and improvement suggestions."""
    issues: list[str] = []
    suggestions: list[str] = []

    if not content.strip():
        return StructureReport(is_valid=False, issues=["Content is empty or only whitespace"])

    if len(content.strip()) < MIN_MEANINGFUL_LENGTH:
        issues.append("Content is too short to be meaningful")
        suggestions.append("Add more descriptive content")

    if not _HEADER_RE.search(content):
        suggestions.append("Consider adding headers to structure your content")

    paragraphs = [p for p in re.split(r"\n\s*\n", content) if p.strip()]
    if len(paragraphs) < 2:
        suggestions.append("Consider breaking content into multiple paragraphs")

    if "```" not in content and _CODE_WORDS_RE.search(content):
        suggestions.append("Consider using code blocks for code snippets")

    return StructureReport(is_valid=not issues, issues=issues, suggestions=suggestions)


def extract_topic(title: str, content: str) -> str:
    """Best-effort topic for content that arrives without an assignment."""
    if title:
        cleaned_title = _TITLE_PREFIX_RE.sub("", title).strip()
        if cleaned_title:
            return cleaned_title

    header = _HEADER_TEXT_RE.search(content)
    if header:
        return header.group(1).strip()

    first_sentence = re.split(r"[.!?]", content, maxsplit=1)[0]
    if 10 < len(first_sentence) < 100:
        return first_sentence.strip()

    return DEFAULT_TOPIC
