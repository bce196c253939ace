"""
Prompt Guard - Keep untrusted content from steering the scoring models.

NEVER concatenate raw user content into a rubric prompt.
ALWAYS run the gate, then sanitize, then fence.

Two layers:
  validate_for_injection() -- Hard gate. Unambiguous attacks raise InputRejected
                              before any prompt is built.
  sanitize_content()       -- Soft pass. Masks weaker manipulation phrasing and
                              caps repeated suspicious terms. Always applied.

Helpers:
  detect_injection_attempt() -- Returns matched gate patterns (empty = clean)
  fence_user_content()       -- Embeds content in a code fence it cannot close
  sanitize_for_prompt()      -- Null byte removal and length enforcement

Reference: OWASP LLM Top 10 (2025) - LLM01: Prompt Injection
"""

import logging
import re

from ..errors import InputRejected

logger = logging.getLogger(__name__)

# Strong signatures: any match rejects the request outright
INJECTION_PATTERNS = [
    r"ignore\s+(all\s+)?previous",
    r"from\s+now\s+on",
    r"new\s+instructions?",
    r"system\s+prompt",
    r"you\s+are\s+now",
    r"\bact\s+as\b",
    r"pretend\s+to\s+be",
    r"roleplay",
    r"score\s+(100|perfect)",
    r"give\s+me\s+(100|perfect)",
    r"make\s+sure.*scores?\s+(100|perfect)",
    r"ensure.*scores?\s+(100|perfect)",
    r"guarantee.*scores?\s+(100|perfect)",
    r"validation\s+bypass",
    r"hack\s+the\s+system",
    r"exploit",
    r"manipulate",
    r"trick\s+the\s+ai",
    r"jailbreak",
    r"prompt\s+injection",
]

# More than GATE_TERM_LIMIT whole-word hits of any of these rejects the request
GATE_TERMS = [
    "ignore", "disregard", "override", "score", "100",
    "perfect", "maximum", "hack", "exploit", "manipulate",
]
GATE_TERM_LIMIT = 5

# Weaker phrasing: masked in place, request continues
MASK_PATTERNS = [
    r"ignore\s+(all\s+)?previous\s+(prompts?|instructions?)",
    r"from\s+now\s+on\s+ignore",
    r"disregard\s+(all\s+)?previous",
    r"forget\s+(all\s+)?previous",
    r"override\s+(all\s+)?previous",
    r"new\s+instructions?:",
    r"system\s+prompt",
    r"you\s+are\s+now",
    r"act\s+as\s+if",
    r"pretend\s+to\s+be",
    r"roleplay\s+as",
    r"score\s+(100|perfect|maximum)",
    r"give\s+(me\s+)?(100|perfect|maximum)\s+score",
    r"make\s+sure\s+(the\s+)?(final\s+)?output\s+scores?\s+(100|perfect)",
    r"ensure\s+(the\s+)?(final\s+)?output\s+scores?\s+(100|perfect)",
    r"guarantee\s+(the\s+)?(final\s+)?output\s+scores?\s+(100|perfect)",
    r"validation\s+bypass",
    r"hack\s+the\s+system",
    r"exploit\s+the\s+validator",
    r"manipulate\s+the\s+score",
    r"trick\s+the\s+ai",
    r"jailbreak",
    r"prompt\s+injection",
    r"injection\s+attack",
]
MASK_MARKER = "[Content modified for security]"

# More than MASK_TERM_LIMIT hits of any of these: every occurrence is replaced
MASK_TERMS = ["ignore", "disregard", "override", "score", "100", "perfect", "maximum"]
MASK_TERM_LIMIT = 3
TERM_MARKER = "[Term frequency limited]"

_INJECTION_RES = [re.compile(p, re.IGNORECASE) for p in INJECTION_PATTERNS]
_MASK_RES = [re.compile(p, re.IGNORECASE) for p in MASK_PATTERNS]


def _term_regex(term: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def detect_injection_attempt(text: str) -> list[str]:
    """
    Return the gate patterns that match text (empty = clean).

    Does NOT raise. validate_for_injection() is the blocking entry point.
    """
    if not text:
        return []
    return [p.pattern for p in _INJECTION_RES if p.search(text)]


def validate_for_injection(content: str) -> None:
    """
    Pre-flight gate. Raises InputRejected on a strong manipulation signature
    or on excessive repetition of manipulation vocabulary.

    Args:
        content: Raw content (untrusted)

    Raises:
        InputRejected: the request must fail without any model call
    """
    findings = detect_injection_attempt(content)
    if findings:
        logger.warning(
            f"[PromptGuard] Rejected input ({len(content)} chars): "
            f"{len(findings)} injection pattern(s)"
        )
        raise InputRejected("Content contains potential prompt injection patterns")

    for term in GATE_TERMS:
        count = len(_term_regex(term).findall(content))
        if count > GATE_TERM_LIMIT:
            logger.warning(
                f"[PromptGuard] Rejected input: '{term}' repeated {count} times"
            )
            raise InputRejected(f"Excessive use of suspicious term: {term}")


def sanitize_content(content: str) -> str:
    """
    Soft pass applied to every request that clears the gate.

    Masks weaker manipulation phrasing with a neutral marker, then replaces
    every occurrence of a suspicious term that appears more than
    MASK_TERM_LIMIT times. Does not raise.
    """
    if not content:
        return ""

    sanitized = content
    masked = 0
    for pattern in _MASK_RES:
        sanitized, n = pattern.subn(MASK_MARKER, sanitized)
        masked += n

    for term in MASK_TERMS:
        regex = _term_regex(term)
        if len(regex.findall(sanitized)) > MASK_TERM_LIMIT:
            sanitized = regex.sub(TERM_MARKER, sanitized)
            masked += 1

    if masked:
        logger.info(f"[PromptGuard] Masked {masked} suspicious fragment(s)")
    return sanitized


def fence_user_content(content: str, fence: str = "```") -> str:
    """
    Embed content in a fenced block as the literal subject of analysis.

    Backtick runs inside the content are broken up so the content can never
    close the fence and continue as instructions.
    """
    neutral = re.sub(r"`{3,}", lambda m: "'" * len(m.group(0)), content)
    return f"{fence}\n{neutral}\n{fence}"


def sanitize_for_prompt(
    content: str,
    max_length: int = 100_000,
    strip_null: bool = True,
) -> str:
    """
    Enforce transport-level limits on any text sent to a provider.

    - Strips null bytes
    - Truncates to max_length
    - Does NOT remove injection patterns (the gate and sanitize_content do that)
    """
    if not content:
        return ""

    if strip_null:
        content = content.replace("\x00", "")

    if len(content) > max_length:
        content = content[:max_length] + "\n[TRUNCATED]"
        logger.info(f"[PromptGuard] Content truncated to {max_length} chars")

    return content
