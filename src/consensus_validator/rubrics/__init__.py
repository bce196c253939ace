"""
Rubric prompts -- standalone plus one weighted rubric per ContentType.

Usage:
    from .rubrics import build_prompt

    prompt = build_prompt(sanitized, context=AssignmentContext(topic="Binary Search"))
"""
from .builder import OUTPUT_CONTRACT, SYSTEM_MESSAGE, build_prompt
from .templates import RUBRICS, RubricInputs
