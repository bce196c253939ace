"""
Rubric templates -- one scoring rubric per ContentType plus the standalone one.

Every rubric scores the same three keys, with meanings that depend on the
content type:
    relevance     -> structure / format
    continuity    -> topic or prerequisite coverage
    documentation -> clarity / quality

Each criterion carries a point weight. Models score each criterion as the
percentage of its points earned, so the reported scores are always 0-100.
"""

from dataclasses import dataclass
from typing import Callable

from ..models import ContentType


@dataclass(frozen=True)
class RubricInputs:
    """Already-rendered values substituted into a rubric."""

    topic: str
    prerequisites: str
    guidelines: str
    brief: str
    content_type: ContentType


@dataclass(frozen=True)
class Weights:
    structure: int
    coverage: int
    quality: int

    def __post_init__(self):
        if self.structure + self.coverage + self.quality != 100:
            raise ValueError("Rubric weights must sum to 100")


ASSIGNMENT_WEIGHTS = Weights(structure=25, coverage=40, quality=35)
PRE_READ_WEIGHTS = Weights(structure=30, coverage=30, quality=40)
LECTURE_NOTE_WEIGHTS = Weights(structure=30, coverage=40, quality=30)


def _scoring_rule(points: int) -> str:
    return (
        f"- **Scoring:** Judge this criterion out of {points} points, then report "
        f"the points earned as a percentage (0-100)."
    )


def _output_shape(structure: str, coverage: str, quality: str, quality_hint: str) -> str:
    return f"""
## REQUIRED OUTPUT FORMAT

Your final output MUST follow this exact JSON structure:

```json
{{
  "relevance": [{structure} Score],
  "continuity": [{coverage} Score],
  "documentation": [{quality} Score],
  "feedback": {{
    "relevance": "Specific structural feedback: identify exact sections missing or weak and suggest concrete improvements",
    "continuity": "Topic coverage analysis: identify which aspects of the required topic are missing and what to add",
    "documentation": "{quality_hint}"
  }}
}}
```

Each feedback string must be 50 words or fewer and give specific, actionable feedback for the content creator."""


def assignment_rubric(inputs: RubricInputs) -> str:
    w = ASSIGNMENT_WEIGHTS
    output = _output_shape(
        "Adherence to Structure",
        "Coverage of Topics",
        "Knowledge Application & Assessment Quality",
        "Assessment quality suggestions: identify weak evaluation criteria and recommend "
        "concrete ways to test knowledge application",
    )
    return f"""
# Assignment Scoring Rubric

# ROLE AND GOAL

You are an expert instructional design validator for an ed-tech platform. Analyze an
assignment designed to test a learner's knowledge and application ability on a topic.

# INPUT VARIABLES

1. **Assignment Content**: The content to be validated
2. **Required Topics to Test**: {inputs.topic}
3. **Reference Assignment Template**: Standard assignment structure

# EVALUATION CRITERIA & SCORING

Think step-by-step and justify each score internally before presenting the final output.

### 1. Adherence to Structure ({w.structure} Points)

- Does the assignment contain the major sections: Overview, Background Context, Task
  Description, Evaluation Criteria, Resources & Hints, and Submission Guidelines?
- Are the subsections (Objective, Requirements & Constraints, etc.) present and used correctly?
- Is there a clear rubric in the "Evaluation Criteria" section?
- Are the deliverables and submission format clearly specified?
{_scoring_rule(w.structure)} Deduct for missing sections, unclear task descriptions or missing evaluation criteria.

### 2. Coverage of Topics ({w.coverage} Points)

- Review the required topic: "{inputs.topic}"
- Does the assignment require the learner to demonstrate understanding or application of it?
- It should test practical application rather than theoretical recall.
- Prerequisite topics ({inputs.prerequisites}) may be assumed but not re-taught.
{_scoring_rule(w.coverage)} Deduct significantly if the required topic is not tested or applied.

### 3. Knowledge Application & Assessment Quality ({w.quality} Points)

- **Real-world Relevance:** Is there a realistic scenario that requires practical application?
- **Cognitive Depth:** Does it require analysis, synthesis or evaluation rather than recall?
- **Clear Assessment:** Can different skill levels be distinguished fairly?
- **Appropriate Difficulty:** Challenging without being overwhelming for the target learner?
- **Scaffolding:** Are hints and resources supportive without giving away answers?
{_scoring_rule(w.quality)}
{output}"""


def pre_read_rubric(inputs: RubricInputs) -> str:
    w = PRE_READ_WEIGHTS
    output = _output_shape(
        "Adherence to Structure",
        "Coverage of Topics",
        "Ease of Understanding & Engagement",
        "Engagement improvement suggestions: identify unclear or dull sections and recommend "
        "concrete examples or interactive elements",
    )
    return f"""
# Pre-Lecture Notes Scoring Rubric

# ROLE AND GOAL

You are an expert instructional design validator for an ed-tech platform. Analyze a set
of PRE-LECTURE notes and evaluate how well they prepare and excite a learner for an
upcoming lecture.

# INPUT VARIABLES

1. **Pre-Lecture Note Content**: The content to be validated
2. **Topics to be Previewed**: {inputs.topic}
3. **Reference Pre-Note Template**: Standard pre-note structure

# EVALUATION CRITERIA & SCORING

Think step-by-step and justify each score internally before presenting the final output.

### 1. Adherence to Structure ({w.structure} Points)

- Does the note contain the major sections: "The Big Picture", "Roadmap", "Key Terms",
  "A Glimpse into the How" and "Questions to Keep in Mind"?
- Is each section used for its purpose (the roadmap previews topics, the Big Picture has a hook)?
- Is the "Glimpse" section formatted as either Path A (Technical) or Path B (Non-Technical)?
{_scoring_rule(w.structure)} Deduct for missing sections or significant deviations from the pre-note format.

### 2. Coverage of Topics ({w.coverage} Points)

- Review the required topic: "{inputs.topic}"
- Is the topic effectively **introduced or previewed**, primarily within the "Roadmap"?
- **The goal is not deep explanation.** The note should spark curiosity and set
  expectations, not teach the topic completely.
- Prior lectures covered: {inputs.prerequisites}
{_scoring_rule(w.coverage)} Deduct if the topic is not previewed, leaving the learner unprepared.

### 3. Ease of Understanding & Engagement ({w.quality} Points)

- Assume the persona of a beginner preparing for a class.
- **Engagement:** Is the tone conversational and enthusiastic? Does the hook capture interest?
- **Clarity:** Are the analogies simple and the "Key Terms" defined in plain English?
- **Purposefulness:** Is the "Glimpse" tangible and non-intimidating? Do the questions
  encourage reflection?
- **Brevity:** Can the note be read in the 15-20 minute target timeframe?
{_scoring_rule(w.quality)}
{output}"""


def lecture_note_rubric(inputs: RubricInputs) -> str:
    w = LECTURE_NOTE_WEIGHTS
    output = _output_shape(
        "Adherence to Structure",
        "Coverage of Topics",
        "Ease of Understanding",
        "Clarity improvement suggestions: identify confusing sentences or terms and suggest "
        "specific rewrites, examples or analogies",
    )
    return f"""
# Lecture Notes Scoring Rubric

# ROLE AND GOAL

You are an expert instructional design validator for an ed-tech platform. Analyze a set
of lecture notes written by a content creator and evaluate their quality.

# INPUT VARIABLES

1. **Lecture Note Content**: The content to be validated
2. **Required Topics**: {inputs.topic}
3. **Reference Template**: Standard lecture note structure

# EVALUATION CRITERIA & SCORING

Think step-by-step and justify each score internally before presenting the final output.

### 1. Adherence to Structure ({w.structure} Points)

- Does the note contain all the major sections (1 through 6)?
- Are the subsections (Core Definition, Analogy, Practice Task) present and used correctly?
- Is "Practical Application" formatted as either Path A (Technical) or Path B (Non-Technical)?
- Is "Common Pitfalls" presented as a Markdown table?
{_scoring_rule(w.structure)} Deduct for missing sections or incorrect use of a section's structure.

### 2. Coverage of Topics ({w.coverage} Points)

- Review the required topic: "{inputs.topic}"
- The topic must be thoroughly and accurately explained, not just mentioned.
- The explanation must be sufficient for a beginner whose only knowledge is: {inputs.prerequisites}
{_scoring_rule(w.coverage)} Start from full marks and deduct significantly for inadequate coverage. A brief mention is not coverage.

### 3. Ease of Understanding ({w.quality} Points)

- Assume the persona of a beginner who knows only the prerequisites.
- **Clarity:** Is the language clear, direct and free of unexplained jargon?
- **Examples & Analogies:** Are examples in "Practical Application" clear and effective?
- **Logical Flow:** Does the note progress from the "what" and "why" to the "how" and
  "what to watch out for"?
- **Depth:** Is the detail appropriate for a beginner, neither shallow nor overwhelming?
{_scoring_rule(w.quality)}
{output}"""


RubricFn = Callable[[RubricInputs], str]

RUBRICS: dict[ContentType, RubricFn] = {
    ContentType.ASSIGNMENT: assignment_rubric,
    ContentType.PRE_READ: pre_read_rubric,
    ContentType.LECTURE_NOTE: lecture_note_rubric,
}

# A new ContentType without a rubric fails at import, not at request time
_missing = set(ContentType) - set(RUBRICS)
if _missing:
    raise RuntimeError(f"No rubric registered for: {sorted(t.value for t in _missing)}")


STANDALONE_RUBRIC = """You are a content validation engine. Analyze the given markdown content and return strict JSON with numeric scores 0-100 for criteria: relevance, continuity, documentation, and short feedback strings.

=== VALIDATION CRITERIA ===
- RELEVANCE (0-100): How relevant and focused is the content?
- CONTINUITY (0-100): How well does the content flow and maintain logical progression?
- DOCUMENTATION (0-100): How well is the content structured and documented?"""
