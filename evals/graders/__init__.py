"""Eval graders -- deterministic checks over engine results."""

from .code_grader import CodeGrader, CodeGraderResult, consensus_shape_grader
