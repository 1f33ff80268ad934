"""Turn raw provider text into a validated pydantic model.

Providers wrap JSON in prose or markdown fences inconsistently, so parsing
runs through a fixed chain of strategies:

    1. direct ``json.loads``
    2. strip markdown code fences, parse again
    3. first balanced ``{...}`` / ``[...]`` substring
    4. question/answer line heuristic (freeform question modes only)

Each structure a strategy yields is validated against the mode schema. A
schema violation does not end the chain: prose answers often contain stray
literals such as ``[2, 7, 11, 15]`` that parse but are not the payload, so the
next strategy still gets its turn. ``normalize`` returns a
``NormalizationFailure`` once every strategy is exhausted instead of raising.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from careerpilot.ai.errors import NormalizationFailure
from careerpilot.ai.types import ResponseShapeHint
from careerpilot.schemas import (
    CareerPathSet,
    CompanyRoadmap,
    EvaluationNarrative,
    FailureAnalysis,
    InterviewQuestionSet,
    ProjectComparison,
    ResumeReview,
    WorkdaySimulation,
)

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_FENCED_BLOCK_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n(.*?)```", re.DOTALL)
_ESCAPE_RE = re.compile(r'\\(["\\/bfnrtu])|\\(.)', re.DOTALL)
_CAMEL_RE = re.compile(r"^[a-z]+(?:[A-Z][a-z0-9]*)+$")
_CAMEL_SPLIT_RE = re.compile(r"(?<!^)(?=[A-Z])")

_QUESTION_MARKER_RE = re.compile(r"(?im)^\s*(?:\*\*)?(?:Q(?:uestion)?\s*)?\d+\s*[.):]\s+")
_ANSWER_DELIMITER_RE = re.compile(
    r"\n+\s*(?:\*\*)?(?:Suggested Answer|Sample Answer|Answer|Response|Solution)(?:\*\*)?\s*:\s*(?:\*\*)?",
    re.IGNORECASE,
)
_QUESTION_PREFIX_RE = re.compile(r"^(?:\*\*)?\s*(?:Question\s*:)?\s*", re.IGNORECASE)

_MAX_BALANCED_CANDIDATES = 25


@dataclass(frozen=True)
class ModeSchema:
    name: str
    model: type[BaseModel]
    list_key: str | None = None
    line_parser: Callable[[str], Any] | None = None


def _repair_escapes(text: str) -> str:
    """Drop backslashes from invalid JSON escapes such as ``\\-`` while keeping valid pairs."""

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return match.group(0)
        return match.group(2)

    return _ESCAPE_RE.sub(_replace, text)


def _loads(text: str) -> tuple[bool, Any]:
    candidate = text.strip()
    if not candidate:
        return False, None
    try:
        return True, json.loads(candidate)
    except (ValueError, RecursionError):
        pass
    repaired = _repair_escapes(candidate)
    if repaired == candidate:
        return False, None
    try:
        return True, json.loads(repaired)
    except (ValueError, RecursionError):
        return False, None


def strip_code_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = _FENCE_OPEN_RE.sub("", stripped, count=1)
        stripped = _FENCE_CLOSE_RE.sub("", stripped, count=1)
        return stripped.strip()
    match = _FENCED_BLOCK_RE.search(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _balanced_end(text: str, start: int) -> int | None:
    open_char = text[start]
    close_char = "}" if open_char == "{" else "]"
    depth = 0
    in_string = False
    escape_next = False
    for index in range(start, len(text)):
        ch = text[index]
        if escape_next:
            escape_next = False
            continue
        if ch == "\\":
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def extract_balanced_json(text: str) -> tuple[bool, Any]:
    """Parse the first balanced ``{...}`` or ``[...]`` substring that is valid JSON."""
    attempts = 0
    for start, ch in enumerate(text):
        if ch not in "{[":
            continue
        attempts += 1
        if attempts > _MAX_BALANCED_CANDIDATES:
            break
        end = _balanced_end(text, start)
        if end is None:
            continue
        ok, value = _loads(text[start:end])
        if ok and isinstance(value, (dict, list)):
            return True, value
    return False, None


def parse_question_lines(text: str) -> list[dict[str, str]] | None:
    """Recover ``[{question, answer}]`` pairs from a numbered prose list."""
    markers = list(_QUESTION_MARKER_RE.finditer(text))
    if not markers:
        return None
    pairs: list[dict[str, str]] = []
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
        block = text[marker.end():end]
        parts = _ANSWER_DELIMITER_RE.split(block, maxsplit=1)
        if len(parts) < 2:
            continue
        question = _QUESTION_PREFIX_RE.sub("", parts[0]).replace("**", "").strip()
        answer = parts[1].replace("**", "").strip()
        if question and answer:
            pairs.append({"question": question, "answer": answer})
    return pairs or None


def _snake_keys(value: Any) -> Any:
    if isinstance(value, dict):
        converted: dict[str, Any] = {}
        for key, item in value.items():
            name = key
            if isinstance(key, str) and _CAMEL_RE.match(key):
                name = _CAMEL_SPLIT_RE.sub("_", key).lower()
            converted[name] = _snake_keys(item)
        return converted
    if isinstance(value, list):
        return [_snake_keys(item) for item in value]
    return value


def _shape(value: Any, schema: ModeSchema) -> Any:
    if isinstance(value, list) and schema.list_key:
        return {schema.list_key: value}
    return value


def normalize(
    raw: str,
    shape_hint: ResponseShapeHint,
    schema: ModeSchema,
) -> BaseModel | NormalizationFailure:
    text = raw if isinstance(raw, str) else ""
    tried: list[str] = []
    schema_invalid = False

    strategies: list[tuple[str, Callable[[str], tuple[bool, Any]]]] = [
        ("direct", _loads),
        ("fence_strip", lambda value: _loads(strip_code_fences(value))),
        ("balanced_extract", extract_balanced_json),
    ]
    if schema.line_parser is not None and shape_hint == "freeform":
        line_parser = schema.line_parser

        def _lines(value: str) -> tuple[bool, Any]:
            parsed = line_parser(value)
            return parsed is not None, parsed

        strategies.append(("line_heuristic", _lines))

    for name, strategy in strategies:
        tried.append(name)
        ok, structure = strategy(text)
        if not ok:
            continue
        data = _snake_keys(_shape(structure, schema))
        try:
            result = schema.model.model_validate(data)
        except (ValueError, TypeError) as exc:
            logger.debug("normalize_schema_invalid schema=%s strategy=%s: %s", schema.name, name, exc)
            schema_invalid = True
            continue
        logger.debug("normalize_ok schema=%s strategy=%s", schema.name, name)
        return result

    if schema_invalid:
        return NormalizationFailure(f"{schema.name} response failed schema validation", strategies=tuple(tried))
    return NormalizationFailure(f"{schema.name} response could not be parsed", strategies=tuple(tried))


QUESTION_SCHEMA = ModeSchema(
    name="interview_questions",
    model=InterviewQuestionSet,
    list_key="questions",
    line_parser=parse_question_lines,
)

MODE_SCHEMAS: dict[str, ModeSchema] = {
    "technical": QUESTION_SCHEMA,
    "behavioral": QUESTION_SCHEMA,
    "dsa": QUESTION_SCHEMA,
    "mixed": QUESTION_SCHEMA,
    "roadmap": ModeSchema(name="company_roadmap", model=CompanyRoadmap),
    "evaluation": ModeSchema(name="evaluation_narrative", model=EvaluationNarrative),
    "simulation": ModeSchema(name="workday_simulation", model=WorkdaySimulation),
    "career": ModeSchema(name="career_paths", model=CareerPathSet, list_key="career_paths"),
    "resume": ModeSchema(name="resume_review", model=ResumeReview),
    "comparison": ModeSchema(name="project_comparison", model=ProjectComparison),
    "failure": ModeSchema(name="failure_analysis", model=FailureAnalysis),
}


def schema_for(mode: str) -> ModeSchema:
    return MODE_SCHEMAS[mode]
