# backend/travelling_trip/utils/structured_output.py

"""
Tolerant decoding of LLM completions that are supposed to hold one JSON value.

Stages run from least to most invasive and stop at the first success, so a
well-formed completion is never touched by the cleanup heuristics:

1. direct parse of the trimmed text
2. parse after stripping a leading/trailing code fence
3. parse of the greedy ``{...}`` / ``[...]`` span
4. parse of that span after text normalisation

The module is pure; callers decide what to log.
"""

import json
import re
from typing import Any, List, Tuple


FENCE_OPEN_RE = re.compile(r"^```[\w-]*\s*")
FENCE_CLOSE_RE = re.compile(r"\s*```\s*$")
STRUCTURED_SPAN_RE = re.compile(r"[\[{][\s\S]*[\]}]")

# (pattern, replacement) in application order
_QUOTE_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile("[\u201c\u201d]"), '"'),
    (re.compile("[\u2018\u2019]"), "'"),
]

_CLEANUP_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r",\s*([}\]])"), r"\1"),
    (re.compile(r"\\n"), " "),
    (re.compile(r"\s+"), " "),
    (re.compile(r'([{,])\s*"(\w+)":'), r'\1"\2":'),
    (re.compile(r':\s*"([^"]*)"(?=\s*[,}])'), r':"\1"'),
]


class StructuredOutputError(ValueError):
    """Every decoding stage failed. ``attempts`` lists (stage, reason) pairs."""

    def __init__(self, message: str, attempts: List[Tuple[str, str]]):
        super().__init__(message)
        self.attempts = attempts


def strip_code_fence(text: str) -> str:
    return FENCE_CLOSE_RE.sub("", FENCE_OPEN_RE.sub("", text.strip())).strip()


def extract_structured_span(text: str):
    match = STRUCTURED_SPAN_RE.search(text)
    return match.group(0) if match else None


def strip_line_comments(text: str) -> str:
    """Drop ``//`` comments up to the end of the line; string literals are left alone."""
    out = []
    in_string = escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            out.append(ch)
        elif text.startswith("//", i):
            end = text.find("\n", i)
            if end == -1:
                break
            i = end
            continue
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def normalize_json_text(text: str) -> str:
    for pattern, replacement in _QUOTE_RULES:
        text = pattern.sub(replacement, text)
    text = strip_line_comments(text)
    for pattern, replacement in _CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def _summary(attempts: List[Tuple[str, str]]) -> str:
    return "\n".join(f"{stage} error: {reason}" for stage, reason in attempts)


def decode_structured_output(text: str) -> Any:
    """Best-effort parse of ``text``; raises StructuredOutputError on total failure."""
    attempts: List[Tuple[str, str]] = []
    raw = (text or "").strip()

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        attempts.append(("Direct parse", str(e)))

    unfenced = strip_code_fence(raw)
    try:
        return json.loads(unfenced)
    except json.JSONDecodeError as e:
        attempts.append(("Markdown cleanup", str(e)))

    span = extract_structured_span(unfenced)
    if span is None:
        attempts.append(("Regex extraction", "No JSON structure found in response"))
        raise StructuredOutputError(
            f"No JSON structure found in response\n{_summary(attempts)}", attempts
        )

    try:
        return json.loads(span)
    except json.JSONDecodeError as e:
        attempts.append(("Regex extraction", str(e)))

    cleaned = normalize_json_text(span)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        attempts.append(("Cleaning parse", str(e)))

    raise StructuredOutputError(f"Failed to parse JSON:\n{_summary(attempts)}", attempts)
