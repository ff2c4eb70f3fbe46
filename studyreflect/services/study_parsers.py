"""
Best-effort parsers for free-form chat-completion output.

Each parser is a pure function over the model's raw text and never raises:
when nothing usable can be extracted it returns the documented fallback
value for that artifact.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from studyreflect.models.study import MindMap, SummaryEntry

FALLBACK_QUESTIONS: tuple[str, ...] = (
    "What is one key concept from this material?",
    "Explain an important idea in your own words.",
    "How could you apply something you learned from this material?",
)

_FALLBACK_SUMMARY_SECTIONS: tuple[tuple[str, str], ...] = (
    ("Key Themes", "Key insights and themes from the reflection"),
    ("Important Insights", "Personal growth and learning moments"),
    ("Personal Growth", "Areas for further exploration"),
)

_FALLBACK_MIND_MAP = {
    "topic": "Reflection Topics",
    "categories": [
        {
            "title": "Key Themes",
            "type": "category",
            "nodes": [
                {
                    "title": "Main theme 1",
                    "type": "subtopic",
                    "children": [
                        {"title": "Supporting detail 1", "type": "detail"},
                        {"title": "Supporting detail 2", "type": "detail"},
                    ],
                },
                {
                    "title": "Main theme 2",
                    "type": "subtopic",
                    "children": [{"title": "Supporting detail 3", "type": "detail"}],
                },
            ],
        },
        {
            "title": "Important Insights",
            "type": "category",
            "nodes": [
                {
                    "title": "Insight 1",
                    "type": "subtopic",
                    "children": [{"title": "Explanation", "type": "detail"}],
                },
            ],
        },
        {
            "title": "Personal Growth",
            "type": "category",
            "nodes": [
                {
                    "title": "Growth area 1",
                    "type": "subtopic",
                    "children": [{"title": "Development opportunity", "type": "detail"}],
                },
            ],
        },
    ],
}

_NUMBERED_RE = re.compile(r"^\d+\.\s*")
_NUMBERED_PREFIX_RE = re.compile(r"^\d+\.")
_DASH_STAR_RE = re.compile(r"^[-*]\s*")
_BULLET_RE = re.compile(r"^[•\-*]\s*")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_MIN_ITEM_CHARS = 10


def fallback_questions() -> list[str]:
    return list(FALLBACK_QUESTIONS)


def fallback_summary() -> list[SummaryEntry]:
    out: list[SummaryEntry] = []
    for section, bullet in _FALLBACK_SUMMARY_SECTIONS:
        out.append(SummaryEntry(type="header", content=section))
        out.append(SummaryEntry(type="bullet", content=bullet, section=section))
    return out


def fallback_mind_map() -> MindMap:
    return MindMap.model_validate(_FALLBACK_MIND_MAP)


def _non_blank_lines(content: str) -> list[str]:
    return [line for line in (content or "").split("\n") if line.strip()]


def parse_questions(content: str) -> list[str]:
    """
    Keep question-like lines from a model reply.

    For each non-blank line: strip a leading "N." then a leading "-" or "*",
    trim, and keep it if it is longer than 10 characters and contains "?".
    """
    questions: list[str] = []
    for line in _non_blank_lines(content):
        cleaned = _NUMBERED_RE.sub("", line.strip())
        cleaned = _DASH_STAR_RE.sub("", cleaned).strip()
        if len(cleaned) > _MIN_ITEM_CHARS and "?" in cleaned:
            questions.append(cleaned)

    return questions or fallback_questions()


def parse_summary(content: str) -> list[SummaryEntry]:
    """
    Turn a "**Section:**" / bullet list reply into header and bullet entries.

        **Key Themes:**            -> header "Key Themes"
        • Learning happens ...     -> bullet, section "Key Themes"
        2. Another point ...       -> bullet, section "Key Themes"

    Bullets of 10 characters or fewer are dropped.
    """
    entries: list[SummaryEntry] = []
    section = ""

    for line in _non_blank_lines(content):
        trimmed = line.strip()

        if trimmed.startswith("**") and trimmed.endswith(":**"):
            section = trimmed.replace("**", "").replace(":", "")
            entries.append(SummaryEntry(type="header", content=section))
            continue

        if trimmed.startswith(("•", "-", "*")):
            body = _BULLET_RE.sub("", trimmed, count=1).strip()
        elif _NUMBERED_PREFIX_RE.match(trimmed):
            body = _NUMBERED_RE.sub("", trimmed, count=1).strip()
        else:
            continue

        if len(body) > _MIN_ITEM_CHARS:
            entries.append(SummaryEntry(type="bullet", content=body, section=section))

    return entries or fallback_summary()


def parse_mind_map(content: str) -> MindMap:
    """
    Decode the outermost {...} span of a reply into a MindMap.

    Tolerates code fences and prose around the JSON. Falls back when there
    is no object, the JSON is invalid, or it lacks a topic.
    """
    m = _JSON_OBJECT_RE.search(content or "")
    if not m:
        return fallback_mind_map()

    try:
        payload = json.loads(m.group(0))
        return MindMap.model_validate(payload)
    except (ValueError, ValidationError):
        return fallback_mind_map()
