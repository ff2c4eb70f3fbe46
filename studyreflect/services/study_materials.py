from __future__ import annotations

import logging

from studyreflect.models.study import MindMap, StudyArtifacts, SummaryEntry
from studyreflect.services.llm.client import ChatClient, ChatCompletionError
from studyreflect.services.llm.prompts import (
    MIND_MAP_MAX_TOKENS,
    MIND_MAP_SYSTEM,
    MIND_MAP_USER_TEMPLATE,
    QUESTIONS_MAX_TOKENS,
    QUESTIONS_USER_TEMPLATE,
    SUMMARY_MAX_TOKENS,
    SUMMARY_USER_TEMPLATE,
)
from studyreflect.services.study_parsers import (
    fallback_mind_map,
    fallback_questions,
    fallback_summary,
    parse_mind_map,
    parse_questions,
    parse_summary,
)

logger = logging.getLogger(__name__)


def _preview(transcript: str, n: int = 100) -> str:
    return transcript[:n] + ("..." if len(transcript) > n else "")


def generate_questions(transcript: str, chat: ChatClient) -> list[str]:
    if not (transcript or "").strip():
        return []

    logger.info("Generating questions", extra={"transcript_preview": _preview(transcript)})
    try:
        content = chat.complete(
            QUESTIONS_USER_TEMPLATE.format(transcript=transcript),
            max_tokens=QUESTIONS_MAX_TOKENS,
        )
    except ChatCompletionError as e:
        logger.warning("Question generation failed, using fallback", extra={"error": str(e)})
        return fallback_questions()

    return parse_questions(content)


def generate_summary(transcript: str, chat: ChatClient) -> list[SummaryEntry]:
    if not (transcript or "").strip():
        return []

    logger.info("Generating summary", extra={"transcript_preview": _preview(transcript)})
    try:
        content = chat.complete(
            SUMMARY_USER_TEMPLATE.format(transcript=transcript),
            max_tokens=SUMMARY_MAX_TOKENS,
        )
    except ChatCompletionError as e:
        logger.warning("Summary generation failed, using fallback", extra={"error": str(e)})
        return fallback_summary()

    return parse_summary(content)


def generate_mind_map(transcript: str, chat: ChatClient) -> MindMap | None:
    if not (transcript or "").strip():
        return None

    logger.info("Generating mind map", extra={"transcript_preview": _preview(transcript)})
    try:
        content = chat.complete(
            MIND_MAP_USER_TEMPLATE.format(transcript=transcript),
            system=MIND_MAP_SYSTEM,
            max_tokens=MIND_MAP_MAX_TOKENS,
        )
    except ChatCompletionError as e:
        logger.warning("Mind map generation failed, using fallback", extra={"error": str(e)})
        return fallback_mind_map()

    return parse_mind_map(content)


def generate_study_artifacts(transcript: str, chat: ChatClient) -> StudyArtifacts:
    """
    Regenerates all three artifacts from scratch for one transcript.
    """
    return StudyArtifacts(
        summary=generate_summary(transcript, chat),
        questions=generate_questions(transcript, chat),
        mind_map=generate_mind_map(transcript, chat),
    )


def summary_text(entries: list[SummaryEntry]) -> str | None:
    """
    Plain-text rendering of a structured summary (for copy/export).
    """
    if not entries:
        return None

    lines: list[str] = []
    for e in entries:
        if e.type == "header":
            if lines:
                lines.append("")
            lines.append(f"{e.content}:")
        else:
            lines.append(f"- {e.content}")
    text = "\n".join(lines).strip()
    return text or None
