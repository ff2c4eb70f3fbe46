from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from studyreflect.dependencies import ChatClientDep
from studyreflect.models.study import MindMap, StudyArtifacts, SummaryEntry
from studyreflect.services.study_materials import (
    generate_mind_map,
    generate_questions,
    generate_study_artifacts,
    generate_summary,
    summary_text,
)

router = APIRouter(prefix="/api/study", tags=["study"])


class StudyRequest(BaseModel):
    transcript: str


class QuestionsResponse(BaseModel):
    questions: list[str]


class SummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: list[SummaryEntry]
    summary_text: str | None = Field(default=None, alias="summaryText")


class MindMapResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mind_map: MindMap | None = Field(default=None, alias="mindMap")


@router.post("", response_model=StudyArtifacts)
def create_study_artifacts(req: StudyRequest, chat: ChatClientDep) -> StudyArtifacts:
    return generate_study_artifacts(req.transcript, chat)


@router.post("/questions", response_model=QuestionsResponse)
def create_questions(req: StudyRequest, chat: ChatClientDep) -> QuestionsResponse:
    return QuestionsResponse(questions=generate_questions(req.transcript, chat))


@router.post("/summary", response_model=SummaryResponse)
def create_summary(req: StudyRequest, chat: ChatClientDep) -> SummaryResponse:
    entries = generate_summary(req.transcript, chat)
    return SummaryResponse(summary=entries, summary_text=summary_text(entries))


@router.post("/mind-map", response_model=MindMapResponse)
def create_mind_map(req: StudyRequest, chat: ChatClientDep) -> MindMapResponse:
    return MindMapResponse(mind_map=generate_mind_map(req.transcript, chat))
