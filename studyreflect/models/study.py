from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SummaryEntry(BaseModel):
    type: Literal["header", "bullet"]
    content: str
    section: str | None = None


class MindMapDetail(BaseModel):
    title: str
    type: str = "detail"


class MindMapNode(BaseModel):
    title: str
    type: str = "subtopic"
    children: list[MindMapDetail] = Field(default_factory=list)


class MindMapCategory(BaseModel):
    title: str
    type: str = "category"
    nodes: list[MindMapNode] = Field(default_factory=list)


class MindMap(BaseModel):
    """topic -> categories -> subtopic nodes -> detail children"""

    topic: str
    categories: list[MindMapCategory] = Field(default_factory=list)


class StudyArtifacts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: list[SummaryEntry] = Field(default_factory=list)
    questions: list[str] = Field(default_factory=list)
    mind_map: MindMap | None = Field(default=None, alias="mindMap")
