from studyreflect.models.media import AudioPayload, MediaKind, TranscriptResult, UploadedFile
from studyreflect.models.study import (  # noqa: F401
    MindMap,
    MindMapCategory,
    MindMapDetail,
    MindMapNode,
    StudyArtifacts,
    SummaryEntry,
)

__all__ = ["AudioPayload", "MediaKind", "TranscriptResult", "UploadedFile", "MindMap", "StudyArtifacts", "SummaryEntry"]
