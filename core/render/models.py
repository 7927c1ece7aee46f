"""Export artifact models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ExportFormat = Literal["pdf", "docx"]

MEDIA_TYPES: dict[ExportFormat, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class ExportArtifact(BaseModel):
    """One rendered file ready to be written or streamed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    media_type: str
    content: bytes
