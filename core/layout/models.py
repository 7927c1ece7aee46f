"""Line classification and styled layout models shared by all renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from core.catalogue.models import Language

LineKind = Literal["title", "numbered_heading", "heading", "inline_label", "body"]
EmphasisScope = Literal["all", "rest"]


@dataclass(frozen=True)
class LineClassification:
    """Structural role of one generated line.

    ``prefix`` is set for numbered headings and ``label`` for inline labels;
    ``rest`` carries the remainder of the line for both.
    """

    kind: LineKind
    prefix: str | None = None
    label: str | None = None
    rest: str | None = None


@dataclass(frozen=True)
class ClassifiedLine:
    text: str
    classification: LineClassification


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False


@dataclass(frozen=True)
class LayoutLine:
    """One output paragraph: styled runs or an empty spacer line."""

    kind: LineKind
    runs: tuple[TextRun, ...] = ()
    blank: bool = False

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass
class DocumentLayout:
    language: Language
    lines: list[LayoutLine] = field(default_factory=list)

    @property
    def title(self) -> str | None:
        for line in self.lines:
            if line.kind == "title":
                return line.text
        return None
