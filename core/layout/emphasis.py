"""Value emphasis: bold every case-insensitive occurrence of a form value."""

from __future__ import annotations

import re
from collections.abc import Mapping

from core.layout.models import TextRun


def split_emphasis(text: str, values: Mapping[str, object]) -> list[TextRun]:
    """Split ``text`` into runs, bolding occurrences of non-blank values.

    Values are applied in mapping order; text already emphasised by an earlier
    value is not split again. Concatenating the run texts reproduces ``text``.
    """

    runs: list[TextRun] = [TextRun(text=text)]
    for value in values.values():
        needle = "" if value is None else str(value).strip()
        if not needle:
            continue
        pattern = re.compile(f"({re.escape(needle)})", re.IGNORECASE)
        next_runs: list[TextRun] = []
        for run in runs:
            if run.bold:
                next_runs.append(run)
                continue
            for index, piece in enumerate(pattern.split(run.text)):
                if piece:
                    next_runs.append(TextRun(text=piece, bold=index % 2 == 1))
        runs = next_runs

    return [run for run in runs if run.text]
