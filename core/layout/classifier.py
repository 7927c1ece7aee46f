"""Line classification for generated legal text.

Rules are evaluated in priority order and the first match wins: title (first
non-blank line only), numbered heading, heading, inline label, body.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from core.catalogue.models import Language
from core.layout.models import ClassifiedLine, LineClassification

_EN_HEADINGS = (
    r"THIS .* (executed|made).*",
    r"WHEREAS:?",
    r"NOW,? THIS (DEED|AGREEMENT).*",
    r"SCHEDULE.*:?",
    r"SCHEDULE OF PROPERTY:",
    r"FINAL RECIPIENT DETAILS:?",
    r"WITNESSES:?",
    r"SIGNED:?",
    r"GOVERNING LAW:?",
    r"CONSIDERATION:?",
    r"TITLE ?& ?ENCUMBRANCES:?",
    r"DELIVERY OF POSSESSION:?",
    r"INDEMNITY:?",
    r"TAXES ?& ?OUTGOINGS:?",
    r"MUTATION:?",
    r"TERM:?",
    r"RENT( AND SECURITY DEPOSIT)?:?",
    r"MAINTENANCE:?",
    r"UTILITIES( AND MAINTENANCE)?:?",
    r"ENTRY:?",
    r"TERMINATION:?",
    r"DISPUTE RESOLUTION.*:?",
    r"PROPERTY:?",
    r"PRICE:?",
    r"COMPLETION:?",
    r"POSSESSION:?",
    r"DEFAULT:?",
    r"REPRESENTATIONS:?",
    r"APPOINTMENT OF EXECUTOR:?",
    r"BEQUESTS:?",
    r"RESIDUARY:?",
    r"ASSETS:?",
    r"DEBTS ?& ?EXPENSES:?",
    r"INTERPRETATION:?",
    r"SIGNING:?",
)

_TA_HEADINGS = (
    r"இந்த .* (செய்யப்பட்டது|அன்று).*",
    r"இந்நாள் .*",
    r"எனினும்:?",
    r"இதனால்:?",
    r"அட்டவணை.*:?",
    r"இறுதி பெறுபவர்.*:?",
    r"சாட்சிகள்.*:?",
    r"கையெழுத்து.*:?",
    r"நடைமுறை சட்டம்.*:?",
    r"பரிசீலனை.*:?",
    r"உரிமை.*:?",
    r"பிடிப்பு.*:?",
    r"பாதுகாப்பு.*:?",
    r"வரி.*செலவுகள்.*:?",
    r"காலம்:?",
    r"வளாகம்:?",
    r"வாடகை.*வைப்பு.*:?",
    r"பராமரிப்பு:?",
    r"பொதுசேவைகள்:?",
    r"பார்வை:?",
    r"முடிவு:?",
)

HEADING_PATTERNS: Mapping[str, tuple[re.Pattern[str], ...]] = MappingProxyType(
    {
        "en": tuple(re.compile(pattern, re.IGNORECASE) for pattern in _EN_HEADINGS),
        "ta": tuple(re.compile(pattern) for pattern in _TA_HEADINGS),
    }
)

BOLD_LABELS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "en": frozenset(
            label.lower()
            for label in (
                "EXECUTANT",
                "RELEASEE",
                "LANDLORD",
                "TENANT",
                "DONOR",
                "DONEE",
                "PRINCIPAL",
                "ATTORNEY/AGENT",
                "SELLER",
                "BUYER",
                "SURVEY NO.",
                "PLOT NO.",
                "LAND AREA",
                "LOCATION",
                "PROPERTY DESCRIPTION",
                "NAME",
                "FATHER/HUSBAND",
                "PURPOSE",
                "CONFIDENTIAL INFORMATION",
                "EXCLUSIONS",
                "OBLIGATIONS",
                "TERM",
                "NO LICENSE",
                "REMEDIES",
                "GOVERNING LAW",
                "PROPERTY",
                "PRICE",
                "COMPLETION",
                "POSSESSION",
                "DEFAULT",
                "REPRESENTATIONS",
                "SIGNED",
                "WITNESSES",
            )
        ),
        "ta": frozenset(
            {
                "நிறைவேற்றுபவர்",
                "விடுதலை பெறுபவர்",
                "வீட்டு உரிமையாளர்",
                "குத்தகைதாரர்",
                "வழங்குபவர்",
                "பெறுபவர்",
                "முதன்மை",
                "முகவர்",
                "விற்பனையாளர்",
                "வாங்குபவர்",
                "ஆய்வு எண்",
                "பிளாட் எண்",
                "பரப்பளவு",
                "இடம்",
                "சொத்து விவரம்",
                "பெயர்",
                "தந்தை/கணவர்",
                "நோக்கம்",
                "ரகசிய தகவல்",
                "விலக்குகள்",
                "கடமைகள்",
                "காலம்",
                "சட்டம்",
                "சாட்சிகள்",
                "கையெழுத்து",
            }
        ),
    }
)

_NUMBERED_HEADING_RE = re.compile(r"\s*(\d+)\.\s*([A-Z0-9 ()'’&/.\-]+?)\.\s+(.*)")
_ALL_CAPS_HEADING_RE = re.compile(r"[A-Z0-9 ()'\".,&\-/]+:")
_LABEL_SPLIT_RE = re.compile(r"([^:]+):\s*(.*)")
_ALL_CAPS_LABEL_RE = re.compile(r"[A-Z0-9 /&().'\-]+")
_LABEL_PUNCTUATION = frozenset("/&().' -")

_TITLE = LineClassification(kind="title")
_HEADING = LineClassification(kind="heading")
_BODY = LineClassification(kind="body")


def classify_line(line: str, language: Language) -> LineClassification:
    """Classify one non-title line."""

    numbered = _NUMBERED_HEADING_RE.fullmatch(line)
    if numbered:
        number, title, rest = numbered.groups()
        return LineClassification(
            kind="numbered_heading",
            prefix=f"{number}. {title.strip()}.",
            rest=rest,
        )

    if is_heading(line, language):
        return _HEADING

    labelled = match_inline_label(line, language)
    if labelled is not None:
        label, rest = labelled
        return LineClassification(kind="inline_label", label=label, rest=rest)

    return _BODY


def classify_lines(lines: Iterable[str], language: Language) -> list[ClassifiedLine]:
    """Classify a document's lines; the first non-blank line is the title."""

    classified: list[ClassifiedLine] = []
    title_seen = False
    for line in lines:
        if not title_seen and line.strip():
            title_seen = True
            classified.append(ClassifiedLine(text=line, classification=_TITLE))
            continue
        classified.append(ClassifiedLine(text=line, classification=classify_line(line, language)))
    return classified


def is_heading(line: str, language: Language) -> bool:
    text = line.strip()
    if not text:
        return False
    patterns = HEADING_PATTERNS["ta" if language == "ta" else "en"]
    if any(pattern.fullmatch(text) for pattern in patterns):
        return True
    return language == "en" and _ALL_CAPS_HEADING_RE.fullmatch(text) is not None


def match_inline_label(line: str, language: Language) -> tuple[str, str] | None:
    """Return ``(label, rest)`` when the line starts with a recognised label."""

    match = _LABEL_SPLIT_RE.fullmatch(line)
    if match is None:
        return None
    raw_label, rest = match.groups()
    if not all(_is_label_char(char) for char in raw_label):
        return None

    label = raw_label.strip()
    if not label:
        return None
    wanted = label.lower() in BOLD_LABELS["ta" if language == "ta" else "en"]
    if not wanted and language == "en":
        wanted = _ALL_CAPS_LABEL_RE.fullmatch(label) is not None
    return (label, rest) if wanted else None


def _is_label_char(char: str) -> bool:
    # Letters, combining marks (Tamil vowel signs) and digits.
    return unicodedata.category(char)[0] in {"L", "M", "N"} or char in _LABEL_PUNCTUATION
