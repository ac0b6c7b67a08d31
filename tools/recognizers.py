"""Typed input recognizers for the interview steps.

Each step declares what it expects (free text, one of a closed list of
choices, an integer) and the matching recognizer turns the raw reply into
that type, or None when nothing usable was found.
"""
import re
import unicodedata
from dataclasses import dataclass
from difflib import SequenceMatcher
from enum import Enum
from typing import List, Optional

from config.settings import CHOICE_MATCH_THRESHOLD

_NUMBER_RE = re.compile(r"[-+]?\d+(?:[.,]\d+)?")


class InputKind(Enum):
    TEXT = "text"
    CHOICE = "choice"
    INTEGER = "integer"


@dataclass
class FoundChoice:
    """Best matching option for a choice reply."""
    value: str
    index: int
    score: float


def _normalize(text: str) -> str:
    """Lowercase, strip accents and collapse whitespace."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


def recognize_text(reply: Optional[str]) -> Optional[str]:
    if reply is None:
        return None
    text = reply.strip()
    return text or None


def recognize_choice(
    reply: Optional[str],
    options: List[str],
    threshold: float = CHOICE_MATCH_THRESHOLD,
) -> Optional[FoundChoice]:
    """
    Match a reply against option labels.

    Accepts an exact label, its 1-based position ("1", "2"), or anything
    whose similarity to a label (as a whole or word by word) reaches the
    threshold. A fuzzy candidate must start with the label's first letter,
    so "menino" does not land on "Feminino". Ties go to the earlier option.
    """
    text = recognize_text(reply)
    if text is None or not options:
        return None

    normalized = _normalize(text)
    labels = [_normalize(option) for option in options]

    # Exact label
    for i, label in enumerate(labels):
        if normalized == label:
            return FoundChoice(value=options[i], index=i, score=1.0)

    # Position in the list
    if normalized.isdigit():
        position = int(normalized)
        if 1 <= position <= len(options):
            return FoundChoice(value=options[position - 1], index=position - 1, score=1.0)
        return None

    candidates = [normalized] + normalized.split()
    best: Optional[FoundChoice] = None
    for i, label in enumerate(labels):
        score = max(
            (SequenceMatcher(None, c, label).ratio() for c in candidates if c[:1] == label[:1]),
            default=0.0,
        )
        if best is None or score > best.score:
            best = FoundChoice(value=options[i], index=i, score=score)

    if best is not None and best.score >= threshold:
        return best
    return None


def recognize_int(reply: Optional[str]) -> Optional[int]:
    """First number in the reply, rounded to an int. '165 cm' -> 165, '1,5' -> 2."""
    text = recognize_text(reply)
    if text is None:
        return None
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    try:
        return int(round(float(match.group().replace(",", "."))))
    except (ValueError, OverflowError):
        return None
