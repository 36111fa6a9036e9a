"""Name normalization and fuzzy matching shared by every checker.

Two organization names refer to the same entity only when their normalized
forms are equal; raw strings are never compared across sources.
"""

from __future__ import annotations

import logging
import math
import re
import unicodedata
from typing import TYPE_CHECKING

from .sources import ProviderMatch

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)

LEGAL_SUFFIXES = ("inc", "llc", "llp", "ltd", "corp", "foundation", "the")
MIN_SIGNIFICANT_WORD_LENGTH = 4
ID_MAX_LENGTH = 40

# Suffix boundaries use the same character class as the punctuation pass, so a
# second normalization never exposes a new suffix word.
_SUFFIX_RE = re.compile(r"(?<![a-z0-9])(?:" + "|".join(LEGAL_SUFFIXES) + r")(?![a-z0-9])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def _fold_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_org_name(name: str) -> str:
    value = _fold_accents(name).lower()
    value = _SUFFIX_RE.sub(" ", value)
    value = _NON_ALNUM_RE.sub(" ", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


def slugify(name: str, *, max_length: int = ID_MAX_LENGTH) -> str:
    return normalize_org_name(name).replace(" ", "-")[:max_length].strip("-")


def significant_words(name: str) -> list[str]:
    return [
        word
        for word in normalize_org_name(name).split(" ")
        if len(word) >= MIN_SIGNIFICANT_WORD_LENGTH
    ]


def match_provider_segments(
    name: str,
    segments: Iterable[str],
    *,
    threshold: float,
    borderline_margin: float,
) -> ProviderMatch:
    """Word-overlap match of an organization name against unstructured PDF lines.

    The name matches when at least ``ceil(words * threshold)`` of its
    significant words occur in some segment. Results whose overlap ratio lies
    within ``borderline_margin`` of the threshold are flagged as borderline and
    logged for a human to confirm.
    """

    words = significant_words(name)
    if not words:
        return ProviderMatch(matched=False, ratio=0.0, borderline=False)

    lines = list(segments)
    hits = [word for word in words if any(word in line for line in lines)]
    ratio = len(hits) / len(words)
    matched = len(hits) >= math.ceil(len(words) * threshold)
    borderline = abs(ratio - threshold) <= borderline_margin
    if borderline:
        log.warning(
            "Borderline provider-list match for %r: %d/%d words (ratio %.2f, threshold %.2f, %s)",
            name,
            len(hits),
            len(words),
            ratio,
            threshold,
            "accepted" if matched else "rejected",
        )
    return ProviderMatch(matched=matched, ratio=ratio, borderline=borderline)
