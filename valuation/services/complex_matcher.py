"""
Complex Matcher
Finds an apartment complex mentioned in listing text (title + description).

For every language name of every complex three pattern kinds are built:
  - the name with an optional "ЖК"-style prefix and quotes   (ЖК «Comfort Town»)
  - the bare name as a whole word, names of 4+ chars only      (comfort town)
  - every pair of consecutive words of a multi-word name      (comfort town)

Each hit is scored:
  min(len(hit) / len(name), 1) × 0.6
  + 0.2 when the hit is in the first 100 chars (title zone)
  + 0.2 when "жк" / "житловий комплекс" / "жилой комплекс" precedes it
capped at 1.0. The best score wins; ties keep the first complex seen,
complexes being visited longest name first.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from valuation.schemas.matching import ComplexMatch
from valuation.services.text_normalizer import MIN_CANDIDATE_LENGTH, clean_complex_name

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 0.5
TITLE_ZONE_CHARS = 100
PREFIX_LOOKBEHIND_CHARS = 30

_OPTIONAL_PREFIX = (
    r"(?:жк|жилой комплекс|житловий комплекс|кг|км|коттеджный городок|котеджне містечко)?"
)
_PREFIX_BEFORE_RE = re.compile(r"(?:жк|жилой комплекс|житловий комплекс)\s*$", re.IGNORECASE)


@dataclass
class _NamePatterns:
    name: str                          # cleaned name the patterns were built from
    patterns: List[re.Pattern] = field(default_factory=list)


@dataclass
class _ComplexEntry:
    id: int
    display_name: str
    names: List[_NamePatterns] = field(default_factory=list)

    @property
    def sort_length(self) -> int:
        return max((len(n.name) for n in self.names), default=0)


def _build_patterns(cleaned: str) -> List[re.Pattern]:
    escaped = re.escape(cleaned)
    patterns = [
        re.compile(rf"{_OPTIONAL_PREFIX}\s*[\"«']?{escaped}[\"»']?", re.IGNORECASE),
    ]
    if len(cleaned) >= 4:
        patterns.append(re.compile(rf"\b{escaped}\b", re.IGNORECASE))

    words = [w for w in cleaned.split() if len(w) >= 3]
    for first, second in zip(words, words[1:]):
        patterns.append(
            re.compile(rf"\b{re.escape(first)}\s+{re.escape(second)}\b", re.IGNORECASE)
        )
    return patterns


def score_match(matched_text: str, name: str, text: str) -> float:
    """Score one pattern hit inside the lower-cased search `text`."""
    cleaned = clean_complex_name(matched_text)
    if not cleaned or not name:
        return 0.0

    score = min(len(cleaned) / len(name), 1.0) * 0.6

    if cleaned in text[:TITLE_ZONE_CHARS]:
        score += 0.2

    index = text.find(cleaned)
    if index >= 0:
        before = text[max(0, index - PREFIX_LOOKBEHIND_CHARS):index]
        if _PREFIX_BEFORE_RE.search(before):
            score += 0.2

    return min(score, 1.0)


class ComplexMatcher:
    """
    Holds the compiled patterns of a complex catalogue.
    Build it once per batch run; find_complex_in_text is pure.
    """

    def __init__(self, complexes: Iterable):
        entries = []
        for complex_ in complexes:
            entry = _ComplexEntry(
                id=complex_.id,
                display_name=complex_.name_uk or complex_.name_ru or complex_.name_en or "",
            )
            seen = set()
            for raw in (complex_.name_uk, complex_.name_ru, complex_.name_en):
                cleaned = clean_complex_name(raw)
                if len(cleaned) < MIN_CANDIDATE_LENGTH or cleaned in seen:
                    continue
                seen.add(cleaned)
                entry.names.append(_NamePatterns(name=cleaned, patterns=_build_patterns(cleaned)))
            if entry.names:
                entries.append(entry)

        # Longer names first so "Файна Таун Парк" is seen before "Файна Таун"
        entries.sort(key=lambda e: (-e.sort_length, e.id))
        self._entries = entries
        logger.info(f"[ComplexMatcher] Loaded {len(entries)} complexes with usable names")

    def __len__(self) -> int:
        return len(self._entries)

    def find_complex_in_text(
        self,
        text: Optional[str],
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> Optional[ComplexMatch]:
        if not text or not text.strip():
            return None
        haystack = text.lower()

        best: Optional[ComplexMatch] = None
        for entry in self._entries:
            for name in entry.names:
                for pattern in name.patterns:
                    hit = pattern.search(haystack)
                    if not hit:
                        continue
                    score = score_match(hit.group(0), name.name, haystack)
                    if best is None or score > best.score:
                        best = ComplexMatch(
                            complex_id=entry.id,
                            complex_name=entry.display_name,
                            matched_text=hit.group(0).strip(),
                            score=score,
                        )

        if best is None or best.score < min_score:
            return None
        return best
