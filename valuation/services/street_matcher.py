"""
Street Matcher
Resolves a free-text street mention against the streets near a listing.

Three ranked stages, the first one that succeeds wins:
  1. exact      normalized candidate == normalized input     similarity 1.0
  2. fuzzy      Levenshtein distance <= 2 (length diff <= 3)  1 - d / max(len)
  3. substring  one contains the other (candidate len >= 4)   similarity 0.7

The candidate pool holds every Ukrainian then every Russian name variant of
every street, in the order the streets were given. Historical names match
like current ones but are flagged with is_old_name.
"""
import logging
import re
from typing import Iterable, List, Optional

from rapidfuzz.distance import Levenshtein

from valuation.schemas.matching import Candidate, MatchResult, MatchType, StreetRef
from valuation.services.text_normalizer import MIN_CANDIDATE_LENGTH, normalize_street_name

logger = logging.getLogger(__name__)

MAX_FUZZY_DISTANCE = 2
MAX_LENGTH_DIFF = 3
MIN_SUBSTRING_LENGTH = 4
SUBSTRING_SIMILARITY = 0.7

_UK_NAME = r"([а-яіїєґ][а-яіїєґ\s\-']+)"
_RU_NAME = r"([а-яё][а-яё\s\-]+)"

# Ukrainian patterns are tried before Russian ones
_STREET_PATTERNS = [
    re.compile(rf"(?<!\w)(?:вул(?:иця)?\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:просп(?:ект)?\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:пров(?:улок)?\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:бульв(?:ар)?\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:пл(?:оща)?\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:набережна\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:узвіз\.?\s+){_UK_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:ул(?:ица)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:пр(?:оспект)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:пер(?:еулок)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:бульв(?:ар)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:пл(?:ощадь)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:наб(?:ережная)?\.?\s+){_RU_NAME}", re.IGNORECASE),
    re.compile(rf"(?<!\w)(?:спуск\.?\s+){_RU_NAME}", re.IGNORECASE),
]


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character edits turning `a` into `b`."""
    return Levenshtein.distance(a, b)


def build_candidates(streets: Iterable[StreetRef]) -> List[Candidate]:
    """Flatten streets into a matching pool; too-short names are left out."""
    pool: List[Candidate] = []
    for street in streets:
        # All uk variants of a street come before its ru variants
        ordered = sorted(street.names, key=lambda n: 0 if n.language.value == "uk" else 1)
        for variant in ordered:
            normalized = normalize_street_name(variant.name)
            if len(normalized) < MIN_CANDIDATE_LENGTH:
                continue
            pool.append(Candidate(
                street=street,
                normalized=normalized,
                original=variant.name,
                is_old_name=not variant.is_current,
                language=variant.language,
            ))
    return pool


def _result(candidate: Candidate, match_type: MatchType, similarity: float) -> MatchResult:
    return MatchResult(
        street=candidate.street,
        match_type=match_type,
        matched_name=candidate.original,
        is_old_name=candidate.is_old_name,
        similarity=similarity,
        distance_km=candidate.street.distance_km,
    )


def find_best_street_match(name: Optional[str], streets: Iterable[StreetRef]) -> Optional[MatchResult]:
    """
    Best match for `name` among `streets`, or None.

    Stages are never combined: an exact hit anywhere in the pool beats any
    fuzzy hit, and a fuzzy hit beats any substring hit.
    """
    normalized = normalize_street_name(name)
    if not normalized:
        return None

    pool = build_candidates(streets)
    if not pool:
        return None

    # Stage 1: exact
    for candidate in pool:
        if candidate.normalized == normalized:
            return _result(candidate, MatchType.EXACT, 1.0)

    # Stage 2: fuzzy, strictly smallest distance, first seen on ties
    best: Optional[Candidate] = None
    best_distance = MAX_FUZZY_DISTANCE + 1
    for candidate in pool:
        if abs(len(candidate.normalized) - len(normalized)) > MAX_LENGTH_DIFF:
            continue
        distance = levenshtein(normalized, candidate.normalized)
        if distance < best_distance:
            best, best_distance = candidate, distance
    if best is not None:
        longest = max(len(normalized), len(best.normalized))
        return _result(best, MatchType.FUZZY, 1 - best_distance / longest)

    # Stage 3: substring
    for candidate in pool:
        if len(candidate.normalized) < MIN_SUBSTRING_LENGTH:
            continue
        if candidate.normalized in normalized or normalized in candidate.normalized:
            return _result(candidate, MatchType.SUBSTRING, SUBSTRING_SIMILARITY)

    return None


def _clean_extracted(name: str) -> str:
    name = re.sub(r"\s*,.*$", "", name)
    name = re.sub(r"\s*\d+.*$", "", name)
    return name.strip(" -'")


def extract_street_name(text: Optional[str]) -> Optional[str]:
    """
    Pull a street mention such as "вул. Шевченка" or "ул. Ленина" out of
    free text. Returns the bare name, or None when nothing usable is found.
    """
    if not text:
        return None
    flat = re.sub(r"\s+", " ", str(text)).strip()
    for pattern in _STREET_PATTERNS:
        for match in pattern.finditer(flat):
            name = _clean_extracted(match.group(1))
            if len(name) >= MIN_CANDIDATE_LENGTH:
                return name
    return None


def match_street_in_text(text: Optional[str], streets: Iterable[StreetRef]) -> Optional[MatchResult]:
    """Extract a street mention from `text` and resolve it against `streets`."""
    street_name = extract_street_name(text)
    if not street_name:
        return None
    result = find_best_street_match(street_name, streets)
    if result:
        logger.debug(
            f"[StreetMatcher] '{street_name}' -> street {result.street.id} "
            f"({result.match_type.value}, {result.similarity:.2f})"
        )
    return result
