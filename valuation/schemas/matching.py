"""
Matching Schemas
Street and apartment-complex resolution results.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class Language(str, Enum):
    UK = "uk"
    RU = "ru"


class MatchType(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    SUBSTRING = "substring"


class StreetName(BaseModel):
    """One name variant of a street."""
    name: str
    language: Language
    is_current: bool = True      # False = historical (pre-rename) name


class StreetRef(BaseModel):
    """A nearby street as seen by the matcher."""
    id: int
    names: List[StreetName] = []
    distance_km: Optional[float] = None   # distance to the subject point

    @classmethod
    def from_names(
        cls,
        id: int,
        names_uk: Optional[List[str]] = None,
        names_ru: Optional[List[str]] = None,
        distance_km: Optional[float] = None,
    ) -> "StreetRef":
        """
        Build from positional name lists where index 0 is the current name
        and every following entry is a historical alias.
        """
        names = []
        for language, variants in ((Language.UK, names_uk), (Language.RU, names_ru)):
            for idx, name in enumerate(variants or []):
                if not isinstance(name, str):
                    continue
                names.append(StreetName(name=name, language=language, is_current=idx == 0))
        return cls(id=id, names=names, distance_km=distance_km)

    @classmethod
    def from_model(cls, street, distance_km: Optional[float] = None) -> "StreetRef":
        return cls.from_names(street.id, street.names_uk, street.names_ru, distance_km)


class Candidate(BaseModel):
    street: StreetRef
    normalized: str
    original: str
    is_old_name: bool
    language: Language


class MatchResult(BaseModel):
    street: StreetRef
    match_type: MatchType
    matched_name: str
    is_old_name: bool
    similarity: float             # 0.0–1.0
    distance_km: Optional[float] = None


class ComplexMatch(BaseModel):
    complex_id: int
    complex_name: str
    matched_text: str
    score: float                  # 0.0–1.0


class BatchMatchStats(BaseModel):
    """Counters reported by one ComplexBatchMatcher run."""
    processed: int = 0
    matched: int = 0
    skipped: int = 0              # rows with too little text to search
    pages: int = 0
