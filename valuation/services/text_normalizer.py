"""
Text Normalizer
Canonical form of street and complex names for comparison:
lower case, no accents on Latin letters, no quotes or apostrophes, punctuation turned
into spaces, single spaces. All functions are pure and accept None.
"""
import re
import unicodedata
from typing import Optional

# Normalized candidates shorter than this never enter a matching pool
MIN_CANDIDATE_LENGTH = 3

_QUOTES_RE = re.compile(r"[\"'«»„“”‘’`ʼ]")
_DASHES_RE = re.compile(r"[‐‑‒–—―]")
_PUNCT_RE = re.compile(r"[^\w\s-]")
_SPACES_RE = re.compile(r"\s+")

_STREET_TYPES = (
    r"вулиця|вул\.|вул|улица|ул\.|ул|проспект|просп\.|просп|пр-т|пр\.|пр|"
    r"провулок|пров\.|пров|переулок|пер\.|пер|бульвар|бульв\.|бульв|б-р|"
    r"площа|пл\.|пл|площадь|набережна|набережная|наб\.|наб|шосе|шоссе|"
    r"алея|аллея|проїзд|проезд|узвіз|спуск|тупик|майдан"
)
# Abbreviations and generic words that are never a street's own name
_GENERIC_TYPES = (
    r"вулиця|вул\.?|улица|ул\.?|проспект|просп\.?|пр-т|пр\.?|"
    r"провулок|пров\.?|переулок|пер\.?|бульвар|бульв\.?|б-р|пл\.?|наб\.?"
)
_STREET_PREFIX_RE = re.compile(rf"^(?:{_STREET_TYPES})(?:(?<=\.)|(?=\s|$))\s*")
_STREET_SUFFIX_RE = re.compile(rf"\s+(?:{_STREET_TYPES})$")
_STREET_TYPE_RE = re.compile(rf"(?:{_STREET_TYPES})")
_GENERIC_TYPE_RE = re.compile(rf"(?:{_GENERIC_TYPES})")
_HOUSE_NUMBER_RE = re.compile(r"\s+\d+[\w/-]*$")

_COMPLEX_PREFIX_RE = re.compile(
    r"^(?:жк|жилой комплекс|житловий комплекс|кг|км|котеджне містечко|"
    r"коттеджный городок|коттеджное|котеджне|містечко|городок|таунхаус[иі]?|дуплекс[иі]?)\s*",
    re.IGNORECASE,
)
_PARENS_RE = re.compile(r"\([^)]*\)")
_BUILDING_RE = re.compile(r"буд\.\s*\d+", re.IGNORECASE)


def _strip_diacritics(text: str) -> str:
    """Drop accents from Latin letters; Cyrillic й, ї, ё stay as they are."""
    result = []
    for ch in unicodedata.normalize("NFC", text):
        decomposed = unicodedata.normalize("NFKD", ch)
        if decomposed != ch and "LATIN" in unicodedata.name(decomposed[0], ""):
            ch = "".join(c for c in decomposed if not unicodedata.combining(c))
        result.append(ch)
    return "".join(result)


def normalize(text: Optional[str]) -> str:
    """Return the comparison form of `text` ("" for None or blank input)."""
    if not text:
        return ""
    result = _strip_diacritics(str(text).lower())
    result = _QUOTES_RE.sub("", result)
    result = _DASHES_RE.sub("-", result)
    result = _PUNCT_RE.sub(" ", result).replace("_", " ")
    return _SPACES_RE.sub(" ", result).strip()


def _strip_street_type(name: str) -> str:
    """Drop one leading or trailing street-type word, never the whole name."""
    remainders = [
        r for r in (_STREET_PREFIX_RE.sub("", name, count=1), _STREET_SUFFIX_RE.sub("", name, count=1))
        if r and r != name
    ]
    for remainder in remainders:
        if not _STREET_TYPE_RE.fullmatch(remainder):
            return remainder
    # Only type words left, e.g. "вул. набережна": keep the one that can be a name
    for remainder in remainders:
        if not _GENERIC_TYPE_RE.fullmatch(remainder):
            return remainder
    return name


def normalize_street_name(text: Optional[str]) -> str:
    """
    Normalize a street name and drop the street-type word around it,
    so "вул. Шевченка" and "Шевченка вулиця" compare equal. Names that are
    themselves type words ("Набережна") are kept.
    """
    if not text:
        return ""
    # Abbreviations keep their dot until the type word is removed
    lowered = _SPACES_RE.sub(" ", _strip_diacritics(str(text).lower())).strip()
    lowered = _HOUSE_NUMBER_RE.sub("", lowered)
    result = normalize(_strip_street_type(lowered))
    return _HOUSE_NUMBER_RE.sub("", result).strip()


def clean_complex_name(text: Optional[str]) -> str:
    """Lower-cased complex name without "ЖК"-style prefixes, quotes, brackets and building numbers."""
    if not text:
        return ""
    result = str(text).lower().strip()
    result = _COMPLEX_PREFIX_RE.sub("", result)
    result = _QUOTES_RE.sub("", result)
    result = _PARENS_RE.sub("", result)
    result = _BUILDING_RE.sub("", result)
    return _SPACES_RE.sub(" ", result).strip()
