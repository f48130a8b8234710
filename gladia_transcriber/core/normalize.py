"""Pure transforms from raw form values to Gladia request sub-objects.

WHY: Option values arrive as deeply nested form structures (fixed
collections, parallel simple/advanced lists, mode selectors with stale
fields from the other mode). The Gladia API wants flat, clean config
objects with unset fields absent. Keeping these transforms pure makes
the request builder a simple table walk.

HOW: Each function takes the raw value and returns a new dict or list.
Nothing is mutated and nothing is raised; malformed entries are skipped.

RULES:
- A field is "set" when its key is present and its value is not None
- Never use truthiness for numbers or booleans: intensity 0 and
  enhanced False are legitimate explicit values
- select_fields returns None (omit the field) for a missing source,
  which is distinct from an empty dict (send the field with defaults)
- Key/value builders skip entries with an empty key; last write wins
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

VocabularyItem = Union[str, Dict[str, Any]]

COLLECTION_ENTRY_KEY = "entry"
"""Key under which the host wraps fixed-collection entries."""


def is_set(source: Mapping[str, Any], key: str) -> bool:
    """True when key is present in source with a non-None value."""
    return key in source and source[key] is not None


def collection_entries(value: Any) -> List[Dict[str, Any]]:
    """Flatten a form collection into a list of entry dicts.

    Accepts a plain list of entries or the host's envelope
    ``{"entry": [...]}`` (or ``{"entry": {...}}`` for a single entry).
    Anything else yields an empty list.
    """
    if isinstance(value, Mapping):
        value = value.get(COLLECTION_ENTRY_KEY)
        if isinstance(value, Mapping):
            value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [e for e in value if isinstance(e, Mapping)]


def select_fields(
    source: Optional[Mapping[str, Any]],
    allowed_keys: Sequence[str],
) -> Optional[Dict[str, Any]]:
    """Return the set fields of source among allowed_keys, in allowed_keys order.

    Returns None when source itself is None so callers can omit the field.
    """
    if source is None:
        return None
    return {key: source[key] for key in allowed_keys if is_set(source, key)}


def build_metadata_map(entries: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, Any]:
    """Build a key → value mapping from ordered {key, value} pairs.

    RULES:
    - Entries with an empty or missing key are skipped
    - A missing value becomes ""
    - Later duplicates overwrite earlier ones
    """
    out: Dict[str, Any] = {}
    for entry in entries or []:
        key = entry.get("key")
        if not key:
            continue
        value = entry.get("value")
        out[key] = "" if value is None else value
    return out


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def build_spelling_dictionary(
    entries: Optional[Iterable[Mapping[str, Any]]],
) -> Dict[str, List[str]]:
    """Build a term → variants mapping from ordered {key, values} pairs.

    RULES:
    - Entries that are not mappings, or have no key, are skipped
    - values must be a list; anything else counts as no variants
    """
    out: Dict[str, List[str]] = {}
    for entry in entries or []:
        if not isinstance(entry, Mapping):
            continue
        key = entry.get("key")
        if not key:
            continue
        out[key] = _as_list(entry.get("values"))
    return out


def _normalize_vocabulary_word(word: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    value = word.get("value")
    if not value:
        return None
    out: Dict[str, Any] = {"value": value}
    pronunciations = word.get("pronunciations")
    if isinstance(pronunciations, (list, tuple)) and pronunciations:
        out["pronunciations"] = list(pronunciations)
    if is_set(word, "intensity"):
        out["intensity"] = word["intensity"]
    if word.get("language"):
        out["language"] = word["language"]
    return out


def normalize_vocabulary(vocabulary: Optional[Mapping[str, Any]]) -> List[VocabularyItem]:
    """Merge simple and advanced vocabulary entries into one ordered list.

    WHY: The API takes a single list mixing bare strings and structured
    words, while the form keeps the two kinds in separate lists.

    HOW: Simple entries are copied first, as-is. Advanced entries follow,
    each reduced to its set fields.

    RULES:
    - An advanced entry without a value is dropped
    - pronunciations only when non-empty
    - intensity whenever explicitly set, including 0
    - language only when non-empty
    - Empty or missing input yields []
    - simple and advanced are read only when they are lists
    - Input that is not a mapping yields []
    """
    if not isinstance(vocabulary, Mapping) or not vocabulary:
        return []

    out: List[VocabularyItem] = _as_list(vocabulary.get("simple"))

    for word in _as_list(vocabulary.get("advanced")):
        if not isinstance(word, Mapping):
            continue
        normalized = _normalize_vocabulary_word(word)
        if normalized is not None:
            out.append(normalized)
    return out


def normalize_diarization(cfg: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Resolve the fixed/range diarization variant into API fields.

    WHY: The form keeps number_of_speakers and min/max_speakers side by
    side, so values from a previously selected mode linger. Only the
    fields of the selected mode may reach the API.

    HOW: "fixed" emits number_of_speakers; "range" emits whichever of
    min_speakers/max_speakers are set. enhanced is emitted in either
    mode whenever it is explicitly set.

    RULES:
    - Fields of the non-selected mode are always discarded
    - enhanced=False is kept (presence check, not truthiness)
    - Missing cfg or unknown mode yields only enhanced, if set
    - cfg that is not a mapping yields {}
    """
    if not isinstance(cfg, Mapping) or not cfg:
        return {}

    out: Dict[str, Any] = {}
    mode = cfg.get("mode")
    if mode == "fixed" and is_set(cfg, "number_of_speakers"):
        out["number_of_speakers"] = cfg["number_of_speakers"]
    elif mode == "range":
        for key in ("min_speakers", "max_speakers"):
            if is_set(cfg, key):
                out[key] = cfg[key]
    if is_set(cfg, "enhanced"):
        out["enhanced"] = cfg["enhanced"]
    return out
