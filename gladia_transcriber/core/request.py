"""Build the POST /v2/pre-recorded request body from a work item.

WHY: A transcription job has one required field (audio_url) and a long
tail of optional features, each a boolean toggle plus a config object.
Writing one conditional block per feature repeats the same pattern nine
times; a declarative table keeps the pattern in one place and makes the
per-feature exceptions explicit.

HOW: FEATURE_BLOCKS lists every toggle+config feature with the function
that extracts its config from the raw form value. BOOLEAN_FLAGS lists
plain on/off features. build_transcription_request() walks both tables,
then adds the untoggled language_config and custom_metadata blocks.

RULES:
- A feature's keys are absent (never null or false) when its toggle is off
- Toggle on with an empty config still sends the toggle and {} config
- custom_vocabulary is the exception: the whole block is omitted unless
  the vocabulary is non-empty or default_intensity is set
- Plain boolean flags are sent only when true
- language_config is sent only with non-empty languages or a boolean
  code_switching
- custom_metadata is sent only when the built map is non-empty
- An empty audio_url is forwarded as-is (the API validates it)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from gladia_transcriber.core.items import WorkItem
from gladia_transcriber.core.normalize import (
    build_metadata_map,
    build_spelling_dictionary,
    collection_entries,
    is_set,
    normalize_diarization,
    normalize_vocabulary,
    select_fields,
)

logger = logging.getLogger(__name__)

ConfigExtractor = Callable[[Mapping[str, Any]], Optional[Dict[str, Any]]]


@dataclass(frozen=True)
class FeatureBlock:
    """Descriptor for one toggle+config feature of the request body.

    RULES:
    - flag: body key and parameter name of the toggle
    - config_key: body key and parameter name of the config object
    - extractor: raw config → API config (None or {} means "no config")
    - empty_is_omitted: when True, an empty extracted config drops the
      whole feature, toggle included
    """

    flag: str
    extractor: ConfigExtractor
    empty_is_omitted: bool = False

    @property
    def config_key(self) -> str:
        return "{}_config".format(self.flag)


def _fields(*keys: str) -> ConfigExtractor:
    def extract(cfg: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return select_fields(cfg, keys)

    return extract


def _vocabulary_config(cfg: Mapping[str, Any]) -> Dict[str, Any]:
    vocabulary = normalize_vocabulary(cfg.get("vocabulary") or {})
    if not vocabulary and not is_set(cfg, "default_intensity"):
        return {}
    out: Dict[str, Any] = {"vocabulary": vocabulary}
    if is_set(cfg, "default_intensity"):
        out["default_intensity"] = cfg["default_intensity"]
    return out


def _spelling_config(cfg: Mapping[str, Any]) -> Dict[str, Any]:
    entries = collection_entries(cfg.get("spelling_dictionary"))
    return {"spelling_dictionary": build_spelling_dictionary(entries)}


FEATURE_BLOCKS: Tuple[FeatureBlock, ...] = (
    FeatureBlock("callback", _fields("url", "method")),
    FeatureBlock(
        "subtitles",
        _fields(
            "formats",
            "minimum_duration",
            "maximum_duration",
            "maximum_characters_per_row",
            "maximum_rows_per_caption",
            "style",
        ),
    ),
    FeatureBlock("diarization", normalize_diarization),
    FeatureBlock("summarization", _fields("type")),
    FeatureBlock(
        "translation",
        _fields(
            "target_languages",
            "model",
            "match_original_utterances",
            "lipsync",
            "context_adaptation",
            "context",
            "informal",
        ),
    ),
    FeatureBlock("custom_vocabulary", _vocabulary_config, empty_is_omitted=True),
    FeatureBlock("custom_spelling", _spelling_config),
    FeatureBlock("structured_data_extraction", _fields("classes")),
    FeatureBlock("audio_to_llm", _fields("prompts")),
)

BOOLEAN_FLAGS: Tuple[str, ...] = (
    "moderation",
    "named_entity_recognition",
    "chapterization",
    "name_consistency",
    "sentiment_analysis",
    "sentences",
    "display_mode",
    "punctuation_enhanced",
)


def _apply_feature(body: Dict[str, Any], block: FeatureBlock, item: WorkItem) -> None:
    if not item.get_parameter(block.flag, False):
        return
    raw = item.get_parameter(block.config_key, None)
    config = block.extractor(raw if isinstance(raw, Mapping) else {})
    if block.empty_is_omitted and not config:
        logger.debug("Item %d: %s enabled with empty config, omitted", item.index, block.flag)
        return
    body[block.flag] = True
    body[block.config_key] = config if config is not None else {}


def _language_config(item: WorkItem) -> Optional[Dict[str, Any]]:
    raw = item.get_parameter("language_config", None)
    if not isinstance(raw, Mapping):
        return None
    config = select_fields(raw, ("languages", "code_switching")) or {}
    languages = config.get("languages")
    has_languages = isinstance(languages, (list, tuple)) and len(languages) > 0
    if has_languages or isinstance(config.get("code_switching"), bool):
        return config
    return None


def build_transcription_request(item: WorkItem) -> Dict[str, Any]:
    """Assemble the job-creation body for one work item.

    Args:
        item: Work item carrying audio_url plus optional toggles/configs.

    Returns:
        The JSON-ready request dict, audio_url first.

    Raises:
        MissingParameterError: If audio_url is absent from the item.
    """
    audio_url = item.get_parameter("audio_url")
    if not audio_url:
        logger.warning("Item %d: empty audio_url forwarded to the API", item.index)

    body: Dict[str, Any] = {"audio_url": audio_url}

    for block in FEATURE_BLOCKS:
        _apply_feature(body, block, item)

    language_config = _language_config(item)
    if language_config is not None:
        body["language_config"] = language_config

    for flag in BOOLEAN_FLAGS:
        if item.get_parameter(flag, False):
            body[flag] = True

    metadata = build_metadata_map(
        collection_entries(item.get_parameter("custom_metadata", None))
    )
    if metadata:
        body["custom_metadata"] = metadata

    logger.debug("Item %d: request body keys %s", item.index, sorted(body))
    return body
