"""Cheap pre-filter deciding which screen strings are worth parsing."""

from __future__ import annotations

import re

from evanaliz.config import CandidateConfig, ParserConfig
from evanaliz.parsing.numbers import parse_coordinates

_DEFAULT_CONFIG = CandidateConfig()

_WHITESPACE = re.compile(r"\s+")


def contains_currency(text: str, config: CandidateConfig | None = None) -> bool:
    cfg = config or _DEFAULT_CONFIG
    return any(indicator in text for indicator in cfg.currency_indicators)


def contains_large_number(text: str, config: CandidateConfig | None = None) -> bool:
    """True if the text holds at least ``min_digit_count`` digits, separators ignored."""
    cfg = config or _DEFAULT_CONFIG
    digits = sum(1 for ch in text if ch.isdigit())
    return digits >= cfg.min_digit_count


def label_key(text: str) -> str:
    """Case-insensitive key for screen labels, Turkish dotted capital included."""
    # "FİYAT".casefold() keeps the combining dot, so fold the Turkish capital first
    return text.strip().replace("İ", "I").casefold()


def contains_important_label(text: str, config: CandidateConfig | None = None) -> bool:
    cfg = config or _DEFAULT_CONFIG
    key = label_key(text)
    return any(label_key(label) in key for label in cfg.important_labels)


def is_coordinate(text: str, parser_config: ParserConfig | None = None) -> bool:
    return parse_coordinates(text, parser_config) is not None


def is_candidate(
    text: str | None,
    config: CandidateConfig | None = None,
    parser_config: ParserConfig | None = None,
) -> bool:
    """Decide whether a raw string may carry a price, rent or location."""
    if text is None or not text.strip():
        return False
    cfg = config or _DEFAULT_CONFIG

    trimmed = text.strip()
    if len(trimmed) < cfg.min_length:
        return False

    return (
        contains_important_label(trimmed, cfg)
        or is_coordinate(trimmed, parser_config)
        or contains_currency(trimmed, cfg)
        or contains_large_number(trimmed, cfg)
    )


def clean_text(text: str) -> str:
    """Normalize whitespace only; no numeric conversion happens here."""
    return _WHITESPACE.sub(" ", text.replace("\u00a0", " ")).strip()


def normalize_number_format(text: str) -> str:
    """Drop grouping dots inside digit-bearing tokens, for display.

    "3.500.000 TL" -> "3500000 TL"
    """
    parts = text.split(" ")
    return " ".join(
        part.replace(".", "") if any(ch.isdigit() for ch in part) else part
        for part in parts
    )


def filter_candidates(
    texts: list[str],
    config: CandidateConfig | None = None,
    parser_config: ParserConfig | None = None,
) -> list[str]:
    """Clean every text and keep the candidates, preserving order."""
    cleaned = (clean_text(t) for t in texts if t is not None)
    return [t for t in cleaned if is_candidate(t, config, parser_config)]
