"""Sources of raw on-screen text."""

from evanaliz.sources.base import ObservationSource
from evanaliz.sources.text import StaticTextSource, TextFileSource

SOURCES: dict[str, type[ObservationSource]] = {
    "static": StaticTextSource,
    "file": TextFileSource,
}


def get_source(name: str) -> type[ObservationSource]:
    """Get a source class by name."""
    if name not in SOURCES:
        raise ValueError(f"Unknown source: {name}. Available: {list(SOURCES.keys())}")
    return SOURCES[name]
