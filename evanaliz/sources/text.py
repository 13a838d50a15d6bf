"""Plain-text observation sources used by the command line."""

from __future__ import annotations

import sys
from pathlib import Path

from evanaliz.config import CandidateConfig, ParserConfig
from evanaliz.sources.base import ObservationSource


class StaticTextSource(ObservationSource):
    """Strings supplied directly, e.g. as command-line arguments."""

    SOURCE_NAME = "static"

    def __init__(
        self,
        texts: list[str],
        source_id: str | None = None,
        candidates: CandidateConfig | None = None,
        parser: ParserConfig | None = None,
    ):
        super().__init__(candidates, parser)
        self.texts = list(texts)
        self._source_id = source_id

    @property
    def source_id(self) -> str:
        return self._source_id or self.SOURCE_NAME

    def read_texts(self) -> list[str]:
        return self.texts


class TextFileSource(ObservationSource):
    """One string per line from a file, or from stdin when the path is ``-``."""

    SOURCE_NAME = "file"

    def __init__(
        self,
        path: Path | str,
        source_id: str | None = None,
        candidates: CandidateConfig | None = None,
        parser: ParserConfig | None = None,
    ):
        super().__init__(candidates, parser)
        self.path = str(path)
        self._source_id = source_id

    @property
    def source_id(self) -> str:
        return self._source_id or self.path

    def read_texts(self) -> list[str]:
        if self.path == "-":
            content = sys.stdin.read()
        else:
            content = Path(self.path).read_text(encoding="utf-8")
        return [line for line in content.splitlines() if line.strip()]
