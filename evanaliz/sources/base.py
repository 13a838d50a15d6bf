"""Base observation source interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from evanaliz.config import CandidateConfig, ParserConfig
from evanaliz.models import RawObservation
from evanaliz.parsing.candidates import filter_candidates

logger = logging.getLogger(__name__)


class ObservationSource(ABC):
    """Something that hands over the strings visible on a listing screen.

    Subclasses only read raw text; cleaning and candidate filtering happen in
    ``collect`` so every source emits observations in the same shape.
    """

    SOURCE_NAME: str = "unknown"

    def __init__(
        self,
        candidates: CandidateConfig | None = None,
        parser: ParserConfig | None = None,
    ):
        self.candidates = candidates or CandidateConfig()
        self.parser = parser or ParserConfig()

    @abstractmethod
    def read_texts(self) -> list[str]:
        """Return raw strings in screen order. Must be implemented by subclasses."""
        ...

    @property
    def source_id(self) -> str:
        return self.SOURCE_NAME

    def collect(self) -> RawObservation:
        try:
            raw = self.read_texts()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Reading from %s failed: %s", self.source_id, e)
            return RawObservation.empty(self.source_id, error_message=str(e))

        texts = filter_candidates(raw, self.candidates, self.parser)
        logger.debug("%s: kept %d of %d texts", self.source_id, len(texts), len(raw))
        return RawObservation(texts=texts, source_id=self.source_id)
