from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .aggregation import AggregationEngine
from .composer import compose
from .config import Settings
from .extraction import MetadataExtractor
from .file_gate import is_eligible
from .host import Editor
from .models import AudioFile, ProviderOutcome, SongMetadata
from .providers.client import ProviderClient
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EnrichmentResult:
    metadata: SongMetadata
    outcomes: List[ProviderOutcome]
    text: str


@dataclass
class SongExplorer:
    settings: Settings
    extractor: MetadataExtractor
    engine: AggregationEngine

    @classmethod
    def create(cls, settings: Settings) -> "SongExplorer":
        client = ProviderClient(settings.enrichment)
        engine = AggregationEngine(client, timeout_seconds=settings.enrichment.request_timeout_seconds)
        return cls(settings=settings, extractor=MetadataExtractor(), engine=engine)

    def registry(self) -> ProviderRegistry:
        return ProviderRegistry.from_settings(self.settings)

    async def run(self, audio: AudioFile) -> Optional[EnrichmentResult]:
        if not is_eligible(audio.filename):
            logger.info("Ignoring %s: not an mp3, wav or flac file", audio.filename)
            return None
        metadata = self.extractor.extract(audio)
        registry = self.registry()
        outcomes = await self.engine.aggregate(metadata, registry.providers)
        return EnrichmentResult(metadata=metadata, outcomes=outcomes, text=compose(outcomes))

    async def enrich(self, audio: AudioFile) -> Optional[str]:
        result = await self.run(audio)
        return result.text if result else None

    async def handle_file_drop(self, audio: AudioFile, editor: Editor) -> Optional[str]:
        text = await self.enrich(audio)
        if text:
            editor.replace_selection(text)
        elif text is not None:
            logger.info("No song information found for %s", audio.filename)
        return text

    def insert_default_artist(self, editor: Editor) -> str:
        line = f"Artist: {self.settings.default_artist}"
        editor.replace_selection(line)
        return line
