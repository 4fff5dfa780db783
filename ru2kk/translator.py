"""High-level orchestration for document translation."""

from __future__ import annotations

import asyncio
import pathlib
import time
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .classifier import needs_translation
from .documents import join_document, read_document, split_document, write_document
from .providers import TranslationProvider, build_provider
from .scheduler import TaskScheduler
from .segmenter import translate_preserving_whitespace
from .structures import Outcome, PipelineOptions, TextUnit, TranslationResult


@dataclass
class TranslationSummary:
    """Report returned after processing a document."""

    input_path: pathlib.Path
    output_path: pathlib.Path
    total_units: int
    candidate_units: int
    translated_units: int
    fallback_units: int
    passthrough_units: int
    provider_name: str
    source_language: str
    target_language: str
    concurrency: int
    elapsed_seconds: float


class DocumentPipeline:
    """Translates an ordered sequence of lines, keeping every position."""

    def __init__(self, provider: TranslationProvider, *, concurrency: int = 4) -> None:
        if concurrency < 1:
            raise ValueError("Concurrency limit must be at least 1.")
        self.provider = provider
        self.concurrency = concurrency

    async def translate_units(
        self,
        units: Sequence[TextUnit | str],
    ) -> List[TranslationResult]:
        units = [
            unit if isinstance(unit, TextUnit) else TextUnit(index=index, text=unit)
            for index, unit in enumerate(units)
        ]
        slots: List[Optional[TranslationResult]] = [None] * len(units)
        scheduler = TaskScheduler(self.concurrency)

        for position, unit in enumerate(units):
            if needs_translation(unit.text):
                scheduler.submit(self._make_task(unit.text, position, slots))
            else:
                slots[position] = TranslationResult.passthrough(unit.text)

        await scheduler.join()

        missing = [index for index, slot in enumerate(slots) if slot is None]
        if missing:  # pragma: no cover - every task fills its slot
            raise RuntimeError(f"Translation left positions unfilled: {missing}")
        return slots  # type: ignore[return-value]

    def _make_task(
        self,
        text: str,
        position: int,
        slots: List[Optional[TranslationResult]],
    ):
        async def task() -> None:
            slots[position] = await translate_preserving_whitespace(text, self.provider)

        return task

    async def translate_text(self, content: str) -> Tuple[str, List[TranslationResult]]:
        results = await self.translate_units(split_document(content))
        return join_document(results), results


class TranslationRunner:
    """Coordinates reading, translation and writing of one document."""

    def __init__(
        self,
        *,
        input_path: pathlib.Path,
        output_path: pathlib.Path,
        options: PipelineOptions,
        provider_name: str | None = None,
        provider: TranslationProvider | None = None,
        verbose: bool = False,
        provider_debug: bool = False,
    ) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.options = options
        self.provider_name = provider_name
        self.provider = provider
        self.verbose = verbose
        self.provider_debug = provider_debug

    def run(self) -> TranslationSummary:
        return asyncio.run(self.run_async())

    async def run_async(self) -> TranslationSummary:
        start_time = time.time()

        content = read_document(self.input_path)
        units = split_document(content)
        if self.verbose:
            candidates = sum(1 for unit in units if needs_translation(unit.text))
            print(
                f"Read {len(units)} lines from {self.input_path}; "
                f"{candidates} need translation."
            )

        provider = self.provider or build_provider(
            self.provider_name, self.options, debug=self.provider_debug
        )
        pipeline = DocumentPipeline(provider, concurrency=self.options.concurrency)
        async with provider:
            results = await pipeline.translate_units(units)

        write_document(self.output_path, join_document(results))

        counts = Counter(result.outcome for result in results)
        if self.verbose and counts[Outcome.FALLBACK]:
            print(
                f"{counts[Outcome.FALLBACK]} lines kept their original text "
                "because translation was unavailable."
            )

        return TranslationSummary(
            input_path=self.input_path,
            output_path=self.output_path,
            total_units=len(results),
            candidate_units=counts[Outcome.TRANSLATED] + counts[Outcome.FALLBACK],
            translated_units=counts[Outcome.TRANSLATED],
            fallback_units=counts[Outcome.FALLBACK],
            passthrough_units=counts[Outcome.PASSTHROUGH],
            provider_name=provider.name,
            source_language=self.options.source_language,
            target_language=self.options.target_language,
            concurrency=self.options.concurrency,
            elapsed_seconds=time.time() - start_time,
        )
