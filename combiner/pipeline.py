"""
End-to-end combining pipeline.

Sequences the chainable components: decode both inputs, check that they
share a container format, reconcile and resize, interleave, assemble and
encode. Every failure is terminal for the run and leaves no output file.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .chainable import (
    ImageOpener, ImageResizer, PixelInterleaver, OutputAssembler, ImageSaver,
    ImagePair, LogManager, ProcessingError, DifferentImageFormats,
    ALWAYS_SECOND, RECONCILE_POLICIES, RESAMPLE_FILTERS
)


class PipelineState(Enum):
    START = 'start'
    DECODED = 'decoded'
    FORMAT_CHECKED = 'format_checked'
    RECONCILED = 'reconciled'
    INTERLEAVED = 'interleaved'
    ASSEMBLED = 'assembled'
    ENCODED = 'encoded'
    FAILED = 'failed'


@dataclass(frozen=True)
class CombineConfig:
    """Everything a run needs, built once at the command line boundary."""
    image_1: str
    image_2: str
    output: str
    policy: str = ALWAYS_SECOND
    resample: str = 'triangle'

    def __post_init__(self):
        if self.policy not in RECONCILE_POLICIES:
            raise ValueError(f"Unknown reconcile policy: {self.policy}. Use one of {RECONCILE_POLICIES}")
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(f"Unknown resample filter: {self.resample}. Use one of {tuple(RESAMPLE_FILTERS)}")


@dataclass
class CombineResult:
    output_path: Path
    resolution: Tuple[int, int]
    format_tag: str
    processing_history: List[Dict[str, Any]] = field(default_factory=list)


class Pipeline:
    """Runs one pair of images through the combining chain."""

    def __init__(self, config: CombineConfig):
        self.config = config
        self.state = PipelineState.START
        self.visited: List[PipelineState] = [PipelineState.START]
        self.error: Optional[ProcessingError] = None

    def _advance(self, state: PipelineState):
        self.state = state
        self.visited.append(state)
        LogManager.log_debug('Pipeline', f"State -> {state.value}")

    def _fail(self, error: ProcessingError):
        self.error = error
        self._advance(PipelineState.FAILED)
        LogManager.log_error('Pipeline', f"Run failed in {error.component or 'Pipeline'}: {error}", error)

    def _check_formats(self, first_format: str, second_format: str):
        if first_format != second_format:
            raise DifferentImageFormats(
                f"Images have different formats: {first_format} and {second_format}",
                component='Pipeline',
                details={'first_format': first_format, 'second_format': second_format}
            )

    def run(self) -> CombineResult:
        """
        Combine the two configured images into the configured output.

        Returns:
            CombineResult describing the written file

        Raises:
            ProcessingError: the typed error of the first failing stage
        """
        if self.state is not PipelineState.START:
            raise RuntimeError("A Pipeline instance can only run once")

        config = self.config
        LogManager.log_info(
            'Pipeline',
            f"Combining {config.image_1} + {config.image_2} -> {config.output} "
            f"(policy {config.policy}, filter {config.resample})"
        )

        try:
            first, first_format = ImageOpener(config.image_1).open()
            second, second_format = ImageOpener(config.image_2).open()
            self._advance(PipelineState.DECODED)

            self._check_formats(first_format, second_format)
            self._advance(PipelineState.FORMAT_CHECKED)

            pair = ImageResizer(config.policy, config.resample).execute(
                ImagePair(first=first, second=second, format_tag=first_format)
            )
            self._advance(PipelineState.RECONCILED)

            combined = PixelInterleaver().execute(pair)
            self._advance(PipelineState.INTERLEAVED)

            output = OutputAssembler(pair.first.width, pair.first.height, config.output).execute(combined)
            self._advance(PipelineState.ASSEMBLED)

            output_path = ImageSaver(first_format).execute(output)
            self._advance(PipelineState.ENCODED)

        except ProcessingError as e:
            self._fail(e)
            raise

        LogManager.log_info('Pipeline', f"Run completed: {output_path}")
        return CombineResult(
            output_path=output_path,
            resolution=(output.width, output.height),
            format_tag=first_format,
            processing_history=combined.metadata.get('processing_history', [])
        )


def combine_images(image_1: str, image_2: str, output: str, **kwargs) -> CombineResult:
    """
    Convenience function to combine two image files.

    Args:
        image_1: Path of the first input (supplies even pixels and the output format)
        image_2: Path of the second input (supplies odd pixels)
        output: Destination path
        **kwargs: Additional CombineConfig fields (policy, resample)

    Returns:
        CombineResult describing the written file
    """
    return Pipeline(CombineConfig(image_1, image_2, output, **kwargs)).run()
