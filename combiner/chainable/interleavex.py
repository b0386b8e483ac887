"""
Pixel interleaving component.

Merges the two standardized buffers of an ImagePair into one buffer by
alternating whole RGBA pixels between the sources.
"""

import numpy as np

from .basex import ChainComponent, ImagePair, PixelBuffer, ProcessingError, LogManager, CHANNELS
from ..cpu.interleave import alternate_pixels_cpu


def interleave(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Alternate 4-byte pixels: even pixel index from `first`, odd from `second`.

    Raises ValueError unless both arrays are flat, equally long and made of
    whole 4-byte pixels.
    """
    first = np.ascontiguousarray(first, dtype=np.uint8)
    second = np.ascontiguousarray(second, dtype=np.uint8)

    if first.ndim != 1 or second.ndim != 1:
        raise ValueError(f"Expected flat buffers, got {first.ndim}D and {second.ndim}D")
    if first.size != second.size:
        raise ValueError(f"Cannot interleave buffers of different lengths: {first.size} vs {second.size}")
    if first.size % CHANNELS != 0:
        raise ValueError(f"Buffer length {first.size} is not a whole number of {CHANNELS}-byte pixels")

    return alternate_pixels_cpu(first, second)


class PixelInterleaver(ChainComponent):
    """Component for combining an ImagePair into a single pixel buffer."""

    def __init__(self):
        super().__init__("PixelInterleaver")

    def _validate_input(self, data: ImagePair):
        """Both buffers must be byte-compatible before the kernel touches them."""
        if not isinstance(data, ImagePair):
            raise ProcessingError(f"Expected ImagePair, got {type(data)}", component=self.name)

        first_len = data.first.data.size
        second_len = data.second.data.size
        if first_len != second_len:
            raise ProcessingError(
                f"Cannot interleave buffers of different lengths: {first_len} vs {second_len}",
                component=self.name,
                details={'first_length': first_len, 'second_length': second_len}
            )

    def process(self, data: ImagePair) -> PixelBuffer:
        """
        Interleave the pair.

        Args:
            data: ImagePair with equally sized buffers

        Returns:
            PixelBuffer with the first image's dimensions holding the combined pixels
        """
        combined = interleave(data.first.data, data.second.data)

        history = list(data.first.metadata.get('processing_history', []))
        history.extend(data.second.metadata.get('processing_history', []))

        result = PixelBuffer(
            width=data.first.width,
            height=data.first.height,
            data=combined,
            metadata={
                'sources': [
                    data.first.metadata.get('source_file'),
                    data.second.metadata.get('source_file')
                ],
                'processing_history': history
            }
        )
        result.add_processing_step(self.name, {'pixel_count': result.pixel_count})

        LogManager.log_info(self.name, f"Interleaved {result.pixel_count} pixels ({combined.size} bytes)")
        return result
