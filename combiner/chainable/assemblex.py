"""
Output assembly component.

Reserves a fixed-capacity OutputImage for the target resolution and
places the combined pixels into it before they reach the encoder.
"""

from typing import Union
from pathlib import Path

from .basex import ChainComponent, OutputImage, PixelBuffer, ProcessingError, LogManager, CHANNELS


def assemble(width: int, height: int, name: Union[str, Path]) -> OutputImage:
    """Create an empty OutputImage with room for exactly width x height RGBA pixels."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid output dimensions: {width}x{height}")
    return OutputImage(width=width, height=height, name=str(name), capacity=width * height * CHANNELS)


class OutputAssembler(ChainComponent):
    """Component that wraps combined pixels into the destination OutputImage."""

    def __init__(self, width: int, height: int, name: Union[str, Path]):
        super().__init__("OutputAssembler")
        self.width = width
        self.height = height
        self.destination = str(name)

    def _validate_input(self, data: PixelBuffer):
        if not isinstance(data, PixelBuffer):
            raise ProcessingError(f"Expected PixelBuffer, got {type(data)}", component=self.name)

    def process(self, data: PixelBuffer) -> OutputImage:
        output = assemble(self.width, self.height, self.destination)
        output.set_data(data.data)

        LogManager.log_info(
            self.name,
            f"Assembled {output.width}x{output.height} output for {output.name} "
            f"({output.data.size}/{output.capacity} bytes)"
        )
        return output
