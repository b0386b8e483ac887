"""
Chainable image combining components.

This package provides a modular, chainable architecture where each component
has a single responsibility: decoding, reconciling sizes, interleaving
pixels, assembling the output and encoding it back to disk.
"""

from .basex import (
    CHANNELS, PixelBuffer, ImagePair, OutputImage, ChainComponent, LogManager,
    ProcessingError, UnableToReadImageFromPath, UnableToFormatImage, UnableToDecodeImage,
    DifferentImageFormats, BufferTooSmall, UnableToSaveImage
)
from .openx import ImageOpener, open_image
from .reconcilex import (
    DimensionReconciler, ImageResizer, resize_buffer, smallest_dimensions,
    ALWAYS_SECOND, TRUE_MINIMUM, RECONCILE_POLICIES, RESAMPLE_FILTERS
)
from .interleavex import PixelInterleaver, interleave
from .assemblex import OutputAssembler, assemble
from .savex import ImageSaver, OPAQUE_FORMATS

__all__ = [
    # Base classes
    'CHANNELS',
    'PixelBuffer',
    'ImagePair',
    'OutputImage',
    'ChainComponent',
    'LogManager',

    # Errors
    'ProcessingError',
    'UnableToReadImageFromPath',
    'UnableToFormatImage',
    'UnableToDecodeImage',
    'DifferentImageFormats',
    'BufferTooSmall',
    'UnableToSaveImage',

    # Components
    'ImageOpener',
    'DimensionReconciler',
    'ImageResizer',
    'PixelInterleaver',
    'OutputAssembler',
    'ImageSaver',

    # Convenience functions
    'open_image',
    'resize_buffer',
    'smallest_dimensions',
    'interleave',
    'assemble',

    # Options
    'ALWAYS_SECOND',
    'TRUE_MINIMUM',
    'RECONCILE_POLICIES',
    'RESAMPLE_FILTERS',
    'OPAQUE_FORMATS'
]
