"""
Dimension reconciliation and resize component.

Chooses one common resolution for the two decoded inputs and resizes
whichever buffer does not already match it, so both buffers end up with
the same byte length before interleaving.
"""

import numpy as np
from typing import Tuple, Dict
from PIL import Image

from .basex import ChainComponent, ImagePair, PixelBuffer, ProcessingError, LogManager


Dimensions = Tuple[int, int]

ALWAYS_SECOND = 'always-second'
TRUE_MINIMUM = 'true-minimum'
RECONCILE_POLICIES = (ALWAYS_SECOND, TRUE_MINIMUM)

RESAMPLE_FILTERS: Dict[str, Image.Resampling] = {
    'nearest': Image.Resampling.NEAREST,
    'triangle': Image.Resampling.BILINEAR,
    'catmull-rom': Image.Resampling.BICUBIC,
    'lanczos3': Image.Resampling.LANCZOS,
}


def smallest_dimensions(dim_1: Dimensions, dim_2: Dimensions) -> Dimensions:
    """Return the pair covering fewer pixels; ties go to `dim_2`."""
    pix_1 = dim_1[0] * dim_1[1]
    pix_2 = dim_2[0] * dim_2[1]
    return dim_1 if pix_1 < pix_2 else dim_2


class DimensionReconciler:
    """Picks the resolution both images are standardized to.

    ``always-second`` keeps the historical behaviour of the tool, which always
    settled on the second image's size. ``true-minimum`` picks the image with
    the smaller pixel count.
    """

    def __init__(self, policy: str = ALWAYS_SECOND):
        if policy not in RECONCILE_POLICIES:
            raise ValueError(f"Unknown reconcile policy: {policy}. Use one of {RECONCILE_POLICIES}")
        self.policy = policy

    def reconcile(self, dim_a: Dimensions, dim_b: Dimensions) -> Dimensions:
        if self.policy == TRUE_MINIMUM:
            return smallest_dimensions(dim_a, dim_b)
        return dim_b


def resize_buffer(buffer: PixelBuffer, target: Dimensions, resample: str = 'triangle') -> PixelBuffer:
    """Exact, non-aspect-preserving resize into a new buffer.

    Each channel is filtered as its own band so colour bytes under
    transparent pixels are kept (Pillow premultiplies alpha for RGBA).
    """
    image = Image.fromarray(buffer.to_array())
    bands = [band.resize(target, RESAMPLE_FILTERS[resample]) for band in image.split()]
    resized = Image.merge('RGBA', bands)
    result = PixelBuffer.from_array(np.asarray(resized, dtype=np.uint8), metadata=buffer.metadata)
    result.metadata['processing_history'] = list(buffer.metadata.get('processing_history', []))
    return result


class ImageResizer(ChainComponent):
    """Component that standardizes both images of a pair to one resolution."""

    def __init__(self, policy: str = ALWAYS_SECOND, resample: str = 'triangle'):
        super().__init__("ImageResizer")

        if resample not in RESAMPLE_FILTERS:
            raise ValueError(f"Unknown resample filter: {resample}. Use one of {tuple(RESAMPLE_FILTERS)}")

        self.reconciler = DimensionReconciler(policy)
        self.resample = resample

    @property
    def policy(self) -> str:
        return self.reconciler.policy

    def _validate_input(self, data: ImagePair):
        if not isinstance(data, ImagePair):
            raise ProcessingError(f"Expected ImagePair, got {type(data)}", component=self.name)

    def _validate_output(self, data: ImagePair):
        if data.first.data.size != data.second.data.size:
            raise ProcessingError(
                f"Resized buffers differ in length: {data.first.data.size} vs {data.second.data.size}",
                component=self.name
            )

    def _standardize(self, buffer: PixelBuffer, target: Dimensions) -> PixelBuffer:
        if buffer.dimensions == target:
            return buffer

        resized = resize_buffer(buffer, target, self.resample)
        resized.add_processing_step(self.name, {
            'source_resolution': buffer.dimensions,
            'target_resolution': target,
            'resample': self.resample,
            'policy': self.policy
        })
        self.logger.info(f"Resized {buffer.dimensions} -> {target} using {self.resample}")
        return resized

    def process(self, data: ImagePair) -> ImagePair:
        """
        Resize the pair to the reconciled resolution.

        Args:
            data: ImagePair of decoded inputs

        Returns:
            ImagePair whose buffers share width, height and byte length
        """
        target = self.reconciler.reconcile(data.first.dimensions, data.second.dimensions)

        LogManager.log_info(
            self.name,
            f"Reconciled {data.first.dimensions} and {data.second.dimensions} to {target} "
            f"(policy {self.policy})"
        )

        return ImagePair(
            first=self._standardize(data.first, target),
            second=self._standardize(data.second, target),
            format_tag=data.format_tag
        )

