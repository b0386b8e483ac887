"""
Image encoding and saving component.

Encodes an assembled OutputImage with Pillow in the container format of
the first input and writes it to its destination. The file is only
created once the whole image has been encoded successfully.
"""

import io
from pathlib import Path
from PIL import Image

from .basex import ChainComponent, OutputImage, ProcessingError, UnableToSaveImage, LogManager, CHANNELS


# Pillow encoders that cannot store an alpha channel
OPAQUE_FORMATS = {'JPEG', 'MPO'}


class ImageSaver(ChainComponent):
    """Component for writing the combined image to disk."""

    def __init__(self, format_tag: str):
        super().__init__("ImageSaver")
        self.format_tag = format_tag

    def _validate_input(self, data: OutputImage):
        if not isinstance(data, OutputImage):
            raise ProcessingError(f"Expected OutputImage, got {type(data)}", component=self.name)

        expected = data.width * data.height * CHANNELS
        if data.data.size != expected:
            raise ProcessingError(
                f"Output image holds {data.data.size} bytes, expected {expected}",
                component=self.name
            )

    def _encode(self, data: OutputImage) -> bytes:
        image = Image.fromarray(data.data.reshape(data.height, data.width, CHANNELS))
        if self.format_tag in OPAQUE_FORMATS:
            LogManager.log_warning(self.name, f"{self.format_tag} cannot store alpha, writing RGB channels only")
            image = image.convert('RGB')

        stream = io.BytesIO()
        try:
            image.save(stream, format=self.format_tag)
        except (OSError, ValueError, KeyError) as e:
            raise UnableToSaveImage(
                f"Unable to encode {data.name} as {self.format_tag}: {e}",
                component=self.name,
                details={'destination': data.name, 'format': self.format_tag, 'encode_error': str(e)}
            ) from e
        return stream.getvalue()

    def process(self, data: OutputImage) -> Path:
        """
        Encode and write the output image.

        Args:
            data: Assembled OutputImage

        Returns:
            Path of the written file
        """
        encoded = self._encode(data)
        destination = Path(data.name)

        try:
            destination.write_bytes(encoded)
        except OSError as e:
            raise UnableToSaveImage(
                f"Unable to save image to {destination}: {e}",
                component=self.name,
                details={'destination': str(destination), 'os_error': str(e)}
            ) from e

        self.logger.info(f"Saved {data.width}x{data.height} {self.format_tag} image to {destination}")
        LogManager.log_info(self.name, f"Wrote {len(encoded)} bytes to {destination}")
        return destination
