"""
Image file opening and decoding component.

This component reads an image file from disk and decodes it with Pillow,
converting it into a standardized RGBA PixelBuffer plus the container
format tag reported by the decoder.
"""

import io
import numpy as np
from pathlib import Path
from typing import Optional, Tuple, Union
from PIL import Image, UnidentifiedImageError

from .basex import (
    ChainComponent, PixelBuffer, LogManager,
    UnableToReadImageFromPath, UnableToFormatImage, UnableToDecodeImage
)


class ImageOpener(ChainComponent):
    """Component for opening image files and decoding them to RGBA."""

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize ImageOpener component.

        Args:
            file_path: Path to the image file
        """
        super().__init__("ImageOpener")
        self.file_path = Path(file_path)

    def _read_bytes(self) -> bytes:
        try:
            return self.file_path.read_bytes()
        except OSError as e:
            raise UnableToReadImageFromPath(
                f"Unable to read image from path {self.file_path}: {e}",
                component=self.name,
                details={'file_path': str(self.file_path), 'os_error': str(e)}
            ) from e

    def process(self, data: Optional[PixelBuffer] = None) -> Tuple[PixelBuffer, str]:
        """
        Decode the image file.

        Args:
            data: Not used by ImageOpener (it's always the first component)

        Returns:
            Tuple of the decoded PixelBuffer and its format tag (e.g. 'PNG')
        """
        raw = self._read_bytes()

        try:
            image = Image.open(io.BytesIO(raw))
        except UnidentifiedImageError as e:
            raise UnableToFormatImage(
                f"Unable to determine image format of {self.file_path}",
                component=self.name,
                details={'file_path': str(self.file_path)}
            ) from e
        except Image.DecompressionBombError as e:
            raise UnableToDecodeImage(
                f"Refusing to decode {self.file_path}: {e}",
                component=self.name,
                details={'file_path': str(self.file_path), 'format': None, 'decode_error': str(e)}
            ) from e

        format_tag = image.format
        if not format_tag:
            raise UnableToFormatImage(
                f"Unable to determine image format of {self.file_path}",
                component=self.name,
                details={'file_path': str(self.file_path)}
            )

        try:
            rgba = image.convert('RGBA')
            pixels = np.asarray(rgba, dtype=np.uint8)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise UnableToDecodeImage(
                f"Unable to decode {format_tag} image {self.file_path}: {e}",
                component=self.name,
                details={'file_path': str(self.file_path), 'format': format_tag, 'decode_error': str(e)}
            ) from e
        finally:
            image.close()

        buffer = PixelBuffer.from_array(pixels, metadata={
            'source_file': str(self.file_path),
            'source_mode': image.mode,
        })
        buffer.add_processing_step(self.name, {
            'file_path': str(self.file_path),
            'format': format_tag
        })

        self.logger.info(f"Decoded {self.file_path.name}: {buffer.width}x{buffer.height} {format_tag}")
        LogManager.log_info(
            self.name,
            f"Decoded {self.file_path}: {buffer.width}x{buffer.height}, format {format_tag}, mode {image.mode}"
        )
        return buffer, format_tag

    def open(self) -> Tuple[PixelBuffer, str]:
        """
        Convenience method to decode the image with validation and logging.

        Returns:
            Tuple of the decoded PixelBuffer and its format tag
        """
        return self.execute(None)


# Convenience function for quick image decoding
def open_image(file_path: Union[str, Path]) -> Tuple[PixelBuffer, str]:
    """
    Convenience function to decode an image file.

    Args:
        file_path: Path to the image file

    Returns:
        Tuple of the decoded PixelBuffer and its format tag
    """
    return ImageOpener(file_path).open()
