import numpy as np
import pytest
from PIL import Image

from combiner.chainable.assemblex import assemble
from combiner.chainable.basex import UnableToSaveImage
from combiner.chainable.savex import ImageSaver


def _output(path, pixels):
    height, width = pixels.shape[:2]
    output = assemble(width, height, path)
    output.set_data(pixels.reshape(-1))
    return output


def test_image_saver_writes_rgba_png(tmp_path, first_pixels):
    destination = tmp_path / 'combined.png'

    written = ImageSaver('PNG').execute(_output(destination, first_pixels))

    assert written == destination
    with Image.open(destination) as image:
        assert image.format == 'PNG'
        assert image.mode == 'RGBA'
        assert np.array_equal(np.asarray(image), first_pixels)


def test_image_saver_drops_alpha_for_jpeg(tmp_path):
    destination = tmp_path / 'combined.jpg'
    pixels = np.full((4, 4, 4), 128, dtype=np.uint8)

    ImageSaver('JPEG').execute(_output(destination, pixels))

    with Image.open(destination) as image:
        assert image.format == 'JPEG'
        assert image.mode == 'RGB'
        assert image.size == (4, 4)


def test_unknown_encoder_fails_without_writing(tmp_path, first_pixels):
    destination = tmp_path / 'combined.png'

    with pytest.raises(UnableToSaveImage):
        ImageSaver('NOT-A-FORMAT').execute(_output(destination, first_pixels))

    assert not destination.exists()


def test_unwritable_destination_is_a_save_error(tmp_path, first_pixels):
    destination = tmp_path / 'missing_dir' / 'combined.png'

    with pytest.raises(UnableToSaveImage) as excinfo:
        ImageSaver('PNG').execute(_output(destination, first_pixels))

    assert excinfo.value.details['destination'] == str(destination)
