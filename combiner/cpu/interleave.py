import numpy as np
from numba import jit

PIXEL_STRIDE = 4  # bytes per RGBA pixel


@jit(nopython=True)
def alternate_pixels_cpu(first, second):
    """Take even pixels from `first` and odd pixels from `second`.

    Both inputs are flat uint8 arrays of equal length, a multiple of 4 bytes.
    Pixels are counted along the flattened buffer, so odd image widths do
    not produce a checkerboard.
    """
    combined = np.zeros(first.shape[0], dtype=np.uint8)
    pixel_count = first.shape[0] // PIXEL_STRIDE

    for p in range(pixel_count):
        i = p * PIXEL_STRIDE
        if p % 2 == 0:
            for c in range(PIXEL_STRIDE):
                combined[i + c] = first[i + c]
        else:
            for c in range(PIXEL_STRIDE):
                combined[i + c] = second[i + c]

    return combined
