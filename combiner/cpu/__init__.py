"""
CPU module for pixel combining kernels.
"""

from .interleave import alternate_pixels_cpu, PIXEL_STRIDE


__all__ = ['alternate_pixels_cpu', 'PIXEL_STRIDE']
