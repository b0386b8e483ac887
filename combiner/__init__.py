"""
Combine two images by alternating their RGBA pixels.
"""

from .pipeline import CombineConfig, CombineResult, Pipeline, PipelineState, combine_images

__all__ = ['CombineConfig', 'CombineResult', 'Pipeline', 'PipelineState', 'combine_images']
