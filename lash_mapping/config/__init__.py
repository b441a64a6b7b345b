"""Configuration layer components"""

from .settings import DetectionConfig, ImageSettings, RenderStyle

__all__ = [
    'DetectionConfig',
    'ImageSettings',
    'RenderStyle',
]
