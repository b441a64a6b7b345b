"""Processing layer components"""

from .geometry import GeometryCalculator
from .shape_classifier import ShapeClassifier, classify_face, classify_eye
from .template_generator import TemplateGenerator, generate_template, generate_fallback_template
from .template_renderer import DrawingSink, OpenCVCanvas, TemplateRenderer, draw_landmarks
from .recommendations import recommend
from .pipeline import LashMappingPipeline

__all__ = [
    'GeometryCalculator',
    'ShapeClassifier',
    'classify_face',
    'classify_eye',
    'TemplateGenerator',
    'generate_template',
    'generate_fallback_template',
    'DrawingSink',
    'OpenCVCanvas',
    'TemplateRenderer',
    'draw_landmarks',
    'recommend',
    'LashMappingPipeline',
]
