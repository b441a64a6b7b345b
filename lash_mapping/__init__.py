"""
Lash Mapping

얼굴 사진에서 얼굴형/눈 형태를 분류하고 속눈썹 연장 매핑 템플릿을 생성한다.
"""

__version__ = "0.1.0"

from .models import (
    EyeShape,
    FaceShape,
    LashRecommendation,
    LashSegment,
    LashTemplate,
    MappingResult,
)
from .processing import (
    LashMappingPipeline,
    ShapeClassifier,
    TemplateGenerator,
    TemplateRenderer,
    classify_eye,
    classify_face,
    generate_template,
    recommend,
)
from .utils.exceptions import (
    LashMappingException,
    DetectionError,
    NoFaceDetectedError,
    InvalidImageError,
    ConfigurationError,
)

__all__ = [
    '__version__',
    'EyeShape',
    'FaceShape',
    'LashRecommendation',
    'LashSegment',
    'LashTemplate',
    'MappingResult',
    'LashMappingPipeline',
    'ShapeClassifier',
    'TemplateGenerator',
    'TemplateRenderer',
    'classify_eye',
    'classify_face',
    'generate_template',
    'recommend',
    'LashMappingException',
    'DetectionError',
    'NoFaceDetectedError',
    'InvalidImageError',
    'ConfigurationError',
]
