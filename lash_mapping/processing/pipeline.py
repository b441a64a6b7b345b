"""이미지 -> 속눈썹 매핑 처리 파이프라인"""

import time
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ..models import MappingResult
from ..config.settings import DetectionConfig, ImageSettings, RenderStyle
from ..utils import get_config, get_logger
from ..utils.config_loader import Config
from ..utils.image_utils import load_image, resize_image
from ..utils.validators import validate_image
from .recommendations import recommend
from .shape_classifier import ShapeClassifier
from .template_generator import TemplateGenerator
from .template_renderer import OpenCVCanvas, TemplateRenderer, draw_landmarks

logger = get_logger(__name__)


class LashMappingPipeline:
    """
    속눈썹 매핑 파이프라인

    리사이즈 -> 얼굴 검출 -> (랜드마크 표시) -> 얼굴형/눈 형태 분류
    -> 템플릿 생성 -> 렌더링 -> 스타일 추천
    """

    def __init__(
        self,
        detector=None,
        classifier: Optional[ShapeClassifier] = None,
        generator: Optional[TemplateGenerator] = None,
        renderer: Optional[TemplateRenderer] = None,
        config: Optional[Config] = None,
        image_settings: Optional[ImageSettings] = None,
        style: Optional[RenderStyle] = None
    ):
        """
        초기화

        Args:
            detector: detect_landmarks(image)를 제공하는 검출기
                (None이면 첫 처리 시 MediaPipe FaceDetector 생성)
            classifier: ShapeClassifier
            generator: TemplateGenerator
            renderer: TemplateRenderer
            config: 설정 (None이면 전역 설정)
            image_settings: 전처리 설정 (None이면 config 'image' 섹션)
            style: 렌더링 스타일 (None이면 config 'rendering' 섹션)
        """
        self.config = config or get_config()
        self._detector = detector
        self.classifier = classifier or ShapeClassifier(
            self.config.get('classification.min_landmarks', 17)
        )
        self.generator = generator or TemplateGenerator()
        self.renderer = renderer or TemplateRenderer()
        self.image_settings = image_settings or ImageSettings.from_config(self.config.section('image'))
        self.style = style or RenderStyle.from_config(self.config.section('rendering'))

    @property
    def detector(self):
        """검출기 (지연 생성)"""
        if self._detector is None:
            from ..core.face_detector import FaceDetector
            detection_config = DetectionConfig.from_config(self.config.section('detection'))
            self._detector = FaceDetector(detection_config)
        return self._detector

    def process(self, image: np.ndarray) -> MappingResult:
        """
        이미지 1장 처리

        Args:
            image: BGR 이미지

        Returns:
            MappingResult

        Raises:
            InvalidImageError: 이미지가 유효하지 않은 경우
            NoFaceDetectedError: 얼굴이 검출되지 않은 경우
        """
        validate_image(image)
        start_time = time.time()

        original_shape = image.shape
        image = resize_image(image, self.image_settings.max_dimension)

        points = self.detector.detect_landmarks(image)
        logger.debug(f"Detected {len(points)} landmarks")

        canvas = OpenCVCanvas(image.copy(), self.style)
        if self.style.show_landmarks:
            draw_landmarks(canvas, points)

        face_analysis = self.classifier.analyze_face_shape(points)
        eye_analysis = self.classifier.analyze_eye_shape(points)

        template = self.generator.generate(points, face_analysis.face_shape, eye_analysis.eye_shape)
        self.renderer.render(canvas, template)

        processing_time = (time.time() - start_time) * 1000

        logger.info(
            f"Lash mapping done: face={face_analysis.face_shape.value}, "
            f"eye={eye_analysis.eye_shape.value}, fallback={template.is_fallback} "
            f"({processing_time:.1f}ms)"
        )

        return MappingResult(
            face_shape=face_analysis.face_shape,
            eye_shape=eye_analysis.eye_shape,
            template=template,
            rendered_image=canvas.image,
            recommendation=recommend(face_analysis.face_shape, eye_analysis.eye_shape),
            face_analysis=face_analysis,
            eye_analysis=eye_analysis,
            metadata={
                'original_shape': list(original_shape),
                'image_shape': list(image.shape),
                'landmark_count': len(points),
                'processing_time_ms': round(processing_time, 2),
            }
        )

    def process_file(self, image_path: Union[str, Path]) -> MappingResult:
        """
        이미지 파일 처리

        Raises:
            InvalidImageError: 이미지 로드 실패
            NoFaceDetectedError: 얼굴이 검출되지 않은 경우
        """
        image = load_image(image_path, self.image_settings.normalize_orientation)
        result = self.process(image)
        result.metadata['image_path'] = str(image_path)
        return result

    def close(self):
        """검출기 리소스 해제"""
        if self._detector is not None and hasattr(self._detector, 'release'):
            self._detector.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
