"""시스템 설정 클래스 정의"""

from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_MAX_DIMENSION,
    FACE_LANDMARKER_MODEL_URL,
    FACE_MESH_LANDMARK_COUNT,
    MAX_NUM_FACES,
    MIN_DETECTION_CONFIDENCE,
    MIN_PRESENCE_CONFIDENCE,
)


@dataclass
class DetectionConfig:
    """얼굴 검출 설정 (MediaPipe Tasks FaceLandmarker)"""

    min_detection_confidence: float = MIN_DETECTION_CONFIDENCE
    min_presence_confidence: float = MIN_PRESENCE_CONFIDENCE
    min_tracking_confidence: float = 0.5
    max_num_faces: int = MAX_NUM_FACES

    # 모델 파일 (None이면 사용자 캐시 디렉토리, 없으면 model_url에서 다운로드)
    model_path: Optional[str] = None
    model_url: str = FACE_LANDMARKER_MODEL_URL

    # 검출기가 반환하는 랜드마크 개수 (인덱스 테이블 검증용)
    expected_landmarks: int = FACE_MESH_LANDMARK_COUNT

    def __post_init__(self):
        """설정 값 검증"""
        for name in ('min_detection_confidence', 'min_presence_confidence', 'min_tracking_confidence'):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1")
        if self.max_num_faces < 1:
            raise ValueError("max_num_faces must be >= 1")
        if self.expected_landmarks < 1:
            raise ValueError("expected_landmarks must be >= 1")

    @classmethod
    def from_config(cls, section) -> 'DetectionConfig':
        """YAML 'detection' 섹션으로부터 생성"""
        return cls(
            min_detection_confidence=section.get('min_detection_confidence', MIN_DETECTION_CONFIDENCE),
            min_presence_confidence=section.get('min_presence_confidence', MIN_PRESENCE_CONFIDENCE),
            min_tracking_confidence=section.get('min_tracking_confidence', 0.5),
            max_num_faces=section.get('max_num_faces', MAX_NUM_FACES),
            model_path=section.get('model_path'),
            model_url=section.get('model_url') or FACE_LANDMARKER_MODEL_URL,
            expected_landmarks=section.get('expected_landmarks', FACE_MESH_LANDMARK_COUNT),
        )


@dataclass
class ImageSettings:
    """입력 이미지 전처리 설정"""

    max_dimension: Optional[int] = DEFAULT_MAX_DIMENSION  # None: 리사이즈 안 함
    normalize_orientation: bool = True  # EXIF 방향 보정
    jpeg_quality: int = 90

    def __post_init__(self):
        """설정 값 검증"""
        if self.max_dimension is not None and self.max_dimension < 1:
            raise ValueError("max_dimension must be >= 1")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")

    @classmethod
    def from_config(cls, section) -> 'ImageSettings':
        """YAML 'image' 섹션으로부터 생성"""
        return cls(
            max_dimension=section.get('max_dimension', DEFAULT_MAX_DIMENSION),
            normalize_orientation=section.get('normalize_orientation', True),
            jpeg_quality=section.get('jpeg_quality', 90),
        )


@dataclass
class RenderStyle:
    """렌더링 스타일 설정"""

    # 텍스트 크기 (px) -> OpenCV fontScale 변환 기준
    font_pixels_per_scale: float = 30.0
    text_thickness: int = 1

    # 안티앨리어싱
    antialias: bool = True

    # 랜드마크 디버그 점 표시 여부
    show_landmarks: bool = True

    def __post_init__(self):
        """설정 값 검증"""
        if self.font_pixels_per_scale <= 0:
            raise ValueError("font_pixels_per_scale must be > 0")
        if self.text_thickness < 1:
            raise ValueError("text_thickness must be >= 1")

    @classmethod
    def from_config(cls, section) -> 'RenderStyle':
        """YAML 'rendering' 섹션으로부터 생성"""
        return cls(
            font_pixels_per_scale=section.get('font_pixels_per_scale', 30.0),
            text_thickness=section.get('text_thickness', 1),
            antialias=section.get('antialias', True),
            show_landmarks=section.get('show_landmarks', True),
        )
