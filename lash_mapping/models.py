"""데이터 모델 정의"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
from enum import Enum
import numpy as np

Point = Tuple[float, float]
Color = Tuple[int, int, int, float]  # (r, g, b, alpha 0-1)


def color_to_css(color: Color) -> str:
    """RGBA 튜플 -> 'rgba(r, g, b, a)' 문자열"""
    r, g, b, a = color
    return f"rgba({int(r)}, {int(g)}, {int(b)}, {a:g})"


class FaceShape(Enum):
    """얼굴형 분류"""
    OVAL = "oval"              # 계란형 (기본값)
    ROUND = "round"            # 둥근형
    SQUARE = "square"          # 사각형
    HEART = "heart"            # 하트형
    OBLONG = "oblong"          # 긴형


class EyeShape(Enum):
    """눈 형태 분류"""
    ALMOND = "almond"          # 아몬드형 (기본값)
    ROUND = "round"            # 둥근 눈
    HOODED = "hooded"          # 눈꺼풀이 덮인 눈
    MONOLID = "monolid"        # 무쌍
    DOWNTURNED = "downturned"  # 눈꼬리 내려감


@dataclass
class Landmark:
    """단일 랜드마크 포인트"""

    x: float  # 정규화 x 좌표 (0-1)
    y: float  # 정규화 y 좌표 (0-1)
    z: float  # 깊이 정보 (상대적)
    visibility: float = 1.0  # 가시성 점수 (0-1)

    # 픽셀 좌표 (계산 후 저장)
    pixel_x: Optional[float] = None
    pixel_y: Optional[float] = None
    pixel_z: Optional[float] = None

    def to_point(self) -> Tuple[float, float, float]:
        """픽셀 좌표계 (x, y, z) 반환 (픽셀 좌표가 없으면 정규화 좌표)"""
        if self.pixel_x is None or self.pixel_y is None:
            return (self.x, self.y, self.z)
        z = self.pixel_z if self.pixel_z is not None else self.z
        return (self.pixel_x, self.pixel_y, z)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'visibility': self.visibility,
            'pixel_x': self.pixel_x,
            'pixel_y': self.pixel_y,
        }


@dataclass
class DetectionResult:
    """얼굴 검출 결과"""

    success: bool
    landmarks: List[Landmark] = field(default_factory=list)
    confidence: float = 0.0
    bounding_box: Tuple[int, int, int, int] = (0, 0, 0, 0)  # (x, y, w, h)
    processing_time: float = 0.0  # ms

    @property
    def points(self) -> List[Tuple[float, float, float]]:
        """픽셀 좌표계 포인트 리스트"""
        return [lm.to_point() for lm in self.landmarks]


@dataclass
class Measurement:
    """단일 측정값 (실패 시 대체값과 사유 기록)"""

    name: str
    value: float
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': round(self.value, 3),
            'fallback_reason': self.fallback_reason,
        }


def _round_ratio(value: float) -> Optional[float]:
    """JSON 출력용 비율 반올림 (nan/inf는 None)"""
    if value is None or not np.isfinite(value):
        return None
    return round(float(value), 3)


@dataclass
class FaceShapeAnalysis:
    """얼굴형 분석 결과"""

    face_shape: FaceShape
    measurements: Dict[str, Measurement] = field(default_factory=dict)
    length_to_width: float = float('nan')    # 얼굴 길이 / 얼굴 너비
    jaw_to_forehead: float = float('nan')    # 턱 너비 / 이마 너비
    cheekbone_to_jaw: float = float('nan')   # 광대 너비 / 턱 너비
    used_default: bool = False               # 분류 실패로 기본값 사용

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'face_shape': self.face_shape.value,
            'measurements': {k: m.to_dict() for k, m in self.measurements.items()},
            'length_to_width': _round_ratio(self.length_to_width),
            'jaw_to_forehead': _round_ratio(self.jaw_to_forehead),
            'cheekbone_to_jaw': _round_ratio(self.cheekbone_to_jaw),
            'used_default': self.used_default,
        }


@dataclass
class EyeShapeAnalysis:
    """눈 형태 분석 결과"""

    eye_shape: EyeShape
    measurements: Dict[str, Measurement] = field(default_factory=dict)
    width_to_height: float = float('nan')  # 양쪽 눈 평균 너비/높이 비율
    is_hooded: bool = False
    is_monolid: bool = False
    is_downturned: bool = False
    used_default: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'eye_shape': self.eye_shape.value,
            'measurements': {k: m.to_dict() for k, m in self.measurements.items()},
            'width_to_height': _round_ratio(self.width_to_height),
            'is_hooded': self.is_hooded,
            'is_monolid': self.is_monolid,
            'is_downturned': self.is_downturned,
            'used_default': self.used_default,
        }


@dataclass(frozen=True)
class LashParameters:
    """얼굴형/눈 형태별 속눈썹 파라미터"""

    inner_length: float   # 내안각 쪽 상대 길이
    middle_length: float  # 중앙 상대 길이
    outer_length: float   # 외안각 쪽 상대 길이
    fan_angle: float      # 부채꼴 퍼짐 (라디안)
    thickness: float
    color: Color


@dataclass(frozen=True)
class LashSegment:
    """속눈썹 한 가닥 (직선 스트로크)"""

    start: Point
    end: Point
    thickness: float
    color: Color

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': [round(float(v), 2) for v in self.start],
            'end': [round(float(v), 2) for v in self.end],
            'thickness': self.thickness,
            'color': color_to_css(self.color),
        }


@dataclass(frozen=True)
class LashTemplate:
    """좌/우 눈 속눈썹 템플릿"""

    left_lashes: Tuple[LashSegment, ...]
    right_lashes: Tuple[LashSegment, ...]
    is_fallback: bool = False
    error_message: Optional[str] = None

    def draw(self, sink, renderer=None) -> None:
        """
        템플릿을 그리기 대상에 렌더링

        Args:
            sink: DrawingSink 구현체
            renderer: TemplateRenderer (None이면 기본 렌더러)
        """
        if renderer is None:
            from .processing.template_renderer import TemplateRenderer
            renderer = TemplateRenderer()
        renderer.render(sink, self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'left_lashes': [lash.to_dict() for lash in self.left_lashes],
            'right_lashes': [lash.to_dict() for lash in self.right_lashes],
            'is_fallback': self.is_fallback,
            'error_message': self.error_message,
        }


@dataclass
class LashRecommendation:
    """얼굴형/눈 형태 기반 속눈썹 추천"""

    style: str               # 추천 스타일 요약
    primary_curl: str
    effect: str
    thickness: str
    lash_style: str
    density: str
    length_map: Sequence[str]  # (inner, middle, outer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'style': self.style,
            'primary_curl': self.primary_curl,
            'effect': self.effect,
            'thickness': self.thickness,
            'lash_style': self.lash_style,
            'density': self.density,
            'length_map': list(self.length_map),
        }


@dataclass
class MappingResult:
    """이미지 1장 처리 결과"""

    face_shape: FaceShape
    eye_shape: EyeShape
    template: LashTemplate
    rendered_image: Optional[np.ndarray] = None
    recommendation: Optional[LashRecommendation] = None
    face_analysis: Optional[FaceShapeAnalysis] = None
    eye_analysis: Optional[EyeShapeAnalysis] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_template: bool = True) -> Dict[str, Any]:
        """딕셔너리로 변환 (렌더링 이미지는 제외)"""
        result: Dict[str, Any] = {
            'face_shape': self.face_shape.value,
            'eye_shape': self.eye_shape.value,
        }
        if self.recommendation:
            result['recommendation'] = self.recommendation.to_dict()
        if self.face_analysis:
            result['face_analysis'] = self.face_analysis.to_dict()
        if self.eye_analysis:
            result['eye_analysis'] = self.eye_analysis.to_dict()
        if include_template:
            result['template'] = self.template.to_dict()
        if self.metadata:
            result['metadata'] = dict(self.metadata)
        return result
