"""속눈썹 매핑 템플릿 생성"""

import math
from typing import List, Sequence, Tuple, Union

from ..models import EyeShape, FaceShape, LashParameters, LashSegment, LashTemplate
from ..config.constants import (
    BASE_LASH_LENGTH,
    DEFAULT_LASH_PARAMETERS,
    EYE_OUTLINES,
    EYE_SHAPE_LASH_OVERRIDES,
    FACE_SHAPE_LASH_OVERRIDES,
    FALLBACK_BASE_X,
    FALLBACK_BASE_Y,
    FALLBACK_FAN_ANGLE,
    FALLBACK_LENGTHS,
    FALLBACK_NUM_LASHES,
    FALLBACK_SPACING,
    FRACTIONAL_FALLBACKS,
    LASH_BASE_ANGLE,
    LASH_COLOR,
    LENGTH_BANDS,
    NUM_LASHES,
    TEMPLATE_ERROR_MESSAGE,
)
from ..utils import get_logger
from .geometry import GeometryCalculator

logger = get_logger(__name__)

SIDES = ('left', 'right')

Landmarks = Sequence[Sequence[float]]


def _shape_value(shape: Union[FaceShape, EyeShape, str, None]) -> str:
    """enum 또는 문자열 -> 문자열 값"""
    if isinstance(shape, (FaceShape, EyeShape)):
        return shape.value
    return str(shape) if shape is not None else ''


def get_lash_parameters(
    face_shape: Union[FaceShape, str],
    eye_shape: Union[EyeShape, str]
) -> LashParameters:
    """
    얼굴형/눈 형태별 속눈썹 파라미터

    기본값에 얼굴형 덮어쓰기를 먼저, 눈 형태 덮어쓰기를 나중에 적용한다.
    같은 필드를 둘 다 바꾸면 눈 형태 값이 남는다.

    Args:
        face_shape: 얼굴형
        eye_shape: 눈 형태

    Returns:
        LashParameters
    """
    params = dict(DEFAULT_LASH_PARAMETERS)
    params.update(FACE_SHAPE_LASH_OVERRIDES.get(_shape_value(face_shape), {}))
    params.update(EYE_SHAPE_LASH_OVERRIDES.get(_shape_value(eye_shape), {}))

    return LashParameters(
        inner_length=params['inner_length'],
        middle_length=params['middle_length'],
        outer_length=params['outer_length'],
        fan_angle=params['fan_angle'],
        thickness=params['thickness'],
        color=LASH_COLOR,
    )


def length_factor(t: float, params: LashParameters) -> float:
    """
    눈꺼풀 위치별 길이 배율

    t < 0.3: inner -> middle 보간, t > 0.7: middle -> outer 보간, 그 외 middle.
    구간 경계에서 기울기가 꺾인다.
    """
    inner_end, outer_start = LENGTH_BANDS
    if t < inner_end:
        return GeometryCalculator.map_range(t, 0, inner_end, params.inner_length, params.middle_length)
    elif t > outer_start:
        return GeometryCalculator.map_range(t, outer_start, 1, params.middle_length, params.outer_length)
    return params.middle_length


def lash_angle(t: float, fan_angle: float, side: str) -> float:
    """
    속눈썹 방향 (라디안, pi/2 = 위쪽)

    왼쪽 눈은 빼고 오른쪽 눈은 더해서 양쪽이 바깥으로 대칭으로 퍼진다.
    """
    offset = (t - 0.5) * fan_angle
    if side == 'left':
        return LASH_BASE_ANGLE - offset
    return LASH_BASE_ANGLE + offset


def lash_end_point(start: Sequence[float], angle: float, length: float) -> Tuple[float, float]:
    """시작점에서 angle 방향으로 length 만큼 (화면 좌표: y 감소 = 위)"""
    return (
        float(start[0]) + math.cos(angle) * length,
        float(start[1]) - math.sin(angle) * length,
    )


def generate_fallback_lashes(side: str) -> Tuple[LashSegment, ...]:
    """
    랜드마크와 무관한 고정 속눈썹 10개

    Args:
        side: 'left' 또는 'right'
    """
    lashes = []
    n = FALLBACK_NUM_LASHES
    base_x = FALLBACK_BASE_X[side]

    for i in range(n):
        angle = lash_angle(i / n, FALLBACK_FAN_ANGLE, side)
        length = FALLBACK_LENGTHS[i % len(FALLBACK_LENGTHS)]
        start = (base_x + (i - n / 2) * FALLBACK_SPACING, FALLBACK_BASE_Y)
        lashes.append(LashSegment(
            start=start,
            end=lash_end_point(start, angle, length),
            thickness=DEFAULT_LASH_PARAMETERS['thickness'],
            color=LASH_COLOR,
        ))

    return tuple(lashes)


def generate_fallback_template(error_message: str = TEMPLATE_ERROR_MESSAGE) -> LashTemplate:
    """대체 템플릿 (좌우 각 10개, 렌더링 시 오류 문구 표시)"""
    return LashTemplate(
        left_lashes=generate_fallback_lashes('left'),
        right_lashes=generate_fallback_lashes('right'),
        is_fallback=True,
        error_message=error_message,
    )


class TemplateGenerator:
    """얼굴형/눈 형태 기반 속눈썹 템플릿 생성기"""

    def __init__(self, num_lashes: int = NUM_LASHES, base_length: float = BASE_LASH_LENGTH):
        """
        초기화

        Args:
            num_lashes: 눈 하나당 속눈썹 개수
            base_length: 기본 속눈썹 길이 (길이 배율 1.0 기준, 픽셀)
        """
        if num_lashes < 2:
            raise ValueError("num_lashes must be >= 2")
        self.num_lashes = num_lashes
        self.base_length = base_length

    def extract_eye_outline(self, landmarks: Landmarks, side: str) -> List[Sequence[float]]:
        """
        16개 인덱스 테이블로 눈 윤곽 추출 (부족하면 비율 구간으로 대체)

        Args:
            landmarks: 전체 랜드마크
            side: 'left' 또는 'right'
        """
        indices = EYE_OUTLINES[side]
        if len(landmarks) >= max(indices) + 1:
            return [landmarks[i] for i in indices]

        length = len(landmarks)
        f1, f2 = FRACTIONAL_FALLBACKS[f'{side}_eye']
        logger.debug(f"Only {length} landmarks, using fractional {side} eye outline")
        return list(landmarks[
            GeometryCalculator.fractional_index(length, f1):
            GeometryCalculator.fractional_index(length, f2)
        ])

    @staticmethod
    def upper_lid(outline: Sequence[Sequence[float]]) -> List[Sequence[float]]:
        """윤곽의 앞쪽 절반 (ceil(n/2)개)을 윗눈꺼풀로 사용"""
        return list(outline[:math.ceil(len(outline) / 2)])

    def generate_eye_lashes(
        self,
        eye_outline: Sequence[Sequence[float]],
        params: LashParameters,
        side: str
    ) -> Tuple[LashSegment, ...]:
        """
        눈 하나의 속눈썹 생성

        Args:
            eye_outline: 눈 윤곽 포인트
            params: 속눈썹 파라미터
            side: 'left' 또는 'right'

        Returns:
            num_lashes 개의 LashSegment
        """
        lid = self.upper_lid(eye_outline)
        lashes = []

        for i in range(self.num_lashes):
            t = i / (self.num_lashes - 1)
            start = GeometryCalculator.point_along_curve(lid, t)
            angle = lash_angle(t, params.fan_angle, side)
            length = self.base_length * length_factor(t, params)

            lashes.append(LashSegment(
                start=start,
                end=lash_end_point(start, angle, length),
                thickness=params.thickness,
                color=params.color,
            ))

        return tuple(lashes)

    def generate(
        self,
        landmarks: Landmarks,
        face_shape: Union[FaceShape, str],
        eye_shape: Union[EyeShape, str]
    ) -> LashTemplate:
        """
        속눈썹 템플릿 생성 (실패 시 대체 템플릿)

        Args:
            landmarks: 얼굴 랜드마크
            face_shape: 얼굴형
            eye_shape: 눈 형태

        Returns:
            LashTemplate
        """
        try:
            params = get_lash_parameters(face_shape, eye_shape)
            left = self.generate_eye_lashes(self.extract_eye_outline(landmarks, 'left'), params, 'left')
            right = self.generate_eye_lashes(self.extract_eye_outline(landmarks, 'right'), params, 'right')
        except Exception as e:
            logger.error(f"Error generating lash template, using fallback: {e}", exc_info=True)
            return generate_fallback_template()

        logger.info(
            f"Generated lash template ({len(left)}+{len(right)} lashes) "
            f"for face={_shape_value(face_shape)}, eye={_shape_value(eye_shape)}"
        )
        return LashTemplate(left_lashes=left, right_lashes=right)


def generate_template(
    landmarks: Landmarks,
    face_shape: Union[FaceShape, str],
    eye_shape: Union[EyeShape, str]
) -> LashTemplate:
    """기본 설정 TemplateGenerator로 템플릿 생성"""
    return TemplateGenerator().generate(landmarks, face_shape, eye_shape)
