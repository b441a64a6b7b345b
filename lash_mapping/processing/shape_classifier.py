"""얼굴 특징 분석 (얼굴형, 눈 형태 분류)"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models import (
    EyeShape,
    EyeShapeAnalysis,
    FaceShape,
    FaceShapeAnalysis,
    Measurement,
)
from ..config.constants import (
    EYE_HEIGHT_POINTS,
    EYE_RANGES,
    EYE_SHAPE_LANDMARKS,
    EYE_SHAPE_THRESHOLDS,
    FACE_SHAPE_LANDMARKS,
    FACE_SHAPE_THRESHOLDS,
    FRACTIONAL_FALLBACKS,
    JAWLINE_RANGE,
    MEASUREMENT_FALLBACKS,
    MIN_CHEEKBONE_LANDMARKS,
    MIN_DOWNTURNED_LANDMARKS,
    MIN_EYE_HEIGHT_POINTS,
    MIN_FACE_LENGTH_LANDMARKS,
    MIN_FOREHEAD_LANDMARKS,
    MIN_HOODED_LANDMARKS,
    MIN_MONOLID_LANDMARKS,
)
from ..utils import get_config, get_logger
from .geometry import GeometryCalculator

logger = get_logger(__name__)

DEFAULT_FACE_SHAPE = FaceShape.OVAL
DEFAULT_EYE_SHAPE = EyeShape.ALMOND

# 측정 단계에서 복구 가능한 오류
MEASUREMENT_ERRORS = (IndexError, TypeError, ValueError, ZeroDivisionError)

Landmarks = Sequence[Sequence[float]]


class ShapeClassifier:
    """
    얼굴 특징 분석 클래스

    기능:
    - 얼굴형 분류 (oval/round/square/heart/oblong)
    - 눈 형태 분류 (almond/round/hooded/monolid/downturned)

    분류는 절대 실패하지 않는다. 측정이 실패하면 측정별 대체값을 쓰고,
    그 외 오류는 기본값(oval, almond)으로 대체한다.
    """

    def __init__(self, min_landmarks: Optional[int] = None):
        """
        ShapeClassifier 초기화

        Args:
            min_landmarks: 이보다 적은 랜드마크는 분류 없이 기본값 반환
                (None이면 config의 classification.min_landmarks)
        """
        if min_landmarks is None:
            min_landmarks = get_config().get('classification.min_landmarks', JAWLINE_RANGE[1])
        self.min_landmarks = int(min_landmarks)

    # ------------------------------------------------------------------
    # 측정 헬퍼
    # ------------------------------------------------------------------

    def _measure(self, name: str, compute: Callable[[], float]) -> Measurement:
        """
        측정 실행 후 결과 또는 대체값 반환

        Args:
            name: 측정 이름 (MEASUREMENT_FALLBACKS 키)
            compute: 측정 함수

        Returns:
            Measurement (실패 시 fallback_reason 기록)
        """
        fallback = MEASUREMENT_FALLBACKS[name]
        try:
            value = float(compute())
        except MEASUREMENT_ERRORS as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning(f"Measurement '{name}' failed ({reason}), using fallback {fallback}")
            return Measurement(name=name, value=fallback, fallback_reason=reason)

        if not math.isfinite(value):
            logger.warning(f"Measurement '{name}' is not finite, using fallback {fallback}")
            return Measurement(name=name, value=fallback, fallback_reason="non-finite value")

        return Measurement(name=name, value=value)

    @staticmethod
    def _pair(
        landmarks: Landmarks,
        first: int,
        second: int,
        min_count: int,
        fallback_key: str
    ) -> List[Sequence[float]]:
        """
        두 포인트 추출 (개수 부족 시 비율 위치로 대체)

        Args:
            landmarks: 전체 랜드마크
            first, second: 기본 인덱스
            min_count: 기본 인덱스 사용에 필요한 최소 개수
            fallback_key: FRACTIONAL_FALLBACKS 키

        Returns:
            [포인트1, 포인트2]
        """
        if len(landmarks) >= min_count:
            return [landmarks[first], landmarks[second]]

        length = len(landmarks)
        f1, f2 = FRACTIONAL_FALLBACKS[fallback_key]
        return [
            landmarks[GeometryCalculator.fractional_index(length, f1)],
            landmarks[GeometryCalculator.fractional_index(length, f2)],
        ]

    @staticmethod
    def _run(landmarks: Landmarks, start: int, end: int, fallback_key: str) -> List[Sequence[float]]:
        """연속 구간 추출 (개수 부족 시 비율 구간으로 대체)"""
        if len(landmarks) >= end:
            return list(landmarks[start:end])

        length = len(landmarks)
        f1, f2 = FRACTIONAL_FALLBACKS[fallback_key]
        return list(landmarks[
            GeometryCalculator.fractional_index(length, f1):
            GeometryCalculator.fractional_index(length, f2)
        ])

    # ------------------------------------------------------------------
    # 포인트 그룹 추출
    # ------------------------------------------------------------------

    def extract_jawline(self, landmarks: Landmarks) -> List[Sequence[float]]:
        """턱선 포인트 (0~16, 부족하면 있는 만큼)"""
        start, end = JAWLINE_RANGE
        return list(landmarks[start:min(end, len(landmarks))])

    def extract_forehead(self, landmarks: Landmarks) -> List[Sequence[float]]:
        """이마 좌우 포인트"""
        return self._pair(
            landmarks,
            FACE_SHAPE_LANDMARKS['forehead_left'],
            FACE_SHAPE_LANDMARKS['forehead_right'],
            MIN_FOREHEAD_LANDMARKS,
            'forehead',
        )

    def extract_cheekbones(self, landmarks: Landmarks) -> List[Sequence[float]]:
        """광대 좌우 포인트"""
        return self._pair(
            landmarks,
            FACE_SHAPE_LANDMARKS['cheek_left'],
            FACE_SHAPE_LANDMARKS['cheek_right'],
            MIN_CHEEKBONE_LANDMARKS,
            'cheekbones',
        )

    def extract_eye(self, landmarks: Landmarks, side: str) -> List[Sequence[float]]:
        """
        눈 영역 포인트

        Args:
            landmarks: 전체 랜드마크
            side: 'left' 또는 'right'
        """
        key = f'{side}_eye'
        start, end = EYE_RANGES[key]
        return self._run(landmarks, start, end, key)

    # ------------------------------------------------------------------
    # 측정
    # ------------------------------------------------------------------

    def _face_length(self, landmarks: Landmarks) -> float:
        chin, forehead = self._pair(
            landmarks,
            FACE_SHAPE_LANDMARKS['chin'],
            FACE_SHAPE_LANDMARKS['forehead_top'],
            MIN_FACE_LENGTH_LANDMARKS,
            'face_length',
        )
        return GeometryCalculator.distance(chin, forehead)

    def _face_width(self, landmarks: Landmarks) -> float:
        left, right = self._pair(
            landmarks,
            FACE_SHAPE_LANDMARKS['cheek_left'],
            FACE_SHAPE_LANDMARKS['cheek_right'],
            MIN_CHEEKBONE_LANDMARKS,
            'face_width',
        )
        return GeometryCalculator.distance(left, right)

    @staticmethod
    def _span(points: Sequence[Sequence[float]]) -> float:
        """첫 포인트 ~ 마지막 포인트 거리"""
        return GeometryCalculator.distance(points[0], points[-1])

    @staticmethod
    def _eye_height(eye: Sequence[Sequence[float]]) -> float:
        """눈 높이 (상단-하단 눈꺼풀)"""
        if len(eye) >= MIN_EYE_HEIGHT_POINTS:
            top, bottom = EYE_HEIGHT_POINTS
            return GeometryCalculator.distance(eye[top], eye[bottom])

        length = len(eye)
        f1, f2 = FRACTIONAL_FALLBACKS['eye_height']
        return GeometryCalculator.distance(
            eye[GeometryCalculator.fractional_index(length, f1)],
            eye[GeometryCalculator.fractional_index(length, f2)],
        )

    def measure_face(self, landmarks: Landmarks) -> Dict[str, Measurement]:
        """얼굴형 분류용 측정값 전체"""
        return {
            'face_length': self._measure('face_length', lambda: self._face_length(landmarks)),
            'face_width': self._measure('face_width', lambda: self._face_width(landmarks)),
            'jaw_width': self._measure(
                'jaw_width', lambda: self._span(self.extract_jawline(landmarks))
            ),
            'forehead_width': self._measure(
                'forehead_width', lambda: self._span(self.extract_forehead(landmarks))
            ),
            'cheekbone_width': self._measure(
                'cheekbone_width', lambda: self._span(self.extract_cheekbones(landmarks))
            ),
        }

    def measure_eyes(self, landmarks: Landmarks) -> Dict[str, Measurement]:
        """눈 형태 분류용 측정값 전체"""
        measurements = {}
        for side in ('left', 'right'):
            eye = self.extract_eye(landmarks, side)
            measurements[f'{side}_eye_width'] = self._measure(
                'eye_width', lambda: self._span(eye)
            )
            measurements[f'{side}_eye_height'] = self._measure(
                'eye_height', lambda: self._eye_height(eye)
            )
        return measurements

    # ------------------------------------------------------------------
    # 눈 형태 검사 (각각 독립적으로 실패 시 False)
    # ------------------------------------------------------------------

    def _pair_distance_average(self, landmarks: Landmarks, pairs: Sequence[Tuple[str, str]]) -> float:
        """이름 쌍들의 거리 평균"""
        distances = [
            GeometryCalculator.distance(
                landmarks[EYE_SHAPE_LANDMARKS[a]],
                landmarks[EYE_SHAPE_LANDMARKS[b]],
            )
            for a, b in pairs
        ]
        return sum(distances) / len(distances)

    def is_hooded(self, landmarks: Landmarks) -> bool:
        """눈꺼풀 열림 정도가 임계값 미만이면 hooded"""
        if len(landmarks) < MIN_HOODED_LANDMARKS:
            return False
        try:
            openness = self._pair_distance_average(landmarks, [
                ('left_upper_lid', 'left_lower_lid'),
                ('right_upper_lid', 'right_lower_lid'),
            ])
        except MEASUREMENT_ERRORS as e:
            logger.warning(f"Hooded eye check failed: {e}")
            return False
        return openness < EYE_SHAPE_THRESHOLDS['hooded_openness']

    def is_monolid(self, landmarks: Landmarks) -> bool:
        """쌍꺼풀 지표와 윗눈꺼풀 거리가 임계값 미만이면 monolid"""
        if len(landmarks) < MIN_MONOLID_LANDMARKS:
            return False
        try:
            crease = self._pair_distance_average(landmarks, [
                ('left_crease', 'left_upper_lid'),
                ('right_crease', 'right_upper_lid'),
            ])
        except MEASUREMENT_ERRORS as e:
            logger.warning(f"Monolid check failed: {e}")
            return False
        return crease < EYE_SHAPE_THRESHOLDS['monolid_crease']

    def is_downturned(self, landmarks: Landmarks) -> bool:
        """
        양쪽 눈 모두 외안각이 내안각보다 아래(y가 큼)이면 downturned

        y축은 아래 방향으로 증가한다고 가정한다.
        """
        if len(landmarks) < MIN_DOWNTURNED_LANDMARKS:
            return False
        try:
            left = (float(landmarks[EYE_SHAPE_LANDMARKS['left_outer_corner']][1])
                    > float(landmarks[EYE_SHAPE_LANDMARKS['left_inner_corner']][1]))
            right = (float(landmarks[EYE_SHAPE_LANDMARKS['right_outer_corner']][1])
                     > float(landmarks[EYE_SHAPE_LANDMARKS['right_inner_corner']][1]))
        except MEASUREMENT_ERRORS as e:
            logger.warning(f"Downturned eye check failed: {e}")
            return False
        return left and right

    # ------------------------------------------------------------------
    # 분류
    # ------------------------------------------------------------------

    @staticmethod
    def _classify_face_shape(
        length_to_width: float,
        jaw_to_forehead: float,
        cheekbone_to_jaw: float
    ) -> FaceShape:
        """
        비율 기반 얼굴형 분류 (먼저 일치하는 규칙 우선)

        Args:
            length_to_width: 얼굴 길이 / 얼굴 너비
            jaw_to_forehead: 턱 너비 / 이마 너비
            cheekbone_to_jaw: 광대 너비 / 턱 너비

        Returns:
            FaceShape
        """
        t = FACE_SHAPE_THRESHOLDS
        if length_to_width > t['oblong_length_to_width']:
            return FaceShape.OBLONG
        elif (length_to_width < t['round_length_to_width']
              and cheekbone_to_jaw < t['round_cheekbone_to_jaw']):
            return FaceShape.ROUND
        elif (jaw_to_forehead > t['square_jaw_to_forehead']
              and cheekbone_to_jaw < t['square_cheekbone_to_jaw']):
            return FaceShape.SQUARE
        elif jaw_to_forehead < t['heart_jaw_to_forehead']:
            return FaceShape.HEART
        else:
            return FaceShape.OVAL

    @staticmethod
    def _classify_eye_shape(
        hooded: bool,
        monolid: bool,
        downturned: bool,
        width_to_height: float
    ) -> EyeShape:
        """눈 형태 분류 (hooded -> monolid -> downturned -> round -> almond)"""
        if hooded:
            return EyeShape.HOODED
        elif monolid:
            return EyeShape.MONOLID
        elif downturned:
            return EyeShape.DOWNTURNED
        elif width_to_height > EYE_SHAPE_THRESHOLDS['round_width_to_height']:
            return EyeShape.ROUND
        else:
            return EyeShape.ALMOND

    def analyze_face_shape(self, landmarks: Landmarks) -> FaceShapeAnalysis:
        """
        얼굴형 분석

        Args:
            landmarks: 얼굴 랜드마크 (보통 468개, (x, y[, z]))

        Returns:
            FaceShapeAnalysis: 얼굴형 분석 결과 (항상 유효한 분류 포함)
        """
        try:
            landmarks = list(landmarks)
            if len(landmarks) < self.min_landmarks:
                logger.warning(
                    f"Only {len(landmarks)} landmarks (< {self.min_landmarks}), "
                    f"using default face shape '{DEFAULT_FACE_SHAPE.value}'"
                )
                return FaceShapeAnalysis(face_shape=DEFAULT_FACE_SHAPE, used_default=True)

            m = self.measure_face(landmarks)
            length_to_width = GeometryCalculator.ratio(m['face_length'].value, m['face_width'].value)
            jaw_to_forehead = GeometryCalculator.ratio(m['jaw_width'].value, m['forehead_width'].value)
            cheekbone_to_jaw = GeometryCalculator.ratio(m['cheekbone_width'].value, m['jaw_width'].value)

            face_shape = self._classify_face_shape(length_to_width, jaw_to_forehead, cheekbone_to_jaw)

            logger.debug(
                f"Face ratios: length/width={length_to_width:.3f}, "
                f"jaw/forehead={jaw_to_forehead:.3f}, cheekbone/jaw={cheekbone_to_jaw:.3f} "
                f"-> {face_shape.value}"
            )

            return FaceShapeAnalysis(
                face_shape=face_shape,
                measurements=m,
                length_to_width=length_to_width,
                jaw_to_forehead=jaw_to_forehead,
                cheekbone_to_jaw=cheekbone_to_jaw,
            )
        except Exception as e:
            logger.error(f"Error in face shape analysis: {e}", exc_info=True)
            return FaceShapeAnalysis(face_shape=DEFAULT_FACE_SHAPE, used_default=True)

    def analyze_eye_shape(self, landmarks: Landmarks) -> EyeShapeAnalysis:
        """
        눈 형태 분석

        Args:
            landmarks: 얼굴 랜드마크 (보통 468개, (x, y[, z]))

        Returns:
            EyeShapeAnalysis: 눈 형태 분석 결과 (항상 유효한 분류 포함)
        """
        try:
            landmarks = list(landmarks)
            if len(landmarks) < self.min_landmarks:
                logger.warning(
                    f"Only {len(landmarks)} landmarks (< {self.min_landmarks}), "
                    f"using default eye shape '{DEFAULT_EYE_SHAPE.value}'"
                )
                return EyeShapeAnalysis(eye_shape=DEFAULT_EYE_SHAPE, used_default=True)

            m = self.measure_eyes(landmarks)
            left_ratio = GeometryCalculator.ratio(m['left_eye_width'].value, m['left_eye_height'].value)
            right_ratio = GeometryCalculator.ratio(m['right_eye_width'].value, m['right_eye_height'].value)
            width_to_height = (left_ratio + right_ratio) / 2

            hooded = self.is_hooded(landmarks)
            monolid = self.is_monolid(landmarks)
            downturned = self.is_downturned(landmarks)

            eye_shape = self._classify_eye_shape(hooded, monolid, downturned, width_to_height)

            logger.debug(
                f"Eye metrics: width/height={width_to_height:.3f}, hooded={hooded}, "
                f"monolid={monolid}, downturned={downturned} -> {eye_shape.value}"
            )

            return EyeShapeAnalysis(
                eye_shape=eye_shape,
                measurements=m,
                width_to_height=width_to_height,
                is_hooded=hooded,
                is_monolid=monolid,
                is_downturned=downturned,
            )
        except Exception as e:
            logger.error(f"Error in eye shape analysis: {e}", exc_info=True)
            return EyeShapeAnalysis(eye_shape=DEFAULT_EYE_SHAPE, used_default=True)

    def classify_face(self, landmarks: Landmarks) -> FaceShape:
        """얼굴형만 반환"""
        return self.analyze_face_shape(landmarks).face_shape

    def classify_eye(self, landmarks: Landmarks) -> EyeShape:
        """눈 형태만 반환"""
        return self.analyze_eye_shape(landmarks).eye_shape

    def classify(self, landmarks: Landmarks) -> Tuple[FaceShape, EyeShape]:
        """(얼굴형, 눈 형태) 반환"""
        return self.classify_face(landmarks), self.classify_eye(landmarks)


_default_classifier: Optional[ShapeClassifier] = None


def _get_default_classifier() -> ShapeClassifier:
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ShapeClassifier()
    return _default_classifier


def classify_face(landmarks: Landmarks) -> FaceShape:
    """기본 설정 ShapeClassifier로 얼굴형 분류"""
    return _get_default_classifier().classify_face(landmarks)


def classify_eye(landmarks: Landmarks) -> EyeShape:
    """기본 설정 ShapeClassifier로 눈 형태 분류"""
    return _get_default_classifier().classify_eye(landmarks)
