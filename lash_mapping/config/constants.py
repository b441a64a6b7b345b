"""얼굴 랜드마크 인덱스 및 속눈썹 매핑 상수 정의"""

import math
from typing import Dict, List, Tuple

# MediaPipe 얼굴 메시 기본 랜드마크 개수 (FaceLandmarker는 홍채 포함 478)
FACE_MESH_LANDMARK_COUNT = 468

# 얼굴형 분석용 주요 포인트
FACE_SHAPE_LANDMARKS: Dict[str, int] = {
    # 세로 측정 (얼굴 길이)
    'chin': 152,               # 턱 끝
    'forehead_top': 10,        # 이마 상단

    # 가로 측정
    'cheek_left': 123,         # 광대 왼쪽
    'cheek_right': 352,        # 광대 오른쪽
    'forehead_left': 67,       # 이마 왼쪽
    'forehead_right': 69,      # 이마 오른쪽
}

# 턱선: 0번부터 연속된 17개 포인트
JAWLINE_RANGE: Tuple[int, int] = (0, 17)

# 눈 형태 분석용 주요 포인트
EYE_SHAPE_LANDMARKS: Dict[str, int] = {
    'left_upper_lid': 159,
    'left_lower_lid': 145,
    'right_upper_lid': 386,
    'right_lower_lid': 374,
    'left_crease': 246,        # 쌍꺼풀 라인 지표
    'right_crease': 466,
    'left_inner_corner': 133,  # 내안각
    'left_outer_corner': 130,  # 외안각
    'right_inner_corner': 362,
    'right_outer_corner': 359,
}

# 눈 영역 연속 구간 [start, end)
EYE_RANGES: Dict[str, Tuple[int, int]] = {
    'left_eye': (145, 160),
    'right_eye': (374, 386),
}

# 속눈썹 템플릿용 눈 윤곽 (16개, 좌우 미러링)
EYE_OUTLINES: Dict[str, List[int]] = {
    'left': [33, 7, 163, 144, 145, 153, 154, 155, 133, 173,
             157, 158, 159, 160, 161, 246],
    'right': [263, 249, 390, 373, 374, 380, 381, 382, 362, 398,
              384, 385, 386, 387, 388, 466],
}

# 랜드마크 부족 시 비율 기반 대체 위치 (floor(len * f))
FRACTIONAL_FALLBACKS: Dict[str, Tuple[float, float]] = {
    'forehead': (0.3, 0.7),
    'cheekbones': (0.25, 0.75),
    'face_length': (0.1, 0.9),
    'face_width': (0.25, 0.75),
    'left_eye': (0.3, 0.4),
    'right_eye': (0.6, 0.7),
    'eye_height': (0.25, 0.75),
}

# 최소 개수 조건
MIN_FOREHEAD_LANDMARKS = 70
MIN_CHEEKBONE_LANDMARKS = 353
MIN_FACE_LENGTH_LANDMARKS = 153
MIN_HOODED_LANDMARKS = 386
MIN_MONOLID_LANDMARKS = 467
MIN_DOWNTURNED_LANDMARKS = 363
MIN_EYE_HEIGHT_POINTS = 13

# 눈 높이 측정용 눈 영역 내부 인덱스 (상단, 하단)
EYE_HEIGHT_POINTS: Tuple[int, int] = (12, 4)

# 측정 실패 시 대체값
MEASUREMENT_FALLBACKS: Dict[str, float] = {
    'face_length': 100.0,
    'face_width': 80.0,
    'jaw_width': 70.0,
    'forehead_width': 60.0,
    'cheekbone_width': 75.0,
    'eye_width': 30.0,
    'eye_height': 10.0,
}

# 얼굴형 분류 임계값 (순서대로 평가)
FACE_SHAPE_THRESHOLDS: Dict[str, float] = {
    'oblong_length_to_width': 1.5,
    'round_length_to_width': 1.2,
    'round_cheekbone_to_jaw': 1.1,
    'square_jaw_to_forehead': 0.9,
    'square_cheekbone_to_jaw': 1.1,
    'heart_jaw_to_forehead': 0.8,
}

# 눈 형태 분류 임계값
EYE_SHAPE_THRESHOLDS: Dict[str, float] = {
    'hooded_openness': 10.0,
    'monolid_crease': 3.0,
    'round_width_to_height': 3.0,
}

# 속눈썹 생성 상수
NUM_LASHES = 15
BASE_LASH_LENGTH = 20.0
LENGTH_BANDS: Tuple[float, float] = (0.3, 0.7)

LASH_COLOR = (0, 0, 0, 0.7)

DEFAULT_LASH_PARAMETERS: Dict[str, float] = {
    'inner_length': 0.6,    # 내안각 쪽 상대 길이
    'middle_length': 0.8,   # 중앙 상대 길이
    'outer_length': 1.0,    # 외안각 쪽 상대 길이
    'fan_angle': 0.8,       # 부채꼴 퍼짐 (라디안)
    'thickness': 1.5,
}

# 얼굴형 -> 파라미터 덮어쓰기 (먼저 적용)
FACE_SHAPE_LASH_OVERRIDES: Dict[str, Dict[str, float]] = {
    'round': {'outer_length': 1.2, 'fan_angle': 1.0},
    'square': {'fan_angle': 0.6},
    'heart': {'inner_length': 0.7, 'outer_length': 0.9},
}

# 눈 형태 -> 파라미터 덮어쓰기 (나중에 적용, 우선)
EYE_SHAPE_LASH_OVERRIDES: Dict[str, Dict[str, float]] = {
    'round': {'outer_length': 1.2, 'fan_angle': 1.0},
    'hooded': {'middle_length': 0.9, 'outer_length': 1.1},
    'monolid': {'inner_length': 0.7, 'middle_length': 0.9, 'outer_length': 1.1},
    'downturned': {'outer_length': 1.3, 'fan_angle': 1.2},
}

# 대체 템플릿 (랜드마크 무관)
FALLBACK_NUM_LASHES = 10
FALLBACK_BASE_X: Dict[str, float] = {'left': 150.0, 'right': 300.0}
FALLBACK_BASE_Y = 200.0
FALLBACK_SPACING = 5.0
FALLBACK_FAN_ANGLE = 0.8
FALLBACK_LENGTHS: Tuple[float, ...] = (10.0, 15.0, 20.0)

LASH_BASE_ANGLE = math.pi / 2

# 렌더링
HIGHLIGHT_PADDING = 10.0
HIGHLIGHT_COLOR = (173, 216, 230, 0.2)
EMPTY_BOUNDING_BOX: Tuple[float, float, float, float] = (0.0, 0.0, 100.0, 100.0)

LABEL_BANDS: Tuple[float, float] = (0.3, 0.7)
LENGTH_LABELS: Tuple[str, str, str] = ('8-9mm', '10-11mm', '12-14mm')
LABEL_COLOR = (0, 0, 150, 0.7)
LABEL_FONT_SIZE = 12
LABEL_X_OFFSET: Dict[str, float] = {'left': -40.0, 'right': 10.0}

ERROR_COLOR = (255, 0, 0, 1.0)
TEMPLATE_ERROR_MESSAGE = 'Template generation error - using default'
TEMPLATE_ERROR_POSITION = (50.0, 50.0)
TEMPLATE_ERROR_FONT_SIZE = 20
RENDER_ERROR_MESSAGE = 'Error drawing lash template'
RENDER_ERROR_POSITION = (100.0, 100.0)
RENDER_ERROR_FONT_SIZE = 16

LANDMARK_DOT_COLOR = (0, 255, 0, 0.2)
LANDMARK_DOT_RADIUS = 1

NO_FACE_MESSAGE = 'No face detected. Please try again with a clearer photo.'

# 시스템 상수
DEFAULT_MAX_DIMENSION = 800
MAX_NUM_FACES = 1
MIN_DETECTION_CONFIDENCE = 0.9
MIN_PRESENCE_CONFIDENCE = 0.5

# MediaPipe Tasks FaceLandmarker 모델
FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)
FACE_LANDMARKER_MODEL_FILENAME = "face_landmarker.task"


def landmark_tables() -> Dict[str, List[int]]:
    """검증 대상 인덱스 테이블 전체 반환 (테이블 이름 -> 인덱스 리스트)"""
    tables: Dict[str, List[int]] = {
        'FACE_SHAPE_LANDMARKS': list(FACE_SHAPE_LANDMARKS.values()),
        'JAWLINE_RANGE': list(range(*JAWLINE_RANGE)),
        'EYE_SHAPE_LANDMARKS': list(EYE_SHAPE_LANDMARKS.values()),
    }
    for name, (start, end) in EYE_RANGES.items():
        tables[f'EYE_RANGES.{name}'] = list(range(start, end))
    for side, indices in EYE_OUTLINES.items():
        tables[f'EYE_OUTLINES.{side}'] = list(indices)
    return tables


# 영역 이름 -> 인덱스 (LandmarkExtractor.get_facial_region)
FACIAL_REGIONS: Dict[str, List[int]] = {
    'jawline': list(range(*JAWLINE_RANGE)),
    'left_eye': EYE_OUTLINES['left'],
    'right_eye': EYE_OUTLINES['right'],
    'face_outline': list(FACE_SHAPE_LANDMARKS.values()),
    'eye_shape': list(EYE_SHAPE_LANDMARKS.values()),
}
