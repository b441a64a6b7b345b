"""공용 테스트 픽스처 (합성 랜드마크)"""

import numpy as np
import pytest

from lash_mapping.utils.config_loader import reset_config

BASE_POINT = (500.0, 500.0, 0.0)


def make_landmarks(overrides=None, count=468, base=BASE_POINT):
    """
    모든 포인트가 base인 랜드마크 리스트에 일부 인덱스만 덮어쓰기

    Args:
        overrides: {인덱스: (x, y)}
        count: 랜드마크 개수
        base: 기본 포인트
    """
    landmarks = [tuple(base) for _ in range(count)]
    for index, point in (overrides or {}).items():
        landmarks[index] = (float(point[0]), float(point[1]), 0.0)
    return landmarks


def face_overrides(length, width, jaw, forehead):
    """
    얼굴 길이/너비/턱/이마 너비를 지정한 포인트 배치

    face_length: 152-10, face_width & cheekbone: 123-352,
    jaw: 0-16, forehead: 67-69
    """
    return {
        10: (500, 400),
        152: (500, 400 + length),
        123: (500 - width / 2, 480),
        352: (500 + width / 2, 480),
        0: (500 - jaw / 2, 560),
        16: (500 + jaw / 2, 560),
        67: (500 - forehead / 2, 420),
        69: (500 + forehead / 2, 420),
    }


# 폭/높이 3.5, 열림/쌍꺼풀 충분, 눈꼬리 올라감 -> round
ROUND_EYE_OVERRIDES = {
    145: (100, 200), 159: (135, 200), 149: (110, 195), 157: (110, 205),
    374: (300, 200), 385: (335, 200), 377: (310, 195), 383: (310, 205),
    386: (315, 185),
    246: (120, 180), 466: (330, 170),
    130: (90, 195), 133: (140, 200),
    359: (345, 195), 362: (295, 200),
}


@pytest.fixture
def landmark_factory():
    return make_landmarks


@pytest.fixture
def round_eye_landmarks():
    return make_landmarks(ROUND_EYE_OVERRIDES)


@pytest.fixture
def face_landmarks():
    """(length, width, jaw, forehead) -> 468개 랜드마크"""
    def _build(length, width, jaw, forehead):
        return make_landmarks(face_overrides(length, width, jaw, forehead))
    return _build


@pytest.fixture
def blank_image():
    return np.full((480, 640, 3), 255, dtype=np.uint8)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """테스트마다 전역 설정 초기화"""
    monkeypatch.delenv('LASH_MAPPING_CONFIG_PATH', raising=False)
    reset_config()
    yield
    reset_config()
