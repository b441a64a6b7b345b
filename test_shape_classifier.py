"""ShapeClassifier 테스트"""

import math

import pytest

from conftest import ROUND_EYE_OVERRIDES, face_overrides, make_landmarks
from lash_mapping.models import EyeShape, FaceShape
from lash_mapping.processing.shape_classifier import ShapeClassifier, classify_eye, classify_face


@pytest.fixture
def classifier():
    return ShapeClassifier(min_landmarks=17)


@pytest.mark.parametrize("length, width, jaw, forehead, expected", [
    (160, 100, 95, 100, FaceShape.OBLONG),   # 길이/너비 1.6
    (110, 100, 95, 100, FaceShape.ROUND),    # 1.1, 광대/턱 1.05
    (130, 100, 95, 100, FaceShape.SQUARE),   # 턱/이마 0.95, 광대/턱 1.05
    (130, 100, 70, 100, FaceShape.HEART),    # 턱/이마 0.7
    (130, 100, 85, 100, FaceShape.OVAL),     # 어느 규칙에도 해당 없음
])
def test_face_shape_rules(classifier, face_landmarks, length, width, jaw, forehead, expected):
    assert classifier.classify_face(face_landmarks(length, width, jaw, forehead)) == expected


def test_face_shape_rule_order(classifier, face_landmarks):
    # 길이/너비 1.1 + 턱/이마 0.95 는 round, square 모두 해당하지만 round가 먼저
    landmarks = face_landmarks(110, 100, 95, 100)
    analysis = classifier.analyze_face_shape(landmarks)

    assert analysis.face_shape == FaceShape.ROUND
    assert analysis.length_to_width == pytest.approx(1.1)
    assert analysis.jaw_to_forehead == pytest.approx(0.95)
    assert not analysis.used_default


def test_identical_points_classify_as_defaults(classifier):
    landmarks = make_landmarks()

    face = classifier.analyze_face_shape(landmarks)
    assert face.face_shape == FaceShape.OVAL
    assert math.isnan(face.length_to_width)

    # 눈꺼풀 열림 0 < 10 이므로 hooded
    assert classifier.classify_eye(landmarks) == EyeShape.HOODED


def test_zero_face_width_gives_infinite_ratio(classifier):
    overrides = face_overrides(130, 100, 85, 100)
    overrides[123] = overrides[352] = (500, 480)
    analysis = classifier.analyze_face_shape(make_landmarks(overrides))

    assert math.isinf(analysis.length_to_width)
    assert analysis.face_shape == FaceShape.OBLONG


def test_short_landmark_list_returns_defaults(classifier):
    landmarks = make_landmarks(count=5)

    face = classifier.analyze_face_shape(landmarks)
    eye = classifier.analyze_eye_shape(landmarks)

    assert face.face_shape == FaceShape.OVAL and face.used_default
    assert eye.eye_shape == EyeShape.ALMOND and eye.used_default


def test_empty_landmarks_returns_defaults(classifier):
    assert classifier.classify([]) == (FaceShape.OVAL, EyeShape.ALMOND)


def test_partial_landmarks_use_fractional_positions(classifier):
    # 100개: 얼굴 길이는 10/90번, 너비는 25/75번 포인트 사용
    landmarks = make_landmarks({10: (500, 300), 90: (500, 460), 25: (450, 400), 75: (550, 400)}, count=100)
    analysis = classifier.analyze_face_shape(landmarks)

    assert analysis.measurements['face_length'].value == pytest.approx(160)
    assert analysis.measurements['face_width'].value == pytest.approx(100)
    assert not analysis.measurements['face_length'].is_fallback


def test_malformed_point_uses_measurement_fallback(classifier, face_landmarks):
    landmarks = face_landmarks(130, 100, 85, 100)
    landmarks[152] = None

    analysis = classifier.analyze_face_shape(landmarks)

    length = analysis.measurements['face_length']
    assert length.is_fallback
    assert length.value == 100.0
    # 100 / 100 = 1.0 -> 광대/턱 100/85 > 1.1 이므로 round 아님, 턱/이마 0.85 -> oval
    assert analysis.face_shape == FaceShape.OVAL
    assert not analysis.used_default


def test_round_eye(classifier, round_eye_landmarks):
    analysis = classifier.analyze_eye_shape(round_eye_landmarks)

    assert analysis.eye_shape == EyeShape.ROUND
    assert analysis.width_to_height == pytest.approx(3.5)
    assert not (analysis.is_hooded or analysis.is_monolid or analysis.is_downturned)


def test_almond_eye_when_ratio_not_above_threshold(classifier):
    overrides = dict(ROUND_EYE_OVERRIDES)
    overrides[149] = (110, 190)
    overrides[157] = (110, 210)
    overrides[377] = (310, 190)
    overrides[383] = (310, 210)

    assert classifier.classify_eye(make_landmarks(overrides)) == EyeShape.ALMOND


def test_hooded_has_priority(classifier):
    overrides = dict(ROUND_EYE_OVERRIDES)
    overrides[159] = (102, 200)   # 열림 2
    overrides[386] = (302, 200)

    analysis = classifier.analyze_eye_shape(make_landmarks(overrides))
    assert analysis.is_hooded
    assert analysis.eye_shape == EyeShape.HOODED


def test_monolid(classifier):
    overrides = dict(ROUND_EYE_OVERRIDES)
    overrides[246] = (136, 201)
    overrides[466] = (316, 186)

    assert classifier.classify_eye(make_landmarks(overrides)) == EyeShape.MONOLID


def test_downturned_requires_both_eyes(classifier):
    overrides = dict(ROUND_EYE_OVERRIDES)
    overrides[130] = (90, 210)   # 왼쪽만 외안각이 아래

    assert classifier.classify_eye(make_landmarks(overrides)) == EyeShape.ROUND

    overrides[359] = (345, 210)
    assert classifier.classify_eye(make_landmarks(overrides)) == EyeShape.DOWNTURNED


def test_eye_checks_skipped_below_required_count(classifier):
    landmarks = make_landmarks(count=300)

    assert classifier.is_hooded(landmarks) is False
    assert classifier.is_monolid(landmarks) is False
    assert classifier.is_downturned(landmarks) is False


def test_classification_is_deterministic(classifier, round_eye_landmarks):
    first = classifier.classify(round_eye_landmarks)
    second = classifier.classify(round_eye_landmarks)
    assert first == second


def test_module_level_helpers(face_landmarks, round_eye_landmarks):
    assert classify_face(face_landmarks(160, 100, 95, 100)) == FaceShape.OBLONG
    assert classify_eye(round_eye_landmarks) == EyeShape.ROUND


def test_analysis_to_dict_hides_non_finite_ratios(classifier):
    data = classifier.analyze_face_shape(make_landmarks()).to_dict()

    assert data['face_shape'] == 'oval'
    assert data['length_to_width'] is None
