"""TemplateGenerator 테스트"""

import math

import pytest

from conftest import make_landmarks
from lash_mapping.config.constants import EYE_OUTLINES, TEMPLATE_ERROR_MESSAGE
from lash_mapping.models import EyeShape, FaceShape
from lash_mapping.processing.template_generator import (
    TemplateGenerator,
    generate_fallback_template,
    generate_template,
    get_lash_parameters,
    lash_angle,
    length_factor,
)


def outline_landmarks():
    """두 눈 윤곽을 가로 직선으로 배치 (윗눈꺼풀 = 앞 8개)"""
    overrides = {}
    for k, index in enumerate(EYE_OUTLINES['left']):
        overrides[index] = (100 + k * 10, 200)
    for k, index in enumerate(EYE_OUTLINES['right']):
        overrides[index] = (400 + k * 10, 200)
    return make_landmarks(overrides)


@pytest.fixture
def generator():
    return TemplateGenerator()


def test_default_parameters():
    params = get_lash_parameters(FaceShape.OVAL, EyeShape.ALMOND)

    assert (params.inner_length, params.middle_length, params.outer_length) == (0.6, 0.8, 1.0)
    assert params.fan_angle == 0.8
    assert params.thickness == 1.5
    assert params.color == (0, 0, 0, 0.7)


def test_eye_override_wins_over_face_override():
    # heart: outer 0.9, downturned: outer 1.3
    params = get_lash_parameters(FaceShape.HEART, EyeShape.DOWNTURNED)

    assert params.inner_length == 0.7
    assert params.outer_length == 1.3
    assert params.fan_angle == 1.2


def test_parameters_accept_strings():
    assert get_lash_parameters('square', 'hooded') == get_lash_parameters(FaceShape.SQUARE, EyeShape.HOODED)


def test_length_factor_bands():
    params = get_lash_parameters('oval', 'almond')

    assert length_factor(0.0, params) == pytest.approx(0.6)
    assert length_factor(0.15, params) == pytest.approx(0.7)
    assert length_factor(0.5, params) == pytest.approx(0.8)
    assert length_factor(0.7, params) == pytest.approx(0.8)
    assert length_factor(1.0, params) == pytest.approx(1.0)


def _is_monotonic(values):
    pairs = list(zip(values, values[1:]))
    return all(a <= b + 1e-12 for a, b in pairs) or all(a >= b - 1e-12 for a, b in pairs)


@pytest.mark.parametrize("face", list(FaceShape))
@pytest.mark.parametrize("eye", list(EyeShape))
def test_length_factor_is_banded_for_every_shape(face, eye):
    params = get_lash_parameters(face, eye)
    inner = [length_factor(k / 100, params) for k in range(0, 30)]
    middle = [length_factor(k / 100, params) for k in range(30, 71)]
    outer = [length_factor(k / 100, params) for k in range(71, 101)]

    assert inner[0] == pytest.approx(params.inner_length)
    assert _is_monotonic(inner + [params.middle_length])
    assert middle == pytest.approx([params.middle_length] * len(middle))
    assert _is_monotonic([params.middle_length] + outer)
    assert outer[-1] == pytest.approx(params.outer_length)


def test_lash_angles_mirror_between_eyes():
    left = lash_angle(0.0, 0.8, 'left')
    right = lash_angle(0.0, 0.8, 'right')

    assert left == pytest.approx(math.pi / 2 + 0.4)
    assert right == pytest.approx(math.pi / 2 - 0.4)
    assert lash_angle(0.5, 0.8, 'left') == pytest.approx(math.pi / 2)


def test_generates_fifteen_lashes_per_eye(generator):
    template = generator.generate(outline_landmarks(), FaceShape.OVAL, EyeShape.ALMOND)

    assert not template.is_fallback
    assert len(template.left_lashes) == 15
    assert len(template.right_lashes) == 15


def test_lash_geometry_follows_upper_lid(generator):
    template = generator.generate(outline_landmarks(), FaceShape.OVAL, EyeShape.ALMOND)
    first, middle, last = template.left_lashes[0], template.left_lashes[7], template.left_lashes[14]

    # 윗눈꺼풀: x = 100 ~ 170
    assert first.start == pytest.approx((100, 200))
    assert middle.start == pytest.approx((135, 200))
    assert last.start == pytest.approx((170, 200))

    # 중앙 가닥은 수직 위로 20 * 0.8
    assert middle.end == pytest.approx((135, 200 - 16))

    # 바깥 끝 가닥 길이는 20 * 1.0
    length = math.hypot(last.end[0] - last.start[0], last.end[1] - last.start[1])
    assert length == pytest.approx(20.0)

    for lash in template.left_lashes + template.right_lashes:
        assert lash.end[1] < lash.start[1]
        assert lash.thickness == 1.5


def test_generation_is_deterministic(generator):
    landmarks = outline_landmarks()
    assert generator.generate(landmarks, 'round', 'round') == generator.generate(landmarks, 'round', 'round')


def test_short_landmarks_use_fractional_outline(generator):
    landmarks = [(float(i), 100.0, 0.0) for i in range(50)]
    template = generator.generate(landmarks, FaceShape.OVAL, EyeShape.ALMOND)

    # 왼쪽: 15~19번 중 앞 3개
    assert not template.is_fallback
    assert template.left_lashes[0].start == pytest.approx((15, 100))
    assert template.left_lashes[-1].start == pytest.approx((17, 100))


def test_empty_landmarks_still_produce_template(generator):
    template = generator.generate([], FaceShape.OVAL, EyeShape.ALMOND)

    assert len(template.left_lashes) == 15
    assert all(lash.start == (0.0, 0.0) for lash in template.left_lashes)


def test_malformed_landmarks_fall_back(generator):
    landmarks = outline_landmarks()
    landmarks[EYE_OUTLINES['left'][0]] = None

    template = generator.generate(landmarks, FaceShape.OVAL, EyeShape.ALMOND)

    assert template.is_fallback
    assert template.error_message == TEMPLATE_ERROR_MESSAGE
    assert template == generate_fallback_template()


def test_fallback_template_layout():
    template = generate_fallback_template()

    assert len(template.left_lashes) == 10
    assert len(template.right_lashes) == 10
    assert template.left_lashes[0].start == (125.0, 200.0)
    assert template.right_lashes[5].start == (300.0, 200.0)

    lengths = [
        math.hypot(l.end[0] - l.start[0], l.end[1] - l.start[1])
        for l in template.left_lashes[:3]
    ]
    assert lengths == pytest.approx([10, 15, 20])


def test_module_level_generate_template():
    template = generate_template(outline_landmarks(), 'oval', 'almond')
    assert len(template.right_lashes) == 15


def test_rejects_single_lash():
    with pytest.raises(ValueError):
        TemplateGenerator(num_lashes=1)


def test_template_to_dict():
    data = generate_fallback_template().to_dict()

    assert data['is_fallback'] is True
    assert data['left_lashes'][0]['color'] == 'rgba(0, 0, 0, 0.7)'
