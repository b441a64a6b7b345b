"""얼굴형/눈 형태별 속눈썹 스타일 추천"""

from typing import Dict, Union

from ..models import EyeShape, FaceShape, LashRecommendation

DEFAULT_STYLE = 'Classic J curl with varied lengths (8-12mm)'

# 얼굴형 -> 눈 형태 -> 스타일
STYLE_TABLE: Dict[str, Dict[str, str]] = {
    'oval': {
        'almond': 'Classic J curl, varied lengths (8-12mm)',
        'round': 'C curl, longer at outer corners (9-13mm)',
        'hooded': 'L+ curl for lift, graduated lengths (10-12mm)',
        'monolid': 'C or CC curl, varied lengths (9-14mm)',
        'downturned': 'L or L+ curl, longer at outer corners (10-14mm)',
    },
    'round': {
        'almond': 'C curl, longer at outer corners (9-13mm)',
        'round': 'J curl, shorter at inner corners (8-12mm)',
        'hooded': 'L curl, graduated effect (9-13mm)',
        'monolid': 'CC curl, varied lengths (10-14mm)',
        'downturned': 'L+ curl, longer at outer corners (10-14mm)',
    },
    'square': {
        'almond': 'J or B curl, varied lengths (9-13mm)',
        'round': 'C curl, shorter at inner corners (8-12mm)',
        'hooded': 'L curl, graduated effect (10-14mm)',
        'monolid': 'CC curl, varied lengths (10-14mm)',
        'downturned': 'L+ curl, longer at outer corners (10-14mm)',
    },
    'heart': {
        'almond': 'J curl, natural effect (8-12mm)',
        'round': 'C curl, shorter at inner corners (8-12mm)',
        'hooded': 'L curl, graduated effect (9-13mm)',
        'monolid': 'CC curl, varied lengths (9-13mm)',
        'downturned': 'L curl, longer at outer corners (9-13mm)',
    },
    'oblong': {
        'almond': 'C curl, varied lengths (9-13mm)',
        'round': 'J curl, shorter at inner corners (8-12mm)',
        'hooded': 'L curl, graduated effect (10-14mm)',
        'monolid': 'CC curl, varied lengths (10-14mm)',
        'downturned': 'L+ curl, longer at outer corners (10-14mm)',
    },
}

INNER_LENGTH = '8-9mm'
MIDDLE_LENGTH = '10-11mm'


def _value(shape: Union[FaceShape, EyeShape, str]) -> str:
    return shape.value if isinstance(shape, (FaceShape, EyeShape)) else str(shape)


def recommend(face_shape: Union[FaceShape, str], eye_shape: Union[EyeShape, str]) -> LashRecommendation:
    """
    얼굴형/눈 형태 조합에 대한 속눈썹 추천

    Args:
        face_shape: 얼굴형
        eye_shape: 눈 형태

    Returns:
        LashRecommendation (알 수 없는 조합은 기본 스타일)
    """
    face = _value(face_shape)
    eye = _value(eye_shape)

    style = STYLE_TABLE.get(face, {}).get(eye, DEFAULT_STYLE)

    if eye in ('hooded', 'downturned'):
        primary_curl = 'L or L+ curl'
    else:
        primary_curl = 'C or J curl'

    if eye == 'round':
        effect = 'Elongating effect'
    elif eye == 'hooded':
        effect = 'Lifting effect'
    else:
        effect = 'Natural enhancement'

    if face in ('round', 'square'):
        thickness = '0.07-0.10mm (natural look)'
    else:
        thickness = '0.10-0.15mm (more dramatic)'

    if eye == 'hooded':
        lash_style = 'Open eye effect'
    elif eye == 'round':
        lash_style = 'Cat eye effect'
    else:
        lash_style = 'Natural effect'

    density = 'Medium to full' if face in ('oval', 'heart') else 'Light to medium'
    outer_length = '12-14mm' if eye in ('downturned', 'almond') else '11-13mm'

    return LashRecommendation(
        style=style,
        primary_curl=primary_curl,
        effect=effect,
        thickness=thickness,
        lash_style=lash_style,
        density=density,
        length_map=(INNER_LENGTH, MIDDLE_LENGTH, outer_length),
    )
