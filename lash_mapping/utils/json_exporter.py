"""
매핑 결과를 JSON으로 변환
"""
import json
import os
from datetime import datetime

from .logging_config import get_logger

logger = get_logger(__name__)


# 외부 클라이언트와 공유하는 정수 코드
FACE_SHAPE_ENUM = {
    "oval": 0,
    "round": 1,
    "square": 2,
    "heart": 3,
    "oblong": 4,
    "unknown": -1
}

EYE_SHAPE_ENUM = {
    "almond": 0,
    "round": 1,
    "hooded": 2,
    "monolid": 3,
    "downturned": 4,
    "unknown": -1
}


def to_result_json(result, image_path="", include_template=True):
    """
    MappingResult를 JSON 직렬화 가능한 딕셔너리로 변환
    - face_shape / eye_shape: enum 정수 + 원본 문자열
    - template: 속눈썹 좌표 (선택)

    Args:
        result: LashMappingPipeline.process()의 결과 (MappingResult)
        image_path: 원본 이미지 경로 (선택)
        include_template: 속눈썹 좌표 포함 여부

    Returns:
        dict: JSON 직렬화 가능한 딕셔너리
    """
    data = result.to_dict(include_template=include_template)

    face_name = data.pop('face_shape', 'unknown')
    eye_name = data.pop('eye_shape', 'unknown')

    output = {
        "face_shape": FACE_SHAPE_ENUM.get(face_name, -1),
        "face_shape_name": face_name,
        "eye_shape": EYE_SHAPE_ENUM.get(eye_name, -1),
        "eye_shape_name": eye_name,
    }
    output.update(data)

    # 메타데이터
    output["timestamp"] = datetime.now().isoformat()
    output["image_path"] = str(image_path)

    return output


def save_result_json(result, output_path, image_path="", include_template=True):
    """
    매핑 결과를 JSON 파일로 저장

    Args:
        result: MappingResult
        output_path: 저장할 JSON 파일 경로
        image_path: 원본 이미지 경로 (선택)
        include_template: 속눈썹 좌표 포함 여부

    Returns:
        dict: 저장된 JSON 데이터
    """
    dir_path = os.path.dirname(str(output_path))
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    json_data = to_result_json(result, image_path, include_template)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(json_data, f, indent=2, ensure_ascii=False)

    logger.info(f"JSON saved to: {output_path}")
    return json_data


def to_json_string(result, image_path="", include_template=True):
    """매핑 결과 -> JSON 문자열"""
    json_data = to_result_json(result, image_path, include_template)
    return json.dumps(json_data, indent=2, ensure_ascii=False)
