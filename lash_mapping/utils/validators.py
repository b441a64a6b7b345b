"""입력 검증 유틸리티 함수"""

from typing import Dict, List, Optional

import numpy as np

from ..config.constants import landmark_tables
from .exceptions import ConfigurationError, InvalidImageError


def validate_image(image: np.ndarray) -> None:
    """
    이미지 유효성 검증

    Args:
        image: 검증할 이미지 (numpy array)

    Raises:
        InvalidImageError: 이미지가 유효하지 않은 경우
    """
    if image is None:
        raise InvalidImageError("Image is None")

    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")

    if image.size == 0:
        raise InvalidImageError("Image is empty")

    if len(image.shape) not in [2, 3]:
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")

    if len(image.shape) == 3 and image.shape[2] not in [1, 3, 4]:
        raise InvalidImageError(f"Image channels must be 1, 3, or 4, got {image.shape[2]}")


def validate_confidence(confidence: float, param_name: str = "confidence") -> None:
    """신뢰도 값 검증 (0.0 ~ 1.0)"""
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"{param_name} must be between 0.0 and 1.0, got {confidence}")


def validate_landmark_index(index: int, max_landmarks: int = 468) -> None:
    """랜드마크 인덱스 검증"""
    if not 0 <= index < max_landmarks:
        raise ValueError(f"Landmark index must be between 0 and {max_landmarks-1}, got {index}")


def validate_landmark_tables(
    landmark_count: int,
    tables: Optional[Dict[str, List[int]]] = None
) -> None:
    """
    인덱스 테이블이 검출기의 랜드마크 개수와 호환되는지 검증

    다른 토폴로지의 검출기를 연결하면 조용히 잘못 분류하는 대신
    여기서 즉시 실패한다.

    Args:
        landmark_count: 검출기가 반환하는 랜드마크 개수
        tables: 테이블 이름 -> 인덱스 리스트 (None이면 기본 테이블 전체)

    Raises:
        ConfigurationError: 범위를 벗어난 인덱스가 있는 경우
    """
    if tables is None:
        tables = landmark_tables()

    for name, indices in tables.items():
        for index in indices:
            try:
                validate_landmark_index(index, landmark_count)
            except ValueError as e:
                raise ConfigurationError(
                    f"Landmark table {name} references index {index}, "
                    f"but the detector provides {landmark_count} landmarks: {e}"
                ) from e
