# -*- coding: utf-8 -*-
"""
Image utility functions (load, resize, orientation, filters, data URL)
"""

import base64
import io
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageOps

from . import get_logger
from .exceptions import InvalidImageError
from .validators import validate_image

logger = get_logger(__name__)


def _pil_to_bgr(pil_image: Image.Image) -> np.ndarray:
    """PIL 이미지 -> BGR numpy 배열"""
    rgb = np.asarray(pil_image.convert('RGB'))
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def decode_image_bytes(data: bytes, normalize_orientation: bool = True) -> np.ndarray:
    """
    인코딩된 이미지 바이트(JPEG, PNG 등)를 BGR 이미지로 디코딩

    Args:
        data: 이미지 파일 바이트
        normalize_orientation: EXIF 회전 정보 적용 여부

    Returns:
        numpy array (BGR 포맷)

    Raises:
        InvalidImageError: 디코딩 실패 시
    """
    if not data:
        raise InvalidImageError("Image data is empty")

    try:
        with Image.open(io.BytesIO(data)) as pil_image:
            if normalize_orientation:
                pil_image = ImageOps.exif_transpose(pil_image)
            image = _pil_to_bgr(pil_image)
    except (OSError, ValueError) as e:
        raise InvalidImageError(f"Cannot decode image data: {e}") from e

    logger.debug(f"Image decoded: {image.shape}")
    return image


def load_image(path: Union[str, Path], normalize_orientation: bool = True) -> np.ndarray:
    """
    이미지 파일 로드

    Args:
        path: 이미지 경로
        normalize_orientation: EXIF 회전 정보 적용 여부

    Returns:
        numpy array (BGR 포맷)

    Raises:
        InvalidImageError: 파일이 없거나 읽을 수 없는 경우
    """
    path = Path(path)
    if not path.is_file():
        raise InvalidImageError(f"Image file not found: {path}")

    return decode_image_bytes(path.read_bytes(), normalize_orientation)


def fit_dimensions(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    긴 변이 max_dimension을 넘지 않도록 비율 유지 크기 계산

    Examples:
        >>> fit_dimensions(1600, 1200, 800)
        (800, 600)
        >>> fit_dimensions(600, 400, 800)
        (600, 400)
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        return max_dimension, int(round(height * max_dimension / width))
    return int(round(width * max_dimension / height)), max_dimension


def resize_image(image: np.ndarray, max_dimension: Optional[int] = 800) -> np.ndarray:
    """
    최대 크기 제한 리사이즈 (비율 유지, 확대하지 않음)

    Args:
        image: BGR 이미지
        max_dimension: 긴 변 최대 픽셀 (None이면 원본 유지)

    Returns:
        리사이즈된 이미지 (변경이 없으면 원본 그대로)
    """
    validate_image(image)
    if max_dimension is None:
        return image

    height, width = image.shape[:2]
    new_width, new_height = fit_dimensions(width, height, max_dimension)
    if (new_width, new_height) == (width, height):
        return image

    logger.debug(f"Resizing image {width}x{height} -> {new_width}x{new_height}")
    return cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)


def apply_image_filters(
    image: np.ndarray,
    brightness: float = 0,
    contrast: float = 0
) -> np.ndarray:
    """
    밝기/대비 필터 적용

    Args:
        image: BGR 이미지
        brightness: 더할 밝기 값 (-255 ~ 255)
        contrast: 대비 (-255 ~ 255, 0이면 변화 없음)

    Returns:
        필터가 적용된 새 이미지 (uint8)
    """
    validate_image(image)
    if not -255 <= contrast <= 255:
        raise ValueError(f"contrast must be between -255 and 255, got {contrast}")

    result = image.astype(np.float32)

    if brightness:
        result = np.clip(result + brightness, 0, 255)

    if contrast:
        factor = (259 * (contrast + 255)) / (255 * (259 - contrast))
        result = np.clip(factor * (result - 128) + 128, 0, 255)

    return result.astype(np.uint8)


def encode_image(image: np.ndarray, image_format: str = 'png', jpeg_quality: int = 90) -> bytes:
    """
    BGR 이미지를 PNG/JPEG 바이트로 인코딩

    Raises:
        InvalidImageError: 인코딩 실패 시
    """
    validate_image(image)
    image_format = image_format.lower().lstrip('.')
    if image_format == 'jpg':
        image_format = 'jpeg'

    if image_format == 'jpeg':
        params = [cv2.IMWRITE_JPEG_QUALITY, int(jpeg_quality)]
    elif image_format == 'png':
        params = []
    else:
        raise InvalidImageError(f"Unsupported image format: {image_format}")

    ok, buffer = cv2.imencode(f'.{"jpg" if image_format == "jpeg" else "png"}', image, params)
    if not ok:
        raise InvalidImageError(f"Failed to encode image as {image_format}")
    return buffer.tobytes()


def encode_data_url(image: np.ndarray, image_format: str = 'png', jpeg_quality: int = 90) -> str:
    """이미지 -> 'data:image/png;base64,...' 문자열"""
    data = encode_image(image, image_format, jpeg_quality)
    mime = 'jpeg' if image_format.lower() in ('jpg', 'jpeg') else 'png'
    return f"data:image/{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(data_url: str, normalize_orientation: bool = True) -> np.ndarray:
    """
    data URL -> BGR 이미지

    Raises:
        InvalidImageError: data URL 형식이 아닌 경우
    """
    header, sep, payload = data_url.partition(';base64,')
    if not sep or not header.startswith('data:'):
        raise InvalidImageError("Not a base64 data URL")

    try:
        data = base64.b64decode(payload, validate=True)
    except ValueError as e:
        raise InvalidImageError(f"Invalid base64 payload: {e}") from e

    return decode_image_bytes(data, normalize_orientation)


def save_image(image: np.ndarray, path: Union[str, Path], jpeg_quality: int = 90) -> Path:
    """
    이미지 저장 (확장자로 형식 결정)

    Returns:
        저장된 경로
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_image(image, path.suffix or 'png', jpeg_quality))
    logger.info(f"Image saved to: {path}")
    return path
