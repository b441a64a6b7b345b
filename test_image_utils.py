"""이미지 유틸리티 테스트"""

import io

import numpy as np
import pytest
from PIL import Image

from lash_mapping.utils.exceptions import InvalidImageError
from lash_mapping.utils.image_utils import (
    apply_image_filters,
    decode_data_url,
    decode_image_bytes,
    encode_data_url,
    fit_dimensions,
    resize_image,
)


@pytest.mark.parametrize("size, expected", [
    ((1600, 1200), (800, 600)),
    ((1200, 1600), (600, 800)),
    ((800, 800), (800, 800)),
    ((640, 480), (640, 480)),
])
def test_fit_dimensions(size, expected):
    assert fit_dimensions(*size, 800) == expected


def test_resize_keeps_small_images_untouched(blank_image):
    assert resize_image(blank_image, 800) is blank_image
    assert resize_image(blank_image, None) is blank_image


def test_resize_large_image():
    image = np.zeros((1000, 2000, 3), dtype=np.uint8)
    assert resize_image(image, 800).shape == (400, 800, 3)


def test_brightness_and_contrast_filters():
    image = np.full((2, 2, 3), 100, dtype=np.uint8)

    assert (apply_image_filters(image, brightness=50) == 150).all()
    assert (apply_image_filters(image, brightness=-200) == 0).all()
    # contrast 0 은 변화 없음
    assert (apply_image_filters(image) == 100).all()
    # 대비 증가: 128 아래 값은 더 어두워짐
    assert (apply_image_filters(image, contrast=50) < 100).all()


def test_data_url_round_trip_for_png():
    image = np.zeros((4, 6, 3), dtype=np.uint8)
    image[1, 2] = (10, 20, 30)

    url = encode_data_url(image)
    assert url.startswith('data:image/png;base64,')
    assert np.array_equal(decode_data_url(url), image)


def test_exif_orientation_is_applied():
    pil_image = Image.new('RGB', (40, 20), (255, 0, 0))
    exif = pil_image.getexif()
    exif[0x0112] = 6  # 90도 회전
    buffer = io.BytesIO()
    pil_image.save(buffer, format='JPEG', exif=exif.tobytes())

    assert decode_image_bytes(buffer.getvalue()).shape == (40, 20, 3)
    assert decode_image_bytes(buffer.getvalue(), normalize_orientation=False).shape == (20, 40, 3)


def test_invalid_bytes_raise():
    with pytest.raises(InvalidImageError):
        decode_image_bytes(b'not an image')
    with pytest.raises(InvalidImageError):
        decode_data_url('hello')
