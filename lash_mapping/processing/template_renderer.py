"""속눈썹 템플릿 렌더링"""

from abc import ABC, abstractmethod
import math
from typing import Callable, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from ..models import Color, LashSegment, LashTemplate, Point
from ..config.constants import (
    EMPTY_BOUNDING_BOX,
    ERROR_COLOR,
    HIGHLIGHT_COLOR,
    HIGHLIGHT_PADDING,
    LABEL_BANDS,
    LABEL_COLOR,
    LABEL_FONT_SIZE,
    LABEL_X_OFFSET,
    LANDMARK_DOT_COLOR,
    LANDMARK_DOT_RADIUS,
    LENGTH_LABELS,
    RENDER_ERROR_FONT_SIZE,
    RENDER_ERROR_MESSAGE,
    RENDER_ERROR_POSITION,
    TEMPLATE_ERROR_FONT_SIZE,
    TEMPLATE_ERROR_MESSAGE,
    TEMPLATE_ERROR_POSITION,
)
from ..config.settings import RenderStyle
from ..utils import get_logger
from ..utils.exceptions import InvalidImageError
from ..utils.validators import validate_image
from .geometry import BoundingBox, GeometryCalculator

logger = get_logger(__name__)


class DrawingSink(ABC):
    """2D 벡터 그리기 대상 (선, 채운 사각형, 텍스트)"""

    @abstractmethod
    def set_line_cap(self, cap: str) -> None:
        """선 끝 모양 설정 ('round', 'butt', 'square')"""

    @abstractmethod
    def stroke_line(self, start: Point, end: Point, color: Color, width: float) -> None:
        """start -> end 직선"""

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        """채운 사각형"""

    @abstractmethod
    def fill_text(self, text: str, position: Point, color: Color, font_size: float) -> None:
        """텍스트 (position은 왼쪽 기준선)"""

    def fill_circle(self, center: Point, radius: float, color: Color) -> None:
        """채운 원 (기본 구현: 외접 사각형)"""
        self.fill_rect(center[0] - radius, center[1] - radius, radius * 2, radius * 2, color)


def _to_bgr(color: Color) -> Tuple[int, int, int]:
    r, g, b = color[:3]
    return (int(b), int(g), int(r))


class OpenCVCanvas(DrawingSink):
    """
    OpenCV 기반 DrawingSink

    BGR numpy 이미지 위에 직접 그린다. 알파값이 1 미만인 색상은
    도형 주변 영역만 잘라 addWeighted로 합성한다.
    """

    SUBPIXEL_SHIFT = 4  # 좌표 소수점 정밀도 (2^4)

    def __init__(self, image: np.ndarray, style: Optional[RenderStyle] = None):
        """
        초기화

        Args:
            image: 그릴 이미지 (BGR, 그레이스케일/BGRA는 BGR로 변환)
            style: 렌더링 스타일
        """
        validate_image(image)
        if image.ndim == 2 or image.shape[2] == 1:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        if image.dtype != np.uint8:
            raise InvalidImageError(f"Canvas image must be uint8, got {image.dtype}")

        self.image = image
        self.style = style or RenderStyle()
        self.line_cap = 'butt'
        self.line_type = cv2.LINE_AA if self.style.antialias else cv2.LINE_8

    def _fixed(self, value: float) -> int:
        """소수 좌표 -> shift 고정소수점 정수"""
        return int(round(value * (1 << self.SUBPIXEL_SHIFT)))

    def _blend(
        self,
        region: Tuple[float, float, float, float],
        color: Color,
        draw: Callable[[np.ndarray, int, int], None]
    ) -> None:
        """
        영역 단위 알파 합성

        Args:
            region: (x0, y0, x1, y1) 그려질 영역 (여유 포함)
            color: RGBA 색상
            draw: draw(canvas, offset_x, offset_y) 그리기 함수
        """
        alpha = float(color[3]) if len(color) > 3 else 1.0
        if alpha <= 0:
            return

        h, w = self.image.shape[:2]
        x0 = max(0, int(math.floor(region[0])))
        y0 = max(0, int(math.floor(region[1])))
        x1 = min(w, int(math.ceil(region[2])) + 1)
        y1 = min(h, int(math.ceil(region[3])) + 1)
        if x0 >= x1 or y0 >= y1:
            return

        roi = self.image[y0:y1, x0:x1]
        if alpha >= 1:
            draw(roi, x0, y0)
            return

        overlay = roi.copy()
        draw(overlay, x0, y0)
        cv2.addWeighted(overlay, alpha, roi, 1 - alpha, 0, dst=roi)

    def set_line_cap(self, cap: str) -> None:
        # OpenCV의 두꺼운 선은 항상 둥근 끝으로 그려진다
        self.line_cap = cap

    def stroke_line(self, start: Point, end: Point, color: Color, width: float) -> None:
        thickness = max(1, int(round(width)))
        pad = thickness + 1
        region = (
            min(start[0], end[0]) - pad, min(start[1], end[1]) - pad,
            max(start[0], end[0]) + pad, max(start[1], end[1]) + pad,
        )

        def draw(canvas, ox, oy):
            cv2.line(
                canvas,
                (self._fixed(start[0] - ox), self._fixed(start[1] - oy)),
                (self._fixed(end[0] - ox), self._fixed(end[1] - oy)),
                _to_bgr(color), thickness, self.line_type, self.SUBPIXEL_SHIFT,
            )

        self._blend(region, color, draw)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        region = (x, y, x + width, y + height)

        def draw(canvas, ox, oy):
            cv2.rectangle(
                canvas,
                (int(round(x - ox)), int(round(y - oy))),
                (int(round(x + width - ox)), int(round(y + height - oy))),
                _to_bgr(color), -1,
            )

        self._blend(region, color, draw)

    def fill_circle(self, center: Point, radius: float, color: Color) -> None:
        region = (center[0] - radius - 1, center[1] - radius - 1,
                  center[0] + radius + 1, center[1] + radius + 1)

        def draw(canvas, ox, oy):
            cv2.circle(
                canvas,
                (self._fixed(center[0] - ox), self._fixed(center[1] - oy)),
                self._fixed(radius), _to_bgr(color), -1, self.line_type, self.SUBPIXEL_SHIFT,
            )

        self._blend(region, color, draw)

    def fill_text(self, text: str, position: Point, color: Color, font_size: float) -> None:
        font = cv2.FONT_HERSHEY_SIMPLEX
        scale = font_size / self.style.font_pixels_per_scale
        thickness = self.style.text_thickness
        (text_w, text_h), baseline = cv2.getTextSize(text, font, scale, thickness)
        x, y = position
        region = (x - 1, y - text_h - 1, x + text_w + 1, y + baseline + 1)

        def draw(canvas, ox, oy):
            cv2.putText(
                canvas, text, (int(round(x - ox)), int(round(y - oy))),
                font, scale, _to_bgr(color), thickness, self.line_type,
            )

        self._blend(region, color, draw)


def highlight_box(lashes: Sequence[LashSegment], padding: float = HIGHLIGHT_PADDING) -> BoundingBox:
    """속눈썹 시작점 경계 상자 + 여유"""
    box = GeometryCalculator.bounding_box([lash.start for lash in lashes], EMPTY_BOUNDING_BOX)
    return GeometryCalculator.expand_box(box, padding)


def band_positions(lashes: Sequence[LashSegment], side: str) -> List[Tuple[str, Point]]:
    """
    길이 라벨 위치 (inner 30% / middle 40% / outer 30% 구간별 끝점 평균)

    라벨 문자열은 실제 계산된 길이와 무관한 고정값이다.

    Args:
        lashes: 한쪽 눈 속눈썹
        side: 'left' 또는 'right'

    Returns:
        [(라벨, (x, y)), ...]
    """
    x_offset = LABEL_X_OFFSET[side]
    bands = GeometryCalculator.split_bands(list(lashes), *LABEL_BANDS)
    positions = []
    for label, band in zip(LENGTH_LABELS, bands):
        x, y = GeometryCalculator.average_position([lash.end for lash in band])
        positions.append((label, (x + x_offset, y)))
    return positions


class TemplateRenderer:
    """LashTemplate을 DrawingSink에 렌더링 (예외를 밖으로 던지지 않음)"""

    def render(self, sink: DrawingSink, template: LashTemplate) -> None:
        """
        템플릿 렌더링

        Args:
            sink: 그리기 대상
            template: 속눈썹 템플릿
        """
        try:
            if template.is_fallback:
                sink.fill_text(
                    template.error_message or TEMPLATE_ERROR_MESSAGE,
                    TEMPLATE_ERROR_POSITION, ERROR_COLOR, TEMPLATE_ERROR_FONT_SIZE,
                )

            sink.set_line_cap('round')
            self.draw_lashes(sink, template.left_lashes)
            self.draw_lashes(sink, template.right_lashes)
            self.draw_guides(sink, template)
        except Exception as e:
            logger.error(f"Error drawing lash template: {e}", exc_info=True)
            self._draw_error(sink)

    @staticmethod
    def _draw_error(sink: DrawingSink) -> None:
        try:
            sink.fill_text(RENDER_ERROR_MESSAGE, RENDER_ERROR_POSITION, ERROR_COLOR, RENDER_ERROR_FONT_SIZE)
        except Exception as e:
            logger.error(f"Drawing sink failed while writing error annotation: {e}")

    @staticmethod
    def draw_lashes(sink: DrawingSink, lashes: Sequence[LashSegment]) -> None:
        """속눈썹 스트로크"""
        for lash in lashes:
            sink.stroke_line(lash.start, lash.end, lash.color, lash.thickness)

    @staticmethod
    def draw_guides(sink: DrawingSink, template: LashTemplate) -> None:
        """눈 영역 하이라이트 + 길이 라벨"""
        for lashes in (template.left_lashes, template.right_lashes):
            min_x, min_y, max_x, max_y = highlight_box(lashes)
            sink.fill_rect(min_x, min_y, max_x - min_x, max_y - min_y, HIGHLIGHT_COLOR)

        for side, lashes in (('left', template.left_lashes), ('right', template.right_lashes)):
            for label, position in band_positions(lashes, side):
                sink.fill_text(label, position, LABEL_COLOR, LABEL_FONT_SIZE)


def draw_landmarks(sink: DrawingSink, points: Sequence[Sequence[float]]) -> int:
    """
    랜드마크 디버그 점 (연한 녹색)

    좌표가 없거나 유한하지 않은 포인트는 건너뛴다.

    Returns:
        그려진 점 개수
    """
    drawn = 0
    for point in points:
        try:
            x, y = float(point[0]), float(point[1])
        except (TypeError, ValueError, IndexError):
            continue
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        sink.fill_circle((x, y), LANDMARK_DOT_RADIUS, LANDMARK_DOT_COLOR)
        drawn += 1

    if drawn < len(points):
        logger.warning(f"Skipped {len(points) - drawn} malformed landmark(s) in overlay")
    return drawn


def render_template(image: np.ndarray, template: LashTemplate, style: Optional[RenderStyle] = None) -> np.ndarray:
    """
    이미지 사본에 템플릿을 그려서 반환

    Args:
        image: 원본 BGR 이미지
        template: 속눈썹 템플릿
        style: 렌더링 스타일

    Returns:
        템플릿이 그려진 이미지
    """
    canvas = OpenCVCanvas(image.copy(), style)
    TemplateRenderer().render(canvas, template)
    return canvas.image
