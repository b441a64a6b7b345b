"""랜드마크 기하학 계산 유틸리티"""

import math
from typing import List, Sequence, Tuple

from ..models import Point

BoundingBox = Tuple[float, float, float, float]  # (min_x, min_y, max_x, max_y)


class GeometryCalculator:
    """2D 기하학 계산 (z 좌표는 무시)"""

    @staticmethod
    def distance(p1: Sequence[float], p2: Sequence[float]) -> float:
        """
        두 포인트 간 유클리드 거리 계산 (2D)

        Args:
            p1, p2: (x, y[, z]) 포인트

        Returns:
            거리

        Raises:
            IndexError, TypeError, ValueError: 포인트가 잘못된 경우
        """
        dx = float(p2[0]) - float(p1[0])
        dy = float(p2[1]) - float(p1[1])
        return math.sqrt(dx ** 2 + dy ** 2)

    @staticmethod
    def ratio(numerator: float, denominator: float) -> float:
        """
        비율 계산 (0으로 나누면 inf 또는 nan)

        nan과의 비교는 항상 False이므로 분류 규칙에서 기본값으로 떨어진다.
        """
        if denominator == 0:
            if numerator == 0 or math.isnan(numerator):
                return float('nan')
            return math.copysign(float('inf'), numerator)
        return numerator / denominator

    @staticmethod
    def fractional_index(length: int, fraction: float) -> int:
        """비율 위치 인덱스: floor(length * fraction)"""
        return int(math.floor(length * fraction))

    @staticmethod
    def point_along_curve(points: Sequence[Sequence[float]], t: float) -> Point:
        """
        순서가 있는 포인트 리스트 위의 구간 선형 보간

        Args:
            points: 곡선 포인트
            t: 위치 (0 ~ 1)

        Returns:
            보간된 (x, y)
        """
        if len(points) == 0:
            return (0.0, 0.0)
        if t <= 0 or len(points) == 1:
            return (float(points[0][0]), float(points[0][1]))
        if t >= 1:
            return (float(points[-1][0]), float(points[-1][1]))

        index = t * (len(points) - 1)
        lower = int(math.floor(index))
        upper = int(math.ceil(index))
        weight = index - lower

        if lower == upper:
            return (float(points[lower][0]), float(points[lower][1]))

        return (
            float(points[lower][0]) * (1 - weight) + float(points[upper][0]) * weight,
            float(points[lower][1]) * (1 - weight) + float(points[upper][1]) * weight,
        )

    @staticmethod
    def map_range(
        value: float,
        from_low: float,
        from_high: float,
        to_low: float,
        to_high: float
    ) -> float:
        """값을 [from_low, from_high] -> [to_low, to_high] 로 선형 매핑"""
        try:
            return to_low + (to_high - to_low) * ((value - from_low) / (from_high - from_low))
        except ZeroDivisionError:
            return to_low

    @staticmethod
    def bounding_box(points: Sequence[Sequence[float]], empty: BoundingBox) -> BoundingBox:
        """
        포인트들의 경계 상자

        Args:
            points: 포인트 리스트
            empty: 포인트가 없을 때 반환할 상자

        Returns:
            (min_x, min_y, max_x, max_y)
        """
        if len(points) == 0:
            return empty
        xs = [float(p[0]) for p in points]
        ys = [float(p[1]) for p in points]
        return (min(xs), min(ys), max(xs), max(ys))

    @staticmethod
    def expand_box(box: BoundingBox, padding: float) -> BoundingBox:
        """상하좌우로 padding 만큼 확장"""
        min_x, min_y, max_x, max_y = box
        return (min_x - padding, min_y - padding, max_x + padding, max_y + padding)

    @staticmethod
    def average_position(points: Sequence[Sequence[float]]) -> Point:
        """평균 위치 (비어 있으면 (0, 0))"""
        if len(points) == 0:
            return (0.0, 0.0)
        sum_x = sum(float(p[0]) for p in points)
        sum_y = sum(float(p[1]) for p in points)
        return (sum_x / len(points), sum_y / len(points))

    @staticmethod
    def split_bands(items: Sequence, first: float, second: float) -> List[Sequence]:
        """
        개수 비율로 연속된 3구간 분할

        [0, floor(n*first)), [floor(n*first), floor(n*second)), [floor(n*second), n)
        """
        n = len(items)
        a = GeometryCalculator.fractional_index(n, first)
        b = GeometryCalculator.fractional_index(n, second)
        return [items[:a], items[a:b], items[b:]]
