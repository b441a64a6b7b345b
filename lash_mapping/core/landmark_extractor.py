"""얼굴 랜드마크 추출 및 관리"""

from typing import List, Tuple

from ..models import Landmark
from ..config.constants import FACIAL_REGIONS
from ..utils.exceptions import LandmarkExtractionError
from ..utils.validators import validate_landmark_index


class LandmarkExtractor:
    """MediaPipe 결과 -> Landmark 변환 및 영역 조회"""

    def extract_landmarks(
        self,
        mediapipe_result,
        image_width: int,
        image_height: int
    ) -> List[Landmark]:
        """
        MediaPipe 결과에서 landmark 추출

        Args:
            mediapipe_result: FaceLandmarker.detect() 결과 (face_landmarks: 얼굴별 랜드마크 리스트)
            image_width: 이미지 너비
            image_height: 이미지 높이

        Returns:
            Landmark 리스트 (픽셀 좌표 포함, 첫 번째 얼굴만)

        Raises:
            LandmarkExtractionError: 추출 실패 시
        """
        faces = getattr(mediapipe_result, 'face_landmarks', None)
        if not faces:
            raise LandmarkExtractionError("No face landmarks found in result")

        landmarks = []
        for landmark in faces[0]:
            # Tasks 결과는 visibility가 None일 수 있음
            visibility = getattr(landmark, 'visibility', None)
            landmarks.append(Landmark(
                x=landmark.x,
                y=landmark.y,
                z=landmark.z,
                visibility=1.0 if visibility is None else visibility,
                pixel_x=landmark.x * image_width,
                pixel_y=landmark.y * image_height,
                pixel_z=landmark.z * image_width,  # MediaPipe z는 너비 기준 스케일
            ))

        return landmarks

    @staticmethod
    def get_bounding_box(landmarks: List[Landmark]) -> Tuple[int, int, int, int]:
        """
        픽셀 좌표 경계 상자

        Returns:
            (x, y, w, h), 랜드마크가 없으면 (0, 0, 0, 0)
        """
        points = [lm.to_point() for lm in landmarks]
        if not points:
            return (0, 0, 0, 0)

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        x, y = int(min(xs)), int(min(ys))
        return (x, y, int(max(xs)) - x, int(max(ys)) - y)

    def get_landmark_by_index(self, landmarks: List[Landmark], index: int) -> Landmark:
        """
        특정 인덱스의 landmark 반환

        Raises:
            ValueError: 인덱스가 얼굴 메시 범위를 벗어난 경우
            IndexError: 리스트 길이를 벗어난 경우
        """
        validate_landmark_index(index)
        if index >= len(landmarks):
            raise IndexError(f"Landmark index {index} out of range")
        return landmarks[index]

    def get_facial_region(self, landmarks: List[Landmark], region: str) -> List[Landmark]:
        """
        얼굴 영역별 landmark 반환

        Args:
            landmarks: 전체 Landmark 리스트
            region: 영역 이름 (예: 'left_eye', 'jawline')

        Returns:
            해당 영역의 Landmark 리스트
        """
        if region not in FACIAL_REGIONS:
            available = ', '.join(FACIAL_REGIONS.keys())
            raise ValueError(f"Unknown region '{region}'. Available: {available}")

        return [landmarks[i] for i in FACIAL_REGIONS[region] if i < len(landmarks)]
