"""MediaPipe Tasks FaceLandmarker 기반 얼굴 검출기"""

import time
import urllib.request
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from ..models import DetectionResult
from ..config.constants import FACE_LANDMARKER_MODEL_FILENAME, NO_FACE_MESSAGE
from ..config.settings import DetectionConfig
from ..utils import get_logger
from ..utils.exceptions import ConfigurationError, DetectionError, NoFaceDetectedError
from ..utils.validators import validate_image, validate_landmark_tables
from .landmark_extractor import LandmarkExtractor

logger = get_logger(__name__)

DEFAULT_MODEL_DIR = Path.home() / '.cache' / 'lash_mapping'


def ensure_model(config: DetectionConfig) -> Path:
    """
    FaceLandmarker 모델 파일 경로 반환 (없으면 다운로드)

    Args:
        config: 검출 설정 (model_path / model_url)

    Returns:
        모델 파일 경로

    Raises:
        ConfigurationError: 다운로드 실패 시
    """
    model_path = Path(config.model_path) if config.model_path else DEFAULT_MODEL_DIR / FACE_LANDMARKER_MODEL_FILENAME
    if model_path.is_file():
        return model_path

    logger.info(f"Downloading face landmarker model to {model_path}...")
    model_path.parent.mkdir(parents=True, exist_ok=True)
    partial = model_path.with_name(model_path.name + '.part')
    try:
        urllib.request.urlretrieve(config.model_url, str(partial))
        partial.replace(model_path)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise ConfigurationError(f"Failed to download face landmarker model from {config.model_url}: {e}") from e

    logger.info("Model download complete")
    return model_path


class FaceDetector:
    """MediaPipe FaceLandmarker 기반 얼굴 검출기 (단일 얼굴, IMAGE 모드)"""

    def __init__(self, config: Optional[DetectionConfig] = None, landmarker=None):
        """
        초기화

        Args:
            config: 검출 설정 (None이면 기본값)
            landmarker: 이미 생성된 FaceLandmarker (None이면 모델 파일로 생성)

        Raises:
            ConfigurationError: 설정이 유효하지 않거나 인덱스 테이블이
                검출기 토폴로지와 맞지 않는 경우, 모델 로드 실패 시
        """
        self.config = config or DetectionConfig()
        self.extractor = LandmarkExtractor()
        self.landmarker = None

        # 분류/템플릿 인덱스 테이블이 이 검출기의 랜드마크 개수 안에 있는지 확인
        validate_landmark_tables(self.config.expected_landmarks)

        if landmarker is None:
            landmarker = self._create_landmarker()
        self.landmarker = landmarker

        logger.info(
            f"FaceLandmarker initialized (max_faces={self.config.max_num_faces}, "
            f"confidence={self.config.min_detection_confidence})"
        )

    def _create_landmarker(self):
        model_path = ensure_model(self.config)
        try:
            options = vision.FaceLandmarkerOptions(
                base_options=mp_tasks.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.IMAGE,
                num_faces=self.config.max_num_faces,
                min_face_detection_confidence=self.config.min_detection_confidence,
                min_face_presence_confidence=self.config.min_presence_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
                output_face_blendshapes=False,
                output_facial_transformation_matrixes=False,
            )
            return vision.FaceLandmarker.create_from_options(options)
        except Exception as e:
            raise ConfigurationError(f"Failed to initialize MediaPipe FaceLandmarker: {e}") from e

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        이미지에서 얼굴 검출 수행

        Args:
            image: BGR 형식 이미지 (H, W, 3)

        Returns:
            DetectionResult: 검출 결과

        Raises:
            InvalidImageError: 이미지가 유효하지 않은 경우
            DetectionError: 랜드마크 추출 실패 시
        """
        validate_image(image)

        start_time = time.time()

        # BGR → RGB 변환
        if image.ndim == 2 or image.shape[2] == 1:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        elif image.shape[2] == 4:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
        else:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(image_rgb))
        results = self.landmarker.detect(mp_image)

        processing_time = (time.time() - start_time) * 1000  # ms

        if not results or not results.face_landmarks:
            logger.debug(f"No face detected ({processing_time:.1f}ms)")
            return DetectionResult(success=False, processing_time=processing_time)

        height, width = image.shape[:2]
        try:
            landmarks = self.extractor.extract_landmarks(results, width, height)
        except Exception as e:
            raise DetectionError(f"Failed to extract landmarks: {e}") from e

        if len(landmarks) < self.config.expected_landmarks:
            raise DetectionError(
                f"Detector returned {len(landmarks)} landmarks, "
                f"expected at least {self.config.expected_landmarks}"
            )

        logger.debug(f"Detected {len(landmarks)} landmarks ({processing_time:.1f}ms)")

        return DetectionResult(
            success=True,
            landmarks=landmarks,
            confidence=1.0,  # FaceLandmarker는 개별 신뢰도 미제공
            bounding_box=self.extractor.get_bounding_box(landmarks),
            processing_time=processing_time
        )

    def detect_landmarks(self, image: np.ndarray) -> List[Tuple[float, float, float]]:
        """
        랜드마크 픽셀 좌표 반환

        Args:
            image: BGR 형식 이미지

        Returns:
            [(x, y, z), ...]

        Raises:
            NoFaceDetectedError: 얼굴이 없는 경우
        """
        result = self.detect(image)
        if not result.success:
            raise NoFaceDetectedError(NO_FACE_MESSAGE)
        return result.points

    def get_model_info(self) -> Dict[str, Any]:
        """모델 설정 정보"""
        return {
            'max_num_faces': self.config.max_num_faces,
            'min_detection_confidence': self.config.min_detection_confidence,
            'min_presence_confidence': self.config.min_presence_confidence,
            'min_tracking_confidence': self.config.min_tracking_confidence,
            'model_path': self.config.model_path,
            'expected_landmarks': self.config.expected_landmarks,
        }

    def release(self):
        """리소스 해제"""
        landmarker = getattr(self, 'landmarker', None)
        if landmarker is not None:
            landmarker.close()
            self.landmarker = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def __del__(self):
        """소멸자"""
        self.release()
