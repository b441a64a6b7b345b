"""LandmarkExtractor / FaceDetector 테스트"""

from types import SimpleNamespace

import numpy as np
import pytest

from lash_mapping.config.settings import DetectionConfig
from lash_mapping.core import LandmarkExtractor
from lash_mapping.utils.exceptions import (
    ConfigurationError,
    DetectionError,
    LandmarkExtractionError,
    NoFaceDetectedError,
)


def fake_mediapipe_result(points):
    """FaceLandmarker.detect() 결과와 같은 구조의 객체"""
    landmarks = [SimpleNamespace(x=x, y=y, z=z, visibility=None) for x, y, z in points]
    return SimpleNamespace(face_landmarks=[landmarks])


class FakeLandmarker:
    """고정 결과를 반환하는 FaceLandmarker"""

    def __init__(self, result):
        self.result = result
        self.images = []
        self.closed = False

    def detect(self, mp_image):
        self.images.append(mp_image)
        return self.result

    def close(self):
        self.closed = True


@pytest.fixture
def extractor():
    return LandmarkExtractor()


@pytest.fixture
def detector_factory():
    pytest.importorskip("mediapipe")
    from lash_mapping.core import FaceDetector

    def _build(result):
        return FaceDetector(landmarker=FakeLandmarker(result))
    return _build


def test_extract_landmarks_to_pixels(extractor):
    result = fake_mediapipe_result([(0.5, 0.25, 0.01), (0.1, 0.9, -0.02)])

    landmarks = extractor.extract_landmarks(result, 640, 480)

    assert len(landmarks) == 2
    assert landmarks[0].to_point() == pytest.approx((320, 120, 6.4))
    assert landmarks[1].visibility == 1.0


def test_extract_without_face_raises(extractor):
    with pytest.raises(LandmarkExtractionError):
        extractor.extract_landmarks(SimpleNamespace(face_landmarks=[]), 640, 480)


def test_bounding_box(extractor):
    result = fake_mediapipe_result([(0.1, 0.2, 0), (0.5, 0.6, 0)])
    landmarks = extractor.extract_landmarks(result, 100, 100)

    assert extractor.get_bounding_box(landmarks) == (10, 20, 40, 40)
    assert extractor.get_bounding_box([]) == (0, 0, 0, 0)


def test_landmark_lookup(extractor):
    landmarks = extractor.extract_landmarks(fake_mediapipe_result([(0.1, 0.1, 0)] * 20), 10, 10)

    assert extractor.get_landmark_by_index(landmarks, 5) is landmarks[5]
    with pytest.raises(IndexError):
        extractor.get_landmark_by_index(landmarks, 100)
    with pytest.raises(ValueError):
        extractor.get_landmark_by_index(landmarks, 500)


def test_facial_region(extractor):
    landmarks = extractor.extract_landmarks(fake_mediapipe_result([(0.1, 0.1, 0)] * 468), 10, 10)

    assert len(extractor.get_facial_region(landmarks, 'jawline')) == 17
    assert len(extractor.get_facial_region(landmarks, 'left_eye')) == 16
    with pytest.raises(ValueError, match="Unknown region"):
        extractor.get_facial_region(landmarks, 'ears')


def test_detector_without_face_raises(detector_factory, blank_image):
    detector = detector_factory(SimpleNamespace(face_landmarks=[]))

    assert detector.detect(blank_image).success is False
    with pytest.raises(NoFaceDetectedError, match="No face detected"):
        detector.detect_landmarks(blank_image)
    assert len(detector.landmarker.images) == 2


def test_detector_returns_pixel_points(detector_factory, blank_image):
    detector = detector_factory(fake_mediapipe_result([(0.5, 0.25, 0.0)] * 478))

    points = detector.detect_landmarks(blank_image)

    assert len(points) == 478
    assert points[0] == pytest.approx((320, 120, 0))


def test_detector_rejects_short_landmark_list(detector_factory, blank_image):
    detector = detector_factory(fake_mediapipe_result([(0.5, 0.5, 0.0)] * 100))

    with pytest.raises(DetectionError, match="100 landmarks"):
        detector.detect(blank_image)


def test_detector_release_closes_landmarker(detector_factory):
    detector = detector_factory(SimpleNamespace(face_landmarks=[]))
    landmarker = detector.landmarker

    with detector:
        pass

    assert landmarker.closed
    assert detector.landmarker is None
    detector.release()


def test_detector_rejects_smaller_topology():
    pytest.importorskip("mediapipe")
    from lash_mapping.core import FaceDetector

    with pytest.raises(ConfigurationError, match="466"):
        FaceDetector(DetectionConfig(expected_landmarks=400), landmarker=FakeLandmarker(None))


def test_model_download_failure_raises(tmp_path):
    pytest.importorskip("mediapipe")
    from lash_mapping.core.face_detector import ensure_model

    config = DetectionConfig(model_path=str(tmp_path / "model.task"), model_url="file:///nonexistent/model.task")

    with pytest.raises(ConfigurationError, match="download"):
        ensure_model(config)
    assert not (tmp_path / "model.task.part").exists()


def test_existing_model_is_not_downloaded(tmp_path):
    pytest.importorskip("mediapipe")
    from lash_mapping.core.face_detector import ensure_model

    model = tmp_path / "model.task"
    model.write_bytes(b"model")

    assert ensure_model(DetectionConfig(model_path=str(model), model_url="file:///nonexistent")) == model


def test_detector_on_blank_image():
    pytest.importorskip("mediapipe")
    from lash_mapping.core import FaceDetector

    try:
        detector = FaceDetector()
    except ConfigurationError as e:
        pytest.skip(f"face landmarker model unavailable: {e}")

    with detector:
        blank = np.zeros((480, 640, 3), dtype=np.uint8)

        assert detector.detect(blank).success is False
        with pytest.raises(NoFaceDetectedError, match="No face detected"):
            detector.detect_landmarks(blank)
