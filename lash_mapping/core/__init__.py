"""Core detection components (MediaPipe 의존)"""

from .landmark_extractor import LandmarkExtractor

__all__ = ['FaceDetector', 'LandmarkExtractor']


def __getattr__(name):
    # mediapipe는 FaceDetector 사용 시점에만 import
    if name == 'FaceDetector':
        from .face_detector import FaceDetector
        return FaceDetector
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
