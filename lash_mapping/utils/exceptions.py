"""커스텀 예외 클래스 정의"""


class LashMappingException(Exception):
    """기본 예외 클래스"""
    pass


class DetectionError(LashMappingException):
    """얼굴 검출 실패 예외"""
    pass


class NoFaceDetectedError(DetectionError):
    """이미지에서 얼굴을 찾지 못한 경우 (재시도 안내 대상)"""
    pass


class InvalidImageError(LashMappingException):
    """잘못된 이미지 입력 예외"""
    pass


class ConfigurationError(LashMappingException):
    """설정 오류 예외 (랜드마크 토폴로지 불일치 포함)"""
    pass


class LandmarkExtractionError(LashMappingException):
    """랜드마크 추출 실패 예외"""
    pass
