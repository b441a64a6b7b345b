"""
설정 로더
config.yaml (패키지 기본 파일 또는 LASH_MAPPING_CONFIG_PATH) 을 읽어 섹션 단위로 제공
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

CONFIG_ENV_VAR = 'LASH_MAPPING_CONFIG_PATH'
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config.yaml'


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """명시 경로 > 환경 변수 > 패키지 기본 파일 순으로 설정 파일 결정"""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_yaml(path: Path) -> Dict[str, Any]:
    """
    YAML 파일을 dict로 로드

    Raises:
        FileNotFoundError: 파일이 없는 경우
        ValueError: YAML 문법 오류 또는 최상위가 매핑이 아닌 경우
    """
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path} (set {CONFIG_ENV_VAR} to use another file)"
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML format in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top level of {path} must be a mapping")
    return data


class ConfigSection:
    """
    YAML 매핑 한 단계

    get(key), section(name) 또는 속성 접근(section.console.level)으로 조회
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def section(self, name: str) -> 'ConfigSection':
        """하위 섹션 (없거나 매핑이 아니면 빈 섹션)"""
        value = self._data.get(name)
        return ConfigSection(value if isinstance(value, dict) else {})

    def __getattr__(self, name: str):
        if name.startswith('_') or name not in self._data:
            raise AttributeError(f"{type(self).__name__} has no key '{name}'")
        value = self._data[name]
        return ConfigSection(value) if isinstance(value, dict) else value


class Config(ConfigSection):
    """
    최상위 설정

    Usage:
        config = Config()
        max_dim = config.get('image.max_dimension')
        min_count = config.classification.min_landmarks
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = resolve_config_path(config_path)
        super().__init__(load_yaml(self.config_path))

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        점(.) 구분 경로로 값 조회

        Example:
            >>> config.get('detection.min_detection_confidence')
            0.9
        """
        value: Any = self._data
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value


_global_config: Optional[Config] = None


def get_config() -> Config:
    """전역 Config (최초 호출 시 로드)"""
    global _global_config
    if _global_config is None:
        _global_config = Config()
    return _global_config


def reset_config():
    """전역 설정 해제 (다음 get_config() 호출 시 경로 재탐색)"""
    global _global_config
    _global_config = None
