"""설정 로더 / 설정 클래스 / 인덱스 테이블 검증 테스트"""

import pytest

from lash_mapping.config.constants import FACE_MESH_LANDMARK_COUNT
from lash_mapping.config.settings import DetectionConfig, ImageSettings, RenderStyle
from lash_mapping.utils import get_config, reset_config, setup_logging
from lash_mapping.utils.config_loader import CONFIG_ENV_VAR, Config
from lash_mapping.utils.exceptions import ConfigurationError
from lash_mapping.utils.validators import validate_confidence, validate_landmark_tables


def test_default_config_values():
    config = get_config()

    assert config.get('detection.min_detection_confidence') == 0.9
    assert config.get('detection.max_num_faces') == 1
    assert config.get('image.max_dimension') == 800
    assert config.classification.min_landmarks == 17


def test_missing_key_returns_default():
    config = get_config()

    assert config.get('detection.unknown', 'x') == 'x'
    assert config.get('nope.deeper') is None
    assert config.section('nope').get('anything', 3) == 3


def test_get_config_is_singleton():
    assert get_config() is get_config()


def test_env_var_overrides_config_path(tmp_path, monkeypatch):
    custom = tmp_path / "custom.yaml"
    custom.write_text("image:\n  max_dimension: 640\n", encoding='utf-8')
    monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
    reset_config()

    config = get_config()
    assert config.config_path == custom
    assert config.get('image.max_dimension') == 640


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("image: [unclosed\n", encoding='utf-8')

    with pytest.raises(ValueError):
        Config(broken)


def test_settings_from_config_sections():
    config = get_config()

    detection = DetectionConfig.from_config(config.section('detection'))
    image = ImageSettings.from_config(config.section('image'))
    style = RenderStyle.from_config(config.section('rendering'))

    assert detection.min_detection_confidence == 0.9
    assert detection.model_path is None
    assert detection.model_url.endswith('face_landmarker.task')
    assert image.max_dimension == 800
    assert style.show_landmarks is True


@pytest.mark.parametrize("kwargs", [
    {'min_detection_confidence': 1.5},
    {'min_presence_confidence': -0.1},
    {'max_num_faces': 0},
    {'expected_landmarks': 0},
])
def test_detection_config_validation(kwargs):
    with pytest.raises(ValueError):
        DetectionConfig(**kwargs)


def test_render_style_validation():
    with pytest.raises(ValueError):
        RenderStyle(font_pixels_per_scale=0)


def test_validate_confidence():
    validate_confidence(0.5)
    with pytest.raises(ValueError):
        validate_confidence(-0.1)


def test_landmark_tables_fit_face_mesh():
    validate_landmark_tables(FACE_MESH_LANDMARK_COUNT)


def test_landmark_tables_reject_smaller_topology():
    # 466번 (right_crease / 오른쪽 눈 윤곽)이 범위를 벗어남
    with pytest.raises(ConfigurationError, match="466"):
        validate_landmark_tables(400)


def test_custom_tables_are_validated():
    validate_landmark_tables(10, {'small': [0, 9]})
    with pytest.raises(ConfigurationError, match="small"):
        validate_landmark_tables(10, {'small': [10]})


def test_sections_and_attribute_access():
    config = get_config()

    assert config.section('logging').section('console').get('level') == 'WARNING'
    assert config.logging.file.enabled is False
    assert config.section('image').section('max_dimension').get('x') is None
    with pytest.raises(AttributeError):
        config.nope


def test_non_mapping_config_raises(tmp_path):
    listed = tmp_path / "list.yaml"
    listed.write_text("- a\n- b\n", encoding='utf-8')

    with pytest.raises(ValueError, match="mapping"):
        Config(listed)


def test_empty_config_file_is_empty(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding='utf-8')

    assert Config(empty).get('image.max_dimension', 123) == 123


def test_package_loggers_do_not_propagate_by_default():
    logger = setup_logging('lash_mapping.tests.default_propagation')

    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_logger_propagation_can_be_enabled(tmp_path, monkeypatch):
    custom = tmp_path / "logging.yaml"
    custom.write_text("logging:\n  propagate: true\n  console:\n    enabled: false\n", encoding='utf-8')
    monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
    reset_config()

    logger = setup_logging('lash_mapping.tests.opt_in_propagation')

    assert logger.propagate is True
    assert logger.handlers == []
