"""
Utilities package.
"""
from .config_loader import get_config, reset_config, Config
from .logging_config import get_logger, setup_logging, enable_debug_logging
from .json_exporter import to_result_json, save_result_json

__all__ = [
    'get_config', 'reset_config', 'Config',
    'get_logger', 'setup_logging', 'enable_debug_logging',
    'to_result_json', 'save_result_json',
]
