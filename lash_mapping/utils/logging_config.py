"""
Logging configuration module for lash mapping.
Provides centralized logging setup with file and console handlers.
"""
import logging
import logging.handlers
from pathlib import Path
from .config_loader import get_config


def setup_logging(name: str = None) -> logging.Logger:
    """
    로깅 시스템 설정 및 로거 반환

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용)

    Returns:
        logging.Logger: 설정된 로거 객체
    """
    config = get_config()

    # 로거 생성
    logger = logging.getLogger(name or __name__)

    # 이미 핸들러가 설정되어 있으면 중복 설정 방지
    if logger.handlers:
        return logger

    log_config = config.section('logging')

    # 로그 레벨 설정
    log_level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    logger.setLevel(log_level)

    # 로그 포맷 설정
    log_format = log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    date_format = log_config.get('date_format', '%Y-%m-%d %H:%M:%S')
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console = log_config.section('console')
    file_cfg = log_config.section('file')

    # 콘솔 핸들러 설정
    if console.get('enabled', True):
        console_handler = logging.StreamHandler()
        console_level = getattr(logging, str(console.get('level', 'INFO')).upper(), logging.INFO)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # 파일 핸들러 설정
    if file_cfg.get('enabled', False):
        # 로그 디렉토리 생성
        log_dir = Path(file_cfg.get('directory', 'logs'))
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / file_cfg.get('filename', 'lash_mapping.log')

        # 파일 핸들러 (RotatingFileHandler 사용)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=file_cfg.get('max_bytes', 10485760),
            backupCount=file_cfg.get('backup_count', 5),
            encoding='utf-8'
        )
        file_level = getattr(logging, str(file_cfg.get('level', 'DEBUG')).upper(), logging.DEBUG)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 루트 로거 전파 (기본: 안 함)
    logger.propagate = bool(log_config.get('propagate', False))

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    로거 가져오기 (간편 함수)

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용)

    Returns:
        logging.Logger: 설정된 로거 객체
    """
    return setup_logging(name)


def enable_debug_logging(prefix: str = 'lash_mapping'):
    """
    prefix로 시작하는 모든 로거와 핸들러를 DEBUG로 변경 (CLI --verbose)

    Args:
        prefix: 대상 로거 이름 접두사
    """
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger) or not name.startswith(prefix):
            continue
        logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)
