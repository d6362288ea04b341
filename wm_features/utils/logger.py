"""
Logging infrastructure for watermelon tap-sound feature extraction.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = "watermelon_features"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    console_output: bool = True
) -> logging.Logger:
    """
    로깅 시스템 설정.

    Parameters:
    -----------
    name : str
        로거 이름
    log_level : str
        로그 레벨 ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
    log_dir : str, optional
        로그 파일 저장 디렉토리. None이면 파일 로그를 남기지 않음
    console_output : bool
        콘솔 출력 여부

    Returns:
    --------
    logging.Logger
        설정된 로거 인스턴스
    """

    # 로거 생성
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # 기존 핸들러 제거 (중복 방지)
    logger.handlers.clear()

    # 로그 포맷 설정
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 파일 핸들러 설정 (날짜별 로그 파일)
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        log_filename = f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_path / log_filename, encoding='utf-8')
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 콘솔 핸들러 설정
    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.debug(f"Logger '{name}' initialized (level={log_level}, log_dir={log_dir})")

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    기존 로거 반환.

    하위 로거(`watermelon_features.X`)는 핸들러를 따로 두지 않고 루트 로거로
    전파합니다. 루트 로거에 핸들러가 없으면 기본 설정으로 초기화합니다.

    Parameters:
    -----------
    name : str
        로거 이름

    Returns:
    --------
    logging.Logger
        로거 인스턴스
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logger(ROOT_LOGGER_NAME)

    return logging.getLogger(name)


class LoggerMixin:
    """
    클래스에 로깅 기능을 추가하는 믹스인 클래스.
    """

    @property
    def logger(self) -> logging.Logger:
        """클래스별 로거 반환."""
        logger_name = f"{ROOT_LOGGER_NAME}.{self.__class__.__name__}"
        return get_logger(logger_name)
