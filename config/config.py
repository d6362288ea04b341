"""
Configuration management for watermelon tap-sound feature extraction.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional
import os


# 53차원 벡터 계약에 고정된 값
MFCC_COUNT = 13
FEATURE_VECTOR_LENGTH = 53
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Config:
    """Configuration class for the watermelon feature extraction pipeline."""

    # 오디오 처리 파라미터
    sample_rate: int = 22050
    n_fft: int = 2048
    hop_length: int = 512
    n_mels: int = 128
    n_mfcc: int = 13

    # 전처리 설정
    silence_threshold: float = 0.01

    # 디스크립터 파라미터
    roll_percent: float = 0.85
    f0_min_hz: float = 50.0
    f0_max_hz: float = 1000.0
    subband_low: Tuple[float, float] = (250.0, 3000.0)
    subband_high: Tuple[float, float] = (3000.0, 8000.0)

    # 출력 벡터 계약 (위치 기반, 변경 금지)
    feature_vector_length: int = 53

    # 지원 오디오 형식
    supported_formats: List[str] = field(default_factory=lambda: ['.wav', '.mp3', '.flac', '.m4a'])

    # 예측 서버 설정
    api_base_url: str = field(
        default_factory=lambda: os.environ.get("WM_API_BASE_URL", "http://localhost:8000"))
    api_timeout: float = 30.0

    # 로깅 설정
    log_level: str = field(default_factory=lambda: os.environ.get("WM_LOG_LEVEL", "INFO"))
    log_dir: Optional[str] = None

    def __post_init__(self):
        """초기화 후 설정 값 검증."""
        self.api_base_url = self.api_base_url.rstrip("/")
        self.validate()

    def validate(self):
        """
        설정 값의 유효성을 검사합니다.

        Raises:
        -------
        ValueError
            잘못된 설정 값이 있는 경우
        """
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.hop_length <= 0:
            raise ValueError("hop_length must be positive")
        if self.n_fft <= 0 or self.n_fft & (self.n_fft - 1):
            raise ValueError("n_fft must be a positive power of two")
        if self.n_mels <= 0:
            raise ValueError("n_mels must be positive")
        if self.n_mfcc != MFCC_COUNT:
            raise ValueError(f"n_mfcc must be {MFCC_COUNT}")
        if self.n_mfcc > self.n_mels:
            raise ValueError("n_mfcc must not exceed n_mels")
        if self.feature_vector_length != FEATURE_VECTOR_LENGTH:
            raise ValueError(f"feature_vector_length must be {FEATURE_VECTOR_LENGTH}")
        if self.silence_threshold < 0:
            raise ValueError("silence_threshold must be non-negative")
        if not 0 < self.roll_percent <= 1:
            raise ValueError("roll_percent must be in (0, 1]")
        if not 0 < self.f0_min_hz < self.f0_max_hz:
            raise ValueError("f0_min_hz must be positive and below f0_max_hz")
        for low, high in (self.subband_low, self.subband_high):
            if not 0 <= low < high:
                raise ValueError("sub-band edges must satisfy 0 <= low < high")
        if self.api_timeout <= 0:
            raise ValueError("api_timeout must be positive")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")


# 기본 설정 인스턴스
DEFAULT_CONFIG = Config()
