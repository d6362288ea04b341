"""
pytest 설정 및 공통 픽스처

전체 테스트 스위트에서 사용할 공통 설정과 픽스처들을 정의합니다.
"""

import os
import sys
import tempfile
import shutil
import pytest
import numpy as np
import soundfile as sf

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import Config


SAMPLE_RATE = 22050


def make_sine(freq, amplitude=1.0, duration=1.0, sr=SAMPLE_RATE):
    """t = n / sr 로 샘플링한 사인파"""
    t = np.arange(int(sr * duration)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def temp_dir():
    """테스트별 임시 디렉토리"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def sample_config():
    """테스트용 설정 객체"""
    return Config(api_base_url="http://testserver:8000")


@pytest.fixture
def sine_300():
    """300Hz, 진폭 0.5, 1초 사인파"""
    return make_sine(300, amplitude=0.5)


@pytest.fixture
def sine_440():
    """440Hz, 진폭 1, 1초 사인파"""
    return make_sine(440, amplitude=1.0)


@pytest.fixture
def tap_signal():
    """감쇠하는 충격음 (수박 두드림 모사), 앞뒤 무음 포함"""
    rng = np.random.default_rng(42)
    sr = SAMPLE_RATE
    t = np.arange(int(sr * 0.6)) / sr
    body = (np.sin(2 * np.pi * 180 * t) + 0.4 * np.sin(2 * np.pi * 420 * t)) * np.exp(-t * 12)
    body += 0.01 * rng.standard_normal(t.size) * np.exp(-t * 12)
    silence = np.zeros(int(sr * 0.2))
    return np.concatenate([silence, 0.3 * body, silence])


@pytest.fixture
def white_noise():
    """가우시안 백색 노이즈"""
    rng = np.random.default_rng(0)
    return rng.normal(0, 0.1, SAMPLE_RATE)


@pytest.fixture
def sample_audio_file(temp_dir, tap_signal):
    """테스트용 WAV 파일"""
    filepath = os.path.join(temp_dir, "tap.wav")
    sf.write(filepath, tap_signal, SAMPLE_RATE)
    return filepath


# 테스트 마커 정의
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "performance: marks performance tests"
    )


# 테스트 수집 시 실행
def pytest_collection_modifyitems(config, items):
    """테스트 항목 수정"""
    for item in items:
        # 통합 테스트는 integration 마커 추가
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        # 단위 테스트는 unit 마커 추가
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


# 로깅 설정
@pytest.fixture(autouse=True)
def setup_logging():
    """테스트용 로깅 설정"""
    import logging

    logging.getLogger('watermelon_features').setLevel(logging.WARNING)
    logging.getLogger('librosa').setLevel(logging.ERROR)

    yield

    logging.getLogger('watermelon_features').setLevel(logging.INFO)
