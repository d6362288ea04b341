"""
오디오 파일 로더 (파형 공급자)

librosa로 파일을 디코딩하면서 설정된 샘플링 레이트로 리샘플링하고 모노로
변환합니다. 수치 코어에는 이 모듈이 만든 float 배열만 전달됩니다.
"""

import os
from pathlib import Path
from typing import Tuple

import numpy as np
import librosa

from config import DEFAULT_CONFIG
from ..exceptions import AudioLoadError
from ..utils.logger import get_logger


logger = get_logger("watermelon_features.loader")


def validate_audio_file(audio_file_path: str, config=None) -> bool:
    """
    오디오 파일의 유효성을 검사합니다.

    Parameters:
    -----------
    audio_file_path : str
        검사할 오디오 파일 경로
    config : Config, optional
        구성 객체. None이면 기본 구성을 사용합니다.

    Returns:
    --------
    bool
        파일이 유효하면 True, 그렇지 않으면 False
    """
    config = config or DEFAULT_CONFIG

    # 파일 존재 확인
    if not os.path.exists(audio_file_path):
        logger.error(f"파일을 찾을 수 없음: {audio_file_path}")
        return False

    # 파일 확장자 확인
    file_ext = Path(audio_file_path).suffix.lower()
    if file_ext not in config.supported_formats:
        logger.warning(f"지원되지 않는 오디오 형식: {file_ext}")

    # 파일 크기 확인
    if os.path.getsize(audio_file_path) == 0:
        logger.error(f"빈 파일: {audio_file_path}")
        return False

    # 처음 0.1초만 디코딩해 본다
    try:
        y, _ = librosa.load(audio_file_path, sr=None, duration=0.1)
    except Exception as e:
        logger.error(f"오디오 파일 검증 실패 {audio_file_path}: {e}")
        return False

    if len(y) == 0:
        logger.error(f"오디오 데이터가 없음: {audio_file_path}")
        return False

    return True


def load_audio(audio_file_path: str, config=None) -> Tuple[np.ndarray, int]:
    """
    오디오 파일을 로드합니다.

    Parameters:
    -----------
    audio_file_path : str
        로드할 오디오 파일 경로
    config : Config, optional
        구성 객체

    Returns:
    --------
    tuple
        (audio_data, sample_rate). audio_data는 float32 모노 배열

    Raises:
    -------
    AudioLoadError
        파일이 유효하지 않거나 디코딩에 실패한 경우
    """
    config = config or DEFAULT_CONFIG

    if not validate_audio_file(audio_file_path, config):
        raise AudioLoadError(f"오디오 파일을 읽을 수 없습니다: {audio_file_path}")

    try:
        # 일관된 샘플링 레이트, 모노로 로드
        y, sr = librosa.load(audio_file_path, sr=config.sample_rate, mono=True)
    except Exception as e:
        logger.error(f"오디오 로드 실패 {audio_file_path}: {e}")
        raise AudioLoadError(f"오디오 로드 실패: {audio_file_path}") from e

    if len(y) == 0:
        raise AudioLoadError(f"빈 오디오 데이터: {audio_file_path}")

    logger.debug(f"오디오 로드 성공: {audio_file_path} (길이: {len(y)}, SR: {sr})")
    return y.astype(np.float32), int(sr)
