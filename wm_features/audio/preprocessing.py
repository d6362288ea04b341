"""
오디오 전처리 모듈

피크 정규화와 앞뒤 무음 구간 제거를 수행합니다. 모든 함수는 입력 배열을
변경하지 않고 새 배열을 반환합니다.
"""

import numpy as np

from config import DEFAULT_CONFIG


def normalize_peak(samples: np.ndarray) -> np.ndarray:
    """
    최대 절대값으로 나누어 [-1, 1] 범위로 정규화합니다.

    Parameters:
    -----------
    samples : np.ndarray
        모노 오디오 샘플

    Returns:
    --------
    np.ndarray
        정규화된 샘플. 전체가 0(완전 무음)이면 입력의 복사본
    """
    y = np.asarray(samples, dtype=np.float64)
    if y.size == 0:
        return y.copy()

    max_abs = np.max(np.abs(y))
    if max_abs > 0:
        return y / max_abs
    return y.copy()


def trim_silence(samples: np.ndarray, threshold: float = None) -> np.ndarray:
    """
    임계값을 넘는 첫 샘플부터 마지막 샘플까지(양끝 포함) 잘라냅니다.

    Parameters:
    -----------
    samples : np.ndarray
        모노 오디오 샘플
    threshold : float, optional
        무음 임계값. None이면 설정의 silence_threshold (0.01)

    Returns:
    --------
    np.ndarray
        잘라낸 샘플. 임계값을 넘는 샘플이 없으면 빈 배열
    """
    if threshold is None:
        threshold = DEFAULT_CONFIG.silence_threshold

    y = np.asarray(samples, dtype=np.float64)
    loud = np.flatnonzero(np.abs(y) > threshold)
    if loud.size == 0:
        return np.zeros(0, dtype=np.float64)

    return y[loud[0]:loud[-1] + 1].copy()


def preprocess(samples: np.ndarray, sample_rate: int, threshold: float = None) -> np.ndarray:
    """
    정규화 후 앞뒤 무음을 제거합니다.

    sample_rate는 현재 사용하지 않지만 호출 계약을 위해 받습니다.
    """
    return trim_silence(normalize_peak(samples), threshold)
