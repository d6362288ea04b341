"""
스펙트럼 엔진

해닝 윈도우 프레임 분할과 실수 FFT로 파워 스펙트로그램을 계산합니다.
스펙트로그램 형태는 (n_frames, n_fft // 2) 이며, 입력이 한 윈도우보다
짧으면 프레임이 0개인 배열을 반환합니다.
"""

import numpy as np

from config import DEFAULT_CONFIG


def _check_fft_size(n_fft: int):
    if n_fft <= 0 or n_fft & (n_fft - 1):
        raise ValueError(f"n_fft must be a positive power of two, got {n_fft}")


def hann_window(size: int) -> np.ndarray:
    """
    대칭 해닝 윈도우 `0.5 * (1 - cos(2πi / (size - 1)))`.

    Parameters:
    -----------
    size : int
        윈도우 길이

    Returns:
    --------
    np.ndarray
        윈도우 계수. 형태: (size,)
    """
    if size <= 1:
        return np.ones(max(size, 0), dtype=np.float64)

    i = np.arange(size, dtype=np.float64)
    return 0.5 * (1.0 - np.cos(2.0 * np.pi * i / (size - 1)))


def fft_bin_frequencies(sample_rate: float, n_fft: int) -> np.ndarray:
    """스펙트로그램 빈(0 .. n_fft/2 - 1)의 중심 주파수 `i * sr / n_fft`."""
    return np.arange(n_fft // 2, dtype=np.float64) * sample_rate / n_fft


def frame_count(n_samples: int, n_fft: int, hop_length: int) -> int:
    """`floor((n_samples - n_fft) / hop) + 1`, 음수는 0으로 고정."""
    if n_samples < n_fft:
        return 0
    return (n_samples - n_fft) // hop_length + 1


def power_spectrum(frame: np.ndarray, n_fft: int) -> np.ndarray:
    """
    길이 n_fft 실수 FFT의 앞쪽 n_fft/2 빈에 대한 크기 제곱.

    윈도우 에너지로 정규화하지 않습니다. 프레임이 n_fft보다 짧으면 0으로
    채워집니다.
    """
    _check_fft_size(n_fft)
    spectrum = np.fft.rfft(np.asarray(frame, dtype=np.float64), n=n_fft)[:n_fft // 2]
    return spectrum.real ** 2 + spectrum.imag ** 2


def stft(samples: np.ndarray, n_fft: int = None, hop_length: int = None) -> np.ndarray:
    """
    Short-Time Fourier Transform 파워 스펙트로그램.

    Parameters:
    -----------
    samples : np.ndarray
        모노 오디오 샘플
    n_fft : int, optional
        FFT 크기 (2의 거듭제곱). 기본 2048
    hop_length : int, optional
        프레임 간격. 기본 512

    Returns:
    --------
    np.ndarray
        파워 스펙트로그램. 형태: (n_frames, n_fft // 2)
    """
    n_fft = n_fft or DEFAULT_CONFIG.n_fft
    hop_length = hop_length or DEFAULT_CONFIG.hop_length
    _check_fft_size(n_fft)

    y = np.asarray(samples, dtype=np.float64)
    n_frames = frame_count(y.size, n_fft, hop_length)
    if n_frames < 1:
        return np.zeros((0, n_fft // 2), dtype=np.float64)

    # 프레임 인덱스 행렬로 한 번에 잘라낸 뒤 윈도우 적용
    starts = np.arange(n_frames) * hop_length
    frames = y[starts[:, None] + np.arange(n_fft)[None, :]]
    frames = frames * hann_window(n_fft)

    spectrum = np.fft.rfft(frames, n=n_fft, axis=1)[:, :n_fft // 2]
    return spectrum.real ** 2 + spectrum.imag ** 2
