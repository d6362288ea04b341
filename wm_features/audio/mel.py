"""
멜 엔진

HTK 식 멜 스케일(2595·log10(1 + f/700)) 기반의 삼각 필터 뱅크, 멜
스펙트로그램, 로그 멜, 직교 DCT-II를 이용한 MFCC 계산을 제공합니다.

필터 뱅크는 n_fft/2 + 1 개 빈에 대해 만들어지지만 파워 스펙트로그램은
n_fft/2 개 빈만 가지므로, 적용 시 필터의 마지막(나이퀴스트) 빈은
버립니다. 스펙트로그램을 0으로 채우는 것과 결과가 같습니다.
"""

import numpy as np
import scipy.fft

from config import DEFAULT_CONFIG


LOG_FLOOR = 1e-10


def hz_to_mel(hz):
    """Hz → mel. 스칼라와 배열 모두 지원."""
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    """mel → Hz. hz_to_mel의 정확한 역함수."""
    return 700.0 * (10.0 ** (np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


def mel_filter_bank(n_fft: int = None, n_mels: int = None, sample_rate: float = None) -> np.ndarray:
    """
    삼각 멜 필터 뱅크를 생성합니다.

    0 Hz와 나이퀴스트 사이를 멜 공간에서 등간격으로 나눈 n_mels + 2 개
    점을 Hz로 되돌린 뒤, 연속된 (left, center, right) 세 점마다 삼각 필터
    하나를 만듭니다.

    Parameters:
    -----------
    n_fft : int, optional
        FFT 크기. 기본 2048
    n_mels : int, optional
        멜 밴드 수. 기본 128
    sample_rate : float, optional
        샘플링 레이트. 기본 22050

    Returns:
    --------
    np.ndarray
        필터 가중치. 형태: (n_mels, n_fft // 2 + 1)
    """
    n_fft = n_fft or DEFAULT_CONFIG.n_fft
    n_mels = n_mels or DEFAULT_CONFIG.n_mels
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate

    min_mel = hz_to_mel(0.0)
    max_mel = hz_to_mel(sample_rate / 2.0)
    hz_points = mel_to_hz(np.linspace(min_mel, max_mel, n_mels + 2))

    bin_freqs = np.arange(n_fft // 2 + 1, dtype=np.float64) * sample_rate / n_fft

    filter_bank = np.zeros((n_mels, bin_freqs.size), dtype=np.float64)
    for i in range(n_mels):
        left, center, right = hz_points[i], hz_points[i + 1], hz_points[i + 2]

        rising = (bin_freqs > left) & (bin_freqs <= center)
        falling = (bin_freqs > center) & (bin_freqs < right)

        filter_bank[i, rising] = (bin_freqs[rising] - left) / (center - left)
        filter_bank[i, falling] = (right - bin_freqs[falling]) / (right - center)

    return filter_bank


def mel_spectrogram(spectrogram: np.ndarray, filter_bank: np.ndarray) -> np.ndarray:
    """
    파워 스펙트로그램에 필터 뱅크를 적용합니다.

    Returns:
    --------
    np.ndarray
        멜 스펙트로그램. 형태: (n_frames, n_mels)
    """
    spec = np.asarray(spectrogram, dtype=np.float64)
    n_mels = filter_bank.shape[0]
    if spec.ndim != 2 or spec.shape[0] == 0:
        return np.zeros((0, n_mels), dtype=np.float64)

    # 필터의 나이퀴스트 빈은 스펙트로그램에 대응 빈이 없음
    weights = filter_bank[:, :spec.shape[1]]
    return spec @ weights.T


def log_mel_spectrogram(mel_spec: np.ndarray) -> np.ndarray:
    """`log10(max(v, 1e-10))` 원소별 적용."""
    return np.log10(np.maximum(np.asarray(mel_spec, dtype=np.float64), LOG_FLOOR))


def dct_ii(values: np.ndarray, n_coefficients: int = None) -> np.ndarray:
    """
    직교 정규화 DCT-II의 앞쪽 계수.

    `sqrt(2/N) * Σ x[n] cos(πk(2n+1) / 2N)` 이며 k = 0 계수에는 추가로
    1/√2 가 곱해집니다. 마지막 축을 따라 계산합니다.
    """
    x = np.asarray(values, dtype=np.float64)
    if x.shape[-1] == 0:
        return np.zeros(x.shape[:-1] + (n_coefficients or 0,), dtype=np.float64)

    coefficients = scipy.fft.dct(x, type=2, norm='ortho', axis=-1)
    if n_coefficients is not None:
        coefficients = coefficients[..., :n_coefficients]
    return coefficients


def mfcc(log_mel: np.ndarray, n_mfcc: int = None) -> np.ndarray:
    """
    프레임별 MFCC.

    Returns:
    --------
    np.ndarray
        형태: (n_frames, n_mfcc)
    """
    n_mfcc = n_mfcc or DEFAULT_CONFIG.n_mfcc
    log_mel = np.asarray(log_mel, dtype=np.float64)
    if log_mel.ndim != 2 or log_mel.shape[0] == 0:
        return np.zeros((0, n_mfcc), dtype=np.float64)

    return dct_ii(log_mel, n_mfcc)


def mean_mfcc(log_mel: np.ndarray, n_mfcc: int = None) -> np.ndarray:
    """모든 프레임에 대한 MFCC 평균. 프레임이 없으면 0 벡터."""
    n_mfcc = n_mfcc or DEFAULT_CONFIG.n_mfcc
    coefficients = mfcc(log_mel, n_mfcc)
    if coefficients.shape[0] == 0:
        return np.zeros(n_mfcc, dtype=np.float64)
    return np.mean(coefficients, axis=0)
