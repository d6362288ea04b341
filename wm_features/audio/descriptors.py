"""
디스크립터 뱅크

파형, 파워 스펙트로그램, 멜 스펙트로그램을 입력으로 받는 독립적인
통계/스펙트럼 추정기 모음입니다. 모든 함수는 순수 함수이며 빈 입력,
0 에너지, 0 분산, 0 이하 로그 인자 같은 퇴화 입력에서 예외 대신 0.0을
반환합니다.
"""

import numpy as np
from scipy import stats

from config import DEFAULT_CONFIG
from .spectral import fft_bin_frequencies, power_spectrum


def _as_waveform(samples) -> np.ndarray:
    return np.asarray(samples, dtype=np.float64).ravel()


def _as_frames(spectrogram) -> np.ndarray:
    spec = np.asarray(spectrogram, dtype=np.float64)
    if spec.ndim != 2:
        return np.zeros((0, 0), dtype=np.float64)
    return spec


def _mean_or_zero(values) -> float:
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(np.mean(values))


# ---------------------------------------------------------------------------
# 파형 디스크립터
# ---------------------------------------------------------------------------

def rms_energy(samples) -> float:
    """sqrt(mean(x²)), 빈 입력은 0."""
    y = _as_waveform(samples)
    if y.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(y * y)))


def peak_amplitude(samples) -> float:
    """최대 절대 진폭."""
    y = _as_waveform(samples)
    if y.size == 0:
        return 0.0
    return float(np.max(np.abs(y)))


def energy_entropy(samples, frame_size: int = None, hop_size: int = None) -> float:
    """
    프레임 에너지 분포의 섀넌 엔트로피 (밑 2).

    프레임 에너지(제곱합)를 합이 1이 되도록 정규화한 분포에 대해
    계산합니다. 전체 에너지가 0이거나 프레임이 없으면 0.

    Parameters:
    -----------
    samples : np.ndarray
        모노 오디오 샘플
    frame_size : int, optional
        프레임 길이. 기본 n_fft (2048)
    hop_size : int, optional
        프레임 간격. 기본 hop_length (512)
    """
    frame_size = frame_size or DEFAULT_CONFIG.n_fft
    hop_size = hop_size or DEFAULT_CONFIG.hop_length

    y = _as_waveform(samples)
    if y.size < frame_size:
        return 0.0

    starts = np.arange(0, y.size - frame_size + 1, hop_size)
    frames = y[starts[:, None] + np.arange(frame_size)[None, :]]
    energies = np.sum(frames * frames, axis=1)

    total = np.sum(energies)
    if total <= 0:
        return 0.0

    p = energies / total
    p = p[p > 0]
    return float(-np.sum(p * np.log2(p)))


def dynamic_range(peak: float, rms: float) -> float:
    """20·log10(peak / rms) dB, rms ≤ 0 이면 0."""
    if rms <= 0 or peak <= 0:
        return 0.0
    return float(20.0 * np.log10(peak / rms))


def zero_crossing_rate(samples) -> float:
    """
    인접 샘플 부호 변화 횟수 / 전체 샘플 수.

    부호 경계는 `>= 0` 과 `< 0` 입니다. 따라서 0에서 음수로 가는 것도
    교차로 셉니다.
    """
    y = _as_waveform(samples)
    if y.size == 0:
        return 0.0

    non_negative = y >= 0
    crossings = np.count_nonzero(non_negative[1:] != non_negative[:-1])
    return float(crossings / y.size)


def fundamental_frequency(samples, sample_rate: float = None,
                          min_hz: float = None, max_hz: float = None) -> float:
    """
    자기상관 기반 기본 주파수 추정.

    `int(sr / max_hz)` 부터 `int(sr / min_hz)` 까지의 지연에서 자기상관
    합이 가장 큰 지연을 찾아 `sr / best_lag` 를 반환합니다. 샘플이 2개
    미만이거나 양의 상관을 가진 지연이 없으면(무음 등) 0.
    """
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    min_hz = min_hz or DEFAULT_CONFIG.f0_min_hz
    max_hz = max_hz or DEFAULT_CONFIG.f0_max_hz

    y = _as_waveform(samples)
    if y.size < 2:
        return 0.0

    min_lag = int(sample_rate / max_hz)
    max_lag = int(sample_rate / min_hz)
    if min_lag < 1:
        min_lag = 1

    best_lag = 0
    max_corr = 0.0
    for lag in range(min_lag, max_lag + 1):
        if lag >= y.size:
            break
        corr = float(np.dot(y[:-lag], y[lag:]))
        if corr > max_corr:
            max_corr = corr
            best_lag = lag

    if best_lag == 0:
        return 0.0
    return float(sample_rate / best_lag)


def subband_energy_ratio(samples, sample_rate: float = None, n_fft: int = None,
                         low_band=None, high_band=None) -> float:
    """
    단일 FFT에서 250–3000 Hz 대역 에너지 / 3000–8000 Hz 대역 에너지.

    파형 앞부분 n_fft 샘플(짧으면 0으로 채움)에 대해 윈도우 없이 FFT를
    수행합니다. 대역 빈은 `int(f / sr * n_fft)` 이고 [low, high) 반개구간
    입니다. 대역이 유효하지 않거나 분모가 0이면 0.
    """
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    n_fft = n_fft or DEFAULT_CONFIG.n_fft
    low_band = low_band or DEFAULT_CONFIG.subband_low
    high_band = high_band or DEFAULT_CONFIG.subband_high

    y = _as_waveform(samples)
    if y.size == 0:
        return 0.0

    power = power_spectrum(y[:n_fft], n_fft)

    def band_energy(low_hz, high_hz):
        low_bin = int(low_hz / sample_rate * n_fft)
        high_bin = int(high_hz / sample_rate * n_fft)
        if not (low_bin < high_bin and high_bin < power.size):
            return 0.0
        return float(np.sum(power[low_bin:high_bin]))

    numerator = band_energy(*low_band)
    denominator = band_energy(*high_band)
    if denominator <= 0:
        return 0.0
    return numerator / denominator


# ---------------------------------------------------------------------------
# 스펙트로그램 디스크립터
# ---------------------------------------------------------------------------

def spectral_centroids(spectrogram, sample_rate: float = None, n_fft: int = None) -> np.ndarray:
    """프레임별 에너지 가중 평균 주파수. 에너지가 0인 프레임은 0."""
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    n_fft = n_fft or DEFAULT_CONFIG.n_fft

    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)

    freqs = fft_bin_frequencies(sample_rate, n_fft)[:spec.shape[1]]
    totals = np.sum(spec, axis=1)
    weighted = spec @ freqs

    centroids = np.zeros(spec.shape[0], dtype=np.float64)
    nonzero = totals > 0
    centroids[nonzero] = weighted[nonzero] / totals[nonzero]
    return centroids


def spectral_centroid(spectrogram, sample_rate: float = None, n_fft: int = None) -> float:
    """프레임별 스펙트럴 중심의 평균."""
    return _mean_or_zero(spectral_centroids(spectrogram, sample_rate, n_fft))


def spectral_bandwidth(spectrogram, centroids=None, sample_rate: float = None,
                       n_fft: int = None) -> float:
    """
    프레임 중심 주파수로부터의 에너지 가중 RMS 편차의 프레임 평균.

    centroids가 없으면 spectral_centroids로 계산합니다.
    """
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    n_fft = n_fft or DEFAULT_CONFIG.n_fft

    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0:
        return 0.0
    if centroids is None:
        centroids = spectral_centroids(spec, sample_rate, n_fft)
    centroids = np.asarray(centroids, dtype=np.float64)
    if centroids.size != spec.shape[0]:
        return 0.0

    freqs = fft_bin_frequencies(sample_rate, n_fft)[:spec.shape[1]]
    deviations = (freqs[None, :] - centroids[:, None]) ** 2
    totals = np.sum(spec, axis=1)
    weighted = np.sum(deviations * spec, axis=1)

    bandwidths = np.zeros(spec.shape[0], dtype=np.float64)
    nonzero = totals > 0
    bandwidths[nonzero] = np.sqrt(weighted[nonzero] / totals[nonzero])
    return float(np.mean(bandwidths))


def spectral_contrast(spectrogram) -> float:
    """프레임별 20·log10(max / min) 평균. min ≤ 0 인 프레임은 0."""
    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0 or spec.shape[1] == 0:
        return 0.0

    maxima = np.max(spec, axis=1)
    minima = np.min(spec, axis=1)

    contrasts = np.zeros(spec.shape[0], dtype=np.float64)
    valid = minima > 0
    contrasts[valid] = 20.0 * np.log10(maxima[valid] / minima[valid])
    return float(np.mean(contrasts))


def spectral_flatness(spectrogram) -> float:
    """
    프레임별 기하평균 / 산술평균 비율의 평균.

    기하평균은 로그 영역에서 계산해 긴 곱의 언더플로를 피합니다. 0 이하
    값이 하나라도 있으면 그 프레임의 기하평균은 0 입니다.
    """
    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0 or spec.shape[1] == 0:
        return 0.0

    flatness = np.zeros(spec.shape[0], dtype=np.float64)
    for idx, frame in enumerate(spec):
        arithmetic_mean = np.mean(frame)
        if arithmetic_mean <= 0 or np.any(frame <= 0):
            continue
        geometric_mean = np.exp(np.mean(np.log(frame)))
        flatness[idx] = geometric_mean / arithmetic_mean
    return float(np.mean(flatness))


def spectral_rolloff(spectrogram, sample_rate: float = None, n_fft: int = None,
                     roll_percent: float = None) -> float:
    """
    누적 에너지가 처음 roll_percent(85%)에 도달하는 주파수의 프레임 평균.

    에너지가 0 이하인 프레임은 평균에서 제외합니다.
    """
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    n_fft = n_fft or DEFAULT_CONFIG.n_fft
    roll_percent = roll_percent or DEFAULT_CONFIG.roll_percent

    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0:
        return 0.0

    freqs = fft_bin_frequencies(sample_rate, n_fft)[:spec.shape[1]]
    rolloffs = []
    for frame in spec:
        total = np.sum(frame)
        if total <= 0:
            continue
        cumulative = np.cumsum(frame)
        reached = np.flatnonzero(cumulative >= total * roll_percent)
        if reached.size:
            rolloffs.append(freqs[reached[0]])
    return _mean_or_zero(rolloffs)


def onset_strength_mean(spectrogram) -> float:
    """
    연속 프레임 쌍마다 반파 정류된 (이전 − 현재) 차이의 합, 그 평균.

    프레임이 2개 미만이면 0.
    """
    spec = _as_frames(spectrogram)
    if spec.shape[0] < 2:
        return 0.0

    diff = spec[:-1] - spec[1:]
    strengths = np.sum(np.maximum(diff, 0.0), axis=1)
    return float(np.mean(strengths))


# ---------------------------------------------------------------------------
# 멜 스펙트로그램 통계 (평탄화된 전체 값 집합 기준)
# ---------------------------------------------------------------------------

def _flatten(data) -> np.ndarray:
    return np.asarray(data, dtype=np.float64).ravel()


def flat_mean(data) -> float:
    return _mean_or_zero(_flatten(data))


def flat_std(data) -> float:
    """모집단 표준편차."""
    x = _flatten(data)
    if x.size == 0:
        return 0.0
    return float(np.std(x))


def flat_min(data) -> float:
    x = _flatten(data)
    return float(np.min(x)) if x.size else 0.0


def flat_max(data) -> float:
    x = _flatten(data)
    return float(np.max(x)) if x.size else 0.0


def flat_median(data) -> float:
    """정렬된 값의 중앙값. 짝수 개면 가운데 두 값의 평균."""
    x = np.sort(_flatten(data))
    if x.size == 0:
        return 0.0
    mid = x.size // 2
    if x.size % 2 == 0:
        return float((x[mid - 1] + x[mid]) / 2.0)
    return float(x[mid])


def flat_quantile(data, quantile: float) -> float:
    """보간 없는 분위수, 인덱스 `floor(q · (n - 1))`."""
    x = np.sort(_flatten(data))
    if x.size == 0:
        return 0.0
    index = int(np.floor(quantile * (x.size - 1)))
    index = min(max(index, 0), x.size - 1)
    return float(x[index])


def flat_skewness(data) -> float:
    """모집단 표준편차 기반 왜도. 표준편차 0이면 0."""
    x = _flatten(data)
    if x.size == 0 or np.std(x) <= 0:
        return 0.0
    return float(stats.skew(x, bias=True))


def flat_kurtosis(data) -> float:
    """초과 첨도 (정규분포 = 0). 표준편차 0이면 0."""
    x = _flatten(data)
    if x.size == 0 or np.std(x) <= 0:
        return 0.0
    return float(stats.kurtosis(x, fisher=True, bias=True))


def flat_energy(data) -> float:
    """Σx²."""
    x = _flatten(data)
    return float(np.dot(x, x))


def flat_rms(data) -> float:
    x = _flatten(data)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.dot(x, x) / x.size))


def flat_peak(data) -> float:
    """최댓값 (절대값이 아님)."""
    return flat_max(data)


def crest_factor(data) -> float:
    """peak / rms, rms 가 0이면 0."""
    rms = flat_rms(data)
    if rms <= 0:
        return 0.0
    return flat_peak(data) / rms


def flat_entropy(data) -> float:
    """
    값 집합을 정규화되지 않은 히스토그램으로 본 섀넌 엔트로피 (밑 2).

    0 이하 값은 건너뜁니다. 전체 합이 0 이하이면 0.
    """
    x = _flatten(data)
    if x.size == 0:
        return 0.0
    total = np.sum(x)
    if total <= 0:
        return 0.0
    p = x[x > 0] / total
    return float(-np.sum(p * np.log2(p)))


def harmonic_mean(data) -> float:
    """
    n / Σ(1/x), 0 값은 역수 합에서 제외 (n 은 전체 개수).

    역수 합이 0 이하이면 0.
    """
    x = _flatten(data)
    if x.size == 0:
        return 0.0
    nonzero = x[x != 0]
    reciprocal_sum = float(np.sum(1.0 / nonzero)) if nonzero.size else 0.0
    if reciprocal_sum <= 0:
        return 0.0
    return float(x.size / reciprocal_sum)


def spectral_slope(spectrogram, sample_rate: float = None, n_fft: int = None) -> float:
    """
    프레임별 최소제곱 기울기(값 대 FFT 빈 주파수 `i·sr/n_fft`)의 평균.

    멜 스펙트로그램에 적용할 때도 같은 빈 주파수 축을 사용합니다.
    값이 1개 이하인 프레임은 건너뜁니다.
    """
    sample_rate = sample_rate or DEFAULT_CONFIG.sample_rate
    n_fft = n_fft or DEFAULT_CONFIG.n_fft

    spec = _as_frames(spectrogram)
    if spec.shape[0] == 0 or spec.shape[1] < 2:
        return 0.0

    n = spec.shape[1]
    freqs = np.arange(n, dtype=np.float64) * sample_rate / n_fft
    sum_x = np.sum(freqs)
    sum_x2 = np.dot(freqs, freqs)
    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0

    sum_y = np.sum(spec, axis=1)
    sum_xy = spec @ freqs
    slopes = (n * sum_xy - sum_x * sum_y) / denominator
    return float(np.mean(slopes))
