"""
디스크립터 뱅크 테스트

각 추정기의 정의와 퇴화 입력(빈 입력, 0 에너지, 0 분산)에서의 0.0 반환을
검증합니다.
"""

import numpy as np
import pytest

from conftest import make_sine
from wm_features.audio import descriptors as d
from wm_features.audio.spectral import stft


SR = 22050
N_FFT = 2048
BIN_HZ = SR / N_FFT


def single_bin_frame(k, value=1.0, n_bins=1024):
    frame = np.zeros(n_bins)
    frame[k] = value
    return frame


class TestWaveformDescriptors:

    def test_rms_of_sine(self, sine_300):
        assert d.rms_energy(sine_300) == pytest.approx(0.5 / np.sqrt(2), abs=1e-3)

    def test_rms_empty(self):
        assert d.rms_energy(np.array([])) == 0.0

    def test_peak_amplitude(self):
        assert d.peak_amplitude(np.array([0.1, -0.7, 0.3])) == pytest.approx(0.7)
        assert d.peak_amplitude(np.array([])) == 0.0

    def test_zero_crossing_rate_of_sine(self, sine_440):
        assert d.zero_crossing_rate(sine_440) == pytest.approx(2 * 440 / SR, abs=1e-3)

    def test_zero_crossing_boundary_convention(self):
        # 0 은 양수 쪽으로 취급: 1→-1, -1→0, 0→-1 세 번
        assert d.zero_crossing_rate(np.array([1.0, -1.0, 0.0, -1.0])) == pytest.approx(3 / 4)
        assert d.zero_crossing_rate(np.array([0.0, 1.0, 2.0])) == 0.0

    def test_zero_crossing_degenerate(self):
        assert d.zero_crossing_rate(np.array([])) == 0.0
        assert d.zero_crossing_rate(np.array([0.5])) == 0.0

    def test_energy_entropy_uniform_frames(self):
        # 프레임 4개, 에너지가 모두 같으면 log2(4) = 2
        signal = np.ones(2048 + 3 * 512)
        assert d.energy_entropy(signal, 2048, 512) == pytest.approx(2.0)

    def test_energy_entropy_single_frame(self):
        assert d.energy_entropy(np.ones(2048), 2048, 512) == pytest.approx(0.0)

    def test_energy_entropy_degenerate(self):
        assert d.energy_entropy(np.zeros(5000), 2048, 512) == 0.0
        assert d.energy_entropy(np.ones(100), 2048, 512) == 0.0
        assert d.energy_entropy(np.array([]), 2048, 512) == 0.0

    def test_dynamic_range(self):
        assert d.dynamic_range(1.0, 0.5) == pytest.approx(20 * np.log10(2))
        assert d.dynamic_range(1.0, 0.0) == 0.0
        assert d.dynamic_range(0.0, 0.0) == 0.0

    def test_fundamental_frequency_of_sine(self, sine_440):
        resolution = SR / int(SR / 50)
        assert d.fundamental_frequency(sine_440, SR) == pytest.approx(440, abs=resolution)

    @pytest.mark.parametrize("freq", [120.0, 300.0, 650.0])
    def test_fundamental_frequency_within_lag_resolution(self, freq):
        signal = make_sine(freq, duration=0.5)
        estimate = d.fundamental_frequency(signal, SR)
        lag = SR / freq
        # 정수 지연 한 칸 이내
        assert SR / (lag + 1) <= estimate <= SR / (lag - 1)

    def test_fundamental_frequency_degenerate(self):
        assert d.fundamental_frequency(np.array([]), SR) == 0.0
        assert d.fundamental_frequency(np.array([0.3]), SR) == 0.0
        assert d.fundamental_frequency(np.zeros(4000), SR) == 0.0

    def test_subband_ratio_low_tone(self):
        assert d.subband_energy_ratio(make_sine(1000, duration=0.1), SR) > 10

    def test_subband_ratio_high_tone(self):
        assert d.subband_energy_ratio(make_sine(5000, duration=0.1), SR) < 0.1

    def test_subband_ratio_short_input_is_padded(self):
        ratio = d.subband_energy_ratio(make_sine(1000, duration=0.01), SR)
        assert np.isfinite(ratio)
        assert ratio > 1

    def test_subband_ratio_degenerate(self):
        assert d.subband_energy_ratio(np.array([]), SR) == 0.0
        assert d.subband_energy_ratio(np.zeros(2048), SR) == 0.0


class TestSpectrogramDescriptors:

    def test_centroid_single_bin(self):
        spec = np.vstack([single_bin_frame(100), np.zeros(1024)])
        centroids = d.spectral_centroids(spec, SR, N_FFT)
        np.testing.assert_allclose(centroids, [100 * BIN_HZ, 0.0])
        assert d.spectral_centroid(spec, SR, N_FFT) == pytest.approx(50 * BIN_HZ)

    def test_centroid_of_sine(self, sine_440):
        spec = stft(sine_440)
        assert d.spectral_centroid(spec, SR, N_FFT) == pytest.approx(440, abs=2 * BIN_HZ)

    def test_bandwidth(self):
        frame = np.zeros(1024)
        frame[10] = frame[30] = 1.0
        spec = np.vstack([frame, single_bin_frame(50)])
        # 두 빈의 중간이 중심, 편차는 10빈 / 단일 빈은 0
        assert d.spectral_bandwidth(spec, None, SR, N_FFT) == pytest.approx(5 * BIN_HZ)

    def test_bandwidth_uses_given_centroids(self):
        spec = np.vstack([single_bin_frame(20)])
        value = d.spectral_bandwidth(spec, np.array([10 * BIN_HZ]), SR, N_FFT)
        assert value == pytest.approx(10 * BIN_HZ)

    def test_contrast(self):
        flat = np.ones(1024)
        peaky = np.ones(1024)
        peaky[3] = 10.0
        with_zero = np.ones(1024)
        with_zero[0] = 0.0
        spec = np.vstack([flat, peaky, with_zero])
        assert d.spectral_contrast(spec) == pytest.approx(20.0 / 3)

    def test_flatness(self):
        flat = np.full(1024, 3.0)
        with_zero = np.ones(1024)
        with_zero[5] = 0.0
        assert d.spectral_flatness(np.vstack([flat])) == pytest.approx(1.0)
        assert d.spectral_flatness(np.vstack([flat, with_zero])) == pytest.approx(0.5)

    def test_flatness_of_noise_exceeds_tone(self, white_noise, sine_440):
        assert d.spectral_flatness(stft(white_noise)) > d.spectral_flatness(stft(sine_440))

    def test_rolloff_skips_silent_frames(self):
        spec = np.vstack([single_bin_frame(10), np.zeros(1024)])
        assert d.spectral_rolloff(spec, SR, N_FFT, 0.85) == pytest.approx(10 * BIN_HZ)

    def test_rolloff_threshold(self):
        frame = np.zeros(1024)
        frame[[0, 1, 2, 3]] = [0.5, 0.3, 0.1, 0.1]
        # 누적 0.5, 0.8, 0.9 → 85% 는 빈 2에서 도달
        assert d.spectral_rolloff(np.vstack([frame]), SR, N_FFT, 0.85) == pytest.approx(2 * BIN_HZ)

    def test_onset_strength(self):
        ones, zeros = np.ones(1024), np.zeros(1024)
        assert d.onset_strength_mean(np.vstack([ones, zeros])) == pytest.approx(1024.0)
        assert d.onset_strength_mean(np.vstack([zeros, ones])) == 0.0
        assert d.onset_strength_mean(np.vstack([ones, zeros, ones])) == pytest.approx(512.0)

    def test_onset_single_frame(self):
        assert d.onset_strength_mean(np.ones((1, 1024))) == 0.0

    @pytest.mark.parametrize("func", [
        d.spectral_centroid, d.spectral_bandwidth, d.spectral_contrast,
        d.spectral_flatness, d.spectral_rolloff, d.onset_strength_mean,
        d.spectral_slope,
    ])
    def test_empty_spectrogram_returns_zero(self, func):
        assert func(np.zeros((0, 1024))) == 0.0

    def test_short_waveform_descriptors_do_not_fail(self):
        spec = stft(np.ones(1000))
        assert spec.shape[0] == 0
        assert d.spectral_centroids(spec).size == 0
        assert d.spectral_rolloff(spec) == 0.0


class TestMelStatistics:

    def setup_method(self):
        self.data = np.array([[1.0, 2.0], [3.0, 4.0]])

    def test_basic_statistics(self):
        assert d.flat_mean(self.data) == pytest.approx(2.5)
        assert d.flat_std(self.data) == pytest.approx(np.sqrt(1.25))
        assert d.flat_min(self.data) == 1.0
        assert d.flat_max(self.data) == 4.0
        assert d.flat_peak(self.data) == 4.0

    def test_median_even_and_odd(self):
        assert d.flat_median(self.data) == pytest.approx(2.5)
        assert d.flat_median([[1.0, 5.0, 3.0]]) == 3.0

    def test_quantile_without_interpolation(self):
        assert d.flat_quantile(self.data, 0.25) == 1.0
        assert d.flat_quantile(self.data, 0.75) == 3.0
        assert d.flat_quantile([[5.0, 1.0, 4.0, 2.0, 3.0]], 0.25) == 2.0

    def test_skewness_and_kurtosis(self):
        assert d.flat_skewness(self.data) == pytest.approx(0.0, abs=1e-12)
        assert d.flat_kurtosis(self.data) == pytest.approx(2.5625 / 1.5625 - 3)
        assert d.flat_skewness([[0.0, 0.0, 0.0, 10.0]]) > 0

    def test_skewness_and_kurtosis_of_skewed_data(self):
        x = np.array([[1.0, 1.0, 2.0, 3.0, 10.0]])
        centered = x.ravel() - x.mean()
        m2 = np.mean(centered ** 2)
        assert d.flat_skewness(x) == pytest.approx(np.mean(centered ** 3) / m2 ** 1.5)
        assert d.flat_kurtosis(x) == pytest.approx(np.mean(centered ** 4) / m2 ** 2 - 3)

    def test_zero_variance(self):
        constant = np.full((3, 4), 2.0)
        assert d.flat_std(constant) == 0.0
        assert d.flat_skewness(constant) == 0.0
        assert d.flat_kurtosis(constant) == 0.0

    def test_energy_rms_crest(self):
        assert d.flat_energy(self.data) == pytest.approx(30.0)
        assert d.flat_rms(self.data) == pytest.approx(np.sqrt(7.5))
        assert d.crest_factor(self.data) == pytest.approx(4.0 / np.sqrt(7.5))

    def test_entropy(self):
        p = np.array([1.0, 2.0, 3.0, 4.0]) / 10.0
        assert d.flat_entropy(self.data) == pytest.approx(-np.sum(p * np.log2(p)))
        # 동일한 값 n개는 log2(n)
        assert d.flat_entropy(np.ones((2, 4))) == pytest.approx(3.0)

    def test_entropy_skips_non_positive(self):
        assert d.flat_entropy([[0.0, 1.0, 1.0]]) == pytest.approx(1.0)
        assert d.flat_entropy([[-1.0, 0.0]]) == 0.0

    def test_harmonic_mean(self):
        assert d.harmonic_mean(self.data) == pytest.approx(4.0 / (1 + 1 / 2 + 1 / 3 + 1 / 4))
        # 0 은 역수 합에서 빠지지만 개수에는 포함
        assert d.harmonic_mean([[0.0, 2.0]]) == pytest.approx(4.0)
        assert d.harmonic_mean(np.zeros((2, 2))) == 0.0

    def test_spectral_slope(self):
        freqs = np.arange(128) * SR / N_FFT
        spec = np.vstack([freqs, 2 * freqs + 3])
        assert d.spectral_slope(spec, SR, N_FFT) == pytest.approx(1.5)

    @pytest.mark.parametrize("func", [
        d.flat_mean, d.flat_std, d.flat_min, d.flat_max, d.flat_median,
        d.flat_skewness, d.flat_kurtosis, d.flat_energy, d.flat_entropy,
        d.flat_rms, d.flat_peak, d.crest_factor, d.harmonic_mean,
    ])
    def test_empty_returns_zero(self, func):
        assert func(np.zeros((0, 128))) == 0.0

    def test_empty_quantile(self):
        assert d.flat_quantile(np.zeros((0, 128)), 0.25) == 0.0
