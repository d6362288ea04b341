"""
오디오 특징 추출 모듈

전처리된 모노 파형에서 수박 두드림 소리를 특징짓는 53개 음향 디스크립터를
계산하고, 위치 계약에 맞는 고정 순서로 조립합니다.
"""

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from config import DEFAULT_CONFIG
from ..exceptions import FeatureVectorLengthError
from ..utils.logger import LoggerMixin
from . import descriptors
from .feature_names import (
    FEATURE_NAMES, RESERVED_NAMES, MEL_STAT_NAMES, SPECTRAL_NAMES,
    ENERGY_NAMES, RHYTHM_NAMES, ADDITIONAL_NAMES,
)
from .loader import load_audio
from .mel import mel_filter_bank, mel_spectrogram, log_mel_spectrogram, mean_mfcc
from .preprocessing import preprocess
from .spectral import stft


FEATURE_VECTOR_LENGTH = len(FEATURE_NAMES)


@dataclass(frozen=True)
class FeatureVector:
    """
    오디오 특징 벡터를 나타내는 데이터 클래스.

    추출된 특징을 카테고리별로 보관하고 위치 기반 소비자(표시, 분류기)를
    위한 53차원 평면 배열로 변환합니다.

    Attributes:
        mfcc : np.ndarray
            13개 MFCC 계수의 프레임 평균. 형태: (13,)
        spectral : np.ndarray
            중심, 대역폭, 콘트라스트, 평탄도, 롤오프, ZCR, RMS. 형태: (7,)
        energy : np.ndarray
            RMS 평균, 피크, 에너지 엔트로피, 다이나믹 레인지. 형태: (4,)
        rhythm : np.ndarray
            템포(0), 비트 강도(0), 온셋 강도 평균. 형태: (3,)
        reserved : np.ndarray
            미구현 수박 전용 디스크립터 자리. 항상 0. 형태: (8,)
        mel_stats : np.ndarray
            멜 스펙트로그램 통계 16종. 형태: (16,)
        additional : np.ndarray
            기본 주파수 추정치, 서브밴드 에너지 비율. 형태: (2,)
    """
    mfcc: np.ndarray
    spectral: np.ndarray
    energy: np.ndarray
    rhythm: np.ndarray
    reserved: np.ndarray = field(default_factory=lambda: np.zeros(len(RESERVED_NAMES)))
    mel_stats: np.ndarray = field(default_factory=lambda: np.zeros(len(MEL_STAT_NAMES)))
    additional: np.ndarray = field(default_factory=lambda: np.zeros(len(ADDITIONAL_NAMES)))

    def __post_init__(self):
        # 필드는 읽기 전용 사본으로 보관
        for name in ('mfcc', 'spectral', 'energy', 'rhythm', 'reserved', 'mel_stats', 'additional'):
            values = np.array(getattr(self, name), dtype=np.float64).ravel()
            values.setflags(write=False)
            object.__setattr__(self, name, values)

    def to_array(self) -> np.ndarray:
        """
        ML 모델을 위해 평면 numpy 배열로 변환합니다.

        Returns:
            np.ndarray: 모든 특징이 연결된 1차원 배열. 형태: (53,)
                       순서: MFCC(13) + 스펙트럼(7) + 에너지(4) + 리듬(3)
                             + 예약(8) + 멜 통계(16) + 추가(2)
        """
        return assemble_features(
            self.mfcc, self.spectral, self.energy, self.rhythm,
            self.reserved, self.mel_stats, self.additional,
        )

    @property
    def feature_names(self) -> List[str]:
        """53개 특징의 이름 리스트."""
        return list(FEATURE_NAMES)

    def as_dict(self) -> Dict[str, float]:
        """이름 → 값 매핑."""
        return dict(zip(FEATURE_NAMES, (float(v) for v in self.to_array())))

    def __getitem__(self, name: str) -> float:
        return float(self.to_array()[FEATURE_NAMES.index(name)])

    def __len__(self) -> int:
        return FEATURE_VECTOR_LENGTH


def assemble_features(mfcc, spectral, energy, rhythm, reserved, mel_stats, additional) -> np.ndarray:
    """
    카테고리별 값을 고정 순서로 연결합니다.

    Raises:
    -------
    FeatureVectorLengthError
        결과 길이가 53이 아닌 경우 (조립기 내부 논리 오류)
    """
    vector = np.concatenate([
        np.asarray(part, dtype=np.float64).ravel()
        for part in (mfcc, spectral, energy, rhythm, reserved, mel_stats, additional)
    ])

    if vector.size != FEATURE_VECTOR_LENGTH:
        raise FeatureVectorLengthError(
            f"Expected {FEATURE_VECTOR_LENGTH} features, got {vector.size}")

    return vector


class AudioFeatureExtractor(LoggerMixin):
    """
    오디오 특징 추출기 클래스.

    프레임 분할, STFT, 멜 변환, 디스크립터 계산, 조립을 차례로 수행합니다.
    호출 사이에 상태를 보관하지 않습니다.
    """

    def __init__(self, config=None):
        """
        특징 추출기를 초기화합니다.

        Parameters:
        -----------
        config : Config, optional
            구성 객체. None이면 기본 구성을 사용합니다.
        """
        self.config = config or DEFAULT_CONFIG
        self.logger.debug(f"AudioFeatureExtractor 초기화됨 - SR: {self.config.sample_rate}, "
                          f"FFT: {self.config.n_fft}, Hop: {self.config.hop_length}, "
                          f"Mels: {self.config.n_mels}, MFCC: {self.config.n_mfcc}")

    def compute_spectrogram(self, y: np.ndarray) -> np.ndarray:
        """파워 스펙트로그램. 형태: (n_frames, n_fft // 2)"""
        spectrogram = stft(y, self.config.n_fft, self.config.hop_length)
        if spectrogram.shape[0] == 0:
            self.logger.warning(f"STFT 프레임 없음: 샘플 {len(y)}개 < n_fft {self.config.n_fft}")
        return spectrogram

    def compute_mel_spectrogram(self, spectrogram: np.ndarray, sr: int) -> np.ndarray:
        """멜 스펙트로그램. 필터 뱅크는 호출마다 새로 만듭니다."""
        filter_bank = mel_filter_bank(self.config.n_fft, self.config.n_mels, sr)
        return mel_spectrogram(spectrogram, filter_bank)

    def extract_mfcc(self, mel_spec: np.ndarray) -> np.ndarray:
        """
        MFCC 특징을 추출합니다.

        Parameters:
        -----------
        mel_spec : np.ndarray
            멜 스펙트로그램

        Returns:
        --------
        np.ndarray
            프레임 평균 MFCC (13차원)
        """
        return mean_mfcc(log_mel_spectrogram(mel_spec), self.config.n_mfcc)

    def extract_spectral_features(self, y: np.ndarray, spectrogram: np.ndarray, sr: int) -> np.ndarray:
        """
        스펙트럼 특징들을 추출합니다.

        Returns:
        --------
        np.ndarray
            (centroid, bandwidth, contrast, flatness, rolloff, zcr, rms)
        """
        n_fft = self.config.n_fft
        centroids = descriptors.spectral_centroids(spectrogram, sr, n_fft)

        return np.array([
            float(np.mean(centroids)) if centroids.size else 0.0,
            descriptors.spectral_bandwidth(spectrogram, centroids, sr, n_fft),
            descriptors.spectral_contrast(spectrogram),
            descriptors.spectral_flatness(spectrogram),
            descriptors.spectral_rolloff(spectrogram, sr, n_fft, self.config.roll_percent),
            descriptors.zero_crossing_rate(y),
            descriptors.rms_energy(y),
        ])

    def extract_energy_features(self, y: np.ndarray) -> np.ndarray:
        """(rms_mean, peak, energy_entropy, dynamic_range)"""
        rms = descriptors.rms_energy(y)
        peak = descriptors.peak_amplitude(y)

        return np.array([
            rms,
            peak,
            descriptors.energy_entropy(y, self.config.n_fft, self.config.hop_length),
            descriptors.dynamic_range(peak, rms),
        ])

    def extract_rhythm_features(self, spectrogram: np.ndarray) -> np.ndarray:
        # tempo, beat_strength 는 미구현 고정 0
        return np.array([0.0, 0.0, descriptors.onset_strength_mean(spectrogram)])

    def extract_mel_statistics(self, mel_spec: np.ndarray, sr: int) -> np.ndarray:
        """
        멜 스펙트로그램의 통계적 특징 16종을 추출합니다.

        모든 통계는 평탄화된 전체 값 집합에 대해 계산됩니다. 순서는
        feature_names.MEL_STAT_NAMES 와 같습니다.
        """
        return np.array([
            descriptors.flat_mean(mel_spec),
            descriptors.flat_std(mel_spec),
            descriptors.flat_min(mel_spec),
            descriptors.flat_max(mel_spec),
            descriptors.flat_median(mel_spec),
            descriptors.flat_quantile(mel_spec, 0.25),
            descriptors.flat_quantile(mel_spec, 0.75),
            descriptors.flat_skewness(mel_spec),
            descriptors.flat_kurtosis(mel_spec),
            descriptors.flat_energy(mel_spec),
            descriptors.flat_entropy(mel_spec),
            descriptors.flat_rms(mel_spec),
            descriptors.flat_peak(mel_spec),
            descriptors.crest_factor(mel_spec),
            descriptors.spectral_slope(mel_spec, sr, self.config.n_fft),
            descriptors.harmonic_mean(mel_spec),
        ])

    def extract_additional_features(self, y: np.ndarray, sr: int) -> np.ndarray:
        """(기본 주파수 추정치, 서브밴드 에너지 비율)"""
        return np.array([
            descriptors.fundamental_frequency(y, sr, self.config.f0_min_hz, self.config.f0_max_hz),
            descriptors.subband_energy_ratio(
                y, sr, self.config.n_fft, self.config.subband_low, self.config.subband_high),
        ])

    def extract(self, y: np.ndarray, sr: int = None) -> FeatureVector:
        """
        이미 전처리된 파형에서 특징 벡터를 계산합니다.

        Parameters:
        -----------
        y : np.ndarray
            모노 오디오 샘플
        sr : int, optional
            샘플링 레이트. None이면 설정값

        Returns:
        --------
        FeatureVector
            53개 특징
        """
        sr = sr or self.config.sample_rate
        y = np.asarray(y, dtype=np.float64).ravel()

        if sr != self.config.sample_rate:
            self.logger.warning(f"샘플링 레이트 불일치: 입력 {sr} Hz, 설정 {self.config.sample_rate} Hz")

        spectrogram = self.compute_spectrogram(y)
        mel_spec = self.compute_mel_spectrogram(spectrogram, sr)

        feature_vector = FeatureVector(
            mfcc=self.extract_mfcc(mel_spec),
            spectral=self.extract_spectral_features(y, spectrogram, sr),
            energy=self.extract_energy_features(y),
            rhythm=self.extract_rhythm_features(spectrogram),
            reserved=np.zeros(len(RESERVED_NAMES)),
            mel_stats=self.extract_mel_statistics(mel_spec, sr),
            additional=self.extract_additional_features(y, sr),
        )

        feature_array = feature_vector.to_array()
        if not np.isfinite(feature_array).all():
            self.logger.warning("특징 벡터에 NaN 또는 무한대 값 포함, 0으로 대체")
            feature_vector = _replace_non_finite(feature_vector)

        self.logger.debug(f"특징 추출 완료 (프레임: {spectrogram.shape[0]}, "
                          f"평균: {np.mean(feature_array):.4f})")
        return feature_vector


def _replace_non_finite(feature_vector: FeatureVector) -> FeatureVector:
    def clean(values):
        return np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0, posinf=0.0, neginf=0.0)

    return FeatureVector(
        mfcc=clean(feature_vector.mfcc),
        spectral=clean(feature_vector.spectral),
        energy=clean(feature_vector.energy),
        rhythm=clean(feature_vector.rhythm),
        reserved=clean(feature_vector.reserved),
        mel_stats=clean(feature_vector.mel_stats),
        additional=clean(feature_vector.additional),
    )


def extract_features(samples: np.ndarray, sample_rate: int = None, config=None) -> FeatureVector:
    """
    전처리가 끝난 샘플에서 53개 특징을 추출합니다.

    Parameters:
    -----------
    samples : np.ndarray
        모노 float 샘플
    sample_rate : int, optional
        샘플링 레이트 (기본 22050)
    config : Config, optional
        구성 객체

    Returns:
    --------
    FeatureVector
    """
    return AudioFeatureExtractor(config).extract(samples, sample_rate)


def analyze_samples(samples: np.ndarray, sample_rate: int = None, config=None) -> FeatureVector:
    """
    녹음된 원시 샘플을 정규화, 무음 제거한 뒤 특징을 추출합니다.
    """
    extractor = AudioFeatureExtractor(config)
    sample_rate = sample_rate or extractor.config.sample_rate

    y = preprocess(samples, sample_rate, extractor.config.silence_threshold)
    if y.size == 0:
        extractor.logger.warning("전처리 후 샘플 없음 (전체 무음)")

    return extractor.extract(y, sample_rate)


def analyze_file(audio_file_path: str, config=None) -> FeatureVector:
    """
    오디오 파일을 로드해 특징을 추출합니다.

    Raises:
    -------
    AudioLoadError
        파일을 읽을 수 없는 경우
    """
    config = config or DEFAULT_CONFIG
    y, sr = load_audio(audio_file_path, config)
    return analyze_samples(y, sr, config)
