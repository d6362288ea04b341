"""
53개 특징 슬롯의 표준 이름과 카테고리.

벡터 자체에는 이름이 포함되지 않으므로, 표시/진단용으로 이 목록이 슬롯
순서의 유일한 정의입니다.
"""

MFCC_NAMES = [f"MFCC_{i}" for i in range(1, 14)]

SPECTRAL_NAMES = [
    "spectral_centroid", "spectral_bandwidth", "spectral_contrast",
    "spectral_flatness", "spectral_rolloff", "zero_crossing_rate", "rmse_energy",
]

ENERGY_NAMES = ["rms_energy_mean", "peak_energy", "energy_entropy", "dynamic_range"]

RHYTHM_NAMES = ["tempo", "beat_strength", "onset_strength_mean"]

# 예약 슬롯: 수박 전용 음색 디스크립터 (미구현, 항상 0)
RESERVED_NAMES = [
    "fundamental_frequency", "harmonic_ratio", "attack_time", "decay_rate",
    "sustain_level", "brightness", "roughness", "inharmonicity",
]

MEL_STAT_NAMES = [
    "mel_spec_mean", "mel_spec_std", "mel_spec_min", "mel_spec_max",
    "mel_spec_median", "mel_spec_q25", "mel_spec_q75", "mel_spec_skewness",
    "mel_spec_kurtosis", "mel_spec_energy", "mel_spec_entropy", "mel_spec_rms",
    "mel_spec_peak", "mel_spec_crest_factor", "mel_spec_spectral_slope",
    "mel_spec_harmonic_mean",
]

ADDITIONAL_NAMES = ["fundamental_frequency_estimate", "subband_energy_ratio"]

FEATURE_CATEGORIES = [
    ("MFCC Features", len(MFCC_NAMES)),
    ("Spectral Features", len(SPECTRAL_NAMES)),
    ("Energy Features", len(ENERGY_NAMES)),
    ("Rhythm Features", len(RHYTHM_NAMES)),
    ("Watermelon Specific Features", len(RESERVED_NAMES)),
    ("Mel-Spectrogram Statistical Features", len(MEL_STAT_NAMES)),
    ("Additional Features", len(ADDITIONAL_NAMES)),
]

FEATURE_NAMES = (
    MFCC_NAMES + SPECTRAL_NAMES + ENERGY_NAMES + RHYTHM_NAMES
    + RESERVED_NAMES + MEL_STAT_NAMES + ADDITIONAL_NAMES
)

# 고정 0을 출력하는 슬롯 (아직 구현되지 않음)
PLACEHOLDER_FEATURES = {
    "tempo": "not yet implemented",
    "beat_strength": "not yet implemented",
    **{name: "not yet implemented" for name in RESERVED_NAMES},
}


def feature_index(name: str) -> int:
    """이름으로 슬롯 인덱스를 찾습니다. 없으면 ValueError."""
    return FEATURE_NAMES.index(name)


def category_of(index: int) -> str:
    """슬롯 인덱스가 속한 카테고리 이름."""
    if not 0 <= index < len(FEATURE_NAMES):
        raise IndexError(f"feature index out of range: {index}")

    start = 0
    for category, count in FEATURE_CATEGORIES:
        if index < start + count:
            return category
        start += count
    raise IndexError(f"feature index out of range: {index}")
