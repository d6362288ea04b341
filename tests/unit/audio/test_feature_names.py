"""
특징 이름 목록 테스트
"""

import pytest

from wm_features.audio.feature_names import (
    FEATURE_NAMES, FEATURE_CATEGORIES, PLACEHOLDER_FEATURES, RESERVED_NAMES,
    MEL_STAT_NAMES, feature_index, category_of,
)


def test_names_cover_all_slots():
    assert len(FEATURE_NAMES) == 53
    assert len(set(FEATURE_NAMES)) == 53


def test_category_counts():
    counts = dict(FEATURE_CATEGORIES)
    assert counts["MFCC Features"] == 13
    assert counts["Spectral Features"] == 7
    assert counts["Energy Features"] == 4
    assert counts["Rhythm Features"] == 3
    assert counts["Watermelon Specific Features"] == 8
    assert counts["Mel-Spectrogram Statistical Features"] == 16
    assert sum(counts.values()) == 53


@pytest.mark.parametrize("name, index", [
    ("MFCC_1", 0),
    ("MFCC_13", 12),
    ("spectral_centroid", 13),
    ("zero_crossing_rate", 18),
    ("rmse_energy", 19),
    ("rms_energy_mean", 20),
    ("onset_strength_mean", 26),
    ("mel_spec_mean", 35),
    ("mel_spec_entropy", 45),
    ("mel_spec_harmonic_mean", 50),
    ("fundamental_frequency_estimate", 51),
    ("subband_energy_ratio", 52),
])
def test_slot_positions(name, index):
    assert feature_index(name) == index


def test_category_of():
    assert category_of(0) == "MFCC Features"
    assert category_of(26) == "Rhythm Features"
    assert category_of(27) == "Watermelon Specific Features"
    assert category_of(52) == "Additional Features"
    with pytest.raises(IndexError):
        category_of(53)


def test_placeholders_documented():
    assert set(RESERVED_NAMES) <= set(PLACEHOLDER_FEATURES)
    assert "tempo" in PLACEHOLDER_FEATURES
    assert "beat_strength" in PLACEHOLDER_FEATURES
    assert "onset_strength_mean" not in PLACEHOLDER_FEATURES


def test_mel_stat_order():
    assert MEL_STAT_NAMES[9:11] == ["mel_spec_energy", "mel_spec_entropy"]
