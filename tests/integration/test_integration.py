"""
수박 두드림 소리 특징 추출 통합 테스트

파일 디코딩부터 53차원 벡터, 명령줄 도구까지 전체 경로를 검증합니다.
"""

import json
import os

import numpy as np
import pytest
import soundfile as sf

from conftest import SAMPLE_RATE, make_sine
from wm_features.audio.feature_extraction import analyze_file, analyze_samples
from wm_features.audio.loader import load_audio, validate_audio_file
from wm_features.cli import main
from wm_features.exceptions import AudioLoadError


class TestFilePipeline:

    def test_wav_to_feature_vector(self, sample_audio_file):
        vector = analyze_file(sample_audio_file).to_array()

        assert vector.shape == (53,)
        assert np.all(np.isfinite(vector))
        assert vector[13] > 0  # spectral_centroid

    def test_file_is_normalized(self, sample_audio_file, tap_signal):
        from_file = analyze_file(sample_audio_file)
        in_memory = analyze_samples(tap_signal, SAMPLE_RATE)

        assert from_file["peak_energy"] == pytest.approx(1.0, abs=1e-6)
        # WAV 16비트 양자화 오차만 허용
        assert from_file["rmse_energy"] == pytest.approx(in_memory["rmse_energy"], rel=0.05)

    def test_stereo_resampled_to_mono(self, temp_dir):
        path = os.path.join(temp_dir, "stereo.wav")
        left = make_sine(300, amplitude=0.5, sr=44100)
        sf.write(path, np.stack([left, left], axis=1), 44100)

        y, sr = load_audio(path)

        assert sr == 22050
        assert y.ndim == 1
        assert y.dtype == np.float32
        assert abs(len(y) - 22050) <= 1

    def test_missing_file(self, temp_dir):
        path = os.path.join(temp_dir, "missing.wav")
        assert not validate_audio_file(path)
        with pytest.raises(AudioLoadError):
            analyze_file(path)

    def test_empty_file(self, temp_dir):
        path = os.path.join(temp_dir, "empty.wav")
        open(path, "wb").close()
        with pytest.raises(AudioLoadError):
            load_audio(path)

    def test_corrupt_file(self, temp_dir):
        path = os.path.join(temp_dir, "corrupt.wav")
        with open(path, "wb") as f:
            f.write(b"this is not audio data" * 10)
        with pytest.raises(AudioLoadError):
            load_audio(path)


class TestCommandLine:

    def test_extract_to_json(self, sample_audio_file, temp_dir, capsys):
        output = os.path.join(temp_dir, "features.json")

        assert main(["extract", sample_audio_file, "--json", output]) == 0

        with open(output, encoding="utf-8") as f:
            saved = json.load(f)
        assert len(saved["feature_names"]) == 53
        assert len(saved["records"]) == 1
        record = saved["records"][0]
        assert record["audio_file"] == "tap.wav"
        assert len(record["features"]) == 53

        printed = capsys.readouterr().out
        assert "[MFCC Features]" in printed
        assert "subband_energy_ratio" in printed

    def test_extract_without_preprocessing(self, sample_audio_file):
        assert main(["extract", sample_audio_file, "--no-preprocess"]) == 0

    def test_extract_missing_file_fails(self, temp_dir):
        assert main(["extract", os.path.join(temp_dir, "nope.wav")]) == 1

    def test_health_unreachable_server(self):
        assert main(["health", "--base-url", "http://127.0.0.1:9"]) == 1

    def test_invalid_log_level_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("WM_LOG_LEVEL", "verbose")
        assert main(["health"]) == 1
        assert "log_level" in capsys.readouterr().err
