"""
Tests for the SpeechSegmenter.
"""

import numpy as np
import pytest
from conftest import FakeEngine
from synthsub.engine import DecodingStrategy
from synthsub.exceptions import ConversionError, EngineError
from synthsub.models import RawSegment, WaveformBuffer
from synthsub.segmenter import SpeechSegmenter


@pytest.fixture
def segmenter():
    return SpeechSegmenter(DecodingStrategy(beam_size=5, patience=1.0))


@pytest.fixture
def mono_waveform():
    samples = np.array([0, 16384, -16384, 32767, -32768, 0], dtype=np.int16)
    return WaveformBuffer(samples=samples, sample_rate=16000, channels=1)


class TestNormalize:

    def test_range(self):
        normalized = SpeechSegmenter.normalize(np.array([-32768, 0, 16384, 32767], dtype=np.int16))
        assert normalized.dtype == np.float32
        assert normalized[0] == -1.0
        assert normalized[1] == 0.0
        assert normalized[2] == 0.5
        assert normalized.max() <= 1.0

    def test_length_preserved(self):
        samples = np.zeros(12345, dtype=np.int16)
        assert SpeechSegmenter.normalize(samples).size == 12345

    def test_length_mismatch_raises_conversion_error(self, monkeypatch):
        monkeypatch.setattr(
            SpeechSegmenter, "_scale",
            staticmethod(lambda samples: np.zeros(np.asarray(samples).size - 1, dtype=np.float32))
        )
        with pytest.raises(ConversionError) as excinfo:
            SpeechSegmenter.normalize(np.zeros(8, dtype=np.int16))
        assert "[segmentation]" in str(excinfo.value)


class TestResample:

    def test_same_rate_untouched(self):
        samples = np.zeros(100, dtype=np.float32)
        assert SpeechSegmenter.resample(samples, 16000, 16000) is samples

    def test_44k_to_16k(self):
        samples = np.zeros(44100, dtype=np.float32)
        resampled = SpeechSegmenter.resample(samples, 44100, 16000)
        assert resampled.size == 16000
        assert resampled.dtype == np.float32


class TestDownmix:

    def test_mono_untouched(self):
        samples = np.array([0.1, 0.2], dtype=np.float32)
        assert SpeechSegmenter.downmix(samples, 1) is samples

    def test_stereo_averaged(self):
        samples = np.array([0.5, -0.5, 1.0, 0.0], dtype=np.float32)
        mono = SpeechSegmenter.downmix(samples, 2)
        assert mono.tolist() == [0.0, 0.5]
        assert mono.dtype == np.float32


class TestSegment:

    def test_segments_in_emission_order(self, segmenter, mono_waveform, two_segment_engine):
        segments = segmenter.segment(two_segment_engine, mono_waveform, "en")
        assert segments == [
            RawSegment(0, 500, "Once upon a time."),
            RawSegment(500, 1000, "The backpack glowed."),
        ]

    def test_engine_receives_mono_float_and_strategy(self, segmenter, two_segment_engine):
        stereo = WaveformBuffer(
            samples=np.array([16384, 16384, -16384, -16384], dtype=np.int16),
            sample_rate=16000,
            channels=2
        )
        segmenter.segment(two_segment_engine, stereo, "de")
        samples, strategy, language = two_segment_engine.calls[0]
        assert samples.dtype == np.float32
        assert samples.tolist() == [0.5, -0.5]
        assert strategy == DecodingStrategy(beam_size=5, patience=1.0)
        assert language == "de"

    def test_deterministic(self, segmenter, mono_waveform, two_segment_engine):
        first = segmenter.segment(two_segment_engine, mono_waveform, "en")
        second = segmenter.segment(two_segment_engine, mono_waveform, "en")
        assert first == second
        assert np.array_equal(two_segment_engine.calls[0][0], two_segment_engine.calls[1][0])

    def test_missing_text_is_fatal(self, segmenter, mono_waveform):
        engine = FakeEngine([{"start": 0, "end": 10}])
        with pytest.raises(EngineError) as excinfo:
            segmenter.segment(engine, mono_waveform, "en")
        assert "'text'" in str(excinfo.value)

    def test_engine_failure_wrapped(self, segmenter, mono_waveform):
        engine = FakeEngine(error=MemoryError("out of memory"))
        with pytest.raises(EngineError) as excinfo:
            segmenter.segment(engine, mono_waveform, "en")
        assert isinstance(excinfo.value.__cause__, MemoryError)

    def test_no_segments_is_not_an_error_here(self, segmenter, mono_waveform):
        assert segmenter.segment(FakeEngine([]), mono_waveform, "en") == []

    def test_engine_receives_its_own_sample_rate(self, segmenter, two_segment_engine):
        waveform = WaveformBuffer(samples=np.zeros(44100, dtype=np.int16), sample_rate=44100, channels=1)
        segmenter.segment(two_segment_engine, waveform, "en")
        samples = two_segment_engine.calls[0][0]
        assert samples.size == two_segment_engine.sample_rate == 16000

    def test_stereo_22k_downmixed_then_resampled(self, segmenter, two_segment_engine):
        waveform = WaveformBuffer(samples=np.zeros(2 * 22050, dtype=np.int16), sample_rate=22050, channels=2)
        segmenter.segment(two_segment_engine, waveform, "en")
        assert two_segment_engine.calls[0][0].size == 16000
