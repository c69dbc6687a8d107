"""
Tests for the command-line front end.
"""

import logging
import pytest
from conftest import FakeEngine
from synthsub import whisper_engine
from synthsub.cli import CLIHandler
from synthsub.config_loader import ConfigLoader
from synthsub.engine import DecodingStrategy


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield tmp_path
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def config_file(workdir):
    path = workdir / "config.yaml"
    path.write_text(
        "whisper_model: tiny\n"
        "device: cpu\n"
        "beam_size: 3\n"
        "patience: 2.0\n"
        "drop_degenerate_cues: false\n"
        "ffmpeg_path: /opt/ffmpeg/bin/ffmpeg\n"
        f"log_dir: {workdir / 'logs'}\n",
        encoding="utf-8"
    )
    return str(path)


@pytest.fixture
def fake_whisper(monkeypatch):
    """Replaces WhisperEngine and records the arguments it was built with."""
    built = {}

    def install(engine):
        def factory(model_name, device, fp16):
            built.update(model_name=model_name, device=device, fp16=fp16)
            return engine
        monkeypatch.setattr(whisper_engine, "WhisperEngine", factory)
        return built
    return install


def run_cli(argv):
    with pytest.raises(SystemExit) as excinfo:
        CLIHandler().run(argv)
    return excinfo.value.code


class TestExitCodes:

    def test_success_writes_subtitles(self, workdir, config_file, write_wav, fake_whisper):
        engine = FakeEngine([
            {"start": 0, "end": 500, "text": "Once upon a time."},
            {"start": 500, "end": 1000, "text": "The backpack glowed."},
        ])
        built = fake_whisper(engine)
        audio = write_wav(name="story.wav", seconds=10.0)
        out = workdir / "out"

        assert run_cli(["--audio", audio, "-o", str(out), "-c", config_file, "--device", "cuda", "-l", "de"]) == 0
        assert (out / "story.srt").read_text(encoding="utf-8").startswith(
            "1\n00:00:00,00 --> 00:00:05,00\nOnce upon a time.\n\n"
        )
        assert built == {"model_name": "tiny", "device": "cuda", "fp16": False}
        _, strategy, language = engine.calls[0]
        assert strategy == DecodingStrategy(beam_size=3, patience=2.0)
        assert language == "de"

    def test_pipeline_error_exits_1(self, workdir, config_file, write_wav, fake_whisper):
        fake_whisper(FakeEngine([]))
        assert run_cli(["--audio", write_wav(), "-o", str(workdir / "out"), "-c", config_file]) == 1

    def test_unexpected_error_exits_2(self, workdir, config_file, write_wav, monkeypatch):
        def broken_factory(model_name, device, fp16):
            raise RuntimeError("driver crashed")

        monkeypatch.setattr(whisper_engine, "WhisperEngine", broken_factory)
        assert run_cli(["--audio", write_wav(), "-o", str(workdir / "out"), "-c", config_file]) == 2

    def test_missing_audio_and_prompt_rejected(self, workdir, config_file):
        # argparse reports usage errors with exit status 2
        assert run_cli(["-o", str(workdir / "out"), "-c", config_file]) == 2

    def test_missing_config_exits_1(self, workdir, write_wav):
        assert run_cli(["--audio", write_wav(), "-o", str(workdir / "out"), "-c", str(workdir / "absent.yaml")]) == 1

    def test_missing_audio_file_exits_1(self, workdir, config_file):
        assert run_cli(["--audio", str(workdir / "none.wav"), "-o", str(workdir / "out"), "-c", config_file]) == 1


class TestBuildPipeline:

    def test_config_keys_are_wired(self, config_file, fake_whisper):
        engine = FakeEngine()
        fake_whisper(engine)
        config = ConfigLoader().load_config(config_file)

        pipeline = CLIHandler()._build_pipeline(config)

        assert pipeline.engine is engine
        assert pipeline.segmenter.strategy == DecodingStrategy(beam_size=3, patience=2.0)
        assert pipeline.encoder.drop_degenerate is False
        assert pipeline.media.ffmpeg_cmd == "/opt/ffmpeg/bin/ffmpeg"
