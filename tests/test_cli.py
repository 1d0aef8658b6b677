"""Tests for the whisper-srt command-line pipeline.

WHY: The CLI is the main entry point for users. It validates inputs before
spending an API call, chooses between single-request and segmented
recognition, and names output files without overwriting earlier runs.

HOW: main() is called with an explicit argv. The recognizer client is
replaced by a fake async context manager (patched in whisper_srt.cli) that
returns canned RecognitionResults per file name, so no network is used.
Output files land in pytest's tmp_path.

RULES:
- No test calls the real Hugging Face API
- Failures are asserted through SystemExit codes and stderr messages
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from whisper_srt.api.client import InvalidAPIKeyError
from whisper_srt.api.models import RecognitionChunk, RecognitionResult
from whisper_srt.cli import _build_segments, _resolve_output_path, build_parser, main

from conftest import EXPECTED_SAMPLE_SRT, parse_srt


def _fake_client_class(results, error=None):
    """Build a stand-in for HuggingFaceClient returning results by file name."""

    class FakeClient:
        instances = []

        def __init__(self, *args, **kwargs):
            self.kwargs = kwargs
            self.calls = []
            FakeClient.instances.append(self)

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

        async def transcribe_file(self, file_path, on_status=None):
            name = Path(file_path).name
            self.calls.append(name)
            if error is not None:
                raise error
            return results[name]

    return FakeClient


def _audio(tmp_path, name="talk.wav", content=b"RIFF fake audio"):
    path = tmp_path / name
    path.write_bytes(content)
    return path


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestBuildParser:

    def test_defaults(self):
        args = build_parser().parse_args(["talk.mp3"])
        assert args.input_files == ["talk.mp3"]
        assert float(args.min_duration) == 8.0
        assert float(args.max_duration) == 20.0
        assert int(args.max_chars) == 42
        assert args.segment_duration == 600.0
        assert args.last_segment_duration is None
        assert args.formats is None
        assert args.from_json is False

    def test_requires_input(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestBuildSegments:

    def test_equal_segments(self, tmp_path):
        paths = [tmp_path / "a.wav", tmp_path / "b.wav"]
        segments = _build_segments(paths, 600.0)
        assert [(s.path, s.duration_s) for s in segments] == [
            (paths[0], 600.0),
            (paths[1], 600.0),
        ]

    def test_last_segment_override(self, tmp_path):
        paths = [tmp_path / "a.wav", tmp_path / "b.wav", tmp_path / "c.wav"]
        segments = _build_segments(paths, 600.0, 45.0)
        assert [s.duration_s for s in segments] == [600.0, 600.0, 45.0]


class TestResolveOutputPath:

    def test_no_conflict(self, tmp_path):
        assert _resolve_output_path("talk", ".srt", tmp_path) == tmp_path / "talk.srt"

    def test_conflicts_count_up(self, tmp_path):
        (tmp_path / "talk-transcript.txt").write_text("x")
        (tmp_path / "talk-transcript-2.txt").write_text("x")
        assert _resolve_output_path("talk", "-transcript.txt", tmp_path) == (
            tmp_path / "talk-transcript-3.txt"
        )


# ---------------------------------------------------------------------------
# Recognition runs
# ---------------------------------------------------------------------------


class TestAudioPipeline:

    def test_single_file(self, tmp_path, sample_result, capsys):
        audio = _audio(tmp_path)
        fake = _fake_client_class({"talk.wav": sample_result})

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(audio)])

        assert (tmp_path / "talk.srt").read_text(encoding="utf-8") == EXPECTED_SAMPLE_SRT
        assert fake.instances[0].calls == ["talk.wav"]
        err = capsys.readouterr().err
        assert "Done! 2 subtitle blocks | 17 words" in err
        assert "Saved: {}".format(tmp_path.resolve() / "talk.srt") in err

    def test_model_flag_is_passed(self, tmp_path, sample_result):
        audio = _audio(tmp_path)
        fake = _fake_client_class({"talk.wav": sample_result})

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(audio), "--model", "openai/whisper-small"])

        assert fake.instances[0].kwargs["model"] == "openai/whisper-small"

    def test_segments_are_offset(self, tmp_path, capsys):
        part1 = _audio(tmp_path, "talk-part1.wav")
        part2 = _audio(tmp_path, "talk-part2.wav")
        fake = _fake_client_class({
            "talk-part1.wav": RecognitionResult(
                text="Start.", chunks=[RecognitionChunk("Start.", 1.0, 3.0)]
            ),
            "talk-part2.wav": RecognitionResult(
                text="Later.", chunks=[RecognitionChunk("Later.", 1.0, 3.0)]
            ),
        })

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(part1), str(part2), "--segment-duration", "600"])

        parsed = parse_srt((tmp_path / "talk-part1.srt").read_text(encoding="utf-8"))
        assert [p["start_ms"] for p in parsed] == [1000, 601000]
        assert fake.instances[0].calls == ["talk-part1.wav", "talk-part2.wav"]
        err = capsys.readouterr().err
        assert "Transcribing part 2 of 2..." in err

    def test_short_last_segment(self, tmp_path):
        part1 = _audio(tmp_path, "talk-part1.wav")
        part2 = _audio(tmp_path, "talk-part2.wav")
        fake = _fake_client_class({
            "talk-part1.wav": RecognitionResult(
                text="Start.", chunks=[RecognitionChunk("Start.", 1.0, 3.0)]
            ),
            "talk-part2.wav": RecognitionResult(text="The closing remarks."),
        })

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(part1), str(part2), "--last-segment-duration", "45"])

        parsed = parse_srt((tmp_path / "talk-part1.srt").read_text(encoding="utf-8"))
        assert [(p["start_ms"], p["end_ms"]) for p in parsed] == [
            (1000, 9000),
            (600000, 645000),
        ]

    def test_multiple_formats(self, tmp_path, sample_result, sample_response):
        audio = _audio(tmp_path)
        fake = _fake_client_class({"talk.wav": sample_result})

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(audio), "--formats", "srt,plain_text,recognizer_json"])

        assert (tmp_path / "talk.srt").exists()
        assert (tmp_path / "talk-transcript.txt").read_text(encoding="utf-8").startswith("Hello there.")
        saved = json.loads((tmp_path / "talk-recognition.json").read_text(encoding="utf-8"))
        assert saved == sample_response

    def test_output_dir(self, tmp_path, sample_result):
        audio = _audio(tmp_path)
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        fake = _fake_client_class({"talk.wav": sample_result})

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            main([str(audio), "--output-dir", str(out_dir)])

        assert (out_dir / "talk.srt").exists()
        assert not (tmp_path / "talk.srt").exists()

    def test_recognizer_error_exits_1(self, tmp_path, capsys):
        audio = _audio(tmp_path)
        fake = _fake_client_class(
            {}, error=InvalidAPIKeyError(401, "Invalid API key. Check your Hugging Face token.")
        )

        with patch("whisper_srt.cli.HuggingFaceClient", fake):
            with pytest.raises(SystemExit) as exc_info:
                main([str(audio)])

        assert exc_info.value.code == 1
        assert "Invalid API key" in capsys.readouterr().err
        assert not (tmp_path / "talk.srt").exists()


# ---------------------------------------------------------------------------
# Re-rendering saved responses
# ---------------------------------------------------------------------------


class TestFromJson:

    def test_renders_without_api(self, tmp_path, sample_response):
        src = tmp_path / "talk-recognition.json"
        src.write_text(json.dumps(sample_response), encoding="utf-8")

        with patch("whisper_srt.cli.HuggingFaceClient") as client_cls:
            main([str(src), "--from-json"])

        client_cls.assert_not_called()
        assert (tmp_path / "talk.srt").read_text(encoding="utf-8") == EXPECTED_SAMPLE_SRT

    def test_second_run_does_not_overwrite(self, tmp_path, sample_response):
        src = tmp_path / "talk-recognition.json"
        src.write_text(json.dumps(sample_response), encoding="utf-8")

        main([str(src), "--from-json"])
        main([str(src), "--from-json", "--max-chars", "20"])

        assert (tmp_path / "talk.srt").read_text(encoding="utf-8") == EXPECTED_SAMPLE_SRT
        assert (tmp_path / "talk-2.srt").exists()

    def test_bad_json_exits_1(self, tmp_path, capsys):
        src = tmp_path / "broken.json"
        src.write_text("{not json", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main([str(src), "--from-json"])

        assert exc_info.value.code == 1
        assert "Could not read recognizer JSON" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Validation before any API call
# ---------------------------------------------------------------------------


class TestValidation:

    def _assert_fails(self, argv, capsys, message):
        with patch("whisper_srt.cli.HuggingFaceClient") as client_cls:
            with pytest.raises(SystemExit) as exc_info:
                main(argv)
        client_cls.assert_not_called()
        assert exc_info.value.code == 1
        assert message in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        self._assert_fails([str(tmp_path / "missing.wav")], capsys, "File not found")

    def test_unsupported_extension(self, tmp_path, capsys):
        notes = tmp_path / "notes.xyz"
        notes.write_text("hello")
        self._assert_fails([str(notes)], capsys, "Unsupported file type '.xyz'")

    def test_unknown_format(self, tmp_path, capsys):
        audio = _audio(tmp_path)
        self._assert_fails([str(audio), "--formats", "srt,vtt"], capsys, "Unknown format 'vtt'")

    def test_invalid_pacing(self, tmp_path, capsys):
        audio = _audio(tmp_path)
        self._assert_fails(
            [str(audio), "--min-duration", "30", "--max-duration", "10"],
            capsys,
            "max_block_duration",
        )

    def test_oversized_file(self, tmp_path, capsys, monkeypatch):
        audio = _audio(tmp_path, content=b"x" * 2048)
        monkeypatch.setattr("whisper_srt.cli.MAX_UPLOAD_BYTES", 1024)
        self._assert_fails([str(audio)], capsys, "Split the recording")

    def test_missing_output_dir(self, tmp_path, capsys):
        audio = _audio(tmp_path)
        self._assert_fails(
            [str(audio), "--output-dir", str(tmp_path / "nope")],
            capsys,
            "Output directory does not exist",
        )

    def test_non_positive_last_segment_duration(self, tmp_path, capsys):
        part1 = _audio(tmp_path, "talk-part1.wav")
        part2 = _audio(tmp_path, "talk-part2.wav")
        self._assert_fails(
            [str(part1), str(part2), "--last-segment-duration", "0"],
            capsys,
            "--last-segment-duration must be positive",
        )
