"""Tests for the command-line interface.

WHY: The CLI is the one place where flags, defaults, the client workflow
and error reporting meet. These tests pin the flag-to-option mapping and
the exit behavior without touching the network.

HOW: GladiaClient is replaced in gladia_client.cli by FakeClient, which
records how it was built and returns canned results. Output is captured
with capsys.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from gladia_client import cli
from gladia_client.api.errors import GladiaError
from gladia_client.api.models import (
    CallbackConfig,
    SubtitlesConfig,
    TranscriptionOptions,
    TranscriptionResult,
    TranslationConfig,
)
from gladia_client.config import DEFAULT_MAX_RETRIES, DEFAULT_POLLING_INTERVAL_S


class FakeClient:
    """Records construction kwargs and calls; returns a canned result."""

    instances = []
    result = None
    error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.calls = []
        FakeClient.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def _respond(self, name, source, options):
        self.calls.append((name, source, options))
        if FakeClient.error is not None:
            raise FakeClient.error
        return FakeClient.result

    async def transcribe(self, audio_url, options=None, on_status=None):
        return await self._respond("transcribe", audio_url, options)

    async def transcribe_file(self, file, options=None, on_status=None):
        return await self._respond("transcribe_file", file, options)


@pytest.fixture
def fake_client(done_response):
    FakeClient.instances = []
    FakeClient.result = TranscriptionResult.from_dict(done_response)
    FakeClient.error = None
    with patch("gladia_client.cli.GladiaClient", FakeClient):
        yield FakeClient


def _parse(*argv):
    return cli.build_parser().parse_args(list(argv))


# ---------------------------------------------------------------------------
# Parser and option mapping
# ---------------------------------------------------------------------------


class TestParser:
    def test_defaults(self):
        args = _parse("https://example.com/a.mp3")

        assert args.source == "https://example.com/a.mp3"
        assert args.translate is None
        assert args.subtitles is None
        assert args.callback_url is None
        assert args.polling_interval == DEFAULT_POLLING_INTERVAL_S
        assert args.max_retries == DEFAULT_MAX_RETRIES
        assert args.json is False

    def test_diarization_unset_by_default(self):
        with patch("gladia_client.cli.DEFAULT_DIARIZATION", None):
            args = _parse("a.mp3")
        assert args.diarization is None

    def test_diarization_toggle(self):
        assert _parse("a.mp3", "--diarization").diarization is True
        assert _parse("a.mp3", "--no-diarization").diarization is False


class TestBuildOptions:
    def test_no_flags_leaves_everything_unset(self):
        assert cli.build_options(_parse("a.mp3")) == TranscriptionOptions()

    def test_feature_flags(self):
        options = cli.build_options(_parse(
            "a.mp3",
            "--translate", "fr",
            "--translate", "de",
            "--summarize",
            "--sentiment",
            "--entities",
            "--moderation",
            "--chapters",
            "--subtitles", "SRT, vtt",
            "--callback-url", "https://hooks.example.com/gladia",
        ))

        assert options.translation is True
        assert options.translation_config == TranslationConfig(target_languages=["fr", "de"])
        assert options.summarization is True
        assert options.sentiment_analysis is True
        assert options.named_entity_recognition is True
        assert options.content_moderation is True
        assert options.chapterization is True
        assert options.subtitles is True
        assert options.subtitles_config == SubtitlesConfig(formats=["srt", "vtt"])
        assert options.callback is True
        assert options.callback_config == CallbackConfig(url="https://hooks.example.com/gladia")

    def test_unknown_subtitle_format(self):
        with pytest.raises(ValueError, match="Unknown subtitle format 'ass'"):
            cli.build_options(_parse("a.mp3", "--subtitles", "srt,ass"))


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_url_source_prints_report(self, fake_client, capsys):
        cli.main(["https://example.com/a.mp3", "--language", "en", "--max-retries", "5"])

        client = fake_client.instances[0]
        assert client.kwargs["language"] == "en"
        assert client.kwargs["max_retries"] == 5
        name, source, _ = client.calls[0]
        assert (name, source) == ("transcribe", "https://example.com/a.mp3")
        out = capsys.readouterr().out
        assert out.startswith("== Full Transcription ==")

    def test_unset_diarization_reaches_client_as_none(self, fake_client, capsys):
        with patch("gladia_client.cli.DEFAULT_DIARIZATION", None):
            cli.main(["https://example.com/a.mp3"])

        assert fake_client.instances[0].kwargs["diarization"] is None

    def test_file_source_is_uploaded(self, fake_client, tmp_path, capsys):
        audio = tmp_path / "clip.wav"
        audio.write_bytes(b"RIFF")

        cli.main([str(audio)])

        name, source, _ = fake_client.instances[0].calls[0]
        assert name == "transcribe_file"
        assert source == audio.resolve()

    def test_missing_file(self, fake_client, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([str(tmp_path / "nope.mp3")])

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err
        assert fake_client.instances[0].calls == []

    def test_json_output(self, fake_client, capsys):
        cli.main(["https://example.com/a.mp3", "--json"])
        out = capsys.readouterr().out
        assert '"full_transcript": "How are you doing today? I am fantastic, thank you."' in out

    def test_callback_mode_prints_id(self, fake_client, capsys):
        fake_client.result = TranscriptionResult(id="job-9", status="created")

        cli.main(["https://example.com/a.mp3", "--callback-url", "https://hooks.example.com"])

        captured = capsys.readouterr()
        assert captured.out == "job-9\n"
        assert "status: created" in captured.err

    def test_gladia_error_exit(self, fake_client, capsys):
        fake_client.error = GladiaError("API Error: 401 Unauthorized", status_code=401)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["https://example.com/a.mp3"])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error (401): API Error: 401 Unauthorized" in err
        assert "check your API key" in err

    def test_error_without_status(self, fake_client, capsys):
        fake_client.error = GladiaError("boom")

        with pytest.raises(SystemExit):
            cli.main(["https://example.com/a.mp3"])

        assert "Error (Unknown): boom" in capsys.readouterr().err

    def test_bad_subtitles_exit(self, fake_client, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["https://example.com/a.mp3", "--subtitles", "docx"])

        assert exc_info.value.code == 1
        assert "Unknown subtitle format" in capsys.readouterr().err
