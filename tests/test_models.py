"""Unit tests for the option and result dataclasses.

WHY: The option merge and the request serialization decide what Gladia
actually receives; the result parser decides what callers can read. Both
are pure functions, so they are tested directly without any HTTP.

HOW: Tests are organized by concern:
  - TestMergeOptions: call-level vs client-level precedence
  - TestSerialization: to_dict() omits unset fields, nests configs
  - TestTranscriptionResult: lenient parsing of done/partial payloads
  - TestLiveOptions: query parameter encoding
  - TestLiveMessage: typed parsing of inbound frames
"""

from __future__ import annotations

import json

import pytest

from gladia_client.api.models import (
    ClientDefaults,
    DiarizationConfig,
    JobStatus,
    LiveTranscriptionMessage,
    LiveTranscriptionOptions,
    SubtitlesConfig,
    SummarizationConfig,
    TranscriptionOptions,
    TranscriptionResult,
    TranslationConfig,
    merge_options,
)


class TestMergeOptions:
    def test_call_level_overrides_default(self):
        merged = merge_options(
            ClientDefaults(language="fr", diarization=True),
            TranscriptionOptions(language="en"),
        )
        assert merged.language == "en"
        assert merged.diarization is True

    def test_unspecified_falls_back_to_default(self):
        merged = merge_options(
            ClientDefaults(language="fr"),
            TranscriptionOptions(summarization=True),
        )
        assert merged.language == "fr"
        assert merged.summarization is True

    def test_explicit_false_overrides_true_default(self):
        merged = merge_options(
            ClientDefaults(diarization=True),
            TranscriptionOptions(diarization=False),
        )
        assert merged.diarization is False

    def test_absent_from_both_is_omitted(self):
        merged = merge_options(ClientDefaults(), TranscriptionOptions())
        assert merged.to_dict() == {}

    def test_nested_config_replaced_wholesale(self):
        merged = merge_options(
            ClientDefaults(diarization_config=DiarizationConfig(min_speakers=1, max_speakers=4)),
            TranscriptionOptions(diarization_config=DiarizationConfig(number_of_speakers=2)),
        )
        assert merged.diarization_config == DiarizationConfig(number_of_speakers=2)

    def test_none_inputs(self):
        assert merge_options(None, None) == TranscriptionOptions()
        merged = merge_options(ClientDefaults(language="de"), None)
        assert merged.language == "de"

    def test_inputs_not_mutated(self):
        options = TranscriptionOptions(language="en")
        merge_options(ClientDefaults(diarization=True), options)
        assert options.diarization is None


class TestSerialization:
    def test_to_dict_omits_none(self):
        options = TranscriptionOptions(language="en", detect_language=False)
        assert options.to_dict() == {"language": "en", "detect_language": False}

    def test_nested_configs(self):
        options = TranscriptionOptions(
            translation=True,
            translation_config=TranslationConfig(target_languages=["es"], model="large"),
            subtitles=True,
            subtitles_config=SubtitlesConfig(formats=["srt", "vtt"]),
            summarization=True,
            summarization_config=SummarizationConfig(type="bullets"),
        )
        assert options.to_dict() == {
            "translation": True,
            "translation_config": {"target_languages": ["es"], "model": "large"},
            "subtitles": True,
            "subtitles_config": {"formats": ["srt", "vtt"]},
            "summarization": True,
            "summarization_config": {"type": "bullets"},
        }

    def test_config_without_toggle_is_allowed(self):
        options = TranscriptionOptions(summarization_config=SummarizationConfig(length="small"))
        assert options.to_dict() == {"summarization_config": {"length": "small"}}


class TestTranscriptionResult:
    def test_parses_done_payload(self, done_response):
        result = TranscriptionResult.from_dict(done_response)

        assert result.id == "abc"
        assert result.status == JobStatus.DONE
        assert result.is_done
        assert result.file.filename == "interview.mp3"
        assert result.result.metadata.transcription_time == 3.25
        transcription = result.result.transcription
        assert transcription.languages == ["en"]
        assert len(transcription.utterances) == 2
        assert transcription.utterances[0].speaker == "0"
        assert transcription.utterances[0].words[0].word == "How"
        assert result.full_transcript.endswith("thank you.")

    def test_parses_intelligence_sections(self):
        result = TranscriptionResult.from_dict({
            "id": "x",
            "status": "done",
            "result": {
                "summary": {"text": "A short talk."},
                "sentiment": {"score": 0.7, "label": "positive"},
                "entities": [{"text": "Paris", "type": "LOCATION", "start": 1.0, "end": 1.4}],
                "moderation": {"categories": [{"name": "violence", "confidence": 0.01}]},
                "chapters": [{"title": "Intro", "start": 0.0, "end": 5.0, "summary": "Hi"}],
                "subtitles": {"srt": "1\n00:00:00,000 --> 00:00:01,000\nHi\n"},
                "translations": {"es": "Hola"},
                "speakers": [{"id": 1, "label": "Speaker 1", "confidence": 0.9}],
            },
            "audio": {"duration": 5.0, "language": "en"},
        })
        payload = result.result

        assert payload.summary.text == "A short talk."
        assert payload.sentiment.label == "positive"
        assert payload.entities[0].type == "LOCATION"
        assert payload.moderation.categories[0].name == "violence"
        assert payload.chapters[0].title == "Intro"
        assert payload.subtitles.vtt is None
        assert payload.translations == {"es": "Hola"}
        assert payload.speakers[0].id == "1"
        assert result.audio.language == "en"
        assert payload.transcription is None
        assert result.full_transcript is None

    def test_minimal_snapshot(self):
        result = TranscriptionResult.from_dict({"id": "x", "status": "processing"})
        assert result.result is None
        assert result.error is None
        assert not result.is_done

    def test_error_payload(self):
        result = TranscriptionResult.from_dict({
            "id": "x", "status": "error", "error": {"message": "bad", "code": "E1"},
        })
        assert result.error.message == "bad"
        assert result.error.code == "E1"

    def test_result_is_immutable(self):
        result = TranscriptionResult.from_dict({"id": "x", "status": "done"})
        with pytest.raises(AttributeError):
            result.status = "error"


class TestLiveOptions:
    def test_query_params_encoding(self):
        options = LiveTranscriptionOptions(
            language="en",
            toggle_interim_results=True,
            detect_language=False,
            translation_config=TranslationConfig(target_languages=["fr"]),
        )
        params = dict(options.to_query_params())

        assert params["language"] == "en"
        assert params["toggle_interim_results"] == "true"
        assert params["detect_language"] == "false"
        assert json.loads(params["translation_config"]) == {"target_languages": ["fr"]}

    def test_unset_options_are_omitted(self):
        assert LiveTranscriptionOptions().to_query_params() == []


class TestLiveMessage:
    def test_from_json_text(self):
        message = LiveTranscriptionMessage.from_json(json.dumps({
            "type": "transcript", "is_final": True, "text": "hello", "speaker": 2,
        }))
        assert message.type == "transcript"
        assert message.is_final is True
        assert message.text == "hello"
        assert message.speaker == "2"

    def test_from_json_bytes(self):
        message = LiveTranscriptionMessage.from_json(b'{"type": "speech_start"}')
        assert message.type == "speech_start"
        assert message.is_final is False

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            LiveTranscriptionMessage.from_json("[1, 2]")

    def test_rejects_bad_json(self):
        with pytest.raises(ValueError):
            LiveTranscriptionMessage.from_json("not json")
