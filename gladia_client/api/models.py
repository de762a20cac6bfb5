"""Gladia API request options and response dataclasses.

WHY: The Gladia v2 API takes a flat JSON object of independent feature
toggles, each with an optional ``*_config`` companion, and returns a deeply
nested result document. Typed dataclasses make both explicit, give IDE
autocompletion, and replace ad-hoc dict spreading with a field-by-field
merge that is easy to reason about.

HOW: Request-side dataclasses (TranscriptionOptions, LiveTranscriptionOptions
and the *Config companions) serialize with to_dict(), dropping None fields.
Response-side dataclasses parse with from_dict() and are frozen: a result is
a snapshot of server state and is never mutated by the client. Parsing is
lenient; missing keys become None or empty containers because the service
shape varies with the features that were enabled.

RULES:
- None means "not specified" on every option field
- A feature toggle and its *_config companion are independent fields; the
  client applies no cross-field validation
- merge_options() is a shallow merge: a caller's *_config replaces the
  default one wholesale
- TranscriptionResult.raw keeps the untouched response dict
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional, Tuple


class JobStatus(str, enum.Enum):
    """Lifecycle states of a Gladia transcription job.

    Inherits from str so comparisons against raw response values work.
    """

    CREATED = "created"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


def _compact(value: Any) -> Any:
    """Recursively convert dataclasses to dicts, dropping None fields."""
    if is_dataclass(value) and not isinstance(value, type):
        out: Dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            out[f.name] = _compact(item)
        return out
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_compact(v) for v in value]
    if isinstance(value, dict):
        return {k: _compact(v) for k, v in value.items() if v is not None}
    return value


# ---------------------------------------------------------------------------
# Request options
# ---------------------------------------------------------------------------


@dataclass
class DiarizationConfig:
    number_of_speakers: Optional[int] = None
    min_speakers: Optional[int] = None
    max_speakers: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class TranslationConfig:
    target_languages: Optional[List[str]] = None
    model: Optional[str] = None  # "base" | "large"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class SubtitlesConfig:
    formats: Optional[List[str]] = None  # "srt" and/or "vtt"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class SummarizationConfig:
    type: Optional[str] = None  # "paragraph" | "bullets"
    length: Optional[str] = None  # "small" | "medium" | "large"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class CallbackConfig:
    """Where Gladia should deliver the result in callback mode."""

    url: str
    method: Optional[str] = None  # "POST" | "PUT"
    headers: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class TranscriptionOptions:
    """Per-call options for POST /v2/transcription.

    Every field defaults to None ("not specified") so that merge_options()
    can tell an explicit value apart from an omitted one.
    """

    language: Optional[str] = None
    language_behavior: Optional[str] = None  # "automatic" | "manual"
    detect_language: Optional[bool] = None
    transcription_hint: Optional[str] = None
    toggle_noise_reduction: Optional[bool] = None
    toggle_diarization: Optional[bool] = None
    toggle_highlights: Optional[bool] = None
    model_name: Optional[str] = None
    enable_code_switching: Optional[bool] = None
    output_format: Optional[str] = None  # "segments" | "full_transcript"
    audio_channel_selector: Optional[str] = None  # "left" | "right" | "mixed"

    diarization: Optional[bool] = None
    diarization_config: Optional[DiarizationConfig] = None

    translation: Optional[bool] = None
    translation_config: Optional[TranslationConfig] = None

    subtitles: Optional[bool] = None
    subtitles_config: Optional[SubtitlesConfig] = None

    summarization: Optional[bool] = None
    summarization_config: Optional[SummarizationConfig] = None

    named_entity_recognition: Optional[bool] = None
    sentiment_analysis: Optional[bool] = None
    content_moderation: Optional[bool] = None
    chapterization: Optional[bool] = None

    callback: Optional[bool] = None
    callback_config: Optional[CallbackConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the request body shape, omitting unset fields."""
        return _compact(self)


@dataclass(frozen=True)
class ClientDefaults:
    """Options captured once at client construction.

    RULES:
    - Read-only after construction
    - Merged under every per-call TranscriptionOptions
    """

    language: Optional[str] = None
    diarization: Optional[bool] = None
    diarization_config: Optional[DiarizationConfig] = None


def merge_options(
    defaults: Optional[ClientDefaults],
    options: Optional[TranscriptionOptions],
) -> TranscriptionOptions:
    """Overlay per-call options on the client defaults, field by field.

    WHY: Every submission must carry the client-level language and
    diarization settings unless the caller overrides them.

    HOW: Starts from a TranscriptionOptions built from the defaults, then
    applies every non-None field of the caller's options with
    dataclasses.replace. Neither input is mutated.

    RULES:
    - A caller field that is not None always wins
    - Nested *_config objects are replaced, never deep-merged
    - Fields unset in both inputs stay None (and are omitted on the wire)
    """
    base = TranscriptionOptions()
    if defaults is not None:
        base = TranscriptionOptions(
            language=defaults.language,
            diarization=defaults.diarization,
            diarization_config=defaults.diarization_config,
        )
    if options is None:
        return base

    overrides = {
        f.name: getattr(options, f.name)
        for f in fields(options)
        if getattr(options, f.name) is not None
    }
    return replace(base, **overrides)


@dataclass
class LiveTranscriptionOptions:
    """Configuration for a /v2/live session, sent as query parameters."""

    language: Optional[str] = None
    language_behavior: Optional[str] = None
    detect_language: Optional[bool] = None
    transcription_hint: Optional[str] = None
    toggle_noise_reduction: Optional[bool] = None
    toggle_diarization: Optional[bool] = None
    toggle_interim_results: Optional[bool] = None
    model_name: Optional[str] = None
    audio_channel_selector: Optional[str] = None

    diarization: Optional[bool] = None

    translation: Optional[bool] = None
    translation_config: Optional[TranslationConfig] = None

    named_entity_recognition: Optional[bool] = None
    sentiment_analysis: Optional[bool] = None

    callback_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Encode every set option as a query parameter.

        RULES:
        - Nested objects and lists become JSON text
        - Booleans become "true" / "false"
        - Other values use str()
        - Unset (None) options are omitted
        """
        params: List[Tuple[str, str]] = []
        for key, value in self.to_dict().items():
            if isinstance(value, (dict, list)):
                params.append((key, json.dumps(value)))
            elif isinstance(value, bool):
                params.append((key, "true" if value else "false"))
            else:
                params.append((key, str(value)))
        return params


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TranscriptionResponse:
    """Body of POST /v2/transcription."""

    id: Optional[str]
    status: Optional[str] = None
    result_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionResponse:
        return cls(
            id=data.get("id"),
            status=data.get("status"),
            result_url=data.get("result_url"),
        )


@dataclass(frozen=True)
class AudioUploadResponse:
    """Body of POST /v2/upload."""

    audio_url: Optional[str]
    audio_metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AudioUploadResponse:
        return cls(
            audio_url=data.get("audio_url"),
            audio_metadata=data.get("audio_metadata"),
        )


@dataclass(frozen=True)
class Word:
    word: str
    start: float
    end: float
    confidence: float
    speaker: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Word:
        return cls(
            word=data.get("word", ""),
            start=data.get("start", 0.0),
            end=data.get("end", 0.0),
            confidence=data.get("confidence", 0.0),
            speaker=_optional_str(data.get("speaker")),
        )


@dataclass(frozen=True)
class Utterance:
    """A contiguous speech segment with timing and optional speaker."""

    start: float
    end: float
    text: str
    confidence: float
    speaker: Optional[str] = None
    channel: Optional[int] = None
    words: List[Word] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Utterance:
        return cls(
            start=data.get("start", 0.0),
            end=data.get("end", 0.0),
            text=data.get("text", ""),
            confidence=data.get("confidence", 0.0),
            speaker=_optional_str(data.get("speaker")),
            channel=data.get("channel"),
            words=[Word.from_dict(w) for w in data.get("words") or []],
        )


@dataclass(frozen=True)
class Speaker:
    id: str
    label: str
    confidence: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Speaker:
        return cls(
            id=str(data.get("id", "")),
            label=data.get("label", ""),
            confidence=data.get("confidence", 0.0),
        )


@dataclass(frozen=True)
class Transcription:
    full_transcript: Optional[str]
    languages: List[str] = field(default_factory=list)
    utterances: List[Utterance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Transcription:
        return cls(
            full_transcript=data.get("full_transcript"),
            languages=list(data.get("languages") or []),
            utterances=[Utterance.from_dict(u) for u in data.get("utterances") or []],
        )


@dataclass(frozen=True)
class ResultMetadata:
    audio_duration: Optional[float] = None
    number_of_distinct_channels: Optional[int] = None
    billing_time: Optional[float] = None
    transcription_time: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResultMetadata:
        return cls(
            audio_duration=data.get("audio_duration"),
            number_of_distinct_channels=data.get("number_of_distinct_channels"),
            billing_time=data.get("billing_time"),
            transcription_time=data.get("transcription_time"),
        )


@dataclass(frozen=True)
class Summary:
    text: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Summary:
        return cls(text=data.get("text", ""))


@dataclass(frozen=True)
class Sentiment:
    score: Optional[float] = None
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Sentiment:
        return cls(score=data.get("score"), label=data.get("label"))


@dataclass(frozen=True)
class Entity:
    text: str
    type: str
    start: Optional[float] = None
    end: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Entity:
        return cls(
            text=data.get("text", ""),
            type=data.get("type", ""),
            start=data.get("start"),
            end=data.get("end"),
        )


@dataclass(frozen=True)
class ModerationCategory:
    name: str
    confidence: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ModerationCategory:
        return cls(name=data.get("name", ""), confidence=data.get("confidence", 0.0))


@dataclass(frozen=True)
class Moderation:
    categories: List[ModerationCategory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Moderation:
        return cls(
            categories=[ModerationCategory.from_dict(c) for c in data.get("categories") or []]
        )


@dataclass(frozen=True)
class Chapter:
    title: str
    start: float
    end: float
    summary: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Chapter:
        return cls(
            title=data.get("title", ""),
            start=data.get("start", 0.0),
            end=data.get("end", 0.0),
            summary=data.get("summary", ""),
        )


@dataclass(frozen=True)
class Subtitles:
    srt: Optional[str] = None
    vtt: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Subtitles:
        return cls(srt=data.get("srt"), vtt=data.get("vtt"))


@dataclass(frozen=True)
class ResultPayload:
    """The ``result`` object of a finished job.

    Every feature section is None unless the feature was requested and the
    service produced it.
    """

    transcription: Optional[Transcription] = None
    metadata: Optional[ResultMetadata] = None
    speakers: List[Speaker] = field(default_factory=list)
    summary: Optional[Summary] = None
    sentiment: Optional[Sentiment] = None
    entities: List[Entity] = field(default_factory=list)
    moderation: Optional[Moderation] = None
    chapters: List[Chapter] = field(default_factory=list)
    subtitles: Optional[Subtitles] = None
    translations: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResultPayload:
        return cls(
            transcription=_parse_optional(Transcription, data.get("transcription")),
            metadata=_parse_optional(ResultMetadata, data.get("metadata")),
            speakers=[Speaker.from_dict(s) for s in data.get("speakers") or []],
            summary=_parse_optional(Summary, data.get("summary")),
            sentiment=_parse_optional(Sentiment, data.get("sentiment")),
            entities=[Entity.from_dict(e) for e in data.get("entities") or []],
            moderation=_parse_optional(Moderation, data.get("moderation")),
            chapters=[Chapter.from_dict(c) for c in data.get("chapters") or []],
            subtitles=_parse_optional(Subtitles, data.get("subtitles")),
            translations=dict(data.get("translations") or {}),
        )


@dataclass(frozen=True)
class FileInfo:
    id: Optional[str] = None
    filename: Optional[str] = None
    source: Optional[str] = None
    audio_duration: Optional[float] = None
    number_of_channels: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FileInfo:
        return cls(
            id=data.get("id"),
            filename=data.get("filename"),
            source=data.get("source"),
            audio_duration=data.get("audio_duration"),
            number_of_channels=data.get("number_of_channels"),
        )


@dataclass(frozen=True)
class AudioInfo:
    duration: Optional[float] = None
    language: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AudioInfo:
        return cls(duration=data.get("duration"), language=data.get("language"))


@dataclass(frozen=True)
class JobError:
    message: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> JobError:
        return cls(message=data.get("message"), code=data.get("code"))


@dataclass(frozen=True)
class TranscriptionResult:
    """Snapshot of a Gladia job, from GET /v2/transcription/{id}.

    WHY: Callers want attribute access to the transcript and every audio
    intelligence section without walking nested dicts.

    HOW: from_dict() parses the known sections and keeps the full response
    in ``raw`` so nothing the service adds is lost.

    RULES:
    - Only id and status are guaranteed; in callback mode they are all
      there is
    - status is the raw string; compare with JobStatus members
    """

    id: str
    status: str
    request_id: Optional[str] = None
    version: Optional[int] = None
    kind: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None
    custom_metadata: Any = None
    error_code: Optional[Any] = None
    file: Optional[FileInfo] = None
    request_params: Optional[Dict[str, Any]] = None
    result: Optional[ResultPayload] = None
    audio: Optional[AudioInfo] = None
    error: Optional[JobError] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionResult:
        return cls(
            id=data.get("id", ""),
            status=data.get("status", ""),
            request_id=data.get("request_id"),
            version=data.get("version"),
            kind=data.get("kind"),
            created_at=data.get("created_at"),
            completed_at=data.get("completed_at"),
            custom_metadata=data.get("custom_metadata"),
            error_code=data.get("error_code"),
            file=_parse_optional(FileInfo, data.get("file")),
            request_params=data.get("request_params"),
            result=_parse_optional(ResultPayload, data.get("result")),
            audio=_parse_optional(AudioInfo, data.get("audio")),
            error=_parse_optional(JobError, data.get("error")),
            raw=dict(data),
        )

    @property
    def is_done(self) -> bool:
        return self.status == JobStatus.DONE

    @property
    def full_transcript(self) -> Optional[str]:
        """Shortcut to result.transcription.full_transcript."""
        if self.result is None or self.result.transcription is None:
            return None
        return self.result.transcription.full_transcript


@dataclass(frozen=True)
class LiveTranscriptionMessage:
    """One inbound frame of a live session, for callers that want types.

    LiveSession itself never parses frames; this is an opt-in helper.
    """

    type: str
    is_final: bool = False
    text: Optional[str] = None
    confidence: Optional[float] = None
    speaker: Optional[str] = None
    language: Optional[str] = None
    start: Optional[float] = None
    end: Optional[float] = None
    entities: List[Entity] = field(default_factory=list)
    sentiment: Optional[Sentiment] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LiveTranscriptionMessage:
        return cls(
            type=data.get("type", ""),
            is_final=bool(data.get("is_final", False)),
            text=data.get("text"),
            confidence=data.get("confidence"),
            speaker=_optional_str(data.get("speaker")),
            language=data.get("language"),
            start=data.get("start"),
            end=data.get("end"),
            entities=[Entity.from_dict(e) for e in data.get("entities") or []],
            sentiment=_parse_optional(Sentiment, data.get("sentiment")),
            raw=dict(data),
        )

    @classmethod
    def from_json(cls, frame: str | bytes) -> LiveTranscriptionMessage:
        """Parse a raw text (or UTF-8 bytes) frame; raises ValueError on bad JSON."""
        if isinstance(frame, (bytes, bytearray)):
            frame = frame.decode("utf-8")
        data = json.loads(frame)
        if not isinstance(data, dict):
            raise ValueError("Live message is not a JSON object")
        return cls.from_dict(data)


def _parse_optional(model: Any, data: Any) -> Any:
    if not isinstance(data, dict):
        return None
    return model.from_dict(data)


def _optional_str(value: Any) -> Optional[str]:
    # Gladia reports speakers as ints in some payloads and strings in others.
    if value is None:
        return None
    return str(value)
