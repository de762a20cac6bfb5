"""Plain-text rendering of a Gladia transcription result.

WHY: The CLI needs a readable summary of a finished job (transcript,
speakers, utterances and whatever audio intelligence sections were
requested) without dumping the raw JSON.

HOW: render_result() walks the TranscriptionResult and emits one titled
section per populated part ("== Full Transcription ==", "== Speakers ==",
...). Each section builder returns a list of lines or an empty list when
there is nothing to show, so absent features simply don't appear.

RULES:
- Sections appear in a fixed order; empty sections are skipped
- A blank line separates sections
- Subtitles are shown as a sample (first few cues), not in full
- Times are seconds with two decimals
- No trailing whitespace on any line
"""

from __future__ import annotations

from typing import List

from gladia_client.api.models import ResultPayload, TranscriptionResult

SUBTITLE_SAMPLE_CUES = 3


def _section(title: str, body: List[str]) -> List[str]:
    if not body:
        return []
    return ["== {} ==".format(title)] + body


def _seconds(value: float | None) -> str:
    return "{:.2f}s".format(value or 0.0)


def _percent(value: float) -> str:
    return "{:.2f}%".format(value * 100)


def _speaker_lines(payload: ResultPayload) -> List[str]:
    return [
        "- {} (confidence: {})".format(s.label or s.id, _percent(s.confidence))
        for s in payload.speakers
    ]


def _utterance_lines(payload: ResultPayload) -> List[str]:
    if payload.transcription is None:
        return []
    lines: List[str] = []
    for utterance in payload.transcription.utterances:
        lines.append("[{} - {}]".format(_seconds(utterance.start), _seconds(utterance.end)))
        if utterance.speaker is not None:
            lines.append("Speaker: {}".format(utterance.speaker))
        lines.append(utterance.text.strip())
    return lines


def average_confidence(result: TranscriptionResult) -> float | None:
    """Mean utterance confidence, or None when there are no utterances."""
    if result.result is None or result.result.transcription is None:
        return None
    utterances = result.result.transcription.utterances
    if not utterances:
        return None
    return sum(u.confidence for u in utterances) / len(utterances)


def _subtitle_sample(text: str) -> str:
    cues = text.strip().split("\n\n")
    return "\n\n".join(cues[:SUBTITLE_SAMPLE_CUES])


def _subtitle_lines(payload: ResultPayload) -> List[str]:
    if payload.subtitles is None:
        return []
    lines: List[str] = []
    if payload.subtitles.srt:
        lines.append("SRT format (sample):")
        lines.extend(_subtitle_sample(payload.subtitles.srt).splitlines())
    if payload.subtitles.vtt:
        lines.append("VTT format (sample):")
        lines.extend(_subtitle_sample(payload.subtitles.vtt).splitlines())
    return lines


def _intelligence_sections(payload: ResultPayload) -> List[List[str]]:
    sections: List[List[str]] = []

    if payload.summary is not None:
        sections.append(_section("Summary", [payload.summary.text.strip()]))

    if payload.sentiment is not None:
        sections.append(_section("Sentiment", [
            "{} (score: {})".format(payload.sentiment.label, payload.sentiment.score)
        ]))

    sections.append(_section("Entities", [
        "- {} [{}]".format(e.text, e.type) for e in payload.entities
    ]))

    if payload.moderation is not None:
        sections.append(_section("Moderation", [
            "- {} ({})".format(c.name, _percent(c.confidence))
            for c in payload.moderation.categories
        ]))

    chapter_lines: List[str] = []
    for chapter in payload.chapters:
        chapter_lines.append("[{} - {}] {}".format(
            _seconds(chapter.start), _seconds(chapter.end), chapter.title
        ))
        if chapter.summary:
            chapter_lines.append(chapter.summary.strip())
    sections.append(_section("Chapters", chapter_lines))

    sections.append(_section("Subtitles", _subtitle_lines(payload)))

    translation_lines: List[str] = []
    for language, text in payload.translations.items():
        translation_lines.append("{}:".format(language.upper()))
        translation_lines.append(str(text).strip())
    sections.append(_section("Translations", translation_lines))

    return sections


def render_result(result: TranscriptionResult) -> str:
    """Render a TranscriptionResult as a multi-section text report.

    Args:
        result: A job snapshot, normally with status "done".

    Returns:
        The report text, ending with a newline.
    """
    sections: List[List[str]] = []
    payload = result.result

    if result.full_transcript:
        sections.append(_section("Full Transcription", [result.full_transcript.strip()]))

    if payload is not None:
        sections.append(_section("Speakers", _speaker_lines(payload)))
        sections.append(_section("Utterances", _utterance_lines(payload)))

    confidence = average_confidence(result)
    if confidence is not None:
        sections.append(_section("Overall Confidence", [_percent(confidence)]))

    if payload is not None:
        sections.extend(_intelligence_sections(payload))

    if result.file is not None:
        sections.append(_section("File Information", [
            "Filename: {}".format(result.file.filename),
            "Source: {}".format(result.file.source),
            "Duration: {}".format(_seconds(result.file.audio_duration)),
            "Channels: {}".format(result.file.number_of_channels),
        ]))
    elif result.audio is not None:
        sections.append(_section("Audio Information", [
            "Duration: {}".format(_seconds(result.audio.duration)),
            "Language: {}".format(result.audio.language),
        ]))

    if payload is not None and payload.metadata is not None:
        metadata = payload.metadata
        sections.append(_section("Metadata", [
            "Audio Duration: {}".format(_seconds(metadata.audio_duration)),
            "Transcription Time: {}".format(_seconds(metadata.transcription_time)),
            "Distinct Channels: {}".format(metadata.number_of_distinct_channels),
        ]))

    blocks = ["\n".join(line.rstrip() for line in s) for s in sections if s]
    if not blocks:
        return "Job {} has status '{}' and no transcript.\n".format(result.id, result.status)
    return "\n\n".join(blocks) + "\n"
