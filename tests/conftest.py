"""Shared test fixtures for the alphabetizer test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from timestamp_types import AlignedWord


class FakeAligner:
    """Returns canned words instead of running the alignment model."""

    def __init__(self, words):
        self.words = words
        self.calls = []

    def align(self, audio_path, transcript):
        self.calls.append((audio_path, transcript))
        return list(self.words)


@pytest.fixture
def spoken_words() -> list[AlignedWord]:
    return [
        AlignedWord("dog", 0.0, 0.5),
        AlignedWord("cat", 0.5, 1.0),
        AlignedWord("bird", 1.0, 1.6),
    ]


@pytest.fixture
def fake_aligner(spoken_words) -> FakeAligner:
    return FakeAligner(spoken_words)


@pytest.fixture
def wav_file(tmp_path: Path) -> Path:
    path = tmp_path / "speech.wav"
    path.write_bytes(b"RIFF")
    return path


class RecordingHalo:
    """Stands in for Halo and remembers how each spinner ended."""

    instances: list[RecordingHalo] = []

    def __init__(self, text=""):
        self.text = text
        self.outcome = None
        RecordingHalo.instances.append(self)

    def start(self):
        return self

    def succeed(self, text=None):
        self.outcome = ("succeed", text)

    def fail(self, text=None):
        self.outcome = ("fail", text)

    def info(self, text=None):
        self.outcome = ("info", text)


@pytest.fixture
def recording_halo() -> type[RecordingHalo]:
    RecordingHalo.instances = []
    return RecordingHalo
