"""
Types for the alphabetizer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AlignedWord:
    """
    A single transcript word with the time span it was spoken in, in seconds.
    """

    text: str
    start_time: float
    end_time: float


@dataclass(frozen=True)
class TimestampStrings:
    """
    Comma separated start and end times, as handed to the splice script.
    Every value is followed by a comma, including the last one.
    """

    start_list: str
    end_list: str

    def count(self) -> int:
        return self.start_list.count(",")


@dataclass(frozen=True)
class PreparedAudio:
    """
    Everything derived from one audio file that the splice step needs.
    """

    audio_path: str
    words: list[AlignedWord]
    timestamps: TimestampStrings
