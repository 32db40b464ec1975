from typing import List

from timestamp_types import AlignedWord, TimestampStrings


def serialize_timestamps(words: List[AlignedWord]) -> TimestampStrings:
    """
    Join the start and end times of the words into two strings. Every value
    is followed by a comma, the last one included.
    """
    start_list = "".join(f"{word.start_time}," for word in words)
    end_list = "".join(f"{word.end_time}," for word in words)
    return TimestampStrings(start_list, end_list)
