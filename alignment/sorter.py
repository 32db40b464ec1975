from typing import List

from timestamp_types import AlignedWord


def sort_words(words: List[AlignedWord]) -> List[AlignedWord]:
    """
    Sort words alphabetically in place, by code point and case-sensitive.
    Words with the same text keep the order they were spoken in.
    """
    words.sort(key=lambda word: word.text)
    return words
