from typing import Any, List

from halo import Halo

import constants
from mms.align_utils import (
    STAR,
    get_alignments,
    get_spans,
    get_uroman_tokens,
    span_to_seconds,
)
from model import load_model
from timestamp_types import AlignedWord


def words_from_spans(
    words: List[str], uroman_tokens: List[str], spans: List[list], stride: float
) -> List[AlignedWord]:
    """
    Pair transcript words with their spans. Words that romanized to nothing
    were not aligned and are left out.
    """
    aligned = []
    for word, tokens, span in zip(words, uroman_tokens, spans):
        if not tokens:
            continue
        start, end = span_to_seconds(span, stride)
        aligned.append(AlignedWord(word, start, end))
    return aligned


class WordAligner:
    """
    Aligns every word of a transcript to the audio it is spoken in, using the
    MMS forced alignment model.
    """

    def __init__(
        self,
        model_path: str | None = None,
        dict_path: str | None = None,
        romanizer: str | None = None,
        language: str | None = None,
        model: Any = None,
        dictionary: dict[str, int] | None = None,
    ):
        if model is None or dictionary is None:
            model, dictionary = load_model(model_path, dict_path)
        self.model = model
        # The extra emission column added during alignment belongs to <star>.
        self.dictionary = dict(dictionary)
        self.dictionary.setdefault(STAR, len(self.dictionary))
        self.romanizer = romanizer or constants.romanizer
        self.language = language or constants.language

    def align(self, audio_path: str, transcript: str) -> List[AlignedWord]:
        words = transcript.split()
        if not words:
            raise ValueError(f"Empty transcript for audio file {audio_path}")

        spinner = Halo(text="Romanizing transcript...").start()
        try:
            uroman_tokens = get_uroman_tokens(words, self.language, self.romanizer)
        except Exception:
            spinner.fail("Failed to romanize transcript.")
            raise
        spinner.succeed("Transcript romanized.")

        spinner.text = "Aligning..."
        spinner.start()
        try:
            segments, stride = get_alignments(
                audio_path, [STAR] + uroman_tokens, self.model, self.dictionary
            )
            spans = get_spans([STAR] + uroman_tokens, segments)
        except Exception:
            spinner.fail("Failed to align.")
            raise
        spinner.succeed("Alignment done.")

        return words_from_spans(words, uroman_tokens, spans[1:], stride)
