import argparse
import sys
from typing import List, Protocol

import constants
from alignment.serializer import serialize_timestamps
from alignment.sorter import sort_words
from alignment.splicer import AudioSplicer
from timestamp_types import AlignedWord, PreparedAudio
from utils import read_transcript, validate_wav_path


class Aligner(Protocol):
    def align(self, audio_path: str, transcript: str) -> List[AlignedWord]: ...


class Alphabetizer:
    """
    Rearranges a recording so its words play in alphabetical order.

    For the alignment to work the audio must be a 16 bit, mono, 16 kHz PCM
    WAV file, and the transcript should be lowercase without punctuation
    (apostrophes in contractions are fine).
    """

    def __init__(self, aligner: Aligner, splicer: AudioSplicer | None = None):
        self.aligner = aligner
        self.splicer = splicer or AudioSplicer()

    def prepare_audio(self, audio_path: str, transcript: str) -> PreparedAudio:
        validate_wav_path(audio_path)
        words = self.aligner.align(audio_path, transcript)
        sort_words(words)
        return PreparedAudio(audio_path, words, serialize_timestamps(words))

    def alphabetize(self, prepared: PreparedAudio, output_path: str) -> int:
        """
        Cut each word as soon as the next one starts. Only use this when every
        word was aligned, since missed words stay in with their neighbours.
        """
        return self.splicer.splice_at_next_word(
            prepared.audio_path, output_path, prepared.timestamps.start_list
        )

    def alphabetize_no_gap(self, prepared: PreparedAudio, output_path: str) -> int:
        """
        Cut each word at its own end. Better for noisy audio or audio with long
        pauses, as anything between words is dropped.
        """
        return self.splicer.splice_at_word_end(
            prepared.audio_path,
            output_path,
            prepared.timestamps.start_list,
            prepared.timestamps.end_list,
        )


def print_words(words: List[AlignedWord]):
    for word in words:
        print(f"{word.text}\t{word.start_time}\t{word.end_time}")
    print(f"number of words: {len(words)}")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Rearrange the words of a recording into alphabetical order."
    )
    parser.add_argument("--audio", required=True, help="Path to a 16 kHz mono WAV file")
    transcript = parser.add_mutually_exclusive_group(required=True)
    transcript.add_argument("--transcript", help="Transcript of the audio")
    transcript.add_argument("--transcript-file", help="Path to a transcript text file")
    parser.add_argument(
        "--output",
        default=constants.default_output,
        help=f"Output filename (default: {constants.default_output})",
    )
    parser.add_argument(
        "--no-gap",
        action="store_true",
        help="Cut every word at its own end instead of where the next word starts",
    )
    parser.add_argument("--model", help="Path to an alignment model checkpoint")
    parser.add_argument("--dictionary", help="Path to the model's token dictionary")
    parser.add_argument("--romanizer", help="Romanizer command (default: uroman)")
    parser.add_argument("--language", help="ISO 639-3 code of the transcript language")
    parser.add_argument("--splicer", help="Path to the splice script")
    parser.add_argument("--timeout", type=float, help="Splice timeout in seconds")
    parser.add_argument(
        "--allow-splice-failure",
        action="store_true",
        help="Do not fail when the splice script exits with a non-zero code",
    )
    parser.add_argument("--verbose", action="store_true", help="Print aligned words")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        validate_wav_path(args.audio)
        transcript = (
            args.transcript
            if args.transcript is not None
            else read_transcript(args.transcript_file)
        )

        # Imported here so --help does not pay for loading torch.
        from alignment.aligner import WordAligner

        aligner = WordAligner(args.model, args.dictionary, args.romanizer, args.language)
        if args.verbose:
            aligner = _VerboseAligner(aligner)

        command = None
        if args.splicer:
            command = [sys.executable, args.splicer]
        splicer = AudioSplicer(
            command, args.timeout, check=not args.allow_splice_failure
        )

        alphabetizer = Alphabetizer(aligner, splicer)
        prepared = alphabetizer.prepare_audio(args.audio, transcript)

        if args.verbose:
            print_words(prepared.words)
            print(prepared.timestamps.start_list)

        if args.no_gap:
            alphabetizer.alphabetize_no_gap(prepared, args.output)
        else:
            alphabetizer.alphabetize(prepared, args.output)
        print(f"✅ Alphabetized audio saved to {args.output}")

    except Exception as e:
        print(f"❌ Error: {str(e)}")
        sys.exit(1)


class _VerboseAligner:
    """Prints the words in spoken order before they are sorted."""

    def __init__(self, aligner: Aligner):
        self.aligner = aligner

    def align(self, audio_path: str, transcript: str) -> List[AlignedWord]:
        words = self.aligner.align(audio_path, transcript)
        print_words(words)
        return words


if __name__ == "__main__":
    main()
