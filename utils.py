import os


def validate_wav_path(audio_path: str) -> str:
    """
    Check that the audio path names a readable WAV file.
    The extension is checked before the file system is touched.
    """
    if not audio_path.lower().endswith(".wav"):
        raise ValueError("Audio file must be in WAV format")
    if not os.path.isfile(audio_path):
        raise FileNotFoundError(f"No such audio file: {audio_path}")
    if not os.access(audio_path, os.R_OK):
        raise PermissionError(f"Audio file is not readable: {audio_path}")
    return audio_path


def read_transcript(text_path: str) -> str:
    with open(text_path, "r", encoding="utf-8") as text_file:
        return text_file.read().strip()
