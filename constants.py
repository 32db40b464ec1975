import os

from dotenv import load_dotenv

load_dotenv()

model_name = os.getenv(
    "ALPHABETIZER_MODEL_PATH", "ctc_alignment_mling_uroman_model.pt"
)
model_url = (
    "https://dl.fbaipublicfiles.com/mms/torchaudio/ctc_alignment_mling_uroman/model.pt"
)
dict_name = os.getenv(
    "ALPHABETIZER_DICT_PATH", "ctc_alignment_mling_uroman_model.dict"
)
dict_url = "https://dl.fbaipublicfiles.com/mms/torchaudio/ctc_alignment_mling_uroman/dictionary.txt"

# Command used to romanize transcript words into aligner tokens.
romanizer = os.getenv("ALPHABETIZER_ROMANIZER", "uroman")
language = os.getenv("ALPHABETIZER_LANGUAGE", "eng")

splice_script = os.getenv("ALPHABETIZER_SPLICE_SCRIPT", "spliceAudio.py")
splice_timeout = float(os.getenv("ALPHABETIZER_SPLICE_TIMEOUT", "300"))

default_output = "alphabetized.wav"
