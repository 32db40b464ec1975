import math
import os
import re
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Any, List, Union

import sox
import torch
import torchaudio
import torchaudio.functional as F
from torchaudio.models import wav2vec2_model

SAMPLING_FREQ = 16000
EMISSION_INTERVAL = 30
DEVICE = torch.device("cuda" if torch.cuda.is_available() else "cpu")

BLANK = "<blank>"
STAR = "<star>"

# iso codes with specialized rules in uroman
special_isos_uroman = frozenset(
    "ara bel bul deu ell eng fas grc heb kaz kir lav lit mkd mkd2 "
    "oss pnt pus rus srp srp2 tur uig ukr yid".split()
)

# Architecture of the ctc_alignment_mling_uroman checkpoint.
MODEL_PARAMS: dict[str, Any] = dict(
    extractor_mode="layer_norm",
    extractor_conv_layer_config=[(512, 10, 5)]
    + [(512, 3, 2)] * 4
    + [(512, 2, 2)] * 2,
    extractor_conv_bias=True,
    encoder_embed_dim=1024,
    encoder_projection_dropout=0.0,
    encoder_pos_conv_kernel=128,
    encoder_pos_conv_groups=16,
    encoder_num_layers=24,
    encoder_num_heads=16,
    encoder_attention_dropout=0.0,
    encoder_ff_interm_features=4096,
    encoder_ff_interm_dropout=0.1,
    encoder_dropout=0.0,
    encoder_layer_norm_first=True,
    encoder_layer_drop=0.1,
    aux_num_out=31,
)


def normalize_uroman(text: str):
    text = text.lower()
    text = re.sub("([^a-z' ])", " ", text)
    text = re.sub(" +", " ", text)
    return text.strip()


def get_uroman_tokens(
    words: List[str], iso: Union[str, None] = None, romanizer: str = "uroman"
):
    """
    Romanize each word and split it into space separated characters, the
    token format the alignment dictionary is keyed by.
    """
    with tempfile.NamedTemporaryFile(
        "w", suffix=".txt", encoding="utf-8", delete=False
    ) as normalized_file:
        normalized_file.write("\n".join(words) + "\n")
    uroman_file = tempfile.NamedTemporaryFile(suffix=".txt", delete=False)
    uroman_file.close()

    cmd = [romanizer, "-i", normalized_file.name, "-o", uroman_file.name]
    if iso and iso in special_isos_uroman:
        cmd.extend(["-l", iso])

    try:
        subprocess.run(cmd, check=True)
        with open(uroman_file.name, encoding="utf-8") as f:
            outtexts = [
                re.sub(r"\s+", " ", " ".join(line.strip())).strip() for line in f
            ]
    finally:
        os.remove(normalized_file.name)
        os.remove(uroman_file.name)

    if len(outtexts) != len(words):
        raise RuntimeError(
            f"{romanizer} returned {len(outtexts)} lines for {len(words)} words"
        )
    return [normalize_uroman(ot) for ot in outtexts]


@dataclass
class Segment:
    label: str
    start: int
    end: int

    def __repr__(self):
        return f"{self.label}: [{self.start:5d}, {self.end:5d})"

    @property
    def length(self):
        return self.end - self.start


def merge_repeats(path: List[int], idx_to_token_map: dict[int, str]):
    i1, i2 = 0, 0
    segments: List[Segment] = []
    while i1 < len(path):
        while i2 < len(path) and path[i1] == path[i2]:
            i2 += 1
        segments.append(Segment(idx_to_token_map[path[i1]], i1, i2 - 1))
        i1 = i2
    return segments


def time_to_frame(time: float):
    stride_msec = 20
    frames_per_sec = 1000 / stride_msec
    return int(time * frames_per_sec)


def get_spans(tokens: List[str], segments: List[Segment]):
    """
    Group the merged alignment segments into one span per token. A span is
    padded with half of the neighbouring silence, or all of it at the edges.
    """
    ltr_idx = 0
    tokens_idx = 0
    intervals = []
    start = 0
    for seg_idx, seg in enumerate(segments):
        if tokens_idx == len(tokens):
            continue
        cur_token = tokens[tokens_idx].split(" ")
        if seg.label == BLANK:
            continue
        if seg.label != cur_token[ltr_idx]:
            raise ValueError(
                f"Alignment label {seg.label!r} does not match token {tokens[tokens_idx]!r}"
            )
        if ltr_idx == 0:
            start = seg_idx
        if ltr_idx == len(cur_token) - 1:
            ltr_idx = 0
            tokens_idx += 1
            intervals.append((start, seg_idx))
            while tokens_idx < len(tokens) and len(tokens[tokens_idx]) == 0:
                intervals.append((seg_idx, seg_idx))
                tokens_idx += 1
        else:
            ltr_idx += 1

    spans: List[List[Segment]] = []
    for idx, (start, end) in enumerate(intervals):
        span = segments[start : end + 1]
        if start > 0:
            prev_seg = segments[start - 1]
            if prev_seg.label == BLANK:
                pad_start = (
                    prev_seg.start
                    if idx == 0
                    else int((prev_seg.start + prev_seg.end) / 2)
                )
                span = [Segment(BLANK, pad_start, span[0].start)] + span
        if end + 1 < len(segments):
            next_seg = segments[end + 1]
            if next_seg.label == BLANK:
                pad_end = (
                    next_seg.end
                    if idx == len(intervals) - 1
                    else math.floor((next_seg.start + next_seg.end) / 2)
                )
                span = span + [Segment(BLANK, span[-1].end, pad_end)]
        spans.append(span)
    return spans


def span_to_seconds(span: List[Segment], stride: float) -> tuple[float, float]:
    """Convert a span's first and last frame to seconds, rounded to 2 places."""
    start_sec = round(span[0].start * stride / 1000, 2)
    end_sec = round(span[-1].end * stride / 1000, 2)
    return start_sec, end_sec


def generate_emissions(model: Any, audio_file: str):
    total_duration = sox.file_info.duration(audio_file)
    if not total_duration:
        raise ValueError(f"Could not get duration of audio file {audio_file}")

    audio_sf = sox.file_info.sample_rate(audio_file)
    if audio_sf != SAMPLING_FREQ:
        raise ValueError(
            f"{audio_file} is sampled at {audio_sf:g} Hz, expected {SAMPLING_FREQ} Hz"
        )

    waveform, _ = torchaudio.load(audio_file)  # waveform: channels X T
    waveform = waveform.to(DEVICE)

    emissions_arr = []
    with torch.inference_mode():
        i: float = 0
        while i < total_duration:
            segment_start_time, segment_end_time = (i, i + EMISSION_INTERVAL)

            context = EMISSION_INTERVAL * 0.1
            input_start_time = max(segment_start_time - context, 0)
            input_end_time = min(segment_end_time + context, total_duration)
            waveform_split = waveform[
                :,
                int(SAMPLING_FREQ * input_start_time) : int(
                    SAMPLING_FREQ * input_end_time
                ),
            ]

            model_outs, _ = model(waveform_split)
            offset = time_to_frame(input_start_time)
            emissions_arr.append(
                model_outs[0][
                    time_to_frame(segment_start_time)
                    - offset : time_to_frame(segment_end_time)
                    - offset,
                    :,
                ]
            )
            i += EMISSION_INTERVAL

    emissions = torch.cat(emissions_arr, dim=0).squeeze()
    emissions = torch.log_softmax(emissions, dim=-1)

    stride = float(waveform.size(1) * 1000 / emissions.size(0) / SAMPLING_FREQ)

    return emissions, stride


def get_alignments(
    audio_file: str,
    tokens: List[str],
    model: Any,
    dictionary: dict[str, int],
):
    emissions, stride = generate_emissions(model, audio_file)
    T, _ = emissions.size()

    # Extra column for the <star> token.
    emissions = torch.cat([emissions, torch.zeros(T, 1).to(DEVICE)], dim=1)

    token_indices = [
        dictionary[c] for c in " ".join(tokens).split(" ") if c in dictionary
    ]
    targets = torch.tensor(token_indices, dtype=torch.int32).to(DEVICE)

    input_lengths = torch.tensor(emissions.shape[0]).unsqueeze(-1)
    target_lengths = torch.tensor(targets.shape[0]).unsqueeze(-1)

    path, _ = F.forced_align(
        emissions.unsqueeze(0),
        targets.unsqueeze(0),
        input_lengths,
        target_lengths,
        blank=dictionary[BLANK],
    )

    path = path.squeeze().to("cpu").tolist()
    idx_to_token_map = {v: k for k, v in dictionary.items()}
    segments = merge_repeats(path, idx_to_token_map)

    return segments, stride


def get_model_and_dict(model_path: str, dict_path: str):
    state_dict = torch.load(model_path, map_location="cpu", weights_only=True)

    model = wav2vec2_model(**MODEL_PARAMS)
    model.load_state_dict(state_dict)
    model.eval()

    with open(dict_path, encoding="utf-8") as f:
        dictionary = {line.strip(): i for i, line in enumerate(f)}

    return model, dictionary
