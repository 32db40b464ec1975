import os

import torch
from halo import Halo

from constants import dict_name, dict_url, model_name, model_url
from mms.align_utils import DEVICE, STAR, get_model_and_dict


def _download(url: str, path: str, label: str):
    spinner = Halo(text=f"Downloading {label}...").start()
    if os.path.exists(path):
        spinner.info(f"{label.capitalize()} already downloaded.")
        return
    try:
        torch.hub.download_url_to_file(url, path)
    except Exception:
        spinner.fail(f"Failed to download {label}.")
        raise
    spinner.succeed(f"{label.capitalize()} downloaded.")


def load_model(model_path: str | None = None, dict_path: str | None = None):
    """
    Load the alignment model and its dictionary. The bundled model and
    dictionary are downloaded on first use when no paths are given.
    """
    if model_path is None:
        model_path = model_name
        _download(model_url, model_path, "model")
    if dict_path is None:
        dict_path = dict_name
        _download(dict_url, dict_path, "dictionary")

    for path in (model_path, dict_path):
        if not os.path.isfile(path):
            raise FileNotFoundError(f"No such file: {path}")

    load_spinner = Halo(text="Loading model and dictionary...").start()
    try:
        model, dictionary = get_model_and_dict(model_path, dict_path)
    except Exception:
        load_spinner.fail("Failed to load model and dictionary.")
        raise
    dictionary[STAR] = len(dictionary)
    model = model.to(DEVICE)
    load_spinner.succeed("Model and dictionary loaded.")
    return model, dictionary
