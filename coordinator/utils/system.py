import os
import shutil

from bittensor import logging


def clean_dir(folder_path: str):
    """
    Remove a directory with its contents and create it again, empty.
    """
    if os.path.exists(folder_path):
        logging.debug(f"Removing {folder_path}...")
        shutil.rmtree(folder_path)
    os.makedirs(folder_path, exist_ok=True)


def ensure_dir(folder_path: str) -> str:
    if not os.path.exists(folder_path):
        os.makedirs(folder_path, exist_ok=True)
    return folder_path
