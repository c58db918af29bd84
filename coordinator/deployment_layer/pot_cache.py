from __future__ import annotations
import os
import re
from typing import Optional

import bittensor as bt
import requests
from tqdm import tqdm

from coordinator.constants import (
    DOWNLOAD_CHUNK_SIZE,
    MAX_POT_EXPONENT,
    POT_DOWNLOAD_TIMEOUT_SECONDS,
    POT_DOWNLOAD_URL_TEMPLATE,
    POT_FILENAME_TEMPLATE,
    PTAU_SUFFIX,
)
from coordinator.exceptions import DownloadError

POT_LOG_PREFIX = "  POT  | "
POT_EXPONENT_PATTERN = re.compile(rf"_(\d+){re.escape(PTAU_SUFFIX)}$")


def pot_filename(exponent: int) -> str:
    """
    File name of the Powers of Tau file for an exponent, e.g. 9 -> ..._09.ptau
    """
    return f"{POT_FILENAME_TEMPLATE}{exponent:02d}{PTAU_SUFFIX}"


def extract_pot_from_filename(filename: str) -> Optional[int]:
    """
    Read the exponent encoded at the end of a Powers of Tau file name.

    Returns:
        int | None: The exponent, or None for unrelated file names.
    """
    match = POT_EXPONENT_PATTERN.search(filename)
    if match is None:
        return None
    return int(match.group(1))


class PotCache:
    """
    Local cache of Powers of Tau files, keyed on their exponent.

    The cache directory persists across runs and is never cleared; files are
    only ever added to it.
    """

    def __init__(
        self,
        cache_dir: str,
        download_url_template: str = POT_DOWNLOAD_URL_TEMPLATE,
        session: Optional[requests.Session] = None,
    ):
        self.cache_dir = cache_dir
        self.download_url_template = download_url_template
        self.session = session or requests.Session()
        os.makedirs(self.cache_dir, exist_ok=True)

    def path_for(self, exponent: int) -> str:
        return os.path.join(self.cache_dir, pot_filename(exponent))

    def find_cached(self, exponent: int) -> Optional[str]:
        """
        Scan the cache directory for a file holding exactly this exponent.
        """
        for entry in sorted(os.listdir(self.cache_dir)):
            if not os.path.isfile(os.path.join(self.cache_dir, entry)):
                continue
            if extract_pot_from_filename(entry) == exponent:
                return os.path.join(self.cache_dir, entry)
        return None

    def is_cached(self, exponent: int) -> bool:
        return self.find_cached(exponent) is not None

    def resolve(self, exponent: int) -> str:
        """
        Return the local path of the Powers of Tau file for an exponent,
        downloading it first if it is not cached yet.

        Raises:
            DownloadError: If the file does not exist upstream or the transfer fails.
        """
        cached = self.find_cached(exponent)
        if cached is not None:
            bt.logging.info(
                f"{POT_LOG_PREFIX}Powers of Tau #{exponent:02d} already downloaded"
            )
            return cached

        if exponent > MAX_POT_EXPONENT:
            raise DownloadError(
                f"No Powers of Tau file is published for exponent {exponent} "
                f"(maximum is {MAX_POT_EXPONENT})"
            )

        filename = pot_filename(exponent)
        destination = self.path_for(exponent)
        self.download(f"{self.download_url_template}{filename}", destination)
        bt.logging.success(
            f"{POT_LOG_PREFIX}Powers of Tau #{exponent:02d} correctly downloaded"
        )
        return destination

    def download(self, url: str, destination: str) -> None:
        # Partial transfers never carry the .ptau suffix so they are not picked up as cached
        partial_path = f"{destination}.part"
        bt.logging.info(f"{POT_LOG_PREFIX}Downloading {url} to {destination}...")
        try:
            with self.session.get(
                url, timeout=POT_DOWNLOAD_TIMEOUT_SECONDS, stream=True
            ) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("content-length", 0))
                with (
                    open(partial_path, "wb") as f,
                    tqdm(
                        desc=os.path.basename(destination),
                        total=total_size,
                        unit="iB",
                        unit_scale=True,
                    ) as pbar,
                ):
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        pbar.update(f.write(chunk))
            os.replace(partial_path, destination)
        except (requests.RequestException, OSError) as e:
            bt.logging.error(f"{POT_LOG_PREFIX}Failed to download {url}: {e}")
            if os.path.exists(partial_path):
                os.remove(partial_path)
            raise DownloadError(f"Failed to download {url}: {e}") from e
