"""Read API description text from a local file or an http(s) URL."""

import logging
from pathlib import Path

import requests

from api_diff.errors import SourceLoadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def is_url(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


def load_source(location: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the text at ``location`` (file path or URL)."""
    if is_url(location):
        return _fetch(location, timeout)

    try:
        return Path(location).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(location, str(e)) from e


def _fetch(url: str, timeout: float) -> str:
    logger.info("Fetching %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceLoadError(url, str(e)) from e
    return response.text
