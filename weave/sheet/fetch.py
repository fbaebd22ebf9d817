from __future__ import annotations

import logging

import requests

from weave.models.config_models import Source
from weave.sheet.reader import CsvFormatError, CsvSheet, read_csv_text

"""Source download.

A source is a URL returning a CSV export (e.g. a published Google Sheet).
Failures never abort the run: they are logged and the source simply
contributes no strands.
"""

__all__ = [
    "DEFAULT_TIMEOUT",
    "download_csv",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def download_csv(
    source: Source,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> CsvSheet | None:
    """GET ``source.url`` and parse the body as CSV.

    Returns:
        The parsed sheet, or None if the request failed, the status was not
        200, or the body was not CSV.
    """
    logger.info(f"Connecting to {source.url}")
    try:
        with requests.get(source.url, timeout=timeout) as response:
            logger.info(f"Response Code: {response.status_code}")
            if response.status_code != 200:
                logger.error(f"{source.title}: Response Message: {response.reason}")
                return None
            response.encoding = "utf-8"
            text = response.text
    except requests.RequestException as e:
        logger.error(f"{source.title}: error while connecting to the URL: {e}")
        return None

    try:
        return read_csv_text(text, source_title=source.title)
    except CsvFormatError as e:
        logger.error(f"{source.title}: {e}")
        return None
