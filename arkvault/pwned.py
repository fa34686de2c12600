import hashlib
import logging

import requests

from arkvault import config
from arkvault.errors import LeakCheckError

logger = logging.getLogger(__name__)


def times_pwned(password: str) -> int:
    """
    Count how often a password appears in the Pwned Passwords corpus.
    Only the first five hex chars of its SHA-1 leave this process.
    """
    sha1_hash = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
    prefix = sha1_hash[:5]
    suffix = sha1_hash[5:]

    url = f"{config.HIBP_API_URL}/{prefix}"
    try:
        response = requests.get(url, timeout=config.HIBP_TIMEOUT, headers={"Add-Padding": "true"})
    except requests.RequestException as ex:
        raise LeakCheckError(f"Pwned Passwords lookup failed: {ex}") from ex

    if response.status_code != 200:
        raise LeakCheckError(f"Pwned Passwords API returned {response.status_code}")

    for line in response.text.splitlines():
        returned_suffix, _, count = line.partition(":")
        if returned_suffix.strip() == suffix:
            return int(count)

    return 0
