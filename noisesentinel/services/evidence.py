import base64
import binascii
import gzip
import logging

from noisesentinel.utils.exceptions import AppException

logger = logging.getLogger(__name__)

IMAGE_PREFIX = "data:image/jpeg;base64,"


def _strip_data_uri(value: str) -> str:
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def compress_evidence(image_base64: str) -> str:
    """Gzip a base64 image and return the compressed bytes as base64."""
    try:
        raw = base64.b64decode(_strip_data_uri(image_base64.strip()), validate=True)
    except binascii.Error:
        raise AppException("Evidence image is not valid base64 data.")
    compressed = gzip.compress(raw)
    logger.info("Evidence image compressed from %d to %d bytes", len(raw), len(compressed))
    return base64.b64encode(compressed).decode("ascii")


def decompress_evidence(stored: str | None) -> str | None:
    if not stored:
        return stored
    try:
        raw = gzip.decompress(base64.b64decode(stored, validate=True))
    except (binascii.Error, OSError, EOFError):
        # rows written before compression was introduced
        return stored
    return IMAGE_PREFIX + base64.b64encode(raw).decode("ascii")
