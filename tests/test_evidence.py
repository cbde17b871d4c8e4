import base64

import pytest

from noisesentinel.services.evidence import IMAGE_PREFIX, compress_evidence, decompress_evidence
from noisesentinel.utils.exceptions import AppException

IMAGE_BYTES = b"\xff\xd8\xff\xe0" + b"JFIF" * 200
IMAGE_B64 = base64.b64encode(IMAGE_BYTES).decode()


def test_compressed_evidence_is_smaller_and_restorable():
    stored = compress_evidence(IMAGE_B64)
    assert len(stored) < len(IMAGE_B64)
    assert decompress_evidence(stored) == IMAGE_PREFIX + IMAGE_B64


def test_data_uri_prefix_is_stripped():
    stored = compress_evidence("data:image/png;base64," + IMAGE_B64)
    assert decompress_evidence(stored) == IMAGE_PREFIX + IMAGE_B64


def test_invalid_base64_is_rejected():
    with pytest.raises(AppException) as exc_info:
        compress_evidence("not base64 at all!")
    assert exc_info.value.status_code == 400


def test_uncompressed_value_is_returned_unchanged():
    assert decompress_evidence(IMAGE_B64) == IMAGE_B64
    assert decompress_evidence("evidence/photo-001.jpg") == "evidence/photo-001.jpg"
    assert decompress_evidence(None) is None
