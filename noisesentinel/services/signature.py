"""Tamper-evidence for emission readings.

A reading is signed by hashing its measured fields in a fixed textual form.
Verification recomputes the hash from the stored row and compares it with
the value recorded at capture time.
"""
import base64
import hashlib
import hmac
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")


def quantize_reading(value) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _format_reading(value) -> str:
    quantized = quantize_reading(value)
    return "NULL" if quantized is None else f"{quantized:.2f}"


def build_signature_payload(
    device_id: int,
    co,
    co2,
    hc,
    nox,
    sound_level_dba,
    test_datetime: datetime,
) -> str:
    return "|".join([
        str(device_id),
        _format_reading(co),
        _format_reading(co2),
        _format_reading(hc),
        _format_reading(nox),
        _format_reading(sound_level_dba),
        test_datetime.isoformat(timespec="microseconds"),
    ])


def compute_signature(device_id: int, co, co2, hc, nox, sound_level_dba, test_datetime: datetime) -> str:
    payload = build_signature_payload(device_id, co, co2, hc, nox, sound_level_dba, test_datetime)
    digest = hashlib.sha256(payload.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def compute_report_signature(report) -> str:
    return compute_signature(
        report.device_id,
        report.co,
        report.co2,
        report.hc,
        report.nox,
        report.sound_level_dba,
        report.test_datetime,
    )


def signatures_match(stored: str | None, computed: str) -> bool:
    if not stored:
        return False
    return hmac.compare_digest(stored.encode("ascii"), computed.encode("ascii"))
