"""Decode structured metadata from backend index names.

Index names follow ``prefix_serviceType_coverage_YYYYMMDD_HHMMSS[_...]``, for
example ``munin_poi_priv.fr_20210101_120000``. A coverage token carrying the
``priv.`` marker denotes a private index.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any

from bragi_probe.registry.errors import LabelMalformed
from bragi_probe.registry.models import IndexMetadata, PrivacyTier

PRIVATE_MARKER = "priv."
DEFAULT_DATE = date(1970, 1, 1)
DEFAULT_TIME = time(0, 1, 1)

_MIN_TOKENS = 5


def _parse_date(token: str) -> date:
    if len(token) != 8 or not (token.isascii() and token.isdigit()):
        return DEFAULT_DATE
    try:
        return datetime.strptime(token, "%Y%m%d").date()
    except ValueError:
        return DEFAULT_DATE


def _parse_time(token: str) -> time:
    if len(token) != 6 or not (token.isascii() and token.isdigit()):
        return DEFAULT_TIME
    try:
        return datetime.strptime(token, "%H%M%S").time()
    except ValueError:
        return DEFAULT_TIME


def parse_document_count(value: Any) -> int:
    """Return the document count from a ``docs.count`` field, or 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return 0


def decode_index_label(
    label: str,
    document_count: int = 0,
    observed_at: datetime | None = None,
) -> IndexMetadata:
    """Decode *label* into an IndexMetadata.

    Raises LabelMalformed when fewer than five underscore-separated tokens
    are present. Unparseable date or time tokens fall back to 1970-01-01 and
    00:01:01 respectively, independently of each other.
    """
    tokens = label.split("_")
    if len(tokens) < _MIN_TOKENS:
        raise LabelMalformed(label)

    _, service_type, coverage, date_token, time_token = tokens[:_MIN_TOKENS]
    if coverage.startswith(PRIVATE_MARKER):
        tier = PrivacyTier.PRIVATE
        coverage = coverage[len(PRIVATE_MARKER):]
    else:
        tier = PrivacyTier.PUBLIC

    created_at = datetime.combine(_parse_date(date_token), _parse_time(time_token), tzinfo=UTC)
    extra = {"observed_at": observed_at} if observed_at is not None else {}
    return IndexMetadata(
        label=label,
        service_type=service_type,
        coverage_region=coverage,
        privacy_tier=tier,
        created_at=created_at,
        document_count=document_count,
        **extra,
    )
