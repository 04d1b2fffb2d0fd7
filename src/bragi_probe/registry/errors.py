"""Failure types raised inside a probe and absorbed into status records."""

from __future__ import annotations


class ProbeError(Exception):
    """Base class for failures observed while probing an environment."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class TransportFailure(ProbeError):
    """The request never produced a usable response (refused, timed out, bad status)."""


class DecodeFailure(ProbeError):
    """A response arrived but its body or an embedded URL could not be decoded."""


class LabelMalformed(ProbeError):
    """An index name does not follow the prefix_type_coverage_date_time grammar."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Index label not decodable: {label!r}")
        self.label = label
