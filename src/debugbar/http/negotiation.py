"""Accept-header content negotiation.

Picks one media type from the formats the toolbar can emit, given the
requester's ``Accept`` header:

- each accepted range carries a quality (``q``, default 1.0); ``q=0`` rules
  a range out;
- a supported type scores the best (quality, specificity) of the ranges that
  match it, where an exact match beats ``type/*`` which beats ``*/*``;
- ties go to the earlier entry of ``supported``;
- no header, or nothing acceptable, falls back to ``supported[0]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MediaRange:
    """One parsed entry of an Accept header."""

    type: str
    subtype: str
    quality: float

    def specificity(self, media: str) -> int:
        """Return 2/1/0 for exact, ``type/*`` and ``*/*`` matches, -1 otherwise."""
        mtype, _, msub = media.partition("/")
        if self.type == "*" and self.subtype == "*":
            return 0
        if self.type != mtype:
            return -1
        if self.subtype == "*":
            return 1
        return 2 if self.subtype == msub else -1


def parse_accept(header: str) -> list[MediaRange]:
    """Parse an Accept header; malformed entries are skipped."""
    ranges: list[MediaRange] = []
    for part in header.split(","):
        media, *params = (p.strip() for p in part.split(";"))
        if "/" not in media:
            continue
        mtype, _, msub = media.lower().partition("/")
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append(MediaRange(mtype, msub or "*", max(0.0, min(quality, 1.0))))
    return ranges


def negotiate_media(accept: str | None, supported: Sequence[str]) -> str:
    """Return the best entry of ``supported`` for the given Accept header."""
    if not supported:
        raise ValueError("negotiate_media() needs at least one supported type")
    if not accept or not accept.strip():
        return supported[0]

    ranges = parse_accept(accept)
    best: str | None = None
    best_score: tuple[float, int] = (0.0, -1)
    for media in supported:
        score: tuple[float, int] = (0.0, -1)
        for rng in ranges:
            spec = rng.specificity(media.lower())
            if spec < 0:
                continue
            # the most specific matching range decides the quality
            if spec > score[1]:
                score = (rng.quality, spec)
        if score[0] > 0 and score > best_score:
            best, best_score = media, score
    return best if best is not None else supported[0]


__all__ = ["MediaRange", "negotiate_media", "parse_accept"]
