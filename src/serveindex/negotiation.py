# Accept header negotiation.
# Created: 2026-10-19

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

# Served representations, in preference order when the client has none.
MEDIA_TYPES: tuple[str, ...] = ("text/html", "text/plain", "application/json")


@dataclass(frozen=True)
class MediaRange:
    """One comma-separated item of an Accept header."""

    type: str
    subtype: str
    params: dict[str, str] = field(default_factory=dict)
    q: float = 1.0
    index: int = 0


def _parse_quality(value: str) -> float:
    try:
        q = float(value)
    except ValueError:
        return 1.0
    return min(max(q, 0.0), 1.0)


def parse_accept(header: str) -> list[MediaRange]:
    ranges: list[MediaRange] = []
    for index, item in enumerate(header.split(",")):
        media, *raw_params = (part.strip() for part in item.split(";"))
        if "/" not in media:
            continue
        type_, subtype = (s.strip().lower() for s in media.split("/", 1))
        if not type_ or not subtype:
            continue

        params: dict[str, str] = {}
        q = 1.0
        for raw in raw_params:
            key, sep, value = raw.partition("=")
            if not sep:
                continue
            key = key.strip().lower()
            value = value.strip().strip('"')
            if key == "q":
                q = _parse_quality(value)
            else:
                params[key] = value.lower()

        ranges.append(MediaRange(type_, subtype, params, q, index))
    return ranges


def _specificity(offer: str, accepted: MediaRange) -> int | None:
    """Score how precisely *accepted* matches *offer*; None if it does not."""
    offer_type, _, offer_subtype = offer.lower().partition("/")
    score = 0

    if accepted.type == offer_type:
        score |= 4
    elif accepted.type != "*":
        return None

    if accepted.subtype == offer_subtype:
        score |= 2
    elif accepted.subtype != "*":
        return None

    # Offers carry no parameters, so a range that demands some cannot match.
    if accepted.params:
        return None

    return score


def negotiate(accept: str | None, offers: Sequence[str] = MEDIA_TYPES) -> str | None:
    """Pick the offer the client prefers, or None if none is acceptable.

    A missing or empty header accepts anything, so the first offer wins.
    """
    if not accept or not accept.strip():
        return offers[0] if offers else None

    ranges = parse_accept(accept)
    candidates: list[tuple[float, int, int, int, str]] = []

    for offer_index, offer in enumerate(offers):
        best: tuple[int, float, int] | None = None
        for accepted in ranges:
            score = _specificity(offer, accepted)
            if score is None:
                continue
            current = (score, accepted.q, -accepted.index)
            if best is None or current > best:
                best = current
        if best is None:
            continue

        score, q, neg_index = best
        if q <= 0:
            continue
        candidates.append((-q, -score, -neg_index, offer_index, offer))

    if not candidates:
        return None
    return min(candidates)[-1]
