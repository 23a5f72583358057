"""
HTTP content negotiation for the Accept header.

``best_match`` picks the offered media type a client prefers, honouring
quality values, ``type/*`` and ``*/*`` wildcards and media-type parameters.
Ties are broken by how specifically a range matched, then by the order of
ranges in the header, then by the order of the offers.

``can_display_graphiql`` combines negotiation with the endpoint options to
decide whether the explorer page should be served instead of JSON.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gqlroute.options import GraphQLOptions
    from gqlroute.params import ExecutionParams

# Shorthand offers accepted by best_match()
SHORTHAND_TYPES: dict[str, str] = {
    "json": "application/json",
    "html": "text/html",
    "text": "text/plain",
    "graphql": "application/graphql",
    "graphql-response": "application/graphql-response+json",
}


@dataclass(frozen=True)
class MediaRange:
    """One entry of an Accept header."""

    type: str
    subtype: str
    q: float = 1.0
    params: dict[str, str] = field(default_factory=dict)
    index: int = 0

    def specificity(self, type_: str, subtype: str, params: dict[str, str]) -> int | None:
        """Score how this range matches a concrete media type, or None if it doesn't."""
        score = 0
        if self.type == type_:
            score |= 4
        elif self.type != "*":
            return None

        if self.subtype == subtype:
            score |= 2
        elif self.subtype != "*":
            return None

        if self.params:
            if any(params.get(key) != value for key, value in self.params.items()):
                return None
            score |= 1
        return score


def _split_params(raw: str) -> tuple[str, dict[str, str]]:
    head, *rest = raw.split(";")
    params: dict[str, str] = {}
    for item in rest:
        key, sep, value = item.partition("=")
        if not sep:
            continue
        params[key.strip().lower()] = value.strip().strip('"')
    return head.strip().lower(), params


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header into media ranges.

    Malformed entries and entries with an invalid quality value are skipped.
    A bare ``*`` is read as ``*/*``.
    """
    if not header:
        return []

    ranges: list[MediaRange] = []
    for index, part in enumerate(header.split(",")):
        if not part.strip():
            continue
        mime, params = _split_params(part)
        if mime == "*":
            mime = "*/*"
        type_, slash, subtype = mime.partition("/")
        if not slash or not type_ or not subtype:
            continue

        q = 1.0
        if "q" in params:
            try:
                q = float(params.pop("q"))
            except ValueError:
                continue
            if not 0.0 <= q <= 1.0:
                continue
        ranges.append(MediaRange(type_, subtype, q, params, index))
    return ranges


def best_match(accept: str | None, offers: Sequence[str]) -> str | None:
    """Return the offer the client prefers, or None if none is acceptable.

    Offers may be full media types (``text/html``) or shorthands from
    ``SHORTHAND_TYPES`` (``html``); the offer is returned as given.
    A missing or empty Accept header accepts anything, so the first offer wins.

    Example:
        best_match("text/html,application/xhtml+xml,*/*;q=0.8", ["json", "html"])
        # -> "html"
    """
    if not offers:
        return None

    ranges = parse_accept(accept)
    if not ranges:
        if accept and accept.strip():
            # Header present but nothing parseable in it
            return None
        return offers[0]

    # (q, specificity, range index, offer index, offer)
    candidates: list[tuple[float, int, int, int, str]] = []
    for offer_index, offer in enumerate(offers):
        mime, params = _split_params(SHORTHAND_TYPES.get(offer.lower(), offer))
        type_, _, subtype = mime.partition("/")

        best: tuple[float, int, int] | None = None
        for media_range in ranges:
            score = media_range.specificity(type_, subtype, params)
            if score is None:
                continue
            # The most specific matching range decides the quality
            if best is None or score > best[1] or (score == best[1] and media_range.q > best[0]):
                best = (media_range.q, score, media_range.index)

        if best is not None and best[0] > 0:
            candidates.append((best[0], best[1], best[2], offer_index, offer))

    if not candidates:
        return None

    candidates.sort(key=lambda c: (-c[0], -c[1], c[2], c[3]))
    return candidates[0][4]


def can_display_graphiql(
    options: GraphQLOptions,
    params: ExecutionParams,
    accept: str | None,
) -> bool:
    """Whether this request should get the GraphiQL page instead of JSON.

    The explorer must be enabled, the request must not carry the ``raw``
    flag, and the client must prefer HTML over JSON.
    """
    if not options.graphiql or params.raw:
        return False
    return best_match(accept, ["json", "html"]) == "html"
