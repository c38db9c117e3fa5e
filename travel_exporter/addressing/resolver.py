# travel_exporter/addressing/resolver.py
# -*- coding: utf-8 -*-
"""
Address resolver: free-text address -> coordinate token.

Duck-typed expectations for the injected `client`:
- client.geocode_text(text: str, region: Region) -> list[dict]
- client.first_named_location(candidates) -> str | None

Public API:
- resolve_address(address, *, client, region) -> "x:<lon> y:<lat>"
    • Raises AddressNotFoundError if no candidate has a name.
- resolve_address_book(addresses, names, *, client, region) -> {name: token}
    • Each name is resolved exactly once; results are returned as a
      read-only mapping that lives for the process lifetime.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from travel_exporter.core.types import ConfigError, CoordinateToken, Region
from travel_exporter.infra.logging import get_logger
from travel_exporter.road.waze_common import AddressNotFoundError

_log = get_logger(__name__)


def resolve_address(
      address: str
    , *
    , client
    , region: Region = Region.ROW
) -> CoordinateToken:
    """
    Geocode one address and keep the first candidate that has a name.

    Transport, status and decode failures propagate unchanged.
    """
    candidates = client.geocode_text(address, region)
    token = client.first_named_location(candidates)
    if token is None:
        _log.error("Address not found: %s (%s candidates, none named)", address, len(candidates))
        raise AddressNotFoundError(address)
    _log.info("Address %r resolved to %s", address, token)
    return token


def resolve_address_book(
      addresses: Mapping[str, str]
    , names: Iterable[str]
    , *
    , client
    , region: Region = Region.ROW
) -> Mapping[str, CoordinateToken]:
    """
    Resolve every name in `names` (in order, once each).

    Raises
    ------
    ConfigError
        A name is missing from the address book; raised before any lookup.
    AddressNotFoundError / CallError
        A lookup failed; startup cannot continue without coordinates.
    """
    ordered = list(dict.fromkeys(names))
    missing = [n for n in ordered if n not in addresses]
    if missing:
        raise ConfigError(f"Unknown address names: {', '.join(missing)}")

    resolved = {}
    for name in ordered:
        resolved[name] = resolve_address(addresses[name], client=client, region=region)
    _log.info("Resolved %s addresses", len(resolved))
    return MappingProxyType(resolved)
