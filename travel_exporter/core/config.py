# travel_exporter/core/config.py
# -*- coding: utf-8 -*-

"""
Exporter configuration model and JSON loading.

The configuration file is read once at startup and never mutated. Two
schemas are accepted:

Current schema
--------------
    {
      "addresses": {"home": "1 Main St", "work": "Central Station"},
      "paths": [{"from": "home", "to": "work"}],
      "bidirectional": true,
      "listen": ":9091",
      "region": "ROW",
      "vehicle": "",
      "avoid_toll": false,
      "avoid_subscription_road": false,
      "avoid_ferry": false,
      "sleep": 500
    }

Legacy schema (single path)
---------------------------
    {"from": "1 Main St", "to": "Central Station", "bidirectional": true}

`from`/`to` may also be objects `{"name": ..., "address": ...}`. The legacy
form is migrated into one address book and one path; its `bidirectional`
flag defaults to true as it always did.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

from travel_exporter.infra.logging import get_logger
from .models import PathSpec
from .types import AnyMapping, ConfigError, Region, Vehicle

_log = get_logger(__name__)


DEFAULT_LISTEN = ":9091"
DEFAULT_SLEEP_MS = 500

_KNOWN_KEYS = frozenset({
    "addresses", "paths", "from", "to", "bidirectional", "listen", "region",
    "vehicle", "avoid_toll", "avoid_subscription_road", "avoid_ferry", "sleep",
})


# ────────────────────────────────────────────────────────────────────────────────
# Model
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExporterConfig:
    """
    Validated exporter configuration.

    Attributes
    ----------
    addresses : Mapping[str, str]
        Read-only address book, name -> free-text address.
    paths : tuple[PathSpec, ...]
        Directed paths in configured order.
    listen : str
        "host:port" the metrics endpoint binds to (host may be empty).
    region : Region
    vehicle : Vehicle
    avoid_toll, avoid_subscription_road, avoid_ferry : bool
    sleep_ms : int
        Delay between two consecutive routing calls of one cycle.
    bidirectional : bool
        Global default applied to paths that do not set it themselves.
    """

    addresses: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    paths: Tuple[PathSpec, ...] = ()
    listen: str = DEFAULT_LISTEN
    region: Region = Region.ROW
    vehicle: Vehicle = Vehicle.REGULAR
    avoid_toll: bool = False
    avoid_subscription_road: bool = False
    avoid_ferry: bool = False
    sleep_ms: int = DEFAULT_SLEEP_MS
    bidirectional: bool = False

    @property
    def sleep_s(self) -> float:
        return self.sleep_ms / 1000.0

    @property
    def listen_address(self) -> Tuple[str, int]:
        return parse_listen(self.listen)

    def referenced_names(self) -> List[str]:
        """Address names used by at least one path, in first-use order."""
        seen: Dict[str, None] = {}
        for p in self.paths:
            seen.setdefault(p.from_name, None)
            seen.setdefault(p.to_name, None)
        return list(seen)


# ────────────────────────────────────────────────────────────────────────────────
# Field helpers
# ────────────────────────────────────────────────────────────────────────────────

def _bool(raw: AnyMapping, key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a boolean, got {value!r}")
    return value


def _str(raw: AnyMapping, key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {value!r}")
    return value


def _sleep(raw: AnyMapping) -> int:
    value = raw.get("sleep", DEFAULT_SLEEP_MS)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'sleep' must be a non-negative integer (ms), got {value!r}")
    return value


def parse_listen(listen: str) -> Tuple[str, int]:
    """
    Split a listen address into (host, port).

    Accepts "host:port", ":port" (all interfaces) and "[v6addr]:port".
    """
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise ConfigError(f"Invalid listen address {listen!r}: expected [host]:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_n = int(port)
    except ValueError:
        raise ConfigError(f"Invalid listen port in {listen!r}") from None
    if not 0 < port_n < 65536:
        raise ConfigError(f"Listen port out of range in {listen!r}")
    return host, port_n


# ────────────────────────────────────────────────────────────────────────────────
# Schemas
# ────────────────────────────────────────────────────────────────────────────────

def _parse_addresses(raw: AnyMapping) -> Dict[str, str]:
    addresses = raw.get("addresses", {})
    if not isinstance(addresses, dict):
        raise ConfigError("'addresses' must be an object of name -> address")
    for name, address in addresses.items():
        if not isinstance(address, str) or not address.strip():
            raise ConfigError(f"Address for {name!r} must be a non-empty string")
    return dict(addresses)


def _parse_paths(raw: AnyMapping, default_bidir: bool) -> List[PathSpec]:
    items = raw.get("paths")
    if not isinstance(items, list):
        raise ConfigError("'paths' must be a list of {from, to} objects")
    out: List[PathSpec] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigError(f"paths[{idx}] must be an object, got {item!r}")
        frm = item.get("from")
        to = item.get("to")
        if not isinstance(frm, str) or not isinstance(to, str):
            raise ConfigError(f"paths[{idx}] needs string 'from' and 'to'")
        out.append(PathSpec(frm, to, _bool(item, "bidirectional", default_bidir)))
    return out


def _legacy_endpoint(raw: AnyMapping, key: str) -> Tuple[str, str]:
    value = raw.get(key)
    if isinstance(value, str) and value.strip():
        return value, value
    if isinstance(value, dict):
        name = value.get("name")
        address = value.get("address")
        if isinstance(address, str) and address.strip():
            if not isinstance(name, str) or not name:
                name = address
            return name, address
    raise ConfigError(f"Legacy '{key}' must be an address string or {{name, address}} object")


def _migrate_legacy(raw: AnyMapping, default_bidir: bool) -> Tuple[Dict[str, str], List[PathSpec]]:
    from_name, from_address = _legacy_endpoint(raw, "from")
    to_name, to_address = _legacy_endpoint(raw, "to")
    addresses = {from_name: from_address}
    if to_name in addresses and addresses[to_name] != to_address:
        raise ConfigError(f"Legacy 'from' and 'to' share the name {to_name!r} with different addresses")
    addresses[to_name] = to_address
    _log.warning("Legacy single-path configuration detected; migrating to addresses/paths")
    return addresses, [PathSpec(from_name, to_name, default_bidir)]


def parse_config(raw: Any) -> ExporterConfig:
    """
    Validate a decoded JSON document into an ExporterConfig.

    Raises
    ------
    ConfigError
        For any type error, unknown enum token, or path naming an address
        absent from the address book.
    """
    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a JSON object")

    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        _log.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    legacy = "paths" not in raw and ("from" in raw or "to" in raw)
    if legacy:
        bidir = _bool(raw, "bidirectional", True)
        addresses, paths = _migrate_legacy(raw, bidir)
    else:
        if "from" in raw or "to" in raw:
            raise ConfigError("Use either 'paths' or the legacy 'from'/'to', not both")
        bidir = _bool(raw, "bidirectional", False)
        addresses = _parse_addresses(raw)
        paths = _parse_paths(raw, bidir) if "paths" in raw else []

    for p in paths:
        for name in (p.from_name, p.to_name):
            if name not in addresses:
                raise ConfigError(f"Path {p.from_name!r} -> {p.to_name!r} references unknown address {name!r}")

    listen = _str(raw, "listen", DEFAULT_LISTEN)
    parse_listen(listen)

    return ExporterConfig(
          addresses=MappingProxyType(addresses)
        , paths=tuple(paths)
        , listen=listen
        , region=Region.parse(raw.get("region", "ROW"))
        , vehicle=Vehicle.parse(raw.get("vehicle", ""))
        , avoid_toll=_bool(raw, "avoid_toll", False)
        , avoid_subscription_road=_bool(raw, "avoid_subscription_road", False)
        , avoid_ferry=_bool(raw, "avoid_ferry", False)
        , sleep_ms=_sleep(raw)
        , bidirectional=bidir
    )


def load_config(path: Union[str, Path]) -> ExporterConfig:
    """
    Read and validate the JSON configuration file at `path`.

    Raises ConfigError when the file cannot be read or decoded.
    """
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fd:
            raw = json.load(fd)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {p}: {e}") from e

    cfg = parse_config(raw)
    _log.info(
        "Config loaded: addresses=%s paths=%s region=%s vehicle=%s avoid_toll=%s "
        "avoid_subscription_road=%s avoid_ferry=%s bidirectional=%s sleep=%sms listen=%s",
        len(cfg.addresses),
        len(cfg.paths),
        cfg.region,
        cfg.vehicle.serialize() or "<regular>",
        cfg.avoid_toll,
        cfg.avoid_subscription_road,
        cfg.avoid_ferry,
        cfg.bidirectional,
        cfg.sleep_ms,
        cfg.listen,
    )
    return cfg

