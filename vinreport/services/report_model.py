"""Normalized, read-only view of a vehicle-history payload.

Provider payloads are untyped JSON and the key names drift between
provider versions, so every lookup goes through :func:`field` once, here.
Section renderers only ever see display-ready strings.
"""

from __future__ import annotations

import copy
import re as _re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional

PLACEHOLDER = "N/A"

# Card text is a single line; longer descriptions are shortened.
MAX_TEXT_CHARS = 110

# ── Declarative field configuration ───────────────────────────────────────────

# (payload key, display label), rendered in this order
ATTRIBUTE_FIELDS: tuple[tuple[str, str], ...] = (
    ("make", "Make"),
    ("model", "Model"),
    ("year", "Year"),
    ("trim", "Trim"),
    ("body", "Body"),
    ("engine", "Engine"),
)

OWNERSHIP_FIELDS: tuple[tuple[str, str], ...] = (
    ("totalOwners", "Total owners"),
    ("lastOdometer", "Last odometer"),
    ("lastState", "Last registered in"),
)

# Alias lists: first key holding a value wins
IDENTITY_KEYS = ("vin", "VIN")
OWNERSHIP_KEYS = ("ownership", "ownerHistory")
ACCIDENT_KEYS = ("accidentRecords", "accidents")
SERVICE_KEYS = ("serviceRecords", "serviceHistory")

# Envelope keys some provider responses wrap the report in
_ENVELOPE_KEYS = ("data", "report")

# Typographic characters outside Latin-1 that providers like to emit
_ASCII_FOLD = {
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2026": "...", "\u00a0": " ",
    "\u2022": "*",
}
_WS = _re.compile(r"\s+")


# ── Value helpers ─────────────────────────────────────────────────────────────


def _clean(text: str) -> str:
    for src, dst in _ASCII_FOLD.items():
        text = text.replace(src, dst)
    return _WS.sub(" ", text).strip()


def _display(value: Any) -> Optional[str]:
    """Display string for a scalar, or None when the value counts as absent."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float, str)):
        text = _clean(str(value))
        return text or None
    if isinstance(value, (list, tuple)):
        parts = [p for p in map(_display, value) if p]
        return ", ".join(parts) or None
    return None


def _thousands(text: str) -> str:
    try:
        return f"{int(float(text.replace(',', ''))):,}"
    except (ValueError, OverflowError):
        return text


def _short(text: str, limit: int = MAX_TEXT_CHARS) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def field(
    data: Any,
    *keys: str,
    default: str = PLACEHOLDER,
    fmt: Optional[Callable[[str], str]] = None,
) -> str:
    """Return the display value of the first present key, else ``default``.

    Never raises: non-mapping ``data``, nested objects and empty strings
    all resolve to ``default``.
    """
    if not isinstance(data, Mapping):
        return default
    for key in keys:
        text = _display(data.get(key))
        if text is not None:
            return fmt(text) if fmt else text
    return default


def _first_mapping(data: Mapping, keys: tuple[str, ...]) -> Mapping:
    for key in keys:
        value = data.get(key)
        if isinstance(value, Mapping):
            return value
    return {}


def _records(data: Mapping, keys: tuple[str, ...]) -> list[Mapping]:
    """Records under the first alias holding a list; other shapes are skipped."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, (list, tuple)):
            return [item for item in value if isinstance(item, Mapping)]
    return []


def _unwrap(payload: Mapping) -> Mapping:
    """Descend into a ``data``/``report`` envelope when the top level has no report keys."""
    known = {k for k, _ in ATTRIBUTE_FIELDS}
    known.update(OWNERSHIP_KEYS + ACCIDENT_KEYS + SERVICE_KEYS)
    if known & set(payload):
        return payload
    for key in _ENVELOPE_KEYS:
        inner = payload.get(key)
        if isinstance(inner, Mapping):
            merged = dict(inner)
            # identifiers sitting next to the envelope still apply
            for ik in IDENTITY_KEYS:
                if ik in payload:
                    merged.setdefault(ik, payload[ik])
            return merged
    return payload


# ── Model ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AccidentRecord:
    date: str
    description: str


@dataclass(frozen=True)
class ServiceRecord:
    date: str
    service: str


@dataclass(frozen=True)
class ReportModel:
    identity: str
    attributes: tuple[tuple[str, str], ...]
    ownership: tuple[tuple[str, str], ...]
    accidents: tuple[AccidentRecord, ...]
    services: tuple[ServiceRecord, ...]
    raw: Any

    @classmethod
    def from_payload(cls, payload: Any) -> "ReportModel":
        """Build the model from a raw provider payload (may be None or garbage)."""
        raw = copy.deepcopy(payload) if payload is not None else {}
        data = _unwrap(payload) if isinstance(payload, Mapping) else {}

        ownership_src = _first_mapping(data, OWNERSHIP_KEYS)
        ownership = tuple(
            (label, field(ownership_src, key, fmt=_thousands if key == "lastOdometer" else None))
            for key, label in OWNERSHIP_FIELDS
        )

        accidents = tuple(
            AccidentRecord(
                date=field(r, "date"),
                description=_short(field(r, "description")),
            )
            for r in _records(data, ACCIDENT_KEYS)
        )
        services = tuple(
            ServiceRecord(
                date=field(r, "date"),
                service=_short(field(r, "service", "description")),
            )
            for r in _records(data, SERVICE_KEYS)
        )

        return cls(
            identity=field(data, *IDENTITY_KEYS),
            attributes=tuple(
                (label, field(data, key, fmt=_short)) for key, label in ATTRIBUTE_FIELDS
            ),
            ownership=ownership,
            accidents=accidents,
            services=services,
            raw=raw,
        )
