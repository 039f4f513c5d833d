"""Typed storage for the "info.props" properties of PipeWire objects."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Union

from wiremix.object_id import ObjectId


class _Kind(Enum):
    STRING = "String"
    BOOL = "bool"
    U32 = "u32"
    U64 = "u64"
    I32 = "i32"
    OBJECT_ID = "ObjectId"


_S = _Kind.STRING
_B = _Kind.BOOL
_U32 = _Kind.U32
_U64 = _Kind.U64
_I32 = _Kind.I32
_ID = _Kind.OBJECT_ID

_PROPERTIES: dict[str, _Kind] = {
    # Key used by wireplumber
    "card.profile.device": _I32,
    # Standard PipeWire keys
    "pipewire.protocol": _S,
    "pipewire.access": _S,
    "pipewire.client.access": _S,
    "pipewire.sec.pid": _I32,
    "pipewire.sec.uid": _U32,
    "pipewire.sec.gid": _U32,
    "pipewire.sec.label": _S,
    "pipewire.sec.socket": _S,
    "pipewire.sec.engine": _S,
    "pipewire.sec.app-id": _S,
    "pipewire.sec.instance-id": _S,
    "library.name.system": _S,
    "library.name.loop": _S,
    "library.name.dbus": _S,
    "object.path": _S,
    "object.id": _ID,
    "object.serial": _U64,
    "object.linger": _B,
    "object.register": _B,
    "object.export": _B,
    "config.prefix": _S,
    "config.name": _S,
    "config.override.prefix": _S,
    "config.override.name": _S,
    "loop.name": _S,
    "loop.class": _S,
    "loop.rt-prio": _I32,
    "loop.cancel": _B,
    "context.user-name": _S,
    "context.host-name": _S,
    "core.name": _S,
    "core.version": _S,
    "core.daemon": _B,
    "cpu.max-align": _U32,
    "priority.session": _I32,
    "priority.driver": _I32,
    "remote.name": _S,
    "remote.intention": _S,
    "application.name": _S,
    "application.id": _S,
    "application.version": _S,
    "application.icon": _S,
    "application.icon-name": _S,
    "application.language": _S,
    "application.process.id": _U64,
    "application.process.binary": _S,
    "application.process.user": _S,
    "application.process.host": _S,
    "application.process.machine-id": _S,
    "application.process.session-id": _ID,
    "window.x11.display": _S,
    "client.id": _ID,
    "client.name": _S,
    "client.api": _S,
    "node.id": _ID,
    "node.name": _S,
    "node.nick": _S,
    "node.description": _S,
    "node.plugged": _U64,
    "node.session": _ID,
    "node.group": _S,
    "node.sync-group": _S,
    "node.sync": _B,
    "node.transport": _B,
    "node.exclusive": _B,
    "node.autoconnect": _B,
    "node.latency": _S,
    "node.max-latency": _S,
    "node.lock-quantum": _B,
    "node.force-quantum": _U32,
    "node.rate": _S,
    "node.lock-rate": _B,
    "node.force-rate": _U32,
    "node.dont-reconnect": _B,
    "node.always-process": _B,
    "node.want-driver": _B,
    "node.pause-on-idle": _B,
    "node.suspend-on-idle": _B,
    "node.cache-params": _B,
    "node.transport.sync": _B,
    "node.driver": _B,
    "node.driver-id": _ID,
    "node.async": _B,
    "node.loop.name": _S,
    "node.loop.class": _S,
    "node.stream": _B,
    "node.virtual": _B,
    "node.passive": _B,
    "node.link-group": _S,
    "node.network": _B,
    "node.trigger": _B,
    "node.channel-names": _S,
    "node.device-port-name-prefix": _S,
    "port.id": _ID,
    "port.name": _S,
    "port.direction": _S,
    "port.alias": _S,
    "port.physical": _B,
    "port.terminal": _B,
    "port.control": _B,
    "port.monitor": _B,
    "port.cache-params": _B,
    "port.extra": _S,
    "port.passive": _B,
    "port.ignore-latency": _B,
    "port.group": _S,
    "link.id": _ID,
    "link.input.node": _ID,
    "link.input.port": _ID,
    "link.output.node": _ID,
    "link.output.port": _ID,
    "link.passive": _B,
    "link.feedback": _B,
    "link.async": _B,
    "device.id": _ID,
    "device.name": _S,
    "device.plugged": _U64,
    "device.nick": _S,
    "device.string": _S,
    "device.api": _S,
    "device.description": _S,
    "device.bus-path": _S,
    "device.serial": _S,
    "device.vendor.id": _S,
    "device.vendor.name": _S,
    "device.product.id": _S,
    "device.product.name": _S,
    "device.class": _S,
    "device.form-factor": _S,
    "device.bus": _S,
    "device.subsystem": _S,
    "device.sysfs.path": _S,
    "device.icon": _S,
    "device.icon-name": _S,
    "device.intended-roles": _S,
    "device.cache-params": _B,
    "module.id": _ID,
    "module.name": _S,
    "module.author": _S,
    "module.description": _S,
    "module.usage": _S,
    "module.version": _S,
    "module.deprecated": _S,
    "factory.id": _ID,
    "factory.name": _S,
    "factory.usage": _S,
    "factory.type.name": _S,
    "factory.type.version": _U32,
    "stream.is-live": _B,
    "stream.latency.min": _S,
    "stream.latency.max": _S,
    "stream.monitor": _B,
    "stream.dont-remix": _B,
    "stream.capture.sink": _B,
    "media.type": _S,
    "media.category": _S,
    "media.role": _S,
    "media.class": _S,
    "media.name": _S,
    "media.title": _S,
    "media.artist": _S,
    "media.album": _S,
    "media.copyright": _S,
    "media.software": _S,
    "media.language": _S,
    "media.filename": _S,
    "media.icon": _S,
    "media.icon-name": _S,
    "media.comment": _S,
    "media.date": _S,
    "media.format": _U32,
    "format.dsp": _S,
    "audio.channel": _S,
    "audio.rate": _U32,
    "audio.channels": _U32,
    "audio.format": _S,
    "audio.allowed-rates": _S,
    "target.object": _S,
}

PROPERTY_KEYS: tuple[str, ...] = tuple(_PROPERTIES)

_KEYS_BY_NAME: dict[str, str] = {
    key.replace(".", "_").replace("-", "_"): key for key in _PROPERTIES
}

_INT_RANGES = {
    _U32: (0, 2**32 - 1),
    _U64: (0, 2**64 - 1),
    _I32: (-(2**31), 2**31 - 1),
}
_UNSIGNED = re.compile(r"\+?[0-9]+")
_SIGNED = re.compile(r"[+-]?[0-9]+")

PropertyValue = Union[str, bool, int, ObjectId]


def _parse(kind: _Kind, raw: str) -> PropertyValue:
    if kind is _Kind.STRING:
        return raw
    if kind is _Kind.BOOL:
        if raw == "true":
            return True
        if raw == "false":
            return False
        raise ValueError(f"Failed to parse '{raw}' as '{kind.value}'")
    if kind is _Kind.OBJECT_ID:
        try:
            return ObjectId.parse(raw)
        except ValueError:
            raise ValueError(f"Failed to parse '{raw}' as '{kind.value}'") from None
    low, high = _INT_RANGES[kind]
    pattern = _SIGNED if low < 0 else _UNSIGNED
    if pattern.fullmatch(raw):
        number = int(raw)
        if low <= number <= high:
            return number
    raise ValueError(f"Failed to parse '{raw}' as '{kind.value}'")


def _format(kind: _Kind, value: Any) -> str:
    if kind is _Kind.STRING:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        return value
    if kind is _Kind.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"expected bool, got {type(value).__name__}")
        return "true" if value else "false"
    if kind is _Kind.OBJECT_ID:
        if not isinstance(value, ObjectId):
            raise TypeError(f"expected ObjectId, got {type(value).__name__}")
        return str(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    return str(value)


def parse_property(key: str, raw: str) -> PropertyValue:
    """Parse a raw property value according to the declared type of its key.

    Raises ValueError for unknown keys and for values that do not parse.
    """
    kind = _PROPERTIES.get(key)
    if kind is None:
        raise ValueError(f"Unknown key '{key}'")
    return _parse(kind, raw)


class _Entry(NamedTuple):
    raw: str
    kind: _Kind
    value: PropertyValue


class PropertyStore:
    """The properties of a PipeWire object with typed access.

    Known properties are reachable as attributes named after their key with
    dots and dashes turned into underscores (``store.node_name`` for
    ``node.name``); they are None when missing or when the raw value did not
    parse as the declared type. :meth:`raw` gives any property unparsed.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    @classmethod
    def from_dict(cls, items: Mapping[str, str] | Iterable[tuple[str, str]]) -> PropertyStore:
        """Build a store from raw key/value strings."""
        store = cls()
        for key, raw in dict(items).items():
            try:
                entry = _Entry(raw, _PROPERTIES[key], parse_property(key, raw))
            except ValueError:
                entry = _Entry(raw, _Kind.STRING, raw)
            store._entries[key] = entry
        return store

    def raw(self, key: str) -> str | None:
        """Return the unparsed string value of any property."""
        entry = self._entries.get(key)
        return entry.raw if entry is not None else None

    def get(self, key: str) -> PropertyValue | None:
        """Return the parsed value of a known property, or None."""
        kind = _PROPERTIES.get(key)
        if kind is None:
            raise KeyError(key)
        entry = self._entries.get(key)
        if entry is None or entry.kind is not kind:
            return None
        return entry.value

    def set(self, key: str, value: PropertyValue) -> None:
        """Store a typed value for a known property."""
        kind = _PROPERTIES.get(key)
        if kind is None:
            raise KeyError(key)
        raw = _format(kind, value)
        self._entries[key] = _Entry(raw, kind, _parse(kind, raw))

    def __getattr__(self, name: str) -> PropertyValue | None:
        if name.startswith("_"):
            raise AttributeError(name)
        key = _KEYS_BY_NAME.get(name)
        if key is None:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyStore):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        raw = {key: entry.raw for key, entry in self._entries.items()}
        return f"PropertyStore({raw!r})"