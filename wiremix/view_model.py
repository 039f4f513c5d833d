"""Rendering-friendly models of PipeWire nodes, devices and their targets."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from wiremix import media_class
from wiremix import state as st
from wiremix.object_id import ObjectId

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class Target:
    """Something a node or device can be directed at."""

    __slots__ = ()


@dataclass(frozen=True)
class NodeTarget(Target):
    """Another node, such as a sink for a playback stream."""

    object_id: ObjectId


@dataclass(frozen=True)
class RouteTarget(Target):
    """A route of a device."""

    device_id: ObjectId
    route_index: int
    route_device: int


@dataclass(frozen=True)
class ProfileTarget(Target):
    """A profile of a device."""

    device_id: ObjectId
    profile_index: int


@dataclass(frozen=True)
class DefaultTarget(Target):
    """Whatever the configured default is."""


TargetList = list[tuple[Target, str]]


@dataclass
class Node:
    """A node prepared for rendering."""

    object_id: ObjectId
    object_serial: int
    name: str
    title: str
    title_source_sink: Optional[str]
    media_class: str
    routes: Optional[TargetList]
    target_title: str
    target: Optional[Target]
    volumes: list[float]
    mute: bool
    peaks: Optional[list[float]] = None
    positions: Optional[list[int]] = None
    # (device_id, route_index, card_device) for device nodes, whose volume and
    # mute status are controlled through the device's active route.
    device_info: Optional[tuple[ObjectId, int, int]] = None
    is_default_sink: bool = False
    is_default_source: bool = False


@dataclass
class Device:
    """A device prepared for rendering."""

    object_id: ObjectId
    object_serial: int
    title: str
    profiles: TargetList = field(default_factory=list)
    target_title: str = ""
    target: Optional[Target] = None


@dataclass(frozen=True)
class VolumeAdjustment:
    """A volume change, either relative to the current volume or absolute."""

    amount: float
    relative: bool = False


class NodeKind(Enum):
    PLAYBACK = "playback"
    RECORDING = "recording"
    OUTPUT = "output"
    INPUT = "input"
    ALL = "all"


class DeviceKind(Enum):
    SOURCE = "source"
    SINK = "sink"


@dataclass(frozen=True)
class ListKind:
    """Which list of objects to show: nodes of some kind, or devices."""

    node_kind: Optional[NodeKind] = None

    @classmethod
    def node(cls, node_kind: NodeKind = NodeKind.ALL) -> ListKind:
        return cls(node_kind)

    @classmethod
    def device(cls) -> ListKind:
        return cls(None)

    def is_node(self) -> bool:
        return self.node_kind is not None

    def is_device(self) -> bool:
        return self.node_kind is None


@dataclass(frozen=True)
class NameResolver:
    """Chooses display titles from the first property present."""

    node_keys: tuple[str, ...] = ("node.description", "node.nick", "node.name")
    device_keys: tuple[str, ...] = ("device.description", "device.nick", "device.name")

    def resolve(self, state: st.State, obj: Union[st.Node, st.Device]) -> Optional[str]:
        """Return a title for a node or device, or None if it has none."""
        keys = self.device_keys if isinstance(obj, st.Device) else self.node_keys
        for key in keys:
            value = obj.props.raw(key)
            if value is not None:
                return value
        return None


def _titled(description: str, available: bool) -> str:
    return description if available else f"{description} (unavailable)"


def _by_title(item: tuple[Target, str]) -> str:
    return item[1]


def route_targets(device: st.Device, media_class: str) -> Optional[TargetList]:
    """Return the routes of a device usable for a media class.

    These are the enumerated routes available in the active profile which
    lead to at least one of that profile's devices for the media class.
    """
    profile_index = device.profile_index
    if profile_index is None:
        return None
    profile = device.profiles.get(profile_index)
    if profile is None:
        return None
    profile_devices = next(
        (devices for mc, devices in profile.classes if mc == media_class), None
    )
    if profile_devices is None:
        return None

    targets: TargetList = []
    for route in device.enum_routes.values():
        if profile_index not in route.profiles:
            continue
        route_device = next((d for d in route.devices if d in profile_devices), None)
        if route_device is None:
            continue
        targets.append(
            (
                RouteTarget(device.object_id, route.index, route_device),
                _titled(route.description, route.available),
            )
        )
    return targets


def active_route(device: st.Device, card_device: int) -> Optional[st.Route]:
    """Return the route for a card device if it belongs to the active profile."""
    profile_index = device.profile_index
    if profile_index is None:
        return None
    route = device.routes.get(card_device)
    if route is None or profile_index not in route.profiles:
        return None
    return route


def _metadata_value(state: st.State, subject: int, key: str) -> Optional[str]:
    metadata = state.get_metadata_by_name("default")
    if metadata is None:
        return None
    return metadata.properties.get(subject, {}).get(key)


def default_for(state: st.State, which: str) -> Optional[str]:
    """Return the node name stored as the default for ``which``."""
    raw = _metadata_value(state, 0, which)
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(value, dict):
        return None
    name = value.get("name")
    return name if isinstance(name, str) else None


def _target_id(state: st.State, node_id: ObjectId, key: str) -> Optional[int]:
    raw = _metadata_value(state, int(node_id), key)
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if not _I64_MIN <= value <= _I64_MAX:
        return None
    return value


def has_target(state: st.State, node_id: ObjectId) -> bool:
    """Return True if a node has an explicit target in the default metadata."""
    for key in ("target.node", "target.object"):
        value = _target_id(state, node_id, key)
        if value is not None and value != -1:
            return True
    return False


def _stream_target(
    state: st.State,
    node_id: ObjectId,
    candidates: Sequence[tuple[Target, str]],
    linked: Sequence[ObjectId],
) -> tuple[Optional[Target], str]:
    found = next(
        (
            (target, title)
            for target, title in candidates
            if isinstance(target, NodeTarget) and target.object_id in linked
        ),
        None,
    )
    if not has_target(state, node_id):
        return DefaultTarget(), found[1] if found is not None else "No default"
    if found is None:
        return None, ""
    return found


def node_from_state(
    state: st.State,
    names: NameResolver,
    sources: Sequence[tuple[Target, str]],
    sinks: Sequence[tuple[Target, str]],
    default_sink_name: Optional[str],
    default_source_name: Optional[str],
    node: st.Node,
) -> Optional[Node]:
    """Build a view node from a state node, or None if it is incomplete."""
    props = node.props
    mc = props.media_class
    if mc is None:
        return None
    title = names.resolve(state, node)
    if title is None:
        return None

    device_id = props.device_id
    device: Optional[st.Device] = None
    card_device: Optional[int] = None
    route: Optional[st.Route] = None
    if device_id is not None:
        device = state.devices.get(device_id)
        card_device = props.card_profile_device
        if device is None or card_device is None:
            return None
        route = active_route(device, card_device)

    device_info: Optional[tuple[ObjectId, int, int]] = None
    if route is not None and device_id is not None and card_device is not None:
        volumes = list(route.volumes)
        mute = route.mute
        device_info = (device_id, route.index, card_device)
    else:
        if node.volumes is None or node.mute is None:
            return None
        volumes = list(node.volumes)
        mute = node.mute

    routes: Optional[TargetList] = None
    target: Optional[Target]
    if device is not None and card_device is not None:
        routes = sorted(route_targets(device, mc) or [], key=_by_title)
        if route is not None:
            target = RouteTarget(device.object_id, route.index, card_device)
            target_title = _titled(route.description, route.available)
        else:
            target, target_title = None, "No route selected"
    elif media_class.is_sink_input(mc):
        target, target_title = _stream_target(
            state, node.object_id, sinks, state.outputs(node.object_id)
        )
    elif media_class.is_source_output(mc):
        target, target_title = _stream_target(
            state, node.object_id, sources, state.inputs(node.object_id)
        )
    else:
        target, target_title = None, "No route selected"

    object_serial = props.object_serial
    name = props.node_name
    if object_serial is None or name is None:
        return None

    return Node(
        object_id=node.object_id,
        object_serial=object_serial,
        name=name,
        title=title,
        title_source_sink=props.media_name,
        media_class=mc,
        routes=routes,
        target_title=target_title,
        target=target,
        volumes=volumes,
        mute=mute,
        peaks=list(node.peaks) if node.peaks is not None else None,
        positions=list(node.positions) if node.positions is not None else None,
        device_info=device_info,
        is_default_sink=default_sink_name == name,
        is_default_source=default_source_name == name,
    )


def device_from_state(
    state: st.State, device: st.Device, names: NameResolver
) -> Optional[Device]:
    """Build a view device from a state device, or None if it is incomplete."""
    title = names.resolve(state, device)
    if title is None:
        return None

    object_id = device.object_id
    profiles: TargetList = [
        (ProfileTarget(object_id, profile.index), _titled(profile.description, profile.available))
        for profile in sorted(device.profiles.values(), key=lambda p: p.index)
    ]

    if device.profile_index is None:
        return None
    target_profile = device.profiles.get(device.profile_index)
    if target_profile is None:
        return None

    object_serial = device.props.object_serial
    if object_serial is None:
        return None

    return Device(
        object_id=object_id,
        object_serial=object_serial,
        title=title,
        profiles=profiles,
        target_title=_titled(target_profile.description, target_profile.available),
        target=ProfileTarget(object_id, device.profile_index),
    )