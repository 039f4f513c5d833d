"""A view of PipeWire state arranged for rendering, with control commands."""

from __future__ import annotations

import json
import math
from typing import Optional

from wiremix import media_class
from wiremix import state as st
from wiremix.command import CommandSender
from wiremix.object_id import ObjectId
from wiremix.view_model import (
    DefaultTarget,
    Device,
    DeviceKind,
    ListKind,
    NameResolver,
    Node,
    NodeKind,
    NodeTarget,
    ProfileTarget,
    RouteTarget,
    Target,
    TargetList,
    VolumeAdjustment,
    default_for,
    device_from_state,
    node_from_state,
)


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _title(item: tuple[Target, str]) -> str:
    return item[1]


def _find_named(state: st.State, name: Optional[str]) -> Optional[Target]:
    if name is None:
        return None
    for node in state.nodes.values():
        if node.props.node_name == name:
            return NodeTarget(node.object_id)
    return None


class View:
    """PipeWire state transformed into lists convenient for rendering.

    Build one from scratch with :meth:`from_state`; refresh only the peaks
    with :meth:`update_peaks`. Control methods send commands to ``wirehose``.
    """

    def __init__(self, wirehose: CommandSender) -> None:
        self._wirehose = wirehose
        self.nodes: dict[ObjectId, Node] = {}
        self.devices: dict[ObjectId, Device] = {}
        self.nodes_all: list[ObjectId] = []
        self.nodes_playback: list[ObjectId] = []
        self.nodes_recording: list[ObjectId] = []
        self.nodes_output: list[ObjectId] = []
        self.nodes_input: list[ObjectId] = []
        self.devices_all: list[ObjectId] = []
        self.sinks: TargetList = []
        self.sources: TargetList = []
        self.default_sink: Optional[Target] = None
        self.default_source: Optional[Target] = None
        self.metadata_id: Optional[ObjectId] = None

    @classmethod
    def from_state(
        cls, wirehose: CommandSender, state: st.State, names: NameResolver
    ) -> View:
        """Create a view from scratch from the given state."""
        view = cls(wirehose)

        default_sink_name = default_for(state, "default.audio.sink")
        default_source_name = default_for(state, "default.audio.source")
        view.default_sink = _find_named(state, default_sink_name)
        view.default_source = _find_named(state, default_source_name)

        sinks: TargetList = []
        sources: TargetList = []
        for node in state.nodes.values():
            mc = node.props.media_class
            if mc is None:
                continue
            if media_class.is_sink(mc):
                title = names.resolve(state, node)
                if title is not None:
                    sinks.append((NodeTarget(node.object_id), title))
            if media_class.is_source(mc):
                title = names.resolve(state, node)
                if title is not None:
                    sources.append((NodeTarget(node.object_id), title))
            elif media_class.is_sink(mc):
                title = names.resolve(state, node)
                if title is not None:
                    sources.append((NodeTarget(node.object_id), f"Monitor of {title}"))
        view.sinks = sorted(sinks, key=_title)
        view.sources = sorted(sources, key=_title)

        for state_node in state.nodes.values():
            node = node_from_state(
                state,
                names,
                view.sources,
                view.sinks,
                default_sink_name,
                default_source_name,
                state_node,
            )
            if node is not None:
                view.nodes[node.object_id] = node

        for state_device in state.devices.values():
            device = device_from_state(state, state_device, names)
            if device is not None:
                view.devices[device.object_id] = device

        for node in sorted(view.nodes.values(), key=lambda n: n.object_serial):
            view.nodes_all.append(node.object_id)
            if media_class.is_sink_input(node.media_class):
                view.nodes_playback.append(node.object_id)
            if media_class.is_source_output(node.media_class):
                view.nodes_recording.append(node.object_id)
            if media_class.is_sink(node.media_class):
                view.nodes_output.append(node.object_id)
            if media_class.is_source(node.media_class):
                view.nodes_input.append(node.object_id)

        view.devices_all = [
            device.object_id
            for device in sorted(view.devices.values(), key=lambda d: d.object_serial)
        ]
        view.metadata_id = state.metadatas_by_name.get("default")
        return view

    def update_peaks(self, state: st.State) -> None:
        """Copy just the peaks from the state into the existing nodes."""
        for state_node in state.nodes.values():
            node = self.nodes.get(state_node.object_id)
            if node is None:
                continue
            node.peaks = list(state_node.peaks) if state_node.peaks is not None else None

    def set_default(self, node_id: ObjectId, device_kind: DeviceKind) -> None:
        """Make a node the default source or sink."""
        node = self.nodes.get(node_id)
        if node is None or self.metadata_id is None:
            return
        if device_kind is DeviceKind.SOURCE:
            key = "default.configured.audio.source"
        else:
            key = "default.configured.audio.sink"
        value = json.dumps({"name": node.name}, separators=(",", ":"), ensure_ascii=False)
        self._wirehose.metadata_set_property(
            self.metadata_id, 0, key, "Spa:String:JSON", value
        )

    def set_target(self, node_id: ObjectId, target: Target) -> None:
        """Direct a node (or device) at the given target."""
        if self.metadata_id is None:
            return
        subject = int(node_id)
        if isinstance(target, DefaultTarget):
            self._wirehose.metadata_set_property(
                self.metadata_id, subject, "target.object", "Spa:Id", "-1"
            )
            self._wirehose.metadata_set_property(
                self.metadata_id, subject, "target.node", "Spa:Id", "-1"
            )
        elif isinstance(target, NodeTarget):
            self._wirehose.metadata_set_property(
                self.metadata_id, subject, "target.object", None, None
            )
            self._wirehose.metadata_set_property(
                self.metadata_id, subject, "target.node", "Spa:Id", str(target.object_id)
            )
        elif isinstance(target, RouteTarget):
            self._wirehose.device_set_route(
                target.device_id, target.route_index, target.route_device
            )
        elif isinstance(target, ProfileTarget):
            self._wirehose.device_set_profile(target.device_id, target.profile_index)
        else:
            raise TypeError(f"unsupported target: {target!r}")

    def mute(self, node_id: ObjectId) -> None:
        """Toggle the mute status of a node."""
        node = self.nodes.get(node_id)
        if node is None:
            return
        mute = not node.mute
        if node.device_info is not None:
            device_id, route_index, route_device = node.device_info
            self._wirehose.device_mute(device_id, route_index, route_device, mute)
        else:
            self._wirehose.node_mute(node_id, mute)

    def volume(
        self,
        node_id: ObjectId,
        adjustment: VolumeAdjustment,
        max: Optional[float] = None,
    ) -> bool:
        """Change a node's volume; return True if a change was sent.

        With ``max`` (a percentage) no change is made that would exceed it.
        """
        node = self.nodes.get(node_id)
        if node is None or not node.volumes:
            return False

        if adjustment.relative:
            avg = sum(node.volumes) / len(node.volumes)
            level = _cbrt(avg) + adjustment.amount
        else:
            level = adjustment.amount
        level = level if level > 0.0 else 0.0
        volumes = [level**3] * len(node.volumes)

        if max is not None and any(
            _round_half_away(_cbrt(volume) * 100.0) > max for volume in volumes
        ):
            return False

        if node.device_info is not None:
            device_id, route_index, route_device = node.device_info
            self._wirehose.device_volumes(device_id, route_index, route_device, volumes)
        else:
            self._wirehose.node_volumes(node_id, volumes)
        return True

    def _object_ids(self, list_kind: ListKind) -> list[ObjectId]:
        if list_kind.is_device():
            return self.devices_all
        return {
            NodeKind.PLAYBACK: self.nodes_playback,
            NodeKind.RECORDING: self.nodes_recording,
            NodeKind.OUTPUT: self.nodes_output,
            NodeKind.INPUT: self.nodes_input,
            NodeKind.ALL: self.nodes_all,
        }[list_kind.node_kind]

    def full_nodes(self, node_kind: NodeKind) -> list[Node]:
        """Return all nodes of a kind, in display order."""
        ids = self._object_ids(ListKind.node(node_kind))
        return [self.nodes[i] for i in ids if i in self.nodes]

    def full_devices(self) -> list[Device]:
        """Return all devices, in display order."""
        return [self.devices[i] for i in self.devices_all if i in self.devices]

    def next_id(
        self, list_kind: ListKind, object_id: Optional[ObjectId]
    ) -> Optional[ObjectId]:
        """Return the object after ``object_id``, or the first if it is None."""
        objects = self._object_ids(list_kind)
        if object_id is None:
            index = 0
        else:
            try:
                index = objects.index(object_id) + 1
            except ValueError:
                return None
        return objects[index] if index < len(objects) else None

    def previous_id(
        self, list_kind: ListKind, object_id: Optional[ObjectId]
    ) -> Optional[ObjectId]:
        """Return the object before ``object_id``; the first stays first."""
        objects = self._object_ids(list_kind)
        if object_id is None:
            index = 0
        else:
            try:
                index = objects.index(object_id)
            except ValueError:
                return None
            index = index - 1 if index > 0 else 0
        return objects[index] if index < len(objects) else None

    def position(self, list_kind: ListKind, object_id: ObjectId) -> Optional[int]:
        """Return the index of an object in a list, or None."""
        try:
            return self._object_ids(list_kind).index(object_id)
        except ValueError:
            return None

    def length(self, list_kind: ListKind) -> int:
        """Return the number of objects in a list."""
        return len(self._object_ids(list_kind))

    def node_targets(self, node_id: ObjectId) -> Optional[tuple[TargetList, int]]:
        """Return a node's possible targets and the index of its current one."""
        node = self.nodes.get(node_id)
        if node is None:
            return None

        is_stream = media_class.is_sink_input(node.media_class) or media_class.is_source_output(
            node.media_class
        )
        default: Optional[Target] = None
        if node.routes is not None:
            targets = list(node.routes)
        elif media_class.is_sink_input(node.media_class):
            targets, default = list(self.sinks), self.default_sink
        elif media_class.is_source_output(node.media_class):
            targets, default = list(self.sources), self.default_source
        else:
            targets = []

        default_name = "Default: No default"
        if default is not None:
            default_name = next(
                (f"Default: {name}" for target, name in targets if target == default),
                default_name,
            )
        targets.sort(key=_title)
        if is_stream:
            targets.insert(0, (DefaultTarget(), default_name))

        selected = 0
        if node.target is not None:
            selected = next(
                (i for i, (target, _) in enumerate(targets) if target == node.target), 0
            )
        return targets, selected

    def device_targets(self, device_id: ObjectId) -> Optional[tuple[TargetList, int]]:
        """Return a device's profiles and the index of its current one."""
        device = self.devices.get(device_id)
        if device is None:
            return None
        targets = list(device.profiles)
        selected = 0
        if device.target is not None:
            selected = next(
                (i for i, (target, _) in enumerate(targets) if target == device.target), 0
            )
        return targets, selected