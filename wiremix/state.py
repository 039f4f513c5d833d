"""In-memory representation of PipeWire state, maintained from events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from wiremix import event as ev
from wiremix import media_class
from wiremix.command import Command, CommandSender, NodeCaptureStart, NodeCaptureStop
from wiremix.object_id import ObjectId
from wiremix.property_store import PropertyStore

PeakProcessor = Callable[[float, float, int, int], float]
"""Processes peaks for effects like ballistics.

Called as ``processor(current_peak, new_peak, rate, samples)`` and returns
the peak to store.
"""


@dataclass
class Profile:
    index: int
    description: str
    available: bool
    classes: list[tuple[str, list[int]]]


@dataclass
class EnumRoute:
    index: int
    description: str
    available: bool
    profiles: list[int]
    devices: list[int]


@dataclass
class Route:
    index: int
    device: int
    profiles: list[int]
    description: str
    available: bool
    volumes: list[float]
    mute: bool


@dataclass
class Device:
    object_id: ObjectId = field(default_factory=ObjectId)
    props: PropertyStore = field(default_factory=PropertyStore)
    profile_index: Optional[int] = None
    profiles: dict[int, Profile] = field(default_factory=dict)
    routes: dict[int, Route] = field(default_factory=dict)
    enum_routes: dict[int, EnumRoute] = field(default_factory=dict)


@dataclass
class Client:
    object_id: ObjectId = field(default_factory=ObjectId)
    props: PropertyStore = field(default_factory=PropertyStore)


@dataclass
class Node:
    object_id: ObjectId = field(default_factory=ObjectId)
    props: PropertyStore = field(default_factory=PropertyStore)
    volumes: Optional[list[float]] = None
    mute: Optional[bool] = None
    peaks: Optional[list[float]] = None
    rate: Optional[int] = None
    positions: Optional[list[int]] = None

    def update_peaks(
        self,
        peaks: Sequence[float],
        samples: int,
        peak_processor: Optional[PeakProcessor] = None,
    ) -> None:
        """Update peaks, optionally through a processor for ballistics.

        Nothing happens until the node's sample rate is known.
        """
        if self.rate is None:
            return
        current = self.peaks if self.peaks is not None else []
        if len(current) != len(peaks):
            current = [0.0] * len(peaks)
        if peak_processor is None:
            self.peaks = list(peaks)
        else:
            self.peaks = [
                peak_processor(old, new, self.rate, samples)
                for old, new in zip(current, peaks)
            ]


@dataclass
class Link:
    output_id: ObjectId
    input_id: ObjectId


@dataclass
class Metadata:
    object_id: ObjectId = field(default_factory=ObjectId)
    metadata_name: Optional[str] = None
    properties: dict[int, dict[str, str]] = field(default_factory=dict)


class State:
    """PipeWire state, built up from state events.

    Besides tracking state, :meth:`update` decides when peak capture streams
    should start and stop, because single events lack the context for that.
    """

    def __init__(self) -> None:
        self.clients: dict[ObjectId, Client] = {}
        self.nodes: dict[ObjectId, Node] = {}
        self.devices: dict[ObjectId, Device] = {}
        self.links: dict[ObjectId, Link] = {}
        self.metadatas: dict[ObjectId, Metadata] = {}
        self.metadatas_by_name: dict[str, ObjectId] = {}
        self._peak_processor: Optional[PeakProcessor] = None
        self._capturing: Optional[set[ObjectId]] = None

    def with_peak_processor(self, peak_processor: PeakProcessor) -> State:
        """Use a peak processor when setting peak levels."""
        self._peak_processor = peak_processor
        return self

    def with_capture(self, enable: bool) -> State:
        """Enable or disable stream capture management."""
        self._capturing = set() if enable else None
        return self

    def update(self, wirehose: CommandSender, event: ev.StateEvent) -> None:
        """Apply an event and start or stop captures as needed."""
        commands: list[Optional[Command]] = []

        match event:
            case ev.ClientProperties(object_id, props):
                self._client_entry(object_id).props = props
            case ev.DeviceProperties(object_id, props):
                self._device_entry(object_id).props = props
            case ev.DeviceEnumProfile(object_id, index, description, available, classes):
                self._device_entry(object_id).profiles[index] = Profile(
                    index, description, available, classes
                )
            case ev.DeviceProfile(object_id, index):
                self._device_entry(object_id).profile_index = index
            case ev.DeviceRoute(
                object_id, index, device, profiles, description, available, volumes, mute
            ):
                self._device_entry(object_id).routes[device] = Route(
                    index, device, profiles, description, available, volumes, mute
                )
            case ev.DeviceEnumRoute(object_id, index, description, available, profiles, devices):
                self._device_entry(object_id).enum_routes[index] = EnumRoute(
                    index, description, available, profiles, devices
                )
            case ev.NodeProperties(object_id, props):
                node = self._node_entry(object_id)
                node.props = props
                commands.append(self._on_node(node))
            case ev.NodeMute(object_id, mute):
                self._node_entry(object_id).mute = mute
            case ev.NodePeaks(object_id, peaks, samples):
                self._node_entry(object_id).update_peaks(
                    peaks, samples, self._peak_processor
                )
            case ev.NodeRate(object_id, rate):
                self._node_entry(object_id).rate = rate
            case ev.NodePositions(object_id, positions):
                node = self.nodes.get(object_id)
                if node is not None and node.positions is not None and node.positions != positions:
                    commands.append(self._on_positions_changed(node))
                self._node_entry(object_id).positions = positions
            case ev.NodeVolumes(object_id, volumes):
                self._node_entry(object_id).volumes = volumes
            case ev.Link(object_id, output_id, input_id):
                if output_id not in self.inputs(input_id):
                    node = self.nodes.get(input_id)
                    if node is not None:
                        commands.append(self._on_link(node))
                self.links[object_id] = Link(output_id, input_id)
            case ev.MetadataMetadataName(object_id, metadata_name):
                self._metadata_entry(object_id).metadata_name = metadata_name
                self.metadatas_by_name[metadata_name] = object_id
            case ev.MetadataProperty(object_id, subject, key, value):
                properties = self._metadata_entry(object_id).properties.setdefault(subject, {})
                if key is None:
                    properties.clear()
                elif value is None:
                    properties.pop(key, None)
                else:
                    properties[key] = value
            case ev.StreamStopped(object_id):
                # The node has likely been removed already.
                node = self.nodes.get(object_id)
                if node is not None:
                    node.peaks = None
            case ev.Removed(object_id):
                link = self.links.pop(object_id, None)
                if link is not None and len(self.inputs(link.input_id)) == 1:
                    node = self.nodes.get(link.input_id)
                    if node is not None:
                        commands.append(self._on_removed(node))

                self.devices.pop(object_id, None)
                self.clients.pop(object_id, None)
                node = self.nodes.pop(object_id, None)
                if node is not None:
                    commands.append(self._on_removed(node))

                metadata = self.metadatas.pop(object_id, None)
                if metadata is not None and metadata.metadata_name is not None:
                    self.metadatas_by_name.pop(metadata.metadata_name, None)
            case _:
                raise TypeError(f"unsupported state event: {event!r}")

        if self._capturing is None:
            return
        for command in commands:
            if isinstance(command, NodeCaptureStart):
                self._capturing.add(command.obj_id)
                wirehose.node_capture_start(
                    command.obj_id, command.object_serial, command.capture_sink
                )
            elif isinstance(command, NodeCaptureStop):
                self._capturing.discard(command.obj_id)
                wirehose.node_capture_stop(command.obj_id)

    def get_metadata_by_name(self, metadata_name: str) -> Optional[Metadata]:
        """Return the metadata object registered under a name, if any."""
        object_id = self.metadatas_by_name.get(metadata_name)
        if object_id is None:
            return None
        return self.metadatas.get(object_id)

    def outputs(self, object_id: ObjectId) -> list[ObjectId]:
        """Return the objects that the given object outputs to."""
        return [link.input_id for link in self.links.values() if link.output_id == object_id]

    def inputs(self, object_id: ObjectId) -> list[ObjectId]:
        """Return the objects that input to the given object."""
        return [link.output_id for link in self.links.values() if link.input_id == object_id]

    def _client_entry(self, object_id: ObjectId) -> Client:
        return self.clients.setdefault(object_id, Client(object_id))

    def _node_entry(self, object_id: ObjectId) -> Node:
        return self.nodes.setdefault(object_id, Node(object_id))

    def _device_entry(self, object_id: ObjectId) -> Device:
        return self.devices.setdefault(object_id, Device(object_id))

    def _metadata_entry(self, object_id: ObjectId) -> Metadata:
        return self.metadatas.setdefault(object_id, Metadata(object_id))

    def _on_node(self, node: Node) -> Optional[Command]:
        """A node's capture eligibility might have changed."""
        if self._capturing is None:
            return None
        mc = node.props.media_class
        if mc is None or not (
            media_class.is_source(mc)
            or media_class.is_sink_input(mc)
            or media_class.is_source_output(mc)
        ):
            return None
        if node.props.object_serial is None:
            return None
        if node.object_id in self._capturing:
            return None
        return self._start_capture_command(node)

    def _on_link(self, node: Node) -> Optional[Command]:
        """A node got a new input link."""
        if self._capturing is None:
            return None
        mc = node.props.media_class
        if mc is None or not (
            media_class.is_sink(mc)
            or media_class.is_source(mc)
            or media_class.is_sink_input(mc)
            or media_class.is_source_output(mc)
        ):
            return None
        return self._start_capture_command(node)

    def _on_positions_changed(self, node: Node) -> Optional[Command]:
        if self._capturing is None or node.object_id not in self._capturing:
            return None
        return self._start_capture_command(node)

    def _on_removed(self, node: Node) -> Optional[Command]:
        if self._capturing is None:
            return None
        return NodeCaptureStop(node.object_id)

    def _start_capture_command(self, node: Node) -> Optional[Command]:
        if self._capturing is None:
            return None
        object_serial = node.props.object_serial
        if object_serial is None:
            return None
        mc = node.props.media_class
        capture_sink = mc is not None and (media_class.is_sink(mc) or media_class.is_source(mc))
        return NodeCaptureStart(node.object_id, object_serial, capture_sink)