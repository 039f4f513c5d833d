"""Commands for controlling PipeWire and the interface for sending them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence, Union

from wiremix.object_id import ObjectId


@dataclass(frozen=True)
class NodeMute:
    obj_id: ObjectId
    mute: bool


@dataclass(frozen=True)
class DeviceMute:
    obj_id: ObjectId
    route_index: int
    route_device: int
    mute: bool


@dataclass(frozen=True)
class NodeVolumes:
    obj_id: ObjectId
    volumes: tuple[float, ...]


@dataclass(frozen=True)
class DeviceVolumes:
    obj_id: ObjectId
    route_index: int
    route_device: int
    volumes: tuple[float, ...]


@dataclass(frozen=True)
class DeviceSetRoute:
    obj_id: ObjectId
    route_index: int
    route_device: int


@dataclass(frozen=True)
class DeviceSetProfile:
    obj_id: ObjectId
    profile_index: int


@dataclass(frozen=True)
class NodeCaptureStart:
    obj_id: ObjectId
    object_serial: int
    capture_sink: bool


@dataclass(frozen=True)
class NodeCaptureStop:
    obj_id: ObjectId


@dataclass(frozen=True)
class MetadataSetProperty:
    obj_id: ObjectId
    subject: int
    key: str
    type_: str | None
    value: str | None


Command = Union[
    NodeMute,
    DeviceMute,
    NodeVolumes,
    DeviceVolumes,
    DeviceSetRoute,
    DeviceSetProfile,
    NodeCaptureStart,
    NodeCaptureStop,
    MetadataSetProperty,
]


class CommandSender(ABC):
    """Something that PipeWire control commands can be sent to."""

    @abstractmethod
    def node_capture_start(self, obj_id: ObjectId, object_serial: int, capture_sink: bool) -> None:
        """Start capturing peak levels for a node."""

    @abstractmethod
    def node_capture_stop(self, obj_id: ObjectId) -> None:
        """Stop capturing peak levels for a node."""

    @abstractmethod
    def node_mute(self, obj_id: ObjectId, mute: bool) -> None:
        """Mute or unmute a node."""

    @abstractmethod
    def node_volumes(self, obj_id: ObjectId, volumes: Sequence[float]) -> None:
        """Set the volumes of a node's channels."""

    @abstractmethod
    def device_mute(
        self, obj_id: ObjectId, route_index: int, route_device: int, mute: bool
    ) -> None:
        """Mute or unmute a device route."""

    @abstractmethod
    def device_set_profile(self, obj_id: ObjectId, profile_index: int) -> None:
        """Change a device's profile."""

    @abstractmethod
    def device_set_route(self, obj_id: ObjectId, route_index: int, route_device: int) -> None:
        """Change a device's route."""

    @abstractmethod
    def device_volumes(
        self,
        obj_id: ObjectId,
        route_index: int,
        route_device: int,
        volumes: Sequence[float],
    ) -> None:
        """Set the volumes of a device route's channels."""

    @abstractmethod
    def metadata_set_property(
        self,
        obj_id: ObjectId,
        subject: int,
        key: str,
        type_: str | None,
        value: str | None,
    ) -> None:
        """Set a metadata property; a None value clears the key."""


class QueueCommandSender(CommandSender):
    """Sends commands by putting them on a queue for another thread."""

    def __init__(self, queue: Any) -> None:
        self._queue = queue

    def _send(self, command: Command) -> None:
        self._queue.put(command)

    def node_capture_start(self, obj_id: ObjectId, object_serial: int, capture_sink: bool) -> None:
        self._send(NodeCaptureStart(obj_id, object_serial, capture_sink))

    def node_capture_stop(self, obj_id: ObjectId) -> None:
        self._send(NodeCaptureStop(obj_id))

    def node_mute(self, obj_id: ObjectId, mute: bool) -> None:
        self._send(NodeMute(obj_id, mute))

    def node_volumes(self, obj_id: ObjectId, volumes: Sequence[float]) -> None:
        self._send(NodeVolumes(obj_id, tuple(volumes)))

    def device_mute(
        self, obj_id: ObjectId, route_index: int, route_device: int, mute: bool
    ) -> None:
        self._send(DeviceMute(obj_id, route_index, route_device, mute))

    def device_set_profile(self, obj_id: ObjectId, profile_index: int) -> None:
        self._send(DeviceSetProfile(obj_id, profile_index))

    def device_set_route(self, obj_id: ObjectId, route_index: int, route_device: int) -> None:
        self._send(DeviceSetRoute(obj_id, route_index, route_device))

    def device_volumes(
        self,
        obj_id: ObjectId,
        route_index: int,
        route_device: int,
        volumes: Sequence[float],
    ) -> None:
        self._send(DeviceVolumes(obj_id, route_index, route_device, tuple(volumes)))

    def metadata_set_property(
        self,
        obj_id: ObjectId,
        subject: int,
        key: str,
        type_: str | None,
        value: str | None,
    ) -> None:
        self._send(MetadataSetProperty(obj_id, subject, key, type_, value))