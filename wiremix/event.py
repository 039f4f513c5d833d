"""Events emitted while monitoring PipeWire."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from wiremix.object_id import ObjectId
from wiremix.property_store import PropertyStore


@dataclass
class DeviceEnumRoute:
    object_id: ObjectId
    index: int
    description: str
    available: bool
    profiles: list[int]
    devices: list[int]


@dataclass
class DeviceEnumProfile:
    object_id: ObjectId
    index: int
    description: str
    available: bool
    classes: list[tuple[str, list[int]]]


@dataclass
class DeviceProfile:
    object_id: ObjectId
    index: int


@dataclass
class DeviceProperties:
    object_id: ObjectId
    props: PropertyStore


@dataclass
class DeviceRoute:
    object_id: ObjectId
    index: int
    device: int
    profiles: list[int]
    description: str
    available: bool
    channel_volumes: list[float]
    mute: bool


@dataclass
class MetadataMetadataName:
    object_id: ObjectId
    metadata_name: str


@dataclass
class MetadataProperty:
    object_id: ObjectId
    subject: int
    key: str | None
    value: str | None


@dataclass
class ClientProperties:
    object_id: ObjectId
    props: PropertyStore


@dataclass
class NodePeaks:
    object_id: ObjectId
    peaks: list[float]
    samples: int


@dataclass
class NodePositions:
    object_id: ObjectId
    positions: list[int]


@dataclass
class NodeProperties:
    object_id: ObjectId
    props: PropertyStore


@dataclass
class NodeRate:
    object_id: ObjectId
    rate: int


@dataclass
class NodeVolumes:
    object_id: ObjectId
    volumes: list[float]


@dataclass
class NodeMute:
    object_id: ObjectId
    mute: bool


@dataclass
class Link:
    object_id: ObjectId
    output_id: ObjectId
    input_id: ObjectId

    @classmethod
    def from_link_info(cls, link_id: int, output_node_id: int, input_node_id: int) -> Link:
        """Build a link event from the raw IDs of a link's info."""
        return cls(ObjectId(link_id), ObjectId(output_node_id), ObjectId(input_node_id))


@dataclass
class StreamStopped:
    object_id: ObjectId


@dataclass
class Removed:
    object_id: ObjectId


StateEvent = Union[
    DeviceEnumRoute,
    DeviceEnumProfile,
    DeviceProfile,
    DeviceProperties,
    DeviceRoute,
    MetadataMetadataName,
    MetadataProperty,
    ClientProperties,
    NodePeaks,
    NodePositions,
    NodeProperties,
    NodeRate,
    NodeVolumes,
    NodeMute,
    Link,
    StreamStopped,
    Removed,
]


@dataclass
class StateUpdate:
    """The PipeWire state has changed."""

    event: StateEvent


@dataclass
class ErrorEvent:
    """An error occurred during monitoring."""

    message: str


@dataclass
class Ready:
    """The initial state has been sent; further events are changes."""


Event = Union[StateUpdate, ErrorEvent, Ready]