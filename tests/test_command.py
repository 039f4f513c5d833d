import dataclasses
import queue

import pytest

from wiremix.command import (
    CommandSender,
    DeviceMute,
    DeviceSetProfile,
    DeviceSetRoute,
    DeviceVolumes,
    MetadataSetProperty,
    NodeCaptureStart,
    NodeCaptureStop,
    NodeMute,
    NodeVolumes,
    QueueCommandSender,
)
from wiremix.object_id import ObjectId


@pytest.fixture
def channel():
    q = queue.Queue()
    return q, QueueCommandSender(q)


def test_command_sender_is_abstract():
    with pytest.raises(TypeError):
        CommandSender()


def test_node_commands(channel):
    q, sender = channel
    oid = ObjectId(3)
    sender.node_mute(oid, True)
    sender.node_volumes(oid, [0.5, 0.25])
    sender.node_capture_start(oid, 11, False)
    sender.node_capture_stop(oid)
    assert q.get_nowait() == NodeMute(oid, True)
    assert q.get_nowait() == NodeVolumes(oid, (0.5, 0.25))
    assert q.get_nowait() == NodeCaptureStart(oid, 11, False)
    assert q.get_nowait() == NodeCaptureStop(oid)
    assert q.empty()


def test_device_commands(channel):
    q, sender = channel
    oid = ObjectId(8)
    sender.device_mute(oid, 2, 1, False)
    sender.device_volumes(oid, 2, 1, (0.75,))
    sender.device_set_route(oid, 4, 1)
    sender.device_set_profile(oid, 6)
    assert q.get_nowait() == DeviceMute(oid, 2, 1, False)
    assert q.get_nowait() == DeviceVolumes(oid, 2, 1, (0.75,))
    assert q.get_nowait() == DeviceSetRoute(oid, 4, 1)
    assert q.get_nowait() == DeviceSetProfile(oid, 6)


def test_metadata_set_property(channel):
    q, sender = channel
    sender.metadata_set_property(ObjectId(1), 0, "target.node", "Spa:Id", "-1")
    sender.metadata_set_property(ObjectId(1), 5, "target.object", None, None)
    first = q.get_nowait()
    second = q.get_nowait()
    assert first == MetadataSetProperty(ObjectId(1), 0, "target.node", "Spa:Id", "-1")
    assert (second.type_, second.value) == (None, None)


def test_volumes_are_copied(channel):
    q, sender = channel
    volumes = [0.5]
    sender.node_volumes(ObjectId(2), volumes)
    volumes.append(1.0)
    assert q.get_nowait().volumes == (0.5,)


def test_commands_are_immutable():
    command = NodeMute(ObjectId(1), True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        command.mute = False
    assert command.mute is True
    assert command == NodeMute(ObjectId(1), True)


def test_queue_sender_is_a_command_sender(channel):
    q, sender = channel
    assert isinstance(sender, CommandSender)
    sender.node_capture_stop(ObjectId(4))
    assert q.get_nowait() == NodeCaptureStop(ObjectId(4))