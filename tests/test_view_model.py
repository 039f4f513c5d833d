import pytest

from wiremix import state as st
from wiremix.object_id import ObjectId
from wiremix.property_store import PropertyStore
from wiremix.view_model import (
    DefaultTarget,
    ListKind,
    NameResolver,
    NodeKind,
    NodeTarget,
    ProfileTarget,
    RouteTarget,
    active_route,
    default_for,
    device_from_state,
    has_target,
    node_from_state,
    route_targets,
)

NAMES = NameResolver()


def make_props(values):
    store = PropertyStore()
    for key, value in values.items():
        store.set(key, value)
    return store


def stream_node(raw_id, mc="Stream/Output/Audio", name="app"):
    return st.Node(
        ObjectId(raw_id),
        make_props(
            {"media.class": mc, "node.name": name, "node.description": name, "object.serial": raw_id}
        ),
        volumes=[0.5, 0.5],
        mute=False,
    )


def add_default_metadata(state, properties):
    metadata_id = ObjectId(1)
    state.metadatas[metadata_id] = st.Metadata(metadata_id, "default", properties)
    state.metadatas_by_name["default"] = metadata_id


@pytest.fixture
def playback_state():
    state = st.State()
    state.nodes[ObjectId(10)] = stream_node(10, "Audio/Sink", "Speakers")
    state.nodes[ObjectId(20)] = stream_node(20)
    state.links[ObjectId(30)] = st.Link(ObjectId(20), ObjectId(10))
    return state


SINKS = [(NodeTarget(ObjectId(10)), "Speakers")]


def make_device():
    device = st.Device(
        ObjectId(5),
        make_props({"device.description": "Card", "object.serial": 5}),
        profile_index=1,
    )
    device.profiles[1] = st.Profile(1, "Analog", True, [("Audio/Sink", [0])])
    device.routes[0] = st.Route(3, 0, [1], "Speakers", False, [0.25], True)
    device.enum_routes[3] = st.EnumRoute(3, "Speakers", False, [1], [0])
    device.enum_routes[4] = st.EnumRoute(4, "Headphones", True, [1], [0])
    device.enum_routes[6] = st.EnumRoute(6, "HDMI", True, [2], [0])
    return device


def device_node(device_id=5):
    return st.Node(
        ObjectId(11),
        make_props(
            {
                "media.class": "Audio/Sink",
                "node.name": "alsa_output",
                "node.description": "Built-in",
                "object.serial": 11,
                "device.id": ObjectId(device_id),
                "card.profile.device": 0,
            }
        ),
    )


def test_list_kind():
    assert ListKind.node(NodeKind.PLAYBACK).is_node()
    assert not ListKind.node(NodeKind.PLAYBACK).is_device()
    assert ListKind.device().is_device()
    assert ListKind() == ListKind.device()
    assert ListKind.node().node_kind is NodeKind.ALL


def test_name_resolver_prefers_description():
    node = stream_node(1, name="app")
    node.props.set("node.description", "Music")
    assert NAMES.resolve(st.State(), node) == "Music"


def test_name_resolver_falls_back_and_handles_missing():
    node = st.Node(ObjectId(1), make_props({"node.name": "raw"}))
    assert NAMES.resolve(st.State(), node) == "raw"
    assert NAMES.resolve(st.State(), st.Node(ObjectId(2))) is None
    assert NAMES.resolve(st.State(), make_device()) == "Card"


def test_stream_without_target_uses_default(playback_state):
    node = node_from_state(
        playback_state, NAMES, [], SINKS, None, None, playback_state.nodes[ObjectId(20)]
    )
    assert node.target == DefaultTarget()
    assert node.target_title == "Speakers"
    assert node.routes is None
    assert node.device_info is None
    assert node.volumes == [0.5, 0.5]


def test_stream_with_explicit_target(playback_state):
    add_default_metadata(playback_state, {20: {"target.node": "10"}})
    node = node_from_state(
        playback_state, NAMES, [], SINKS, None, None, playback_state.nodes[ObjectId(20)]
    )
    assert node.target == NodeTarget(ObjectId(10))
    assert node.target_title == "Speakers"


def test_unlinked_stream_titles():
    state = st.State()
    state.nodes[ObjectId(20)] = stream_node(20)
    node = node_from_state(state, NAMES, [], SINKS, None, None, state.nodes[ObjectId(20)])
    assert node.target_title == "No default"
    add_default_metadata(state, {20: {"target.object": "99"}})
    node = node_from_state(state, NAMES, [], SINKS, None, None, state.nodes[ObjectId(20)])
    assert node.target is None
    assert node.target_title == ""


def test_default_sink_flag(playback_state):
    node = node_from_state(
        playback_state, NAMES, [], SINKS, "Speakers", None, playback_state.nodes[ObjectId(10)]
    )
    assert node.is_default_sink
    assert not node.is_default_source
    assert node.target_title == "No route selected"


def test_stream_without_volumes_is_skipped():
    state = st.State()
    node = stream_node(20)
    node.volumes = None
    assert node_from_state(state, NAMES, [], SINKS, None, None, node) is None


def test_device_node_uses_active_route():
    state = st.State()
    state.devices[ObjectId(5)] = make_device()
    node = node_from_state(state, NAMES, [], [], None, None, device_node())
    assert node.volumes == [0.25]
    assert node.mute is True
    assert node.device_info == (ObjectId(5), 3, 0)
    assert node.target == RouteTarget(ObjectId(5), 3, 0)
    assert node.target_title == "Speakers (unavailable)"
    assert node.routes == [
        (RouteTarget(ObjectId(5), 4, 0), "Headphones"),
        (RouteTarget(ObjectId(5), 3, 0), "Speakers (unavailable)"),
    ]


def test_device_node_without_active_route_needs_own_volumes():
    state = st.State()
    device = make_device()
    device.profile_index = 2
    state.devices[ObjectId(5)] = device
    assert node_from_state(state, NAMES, [], [], None, None, device_node()) is None


def test_device_node_with_missing_device():
    assert node_from_state(st.State(), NAMES, [], [], None, None, device_node(7)) is None


def test_route_targets_requirements():
    device = make_device()
    assert route_targets(device, "Audio/Source") is None
    device.profile_index = None
    assert route_targets(device, "Audio/Sink") is None


def test_active_route_checks_profile():
    device = make_device()
    assert active_route(device, 0).index == 3
    assert active_route(device, 9) is None
    device.profile_index = 2
    assert active_route(device, 0) is None


def test_device_from_state_profiles():
    device = st.Device(
        ObjectId(5), make_props({"device.description": "Card", "object.serial": 5}), 2
    )
    device.profiles[2] = st.Profile(2, "Off", True, [])
    device.profiles[1] = st.Profile(1, "Analog", False, [])
    view_device = device_from_state(st.State(), device, NAMES)
    assert view_device.profiles == [
        (ProfileTarget(ObjectId(5), 1), "Analog (unavailable)"),
        (ProfileTarget(ObjectId(5), 2), "Off"),
    ]
    assert view_device.target == ProfileTarget(ObjectId(5), 2)
    assert view_device.target_title == "Off"
    assert view_device.title == "Card"


def test_device_from_state_requires_profile():
    device = make_device()
    device.profile_index = None
    assert device_from_state(st.State(), device, NAMES) is None


def test_default_for():
    state = st.State()
    assert default_for(state, "default.audio.sink") is None
    add_default_metadata(
        state,
        {
            0: {
                "default.audio.sink": '{"name": "alsa_output"}',
                "default.audio.source": "not json",
                "other": '{"name": 3}',
            }
        },
    )
    assert default_for(state, "default.audio.sink") == "alsa_output"
    assert default_for(state, "default.audio.source") is None
    assert default_for(state, "other") is None


def test_has_target():
    state = st.State()
    add_default_metadata(
        state,
        {
            20: {"target.node": "-1", "target.object": "-1"},
            21: {"target.node": "-1", "target.object": "42"},
            22: {"target.node": "true"},
        },
    )
    assert not has_target(state, ObjectId(20))
    assert has_target(state, ObjectId(21))
    assert not has_target(state, ObjectId(22))
    assert not has_target(state, ObjectId(23))