# wiremix

A pure-Python model of a PipeWire mixer. It keeps track of PipeWire objects
(nodes, devices, clients, links and metadata) from a stream of state events.
It works out when peak-meter capture should start or stop. It turns the result
into a view that is easy to render and to control.

It needs nothing outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `wiremix.object_id.ObjectId` is a PipeWire object id, an unsigned 32-bit
  integer. `ObjectId.parse("42")` reads one from text and raises `ValueError`
  on bad input. `int()` and `str()` convert it back.
- `wiremix.property_store.PropertyStore` holds the `info.props` of an object.
  - The standard PipeWire keys have typed access, either by attribute
    (`props.media_class`, `props.object_serial`) or by `props.get("node.name")`.
  - `raw(key)` returns any property unparsed.
  - `set(key, value)` stores a typed value.
  - `PropertyStore.from_dict(...)` builds a store from raw strings. A value that
    does not parse is kept as a plain string. Its typed accessor then returns
    `None`.
  - `parse_property(key, raw)` parses one value and raises `ValueError` on failure.
- `wiremix.media_class` classifies media classes with `is_sink`, `is_source`,
  `is_sink_input` and `is_source_output`.
- `wiremix.event` holds the events:
  - The state events: `NodeProperties`, `NodeVolumes`, `NodeMute`, `NodePeaks`,
    `NodeRate`, `NodePositions`, `DeviceProperties`, `DeviceRoute`,
    `DeviceEnumRoute`, `DeviceProfile`, `DeviceEnumProfile`, `ClientProperties`,
    `Link`, `MetadataMetadataName`, `MetadataProperty`, `StreamStopped` and
    `Removed`.
  - The wrappers `StateUpdate`, `ErrorEvent` and `Ready`.
- `wiremix.command` holds the commands and their senders:
  - The commands: `NodeMute`, `NodeVolumes`, `DeviceMute`, `DeviceVolumes`,
    `DeviceSetRoute`, `DeviceSetProfile`, `NodeCaptureStart`, `NodeCaptureStop`
    and `MetadataSetProperty`.
  - The abstract `CommandSender` interface.
  - `QueueCommandSender`, which puts each command on a queue.
- `wiremix.event_sender.EventSender` passes events to a handler. The handler is
  a callable or an object with `handle_event`. When the handler returns `False`,
  an optional `quit` callback is called.
- `wiremix.sync_registry.SyncRegistry` tracks pending core syncs. `done(seq)`
  returns `True` once, the first time all of them have completed.
- `wiremix.state.State` is the PipeWire state.
  - `State.update(wirehose, event)` keeps it up to date.
  - `with_capture(True)` enables capture management. `update` then sends
    `node_capture_start` / `node_capture_stop` to the command sender.
  - `with_peak_processor(fn)` sets a function for effects such as ballistics.
    It is called as `fn(current_peak, new_peak, rate, samples)`.
- `wiremix.view_model` holds what the view is built from:
  - The view's `Node` and `Device`.
  - The targets: `NodeTarget`, `RouteTarget`, `ProfileTarget` and
    `DefaultTarget`.
  - `VolumeAdjustment`, `NodeKind`, `ListKind` and `DeviceKind`.
  - `NameResolver`, which picks titles from the description, nick or name
    properties.
- `wiremix.view.View` is a snapshot of a `State` for display.
  - Navigation: `next_id`, `previous_id`, `position`, `length`, `full_nodes`
    and `full_devices`.
  - Target lists: `node_targets` and `device_targets`.
  - Controls: `mute`, `volume`, `set_target` and `set_default`.

## Example

```python
import queue

from wiremix.command import QueueCommandSender
from wiremix.event import NodeMute, NodeProperties, NodeVolumes
from wiremix.object_id import ObjectId
from wiremix.property_store import PropertyStore
from wiremix.state import State
from wiremix.view import View
from wiremix.view_model import ListKind, NameResolver, NodeKind, VolumeAdjustment

commands = queue.Queue()
sender = QueueCommandSender(commands)
state = State()

node_id = ObjectId(42)
props = PropertyStore()
props.set("node.name", "player")
props.set("node.description", "Music player")
props.set("media.class", "Stream/Output/Audio")
props.set("object.serial", 42)

state.update(sender, NodeProperties(object_id=node_id, props=props))
state.update(sender, NodeVolumes(object_id=node_id, volumes=[0.5, 0.5]))
state.update(sender, NodeMute(object_id=node_id, mute=False))

view = View.from_state(sender, state, NameResolver())
first = view.next_id(ListKind.node(NodeKind.ALL), None)
view.mute(first)                                             # queues a NodeMute
view.volume(first, VolumeAdjustment(0.05, relative=True), 150.0)
```

Volumes are sent on a cubic scale. An adjustment is given on the cube-root
scale. A `max` passed to `View.volume` is a percentage. A change that would
exceed it is refused, and `volume` then returns `False`.

## Logging

`wiremix.trace.initialize_logging(directory=".")` writes logging to
`wiremix.log` in the given directory. It truncates the file first and returns
its path. The level comes from the `WIREMIX_LOG` environment variable:

- The accepted values are `trace`, `debug`, `info`, `warn`, `warning`, `error`
  and `off`.
- If the variable is unset, `initialize_logging` raises `RuntimeError`.
- If the value is unknown, it raises `ValueError`.

`trace_dbg(value, label=None, level=logging.DEBUG, logger=None)` logs a value
and returns it unchanged, so it can be used inside expressions.

## What it does not do

The package does not connect to a PipeWire daemon. It does not capture audio
and has no terminal interface or command-line program. You supply the events
and a `CommandSender` that carries out the commands it produces.