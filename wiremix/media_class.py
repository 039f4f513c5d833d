"""Classification of PipeWire media classes."""

from __future__ import annotations

_SINKS = frozenset({"Audio/Sink", "Audio/Duplex"})
_SOURCES = frozenset({"Audio/Source", "Audio/Duplex", "Audio/Source/Virtual"})


def is_sink(s: str) -> bool:
    """Return True for media classes that are audio sinks."""
    return s in _SINKS


def is_source(s: str) -> bool:
    """Return True for media classes that are audio sources."""
    return s in _SOURCES


def is_sink_input(s: str) -> bool:
    """Return True for playback streams (streams feeding a sink)."""
    return s == "Stream/Output/Audio"


def is_source_output(s: str) -> bool:
    """Return True for recording streams (streams fed by a source)."""
    return s == "Stream/Input/Audio"