"""Model of PipeWire mixer state, events, commands and a render-ready view."""

__version__ = "0.7.0"