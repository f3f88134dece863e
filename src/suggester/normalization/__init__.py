"""Input normalization."""

from .config_resolver import DEFAULT_ENGINE_CONFIG, resolve_engine_config
from .payload import load_engine_inputs, split_calendar_events
from .request import normalize_request

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "load_engine_inputs",
    "normalize_request",
    "resolve_engine_config",
    "split_calendar_events",
]
