from __future__ import annotations

from msgpet.config.models import (
    DialFailurePolicy,
    RunMode,
    TestConfig,
    join_host_port,
    split_host_port,
)
from msgpet.config.rcfile import (
    DEFAULT_RC_PATH,
    Settings,
    load_settings,
    parse_duration,
    resolve_config,
    resolve_mode,
    settings_from_mapping,
)

__all__ = [
    "DEFAULT_RC_PATH",
    "DialFailurePolicy",
    "RunMode",
    "Settings",
    "TestConfig",
    "join_host_port",
    "load_settings",
    "parse_duration",
    "resolve_config",
    "resolve_mode",
    "settings_from_mapping",
    "split_host_port",
]
