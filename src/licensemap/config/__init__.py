"""Configuration utilities for the licensing comparison engine."""

from .policies import (
    FingerprintPolicy,
    MergePolicy,
    Policies,
    StatusPolicy,
    load_policies,
)
from .settings import PathsConfig, Settings, get_settings

__all__ = [
    "Settings",
    "PathsConfig",
    "get_settings",
    "Policies",
    "load_policies",
    "FingerprintPolicy",
    "MergePolicy",
    "StatusPolicy",
]
