"""Persisted state (hosts file)"""
from .config_store import ConfigStore, FileConfigStore, MemoryConfigStore
from .host_registry import HostEntry, HostRegistry

__all__ = [
    "ConfigStore", "FileConfigStore", "MemoryConfigStore",
    "HostEntry", "HostRegistry",
]
