"""
Developer-mode state.

Only ``enabled`` survives a restart; it is stored JSON-encoded under a
fixed key in a small key-value file. The remaining flags are per-process
and only take effect while dev mode is enabled.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import os
from typing import Awaitable, Callable, Dict, Optional

from app.core.config import settings
from app.services.random_pool import RandomSource, default_random_source

logger = logging.getLogger(__name__)

SESSION_FLAGS = ("mock_data", "slow_network", "show_all_features", "show_debug_info")


class JsonFileStorage:
    """String key-value storage persisted as one JSON object"""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable dev state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)


class MemoryStorage:
    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


def read_enabled(storage, key: str = settings.DEV_MODE_STORAGE_KEY) -> bool:
    """Persisted flag; absent, corrupt or non-boolean values read as False"""
    stored = storage.get_item(key)
    if not stored:
        return False
    try:
        value = json.loads(stored)
    except ValueError:
        return False
    return value is True


class DevStateStore:
    """Developer-mode toggles passed explicitly to the components that need them"""

    def __init__(
        self,
        storage=None,
        key: str = settings.DEV_MODE_STORAGE_KEY,
        rng: Optional[RandomSource] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        min_delay_ms: int = settings.SLOW_NETWORK_MIN_MS,
        max_delay_ms: int = settings.SLOW_NETWORK_MAX_MS,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key
        self.rng = rng or default_random_source()
        self.sleep = sleep
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms

        self.enabled = read_enabled(self.storage, key)
        self.mock_data = False
        self.slow_network = False
        self.show_all_features = False
        self.show_debug_info = False

    @classmethod
    def from_file(cls, path: str = settings.DEV_MODE_STATE_FILE, **kwargs) -> "DevStateStore":
        return cls(JsonFileStorage(path), **kwargs)

    def set_enabled(self, enabled: bool) -> bool:
        self.enabled = bool(enabled)
        self.storage.set_item(self.key, json.dumps(self.enabled))
        logger.info(f"Dev mode {'enabled' if self.enabled else 'disabled'}")
        return self.enabled

    def toggle_enabled(self) -> bool:
        return self.set_enabled(not self.enabled)

    def toggle(self, flag: str) -> bool:
        if flag not in SESSION_FLAGS:
            raise ValueError(f"Unknown dev flag: {flag}")
        value = not getattr(self, flag)
        setattr(self, flag, value)
        return value

    @property
    def should_use_mock_data(self) -> bool:
        return self.enabled and self.mock_data

    @property
    def should_show_all_features(self) -> bool:
        return self.enabled and self.show_all_features

    @property
    def should_show_debug_info(self) -> bool:
        return self.enabled and self.show_debug_info

    def next_delay_ms(self) -> int:
        span = self.max_delay_ms - self.min_delay_ms
        return math.floor(self.rng.random() * span) + self.min_delay_ms

    async def simulate_network_delay(self) -> int:
        """Sleep a random [min, max) ms when slow network is on; returns the delay"""
        if not (self.enabled and self.slow_network):
            return 0
        delay = self.next_delay_ms()
        await self.sleep(delay / 1000)
        return delay

    def snapshot(self) -> dict:
        return {
            "enabled": self.enabled,
            "mock_data": self.mock_data,
            "slow_network": self.slow_network,
            "show_all_features": self.show_all_features,
            "show_debug_info": self.show_debug_info,
            "should_use_mock_data": self.should_use_mock_data,
            "should_show_all_features": self.should_show_all_features,
            "should_show_debug_info": self.should_show_debug_info,
        }
