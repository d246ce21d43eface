# Copyright 2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Adapter registry with auto-discovery.

Automatically discovers and registers motor-controller backends from
subpackages. Each backend provides a `register()` function in its adapter.py
module.

Usage:
    from actuators.hardware.motors.registry import adapter_registry

    # Create adapters by backend name
    motor = adapter_registry.create_motor("phoenix6", device_id=21, can_bus="rio")
    encoder = adapter_registry.create_sensor("phoenix6", device_id=22, can_bus="rio")
    motor = adapter_registry.create_motor("mock", device_id=21, bus=bus)

    # List available backends
    print(adapter_registry.available())  # ["mock", "phoenix6"]
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from actuators.hardware.motors.spec import MotorControllerAdapter, SensorAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry for motor-controller and sensor backends."""

    def __init__(self) -> None:
        self._motors: dict[str, type[MotorControllerAdapter]] = {}
        self._sensors: dict[str, type[SensorAdapter]] = {}

    def register(
        self,
        name: str,
        motor_cls: type[MotorControllerAdapter],
        sensor_cls: type[SensorAdapter] | None = None,
    ) -> None:
        """Register a backend's adapter classes."""
        key = name.lower()
        self._motors[key] = motor_cls
        if sensor_cls is not None:
            self._sensors[key] = sensor_cls

    def create_motor(self, name: str, **kwargs: Any) -> MotorControllerAdapter:
        """Create a motor-controller adapter by backend name.

        Raises:
            KeyError: If the backend is not registered
        """
        return self._lookup(self._motors, name)(**kwargs)

    def create_sensor(self, name: str, **kwargs: Any) -> SensorAdapter:
        """Create a remote sensor adapter by backend name.

        Raises:
            KeyError: If the backend is not registered or has no sensor adapter
        """
        return self._lookup(self._sensors, name)(**kwargs)

    def available(self) -> list[str]:
        """List available backend names."""
        return sorted(self._motors.keys())

    def discover(self) -> None:
        """Discover and register backends from subpackages.

        Can be called multiple times to pick up newly added backends.
        """
        import actuators.hardware.motors as pkg

        for _, name, ispkg in pkgutil.iter_modules(pkg.__path__):
            if not ispkg:
                continue
            try:
                module = importlib.import_module(f"actuators.hardware.motors.{name}.adapter")
            except ImportError as e:
                # Vendor SDK not installed
                logger.debug(f"Skipping backend {name}: {e}")
                continue
            if hasattr(module, "register"):
                module.register(self)

    def _lookup(self, table: dict[str, type[Any]], name: str) -> type[Any]:
        key = name.lower()
        if key not in table:
            raise KeyError(f"Unknown backend: {name}. Available: {sorted(table.keys())}")
        return table[key]


adapter_registry = AdapterRegistry()
adapter_registry.discover()

__all__ = ["AdapterRegistry", "adapter_registry"]
