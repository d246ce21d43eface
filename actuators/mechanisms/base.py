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

"""Mechanism base: owns devices and exposes atomic operations to the invoker.

A mechanism is built from its wiring config and one adapter per device,
configures every device on ``initialize()`` and refuses all commands until
that succeeds. Subclasses add follower links, limit-bounded axes and their
own operations on top of the shared dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from actuators.control.configuration import DEFAULT_TIMEOUT_S, configure
from actuators.control.device import Device
from actuators.control.dispatcher import ControlModeDispatcher
from actuators.control.errors import ConfigError, DeviceUnready
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import (
        DeviceComponent,
        DeviceId,
        DeviceName,
        MechanismName,
        MotorState,
    )
    from actuators.control.follower import FollowerLink
    from actuators.control.limits import LimitBoundedAxis
    from actuators.hardware.motors.spec import MotorControllerAdapter, SensorAdapter

logger = setup_logger()


class MechanismConfig(Protocol):
    """Wiring of a mechanism: its motor controllers and remote sensors."""

    def components(self) -> list[DeviceComponent]: ...

    def sensors(self) -> dict[str, DeviceId]: ...


ConfigT = TypeVar("ConfigT", bound=MechanismConfig)


class Mechanism(Generic[ConfigT]):
    """Base class for intake, shooter, feeder and climber."""

    name: ClassVar[MechanismName]

    def __init__(
        self,
        config: ConfigT,
        motors: Mapping[DeviceName, MotorControllerAdapter],
        sensors: Mapping[str, SensorAdapter] | None = None,
        config_timeout: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        """Build device handles for every component in ``config``.

        Args:
            config: Mechanism wiring
            motors: One adapter per component name
            sensors: One adapter per sensor name
            config_timeout: Seconds to wait for each configuration apply

        Raises:
            ValueError: An adapter is missing for a component or sensor
        """
        self._config = config
        self._config_timeout = config_timeout
        self._dispatcher = ControlModeDispatcher(self.name)

        self._devices: dict[DeviceName, Device] = {}
        for component in config.components():
            if component.name not in motors:
                raise ValueError(f"{self.name}: no adapter for device {component.name!r}")
            self._devices[component.name] = Device(motors[component.name], component)

        sensors = dict(sensors or {})
        missing = set(config.sensors()) - set(sensors)
        if missing:
            raise ValueError(f"{self.name}: no adapter for sensors {sorted(missing)}")
        self._sensors = sensors

        self._links: list[FollowerLink] = []
        self._axes: list[LimitBoundedAxis] = []
        self._initialized = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(devices={list(self._devices)}, ready={self.is_ready})"

    @property
    def config(self) -> ConfigT:
        return self._config

    @property
    def dispatcher(self) -> ControlModeDispatcher:
        return self._dispatcher

    @property
    def devices(self) -> dict[DeviceName, Device]:
        return dict(self._devices)

    @property
    def is_ready(self) -> bool:
        return self._initialized

    def device(self, name: DeviceName) -> Device:
        try:
            return self._devices[name]
        except KeyError:
            raise ValueError(f"{self.name} has no device {name!r}") from None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self) -> None:
        """Configure every device, then establish links and limit axes.

        Raises:
            ConfigError: A device refused its configuration. The mechanism
                stays unready and refuses commands until initialized again.
        """
        self._initialized = False
        for link in self._links:
            link.unbind()
        self._links.clear()
        for axis in self._axes:
            axis.release()
        self._axes.clear()

        try:
            for device in self._devices.values():
                configure(device, device.component.configuration, self._config_timeout)
        except ConfigError:
            logger.error("Mechanism not ready", mechanism=self.name)
            raise

        for sensor_name, sensor in self._sensors.items():
            if not sensor.connect():
                raise ConfigError(sensor.device_id, (), f"sensor {sensor_name} not reachable")

        self._on_configured()
        self._initialized = True
        logger.info("Mechanism ready", mechanism=self.name, devices=list(self._devices))

    def _on_configured(self) -> None:
        """Hook for follower links and limit axes once devices are configured."""

    def _add_link(self, link: FollowerLink) -> FollowerLink:
        self._links.append(link)
        return link

    def _add_axis(self, axis: LimitBoundedAxis) -> LimitBoundedAxis:
        self._axes.append(axis)
        return axis

    def _require_ready(self) -> None:
        if self._initialized:
            return
        unready = [d for d in self._devices.values() if not d.is_ready]
        first = unready[0] if unready else next(iter(self._devices.values()))
        raise DeviceUnready(first.device_id)

    def stop(self) -> None:
        """Zero output on every directly driven device."""
        self._require_ready()
        for device in self._devices.values():
            if not device.is_follower:
                self._dispatcher.stop(device)

    def shutdown(self) -> None:
        """Neutralize and release every device."""
        try:
            if self._initialized:
                for link in self._links:
                    link.unbind()
                for device in self._devices.values():
                    self._dispatcher.neutral(device)
        finally:
            for axis in self._axes:
                axis.release()
            self._links.clear()
            self._axes.clear()
            self._initialized = False

            for device in self._devices.values():
                device.disconnect()
            for sensor in self._sensors.values():
                sensor.disconnect()
        logger.info("Mechanism shut down", mechanism=self.name)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def read_state(self) -> dict[DeviceName, MotorState]:
        """Measured state of every device; values may be a cycle stale."""
        return {name: device.read_state() for name, device in self._devices.items()}

    def describe(self) -> dict[str, Any]:
        """Readiness and active request of every device."""
        return {
            name: {
                "device_id": device.device_id,
                "model": device.adapter.get_info().model,
                "ready": device.is_ready,
                "follower": device.is_follower,
                "limit_bounded": device.is_limit_bounded,
                "active_request": device.active_request,
            }
            for name, device in self._devices.items()
        }


__all__ = [
    "Mechanism",
    "MechanismConfig",
]
