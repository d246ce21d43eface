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

"""Robot assembly.

Owns the intake, shooter, feeder and climber, builds their transport adapters
from the configured backend and drives their lifecycle together. The invoker
reaches each mechanism through a property and calls its operations directly.

Example:
    >>> robot = Robot(GlobalConfig(backend="mock"))
    >>> robot.initialize()
    >>> robot.shooter.select_operating_point(ShooterOperatingPoint.MID)
    >>> robot.shutdown()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from actuators.control.errors import ActuatorError
from actuators.core.global_config import GlobalConfig
from actuators.hardware.motors.mock import MockCANBus
from actuators.hardware.motors.registry import adapter_registry
from actuators.mechanisms.climber import Climber, ClimberConfig
from actuators.mechanisms.feeder import Feeder, FeederConfig
from actuators.mechanisms.intake import Intake, IntakeConfig
from actuators.mechanisms.shooter import Shooter, ShooterConfig
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import DeviceId, MechanismName
    from actuators.hardware.motors.spec import MotorControllerAdapter, SensorAdapter
    from actuators.mechanisms.base import Mechanism, MechanismConfig

logger = setup_logger()


class Robot:
    """Every mechanism of the robot, built on one backend."""

    def __init__(
        self,
        global_config: GlobalConfig | None = None,
        *,
        intake: IntakeConfig | None = None,
        shooter: ShooterConfig | None = None,
        feeder: FeederConfig | None = None,
        climber: ClimberConfig | None = None,
        bus: MockCANBus | None = None,
    ) -> None:
        """Build every mechanism; nothing touches the bus until ``initialize()``.

        Args:
            global_config: Backend and timeouts, read from the environment if omitted
            intake: Intake wiring
            shooter: Shooter wiring; ``hood_enabled`` follows the global config
                when omitted
            feeder: Feeder wiring
            climber: Climber wiring
            bus: Shared simulated bus for the mock backend

        Raises:
            ValueError: Two devices share a CAN id, or the backend is unknown
        """
        self._config = global_config if global_config is not None else GlobalConfig()
        configs: dict[MechanismName, MechanismConfig] = {
            Intake.name: intake or IntakeConfig(),
            Shooter.name: shooter or ShooterConfig(hood_enabled=self._config.hood_enabled),
            Feeder.name: feeder or FeederConfig(),
            Climber.name: climber or ClimberConfig(),
        }
        _check_unique_ids(configs)

        if self._config.backend not in adapter_registry.available():
            raise ValueError(
                f"unknown backend {self._config.backend!r}, "
                f"available: {adapter_registry.available()}"
            )
        if self._config.is_simulated and bus is None:
            bus = MockCANBus()
        self._bus = bus

        timeout = self._config.config_timeout
        self._intake = Intake(*self._adapters(configs[Intake.name]), config_timeout=timeout)
        self._shooter = Shooter(*self._adapters(configs[Shooter.name]), config_timeout=timeout)
        self._feeder = Feeder(*self._adapters(configs[Feeder.name]), config_timeout=timeout)
        self._climber = Climber(*self._adapters(configs[Climber.name]), config_timeout=timeout)
        self._mechanisms: dict[MechanismName, Mechanism[Any]] = {
            m.name: m for m in (self._intake, self._shooter, self._feeder, self._climber)
        }

    @property
    def global_config(self) -> GlobalConfig:
        return self._config

    @property
    def bus(self) -> MockCANBus | None:
        """Simulated bus, None on real hardware."""
        return self._bus

    @property
    def intake(self) -> Intake:
        return self._intake

    @property
    def shooter(self) -> Shooter:
        return self._shooter

    @property
    def feeder(self) -> Feeder:
        return self._feeder

    @property
    def climber(self) -> Climber:
        return self._climber

    @property
    def mechanisms(self) -> dict[MechanismName, Mechanism[Any]]:
        return dict(self._mechanisms)

    def mechanism(self, name: MechanismName) -> Mechanism[Any]:
        try:
            return self._mechanisms[name]
        except KeyError:
            raise ValueError(
                f"unknown mechanism {name!r}, available: {sorted(self._mechanisms)}"
            ) from None

    def initialize(self) -> None:
        """Initialize every mechanism.

        Every mechanism is attempted so that one bad device does not keep the
        others unconfigured.

        Raises:
            ActuatorError: The first mechanism failure; that mechanism keeps
                refusing commands
        """
        failures: list[ActuatorError] = []
        for mechanism in self._mechanisms.values():
            try:
                mechanism.initialize()
            except ActuatorError as e:
                failures.append(e)

        if failures:
            logger.error(
                "Robot initialization incomplete",
                backend=self._config.backend,
                failed=[str(e) for e in failures],
            )
            raise failures[0]
        logger.info("Robot initialized", backend=self._config.backend)

    def stop(self) -> None:
        """Stop every ready mechanism."""
        for mechanism in self._mechanisms.values():
            if mechanism.is_ready:
                mechanism.stop()

    def shutdown(self) -> None:
        """Shut every mechanism down, continuing past failures."""
        errors: list[ActuatorError] = []
        for mechanism in self._mechanisms.values():
            try:
                mechanism.shutdown()
            except ActuatorError as e:
                errors.append(e)
        logger.info("Robot shut down", errors=len(errors))
        if errors:
            raise errors[0]

    def describe(self) -> dict[MechanismName, dict[str, Any]]:
        return {name: m.describe() for name, m in self._mechanisms.items()}

    def _adapters(
        self, config: MechanismConfig
    ) -> tuple[MechanismConfig, dict[str, MotorControllerAdapter], dict[str, SensorAdapter]]:
        backend = self._config.backend
        options = {"can_bus": self._config.can_bus, "bus": self._bus}
        motors = {
            component.name: adapter_registry.create_motor(
                backend, device_id=component.device_id, **options
            )
            for component in config.components()
        }
        sensors = {
            name: adapter_registry.create_sensor(backend, device_id=device_id, **options)
            for name, device_id in config.sensors().items()
        }
        return config, motors, sensors


def _check_unique_ids(configs: dict[MechanismName, MechanismConfig]) -> None:
    owners: dict[DeviceId, list[str]] = {}
    for mechanism, config in configs.items():
        for component in config.components():
            owners.setdefault(component.device_id, []).append(f"{mechanism}/{component.name}")
        for name, device_id in config.sensors().items():
            owners.setdefault(device_id, []).append(f"{mechanism}/{name}")

    duplicates = {device_id: names for device_id, names in owners.items() if len(names) > 1}
    if duplicates:
        raise ValueError(f"duplicate CAN ids: {duplicates}")


__all__ = [
    "Robot",
]
