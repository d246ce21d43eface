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

"""Shooter: two opposed flywheels and an adjustable hood.

The second flywheel follows the first in hardware, mounted opposed, so the
pair is driven as one wheel. Shots are taken at named operating points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from actuators.control.components import (
    ClosedLoopGains,
    DeviceComponent,
    DeviceId,
    FeedbackConfig,
    FeedbackSensorSource,
    InvertedValue,
    MotorConfiguration,
    NeutralMode,
)
from actuators.control.follower import FollowerLink
from actuators.control.operating_points import OperatingPointPolicy, Setpoint
from actuators.control.requests import FollowerOrientation, PositionRequest, VelocityRequest
from actuators.mechanisms.base import Mechanism


class ShooterOperatingPoint(Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


# Flywheel velocity in rps, hood position in rotations.
SHOOTER_OPERATING_POINTS: dict[ShooterOperatingPoint, Setpoint] = {
    ShooterOperatingPoint.LOW: Setpoint(velocity=50.0, auxiliary_position=0.1),
    ShooterOperatingPoint.MID: Setpoint(velocity=75.0, auxiliary_position=0.2),
    ShooterOperatingPoint.HIGH: Setpoint(velocity=100.0, auxiliary_position=0.3),
}


@dataclass(frozen=True)
class ShooterConfig:
    """Shooter wiring.

    Attributes:
        leader_id: CAN id of the driven flywheel controller
        follower_id: CAN id of the flywheel controller that follows it
        hood_id: CAN id of the hood controller
        follower_orientation: How the second flywheel is mounted
        max_velocity: Largest flywheel velocity accepted, rps
        hood_enabled: Apply hood positions when selecting operating points
    """

    leader_id: DeviceId = 0
    follower_id: DeviceId = 1
    hood_id: DeviceId = 2
    follower_orientation: FollowerOrientation = FollowerOrientation.OPPOSED
    flywheel_gains: ClosedLoopGains = field(
        default_factory=lambda: ClosedLoopGains(k_p=0.1, k_i=0.0, k_d=0.0, k_s=0.0)
    )
    hood_gains: ClosedLoopGains = field(
        default_factory=lambda: ClosedLoopGains(k_p=0.1, k_i=0.0, k_d=0.0, k_s=0.0)
    )
    max_velocity: float = 100.0
    hood_enabled: bool = False

    def components(self) -> list[DeviceComponent]:
        flywheel = MotorConfiguration(
            inverted=InvertedValue.CLOCKWISE_POSITIVE,
            neutral_mode=NeutralMode.COAST,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                rotor_to_sensor_ratio=1.0,
            ),
            gains=self.flywheel_gains,
        )
        hood = MotorConfiguration(
            inverted=InvertedValue.CLOCKWISE_POSITIVE,
            neutral_mode=NeutralMode.COAST,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                rotor_to_sensor_ratio=1.0,
            ),
            gains=self.hood_gains,
        )
        return [
            DeviceComponent("flywheel", self.leader_id, flywheel),
            DeviceComponent("flywheel_follower", self.follower_id, flywheel),
            DeviceComponent("hood", self.hood_id, hood),
        ]

    def sensors(self) -> dict[str, DeviceId]:
        return {}


class Shooter(Mechanism[ShooterConfig]):
    """Dual-flywheel shooter with a hood."""

    name = "shooter"

    _link: FollowerLink | None = None
    _policy: OperatingPointPolicy[ShooterOperatingPoint] | None = None

    def _on_configured(self) -> None:
        self._link = self._add_link(
            FollowerLink.bind(
                self.device("flywheel"),
                self.device("flywheel_follower"),
                self._config.follower_orientation,
            )
        )
        self._policy = OperatingPointPolicy(
            SHOOTER_OPERATING_POINTS,
            self._dispatcher,
            velocity_device=self.device("flywheel"),
            auxiliary_device=self.device("hood"),
            auxiliary_enabled=self._config.hood_enabled,
        )

    @property
    def follower_link(self) -> FollowerLink:
        self._require_ready()
        assert self._link is not None
        return self._link

    @property
    def operating_point(self) -> ShooterOperatingPoint | None:
        """Last operating point selected, None once stopped or overridden."""
        return self._policy.current if self._policy is not None else None

    def set_velocity(self, velocity: float) -> VelocityRequest:
        """Spin the flywheels at ``velocity`` rotations per second.

        Raises:
            ValueError: ``velocity`` exceeds ``max_velocity`` in magnitude
        """
        self._require_ready()
        if abs(velocity) > self._config.max_velocity:
            raise ValueError(
                f"flywheel velocity {velocity} exceeds {self._config.max_velocity} rps"
            )
        request = self._dispatcher.set_velocity(self.device("flywheel"), velocity)
        if self._policy is not None:
            self._policy.clear()
        return request

    def set_hood_position(self, position: float) -> PositionRequest:
        self._require_ready()
        return self._dispatcher.set_position(self.device("hood"), position)

    def select_operating_point(self, point: ShooterOperatingPoint) -> Setpoint:
        """Apply the flywheel velocity (and hood position, when enabled) for ``point``."""
        return self._require_policy().apply(point)

    def stop(self) -> None:
        """Spin the flywheels down; the hood holds where it is."""
        self._require_policy().stop()

    def _require_policy(self) -> OperatingPointPolicy[ShooterOperatingPoint]:
        self._require_ready()
        assert self._policy is not None
        return self._policy


__all__ = [
    "SHOOTER_OPERATING_POINTS",
    "Shooter",
    "ShooterConfig",
    "ShooterOperatingPoint",
]
