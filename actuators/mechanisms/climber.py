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

"""Climber: one position-controlled winch."""

from __future__ import annotations

from dataclasses import dataclass, field

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
from actuators.control.requests import PositionRequest
from actuators.mechanisms.base import Mechanism


@dataclass(frozen=True)
class ClimberConfig:
    motor_id: DeviceId = 19
    gear_ratio: float = 1.0
    gains: ClosedLoopGains = field(
        default_factory=lambda: ClosedLoopGains(k_p=0.1, k_i=0.0, k_d=0.0, k_s=0.0)
    )

    def components(self) -> list[DeviceComponent]:
        return [
            DeviceComponent(
                "winch",
                self.motor_id,
                MotorConfiguration(
                    inverted=InvertedValue.CLOCKWISE_POSITIVE,
                    # Hold the robot when output drops.
                    neutral_mode=NeutralMode.BRAKE,
                    feedback=FeedbackConfig(
                        sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                        rotor_to_sensor_ratio=self.gear_ratio,
                    ),
                    gains=self.gains,
                ),
            )
        ]

    def sensors(self) -> dict[str, DeviceId]:
        return {}


class Climber(Mechanism[ClimberConfig]):
    """Position-controlled climber winch."""

    name = "climber"

    @property
    def position(self) -> float:
        """Winch position in rotations."""
        return self.device("winch").position

    def set_position(self, position: float) -> PositionRequest:
        """Drive the winch to ``position`` rotations."""
        self._require_ready()
        return self._dispatcher.set_position(self.device("winch"), position)


__all__ = [
    "Climber",
    "ClimberConfig",
]
