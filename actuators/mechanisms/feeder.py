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

"""Feeder: single open-loop roller between the intake and the shooter."""

from __future__ import annotations

from dataclasses import dataclass

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
from actuators.control.requests import VoltageRequest
from actuators.mechanisms.base import Mechanism


@dataclass(frozen=True)
class FeederConfig:
    motor_id: DeviceId = 3

    def components(self) -> list[DeviceComponent]:
        return [
            DeviceComponent(
                "roller",
                self.motor_id,
                MotorConfiguration(
                    inverted=InvertedValue.CLOCKWISE_POSITIVE,
                    neutral_mode=NeutralMode.COAST,
                    feedback=FeedbackConfig(
                        sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                        rotor_to_sensor_ratio=1.0,
                    ),
                    gains=ClosedLoopGains(k_p=0.0, k_i=0.0, k_d=0.0, k_s=0.0),
                ),
            )
        ]

    def sensors(self) -> dict[str, DeviceId]:
        return {}


class Feeder(Mechanism[FeederConfig]):
    """Open-loop feed roller."""

    name = "feeder"

    def run(self, volts: float) -> VoltageRequest:
        self._require_ready()
        return self._dispatcher.set_voltage(self.device("roller"), volts)


__all__ = [
    "Feeder",
    "FeederConfig",
]
