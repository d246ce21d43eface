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

"""Intake: roller plus a deploy arm bounded by hardware limit switches.

The deploy arm runs on a fused remote encoder and two limit inputs wired into
its controller, so an extend or retract never drives past either stop.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from actuators.control.components import (
    ClosedLoopGains,
    DeviceComponent,
    DeviceId,
    FeedbackConfig,
    FeedbackSensorSource,
    HardwareLimitWiring,
    InvertedValue,
    MotionProfile,
    MotorConfiguration,
    NeutralMode,
)
from actuators.control.limits import AxisLimitState, LimitBoundedAxis
from actuators.control.requests import (
    MotionProfiledPositionRequest,
    MotionProfiledVelocityRequest,
    VoltageRequest,
)
from actuators.mechanisms.base import Mechanism


@dataclass(frozen=True)
class IntakeConfig:
    """Intake wiring.

    Attributes:
        roller_id: CAN id of the roller controller
        deploy_id: CAN id of the deploy arm controller
        deploy_encoder_id: CAN id of the deploy arm's absolute encoder
        forward_limit_input: Input id of the extended-stop limit switch
        reverse_limit_input: Input id of the retracted-stop limit switch
        roller_profile: Acceleration limit for roller velocity changes
        retracted_position: Deploy arm position when pulled in, rotations
    """

    roller_id: DeviceId = 20
    deploy_id: DeviceId = 21
    deploy_encoder_id: DeviceId = 22
    forward_limit_input: int = 0
    reverse_limit_input: int = 1
    roller_gear_ratio: float = 1.0
    deploy_gear_ratio: float = 1.0
    roller_gains: ClosedLoopGains = field(
        default_factory=lambda: ClosedLoopGains(k_p=0.1, k_i=0.0, k_d=0.0, k_s=0.0, k_v=0.12)
    )
    roller_profile: MotionProfile = field(
        default_factory=lambda: MotionProfile(cruise_velocity=100.0, acceleration=400.0)
    )
    deploy_gains: ClosedLoopGains = field(
        default_factory=lambda: ClosedLoopGains(k_p=0.001, k_i=0.0, k_d=0.0, k_s=0.001)
    )
    deploy_profile: MotionProfile = field(
        default_factory=lambda: MotionProfile(cruise_velocity=2.0, acceleration=8.0)
    )
    retracted_position: float = 0.0

    def components(self) -> list[DeviceComponent]:
        roller = MotorConfiguration(
            inverted=InvertedValue.COUNTER_CLOCKWISE_POSITIVE,
            neutral_mode=NeutralMode.BRAKE,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                rotor_to_sensor_ratio=self.roller_gear_ratio,
            ),
            gains=self.roller_gains,
            motion_profile=self.roller_profile,
        )
        deploy = MotorConfiguration(
            inverted=InvertedValue.COUNTER_CLOCKWISE_POSITIVE,
            neutral_mode=NeutralMode.BRAKE,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.FUSED_SENSOR,
                rotor_to_sensor_ratio=self.deploy_gear_ratio,
                remote_sensor_id=self.deploy_encoder_id,
            ),
            gains=self.deploy_gains,
            motion_profile=self.deploy_profile,
            hardware_limits=HardwareLimitWiring(
                forward_input_id=self.forward_limit_input,
                reverse_input_id=self.reverse_limit_input,
            ),
        )
        return [
            DeviceComponent("roller", self.roller_id, roller),
            DeviceComponent("deploy", self.deploy_id, deploy),
        ]

    def sensors(self) -> dict[str, DeviceId]:
        return {"deploy_encoder": self.deploy_encoder_id}


class Intake(Mechanism[IntakeConfig]):
    """Roller intake with a limit-bounded deploy arm."""

    name = "intake"

    _arm: LimitBoundedAxis | None = None

    def _on_configured(self) -> None:
        self._arm = self._add_axis(
            LimitBoundedAxis(
                self.device("deploy"),
                self._dispatcher,
                sensor=self._sensors["deploy_encoder"],
            )
        )

    @property
    def arm(self) -> LimitBoundedAxis:
        self._require_ready()
        assert self._arm is not None
        return self._arm

    @property
    def arm_state(self) -> AxisLimitState:
        return self.arm.state

    @property
    def arm_position(self) -> float:
        return self.arm.sensor_position

    def extend_arm(self, rotations: float) -> MotionProfiledPositionRequest:
        """Profile the deploy arm out to ``rotations``; stops at the forward limit."""
        return self.arm.set_motion_profiled_position(rotations)

    def retract_arm(self) -> MotionProfiledPositionRequest:
        """Profile the deploy arm back in; stops at the reverse limit."""
        return self.arm.set_motion_profiled_position(self._config.retracted_position)

    def run_roller(self, volts: float) -> VoltageRequest:
        self._require_ready()
        return self._dispatcher.set_voltage(self.device("roller"), volts)

    def run_roller_velocity(self, velocity: float) -> MotionProfiledVelocityRequest:
        """Ramp the roller to ``velocity`` rotations per second along its profile."""
        self._require_ready()
        return self._dispatcher.set_motion_profiled_velocity(self.device("roller"), velocity)

    def stop_roller(self) -> VoltageRequest:
        return self.run_roller(0.0)


__all__ = [
    "Intake",
    "IntakeConfig",
]
