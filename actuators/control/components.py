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

"""Device configuration schema for the actuator-control core."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, is_dataclass
from enum import Enum
import math
from typing import Any

DeviceId = int
DeviceName = str
MechanismName = str


class InvertedValue(Enum):
    COUNTER_CLOCKWISE_POSITIVE = "counter_clockwise_positive"
    CLOCKWISE_POSITIVE = "clockwise_positive"


class NeutralMode(Enum):
    BRAKE = "brake"
    COAST = "coast"


class FeedbackSensorSource(Enum):
    """Where the closed loop reads position from."""

    ROTOR_SENSOR = "rotor_sensor"
    REMOTE_SENSOR = "remote_sensor"
    # Remote absolute sensor fused with the rotor sensor for resolution.
    FUSED_SENSOR = "fused_sensor"


@dataclass(frozen=True)
class ClosedLoopGains:
    """Gains for the device's onboard closed loop (slot 0).

    Attributes:
        k_p: Proportional gain, volts per unit of error
        k_i: Integral gain
        k_d: Derivative gain
        k_s: Static friction feedforward, volts
        k_v: Velocity feedforward, volts per rps
        k_a: Acceleration feedforward, volts per rps^2
    """

    k_p: float
    k_i: float
    k_d: float
    k_s: float
    k_v: float = 0.0
    k_a: float = 0.0


@dataclass(frozen=True)
class FeedbackConfig:
    """Feedback sensor selection and gearing.

    Attributes:
        sensor_source: Sensor the closed loop runs on
        rotor_to_sensor_ratio: Rotor rotations per sensor rotation
        sensor_to_mechanism_ratio: Sensor rotations per mechanism rotation
        remote_sensor_id: CAN id of the remote sensor, required unless the
            rotor sensor is used
    """

    sensor_source: FeedbackSensorSource
    rotor_to_sensor_ratio: float
    sensor_to_mechanism_ratio: float = 1.0
    remote_sensor_id: DeviceId | None = None


@dataclass(frozen=True)
class MotionProfile:
    """Trajectory limits for motion-profiled requests."""

    cruise_velocity: float
    acceleration: float
    jerk: float = 0.0


@dataclass(frozen=True)
class HardwareLimitWiring:
    """Discrete limit inputs wired into the device's motion-limiting logic."""

    forward_input_id: int
    reverse_input_id: int
    forward_enabled: bool = True
    reverse_enabled: bool = True

    @property
    def any_enabled(self) -> bool:
        return self.forward_enabled or self.reverse_enabled


@dataclass(frozen=True)
class MotorConfiguration:
    """Complete configuration of one motor controller.

    Every core field is required; an omitted gain or sensor source would
    silently produce wrong closed-loop behavior.
    """

    inverted: InvertedValue
    neutral_mode: NeutralMode
    feedback: FeedbackConfig
    gains: ClosedLoopGains
    motion_profile: MotionProfile | None = None
    hardware_limits: HardwareLimitWiring | None = None

    def invalid_fields(self) -> frozenset[str]:
        """Names of fields that no device would accept."""
        bad: set[str] = set()

        if not isinstance(self.inverted, InvertedValue):
            bad.add("inverted")
        if not isinstance(self.neutral_mode, NeutralMode):
            bad.add("neutral_mode")

        if not isinstance(self.feedback, FeedbackConfig):
            bad.add("feedback")
        else:
            fb = self.feedback
            if not isinstance(fb.sensor_source, FeedbackSensorSource):
                bad.add("feedback.sensor_source")
            elif fb.sensor_source is not FeedbackSensorSource.ROTOR_SENSOR and (
                fb.remote_sensor_id is None or fb.remote_sensor_id < 0
            ):
                bad.add("feedback.remote_sensor_id")
            for name in ("rotor_to_sensor_ratio", "sensor_to_mechanism_ratio"):
                if not _positive(getattr(fb, name)):
                    bad.add(f"feedback.{name}")

        if not isinstance(self.gains, ClosedLoopGains):
            bad.add("gains")
        else:
            for f in fields(self.gains):
                if not _non_negative(getattr(self.gains, f.name)):
                    bad.add(f"gains.{f.name}")

        if self.motion_profile is not None:
            mp = self.motion_profile
            if not _positive(mp.cruise_velocity):
                bad.add("motion_profile.cruise_velocity")
            if not _positive(mp.acceleration):
                bad.add("motion_profile.acceleration")
            if not _non_negative(mp.jerk):
                bad.add("motion_profile.jerk")

        if self.hardware_limits is not None:
            hl = self.hardware_limits
            if not hl.any_enabled:
                # Unused wiring is expressed by omitting it.
                bad.add("hardware_limits")
            if hl.forward_input_id < 0:
                bad.add("hardware_limits.forward_input_id")
            if hl.reverse_input_id < 0:
                bad.add("hardware_limits.reverse_input_id")
            if hl.forward_enabled and hl.reverse_enabled and hl.forward_input_id == hl.reverse_input_id:
                bad.add("hardware_limits.reverse_input_id")

        return frozenset(bad)

    def diff(self, other: MotorConfiguration) -> frozenset[str]:
        """Dotted names of fields whose values differ from ``other``."""
        return frozenset(_diff(_flatten(self), _flatten(other)))

    @property
    def has_hardware_limits(self) -> bool:
        return self.hardware_limits is not None and self.hardware_limits.any_enabled


@dataclass(frozen=True)
class MotorState:
    """Measured state of a motor, possibly one control cycle stale."""

    position: float
    velocity: float


@dataclass(frozen=True)
class LimitSwitchState:
    """Hardware-reported state of the two limit inputs."""

    forward: bool
    reverse: bool


@dataclass(frozen=True)
class DeviceComponent:
    """Wiring of one motor controller owned by a mechanism.

    Attributes:
        name: Name within the owning mechanism (e.g., "deploy")
        device_id: CAN id of the controller
        configuration: Configuration applied at initialization
    """

    name: DeviceName
    device_id: DeviceId
    configuration: MotorConfiguration


def _positive(value: Any) -> bool:
    return isinstance(value, int | float) and math.isfinite(value) and value > 0


def _non_negative(value: Any) -> bool:
    return isinstance(value, int | float) and math.isfinite(value) and value >= 0


def _flatten(config: MotorConfiguration) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for f in fields(config):
        value = getattr(config, f.name)
        if is_dataclass(value):
            for key, inner in asdict(value).items():
                flat[f"{f.name}.{key}"] = inner
        else:
            flat[f.name] = value
    return flat


def _same(a: Any, b: Any) -> bool:
    # Devices store gains and ratios with limited precision.
    if isinstance(a, float) or isinstance(b, float):
        if isinstance(a, int | float) and isinstance(b, int | float):
            return math.isclose(a, b, rel_tol=1e-3, abs_tol=1e-6)
    return a == b


def _diff(a: dict[str, Any], b: dict[str, Any]) -> set[str]:
    changed = {key for key in a.keys() & b.keys() if not _same(a[key], b[key])}
    # A whole optional section present on one side only.
    for key in a.keys() ^ b.keys():
        changed.add(key.split(".", 1)[0])
    return changed


__all__ = [
    "ClosedLoopGains",
    "DeviceComponent",
    "DeviceId",
    "DeviceName",
    "FeedbackConfig",
    "FeedbackSensorSource",
    "HardwareLimitWiring",
    "InvertedValue",
    "LimitSwitchState",
    "MechanismName",
    "MotionProfile",
    "MotorConfiguration",
    "MotorState",
    "NeutralMode",
]
