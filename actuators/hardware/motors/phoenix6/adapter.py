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

"""CTRE Phoenix 6 adapter - implements MotorControllerAdapter for TalonFX.

Phoenix units already match the core: rotations and rotations per second in
the mechanism frame (after sensor_to_mechanism_ratio), volts for output.
Control frames are queued by the Phoenix daemon and never wait on the device.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from phoenix6 import configs, controls, hardware, signals

if TYPE_CHECKING:
    from phoenix6 import StatusCode as PhoenixStatusCode

    from actuators.hardware.motors.registry import AdapterRegistry

from actuators.control.components import (
    ClosedLoopGains,
    FeedbackConfig,
    FeedbackSensorSource,
    HardwareLimitWiring,
    InvertedValue,
    LimitSwitchState,
    MotionProfile,
    MotorConfiguration,
    NeutralMode,
)
from actuators.control.requests import (
    ControlRequest,
    FollowerOrientation,
    FollowerRequest,
    MotionProfiledPositionRequest,
    MotionProfiledVelocityRequest,
    NeutralRequest,
    PositionRequest,
    VelocityRequest,
    VoltageRequest,
)
from actuators.hardware.motors.spec import ApplyResult, DeviceInfo, StatusCode

_INVERTED = {
    InvertedValue.COUNTER_CLOCKWISE_POSITIVE: signals.InvertedValue.COUNTER_CLOCKWISE_POSITIVE,
    InvertedValue.CLOCKWISE_POSITIVE: signals.InvertedValue.CLOCKWISE_POSITIVE,
}
_NEUTRAL = {
    NeutralMode.BRAKE: signals.NeutralModeValue.BRAKE,
    NeutralMode.COAST: signals.NeutralModeValue.COAST,
}
_FEEDBACK = {
    FeedbackSensorSource.ROTOR_SENSOR: signals.FeedbackSensorSourceValue.ROTOR_SENSOR,
    FeedbackSensorSource.REMOTE_SENSOR: signals.FeedbackSensorSourceValue.REMOTE_CANCODER,
    FeedbackSensorSource.FUSED_SENSOR: signals.FeedbackSensorSourceValue.FUSED_CANCODER,
}
_ALIGNMENT = {
    FollowerOrientation.ALIGNED: signals.MotorAlignmentValue.ALIGNED,
    FollowerOrientation.OPPOSED: signals.MotorAlignmentValue.OPPOSED,
}


def _invert(table: dict) -> dict:
    return {v: k for k, v in table.items()}


class Phoenix6TalonFXAdapter:
    """TalonFX motor controller on a Phoenix 6 CAN bus."""

    def __init__(self, device_id: int, can_bus: str = "rio", **_: object) -> None:
        self._device_id = device_id
        self._can_bus = can_bus
        self._talon: hardware.TalonFX | None = None

    @property
    def device_id(self) -> int:
        return self._device_id

    # =========================================================================
    # Connection
    # =========================================================================

    def connect(self) -> bool:
        self._talon = hardware.TalonFX(self._device_id, self._can_bus)
        return self._talon.is_connected()

    def disconnect(self) -> None:
        if self._talon is not None:
            self._talon.set_control(controls.NeutralOut())
            self._talon = None

    def is_connected(self) -> bool:
        return self._talon is not None and self._talon.is_connected()

    def get_info(self) -> DeviceInfo:
        return DeviceInfo(vendor="CTRE", model="TalonFX", device_id=self._device_id)

    # =========================================================================
    # Configuration
    # =========================================================================

    def apply_config(self, config: MotorConfiguration, timeout: float) -> ApplyResult:
        if self._talon is None:
            return ApplyResult(StatusCode.NOT_CONNECTED)
        status = self._talon.configurator.apply(_to_phoenix(config), timeout)
        return ApplyResult(_status(status))

    def read_config(self) -> MotorConfiguration | None:
        if self._talon is None:
            return None
        cfg = configs.TalonFXConfiguration()
        if not self._talon.configurator.refresh(cfg).is_ok():
            return None
        return _from_phoenix(cfg)

    # =========================================================================
    # Control
    # =========================================================================

    def set_control(self, request: ControlRequest) -> StatusCode:
        if self._talon is None:
            return StatusCode.NOT_CONNECTED
        return _status(self._talon.set_control(_to_control(request)))

    # =========================================================================
    # State Reading
    # =========================================================================

    def read_position(self) -> float:
        if self._talon is None:
            raise RuntimeError("Not connected")
        return self._talon.get_position().value

    def read_velocity(self) -> float:
        if self._talon is None:
            raise RuntimeError("Not connected")
        return self._talon.get_velocity().value

    def read_limit_switches(self) -> LimitSwitchState:
        if self._talon is None:
            raise RuntimeError("Not connected")
        return LimitSwitchState(
            forward=self._talon.get_forward_limit().value
            == signals.ForwardLimitValue.CLOSED_TO_GROUND,
            reverse=self._talon.get_reverse_limit().value
            == signals.ReverseLimitValue.CLOSED_TO_GROUND,
        )


class Phoenix6CANcoderAdapter:
    """CANcoder absolute encoder used as a remote feedback sensor."""

    def __init__(self, device_id: int, can_bus: str = "rio", **_: object) -> None:
        self._device_id = device_id
        self._can_bus = can_bus
        self._cancoder: hardware.CANcoder | None = None

    @property
    def device_id(self) -> int:
        return self._device_id

    def connect(self) -> bool:
        self._cancoder = hardware.CANcoder(self._device_id, self._can_bus)
        return self._cancoder.is_connected()

    def disconnect(self) -> None:
        self._cancoder = None

    def read_position(self) -> float:
        if self._cancoder is None:
            raise RuntimeError("Not connected")
        return self._cancoder.get_absolute_position().value


def _status(code: PhoenixStatusCode) -> StatusCode:
    if code.is_ok():
        return StatusCode.OK
    name = code.name.upper()
    if "TIMEOUT" in name:
        return StatusCode.TIMEOUT
    if name.startswith("TX"):
        return StatusCode.TX_FULL
    if "INVALID" in name or "NOT_SUPPORTED" in name:
        return StatusCode.REJECTED
    return StatusCode.BUS_ERROR


def _to_control(request: ControlRequest) -> object:
    match request:
        case VoltageRequest(output=volts):
            return controls.VoltageOut(volts)
        case VelocityRequest(velocity=velocity):
            return controls.VelocityVoltage(velocity)
        case PositionRequest(position=position, bounded=bounded):
            return (
                controls.PositionVoltage(position)
                .with_limit_forward_motion(bounded)
                .with_limit_reverse_motion(bounded)
                .with_ignore_hardware_limits(not bounded)
            )
        case MotionProfiledPositionRequest(position=position, bounded=bounded):
            return (
                controls.MotionMagicExpoVoltage(position)
                .with_limit_forward_motion(bounded)
                .with_limit_reverse_motion(bounded)
                .with_ignore_hardware_limits(not bounded)
            )
        case MotionProfiledVelocityRequest(velocity=velocity):
            return controls.MotionMagicVelocityVoltage(velocity)
        case FollowerRequest(leader_id=leader_id, orientation=orientation):
            return controls.Follower(leader_id, _ALIGNMENT[orientation])
        case NeutralRequest():
            return controls.NeutralOut()
    raise TypeError(f"Unsupported control request: {request!r}")


def _to_phoenix(config: MotorConfiguration) -> configs.TalonFXConfiguration:
    cfg = configs.TalonFXConfiguration()

    cfg.motor_output.inverted = _INVERTED[config.inverted]
    cfg.motor_output.neutral_mode = _NEUTRAL[config.neutral_mode]

    cfg.feedback.feedback_sensor_source = _FEEDBACK[config.feedback.sensor_source]
    cfg.feedback.rotor_to_sensor_ratio = config.feedback.rotor_to_sensor_ratio
    cfg.feedback.sensor_to_mechanism_ratio = config.feedback.sensor_to_mechanism_ratio
    if config.feedback.remote_sensor_id is not None:
        cfg.feedback.feedback_remote_sensor_id = config.feedback.remote_sensor_id

    gains = config.gains
    cfg.slot0.k_p = gains.k_p
    cfg.slot0.k_i = gains.k_i
    cfg.slot0.k_d = gains.k_d
    cfg.slot0.k_s = gains.k_s
    cfg.slot0.k_v = gains.k_v
    cfg.slot0.k_a = gains.k_a

    if config.motion_profile is not None:
        cfg.motion_magic.motion_magic_cruise_velocity = config.motion_profile.cruise_velocity
        cfg.motion_magic.motion_magic_acceleration = config.motion_profile.acceleration
        cfg.motion_magic.motion_magic_jerk = config.motion_profile.jerk

    if config.hardware_limits is not None:
        wiring = config.hardware_limits
        cfg.hardware_limit_switch.forward_limit_remote_sensor_id = wiring.forward_input_id
        cfg.hardware_limit_switch.reverse_limit_remote_sensor_id = wiring.reverse_input_id
        cfg.hardware_limit_switch.forward_limit_enable = wiring.forward_enabled
        cfg.hardware_limit_switch.reverse_limit_enable = wiring.reverse_enabled
    else:
        cfg.hardware_limit_switch.forward_limit_enable = False
        cfg.hardware_limit_switch.reverse_limit_enable = False

    return cfg


def _from_phoenix(cfg: configs.TalonFXConfiguration) -> MotorConfiguration:
    source = _invert(_FEEDBACK)[cfg.feedback.feedback_sensor_source]
    hls = cfg.hardware_limit_switch
    mm = cfg.motion_magic

    return MotorConfiguration(
        inverted=_invert(_INVERTED)[cfg.motor_output.inverted],
        neutral_mode=_invert(_NEUTRAL)[cfg.motor_output.neutral_mode],
        feedback=FeedbackConfig(
            sensor_source=source,
            rotor_to_sensor_ratio=cfg.feedback.rotor_to_sensor_ratio,
            sensor_to_mechanism_ratio=cfg.feedback.sensor_to_mechanism_ratio,
            remote_sensor_id=(
                None
                if source is FeedbackSensorSource.ROTOR_SENSOR
                else cfg.feedback.feedback_remote_sensor_id
            ),
        ),
        gains=ClosedLoopGains(
            k_p=cfg.slot0.k_p,
            k_i=cfg.slot0.k_i,
            k_d=cfg.slot0.k_d,
            k_s=cfg.slot0.k_s,
            k_v=cfg.slot0.k_v,
            k_a=cfg.slot0.k_a,
        ),
        # The device always stores motion magic limits; zero cruise means unused.
        motion_profile=(
            MotionProfile(
                cruise_velocity=mm.motion_magic_cruise_velocity,
                acceleration=mm.motion_magic_acceleration,
                jerk=mm.motion_magic_jerk,
            )
            if mm.motion_magic_cruise_velocity > 0
            else None
        ),
        hardware_limits=(
            HardwareLimitWiring(
                forward_input_id=hls.forward_limit_remote_sensor_id,
                reverse_input_id=hls.reverse_limit_remote_sensor_id,
                forward_enabled=hls.forward_limit_enable,
                reverse_enabled=hls.reverse_limit_enable,
            )
            if hls.forward_limit_enable or hls.reverse_limit_enable
            else None
        ),
    )


def register(registry: AdapterRegistry) -> None:
    """Register this backend with the adapter registry."""
    registry.register("phoenix6", Phoenix6TalonFXAdapter, Phoenix6CANcoderAdapter)
