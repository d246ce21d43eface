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

"""In-memory CAN bus with simulated motor controllers and encoders.

The simulation reproduces the device-side behavior the core relies on:
configuration storage and readback, follower mirroring, and hardware limit
switches that refuse motion further into an asserted limit. A crude
first-order motion model lets tests step the bus and observe positions.

Fault injection:
    motor.apply_status = StatusCode.TIMEOUT     # next applies time out
    motor.rejected_fields = {"gains.k_p"}      # next applies are refused
    motor.control_status = StatusCode.TX_FULL   # control frames not queued
    motor.reachable = False                     # connect() fails
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from actuators.constants import CONTROL_PERIOD_S
from actuators.control.components import LimitSwitchState, MotorConfiguration
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
    is_position_request,
)
from actuators.hardware.motors.spec import ApplyResult, DeviceInfo, StatusCode

if TYPE_CHECKING:
    from actuators.hardware.motors.registry import AdapterRegistry

# Free speed of a brushless FRC motor at 12 V, rotations per second.
FREE_SPEED_RPS = 100.0
_NOMINAL_VOLTS = 12.0


@dataclass
class MockCANBus:
    """Shared medium for mock devices, addressed by CAN id."""

    motors: dict[int, MockMotorController] = field(default_factory=dict)
    sensors: dict[int, MockEncoder] = field(default_factory=dict)

    def attach(self, device: MockMotorController | MockEncoder) -> None:
        table = self.motors if isinstance(device, MockMotorController) else self.sensors
        table[device.device_id] = device

    def detach(self, device: MockMotorController | MockEncoder) -> None:
        table = self.motors if isinstance(device, MockMotorController) else self.sensors
        table.pop(device.device_id, None)

    def simulate(self, dt: float = CONTROL_PERIOD_S, steps: int = 1) -> None:
        """Advance every attached motor by ``steps`` periods of ``dt``."""
        for _ in range(steps):
            for motor in list(self.motors.values()):
                motor.simulate(dt)

    def fused_motor_for(self, sensor_id: int) -> MockMotorController | None:
        for motor in self.motors.values():
            config = motor.read_config()
            if config is not None and config.feedback.remote_sensor_id == sensor_id:
                return motor
        return None


class MockMotorController:
    """Simulated motor controller."""

    def __init__(self, device_id: int, bus: MockCANBus | None = None, **_: object) -> None:
        self._device_id = device_id
        self._bus = bus if bus is not None else MockCANBus()
        self._connected = False
        self._config: MotorConfiguration | None = None
        self._request: ControlRequest = NeutralRequest()

        self.position = 0.0
        self.velocity = 0.0
        self.forward_limit = False
        self.reverse_limit = False
        # Physical stops that assert the matching limit input when reached.
        self.forward_stop: float | None = None
        self.reverse_stop: float | None = None

        self.reachable = True
        self.apply_status = StatusCode.OK
        self.rejected_fields: set[str] = set()
        self.control_status = StatusCode.OK
        self.frames: list[ControlRequest] = []

    @property
    def device_id(self) -> int:
        return self._device_id

    @property
    def bus(self) -> MockCANBus:
        return self._bus

    # =========================================================================
    # Connection
    # =========================================================================

    def connect(self) -> bool:
        if not self.reachable:
            return False
        self._bus.attach(self)
        self._connected = True
        return True

    def disconnect(self) -> None:
        self._bus.detach(self)
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def get_info(self) -> DeviceInfo:
        return DeviceInfo(vendor="mock", model="SimMotor", device_id=self._device_id)

    # =========================================================================
    # Configuration
    # =========================================================================

    def apply_config(self, config: MotorConfiguration, timeout: float) -> ApplyResult:
        if not self._connected:
            return ApplyResult(StatusCode.NOT_CONNECTED)
        if not self.apply_status.is_ok:
            return ApplyResult(self.apply_status)
        if self.rejected_fields:
            return ApplyResult(StatusCode.REJECTED, frozenset(self.rejected_fields))
        self._config = config
        return ApplyResult(StatusCode.OK)

    def read_config(self) -> MotorConfiguration | None:
        return self._config

    # =========================================================================
    # Control
    # =========================================================================

    def set_control(self, request: ControlRequest) -> StatusCode:
        if not self._connected:
            return StatusCode.NOT_CONNECTED
        if not self.control_status.is_ok:
            return self.control_status
        self._request = request
        self.frames.append(request)
        return StatusCode.OK

    @property
    def request(self) -> ControlRequest:
        """The frame the device last accepted."""
        return self._request

    def effective_request(self) -> ControlRequest:
        """What the device is actually executing, resolving follower frames."""
        match self._request:
            case FollowerRequest(leader_id=leader_id, orientation=orientation):
                leader = self._bus.motors.get(leader_id)
                if leader is None:
                    return NeutralRequest()
                mirrored = leader.effective_request()
                if orientation is FollowerOrientation.OPPOSED:
                    return mirrored.negated()
                return mirrored
            case other:
                return other

    # =========================================================================
    # State Reading
    # =========================================================================

    def read_position(self) -> float:
        return self.position

    def read_velocity(self) -> float:
        return self.velocity

    def read_limit_switches(self) -> LimitSwitchState:
        forward = self.forward_limit or (
            self.forward_stop is not None and self.position >= self.forward_stop
        )
        reverse = self.reverse_limit or (
            self.reverse_stop is not None and self.position <= self.reverse_stop
        )
        return LimitSwitchState(forward=forward, reverse=reverse)

    # =========================================================================
    # Simulation
    # =========================================================================

    def simulate(self, dt: float) -> None:
        request = self.effective_request()
        velocity = self._commanded_velocity(request, dt)
        velocity = self._apply_hardware_limits(request, velocity)

        self.position += velocity * dt
        # Nothing moves through a physical stop.
        if self.forward_stop is not None:
            self.position = min(self.position, self.forward_stop)
        if self.reverse_stop is not None:
            self.position = max(self.position, self.reverse_stop)
        self.velocity = velocity

    def _commanded_velocity(self, request: ControlRequest, dt: float) -> float:
        match request:
            case VoltageRequest(output=volts):
                return _clamp(volts / _NOMINAL_VOLTS * FREE_SPEED_RPS, FREE_SPEED_RPS)
            case VelocityRequest(velocity=target):
                return _clamp(target, FREE_SPEED_RPS)
            case PositionRequest(position=target):
                return _clamp((target - self.position) / dt, FREE_SPEED_RPS)
            case MotionProfiledPositionRequest(position=target):
                cruise = FREE_SPEED_RPS
                if self._config is not None and self._config.motion_profile is not None:
                    cruise = self._config.motion_profile.cruise_velocity
                return _clamp((target - self.position) / dt, cruise)
            case MotionProfiledVelocityRequest(velocity=target):
                target = _clamp(target, FREE_SPEED_RPS)
                if self._config is None or self._config.motion_profile is None:
                    return target
                step = self._config.motion_profile.acceleration * dt
                return self.velocity + _clamp(target - self.velocity, step)
            case _:
                return 0.0

    def _apply_hardware_limits(self, request: ControlRequest, velocity: float) -> float:
        if self._config is None or self._config.hardware_limits is None:
            return velocity
        if is_position_request(request) and not request.bounded:
            return velocity

        wiring = self._config.hardware_limits
        switches = self.read_limit_switches()
        if velocity > 0 and wiring.forward_enabled and switches.forward:
            return 0.0
        if velocity < 0 and wiring.reverse_enabled and switches.reverse:
            return 0.0
        return velocity


class MockEncoder:
    """Simulated remote absolute encoder.

    Reports the position of the motor fused with it, or ``position`` when no
    motor uses it.
    """

    def __init__(self, device_id: int, bus: MockCANBus | None = None, **_: object) -> None:
        self._device_id = device_id
        self._bus = bus if bus is not None else MockCANBus()
        self._connected = False
        self.position = 0.0
        self.reachable = True

    @property
    def device_id(self) -> int:
        return self._device_id

    def connect(self) -> bool:
        if not self.reachable:
            return False
        self._bus.attach(self)
        self._connected = True
        return True

    def disconnect(self) -> None:
        self._bus.detach(self)
        self._connected = False

    def read_position(self) -> float:
        motor = self._bus.fused_motor_for(self._device_id)
        if motor is None:
            return self.position
        return motor.read_position()


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def register(registry: AdapterRegistry) -> None:
    """Register this backend with the adapter registry."""
    registry.register("mock", MockMotorController, MockEncoder)
