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

"""Axes bounded by hardware limit inputs.

The limit inputs are wired into the device's own motion-limiting logic, which
refuses motion further into an asserted limit whatever the target. The core
never clamps setpoints in software and never polls the inputs to enforce
them; it only makes sure every position request on the axis asks the device
to honor its limits, and reads the inputs back for diagnostics. Reaching a
stop is normal operation, not an error.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import HardwareLimitWiring
    from actuators.control.device import Device
    from actuators.control.dispatcher import ControlModeDispatcher
    from actuators.control.requests import MotionProfiledPositionRequest, PositionRequest
    from actuators.hardware.motors.spec import SensorAdapter

logger = setup_logger()


class AxisLimitState(Enum):
    MID_RANGE = "mid_range"
    AT_FORWARD_LIMIT = "at_forward_limit"
    AT_REVERSE_LIMIT = "at_reverse_limit"


class LimitBoundedAxis:
    """A position axis whose travel is bounded by two hardware limit inputs.

    Example:
        >>> axis = LimitBoundedAxis(deploy, dispatcher, sensor=deploy_encoder)
        >>> axis.set_motion_profiled_position(0.25)
        >>> axis.state
        <AxisLimitState.MID_RANGE: 'mid_range'>
    """

    def __init__(
        self,
        device: Device,
        dispatcher: ControlModeDispatcher,
        sensor: SensorAdapter | None = None,
    ) -> None:
        """Initialize the axis.

        Args:
            device: Configured device with hardware limit wiring enabled
            dispatcher: Dispatcher of the owning mechanism
            sensor: Remote absolute sensor the device fuses, if any

        Raises:
            ValueError: The device's configuration has no enabled limit inputs
        """
        config = device.configuration
        if config is None or not config.has_hardware_limits:
            raise ValueError(
                f"{device.name} needs a configuration with hardware limits to bound an axis"
            )

        self._device = device
        self._dispatcher = dispatcher
        self._sensor = sensor
        self._warned_both_asserted = False
        device._set_limit_bounded(True)

    @property
    def device(self) -> Device:
        return self._device

    @property
    def wiring(self) -> HardwareLimitWiring:
        config = self._device.configuration
        if config is None or config.hardware_limits is None:
            raise RuntimeError(f"{self._device.name} lost its configuration")
        return config.hardware_limits

    @property
    def state(self) -> AxisLimitState:
        """Axis position relative to its stops, as reported by the hardware."""
        switches = self._device.read_limit_switches()
        wiring = self.wiring
        forward = switches.forward and wiring.forward_enabled
        reverse = switches.reverse and wiring.reverse_enabled

        if forward and reverse and not self._warned_both_asserted:
            logger.warning(
                "Both limit inputs asserted, check wiring",
                device=self._device.name,
                forward_input=wiring.forward_input_id,
                reverse_input=wiring.reverse_input_id,
            )
            self._warned_both_asserted = True

        if forward:
            return AxisLimitState.AT_FORWARD_LIMIT
        if reverse:
            return AxisLimitState.AT_REVERSE_LIMIT
        return AxisLimitState.MID_RANGE

    @property
    def position(self) -> float:
        """Position the device's closed loop uses (fused when configured)."""
        return self._device.position

    @property
    def sensor_position(self) -> float:
        """Absolute position straight from the remote sensor."""
        if self._sensor is None:
            return self._device.position
        return self._sensor.read_position()

    def set_position(self, position: float) -> PositionRequest:
        """Step to ``position``; motion stops at an asserted limit."""
        return self._dispatcher.set_position(self._device, position, bounded=True)

    def set_motion_profiled_position(self, position: float) -> MotionProfiledPositionRequest:
        """Profile to ``position``; motion stops at an asserted limit."""
        return self._dispatcher.set_motion_profiled_position(self._device, position)

    def release(self) -> None:
        self._device._set_limit_bounded(False)


__all__ = [
    "AxisLimitState",
    "LimitBoundedAxis",
]
