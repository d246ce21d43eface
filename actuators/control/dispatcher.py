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

"""Control-mode dispatch for a mechanism's devices.

Builds the request for each control mode and submits it to a device. The
device's onboard controller closes every loop; the dispatcher only issues
setpoints. Each call replaces whatever request was active on the device.

Example:
    >>> dispatcher = ControlModeDispatcher("shooter")
    >>> dispatcher.set_velocity(flywheel, 75.0)
    >>> dispatcher.set_position(hood, 0.2)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from actuators.control.requests import (
    ControlRequest,
    MotionProfiledPositionRequest,
    MotionProfiledVelocityRequest,
    NeutralRequest,
    PositionRequest,
    VelocityRequest,
    VoltageRequest,
)
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import MechanismName
    from actuators.control.device import Device

logger = setup_logger()


class ControlModeDispatcher:
    """Issues control requests to the devices of one mechanism.

    Holds no per-device state: the active request lives on the Device. The
    caller guarantees a single writer per mechanism, so there is no locking.
    """

    def __init__(self, mechanism: MechanismName) -> None:
        self._mechanism = mechanism

    @property
    def mechanism(self) -> MechanismName:
        return self._mechanism

    def set_voltage(self, device: Device, volts: float) -> VoltageRequest:
        """Open-loop voltage output, no error correction."""
        device.ensure_commandable()
        request = VoltageRequest(_finite(volts, "volts"))
        self._dispatch(device, request)
        return request

    def set_velocity(self, device: Device, velocity: float) -> VelocityRequest:
        """Closed-loop velocity in rotations per second.

        Positive follows the device's configured inversion.
        """
        device.ensure_commandable()
        request = VelocityRequest(_finite(velocity, "velocity"))
        self._dispatch(device, request)
        return request

    def set_position(
        self, device: Device, position: float, bounded: bool = False
    ) -> PositionRequest:
        """Closed-loop step to ``position`` rotations.

        Args:
            device: Target device
            position: Target position in mechanism rotations
            bounded: Honor the device's hardware limit inputs. Always true on
                a limit-bounded axis.

        Raises:
            ValueError: ``bounded`` was requested on a device without limit wiring
        """
        device.ensure_commandable()
        request = PositionRequest(
            _finite(position, "position"), self._resolve_bounded(device, bounded)
        )
        self._dispatch(device, request)
        return request

    def set_motion_profiled_position(
        self, device: Device, position: float
    ) -> MotionProfiledPositionRequest:
        """Position target reached along the device's configured motion profile.

        Raises:
            ValueError: The device has no motion profile configured
        """
        device.ensure_commandable()
        self._require_profile(device)
        request = MotionProfiledPositionRequest(
            _finite(position, "position"), bounded=device.is_limit_bounded
        )
        self._dispatch(device, request)
        return request

    def set_motion_profiled_velocity(
        self, device: Device, velocity: float
    ) -> MotionProfiledVelocityRequest:
        """Velocity target approached at the profile's acceleration.

        Raises:
            ValueError: The device has no motion profile configured
        """
        device.ensure_commandable()
        self._require_profile(device)
        request = MotionProfiledVelocityRequest(_finite(velocity, "velocity"))
        self._dispatch(device, request)
        return request

    def stop(self, device: Device) -> VoltageRequest:
        """Zero output; the device holds in its neutral mode."""
        return self.set_voltage(device, 0.0)

    def neutral(self, device: Device) -> NeutralRequest:
        """Release the device's output entirely."""
        device.ensure_commandable()
        request = NeutralRequest()
        self._dispatch(device, request)
        return request

    def _require_profile(self, device: Device) -> None:
        config = device.configuration
        if config is not None and config.motion_profile is None:
            raise ValueError(
                f"{self._mechanism}/{device.name} has no motion profile configured"
            )

    def _resolve_bounded(self, device: Device, bounded: bool) -> bool:
        if device.is_limit_bounded:
            return True
        config = device.configuration
        if bounded and config is not None and not config.has_hardware_limits:
            raise ValueError(
                f"{self._mechanism}/{device.name} has no hardware limits wired, "
                "cannot issue a bounded request"
            )
        return bounded

    def _dispatch(self, device: Device, request: ControlRequest) -> None:
        device.submit(request)
        logger.debug(
            "Request dispatched",
            mechanism=self._mechanism,
            device=device.name,
            mode=request.mode.value,
            request=request,
        )


def _finite(value: float, name: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


__all__ = [
    "ControlModeDispatcher",
]
