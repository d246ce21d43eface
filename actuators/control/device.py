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

"""Device handle for the actuator-control core.

Wraps a MotorControllerAdapter with core-specific state:
- Applied configuration and readiness
- The single active control request
- Follower binding and limit-bounded flag
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from actuators.control.errors import DeviceUnready, FollowerMisuse, TransportError
from actuators.hardware.motors.spec import MotorControllerAdapter
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import (
        DeviceComponent,
        DeviceId,
        DeviceName,
        LimitSwitchState,
        MotorConfiguration,
        MotorState,
    )
    from actuators.control.follower import FollowerLink
    from actuators.control.requests import ControlRequest

logger = setup_logger()


class Device:
    """Runtime handle for one motor controller.

    Owned by exactly one mechanism, created when the mechanism is built. The
    handle never opens the bus itself; ``configure()`` does that.
    """

    def __init__(self, adapter: MotorControllerAdapter, component: DeviceComponent) -> None:
        """Initialize the device handle.

        Args:
            adapter: Transport adapter for this controller
            component: Wiring (name, CAN id, configuration) of the controller
        """
        if not isinstance(adapter, MotorControllerAdapter):
            raise TypeError("adapter must implement MotorControllerAdapter")
        if adapter.device_id != component.device_id:
            raise ValueError(
                f"adapter is addressed to {adapter.device_id}, "
                f"component {component.name} expects {component.device_id}"
            )

        self._adapter = adapter
        self._component = component
        self._configuration: MotorConfiguration | None = None
        self._active_request: ControlRequest | None = None
        self._follower_link: FollowerLink | None = None
        self._limit_bounded = False

    def __repr__(self) -> str:
        return f"Device({self.name!r}, id={self.device_id}, ready={self.is_ready})"

    @property
    def device_id(self) -> DeviceId:
        return self._component.device_id

    @property
    def name(self) -> DeviceName:
        return self._component.name

    @property
    def component(self) -> DeviceComponent:
        return self._component

    @property
    def adapter(self) -> MotorControllerAdapter:
        return self._adapter

    @property
    def configuration(self) -> MotorConfiguration | None:
        """Configuration verified on the hardware, None while unready."""
        return self._configuration

    @property
    def is_ready(self) -> bool:
        return self._configuration is not None

    @property
    def active_request(self) -> ControlRequest | None:
        """The last request the bus accepted for this device."""
        return self._active_request

    @property
    def follower_link(self) -> FollowerLink | None:
        """The link this device follows through, if any."""
        return self._follower_link

    @property
    def is_follower(self) -> bool:
        return self._follower_link is not None

    @property
    def is_limit_bounded(self) -> bool:
        return self._limit_bounded

    def ensure_commandable(self) -> None:
        """Raise unless a direct request may be submitted now.

        Raises:
            FollowerMisuse: The device is bound as a follower
            DeviceUnready: No configuration has been applied
        """
        if self._follower_link is not None:
            raise FollowerMisuse(self.device_id, self._follower_link.leader.device_id)
        if not self.is_ready:
            raise DeviceUnready(self.device_id)

    def submit(self, request: ControlRequest) -> None:
        """Queue ``request`` on the bus, replacing the active request.

        On failure the previous request stays recorded as active and nothing
        is retried.

        Raises:
            DeviceUnready: No configuration has been applied
            TransportError: The bus did not accept the frame
        """
        if not self.is_ready:
            raise DeviceUnready(self.device_id)

        status = self._adapter.set_control(request)
        if not status.is_ok:
            logger.warning(
                "Control frame not sent",
                device=self.name,
                device_id=self.device_id,
                status=status.value,
                request=request,
            )
            raise TransportError(self.device_id, status.value)

        self._active_request = request

    def read_state(self) -> MotorState:
        """Latest measured position and velocity, possibly one cycle stale."""
        from actuators.control.components import MotorState

        return MotorState(
            position=self._adapter.read_position(),
            velocity=self._adapter.read_velocity(),
        )

    @property
    def position(self) -> float:
        return self._adapter.read_position()

    @property
    def velocity(self) -> float:
        return self._adapter.read_velocity()

    def read_limit_switches(self) -> LimitSwitchState:
        return self._adapter.read_limit_switches()

    def disconnect(self) -> None:
        self._configuration = None
        self._active_request = None
        self._adapter.disconnect()

    # =========================================================================
    # Owned by configuration, FollowerLink and LimitBoundedAxis
    # =========================================================================

    def _mark_ready(self, configuration: MotorConfiguration) -> None:
        self._configuration = configuration

    def _mark_unready(self) -> None:
        self._configuration = None

    def _set_follower_link(self, link: FollowerLink | None) -> None:
        self._follower_link = link

    def _set_limit_bounded(self, bounded: bool) -> None:
        self._limit_bounded = bounded


__all__ = [
    "Device",
]
