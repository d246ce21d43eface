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

"""Named operating points applied as one update.

A policy maps a closed enum of operating points to fixed setpoints: a
velocity and an optional auxiliary position (e.g., shooter wheel speed and
hood angle). Every target device is checked before anything is sent, so a
refused selection changes nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic, TypeVar

from actuators.control.errors import TransportError
from actuators.control.requests import NeutralRequest
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.device import Device
    from actuators.control.dispatcher import ControlModeDispatcher

logger = setup_logger()

PointT = TypeVar("PointT", bound=Enum)


@dataclass(frozen=True)
class Setpoint:
    """Setpoints applied together for one operating point.

    Attributes:
        velocity: Velocity in rotations per second
        auxiliary_position: Auxiliary axis position in rotations, if any
    """

    velocity: float
    auxiliary_position: float | None = None


STOP = Setpoint(velocity=0.0)


class OperatingPointPolicy(Generic[PointT]):
    """Selects operating points for one velocity device and an auxiliary axis."""

    def __init__(
        self,
        table: Mapping[PointT, Setpoint],
        dispatcher: ControlModeDispatcher,
        velocity_device: Device,
        auxiliary_device: Device | None = None,
        auxiliary_enabled: bool = False,
    ) -> None:
        if not table:
            raise ValueError("operating point table is empty")
        if auxiliary_enabled and auxiliary_device is None:
            raise ValueError("auxiliary positions enabled without an auxiliary device")

        self._table = MappingProxyType(dict(table))
        self._dispatcher = dispatcher
        self._velocity_device = velocity_device
        self._auxiliary_device = auxiliary_device
        self._auxiliary_enabled = auxiliary_enabled
        self._current: PointT | None = None

    @property
    def table(self) -> Mapping[PointT, Setpoint]:
        return self._table

    @property
    def current(self) -> PointT | None:
        """Last point applied, None after stop()."""
        return self._current

    @property
    def auxiliary_enabled(self) -> bool:
        return self._auxiliary_enabled

    def select(self, point: PointT) -> Setpoint:
        """Look up the setpoints for ``point`` without sending anything."""
        try:
            return self._table[point]
        except KeyError:
            raise ValueError(f"unknown operating point {point!r}") from None

    def apply(self, point: PointT) -> Setpoint:
        """Send the setpoints for ``point``.

        Raises:
            ValueError: Unknown point
            FollowerMisuse, DeviceUnready: A target device refuses requests;
                nothing was sent
            TransportError: A frame was not sent. If the auxiliary frame fails
                the velocity device gets its previous request back and
                ``current`` becomes None.
        """
        setpoint = self.select(point)
        auxiliary = self._auxiliary_device if self._auxiliary_enabled else None
        auxiliary_position = setpoint.auxiliary_position
        if auxiliary_position is None:
            auxiliary = None

        self._velocity_device.ensure_commandable()
        if auxiliary is not None:
            auxiliary.ensure_commandable()

        previous = self._velocity_device.active_request
        self._dispatcher.set_velocity(self._velocity_device, setpoint.velocity)
        if auxiliary is not None and auxiliary_position is not None:
            try:
                self._dispatcher.set_position(auxiliary, auxiliary_position)
            except TransportError:
                # Put the velocity device back so no half-applied point is left.
                self._current = None
                logger.warning(
                    "Operating point rolled back",
                    mechanism=self._dispatcher.mechanism,
                    point=point.name,
                    restored=previous,
                )
                self._velocity_device.submit(previous if previous is not None else NeutralRequest())
                raise

        self._current = point
        logger.info(
            "Operating point applied",
            mechanism=self._dispatcher.mechanism,
            point=point.name,
            velocity=setpoint.velocity,
            auxiliary_position=auxiliary_position if auxiliary is not None else None,
        )
        return setpoint

    def clear(self) -> None:
        """Forget the current point after a setpoint was overridden directly."""
        self._current = None

    def stop(self) -> Setpoint:
        """Zero velocity regardless of the current point."""
        self._dispatcher.set_velocity(self._velocity_device, STOP.velocity)
        self._current = None
        return STOP


__all__ = [
    "STOP",
    "OperatingPointPolicy",
    "Setpoint",
]
