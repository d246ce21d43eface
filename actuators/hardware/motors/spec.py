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

"""Transport protocols for motor controllers and remote sensors.

The actuator core talks to hardware only through these protocols. Every
backend lives in its own subpackage with an ``adapter.py`` exposing
``register(registry)``; see ``actuators.hardware.motors.registry``.

Adapters never block: a frame that cannot be queued immediately is reported
as ``StatusCode.TX_FULL``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from actuators.control.components import LimitSwitchState, MotorConfiguration
    from actuators.control.requests import ControlRequest


class StatusCode(Enum):
    OK = "ok"
    TIMEOUT = "timeout"
    REJECTED = "rejected"
    BUS_ERROR = "bus_error"
    TX_FULL = "tx_full"
    NOT_CONNECTED = "not_connected"

    @property
    def is_ok(self) -> bool:
        return self is StatusCode.OK


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of a configuration apply frame.

    Attributes:
        status: Status reported by the device or bus
        rejected_fields: Dotted names of fields the device refused
    """

    status: StatusCode
    rejected_fields: frozenset[str] = frozenset()

    @property
    def ok(self) -> bool:
        return self.status.is_ok and not self.rejected_fields


@dataclass(frozen=True)
class DeviceInfo:
    vendor: str
    model: str
    device_id: int


@runtime_checkable
class MotorControllerAdapter(Protocol):
    """One motor controller on the bus."""

    @property
    def device_id(self) -> int: ...

    def connect(self) -> bool:
        """Open the device. Returns False when it is not reachable."""
        ...

    def disconnect(self) -> None: ...

    def is_connected(self) -> bool: ...

    def get_info(self) -> DeviceInfo: ...

    def apply_config(self, config: MotorConfiguration, timeout: float) -> ApplyResult:
        """Write a full configuration to the device."""
        ...

    def read_config(self) -> MotorConfiguration | None:
        """Read back the configuration stored on the device."""
        ...

    def set_control(self, request: ControlRequest) -> StatusCode:
        """Queue a control frame; never waits for the device."""
        ...

    def read_position(self) -> float:
        """Latest reported position in mechanism rotations."""
        ...

    def read_velocity(self) -> float:
        """Latest reported velocity in mechanism rotations per second."""
        ...

    def read_limit_switches(self) -> LimitSwitchState: ...


@runtime_checkable
class SensorAdapter(Protocol):
    """A remote absolute position sensor (e.g., a CAN encoder)."""

    @property
    def device_id(self) -> int: ...

    def connect(self) -> bool: ...

    def disconnect(self) -> None: ...

    def read_position(self) -> float: ...


__all__ = [
    "ApplyResult",
    "DeviceInfo",
    "MotorControllerAdapter",
    "SensorAdapter",
    "StatusCode",
]
