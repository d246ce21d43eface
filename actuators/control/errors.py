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

"""Errors raised by the actuator-control core."""

from __future__ import annotations

from collections.abc import Iterable


class ActuatorError(Exception):
    """Base class for actuator-control failures."""

    def __init__(self, device_id: int, message: str) -> None:
        super().__init__(f"device {device_id}: {message}")
        self.device_id = device_id


class ConfigError(ActuatorError):
    """A configuration was invalid, rejected, timed out or failed readback.

    The device is left unready until it is configured successfully.
    """

    def __init__(self, device_id: int, fields: Iterable[str], reason: str) -> None:
        self.fields = frozenset(fields)
        self.reason = reason
        detail = f"{reason} ({', '.join(sorted(self.fields))})" if self.fields else reason
        super().__init__(device_id, f"configuration failed: {detail}")


class DeviceUnready(ActuatorError):
    """A request was issued to a device without an applied configuration."""

    def __init__(self, device_id: int) -> None:
        super().__init__(device_id, "not configured, refusing control request")


class TransportError(ActuatorError):
    """The bus did not accept a control frame. Retry on the next cycle."""

    def __init__(self, device_id: int, status: str) -> None:
        self.status = status
        super().__init__(device_id, f"control frame not sent ({status})")


class FollowerMisuse(ActuatorError):
    """A direct request was issued to a device that is following another."""

    def __init__(self, device_id: int, leader_id: int) -> None:
        self.leader_id = leader_id
        super().__init__(device_id, f"is following device {leader_id}, direct requests refused")


__all__ = [
    "ActuatorError",
    "ConfigError",
    "DeviceUnready",
    "FollowerMisuse",
    "TransportError",
]
