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

"""Control requests submitted to a motor controller.

A request is an immutable value; the device keeps exactly one active request
and every submission replaces it. Units follow the device's mechanism frame:
rotations for position, rotations per second for velocity, volts for voltage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeGuard


class ControlMode(Enum):
    VOLTAGE = "voltage"
    POSITION = "position"
    VELOCITY = "velocity"
    MOTION_PROFILED_POSITION = "motion_profiled_position"
    MOTION_PROFILED_VELOCITY = "motion_profiled_velocity"
    FOLLOWER = "follower"
    NEUTRAL = "neutral"


class FollowerOrientation(Enum):
    """How a follower is mounted relative to its leader."""

    ALIGNED = "aligned"
    OPPOSED = "opposed"


@dataclass(frozen=True)
class VoltageRequest:
    """Open-loop voltage output."""

    output: float

    @property
    def mode(self) -> ControlMode:
        return ControlMode.VOLTAGE

    def negated(self) -> VoltageRequest:
        return VoltageRequest(-self.output)


@dataclass(frozen=True)
class VelocityRequest:
    """Closed-loop velocity, run by the device's onboard controller."""

    velocity: float

    @property
    def mode(self) -> ControlMode:
        return ControlMode.VELOCITY

    def negated(self) -> VelocityRequest:
        return VelocityRequest(-self.velocity)


@dataclass(frozen=True)
class PositionRequest:
    """Closed-loop step to a position.

    Attributes:
        position: Target position
        bounded: Route through the device's hardware limit inputs. An
            unbounded request asks the device to ignore them.
    """

    position: float
    bounded: bool = False

    @property
    def mode(self) -> ControlMode:
        return ControlMode.POSITION

    def negated(self) -> PositionRequest:
        return PositionRequest(-self.position, self.bounded)


@dataclass(frozen=True)
class MotionProfiledPositionRequest:
    """Position target reached along a device-generated trajectory."""

    position: float
    bounded: bool = False

    @property
    def mode(self) -> ControlMode:
        return ControlMode.MOTION_PROFILED_POSITION

    def negated(self) -> MotionProfiledPositionRequest:
        return MotionProfiledPositionRequest(-self.position, self.bounded)


@dataclass(frozen=True)
class MotionProfiledVelocityRequest:
    """Velocity target reached under the motion profile's acceleration limit."""

    velocity: float

    @property
    def mode(self) -> ControlMode:
        return ControlMode.MOTION_PROFILED_VELOCITY

    def negated(self) -> MotionProfiledVelocityRequest:
        return MotionProfiledVelocityRequest(-self.velocity)


@dataclass(frozen=True)
class FollowerRequest:
    """Mirror another device's output in hardware."""

    leader_id: int
    orientation: FollowerOrientation

    @property
    def mode(self) -> ControlMode:
        return ControlMode.FOLLOWER

    def negated(self) -> FollowerRequest:
        flipped = (
            FollowerOrientation.ALIGNED
            if self.orientation is FollowerOrientation.OPPOSED
            else FollowerOrientation.OPPOSED
        )
        return FollowerRequest(self.leader_id, flipped)


@dataclass(frozen=True)
class NeutralRequest:
    """No output; the device applies its configured neutral mode."""

    @property
    def mode(self) -> ControlMode:
        return ControlMode.NEUTRAL

    def negated(self) -> NeutralRequest:
        return self


ControlRequest = (
    VoltageRequest
    | VelocityRequest
    | PositionRequest
    | MotionProfiledPositionRequest
    | MotionProfiledVelocityRequest
    | FollowerRequest
    | NeutralRequest
)


def is_position_request(
    request: ControlRequest,
) -> TypeGuard[PositionRequest | MotionProfiledPositionRequest]:
    return isinstance(request, PositionRequest | MotionProfiledPositionRequest)


__all__ = [
    "ControlMode",
    "ControlRequest",
    "FollowerOrientation",
    "FollowerRequest",
    "MotionProfiledPositionRequest",
    "MotionProfiledVelocityRequest",
    "NeutralRequest",
    "PositionRequest",
    "VelocityRequest",
    "VoltageRequest",
    "is_position_request",
]
