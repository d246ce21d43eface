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

"""Follower links between a leader device and a mechanically coupled follower.

The follower mirrors its leader in hardware through a follower frame, so the
pair behaves as one degree of freedom. While bound, the follower refuses
direct requests (``FollowerMisuse``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from actuators.control.requests import FollowerOrientation, FollowerRequest, NeutralRequest
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.device import Device
    from actuators.control.requests import ControlRequest

logger = setup_logger()


class FollowerLink:
    """A bound (leader, follower, orientation) relationship.

    Create with ``FollowerLink.bind()``, normally during mechanism
    initialization once both devices are configured.
    """

    def __init__(self, leader: Device, follower: Device, orientation: FollowerOrientation) -> None:
        self._leader = leader
        self._follower = follower
        self._orientation = orientation
        self._bound = False

    @classmethod
    def bind(
        cls, leader: Device, follower: Device, orientation: FollowerOrientation
    ) -> FollowerLink:
        """Make ``follower`` mirror ``leader``.

        Raises:
            ValueError: Same device twice, follower already bound, or leader
                is itself a follower
            DeviceUnready: Either device is not configured
            TransportError: The follower frame was not sent
        """
        if leader is follower or leader.device_id == follower.device_id:
            raise ValueError(f"device {leader.device_id} cannot follow itself")
        if follower.is_follower:
            raise ValueError(f"device {follower.device_id} is already following")
        if leader.is_follower:
            raise ValueError(f"device {leader.device_id} is a follower and cannot lead")

        leader.ensure_commandable()
        follower.ensure_commandable()

        link = cls(leader, follower, orientation)
        follower.submit(FollowerRequest(leader.device_id, orientation))
        follower._set_follower_link(link)
        link._bound = True

        logger.info(
            "Follower bound",
            leader=leader.name,
            follower=follower.name,
            orientation=orientation.value,
        )
        return link

    @property
    def leader(self) -> Device:
        return self._leader

    @property
    def follower(self) -> Device:
        return self._follower

    @property
    def orientation(self) -> FollowerOrientation:
        return self._orientation

    @property
    def is_bound(self) -> bool:
        return self._bound

    def derived_request(self) -> ControlRequest | None:
        """The request the follower is effectively executing.

        None until the leader has an active request.
        """
        request = self._leader.active_request
        if request is None:
            return None
        if self._orientation is FollowerOrientation.OPPOSED:
            return request.negated()
        return request

    def unbind(self) -> None:
        """Release the follower and leave it neutral.

        Raises:
            TransportError: The neutral frame was not sent; the link stays bound
        """
        if not self._bound:
            return
        self._follower.submit(NeutralRequest())
        self._follower._set_follower_link(None)
        self._bound = False
        logger.info("Follower released", leader=self._leader.name, follower=self._follower.name)


__all__ = [
    "FollowerLink",
]
