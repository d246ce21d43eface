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

import pytest

from actuators.control.errors import TransportError
from actuators.control.requests import (
    MotionProfiledPositionRequest,
    MotionProfiledVelocityRequest,
    NeutralRequest,
    PositionRequest,
    VelocityRequest,
    VoltageRequest,
)
from actuators.hardware.motors.spec import StatusCode


class TestDispatch:
    def test_latest_request_wins(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)

        dispatcher.set_position(device, 5.0)
        dispatcher.set_velocity(device, 10.0)
        dispatcher.set_voltage(device, 3.0)

        assert device.active_request == VoltageRequest(3.0)
        assert device.adapter.request == VoltageRequest(3.0)
        assert device.adapter.frames == [
            PositionRequest(5.0),
            VelocityRequest(10.0),
            VoltageRequest(3.0),
        ]

    def test_stop_and_neutral(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("feeder", 3, rotor_config)

        assert dispatcher.stop(device) == VoltageRequest(0.0)
        assert dispatcher.neutral(device) == NeutralRequest()
        assert device.active_request == NeutralRequest()

    def test_transport_error_keeps_previous_request(
        self, make_ready_device, rotor_config, dispatcher
    ):
        device = make_ready_device("climber", 19, rotor_config)
        dispatcher.set_velocity(device, 10.0)
        device.adapter.control_status = StatusCode.TX_FULL

        with pytest.raises(TransportError) as exc_info:
            dispatcher.set_velocity(device, 20.0)

        assert exc_info.value.status == "tx_full"
        assert device.active_request == VelocityRequest(10.0)
        assert device.adapter.frames == [VelocityRequest(10.0)]

    def test_rejects_non_finite(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)

        with pytest.raises(ValueError):
            dispatcher.set_velocity(device, float("inf"))
        with pytest.raises(ValueError):
            dispatcher.set_position(device, float("nan"))
        assert device.active_request is None


class TestBounded:
    def test_bounded_needs_wiring(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)

        with pytest.raises(ValueError, match="no hardware limits"):
            dispatcher.set_position(device, 1.0, bounded=True)

    def test_unbounded_by_default(self, make_ready_device, limited_config, dispatcher):
        device = make_ready_device("deploy", 21, limited_config)

        assert dispatcher.set_position(device, 1.0) == PositionRequest(1.0, bounded=False)

    def test_bounded_on_wired_device(self, make_ready_device, limited_config, dispatcher):
        device = make_ready_device("deploy", 21, limited_config)

        assert dispatcher.set_position(device, 1.0, bounded=True).bounded


class TestMotionProfiled:
    def test_needs_profile(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)

        with pytest.raises(ValueError, match="no motion profile"):
            dispatcher.set_motion_profiled_position(device, 1.0)

    def test_profiled_request(self, make_ready_device, limited_config, dispatcher):
        device = make_ready_device("deploy", 21, limited_config)

        request = dispatcher.set_motion_profiled_position(device, 0.25)

        assert request == MotionProfiledPositionRequest(0.25, bounded=False)
        assert device.active_request == request

    def test_profiled_velocity_needs_profile(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("roller", 20, rotor_config)

        with pytest.raises(ValueError, match="no motion profile"):
            dispatcher.set_motion_profiled_velocity(device, 40.0)

        assert device.active_request is None

    def test_profiled_velocity_request(self, make_ready_device, limited_config, dispatcher):
        device = make_ready_device("roller", 20, limited_config)

        request = dispatcher.set_motion_profiled_velocity(device, 40.0)

        assert request == MotionProfiledVelocityRequest(40.0)
        assert device.active_request == request
