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

from actuators.control.limits import AxisLimitState, LimitBoundedAxis
from actuators.control.requests import MotionProfiledPositionRequest, PositionRequest
from actuators.hardware.motors.mock import MockEncoder


@pytest.fixture
def axis(make_ready_device, limited_config, dispatcher, bus):
    device = make_ready_device("deploy", 21, limited_config)
    encoder = MockEncoder(22, bus=bus)
    encoder.connect()
    return LimitBoundedAxis(device, dispatcher, sensor=encoder)


class TestConstruction:
    def test_needs_limit_wiring(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)

        with pytest.raises(ValueError, match="hardware limits"):
            LimitBoundedAxis(device, dispatcher)

    def test_marks_device_bounded(self, axis):
        assert axis.device.is_limit_bounded

        axis.release()

        assert not axis.device.is_limit_bounded


class TestState:
    def test_mid_range(self, axis):
        assert axis.state is AxisLimitState.MID_RANGE

    def test_forward(self, axis):
        axis.device.adapter.forward_limit = True
        assert axis.state is AxisLimitState.AT_FORWARD_LIMIT

    def test_reverse(self, axis):
        axis.device.adapter.reverse_limit = True
        assert axis.state is AxisLimitState.AT_REVERSE_LIMIT

    def test_both_asserted_reports_forward(self, axis):
        axis.device.adapter.forward_limit = True
        axis.device.adapter.reverse_limit = True

        assert axis.state is AxisLimitState.AT_FORWARD_LIMIT
        assert axis.state is AxisLimitState.AT_FORWARD_LIMIT


class TestBoundedMotion:
    def test_requests_always_bounded(self, axis, dispatcher):
        assert axis.set_position(1.0) == PositionRequest(1.0, bounded=True)
        assert axis.set_motion_profiled_position(0.5) == MotionProfiledPositionRequest(
            0.5, bounded=True
        )
        # Even when asked through the dispatcher directly.
        assert dispatcher.set_position(axis.device, 1.0, bounded=False).bounded

    def test_no_motion_past_forward_limit(self, axis, bus):
        motor = axis.device.adapter
        motor.position = 0.5
        motor.forward_limit = True

        axis.set_position(5.0)
        bus.simulate(steps=10)

        assert motor.position == pytest.approx(0.5)
        assert axis.state is AxisLimitState.AT_FORWARD_LIMIT

    def test_reverse_motion_unaffected_at_forward_limit(self, axis, bus):
        motor = axis.device.adapter
        motor.position = 0.5
        motor.forward_limit = True

        axis.set_position(-1.0)
        bus.simulate(steps=10)

        assert motor.position == pytest.approx(-1.0)

    def test_physical_stop_asserts_limit(self, axis, bus):
        motor = axis.device.adapter
        motor.forward_stop = 1.0

        axis.set_motion_profiled_position(3.0)
        bus.simulate(steps=200)

        assert motor.position == pytest.approx(1.0)
        assert axis.state is AxisLimitState.AT_FORWARD_LIMIT

    def test_unbounded_request_ignores_limits(self, make_ready_device, limited_config, dispatcher, bus):
        device = make_ready_device("deploy", 21, limited_config)
        device.adapter.forward_limit = True

        dispatcher.set_position(device, 2.0)
        bus.simulate(steps=5)

        assert device.position == pytest.approx(2.0)


class TestPositions:
    def test_sensor_position_reads_fused_encoder(self, axis, bus):
        axis.set_position(0.75)
        bus.simulate(steps=5)

        assert axis.position == pytest.approx(0.75)
        assert axis.sensor_position == pytest.approx(0.75)
