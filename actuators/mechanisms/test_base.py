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

from actuators.control.errors import ConfigError, DeviceUnready
from actuators.control.requests import NeutralRequest, PositionRequest, VoltageRequest
from actuators.hardware.motors.mock import MockMotorController
from actuators.hardware.motors.spec import StatusCode
from actuators.mechanisms.climber import Climber, ClimberConfig
from actuators.mechanisms.feeder import Feeder, FeederConfig


class TestLifecycle:
    def test_missing_adapter(self):
        with pytest.raises(ValueError, match="no adapter"):
            Feeder(FeederConfig(), motors={})

    def test_refuses_commands_before_initialize(self, build_mechanism):
        feeder = build_mechanism(Feeder, FeederConfig())

        assert not feeder.is_ready
        with pytest.raises(DeviceUnready):
            feeder.run(6.0)

    def test_config_failure_leaves_mechanism_unready(self, build_mechanism):
        climber = build_mechanism(Climber, ClimberConfig())
        climber.device("winch").adapter.apply_status = StatusCode.TIMEOUT

        with pytest.raises(ConfigError):
            climber.initialize()

        assert not climber.is_ready
        with pytest.raises(DeviceUnready):
            climber.set_position(1.0)

    def test_reinitialize_recovers(self, build_mechanism):
        climber = build_mechanism(Climber, ClimberConfig())
        adapter = climber.device("winch").adapter
        adapter.apply_status = StatusCode.TIMEOUT
        with pytest.raises(ConfigError):
            climber.initialize()

        adapter.apply_status = StatusCode.OK
        climber.initialize()

        assert climber.set_position(2.0) == PositionRequest(2.0)

    def test_shutdown_neutralizes_and_disconnects(self, build_mechanism):
        feeder = build_mechanism(Feeder, FeederConfig())
        feeder.initialize()
        adapter: MockMotorController = feeder.device("roller").adapter
        feeder.run(4.0)

        feeder.shutdown()

        assert adapter.frames[-1] == NeutralRequest()
        assert not adapter.is_connected()
        assert not feeder.is_ready
        with pytest.raises(DeviceUnready):
            feeder.run(4.0)

    def test_describe(self, build_mechanism):
        feeder = build_mechanism(Feeder, FeederConfig())
        feeder.initialize()
        feeder.run(2.0)

        described = feeder.describe()["roller"]

        assert described["device_id"] == 3
        assert described["model"] == "SimMotor"
        assert described["ready"]
        assert described["active_request"] == VoltageRequest(2.0)


class TestFeeder:
    def test_run_and_stop(self, build_mechanism):
        feeder = build_mechanism(Feeder, FeederConfig())
        feeder.initialize()

        assert feeder.run(-8.0) == VoltageRequest(-8.0)
        feeder.stop()

        assert feeder.device("roller").active_request == VoltageRequest(0.0)


class TestClimber:
    def test_set_position_moves_winch(self, build_mechanism, bus):
        climber = build_mechanism(Climber, ClimberConfig())
        climber.initialize()

        climber.set_position(1.5)
        bus.simulate(steps=5)

        assert climber.position == pytest.approx(1.5)

    def test_stop(self, build_mechanism):
        climber = build_mechanism(Climber, ClimberConfig())
        climber.initialize()
        climber.set_position(1.5)

        climber.stop()

        assert climber.device("winch").active_request == VoltageRequest(0.0)
