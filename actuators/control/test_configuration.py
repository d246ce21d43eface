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

from dataclasses import replace

import pytest

from actuators.control.components import ClosedLoopGains
from actuators.control.configuration import configure, read_back
from actuators.control.errors import ConfigError, DeviceUnready
from actuators.control.requests import VoltageRequest
from actuators.hardware.motors.spec import StatusCode


class TestConfigure:
    def test_round_trip(self, make_device, limited_config):
        device = make_device("deploy", 21, limited_config)

        applied = configure(device, limited_config)

        assert applied == limited_config
        assert read_back(device) == limited_config
        assert device.is_ready
        assert device.configuration == limited_config

    def test_idempotent(self, make_device, rotor_config):
        device = make_device("climber", 19, rotor_config)

        configure(device, rotor_config)
        configure(device, rotor_config)

        assert read_back(device) == rotor_config
        assert device.is_ready

    def test_unready_before_configure(self, make_device, rotor_config, dispatcher):
        device = make_device("climber", 19, rotor_config)

        assert not device.is_ready
        with pytest.raises(DeviceUnready):
            dispatcher.set_voltage(device, 1.0)
        assert device.active_request is None

    def test_invalid_fields_never_reach_the_bus(self, make_device, rotor_config):
        bad = replace(rotor_config, gains=ClosedLoopGains(k_p=-0.1, k_i=0.0, k_d=0.0, k_s=0.0))
        device = make_device("climber", 19, rotor_config)

        with pytest.raises(ConfigError) as exc_info:
            configure(device, bad)

        assert exc_info.value.fields == {"gains.k_p"}
        assert exc_info.value.device_id == 19
        assert not device.adapter.is_connected()
        assert not device.is_ready

    def test_rejected_fields(self, make_device, rotor_config):
        device = make_device("climber", 19, rotor_config)
        device.adapter.rejected_fields = {"gains.k_p"}

        with pytest.raises(ConfigError) as exc_info:
            configure(device, rotor_config)

        assert exc_info.value.fields == {"gains.k_p"}
        assert exc_info.value.reason == StatusCode.REJECTED.value
        assert not device.is_ready

    def test_timeout(self, make_device, rotor_config):
        device = make_device("climber", 19, rotor_config)
        device.adapter.apply_status = StatusCode.TIMEOUT

        with pytest.raises(ConfigError) as exc_info:
            configure(device, rotor_config)

        assert exc_info.value.reason == "timeout"

    def test_unreachable(self, make_device, rotor_config):
        device = make_device("climber", 19, rotor_config)
        device.adapter.reachable = False

        with pytest.raises(ConfigError, match="not reachable"):
            configure(device, rotor_config)

    def test_readback_mismatch(self, make_device, rotor_config, monkeypatch):
        device = make_device("climber", 19, rotor_config)
        drifted = replace(rotor_config, gains=replace(rotor_config.gains, k_p=0.9))
        monkeypatch.setattr(device.adapter, "read_config", lambda: drifted)

        with pytest.raises(ConfigError) as exc_info:
            configure(device, rotor_config)

        assert exc_info.value.fields == {"gains.k_p"}
        assert exc_info.value.reason == "readback mismatch"

    def test_failure_makes_ready_device_unready(self, make_ready_device, rotor_config, dispatcher):
        device = make_ready_device("climber", 19, rotor_config)
        device.adapter.apply_status = StatusCode.BUS_ERROR

        with pytest.raises(ConfigError):
            configure(device, rotor_config)

        with pytest.raises(DeviceUnready):
            dispatcher.set_voltage(device, 1.0)

    def test_reconfigure_recovers(self, make_device, rotor_config, dispatcher):
        device = make_device("climber", 19, rotor_config)
        device.adapter.apply_status = StatusCode.TIMEOUT
        with pytest.raises(ConfigError):
            configure(device, rotor_config)

        device.adapter.apply_status = StatusCode.OK
        configure(device, rotor_config)

        dispatcher.set_voltage(device, 2.0)
        assert device.active_request == VoltageRequest(2.0)
