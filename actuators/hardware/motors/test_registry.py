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

from actuators.hardware.motors.mock import MockEncoder, MockMotorController
from actuators.hardware.motors.registry import AdapterRegistry, adapter_registry


class TestAdapterRegistry:
    def test_discovers_mock_backend(self):
        assert "mock" in adapter_registry.available()

    def test_create_by_name(self):
        motor = adapter_registry.create_motor("MOCK", device_id=3)
        sensor = adapter_registry.create_sensor("mock", device_id=22)

        assert isinstance(motor, MockMotorController)
        assert motor.device_id == 3
        assert isinstance(sensor, MockEncoder)

    def test_unknown_backend(self):
        with pytest.raises(KeyError, match="Unknown backend"):
            adapter_registry.create_motor("sparkmax", device_id=1)

    def test_backend_without_sensor(self):
        registry = AdapterRegistry()
        registry.register("motors_only", MockMotorController)

        assert registry.available() == ["motors_only"]
        with pytest.raises(KeyError):
            registry.create_sensor("motors_only", device_id=1)

    def test_discover_is_repeatable(self):
        registry = AdapterRegistry()
        registry.discover()
        registry.discover()

        assert "mock" in registry.available()
