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


@pytest.fixture
def build_mechanism(bus):
    """Build a mechanism on mock adapters attached to the shared bus."""

    def _build(mechanism_cls, config, **kwargs):
        motors = {
            c.name: MockMotorController(c.device_id, bus=bus) for c in config.components()
        }
        sensors = {
            name: MockEncoder(device_id, bus=bus) for name, device_id in config.sensors().items()
        }
        return mechanism_cls(config, motors, sensors, **kwargs)

    return _build
