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

import threading

import pytest

from actuators.control.components import (
    ClosedLoopGains,
    DeviceComponent,
    FeedbackConfig,
    FeedbackSensorSource,
    HardwareLimitWiring,
    InvertedValue,
    MotionProfile,
    MotorConfiguration,
    NeutralMode,
)
from actuators.control.configuration import configure
from actuators.control.device import Device
from actuators.control.dispatcher import ControlModeDispatcher
from actuators.hardware.motors.mock import MockCANBus, MockMotorController

_seen_threads = set()
_seen_threads_lock = threading.RLock()


@pytest.fixture(autouse=True)
def monitor_threads(request):
    yield

    threads = [t for t in threading.enumerate() if t.name != "MainThread"]

    if not threads:
        return

    with _seen_threads_lock:
        new_leaks = [t for t in threads if t.ident not in _seen_threads]
        for t in threads:
            _seen_threads.add(t.ident)

    if not new_leaks:
        return

    thread_names = [t.name for t in new_leaks]

    pytest.fail(
        f"Non-closed threads before or during this test. The thread names: {thread_names}. "
        "Please look at the first test that fails and fix that."
    )


@pytest.fixture
def bus():
    return MockCANBus()


@pytest.fixture
def rotor_config():
    """Plain rotor-sensor configuration, no limits or profile."""
    return MotorConfiguration(
        inverted=InvertedValue.CLOCKWISE_POSITIVE,
        neutral_mode=NeutralMode.COAST,
        feedback=FeedbackConfig(
            sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
            rotor_to_sensor_ratio=1.0,
        ),
        gains=ClosedLoopGains(k_p=0.1, k_i=0.0, k_d=0.0, k_s=0.0),
    )


@pytest.fixture
def limited_config():
    """Arm configuration with both limit inputs and a motion profile."""
    return MotorConfiguration(
        inverted=InvertedValue.COUNTER_CLOCKWISE_POSITIVE,
        neutral_mode=NeutralMode.BRAKE,
        feedback=FeedbackConfig(
            sensor_source=FeedbackSensorSource.FUSED_SENSOR,
            rotor_to_sensor_ratio=1.0,
            remote_sensor_id=22,
        ),
        gains=ClosedLoopGains(k_p=0.001, k_i=0.0, k_d=0.0, k_s=0.001),
        motion_profile=MotionProfile(cruise_velocity=2.0, acceleration=8.0),
        hardware_limits=HardwareLimitWiring(forward_input_id=0, reverse_input_id=1),
    )


@pytest.fixture
def make_device(bus):
    """Factory for devices backed by mock controllers on the shared bus."""

    def _make(name, device_id, configuration):
        adapter = MockMotorController(device_id, bus=bus)
        return Device(adapter, DeviceComponent(name, device_id, configuration))

    return _make


@pytest.fixture
def make_ready_device(make_device):
    """Factory for devices that have been configured successfully."""

    def _make(name, device_id, configuration):
        device = make_device(name, device_id, configuration)
        configure(device, configuration)
        return device

    return _make


@pytest.fixture
def dispatcher():
    return ControlModeDispatcher("test")
