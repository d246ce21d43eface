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

"""Actuator-control core.

Configures motor controllers and dispatches control requests to them:
- Declarative device configuration, verified by readback
- One active request per device, latest request wins
- Hardware followers for mechanically coupled motors
- Hardware limit inputs bounding position axes
- Named operating points applied as one update

Example:
    >>> from actuators.control import ControlModeDispatcher, Device, configure
    >>> from actuators.hardware.motors.registry import adapter_registry
    >>>
    >>> adapter = adapter_registry.create_motor("phoenix6", device_id=19)
    >>> climber = Device(adapter, component)
    >>> configure(climber, component.configuration)
    >>>
    >>> dispatcher = ControlModeDispatcher("climber")
    >>> dispatcher.set_position(climber, 12.5)
"""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submod_attrs={
        "components": [
            "ClosedLoopGains",
            "DeviceComponent",
            "DeviceId",
            "FeedbackConfig",
            "FeedbackSensorSource",
            "HardwareLimitWiring",
            "InvertedValue",
            "LimitSwitchState",
            "MotionProfile",
            "MotorConfiguration",
            "MotorState",
            "NeutralMode",
        ],
        "configuration": ["configure", "read_back"],
        "device": ["Device"],
        "dispatcher": ["ControlModeDispatcher"],
        "errors": [
            "ActuatorError",
            "ConfigError",
            "DeviceUnready",
            "FollowerMisuse",
            "TransportError",
        ],
        "follower": ["FollowerLink"],
        "limits": ["AxisLimitState", "LimitBoundedAxis"],
        "operating_points": ["OperatingPointPolicy", "Setpoint"],
        "requests": [
            "ControlMode",
            "ControlRequest",
            "FollowerOrientation",
            "MotionProfiledPositionRequest",
            "MotionProfiledVelocityRequest",
            "PositionRequest",
            "VelocityRequest",
            "VoltageRequest",
        ],
    },
)
