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

from actuators.control.components import (
    ClosedLoopGains,
    FeedbackConfig,
    FeedbackSensorSource,
    HardwareLimitWiring,
    MotionProfile,
    NeutralMode,
)
from actuators.control.requests import (
    ControlMode,
    FollowerOrientation,
    FollowerRequest,
    NeutralRequest,
    PositionRequest,
    VelocityRequest,
    VoltageRequest,
    is_position_request,
)


class TestInvalidFields:
    def test_valid_configurations(self, rotor_config, limited_config):
        assert rotor_config.invalid_fields() == frozenset()
        assert limited_config.invalid_fields() == frozenset()

    def test_remote_feedback_needs_sensor_id(self, rotor_config):
        config = replace(
            rotor_config,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.FUSED_SENSOR,
                rotor_to_sensor_ratio=1.0,
            ),
        )
        assert config.invalid_fields() == {"feedback.remote_sensor_id"}

    def test_non_positive_ratios(self, rotor_config):
        config = replace(
            rotor_config,
            feedback=FeedbackConfig(
                sensor_source=FeedbackSensorSource.ROTOR_SENSOR,
                rotor_to_sensor_ratio=0.0,
                sensor_to_mechanism_ratio=-2.0,
            ),
        )
        assert config.invalid_fields() == {
            "feedback.rotor_to_sensor_ratio",
            "feedback.sensor_to_mechanism_ratio",
        }

    def test_negative_and_nan_gains(self, rotor_config):
        config = replace(
            rotor_config,
            gains=ClosedLoopGains(k_p=-1.0, k_i=0.0, k_d=float("nan"), k_s=0.0),
        )
        assert config.invalid_fields() == {"gains.k_p", "gains.k_d"}

    def test_motion_profile_limits(self, rotor_config):
        config = replace(
            rotor_config,
            motion_profile=MotionProfile(cruise_velocity=0.0, acceleration=1.0, jerk=-1.0),
        )
        assert config.invalid_fields() == {
            "motion_profile.cruise_velocity",
            "motion_profile.jerk",
        }

    def test_hardware_limit_wiring(self, rotor_config):
        disabled = replace(
            rotor_config,
            hardware_limits=HardwareLimitWiring(0, 1, forward_enabled=False, reverse_enabled=False),
        )
        assert disabled.invalid_fields() == {"hardware_limits"}

        negative = replace(rotor_config, hardware_limits=HardwareLimitWiring(-1, 1))
        assert negative.invalid_fields() == {"hardware_limits.forward_input_id"}

        shared = replace(rotor_config, hardware_limits=HardwareLimitWiring(2, 2))
        assert shared.invalid_fields() == {"hardware_limits.reverse_input_id"}

    def test_has_hardware_limits(self, rotor_config, limited_config):
        assert not rotor_config.has_hardware_limits
        assert limited_config.has_hardware_limits


class TestDiff:
    def test_identical(self, limited_config):
        assert limited_config.diff(replace(limited_config)) == frozenset()

    def test_reports_dotted_names(self, rotor_config):
        other = replace(
            rotor_config,
            neutral_mode=NeutralMode.BRAKE,
            gains=replace(rotor_config.gains, k_p=0.5),
        )
        assert rotor_config.diff(other) == {"neutral_mode", "gains.k_p"}

    def test_float_tolerance(self, rotor_config):
        stored = replace(rotor_config, gains=replace(rotor_config.gains, k_p=0.1000001))
        assert rotor_config.diff(stored) == frozenset()

    def test_optional_section_on_one_side(self, rotor_config, limited_config):
        profiled = replace(rotor_config, motion_profile=limited_config.motion_profile)
        assert rotor_config.diff(profiled) == {"motion_profile"}


class TestRequests:
    def test_modes(self):
        assert VoltageRequest(1.0).mode is ControlMode.VOLTAGE
        assert VelocityRequest(1.0).mode is ControlMode.VELOCITY
        assert PositionRequest(1.0).mode is ControlMode.POSITION
        assert NeutralRequest().mode is ControlMode.NEUTRAL

    def test_negated(self):
        assert VelocityRequest(75.0).negated() == VelocityRequest(-75.0)
        assert PositionRequest(0.2, bounded=True).negated() == PositionRequest(-0.2, bounded=True)
        assert NeutralRequest().negated() == NeutralRequest()
        assert FollowerRequest(0, FollowerOrientation.OPPOSED).negated() == FollowerRequest(
            0, FollowerOrientation.ALIGNED
        )

    def test_is_position_request(self):
        assert is_position_request(PositionRequest(1.0))
        assert not is_position_request(VelocityRequest(1.0))
