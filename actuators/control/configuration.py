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

"""Applying and verifying motor-controller configurations.

``configure()`` is the only place that opens a device's bus connection. A
device becomes ready only after its configuration has been written and read
back unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from actuators.control.errors import ConfigError
from actuators.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from actuators.control.components import MotorConfiguration
    from actuators.control.device import Device

logger = setup_logger()

DEFAULT_TIMEOUT_S = 0.1


def configure(
    device: Device,
    config: MotorConfiguration,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> MotorConfiguration:
    """Apply ``config`` to ``device`` and verify it by readback.

    Safe to repeat with the same configuration. Configuring an unready device
    again is how it recovers.

    Args:
        device: Device handle to configure
        config: Complete configuration for the device
        timeout: Seconds to wait for the device to acknowledge the apply

    Returns:
        The configuration now stored on the device

    Raises:
        ConfigError: The configuration is invalid, was refused, timed out, or
            read back differently. The device is left unready.
    """
    try:
        return _apply_and_verify(device, config, timeout)
    except ConfigError as e:
        device._mark_unready()
        logger.error(
            "Configuration failed",
            device=device.name,
            device_id=device.device_id,
            reason=e.reason,
            fields=sorted(e.fields),
        )
        raise


def read_back(device: Device) -> MotorConfiguration | None:
    """Configuration currently stored on the hardware."""
    return device.adapter.read_config()


def _apply_and_verify(
    device: Device, config: MotorConfiguration, timeout: float
) -> MotorConfiguration:
    invalid = config.invalid_fields()
    if invalid:
        raise ConfigError(device.device_id, invalid, "invalid values")

    adapter = device.adapter
    if not adapter.is_connected() and not adapter.connect():
        raise ConfigError(device.device_id, (), "device not reachable")

    result = adapter.apply_config(config, timeout)
    if not result.ok:
        raise ConfigError(device.device_id, result.rejected_fields, result.status.value)

    stored = adapter.read_config()
    if stored is None:
        raise ConfigError(device.device_id, (), "readback failed")
    mismatched = config.diff(stored)
    if mismatched:
        raise ConfigError(device.device_id, mismatched, "readback mismatch")

    device._mark_ready(config)
    logger.info(
        "Configuration applied",
        device=device.name,
        device_id=device.device_id,
        neutral_mode=config.neutral_mode.value,
        feedback=config.feedback.sensor_source.value,
        hardware_limits=config.has_hardware_limits,
    )
    return config


__all__ = [
    "DEFAULT_TIMEOUT_S",
    "configure",
    "read_back",
]
