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

from typer.testing import CliRunner

from actuators.robot.cli.actuators_robot import main

runner = CliRunner()


def test_show_config():
    result = runner.invoke(main, ["--backend", "mock", "--hood-enabled", "show-config"])

    assert result.exit_code == 0
    assert "backend: mock" in result.output
    assert "hood_enabled: True" in result.output


def test_invalid_override():
    result = runner.invoke(main, ["--config-timeout", "-1", "show-config"])

    assert result.exit_code != 0


def test_list_adapters():
    result = runner.invoke(main, ["list-adapters"])

    assert result.exit_code == 0
    assert "mock" in result.output.splitlines()


def test_list_mechanisms():
    result = runner.invoke(main, ["--backend", "mock", "list"])

    assert result.exit_code == 0
    assert "shooter: flywheel=0, flywheel_follower=1, hood=2" in result.output
    assert "climber: winch=19" in result.output


def test_check():
    result = runner.invoke(main, ["--backend", "mock", "check"])

    assert result.exit_code == 0
    assert "intake: ready" in result.output
    assert "deploy (id 21): ready, readback ok" in result.output
