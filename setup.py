# Copyright 2025-2026 Dimensional Inc.
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

from setuptools import find_packages, setup

setup(
    name="actuators",
    version="0.1.0",
    description="Motor-controller configuration and control for competition robot mechanisms",
    license="Apache-2.0",
    python_requires=">=3.10",
    packages=find_packages(include=["actuators", "actuators.*"]),
    package_dir={"": "."},
    install_requires=[
        "structlog>=24.1",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "lazy-loader>=0.4",
        "typer>=0.12",
    ],
    extras_require={
        # CTRE hardware backend
        "phoenix6": ["phoenix6>=26.1"],
        "test": ["pytest>=8"],
    },
    entry_points={
        "console_scripts": [
            "actuators=actuators.robot.cli.actuators_robot:main",
        ],
    },
)
