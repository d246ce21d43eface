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

from pathlib import Path

ACTUATORS_PROJECT_ROOT = Path(__file__).parent.parent

ACTUATORS_LOG_DIR = ACTUATORS_PROJECT_ROOT / "logs"

# Nominal period of the external scheduler's control pass.
CONTROL_PERIOD_S = 0.02
