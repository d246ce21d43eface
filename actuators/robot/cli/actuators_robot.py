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

import inspect
from typing import Optional, get_args, get_origin

import typer

from actuators.control.configuration import read_back
from actuators.control.errors import ActuatorError
from actuators.core.global_config import GlobalConfig
from actuators.hardware.motors.registry import adapter_registry
from actuators.robot.robot import Robot

main = typer.Typer(no_args_is_help=True)


def create_dynamic_callback():
    fields = GlobalConfig.model_fields

    params = [
        inspect.Parameter("ctx", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=typer.Context),
    ]

    for field_name, field_info in fields.items():
        field_type = field_info.annotation

        # Unwrap Optional[T]
        if get_origin(field_type) is type(Optional[str]):  # noqa: UP045
            inner_types = get_args(field_type)
            if len(inner_types) == 2 and type(None) in inner_types:
                actual_type = next(t for t in inner_types if t is not type(None))
            else:
                actual_type = field_type
        else:
            actual_type = field_type

        cli_option_name = field_name.replace("_", "-")

        if actual_type is bool:
            option = typer.Option(
                None,
                f"--{cli_option_name}/--no-{cli_option_name}",
                help=f"Override {field_name} in GlobalConfig",
            )
        else:
            option = typer.Option(
                None,
                f"--{cli_option_name}",
                help=f"Override {field_name} in GlobalConfig",
            )
        params.append(
            inspect.Parameter(
                field_name,
                inspect.Parameter.KEYWORD_ONLY,
                default=option,
                annotation=Optional[actual_type],  # noqa: UP045
            )
        )

    def callback(**kwargs) -> None:
        ctx = kwargs.pop("ctx")
        overrides = {k: v for k, v in kwargs.items() if v is not None}
        # Validate overrides the same way environment values are.
        ctx.obj = GlobalConfig(**overrides)

    callback.__signature__ = inspect.Signature(params)

    return callback


main.callback()(create_dynamic_callback())


@main.command()
def show_config(ctx: typer.Context) -> None:
    """Show current configuration status."""
    config: GlobalConfig = ctx.obj

    for field_name, value in config.model_dump().items():
        typer.echo(f"{field_name}: {value}")


@main.command()
def list_adapters() -> None:
    """List installed motor-controller backends."""
    for name in adapter_registry.available():
        typer.echo(name)


@main.command(name="list")
def list_mechanisms(ctx: typer.Context) -> None:
    """List mechanisms and the devices they own."""
    robot = Robot(ctx.obj)
    for name, mechanism in robot.mechanisms.items():
        devices = ", ".join(f"{d.name}={d.device_id}" for d in mechanism.devices.values())
        typer.echo(f"{name}: {devices}")


@main.command()
def check(ctx: typer.Context) -> None:
    """Configure every device, report readiness and readback, then shut down."""
    robot = Robot(ctx.obj)
    failed = False
    try:
        robot.initialize()
    except ActuatorError as e:
        typer.echo(f"initialization failed: {e}", err=True)
        failed = True

    try:
        for name, mechanism in robot.mechanisms.items():
            typer.echo(f"{name}: {'ready' if mechanism.is_ready else 'NOT READY'}")
            for device in mechanism.devices.values():
                stored = read_back(device) if device.adapter.is_connected() else None
                matches = stored is not None and not stored.diff(device.component.configuration)
                typer.echo(
                    f"  {device.name} (id {device.device_id}): "
                    f"{'ready' if device.is_ready else 'unready'}, "
                    f"readback {'ok' if matches else 'missing or different'}"
                )
    finally:
        robot.shutdown()

    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    main()
