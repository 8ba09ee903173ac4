"""Config commands -- view and modify the stored request defaults.

Provides the ``fetchwrap config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~fetchwrap.models.GlobalConfig`). The stored ``defaults`` become
the base options of the instance used by ``fetchwrap request``.
"""

from __future__ import annotations

import typer

from fetchwrap.output import error, print_body, info, success, warning


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        fetchwrap config show
        fetchwrap --json config show
    """
    from fetchwrap.config import global_config_path, load_global_config

    config = load_global_config()
    info(f"Config file: {global_config_path()}")
    print_body(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'defaults.prefix_url')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. Keys under ``defaults.headers`` may
    be new; every other key must already exist. Boolean and integer fields
    are coerced from the string value; the result is validated against
    :class:`~fetchwrap.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        fetchwrap config set defaults.prefix_url https://api.example.com
        fetchwrap config set defaults.timeout 2.5
        fetchwrap config set defaults.headers.authorization "Bearer abc"
    """
    from pydantic import ValidationError

    from fetchwrap.config import load_global_config, save_global_config
    from fetchwrap.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    is_header = keys[:-1] == ["defaults", "headers"]
    if final_key not in target and not is_header:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target.get(final_key)
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, dict):
        error(f"Cannot set {key} directly; set one of its entries instead")
        raise typer.Exit(code=2)
    else:
        coerced = value

    if is_header:
        final_key = final_key.lower()
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("unset-header")
def config_unset_header(
    name: str = typer.Argument(help="Header name to remove from the defaults."),
) -> None:
    """Remove a default header.

    Example::

        fetchwrap config unset-header authorization
    """
    from fetchwrap.config import load_global_config, save_global_config

    config = load_global_config()
    lowered = name.lower()
    if lowered not in config.defaults.headers:
        warning(f"Header '{lowered}' is not set")
        return
    del config.defaults.headers[lowered]
    save_global_config(config)
    success(f"Removed default header '{lowered}'")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Raises:
        typer.Exit: If the user declines confirmation.
    """
    from fetchwrap.config import save_global_config
    from fetchwrap.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
