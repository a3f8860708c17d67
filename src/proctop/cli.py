"""Command line entry point for proctop."""

from pathlib import Path

import click

from proctop.config import Config


@click.command()
@click.version_option(package_name="proctop")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/proctop/config.toml)",
)
@click.option("--interval", type=float, default=None, help="Seconds between refreshes")
@click.option("--name-width", type=int, default=None, help="Max process name width")
@click.option(
    "--measure-elapsed/--nominal-interval",
    default=None,
    help="Compute CPU percent over measured time instead of the nominal interval",
)
@click.option("--write-config", is_flag=True, help="Write the effective config and exit")
def main(
    config_path: Path | None,
    interval: float | None,
    name_width: int | None,
    measure_elapsed: bool | None,
    write_config: bool,
) -> None:
    """Interactive per-process CPU and memory monitor."""
    try:
        config = Config.load(config_path)
        if interval is not None:
            config.display.poll_interval = interval
        if name_width is not None:
            config.display.name_width = name_width
        if measure_elapsed is not None:
            config.sampling.measure_elapsed = measure_elapsed
        config.validate()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if write_config:
        path = config_path or config.config_path
        config.save(path)
        click.echo(f"Wrote config to {path}")
        return

    from proctop.app import run
    from proctop.logging import configure

    configure(config)
    run(config)


if __name__ == "__main__":
    main()
