"""CLI entry point for datamgr.

Loads ``datamgr.yaml`` from the working directory (or ``--schema``),
compiles it, and serves it until SIGINT/SIGTERM. On a termination signal
the server stops accepting connections and lets in-flight requests
finish before exiting.
"""

from __future__ import annotations

import click

from datamgr import __version__
from datamgr.config.schemas import parse_listen
from datamgr.errors import SchemaError, SchemaLoadError
from datamgr.pipeline.materializer import DirectoryMode


def _validate_listen(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return value
    try:
        parse_listen(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    return value


@click.command()
@click.option(
    "--listen",
    default=None,
    callback=_validate_listen,
    help="Listen address [default: :8080]",
)
@click.option(
    "--schema",
    "schema_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Schema document [default: ./datamgr.yaml]",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Base directory for relative output paths [default: .]",
)
@click.option(
    "--directory-mode",
    type=click.Choice([m.value for m in DirectoryMode]),
    default=None,
    help="Directory created before writing a record [default: parent]",
)
@click.option("--log-level", default=None, help="Logging level [default: INFO]")
@click.version_option(__version__, prog_name="datamgr")
def main(
    listen: str | None,
    schema_file: str | None,
    data_dir: str | None,
    directory_mode: str | None,
    log_level: str | None,
) -> None:
    """Serve form submissions as declared in datamgr.yaml.

    Examples:

        datamgr

        datamgr --listen 127.0.0.1:9000 --schema forms.yaml
    """
    # Import here to keep --help fast
    import uvicorn

    from datamgr.app.dependencies import get_settings
    from datamgr.app.main import configure_logging, create_app
    from datamgr.runtime import load_schema

    overrides = {
        "listen": listen,
        "schema_file": schema_file,
        "data_dir": data_dir,
        "directory_mode": DirectoryMode(directory_mode) if directory_mode else None,
        "log_level": log_level.upper() if log_level else None,
    }
    settings = get_settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    configure_logging(settings.log_level)

    try:
        schema = load_schema(settings.schema_file)
    except SchemaLoadError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from None
    except SchemaError as e:
        click.echo(f"Error parsing {settings.schema_file}: {e}", err=True)
        raise SystemExit(1) from None

    app = create_app(schema=schema, settings=settings)

    # uvicorn handles SIGINT/SIGTERM with a graceful shutdown and exits
    # non-zero if the address cannot be bound
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
