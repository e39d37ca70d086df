"""codestruct CLI."""

import click

from codestruct import __version__
from codestruct.cli.extract import extract_command
from codestruct.cli.languages import languages_command
from codestruct.config.loader import load_config
from codestruct.core.errors import ConfigError
from codestruct.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="codestruct")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """codestruct - extract functions, types and variables from source files."""
    ctx.ensure_object(dict)
    try:
        config = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config.model_copy(update={"logging": logging_config})


cli.add_command(extract_command, name="extract")
cli.add_command(languages_command, name="languages")


if __name__ == "__main__":
    cli()
