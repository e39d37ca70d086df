"""Allow ``python -m codestruct``."""

from codestruct.cli.main import cli

cli()
