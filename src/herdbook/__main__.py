from herdbook.cli import cli

cli()
