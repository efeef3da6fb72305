from gopathlink.cli.main import cli

cli(obj={})
