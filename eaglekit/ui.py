import click
from eaglekit import panelize_ui
from eaglekit import __version__

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def cli():
    pass

cli.add_command(panelize_ui.panelize)


if __name__ == '__main__':
    cli()
