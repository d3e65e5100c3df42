"""SensorConsole CLI entry point.

    python -m sensorconsole render response.txt
"""

from sensorconsole.cli.app import cli

if __name__ == "__main__":
    cli()
