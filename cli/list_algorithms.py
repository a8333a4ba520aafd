import click
from utils.cli_helpers import render_algorithms


@click.command("list-algorithms", help="List the supported digest algorithms.")
def list_algorithms():
    render_algorithms()
