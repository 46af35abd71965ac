"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdmerge.cli.commands import inspect_cmd, merge_cmd


app = typer.Typer(name="mdmerge", no_args_is_help=True, help="Structural smart merge for Markdown documents")

app.command(name="merge")(merge_cmd)
app.command(name="inspect")(inspect_cmd)
