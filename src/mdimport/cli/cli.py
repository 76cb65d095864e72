"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdimport.cli.commands import import_cmd, init_cmd, plan_cmd, tree_cmd


app = typer.Typer(name="mdimport", no_args_is_help=True, help="Markdown page and content block importer")

app.command(name="import")(import_cmd)
app.command(name="plan")(plan_cmd)
app.command(name="init")(init_cmd)
app.command(name="tree")(tree_cmd)
