"""CLI commands: serve the API, prepare the database, inspect the summary."""

from typer import Typer

from relief_hub.cli import admin, serve as serve_module, summary as summary_module

app = Typer(help="Relief Hub: disaster relief coordination API")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_module.serve)
    app.command(name="init-db")(admin.init_database)
    app.command(name="create-admin")(admin.create_admin)
    app.command(name="purge-tokens")(admin.purge_tokens)
    app.command()(summary_module.summary)


register_commands()
