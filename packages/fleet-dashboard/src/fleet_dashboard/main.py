import typer

from fleet_dashboard.commands import deployments
from shared.logging import setup_logging

app = typer.Typer(
    name="fleet-dashboard",
    help="Browse and manage project deployments",
    add_completion=False,
)


@app.callback()
def callback(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="LOG_LEVEL"),
    log_format: str = typer.Option("console", "--log-format", envvar="LOG_FORMAT"),
):
    """
    Fleet Dashboard CLI
    """
    setup_logging(service_name="fleet-dashboard", log_format=log_format, log_level=log_level)


app.add_typer(deployments.app, name="deployments", help="Manage deployments")


if __name__ == "__main__":
    app()
