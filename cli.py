# Simple CLI for the notification producer
import click

from core.config.settings import Settings


@click.group()
def cli():
    """Kafka Notify CLI"""
    pass


@cli.command()
@click.option("--host", default=None, help="Listen address (default: API__HOST)")
@click.option("--port", default=None, type=int, help="Listen port (default: API__PORT)")
def run(host, port):
    """Run the notification producer API server"""
    click.echo("📨 Starting Kafka notification producer...")
    from api.main import run as run_api
    run_api(host=host, port=port)


@cli.command()
def directory():
    """List the parties notifications can be sent between"""
    settings = Settings()
    for party in settings.directory:
        click.echo(f"{party.id}\t{party.name}")


if __name__ == "__main__":
    cli()
