import logging
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml

from kubeprep.commands import api, install, package
from kubeprep.config import InstallerConfig, set_config
from kubeprep.logging import configure_logging

app = typer.Typer(help="Prepare RPM based hosts to join a Kubernetes cluster.")

# Add all command groups
app.add_typer(install.app, name="install")
app.add_typer(package.app, name="package")
app.add_typer(api.app, name="api")


# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a kubeprep YAML config"),
):
    """kubeprep - Kubernetes host preparation CLI."""
    try:
        installer_config = InstallerConfig.load(config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"❌ Failed to load config: {e}", err=True)
        raise typer.Exit(code=1)
    set_config(installer_config)
    configure_logging(installer_config.logging, debug)
    if debug:
        logging.getLogger("kubeprep").debug("Debug mode enabled")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        logging.error(f"Error: {e}")
        sys.exit(1)
