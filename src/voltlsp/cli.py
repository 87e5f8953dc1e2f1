import json
import sys

import click
from sensai.util import logging

from voltlsp.constants import DEFAULT_INSTALL_ROOT, VOLT_LOG_FORMAT
from voltlsp.local_host import LocalHost
from voltlsp.plugin import HostRequestKind, register_plugin
from voltlsp.util.yaml import load_initialization_options
from voltlsp.volt_exceptions import VoltPluginException
from voltlsp.volt_installer import ArtifactInstaller
from voltlsp.volt_platform import PlatformResolver

log = logging.getLogger(__name__)

_LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


def _configure_logging(log_level: str) -> None:
    logging.configure(format=VOLT_LOG_FORMAT, level=logging.getLevelName(log_level.upper()))
    # stdout must remain usable by a launched server
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setStream(sys.stderr)


@click.group(context_settings={"max_content_width": 100})
def top_level() -> None:
    """Provisions and launches the taplo language server for TOML documents."""


@top_level.command("initialize")
@click.option("--options-file", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML file with initialization options.")
@click.option("--install-root", type=click.Path(file_okay=False), default=DEFAULT_INSTALL_ROOT, show_default=True)
@click.option("--launch/--no-launch", default=False, help="Start the language server and wait for it to exit.")
@click.option("--log-level", type=_LOG_LEVELS, default="WARNING", show_default=True)
def initialize(options_file: str | None, install_root: str, launch: bool, log_level: str) -> None:
    """Runs the plugin initialization against the local machine."""
    _configure_logging(log_level)
    options = load_initialization_options(options_file) if options_file is not None else None
    host = LocalHost(install_root=install_root, launch=launch)
    plugin = register_plugin(host)
    plugin.handle_request(0, HostRequestKind.INITIALIZE.value, {"initializationOptions": options})

    for line in host.diagnostics.lines():
        click.echo(line, err=True)
    if not host.launched:
        raise click.exceptions.Exit(1)
    if not launch:
        click.echo(json.dumps(host.launched[-1].to_dict(), indent=2, default=str))
        return
    try:
        exit_code = host.wait()
    except KeyboardInterrupt:
        host.shutdown()
        exit_code = 130
    raise click.exceptions.Exit(exit_code)


@top_level.command("install")
@click.option("--install-root", type=click.Path(file_okay=False), default=DEFAULT_INSTALL_ROOT, show_default=True)
@click.option("--log-level", type=_LOG_LEVELS, default="INFO", show_default=True)
def install(install_root: str, log_level: str) -> None:
    """Installs taplo for the local platform without launching it."""
    _configure_logging(log_level)
    host = LocalHost(install_root=install_root)
    try:
        platform = PlatformResolver(host).resolve()
        executable = ArtifactInstaller(host).install(platform)
    except VoltPluginException as e:
        raise click.ClickException(str(e)) from e
    click.echo(executable.uri)


if __name__ == "__main__":
    top_level()
