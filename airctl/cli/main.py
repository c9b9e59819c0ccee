"""
Main CLI application using Typer.
"""

from __future__ import annotations

from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from airctl import __version__
from airctl.cli.formatters import build_help_text, print_error
from airctl.cli.interface import OPEN_RESOURCES, CommandLineInterface
from airctl.core.config import AppConfig, load_config_file
from airctl.core.detector import SystemDetector
from airctl.core.errors import AirctlError, BadCommandError
from airctl.core.executor import CommandExecutor
from airctl.models import create_model
from airctl.models.base import WifiModel
from airctl.modules.connectivity import ConnectivityProber
from airctl.storage.logger import setup_logging

app = typer.Typer(
    name="airctl",
    help="Inspect and control this host's Wi-Fi interface.",
    add_completion=False,
)

console = Console()


def _init_context(
    wifi_port: Optional[str],
    output_format: Optional[str],
    verbose: bool,
) -> tuple[AppConfig, WifiModel]:
    """
    Initialize shared objects: config, logger, system info, executor and model.
    Uses optional config file (~/.airctl.yaml or ./.airctl.yaml) for defaults when CLI does not set values.
    """
    settings = load_config_file()
    if wifi_port is not None:
        settings["wifi_port"] = wifi_port
    if output_format is not None:
        settings["output_format"] = output_format
    if verbose:
        settings["verbose"] = True
    config = AppConfig(**settings)

    logger = setup_logging(config.verbose, config.log_file)
    detector = SystemDetector()
    system_info = detector.detect_system()
    logger.debug(f"Detected {system_info.platform} on {system_info.hostname}")

    for tool in detector.check_required_tools(
        detector.required_tools(system_info.os_type), system_info.os_type
    ):
        logger.warning(f"Missing tool {tool.name}: {tool.suggestion}")

    executor = CommandExecutor(system_info, logger, verbose=config.verbose)
    prober = ConnectivityProber(
        url=config.probe_url,
        timeout=config.probe_timeout,
        poll_interval=config.probe_poll_interval,
        max_tries=config.probe_max_tries,
    )
    model = create_model(system_info, executor, prober=prober, wifi_port=config.wifi_port)

    return config, model


def _print_bad_command(error: BadCommandError) -> None:
    separator_line = f"! {'-' * 75} !"
    console.out(f"{separator_line}\n{error}\n{separator_line}", highlight=False)


# Everything after the command name belongs to the command
@app.command(context_settings={"allow_interspersed_args": False})
def main(
    args: Optional[List[str]] = typer.Argument(
        None,
        metavar="COMMAND [ARGS]...",
        help="Command (abbreviations allowed) and its arguments",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output-format",
        "-o",
        help="Output format: i (inspect), j (JSON), k (pretty JSON), p (plain), y (YAML)",
    ),
    wifi_port: Optional[str] = typer.Option(
        None,
        "--port",
        "-p",
        help="Wi-Fi interface name, overriding detection",
    ),
    shell: bool = typer.Option(
        False,
        "--shell",
        "-s",
        help="Run the interactive shell",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print OS commands and their outputs",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    airctl - Wi-Fi inspection and control.
    Run a single command, or use -s for the interactive shell.
    """
    if version:
        console.print(f"airctl {__version__}")
        raise typer.Exit(0)

    help_text = build_help_text(
        __version__,
        OPEN_RESOURCES.help_string(),
        fancy=console.is_terminal,
        interactive=shell,
    )

    if not args and not shell:
        console.out("Syntax is: airctl [options] command [command_options]", highlight=False)
        console.out(help_text, highlight=False)
        raise typer.Exit(1)

    try:
        config, model = _init_context(wifi_port, output_format, verbose)
        interface = CommandLineInterface(
            model,
            console,
            help_text,
            output_format=config.output_format,
            interactive=shell,
            wait_interval=config.wait_interval,
        )
        if shell:
            interface.run_shell()
        else:
            interface.process_command_line(args)
    except ValidationError as e:
        console.print(f"[red]✗ Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except BadCommandError as e:
        _print_bad_command(e)
        raise typer.Exit(1)
    except AirctlError as e:
        print_error(e, console)
        raise typer.Exit(1)
