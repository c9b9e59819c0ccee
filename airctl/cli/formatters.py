"""
Help text, output post-processors and Rich formatting for CLI output.
"""

import json
from typing import Any, Callable, Dict, Optional, Sequence

import yaml
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import pretty_repr
from rich.table import Table

from airctl.core.errors import AirctlError, OsCommandError
from airctl.models.base import AvailableNetwork

PROJECT_URL = "https://github.com/airctl/airctl"

HELP_TEMPLATE = """
Command Line Switches:                    [airctl version {version} at {url}]

-o {{i,j,k,p,y}}            - outputs data in inspect, JSON, pretty JSON, plain, or YAML format when not in shell mode
-p wifi_port_name         - override automatic detection of port name with this name
-s                        - run in shell mode
-v                        - verbose mode (prints OS commands and their outputs)

Commands:

a[vail_nets]              - array of names of the available networks
ci                        - connected to Internet (not just wifi on)?
co[nnect] network-name    - turns wifi on, connects to network-name
cy[cle]                   - turns wifi off, then on, preserving network selection
d[isconnect]              - disconnects from current network, does not turn off wifi
f[orget] name1 [..name_n] - removes network-name(s) from the preferred networks list
h[elp]                    - prints this help
i[nfo]                    - a summary of wifi-related information
l[s_avail_nets]           - details about available networks, in descending order of signal strength
na[meservers]             - nameservers: 'show' or no arg to show, 'clear' to clear,
                            or IP addresses to set, e.g. '9.9.9.9  8.8.8.8'
ne[twork_name]            - name (SSID) of currently connected network
on                        - turns wifi on
of[f]                     - turns wifi off
pa[ssword] network-name   - password for preferred network-name
pr[ef_nets]               - preferred (saved) networks
q[uit]                    - exits this program (interactive shell mode only) (see also 'x')
ro[pen]                   - open resource ({resources})
t[ill]                    - returns when the desired Internet connection state is true. Options:
                            1) 'on', 'off', 'conn', or 'disc'
                            2) wait interval between tests, in seconds (optional, defaults to 0.5 seconds)
u[rl]                     - project home page URL
w[ifi_on]                 - is the wifi on?
x[it]                     - exits this program (interactive shell mode only) (see also 'q')
"""

SHELL_NOTES = """
When in interactive shell mode:
  * quote arguments containing spaces, e.g. connect "My Network" "secret".
  * results are pretty-printed; use q or x to leave the shell.
"""

PLAIN_OUTPUT_HINT = "Output is not a terminal; run in a terminal for colorized output.\n"


def build_help_text(
    version: str,
    resources_help: str,
    fancy: bool = True,
    interactive: bool = False,
) -> str:
    """
    Assemble the help text.

    Args:
        version: Version shown in the header line
        resources_help: Description of the codes accepted by `ropen`
        fancy: Whether Rich can colorize output (stdout is a terminal)
        interactive: Whether the shell usage notes apply
    """
    text = HELP_TEMPLATE.format(version=version, url=PROJECT_URL, resources=resources_help)
    if interactive:
        text += SHELL_NOTES
    if not fancy:
        text += "\n" + PLAIN_OUTPUT_HINT
    return text


def to_plain_data(obj: Any) -> Any:
    """Convert pydantic models (also nested in lists/dicts) to plain data."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (list, tuple)):
        return [to_plain_data(item) for item in obj]
    if isinstance(obj, dict):
        return {key: to_plain_data(value) for key, value in obj.items()}
    return obj


POST_PROCESSORS: Dict[str, Callable[[Any], str]] = {
    "i": lambda obj: repr(to_plain_data(obj)),
    "j": lambda obj: json.dumps(to_plain_data(obj)),
    "k": lambda obj: json.dumps(to_plain_data(obj), indent=2),
    "p": lambda obj: str(to_plain_data(obj)),
    "y": lambda obj: yaml.safe_dump(to_plain_data(obj), sort_keys=False),
}


def get_post_processor(code: Optional[str]) -> Optional[Callable[[Any], str]]:
    """Post-processor for an -o code, or None when no format was requested."""
    if code is None:
        return None
    try:
        return POST_PROCESSORS[code]
    except KeyError:
        raise AirctlError(
            f"Output format must be one of {list(POST_PROCESSORS)}, was {code!r}"
        ) from None


def fancy_string(obj: Any) -> str:
    return pretty_repr(to_plain_data(obj))


def print_available_networks(networks: Sequence[AvailableNetwork], console: Console) -> None:
    """Print access points in a table, strongest signal first."""
    table = Table(
        title="Access points in descending order of signal strength",
        show_header=True,
        box=None,
        padding=(0, 2),
    )
    table.add_column("SSID", style="cyan")
    table.add_column("BSSID", style="white")
    table.add_column("Signal", style="white", justify="right")
    table.add_column("Channel", style="white", justify="right")
    table.add_column("Security", style="white")

    for network in networks:
        table.add_row(
            network.ssid,
            network.bssid or "-",
            str(network.signal) if network.signal is not None else "-",
            network.channel or "-",
            network.security or "-",
        )

    console.print()
    console.print(table)


def get_error_guidance(exception: Exception) -> list[str]:
    """
    Return actionable suggestions for common failures.
    Used to display a "What to try" panel after an error.
    """
    msg = str(exception).lower()
    lines: list[str] = []
    if "not authorized" in msg or "permission" in msg or "denied" in msg or "sudo" in msg:
        lines.append("• This operation needs elevated permissions on this system.")
    elif "password" in msg:
        lines.append("• Check the network password, or pass it after the network name.")
    elif "not found" in msg:
        lines.append("• A required OS utility may be missing from the PATH.")
    if isinstance(exception, OsCommandError):
        lines.append("• Run with [cyan]-v[/cyan] to see every OS command and its output.")
    return lines


def print_error(exception: AirctlError, console: Console) -> None:
    """Display an airctl error with any captured command output."""
    if isinstance(exception, OsCommandError):
        content = (
            f"[bold]Command:[/bold] {escape(exception.command)}\n"
            f"[bold]Exit status:[/bold] {exception.exit_status}\n\n"
            f"{escape(exception.output_text.rstrip()) or '[dim](no output)[/dim]'}"
        )
        console.print(Panel(content, title="✗ OS command failed", border_style="red", expand=False))
    else:
        console.print(f"[red]✗ {escape(str(exception))}[/red]")

    guidance = get_error_guidance(exception)
    if guidance:
        console.print(Panel("\n".join(guidance), title="What to try", border_style="dim", expand=False))
