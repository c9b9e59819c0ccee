"""
Command handlers shared by the one-shot command line and the interactive shell.
"""

import ipaddress
import shlex
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

import questionary
from loguru import logger
from rich.console import Console
from rich.pretty import Pretty

from airctl.cli.commands import Command, CommandRegistry
from airctl.cli.formatters import (
    PROJECT_URL,
    fancy_string,
    get_post_processor,
    print_available_networks,
    print_error,
    to_plain_data,
)
from airctl.core.errors import AirctlError, BadCommandError
from airctl.models.base import WifiModel


@dataclass(frozen=True)
class OpenResource:
    """A web page the `ropen` command can open."""

    code: str
    resource: str
    description: str

    def help_string(self) -> str:
        # Ex: "'ipw' (What is My IP)"
        return f"'{self.code}' ({self.description})"


class OpenResources(tuple):

    def find_by_code(self, code: str) -> Optional[OpenResource]:
        return next((resource for resource in self if resource.code == code), None)

    def help_string(self) -> str:
        return ", ".join(resource.help_string() for resource in self)


OPEN_RESOURCES = OpenResources((
    OpenResource("cap", "https://captive.apple.com/", "Portal Logins"),
    OpenResource("ipl", "https://www.iplocation.net/", "IP Location"),
    OpenResource("ipw", "https://www.whatismyip.com", "What is My IP"),
    OpenResource("spe", "https://www.speedtest.net/", "Speed Test"),
    OpenResource("this", PROJECT_URL, "airctl home page"),
))


class ShellExit(Exception):
    """Raised by quit/xit to leave the interactive shell."""


class CommandLineInterface:
    """
    Runs commands against a Wi-Fi model.

    In shell mode handlers return their data so the shell can display it;
    in one-shot mode they print it, through the -o post-processor if one
    was chosen.
    """

    def __init__(
        self,
        model: WifiModel,
        console: Console,
        help_text: str,
        output_format: Optional[str] = None,
        interactive: bool = False,
        wait_interval: Optional[float] = None,
    ):
        self.model = model
        self.wait_interval = wait_interval
        self.console = console
        self.help_text = help_text
        self.post_processor = get_post_processor(output_format)
        self.interactive = interactive
        self.registry = CommandRegistry(self._build_commands())

    def _build_commands(self) -> List[Command]:
        return [
            Command("a",  "avail_nets",    lambda *_args: self.cmd_a()),
            Command("ci", "ci",            lambda *_args: self.cmd_ci()),
            Command("co", "connect",       lambda *args: self.cmd_co(*args)),
            Command("cy", "cycle",         lambda *_args: self.cmd_cy()),
            Command("d",  "disconnect",    lambda *_args: self.cmd_d()),
            Command("f",  "forget",        lambda *args: self.cmd_f(*args)),
            Command("h",  "help",          lambda *_args: self.cmd_h()),
            Command("i",  "info",          lambda *_args: self.cmd_i()),
            Command("l",  "ls_avail_nets", lambda *_args: self.cmd_l()),
            Command("na", "nameservers",   lambda *args: self.cmd_na(*args)),
            Command("ne", "network_name",  lambda *_args: self.cmd_ne()),
            Command("of", "off",           lambda *_args: self.cmd_of()),
            Command("on", "on",            lambda *_args: self.cmd_on()),
            Command("ro", "ropen",         lambda *args: self.cmd_ro(*args)),
            Command("pa", "password",      lambda *args: self.cmd_pa(*args)),
            Command("pr", "pref_nets",     lambda *_args: self.cmd_pr()),
            Command("q",  "quit",          lambda *_args: self.cmd_q()),
            Command("t",  "till",          lambda *args: self.cmd_t(*args)),
            Command("u",  "url",           lambda *_args: self.cmd_u()),
            Command("w",  "wifi_on",       lambda *_args: self.cmd_w()),
            Command("x",  "xit",           lambda *_args: self.cmd_x()),
        ]

    # Output

    def _out(self, text: str) -> None:
        self.console.out(text, highlight=False)

    def _report(self, value: Any, plain_text: Callable[[], str]) -> Any:
        """Return value in shell mode, otherwise print it."""
        if self.interactive:
            return value
        if self.post_processor:
            self._out(self.post_processor(value))
        else:
            self._out(plain_text())
        return None

    def print_help(self) -> None:
        self._out(self.help_text)

    # Dispatch

    def process_command_line(self, argv: Sequence[str]) -> Any:
        """Run the command named by argv[0] with the remaining arguments."""
        command, *args = argv

        def not_found():
            self.print_help()
            raise BadCommandError(
                f'! Unrecognized command. Command was "{command}" and options were {args}.'
            )

        return self.registry.dispatch(command, args, not_found)

    def execute_line(self, line: str) -> Any:
        """Run one line typed into the shell."""
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            raise AirctlError(f"Could not parse input: {e}") from e
        if not tokens:
            return None
        command, *args = tokens
        return self.registry.dispatch(
            command,
            args,
            lambda: self.console.print(
                f'"{command}" is not a valid command or option.',
                markup=False,
                style="yellow",
            ),
        )

    def run_shell(self) -> None:
        """Prompt for commands until quit, xit, Ctrl-C or Ctrl-D."""
        self.print_help()
        logger.debug("Interactive shell started")
        while True:
            line = questionary.text("airctl>", qmark="").ask()
            if line is None:
                break
            try:
                result = self.execute_line(line)
            except ShellExit:
                break
            except AirctlError as e:
                print_error(e, self.console)
                continue
            if result is not None:
                self.console.print(Pretty(to_plain_data(result)))
        logger.debug("Interactive shell exited")

    # Commands

    def cmd_a(self):
        names = self.model.available_network_names()
        if self.interactive or self.post_processor:
            return self._report(names, str)
        if self.model.is_wifi_on():
            self._out(f"Available networks are:\n\n{fancy_string(names)}")
        else:
            self._out("Wifi is off, cannot see available networks.")
        return None

    def cmd_ci(self):
        connected = self.model.is_connected_to_internet()
        return self._report(connected, lambda: f"Connected to Internet: {connected}")

    def cmd_co(self, network=None, password=None, *_args):
        self.model.connect(network, password)

    def cmd_cy(self):
        self.model.cycle_network()

    def cmd_d(self):
        self.model.disconnect()

    def cmd_f(self, *network_names):
        removed = self.model.remove_preferred_networks(*network_names)
        return self._report(removed, lambda: f"Removed networks: {removed}")

    def cmd_h(self):
        self.print_help()

    def cmd_i(self):
        info = self.model.wifi_info()
        return self._report(info, lambda: fancy_string(info))

    def cmd_l(self):
        networks = self.model.available_network_info()
        if self.interactive:
            return networks
        if not self.model.is_wifi_on():
            self._out("Wifi is off, cannot see available networks.")
        elif self.post_processor:
            self._out(self.post_processor(networks))
        else:
            print_available_networks(networks, self.console)
        return None

    def cmd_na(self, *args):
        """'show' (or nothing) to show, 'clear' to clear, else addresses to set."""
        if not args or args[0] in ("show", "get"):
            nameservers = self.model.nameservers()
            return self._report(
                nameservers,
                lambda: f"Nameservers: {', '.join(nameservers) if nameservers else '[None]'}",
            )
        if args[0] == "clear":
            self.model.set_nameservers("clear")
            return None

        for address in args:
            try:
                ipaddress.ip_address(address)
            except ValueError:
                raise AirctlError(f"{address!r} is not a valid IP address.") from None
        self.model.set_nameservers(list(args))
        return None

    def cmd_ne(self):
        name = self.model.connected_network_name()
        return self._report(name, lambda: f'Network (SSID) name: "{name if name else "[none]"}"')

    def cmd_of(self):
        self.model.wifi_off()

    def cmd_on(self):
        self.model.wifi_on()

    def cmd_ro(self, *resource_codes):
        for code in resource_codes:
            resource = OPEN_RESOURCES.find_by_code(str(code))
            if resource:
                self.model.open_resource(resource.resource)
            else:
                logger.warning(f"Unknown resource code {code!r}; use one of {OPEN_RESOURCES.help_string()}")

    def cmd_pa(self, network=None, *_args):
        if not network:
            raise AirctlError("A network name is required but was not provided.")
        password = self.model.preferred_network_password(network)

        def plain_text():
            if password:
                return f'Preferred network "{network}" stored password is "{password}".'
            return f'Preferred network "{network}" has no stored password.'

        return self._report(password, plain_text)

    def cmd_pr(self):
        networks = self.model.preferred_networks()
        return self._report(networks, lambda: fancy_string(networks))

    def cmd_q(self):
        self.quit()

    def cmd_t(self, target=None, wait_interval=None, *_args):
        interval = self.wait_interval
        if wait_interval is not None:
            try:
                interval = float(wait_interval)
            except ValueError:
                raise AirctlError(f"Wait interval must be a number, was {wait_interval!r}") from None
        self.model.wait_until(target, interval)

    def cmd_u(self):
        return self._report(PROJECT_URL, lambda: PROJECT_URL)

    def cmd_w(self):
        on = self.model.is_wifi_on()
        return self._report(on, lambda: f"Wifi on: {on}")

    def cmd_x(self):
        self.quit()

    def quit(self):
        if self.interactive:
            raise ShellExit()
        self._out("This command can only be run in shell mode.")
