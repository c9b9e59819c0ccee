"""
Command registry with abbreviation-based lookup.

A typed token selects a command when it is a prefix of the command's full
name and at least as long as its minimum abbreviation: with `co`/`connect`
registered, `co`, `con` ... `connect` all match but `c` does not. The first
matching command in registration order wins.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

Action = Callable[..., Any]


@dataclass(frozen=True)
class Command:
    """One invocable command."""

    min_string: str
    max_string: str
    action: Action

    def matches(self, token: str) -> bool:
        return self.max_string.startswith(token) and len(token) >= len(self.min_string)

    def valid_tokens(self) -> List[str]:
        """Every token that selects this command when it stands alone."""
        return [
            self.max_string[:length]
            for length in range(len(self.min_string), len(self.max_string) + 1)
        ]


class CommandRegistry:
    """Ordered, read-only collection of commands."""

    def __init__(self, commands: Sequence[Command]):
        self._commands: Tuple[Command, ...] = tuple(commands)

    @property
    def commands(self) -> Tuple[Command, ...]:
        return self._commands

    def find(self, token: str) -> Optional[Command]:
        for command in self._commands:
            if command.matches(token):
                return command
        return None

    def resolve(self, token: str) -> Optional[Action]:
        """Return the action selected by token, or None."""
        command = self.find(token)
        return command.action if command else None

    def dispatch(self, token: str, args: Sequence[Any], on_not_found: Callable[[], Any]) -> Any:
        """
        Run the action selected by token with args.

        When nothing matches, on_not_found is called and None is returned.
        """
        action = self.resolve(token)
        if action is None:
            on_not_found()
            return None
        return action(*args)

    def find_conflicts(self) -> List[Tuple[str, str, str]]:
        """
        Tokens of one command captured by an earlier command.

        Returns:
            (token, winning command, shadowed command) triples
        """
        conflicts = []
        for command in self._commands:
            for token in command.valid_tokens():
                winner = self.find(token)
                if winner is not command:
                    conflicts.append((token, winner.max_string, command.max_string))
        return conflicts
