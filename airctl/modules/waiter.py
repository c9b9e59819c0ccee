"""
Block until a Wi-Fi or Internet state is reached.
"""

import time
from enum import Enum
from typing import Callable, Mapping, Optional, Union

from loguru import logger

from airctl.core.errors import InvalidWaitTargetError

DEFAULT_WAIT_INTERVAL = 0.5


class WaitTarget(str, Enum):
    """States that wait_until can block on."""

    INTERNET_CONNECTED = "conn"
    INTERNET_DISCONNECTED = "disc"
    RADIO_ON = "on"
    RADIO_OFF = "off"

    @classmethod
    def parse(cls, value: Union["WaitTarget", str]) -> "WaitTarget":
        """
        Accept a member, its short value ('conn'), its name
        ('INTERNET_CONNECTED') or the camelCase name ('internetConnected').
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value in (member.value, member.name, member.camel_name):
                    return member
        raise InvalidWaitTargetError(
            f"Option must be one of {[member.value for member in cls]} "
            f"(or {[member.camel_name for member in cls]}). Was: {value!r}"
        )

    @property
    def camel_name(self) -> str:
        head, *rest = self.name.lower().split("_")
        return head + "".join(word.capitalize() for word in rest)


Predicate = Callable[[], bool]


def wait_until(
    target: Union[WaitTarget, str],
    predicates: Mapping[WaitTarget, Predicate],
    poll_interval: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Return once the predicate for target is true, polling every poll_interval
    seconds. There is no upper bound on the wait.

    Args:
        target: State to wait for
        predicates: One zero-argument predicate per WaitTarget member
        poll_interval: Seconds between checks; None means the default
        sleep: Sleep function, replaceable in tests

    Raises:
        InvalidWaitTargetError: target is not a known state
        ValueError: predicates does not cover every WaitTarget
    """
    state = WaitTarget.parse(target)

    missing = [member.value for member in WaitTarget if member not in predicates]
    if missing:
        raise ValueError(f"No predicate registered for {missing}")

    if poll_interval is None:
        poll_interval = DEFAULT_WAIT_INTERVAL

    finished = predicates[state]
    logger.debug(f"Waiting for '{state.value}' (interval {poll_interval}s)")
    while not finished():
        sleep(poll_interval)
    logger.debug(f"Reached '{state.value}'")
