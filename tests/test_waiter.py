"""Tests for the condition waiter."""
import time
from unittest.mock import MagicMock

import pytest

from airctl.core.errors import InvalidWaitTargetError
from airctl.modules.waiter import WaitTarget, wait_until


def make_predicates(**overrides):
    predicates = {member: (lambda: True) for member in WaitTarget}
    for name, predicate in overrides.items():
        predicates[WaitTarget[name]] = predicate
    return predicates


def true_after(false_count):
    """Predicate returning False false_count times, then True."""
    calls = {"n": 0}

    def predicate():
        calls["n"] += 1
        return calls["n"] > false_count

    predicate.calls = calls
    return predicate


class TestWaitTargetParse:
    """WaitTarget.parse accepts short values, names and camelCase names."""

    @pytest.mark.parametrize("value, expected", [
        ("conn", WaitTarget.INTERNET_CONNECTED),
        ("disc", WaitTarget.INTERNET_DISCONNECTED),
        ("on", WaitTarget.RADIO_ON),
        ("off", WaitTarget.RADIO_OFF),
        ("RADIO_ON", WaitTarget.RADIO_ON),
        ("internetConnected", WaitTarget.INTERNET_CONNECTED),
        ("radioOff", WaitTarget.RADIO_OFF),
        (WaitTarget.INTERNET_DISCONNECTED, WaitTarget.INTERNET_DISCONNECTED),
    ])
    def test_parse(self, value, expected):
        assert WaitTarget.parse(value) is expected

    @pytest.mark.parametrize("value", ["badValue", "", None, 3])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(InvalidWaitTargetError):
            WaitTarget.parse(value)


def test_invalid_target_lists_legal_values_without_polling():
    predicate = MagicMock(return_value=True)
    sleep = MagicMock()
    predicates = {member: predicate for member in WaitTarget}

    with pytest.raises(InvalidWaitTargetError) as excinfo:
        wait_until("badValue", predicates, 0.5, sleep=sleep)

    message = str(excinfo.value)
    for name in ("conn", "disc", "on", "off"):
        assert f"'{name}'" in message
    for name in ("internetConnected", "internetDisconnected", "radioOn", "radioOff"):
        assert name in message
    assert "badValue" in message
    predicate.assert_not_called()
    sleep.assert_not_called()


def test_invalid_target_is_a_value_error():
    with pytest.raises(ValueError):
        wait_until("sideways", make_predicates())


def test_returns_immediately_when_already_true():
    sleep = MagicMock()
    wait_until("on", make_predicates(), sleep=sleep)
    sleep.assert_not_called()


def test_polls_until_true():
    predicate = true_after(3)
    sleep = MagicMock()

    wait_until(WaitTarget.RADIO_OFF, make_predicates(RADIO_OFF=predicate), 0.25, sleep=sleep)

    assert predicate.calls["n"] == 4
    assert sleep.call_count == 3
    sleep.assert_called_with(0.25)


def test_only_target_predicate_is_evaluated():
    other = MagicMock(return_value=False)
    predicates = {member: other for member in WaitTarget}
    predicates[WaitTarget.INTERNET_CONNECTED] = lambda: True
    wait_until("conn", predicates, sleep=MagicMock())
    other.assert_not_called()


def test_none_interval_uses_default():
    sleep = MagicMock()
    wait_until("on", make_predicates(RADIO_ON=true_after(1)), None, sleep=sleep)
    sleep.assert_called_once_with(0.5)


def test_missing_predicate_is_rejected():
    predicates = make_predicates()
    del predicates[WaitTarget.RADIO_OFF]
    with pytest.raises(ValueError, match="off"):
        wait_until("on", predicates)


def test_wait_timing_three_polls():
    """True after three polls: returns after at least 3 and fewer than 4 intervals."""
    interval = 0.1
    predicate = true_after(3)

    start = time.monotonic()
    wait_until("on", make_predicates(RADIO_ON=predicate), interval)
    elapsed = time.monotonic() - start

    assert elapsed >= 3 * interval
    assert elapsed < 4 * interval
