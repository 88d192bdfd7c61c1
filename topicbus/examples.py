"""Runnable demonstrations of the event bus: events, handlers and scenarios."""

from __future__ import annotations

import argparse
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from .eventbus import Event, EventBus, Handler

_E = TypeVar("_E", bound=Event)


def _expect(event: Event, kind: type[_E]) -> _E:
    """Return ``event`` if it is a ``kind``; otherwise raise TypeError."""
    if not isinstance(event, kind):
        raise TypeError("invalid event type")
    return event


class PrefixLogger:
    """Logger that prints ``[<prefix>INFO]`` / ``[<prefix>ERROR]`` lines to stdout."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def _emit(self, level: str, message: str, args: tuple[Any, ...]) -> None:
        text = message % args if args else message
        print(f"[{self.prefix}{level}] {text}")

    def info(self, message: str, *args: Any) -> None:
        """Print an informational line."""
        self._emit("INFO", message, args)

    def error(self, message: str, *args: Any) -> None:
        """Print an error line."""
        self._emit("ERROR", message, args)


# --- general example -------------------------------------------------------


@dataclass
class MyEvent(Event):
    message: str

    def topic(self) -> str:
        return "my-topic"


class MyHandler(Handler):
    """Prints the message of a MyEvent."""

    def handle(self, event: Event) -> None:
        my_event = _expect(event, MyEvent)
        print(f"handling event: {my_event.message}")


class LogHandler(Handler):
    """Records a MyEvent."""

    def handle(self, event: Event) -> None:
        my_event = _expect(event, MyEvent)
        print(f"[log handler] recording event: {my_event.message}")


class StatsHandler(Handler):
    """Reports the byte length of a MyEvent's message."""

    def handle(self, event: Event) -> None:
        my_event = _expect(event, MyEvent)
        length = len(my_event.message.encode("utf-8"))
        print(f"[stats handler] event stats: message length={length}")


def run_main(pause: float = 1.0) -> None:
    """Three subscribers on one topic all receive a single published event."""
    with EventBus(max_retries=5, logger=PrefixLogger()) as bus:
        bus.subscribe("my-topic", MyHandler())
        bus.subscribe("my-topic", LogHandler())
        bus.subscribe("my-topic", StatsHandler())
        bus.publish(MyEvent("Hello, EventBus!"))
        time.sleep(pause)


# --- basic example ---------------------------------------------------------


@dataclass
class BasicEvent(Event):
    message: str

    def topic(self) -> str:
        return "basic-topic"


class BasicHandler(Handler):
    """Prints the message of a BasicEvent."""

    def handle(self, event: Event) -> None:
        basic = _expect(event, BasicEvent)
        print(f"handling basic event: {basic.message}")


def run_basic(pause: float = 1.0) -> None:
    """One subscriber, one event, default configuration."""
    with EventBus() as bus:
        bus.subscribe("basic-topic", BasicHandler())
        bus.publish(BasicEvent("this is a basic example!"))
        time.sleep(pause)


# --- custom configuration example ------------------------------------------


@dataclass
class ConfigEvent(Event):
    message: str

    def topic(self) -> str:
        return "config-topic"


class ConfigHandler(Handler):
    """Prints the message of a ConfigEvent."""

    def handle(self, event: Event) -> None:
        config = _expect(event, ConfigEvent)
        print(f"handling config event: {config.message}")


def run_custom_config(pause: float = 1.0) -> None:
    """A bus with custom retries, queue capacity and logger."""
    bus = EventBus(max_retries=5, channel_size=500, logger=PrefixLogger("custom "))
    with bus:
        bus.subscribe("config-topic", ConfigHandler())
        bus.publish(ConfigEvent("testing custom configuration!"))
        time.sleep(pause)


# --- dynamic subscription example ------------------------------------------


@dataclass
class DynamicEvent(Event):
    id: int
    message: str

    def topic(self) -> str:
        return "dynamic-topic"


class DynamicHandler(Handler):
    """Named handler that prints the id and message of a DynamicEvent."""

    def __init__(self, name: str) -> None:
        self.name = name

    def handle(self, event: Event) -> None:
        dynamic = _expect(event, DynamicEvent)
        print(f"[{self.name}] handling event ID: {dynamic.id}, message: {dynamic.message}")


def run_dynamic_subscription(pause: float = 1.0) -> None:
    """Handlers join and leave a topic between publications."""
    step = pause / 2
    with EventBus() as bus:
        first = DynamicHandler("handler 1")
        second = DynamicHandler("handler 2")
        third = DynamicHandler("handler 3")

        print("phase 1: only handler 1 is subscribed")
        bus.subscribe("dynamic-topic", first)
        bus.publish(DynamicEvent(1, "first message"))
        time.sleep(step)

        print("\nphase 2: adding handler 2")
        bus.subscribe("dynamic-topic", second)
        bus.publish(DynamicEvent(2, "second message"))
        time.sleep(step)

        print("\nphase 3: adding handler 3, removing handler 1")
        bus.subscribe("dynamic-topic", third)
        bus.unsubscribe("dynamic-topic", first)
        bus.publish(DynamicEvent(3, "third message"))
        time.sleep(step)

        print("\nphase 4: removing all handlers")
        bus.unsubscribe("dynamic-topic", second)
        bus.unsubscribe("dynamic-topic", third)
        bus.publish(DynamicEvent(4, "fourth message"))
        print("published the fourth event, but no handler received it")
        time.sleep(pause)


# --- error retry example ---------------------------------------------------


@dataclass
class RetryEvent(Event):
    id: int
    message: str

    def topic(self) -> str:
        return "retry-topic"


class FailingHandler(Handler):
    """Fails on its first ``max_fails`` attempts, then succeeds."""

    def __init__(self, max_fails: int) -> None:
        self.max_fails = max_fails
        self.fail_count = 0

    def handle(self, event: Event) -> None:
        retry = _expect(event, RetryEvent)
        self.fail_count += 1
        print(f"trying to handle event ID: {retry.id}, attempt: {self.fail_count}")
        if self.fail_count <= self.max_fails:
            raise RuntimeError(
                f"handling failed, will retry (attempt {self.fail_count}/{self.max_fails + 1})"
            )
        print(f"handled event successfully: {retry.message} (after {self.fail_count} attempts)")


def run_error_retry(pause: float = 1.0) -> None:
    """A handler that fails twice succeeds on its third attempt."""
    with EventBus(max_retries=3) as bus:
        bus.subscribe("retry-topic", FailingHandler(2))
        bus.publish(RetryEvent(1001, "an event that needs retrying"))
        time.sleep(pause * 2)


# --- event filtering example -----------------------------------------------


@dataclass
class FilterEvent(Event):
    category: str
    priority: int
    message: str

    def topic(self) -> str:
        return "filter-topic"


class CategoryFilterHandler(Handler):
    """Handles only events of one category and ignores the rest."""

    def __init__(self, category: str) -> None:
        self.category = category

    def handle(self, event: Event) -> None:
        filtered = _expect(event, FilterEvent)
        if filtered.category == self.category:
            print(f"[category filter] handling '{filtered.category}' event: {filtered.message}")
        else:
            print(f"[category filter] ignoring '{filtered.category}' event")


class PriorityFilterHandler(Handler):
    """Handles only events at or above a minimum priority."""

    def __init__(self, min_priority: int) -> None:
        self.min_priority = min_priority

    def handle(self, event: Event) -> None:
        filtered = _expect(event, FilterEvent)
        if filtered.priority >= self.min_priority:
            print(
                f"[priority filter] handling priority {filtered.priority} event: "
                f"{filtered.message}"
            )
        else:
            print(f"[priority filter] ignoring priority {filtered.priority} event")


def run_event_filtering(pause: float = 1.0) -> None:
    """Two filtering handlers see events of mixed category and priority."""
    events = [
        FilterEvent("system", 3, "system low-priority message"),
        FilterEvent("user", 7, "user high-priority message"),
        FilterEvent("system", 8, "system high-priority message"),
        FilterEvent("user", 2, "user low-priority message"),
    ]
    with EventBus() as bus:
        bus.subscribe("filter-topic", CategoryFilterHandler("system"))
        bus.subscribe("filter-topic", PriorityFilterHandler(5))
        for event in events:
            print(f"\npublishing event: category={event.category}, priority={event.priority}")
            bus.publish(event)
            time.sleep(pause / 2)
        time.sleep(pause)


# --- multi-subscriber example ----------------------------------------------


@dataclass
class UserEvent(Event):
    user_id: int
    username: str
    action: str

    def topic(self) -> str:
        return "user-events"


class UserLogHandler(Handler):
    """Logs a user's action."""

    def handle(self, event: Event) -> None:
        user = _expect(event, UserEvent)
        print(f"[log] user {user.username} (ID: {user.user_id}) performed {user.action}")


class NotificationHandler(Handler):
    """Sends a notification about a user's action."""

    def handle(self, event: Event) -> None:
        user = _expect(event, UserEvent)
        print(f"[notify] sending notification: user {user.username} just performed {user.action}")


class AnalyticsHandler(Handler):
    """Records a user's action for analytics."""

    def handle(self, event: Event) -> None:
        user = _expect(event, UserEvent)
        print(f"[analytics] recording user activity: UserID={user.user_id}, Action={user.action}")


def run_multi_subscriber(pause: float = 1.0) -> None:
    """Three different subscribers react to one user event."""
    with EventBus() as bus:
        bus.subscribe("user-events", UserLogHandler())
        bus.subscribe("user-events", NotificationHandler())
        bus.subscribe("user-events", AnalyticsHandler())
        bus.publish(UserEvent(1001, "Zhang San", "login"))
        time.sleep(pause)


_EXAMPLES: dict[str, Callable[[float], None]] = {
    "main": run_main,
    "basic": run_basic,
    "custom-config": run_custom_config,
    "dynamic-subscription": run_dynamic_subscription,
    "error-retry": run_error_retry,
    "event-filtering": run_event_filtering,
    "multi-subscriber": run_multi_subscriber,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run one of the example scenarios chosen on the command line."""
    parser = argparse.ArgumentParser(
        prog="topicbus-examples", description="Run an event bus example."
    )
    parser.add_argument("example", nargs="?", default="main", choices=sorted(_EXAMPLES))
    parser.add_argument(
        "--pause", type=float, default=1.0, help="seconds to wait for handlers (default 1.0)"
    )
    args = parser.parse_args(argv)
    _EXAMPLES[args.example](args.pause)
    return 0