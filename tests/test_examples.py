import time

import pytest

from topicbus.eventbus import EventBus
from topicbus.examples import (
    AnalyticsHandler,
    BasicEvent,
    BasicHandler,
    CategoryFilterHandler,
    ConfigEvent,
    ConfigHandler,
    DynamicEvent,
    DynamicHandler,
    FailingHandler,
    FilterEvent,
    LogHandler,
    MyEvent,
    MyHandler,
    NotificationHandler,
    PrefixLogger,
    PriorityFilterHandler,
    RetryEvent,
    StatsHandler,
    UserEvent,
    UserLogHandler,
    main,
    run_basic,
    run_custom_config,
    run_dynamic_subscription,
    run_error_retry,
    run_event_filtering,
    run_main,
    run_multi_subscriber,
)


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_prefix_logger_formats_info(capsys):
    PrefixLogger().info("topic: %s, length: %d", "t", 4)
    assert capsys.readouterr().out == "[INFO] topic: t, length: 4\n"


def test_prefix_logger_with_prefix_formats_error(capsys):
    PrefixLogger("custom ").error("boom")
    assert capsys.readouterr().out == "[custom ERROR] boom\n"


@pytest.mark.parametrize(
    "event, topic",
    [
        (MyEvent("m"), "my-topic"),
        (BasicEvent("m"), "basic-topic"),
        (ConfigEvent("m"), "config-topic"),
        (DynamicEvent(1, "m"), "dynamic-topic"),
        (RetryEvent(1, "m"), "retry-topic"),
        (FilterEvent("system", 1, "m"), "filter-topic"),
        (UserEvent(1, "u", "a"), "user-events"),
    ],
)
def test_event_topics(event, topic):
    assert event.topic() == topic


@pytest.mark.parametrize(
    "handler",
    [
        MyHandler(),
        LogHandler(),
        StatsHandler(),
        BasicHandler(),
        ConfigHandler(),
        DynamicHandler("h"),
        FailingHandler(0),
        CategoryFilterHandler("system"),
        PriorityFilterHandler(5),
        UserLogHandler(),
        NotificationHandler(),
        AnalyticsHandler(),
    ],
)
def test_handlers_reject_foreign_events(handler):
    with pytest.raises(TypeError):
        handler.handle(BasicEvent("x") if not isinstance(handler, BasicHandler) else MyEvent("x"))


def test_my_handlers_print_message(capsys):
    event = MyEvent("greetings")
    MyHandler().handle(event)
    LogHandler().handle(event)
    out = capsys.readouterr().out
    assert out.count("greetings") == 2


def test_stats_handler_reports_length(capsys):
    message = "abcdef"
    StatsHandler().handle(MyEvent(message))
    assert f"length={len(message)}" in capsys.readouterr().out


def test_dynamic_handler_prints_name_and_id(capsys):
    DynamicHandler("alpha").handle(DynamicEvent(42, "payload"))
    out = capsys.readouterr().out
    assert "[alpha]" in out and "42" in out and "payload" in out


def test_failing_handler_fails_then_succeeds(capsys):
    handler = FailingHandler(2)
    event = RetryEvent(7, "done-msg")
    for _ in range(2):
        with pytest.raises(RuntimeError):
            handler.handle(event)
    handler.handle(event)
    assert handler.fail_count == 3
    assert "done-msg" in capsys.readouterr().out


def test_failing_handler_on_bus_succeeds_within_retries(capsys):
    handler = FailingHandler(2)
    with EventBus(max_retries=3, logger=PrefixLogger()) as bus:
        bus.subscribe("retry-topic", handler)
        bus.publish(RetryEvent(1, "retry-me"))
        assert _wait_for(lambda: handler.fail_count >= 3)
    assert handler.fail_count == 3
    out = capsys.readouterr().out
    assert out.count("[ERROR]") == 2


def test_failing_handler_on_bus_respects_retry_limit(capsys):
    handler = FailingHandler(5)
    logger = PrefixLogger()
    with EventBus(max_retries=2, logger=logger) as bus:
        bus.subscribe("retry-topic", handler)
        bus.publish(RetryEvent(1, "never"))
        assert _wait_for(lambda: capsys.readouterr().out.count("[ERROR]") >= 0 and handler.fail_count >= 2)
        time.sleep(0.1)
    assert handler.fail_count == 2


def test_category_filter(capsys):
    handler = CategoryFilterHandler("system")
    handler.handle(FilterEvent("system", 1, "sys-msg"))
    handler.handle(FilterEvent("user", 1, "usr-msg"))
    out = capsys.readouterr().out
    assert "sys-msg" in out
    assert "usr-msg" not in out
    assert "'user'" in out


def test_priority_filter_boundary(capsys):
    handler = PriorityFilterHandler(5)
    handler.handle(FilterEvent("x", 5, "at-min"))
    handler.handle(FilterEvent("x", 4, "below-min"))
    out = capsys.readouterr().out
    assert "at-min" in out
    assert "below-min" not in out


def test_user_handlers(capsys):
    event = UserEvent(77, "bob", "logout")
    UserLogHandler().handle(event)
    NotificationHandler().handle(event)
    AnalyticsHandler().handle(event)
    out = capsys.readouterr().out
    assert out.count("logout") == 3
    assert out.count("77") == 2


def test_run_main(capsys):
    run_main(0.3)
    out = capsys.readouterr().out
    assert out.count("Hello, EventBus!") == 2
    assert "length=16" in out


def test_run_basic(capsys):
    run_basic(0.3)
    assert "this is a basic example!" in capsys.readouterr().out


def test_run_custom_config(capsys):
    run_custom_config(0.3)
    out = capsys.readouterr().out
    assert "testing custom configuration!" in out
    assert "[custom INFO]" in out


def test_run_dynamic_subscription(capsys):
    run_dynamic_subscription(0.6)
    out = capsys.readouterr().out
    assert out.count("[handler 1]") == 2
    assert out.count("[handler 2]") == 2
    assert out.count("[handler 3]") == 1
    assert "ID: 4" not in out


def test_run_error_retry(capsys):
    run_error_retry(0.2)
    out = capsys.readouterr().out
    assert "an event that needs retrying" in out
    assert "attempt: 3" in out


def test_run_event_filtering(capsys):
    run_event_filtering(0.4)
    out = capsys.readouterr().out
    assert "handling 'system' event: system high-priority message" in out
    assert "ignoring priority 2 event" in out


def test_run_multi_subscriber(capsys):
    run_multi_subscriber(0.3)
    out = capsys.readouterr().out
    assert out.count("Zhang San") == 2
    assert "UserID=1001" in out


def test_main_runs_selected_example(capsys):
    assert main(["basic", "--pause", "0.3"]) == 0
    assert "this is a basic example!" in capsys.readouterr().out


def test_main_rejects_unknown_example():
    with pytest.raises(SystemExit):
        main(["no-such-example"])