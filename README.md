# topicbus

topicbus is an in-process event bus. Each topic gets its own bounded queue and
its own worker thread. A topic can have any number of handlers. When a handler
raises, the bus calls it again, up to a set number of attempts.

## Installation

```
pip install topicbus
```

## Usage

Subclass `topicbus.eventbus.Event` and implement `topic()`. Subclass
`topicbus.eventbus.Handler` and implement `handle(event)`.

```python
from topicbus.eventbus import Event, EventBus, Handler


class Greeting(Event):
    def __init__(self, message):
        self.message = message

    def topic(self):
        return "greetings"


class PrintHandler(Handler):
    def handle(self, event):
        print("got:", event.message)


with EventBus(max_retries=5) as bus:
    bus.subscribe("greetings", PrintHandler())
    bus.publish(Greeting("hello"))
```

Leaving the `with` block calls `close()`. You can also call `close()` directly.

### Behaviour

- `EventBus(max_retries=3, channel_size=1000, logger=None)` creates a bus. A
  `channel_size` that is not positive falls back to 1000. When `logger` is
  `None`, a `DefaultLogger` is used.
- `subscribe(topic, handler)` adds a handler to a topic. The first subscription
  to a topic creates its queue and starts its worker thread. Calling
  `subscribe` on a closed bus raises `RuntimeError`.
- `publish(event)` puts one task for each subscribed handler on the queue of
  `event.topic()`. If the topic has no subscribers, the event is dropped. If
  the topic's queue is full, `publish` blocks until space frees up.
- `unsubscribe(topic, handler)` removes that exact handler object. Removing the
  last handler of a topic closes the topic's queue. The worker finishes the
  tasks still in the queue and then stops.
- Handlers run in their topic's worker thread, one task at a time and in the
  order they were queued. A handler that raises is tried again, up to
  `max_retries` attempts in total. Each failed attempt is reported through the
  logger's `error` method. Before each task, the worker reports the current
  queue length through the logger's `info` method.
- `close()` closes every queue, forgets all subscriptions and waits for the
  worker threads to finish. Tasks that have not started yet are discarded.

### Logging

The bus accepts any object with `info(message, *args)` and
`error(message, *args)` methods; `topicbus.logger.Logger` describes this
interface. The `%` placeholders in `message` are filled from `args`.

`topicbus.logger.DefaultLogger` writes to the standard `logging` logger named
`topicbus`, adding an `[INFO] ` or `[ERROR] ` prefix to each message.
`topicbus.examples.PrefixLogger(prefix)` prints lines of the form
`[<prefix>INFO] ...` or `[<prefix>ERROR] ...` to standard output. For example,
`PrefixLogger("custom ")` prints `[custom INFO] ...`.

## Examples

`topicbus.examples` contains the following scenarios. Each one is a function
that takes a `pause` in seconds:

| name                   | function                   | shows                                     |
|------------------------|----------------------------|-------------------------------------------|
| `main`                 | `run_main`                 | three handlers on one topic, custom logger |
| `basic`                | `run_basic`                | one handler, default configuration        |
| `custom-config`        | `run_custom_config`        | retries, queue size and logger set        |
| `dynamic-subscription` | `run_dynamic_subscription` | handlers added and removed between events |
| `error-retry`          | `run_error_retry`          | a handler that succeeds on its third try  |
| `event-filtering`      | `run_event_filtering`      | handlers filtering by category, priority  |
| `multi-subscriber`     | `run_multi_subscriber`     | several handlers reacting to a user event |

To run a scenario from the command line:

```
topicbus-examples
topicbus-examples error-retry --pause 0.5
```

If you give no name, `main` runs. The default for `--pause` is 1.0 second.

## Limitations

Events exist only inside the current process. They are not stored, and they are
not delivered to other processes or machines. Events still waiting in a queue
when the bus closes are lost.