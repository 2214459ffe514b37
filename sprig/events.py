"""
Synchronous named-event bus.

- Listeners fire in registration order, one at a time, on the emitting thread.
- A listener may call event.stop_propagation(); later listeners are skipped.
- A listener may set event.exit_code; the dispatcher aborts a run when a
  lifecycle event comes back stopped (or, for "command.notFound", non-zero).
- Listener return values are ignored and listener exceptions propagate.

Lifecycle events emitted by Application.run:
    command.notFound   unknown command name
    command.before     before binding (payload: command, interpretation, argv)
    <command name>     same as command.before, for listeners of one command
    command.after      after the handler (adds context and result)
"""
import logging
from collections import defaultdict

from .utils import *

logger = logging.getLogger(__name__)

NOT_FOUND = "command.notFound"
BEFORE = "command.before"
AFTER = "command.after"


class Event(metaclass=SpecType):
    """
    One emission: a name, a mutable payload, a propagation flag and an exit code.
    """

    __displayable__ = ("name", "payload", "propagation_stopped", "exit_code")

    def __init__(self, name, payload=Unset, /):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} name must be a string")
        self._name = name
        self._payload = dict(coalesce(payload, {}))
        self._stopped = False
        self._exit_code = 0

    @property
    def name(self):
        return self._name

    @property
    def payload(self):
        return self._payload

    @property
    def command(self):
        return self._payload.get("command")

    @property
    def propagation_stopped(self):
        return self._stopped

    @property
    def exit_code(self):
        return self._exit_code

    @exit_code.setter
    def exit_code(self, code):
        if not isinstance(code, int) or isinstance(code, bool):
            raise TypeError(f"{type(self).__typename__} exit code must be an integer")
        self._exit_code = code

    def get(self, key, default=None, /):
        return self._payload.get(key, default)

    def set(self, key, value, /):
        self._payload[key] = value

    def __getitem__(self, key):
        return self._payload[key]

    def __contains__(self, key):
        return key in self._payload

    def stop_propagation(self, exit_code=Unset, /):
        """
        skip the remaining listeners; optionally set the exit code at the same time.
        """
        if exit_code is not Unset:
            self.exit_code = exit_code
        self._stopped = True


class EventBus(metaclass=SpecType):
    __displayable__ = ("events",)

    def __init__(self):
        self._listeners = defaultdict(list)

    @property
    def events(self):
        return tuple(name for name, listeners in self._listeners.items() if listeners)

    def on(self, name, listener=Unset, /):
        """
        append a listener for the named event.

        Forms
        - bus.on("command.before", callback) -> callback
        - @bus.on("command.before")
        """
        if not isinstance(name, str):
            raise TypeError("on() event name must be a string")

        def wrapper(listener, /):
            if not callable(listener):
                raise TypeError("on() listener must be callable")
            self._listeners[name].append(listener)
            return listener

        if listener is Unset:
            return rename(wrapper, "on")
        return wrapper(listener)

    def off(self, name, /):
        self._listeners.pop(name, None)

    def has_listeners(self, name, /):
        return bool(self._listeners.get(name))

    def listeners(self, name, /):
        return tuple(self._listeners.get(name, ()))

    def emit(self, name, payload=Unset, /, **data):
        """
        build an Event and run the listeners until one stops propagation.
        """
        event = Event(name, {**coalesce(payload, {}), **data})
        for listener in self.listeners(name):
            if event.propagation_stopped:
                break
            listener(event)
        logger.debug("emitted %r (stopped=%s, exit code=%d)", name, event.propagation_stopped, event.exit_code)
        return event


__all__ = (
    "Event",
    "EventBus",
    "NOT_FOUND",
    "BEFORE",
    "AFTER",
)
