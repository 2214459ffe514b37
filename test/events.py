"""
Event bus tests.

Scope
- Listener order, decorator registration, removal.
- Propagation stop and exit codes.
- Payload access helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from sprig import Event, EventBus


class TestEvent(TestCase):
    def testDefaults(self) -> None:
        event = Event("command.before", {"command": "build"})
        self.assertEqual(event.name, "command.before")
        self.assertEqual(event.command, "build")
        self.assertEqual(event.exit_code, 0)
        self.assertFalse(event.propagation_stopped)

    def testPayloadHelpers(self) -> None:
        event = Event("custom")
        event.set("answer", 42)
        self.assertIn("answer", event)
        self.assertEqual(event["answer"], 42)
        self.assertEqual(event.get("missing", "x"), "x")
        self.assertIsNone(event.command)

    def testPayloadIsCopied(self) -> None:
        payload = {"command": "build"}
        Event("custom", payload).set("extra", True)
        self.assertEqual(payload, {"command": "build"})

    def testStopPropagationSetsExitCode(self) -> None:
        event = Event("custom")
        event.stop_propagation(2)
        self.assertTrue(event.propagation_stopped)
        self.assertEqual(event.exit_code, 2)

    def testExitCodeMustBeInteger(self) -> None:
        event = Event("custom")
        for code in ("1", 1.0, True):
            with self.assertRaises(TypeError):
                event.exit_code = code

    def testNameMustBeString(self) -> None:
        with self.assertRaises(TypeError):
            Event(None)


class TestEventBus(TestCase):
    def setUp(self) -> None:
        self.bus = EventBus()
        self.calls = []

    def testRegistrationOrder(self) -> None:
        """
        listeners run one after another, in the order they were added.
        """
        self.bus.on("custom", lambda event: self.calls.append("first"))
        self.bus.on("custom", lambda event: self.calls.append("second"))
        self.bus.emit("custom")
        self.assertEqual(self.calls, ["first", "second"])

    def testDecoratorForm(self) -> None:
        @self.bus.on("custom")
        def listener(event):
            self.calls.append(event["value"])

        self.assertTrue(callable(listener))
        self.bus.emit("custom", value=7)
        self.assertEqual(self.calls, [7])

    def testStopSkipsLaterListeners(self) -> None:
        def stopper(event):
            self.calls.append("stopper")
            event.stop_propagation(3)

        self.bus.on("custom", stopper)
        self.bus.on("custom", lambda event: self.calls.append("late"))
        event = self.bus.emit("custom")

        self.assertEqual(self.calls, ["stopper"])
        self.assertTrue(event.propagation_stopped)
        self.assertEqual(event.exit_code, 3)

    def testExitCodeWithoutStop(self) -> None:
        def listener(event):
            event.exit_code = 4

        self.bus.on("custom", listener)
        self.bus.on("custom", lambda event: self.calls.append(event.exit_code))
        self.assertEqual(self.bus.emit("custom").exit_code, 4)
        self.assertEqual(self.calls, [4])

    def testPayloadAndKeywordsMerge(self) -> None:
        event = self.bus.emit("custom", {"command": "build"}, result=0)
        self.assertEqual(event.payload, {"command": "build", "result": 0})

    def testEmitWithoutListeners(self) -> None:
        event = self.bus.emit("nobody")
        self.assertFalse(event.propagation_stopped)
        self.assertEqual(event.exit_code, 0)

    def testOffAndHasListeners(self) -> None:
        self.bus.on("custom", self.calls.append)
        self.assertTrue(self.bus.has_listeners("custom"))
        self.assertEqual(self.bus.events, ("custom",))

        self.bus.off("custom")
        self.bus.off("custom")
        self.assertFalse(self.bus.has_listeners("custom"))
        self.assertEqual(self.bus.events, ())
        self.bus.emit("custom")
        self.assertEqual(self.calls, [])

    def testListenersSnapshot(self) -> None:
        self.bus.on("custom", self.calls.append)
        self.assertEqual(self.bus.listeners("custom"), (self.calls.append,))
        self.assertEqual(self.bus.listeners("other"), ())

    def testListenerExceptionsPropagate(self) -> None:
        def broken(event):
            raise RuntimeError("boom")

        self.bus.on("custom", broken)
        with self.assertRaises(RuntimeError):
            self.bus.emit("custom")

    def testInvalidRegistration(self) -> None:
        with self.assertRaises(TypeError):
            self.bus.on("custom", "not callable")
        with self.assertRaises(TypeError):
            self.bus.on(42, print)


if __name__ == "__main__":
    unittest.main()
