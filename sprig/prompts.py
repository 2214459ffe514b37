"""
Interactive prompts: text, select and confirm questions answered from the keyboard.

    >>> answers = Prompt([
    ...     Question("name", "text", "project name", default="demo"),
    ...     Question("kind", "select", "template", choices=["api", "cli", "web"]),
    ...     Question("git", "confirm", "initialize git?", default=True),
    ...     Question("remote", lambda answers: "text" if answers["git"] else None, "remote url"),
    ... ]).ask()

Behavior
- Questions run in order. A kind may be a function of the answers so far; it
  is evaluated right before the question renders, and None skips the question.
- text: printable keys edit a buffer, Backspace deletes, Enter commits the
  buffer or, if empty, the default ("" without one).
- select: Up/Down move the highlight circularly, Enter commits the highlighted
  choice's value. The highlight starts on the choice matching the default.
- confirm: y/n commit at once, Enter commits the default (False without one).
- Left/Right/Tab are accepted and ignored.
- The current question redraws in place; a committed question collapses into
  a one-line summary.
- If input ends before a question is answered, the error hook runs with that
  question and ask() returns {}: answers are all or nothing.
- The keyboard is entered (raw mode) around each read loop and restored on
  every exit path.

Palette keys (override through __styles__ in __main__)
- pending-mark, answered-mark, message, separator, input, placeholder,
  hint, choice, active-choice, answer
"""
import logging
from collections import defaultdict
from collections.abc import Mapping

from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text

from .keys import Key, keyboard as _keyboard
from .utils import *

logger = logging.getLogger(__name__)

KINDS = ("text", "select", "confirm")


class Choice(metaclass=SpecType):
    __introspectable__ = ("title", "value")

    def __init__(self, title, value=Unset, /):
        if not isinstance(title, str):
            raise TypeError(f"{type(self).__typename__} title must be a string")
        self._title = title
        self._value = coalesce(value, title)

    @classmethod
    def of(cls, source, /):
        """
        accept a Choice, a {"title", "value"} mapping, a (title, value) pair or a bare title.
        """
        match source:
            case Choice():
                return source
            case str():
                return cls(source)
            case Mapping():
                try:
                    return cls(source["title"], source.get("value", Unset))
                except KeyError:
                    raise TypeError("choice mapping must have a 'title' key") from None
            case (title, value):
                return cls(title, value)
            case _:
                raise TypeError(f"cannot use {source!r} as a choice")


class Question(metaclass=SpecType):
    """
    One question: name (answer key), kind, message, default and choices.

    kind is "text", "select", "confirm", None (skip), or a callable taking the
    answers so far and returning one of those.
    """

    __introspectable__ = ("name", "kind", "message", "default", "choices")

    def __init__(self, name, /, kind="text", message=Unset, default=Unset, choices=()):
        if not isinstance(name, str) or not name.strip():
            raise TypeError(f"{type(self).__typename__} name must be a non-empty string")
        if not (kind is None or kind in KINDS or callable(kind)):
            raise ValueError(f"{type(self).__typename__} kind must be one of {', '.join(map(repr, KINDS))}, None or a callable")
        if not isinstance(message := coalesce(message, name), str):
            raise TypeError(f"{type(self).__typename__} message must be a string")

        self._name = name.strip()
        self._kind = kind
        self._message = message
        self._default = default
        self._choices = tuple(map(Choice.of, choices))

        if kind == "select" and not self._choices:
            raise ValueError(f"{type(self).__typename__} {self._name!r} needs at least one choice")

    def resolve(self, answers, /):
        """
        the concrete kind for this run (None means skip).
        """
        kind = self._kind(dict(answers)) if callable(self._kind) else self._kind
        if not (kind is None or kind in KINDS):
            raise ValueError(f"{type(self).__typename__} {self._name!r} resolved to an unknown kind {kind!r}")
        if kind == "select" and not self._choices:
            raise ValueError(f"{type(self).__typename__} {self._name!r} needs at least one choice")
        return kind

    @classmethod
    def of(cls, source, /):
        """
        accept a Question or a mapping with name, kind (or type), message, default, choices.
        """
        if isinstance(source, Question):
            return source
        if isinstance(source, Mapping):
            try:
                name = source["name"]
            except KeyError:
                raise TypeError("question mapping must have a 'name' key") from None
            return cls(
                name,
                kind=source.get("kind", source.get("type", "text")),
                message=source.get("message", Unset),
                default=source.get("default", Unset),
                choices=source.get("choices", ()),
            )
        raise TypeError(f"cannot use {source!r} as a question")


class Prompt:
    """
    A prompt session over a list of questions.

    Parameters
    - questions: iterable of Question (or question mappings).
    - keyboard: key reader, defaults to sprig.keys.keyboard() for stdin.
    - console: rich Console used for drawing.
    - colorful: bool, style the output.
    - on_error: callable(question) run when a question goes unanswered.
    """

    def __init__(self, questions, /, *, keyboard=Unset, console=Unset, colorful=True, on_error=Unset):
        self._questions = tuple(map(Question.of, questions))
        names = [question.name for question in self._questions]
        if len(set(names)) != len(names):
            raise ValueError("prompt question names must be unique")
        if on_error is not Unset and not callable(on_error):
            raise TypeError("prompt 'on_error' must be callable")

        self._keyboard = keyboard
        self._console = coalesce(console, Console(highlight=False))
        self._colorful = bool(colorful)
        self._fallback = on_error

        self._answers = {}
        self._cursor = 0
        self._buffer = ""
        self._selection = 0
        self._lines = 0

    @property
    def questions(self):
        return self._questions

    @property
    def cursor(self):
        return self._cursor

    def fallback(self, fallback, /):
        """
        install the unanswered-question hook once; usable as a decorator.
        """
        if not callable(fallback):
            raise TypeError("prompt fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError("prompt fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def on_error(self, question, /):
        logger.debug("question %r was not answered, discarding answers", question.name)
        if self._fallback is not Unset:
            self._fallback(question)

    def ask(self):
        """
        run every question; returns name -> answer, or {} when aborted.
        """
        self._answers = {}
        self._cursor = 0
        keys = self._keyboard if self._keyboard is not Unset else _keyboard()

        for question in self._questions:
            kind = question.resolve(self._answers)
            if kind is None:
                self._cursor += 1
                continue

            self._buffer = ""
            self._selection = self._initial(question) if kind == "select" else 0
            self._lines = 0
            self._draw(question, kind)

            answer = self._read(keys, question, kind)
            if answer is Unset:
                self._answers = {}
                self.on_error(question)
                return {}

            self._answers[question.name] = answer
            self._draw(question, kind, answer=answer)
            self._cursor += 1

        return dict(self._answers)

    def _initial(self, question):
        for index, choice in enumerate(question.choices):
            if question.default is not Unset and choice.value == question.default:
                return index
        return 0

    def _read(self, keys, question, kind):
        with keys:
            while (key := keys.read()) is not None:
                if key is Key.ENTER:
                    return self._commit(question, kind)

                if key in (Key.UP, Key.DOWN):
                    if kind == "select":
                        step = -1 if key is Key.UP else 1
                        self._selection = (self._selection + step) % len(question.choices)
                        self._draw(question, kind)
                    continue

                if key is Key.BACKSPACE:
                    if kind == "text" and self._buffer:
                        self._buffer = self._buffer[:-1]
                        self._draw(question, kind)
                    continue

                if isinstance(key, Key):
                    continue

                if kind == "confirm":
                    if key.lower() in ("y", "n"):
                        return key.lower() == "y"
                elif kind == "text":
                    self._buffer += key
                    self._draw(question, kind)
        return Unset

    def _commit(self, question, kind):
        match kind:
            case "text":
                if self._buffer:
                    return self._buffer
                default = coalesce(question.default, "")
                return "" if default is None else default
            case "select":
                return question.choices[self._selection].value
            case "confirm":
                return bool(coalesce(question.default, False))

    def _draw(self, question, kind, *, answer=Unset):
        styles = defaultdict(str, {
            "pending-mark": "bold cyan",
            "answered-mark": "bold green",
            "message": "bold",
            "separator": "dim",
            "input": "",
            "placeholder": "dim",
            "hint": "dim",
            "choice": "",
            "active-choice": "bold underline cyan",
            "answer": "cyan",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        if answer is not Unset:
            match kind:
                case "select":
                    shown = question.choices[self._selection].title
                case "confirm":
                    shown = "yes" if answer else "no"
                case _:
                    shown = str(answer)
            lines = [Text.assemble(
                ("✔ ", styler("answered-mark")),
                (f"{question.message}:", styler("message")),
                (" … ", styler("separator")),
                (shown, styler("answer")),
            )]
        else:
            head = Text.assemble(
                ("? ", styler("pending-mark")),
                (f"{question.message}:", styler("message")),
            )
            match kind:
                case "text":
                    head.append(" › ", styler("separator"))
                    if self._buffer:
                        head.append(self._buffer, styler("input"))
                    elif question.default not in (Unset, None, ""):
                        head.append(str(question.default), styler("placeholder"))
                    lines = [head]
                case "confirm":
                    hint = "(Y/n)" if coalesce(question.default, False) else "(y/N)"
                    head.append(f" {hint}", styler("hint")).append(" › ", styler("separator"))
                    lines = [head]
                case "select":
                    head.append(" › ", styler("separator")).append("- Use arrow-keys. Return to submit.", styler("hint"))
                    lines = [head]
                    for index, choice in enumerate(question.choices):
                        if index == self._selection:
                            lines.append(Text.assemble(("❯ ", styler("active-choice")), (choice.title, styler("active-choice"))))
                        else:
                            lines.append(Text.assemble("  ", (choice.title, styler("choice"))))

        if self._lines:
            self._console.control(*(
                Control((ControlType.CURSOR_UP, 1), (ControlType.ERASE_IN_LINE, 2))
                for _ in range(self._lines)
            ))
        for line in lines:
            self._console.print(line, soft_wrap=True)
        self._lines = len(lines)


def prompt(questions, /, **options):
    """
    Prompt(questions, **options).ask()
    """
    return Prompt(questions, **options).ask()


__all__ = (
    "Choice",
    "Question",
    "Prompt",
    "prompt",
    "KINDS",
)
