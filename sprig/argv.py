"""
Argv interpreter: raw tokens (after the command name) to positionals and options.

One left-to-right scan, no backtracking:

1. "--name=value"   → options["name"] = "value" ("a,b" becomes ["a", "b"])
   "--name v1 v2"   → every following token not starting with "-" is consumed;
                      one value stays a string, several become a list
   "--name"         → options["name"] = True
2. "-n value"       → a single letter followed by a non-dash token consumes it
   "-abc"           → a, b and c are each True
3. anything else    → appended to args

Extras
- flags: names (long or short) known to be boolean; they never consume the
  following token, so "build --fast app" keeps "app" positional.
- "--" ends option scanning; everything after it is positional.
- "-" alone is positional.
- a repeated option keeps its last value.
"""
from collections import namedtuple

Interpretation = namedtuple("Interpretation", ("args", "options"))


def _values(value):
    return value.split(",") if "," in value else value


def interpret(tokens, /, flags=()):
    """
    interpret a token sequence; returns Interpretation(args: list, options: dict).
    """
    if isinstance(tokens, str):
        raise TypeError("interpret() argument must be a sequence of strings, not a string")
    tokens = list(tokens)
    flags = frozenset(flags)

    args = []
    options = {}
    index = 0
    length = len(tokens)

    def consume(start):
        # following tokens that do not look like options
        stop = start
        while stop < length and not tokens[stop].startswith("-"):
            stop += 1
        return tokens[start:stop], stop

    while index < length:
        token = tokens[index]
        index += 1

        if token == "--":
            args.extend(tokens[index:])
            break

        if token.startswith("--"):
            name = token[2:]
            if "=" in name:
                name, _, value = name.partition("=")
                options[name] = _values(value)
            elif name in flags:
                options[name] = True
            else:
                values, index = consume(index)
                match len(values):
                    case 0:
                        options[name] = True
                    case 1:
                        options[name] = values[0]
                    case _:
                        options[name] = values
            continue

        if token.startswith("-") and len(token) > 1:
            letters = token[1:]
            if (
                len(letters) == 1 and
                letters not in flags and
                index < length and
                not tokens[index].startswith("-")
            ):
                options[letters] = tokens[index]
                index += 1
            else:
                for letter in letters:
                    options[letter] = True
            continue

        args.append(token)

    return Interpretation(args, options)


__all__ = (
    "Interpretation",
    "interpret",
)
