"""
Message rendering: plain and decorated forms of one source message.

Plain strings are decorated as given and stripped of ANSI SGR sequences for
the plain form. Objects implementing ``Renderable`` render themselves twice,
once with colours and once without; ``render`` must not mutate the object.
"""

from __future__ import annotations

import re
from typing import Any, Final, Protocol, runtime_checkable

PLACEHOLDER_MESSAGE: Final[str] = "No message"

_ANSI_SGR = re.compile(r"\x1b\[(?:\d+;)*\d*m")

STYLES: Final[dict[str, int]] = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underline": 4,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "grey": 90,
}


@runtime_checkable
class Renderable(Protocol):
    """A message that knows how to render itself with or without colours."""

    def render(self, *, colors: bool) -> str:  # noqa: D401
        ...


def strip_ansi(text: str) -> str:
    """Remove ANSI colour/style escape sequences."""
    return _ANSI_SGR.sub("", text)


def stylize(text: str, *styles: str) -> str:
    """Wrap ``text`` in the SGR codes for ``styles`` plus a reset."""
    codes = [str(STYLES[s]) for s in styles if s in STYLES]
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def render_message(message: Any) -> tuple[str, str]:
    """Return ``(plain, decorated)`` renderings of a message.

    Objects whose ``render`` does not accept ``colors`` are treated as
    plain values and converted with ``str()``.
    """
    if message is None or message == "":
        message = PLACEHOLDER_MESSAGE
    if isinstance(message, Renderable):
        try:
            decorated = message.render(colors=True)
            plain = message.render(colors=False)
        except TypeError:
            pass
        else:
            return strip_ansi(str(plain)), str(decorated)
    text = message if isinstance(message, str) else str(message)
    return strip_ansi(text), text


class Styled:
    """Chainable builder for coloured messages.

    Example:
        >>> msg = Styled().red("failed").txt(" after ").bold("3 tries")
        >>> msg.render(colors=False)
        'failed after 3 tries'
    """

    def __init__(self, text: str = "") -> None:
        self._segments: tuple[tuple[str, tuple[str, ...]], ...] = ()
        if text:
            self._segments = ((text, ()),)

    def txt(self, text: str) -> Styled:
        return self.add(text)

    def add(self, text: str, *styles: str) -> Styled:
        unknown = [s for s in styles if s not in STYLES]
        if unknown:
            raise ValueError(f"Unknown style(s): {', '.join(unknown)}")
        self._segments = self._segments + ((str(text), tuple(styles)),)
        return self

    def __getattr__(self, name: str) -> Any:
        if name in STYLES:
            return lambda text: self.add(text, name)
        raise AttributeError(name)

    def render(self, *, colors: bool) -> str:
        if not colors:
            return "".join(text for text, _ in self._segments)
        return "".join(stylize(text, *styles) for text, styles in self._segments)

    def __str__(self) -> str:
        return self.render(colors=False)

    def __repr__(self) -> str:
        return f"Styled({self.render(colors=False)!r})"
