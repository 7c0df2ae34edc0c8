from __future__ import annotations

import html
import io
import re
from collections import Counter
from contextlib import ExitStack, contextmanager, redirect_stderr, redirect_stdout
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Literal

import ipywidgets as w


Level = Literal["section", "info", "warning", "error"]

_STYLE: Dict[str, str] = {
    "section": "color:#0b4f6c; font-weight:bold; margin-top:4px;",
    "info": "color:#222222;",
    "warning": "color:#b26a00;",
    "error": "color:#b00020; font-weight:bold;",
}

_ERROR_PREFIXES = ("ERROR:", "Error:", "Traceback", "[error]")
_WARNING_PREFIXES = ("WARNING:", "Warning:", "CHECK:", "[warn]")
_TAG = re.compile(r"<[^>]+>")


@dataclass
class _Entry:
    level: Level
    message: str
    count: int = 1


class HtmlLog:
    """
    Run log for the study panel, rendered into a single HTML widget.

    Features:
      - stage headings (``section``) between pipeline steps
      - warnings in orange, errors in red
      - repeated consecutive messages folded into one line (xN)
      - history capped at ``max_entries`` (oldest dropped)
      - ``capture()`` routes printed lines into the log
    """

    def __init__(self, *, title: str | None = None, height_px: int = 240, max_entries: int = 2000) -> None:
        self._entries: List[_Entry] = []
        self._height_px = int(height_px)
        self._max_entries = max(1, int(max_entries))
        self.widget = w.HTML()
        header = [w.HTML(f"<b>{html.escape(str(title))}</b>")] if title else []
        self.panel = w.VBox(header + [self.widget]) if header else self.widget
        self.clear()

    @property
    def entries(self) -> List[_Entry]:
        return list(self._entries)

    def counts(self) -> Dict[str, int]:
        """Messages per level, folded repeats included."""
        c: Counter = Counter()
        for e in self._entries:
            c[e.level] += e.count
        return dict(c)

    @property
    def has_errors(self) -> bool:
        return any(e.level == "error" for e in self._entries)

    def clear(self) -> None:
        self._entries = []
        self._render()

    def section(self, title: str) -> None:
        self._append("section", title)

    def info(self, message: str) -> None:
        self._append("info", message)

    def warning(self, message: str) -> None:
        self._append("warning", message)

    def error(self, message: str) -> None:
        self._append("error", message)

    def extend_warnings(self, messages: Iterable[str]) -> None:
        """Route a frame/result ``warnings`` tuple into the log, one entry per message."""
        for m in messages:
            self.warning(str(m))

    def write(self, text: str) -> None:
        """Append each line of ``text`` (tags stripped) at the level :meth:`classify` gives it."""
        for line in _TAG.sub("", str(text or "")).splitlines():
            self._append(self.classify(line), line)

    @contextmanager
    def capture(self) -> Iterator["HtmlLog"]:
        """
        Capture stdout/stderr for the duration of the block:

            with log.capture():
                print("[warn] something")

        Captured lines are classified and appended when the block exits, also
        when it raises.
        """
        buf = io.StringIO()
        try:
            with ExitStack() as stack:
                stack.enter_context(redirect_stdout(buf))
                stack.enter_context(redirect_stderr(buf))
                yield self
        finally:
            self.write(buf.getvalue())

    @staticmethod
    def classify(line: str) -> Level:
        s = (line or "").lstrip()
        if s.startswith(_ERROR_PREFIXES):
            return "error"
        if s.startswith(_WARNING_PREFIXES):
            return "warning"
        if s.startswith("==="):
            return "section"
        return "info"

    # internals

    def _append(self, level: Level, message: str) -> None:
        msg = str(message)
        last = self._entries[-1] if self._entries else None
        if last is not None and (last.level, last.message) == (level, msg):
            last.count += 1
        else:
            self._entries.append(_Entry(level=level, message=msg))
            del self._entries[: -self._max_entries]
        self._render()

    def _render(self) -> None:
        if not self._entries:
            body = "<div style='color:#666;'>Log is empty.</div>"
        else:
            body = "".join(
                "<div style='{style} white-space:pre-wrap; font-family:ui-monospace, Menlo, Consolas, monospace;'>"
                "{text}{rep}</div>".format(
                    style=_STYLE[e.level],
                    text=html.escape(e.message),
                    rep=f" (x{e.count})" if e.count > 1 else "",
                )
                for e in self._entries
            )
        self.widget.value = (
            f"<div style='border:1px solid #ddd; padding:8px; height:{self._height_px}px; "
            f"overflow-y:auto; background:#fff;'>{body}</div>"
        )
