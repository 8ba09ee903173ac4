"""Terminal output for the ``fetchwrap`` CLI.

Response bodies go to stdout (or to the ``--output`` file) and nothing else
does: the status line, warnings, errors and debug messages all go to
stderr, so ``fetchwrap request ... | jq`` always sees a clean body.

Bodies are rendered in one of three formats. ``json`` pretty-prints JSON
values (and JSON text), ``plain`` prints one tab-separated line per entry,
and ``rich`` syntax-highlights JSON bodies. ``auto`` picks ``rich`` for an
interactive terminal with colour enabled and ``plain`` otherwise. Colour is
off when ``--no-color`` is passed, ``NO_COLOR`` is set, or ``TERM=dumb``.

The CLI builds one :class:`OutputManager` in
:func:`~fetchwrap.app.main_callback` and installs it with
:func:`set_output`; the module-level helpers delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Iterator, Optional

from rich.console import Console, RenderableType
from rich.syntax import Syntax
from rich.text import Text


class OutputFormat(str, Enum):
    """Body rendering formats accepted by ``output.format``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _color_disabled_by_env() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _reindent(text: str) -> Optional[str]:
    """Return *text* re-indented if it is a JSON document, else ``None``."""
    try:
        return _dump(json.loads(text))
    except ValueError:
        return None


def _plain_lines(data: Any) -> Iterator[str]:
    if isinstance(data, dict):
        for key, value in data.items():
            yield f"{key}\t{value}"
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                yield "\t".join(str(v) for v in item.values())
            else:
                yield str(item)
    else:
        yield str(data)


def _highlighted(data: Any, content_type: str) -> RenderableType:
    if isinstance(data, (dict, list)):
        source: Optional[str] = _dump(data)
    elif isinstance(data, str) and "json" in content_type:
        source = _reindent(data)
    else:
        source = None
    if source is None:
        return Text(str(data))
    return Syntax(source, "json", theme="monokai", word_wrap=True)


class OutputManager:
    """Writes response bodies and diagnostics for one CLI invocation.

    Args:
        format: Body format; ``AUTO`` is resolved once, here.
        no_color: Disable colour and markup on both streams.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
        output_file: Write bodies to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """Console bound to stderr; the log handler writes through it."""
        return self._stderr

    # --- bodies (stdout or output file) ---

    def print_body(self, data: Any, content_type: str = "application/json") -> None:
        """Render a decoded response body.

        ``bytes`` are written verbatim. *content_type* decides whether a
        string body is highlighted as JSON in the ``rich`` format.
        """
        if isinstance(data, bytes):
            self.write_bytes(data)
        elif self._output_file:
            text = data if isinstance(data, str) else _dump(data)
            if not text.endswith("\n"):
                text += "\n"
            self._save(text.encode("utf-8"))
        elif self._format == OutputFormat.JSON:
            text = _reindent(data) if isinstance(data, str) else _dump(data)
            self._emit(data if text is None else text)
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self._emit(line)
        else:
            self._stdout.print(_highlighted(data, content_type))

    def write_bytes(self, data: bytes) -> None:
        """Write *data* unchanged to the output file or stdout."""
        if self._output_file:
            self._save(data)
            return
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is None:
            sys.stdout.write(data.decode("utf-8", errors="replace"))
            sys.stdout.flush()
        else:
            buffer.write(data)
            buffer.flush()

    def _emit(self, line: str) -> None:
        print(line, file=sys.stdout, flush=True)

    def _save(self, payload: bytes) -> None:
        assert self._output_file is not None
        with open(self._output_file, "wb") as fh:
            fh.write(payload)

    # --- diagnostics (stderr) ---

    def _note(self, plain: str, styled: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._note(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._note(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._note(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._note(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._note(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")


# --- process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def print_body(data: Any, content_type: str = "application/json") -> None:
    get_output().print_body(data, content_type)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
