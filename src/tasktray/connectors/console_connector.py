# src/tasktray/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import CommandEmitter, format_view
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..preferences import Theme
from ..view.events import ViewEvent, ViewEventKind

logger = logging.getLogger(__name__)

_RESET = "\033[0m"
_PALETTE = {
    Theme.LIGHT: "\033[38;5;24m",
    Theme.DARK: "\033[38;5;153m",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsolePainter:
    """Prints panels when they open, tinted by the current theme."""

    def __init__(self, state: AppState, *, color: bool) -> None:
        self._state = state
        self._color = color and sys.stdout.isatty()

    def paint(self, text: str) -> str:
        if not self._color:
            return text
        return _PALETTE[self._state.view_sync.theme()] + text + _RESET

    def on_event(self, event: ViewEvent) -> None:
        vs = self._state.view_sync
        if event.kind == ViewEventKind.PANEL_OPENED and event.task_list is not None:
            print(self.paint(format_view(vs.view(event.task_list))))
        elif event.kind == ViewEventKind.EDITOR_OPENED:
            print(self.paint(f"[EDIT] {event.text}"))
        elif event.kind == ViewEventKind.THEME_CHANGED:
            print(self.paint(f"[THEME] {event.text}"))


def handle_line(state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
    """
    Route one typed line.

    "/cmd ..." runs a command; anything else becomes a new task, text untouched.
    A leading "//" escapes the slash, so "//etc/hosts" adds the task "/etc/hosts".
    """
    if line.startswith("//"):
        return command_registry.handle(state, "/new " + line[1:], emit=emit)
    if line.startswith("/"):
        return command_registry.handle(state, line, emit=emit)
    return command_registry.handle(state, "/new " + line, emit=emit)


def run_console_loop(state: AppState) -> None:
    settings = state.settings
    painter = ConsolePainter(state, color=bool(getattr(settings, "console_color", True)))
    unsubscribe = state.view_sync.events.subscribe(painter.on_event)

    logger.info("Console connector started (theme=%s).", state.view_sync.theme().value)
    _print_ts("[CONSOLE] Type a task to add it (start with // for a leading slash). Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    state.view_sync.open_panel(state.view_sync.current_panel)

    try:
        while True:
            panel = state.view_sync.current_panel.display_name
            try:
                user_input = input(f"{panel}> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                response = handle_line(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                print(painter.paint(f"[{_ts_local()}] {response}"))
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
