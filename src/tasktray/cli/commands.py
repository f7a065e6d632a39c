# src/tasktray/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..preferences import Theme
from ..tasks.task_models import TaskList, Transition
from ..view.list_view import ListView

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        # Handlers that take the rest of the line verbatim as a single argument.
        self._raw: set[CommandHandler] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        raw: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if raw:
            self._raw.add(handler)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if handler in self._raw:
            args = [rest] if rest else []
        else:
            args = rest.split()

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_view(view: ListView) -> str:
    header = f"{view.task_list.display_name}:"
    if view.placeholder is not None:
        return f"{header}\n  {view.placeholder}"
    lines = [header]
    for i, entry in enumerate(view.entries, start=1):
        lines.append(f"  {i}. [{entry.task_id}] {entry.text}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    vs = state.view_sync
    return (
        "Status:\n"
        f"  Store: {getattr(state.settings, 'store_path', '?')}\n"
        f"  Theme: {vs.theme().value}\n"
        f"  Panel: {vs.current_panel.display_name}\n"
        f"  Todos: {len(vs.list_active())}  "
        f"Completed: {len(vs.list_completed())}  "
        f"Trash: {len(vs.list_trash())}"
    )


def cmd_new(state: AppState, args: list[str]) -> str:
    # Registered raw: args is empty or holds the untouched rest of the line.
    task = state.view_sync.create_task(args[0] if args else "")
    if task is None:
        return "Nothing to add (task text is empty)."
    return f"Added [{task.id}] {task.text}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> current panel
    /list <name>     -> any list (todos | completed | trash)
    """
    vs = state.view_sync
    task_list = TaskList.parse(args[0]) if args else vs.current_panel
    if task_list is None:
        return "Usage: /list [todos|completed|trash]"
    vs.reconcile(task_list)
    return format_view(vs.view(task_list))


def cmd_open(state: AppState, args: list[str]) -> str:
    task_list = TaskList.parse(args[0]) if args else None
    if task_list is None:
        return "Usage: /open todos|completed|trash"
    state.view_sync.open_panel(task_list)
    return f"Opened {task_list.display_name}."


def cmd_back(state: AppState, args: list[str]) -> str:
    state.view_sync.close_panel()
    return "Back to Todos."


def cmd_options(state: AppState, args: list[str]) -> str:
    """Show the menu for a task shown in the current panel."""
    if not args:
        return "Usage: /options <task id>"
    vs = state.view_sync
    panel = vs.current_panel
    if args[0] not in vs.view(panel).ids():
        return f"No task {args[0]} in {panel.display_name}. Use /open to switch panels."
    return f"Options for {args[0]}: " + ", ".join(vs.options_for(panel))


def _gesture(transition: Transition) -> CommandHandler2:
    def _handler(state: AppState, args: list[str]) -> str:
        if not args:
            return f"Usage: /{transition.value} <task id>"
        vs = state.view_sync
        panel = vs.current_panel
        if transition.value not in vs.options_for(panel):
            return f"'{transition.value}' is not available in {panel.display_name}."

        task = vs.apply(transition, panel, args[0])
        if task is None:
            return f"No task {args[0]} in {panel.display_name}."
        if transition is Transition.EDIT:
            return f"Editing [{task.id}] {task.text} (changes are not saved)."
        return f"{transition.value}: [{task.id}] {task.text}"

    return _handler


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme          -> show current theme
    /theme <name>   -> switch (light | dark)
    """
    vs = state.view_sync
    if not args:
        return f"Theme is {vs.theme().value}. Options: " + ", ".join(t.value for t in Theme)
    try:
        theme = vs.set_theme(args[0])
    except ValueError:
        return "Usage: /theme " + " | ".join(t.value for t in Theme)
    return f"Theme set to {theme.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show store, theme, panel and list sizes.")
registry.register("new", cmd_new, help_text="Add a task: /new <text> (plain lines work too).", aliases=["add"], raw=True)
registry.register("list", cmd_list, help_text="Show a list: /list [todos|completed|trash].", aliases=["ls"])
registry.register("open", cmd_open, help_text="Open a panel: /open todos|completed|trash.")
registry.register("back", cmd_back, help_text="Return to the Todos panel.")
registry.register("options", cmd_options, help_text="Show what can be done with a task in this panel.")
registry.register("edit", _gesture(Transition.EDIT), help_text="Open the editor for a todo (not saved).")
registry.register("complete", _gesture(Transition.COMPLETE), help_text="Todos -> Completed.", aliases=["done"])
registry.register("incomplete", _gesture(Transition.INCOMPLETE), help_text="Completed -> Todos.")
registry.register("trash", _gesture(Transition.TO_TRASH), help_text="Completed -> Trash.", aliases=["to-trash"])
registry.register("recover", _gesture(Transition.RECOVER), help_text="Trash -> Completed.")
registry.register("delete", _gesture(Transition.DELETE), help_text="Delete a task in Trash for good.")
registry.register("theme", cmd_theme, help_text="Show or switch theme: /theme light | /theme dark.")
