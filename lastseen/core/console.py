"""
Console line handling for app.py.

Kept separate from the input loop so the parsing and rendering can be
tested without a terminal.
"""

from __future__ import annotations

from typing import List, Optional

from lastseen.core.commands import Reply, parse_command
from lastseen.core.runtime import LastSeenRuntime

HELP_LINES = [
    "join <name>        record a player joining",
    "quit <name>        record a player leaving",
    "list               players online now",
    "/seen <name>       when was a player last seen",
    "/firstseen <name>  when did a player first play",
    "/date              current date",
    "save               write last seen data now",
    "exit               save and stop",
]


def handle_line(runtime: LastSeenRuntime, line: str, *, timeout: Optional[float] = None) -> Optional[List[Reply]]:
    """
    Execute one console line on the runtime. Returns the replies to print,
    or None when the console should exit.
    """
    text = str(line or "").strip()
    if not text:
        return []
    parsed = parse_command(text)
    if parsed is not None:
        return runtime.command(parsed[0], parsed[1]).result(timeout=timeout)

    verb, _, rest = text.partition(" ")
    verb = verb.lower()
    name = rest.strip()
    if verb == "exit":
        return None
    if verb == "help":
        return [Reply(s) for s in HELP_LINES]
    if verb == "list":
        names = runtime.online().result(timeout=timeout)
        if not names:
            return [Reply("Nobody is online.")]
        return [Reply(f"Online ({len(names)}): {', '.join(names)}")]
    if verb == "save":
        runtime.save().result(timeout=timeout)
        return [Reply("Saved.")]
    if verb in ("join", "quit"):
        if not name or " " in name:
            return [Reply(f"Usage: {verb} <name>", is_error=True)]
        fut = runtime.player_join(name) if verb == "join" else runtime.player_quit(name)
        fut.result(timeout=timeout)
        return [Reply(f"{name} {'joined' if verb == 'join' else 'left'}.")]
    return [Reply(f"Unknown input: {verb}. Type 'help'.", is_error=True)]
