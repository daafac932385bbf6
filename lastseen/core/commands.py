from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from lastseen.core.errors import CommandUsageError
from lastseen.core.players import PlayerDirectory, PlayerInfo
from lastseen.core.time_format import DEFAULT_DATE_FORMAT, format_date, relative_date

COMMANDS = ("date", "seen", "firstseen")


@dataclass(frozen=True)
class Reply:
    text: str
    is_error: bool = False


def parse_command(line: str) -> Optional[Tuple[str, List[str]]]:
    """
    Split '/seen Alice' into ('seen', ['Alice']). Returns None for lines that
    are not commands.
    """
    parts = str(line or "").strip().split()
    if not parts or not parts[0].startswith("/") or len(parts[0]) < 2:
        return None
    return parts[0][1:].lower(), parts[1:]


class CommandHandler:
    def __init__(
        self,
        *,
        storage,
        directory: PlayerDirectory,
        clock: Optional[Callable[[], int]] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        self.storage = storage
        self.directory = directory
        self.clock = clock or (lambda: int(time.time() * 1000))
        self.date_format = date_format

    def handle(self, command: str, args: Sequence[str]) -> List[Reply]:
        name = str(command or "").lower().lstrip("/")
        try:
            if name == "date":
                return self._date(args)
            if name not in COMMANDS:
                raise CommandUsageError(f"Unknown command: /{name}")
            if len(args) != 1:
                raise CommandUsageError(f"Usage: /{name} <player-name>")
            player_name = args[0]
            player = self.directory.online_player(player_name) or self.directory.lookup(player_name)
            if player is None:
                return [Reply(f"{player_name} has never been seen before.")]
            if name == "seen":
                return self._seen(player_name, player)
            return self._firstseen(player)
        except CommandUsageError as e:
            return [Reply(e.user_message, is_error=True)]

    def handle_line(self, line: str) -> List[Reply]:
        parsed = parse_command(line)
        if parsed is None:
            return [Reply("Commands start with '/'.", is_error=True)]
        return self.handle(*parsed)

    # ---- commands ----
    def _date(self, args: Sequence[str]) -> List[Reply]:
        if len(args) != 0:
            raise CommandUsageError("Invalid extra arguments. Usage: /date")
        return [Reply(f"It is now {format_date(self.clock(), self.date_format)}.")]

    def _seen(self, player_name: str, player: PlayerInfo) -> List[Reply]:
        if self.directory.is_online(player_name):
            return [Reply(f"{player.name} is online now!")]
        last_seen = self.storage.get(player_name)
        if last_seen == 0:
            return [Reply("Either that player doesn't exist or they haven't been online in a while.")]
        return [Reply(f"{player.name} was last seen on {self._describe(last_seen)}")]

    def _firstseen(self, player: PlayerInfo) -> List[Reply]:
        return [Reply(f"{player.name} first played on {self._describe(player.first_played)}")]

    def _describe(self, millis: int) -> str:
        return f"{format_date(millis, self.date_format)}\n({relative_date(millis, self.clock())})"
