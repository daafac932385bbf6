from __future__ import annotations

import argparse
import sys

from lastseen.core.config import ConfigManager
from lastseen.core.config.paths import ConfigFsPaths
from lastseen.core.storage.store import TimestampStore
from lastseen.core.time_format import format_date, now_millis, relative_date


def main() -> int:
    ap = argparse.ArgumentParser(description="List stored last seen time stamps, most recent first.")
    ap.add_argument("--root", default=".")
    ap.add_argument("--limit", type=int, default=0, help="Show at most this many players (0 = all).")
    args = ap.parse_args()

    fs = ConfigFsPaths(args.root)
    cfg = ConfigManager(fs=fs, read_only=True).load()
    store = TimestampStore.from_file(fs.data_path(cfg.data_file))
    if store.discarded_corrupt:
        print("Last seen file could not be read.", file=sys.stderr)
        return 1

    rows = sorted(store.snapshot().items(), key=lambda kv: kv[1], reverse=True)
    if args.limit > 0:
        rows = rows[: args.limit]
    now = now_millis()
    for name, millis in rows:
        print(f"{name} | {format_date(millis, cfg.date_format)} | {relative_date(millis, now)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
