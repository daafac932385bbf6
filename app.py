from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from lastseen.core.config import ConfigFsPaths, ConfigManager
from lastseen.core.console import handle_line
from lastseen.core.errors import ConfigError
from lastseen.core.lastseen_app import LastSeenApp
from lastseen.core.logger import setup_logging
from lastseen.core.runtime import LastSeenRuntime


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Last seen: track when players were last online")
    ap.add_argument("--root", default=".", help="Directory holding config/, data/ and logs/.")
    ap.add_argument("--debug", action="store_true", help="Log load and save timings.")
    args = ap.parse_args(argv)

    fs = ConfigFsPaths(args.root)
    try:
        cfg = ConfigManager(fs=fs).load()
    except ConfigError as e:
        print(f"Config error: {e.user_message}", file=sys.stderr)
        for line in e.context.get("errors") or []:
            print(f"  {line}", file=sys.stderr)
        return 2
    if args.debug:
        cfg = cfg.model_copy(update={"debug": True})

    logger = setup_logging(fs.log_dir(cfg.log_dir), debug=cfg.debug)
    app = LastSeenApp(cfg=cfg, fs=fs, logger=logger)
    runtime = LastSeenRuntime(app, autosave_interval_seconds=cfg.autosave_interval_seconds, logger=logger)
    runtime.start().result()

    logger.info("Last seen ready. Type 'help' for commands, 'exit' to quit.")
    try:
        while True:
            try:
                text = input("> ")
            except EOFError:
                print()
                break
            try:
                replies = handle_line(runtime, text)
            except Exception as e:  # noqa: BLE001
                logger.error(f"Console command failed: {e}")
                print(f"Error: {e}", file=sys.stderr)
                continue
            if replies is None:
                break
            for r in replies:
                print(r.text, file=sys.stderr if r.is_error else sys.stdout)
    except KeyboardInterrupt:
        print()
    finally:
        runtime.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
