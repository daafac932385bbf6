from __future__ import annotations

import argparse
import json

from lastseen.core.config import ConfigManager
from lastseen.core.config.paths import ConfigFsPaths


def main() -> None:
    ap = argparse.ArgumentParser(description="Print the effective last seen config.")
    ap.add_argument("--root", default=".")
    args = ap.parse_args()
    cm = ConfigManager(fs=ConfigFsPaths(args.root), read_only=True)
    cfg = cm.get()
    print(json.dumps(cfg.model_dump(), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
