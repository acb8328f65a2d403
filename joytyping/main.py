from __future__ import annotations

import argparse
from pathlib import Path

from joytyping.runtime.run_loop import run


def main() -> int:
    ap = argparse.ArgumentParser(prog="joytyping", description="Controller and speech driven typing.")
    ap.add_argument("--config", type=Path, default=None, help="config file (default: ~/.config/joytyping/config.json)")
    ap.add_argument("--log-level", default=None, choices=["debug", "info", "warning", "error"])
    args = ap.parse_args()
    return run(args.config, args.log_level)


if __name__ == "__main__":
    raise SystemExit(main())
