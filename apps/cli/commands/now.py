from __future__ import annotations

import argparse
import asyncio
import os
from typing import Sequence

from apps.cli.wiring.modules.timetrust import TimetrustCliWiring


class NowCli:
    """
    `timetrust now` — print corrected UTC now.

    A fresh process has no offset yet, so one sync runs first unless `--no-sync`.
    """

    def run(self, argv: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(prog="timetrust now")
        parser.add_argument("--config", default=None, help="Path to timetrust.yaml")
        parser.add_argument(
            "--no-sync",
            action="store_true",
            help="Do not sync before reading (offset stays zero)",
        )
        parser.add_argument(
            "--round-seconds",
            type=int,
            default=None,
            help="Round corrected now to the nearest multiple of N seconds",
        )
        ns = parser.parse_args(list(argv))
        if ns.round_seconds is not None and ns.round_seconds <= 0:
            parser.error("--round-seconds must be > 0")

        module = TimetrustCliWiring(environ=os.environ, config_path=ns.config).clock_sync_module()
        if not ns.no_sync:
            asyncio.run(module.sync_clock.sync())

        if ns.round_seconds is not None:
            now = module.reader.now_rounded(seconds=ns.round_seconds)
        else:
            now = module.reader.now()
        print(now.isoformat())
        return 0
