from __future__ import annotations

import argparse
import asyncio
import json
import os
from typing import Sequence

from apps.cli.wiring.modules.timetrust import TimetrustCliWiring


class SyncClockCli:
    """
    `timetrust sync` — one clock sync over configured sources.

    Exit code is 0 when a source answered and 1 on the Unknown outcome.
    """

    def run(self, argv: Sequence[str]) -> int:
        parser = _build_parser()
        ns = parser.parse_args(list(argv))

        module = TimetrustCliWiring(environ=os.environ, config_path=ns.config).clock_sync_module()
        report = asyncio.run(module.sync_clock.sync_with_report())
        failures = [failure.summary() for failure in report.failures]

        if report.authoritative_time is None or report.source is None:
            if ns.report_format == "json":
                print(json.dumps({"synced": False, "failures": failures}, ensure_ascii=False))
            else:
                print("clock sync: unknown (no source answered)")
                for failure in failures:
                    print(f"- {failure}")
            return 1

        offset_s = report.offset.seconds if report.offset is not None else None
        round_trip_s = report.round_trip.total_seconds() if report.round_trip is not None else None
        if ns.report_format == "json":
            print(
                json.dumps(
                    {
                        "synced": True,
                        "authoritative_time": report.authoritative_time.isoformat(),
                        "source": str(report.source),
                        "offset_s": offset_s,
                        "round_trip_s": round_trip_s,
                        "failures": failures,
                    },
                    ensure_ascii=False,
                )
            )
        else:
            print(
                "clock sync report:\n"
                f"- authoritative time: {report.authoritative_time.isoformat()}\n"
                f"- source: {report.source}\n"
                f"- offset_s: {offset_s}\n"
                f"- round_trip_s: {round_trip_s}\n"
                f"- failed sources: {len(failures)}"
            )
        return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="timetrust sync")
    p.add_argument("--config", default=None, help="Path to timetrust.yaml")
    p.add_argument(
        "--report-format",
        choices=("text", "json"),
        default="text",
        help="Output format",
    )
    return p
