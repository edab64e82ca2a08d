from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from typing import Sequence

from timetrust.contexts.timestamping.adapters.outbound import generate_ed25519_key_pair


class KeygenCli:
    """
    `timetrust keygen` — new authority Ed25519 key pair as base64 raw keys.
    """

    def run(self, argv: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(prog="timetrust keygen")
        parser.add_argument(
            "--report-format",
            choices=("text", "json"),
            default="text",
            help="Output format",
        )
        ns = parser.parse_args(list(argv))

        pair = generate_ed25519_key_pair()
        if ns.report_format == "json":
            print(json.dumps(asdict(pair), ensure_ascii=False))
        else:
            print(
                f"TIMETRUST_AUTHORITY_SIGNING_KEY_B64={pair.private_key_b64}\n"
                f"public_key_b64={pair.public_key_b64}\n"
                f"key_id={pair.key_id}"
            )
        return 0
