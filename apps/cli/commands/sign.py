from __future__ import annotations

import argparse
import asyncio
import base64
import json
import os
from typing import Sequence

from apps.cli.commands.digest import DigestInputParser, add_digest_arguments
from apps.cli.wiring.modules.timetrust import TimetrustCliWiring
from timetrust.contexts.timestamping.adapters.outbound import encode_time_sig
from timetrust.contexts.timestamping.application import SigningRejectedError, TimestampingError
from timetrust.platform.errors import TimetrustError


class SignCli:
    """
    `timetrust sign` — timestamp a payload digest at the remote authority.

    Prints the portable TimeSig token; exit code 1 when signing is rejected or unavailable.
    """

    def run(self, argv: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(prog="timetrust sign")
        add_digest_arguments(parser)
        parser.add_argument("--config", default=None, help="Path to timetrust.yaml")
        parser.add_argument(
            "--authority-url",
            default=None,
            help="Authority base URL (overrides timestamping.authority.url)",
        )
        parser.add_argument("--timeout-s", type=float, default=None, help="Signing timeout")
        parser.add_argument(
            "--report-format",
            choices=("text", "json"),
            default="text",
            help="Output format",
        )
        ns = parser.parse_args(list(argv))

        digest = DigestInputParser().parse(
            path=ns.path,
            digest_hex=ns.digest_hex,
            algorithm=ns.algorithm,
        )
        signer = TimetrustCliWiring(environ=os.environ, config_path=ns.config).remote_signer(
            authority_url=ns.authority_url,
        )
        try:
            time_sig = asyncio.run(signer.sign(digest, timeout_s=ns.timeout_s))
        except TimestampingError as error:
            code = (
                "validation_error"
                if isinstance(error, SigningRejectedError)
                else "signing_unavailable"
            )
            cli_error = TimetrustError.from_context_error(error, code=code)
            print(json.dumps(cli_error.to_payload(), ensure_ascii=False))
            return 1

        token = encode_time_sig(time_sig)
        if ns.report_format == "json":
            print(
                json.dumps(
                    {
                        "digest_hex": digest.hex(),
                        "time": time_sig.time.isoformat(),
                        "signature_b64": base64.b64encode(time_sig.signature).decode("ascii"),
                        "key_id": time_sig.signer_key_id,
                        "token": token,
                    },
                    ensure_ascii=False,
                )
            )
        else:
            print(token)
        return 0
