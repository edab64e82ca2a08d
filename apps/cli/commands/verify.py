from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path
from typing import Sequence

from apps.cli.commands.digest import DigestInputParser, add_digest_arguments
from apps.cli.wiring.modules.timetrust import TimetrustCliWiring
from timetrust.contexts.timestamping.adapters.outbound import (
    TimeSigDecodeError,
    decode_time_sig,
    load_public_key_b64,
)


class VerifyCli:
    """
    `timetrust verify` — check a TimeSig token against a payload and authority public key.

    Exit codes: 0 valid, 1 invalid, 2 unusable token.
    """

    def run(self, argv: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(prog="timetrust verify")
        add_digest_arguments(parser)
        parser.add_argument("--token", required=True, help="TimeSig token from `sign`")
        key_group = parser.add_mutually_exclusive_group(required=True)
        key_group.add_argument("--public-key-b64", default=None, help="Raw public key (base64)")
        key_group.add_argument(
            "--public-key-file",
            default=None,
            help="Public key file (PEM or DER SubjectPublicKeyInfo)",
        )
        parser.add_argument("--config", default=None, help="Path to timetrust.yaml")
        parser.add_argument(
            "--sync",
            action="store_true",
            help="Sync clock first so the plausibility window uses corrected now",
        )
        ns = parser.parse_args(list(argv))

        digest = DigestInputParser().parse(
            path=ns.path,
            digest_hex=ns.digest_hex,
            algorithm=ns.algorithm,
        )
        if ns.public_key_b64 is not None:
            public_key = load_public_key_b64(ns.public_key_b64)
        else:
            public_key = Path(ns.public_key_file).read_bytes()
        try:
            time_sig = decode_time_sig(ns.token)
        except TimeSigDecodeError as error:
            print(f"invalid token: {error.code}: {error.message}")
            return 2

        wiring = TimetrustCliWiring(environ=os.environ, config_path=ns.config)
        module = wiring.clock_sync_module()
        if ns.sync:
            asyncio.run(module.sync_clock.sync())
        verifier = wiring.verifier(clock=module.reader)

        if verifier.verify(digest, time_sig, public_key):
            print(f"valid: time={time_sig.time.isoformat()} key_id={time_sig.signer_key_id}")
            return 0
        print("invalid")
        return 1
