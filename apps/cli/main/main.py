from __future__ import annotations

import logging
import sys

from apps.cli.commands.digest import DigestCli
from apps.cli.commands.keygen import KeygenCli
from apps.cli.commands.now import NowCli
from apps.cli.commands.sign import SignCli
from apps.cli.commands.sync_clock import SyncClockCli
from apps.cli.commands.verify import VerifyCli

_USAGE = (
    "Usage:\n"
    "  sync [args...]     sync clock offset from configured time sources\n"
    "  now [args...]      print corrected UTC now\n"
    "  digest [args...]   hash a payload\n"
    "  sign [args...]     timestamp a payload at the authority\n"
    "  verify [args...]   verify a TimeSig token\n"
    "  keygen [args...]   generate an authority key pair\n"
)

_COMMANDS = {
    "sync": SyncClockCli,
    "now": NowCli,
    "digest": DigestCli,
    "sign": SignCli,
    "verify": VerifyCli,
    "keygen": KeygenCli,
}


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = argv if argv is not None else sys.argv[1:]

    if not args or args[0] not in _COMMANDS:
        print(_USAGE)
        return 2

    command = _COMMANDS[args[0]]()
    try:
        return command.run(args[1:])
    except (ValueError, FileNotFoundError) as error:
        logging.getLogger(__name__).error("%s failed: %s", args[0], error)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
