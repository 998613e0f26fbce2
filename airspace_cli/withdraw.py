"""
airspace-withdraw: recover NIL or an NFT left at the relay contract.
"""
import sys

from airspace_nil.prompts import ConsoleInputProvider
from airspace_nil.transfer import recover_from_relay

from ._common import load_config, run


def _withdraw() -> None:
    _, config = load_config()
    receipt = recover_from_relay(config, ConsoleInputProvider())
    if receipt:
        print(f"Withdrawal transaction: {receipt.tx_hash}")


def main() -> int:
    return run(_withdraw)


if __name__ == "__main__":
    sys.exit(main())
