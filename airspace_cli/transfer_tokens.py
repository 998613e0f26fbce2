"""
airspace-transfer-tokens: move NIL and an NFT through the relay contract.
"""
import sys

from airspace_nil.prompts import ConsoleInputProvider
from airspace_nil.transfer import transfer_nil_and_nft

from ._common import load_config, run


def _transfer_tokens() -> None:
    _, config = load_config()
    summary = transfer_nil_and_nft(config, ConsoleInputProvider())
    if summary:
        print("\n" + "\n".join(summary.lines()))


def main() -> int:
    return run(_transfer_tokens)


if __name__ == "__main__":
    sys.exit(main())
