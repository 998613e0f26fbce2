"""
airspace-transfer-nft: transfer an owned NFT to another address.
"""
import sys

from airspace_nil.prompts import ConsoleInputProvider
from airspace_nil.transfer import transfer_nft

from ._common import load_config, run


def _transfer_nft() -> None:
    _, config = load_config()
    summary = transfer_nft(config, ConsoleInputProvider())
    if summary:
        print("\n" + "\n".join(summary.lines()))


def main() -> int:
    return run(_transfer_nft)


if __name__ == "__main__":
    sys.exit(main())
