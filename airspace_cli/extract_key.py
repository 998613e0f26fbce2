"""
airspace-extract-key: import the =nil; CLI private key.
"""
import sys

from airspace_nil.keys import extract_private_key
from airspace_nil.prompts import ConsoleInputProvider

from ._common import load_config, run


def _extract_key() -> None:
    store, _ = load_config()
    address = extract_private_key(store, ConsoleInputProvider())
    if address:
        print(f"PRIVATE_KEY for {address} saved to {store.path}")


def main() -> int:
    return run(_extract_key)


if __name__ == "__main__":
    sys.exit(main())
