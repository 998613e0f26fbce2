"""
airspace-configure-shard: choose the shard used by the other scripts.
"""
import sys

from airspace_nil.keys import configure_shard
from airspace_nil.prompts import ConsoleInputProvider

from ._common import load_config, run


def _configure_shard() -> None:
    store, _ = load_config()
    shard_id = configure_shard(store, ConsoleInputProvider())
    print(f"Shard ID {shard_id} saved to {store.path}")


def main() -> int:
    return run(_configure_shard)


if __name__ == "__main__":
    sys.exit(main())
