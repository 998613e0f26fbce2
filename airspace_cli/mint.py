"""
airspace-mint: mint the AirSpace listings.
"""
import sys

from airspace_nil.minting import mint_listings

from ._common import load_config, run


def _mint() -> None:
    _, config = load_config()
    results = mint_listings(config)

    print("\nMinting results:")
    for result in results:
        if result.succeeded:
            print(f"✓ {result.title}: {result.receipt.tx_hash}")
        else:
            print(f"× {result.title}: {result.error}")
    print(f"Metadata files written to {config.resolve_path(config.metadata_dir)}")


def main() -> int:
    return run(_mint)


if __name__ == "__main__":
    sys.exit(main())
