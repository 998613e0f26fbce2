"""
airspace-deploy: deploy the AirSpaceNFT contract.
"""
import sys

from airspace_nil.deployer import deploy_nft_contract

from ._common import load_config, run


def _deploy() -> None:
    store, config = load_config()
    receipt = deploy_nft_contract(config, store)
    print(f"AirSpaceNFT deployed to: {receipt.contract_address}")
    print(f"Transaction hash: {receipt.tx_hash}")
    print(f"NFT_CONTRACT_ADDRESS saved to {store.path}")


def main() -> int:
    return run(_deploy)


if __name__ == "__main__":
    sys.exit(main())
