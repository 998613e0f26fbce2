"""
airspace-deploy-transfer: deploy the AirSpaceTransfer relay contract.
"""
import sys

from airspace_nil.deployer import deploy_transfer_contract

from ._common import load_config, run


def _deploy_transfer() -> None:
    store, config = load_config()
    receipt = deploy_transfer_contract(config, store)
    print(f"AirSpaceTransfer deployed to: {receipt.contract_address}")
    print(f"Transaction hash: {receipt.tx_hash}")
    print(f"TRANSFER_CONTRACT_ADDRESS saved to {store.path}")


def main() -> int:
    return run(_deploy_transfer)


if __name__ == "__main__":
    sys.exit(main())
