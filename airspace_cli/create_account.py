"""
airspace-create-account: create a smart account and top it up.
"""
import sys

from airspace_nil.prompts import ConsoleInputProvider
from airspace_nil.provisioner import provision_account

from ._common import load_config, run


def _create_account() -> None:
    store, config = load_config()
    report = provision_account(config, store, ConsoleInputProvider())

    print("\nAccount created and funded:")
    print(f"- Address: {report.account.address}")
    print(f"- Shard ID: {report.account.shard_id}")
    print(f"- Top-up: {report.amount} {report.token}")
    print(f"- Balance before: {report.balance_before}")
    print(f"- Balance after: {report.balance_after}")
    print(f"Saved NIL_WALLET_ADDRESS and PRIVATE_KEY to {store.path}")


def main() -> int:
    return run(_create_account)


if __name__ == "__main__":
    sys.exit(main())
