"""
Minting of the AirSpace listing catalogue.
"""
import time
import logging
from functools import partial
from typing import Callable, List, Optional, Sequence

from .client import NilClient
from .config import NilConfig
from .contracts import AIRSPACE_NFT_ABI
from .deployer import ensure_funded
from .faucet import FaucetClient
from .metadata import AIRSPACE_LISTINGS, save_metadata_locally, token_uri_for
from .models import MintResult, NftMetadata

MINT_CONFIRMATIONS = 2
MINT_DELAY_SECONDS = 5

logger = logging.getLogger(__name__)


def mint_listings(
    config: NilConfig,
    listings: Sequence[NftMetadata] = AIRSPACE_LISTINGS,
    top_up: bool = True,
    faucet: Optional[FaucetClient] = None,
    client_factory: Optional[Callable[[NilConfig], NilClient]] = None
) -> List[MintResult]:
    """
    Mint one NFT per listing to the operating account.

    Each listing's metadata file is written before its mint is attempted, so
    every listing ends up with a file even when its transaction fails. A
    failed mint is logged and the run moves on to the next listing.

    Args:
        config: Current configuration
        listings: Ordered listings to mint
        top_up: Request faucet funding once when the balance is low
        faucet: Faucet client (defaults to one for config.faucet_url)
        client_factory: Builds the RPC client (defaults to NilClient.from_config,
            shard optional)

    Returns:
        One MintResult per listing, in order

    Raises:
        MissingConfigError: If PRIVATE_KEY, NIL_TESTNET_URL or NFT_CONTRACT_ADDRESS is missing
    """
    client_factory = client_factory or partial(NilClient.from_config, require_shard=False)
    client = client_factory(config)
    nft_address = config.require("nft_contract_address", hint="Run airspace-deploy first")

    logger.info(f"Minting NFTs with account: {client.address}")
    if top_up:
        ensure_funded(client, faucet or FaucetClient(config.faucet_url))

    contract = client.contract(nft_address, AIRSPACE_NFT_ABI)
    metadata_dir = config.resolve_path(config.metadata_dir)
    total = len(listings)
    results: List[MintResult] = []

    logger.info("Starting to mint NFTs...")
    for index, record in enumerate(listings):
        path = save_metadata_locally(record, index, metadata_dir)
        token_uri = token_uri_for(path)
        result = MintResult(index=index, title=record.title, metadata_path=str(path), token_uri=token_uri)

        logger.info(f"Minting NFT {index + 1}/{total}: {record.title}")
        try:
            receipt = client.transact(
                contract.functions.mint(client.address, token_uri),
                confirmations=MINT_CONFIRMATIONS
            )
            result.receipt = receipt
            logger.info(f"✓ NFT {index + 1} minted successfully. Transaction hash: {receipt.tx_hash}")
            logger.info(f"Gas used: {receipt.gas_used}")
        except Exception as e:
            result.error = str(e)
            logger.error(f"× Failed to mint NFT {index + 1}: {e}")
        results.append(result)

        if index < total - 1:
            time.sleep(MINT_DELAY_SECONDS)

    minted = sum(1 for r in results if r.succeeded)
    logger.info(f"Minting finished: {minted}/{total} NFTs minted")
    return results
