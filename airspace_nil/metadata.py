"""
AirSpace listing catalogue and local metadata storage.
"""
import json
import logging
from pathlib import Path
from typing import List, Union

from .models import NftMetadata

logger = logging.getLogger(__name__)

_IMAGE = "https://ipfs.io/ipfs/QmYx6GsYAKnNzZ9A6NvEKV9nf1VaDzJrqDR23Y8YSkebLU"

AIRSPACE_LISTINGS: List[NftMetadata] = [
    NftMetadata(
        title="Niagara Falls Hotel View Rights",
        description=(
            "Secure the pristine view of Niagara Falls by purchasing air rights above the existing "
            "hotel structure. Prime location with unobstructed views of the falls."
        ),
        image=_IMAGE,
        address="6650 Niagara Parkway, Niagara Falls, ON L2G 0L0",
        current_height="10 floors",
        max_height="25 floors",
        floors_to_buy="11-25 floors",
        price="250,000",
    ),
    NftMetadata(
        title="Vancouver Harbor View Rights",
        description=(
            "Protect your panoramic view of Vancouver's harbor and North Shore mountains. "
            "Strategic location in downtown Vancouver."
        ),
        image=_IMAGE,
        address="1128 West Georgia Street, Vancouver, BC V6E 0A8",
        current_height="15 floors",
        max_height="30 floors",
        floors_to_buy="16-30 floors",
        price="375,000",
    ),
    NftMetadata(
        title="Miami Beach Oceanfront Rights",
        description=(
            "Preserve your ocean view in South Beach Miami. Excellent opportunity to secure views "
            "of the Atlantic Ocean."
        ),
        image=_IMAGE,
        address="1100 Collins Avenue, Miami Beach, FL 33139",
        current_height="8 floors",
        max_height="20 floors",
        floors_to_buy="9-20 floors",
        price="420,000",
    ),
    NftMetadata(
        title="Sydney Opera House View Rights",
        description=(
            "Once-in-a-lifetime opportunity to secure air rights with direct views of the Sydney "
            "Opera House and Harbor Bridge."
        ),
        image=_IMAGE,
        address="71 Macquarie Street, Sydney NSW 2000",
        current_height="12 floors",
        max_height="28 floors",
        floors_to_buy="13-28 floors",
        price="580,000",
    ),
    NftMetadata(
        title="Dubai Marina View Rights",
        description=(
            "Secure spectacular views of Dubai Marina and the Arabian Gulf. Premium location in "
            "the heart of New Dubai."
        ),
        image=_IMAGE,
        address="Dubai Marina, Plot No. JLT-PH2-T2A Dubai, UAE",
        current_height="20 floors",
        max_height="45 floors",
        floors_to_buy="21-45 floors",
        price="680,000",
    ),
]


def save_metadata_locally(record: NftMetadata, index: int, metadata_dir: Union[str, Path]) -> Path:
    """
    Write the token metadata of a listing to ``<metadata_dir>/<index>.json``.

    Args:
        record: Listing to render
        index: Position of the listing in the mint run
        metadata_dir: Directory for metadata files (created if missing)

    Returns:
        Absolute path of the written file
    """
    directory = Path(metadata_dir)
    directory.mkdir(parents=True, exist_ok=True)

    path = (directory / f"{index}.json").resolve()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.to_token_metadata().model_dump(), f, indent=2)
    logger.info(f"Metadata saved to {path}")
    return path


def token_uri_for(path: Path) -> str:
    """Token URI pointing at a local metadata file"""
    return Path(path).resolve().as_uri()
