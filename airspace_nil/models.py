"""
Data models for the AirSpace =nil; tooling.
"""
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, ConfigDict, Field


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    contract_address: Optional[str] = Field(None, alias="contractAddress")
    logs: List[Dict[str, Any]] = Field(default_factory=list)
    confirmations: int = 0


class SmartAccount(BaseModel):
    """Address and key of a generated account"""
    address: str
    private_key: str = Field(..., repr=False)
    shard_id: str


class TokenAttribute(BaseModel):
    trait_type: str
    value: str


class TokenMetadata(BaseModel):
    """ERC-721 style metadata document written next to each mint"""
    name: str
    description: str
    image: str
    attributes: List[TokenAttribute]


class NftMetadata(BaseModel):
    """An air-rights listing as shown in the marketplace"""
    title: str
    description: str
    image: str
    address: str
    current_height: str
    max_height: str
    floors_to_buy: str
    price: str

    def to_token_metadata(self) -> TokenMetadata:
        return TokenMetadata(
            name=self.title,
            description=self.description,
            image=self.image,
            attributes=[
                TokenAttribute(trait_type="Address", value=self.address),
                TokenAttribute(trait_type="Current Height", value=self.current_height),
                TokenAttribute(trait_type="Maximum Height", value=self.max_height),
                TokenAttribute(trait_type="Available Floors", value=self.floors_to_buy),
                TokenAttribute(trait_type="Price", value=self.price),
            ],
        )


class MintResult(BaseModel):
    """Outcome of minting a single listing"""
    index: int
    title: str
    metadata_path: str
    token_uri: str
    receipt: Optional[TxReceipt] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.receipt is not None


class TransferSummary(BaseModel):
    """What moved where, printed after a transfer completes"""
    token_id: int
    from_address: str
    to_address: str
    nft_contract: str
    relay_contract: Optional[str] = None
    amount_wei: int = 0
    receipts: List[TxReceipt] = Field(default_factory=list)

    def lines(self) -> List[str]:
        out = [
            "Transfer summary:",
            f"- Token ID: {self.token_id}",
            f"- From: {self.from_address}",
            f"- To: {self.to_address}",
            f"- Contract: {self.nft_contract}",
        ]
        if self.relay_contract:
            out.append(f"- Transfer contract: {self.relay_contract}")
            out.append(f"- Amount (wei): {self.amount_wei}")
        for receipt in self.receipts:
            out.append(f"- Tx: {receipt.tx_hash} (gas used {receipt.gas_used})")
        return out


class ProvisioningReport(BaseModel):
    """Result of creating and funding an account"""
    account: SmartAccount
    token: str
    amount: int
    balance_before: Dict[str, Any] = Field(default_factory=dict)
    balance_after: Dict[str, Any] = Field(default_factory=dict)
