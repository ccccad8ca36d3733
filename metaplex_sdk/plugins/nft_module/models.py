"""
NFT domain models.

Metadata is the decoded on-chain record plus its optional off-chain JSON.
Sft and Nft join Metadata with the Mint (and, for Nft, the edition); an asset
is an Nft exactly when its mint has a master or print edition account.

Mappers are pure: they take decoded layouts and never touch the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.layouts import remove_empty_chars
from metaplex_sdk.plugins.nft_module.accounts import Key
from metaplex_sdk.plugins.nft_module.pdas import find_metadata_pda
from metaplex_sdk.plugins.token_module.models import Mint, Token

JsonMetadata = dict[str, Any]


class TokenStandard(IntEnum):
    NonFungible = 0
    FungibleAsset = 1
    Fungible = 2
    NonFungibleEdition = 3


class UseMethod(IntEnum):
    Burn = 0
    Multiple = 1
    Single = 2


@dataclass(frozen=True)
class Creator:
    address: Pubkey
    share: int
    verified: bool = False


@dataclass(frozen=True)
class Collection:
    address: Pubkey
    verified: bool = False


@dataclass(frozen=True)
class Uses:
    use_method: UseMethod | int
    remaining: int
    total: int


@dataclass(frozen=True)
class Metadata:
    """
    Decoded Metadata account.

    json is the off-chain document and json_loaded records whether a fetch was
    attempted. json is excluded from equality and hashing: two snapshots of the
    same account compare equal when only their loaded documents differ.
    """

    address: Pubkey
    mint_address: Pubkey
    update_authority_address: Pubkey
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    is_mutable: bool
    primary_sale_happened: bool
    creators: tuple[Creator, ...] = ()
    edition_nonce: int | None = None
    token_standard: TokenStandard | None = None
    collection: Collection | None = None
    uses: Uses | None = None
    json: JsonMetadata | None = field(default=None, compare=False)
    json_loaded: bool = False
    model: str = "metadata"


@dataclass(frozen=True)
class NftEdition:
    """
    Master edition (is_original) or print edition of an NFT.

    Originals carry supply and max_supply (None means unlimited prints);
    prints carry their parent master edition and edition number.
    """

    address: Pubkey
    is_original: bool
    supply: int | None = None
    max_supply: int | None = None
    parent: Pubkey | None = None
    number: int | None = None


@dataclass(frozen=True)
class Sft:
    metadata: Metadata
    mint: Mint
    token: Token | None = None
    model: str = "sft"

    @property
    def address(self) -> Pubkey:
        return self.mint.address

    @property
    def metadata_address(self) -> Pubkey:
        return self.metadata.address

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def symbol(self) -> str:
        return self.metadata.symbol

    @property
    def uri(self) -> str:
        return self.metadata.uri

    @property
    def json(self) -> JsonMetadata | None:
        return self.metadata.json

    @property
    def seller_fee_basis_points(self) -> int:
        return self.metadata.seller_fee_basis_points

    @property
    def update_authority_address(self) -> Pubkey:
        return self.metadata.update_authority_address

    @property
    def creators(self) -> tuple[Creator, ...]:
        return self.metadata.creators


@dataclass(frozen=True)
class Nft(Sft):
    edition: NftEdition | None = None
    model: str = "nft"


def _optional_enum(enum_cls: type[IntEnum], value: int | None) -> Any:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _enum_or_raw(enum_cls: type[IntEnum], value: int) -> Any:
    """Unknown discriminants stay plain ints so updates write them back unchanged."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def to_metadata(account: Any) -> Metadata:
    """Map a decoded Metadata account. Idempotent on its input; strips NUL padding."""
    data = account.data
    creators = tuple(
        Creator(address=c.address, share=c.share, verified=c.verified) for c in (data.creators or [])
    )
    collection = None
    if account.collection is not None:
        collection = Collection(address=account.collection.key, verified=account.collection.verified)
    uses = None
    if account.uses is not None:
        uses = Uses(
            use_method=_enum_or_raw(UseMethod, account.uses.use_method),
            remaining=account.uses.remaining,
            total=account.uses.total,
        )
    return Metadata(
        address=find_metadata_pda(account.mint).address,
        mint_address=account.mint,
        update_authority_address=account.update_authority,
        name=remove_empty_chars(data.name),
        symbol=remove_empty_chars(data.symbol),
        uri=remove_empty_chars(data.uri),
        seller_fee_basis_points=data.seller_fee_basis_points,
        is_mutable=account.is_mutable,
        primary_sale_happened=account.primary_sale_happened,
        creators=creators,
        edition_nonce=account.edition_nonce,
        token_standard=_optional_enum(TokenStandard, account.token_standard),
        collection=collection,
        uses=uses,
    )


def with_json(metadata: Metadata, json: JsonMetadata | None) -> Metadata:
    return replace(metadata, json=json, json_loaded=True)


def to_nft_edition(address: Pubkey, account: Any) -> NftEdition:
    if account.key in (Key.MasterEditionV1, Key.MasterEditionV2):
        return NftEdition(
            address=address,
            is_original=True,
            supply=account.supply,
            max_supply=account.max_supply,
        )
    return NftEdition(address=address, is_original=False, parent=account.parent, number=account.edition)


def _check_mint(metadata: Metadata, mint: Mint) -> None:
    if metadata.mint_address != mint.address:
        raise ValidationError(
            f"Metadata mint {metadata.mint_address} does not match mint account {mint.address}"
        )


def to_sft(metadata: Metadata, mint: Mint, token: Token | None = None) -> Sft:
    _check_mint(metadata, mint)
    return Sft(metadata=metadata, mint=mint, token=token)


def to_nft(metadata: Metadata, mint: Mint, edition: NftEdition, token: Token | None = None) -> Nft:
    _check_mint(metadata, mint)
    return Nft(metadata=metadata, mint=mint, token=token, edition=edition)


def to_data_v2(
    *,
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int,
    creators: tuple[Creator, ...] | list[Creator] | None,
    collection: Collection | None,
    uses: Uses | None,
) -> dict[str, Any]:
    """Build the DataV2 instruction argument from model values."""
    return {
        "name": name,
        "symbol": symbol,
        "uri": uri,
        "seller_fee_basis_points": seller_fee_basis_points,
        "creators": (
            [{"address": c.address, "verified": c.verified, "share": c.share} for c in creators]
            if creators
            else None
        ),
        "collection": (
            None if collection is None else {"verified": collection.verified, "key": collection.address}
        ),
        "uses": (
            None
            if uses is None
            else {"use_method": int(uses.use_method), "remaining": uses.remaining, "total": uses.total}
        ),
    }
