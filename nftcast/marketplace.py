"""OpenSea marketplace client.

Resolves an NFT identifier (asset URL, contract address + token id, or
collection slug) into display metadata and the collection floor price, which
anchors the synthetic price history.

API Documentation: https://docs.opensea.io/reference/api-overview
"""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.opensea.io/api/v2"

CONTRACT_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

# (pattern, group index of the address hex, group index of the token id)
ASSET_URL_PATTERNS = [
    (re.compile(r"opensea\.io/assets/ethereum/0x([a-fA-F0-9]{40})/(\d+)"), 1, 2),
    (re.compile(r"opensea\.io/assets/0x([a-fA-F0-9]{40})/(\d+)"), 1, 2),
    (re.compile(r"opensea\.io/assets/([^/]+)/0x([a-fA-F0-9]{40})/(\d+)"), 2, 3),
    (re.compile(r"^0x([a-fA-F0-9]{40})[\s/:#]+(\d+)$"), 1, 2),
]
COLLECTION_URL_RE = re.compile(r"opensea\.io/collection/([A-Za-z0-9_\-.]+)")


class MarketplaceError(Exception):
    """Base class for marketplace failures."""

    retryable = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedIdentifierError(MarketplaceError):
    """Identifier could not be parsed; raised before any request."""


class MisconfiguredCredentialsError(MarketplaceError):
    """No API token configured; raised before any request."""


class NotFoundError(MarketplaceError):
    """Asset or collection does not exist (HTTP 404)."""


class RateLimitedError(MarketplaceError):
    """Too many requests (HTTP 429); back off and retry."""

    retryable = True


class UnauthorizedError(MarketplaceError):
    """API token rejected (HTTP 401)."""


class UpstreamError(MarketplaceError):
    """Any other API or transport failure."""

    retryable = True


@dataclass(frozen=True)
class NFTIdentifier:
    contract_address: str
    token_id: str


@dataclass(frozen=True)
class CollectionIdentifier:
    slug: str


Identifier = Union[NFTIdentifier, CollectionIdentifier]


@dataclass
class MarketplaceConfig:
    """Configuration for the OpenSea client."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_API_BASE
    chain: str = "ethereum"
    timeout_s: int = 30

    @classmethod
    def from_env(cls) -> "MarketplaceConfig":
        return cls(
            api_key=os.getenv("OPENSEA_BEARER_TOKEN") or None,
            base_url=os.getenv("OPENSEA_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            timeout_s=int(os.getenv("OPENSEA_TIMEOUT_S", "30")),
        )


@dataclass
class NFTMetadata:
    name: str
    collection: str
    contract_address: str
    token_id: str
    image: str = ""
    opensea_url: str = ""
    description: str = ""
    traits: List[Dict[str, Any]] = field(default_factory=list)
    floor_price: float = 0.0
    collection_slug: str = ""
    is_disabled: bool = False
    is_nsfw: bool = False
    token_standard: str = ""
    metadata_url: str = ""
    updated_at: str = ""


def _extract_floor_price(stats: Dict[str, Any]) -> float:
    total = stats.get("total") or {}
    if not isinstance(total, dict):
        raise UpstreamError(f"Unexpected collection stats payload: {stats}")
    try:
        return float(total.get("floor_price") or 0.0)
    except (TypeError, ValueError) as e:
        raise UpstreamError(f"Unexpected floor price: {total.get('floor_price')!r}") from e


def validate_contract_address(contract_address: str) -> bool:
    return bool(CONTRACT_ADDRESS_RE.match(contract_address or ""))


def parse_identifier(text: str) -> Identifier:
    """Parse an OpenSea asset/collection URL or a bare collection slug.

    Raises:
        MalformedIdentifierError: If nothing recognisable is found
    """
    clean = (text or "").strip()
    if not clean:
        raise MalformedIdentifierError("Identifier is empty")

    for pattern, address_group, token_group in ASSET_URL_PATTERNS:
        match = pattern.search(clean)
        if match:
            return NFTIdentifier(
                contract_address=f"0x{match.group(address_group)}",
                token_id=match.group(token_group),
            )

    match = COLLECTION_URL_RE.search(clean)
    if match:
        return CollectionIdentifier(slug=match.group(1))

    if "/" not in clean and re.fullmatch(r"[A-Za-z0-9_\-.]+", clean) and not clean.lower().startswith("0x"):
        return CollectionIdentifier(slug=clean)

    raise MalformedIdentifierError(f"Unrecognised NFT identifier: {text}")


class OpenSeaClient:
    """Thin client for the OpenSea v2 API."""

    def __init__(self, config: Optional[MarketplaceConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or MarketplaceConfig.from_env()
        self.session = session or requests.Session()

    def _headers(self, include_api_key: bool = False) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Accept": "application/json",
        }
        if include_api_key:
            headers["X-API-KEY"] = self.config.api_key or ""
        return headers

    def _require_credentials(self) -> None:
        if not self.config.api_key:
            raise MisconfiguredCredentialsError(
                "OpenSea Bearer Token not configured. Set OPENSEA_BEARER_TOKEN in the environment."
            )

    def _get(self, path: str, include_api_key: bool = False) -> requests.Response:
        url = f"{self.config.base_url}/{path}"
        try:
            return self.session.get(url, headers=self._headers(include_api_key), timeout=self.config.timeout_s)
        except requests.RequestException as e:
            raise UpstreamError(f"OpenSea request failed: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        """Decode a JSON object body; anything else is an upstream failure."""
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"OpenSea returned an invalid JSON body: {e}", response.status_code) from e
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise UpstreamError(
                f"OpenSea returned an unexpected payload: {type(payload).__name__}", response.status_code
            )
        return payload

    def fetch_nft(self, contract_address: str, token_id: str) -> NFTMetadata:
        """Fetch NFT metadata and its collection floor price.

        Raises:
            MisconfiguredCredentialsError, MalformedIdentifierError, NotFoundError,
            RateLimitedError, UnauthorizedError, UpstreamError
        """
        self._require_credentials()

        if not contract_address or not token_id:
            raise MalformedIdentifierError("Contract address and token ID are required")
        if not validate_contract_address(contract_address):
            raise MalformedIdentifierError(f"Invalid contract address format: {contract_address}")

        response = self._get(
            f"chain/{self.config.chain}/contract/{contract_address.lower()}/nfts/{token_id}",
            include_api_key=True,
        )

        if response.status_code == 404:
            raise NotFoundError("NFT not found. Check the contract address and token ID.", 404)
        if response.status_code == 429:
            raise RateLimitedError("Rate limit exceeded. Try again in a moment.", 429)
        if response.status_code == 401:
            raise UnauthorizedError("Invalid API credentials. Check the OpenSea Bearer Token.", 401)
        if not response.ok:
            raise UpstreamError(f"OpenSea API error: {response.status_code} - {response.text}", response.status_code)

        payload = self._json(response)
        nft = payload.get("nft") or {}
        collection = payload.get("collection") or {}
        if not isinstance(nft, dict) or not isinstance(collection, dict):
            raise UpstreamError("OpenSea returned an unexpected NFT payload", response.status_code)
        collection_slug = collection.get("collection") or ""

        floor_price = self._floor_price(collection_slug) if collection_slug else 0.0

        if nft.get("name"):
            name = nft["name"]
        elif collection.get("name"):
            name = f"{collection['name']} #{token_id}"
        else:
            name = f"NFT #{token_id}"

        return NFTMetadata(
            name=name,
            collection=collection.get("name") or "Unknown Collection",
            contract_address=contract_address,
            token_id=str(token_id),
            image=nft.get("image_url") or nft.get("display_image_url") or "",
            opensea_url=nft.get("opensea_url") or "",
            description=nft.get("description") or "",
            traits=nft.get("traits") or [],
            floor_price=floor_price,
            collection_slug=collection_slug,
            is_disabled=bool(nft.get("is_disabled", False)),
            is_nsfw=bool(nft.get("is_nsfw", False)),
            token_standard=nft.get("token_standard") or "",
            metadata_url=nft.get("metadata_url") or "",
            updated_at=nft.get("updated_at") or "",
        )

    def _floor_price(self, slug: str) -> float:
        """Best-effort floor price; 0.0 when stats are unavailable."""
        try:
            return _extract_floor_price(self.fetch_collection_stats(slug))
        except MarketplaceError as e:
            logger.warning(f"Could not fetch collection stats for {slug}: {e}")
            return 0.0

    def fetch_collection_stats(self, slug: str) -> Dict[str, Any]:
        """Fetch raw collection stats.

        Raises:
            MisconfiguredCredentialsError, MalformedIdentifierError, NotFoundError, UpstreamError
        """
        self._require_credentials()
        if not slug:
            raise MalformedIdentifierError("Collection slug is required")

        response = self._get(f"collections/{slug}/stats")
        if response.status_code == 404:
            raise NotFoundError(f"Collection not found: {slug}", 404)
        if not response.ok:
            raise UpstreamError(f"OpenSea API error: {response.status_code}", response.status_code)

        return self._json(response)

    def resolve_floor_price(self, text: str) -> float:
        """Parse an identifier and return the floor price of its collection."""
        identifier = parse_identifier(text)
        if isinstance(identifier, NFTIdentifier):
            metadata = self.fetch_nft(identifier.contract_address, identifier.token_id)
            logger.info(f"Resolved {metadata.name} ({metadata.collection}), floor price {metadata.floor_price}")
            return metadata.floor_price

        floor_price = _extract_floor_price(self.fetch_collection_stats(identifier.slug))
        logger.info(f"Resolved collection {identifier.slug}, floor price {floor_price}")
        return floor_price
