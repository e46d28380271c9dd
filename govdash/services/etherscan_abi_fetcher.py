"""
Etherscan ABI Fetcher

Looks up verified contract source on Etherscan and feeds the ABI into the
proposal decoders' SchemaRegistry, so actions on contracts without an
embedded ABI can still be decoded precisely.
"""

import requests
import logging
import threading
import json
import re
from dataclasses import dataclass
from typing import Dict, List, Optional
import time

from govdash.config.contracts_config import (
    ETHERSCAN_API_KEY,
    ETHERSCAN_BASE_URL,
    ETHERSCAN_CHAIN_ID,
    REQUEST_TIMEOUT,
    RATE_LIMIT_DELAY,
)
from govdash.services.decoders.base import ContractCategory
from govdash.services.decoders.registry import SchemaRegistry

logger = logging.getLogger(__name__)

UNVERIFIED_MARKER = 'Contract source code not verified'

_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


@dataclass(frozen=True)
class ContractInfo:
    """Etherscan getsourcecode result for one address"""
    address: str
    name: str
    abi: Optional[List[dict]]
    is_verified: bool


class EtherscanAbiFetcher:
    """
    Service for fetching verified contract ABIs from Etherscan.

    Results (including "not verified") are cached per address for the
    lifetime of the fetcher. Network and API errors (rate limits, bad
    keys) are not cached.
    """

    def __init__(self, api_key: str = ETHERSCAN_API_KEY, base_url: str = ETHERSCAN_BASE_URL,
                 session: Optional[requests.Session] = None, chain_id: int = ETHERSCAN_CHAIN_ID,
                 timeout: float = REQUEST_TIMEOUT, rate_limit_delay: float = RATE_LIMIT_DELAY):
        """Initialize with Etherscan API key."""
        self.api_key = api_key
        self.base_url = base_url
        self.session = session or requests.Session()
        self.chain_id = chain_id
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self._cache: Dict[str, ContractInfo] = {}
        self._lock = threading.Lock()

    def fetch_contract(self, address: str) -> Optional[ContractInfo]:
        """
        Get name and ABI for a contract address.

        Args:
            address: Ethereum contract address

        Returns:
            ContractInfo (abi None when unverified), or None if the lookup
            could not be made
        """
        if not isinstance(address, str) or not _ADDRESS_PATTERN.match(address):
            logger.warning(f"Invalid Ethereum address format: {address!r}")
            return None

        key = address.lower()
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        if not self.api_key:
            logger.warning("ETHERSCAN_API_KEY not configured, skipping ABI lookup")
            return None

        info = self._request_source(address)
        if info is not None:
            with self._lock:
                self._cache[key] = info
        return info

    def _request_source(self, address: str) -> Optional[ContractInfo]:
        try:
            params = {
                'chainid': self.chain_id,
                'module': 'contract',
                'action': 'getsourcecode',
                'address': address,
                'apikey': self.api_key,
            }

            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()

            data = response.json()

            results = data.get('result')
            if data.get('status') != '1' or not isinstance(results, list) or not results:
                logger.error(f"Etherscan API error for {address}: {data.get('message', 'Unknown error')} ({data.get('result')})")
                return None

            result = results[0]
            raw_abi = result.get('ABI', '')
            if not raw_abi or raw_abi == UNVERIFIED_MARKER:
                logger.info(f"Contract {address[:10]}... is not verified")
                return ContractInfo(
                    address=address,
                    name=result.get('ContractName') or 'Unknown',
                    abi=None,
                    is_verified=False,
                )

            return ContractInfo(
                address=address,
                name=result.get('ContractName') or 'Unknown',
                abi=json.loads(raw_abi),
                is_verified=True,
            )

        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching contract source for {address}: {e}")
            return None
        finally:
            time.sleep(self.rate_limit_delay)

    def populate_registry(self, registry: SchemaRegistry, address: str) -> bool:
        """
        Register the verified ABI of address in registry.

        Addresses that are already registered are left untouched.

        Returns:
            True if a new schema was registered
        """
        if address in registry:
            return False

        info = self.fetch_contract(address)
        if info is None or not info.is_verified:
            return False

        return registry.register_schema(
            address=info.address,
            name=info.name,
            description=f"Verified contract {info.name}",
            raw_schema=info.abi,
            category=ContractCategory.KNOWN_EXTERNAL,
        )

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
