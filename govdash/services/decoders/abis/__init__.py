"""
Embedded ABIs for the proposal action decoders.

Hybrid approach:
1. Essential ABIs are embedded here and loaded into the default registry
2. Etherscan fallback for other verified contracts via EtherscanAbiFetcher
"""

import logging
from typing import Dict

from govdash.config.contracts_config import GOVERNANCE_CONTRACTS, EXTERNAL_CONTRACTS
from .common import (
    ERC20_ABI,
    WETH_ABI,
    NOUNS_TOKEN_ABI,
    AUCTION_HOUSE_ABI,
    TREASURY_ABI,
    DAO_ADMIN_ABI,
    TOKEN_BUYER_ABI,
    PAYER_ABI,
    STREAM_FACTORY_ABI,
    DATA_PROXY_ABI,
    CLIENT_REWARDS_ABI,
    DESCRIPTOR_V3_ABI,
    SEEDER_ABI,
    TREASURY_V1_ABI,
    FORK_ESCROW_ABI,
    FORK_DAO_DEPLOYER_ABI,
    ENS_REGISTRY_ABI,
)

logger = logging.getLogger(__name__)

# Contract key to embedded ABI mapping
_GOVERNANCE_ABIS: Dict[str, list] = {
    "NounsToken": NOUNS_TOKEN_ABI,
    "NounsAuctionHouse": AUCTION_HOUSE_ABI,
    "NounsTreasury": TREASURY_ABI,
    "NounsDAOProxy": DAO_ADMIN_ABI,
    "TokenBuyer": TOKEN_BUYER_ABI,
    "Payer": PAYER_ABI,
    "StreamFactory": STREAM_FACTORY_ABI,
    "NounsDAODataProxy": DATA_PROXY_ABI,
    "ClientRewardsProxy": CLIENT_REWARDS_ABI,
    "NounsDescriptorV3": DESCRIPTOR_V3_ABI,
    "NounsSeeder": SEEDER_ABI,
    "NounsTreasuryV1": TREASURY_V1_ABI,
    "ForkEscrow": FORK_ESCROW_ABI,
    "ForkDAODeployer": FORK_DAO_DEPLOYER_ABI,
}

_EXTERNAL_ABIS: Dict[str, list] = {
    "USDC": ERC20_ABI,
    "WETH": WETH_ABI,
    "ENS": ENS_REGISTRY_ABI,
}


def iter_builtin_contracts():
    """
    Yield (config, abi, is_internal) for every contract with an embedded ABI.

    Governance contracts come first so they are registered as internal.
    """
    for contracts, abis, is_internal in (
        (GOVERNANCE_CONTRACTS, _GOVERNANCE_ABIS, True),
        (EXTERNAL_CONTRACTS, _EXTERNAL_ABIS, False),
    ):
        for key, abi in abis.items():
            config = contracts.get(key)
            if config is None:
                logger.warning(f"No address configured for embedded ABI: {key}")
                continue
            yield config, abi, is_internal


__all__ = [
    'iter_builtin_contracts',
    'ERC20_ABI',
    'WETH_ABI',
    'NOUNS_TOKEN_ABI',
    'AUCTION_HOUSE_ABI',
    'TREASURY_ABI',
    'DAO_ADMIN_ABI',
    'TOKEN_BUYER_ABI',
    'PAYER_ABI',
    'STREAM_FACTORY_ABI',
    'DATA_PROXY_ABI',
    'CLIENT_REWARDS_ABI',
    'DESCRIPTOR_V3_ABI',
    'SEEDER_ABI',
    'TREASURY_V1_ABI',
    'FORK_ESCROW_ABI',
    'FORK_DAO_DEPLOYER_ABI',
    'ENS_REGISTRY_ABI',
]
