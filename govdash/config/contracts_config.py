"""
Contract Configuration Module

Contains the governance contract address book, token metadata and
Etherscan settings used by the proposal action decoders.
"""

import os

# Etherscan API Configuration (verified-source ABI lookups)
ETHERSCAN_API_KEY = os.getenv("ETHERSCAN_API_KEY", "")
ETHERSCAN_BASE_URL = os.getenv("ETHERSCAN_BASE_URL", "https://api.etherscan.io/v2/api")
ETHERSCAN_CHAIN_ID = 1

# Governance Contracts - Ethereum Mainnet (proxy address where one exists)
GOVERNANCE_CONTRACTS = {
    "NounsToken": {
        "address": "0x9C8fF314C9Bc7F6e59A9d9225Fb22946427eDC03",
        "name": "Nouns Token",
        "description": "ERC-721 token contract for Nouns NFTs with delegation",
    },
    "NounsAuctionHouse": {
        "address": "0x830BD73E4184ceF73443C15111a1DF14e495C706",
        "name": "Nouns Auction House",
        "description": "Daily auction house for Nouns",
    },
    "NounsTreasury": {
        "address": "0xb1a32FC9F9D8b2cf86C068Cae13108809547ef71",
        "name": "Nouns Treasury",
        "description": "Main treasury (Executor/Timelock)",
    },
    "NounsDAOProxy": {
        "address": "0x6f3E6272A167e8AcCb32072d08E0957F9c79223d",
        "name": "Nouns DAO Proxy",
        "description": "DAO Governor for proposing and voting",
    },
    "TokenBuyer": {
        "address": "0x4f2acdc74f6941390d9b1804fabc3e780388cfe5",
        "name": "Token Buyer",
        "description": "Converts ETH to USDC for payments",
    },
    "Payer": {
        "address": "0xd97Bcd9f47cEe35c0a9ec1dc40C1269afc9E8E1D",
        "name": "Payer",
        "description": "Handles USDC payments from treasury",
    },
    "StreamFactory": {
        "address": "0x0fd206FC7A7dBcD5661157eDCb1FFDD0D02A61ff",
        "name": "Stream Factory",
        "description": "Factory for creating payment streams",
    },
    "NounsDAODataProxy": {
        "address": "0xf790A5f59678dd733fb3De93493A91f472ca1365",
        "name": "Nouns DAO Data Proxy",
        "description": "Data proxy for candidates and feedback",
    },
    "ClientRewardsProxy": {
        "address": "0x883860178F95d0C82413eDc1D6De530cB4771d55",
        "name": "Client Rewards",
        "description": "Client rewards for proposal creation and voting",
    },
    "NounsDescriptorV3": {
        "address": "0x33a9c445fb4fb21f2c030a6b2d3e2f12d017bfac",
        "name": "Nouns Descriptor V3",
        "description": "Descriptor V3 for traits and artwork generation",
    },
    "NounsSeeder": {
        "address": "0xCC8a0FB5ab3C7132c1b2A0109142Fb112c4Ce515",
        "name": "Nouns Seeder",
        "description": "Generates pseudorandom trait seeds for Nouns",
    },
    "NounsTreasuryV1": {
        "address": "0x0BC3807Ec262cB779b38D65b38158acC3bfedE10",
        "name": "Nouns Treasury V1",
        "description": "Legacy treasury V1",
    },
    "ForkEscrow": {
        "address": "0x44d97D22B3d37d837cE4b22773aAd9d1566055D9",
        "name": "Fork Escrow",
        "description": "Escrow for DAO fork mechanism",
    },
    "ForkDAODeployer": {
        "address": "0xcD65e61f70e0b1Aa433ca1d9A6FC2332e9e73cE3",
        "name": "Fork DAO Deployer",
        "description": "Deploys new DAO instances for forks",
    },
}

# External Contracts - tokens the treasury routinely moves
EXTERNAL_CONTRACTS = {
    "USDC": {
        "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "name": "USDC",
        "description": "USD Coin stablecoin (6 decimals)",
    },
    "WETH": {
        "address": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "name": "WETH",
        "description": "Wrapped Ether",
    },
    "ENS": {
        "address": "0x57f1887a8BF19b14fC0dF6Fd9B2acc9Af147eA85",
        "name": "ENS",
        "description": "Ethereum Name Service registry",
    },
}

# Token Decimals Mapping (lowercase address -> (symbol, decimals))
TOKEN_METADATA = {
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": ("USDC", 6),
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2": ("WETH", 18),
}

# Amount overlay: functions whose amount parameters are USD-pegged
# (function name -> decimals). Heuristic, keyed on function name only.
USD_AMOUNT_DECIMALS = {
    "sendOrRegisterDebt": 6,
    "payBackDebt": 6,
}

# Amounts above this with no known convention are shown as 18-decimal tokens
GENERIC_TOKEN_THRESHOLD = 10**15
GENERIC_TOKEN_DECIMALS = 18

# Query Configuration
REQUEST_TIMEOUT = 30  # seconds
RATE_LIMIT_DELAY = 0.2  # seconds between Etherscan calls
