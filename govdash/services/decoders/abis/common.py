"""
Embedded JSON ABIs for the built-in governance contracts and common tokens.

Only the state-changing functions that show up in proposal actions are
listed; view functions are omitted unless a contract has nothing else.
"""

from typing import List, Tuple


def _function(name: str, inputs: List[Tuple[str, str]]) -> dict:
    """Build a JSON ABI function item from (type, name) pairs"""
    return {
        "type": "function",
        "name": name,
        "inputs": [{"internalType": t, "name": n, "type": t} for t, n in inputs],
        "outputs": [],
        "stateMutability": "nonpayable",
    }


ERC20_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "from", "type": "address"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "transferFrom",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "spender", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "value", "type": "uint256"},
        ],
        "name": "Transfer",
        "type": "event",
    },
]

WETH_ABI = ERC20_ABI + [
    {
        "inputs": [],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    _function("withdraw", [("uint256", "wad")]),
]

NOUNS_TOKEN_ABI = [
    _function("delegate", [("address", "delegatee")]),
    _function("transferFrom", [("address", "from"), ("address", "to"), ("uint256", "tokenId")]),
    _function("safeTransferFrom", [("address", "from"), ("address", "to"), ("uint256", "tokenId")]),
    _function("approve", [("address", "to"), ("uint256", "tokenId")]),
    _function("setApprovalForAll", [("address", "operator"), ("bool", "approved")]),
    _function("mint", []),
    _function("setMinter", [("address", "_minter")]),
    _function("setDescriptor", [("address", "_descriptor")]),
    _function("setNoundersDAO", [("address", "_noundersDAO")]),
    _function("transferOwnership", [("address", "newOwner")]),
]

AUCTION_HOUSE_ABI = [
    _function("setReservePrice", [("uint192", "_reservePrice")]),
    _function("setTimeBuffer", [("uint56", "_timeBuffer")]),
    _function("setMinBidIncrementPercentage", [("uint8", "_minBidIncrementPercentage")]),
    _function("pause", []),
    _function("unpause", []),
    _function("transferOwnership", [("address", "newOwner")]),
]

TREASURY_ABI = [
    _function("sendETH", [("address", "recipient"), ("uint256", "ethToSend")]),
    _function("sendERC20", [("address", "recipient"), ("address", "erc20Token"), ("uint256", "tokensToSend")]),
    _function("setDelay", [("uint256", "delay_")]),
    _function("setPendingAdmin", [("address", "pendingAdmin_")]),
]

DAO_ADMIN_ABI = [
    _function("_setVotingDelay", [("uint256", "newVotingDelay")]),
    _function("_setVotingPeriod", [("uint256", "newVotingPeriod")]),
    _function("_setProposalThresholdBPS", [("uint256", "newProposalThresholdBPS")]),
    _function("_setPendingAdmin", [("address", "newPendingAdmin")]),
    _function("_setForkPeriod", [("uint256", "newForkPeriod")]),
    _function("_setDynamicQuorumParams", [
        ("uint16", "newMinQuorumVotesBPS"),
        ("uint16", "newMaxQuorumVotesBPS"),
        ("uint32", "newQuorumCoefficient"),
    ]),
    {
        "type": "function",
        "name": "_setForkDAODeployer",
        "inputs": [{"internalType": "address", "name": "newForkDAODeployer", "type": "address"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "_setErc20TokensToIncludeInFork",
        "inputs": [{"internalType": "address[]", "name": "erc20tokens", "type": "address[]"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

TOKEN_BUYER_ABI = [
    _function("setAdmin", [("address", "newAdmin")]),
    _function("setBaselinePaymentTokenAmount", [("uint256", "newBaselinePaymentTokenAmount")]),
    _function("setBotDiscountBPs", [("uint16", "newBotDiscountBPs")]),
    _function("setPayer", [("address", "newPayer")]),
    _function("withdrawETH", []),
]

PAYER_ABI = [
    _function("sendOrRegisterDebt", [("address", "account"), ("uint256", "amount")]),
    _function("payBackDebt", [("uint256", "amount")]),
    _function("withdrawPaymentToken", []),
    _function("transferOwnership", [("address", "newOwner")]),
    _function("renounceOwnership", []),
]

# createStream has four overloads; predictedStreamAddress is what the batch
# correlator keys on.
STREAM_FACTORY_ABI = [
    _function("createStream", [
        ("address", "recipient"), ("uint256", "tokenAmount"), ("address", "tokenAddress"),
        ("uint256", "startTime"), ("uint256", "stopTime"),
    ]),
    _function("createStream", [
        ("address", "recipient"), ("uint256", "tokenAmount"), ("address", "tokenAddress"),
        ("uint256", "startTime"), ("uint256", "stopTime"), ("uint8", "nonce"),
        ("address", "predictedStreamAddress"),
    ]),
    _function("createStream", [
        ("address", "payer"), ("address", "recipient"), ("uint256", "tokenAmount"),
        ("address", "tokenAddress"), ("uint256", "startTime"), ("uint256", "stopTime"),
        ("uint8", "nonce"),
    ]),
    _function("createStream", [
        ("address", "payer"), ("address", "recipient"), ("uint256", "tokenAmount"),
        ("address", "tokenAddress"), ("uint256", "startTime"), ("uint256", "stopTime"),
        ("uint8", "nonce"), ("address", "predictedStreamAddress"),
    ]),
    _function("createAndFundStream", [
        ("address", "recipient"), ("uint256", "tokenAmount"), ("address", "tokenAddress"),
        ("uint256", "startTime"), ("uint256", "stopTime"),
    ]),
]

DATA_PROXY_ABI = [
    _function("setCreateCandidateCost", [("uint256", "newCreateCandidateCost")]),
    _function("setUpdateCandidateCost", [("uint256", "newUpdateCandidateCost")]),
    _function("setFeeRecipient", [("address", "newFeeRecipient")]),
    _function("withdrawETH", [("address", "to"), ("uint256", "amount")]),
    _function("upgradeTo", [("address", "newImplementation")]),
    _function("transferOwnership", [("address", "newOwner")]),
]

CLIENT_REWARDS_ABI = [
    _function("enableAuctionRewards", []),
    _function("disableAuctionRewards", []),
    _function("enableProposalRewards", []),
    _function("disableProposalRewards", []),
    _function("setClientApproval", [("uint32", "clientId"), ("bool", "approved")]),
    _function("setAdmin", [("address", "newAdmin")]),
    _function("setDescriptor", [("address", "descriptor_")]),
    _function("setETHToken", [("address", "newToken")]),
    _function("withdrawToken", [("address", "token"), ("address", "to"), ("uint256", "amount")]),
    _function("pause", []),
    _function("unpause", []),
    _function("upgradeTo", [("address", "newImplementation")]),
    _function("transferOwnership", [("address", "newOwner")]),
]

DESCRIPTOR_V3_ABI = [
    _function("lockParts", []),
    _function("toggleDataURIEnabled", []),
    _function("setBaseURI", [("string", "_baseURI")]),
    _function("setArt", [("address", "_art")]),
    _function("setArtDescriptor", [("address", "descriptor")]),
    _function("setArtInflator", [("address", "inflator")]),
    _function("setRenderer", [("address", "_renderer")]),
    _function("setPalettePointer", [("uint8", "paletteIndex"), ("address", "pointer")]),
    _function("transferOwnership", [("address", "newOwner")]),
]

# Read-only; registered so the seeder is named when passed as an argument
SEEDER_ABI = [
    {
        "inputs": [
            {"internalType": "uint256", "name": "nounId", "type": "uint256"},
            {"internalType": "contract INounsDescriptor", "name": "descriptor", "type": "address"},
        ],
        "name": "generateSeed",
        "outputs": [{
            "components": [
                {"internalType": "uint48", "name": part, "type": "uint48"}
                for part in ("background", "body", "accessory", "head", "glasses")
            ],
            "internalType": "struct INounsSeeder.Seed",
            "name": "",
            "type": "tuple",
        }],
        "stateMutability": "view",
        "type": "function",
    },
]

_TIMELOCK_TX = [
    ("address", "target"), ("uint256", "value"), ("string", "signature"),
    ("bytes", "data"), ("uint256", "eta"),
]

TREASURY_V1_ABI = [
    _function("setDelay", [("uint256", "delay_")]),
    _function("setPendingAdmin", [("address", "pendingAdmin_")]),
    _function("acceptAdmin", []),
    _function("queueTransaction", _TIMELOCK_TX),
    _function("executeTransaction", _TIMELOCK_TX),
    _function("cancelTransaction", _TIMELOCK_TX),
]

FORK_ESCROW_ABI = [
    _function("closeEscrow", []),
    _function("returnTokensToOwner", [("address", "owner"), ("uint256[]", "tokenIds")]),
    _function("withdrawTokens", [("uint256[]", "tokenIds"), ("address", "to")]),
]

FORK_DAO_DEPLOYER_ABI = [
    _function("deployForkDAO", [("uint256", "forkingPeriodEndTimestamp"), ("address", "forkEscrow")]),
]

ENS_REGISTRY_ABI = [
    _function("setOwner", [("bytes32", "node"), ("address", "owner")]),
    _function("setResolver", [("bytes32", "node"), ("address", "resolver")]),
    _function("setSubnodeOwner", [("bytes32", "node"), ("bytes32", "label"), ("address", "owner")]),
    _function("setTTL", [("bytes32", "node"), ("uint64", "ttl")]),
    _function("setApprovalForAll", [("address", "operator"), ("bool", "approved")]),
]
