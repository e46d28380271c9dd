"""
Recipient Classifier

Identifies which parameters of a function call are recipient addresses
(payment, delegation or ownership destinations). Flagged addresses are
handed to the name-resolution layer for display.
"""

from typing import Dict, List, Iterable
import logging

from .base import AddressValue, ArrayValue, DecodedParameter

logger = logging.getLogger(__name__)


# Recipient parameter positions for well-known function shapes
RECIPIENT_FUNCTIONS: Dict[str, List[int]] = {
    # ERC20/Token transfers
    'transfer': [0],
    'transferFrom': [1],  # (from, to, amount/tokenId)
    'send': [0],
    'safeTransfer': [1],
    'safeTransferFrom': [1],

    # Payment functions
    'sendOrRegisterDebt': [0],
    'pay': [0],
    'sendPayment': [0],
    'sendETH': [0],
    'sendERC20': [0],

    # Approval functions
    'approve': [0],
    'setApprovalForAll': [0],

    # Delegation
    'delegate': [0],
    'delegateBySig': [0],

    # Minting
    'mint': [0],
    'mintTo': [0],
    'safeMint': [0],

    # Admin functions
    'transferOwnership': [0],
    'grantRole': [1],  # (role, account)
}

# Parameter names that denote a recipient (compared lower-case)
RECIPIENT_PARAM_NAMES = frozenset({
    'recipient',
    'to',
    'account',
    'spender',
    'delegatee',
    'receiver',
    'beneficiary',
    'owner',
    'newowner',
    'target',
    'destination',
})

PAYMENT_FUNCTIONS = frozenset({
    'transfer',
    'transferFrom',
    'send',
    'sendOrRegisterDebt',
    'pay',
    'sendPayment',
    'sendETH',
    'sendERC20',
    'safeTransfer',
    'safeTransferFrom',
})

DELEGATION_FUNCTIONS = frozenset({
    'delegate',
    'delegateBySig',
})


def is_recipient(function_name: str, param_name: str, param_type: str, param_index: int) -> bool:
    """
    Check if a parameter is a recipient address.

    Either rule qualifies: the function's known recipient positions, or the
    parameter name. Only plain 'address' parameters can qualify.
    """
    if param_type != 'address':
        return False

    if param_index in RECIPIENT_FUNCTIONS.get(function_name, ()):
        return True

    return (param_name or '').lower() in RECIPIENT_PARAM_NAMES


def is_payment_function(function_name: str) -> bool:
    return function_name in PAYMENT_FUNCTIONS


def is_delegation_function(function_name: str) -> bool:
    return function_name in DELEGATION_FUNCTIONS


def recipient_role(function_name: str, param_name: str) -> str:
    """Short display label for what a recipient parameter represents"""
    lower_name = (param_name or '').lower()

    if 'spender' in lower_name:
        return 'Approved Spender'
    if 'delegatee' in lower_name:
        return 'Voting Delegate'
    if 'owner' in lower_name:
        return 'New Owner'
    if 'beneficiary' in lower_name:
        return 'Beneficiary'

    if is_payment_function(function_name):
        return 'Recipient'
    if is_delegation_function(function_name):
        return 'Delegate'
    if 'mint' in function_name.lower():
        return 'Recipient'
    if 'burn' in function_name.lower():
        return 'From'

    return 'Address'


def extract_recipient_addresses(parameters: Iterable[DecodedParameter]) -> List[str]:
    """Addresses of all flagged recipient parameters, including address arrays"""
    recipients = []
    for param in parameters:
        if not param.is_recipient:
            continue
        value = param.raw_value
        if isinstance(value, AddressValue):
            recipients.append(value.address)
        elif isinstance(value, ArrayValue):
            recipients.extend(v.address for v in value.items if isinstance(v, AddressValue))
    return recipients
