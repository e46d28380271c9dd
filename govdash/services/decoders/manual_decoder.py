"""
Manual Fallback Decoder

Word-by-word decoding for calls with no usable schema. Types come from the
signature's parameter list; each parameter is read from one 32-byte word.
Only static scalar types are interpreted (address, uintN, intN, bool,
bytesN). Everything else, and any missing or malformed word, is kept as an
opaque raw word.
"""

from eth_utils import to_checksum_address
from typing import Dict, List, Optional
import re
import logging

from .base import (
    CallDescriptor,
    DecodedParameter,
    DecodedValue,
    IntegerValue,
    AddressValue,
    BoolValue,
    BytesValue,
    OpaqueValue,
    ParameterSchema,
    normalize_signature,
    WORD_SIZE,
    SELECTOR_SIZE,
)
from .registry import compute_selector
from .schema_decoder import build_parameter

logger = logging.getLogger(__name__)

_PARAM_LIST = re.compile(r"\(([^)]*)\)")
_INT_TYPE = re.compile(r"^(u?)int(\d*)$")
_FIXED_BYTES = re.compile(r"^bytes(\d+)$")

# Parameter names by full signature (overloads differ)
SIGNATURE_PARAM_NAMES: Dict[str, List[str]] = {
    'createStream(address,uint256,address,uint256,uint256)': [
        'recipient', 'tokenAmount', 'tokenAddress', 'startTime', 'stopTime',
    ],
    'createStream(address,uint256,address,uint256,uint256,uint8,address)': [
        'recipient', 'tokenAmount', 'tokenAddress', 'startTime', 'stopTime',
        'nonce', 'predictedStreamAddress',
    ],
    'createStream(address,address,uint256,address,uint256,uint256,uint8)': [
        'payer', 'recipient', 'tokenAmount', 'tokenAddress', 'startTime', 'stopTime', 'nonce',
    ],
    'createStream(address,address,uint256,address,uint256,uint256,uint8,address)': [
        'payer', 'recipient', 'tokenAmount', 'tokenAddress', 'startTime', 'stopTime',
        'nonce', 'predictedStreamAddress',
    ],
    'transferFrom(address,address,uint256)': ['from', 'to', 'tokenId'],
    'sendERC20(address,address,uint256)': ['recipient', 'erc20Token', 'tokensToSend'],
}

# Common parameter names by function name (governance conventions)
COMMON_PARAM_NAMES: Dict[str, List[str]] = {
    'transfer': ['recipient', 'amount'],
    'transferFrom': ['from', 'to', 'tokenId'],
    'approve': ['spender', 'amount'],
    'delegate': ['delegatee'],
    'sendOrRegisterDebt': ['account', 'amount'],
    'sendETH': ['recipient', 'ethToSend'],
    'setPendingAdmin': ['newAdmin'],
    '_setPendingAdmin': ['newPendingAdmin'],
    'setVotingDelay': ['newVotingDelay'],
    '_setVotingDelay': ['newVotingDelay'],
    'setVotingPeriod': ['newVotingPeriod'],
    '_setVotingPeriod': ['newVotingPeriod'],
    'setProposalThresholdBPS': ['newProposalThresholdBPS'],
    '_setProposalThresholdBPS': ['newProposalThresholdBPS'],
    'transferOwnership': ['newOwner'],
}


def parse_signature_types(signature: str) -> List[str]:
    """'f(address, uint256)' -> ['address', 'uint256']; [] if unparseable"""
    if not signature:
        return []
    match = _PARAM_LIST.search(signature)
    if not match:
        return []
    return [t.strip() for t in match.group(1).split(",") if t.strip()]


def parameter_names(signature: str, function_name: str) -> List[str]:
    return (
        SIGNATURE_PARAM_NAMES.get(normalize_signature(signature))
        or COMMON_PARAM_NAMES.get(function_name)
        or []
    )


def decode_word(param_type: str, word: Optional[bytes]) -> DecodedValue:
    """Interpret one 32-byte word as a static scalar type"""
    if word is None or len(word) != WORD_SIZE:
        return OpaqueValue(raw_hex="0x" + (word or b"").hex())

    if param_type == "address":
        return AddressValue(address=to_checksum_address("0x" + word[-20:].hex()))

    if param_type == "bool":
        return BoolValue(value=any(word))

    int_match = _INT_TYPE.match(param_type)
    if int_match:
        signed = int_match.group(1) == ""
        return IntegerValue(value=int.from_bytes(word, "big", signed=signed), signed=signed)

    bytes_match = _FIXED_BYTES.match(param_type)
    if bytes_match:
        size = int(bytes_match.group(1))
        if 1 <= size <= WORD_SIZE:
            return BytesValue(data=word[:size])

    return OpaqueValue(raw_hex="0x" + word.hex())


def strip_selector(data: bytes, signature: str) -> bytes:
    """Drop the 4-byte selector if the calldata appears to carry one"""
    if len(data) >= SELECTOR_SIZE and data[:SELECTOR_SIZE] == compute_selector(signature):
        return data[SELECTOR_SIZE:]
    if len(data) % WORD_SIZE == SELECTOR_SIZE:
        return data[SELECTOR_SIZE:]
    return data


def decode_manually(
    descriptor: CallDescriptor,
    registry=None,
    function_name: str = "",
    amount_decimals: Optional[Dict[str, int]] = None,
) -> List[DecodedParameter]:
    """
    Decode parameters one word at a time from the signature's type list.

    Returns:
        One DecodedParameter per type in the signature, or [] when the
        signature is unparseable or there is no calldata
    """
    types = parse_signature_types(descriptor.signature)
    calldata = (descriptor.calldata or "").strip()
    if not types or calldata.lower() in ("", "0x"):
        return []

    text = calldata[2:] if calldata[:2].lower() == "0x" else calldata
    try:
        data = bytes.fromhex(text)
    except ValueError:
        # Keep the valid hex prefix
        valid = re.match(r"^[0-9a-fA-F]*", text).group(0)
        data = bytes.fromhex(valid[:len(valid) - len(valid) % 2])
        logger.debug(f"Calldata for {descriptor.target[:10]}... is not valid hex, "
                     f"using first {len(data)} bytes")

    data = strip_selector(data, descriptor.signature)
    names = parameter_names(descriptor.signature, function_name)

    parameters = []
    for index, param_type in enumerate(types):
        start = index * WORD_SIZE
        word = data[start:start + WORD_SIZE] or None
        value = decode_word(param_type, word)
        schema = ParameterSchema(
            name=names[index] if index < len(names) else f"param{index}",
            declared_type=param_type,
            base_type=param_type,
        )
        parameters.append(build_parameter(schema, value, index, function_name, registry, amount_decimals))

    return parameters
