"""
Base classes and data structures for proposal action decoding.
Provides the shared data model for the schema registry, the schema-based and
manual decoders, the action decoder and the batch correlator.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Any, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum
import re
import logging

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
WORD_SIZE = 32
SELECTOR_SIZE = 4

_ARRAY_SUFFIX = re.compile(r"\[\d*\]$")


# ============================================================================
# ENUMS
# ============================================================================

class ContractCategory(Enum):
    """Where a contract schema came from"""
    KNOWN_INTERNAL = "known-internal"  # Built-in governance contracts
    KNOWN_EXTERNAL = "known-external"  # Tokens / verified external contracts
    UNKNOWN = "unknown"


class ActionCategory(str, Enum):
    """Action categories for grouping and iconography"""
    PAYMENT = "payment"
    STREAM = "stream"
    GOVERNANCE_ADMIN = "governance-admin"
    MINT = "mint"
    APPROVAL = "approval"
    DELEGATION = "delegation"
    OWNERSHIP = "ownership"
    TREASURY = "treasury"
    UNKNOWN = "unknown"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class SchemaDefinitionError(ValueError):
    """Raised when a raw ABI definition cannot be turned into function schemas"""


# ============================================================================
# INPUT
# ============================================================================

@dataclass(frozen=True)
class CallDescriptor:
    """One raw executable action of a proposal or candidate"""
    target: str
    value: str = "0"
    signature: str = ""
    calldata: str = "0x"


# ============================================================================
# SCHEMAS
# ============================================================================

@dataclass(frozen=True)
class ParameterSchema:
    """
    One function input.

    declared_type keeps the ABI spelling ("address[]", "tuple[]");
    base_type drops array suffixes ("address", "tuple").
    """
    name: str
    declared_type: str
    base_type: str
    components: Tuple["ParameterSchema", ...] = ()

    @property
    def is_array(self) -> bool:
        return self.declared_type.endswith("]")

    @property
    def is_tuple(self) -> bool:
        return self.base_type == "tuple"

    @property
    def canonical_type(self) -> str:
        """Type string used for selectors and eth_abi ("(uint256,address)[]")"""
        if not self.is_tuple:
            return self.declared_type
        inner = ",".join(c.canonical_type for c in self.components)
        return f"({inner}){self.declared_type[len('tuple'):]}"

    def element_schema(self) -> "ParameterSchema":
        """Schema of one element of an array parameter"""
        return ParameterSchema(
            name=self.name,
            declared_type=_ARRAY_SUFFIX.sub("", self.declared_type),
            base_type=self.base_type,
            components=self.components,
        )


@dataclass(frozen=True)
class FunctionSchema:
    """Known function: name, ordered inputs and 4-byte selector"""
    name: str
    inputs: Tuple[ParameterSchema, ...]
    signature: str
    selector: bytes

    @property
    def arity(self) -> int:
        return len(self.inputs)

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()


@dataclass(frozen=True)
class ContractSchemaEntry:
    """All known function schemas for one contract address"""
    address: str
    display_name: str
    description: str
    category: ContractCategory
    functions: Dict[str, FunctionSchema] = field(default_factory=dict)

    def function_by_selector(self, selector: bytes) -> Optional[FunctionSchema]:
        for schema in self.functions.values():
            if schema.selector == selector:
                return schema
        return None


# ============================================================================
# DECODED VALUES (closed union)
# ============================================================================

@dataclass(frozen=True)
class IntegerValue:
    value: int
    signed: bool = False

    def to_python(self) -> Any:
        return str(self.value)


@dataclass(frozen=True)
class AddressValue:
    address: str

    def to_python(self) -> Any:
        return self.address


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class BytesValue:
    data: bytes

    @property
    def hex(self) -> str:
        return "0x" + self.data.hex()

    def to_python(self) -> Any:
        return self.hex


@dataclass(frozen=True)
class StringValue:
    value: str

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    items: Tuple["DecodedValue", ...]

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class TupleValue:
    fields: Tuple[Tuple[str, "DecodedValue"], ...]

    def to_python(self) -> Any:
        return {name: value.to_python() for name, value in self.fields}


@dataclass(frozen=True)
class OpaqueValue:
    """Raw 32-byte word the manual decoder could not interpret"""
    raw_hex: str

    def to_python(self) -> Any:
        return self.raw_hex


DecodedValue = Union[
    IntegerValue, AddressValue, BoolValue, BytesValue,
    StringValue, ArrayValue, TupleValue, OpaqueValue,
]


# ============================================================================
# DECODED OUTPUT
# ============================================================================

@dataclass(frozen=True)
class DecodedParameter:
    """One decoded, formatted function argument"""
    name: str
    declared_type: str
    base_type: str
    raw_value: DecodedValue
    display_value: str
    is_recipient: bool = False
    recipient_role: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'type': self.declared_type,
            'base_type': self.base_type,
            'value': self.raw_value.to_python(),
            'display_value': self.display_value,
            'is_recipient': self.is_recipient,
            'recipient_role': self.recipient_role,
        }


@dataclass(frozen=True)
class DecodedAction:
    """
    Fully decoded proposal action ready for display.

    category, summary, function_description and parameter recipient roles
    are only ever changed by the batch correlator, which returns copies.
    """
    target: str
    contract_name: str
    contract_description: str
    value: str
    value_formatted: str
    signature: str
    function_name: str
    function_description: str
    parameters: Tuple[DecodedParameter, ...]
    calldata: str
    category: ActionCategory
    summary: str
    is_known_contract: bool

    def find_parameter(self, *names: str) -> Optional[DecodedParameter]:
        """First parameter whose name matches one of names"""
        for param in self.parameters:
            if param.name in names:
                return param
        return None

    def to_dict(self) -> dict:
        return {
            'target': self.target,
            'contract_name': self.contract_name,
            'contract_description': self.contract_description,
            'value': self.value,
            'value_formatted': self.value_formatted,
            'signature': self.signature,
            'function_name': self.function_name,
            'function_description': self.function_description,
            'parameters': [p.to_dict() for p in self.parameters],
            'calldata': self.calldata,
            'category': self.category.value,
            'summary': self.summary,
            'is_known_contract': self.is_known_contract,
        }


@dataclass(frozen=True)
class DecodedBatch:
    """Decoded and correlated actions of one proposal or candidate"""
    actions: List[DecodedAction]
    recipients: List[str]
    summary: str

    def to_dict(self) -> dict:
        return {
            'actions': [a.to_dict() for a in self.actions],
            'recipients': list(self.recipients),
            'summary': self.summary,
        }


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def wei_to_eth(wei: int) -> Decimal:
    """Convert wei to ETH"""
    return Decimal(wei) / Decimal(10**18)


def format_address(address: str, length: int = 6) -> str:
    """Format address for display"""
    if not address:
        return ""
    if len(address) < 10:
        return address
    return f"{address[:length]}...{address[-4:]}"


def extract_function_name(signature: str) -> str:
    """'transfer(address,uint256)' -> 'transfer'"""
    if not signature:
        return ""
    name, paren, _ = signature.partition("(")
    return name.strip() if paren else signature.strip()


def normalize_signature(signature: str) -> str:
    """Strip whitespace so 'f(address, uint256)' matches 'f(address,uint256)'"""
    return "".join(signature.split())


def hex_to_bytes(data: str) -> bytes:
    """
    Convert 0x-prefixed (or bare) hex to bytes.

    Raises:
        ValueError: for odd-length or non-hex input
    """
    text = (data or "").strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    return bytes.fromhex(text)
