"""
Proposal action decoders for governance proposals and candidates.

Pipeline (leaf to root):
- SchemaRegistry: contract address -> known function schemas
- Value formatter: DecodedValue -> display string (with amount overlay)
- Recipient classifier: which address parameters are recipients
- Schema decoder (eth_abi) with a manual word-by-word fallback
- ActionDecoder: one raw action -> DecodedAction with category and summary
- Batch correlator: links stream creation to stream funding in one batch

Typical use:
    registry = build_default_registry()
    descriptors = build_call_descriptors(targets, values, signatures, calldatas)
    batch = decode_proposal_actions(descriptors, ActionDecoder(registry))
"""

from .base import (
    # Enums
    ContractCategory,
    ActionCategory,
    # Exceptions
    SchemaDefinitionError,
    # Dataclasses
    CallDescriptor,
    ParameterSchema,
    FunctionSchema,
    ContractSchemaEntry,
    DecodedParameter,
    DecodedAction,
    DecodedBatch,
    # Decoded values
    DecodedValue,
    IntegerValue,
    AddressValue,
    BoolValue,
    BytesValue,
    StringValue,
    ArrayValue,
    TupleValue,
    OpaqueValue,
    # Helpers
    wei_to_eth,
    format_address,
    extract_function_name,
    normalize_signature,
)

from .registry import (
    SchemaRegistry,
    build_default_registry,
    compute_selector,
    parse_abi_functions,
)

from .value_formatter import (
    FormatContext,
    format_value,
    format_parameter,
    format_usd_amount,
    format_token_units,
    format_token_amount,
    format_eth_value,
)

from .recipient_classifier import (
    is_recipient,
    recipient_role,
    is_payment_function,
    is_delegation_function,
    extract_recipient_addresses,
)

from .schema_decoder import decode_with_schema
from .manual_decoder import decode_manually, parse_signature_types
from .action_decoder import ActionDecoder, classify_action, decode_action
from .batch_correlator import correlate

from .proposal_actions import (
    build_call_descriptors,
    decode_proposal_actions,
    extract_all_recipients,
    get_actions_summary,
)

__all__ = [
    # Enums
    'ContractCategory',
    'ActionCategory',
    'SchemaDefinitionError',
    # Dataclasses
    'CallDescriptor',
    'ParameterSchema',
    'FunctionSchema',
    'ContractSchemaEntry',
    'DecodedParameter',
    'DecodedAction',
    'DecodedBatch',
    'DecodedValue',
    'IntegerValue',
    'AddressValue',
    'BoolValue',
    'BytesValue',
    'StringValue',
    'ArrayValue',
    'TupleValue',
    'OpaqueValue',
    # Helpers
    'wei_to_eth',
    'format_address',
    'extract_function_name',
    'normalize_signature',
    # Registry
    'SchemaRegistry',
    'build_default_registry',
    'compute_selector',
    'parse_abi_functions',
    # Formatting
    'FormatContext',
    'format_value',
    'format_parameter',
    'format_usd_amount',
    'format_token_units',
    'format_token_amount',
    'format_eth_value',
    # Recipients
    'is_recipient',
    'recipient_role',
    'is_payment_function',
    'is_delegation_function',
    'extract_recipient_addresses',
    # Decoding
    'decode_with_schema',
    'decode_manually',
    'parse_signature_types',
    'ActionDecoder',
    'classify_action',
    'decode_action',
    'correlate',
    # Batch API
    'build_call_descriptors',
    'decode_proposal_actions',
    'extract_all_recipients',
    'get_actions_summary',
]
