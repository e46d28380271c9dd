"""
Schema-Based Decoder

Decodes a call's parameters against a registered FunctionSchema using
eth_abi. Any failure (no schema, malformed calldata) yields None so the
action decoder can fall back to manual decoding; partial output is never
returned.
"""

from eth_abi import decode as abi_decode
from eth_utils import to_checksum_address
from typing import Any, Dict, List, Optional
import logging

from .base import (
    CallDescriptor,
    FunctionSchema,
    ParameterSchema,
    DecodedParameter,
    DecodedValue,
    IntegerValue,
    AddressValue,
    BoolValue,
    BytesValue,
    StringValue,
    ArrayValue,
    TupleValue,
    hex_to_bytes,
    WORD_SIZE,
    SELECTOR_SIZE,
)
from .recipient_classifier import is_recipient, recipient_role
from .value_formatter import format_parameter

logger = logging.getLogger(__name__)


def resolve_function(descriptor: CallDescriptor, registry, data: bytes) -> Optional[FunctionSchema]:
    """Find the schema by exact signature, or by selector when there is none"""
    if descriptor.signature:
        return registry.lookup_function(descriptor.target, descriptor.signature)
    if len(data) < SELECTOR_SIZE:
        return None
    return registry.lookup_function_by_selector(descriptor.target, data[:SELECTOR_SIZE])


def parameter_payload(data: bytes, schema: FunctionSchema, has_signature: bool) -> bytes:
    """
    Strip the selector when the calldata carries one.

    Without a signature the schema was found by selector, so it is always
    present. With a signature, the data only counts as selector-prefixed
    when it starts with the selector and the remainder is whole 32-byte
    words.
    """
    if not has_signature:
        return data[SELECTOR_SIZE:]
    if data[:SELECTOR_SIZE] == schema.selector and (len(data) - SELECTOR_SIZE) % WORD_SIZE == 0:
        return data[SELECTOR_SIZE:]
    return data


def to_decoded_value(value: Any, schema: ParameterSchema) -> DecodedValue:
    """
    Convert an eth_abi result into the DecodedValue union.

    Raises:
        ValueError: if the value does not match the schema
    """
    if schema.is_array:
        element = schema.element_schema()
        return ArrayValue(items=tuple(to_decoded_value(v, element) for v in value))

    if schema.is_tuple:
        if len(value) != len(schema.components):
            raise ValueError(f"Tuple arity mismatch for {schema.name or 'tuple'}")
        return TupleValue(fields=tuple(
            (component.name or f"field{i}", to_decoded_value(v, component))
            for i, (component, v) in enumerate(zip(schema.components, value))
        ))

    base_type = schema.base_type
    if base_type == "address":
        return AddressValue(address=to_checksum_address(value))
    if base_type == "bool":
        return BoolValue(value=bool(value))
    if base_type == "string":
        return StringValue(value=value)
    if base_type.startswith("bytes"):
        return BytesValue(data=bytes(value))
    if base_type.startswith("uint") or base_type.startswith("int"):
        return IntegerValue(value=int(value), signed=base_type.startswith("int"))

    raise ValueError(f"Unsupported ABI type: {schema.declared_type}")


def build_parameter(
    schema: ParameterSchema,
    value: DecodedValue,
    index: int,
    function_name: str,
    registry=None,
    amount_decimals: Optional[Dict[str, int]] = None,
) -> DecodedParameter:
    """Annotate one decoded value with display text and recipient flags"""
    name = schema.name or f"param{index}"
    is_recip = is_recipient(function_name, name, schema.declared_type, index)
    return DecodedParameter(
        name=name,
        declared_type=schema.declared_type,
        base_type=schema.base_type,
        raw_value=value,
        display_value=format_parameter(value, function_name, name, registry, amount_decimals),
        is_recipient=is_recip,
        recipient_role=recipient_role(function_name, name) if is_recip else None,
    )


def decode_with_schema(
    descriptor: CallDescriptor,
    registry,
    function_name: str = "",
    amount_decimals: Optional[Dict[str, int]] = None,
) -> Optional[List[DecodedParameter]]:
    """
    Decode parameters using the registry schema for descriptor.target.

    Args:
        descriptor: Raw call
        registry: SchemaRegistry snapshot
        function_name: Name used for recipient/format heuristics; defaults
            to the resolved schema's name
        amount_decimals: USD overlay table override

    Returns:
        One DecodedParameter per schema input, or None if unavailable
    """
    if registry.lookup(descriptor.target) is None:
        return None

    try:
        data = hex_to_bytes(descriptor.calldata)
    except ValueError:
        logger.debug(f"Invalid calldata hex for {descriptor.target[:10]}...")
        return None

    schema = resolve_function(descriptor, registry, data)
    if schema is None:
        return None

    function_name = function_name or schema.name
    payload = parameter_payload(data, schema, bool(descriptor.signature))

    try:
        raw_values = abi_decode([p.canonical_type for p in schema.inputs], payload)
        values = [to_decoded_value(v, p) for v, p in zip(raw_values, schema.inputs)]
    except Exception as e:
        logger.debug(f"Schema decode failed for {schema.signature} on {descriptor.target[:10]}...: {e}")
        return None

    return [
        build_parameter(param_schema, value, idx, function_name, registry, amount_decimals)
        for idx, (param_schema, value) in enumerate(zip(schema.inputs, values))
    ]
