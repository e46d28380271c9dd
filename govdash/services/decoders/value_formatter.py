"""
Value Formatter - renders decoded values as display strings.

Type-specific rendering is a singledispatch visitor over the DecodedValue
union. On top of it sits an amount overlay for top-level integer
parameters: a function-name -> decimals strategy table for USD-pegged
amounts, and a threshold fallback that reads very large integers as
18-decimal token amounts. The overlay is a best-effort display heuristic;
the raw value is always shown first.
"""

from decimal import Decimal, localcontext
from dataclasses import dataclass, replace
from functools import singledispatch
from typing import Dict, Optional, TYPE_CHECKING
import logging

from .base import (
    IntegerValue,
    AddressValue,
    BoolValue,
    BytesValue,
    StringValue,
    ArrayValue,
    TupleValue,
    OpaqueValue,
    wei_to_eth,
)
from govdash.config.contracts_config import (
    USD_AMOUNT_DECIMALS,
    GENERIC_TOKEN_THRESHOLD,
    GENERIC_TOKEN_DECIMALS,
)

if TYPE_CHECKING:
    from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

MAX_INLINE_ITEMS = 3
MAX_TUPLE_FIELDS = 2
MAX_BYTES_LENGTH = 33
MAX_STRING_LENGTH = 50
MIN_DISPLAY_ETH = Decimal("0.0001")


@dataclass(frozen=True)
class FormatContext:
    """
    What the formatter knows about the value being rendered.

    registry resolves known addresses to names. amount_decimals is the
    USD overlay table (function name -> decimals); None means the default
    table. top_level is False for array elements and tuple fields, which
    never get the amount overlay.
    """
    function_name: str = ""
    param_name: str = ""
    registry: Optional["SchemaRegistry"] = None
    amount_decimals: Optional[Dict[str, int]] = None
    top_level: bool = True

    def nested(self, param_name: Optional[str] = None) -> "FormatContext":
        return replace(
            self,
            param_name=self.param_name if param_name is None else param_name,
            top_level=False,
        )


# ============================================================================
# UNIT HELPERS
# ============================================================================

def _scale(raw: int, decimals: int) -> Decimal:
    """raw / 10**decimals, exact for any uint256"""
    with localcontext() as ctx:
        ctx.prec = len(str(abs(raw))) + max(decimals, 0) + 8
        return Decimal(raw) / (Decimal(10) ** decimals)


def format_usd_amount(raw: int, decimals: int = 6) -> str:
    """9000000000 -> '$9,000.00'"""
    return f"${_scale(raw, decimals):,.2f}"


def format_token_units(raw: int, decimals: int = 18) -> str:
    """2500000000000000000 -> '2.5000 tokens'"""
    return f"{_scale(raw, decimals):.4f} tokens"


def format_token_amount(raw: int, decimals: int = 18) -> str:
    """Scaled amount with grouping and up to 4 decimals: 1500000 (6) -> '1.5'"""
    amount = _scale(raw, decimals)
    with localcontext() as ctx:
        ctx.prec = len(str(abs(raw))) + 8
        amount = amount.quantize(MIN_DISPLAY_ETH)
    text = f"{amount:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_eth_value(value: str) -> str:
    """
    Format a wei amount (decimal string) as ETH.

    Returns:
        '0 ETH' for zero or empty, '<n> wei' below 0.0001 ETH, otherwise up
        to 4 decimals with grouping. Unparseable input is returned as-is.
    """
    if not value or value == "0":
        return "0 ETH"

    try:
        wei = int(value)
    except (TypeError, ValueError):
        return value

    if wei == 0:
        return "0 ETH"

    if abs(wei_to_eth(wei)) < MIN_DISPLAY_ETH:
        return f"{wei} wei"

    return f"{format_token_amount(wei, 18)} ETH"


def _usd_decimals(context: FormatContext) -> Optional[int]:
    table = USD_AMOUNT_DECIMALS if context.amount_decimals is None else context.amount_decimals
    if context.function_name not in table:
        return None
    if "amount" not in (context.param_name or "").lower():
        return None
    return table[context.function_name]


def _apply_amount_overlay(value: int, grouped: str, context: FormatContext) -> str:
    decimals = _usd_decimals(context)
    if decimals is not None:
        return f"{grouped} ({format_usd_amount(value, decimals)})"
    if value > GENERIC_TOKEN_THRESHOLD:
        return f"{grouped} ({format_token_units(value, GENERIC_TOKEN_DECIMALS)})"
    return grouped


# ============================================================================
# VISITOR
# ============================================================================

@singledispatch
def format_value(value, context: Optional[FormatContext] = None) -> str:
    """Render a DecodedValue for display"""
    return str(value)


@format_value.register
def _(value: IntegerValue, context: Optional[FormatContext] = None) -> str:
    context = context or FormatContext()
    grouped = f"{value.value:,}"
    if not context.top_level:
        return grouped
    return _apply_amount_overlay(value.value, grouped, context)


@format_value.register
def _(value: AddressValue, context: Optional[FormatContext] = None) -> str:
    context = context or FormatContext()
    if context.registry is not None:
        entry = context.registry.lookup(value.address)
        if entry is not None:
            return f"{value.address} ({entry.display_name})"
    return value.address


@format_value.register
def _(value: BoolValue, context: Optional[FormatContext] = None) -> str:
    return "true" if value.value else "false"


@format_value.register
def _(value: BytesValue, context: Optional[FormatContext] = None) -> str:
    data = value.data
    if len(data) > MAX_BYTES_LENGTH:
        return f"0x{data[:4].hex()}...{data[-4:].hex()} ({len(data)} bytes)"
    return value.hex


@format_value.register
def _(value: StringValue, context: Optional[FormatContext] = None) -> str:
    if len(value.value) > MAX_STRING_LENGTH:
        return value.value[:MAX_STRING_LENGTH - 3] + "..."
    return value.value


@format_value.register
def _(value: ArrayValue, context: Optional[FormatContext] = None) -> str:
    context = context or FormatContext()
    if not value.items:
        return "[]"
    if len(value.items) > MAX_INLINE_ITEMS:
        return f"[{len(value.items)} items]"
    inner = context.nested()
    return "[" + ", ".join(format_value(item, inner) for item in value.items) + "]"


@format_value.register
def _(value: TupleValue, context: Optional[FormatContext] = None) -> str:
    context = context or FormatContext()
    shown = [
        f"{name}: {format_value(field_value, context.nested(name))}"
        for name, field_value in value.fields[:MAX_TUPLE_FIELDS]
    ]
    if len(value.fields) > MAX_TUPLE_FIELDS:
        shown.append("...")
    return "{ " + ", ".join(shown) + " }"


@format_value.register
def _(value: OpaqueValue, context: Optional[FormatContext] = None) -> str:
    return value.raw_hex


def format_parameter(
    value,
    function_name: str,
    param_name: str,
    registry: Optional["SchemaRegistry"] = None,
    amount_decimals: Optional[Dict[str, int]] = None,
) -> str:
    """Render one top-level function argument"""
    context = FormatContext(
        function_name=function_name,
        param_name=param_name,
        registry=registry,
        amount_decimals=amount_decimals,
    )
    return format_value(value, context)
