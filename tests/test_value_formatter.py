"""
Unit tests for the value formatter.

Tests:
- Unit helpers (USD, token units, ETH values)
- Type-specific rendering for every DecodedValue variant
- Amount overlay: strategy table, threshold fallback, nested values
"""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from govdash.config.contracts_config import GOVERNANCE_CONTRACTS
from govdash.services.decoders.base import (
    IntegerValue,
    AddressValue,
    BoolValue,
    BytesValue,
    StringValue,
    ArrayValue,
    TupleValue,
    OpaqueValue,
)
from govdash.services.decoders.registry import build_default_registry
from govdash.services.decoders.value_formatter import (
    FormatContext,
    format_value,
    format_parameter,
    format_usd_amount,
    format_token_units,
    format_token_amount,
    format_eth_value,
)

UNKNOWN_ADDRESS = "0x1234567890123456789012345678901234567890"


class TestUnitHelpers:
    """Test currency and unit helpers."""

    def test_usd_amount(self):
        """6-decimal amounts render as dollars."""
        assert format_usd_amount(9000000000) == "$9,000.00"
        assert format_usd_amount(1234567) == "$1.23"
        assert format_usd_amount(0) == "$0.00"

    def test_token_units(self):
        """18-decimal amounts render with 4 fixed decimals."""
        assert format_token_units(2500000000000000000) == "2.5000 tokens"
        assert format_token_units(10**18 * 1500) == "1500.0000 tokens"

    def test_token_amount(self):
        """Token amounts are grouped with trailing zeros stripped."""
        assert format_token_amount(10_000_000_000, 6) == "10,000"
        assert format_token_amount(1_500_000, 6) == "1.5"
        assert format_token_amount(1234560000000000000, 18) == "1.2346"

    def test_uint256_amounts_are_exact(self):
        """Amounts wider than the default decimal precision neither raise nor round."""
        max_uint = 2**256 - 1
        assert format_token_amount(max_uint, 0) == f"{max_uint:,}"
        assert format_token_amount(10**60, 6) == f"{10**54:,}"
        assert format_token_units(10**60, 18) == "1" + "0" * 42 + ".0000 tokens"
        assert format_usd_amount(10**60, 6) == f"${10**54:,}.00"
        assert format_eth_value(str(max_uint)).endswith(" ETH")

    @pytest.mark.parametrize("wei,expected", [
        ("0", "0 ETH"),
        ("", "0 ETH"),
        ("000", "0 ETH"),
        ("1000000000000000000", "1 ETH"),
        ("1500000000000000000", "1.5 ETH"),
        ("1234500000000000000000", "1,234.5 ETH"),
        ("100000000000000", "0.0001 ETH"),
        ("1000", "1000 wei"),
        ("not-a-number", "not-a-number"),
    ])
    def test_eth_value(self, wei, expected):
        """ETH values: zero, small amounts in wei, otherwise up to 4 decimals."""
        assert format_eth_value(wei) == expected


class TestScalarFormatting:
    """Test scalar DecodedValue rendering."""

    def test_integer_grouping(self):
        """Integers get group separators."""
        assert format_value(IntegerValue(1234567)) == "1,234,567"
        assert format_value(IntegerValue(-42, signed=True)) == "-42"

    def test_bool(self):
        """Bools render lower-case."""
        assert format_value(BoolValue(True)) == "true"
        assert format_value(BoolValue(False)) == "false"

    def test_known_address_gets_name(self):
        """Registered addresses render with their display name."""
        registry = build_default_registry()
        payer = GOVERNANCE_CONTRACTS["Payer"]["address"]
        context = FormatContext(registry=registry)

        assert format_value(AddressValue(payer), context) == f"{payer} (Payer)"
        assert format_value(AddressValue(UNKNOWN_ADDRESS), context) == UNKNOWN_ADDRESS

    def test_address_without_registry(self):
        """Without a registry addresses render raw."""
        assert format_value(AddressValue(UNKNOWN_ADDRESS)) == UNKNOWN_ADDRESS

    def test_short_bytes_render_in_full(self):
        """Up to 33 bytes the full hex is shown."""
        data = bytes(range(33))
        assert format_value(BytesValue(data)) == "0x" + data.hex()

    def test_long_bytes_truncate(self):
        """Beyond 33 bytes: first 4 ... last 4 (N bytes)."""
        data = bytes.fromhex("deadbeef") + bytes(60) + bytes.fromhex("cafebabe")
        assert format_value(BytesValue(data)) == "0xdeadbeef...cafebabe (68 bytes)"

    def test_long_string_truncates(self):
        """Strings over 50 characters keep the first 47 plus an ellipsis."""
        text = "x" * 51
        rendered = format_value(StringValue(text))
        assert rendered == "x" * 47 + "..."
        assert len(rendered) == 50
        assert format_value(StringValue("x" * 50)) == "x" * 50

    def test_opaque(self):
        """Opaque words render as raw hex."""
        assert format_value(OpaqueValue("0x" + "ab" * 32)) == "0x" + "ab" * 32


class TestCompositeFormatting:
    """Test arrays and tuples."""

    def test_empty_array(self):
        assert format_value(ArrayValue(())) == "[]"

    def test_short_array_inline(self):
        """Up to 3 items are rendered element-wise."""
        value = ArrayValue((IntegerValue(1), IntegerValue(2), IntegerValue(3)))
        assert format_value(value) == "[1, 2, 3]"

    def test_long_array_counted(self):
        """More than 3 items collapse to a count."""
        value = ArrayValue(tuple(IntegerValue(i) for i in range(4)))
        assert format_value(value) == "[4 items]"

    def test_tuple_truncates_after_two_fields(self):
        """Tuples show the first two fields."""
        value = TupleValue((
            ("limit", IntegerValue(5)),
            ("enabled", BoolValue(True)),
            ("label", StringValue("x")),
        ))
        assert format_value(value) == "{ limit: 5, enabled: true, ... }"

    def test_tuple_two_fields(self):
        value = TupleValue((("limit", IntegerValue(5)), ("enabled", BoolValue(False))))
        assert format_value(value) == "{ limit: 5, enabled: false }"

    def test_nested_values_skip_amount_overlay(self):
        """Array elements never get the token overlay."""
        value = ArrayValue((IntegerValue(2500000000000000000),))
        assert format_value(value, FormatContext()) == "[2,500,000,000,000,000,000]"


class TestAmountOverlay:
    """Test the heuristic amount overlay on top-level integers."""

    def test_usd_table_for_payment_amount(self):
        """sendOrRegisterDebt amounts are 6-decimal USD."""
        rendered = format_parameter(IntegerValue(9000000000), "sendOrRegisterDebt", "amount")
        assert rendered == "9,000,000,000 ($9,000.00)"

    def test_usd_table_requires_amount_name(self):
        """Non-amount parameters of table functions are not scaled."""
        rendered = format_parameter(IntegerValue(9000000000), "sendOrRegisterDebt", "nonce")
        assert rendered == "9,000,000,000"

    def test_custom_strategy_table(self):
        """The decimals table is pluggable."""
        rendered = format_parameter(
            IntegerValue(2500000), "payContributor", "amount", amount_decimals={"payContributor": 6}
        )
        assert rendered == "2,500,000 ($2.50)"

    def test_large_integers_read_as_tokens(self):
        """Values above 10^15 with no convention assume 18 decimals."""
        rendered = format_parameter(IntegerValue(2500000000000000000), "transfer", "amount")
        assert rendered == "2,500,000,000,000,000,000 (2.5000 tokens)"
        assert "2.5000 tokens" in rendered

    def test_threshold_is_exclusive(self):
        """10^15 itself is below the token heuristic."""
        assert format_parameter(IntegerValue(10**15), "transfer", "amount") == "1,000,000,000,000,000"
