"""
Action Decoder - turns one raw proposal action into a DecodedAction.

Tries the schema-based decoder first and falls back to manual word
decoding, then classifies the action and builds a one-line summary.
decode() never raises: unexpected failures are logged and produce a
generic action with no parameters.
"""

from typing import Dict, List, Optional
import logging

from .base import (
    ActionCategory,
    CallDescriptor,
    DecodedAction,
    DecodedParameter,
    AddressValue,
    IntegerValue,
    extract_function_name,
    format_address,
    hex_to_bytes,
    SELECTOR_SIZE,
)
from .registry import SchemaRegistry, build_default_registry
from .schema_decoder import decode_with_schema
from .manual_decoder import decode_manually
from .recipient_classifier import is_payment_function, is_delegation_function
from .value_formatter import (
    format_eth_value,
    format_usd_amount,
    format_token_amount,
)
from govdash.config.contracts_config import TOKEN_METADATA, USD_AMOUNT_DECIMALS

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

STREAM_FUNCTIONS = frozenset({'createStream', 'createAndFundStream'})
APPROVAL_FUNCTIONS = frozenset({'approve', 'setApprovalForAll'})
OWNERSHIP_FUNCTIONS = frozenset({'transferOwnership', 'renounceOwnership'})
ADMIN_FUNCTIONS = frozenset({'pause', 'unpause'})

FUNCTION_DESCRIPTIONS: Dict[str, str] = {
    'transfer': 'Transfer tokens',
    'transferFrom': 'Transfer tokens between accounts',
    'safeTransferFrom': 'Transfer token between accounts',
    'approve': 'Approve token spending',
    'setApprovalForAll': 'Approve operator to manage all tokens',
    'delegate': 'Delegate voting power',
    'sendOrRegisterDebt': 'Send USDC payment or register debt',
    'payBackDebt': 'Pay back registered debt',
    'sendETH': 'Send ETH from treasury',
    'sendERC20': 'Send ERC-20 tokens from treasury',
    'createStream': 'Create payment stream',
    'createAndFundStream': 'Create and fund payment stream',
    'deposit': 'Wrap ETH into WETH (ERC-20 wrapped ether)',
    'withdraw': 'Unwrap WETH back into ETH',
    'transferOwnership': 'Transfer contract ownership',
    'renounceOwnership': 'Renounce contract ownership',
}


def classify_action(function_name: str, value: str) -> ActionCategory:
    """Category of an action from its function name (and ETH value)"""
    if not function_name:
        return ActionCategory.PAYMENT if _has_value(value) else ActionCategory.UNKNOWN

    lower_name = function_name.lower()
    if function_name in STREAM_FUNCTIONS:
        return ActionCategory.STREAM
    if is_payment_function(function_name):
        return ActionCategory.PAYMENT
    if function_name in APPROVAL_FUNCTIONS:
        return ActionCategory.APPROVAL
    if is_delegation_function(function_name) or function_name.startswith('delegate'):
        return ActionCategory.DELEGATION
    if 'mint' in lower_name:
        return ActionCategory.MINT
    if function_name in OWNERSHIP_FUNCTIONS:
        return ActionCategory.OWNERSHIP
    if 'withdraw' in lower_name or 'deposit' in lower_name or function_name == 'payBackDebt':
        return ActionCategory.TREASURY
    if function_name.lstrip('_').startswith('set') or function_name in ADMIN_FUNCTIONS:
        return ActionCategory.GOVERNANCE_ADMIN
    return ActionCategory.UNKNOWN


def _has_value(value: str) -> bool:
    try:
        return int(value or "0") != 0
    except (TypeError, ValueError):
        return False


def _display(param: Optional[DecodedParameter]) -> Optional[str]:
    return param.display_value if param is not None else None


def _param_at(parameters: List[DecodedParameter], index: int) -> Optional[DecodedParameter]:
    return parameters[index] if index < len(parameters) else None


def _first_recipient(parameters: List[DecodedParameter]) -> Optional[DecodedParameter]:
    return next((p for p in parameters if p.is_recipient), None)


def _find(parameters: List[DecodedParameter], *names: str) -> Optional[DecodedParameter]:
    return next((p for p in parameters if p.name in names), None)


class ActionDecoder:
    """
    Decodes proposal actions against a schema registry.

    The registry is read-only from the decoder's point of view, so one
    decoder can be shared across threads while the registry is populated
    at runtime.
    """

    def __init__(self, registry: Optional[SchemaRegistry] = None,
                 amount_decimals: Optional[Dict[str, int]] = None):
        self.registry = registry if registry is not None else build_default_registry()
        self.amount_decimals = dict(USD_AMOUNT_DECIMALS if amount_decimals is None else amount_decimals)

    def decode(self, descriptor: CallDescriptor) -> DecodedAction:
        """Decode one action; never raises"""
        try:
            return self._decode(descriptor)
        except Exception as e:
            logger.error(f"Error decoding action on {descriptor.target}: {e}", exc_info=True)
            return self._generic_action(descriptor)

    # ========================================================================
    # DECODING
    # ========================================================================

    def _decode(self, descriptor: CallDescriptor) -> DecodedAction:
        entry = self.registry.lookup(descriptor.target)
        if entry is not None:
            contract_name, contract_description = entry.display_name, entry.description
        else:
            contract_name, contract_description = format_address(descriptor.target), "Unknown contract"

        function_name = self.resolve_function_name(descriptor)

        parameters = decode_with_schema(descriptor, self.registry, function_name, self.amount_decimals)
        used_schema = parameters is not None
        if parameters is None:
            parameters = decode_manually(descriptor, self.registry, function_name, self.amount_decimals)

        category = classify_action(function_name, descriptor.value)
        value_formatted = format_eth_value(descriptor.value)

        summary = self.build_summary(
            descriptor, function_name, contract_name, value_formatted, parameters
        )

        return DecodedAction(
            target=descriptor.target,
            contract_name=contract_name,
            contract_description=contract_description,
            value=descriptor.value,
            value_formatted=value_formatted,
            signature=descriptor.signature,
            function_name=function_name,
            function_description=self._describe_function(function_name, entry is not None, used_schema),
            parameters=tuple(parameters),
            calldata=descriptor.calldata,
            category=category,
            summary=summary,
            is_known_contract=entry is not None,
        )

    def resolve_function_name(self, descriptor: CallDescriptor) -> str:
        """Name from the signature, or from a registered selector when it is empty"""
        if descriptor.signature:
            return extract_function_name(descriptor.signature)

        try:
            data = hex_to_bytes(descriptor.calldata)
        except ValueError:
            return ""
        if len(data) < SELECTOR_SIZE:
            return ""

        schema = self.registry.lookup_function_by_selector(descriptor.target, data[:SELECTOR_SIZE])
        return schema.name if schema is not None else ""

    def _describe_function(self, function_name: str, is_known: bool, used_schema: bool) -> str:
        if not function_name:
            return "Direct ETH transfer"
        if function_name in FUNCTION_DESCRIPTIONS:
            return FUNCTION_DESCRIPTIONS[function_name]
        if not is_known and not used_schema:
            return "Raw contract call (ABI not available)"
        return f"Call {function_name} function"

    def _generic_action(self, descriptor: CallDescriptor) -> DecodedAction:
        target = str(descriptor.target or "")
        function_name = extract_function_name(str(descriptor.signature or ""))
        contract_name = format_address(target)
        return DecodedAction(
            target=target,
            contract_name=contract_name,
            contract_description="Unknown contract",
            value=str(descriptor.value or "0"),
            value_formatted=format_eth_value(str(descriptor.value or "0")),
            signature=str(descriptor.signature or ""),
            function_name=function_name,
            function_description="",
            parameters=(),
            calldata=str(descriptor.calldata or "0x"),
            category=ActionCategory.UNKNOWN,
            summary=f"Call {function_name}() on {contract_name}",
            is_known_contract=False,
        )

    # ========================================================================
    # SUMMARIES
    # ========================================================================

    def build_summary(
        self,
        descriptor: CallDescriptor,
        function_name: str,
        contract_name: str,
        value_formatted: str,
        parameters: List[DecodedParameter],
    ) -> str:
        """One-line description of what the action does"""
        if not function_name:
            if value_formatted != "0 ETH":
                return f"Transfer {value_formatted} to {contract_name}"
            if descriptor.calldata in ("", "0x"):
                return f"Empty call to {contract_name}"
            return f"Call {descriptor.calldata[:10]} on {contract_name}"

        summary = None
        if function_name == 'sendOrRegisterDebt':
            summary = self._payment_summary(parameters, contract_name)
        elif function_name == 'transfer':
            summary = self._transfer_summary(parameters)
        elif function_name == 'transferFrom':
            summary = self._transfer_from_summary(parameters, contract_name)
        elif function_name == 'approve':
            spender = _display(_first_recipient(parameters))
            amount = _display(_find(parameters, 'amount') or _param_at(parameters, 1))
            if spender and amount:
                summary = f"Approve {spender} to spend {amount}"
        elif function_name == 'delegate':
            delegatee = _display(_first_recipient(parameters))
            if delegatee:
                summary = f"Delegate voting power to {delegatee}"
        elif function_name in STREAM_FUNCTIONS:
            summary = self._stream_summary(function_name, parameters)
        elif function_name.lstrip('_').startswith('set') and parameters:
            summary = f"Set {parameters[0].name} to {parameters[0].display_value} in {contract_name}"
        elif 'mint' in function_name.lower():
            summary = f"Mint via {contract_name}"
        elif 'withdraw' in function_name.lower():
            summary = f"Withdraw from {contract_name}"
        elif 'deposit' in function_name.lower():
            summary = f"Deposit to {contract_name}"

        return summary or f"Call {function_name}() on {contract_name}"

    def _payment_summary(self, parameters: List[DecodedParameter], contract_name: str) -> str:
        account = _display(_find(parameters, 'account')) or 'recipient'
        amount_param = _find(parameters, 'amount')

        amount = 'amount'
        if amount_param is not None and isinstance(amount_param.raw_value, IntegerValue):
            decimals = self.amount_decimals.get('sendOrRegisterDebt', 6)
            amount = format_usd_amount(amount_param.raw_value.value, decimals)
        elif amount_param is not None:
            amount = amount_param.display_value

        return f"Send payment of {amount} USDC to {account} via {contract_name}"

    def _transfer_summary(self, parameters: List[DecodedParameter]) -> Optional[str]:
        recipient = _display(_first_recipient(parameters) or _param_at(parameters, 0))
        amount = _display(_find(parameters, 'amount') or _param_at(parameters, 1))
        if recipient is None or amount is None:
            return None
        return f"Transfer {amount} to {recipient}"

    def _transfer_from_summary(self, parameters: List[DecodedParameter], contract_name: str) -> Optional[str]:
        to = _display(_find(parameters, 'to') or _param_at(parameters, 1))
        if to is None:
            return None
        token_id = _display(_find(parameters, 'tokenId'))
        if token_id:
            return f"Transfer token {token_id} to {to}"
        return f"Transfer from {contract_name} to {to}"

    def _stream_summary(self, function_name: str, parameters: List[DecodedParameter]) -> Optional[str]:
        recipient = _find(parameters, 'recipient')
        amount = _find(parameters, 'tokenAmount')
        token = _find(parameters, 'tokenAddress')
        start = _find(parameters, 'startTime')
        stop = _find(parameters, 'stopTime')
        if None in (recipient, amount, token, start, stop):
            return None
        if not isinstance(recipient.raw_value, AddressValue) or not isinstance(token.raw_value, AddressValue):
            return None
        if not all(isinstance(p.raw_value, IntegerValue) for p in (amount, start, stop)):
            return None

        symbol, decimals = TOKEN_METADATA.get(token.raw_value.address.lower(), ('tokens', 18))
        formatted_amount = format_token_amount(amount.raw_value.value, decimals)
        days = round((stop.raw_value.value - start.raw_value.value) / SECONDS_PER_DAY)
        action = 'Create and fund' if function_name == 'createAndFundStream' else 'Create'

        return (f"{action} {formatted_amount} {symbol} stream to "
                f"{format_address(recipient.raw_value.address)} over {days} days")


def decode_action(descriptor: CallDescriptor, registry: Optional[SchemaRegistry] = None) -> DecodedAction:
    """Convenience wrapper: decode one action with a fresh ActionDecoder"""
    return ActionDecoder(registry).decode(descriptor)
