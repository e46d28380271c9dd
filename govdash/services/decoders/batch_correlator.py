"""
Batch Correlator - second pass over the decoded actions of one batch.

A stream-creation action can declare the address the stream contract will
be deployed at (predictedStreamAddress). A payment to that address elsewhere
in the same batch is funding the stream, so it is relabelled as such.

The pass is pure: input actions are never mutated; changed actions are
returned as new DecodedAction instances.
"""

from dataclasses import replace
from typing import Dict, List, Sequence
import re
import logging

from .base import ActionCategory, AddressValue, DecodedAction

logger = logging.getLogger(__name__)

STREAM_CREATION_FUNCTIONS = frozenset({'createStream', 'createAndFundStream'})
PREDICTED_ADDRESS_PARAM = 'predictedStreamAddress'

_PARENTHESISED = re.compile(r"\(([^()]*)\)\s*$")


def find_predicted_streams(actions: Sequence[DecodedAction]) -> Dict[str, int]:
    """Map lower-case predicted stream address -> index of the first creating action"""
    predicted: Dict[str, int] = {}
    for index, action in enumerate(actions):
        if action.function_name not in STREAM_CREATION_FUNCTIONS:
            continue
        param = action.find_parameter(PREDICTED_ADDRESS_PARAM)
        if param is None or not isinstance(param.raw_value, AddressValue):
            continue
        predicted.setdefault(param.raw_value.address.lower(), index)
    return predicted


def is_payment_shaped(action: DecodedAction) -> bool:
    if action.function_name == 'sendOrRegisterDebt':
        return True
    return action.function_name == 'transfer' and action.category == ActionCategory.PAYMENT


def _funding_amount(action: DecodedAction) -> str:
    """The parenthesised overlay of the amount ('$9,000.00'), else the raw display"""
    param = action.find_parameter('amount', 'value', 'tokenAmount')
    if param is None:
        return ""
    match = _PARENTHESISED.search(param.display_value)
    return match.group(1) if match else param.display_value


def _rewrite_as_funding(action: DecodedAction, param_index: int, stream_number: int) -> DecodedAction:
    parameters = list(action.parameters)
    parameters[param_index] = replace(
        parameters[param_index],
        recipient_role=f"Stream Contract (funding action #{stream_number})",
    )

    amount = _funding_amount(action)
    summary = f"Fund stream #{stream_number} with {amount}" if amount else f"Fund stream #{stream_number}"

    return replace(
        action,
        category=ActionCategory.STREAM,
        function_description=f"Funding stream #{stream_number}",
        summary=summary,
        parameters=tuple(parameters),
    )


def correlate(actions: Sequence[DecodedAction]) -> List[DecodedAction]:
    """
    Relabel payments that fund a stream created in the same batch.

    Args:
        actions: Decoded actions of one batch, in order

    Returns:
        New list of the same length; unaffected actions are passed through
    """
    predicted = find_predicted_streams(actions)
    if not predicted:
        return list(actions)

    correlated = []
    for action in actions:
        if not is_payment_shaped(action):
            correlated.append(action)
            continue

        match = next(
            (
                (idx, predicted[p.raw_value.address.lower()])
                for idx, p in enumerate(action.parameters)
                if p.is_recipient
                and isinstance(p.raw_value, AddressValue)
                and p.raw_value.address.lower() in predicted
            ),
            None,
        )
        if match is None:
            correlated.append(action)
            continue

        param_index, creation_index = match
        logger.debug(f"Action funds stream created by action #{creation_index + 1}")
        correlated.append(_rewrite_as_funding(action, param_index, creation_index + 1))

    return correlated
