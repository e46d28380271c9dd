"""
Proposal batch API - decode all actions of a proposal or candidate.

Proposals expose their actions as four parallel arrays (targets, values,
signatures, calldatas). Decoding is two-phase: every action is decoded
independently, then the batch correlator runs over the complete list.
"""

from typing import List, Optional, Sequence
import logging

from .base import CallDescriptor, DecodedAction, DecodedBatch
from .action_decoder import ActionDecoder
from .batch_correlator import correlate
from .recipient_classifier import extract_recipient_addresses

logger = logging.getLogger(__name__)


def build_call_descriptors(
    targets: Optional[Sequence[str]],
    values: Optional[Sequence[str]] = None,
    signatures: Optional[Sequence[str]] = None,
    calldatas: Optional[Sequence[str]] = None,
) -> List[CallDescriptor]:
    """
    Zip the parallel arrays into CallDescriptors.

    Arrays of unequal length are truncated to the shortest one; a missing
    array contributes defaults ('0', '', '0x') instead of truncating.
    """
    targets = list(targets or [])
    columns = [c for c in (values, signatures, calldatas) if c is not None]
    count = min([len(targets)] + [len(c) for c in columns])

    if any(len(c) != len(targets) for c in columns):
        logger.warning(f"Proposal arrays differ in length, decoding first {count} actions")

    descriptors = []
    for i in range(count):
        descriptors.append(CallDescriptor(
            target=targets[i],
            value=str(values[i]) if values is not None and values[i] not in (None, "") else "0",
            signature=(signatures[i] or "") if signatures is not None else "",
            calldata=(calldatas[i] or "0x") if calldatas is not None else "0x",
        ))
    return descriptors


def extract_all_recipients(actions: Sequence[DecodedAction]) -> List[str]:
    """Recipient addresses across all actions, deduplicated case-insensitively"""
    seen = set()
    recipients = []
    for action in actions:
        for address in extract_recipient_addresses(action.parameters):
            key = address.lower()
            if key not in seen:
                seen.add(key)
                recipients.append(address)
    return recipients


def get_actions_summary(actions: Sequence[DecodedAction]) -> str:
    """'a, b, and 3 more actions' style summary of a batch"""
    if not actions:
        return "No actions"
    if len(actions) == 1:
        return actions[0].summary

    summary = ", ".join(a.summary for a in actions[:2])
    remaining = len(actions) - 2
    if remaining > 0:
        return f"{summary}, and {remaining} more action{'s' if remaining > 1 else ''}"
    return summary


def decode_proposal_actions(
    descriptors: Sequence[CallDescriptor],
    decoder: Optional[ActionDecoder] = None,
) -> DecodedBatch:
    """
    Decode every action of one batch, then correlate across the batch.

    Args:
        descriptors: Actions in proposal order
        decoder: ActionDecoder to use (default registry if omitted)

    Returns:
        DecodedBatch with correlated actions, recipients and summary
    """
    decoder = decoder or ActionDecoder()
    decoded = [decoder.decode(descriptor) for descriptor in descriptors]
    actions = correlate(decoded)

    logger.debug(f"Decoded {len(actions)} proposal actions")
    return DecodedBatch(
        actions=actions,
        recipients=extract_all_recipients(actions),
        summary=get_actions_summary(actions),
    )
