"""
Batch Decoder - Decode all executable actions of a governance proposal

Usage:
    python batch_decode.py proposal.json                 # Decode with embedded ABIs
    python batch_decode.py proposal.json --etherscan     # Also fetch verified ABIs
    python batch_decode.py proposal.json --verbose       # Enable debug logging
    python batch_decode.py proposal.json --output results.csv  # Export results to CSV

The JSON file holds the proposal's parallel action arrays:
    {"targets": [...], "values": [...], "signatures": [...], "calldatas": [...]}
"""

import os
import sys
import json
import logging
import pandas as pd
from typing import Dict, List
import argparse

# Load environment
from dotenv import load_dotenv
load_dotenv()


def load_proposal(path: str) -> Dict[str, List[str]]:
    """Load the parallel action arrays from a JSON file"""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    # Accept {"proposal": {...}} wrappers from API dumps
    if isinstance(data, dict) and 'targets' not in data and isinstance(data.get('proposal'), dict):
        data = data['proposal']

    if not isinstance(data, dict) or not isinstance(data.get('targets'), list):
        raise ValueError(f"{path} has no 'targets' array")

    return {
        'targets': data.get('targets') or [],
        'values': data.get('values') or [],
        'signatures': data.get('signatures') or [],
        'calldatas': data.get('calldatas') or [],
    }


def print_section(title: str, char: str = "="):
    """Print a section header"""
    print(f"\n{char * 70}")
    print(f" {title}")
    print(f"{char * 70}")


def main():
    parser = argparse.ArgumentParser(description='Decode governance proposal actions')
    parser.add_argument('proposal', type=str, help='Path to proposal JSON (targets/values/signatures/calldatas)')
    parser.add_argument('--etherscan', action='store_true', help='Fetch verified ABIs for unknown targets')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--output', '-o', type=str, help='Output CSV file path')
    args = parser.parse_args()

    from govdash.logging_config import setup_logging, get_logger
    setup_logging(logging.INFO, debug=args.verbose or os.getenv('DECODER_DEBUG', '') == '1')
    logger = get_logger('batch_decode')

    from govdash.services.decoders import (
        ActionDecoder,
        build_default_registry,
        build_call_descriptors,
        decode_proposal_actions,
    )

    try:
        proposal = load_proposal(args.proposal)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load proposal {args.proposal}: {e}")
        sys.exit(1)

    descriptors = build_call_descriptors(
        proposal['targets'], proposal['values'], proposal['signatures'], proposal['calldatas']
    )

    print_section("PROPOSAL ACTION DECODER")
    print(f"Proposal file: {args.proposal}")
    print(f"Actions: {len(descriptors)}")

    if not descriptors:
        print("[!] Proposal has no actions")
        sys.exit(0)

    registry = build_default_registry()
    print(f"[+] Loaded {len(registry)} built-in contract schemas")

    # Fetch verified ABIs for targets the registry does not know
    if args.etherscan:
        from govdash.services.etherscan_abi_fetcher import EtherscanAbiFetcher
        fetcher = EtherscanAbiFetcher()
        if not fetcher.api_key:
            logger.warning("ETHERSCAN_API_KEY not set, skipping verified ABI lookups")
        else:
            unknown = sorted({d.target.lower() for d in descriptors if d.target not in registry})
            added = sum(1 for target in unknown if fetcher.populate_registry(registry, target))
            print(f"[+] Registered {added}/{len(unknown)} verified ABIs from Etherscan")

    batch = decode_proposal_actions(descriptors, ActionDecoder(registry))

    # Print decoded actions
    print_section("ACTIONS")
    results = []
    category_counts = {}

    for i, action in enumerate(batch.actions):
        category = action.category.value
        category_counts[category] = category_counts.get(category, 0) + 1

        print(f"\n[{i+1}/{len(batch.actions)}] {action.summary}")
        print(f"    Contract: {action.contract_name} ({action.contract_description})")
        print(f"    Function: {action.function_name or '-'}  [{category}]")
        if action.value_formatted != "0 ETH":
            print(f"    Value:    {action.value_formatted}")
        for param in action.parameters:
            marker = f"  <- {param.recipient_role}" if param.is_recipient else ""
            print(f"      {param.name} ({param.declared_type}): {param.display_value}{marker}")

        results.append({
            'index': i + 1,
            'target': action.target,
            'contract': action.contract_name,
            'known_contract': action.is_known_contract,
            'function': action.function_name,
            'signature': action.signature,
            'category': category,
            'value': action.value,
            'value_formatted': action.value_formatted,
            'summary': action.summary,
            'parameters': json.dumps([p.to_dict() for p in action.parameters]),
        })

    # Print summary
    print_section("SUMMARY")
    print(f"\n{batch.summary}")

    print(f"\nBy Category:")
    for category, count in sorted(category_counts.items(), key=lambda x: -x[1]):
        print(f"  {category}: {count}")

    if batch.recipients:
        print(f"\nRecipients ({len(batch.recipients)}):")
        for address in batch.recipients:
            print(f"  {address}")

    # Export to CSV if requested
    if args.output:
        df = pd.DataFrame(results)
        df.to_csv(args.output, index=False)
        print(f"\n[+] Results exported to: {args.output}")


if __name__ == '__main__':
    main()
