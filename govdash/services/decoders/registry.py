"""
Schema Registry - Contract address to function schema lookup.

Maps a contract address to its known function schemas so proposal actions
can be decoded precisely. Entries come from:
1. Embedded ABIs for the governance contracts and common tokens
2. Runtime registration (e.g. Etherscan verified-source lookups)

The registry is an explicit value passed into the decoders. Reads and writes
are guarded by a re-entrant lock so runtime registration never corrupts
concurrent decodes.
"""

from web3 import Web3
from typing import Dict, List, Optional, Any, Union, Iterable
import threading
import json
import re
import logging

from .base import (
    ContractCategory,
    ContractSchemaEntry,
    FunctionSchema,
    ParameterSchema,
    SchemaDefinitionError,
    normalize_signature,
    hex_to_bytes,
    SELECTOR_SIZE,
)
from .abis import iter_builtin_contracts

logger = logging.getLogger(__name__)

_TYPE_PATTERN = re.compile(r"^[a-z]+[0-9]*(x[0-9]+)?(\[\d*\])*$")


# ============================================================================
# ABI PARSING
# ============================================================================

def compute_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature"""
    return bytes(Web3.keccak(text=normalize_signature(signature))[:SELECTOR_SIZE])


def parse_abi_parameter(item: Any) -> ParameterSchema:
    """
    Convert one JSON ABI input into a ParameterSchema.

    Raises:
        SchemaDefinitionError: if the input is malformed
    """
    if not isinstance(item, dict):
        raise SchemaDefinitionError(f"ABI input must be an object, got {type(item).__name__}")

    declared_type = item.get("type")
    if not isinstance(declared_type, str) or not _TYPE_PATTERN.match(declared_type):
        raise SchemaDefinitionError(f"Invalid ABI type: {declared_type!r}")

    base_type = re.sub(r"(\[\d*\])+$", "", declared_type)
    components = ()
    if base_type == "tuple":
        raw_components = item.get("components")
        if not isinstance(raw_components, list):
            raise SchemaDefinitionError("Tuple input without components")
        components = tuple(parse_abi_parameter(c) for c in raw_components)

    name = item.get("name") or ""
    if not isinstance(name, str):
        raise SchemaDefinitionError(f"Invalid ABI input name: {name!r}")

    return ParameterSchema(
        name=name,
        declared_type=declared_type,
        base_type=base_type,
        components=components,
    )


def parse_abi_functions(raw_abi: Union[str, List[dict]]) -> Dict[str, FunctionSchema]:
    """
    Build signature -> FunctionSchema for every function in a JSON ABI.

    Args:
        raw_abi: ABI as a list of items or a JSON string (Etherscan format)

    Returns:
        Dict keyed by canonical signature; overloads get separate keys

    Raises:
        SchemaDefinitionError: if the ABI is malformed
    """
    if isinstance(raw_abi, str):
        try:
            raw_abi = json.loads(raw_abi)
        except ValueError as e:
            raise SchemaDefinitionError(f"ABI is not valid JSON: {e}") from e

    if not isinstance(raw_abi, list):
        raise SchemaDefinitionError(f"ABI must be a list, got {type(raw_abi).__name__}")

    functions: Dict[str, FunctionSchema] = {}
    for item in raw_abi:
        if not isinstance(item, dict):
            raise SchemaDefinitionError(f"ABI item must be an object, got {type(item).__name__}")
        if item.get("type", "function") != "function":
            continue

        name = item.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError("Function item without a name")

        inputs = tuple(parse_abi_parameter(i) for i in item.get("inputs") or [])
        signature = f"{name}({','.join(p.canonical_type for p in inputs)})"
        functions[signature] = FunctionSchema(
            name=name,
            inputs=inputs,
            signature=signature,
            selector=compute_selector(signature),
        )

    return functions


# ============================================================================
# REGISTRY
# ============================================================================

class SchemaRegistry:
    """
    Registry of contract schemas keyed by lower-case address.

    Lookups never raise; "not found" is None.
    """

    def __init__(self, entries: Optional[Iterable[ContractSchemaEntry]] = None):
        self._entries: Dict[str, ContractSchemaEntry] = {}
        self._lock = threading.RLock()
        for entry in entries or []:
            self.register(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.lookup(address) is not None

    def addresses(self) -> List[str]:
        """All registered addresses (lower-case)"""
        with self._lock:
            return list(self._entries.keys())

    def lookup(self, address: str) -> Optional[ContractSchemaEntry]:
        if not isinstance(address, str):
            return None
        with self._lock:
            return self._entries.get(address.strip().lower())

    def lookup_function(self, address: str, signature: str) -> Optional[FunctionSchema]:
        entry = self.lookup(address)
        if entry is None or not signature:
            return None
        return entry.functions.get(normalize_signature(signature))

    def lookup_function_by_selector(self, address: str, selector: Union[bytes, str]) -> Optional[FunctionSchema]:
        entry = self.lookup(address)
        if entry is None:
            return None

        if isinstance(selector, str):
            try:
                selector = hex_to_bytes(selector)
            except ValueError:
                return None
        if len(selector) < SELECTOR_SIZE:
            return None

        return entry.function_by_selector(bytes(selector[:SELECTOR_SIZE]))

    def register(self, entry: ContractSchemaEntry) -> None:
        """Add or replace the entry for entry.address"""
        address = entry.address.lower()
        with self._lock:
            if address in self._entries:
                logger.debug(f"Replacing schema entry for {address[:10]}...")
            self._entries[address] = entry

    def register_schema(
        self,
        address: str,
        name: str,
        description: str,
        raw_schema: Union[str, List[dict]],
        category: ContractCategory = ContractCategory.KNOWN_EXTERNAL,
    ) -> bool:
        """
        Parse a raw ABI definition and register it.

        Malformed definitions are logged and leave the registry unchanged.

        Returns:
            True if the schema was registered
        """
        try:
            functions = parse_abi_functions(raw_schema)
        except SchemaDefinitionError as e:
            logger.error(f"Error registering schema for {address}: {e}")
            return False

        if not isinstance(address, str) or not Web3.is_address(address.lower()):
            logger.error(f"Error registering schema: invalid address {address!r}")
            return False

        self.register(ContractSchemaEntry(
            address=address.lower(),
            display_name=name,
            description=description,
            category=category,
            functions=functions,
        ))
        logger.info(f"Registered {len(functions)} function schemas for {name} ({address[:10]}...)")
        return True

    def clear_external(self) -> None:
        """Remove every entry that is not a built-in governance contract"""
        with self._lock:
            to_remove = [
                address for address, entry in self._entries.items()
                if entry.category != ContractCategory.KNOWN_INTERNAL
            ]
            for address in to_remove:
                del self._entries[address]
        if to_remove:
            logger.debug(f"Cleared {len(to_remove)} external schema entries")


def build_default_registry() -> SchemaRegistry:
    """Registry seeded with the embedded governance and token ABIs"""
    registry = SchemaRegistry()
    for config, abi, is_internal in iter_builtin_contracts():
        registry.register_schema(
            address=config["address"],
            name=config["name"],
            description=config["description"],
            raw_schema=abi,
            category=ContractCategory.KNOWN_INTERNAL if is_internal else ContractCategory.KNOWN_EXTERNAL,
        )
    return registry
