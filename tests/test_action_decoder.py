"""
Unit tests for the action decoder.

Tests:
- Contract identity for known and unknown targets
- Summary templates per function family
- Category classification
- Signature-less selector routing gives the same function name
- decode() never raises and is idempotent
"""
import pytest
from eth_abi import encode
import json
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from govdash.config.contracts_config import GOVERNANCE_CONTRACTS, EXTERNAL_CONTRACTS
from govdash.services.decoders.base import ActionCategory, CallDescriptor, format_address
from govdash.services.decoders.registry import build_default_registry, compute_selector
from govdash.services.decoders.action_decoder import ActionDecoder, classify_action

USDC = EXTERNAL_CONTRACTS["USDC"]["address"]
PAYER = GOVERNANCE_CONTRACTS["Payer"]["address"]
TOKEN = GOVERNANCE_CONTRACTS["NounsToken"]["address"]
DAO = GOVERNANCE_CONTRACTS["NounsDAOProxy"]["address"]
STREAM_FACTORY = GOVERNANCE_CONTRACTS["StreamFactory"]["address"]
UNKNOWN_TARGET = "0x9999999999999999999999999999999999999999"
RECIPIENT = "0x1234567890123456789012345678901234567890"
PREDICTED = "0x2222222222222222222222222222222222222222"


def make_calldata(signature, types, values, with_selector=False):
    data = encode(types, values)
    if with_selector:
        data = compute_selector(signature) + data
    return "0x" + data.hex()


@pytest.fixture(scope="module")
def decoder():
    return ActionDecoder(build_default_registry())


class TestContractIdentity:
    """Test contract name resolution."""

    def test_known_contract(self, decoder):
        action = decoder.decode(CallDescriptor(target=PAYER, signature="withdrawPaymentToken()"))
        assert action.contract_name == "Payer"
        assert action.is_known_contract is True

    def test_unknown_contract(self, decoder):
        """Unknown targets get a truncated address and a placeholder description."""
        action = decoder.decode(CallDescriptor(target=UNKNOWN_TARGET, signature="foo()"))
        assert action.contract_name == "0x9999...9999"
        assert action.contract_description == "Unknown contract"
        assert action.is_known_contract is False
        assert action.summary == "Call foo() on 0x9999...9999"


    def test_fork_contracts_are_named(self, decoder):
        """Fork deployer calls decode by schema and name the escrow argument."""
        escrow = GOVERNANCE_CONTRACTS["ForkEscrow"]["address"]
        signature = "deployForkDAO(uint256,address)"
        action = decoder.decode(CallDescriptor(
            target=GOVERNANCE_CONTRACTS["ForkDAODeployer"]["address"],
            signature=signature,
            calldata=make_calldata(signature, ["uint256", "address"], [1700000000, escrow.lower()]),
        ))
        assert action.contract_name == "Fork DAO Deployer"
        assert action.is_known_contract is True
        assert action.function_description == "Call deployForkDAO function"
        assert action.parameters[1].raw_value.address.lower() == escrow.lower()
        assert action.parameters[1].display_value.endswith(" (Fork Escrow)")


class TestSummaries:
    """Test summary templates."""

    def test_bare_eth_transfer(self, decoder):
        action = decoder.decode(CallDescriptor(target=RECIPIENT, value="1500000000000000000"))
        assert action.value_formatted == "1.5 ETH"
        assert action.summary == f"Transfer 1.5 ETH to {format_address(RECIPIENT)}"
        assert action.category == ActionCategory.PAYMENT
        assert action.function_description == "Direct ETH transfer"

    def test_empty_call(self, decoder):
        action = decoder.decode(CallDescriptor(target=RECIPIENT))
        assert action.summary == f"Empty call to {format_address(RECIPIENT)}"
        assert action.category == ActionCategory.UNKNOWN

    def test_send_or_register_debt(self, decoder):
        """Payer payments are shown in USDC."""
        signature = "sendOrRegisterDebt(address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=PAYER,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 9000000000]),
        ))

        assert action.summary == f"Send payment of $9,000.00 USDC to {RECIPIENT} via Payer"
        assert action.category == ActionCategory.PAYMENT
        assert len(action.parameters) == 2
        assert action.parameters[0].is_recipient
        assert action.parameters[1].display_value == "9,000,000,000 ($9,000.00)"

    def test_transfer(self, decoder):
        signature = "transfer(address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=USDC,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 1000000]),
        ))
        assert action.summary == f"Transfer 1,000,000 to {RECIPIENT}"
        assert action.category == ActionCategory.PAYMENT

    def test_nft_transfer_from(self, decoder):
        signature = "transferFrom(address,address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=TOKEN,
            signature=signature,
            calldata=make_calldata(signature, ["address", "address", "uint256"],
                                   [GOVERNANCE_CONTRACTS["NounsTreasury"]["address"].lower(), RECIPIENT, 42]),
        ))
        assert action.summary == f"Transfer token 42 to {RECIPIENT}"

    def test_erc20_transfer_from(self, decoder):
        signature = "transferFrom(address,address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=USDC,
            signature=signature,
            calldata=make_calldata(signature, ["address", "address", "uint256"], [PREDICTED, RECIPIENT, 42]),
        ))
        assert action.summary == f"Transfer from USDC to {RECIPIENT}"

    def test_approve(self, decoder):
        signature = "approve(address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=USDC,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 500]),
        ))
        assert action.summary == f"Approve {RECIPIENT} to spend 500"
        assert action.category == ActionCategory.APPROVAL
        assert action.parameters[0].recipient_role == "Approved Spender"

    def test_delegate(self, decoder):
        signature = "delegate(address)"
        action = decoder.decode(CallDescriptor(
            target=TOKEN,
            signature=signature,
            calldata=make_calldata(signature, ["address"], [RECIPIENT]),
        ))
        assert action.summary == f"Delegate voting power to {RECIPIENT}"
        assert action.category == ActionCategory.DELEGATION

    def test_admin_setter(self, decoder):
        signature = "_setVotingDelay(uint256)"
        action = decoder.decode(CallDescriptor(
            target=DAO,
            signature=signature,
            calldata=make_calldata(signature, ["uint256"], [7200]),
        ))
        assert action.summary == "Set newVotingDelay to 7,200 in Nouns DAO Proxy"
        assert action.category == ActionCategory.GOVERNANCE_ADMIN

    def test_stream_creation(self, decoder):
        signature = "createStream(address,uint256,address,uint256,uint256,uint8,address)"
        start = 1700000000
        action = decoder.decode(CallDescriptor(
            target=STREAM_FACTORY,
            signature=signature,
            calldata=make_calldata(
                signature,
                ["address", "uint256", "address", "uint256", "uint256", "uint8", "address"],
                [RECIPIENT, 10_000_000_000, USDC, start, start + 30 * 86400, 0, PREDICTED],
            ),
        ))
        assert action.summary == "Create 10,000 USDC stream to 0x1234...7890 over 30 days"
        assert action.category == ActionCategory.STREAM
        assert len(action.parameters) == 7

    def test_stream_creation_with_huge_amount(self, decoder):
        """A uint256 tokenAmount beyond decimal precision keeps the full decode."""
        signature = "createStream(address,uint256,address,uint256,uint256)"
        start = 1700000000
        action = decoder.decode(CallDescriptor(
            target=STREAM_FACTORY,
            signature=signature,
            calldata=make_calldata(
                signature,
                ["address", "uint256", "address", "uint256", "uint256"],
                [RECIPIENT, 10**60, USDC, start, start + 30 * 86400],
            ),
        ))
        assert len(action.parameters) == 5
        assert action.contract_name == "Stream Factory"
        assert action.is_known_contract is True
        assert action.category == ActionCategory.STREAM
        assert action.summary == f"Create {10**54:,} USDC stream to 0x1234...7890 over 30 days"

    @pytest.mark.parametrize("target,signature,expected", [
        (TOKEN, "mint()", "Mint via Nouns Token"),
        (EXTERNAL_CONTRACTS["WETH"]["address"], "deposit()", "Deposit to WETH"),
        (PAYER, "withdrawPaymentToken()", "Withdraw from Payer"),
        (PAYER, "renounceOwnership()", "Call renounceOwnership() on Payer"),
    ])
    def test_generic_templates(self, decoder, target, signature, expected):
        action = decoder.decode(CallDescriptor(target=target, signature=signature))
        assert action.summary == expected


class TestCategories:
    """Test category classification."""

    @pytest.mark.parametrize("function_name,value,expected", [
        ("", "1", ActionCategory.PAYMENT),
        ("", "0", ActionCategory.UNKNOWN),
        ("createStream", "0", ActionCategory.STREAM),
        ("sendOrRegisterDebt", "0", ActionCategory.PAYMENT),
        ("sendETH", "0", ActionCategory.PAYMENT),
        ("approve", "0", ActionCategory.APPROVAL),
        ("setApprovalForAll", "0", ActionCategory.APPROVAL),
        ("delegateBySig", "0", ActionCategory.DELEGATION),
        ("mint", "0", ActionCategory.MINT),
        ("transferOwnership", "0", ActionCategory.OWNERSHIP),
        ("withdrawETH", "0", ActionCategory.TREASURY),
        ("_setVotingPeriod", "0", ActionCategory.GOVERNANCE_ADMIN),
        ("setReservePrice", "0", ActionCategory.GOVERNANCE_ADMIN),
        ("somethingElse", "0", ActionCategory.UNKNOWN),
    ])
    def test_classify(self, function_name, value, expected):
        assert classify_action(function_name, value) == expected

    def test_category_serializes_as_string(self):
        assert ActionCategory.GOVERNANCE_ADMIN.value == "governance-admin"
        assert ActionCategory.STREAM == "stream"


class TestDecoderGuarantees:
    """Test never-raise, idempotence and selector routing."""

    def test_signature_less_selector_routing(self, decoder):
        """Empty signature with a registered selector resolves the same function."""
        signature = "transfer(address,uint256)"
        with_signature = decoder.decode(CallDescriptor(
            target=USDC,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 1000000]),
        ))
        without_signature = decoder.decode(CallDescriptor(
            target=USDC,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 1000000], with_selector=True),
        ))

        assert without_signature.function_name == with_signature.function_name == "transfer"
        assert without_signature.parameters == with_signature.parameters
        assert without_signature.summary == with_signature.summary

    def test_idempotent(self, decoder):
        """Decoding the same descriptor twice yields equal actions."""
        signature = "sendOrRegisterDebt(address,uint256)"
        descriptor = CallDescriptor(
            target=PAYER,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 9000000000]),
        )
        assert decoder.decode(descriptor) == decoder.decode(descriptor)

    @pytest.mark.parametrize("descriptor", [
        CallDescriptor(target="not-an-address", value="abc", signature="((((", calldata="0xzz"),
        CallDescriptor(target="", value="", signature="", calldata=""),
        CallDescriptor(target=USDC, signature="transfer(address,uint256)", calldata="0x1234"),
        CallDescriptor(target=UNKNOWN_TARGET, signature="f(uint256[],(bool,bool))", calldata="0x" + "ff" * 40),
    ])
    def test_never_raises(self, decoder, descriptor):
        action = decoder.decode(descriptor)
        assert action.summary

    def test_internal_failure_yields_generic_action(self):
        """Unexpected errors are logged and produce a parameterless action."""
        class ExplodingRegistry:
            def lookup(self, address):
                raise RuntimeError("registry unavailable")

        action = ActionDecoder(ExplodingRegistry()).decode(
            CallDescriptor(target=UNKNOWN_TARGET, signature="foo(uint256)", calldata="0x" + "00" * 32)
        )
        assert action.parameters == ()
        assert action.category == ActionCategory.UNKNOWN
        assert action.summary == "Call foo() on 0x9999...9999"

    def test_to_dict_is_json_safe(self, decoder):
        signature = "sendOrRegisterDebt(address,uint256)"
        action = decoder.decode(CallDescriptor(
            target=PAYER,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 9000000000]),
        ))
        result = json.loads(json.dumps(action.to_dict()))
        assert result["category"] == "payment"
        assert result["parameters"][1]["value"] == "9000000000"

    def test_custom_amount_table(self):
        """The USD decimals table can be replaced per decoder."""
        signature = "sendOrRegisterDebt(address,uint256)"
        decoder = ActionDecoder(build_default_registry(), amount_decimals={"sendOrRegisterDebt": 2})
        action = decoder.decode(CallDescriptor(
            target=PAYER,
            signature=signature,
            calldata=make_calldata(signature, ["address", "uint256"], [RECIPIENT, 12345]),
        ))
        assert action.parameters[1].display_value == "12,345 ($123.45)"
        assert "$123.45 USDC" in action.summary
