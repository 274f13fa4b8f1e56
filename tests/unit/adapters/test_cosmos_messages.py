import pytest

from chainview.adapters.cosmos.denoms import denom_decimals, format_denom
from chainview.adapters.cosmos.factory import COSMOS_CHAIN_CONFIGS
from chainview.adapters.cosmos.messages import parse_message, short_type
from chainview.domain.enums import Direction
from chainview.infra.blockchain.cosmos.models import CosmosMessage, TxEvent

OSMOSIS = next(c for c in COSMOS_CHAIN_CONFIGS if c.id == "osmosis")
DYDX = next(c for c in COSMOS_CHAIN_CONFIGS if c.id == "dydx")
NOBLE_USDC = "ibc/8E27BA2D5493AF5636760E354E46004562C46AB7EC0CC4C1CA14E9E20E2545B5"
ADDR = "osmo1" + "q" * 38
OTHER = "osmo1" + "z" * 38
VALIDATOR = "osmovaloper1" + "v" * 38


def _msg(type_url: str, **fields) -> CosmosMessage:
    return CosmosMessage.model_validate({"@type": type_url, **fields})


class TestFormatDenom:
    @pytest.mark.parametrize(
        "denom,expected",
        [
            ("uosmo", "OSMO"),
            ("uion", "ION"),
            ("ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2", "IBC/27394F..."),
            ("gamm/pool/1", "LP-1"),
            ("factory/osmo1abc/alloyed/allBTC", "ALLBTC"),
            ("stake", "STAKE"),
        ],
    )
    def test_format(self, denom, expected):
        assert format_denom(denom, OSMOSIS) == expected


def test_short_type():
    assert short_type("/cosmos.bank.v1beta1.MsgSend") == "MsgSend"
    assert short_type("") == ""


class TestParseMessage:
    def test_send_out(self):
        msg = _msg("/cosmos.bank.v1beta1.MsgSend", from_address=ADDR, to_address=OTHER,
                   amount=[{"denom": "uosmo", "amount": "1500000"}])
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty) == ("transfer", Direction.OUT, OTHER)
        assert (parsed.asset, parsed.amount) == ("OSMO", "1.5")

    def test_send_in(self):
        msg = _msg("/cosmos.bank.v1beta1.MsgSend", from_address=OTHER, to_address=ADDR,
                   amount=[{"denom": "uosmo", "amount": "1"}])
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert parsed.direction == Direction.IN
        assert parsed.counterparty == OTHER

    def test_ibc_transfer_unrelated_is_unknown(self):
        msg = _msg("/ibc.applications.transfer.v1.MsgTransfer", sender=OTHER, receiver="cosmos1xyz",
                   token={"denom": "uosmo", "amount": "5000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert parsed.type == "ibc_transfer"
        assert parsed.direction == Direction.UNKNOWN
        assert parsed.amount == "5"

    def test_ibc_transfer_out(self):
        msg = _msg("/ibc.applications.transfer.v1.MsgTransfer", sender=ADDR, receiver="cosmos1xyz",
                   token={"denom": "uosmo", "amount": "5000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert parsed.direction == Direction.OUT
        assert parsed.counterparty == "cosmos1xyz"

    def test_delegate_single_coin_amount(self):
        msg = _msg("/cosmos.staking.v1beta1.MsgDelegate", delegator_address=ADDR, validator_address=VALIDATOR,
                   amount={"denom": "uosmo", "amount": "10000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty, parsed.amount) == (
            "stake", Direction.OUT, VALIDATOR, "10",
        )

    def test_undelegate(self):
        msg = _msg("/cosmos.staking.v1beta1.MsgUndelegate", validator_address=VALIDATOR,
                   amount={"denom": "uosmo", "amount": "1000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction) == ("unstake", Direction.IN)

    def test_redelegate_is_self(self):
        msg = _msg("/cosmos.staking.v1beta1.MsgBeginRedelegate", validator_dst_address=VALIDATOR,
                   amount={"denom": "uosmo", "amount": "1000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty) == ("redelegate", Direction.SELF, VALIDATOR)

    def test_claim_sums_reward_events(self):
        events = [
            TxEvent.model_validate({"type": "withdraw_rewards", "attributes": [
                {"key": "amount", "value": "1500000uosmo,20ibc/ABC"},
            ]}),
            TxEvent.model_validate({"type": "withdraw_rewards", "attributes": [
                {"key": "amount", "value": "500000uosmo"},
            ]}),
            TxEvent.model_validate({"type": "transfer", "attributes": [{"key": "amount", "value": "9uosmo"}]}),
        ]
        msg = _msg("/cosmos.distribution.v1beta1.MsgWithdrawDelegatorReward", validator_address=VALIDATOR)
        parsed = parse_message(msg, ADDR, OSMOSIS, events)
        assert (parsed.type, parsed.direction, parsed.counterparty) == ("claim", Direction.IN, "Staking Rewards")
        assert parsed.amount == "2"

    def test_swap(self):
        msg = _msg("/osmosis.poolmanager.v1beta1.MsgSwapExactAmountIn", sender=ADDR,
                   token_in={"denom": "uion", "amount": "3000000"})
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty, parsed.asset) == (
            "swap", Direction.OUT, "Osmosis DEX", "ION",
        )

    def test_liquidity(self):
        join = parse_message(_msg("/osmosis.gamm.v1beta1.MsgJoinPool"), ADDR, OSMOSIS)
        exit_ = parse_message(_msg("/osmosis.gamm.v1beta1.MsgExitPool"), ADDR, OSMOSIS)
        assert (join.type, join.direction, join.asset) == ("add_liquidity", Direction.OUT, "LP")
        assert (exit_.type, exit_.direction) == ("remove_liquidity", Direction.IN)

    def test_vote(self):
        parsed = parse_message(_msg("/cosmos.gov.v1beta1.MsgVote"), ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty) == ("vote", Direction.SELF, "Governance")

    def test_contract_from_other_sender_is_unknown(self):
        msg = _msg("/cosmwasm.wasm.v1.MsgExecuteContract", sender=OTHER, contract="osmo1contract")
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction, parsed.counterparty) == ("contract", Direction.UNKNOWN, "osmo1contract")

    def test_unrecognized_message(self):
        parsed = parse_message(_msg("/cosmos.authz.v1beta1.MsgGrant"), ADDR, OSMOSIS)
        assert (parsed.type, parsed.direction) == ("grant", Direction.UNKNOWN)


class TestDenomDecimals:
    @pytest.mark.parametrize(
        "denom,config,expected",
        [
            ("uosmo", OSMOSIS, 6),
            ("adydx", DYDX, 18),
            (NOBLE_USDC, DYDX, 6),
            ("gamm/pool/1", OSMOSIS, 18),
            ("aevmos", OSMOSIS, 18),
            ("uion", DYDX, 6),
            ("factory/osmo1abc/alloyed/allBTC", OSMOSIS, 6),
        ],
    )
    def test_denom_decimals(self, denom, config, expected):
        assert denom_decimals(denom, config) == expected

    def test_ibc_usdc_on_18_decimal_chain(self):
        sender = DYDX.address_placeholder
        msg = _msg("/cosmos.bank.v1beta1.MsgSend", from_address=sender, to_address="dydx1" + "z" * 38,
                   amount=[{"denom": NOBLE_USDC, "amount": "5000000"}])
        parsed = parse_message(msg, sender, DYDX)
        assert (parsed.asset, parsed.amount) == ("IBC/8E27BA...", "5")

    def test_native_denom_on_18_decimal_chain(self):
        sender = DYDX.address_placeholder
        msg = _msg("/cosmos.bank.v1beta1.MsgSend", from_address=sender, to_address="dydx1" + "z" * 38,
                   amount=[{"denom": "adydx", "amount": "2500000000000000000"}])
        parsed = parse_message(msg, sender, DYDX)
        assert (parsed.asset, parsed.amount) == ("DYDX", "2.5")

    def test_pool_shares_use_18_decimals(self):
        msg = _msg("/cosmos.bank.v1beta1.MsgSend", from_address=ADDR, to_address=OTHER,
                   amount=[{"denom": "gamm/pool/1", "amount": "3000000000000000000"}])
        parsed = parse_message(msg, ADDR, OSMOSIS)
        assert (parsed.asset, parsed.amount) == ("LP-1", "3")
