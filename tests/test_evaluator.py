from __future__ import annotations

import logging

import pytest

from core.enums import FinalityPolicy, PredicateName
from core.errors import FinalizedReferenceUnavailable
from engine.evaluator import FinalityEvaluator, check_finality

OTHER_TX_HASH = "0x" + "cd" * 32


def test_evaluation_is_idempotent():
    evaluator = FinalityEvaluator()
    first = evaluator.evaluate(1000, 1300, FinalityPolicy.STRICT)
    for _ in range(5):
        again = evaluator.evaluate(1000, 1300, FinalityPolicy.STRICT)
        assert again == first
    assert first.final is True
    assert first.depth == 300


@pytest.mark.parametrize("policy", list(FinalityPolicy))
def test_unknown_inclusion_is_negative_not_error(policy):
    result = FinalityEvaluator().evaluate(None, 1_000_000, policy)
    assert result.final is False
    assert result.not_yet_included is True
    assert result.violated_predicates == [PredicateName.INCLUDED]
    assert result.depth is None


@pytest.mark.parametrize("policy", list(FinalityPolicy))
def test_unknown_inclusion_does_not_need_finalized_block(policy):
    result = FinalityEvaluator().evaluate(None, None, policy)
    assert result.final is False
    assert result.not_yet_included is True


@pytest.mark.parametrize("policy", list(FinalityPolicy))
def test_missing_finalized_block_raises(policy):
    with pytest.raises(FinalizedReferenceUnavailable):
        FinalityEvaluator().evaluate(1000, None, policy)


def test_stale_finalized_reference_is_plain_negative():
    result = FinalityEvaluator().evaluate(2000, 1500, FinalityPolicy.STANDARD)
    assert result.final is False
    assert result.not_yet_included is False
    assert result.depth == -500
    final = result.predicate_results[-1]
    assert final.name == PredicateName.FINAL
    assert "stale" in final.reason


def test_predicate_trace_records_block_numbers(tx_hash):
    result = FinalityEvaluator().evaluate(1000, 1256, "pre_milestones", tx_hash=tx_hash)
    assert result.tx_hash == tx_hash
    assert [r.name for r in result.predicate_results] == [PredicateName.INCLUDED, PredicateName.FINAL]
    meta = result.predicate_results[-1].metadata
    assert meta["inclusion_block"] == 1000
    assert meta["finalized_block"] == 1256
    assert meta["min_depth"] == 256
    assert result.predicate_results[-1].reason == (
        "Your transaction block has been confirmed after 256 blocks"
    )


def test_block_numbers_are_logged(caplog):
    with caplog.at_level(logging.INFO, logger="engine.evaluator"):
        FinalityEvaluator().evaluate(1000, 1001, FinalityPolicy.STANDARD)
    assert "Latest finalized block: 1001" in caplog.text
    assert "Your transaction block: 1000" in caplog.text


# ------------------------------------------------------------------
# check() against a provider
# ------------------------------------------------------------------

def test_check_included_and_final(provider, tx_hash):
    provider.include_transaction(tx_hash, 1000)
    provider.set_finalized(1001)

    result = FinalityEvaluator().check(provider, tx_hash, FinalityPolicy.STANDARD)
    assert result.final is True
    assert result.inclusion_block == 1000
    assert result.finalized_block == 1001
    assert provider.inclusion_lookups == 1
    assert provider.finalized_lookups == 1


def test_check_accepts_hash_without_prefix(provider, tx_hash):
    provider.include_transaction(tx_hash, 1000)
    provider.set_finalized(1256)
    assert check_finality(provider, tx_hash[2:].upper(), "pre_milestones") is True


def test_check_pending_transaction_skips_finalized_lookup(provider):
    provider.add_pending_transaction(OTHER_TX_HASH)
    provider.clear_finalized()

    result = FinalityEvaluator().check(provider, OTHER_TX_HASH, FinalityPolicy.STANDARD)
    assert result.final is False
    assert result.not_yet_included is True
    assert provider.finalized_lookups == 0


def test_check_unknown_transaction_is_false(provider):
    provider.set_finalized(10_000)
    assert check_finality(provider, OTHER_TX_HASH, FinalityPolicy.STRICT) is False


def test_check_finalized_unavailable_propagates(provider, tx_hash):
    provider.include_transaction(tx_hash, 1000)
    provider.clear_finalized()
    with pytest.raises(FinalizedReferenceUnavailable) as exc:
        FinalityEvaluator().check(provider, tx_hash, FinalityPolicy.STANDARD)
    assert exc.value.network == "amoy"


def test_check_resamples_finalized_block_each_call(provider, tx_hash):
    provider.include_transaction(tx_hash, 1000)
    provider.set_finalized(1000)
    evaluator = FinalityEvaluator()
    assert evaluator.check(provider, tx_hash, "milestones").final is False

    provider.set_finalized(1001)
    assert evaluator.check(provider, tx_hash, "milestones").final is True
    assert provider.finalized_lookups == 2


def test_provider_errors_propagate_unmodified(provider, tx_hash):
    class Boom(RuntimeError):
        pass

    def broken(_tx_hash):
        raise Boom("connection reset")

    provider.get_inclusion_block = broken
    with pytest.raises(Boom):
        FinalityEvaluator().check(provider, tx_hash, FinalityPolicy.STANDARD)
