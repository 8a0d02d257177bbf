"""Tests for client matching rules."""

import pytest

from conftest import make_transaction
from projectledger.domain.entities import Client, ClientMatch
from projectledger.domain.matching import (
    ClientMatcher,
    ClientRule,
    NO_MATCHING_CLIENT,
    NO_REGISTERED_CLIENTS,
    PartialNameRule,
)
from projectledger.domain.config import DEFAULT_MATCHING_CONFIG


@pytest.fixture
def matcher():
    return ClientMatcher()


def test_empty_client_list(matcher):
    result = matcher.match(make_transaction(supplier_name="Acme"), [])

    assert result.client is None
    assert result.confidence == 0
    assert result.reason == NO_REGISTERED_CLIENTS


def test_identifier_match_ignores_formatting_and_name(matcher):
    client = Client(id=1, name="Completely Different Ltd", business_number="123 45 67890")
    txn = make_transaction(supplier_name="Acme", supplier_business_number="123-45-67890")

    result = matcher.match(txn, [client])

    assert result.client == client
    assert result.confidence == 1.0
    assert result.reason == "identifier exact match"


def test_identifier_match_short_circuits_better_name(matcher):
    by_name = Client(id=1, name="Acme")
    by_number = Client(id=2, name="Other", business_number="1234567890")
    txn = make_transaction(supplier_name="Acme", supplier_business_number="123-45-67890")

    result = matcher.match(txn, [by_name, by_number])

    assert result.client == by_number
    assert result.reason == "identifier exact match"


def test_different_identifier_falls_back_to_name(matcher):
    client = Client(id=1, name="Acme", business_number="999-99-99999")
    txn = make_transaction(supplier_name="acme", supplier_business_number="123-45-67890")

    result = matcher.match(txn, [client])

    assert result.client == client
    assert result.confidence == 1.0
    assert result.reason == "name exact match"


def test_blank_identifiers_never_match(matcher):
    client = Client(id=1, name="Zeta", business_number="--")
    txn = make_transaction(supplier_name="Alpha", supplier_business_number=" - ")

    result = matcher.match(txn, [client])

    assert result.reason != "identifier exact match"


@pytest.mark.parametrize(
    "supplier,client_name,band",
    [
        ("Acme Corporation", "Acme Corporatio", "high"),
        ("Acme Trading", "Acme Tradeco", "medium"),
        ("Blue Ocean", "Red Forest", "low"),
    ],
)
def test_name_similarity_bands(matcher, supplier, client_name, band):
    result = matcher.match(make_transaction(supplier_name=supplier), [Client(id=1, name=client_name)])

    assert result.reason.startswith(f"{band} name similarity (")
    assert result.reason.endswith("%)")


def test_percentage_in_reason_is_rounded(matcher):
    # 4 of 7 characters survive: 57.14%
    result = matcher.match(make_transaction(supplier_name="kitten"), [Client(id=1, name="sitting")])

    assert result.reason == "low name similarity (57%)"


def test_best_of_several_clients(matcher):
    clients = [
        Client(id=1, name="Globex"),
        Client(id=2, name="Acme Corp"),
        Client(id=3, name="Acme"),
    ]

    result = matcher.match(make_transaction(supplier_name="Acme Corp."), clients)

    assert result.client.id == 2


def test_first_seen_wins_ties(matcher):
    clients = [Client(id=1, name="abcx"), Client(id=2, name="abcy")]

    result = matcher.match(make_transaction(supplier_name="abcz"), clients)

    assert result.client.id == 1


def test_partial_match_beats_weak_similarity(matcher):
    client = Client(id=1, name="(주)테크솔루션")

    result = matcher.match(make_transaction(supplier_name="테크솔루션"), [client])

    assert result.client == client
    assert result.confidence == 0.7
    assert result.reason == "name partial match"


def test_partial_match_skipped_for_strong_similarity(matcher):
    # 0.9 similarity; containment would only offer 0.7
    client = Client(id=1, name="Acme Trade")

    result = matcher.match(make_transaction(supplier_name="Acme Trad"), [client])

    assert result.confidence == pytest.approx(0.9)
    assert result.reason == "high name similarity (90%)"


def test_partial_match_does_not_replace_higher_score():
    class FixedRule(ClientRule):
        def score(self, transaction, client):
            return 0.75, "fixed"

    matcher = ClientMatcher(rules=[FixedRule(), PartialNameRule(DEFAULT_MATCHING_CONFIG)])
    result = matcher.match(make_transaction(supplier_name="Acme"), [Client(id=1, name="Acme Ltd")])

    assert result.confidence == 0.75
    assert result.reason == "fixed"


def test_no_match_keeps_zero_confidence(matcher):
    result = matcher.match(make_transaction(supplier_name="abc"), [Client(id=1, name="xyz")])

    assert result.client is None
    assert result.confidence == 0
    assert result.reason == NO_MATCHING_CLIENT


def test_empty_supplier_name_is_not_a_partial_match(matcher):
    result = matcher.match(make_transaction(supplier_name=""), [Client(id=1, name="Acme")])

    assert result.client is None
    assert result.confidence == 0


def test_partial_rule_gate():
    rule = PartialNameRule(DEFAULT_MATCHING_CONFIG)

    assert rule.applies(ClientMatch(client=None, confidence=0.79, reason=""))
    assert not rule.applies(ClientMatch(client=None, confidence=0.8, reason=""))
