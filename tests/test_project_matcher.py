"""Tests for project matching signals."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import TODAY, make_transaction
from projectledger.domain.config import MatchingConfig
from projectledger.domain.entities import Client, Project, ProjectStatus
from projectledger.domain.matching import (
    NO_ACTIVE_PROJECTS,
    NO_MATCHING_PROJECT,
    ProjectMatcher,
)

CLIENT = Client(id=1, name="Acme")


def _project(**overrides):
    fields = dict(
        id=10,
        name="Website",
        client_id=1,
        status=ProjectStatus.IN_PROGRESS,
        start_date=date(2024, 3, 1),
        end_date=date(2024, 5, 31),
        budget=None,
    )
    fields.update(overrides)
    return Project(**fields)


@pytest.fixture
def matcher():
    return ProjectMatcher(clock=lambda: TODAY)


def test_empty_project_list(matcher):
    result = matcher.match(make_transaction(), CLIENT, [])

    assert result.project is None
    assert result.confidence == 0
    assert result.reason == NO_ACTIVE_PROJECTS


def test_start_date_client_and_status(matcher):
    project = _project()
    txn = make_transaction(transaction_date=date(2024, 3, 1))

    result = matcher.match(txn, CLIENT, [project])

    assert result.project == project
    assert result.confidence == 0.9
    assert result.reason == "client match, within project period, project in progress"


def test_all_signals(matcher):
    project = _project(budget=Decimal("10000000"))
    txn = make_transaction(transaction_date=date(2024, 4, 1), total_amount="1100000")

    result = matcher.match(txn, CLIENT, [project])

    assert result.confidence == pytest.approx(1.0)
    assert result.reason.endswith("within budget range")


def test_budget_ratio_boundary_is_inclusive(matcher):
    project = _project(budget=Decimal("1000000"), status=ProjectStatus.COMPLETED)
    txn = make_transaction(transaction_date=date(2024, 4, 1), total_amount="300000")

    result = matcher.match(txn, None, [project])

    assert result.reason == "within project period, within budget range"
    assert result.confidence == pytest.approx(0.5)


def test_large_amount_gets_no_budget_bonus(matcher):
    project = _project(budget=Decimal("1000000"), status=ProjectStatus.COMPLETED)
    txn = make_transaction(transaction_date=date(2024, 4, 1), total_amount="300001")

    result = matcher.match(txn, None, [project])

    assert result.reason == "within project period"


def test_days_before_start(matcher):
    txn = make_transaction(transaction_date=date(2024, 2, 20))

    result = matcher.match(txn, None, [_project(status=ProjectStatus.CANCELLED)])

    assert result.confidence == pytest.approx(0.2)
    assert result.reason == "10 days before start"


def test_days_after_end(matcher):
    txn = make_transaction(transaction_date=date(2024, 6, 30))

    result = matcher.match(txn, None, [_project(status=ProjectStatus.CANCELLED)])

    assert result.reason == "30 days after end"


def test_outside_window_gets_no_date_bonus(matcher):
    txn = make_transaction(transaction_date=date(2024, 1, 30))

    result = matcher.match(txn, None, [_project(status=ProjectStatus.PLANNING)])

    assert result.confidence == pytest.approx(0.1)
    assert result.reason == "project in planning"


def test_open_ended_project_runs_until_today(matcher):
    project = _project(end_date=None, status=ProjectStatus.COMPLETED)

    inside = matcher.match(make_transaction(transaction_date=TODAY), None, [project])
    after = matcher.match(
        make_transaction(transaction_date=date(2024, 6, 20)), None, [project]
    )

    assert inside.reason == "within project period"
    assert after.reason == "5 days after end"


def test_project_without_start_date_has_no_date_signal(matcher):
    project = _project(start_date=None, status=ProjectStatus.COMPLETED)

    result = matcher.match(make_transaction(transaction_date=date(2024, 4, 1)), CLIENT, [project])

    assert result.reason == "client match"


def test_highest_score_wins_and_first_wins_ties(matcher):
    planning = _project(id=1, status=ProjectStatus.PLANNING)
    active = _project(id=2)
    active_twin = _project(id=3)
    txn = make_transaction(transaction_date=date(2024, 4, 1))

    result = matcher.match(txn, CLIENT, [planning, active, active_twin])

    assert result.project.id == 2


def test_nothing_scores(matcher):
    project = _project(client_id=99, status=ProjectStatus.CANCELLED)
    txn = make_transaction(transaction_date=date(2023, 1, 1))

    result = matcher.match(txn, CLIENT, [project])

    assert result.project is None
    assert result.confidence == 0
    assert result.reason == NO_MATCHING_PROJECT


def test_configurable_window():
    matcher = ProjectMatcher(MatchingConfig(near_period_days=5), clock=lambda: TODAY)
    txn = make_transaction(transaction_date=date(2024, 2, 20))

    result = matcher.match(txn, None, [_project(status=ProjectStatus.CANCELLED)])

    assert result.project is None
