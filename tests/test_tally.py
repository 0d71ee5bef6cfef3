import pytest

from cafe_app.services.tally_service import resolve
from cafe_app.utils.errors import NoOptionsError


def counts(*values):
    return [{"id": i + 1, "vote_count": v} for i, v in enumerate(values)]


def test_unique_winner():
    outcome = resolve(counts(7, 5, 3))
    assert outcome["tie"] is False
    assert outcome["winner"]["id"] == 1
    assert outcome["total_votes"] == 7
    assert outcome["votes_cast"] == 15


def test_two_way_tie():
    outcome = resolve(counts(5, 5, 3))
    assert outcome["tie"] is True
    assert [o["id"] for o in outcome["tied_options"]] == [1, 2]
    assert outcome["no_votes"] is False


def test_three_way_tie():
    outcome = resolve(counts(2, 2, 2))
    assert outcome["tie"] is True
    assert len(outcome["tied_options"]) == 3


def test_winner_not_in_first_position():
    outcome = resolve(counts(1, 0, 4))
    assert outcome["tie"] is False
    assert outcome["winner"]["id"] == 3


def test_zero_votes_is_reported_as_tie_across_all_options():
    outcome = resolve(counts(0, 0, 0))
    assert outcome["tie"] is True
    assert outcome["no_votes"] is True
    assert len(outcome["tied_options"]) == 3


def test_single_option_without_votes_is_not_a_winner():
    outcome = resolve(counts(0))
    assert outcome["tie"] is True
    assert outcome["no_votes"] is True


def test_empty_tally_raises():
    with pytest.raises(NoOptionsError):
        resolve([])
