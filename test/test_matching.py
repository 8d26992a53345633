import pytest

from delivery_reconciler.matching import (
    best_match,
    find_directory_entry,
    name_similarity,
    names_overlap,
)
from delivery_reconciler.model import DirectoryEntry


@pytest.mark.parametrize(
    "first, second, score",
    [
        ("Beta Cafe", "betacafe", 100),
        ("Acme", "Acme Store", 80),
        ("Acme Store", "acme", 80),
        ("Alpha Market", "Alpine", 60),
        ("Acme", "Zeta", 0),
        ("", "Acme", 0),
    ],
)
def test_name_similarity_tiers(first, second, score):
    assert name_similarity(first, second) == score


def test_best_match_tie_keeps_first_candidate():
    index, score = best_match("Acme", ["Acme Store", "Acme Shop"])
    assert (index, score) == (0, 80)


def test_best_match_skips_claimed():
    index, score = best_match("Acme", ["Acme", "Acme Shop"], claimed={0})
    assert (index, score) == (1, 80)


def test_best_match_prefers_higher_score():
    index, score = best_match("Acme", ["Acme Shop", "ACME"])
    assert (index, score) == (1, 100)


def test_best_match_without_candidates():
    assert best_match("Acme", []) == (None, 0)


def test_names_overlap_either_direction():
    assert names_overlap("Acme", "Acme Store Maadi")
    assert names_overlap("Acme Store Maadi", "acme")
    assert not names_overlap("Acme", "Beta")


def test_find_directory_entry():
    directory = [
        DirectoryEntry("Beta Cafe", "Zone B"),
        DirectoryEntry("Acme Store", "Zone A", is_freezer_client=True),
        DirectoryEntry("Acme Store Annex", "Zone C"),
    ]
    entry = find_directory_entry("acme", directory)
    assert entry is not None
    assert entry.location == "Zone A"
    assert find_directory_entry("Gamma", directory) is None
