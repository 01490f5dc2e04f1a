import itertools
import random

import pytest

from app.services.matching import Persona, quality_label, rank_candidates, score_match


def _persona(wallet, interests=(), looking_for=(), pid=None):
    return Persona(
        id=pid or wallet,
        wallet_address=wallet,
        display_name=f"user {wallet}",
        interests=list(interests),
        looking_for=list(looking_for),
    )


TAGS = ["defi", "nft", "dao", "zk", "l2", "gaming", "art"]
GOALS = ["cofounder", "investor", "hiring", "mentor"]


def _random_personas(n, seed=7):
    rng = random.Random(seed)
    return [
        _persona(
            f"0x{i:040x}",
            rng.sample(TAGS, rng.randint(0, len(TAGS))),
            rng.sample(GOALS, rng.randint(0, len(GOALS))),
        )
        for i in range(n)
    ]


def test_four_shared_interests_hit_the_interest_cap():
    user = _persona("0xuser", ["a", "b", "c", "d", "e"])
    candidate = _persona("0xcand", ["a", "b", "c", "d"])

    result = score_match(user, candidate)

    assert result.shared_interests == ["a", "b", "c", "d"]
    assert result.score == 40
    assert result.percentage == 40
    assert quality_label(result.percentage).label == "Good Match"


def test_three_shared_goals_are_capped_at_sixty():
    user = _persona("0xuser", looking_for=["x", "y", "z"])
    candidate = _persona("0xcand", looking_for=["z", "y", "x"])

    result = score_match(user, candidate)

    assert result.shared_looking_for == ["x", "y", "z"]
    assert result.score == 60


def test_full_overlap_scores_one_hundred():
    user = _persona("0xuser", TAGS, GOALS)
    result = score_match(user, _persona("0xcand", TAGS, GOALS))

    assert result.score == 100
    assert result.percentage == 100
    assert quality_label(result.percentage).tier == "excellent"


def test_reasons_preview_three_tags_and_count_the_rest():
    user = _persona("0xuser", ["a", "b", "c", "d", "e"], ["hiring"])
    candidate = _persona("0xcand", ["e", "d", "c", "b", "a"], ["hiring"])

    result = score_match(user, candidate)

    assert result.reasons == [
        "You both are interested in #a, #b, #c and 2 more",
        "You both are looking for hiring",
    ]


def test_reasons_without_overflow():
    result = score_match(_persona("0xu", ["zk", "l2"]), _persona("0xc", ["l2", "zk"]))
    assert result.reasons == ["You both are interested in #zk, #l2"]


def test_goals_only_reason():
    result = score_match(_persona("0xu", looking_for=["mentor", "investor"]), _persona("0xc", looking_for=["investor", "mentor"]))
    assert result.reasons == ["You both are looking for mentor, investor"]
    assert result.score == 60


def test_empty_personas_score_zero():
    result = score_match(_persona("0xu"), _persona("0xc"))

    assert result.score == 0
    assert result.percentage == 0
    assert result.reasons == []
    assert result.shared_interests == []
    assert result.shared_looking_for == []


def test_duplicate_tags_count_once():
    result = score_match(_persona("0xu", ["a", "a", "b"]), _persona("0xc", ["a", "b", "b"]))
    assert result.shared_interests == ["a", "b"]
    assert result.score == 20


def test_membership_is_exact_string_equality():
    result = score_match(_persona("0xu", ["DeFi"]), _persona("0xc", ["defi"]))
    assert result.score == 0


def test_percentage_bounded_and_score_symmetric():
    people = _random_personas(12)
    for a, b in itertools.product(people, repeat=2):
        ab = score_match(a, b)
        ba = score_match(b, a)

        assert 0 <= ab.percentage <= 100
        assert set(ab.shared_interests) == set(ba.shared_interests)
        assert set(ab.shared_looking_for) == set(ba.shared_looking_for)
        assert ab.score == ba.score
        assert len(ab.reasons) <= 2


def test_rank_excludes_self_zero_scores_and_respects_limit():
    people = _random_personas(30, seed=3)
    user = people[0]
    # a second persona sharing the user's wallet (e.g. duplicated row) is still excluded
    pool = people + [_persona(user.wallet_address, TAGS, GOALS, pid="dup")]

    for limit in (1, 5, 10, 50):
        ranked = rank_candidates(user, pool, limit=limit)

        assert len(ranked) <= limit
        assert all(m.attendee.wallet_address != user.wallet_address for m in ranked)
        assert all(m.score > 0 for m in ranked)
        assert [m.score for m in ranked] == sorted((m.score for m in ranked), reverse=True)


def test_rank_keeps_pool_order_for_ties():
    user = _persona("0xuser", ["a", "b"], ["hiring"])
    pool = [
        _persona("0x1", ["a"]),
        _persona("0x2", ["a", "b"], ["hiring"]),
        _persona("0x3", ["b"]),
        _persona("0x4", ["zz"]),
        _persona("0x5", ["a"]),
    ]

    ranked = rank_candidates(user, pool)

    assert [m.attendee.wallet_address for m in ranked] == ["0x2", "0x1", "0x3", "0x5"]


def test_rank_default_limit_is_ten():
    user = _persona("0xuser", ["a"])
    pool = [_persona(f"0x{i}", ["a"]) for i in range(15)]

    assert len(rank_candidates(user, pool)) == 10


@pytest.mark.parametrize(
    "percentage,label",
    [
        (100, "Excellent Match"),
        (80, "Excellent Match"),
        (79, "Great Match"),
        (60, "Great Match"),
        (59.9, "Good Match"),
        (40, "Good Match"),
        (20, "Potential Match"),
        (19, "Low Match"),
        (0, "Low Match"),
    ],
)
def test_quality_label_bands(percentage, label):
    assert quality_label(percentage).label == label
