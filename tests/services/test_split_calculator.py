from decimal import Decimal

import pytest

from fintrack.core.exceptions import InvalidInputError, InvalidSplitError
from fintrack.models.shared_expense import SplitMethod
from fintrack.services.split_calculator import ShareInput, compute_shares

TOLERANCE = Decimal("0.01")


def _people(n, **inputs):
    return [ShareInput(identity=f"user{i}@example.com", **inputs) for i in range(n)]


def _total(results):
    return sum((r.amount_owed for r in results), Decimal("0"))


@pytest.mark.parametrize("method, participants", [
    (SplitMethod.EQUAL, _people(3)),
    (SplitMethod.EQUAL, _people(7)),
    (SplitMethod.PERCENTAGE, [
        ShareInput(identity="a@example.com", percentage=Decimal("33.33")),
        ShareInput(identity="b@example.com", percentage=Decimal("33.33")),
        ShareInput(identity="c@example.com", percentage=Decimal("33.34")),
    ]),
    (SplitMethod.SHARES, [
        ShareInput(identity="a@example.com", shares=1),
        ShareInput(identity="b@example.com", shares=2),
        ShareInput(identity="c@example.com", shares=4),
    ]),
    (SplitMethod.CUSTOM, [
        ShareInput(identity="a@example.com", custom_amount=Decimal("60")),
        ShareInput(identity="b@example.com", custom_amount=Decimal("40")),
    ]),
])
def test_owed_amounts_add_up_to_total(method, participants):
    results = compute_shares(Decimal("100"), method, participants)
    assert abs(_total(results) - Decimal("100")) <= TOLERANCE


def test_equal_split_gives_everyone_the_same_amount():
    results = compute_shares(Decimal("100"), SplitMethod.EQUAL, _people(3))

    assert len({r.amount_owed for r in results}) == 1
    assert results[0].amount_owed == Decimal("100") / 3


def test_equal_split_of_odd_cents_stays_within_tolerance():
    results = compute_shares(Decimal("33.33"), SplitMethod.EQUAL, _people(3))

    for r in results:
        assert abs(r.amount_owed - Decimal("11.11")) <= TOLERANCE
    assert abs(_total(results) - Decimal("33.33")) <= TOLERANCE


def test_equal_split_accepts_float_total():
    results = compute_shares(33.33, SplitMethod.EQUAL, _people(3))
    assert results[0].amount_owed == Decimal("11.11")


def test_shares_split_is_proportional():
    results = compute_shares(Decimal("90.00"), SplitMethod.SHARES, [
        ShareInput(identity="a@example.com", shares=1),
        ShareInput(identity="b@example.com", shares=2),
    ])

    assert results[0].amount_owed == Decimal("30")
    assert results[1].amount_owed == Decimal("60")


def test_doubling_every_share_count_changes_nothing():
    single = compute_shares(Decimal("90"), SplitMethod.SHARES, [
        ShareInput(identity="a@example.com", shares=1),
        ShareInput(identity="b@example.com", shares=2),
    ])
    doubled = compute_shares(Decimal("90"), SplitMethod.SHARES, [
        ShareInput(identity="a@example.com", shares=2),
        ShareInput(identity="b@example.com", shares=4),
    ])

    assert [r.amount_owed for r in single] == [r.amount_owed for r in doubled]


def test_missing_share_count_counts_as_one():
    results = compute_shares(Decimal("30"), SplitMethod.SHARES, [
        ShareInput(identity="a@example.com"),
        ShareInput(identity="b@example.com", shares=2),
    ])

    assert results[0].amount_owed == Decimal("10")
    assert results[1].amount_owed == Decimal("20")


def test_custom_amounts_pass_through_unchanged():
    results = compute_shares(Decimal("50.00"), SplitMethod.CUSTOM, [
        ShareInput(identity="a@example.com", custom_amount=Decimal("20")),
        ShareInput(identity="b@example.com", custom_amount=Decimal("30")),
    ])

    assert [r.amount_owed for r in results] == [Decimal("20"), Decimal("30")]
    assert _total(results) == Decimal("50")


def test_percentages_over_100_are_projected_not_rejected():
    results = compute_shares(Decimal("100"), SplitMethod.PERCENTAGE, [
        ShareInput(identity="a@example.com", percentage=Decimal("60")),
        ShareInput(identity="b@example.com", percentage=Decimal("50")),
    ])

    assert _total(results) == Decimal("110")


def test_missing_percentage_counts_as_zero():
    results = compute_shares(Decimal("80"), SplitMethod.PERCENTAGE, [
        ShareInput(identity="a@example.com", percentage=Decimal("100")),
        ShareInput(identity="b@example.com"),
    ])

    assert results[1].amount_owed == Decimal("0")


def test_results_keep_input_order_and_inputs():
    participants = [
        ShareInput(identity="z@example.com", name="Zed", shares=3),
        ShareInput(identity="a@example.com", name="Ann", shares=1),
    ]
    results = compute_shares(Decimal("40"), SplitMethod.SHARES, participants)

    assert [(r.identity, r.name, r.shares) for r in results] == [
        ("z@example.com", "Zed", 3),
        ("a@example.com", "Ann", 1),
    ]


def test_same_inputs_give_same_outputs():
    participants = _people(4, percentage=Decimal("25"))
    first = compute_shares(Decimal("99.99"), SplitMethod.PERCENTAGE, participants)
    second = compute_shares(Decimal("99.99"), SplitMethod.PERCENTAGE, participants)

    assert first == second
    assert all(p.percentage == Decimal("25") for p in participants)


@pytest.mark.parametrize("method", [SplitMethod.EQUAL, SplitMethod.SHARES])
def test_empty_participants_cannot_be_divided(method):
    with pytest.raises(InvalidSplitError):
        compute_shares(Decimal("10"), method, [])


@pytest.mark.parametrize("total", [Decimal("0"), Decimal("-5"), -1.5])
def test_total_must_be_positive(total):
    with pytest.raises(InvalidInputError):
        compute_shares(total, SplitMethod.EQUAL, _people(2))


@pytest.mark.parametrize("inputs", [
    {"percentage": Decimal("-1")},
    {"shares": -2},
    {"custom_amount": Decimal("-0.01")},
])
def test_negative_inputs_are_rejected(inputs):
    method = {
        "percentage": SplitMethod.PERCENTAGE,
        "shares": SplitMethod.SHARES,
        "custom_amount": SplitMethod.CUSTOM,
    }[next(iter(inputs))]

    with pytest.raises(InvalidInputError):
        compute_shares(Decimal("10"), method, [ShareInput(identity="a@example.com", **inputs)])
