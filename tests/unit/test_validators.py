import pytest

from petpal.domain.validators import (
    ErrorKind,
    PET_NAME_CHARSET,
    clamp_stat,
    validate_affordability,
    validate_budget,
    validate_bounded_delta,
    validate_name_token,
    validate_owner_name,
    validate_pet_name,
    validate_savings_goal,
    validate_trick_name,
    validate_unique,
)


def test_affordability_accepts_exact_wallet():
    result = validate_affordability(10, 10)
    assert result.valid
    assert result.error is None


@pytest.mark.parametrize("cost,wallet", [(15, 10), (0, 100), (-5, 100), (5, -20)])
def test_affordability_rejections(cost, wallet):
    result = validate_affordability(cost, wallet)
    assert not result.valid
    assert result.error == "Unaffordable"


def test_bounded_delta_clamps_to_ceiling():
    result = validate_bounded_delta(90, 20)
    assert result.valid
    assert result.delta == 10


def test_bounded_delta_clamps_to_floor():
    result = validate_bounded_delta(3, -5)
    assert result.valid
    assert result.delta == -3


def test_bounded_delta_at_bound_is_out_of_range():
    assert validate_bounded_delta(100, 5).error == ErrorKind.OUT_OF_RANGE.value
    assert validate_bounded_delta(0, -2).error == ErrorKind.OUT_OF_RANGE.value


def test_bounded_delta_zero_request_is_valid():
    result = validate_bounded_delta(100, 0)
    assert result.valid
    assert result.delta == 0


def test_clamp_stat():
    assert clamp_stat(-4) == 0
    assert clamp_stat(140) == 100
    assert clamp_stat(55) == 55


class TestNameTokens:

    def test_trims_whitespace(self):
        assert validate_name_token("  Rex  ", 20, PET_NAME_CHARSET).valid

    @pytest.mark.parametrize("name", ["", "   ", None, "A" * 21, "Rex!", "Mr. Rex"])
    def test_bad_pet_names(self, name):
        result = validate_pet_name(name)
        assert not result.valid
        assert result.error == "InvalidFormat"

    @pytest.mark.parametrize("value", [42, 3.5, ["Sit"], {"name": "Rex"}, b"Rex"])
    def test_non_string_is_invalid_format(self, value):
        result = validate_name_token(value, 20, PET_NAME_CHARSET)
        assert not result.valid
        assert result.error == "InvalidFormat"
        assert validate_trick_name(value, []).error == "InvalidFormat"

    def test_owner_name_allows_punctuation(self):
        assert validate_owner_name("Mary-Jane O'Neil Jr.").valid

    def test_owner_name_length_limit(self):
        assert validate_owner_name("A" * 30).valid
        assert not validate_owner_name("A" * 31).valid

    def test_unique_is_case_insensitive(self):
        result = validate_unique("sit", ["Sit", "Roll Over"])
        assert result.error == "Duplicate"
        assert validate_unique("Play Dead", ["Sit"]).valid

    def test_trick_name_checks_format_before_uniqueness(self):
        assert validate_trick_name("Sit@", ["Sit@"]).error == "InvalidFormat"
        assert validate_trick_name("SIT", ["sit"]).error == "Duplicate"
        assert validate_trick_name("High Five", []).valid


class TestBudget:

    @pytest.mark.parametrize("amount", [50, 200, 500, 120])
    def test_valid_budgets(self, amount):
        assert validate_budget(amount).valid

    @pytest.mark.parametrize("amount", [40, 510, 0, -100])
    def test_out_of_range(self, amount):
        assert validate_budget(amount).error == "OutOfRange"

    @pytest.mark.parametrize("amount", [125, "200", None, True, 60.5])
    def test_invalid_format(self, amount):
        assert validate_budget(amount).error == "InvalidFormat"

    def test_savings_goal(self):
        assert validate_savings_goal(100, 200).valid
        assert validate_savings_goal(250, 200).error == "OutOfRange"
        assert validate_savings_goal(0, 200).error == "OutOfRange"
        assert validate_savings_goal(10.5, 200).error == "InvalidFormat"
        assert validate_savings_goal("50", 200).error == "InvalidFormat"
