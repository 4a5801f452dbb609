import pytest

from petpal.domain.catalog import get_food, get_toy, get_vet_option
from petpal.domain.pet import Pet, health_penalty
from petpal.domain.stats import STAT_NAMES, Mood, PetStats, Stage


class FixedRandom:
    """Stand-in RNG that always rolls the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestDecay:

    def test_single_tick_from_baseline(self, pet):
        applied = pet.apply_decay_tick()
        assert pet.stats.hunger == 75
        assert pet.stats.happiness == 67
        assert pet.stats.energy == 78
        assert pet.stats.hygiene == 68
        assert pet.stats.health == 80
        assert "health" not in applied

    def test_combined_health_penalty(self, pet_factory):
        pet = pet_factory(hunger=25, hygiene=25)
        applied = pet.apply_decay_tick()
        assert applied["health"] == -8
        assert pet.stats.health == 72

    def test_penalty_uses_values_before_decay(self, pet_factory):
        # 52 decays to 47 this tick, but the penalty is judged on 52
        pet = pet_factory(hunger=52, hygiene=80)
        pet.apply_decay_tick()
        assert pet.stats.health == 80

    @pytest.mark.parametrize("hunger,hygiene,expected", [
        (80, 80, 0), (45, 80, 2), (29, 80, 5), (80, 45, 1), (80, 10, 3), (40, 40, 3), (0, 0, 8),
    ])
    def test_health_penalty_table(self, hunger, hygiene, expected):
        assert health_penalty(hunger, hygiene) == expected

    def test_stats_at_zero_stay_at_zero(self, pet_factory):
        pet = pet_factory(hunger=0, happiness=0, energy=0, hygiene=0, health=3)
        applied = pet.apply_decay_tick()
        assert pet.stats.as_dict() == {"hunger": 0, "happiness": 0, "energy": 0, "health": 0, "hygiene": 0}
        assert applied == {"health": -3}

    def test_crisis_flag_is_sticky(self, pet_factory):
        pet = pet_factory(health=22, hunger=10, hygiene=10)
        pet.apply_decay_tick()
        assert pet.stats.health == 14
        assert pet.profile.health_crisis
        pet.visit_vet(get_vet_option("checkup"), wallet=100)
        assert pet.stats.health == 34
        assert pet.profile.health_crisis

    def test_many_ticks_stay_in_bounds(self, pet):
        for _ in range(200):
            pet.apply_decay_tick()
            for name in STAT_NAMES:
                assert 0 <= getattr(pet.stats, name) <= 100
        assert pet.mood is Mood.SICK


class TestActions:

    def test_feed_standard(self, pet_factory):
        pet = pet_factory(hunger=40, happiness=50)
        result = pet.feed(get_food("premium_meal"), wallet=50)
        assert result.valid
        assert result.cost == 6
        assert result.applied_effects == {"hunger": 30, "happiness": 5}
        assert pet.stats.hunger == 70
        assert pet.stats.happiness == 55

    def test_feed_unaffordable_leaves_pet_untouched(self, pet):
        before = pet.stats.as_dict()
        result = pet.feed(get_food("gourmet_feast"), wallet=10)
        assert not result.valid
        assert result.error == "Unaffordable"
        assert pet.stats.as_dict() == before
        assert pet.profile.action_log == []

    def test_feed_rejected_when_full(self, pet_factory):
        pet = pet_factory(hunger=100)
        result = pet.feed(get_food("basic_kibble"), wallet=50)
        assert result.error == "OutOfRange"
        assert result.message

    def test_feed_bonus_at_max_rejects_whole_meal(self, pet_factory):
        pet = pet_factory(hunger=40, happiness=100)
        result = pet.feed(get_food("premium_meal"), wallet=50)
        assert not result.valid
        assert pet.stats.hunger == 40

    def test_mystery_snack_uses_injected_rng(self, pet_factory):
        low = pet_factory(hunger=40, rng=FixedRandom(0.1))
        assert low.feed(get_food("mystery_snack"), wallet=5).applied_effects["hunger"] == 5

        high = pet_factory(hunger=40, rng=FixedRandom(0.9))
        assert high.feed(get_food("mystery_snack"), wallet=5).applied_effects["hunger"] == 25

    def test_play_moves_happiness_and_energy(self, pet_factory):
        pet = pet_factory(happiness=40, energy=50)
        result = pet.play(get_toy("puzzle_toy"), wallet=20)
        assert result.valid
        assert pet.stats.happiness == 75
        assert pet.stats.energy == 35

    def test_play_with_no_energy_is_rejected(self, pet_factory):
        pet = pet_factory(happiness=40, energy=0)
        result = pet.play(get_toy("yarn_ball"), wallet=20)
        assert result.error == "OutOfRange"
        assert pet.stats.happiness == 40

    def test_rest_is_free_and_clamped(self, pet_factory):
        pet = pet_factory(energy=90)
        result = pet.rest()
        assert result.valid and result.cost == 0
        assert pet.stats.energy == 100
        assert pet.rest().error == "OutOfRange"

    def test_clean(self, pet_factory):
        pet = pet_factory(hygiene=30)
        result = pet.clean(wallet=2)
        assert result.valid and result.cost == 2
        assert pet.stats.hygiene == 60
        assert pet.clean(wallet=1).error == "Unaffordable"

    def test_full_treatment_applies_all_bonuses(self, pet_factory):
        pet = pet_factory(hunger=50, happiness=50, energy=50, health=30, hygiene=50)
        result = pet.visit_vet(get_vet_option("full_treatment"), wallet=100)
        assert result.valid
        assert pet.stats.as_dict() == {"hunger": 60, "happiness": 60, "energy": 60, "health": 80, "hygiene": 60}

    def test_full_treatment_rejected_if_any_bonus_is_at_max(self, pet_factory):
        pet = pet_factory(health=30, hygiene=100)
        before = pet.stats.as_dict()
        result = pet.visit_vet(get_vet_option("full_treatment"), wallet=100)
        assert result.error == "OutOfRange"
        assert pet.stats.as_dict() == before

    def test_teach_trick(self, pet):
        assert pet.teach_trick("Sit", wallet=50).valid
        assert pet.profile.tricks == ["Sit"]
        assert pet.teach_trick("sit", wallet=50).error == "Duplicate"
        assert pet.teach_trick("Sit!", wallet=50).error == "InvalidFormat"
        assert pet.teach_trick("Roll Over", wallet=5).error == "Unaffordable"
        assert pet.profile.tricks == ["Sit"]

    def test_successful_actions_are_logged(self, pet_factory):
        pet = pet_factory(hunger=40, energy=40)
        pet.feed(get_food("basic_kibble"), wallet=10)
        pet.rest()
        assert [entry.action for entry in pet.profile.action_log] == ["feed", "rest"]


class TestLifecycle:

    def test_aging_changes_stage(self, pet):
        for _ in range(5):
            pet.age_tick()
        assert pet.stage is Stage.TEEN
        for _ in range(5):
            pet.age_tick()
        assert pet.stage is Stage.ADULT

    def test_reset_restores_baseline(self, pet):
        pet.teach_trick("Sit", wallet=50)
        pet.record_minigame()
        for _ in range(30):
            pet.apply_decay_tick()
        pet.age_tick()
        pet.reset()
        assert pet.stats == PetStats.baseline()
        assert pet.profile.age == 0
        assert pet.profile.tricks == []
        assert pet.profile.minigames_played == 0
        assert not pet.profile.health_crisis
        assert pet.name == "Biscuit"

    def test_customization_is_normalized(self):
        pet = Pet.create("Rex", customization={"animal_color": "neon", "accessory": "crown", "personality": "shy"})
        assert pet.profile.customization == {"animal_color": "golden", "accessory": "crown", "personality": "shy"}

    def test_to_dict(self, pet):
        data = pet.to_dict()
        assert data["name"] == "Biscuit"
        assert data["owner_name"] == "Sam"
        assert data["stage"] == "baby"
        assert data["stats"]["hunger"] == 80
