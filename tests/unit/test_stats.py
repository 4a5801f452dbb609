import pytest

from petpal.domain.stats import (
    Mood,
    PetStats,
    Stage,
    WeekSnapshot,
    average_stat,
    care_grade,
    derive_mood,
    evolution_stage,
    weighted_mood_score,
)


def test_baseline_vector():
    stats = PetStats.baseline()
    assert stats.as_dict() == {"hunger": 80, "happiness": 70, "energy": 80, "health": 80, "hygiene": 70}


def test_copy_is_independent():
    stats = PetStats.baseline()
    clone = stats.copy()
    clone.hunger = 10
    assert stats.hunger == 80


def test_weighted_mood_score_baseline():
    # 0.3*80 + 0.3*70 + 0.25*80 + 0.1*80 + 0.05*70
    assert weighted_mood_score(PetStats.baseline()) == pytest.approx(76.5)


class TestMood:

    def test_sick_overrides_energetic(self):
        stats = PetStats(hunger=80, happiness=80, energy=95, health=10, hygiene=80)
        assert derive_mood(stats) is Mood.SICK

    def test_tired_before_weighted(self):
        stats = PetStats(hunger=100, happiness=100, energy=20, health=100, hygiene=100)
        assert derive_mood(stats) is Mood.TIRED

    def test_energetic(self):
        stats = PetStats(hunger=10, happiness=10, energy=90, health=50, hygiene=10)
        assert derive_mood(stats) is Mood.ENERGETIC

    def test_happy_from_weighted(self):
        assert derive_mood(PetStats.baseline()) is Mood.HAPPY

    def test_sad_from_weighted(self):
        stats = PetStats(hunger=20, happiness=20, energy=50, health=40, hygiene=20)
        assert derive_mood(stats) is Mood.SAD

    def test_content_in_between(self):
        stats = PetStats(hunger=60, happiness=60, energy=60, health=60, hygiene=60)
        assert derive_mood(stats) is Mood.CONTENT


@pytest.mark.parametrize("age,stage", [(0, Stage.BABY), (4, Stage.BABY), (5, Stage.TEEN),
                                       (9, Stage.TEEN), (10, Stage.ADULT), (40, Stage.ADULT)])
def test_evolution_stage(age, stage):
    assert evolution_stage(age) is stage


def test_care_grade_and_average():
    assert care_grade(PetStats(90, 90, 90, 90, 90)) == "A"
    assert care_grade(PetStats.baseline()) == "B"
    assert care_grade(PetStats(60, 60, 60, 60, 60)) == "C"
    assert care_grade(PetStats(45, 45, 45, 45, 45)) == "D"
    assert care_grade(PetStats(10, 10, 10, 10, 10)) == "F"
    assert average_stat(PetStats.baseline()) == 76


def test_snapshot_keeps_scored_stats_only():
    snap = WeekSnapshot.from_stats(PetStats(hunger=1, happiness=70, energy=60, health=80, hygiene=2))
    assert snap == WeekSnapshot(happiness=70, health=80, energy=60)
