import pytest

from bulklog.schemas import UserOut
from bulklog.services.plan import suggest_six_day_plan


def _user(**metrics):
    return UserOut(id=1, name="Dana", email="dana@example.com", **metrics)


@pytest.mark.parametrize("profile, first_focus", [
    ({"fatPercentage": 30, "muscleWeightKg": 45}, "Upper Push"),
    ({"fatPercentage": 27, "muscleWeightKg": 20}, "Upper Push"),
    ({"fatPercentage": 15, "muscleWeightKg": 25}, "Full Body A"),
    ({"fatPercentage": 15, "muscleWeightKg": 30}, "Push Heavy"),
])
def test_split_selection(profile, first_focus):
    plan = suggest_six_day_plan(profile)

    assert len(plan) == 6
    assert plan[0].focus == first_focus
    assert [d.day for d in plan] == [f"Day {i}" for i in range(1, 7)]


def test_accepts_user_projection():
    plan = suggest_six_day_plan(_user(fat_percentage=12.0, muscle_weight_kg=40.0))
    assert plan[-1].focus == "Leg Volume + Cardio"


def test_incomplete_profile_counts_as_zero():
    assert suggest_six_day_plan(None)[0].focus == "Full Body A"
    assert suggest_six_day_plan({"fatPercentage": None})[0].focus == "Full Body A"


def test_plans_do_not_share_lists():
    first = suggest_six_day_plan(None)
    first[0].exercises.append("Extra")

    assert "Extra" not in suggest_six_day_plan(None)[0].exercises
