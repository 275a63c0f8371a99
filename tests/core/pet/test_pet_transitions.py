"""펫 전이 테스트: feed/play/sleep/heal/decay + 불변식"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.pet import (
    PetAction,
    PetState,
    PetStatus,
    PetType,
    apply_action,
    clamp,
    decay,
    derive_status,
    feed,
    heal,
    level_for_experience,
    new_pet,
    play,
    sanitize,
    sleep,
)

T0 = datetime(2024, 1, 1, 12, 0, 0)
NOW = T0 + timedelta(minutes=5)

TRANSITIONS = [feed, play, sleep, heal, decay]


def make_pet(**overrides) -> PetState:
    """기본값 펫 + 덮어쓰기"""
    fields = dict(
        pet_id="pet1",
        owner_id="user1",
        name="Mochi",
        pet_type=PetType.CAT,
        health=100,
        hunger=100,
        happiness=100,
        energy=100,
        experience=0,
        level=1,
        status=PetStatus.HAPPY,
        last_fed=T0,
        last_played=T0,
        last_slept=T0,
    )
    fields.update(overrides)
    return PetState(**fields)


# ── helpers ─────────────────────────────────────────────


class TestHelpers:
    def test_clamp(self) -> None:
        assert clamp(-5) == 0
        assert clamp(150) == 100
        assert clamp(42) == 42

    @pytest.mark.parametrize(
        "experience, level", [(0, 1), (99, 1), (100, 2), (105, 2), (250, 3)]
    )
    def test_level_for_experience(self, experience: int, level: int) -> None:
        assert level_for_experience(experience) == level

    def test_new_pet_defaults(self) -> None:
        pet = new_pet("p1", "u1", "Rex", PetType.DOG, T0)
        assert pet.vitals == {"health": 100, "hunger": 100, "happiness": 100, "energy": 100}
        assert pet.experience == 0
        assert pet.level == 1
        assert pet.status == PetStatus.ACTIVE
        assert pet.last_fed == pet.last_played == pet.last_slept == T0
        assert pet.active is True

    def test_sanitize_clamps_corrupt_input(self) -> None:
        pet = make_pet(health=140, hunger=-20, experience=-5, level=9, battles_won=-1)
        clean = sanitize(pet)
        assert clean.health == 100
        assert clean.hunger == 0
        assert clean.experience == 0
        assert clean.level == 1
        assert clean.battles_won == 0

    def test_derive_status(self) -> None:
        pet = make_pet(health=10, status=PetStatus.HAPPY)
        assert derive_status(pet).status == PetStatus.SICK


# ── actions ─────────────────────────────────────────────


class TestFeed:
    def test_feed_scenario(self) -> None:
        pet = make_pet(hunger=50, happiness=50, experience=95, level=1)
        fed = feed(pet, NOW)
        assert fed.hunger == 80
        assert fed.happiness == 60
        assert fed.experience == 105
        assert fed.level == 2
        assert fed.last_fed == NOW

    def test_feed_caps_at_100(self) -> None:
        fed = feed(make_pet(hunger=90, happiness=95), NOW)
        assert fed.hunger == 100
        assert fed.happiness == 100

    def test_feed_does_not_touch_other_timestamps(self) -> None:
        fed = feed(make_pet(), NOW)
        assert fed.last_played == T0
        assert fed.last_slept == T0

    def test_feed_clears_hunger_status(self) -> None:
        pet = make_pet(hunger=10, happiness=50, status=PetStatus.HUNGRY)
        assert feed(pet, NOW).status == PetStatus.ACTIVE

    def test_input_not_mutated(self) -> None:
        pet = make_pet(hunger=50)
        feed(pet, NOW)
        assert pet.hunger == 50


class TestPlay:
    def test_play_effects(self) -> None:
        pet = make_pet(happiness=50, energy=50, hunger=50, experience=90)
        played = play(pet, NOW)
        assert played.happiness == 75
        assert played.energy == 30
        assert played.hunger == 35
        assert played.experience == 105
        assert played.level == 2
        assert played.last_played == NOW
        assert played.last_fed == T0

    def test_play_floors_at_zero(self) -> None:
        played = play(make_pet(energy=5, hunger=5), NOW)
        assert played.energy == 0
        assert played.hunger == 0

    def test_exhausted_pet_sleeps(self) -> None:
        played = play(make_pet(energy=30), NOW)
        assert played.energy == 10
        assert played.status == PetStatus.SLEEPING


class TestSleep:
    def test_sleep_scenario(self) -> None:
        pet = make_pet(energy=50, health=50)
        slept = sleep(pet, NOW)
        assert slept.energy == 90
        assert slept.health == 60
        assert slept.status == PetStatus.ACTIVE
        assert slept.last_slept == NOW

    def test_sleep_overrides_classifier(self) -> None:
        """hunger/happiness가 낮아도 수면 판정은 energy만 본다"""
        pet = make_pet(energy=50, health=10, hunger=0, happiness=0)
        slept = sleep(pet, NOW)
        assert slept.health == 20
        assert slept.status == PetStatus.ACTIVE

    def test_low_energy_keeps_sleeping(self) -> None:
        slept = sleep(make_pet(energy=20), NOW)
        assert slept.energy == 60
        assert slept.status == PetStatus.SLEEPING

    def test_sleep_leaves_experience(self) -> None:
        slept = sleep(make_pet(experience=150, level=2), NOW)
        assert slept.experience == 150
        assert slept.level == 2


class TestHeal:
    def test_heal_effects(self) -> None:
        pet = make_pet(health=20, status=PetStatus.SICK)
        healed = heal(pet, NOW)
        assert healed.health == 50
        assert healed.status == PetStatus.ACTIVE

    def test_heal_caps_and_keeps_timestamps(self) -> None:
        healed = heal(make_pet(health=90), NOW)
        assert healed.health == 100
        assert (healed.last_fed, healed.last_played, healed.last_slept) == (T0, T0, T0)
        assert healed.experience == 0


class TestApplyAction:
    @pytest.mark.parametrize(
        "action, transition",
        [
            (PetAction.FEED, feed),
            (PetAction.PLAY, play),
            (PetAction.SLEEP, sleep),
            (PetAction.HEAL, heal),
        ],
    )
    def test_dispatch(self, action, transition) -> None:
        pet = make_pet(health=40, hunger=40, happiness=40, energy=40)
        assert apply_action(pet, action, NOW) == transition(pet, NOW)

    def test_string_action(self) -> None:
        assert apply_action(make_pet(hunger=10), "feed", NOW).hunger == 40

    def test_unknown_action(self) -> None:
        with pytest.raises(ValueError):
            apply_action(make_pet(), "dance", NOW)


# ── decay ───────────────────────────────────────────────


class TestDecay:
    def test_one_hour_since_fed(self) -> None:
        pet = make_pet(hunger=100)
        assert decay(pet, T0 + timedelta(hours=1)).hunger == 98

    def test_fractional_hours_floor(self) -> None:
        pet = make_pet(hunger=100)
        assert decay(pet, T0 + timedelta(hours=0.4)).hunger == 100

    def test_independent_bases(self) -> None:
        now = T0 + timedelta(hours=10)
        pet = make_pet(
            last_fed=now - timedelta(hours=4),
            last_played=now - timedelta(hours=2),
            last_slept=now - timedelta(hours=10),
        )
        decayed = decay(pet, now)
        assert decayed.hunger == 92  # 4 * 2
        assert decayed.happiness == 97  # 2 * 1.5
        assert decayed.energy == 90  # 10 * 1

    def test_health_and_experience_untouched(self) -> None:
        pet = make_pet(health=70, experience=40)
        decayed = decay(pet, T0 + timedelta(days=3))
        assert decayed.health == 70
        assert decayed.experience == 40
        assert (decayed.last_fed, decayed.last_played, decayed.last_slept) == (T0, T0, T0)

    def test_floor_at_zero(self) -> None:
        pet = make_pet()
        far = T0 + timedelta(days=3650)
        decayed = decay(decay(pet, far), far)
        assert decayed.hunger == 0
        assert decayed.happiness == 0
        assert decayed.energy == 0
        assert decayed.status == PetStatus.SLEEPING

    def test_future_timestamp_no_gain(self) -> None:
        pet = make_pet(hunger=50, last_fed=T0 + timedelta(hours=5))
        assert decay(pet, T0).hunger == 50

    def test_status_recomputed(self) -> None:
        pet = make_pet(hunger=40, status=PetStatus.ACTIVE)
        assert decay(pet, T0 + timedelta(hours=6)).status == PetStatus.HUNGRY

    def test_aware_now_against_naive_timestamps(self) -> None:
        pet = make_pet(hunger=100)
        now = (T0 + timedelta(hours=1)).replace(tzinfo=timezone.utc)
        assert decay(pet, now).hunger == 98


# ── invariants ──────────────────────────────────────────


class TestInvariants:
    @pytest.mark.parametrize("transition", TRANSITIONS)
    @pytest.mark.parametrize("value", [-50, 0, 15, 85, 100, 250])
    def test_vitals_clamped(self, transition, value: int) -> None:
        pet = make_pet(health=value, hunger=value, happiness=value, energy=value)
        result = transition(pet, T0 + timedelta(hours=30))
        for v in result.vitals.values():
            assert 0 <= v <= 100

    @pytest.mark.parametrize("transition", TRANSITIONS)
    def test_level_consistency(self, transition) -> None:
        pet = make_pet(experience=195, level=7)
        result = transition(pet, NOW)
        assert result.level == result.experience // 100 + 1

    @pytest.mark.parametrize("transition", TRANSITIONS)
    def test_deterministic(self, transition) -> None:
        pet = make_pet(health=55, hunger=45, happiness=35, energy=25)
        now = T0 + timedelta(hours=3, minutes=7)
        assert transition(pet, now) == transition(pet, now)

    def test_repeated_feed_accumulates(self) -> None:
        pet = make_pet(hunger=10)
        once = feed(pet, NOW)
        twice = feed(once, NOW)
        assert twice.hunger == 70
        assert once.last_fed == twice.last_fed == NOW

    def test_same_now_decay_is_repeatable(self) -> None:
        pet = make_pet(hunger=60)
        now = T0 + timedelta(hours=2, minutes=30)
        assert decay(pet, now) == decay(pet, now)
