from __future__ import annotations

import logging

import pytest

from flashdeck.srs import ReviewSettings, normalize_settings


def test_defaults_are_used_for_missing_values() -> None:
    assert normalize_settings({}) == ReviewSettings(
        new_cards_per_day=20,
        max_interval=90,
        default_ease_factor=2.5,
        learning_steps=(10, 1440),
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"new_cards_per_day": 0}, 1),
        ({"new_cards_per_day": 250}, 100),
        ({"new_cards_per_day": "15"}, 15),
        ({"new_cards_per_day": 7.9}, 7),
    ],
)
def test_new_cards_per_day_is_clamped(raw, expected) -> None:
    assert normalize_settings(raw).new_cards_per_day == expected


@pytest.mark.parametrize(("value", "expected"), [(-4, 1), (0, 1), (500, 365), (120, 120)])
def test_max_interval_is_clamped(value, expected) -> None:
    assert normalize_settings({"max_interval": value}).max_interval == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.0, 1.3), (3.5, 3.0), (2.346, 2.35), (2.0, 2.0)],
)
def test_default_ease_is_clamped_and_rounded(value, expected) -> None:
    result = normalize_settings({"default_ease_factor": value}).default_ease_factor

    assert result == pytest.approx(expected)


def test_learning_steps_drop_invalid_entries() -> None:
    settings = normalize_settings({"learning_steps": [10, -5, 0, "abc", None, 60, 1440]})

    assert settings.learning_steps == (10, 60, 1440)


def test_learning_steps_accept_comma_separated_text() -> None:
    settings = normalize_settings({"learning_steps": " 1, 10 ,, 60"})

    assert settings.learning_steps == (1, 10, 60)


def test_empty_learning_steps_fall_back_to_previous() -> None:
    previous = ReviewSettings(learning_steps=(5, 25))

    settings = normalize_settings({"learning_steps": [0, -1, "x"]}, previous=previous)

    assert settings.learning_steps == (5, 25)


def test_unparsable_values_keep_previous_settings(caplog) -> None:
    previous = ReviewSettings(new_cards_per_day=40, max_interval=200, default_ease_factor=2.1)

    with caplog.at_level(logging.WARNING, logger="flashdeck.srs.settings"):
        settings = normalize_settings(
            {
                "new_cards_per_day": "lots",
                "max_interval": float("inf"),
                "default_ease_factor": float("nan"),
            },
            previous=previous,
        )

    assert settings.new_cards_per_day == 40
    assert settings.max_interval == 200
    assert settings.default_ease_factor == pytest.approx(2.1)
    assert "new_cards_per_day" in caplog.text


def test_normalized_settings_are_stable() -> None:
    once = normalize_settings({"new_cards_per_day": 500, "learning_steps": "3,30"})
    twice = normalize_settings(
        {
            "new_cards_per_day": once.new_cards_per_day,
            "max_interval": once.max_interval,
            "default_ease_factor": once.default_ease_factor,
            "learning_steps": once.learning_steps,
        }
    )

    assert once == twice


def test_integers_too_large_for_float_fall_back() -> None:
    previous = ReviewSettings(new_cards_per_day=12, max_interval=60, default_ease_factor=2.4)
    huge = 10**400

    settings = normalize_settings(
        {
            "new_cards_per_day": huge,
            "max_interval": huge,
            "default_ease_factor": huge,
            "learning_steps": [huge, 5],
        },
        previous=previous,
    )

    assert settings.new_cards_per_day == 12
    assert settings.max_interval == 60
    assert settings.default_ease_factor == pytest.approx(2.4)
    assert settings.learning_steps == (5,)
