import pytest

from gamecenter.core.errors import ValidationError
from gamecenter.utils.durations import format_minutes, parse_duration_label


@pytest.mark.parametrize(
    "label,minutes",
    [
        ("30 mins", 30),
        ("1 hour", 60),
        ("2 hours", 120),
        ("1 hour 30 mins", 90),
        ("90 minutes", 90),
        ("1.5 hours", 90),
        ("  45 MINS ", 45),
    ],
)
def test_parse_duration_label(label, minutes):
    assert parse_duration_label(label) == minutes


@pytest.mark.parametrize("label", ["", "soon", "0 mins", "1 hour extra", "0.25 mins"])
def test_bad_labels_rejected(label):
    with pytest.raises(ValidationError):
        parse_duration_label(label)


@pytest.mark.parametrize(
    "minutes,label",
    [(30, "30 mins"), (60, "1 hour"), (90, "1 hour 30 mins"), (120, "2 hours")],
)
def test_format_minutes(minutes, label):
    assert format_minutes(minutes) == label
