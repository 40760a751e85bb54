from datetime import date

import pytest

from emr_core.patients.models import BloodType, Sex
from emr_core.patients.services import map_blood_type, map_sex, parse_loose_date, split_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Kevin Ketong Gao", ("Kevin Ketong", "Gao")),
        ("  Jane   Doe ", ("Jane", "Doe")),
        ("Cher", ("Cher", "")),
        ("", ("", "")),
        (None, ("", "")),
    ],
)
def test_split_name(raw, expected):
    assert split_name(raw) == expected


def test_map_sex():
    assert map_sex("Male") == Sex.MALE
    assert map_sex("f") == Sex.FEMALE
    assert map_sex("other") == Sex.OTHER
    assert map_sex("n/a") == Sex.UNKNOWN
    assert map_sex(None) == Sex.UNKNOWN


def test_map_blood_type_accepts_labels_and_values():
    assert map_blood_type("O+") == BloodType.O_POS
    assert map_blood_type("ab -") == BloodType.AB_NEG
    assert map_blood_type("A_POS") == BloodType.A_POS
    assert map_blood_type("purple") is None
    assert map_blood_type("") is None


def test_parse_loose_date():
    assert parse_loose_date("1995-03-15") == date(1995, 3, 15)
    assert parse_loose_date("2024-01-15T10:30:00Z") == date(2024, 1, 15)
    assert parse_loose_date("03/15/1995") == date(1995, 3, 15)
    assert parse_loose_date("last spring") is None
    assert parse_loose_date(19950315) is None
