import pytest

from roster.utils.formatters import format_cpf, format_name, only_digits
from roster.utils.validators import (
    parse_number, validate_cpf, validate_email, validate_name, validate_rating, validate_score, validate_weight,
)


@pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725", "111.444.777-35", " 111 444 777 35 "])
def test_valid_cpfs(cpf):
    assert validate_cpf(cpf) is None


@pytest.mark.parametrize("cpf, message", [
    ("", "CPF is required"),
    (None, "CPF is required"),
    ("abc", "CPF is required"),
    ("529.982.247", "CPF must have 11 digits"),
    ("5299822472512", "CPF must have 11 digits"),
    ("111.111.111-11", "Invalid CPF"),
    ("000.000.000-00", "Invalid CPF"),
    ("529.982.247-24", "Invalid CPF"),
    ("529.982.247-15", "Invalid CPF"),
])
def test_invalid_cpfs(cpf, message):
    assert validate_cpf(cpf) == message


def test_format_cpf_groups_digits():
    assert format_cpf("52998224725") == "529.982.247-25"
    assert format_cpf("529.982.247-25") == "529.982.247-25"


def test_format_cpf_leaves_other_lengths_as_digits():
    assert format_cpf("5299") == "5299"
    assert format_cpf("529.982.247-2512") == "5299822472512"


def test_only_digits():
    assert only_digits("529.982.247-25") == "52998224725"
    assert only_digits(None) == ""


@pytest.mark.parametrize("name", ["João da Silva", "Ana", "Zoë Müller", "Maria  Clara"])
def test_valid_names(name):
    assert validate_name(name) is None


def test_name_required():
    assert validate_name("") == "Name is required"
    assert validate_name("   ") == "Name is required"


@pytest.mark.parametrize("name", ["John3", "Ana-Maria", "Carl@s", "R2D2"])
def test_names_reject_digits_and_symbols(name):
    assert validate_name(name) == "Name cannot contain numbers or special characters"


def test_format_name_title_cases_every_word():
    assert format_name("joão da silva") == "João Da Silva"
    assert format_name("MARIA CLARA") == "Maria Clara"


def test_validate_email():
    assert validate_email("driver@fleet.com") is None
    assert validate_email("") == "Email is required"
    assert validate_email("driver@fleet") == "Please enter a valid email"


def test_rating_bounds_are_inclusive():
    assert validate_rating(0) is None
    assert validate_rating("10") is None
    assert validate_rating("7,5") is None
    assert validate_rating("10.5") == "Rating must be between 0 and 10"
    assert validate_rating(-1) == "Rating must be between 0 and 10"


def test_rating_requires_a_number():
    assert validate_rating("") == "Rating is required"
    assert validate_rating(None) == "Rating is required"
    assert validate_rating("abc") == "Enter a valid number"
    assert validate_rating("nan") == "Enter a valid number"


def test_score_range():
    assert validate_score(1) is None
    assert validate_score(0) == "Score must be between 1 and 10"
    assert validate_score(True) == "Enter a valid number"


def test_weight_must_be_integer_in_range():
    assert validate_weight(3) is None
    assert validate_weight(6) == "Weight must be between 1 and 5"
    assert validate_weight(2.5) == "Weight must be an integer"
    assert validate_weight(True) == "Weight must be an integer"


def test_parse_number_accepts_decimal_comma():
    assert parse_number("7,5") == 7.5
    with pytest.raises(ValueError):
        parse_number("inf")
