"""
Unit tests for user body validation.
"""
import pytest
from userhub.modules.users.schemas import UserPostDto, UserPutDto
from userhub.modules.users.services import validation


def test_validate_create_requires_login():
    errors = validation.validate_create({"firstName": "Ivan"})
    assert list(errors) == ["login"]


@pytest.mark.parametrize("login", ["", "   ", None])
def test_validate_create_rejects_blank_login(login):
    assert "login" in validation.validate_create({"login": login})


def test_login_character_scan_flags_each_offending_character():
    errors = validation.validate_login_characters("a b!")
    assert len(errors["login"]) == 2


def test_login_character_scan_accepts_unicode_letters_and_digits():
    assert validation.validate_login_characters("Иван2024") == {}


@pytest.mark.parametrize("login", ["ivan²", "ivan½", "Ⅷ", "ivan\n"])
def test_login_character_scan_rejects_non_decimal_numerics_and_newline(login):
    assert list(validation.validate_login_characters(login)) == ["login"]


def test_login_character_scan_accepts_other_decimal_digits():
    assert validation.validate_login_characters("ivan٣") == {}


def test_validate_replace_reports_every_missing_field():
    errors = validation.validate_replace({})
    assert set(errors) == {"firstName", "lastName", "login"}


def test_validate_replace_checks_pattern_independently_of_required():
    values = {"firstName": "Ivan", "lastName": "Petrov", "login": ""}
    errors = validation.validate_replace(values)
    # empty login matches the pattern, so only the required message is present
    assert errors == {"login": [validation.REQUIRED_MESSAGE.format(field="login")]}

    values["login"] = "bad login"
    errors = validation.validate_replace(values)
    assert errors == {"login": [validation.LOGIN_PATTERN_MESSAGE]}


def test_validate_replace_skips_fields_with_type_errors():
    errors = validation.validate_replace(
        {"firstName": 5, "lastName": "Petrov", "login": "ivan"},
        skip={"firstName": ["Input should be a valid string"]},
    )
    assert errors == {}


def test_parse_model_maps_type_errors_to_wire_names():
    dto, errors = validation.parse_model(UserPutDto, {"firstName": 5, "login": "ivan"})
    assert dto is None
    assert list(errors) == ["firstName"]


def test_canonicalize_matches_keys_case_insensitively():
    values = UserPostDto.canonicalize({"FirstName": "Ivan", "LOGIN": "ivan", "last_name": "Petrov", "email": "x"})
    assert values == {"firstName": "Ivan", "login": "ivan", "lastName": "Petrov"}


def test_merge_errors_keeps_order():
    merged = validation.merge_errors({"login": ["a"]}, {"login": ["b"], "firstName": ["c"]})
    assert merged == {"login": ["a", "b"], "firstName": ["c"]}


@pytest.mark.parametrize("login", ["ivan\n", "ivan½", "Ⅷ", "ivan٣"])
def test_validate_replace_allows_only_letters_and_ascii_digits(login):
    errors = validation.validate_replace({"firstName": "Ivan", "lastName": "Petrov", "login": login})
    assert errors == {"login": [validation.LOGIN_PATTERN_MESSAGE]}


def test_validate_replace_accepts_unicode_letters():
    errors = validation.validate_replace({"firstName": "Ivan", "lastName": "Petrov", "login": "Иван2024"})
    assert errors == {}
