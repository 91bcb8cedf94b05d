from cloudfront_provider.validation import (
    all_of,
    float_between,
    string_in_slice,
    string_len_between,
    string_matches,
)


def test_string_in_slice() -> None:
    validate = string_in_slice(["none", "all"])
    assert validate("none", "behavior") == []
    assert validate("None", "behavior") == ["expected behavior to be one of ['none', 'all'], got None"]
    assert string_in_slice(["none", "all"], ignore_case=True)("None", "behavior") == []
    assert validate(12, "behavior") == ["expected type of behavior to be string"]


def test_float_between() -> None:
    validate = float_between(0.0, 100.0)
    assert validate(0, "rate") == []
    assert validate(12.5, "rate") == []
    assert validate(100.5, "rate") == ["expected rate to be in the range (0.000000 - 100.000000), got 100.500000"]
    assert validate(True, "rate") == ["expected type of rate to be float"]


def test_string_matches_and_length() -> None:
    validate = all_of(string_matches(r"^[a-z]+$", "only lowercase letters"), string_len_between(1, 5))
    assert validate("abc", "name") == []
    assert validate("abcdef", "name") == ["expected length of name to be in the range (1 - 5), got abcdef"]
    assert validate("A", "name") == ["invalid value for name (only lowercase letters)"]
    assert len(validate("ABCDEF", "name")) == 2
    assert string_matches(r"^\d+$")("x", "id") == [r"id must match ^\d+$"]
