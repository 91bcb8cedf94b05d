import re
from typing import Any, Callable, Iterable, List

# A validator receives the configured value and the attribute path and returns all problems found.
Validator = Callable[[Any, str], List[str]]


def string_in_slice(valid: Iterable[str], ignore_case: bool = False) -> Validator:
    allowed = list(valid)

    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {path} to be string"]
        candidates = [a.lower() for a in allowed] if ignore_case else allowed
        if (value.lower() if ignore_case else value) not in candidates:
            return [f"expected {path} to be one of {allowed}, got {value}"]
        return []

    return validate


def float_between(low: float, high: float) -> Validator:
    def validate(value: Any, path: str) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [f"expected type of {path} to be float"]
        if value < low or value > high:
            return [f"expected {path} to be in the range ({low:f} - {high:f}), got {value:f}"]
        return []

    return validate


def string_matches(pattern: str, message: str = "") -> Validator:
    regex = re.compile(pattern)

    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {path} to be string"]
        if not regex.search(value):
            return [f"invalid value for {path} ({message})" if message else f"{path} must match {pattern}"]
        return []

    return validate


def string_len_between(min_len: int, max_len: int) -> Validator:
    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {path} to be string"]
        if len(value) < min_len or len(value) > max_len:
            return [f"expected length of {path} to be in the range ({min_len} - {max_len}), got {value}"]
        return []

    return validate


def all_of(*validators: Validator) -> Validator:
    def validate(value: Any, path: str) -> List[str]:
        return [error for v in validators for error in v(value, path)]

    return validate
