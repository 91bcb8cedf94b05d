import re
import threading
from datetime import datetime, timezone
from typing import Optional

# Names for resources with name_prefix support
UNIQUE_ID_PREFIX = "terraform-"
DEFAULT_NAME_PREFIX = "tf-"
# timestamp (YYYYmmddHHMMSS + 4 fraction digits) and an 8 digit hex counter
UNIQUE_ID_SUFFIX_LENGTH = 26

_unique_id_counter = 0
_unique_id_lock = threading.Lock()
_generated_suffix = re.compile(rf"[0-9a-fA-F]{{{UNIQUE_ID_SUFFIX_LENGTH}}}$")


def unique_id(prefix: str = UNIQUE_ID_PREFIX) -> str:
    """
    Create a unique identifier with the given prefix.
    The identifiers created in one process sort in the order they were created.
    """
    global _unique_id_counter
    with _unique_id_lock:
        _unique_id_counter += 1
        counter = _unique_id_counter
        now = datetime.now(timezone.utc)
    timestamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 100:04d}"
    return f"{prefix}{timestamp}{counter:08x}"


def generate_name(name: Optional[str], name_prefix: Optional[str], default_prefix: str = DEFAULT_NAME_PREFIX) -> str:
    if name:
        return name
    return unique_id(name_prefix or default_prefix)


def has_generated_suffix(name: str, prefix: Optional[str] = None) -> bool:
    if prefix is not None and not name.startswith(prefix):
        return False
    return _generated_suffix.search(name) is not None


def name_prefix_from_name(name: Optional[str]) -> Optional[str]:
    if name and has_generated_suffix(name):
        return name[: len(name) - UNIQUE_ID_SUFFIX_LENGTH]
    return None
