import re
import secrets
from typing import Container

CODE_LENGTH = 6
CODE_PATTERN = re.compile(r"^\d{6}$")

# Issued codes never start with 0 so they read well aloud; lookups accept any 6 digits
_LOWEST_CODE = 100000
_CODE_SPACE = 900000


def generate_code() -> str:
    return str(_LOWEST_CODE + secrets.randbelow(_CODE_SPACE))


def issue_code(live_codes: Container[str]) -> str:
    """Resample until the code is not held by a live entry."""
    code = generate_code()
    while code in live_codes:
        code = generate_code()
    return code


def is_valid_code(code: str) -> bool:
    return bool(CODE_PATTERN.match(code or ""))
