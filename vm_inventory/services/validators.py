import re

from vm_inventory.services.exceptions import ValidationError

_INT_PATTERN = re.compile(r"-?\d+")


def coerce_int(value, field: str) -> int:
    """
    JSON 본문에서 받은 값을 정수로 변환합니다. "42" 같은 정수 문자열도 허용합니다.

    Raises:
        ValidationError: bool, 실수, 정수가 아닌 문자열 등 정수로 볼 수 없는 값일 때.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value.strip()):
        return int(value)
    raise ValidationError(f"{field} must be an integer")
