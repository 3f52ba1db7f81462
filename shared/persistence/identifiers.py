import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    """True when value is a string that parses as a UUID."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
