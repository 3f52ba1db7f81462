from .populate import populate
from .identifiers import is_valid_id, new_id

__all__ = ["populate", "is_valid_id", "new_id"]
