"""
Populate: resolve a reference into a projection of the referenced record.

Relationships are eager-loaded by the repositories (lazy="selectin"), so by the
time a record reaches populate() the referenced rows are already in memory and
projecting them is a pure function. Output keys are camelCase to match the
JSON the API emits.
"""
from typing import Any, Iterable, Optional, Tuple, Union

from pydantic.alias_generators import to_camel

# A plain attribute name, or (output key, attribute) to publish it under another name
Field = Union[str, Tuple[str, str]]


def populate(record: Any, fields: Iterable[Field], include_id: bool = True) -> Optional[dict]:
    """Project `record` onto `fields`. A missing reference populates to None."""
    if record is None:
        return None
    document = {"id": record.id} if include_id else {}
    for field in fields:
        key, attribute = field if isinstance(field, tuple) else (field, field)
        document[to_camel(key)] = getattr(record, attribute)
    return document
