"""Key and weight functions over flat records.

Records are read-only mappings (or objects with attributes). A key function
returns the grouping value for one level; ``None`` or a blank value means
"missing" and is bucketed under a sentinel by the aggregator, unless the key
function carries its own sentinel (``ITEM_SET`` uses ``"No Set"``).
"""

import math
import re
from typing import Any, Callable, Mapping, Optional

Record = Mapping[str, Any]
KeyFn = Callable[[Any], Optional[str]]
WeightFn = Callable[[Any], Any]

_YEAR = re.compile(r"^\s*(\d{4})")


def read_field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def is_missing(value: Any) -> bool:
    """None, blank strings and NaN floats count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def field_key(name: str, missing: Optional[str] = None) -> KeyFn:
    """Group by a record field; ``missing`` overrides the aggregator's sentinel."""

    def key(record: Any) -> Optional[str]:
        value = read_field(record, name)
        if is_missing(value):
            return missing
        return str(value).strip()

    key.__name__ = f"field_key[{name}]"
    key.__qualname__ = key.__name__
    return key


def field_weight(name: str) -> WeightFn:
    """Weight by a numeric record field; validation happens in the aggregator."""

    def weight(record: Any) -> Any:
        return read_field(record, name)

    weight.__name__ = f"field_weight[{name}]"
    weight.__qualname__ = weight.__name__
    return weight


def year_key(name: str, missing: Optional[str] = None) -> KeyFn:
    """Group by the year of a ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` date field."""

    def key(record: Any) -> Optional[str]:
        value = read_field(record, name)
        if is_missing(value):
            return missing
        match = _YEAR.match(str(value))
        return match.group(1) if match else missing

    key.__name__ = f"year_key[{name}]"
    key.__qualname__ = key.__name__
    return key


# Collection overview presets
COUNTRY = field_key("country")
ITEM_SET = field_key("item_set_title", missing="No Set")
ITEM_TYPE = field_key("type")
LANGUAGE = field_key("language")
PUBLICATION_YEAR = year_key("publication_date")
WORD_COUNT = field_weight("word_count")

PRESET_KEYS: dict[str, KeyFn] = {
    "country": COUNTRY,
    "item_set_title": ITEM_SET,
    "type": ITEM_TYPE,
    "language": LANGUAGE,
    "publication_year": PUBLICATION_YEAR,
}


def key_for(name: str) -> KeyFn:
    """Preset key function for ``name`` if one exists, else a plain field key."""
    return PRESET_KEYS.get(name) or field_key(name)
