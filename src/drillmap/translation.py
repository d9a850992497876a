"""Label translation for node keys.

Translation catalogues live outside this package; a translator only maps a
grouping key to a display string and falls back to the key itself.
"""

from typing import Callable, Mapping, Optional

Translator = Callable[[str], str]


def identity(key: str) -> str:
    return key


class LabelTranslator:
    """Mapping-backed translator that never raises.

    Keys may be looked up with an optional prefix, mirroring catalogue
    conventions like ``country.Togo`` or ``type.Article``.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None, prefix: str = "") -> None:
        self._mapping = dict(mapping or {})
        self.prefix = prefix

    def __call__(self, key: str) -> str:
        translated = self._mapping.get(f"{self.prefix}{key}")
        if not translated:
            return key
        return translated

    def with_prefix(self, prefix: str) -> "LabelTranslator":
        return LabelTranslator(self._mapping, prefix=prefix)
