"""
Translation lookup backed by JSON locale files

Each locale is a nested JSON object stored as ``<locales_dir>/<locale>.json``:

    {"posts": {"create": {"notice": "Post created.", "alert": "Post could not be saved."}}}

Placeholders use the ``%{name}`` syntax and are filled from the keyword
arguments passed to :meth:`Translator.t`.
"""
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from markupsafe import Markup, escape

from minimalizer.core.config import get_settings
from minimalizer.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

PLACEHOLDER = re.compile(r"%\{(\w+)\}")

Scope = Union[str, Iterable[str], None]


def _scope_parts(scope: Scope) -> list:
    if scope is None:
        return []
    if isinstance(scope, str):
        return [part for part in scope.split(".") if part]
    parts = []
    for item in scope:
        parts.extend(_scope_parts(item))
    return parts


def is_html_key(key: str) -> bool:
    last = key.rsplit(".", 1)[-1]
    return last == "html" or last.endswith("_html")


class Translator:
    """Look up dotted keys in per-locale JSON dictionaries"""

    def __init__(self, locales_dir: Union[str, Path], default_locale: str = "en"):
        self.locales_dir = Path(locales_dir)
        self.default_locale = default_locale
        self._catalogs: Dict[str, Dict[str, Any]] = {}

    def catalog(self, locale: str) -> Dict[str, Any]:
        """Load (once) and return the catalog for a locale"""
        if locale not in self._catalogs:
            path = self.locales_dir / f"{locale}.json"
            if path.exists():
                with open(path, "r", encoding="utf-8") as handle:
                    data = json.load(handle)
                if not isinstance(data, dict):
                    raise ValueError(f"Locale file {path} must contain a JSON object")
                self._catalogs[locale] = data
            else:
                logger.warning(f"Locale file not found: {path}")
                self._catalogs[locale] = {}
        return self._catalogs[locale]

    def store(self, locale: str, data: Dict[str, Any]):
        """Merge translations into a locale catalog"""
        catalog = self.catalog(locale)
        _deep_merge(catalog, data)

    def reload(self):
        self._catalogs.clear()

    def lookup(self, key: str, scope: Scope = None, locale: Optional[str] = None) -> Any:
        """Return the raw entry for a key or None when it is missing"""
        node: Any = self.catalog(locale or self.default_locale)
        for part in _scope_parts(scope) + _scope_parts(key):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def full_key(self, key: str, scope: Scope = None, locale: Optional[str] = None) -> str:
        return ".".join([locale or self.default_locale] + _scope_parts(scope) + _scope_parts(key))

    def t(self, key: str, scope: Scope = None, locale: Optional[str] = None, **values) -> str:
        """Translate a key, interpolating %{name} placeholders"""
        return self.translate(key, values, scope=scope, locale=locale)

    def translate(
        self,
        key: str,
        values: Optional[Mapping[str, Any]] = None,
        scope: Scope = None,
        locale: Optional[str] = None,
    ) -> str:
        """Like :meth:`t` with the placeholder values given as one mapping,
        so any placeholder name can be used
        """
        values = values or {}
        entry = self.lookup(key, scope=scope, locale=locale)
        if entry is None or isinstance(entry, dict):
            missing = self.full_key(key, scope=scope, locale=locale)
            logger.warning(f"Translation missing: {missing}")
            return f"translation missing: {missing}"

        text = str(entry)
        html = is_html_key(key)

        def replace(match):
            name = match.group(1)
            if name not in values:
                return match.group(0)
            value = values[name]
            return str(escape(value)) if html else str(value)

        text = PLACEHOLDER.sub(replace, text)
        return Markup(text) if html else text


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]):
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value


@lru_cache()
def get_translator() -> Translator:
    """Get cached translator built from settings"""
    settings = get_settings()
    return Translator(settings.locales_path, settings.default_locale)
