#buildtrack/services/translations.py
"""
Namespace-level translation loading with a TTL cache.

Catalogs are ``<messages_dir>/<locale>.json`` files holding one top-level
object per namespace. Loaded namespaces are cached under
``"<locale>:<namespace>"`` for a fixed TTL; expired entries are simply
reloaded on the next request. When ``TRANSLATION_CACHE_FILE`` is set the
cache is mirrored to that JSON file and restored from it on startup.
"""
import json
import re
import time
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from buildtrack.core.settings import settings
from buildtrack.core.i18n import (
    NamespacePriority,
    is_supported_locale,
    messages_dir,
    namespaces_by_priority,
    namespaces_for_route,
    supported_locales,
)

logger = logging.getLogger("BuildTrack.I18n")

_PLACEHOLDER = re.compile(r"\{(\w+)\}")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

def _now_ms() -> int:
    return int(time.time() * 1000)

# === LOADING ===

def load_namespace_messages(locale: str, namespace: str, directory: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read one namespace from a locale catalog. Unsupported locales fall back
    to the default locale; a missing file or namespace yields {}.
    """
    if not is_supported_locale(locale):
        logger.warning(f"Unsupported locale '{locale}', falling back to '{settings.DEFAULT_LOCALE}'")
        locale = settings.DEFAULT_LOCALE
    path = (directory or messages_dir()) / f"{locale}.json"
    if not path.exists():
        logger.error(f"Translation catalog not found: {path}")
        return {}
    with path.open(encoding="utf-8") as fh:
        catalog = json.load(fh)
    messages = catalog.get(namespace)
    return messages if isinstance(messages, dict) else {}

# === CACHE ===

def _is_cache_entry(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and "data" in value
        and isinstance(value.get("expires"), (int, float))
    )

class NamespaceCache:
    def __init__(
        self,
        ttl_seconds: int = 3600,
        persist_path: Optional[str] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self.ttl_ms = ttl_seconds * 1000
        self.persist_path = Path(persist_path) if persist_path else None
        self.clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._restore()

    @staticmethod
    def key(locale: str, namespace: str) -> str:
        return f"{locale}:{namespace}"

    def get(self, locale: str, namespace: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(self.key(locale, namespace))
        if entry is None or entry["expires"] <= self.clock():
            return None
        return entry

    def set(self, locale: str, namespace: str, data: Dict[str, Any], load_time: float) -> Dict[str, Any]:
        entry = {"data": data, "expires": self.clock() + self.ttl_ms, "loadTime": load_time}
        self._entries[self.key(locale, namespace)] = entry
        self._persist()
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self._persist()
        logger.info("Translation cache cleared")

    def stats(self) -> Dict[str, Any]:
        locales, namespaces = [], []
        for key in self._entries:
            locale, namespace = key.split(":", 1)
            if locale not in locales:
                locales.append(locale)
            if namespace not in namespaces:
                namespaces.append(namespace)
        return {
            "cacheSize": len(self._entries),
            "cachedLocales": locales,
            "cachedNamespaces": namespaces,
        }

    def _persist(self) -> None:
        if not self.persist_path:
            return
        try:
            self.persist_path.parent.mkdir(parents=True, exist_ok=True)
            self.persist_path.write_text(json.dumps(self._entries), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write translation cache to {self.persist_path}: {e}")

    def _restore(self) -> None:
        if not self.persist_path or not self.persist_path.exists():
            return
        try:
            stored = json.loads(self.persist_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable translation cache {self.persist_path}: {e}")
            return
        if isinstance(stored, dict):
            self._entries = {k: v for k, v in stored.items() if _is_cache_entry(v)}
            logger.info(f"Restored {len(self._entries)} cached namespaces from {self.persist_path}")

def namespace_size(data: Dict[str, Any]) -> int:
    """Length of the compact JSON serialization of a namespace."""
    return len(json.dumps(data, ensure_ascii=False, separators=(",", ":")))

translation_cache = NamespaceCache(
    ttl_seconds=settings.TRANSLATION_CACHE_TTL_SECONDS,
    persist_path=settings.TRANSLATION_CACHE_FILE,
)

# === PUBLIC API ===

def get_namespace(
    locale: str,
    namespace: str,
    cache: Optional[NamespaceCache] = None,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Messages for one namespace plus load metrics
    {loadTime, cacheHit, namespaceSize, loaded}.
    """
    cache = cache or translation_cache
    entry = cache.get(locale, namespace)
    if entry is not None:
        data = entry["data"]
        return data, {"loadTime": 0, "cacheHit": True, "namespaceSize": namespace_size(data), "loaded": True}

    started = time.perf_counter()
    data = load_namespace_messages(locale, namespace)
    load_time = round((time.perf_counter() - started) * 1000, 3)
    cache.set(locale, namespace, data, load_time)
    logger.info(f"Loaded {locale}:{namespace} ({len(data)} keys) in {load_time}ms")
    return data, {"loadTime": load_time, "cacheHit": False, "namespaceSize": namespace_size(data), "loaded": True}

def preload_namespaces(
    locale: str,
    namespaces: Optional[List[str]] = None,
    route: Optional[str] = None,
    cache: Optional[NamespaceCache] = None,
) -> List[str]:
    """
    Warm the cache. Explicit namespaces win, then the route's namespaces,
    then the critical ones.
    """
    if namespaces:
        targets = list(namespaces)
    elif route:
        targets = namespaces_for_route(route)
    else:
        targets = namespaces_by_priority(NamespacePriority.CRITICAL)
    for namespace in targets:
        get_namespace(locale, namespace, cache=cache)
    return targets

def _humanize_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1 \2", key.split(".")[-1])

def translate(messages: Dict[str, Any], key: str, params: Optional[Dict[str, Any]] = None) -> str:
    """
    Dotted-key lookup with {name} interpolation. A missing key renders as
    its last segment split on capitals ("saveChanges" -> "save Changes").
    """
    value: Any = messages
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            logger.warning(f"Missing translation key: {key}")
            return _humanize_key(key)
        value = value[part]
    if not isinstance(value, str):
        logger.warning(f"Translation key is not a message: {key}")
        return _humanize_key(key)
    if params:
        value = _PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), value)
    return value

def get_preferred_language(user_language: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    """
    Profile locale, then Accept-Language (exact, then language part), then the default.
    """
    if is_supported_locale(user_language):
        return user_language
    locales = supported_locales()
    for part in (accept_language or "").split(","):
        tag = part.split(";")[0].strip()
        if not tag or tag == "*":
            continue
        if tag in locales:
            return tag
        lang = tag.split("-")[0].lower()
        for locale in locales:
            if locale.lower() == lang or locale.lower().startswith(f"{lang}-"):
                return locale
    return settings.DEFAULT_LOCALE
