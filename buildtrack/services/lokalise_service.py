import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import httpx

from buildtrack.core.settings import settings
from buildtrack.core.i18n import messages_dir, supported_locales
from buildtrack.core.exceptions import TranslationServiceError
from buildtrack.services.translations import translation_cache

logger = logging.getLogger("BuildTrack.Lokalise")

KEYS_PAGE_LIMIT = 500
UPLOAD_TAGS = ["buildtrack-pro"]

def _require_credentials() -> None:
    if not settings.LOKALISE_API_KEY or not settings.LOKALISE_PROJECT_ID:
        raise TranslationServiceError("Lokalise credentials are not configured (LOKALISE_API_KEY, LOKALISE_PROJECT_ID).")

def _project_url(path: str) -> str:
    return f"{settings.LOKALISE_BASE_URL}/projects/{settings.LOKALISE_PROJECT_ID}/{path}"

def _auth_headers() -> Dict[str, str]:
    return {"X-Api-Token": settings.LOKALISE_API_KEY}

def _client(transport: Optional[httpx.AsyncBaseTransport]) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(10.0, read=60.0), transport=transport)

async def _send(client: httpx.AsyncClient, method: str, url: str, **kwargs) -> httpx.Response:
    """
    Perform one Lokalise request; transport and HTTP failures become TranslationServiceError.
    """
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        return response
    except httpx.TimeoutException:
        logger.error(f"Timeout while contacting Lokalise at {url}")
        raise TranslationServiceError("Timed out contacting Lokalise.")
    except httpx.HTTPStatusError as e:
        logger.error(f"Lokalise returned {e.response.status_code}: {e.response.text}")
        raise TranslationServiceError(f"Lokalise request failed with status {e.response.status_code}.")
    except httpx.RequestError as e:
        logger.error(f"Request error while contacting Lokalise: {e}")
        raise TranslationServiceError(f"Network error contacting Lokalise: {e.__class__.__name__}.")

def _json(response: httpx.Response) -> Dict[str, Any]:
    try:
        return response.json()
    except json.JSONDecodeError:
        logger.error("Failed to decode JSON response from Lokalise")
        raise TranslationServiceError("Lokalise returned an invalid response.")

def _export_payload(locales: List[str]) -> Dict[str, Any]:
    return {
        "format": "json",
        "original_filenames": False,
        "bundle_structure": "%LANG_ISO%.json",
        "directory_prefix": "",
        "filter_langs": locales,
        "export_empty_as": "skip",
        "placeholder_format": "icu",
    }

def _extract_bundle(content: bytes, locales: List[str], output_dir: Path) -> List[str]:
    # only top-level <locale>.json members are written
    wanted = {f"{locale}.json": locale for locale in locales}
    written = []
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as bundle:
            for member in bundle.namelist():
                name = Path(member).name
                if name not in wanted:
                    continue
                catalog = json.loads(bundle.read(member).decode("utf-8"))
                (output_dir / name).write_text(
                    json.dumps(catalog, ensure_ascii=False, indent=2), encoding="utf-8"
                )
                written.append(wanted[name])
    except (zipfile.BadZipFile, ValueError) as e:
        raise TranslationServiceError(f"Invalid translation bundle: {e}")
    return written

async def download_translations(
    locales: Optional[List[str]] = None,
    output_dir: Optional[Path] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, List[str]]:
    # Exports the Lokalise project as a zip bundle and writes one catalog per locale.
    _require_credentials()
    locales = locales or supported_locales()
    output_dir = output_dir or messages_dir()
    url = _project_url("files/download")

    async with _client(transport) as client:
        logger.info(f"Requesting translation export from Lokalise for {locales}")
        response = await _send(client, "POST", url, json=_export_payload(locales), headers=_auth_headers())
        bundle_url = _json(response).get("bundle_url")
        if not bundle_url:
            logger.error(f"Lokalise export response missing bundle_url: {response.text}")
            raise TranslationServiceError("Lokalise did not return a bundle URL.")
        bundle = await _send(client, "GET", bundle_url)

    output_dir.mkdir(parents=True, exist_ok=True)
    written = _extract_bundle(bundle.content, locales, output_dir)
    missing = [locale for locale in locales if locale not in written]
    if missing:
        logger.warning(f"Some locale files are missing from the Lokalise bundle: {', '.join(missing)}")
    translation_cache.clear()
    logger.info(f"Downloaded translations for {written} into {output_dir}")
    return {"updated": written, "missing": missing}

async def upload_translations(
    locale: str = "en",
    source_dir: Optional[Path] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Push the local source catalog to Lokalise for translation.

    Existing translations are not overwritten (replace_modified is off) and the
    translation memory is applied. Returns the import statistics.
    """
    _require_credentials()
    path = (source_dir or messages_dir()) / f"{locale}.json"
    if not path.is_file():
        raise TranslationServiceError(f"Translation file not found: {path.name}")
    content = path.read_bytes()

    options = {
        "filename": path.name,
        "lang_iso": locale,
        "detect_icu_plurals": True,
        "replace_modified": False,
        "apply_tm": True,
        "tags": UPLOAD_TAGS,
    }
    async with _client(transport) as client:
        logger.info(f"Uploading {path.name} to Lokalise")
        response = await _send(
            client, "POST", _project_url("files/upload"),
            headers=_auth_headers(),
            data={"data": json.dumps(options)},
            files={"file": (path.name, content, "application/json")},
        )
    body = _json(response)
    if not body.get("project_id"):
        logger.error(f"Unexpected Lokalise upload response: {response.text}")
        raise TranslationServiceError("Lokalise upload failed.")

    statistics = body.get("statistics") or {}
    warnings = [w.get("message", str(w)) if isinstance(w, dict) else str(w) for w in body.get("warnings") or []]
    for warning in warnings:
        logger.warning(f"Lokalise upload warning: {warning}")
    result = {
        "locale": locale,
        "keysAdded": statistics.get("keys_added") or 0,
        "keysUpdated": statistics.get("keys_updated") or 0,
        "keysSkipped": statistics.get("keys_skipped") or 0,
        "warnings": warnings,
    }
    logger.info(f"Uploaded translations to Lokalise: {result}")
    return result

def flatten_keys(catalog: Any, prefix: str = "") -> Set[str]:
    """Dotted paths of every leaf message, e.g. "dashboard.widgets.myTasks"."""
    keys: Set[str] = set()
    if isinstance(catalog, dict):
        items = catalog.items()
    elif isinstance(catalog, list):
        items = ((str(i), v) for i, v in enumerate(catalog))
    else:
        return {prefix} if prefix else keys
    for key, value in items:
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, (dict, list)):
            keys |= flatten_keys(value, path)
        else:
            keys.add(path)
    return keys

def local_translation_keys(locales: List[str], directory: Optional[Path] = None) -> Dict[str, Set[str]]:
    directory = directory or messages_dir()
    result: Dict[str, Set[str]] = {}
    for locale in locales:
        path = directory / f"{locale}.json"
        result[locale] = set()
        if not path.is_file():
            logger.warning(f"Translation file for locale '{locale}' not found locally")
            continue
        try:
            result[locale] = flatten_keys(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {path}: {e}")
    return result

async def fetch_lokalise_keys(
    client: httpx.AsyncClient,
    locales: List[str],
) -> Dict[str, Set[str]]:
    """
    Keys with a non-empty translation per locale, across all pages of the keys listing.
    """
    result: Dict[str, Set[str]] = {locale: set() for locale in locales}
    page, total_pages = 1, 1
    while page <= total_pages:
        response = await _send(
            client, "GET", _project_url("keys"),
            headers=_auth_headers(),
            params={"limit": KEYS_PAGE_LIMIT, "page": page, "include_translations": 1},
        )
        body = _json(response)
        keys = body.get("keys")
        if not isinstance(keys, list):
            raise TranslationServiceError("Lokalise returned no keys.")
        pagination = body.get("pagination") or {}
        total_pages = int(pagination.get("total_pages") or response.headers.get("X-Pagination-Page-Count") or 1)

        for key in keys:
            name = (key.get("key_name") or {}).get("web")
            if not name:
                continue
            for translation in key.get("translations") or []:
                locale = translation.get("language_iso")
                if locale in result and translation.get("translation"):
                    result[locale].add(name)
        logger.debug(f"Processed Lokalise keys page {page}/{total_pages}")
        page += 1
    return result

async def check_translations(
    locales: Optional[List[str]] = None,
    directory: Optional[Path] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Compare local catalog keys with the keys translated in Lokalise.

    For each locale, returns the keys present only locally ("missingInLokalise")
    and only remotely ("missingLocally"). "inSync" is true when both are empty
    for every locale.
    """
    _require_credentials()
    locales = locales or supported_locales()
    local = local_translation_keys(locales, directory)
    async with _client(transport) as client:
        remote = await fetch_lokalise_keys(client, locales)

    report: Dict[str, Dict[str, List[str]]] = {}
    for locale in locales:
        report[locale] = {
            "missingInLokalise": sorted(local[locale] - remote[locale]),
            "missingLocally": sorted(remote[locale] - local[locale]),
        }
        if report[locale]["missingInLokalise"] or report[locale]["missingLocally"]:
            logger.warning(
                f"Translation keys out of sync for '{locale}': "
                f"{len(report[locale]['missingInLokalise'])} missing in Lokalise, "
                f"{len(report[locale]['missingLocally'])} missing locally"
            )
    in_sync = all(not r["missingInLokalise"] and not r["missingLocally"] for r in report.values())
    return {"inSync": in_sync, "locales": report}
