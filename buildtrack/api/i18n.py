#buildtrack/api/i18n.py
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import List, Optional
import logging

from buildtrack.core.i18n import (
    TRANSLATION_NAMESPACES,
    NAMESPACE_NAMES,
    locale_display_name,
    supported_locales,
    is_supported_locale,
)
from buildtrack.core.settings import settings
from buildtrack.core.exceptions import TranslationServiceError
from buildtrack.services import translations
from buildtrack.services.lokalise_service import (
    check_translations,
    download_translations,
    upload_translations,
)
from buildtrack.dependencies import get_current_superuser
from buildtrack.models.user import User as DBUser

router = APIRouter(prefix="/api/i18n", tags=["I18n"])
logger = logging.getLogger("BuildTrack.I18nAPI")

class PreloadRequest(BaseModel):
    locale: str
    namespaces: Optional[List[str]] = None
    route: Optional[str] = None

class UploadRequest(BaseModel):
    locale: str = "en"

@router.get("/locales")
def list_locales():
    return {
        "defaultLocale": settings.DEFAULT_LOCALE,
        "locales": [{"code": code, "name": locale_display_name(code)} for code in supported_locales()],
    }

@router.get("/namespaces")
def list_namespaces():
    return {"namespaces": TRANSLATION_NAMESPACES}

@router.get("/cache")
def cache_stats():
    return translations.translation_cache.stats()

@router.delete("/cache")
def clear_cache(current_user: DBUser = Depends(get_current_superuser)):
    translations.translation_cache.clear()
    logger.info(f"Translation cache cleared by user {current_user.id}")
    return {"message": "Translation cache cleared"}

@router.post("/preload")
def preload(data: PreloadRequest):
    """
    Warm the cache for a locale: explicit namespaces, else the route's, else the critical ones.
    """
    unknown = [ns for ns in (data.namespaces or []) if ns not in NAMESPACE_NAMES]
    if unknown:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown namespaces: {', '.join(unknown)}")
    locale = data.locale if is_supported_locale(data.locale) else settings.DEFAULT_LOCALE
    loaded = translations.preload_namespaces(locale, namespaces=data.namespaces, route=data.route)
    return {"locale": locale, "loaded": loaded}

@router.post("/sync")
async def sync_translations(current_user: DBUser = Depends(get_current_superuser)):
    """
    Pull the latest catalogs from the translation-management service.
    """
    try:
        result = await download_translations()
    except TranslationServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    logger.info(f"Translations synced by user {current_user.id}: {result}")
    return result

@router.post("/upload")
async def upload_source_translations(
    data: Optional[UploadRequest] = None,
    current_user: DBUser = Depends(get_current_superuser),
):
    """
    Push the local source catalog to the translation-management service.
    """
    locale = data.locale if data else "en"
    if not is_supported_locale(locale):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported locale '{locale}'")
    try:
        result = await upload_translations(locale)
    except TranslationServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    logger.info(f"Translations uploaded by user {current_user.id}: {result}")
    return result

@router.get("/check")
async def check_remote_translations(current_user: DBUser = Depends(get_current_superuser)):
    """
    Keys missing in the translation-management service or locally, per locale.
    """
    try:
        return await check_translations()
    except TranslationServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

@router.get("/{locale}/{namespace}")
def read_namespace(locale: str, namespace: str):
    """
    Messages of one namespace with load metrics. Unsupported locales are served in the default locale.
    """
    if namespace not in NAMESPACE_NAMES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown namespace '{namespace}'")
    resolved = locale if is_supported_locale(locale) else settings.DEFAULT_LOCALE
    messages, metrics = translations.get_namespace(resolved, namespace)
    return {"locale": resolved, "namespace": namespace, "messages": messages, "metrics": metrics}
