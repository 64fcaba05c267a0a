from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from core.i18n import set_locale


def _pick_from_accept_language(al: str) -> str:
    """Highest-weighted tag of an Accept-Language header.

    'fr-CA,fr;q=0.9,en;q=0.8' -> 'fr-CA'
    """
    items = []
    for position, part in enumerate(al.split(",")):
        lang, _, params = part.strip().partition(";")
        lang = lang.strip()
        if not lang:
            continue
        q = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                q = float(params[2:])
            except ValueError:
                q = 0.0
        items.append((-q, position, lang))
    if not items:
        return "en"
    return min(items)[2]


def _normalize(lang: str) -> str:
    """Map browser tags to catalog names (en-US -> en, fr-CA -> fr_CA)."""
    tag = (lang or "en").replace("-", "_")
    if tag.lower() in {"en", "en_us", "en_gb"}:
        return "en"
    return tag


class LocaleMiddleware(BaseHTTPMiddleware):
    """Resolve the request locale: ?lang= > X-Lang > Accept-Language > 'en'."""

    async def dispatch(self, request: Request, call_next):
        lang = request.query_params.get("lang") or request.headers.get("X-Lang")
        if not lang:
            al = request.headers.get("Accept-Language", "")
            lang = _pick_from_accept_language(al) if al else "en"
        set_locale(_normalize(lang))
        request.state.locale = lang
        return await call_next(request)
