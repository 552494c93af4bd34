"""On-demand translation of arbitrary storefront text."""

from fastapi import APIRouter, Depends, Request, Response

from menuku.api.deps import get_session_id, get_translation_registry
from menuku.schemas import TranslateRequest, TranslateResponse
from menuku.security.guards import enforce_same_origin, rate_limit_request
from menuku.services.auto_translate import TranslationSessionRegistry, auto_translate

router = APIRouter()


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    payload: TranslateRequest,
    request: Request,
    session_id: str = Depends(get_session_id),
    registry: TranslationSessionRegistry = Depends(get_translation_registry),
) -> TranslateResponse:
    enforce_same_origin(request)
    rate_limit_request(request, scope="translate", limit=60, window_seconds=60)
    result = await auto_translate(
        registry.get(session_id),
        payload.text,
        payload.text_en,
        payload.language,
        payload.cache_key,
    )
    return TranslateResponse(
        display_text=result.display_text,
        is_translating=result.is_translating,
        error=result.error,
    )


@router.delete("/translate/cache", status_code=204)
def clear_translation_cache(
    session_id: str = Depends(get_session_id),
    registry: TranslationSessionRegistry = Depends(get_translation_registry),
) -> Response:
    registry.clear(session_id)
    return Response(status_code=204)
