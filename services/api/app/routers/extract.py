"""Recipe extraction from a URL (video transcript or web page)."""

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from .. import schemas
from ..services.extraction import extractor
from ..settings import settings

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _read_url(request: Request):
    """Body is read by hand so a malformed payload gets the extraction error shape."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload.get("url") if isinstance(payload, dict) else None


@router.post(
    "/recipes/extract",
    response_model=schemas.DataResponse[schemas.ExtractedRecipeOut],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": {
                "type": "object",
                "properties": {"url": {"type": "string"}},
            }}},
        }
    },
)
@limiter.limit(settings.extract_rate_limit)
async def extract_recipe(request: Request):  # request is also required by the rate limiter
    recipe = await extractor.extract(await _read_url(request))
    return {"success": True, "data": recipe}
