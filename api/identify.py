# internal imports
import base64
import logging
from fastapi import APIRouter, HTTPException, File, Form, UploadFile, Depends

# external imports
from api.dependencies import get_gemini_service, get_history_store
from db.schemas import HistoryEntry
from services.errors import (
    IdentificationError,
    MalformedResponseError,
    MissingCredentialError,
    NoConnectivityError,
    UpstreamFailureError,
)
from services.gemini_service import GeminiService
from services.history_service import HistoryStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/identify", tags=["identify"])

ERROR_STATUS = {
    NoConnectivityError: 503,
    MissingCredentialError: 500,
    MalformedResponseError: 502,
    UpstreamFailureError: 502,
}


def _to_http_error(error: IdentificationError) -> HTTPException:
    status_code = ERROR_STATUS.get(type(error), 500)
    return HTTPException(status_code=status_code, detail=str(error) or "Failed to identify medicine")


@router.post("/image", response_model=HistoryEntry)
async def identify_by_image(
    image: UploadFile | None = File(None),
    image_base64: str | None = Form(None),
    gemini: GeminiService = Depends(get_gemini_service),
    history: HistoryStore = Depends(get_history_store),
):
    """
    Identify a medicine from a photo. Accepts multipart/form-data.

    Args:
        image: JPEG photo of the pill or packaging
        image_base64: the same photo already base64-encoded (used when no file is sent)
        gemini: identification client (injected)
        history: scan history (injected)
    """

    # 1. Read the photo into base64
    if image is not None:
        if image.content_type and not image.content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="Uploaded file must be an image.")
        try:
            image_bytes = await image.read()
        except Exception as e:
            logger.error("File read error: %s", e)
            raise HTTPException(status_code=400, detail="Error reading uploaded file.")
        if not image_bytes:
            raise HTTPException(status_code=400, detail="Uploaded image is empty.")
        payload = base64.b64encode(image_bytes).decode("ascii")
    elif image_base64 and image_base64.strip():
        payload = image_base64.strip()
    else:
        raise HTTPException(status_code=400, detail="Provide an image file or image_base64.")

    # 2. Identify
    try:
        record = await gemini.identify_by_image(payload)
    except IdentificationError as e:
        raise _to_http_error(e)

    # 3. Save to history
    return await history.append(record)


@router.post("/text", response_model=HistoryEntry)
async def identify_by_text(
    query: str = Form(...),
    gemini: GeminiService = Depends(get_gemini_service),
    history: HistoryStore = Depends(get_history_store),
):
    """
    Identify a medicine from a brand name, generic name, symptom or description.

    Args:
        query: free-text query (e.g. "Biogesic", "gamot sa sakit ng ulo")
        gemini: identification client (injected)
        history: scan history (injected)
    """
    query = query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Please enter a medicine name or symptom.")

    try:
        record = await gemini.identify_by_text(query)
    except IdentificationError as e:
        raise _to_http_error(e)

    return await history.append(record)
