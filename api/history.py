from typing import List
from fastapi import APIRouter, Depends

from api.dependencies import get_history_store
from db.schemas import HistoryEntry
from services.history_service import HistoryStore


router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("/", response_model=List[HistoryEntry])
async def list_history(history: HistoryStore = Depends(get_history_store)):
    """Past identifications, newest first. Empty when nothing is stored or the store can't be read."""
    return await history.list()


@router.delete("/")
async def clear_history(history: HistoryStore = Depends(get_history_store)):
    await history.clear()
    return {"status": "success", "message": "History cleared"}


@router.delete("/{entry_id}")
async def delete_history_entry(entry_id: str, history: HistoryStore = Depends(get_history_store)):
    # deleting an unknown id is not an error
    await history.delete_by_id(entry_id)
    return {"status": "success", "message": f"History entry '{entry_id}' removed"}
