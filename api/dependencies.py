from fastapi import Request

from config.settings import Settings
from services.gemini_service import GeminiService
from services.history_service import HistoryStore
from services.storage_service import StorageService


# Services are built once in main.lifespan and kept on app.state.

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gemini_service(request: Request) -> GeminiService:
    return request.app.state.gemini_service


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.history_store


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service
