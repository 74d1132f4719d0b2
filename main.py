# external imports
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# local imports
from api import account, history, identify, report
from config.settings import Settings
from db.database import init_db, make_engine
from db.key_value import KeyValueStore, SecureKeyValueStore, load_or_create_key
from services.connectivity import ConnectivityGate
from services.gemini_service import GeminiService
from services.history_service import HistoryStore
from services.storage_service import StorageService


def build_services(app: FastAPI, settings: Settings) -> None:
    """Create the engine, stores and services and keep them on app.state."""
    engine = make_engine(settings.database_url)
    init_db(engine)

    store = KeyValueStore(engine)
    secure_store = SecureKeyValueStore(
        engine, load_or_create_key(settings.secure_store_key, settings.secure_key_path)
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.gemini_service = GeminiService(
        api_key=settings.gemini_api_key,
        model_name=settings.model_name,
        connectivity=ConnectivityGate(
            settings.connectivity_host,
            settings.connectivity_port,
            settings.connectivity_timeout,
        ),
        mock_image_delay=settings.mock_image_delay,
        mock_text_delay=settings.mock_text_delay,
    )
    app.state.history_store = HistoryStore(store, capacity=settings.history_capacity)
    app.state.storage_service = StorageService(store, secure_store)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        build_services(app, settings)
        logging.getLogger("medetech").info(
            "MEDetech API started (mock_mode=%s, model=%s)", settings.mock_mode, settings.model_name
        )
        yield
        app.state.engine.dispose()

    app = FastAPI(
        title="MEDetech Identification API",
        description="""
    **MEDetech** identifies medicines from a photo or a text description and returns
    AI-generated identification and safety information.

    ## Features

    * **Image Identification** - Gemini vision with Google Search grounding
    * **Confidence Gate** - results below 85% confidence become "Unknown Medicine"
    * **Text Lookup** - brand names, generic names, symptoms or descriptions
    * **Scan History** - the 50 most recent identifications
    * **Mock Mode** - canned results when no Gemini API key is configured

    Always consult a healthcare professional before taking any medication.
    """,
        version="1.0.0",
        contact={
            "name": "MEDetech Team",
        },
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allows all origins
        allow_credentials=False,  # Must be False when allow_origins=["*"]
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["health"])
    async def health():
        return {"service": "MEDetech Identification API", "mock_mode": settings.mock_mode}

    app.include_router(identify.router)
    app.include_router(history.router)
    app.include_router(account.router)
    app.include_router(report.router)

    return app


app = create_app()
