"""
Adaptive Quiz Server

FastAPI server with:
- Adaptive quiz generation, grading and performance tracking
- AI helpers for notes (glossary, summary, tags, grammar...)
- Storage in memory or AgentFS
- CORS and uniform JSON errors
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.note_assistant import NoteAssistant
from core.config import QuizAppConfig, StorageBackend, get_config
from core.exceptions import QuizAppError
from core.logger import get_logger, set_level
from quiz.llm.client import GenerationClient
from quiz.llm.factory import LLMClientFactory
from quiz.service import QuizService
from quiz.storage import AgentFSStorage, InMemoryStorage, Storage
from routers import notes_ai_router, quiz_router

logger = get_logger("server")

VERSION = "1.0.0"


# =============================================================================
# STORAGE
# =============================================================================


async def open_storage(config: QuizAppConfig):
    """Abre backend de storage configurado.

    Returns:
        Tuple de (storage, recurso a fechar no shutdown ou None)
    """
    if config.storage_backend == StorageBackend.AGENTFS:
        from agentfs_sdk import AgentFS, AgentFSOptions

        agentfs = await AgentFS.open(AgentFSOptions(id=config.agentfs_id))
        logger.info(f"AgentFS aberto: {config.agentfs_id}")
        return AgentFSStorage(agentfs), agentfs

    logger.info("Usando storage em memoria")
    return InMemoryStorage(), None


# =============================================================================
# FASTAPI APP
# =============================================================================


def create_app(
    config: QuizAppConfig | None = None,
    storage: Storage | None = None,
    generation: GenerationClient | None = None,
) -> FastAPI:
    """Cria aplicacao FastAPI.

    Args:
        config: Configuracao (default: ambiente)
        storage: Storage ja construido (default: conforme config)
        generation: Cliente de geracao (default: Anthropic via factory)

    Returns:
        App com rotas de quiz e de notas
    """
    config = config or get_config()
    set_level(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage app lifecycle."""
        logger.info("Starting Adaptive Quiz server...")
        resource = None
        app_storage = storage
        if app_storage is None:
            app_storage, resource = await open_storage(config)
        client = generation or LLMClientFactory(config).create_client()

        app.state.config = config
        app.state.storage = app_storage
        app.state.quiz_service = QuizService(app_storage, client, config)
        app.state.note_assistant = NoteAssistant(client)
        try:
            yield
        finally:
            if resource is not None:
                await resource.close()
                logger.info("AgentFS closed")

    app = FastAPI(
        title="Adaptive Quiz",
        description="Notes and adaptive quiz backend",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(QuizAppError)
    async def quiz_app_error_handler(request: Request, exc: QuizAppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # =========================================================================
    # HEALTH ENDPOINTS
    # =========================================================================

    @app.get("/")
    async def root():
        """Health check."""
        return {"status": "ok", "message": "Adaptive Quiz API", "version": VERSION}

    @app.get("/health")
    async def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "storage_backend": config.storage_backend.value,
            "model": config.model,
            "generation_configured": bool(config.anthropic_api_key) or generation is not None,
        }

    app.include_router(quiz_router)
    app.include_router(notes_ai_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
