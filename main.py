from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatapp.api.v1 import auth, bot, live, messages
from chatapp.core.config import settings
from chatapp.core.logging import configure_logging
from chatapp.middleware.logging import LoggingMiddleware


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Real-Time Chat",
        version="0.1.0",
    )

    # CORS middleware - must be added before other middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware
    app.add_middleware(LoggingMiddleware)

    # API routes
    prefix = settings.API_PREFIX
    app.include_router(auth.router, prefix=prefix)
    app.include_router(messages.router, prefix=prefix)
    app.include_router(bot.router, prefix=prefix)
    app.include_router(live.router, prefix=prefix)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        return {"status": "ok", "environment": settings.ENVIRONMENT}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
