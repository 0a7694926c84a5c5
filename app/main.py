"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l’instance FastAPI (app).

Configure :

CORS (autorisations de qui peut appeler ces API)

titre, version, tags

handlers d'erreurs (format {"message": ...})

schéma OpenAPI personnalisé

Inclut les routers (ex : /api/v1/cats).

Initialise la base au démarrage.

🔹 Avantages :

Centralise la configuration du serveur HTTP.

Point unique d’exécution : uvicorn app.main:app --reload.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.core.openapi import custom_openapi
from app.db.session import init_db

from app.api.v1.routers import authentication, cats, users

import uvicorn

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    yield


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Connexion et identité courante"},
            {"name": "users", "description": "Gestion des utilisateurs"},
            {"name": "cats", "description": "Gestion des chats"},
        ],
    )

    # CORS (ajustez selon vos besoins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(authentication.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(cats.router, prefix="/api/v1")

    # Photos uploadées
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    # Génération du schéma OpenAPI custom (facultatif, mais propre)
    app.openapi = lambda: custom_openapi(app)
    return app


app = create_application()

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="127.0.0.1", port=8080, reload=(settings.ENV == "dev")) # http://localhost:8080
