"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter un titre, une description détaillée,

centraliser la personnalisation du Swagger.
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API chats & utilisateurs (FastAPI + SQLModel).\n\n"
            "### Conventions\n"
            "- Les identifiants sont exposés en `_id`.\n"
            "- Erreurs : `{\"message\": \"...\"}` avec le code HTTP.\n"
            "- Authentification : `Authorization: Bearer <token>` (voir `/auth/login`).\n"
            "- Positions en GeoJSON : `[longitude, latitude]`.\n"
        ),
        routes=app.routes,
        tags=app.openapi_tags,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
