from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from app.api.v1.dependencies import get_cat_service, get_current_user
from app.core.errors import ValidationError
from app.db.models.users import User
from app.features.cats.schemas import CatAdminUpdate, CatCreate, CatOut, CatUpdate
from app.features.cats.services import CatService
from app.features.common.schemas import ErrorOut, MessageOut
from app.utils.geo import bounding_box, parse_lat_lng

router = APIRouter(
    prefix="/cats",
    tags=["cats"],
    responses={404: {"model": ErrorOut, "description": "Not Found"}},
)

# ⚠️ les routes statiques (/user, /area, /admin) sont déclarées avant /{cat_id}

# -----------------------------
# Lectures
# -----------------------------
@router.get(
    "",
    summary="Lister les chats",
    description="Tous les chats, avec le propriétaire (nom + email).",
    response_model=List[CatOut],
)
def list_cats(svc: CatService = Depends(get_cat_service)):
    return svc.list()

@router.get(
    "/user",
    summary="Lister mes chats",
    response_model=List[CatOut],
    responses={403: {"model": ErrorOut}},
)
@router.get("/my", include_in_schema=False, response_model=List[CatOut])
def list_my_cats(
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    return svc.list_by_owner(user.id)

@router.get(
    "/area",
    summary="Chats dans une zone",
    description=(
        "Rectangle donné par deux coins au format `lat,lng` : "
        "`topRight=60.3,25.1&bottomLeft=60.1,24.8`."
    ),
    response_model=List[CatOut],
    responses={400: {"model": ErrorOut}},
)
def list_cats_in_area(
    top_right: str = Query(..., alias="topRight", examples=["60.3,25.1"]),
    bottom_left: str = Query(..., alias="bottomLeft", examples=["60.1,24.8"]),
    svc: CatService = Depends(get_cat_service),
):
    errors = []
    corners = {}
    for field, raw in (("topRight", top_right), ("bottomLeft", bottom_left)):
        try:
            corners[field] = parse_lat_lng(raw)
        except ValueError as e:
            errors.append((str(e), field))
    if errors:
        raise ValidationError(errors)
    return svc.list_within(bounding_box(corners["topRight"], corners["bottomLeft"]))

@router.get(
    "/{cat_id}",
    summary="Récupérer un chat",
    response_model=CatOut,
)
def get_cat(cat_id: int = Path(..., ge=1), svc: CatService = Depends(get_cat_service)):
    return svc.get(cat_id)

# -----------------------------
# Création (multipart)
# -----------------------------
@router.post(
    "",
    summary="Créer un chat",
    description=(
        "Formulaire multipart avec la photo. Position : champs `lat` + `lng`, "
        "sinon GPS EXIF de la photo, sinon point par défaut."
    ),
    response_model=MessageOut[CatOut],
    responses={400: {"model": ErrorOut}, 403: {"model": ErrorOut}},
)
async def create_cat(
    cat_name: str = Form(..., min_length=1, max_length=100),
    weight: float = Form(..., gt=0),
    birthdate: date = Form(...),
    lat: Optional[float] = Form(None),
    lng: Optional[float] = Form(None),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    payload = CatCreate(cat_name=cat_name, weight=weight, birthdate=birthdate)
    filename, exif = await svc.upload(file)
    try:
        location = svc.resolve_location(lat=lat, lng=lng, exif=exif)
    except ValidationError:
        svc.discard_upload(filename)
        raise
    return svc.create(payload, filename=filename, location=location, owner_id=user.id)

# -----------------------------
# Admin
# -----------------------------
@router.put(
    "/admin/{cat_id}",
    summary="Modifier un chat (admin, propriétaire compris)",
    response_model=MessageOut[CatOut],
    responses={403: {"model": ErrorOut, "description": "Admin only"}},
)
def update_cat_admin(
    payload: CatAdminUpdate,
    cat_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    return svc.update_admin(cat_id, payload, user=user)

@router.delete(
    "/admin/{cat_id}",
    summary="Supprimer un chat (admin)",
    response_model=MessageOut[CatOut],
    responses={403: {"model": ErrorOut, "description": "Admin only"}},
)
def delete_cat_admin(
    cat_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    return svc.delete_admin(cat_id, user=user)

# -----------------------------
# Propriétaire
# -----------------------------
@router.put(
    "/{cat_id}",
    summary="Modifier un de mes chats",
    response_model=MessageOut[CatOut],
    responses={403: {"model": ErrorOut}},
)
def update_cat(
    payload: CatUpdate,
    cat_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    return svc.update_by_owner(cat_id, payload, user_id=user.id)

@router.delete(
    "/{cat_id}",
    summary="Supprimer un de mes chats",
    response_model=MessageOut[CatOut],
    responses={403: {"model": ErrorOut}},
)
def delete_cat(
    cat_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: CatService = Depends(get_cat_service),
):
    return svc.delete_by_owner(cat_id, user_id=user.id)
