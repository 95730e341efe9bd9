"""
Cocktails Router

Endpoints:
- GET /cocktails - List every cocktail with its average rating
- GET /cocktails/{cocktail_id} - One cocktail with its reviews
- POST /cocktails - Create a cocktail (authenticated, multipart form)

The create form carries the ingredients as a JSON array in a text field,
next to an optional image file.
"""

import logging

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from cocktail_api.config import get_settings
from cocktail_api.dependencies import CurrentUserId, DbSession, ImageStorageDep
from cocktail_api.schemas.cocktail import CocktailDetailResponse, CocktailResponse
from cocktail_api.services import catalog
from cocktail_api.services.catalog import ImageUpload, SerializedIngredients
from cocktail_api.services.rate_limiter import limiter
from cocktail_api.services.uploads import ImageStorage

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/cocktails",
    tags=["Cocktails"],
    responses={
        404: {"description": "Cocktail not found"},
    },
)


def _read_image(image: UploadFile | None, storage: ImageStorage) -> ImageUpload | None:
    """Read at most one byte past the size limit; empty uploads count as none."""
    if image is None or not image.filename:
        return None

    data = image.file.read(storage.max_bytes + 1)
    if not data:
        return None
    return ImageUpload(data=data, content_type=image.content_type)


@router.get(
    "",
    response_model=list[CocktailResponse],
    summary="List cocktails",
    description="Get every cocktail with its average rating and rating count.",
)
@limiter.limit(settings.rate_limit_default)
def list_cocktails(request: Request, db: DbSession) -> list[CocktailResponse]:
    return [CocktailResponse.from_cocktail(c) for c in catalog.list_cocktails(db)]


@router.get(
    "/{cocktail_id}",
    response_model=CocktailDetailResponse,
    summary="Get a cocktail",
    description="Get one cocktail with its average rating and all reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_cocktail(
    request: Request,
    cocktail_id: str,
    db: DbSession,
) -> CocktailDetailResponse:
    return CocktailDetailResponse.from_detail(catalog.get_cocktail(db, cocktail_id))


@router.post(
    "",
    response_model=CocktailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a cocktail",
    description="""
    Create a cocktail from a multipart form. Requires authentication.

    - name: 2-100 characters, unique
    - instructions: up to 4000 characters
    - ingredients: JSON array of strings, e.g. ["gin", "tonic"]
    - alcoholic: true/false
    - image: optional PNG, JPEG or WEBP file, at most 2MB
    """,
    responses={409: {"description": "Cocktail name already taken"}},
)
@limiter.limit(settings.rate_limit_write)
def create_cocktail(
    request: Request,
    db: DbSession,
    current_user_id: CurrentUserId,
    storage: ImageStorageDep,
    name: str = Form(default="", description="Cocktail name"),
    instructions: str = Form(default="", description="Preparation steps"),
    alcoholic: bool = Form(default=False, description="Contains alcohol"),
    ingredients: str | None = Form(
        default=None,
        description="JSON array of ingredient names",
        examples=['["white rum", "lime", "mint"]'],
    ),
    image: UploadFile | None = File(default=None, description="Cocktail picture"),
) -> CocktailResponse:
    cocktail = catalog.create_cocktail(
        db,
        name=name,
        instructions=instructions,
        alcoholic=alcoholic,
        ingredients=SerializedIngredients(ingredients),
        image=_read_image(image, storage),
        storage=storage,
    )
    logger.info(f"Cocktail {cocktail.id} created by user {current_user_id}")
    return CocktailResponse.from_cocktail(cocktail)
