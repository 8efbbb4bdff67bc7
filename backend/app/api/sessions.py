import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..core.session_store import SessionStore
from ..models.recipe import Recipe
from ..models.session import SessionTableView
from ..services.cook_session import AnotherSessionActive, CookSession
from ..services.progress import describe
from ..services.recipe_catalog import RecipeCatalog
from ..services.recipe_parser import RecipeParser

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["sessions"])


class RecipeText(BaseModel):
    text: str


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_catalog(request: Request) -> RecipeCatalog:
    return request.app.state.catalog


def get_cook_session(
    recipe_id: str,
    store: SessionStore = Depends(get_store),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> CookSession:
    recipe = catalog.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' not found")
    return CookSession(store, recipe)


# ------------------------------------------------------------------
# Recipes
# ------------------------------------------------------------------


@router.post("/recipes")
async def create_recipe(body: RecipeText, catalog: RecipeCatalog = Depends(get_catalog)) -> Recipe:
    try:
        recipe = await RecipeParser.parse(body.text)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return catalog.add(recipe)


@router.get("/recipes")
async def list_recipes(catalog: RecipeCatalog = Depends(get_catalog)) -> list[Recipe]:
    return catalog.list()


@router.get("/recipes/{recipe_id}")
async def get_recipe(recipe_id: str, catalog: RecipeCatalog = Depends(get_catalog)) -> Recipe:
    recipe = catalog.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' not found")
    return recipe


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(
    recipe_id: str,
    store: SessionStore = Depends(get_store),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> dict:
    store.end_session(recipe_id)
    catalog.remove(recipe_id)
    return {"deleted": recipe_id}


@router.post("/recipes/{recipe_id}/favorite")
async def toggle_favorite(recipe_id: str, catalog: RecipeCatalog = Depends(get_catalog)) -> Recipe:
    recipe = catalog.toggle_favorite(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' not found")
    return recipe


# ------------------------------------------------------------------
# Session commands
# ------------------------------------------------------------------


@router.get("/session")
async def session_table(store: SessionStore = Depends(get_store)) -> SessionTableView:
    return store.snapshot()


@router.get("/sessions/{recipe_id}")
async def session_state(session: CookSession = Depends(get_cook_session)) -> dict:
    view = session.view()
    if view is None:
        raise HTTPException(status_code=404, detail="No session for this recipe")
    return describe(view, session.recipe)


@router.post("/sessions/{recipe_id}/start")
async def start_session(session: CookSession = Depends(get_cook_session)) -> dict:
    try:
        session.start()
    except AnotherSessionActive as e:
        log.info("Start refused for %s: %s is active", session.recipe_id, e.active_recipe_id)
        raise HTTPException(status_code=409, detail=str(e))
    return describe(session.view(), session.recipe)


@router.post("/sessions/{recipe_id}/pause")
async def pause_session(session: CookSession = Depends(get_cook_session)) -> dict:
    session.pause()
    return describe(session.view(), session.recipe)


@router.post("/sessions/{recipe_id}/resume")
async def resume_session(session: CookSession = Depends(get_cook_session)) -> dict:
    session.resume()
    return describe(session.view(), session.recipe)


@router.post("/sessions/{recipe_id}/toggle")
async def toggle_session(session: CookSession = Depends(get_cook_session)) -> dict:
    session.toggle()
    return describe(session.view(), session.recipe)


@router.post("/sessions/{recipe_id}/skip")
async def skip_step(session: CookSession = Depends(get_cook_session)) -> dict:
    session.skip()
    return describe(session.view(), session.recipe)


@router.post("/sessions/{recipe_id}/end")
async def end_session(session: CookSession = Depends(get_cook_session)) -> dict:
    session.end()
    return describe(session.view(), session.recipe)
