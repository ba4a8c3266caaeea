"""Category routes (per-user)."""

from fastapi import APIRouter, Depends, Response, status

from journal import JournalStore
from web.auth import get_current_user
from web.deps import get_store
from web.models import CategoryCreate, CategoryOut, CategoryUpdate

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    return [c.to_dict() for c in store.list_categories(user["id"])]


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    category = store.create_category(
        user["id"],
        body.name,
        color=body.color,
        description=body.description,
        parent_id=body.parent_id,
    )
    return category.to_dict()


@router.get("/hierarchy")
def category_hierarchy(
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Categories nested under their parents."""
    return store.category_hierarchy(user["id"])


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    return store.get_category(category_id, user["id"]).to_dict()


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str,
    body: CategoryUpdate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    category = store.update_category(
        category_id,
        user["id"],
        name=body.name,
        color=body.color,
        description=body.description,
        parent_id=body.parent_id,
    )
    return category.to_dict()


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    store.delete_category(category_id, user["id"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
