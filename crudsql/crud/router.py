"""API router for the model-driven CRUD endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import Response

from crudsql.core.dependencies import RegistryDep, SessionDep, SettingsDep
from crudsql.crud.dao import QueryRunner
from crudsql.crud.schemas import DeleteResult, ModelSummary, SqlPreview
from crudsql.crud.service import CrudService

router = APIRouter(tags=["crud"])


# Dependency functions
def get_query_runner(db: SessionDep) -> QueryRunner:
    return QueryRunner(db)


def get_crud_service(
    settings: SettingsDep,
    registry: RegistryDep,
    runner: QueryRunner = Depends(get_query_runner),
) -> CrudService:
    return CrudService(settings, registry, runner)


# ===== MODELS =====


@router.get("/models", response_model=List[ModelSummary])
def get_models(service: CrudService = Depends(get_crud_service)) -> List[ModelSummary]:
    """List registered entity models."""
    return service.list_models()


# ===== READ ENDPOINTS =====


@router.get("/{entity}")
def get_many(entity: str, request: Request, service: CrudService = Depends(get_crud_service)) -> Any:
    """Filtered, sorted and paginated records (JSON, or CSV with ``format=csv``)."""
    result = service.get_many(entity, dict(request.query_params))
    if isinstance(result, str):
        return Response(
            content=result,
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={entity}.csv"},
        )
    return result


@router.get("/{entity}/sql", response_model=SqlPreview)
def preview_sql(entity: str, request: Request, service: CrudService = Depends(get_crud_service)) -> Dict[str, Any]:
    """Statement the listing endpoint would run for the same query string."""
    return service.preview(entity, dict(request.query_params))


@router.get("/{entity}/lov/{field}")
def get_lov(entity: str, field: str, service: CrudService = Depends(get_crud_service)) -> List[Dict[str, Any]]:
    """List of values for a lookup field (usually for dropdowns)."""
    return service.lov(entity, field)


@router.get("/{entity}/collec/{collec}")
def get_collection(
    entity: str,
    collec: str,
    id: str = Query(..., description="Parent record id"),
    service: CrudService = Depends(get_crud_service),
) -> List[Dict[str, Any]]:
    """Records of a sub-collection for one parent record."""
    return service.collection(entity, collec, id)


@router.get("/{entity}/{record_id}")
def get_one(entity: str, record_id: str, service: CrudService = Depends(get_crud_service)) -> Dict[str, Any]:
    return service.get_one(entity, record_id)


# ===== WRITE ENDPOINTS =====


@router.post("/{entity}")
def insert_one(
    entity: str, values: Dict[str, Any] = Body(...), service: CrudService = Depends(get_crud_service)
) -> Any:
    return service.insert_one(entity, values)


@router.patch("/{entity}/{record_id}")
@router.put("/{entity}/{record_id}")
def update_one(
    entity: str,
    record_id: str,
    values: Dict[str, Any] = Body(...),
    service: CrudService = Depends(get_crud_service),
) -> Dict[str, Any]:
    return service.update_one(entity, record_id, values)


@router.delete("/{entity}/{record_id}", response_model=DeleteResult)
def delete_one(entity: str, record_id: str, service: CrudService = Depends(get_crud_service)) -> Dict[str, Any]:
    return service.delete_one(entity, record_id)
