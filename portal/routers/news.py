"""
News and category endpoints.

The same handlers serve the global partition under ``/api`` and every region
under ``/api/{partition}``; only the dependency that resolves the partition
key differs.
"""
from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from portal.core.errors import NotFound
from portal.domain.access import Action, authorize
from portal.domain.partitions import GLOBAL, is_region
from portal.routers.state import get_news_store
from portal.services.news_service import PartitionedNewsStore
from portal.services.session_service import current_identity


def global_partition() -> str:
    return GLOBAL


def region_partition(partition: str) -> str:
    if not is_region(partition):
        raise NotFound(f"Unknown partition '{partition}'")
    return partition


def _guard(request: Request, partition: str) -> None:
    authorize(current_identity(request), partition, Action.WRITE)


def _build_router(prefix: str, resolve_partition: Callable[..., str]) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=["news"])

    @router.get("/news")
    def list_news(
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        return store.list_news(partition)

    @router.get("/news-categories")
    def list_categories(
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        return store.list_categories(partition)

    @router.post("/news")
    def create_news(
        request: Request,
        payload: dict,
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        _guard(request, partition)
        return JSONResponse(store.create_news(partition, payload), status_code=201)

    @router.put("/news/{news_id}")
    def update_news(
        request: Request,
        news_id: str,
        payload: dict,
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        _guard(request, partition)
        return store.update_news(partition, news_id, payload)

    @router.delete("/news/{news_id}")
    def delete_news(
        request: Request,
        news_id: str,
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        _guard(request, partition)
        store.delete_news(partition, news_id)
        return Response(status_code=204)

    @router.post("/news-categories")
    def create_category(
        request: Request,
        payload: dict,
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        _guard(request, partition)
        categories = store.create_category(partition, payload.get("category"))
        return JSONResponse(categories, status_code=201)

    @router.delete("/news-categories/{category:path}")
    def delete_category(
        request: Request,
        category: str,
        partition: str = Depends(resolve_partition),
        store: PartitionedNewsStore = Depends(get_news_store),
    ):
        _guard(request, partition)
        store.delete_category(partition, category)
        return Response(status_code=204)

    return router


global_router = _build_router("/api", global_partition)
partition_router = _build_router("/api/{partition}", region_partition)
