"""
Gallery API — Dependency Wiring
=================================

What:  FastAPI dependencies that hand route handlers their service objects.
Why:   The record store and asset store are built once in the lifespan and
       kept on app.state; routes receive them through Depends() instead of
       importing module-level singletons.
How:   Tests replace get_project_store / get_asset_service through
       app.dependency_overrides.
"""

from fastapi import Depends, Request

from app.services.asset_service import AssetService
from app.services.project_service import ProjectService
from app.services.project_store import ProjectStore


def get_project_store(request: Request) -> ProjectStore:
    return request.app.state.project_store


def get_asset_service(request: Request) -> AssetService:
    return request.app.state.asset_service


def get_project_service(
    store: ProjectStore = Depends(get_project_store),
    assets: AssetService = Depends(get_asset_service),
) -> ProjectService:
    return ProjectService(store=store, assets=assets)
