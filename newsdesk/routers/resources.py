"""
Routes for the JSON-array collections (articles, RSS feeds, services,
special offers, feature toggles).

Every collection gets the same handlers; ResourceSpec.methods decides which of
them are mounted, and the framework answers 405 for the rest.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from newsdesk.routers.auth import require_admin
from newsdesk.services.collection_service import RESOURCES, CollectionService, ResourceSpec

logger = logging.getLogger(__name__)


def _get_collection(request: Request, key: str) -> CollectionService:
    collections: Dict[str, CollectionService] = getattr(getattr(request.app, "state", None), "collections", None) or {}
    svc = collections.get(key)
    if not svc:
        raise RuntimeError(f"Collection {key} not configured")
    return svc


def build_router(spec: ResourceSpec) -> APIRouter:
    router = APIRouter(prefix=spec.path, tags=[spec.key])
    guarded = [Depends(require_admin)]
    item_path = "/{identifier}"

    def _fail(action: str, exc: Exception):
        logger.error("Error handling %s (%s): %s", spec.key, action, exc, exc_info=exc)
        raise HTTPException(500, spec.failure_message(action))

    if "GET" in spec.methods:
        @router.get("")
        def list_records(request: Request):
            try:
                return _get_collection(request, spec.key).list_records()
            except Exception as exc:
                _fail("fetch", exc)

    if "POST" in spec.methods:
        @router.post("", status_code=201, dependencies=guarded)
        def create_record(request: Request, payload: Any = Body(...)):
            try:
                _get_collection(request, spec.key).add(payload)
            except Exception as exc:
                _fail(spec.create_action, exc)
            return {"message": spec.created_message()}

    if "PUT" in spec.methods:
        @router.put(item_path, dependencies=guarded)
        def update_record(identifier: str, request: Request, changes: Dict[str, Any] = Body(...)):
            try:
                matched = _get_collection(request, spec.key).update(identifier, changes)
            except Exception as exc:
                _fail("update", exc)
            if not matched:
                logger.info("PUT %s/%s matched no record", spec.path, identifier)
            return {"message": spec.updated_message()}

    if "DELETE" in spec.methods:
        @router.delete(item_path, dependencies=guarded)
        def delete_record(identifier: str, request: Request):
            try:
                removed = _get_collection(request, spec.key).delete(identifier)
            except Exception as exc:
                _fail("delete", exc)
            if not removed:
                logger.info("DELETE %s/%s matched no record", spec.path, identifier)
            return {"message": spec.deleted_message()}

    return router


routers = [build_router(spec) for spec in RESOURCES]
