"""
DocStore API — Users Route Handlers
====================================

What:  CRUD endpoints over the users collection, plus a field query.
How:   Extracts path parameters and JSON bodies, delegates to FirestoreService,
       returns the documents as JSON.
Who:   Any HTTP client; there is no authentication.

Endpoints:
    GET    /users            list every document
    GET    /users/{id}       one document, null if missing
    POST   /users            create, 201 with {"id", **body}
    PUT    /users/{id}       merge update, {"id", **body}
    DELETE /users/{id}       delete, confirmation message
    POST   /users/query      documents matching field/operator/value
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from app.config import settings
from app.schemas.document import DeleteResponse, ErrorResponse, QueryRequest
from app.services.firestore_service import FirestoreService, get_firestore_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

_server_error = {500: {"description": "Database error", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[Dict[str, Any]],
    responses=_server_error,
    summary="List all users",
)
async def get_users(
    service: FirestoreService = Depends(get_firestore_service),
) -> List[Dict[str, Any]]:
    return await service.get_collection(settings.users_collection)


@router.post(
    "/query",
    response_model=List[Dict[str, Any]],
    responses={
        400: {"description": "Operator or field rejected by Firestore", "model": ErrorResponse},
        **_server_error,
    },
    summary="Find users by a single field condition",
)
async def query_users(
    query: QueryRequest,
    service: FirestoreService = Depends(get_firestore_service),
) -> List[Dict[str, Any]]:
    """
    Run one `where(field, operator, value)` filter against the collection.

    Example:
        POST /users/query  {"field": "age", "operator": ">=", "value": 18}
    """
    return await service.query_collection(
        settings.users_collection,
        field=query.field,
        operator=query.operator,
        value=query.value,
    )


@router.get(
    "/{user_id}",
    response_model=Optional[Dict[str, Any]],
    responses=_server_error,
    summary="Get a single user by ID",
    description="Returns the document, or null when no user has this ID.",
)
async def get_user(
    user_id: str,
    service: FirestoreService = Depends(get_firestore_service),
) -> Optional[Dict[str, Any]]:
    return await service.get_document(settings.users_collection, user_id)


@router.post(
    "",
    status_code=201,
    response_model=Dict[str, Any],
    responses=_server_error,
    summary="Create a user",
    description="Stores the JSON body as a new document. Firestore assigns the ID.",
)
async def create_user(
    user_data: Dict[str, Any] = Body(...),
    service: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    user_id = await service.create_document(settings.users_collection, user_data)
    return {"id": user_id, **user_data}


@router.put(
    "/{user_id}",
    response_model=Dict[str, Any],
    responses={
        400: {"description": "Firestore rejected the update, e.g. an empty body", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        **_server_error,
    },
    summary="Update a user",
    description="Merges the JSON body into the existing document; fields not sent are kept.",
)
async def update_user(
    user_id: str,
    user_data: Dict[str, Any] = Body(...),
    service: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    await service.update_document(settings.users_collection, user_id, user_data)
    # Echoes the request body, not the merged document
    return {"id": user_id, **user_data}


@router.delete(
    "/{user_id}",
    response_model=DeleteResponse,
    responses=_server_error,
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    service: FirestoreService = Depends(get_firestore_service),
) -> DeleteResponse:
    await service.delete_document(settings.users_collection, user_id)
    return DeleteResponse(message="User deleted successfully", id=user_id)
