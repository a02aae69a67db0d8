"""
Route group factory.

Every entity kind exposes the same six operations. Query strings and JSON
bodies are handed to the repository as plain dictionaries; typing and
validation happen in the data-access layer.
"""

from typing import Any

from fastapi import APIRouter, Request, status

from nuleaf.errors import NotFound, ValidationError
from nuleaf.kinds import EntityKind
from nuleaf.repository import Repository
from nuleaf.sanitizer import split_identifier


def get_repository(request: Request, kind: EntityKind) -> Repository:
    return request.app.state.repositories.by_kind(kind.name)


async def read_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def build_router(kind: EntityKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.name}", tags=[kind.name])

    @router.get("")
    async def search(request: Request) -> list[dict[str, Any]]:
        """Search with filters from the query string; always an array"""
        repository = get_repository(request, kind)
        entities = await repository.find(dict(request.query_params))
        return [repository.entity_mapper.to_document(entity) for entity in entities]

    @router.get("/count")
    async def count(request: Request) -> int:
        repository = get_repository(request, kind)
        return await repository.count(dict(request.query_params))

    @router.get("/{entity_id}")
    async def get(entity_id: str, request: Request) -> dict[str, Any]:
        repository = get_repository(request, kind)
        entity = await repository.get(entity_id)
        return repository.entity_mapper.to_document(entity)

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create(request: Request) -> dict[str, Any]:
        repository = get_repository(request, kind)
        entity = await repository.create(await read_body(request))
        return repository.entity_mapper.to_document(entity)

    @router.patch("/{entity_id}", status_code=status.HTTP_201_CREATED)
    async def update(entity_id: str, request: Request) -> dict[str, Any]:
        """Partial update; the path id wins over any id in the body"""
        repository = get_repository(request, kind)
        body = await read_body(request)
        entity_id, changes = split_identifier({**body, "id": entity_id})
        entity = await repository.update(entity_id, changes)
        return repository.entity_mapper.to_document(entity)

    @router.delete("/{entity_id}")
    async def delete(entity_id: str, request: Request) -> dict[str, bool]:
        repository = get_repository(request, kind)
        if not await repository.delete(entity_id):
            raise NotFound(f"{kind.name} {entity_id} does not exist")
        return {"success": True}

    return router
