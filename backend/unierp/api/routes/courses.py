"""Course Catalog Routes — courses and their prerequisite edges.

Invariants:
    - PATCH bodies are explicit partial updates (CourseUpdate); unknown fields -> 400
    - Missing course -> 404 via ResourceNotFoundError
"""

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_catalog_service
from unierp.schemas.catalog import (
    CourseCreate, CourseResponse, CourseUpdate,
    PrerequisiteCreate, PrerequisiteResponse,
)
from unierp.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.get("", response_model=list[CourseResponse])
async def list_courses(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.list_courses()


@router.post(
    "", response_model=CourseResponse, status_code=status.HTTP_201_CREATED,
)
async def create_course(
    body: CourseCreate, catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_course(body)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str, catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.get_course(course_id)


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    body: CourseUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.update_course(course_id, body)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: str, catalog: CatalogService = Depends(get_catalog_service),
):
    await catalog.delete_course(course_id)


@router.get(
    "/{course_id}/prerequisites", response_model=list[PrerequisiteResponse],
)
async def list_prerequisites(
    course_id: str, catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.list_prerequisites(course_id)


@router.post(
    "/{course_id}/prerequisites",
    response_model=PrerequisiteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_prerequisite(
    course_id: str,
    body: PrerequisiteCreate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Add (or re-grade) the edge course_id -> prerequisite_id."""
    return await catalog.add_prerequisite(course_id, body)


@router.delete(
    "/{course_id}/prerequisites/{prerequisite_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_prerequisite(
    course_id: str,
    prerequisite_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
):
    await catalog.remove_prerequisite(course_id, prerequisite_id)
