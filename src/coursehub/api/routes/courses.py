"""Course catalog endpoints."""

from fastapi import APIRouter, Query

from coursehub.api.dependencies import CatalogDep
from coursehub.api.models import APIResponse, CourseResponse, course_to_response

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def search_courses(
    catalog: CatalogDep,
    q: str = Query(default="", max_length=100),
) -> APIResponse[list[CourseResponse]]:
    """Search courses by code or name. An empty query lists every course."""
    return APIResponse(data=[course_to_response(c) for c in catalog.search(q)])


@router.get("/{code}", response_model=APIResponse[CourseResponse])
def get_course(code: str, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Get a course by code."""
    return APIResponse(data=course_to_response(catalog.require(code)))
