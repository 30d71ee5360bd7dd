"""Course Catalog - Static course and section reference data."""

from coursehub.catalog.catalog import CourseCatalog, catalog_from_dict, load_catalog
from coursehub.catalog.exceptions import CatalogError, CatalogFormatError, CourseNotFoundError
from coursehub.catalog.models import (
    Course,
    Day,
    MeetingTime,
    Section,
    format_clock,
    parse_clock,
)

__all__ = [
    "CatalogError",
    "CatalogFormatError",
    "Course",
    "CourseCatalog",
    "CourseNotFoundError",
    "Day",
    "MeetingTime",
    "Section",
    "catalog_from_dict",
    "format_clock",
    "load_catalog",
    "parse_clock",
]
