"""Custom exceptions for the Course Catalog."""


class CatalogError(Exception):
    """Base exception for Course Catalog errors."""


class CourseNotFoundError(CatalogError):
    """Course with given code does not exist."""


class CatalogFormatError(CatalogError):
    """Catalog file is missing or malformed."""
