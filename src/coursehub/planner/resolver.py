"""Prerequisite Resolver - Transitive prerequisite closure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from coursehub.catalog import CourseCatalog

logger = logging.getLogger(__name__)


class PrerequisiteResolver:
    """Expands requested course codes into their full prerequisite closure.

    Unknown codes are dropped since they cannot be scheduled. Prerequisite
    cycles are tolerated: the visited set guarantees termination.
    """

    def __init__(self, catalog: CourseCatalog) -> None:
        self.catalog = catalog

    def resolve(self, codes: Iterable[str]) -> set[str]:
        """Return the requested codes plus all transitive prerequisites.

        Args:
            codes: Requested course codes. May contain duplicates or unknown codes.

        Returns:
            Set of known course codes closed under the prerequisite relation.
        """
        visited: set[str] = set()
        worklist = list(codes)

        while worklist:
            code = worklist.pop()
            if code in visited:
                continue
            course = self.catalog.get_by_code(code)
            if course is None:
                logger.debug("Dropping unknown course code %s", code)
                continue
            visited.add(code)
            worklist.extend(p for p in course.prerequisites if p not in visited)

        return visited

    def missing(self, codes: Iterable[str]) -> set[str]:
        """Return the requested codes the catalog does not know."""
        return {code for code in codes if code not in self.catalog}
