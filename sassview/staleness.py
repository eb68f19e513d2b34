import logging
from typing import List, Optional, Set

from .engine import SassEngine
from .graph import ImportGraph
from .importers.base import Importer
from .models import ImportOptions

logger = logging.getLogger(__name__)

class StalenessChecker:
    """
    Decides whether compiled CSS is out of date with respect to a
    stylesheet and everything it imports, using the importer's mtimes.
    """

    def __init__(self, importer: Importer, graph: Optional[ImportGraph] = None):
        self.importer = importer
        self.graph = graph

    def closure(self, uri: str, options: Optional[ImportOptions] = None) -> List[SassEngine]:
        """Engines for every stylesheet `uri` transitively imports, depth-first."""
        engine = self.importer.find(uri, options)
        if engine is None:
            return []

        order: List[SassEngine] = []
        self._walk(engine, {engine.filename}, order)
        return order

    def dependency_paths(self, uri: str, options: Optional[ImportOptions] = None) -> List[str]:
        """Virtual paths of the closure of `uri`."""
        return [engine.filename for engine in self.closure(uri, options)]

    def _walk(self, engine: SassEngine, seen: Set[str], order: List[SassEngine]):
        deps = engine.dependencies()
        if self.graph:
            self.graph.record(engine.filename, [dep.filename for dep in deps])

        for dep in deps:
            if dep.filename in seen:
                continue
            seen.add(dep.filename)
            order.append(dep)
            self._walk(dep, seen, order)

    def newest_mtime(self, uri: str, options: Optional[ImportOptions] = None) -> Optional[int]:
        """Latest mtime across `uri` and its imports; None if `uri` isn't found."""
        newest = self.importer.mtime(uri, options)
        if newest is None:
            return None

        for path in self.dependency_paths(uri, options):
            mtime = self.importer.mtime(path, options)
            if mtime is not None and mtime > newest:
                newest = mtime
        return newest

    def stylesheet_needs_update(self, uri: str, since: int, options: Optional[ImportOptions] = None) -> bool:
        newest = self.newest_mtime(uri, options)
        if newest is None:
            logger.debug(f"{uri} not found, treating as stale")
            return True
        return newest > since
