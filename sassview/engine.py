import logging
from typing import List, Optional

import sass

from .models import ImportOptions
from .scanner import ImportScanner

logger = logging.getLogger(__name__)

_scanner: Optional[ImportScanner] = None

def _get_scanner() -> ImportScanner:
    global _scanner
    if _scanner is None:
        _scanner = ImportScanner()
    return _scanner

class SassSyntaxError(Exception):
    """Raised when a stylesheet (or something it imports) fails to compile."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename

class SassEngine:
    """
    A Sass source document ready to be compiled.
    When `options.importer` is set, every `@import` in the document is
    resolved through it before libsass falls back on its load paths.
    """

    def __init__(self, source: str, options: Optional[ImportOptions] = None):
        self.source = source
        self.options = options or ImportOptions()

    @property
    def filename(self) -> Optional[str]:
        return self.options.filename

    @property
    def syntax(self) -> str:
        return self.options.syntax

    @property
    def import_filename(self) -> Optional[str]:
        """Name handed to libsass; the extension tells it which syntax to parse."""
        if not self.filename:
            return None
        return f"{self.filename}.{self.syntax}"

    def render(self) -> str:
        """Compiles the document to CSS."""
        kwargs = {
            "string": self.source,
            "indented": self.syntax == "sass",
            "output_style": self.options.style,
            "precision": self.options.precision,
            "include_paths": list(self.options.load_paths),
        }
        if self.options.importer is not None:
            kwargs["importers"] = [(0, self._import_callback)]

        try:
            return sass.compile(**kwargs)
        except sass.CompileError as e:
            logger.error(f"Failed to compile {self.filename or '<string>'}: {e}")
            raise SassSyntaxError(str(e), self.filename) from e

    def dependencies(self) -> List["SassEngine"]:
        """Engines for every import of this document the importer can resolve."""
        if self.options.importer is None:
            return []

        engines = []
        for uri in _get_scanner().scan(self.source, self.syntax):
            engine = self._resolve_import(uri, self.filename)
            if engine is None:
                logger.debug(f"Unresolved import '{uri}' in {self.filename}")
                continue
            engines.append(engine)
        return engines

    def _resolve_import(self, uri: str, base: Optional[str]) -> Optional["SassEngine"]:
        importer = self.options.importer
        engine = None
        if base:
            engine = importer.find_relative(uri, base, self.options)
        if engine is None:
            engine = importer.find(uri, self.options)
        return engine

    def _import_callback(self, path: str, prev: str):
        # libsass reports "stdin" as the parent of the top-level string
        base = prev if prev and prev != "stdin" else self.filename
        engine = self._resolve_import(path, base)
        if engine is None:
            return None
        return [(engine.import_filename, engine.source)]
