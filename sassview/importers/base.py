from abc import ABC, abstractmethod
from typing import Optional

from ..models import ImportOptions

class Importer(ABC):
    """
    Abstract base class for Sass import resolution strategies.
    Responsible for mapping `@import` URIs to loadable Sass sources.
    """

    @abstractmethod
    def find_relative(self, uri: str, base: str, options: Optional[ImportOptions] = None):
        """
        Resolves an import relative to the file that contains it.

        Args:
            uri: The URI as written in the `@import` ("mixins", "admin/forms").
            base: The filename of the importing stylesheet, as this importer reported it.

        Returns:
            A SassEngine for the imported source, or None if nothing matches.
        """
        pass

    @abstractmethod
    def find(self, uri: str, options: Optional[ImportOptions] = None):
        """Resolves an absolute import. Returns a SassEngine or None."""
        pass

    @abstractmethod
    def mtime(self, uri: str, options: Optional[ImportOptions] = None) -> Optional[int]:
        """Last-modified time of the stylesheet `uri` as epoch seconds, or None."""
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass
