import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .config import STYLESHEET_FORMATS
from .handlers import HandlerRegistry, TemplateHandler, default_registry
from .models import Template
from .utils import join_virtual, normalize_path

logger = logging.getLogger(__name__)

class LookupContext(ABC):
    """
    The host framework's view finder.
    Maps a (name, prefix, partial) triple to every template that could
    render it, in the order the framework would prefer them.
    """

    @abstractmethod
    def find_all(self, name: str, prefix: Optional[str] = None, partial: bool = False) -> List[Template]:
        """
        Args:
            name: Logical view name, may contain directories ("admin/forms").
            prefix: Namespace the name is looked up under ("stylesheets").
            partial: Look for the partial variant ("admin/_forms").

        Returns:
            All matching candidates; empty if nothing matches.
        """
        pass

class FileSystemLookupContext(LookupContext):
    """
    Looks views up in a list of view path directories.
    Handles:
    - Prefixes and nested names (prefix/dir/name)
    - Partials (leading underscore on the last segment)
    - Format-qualified files (name.css.scss) ahead of plain ones (name.scss)
    - Explicit extensions in the name (colors.scss)
    """

    def __init__(self, view_paths: Iterable, formats: Iterable[str] = STYLESHEET_FORMATS,
                 registry: Optional[HandlerRegistry] = None):
        self.view_paths = [Path(p) for p in view_paths]
        self.formats = tuple(formats)
        self.registry = registry or default_registry()

    def find_all(self, name: str, prefix: Optional[str] = None, partial: bool = False) -> List[Template]:
        name, only_ext = self._split_extension(name or "")
        logical = join_virtual(prefix or "", name)
        if not logical:
            return []

        directory, _, base = logical.rpartition("/")
        if partial:
            base = f"_{base}"

        templates = []
        for view_path in self.view_paths:
            templates.extend(self._find_in(view_path, directory, base, only_ext))
        return templates

    def _split_extension(self, name: str) -> Tuple[str, Optional[str]]:
        """Strips a registered handler extension off the last segment."""
        directory, slash, last = name.rpartition("/")
        stem, dot, ext = last.rpartition(".")
        if dot and stem and self.registry.for_extension(ext):
            return f"{directory}{slash}{stem}", ext.lower()
        return name, None

    def _find_in(self, view_path: Path, directory: str, base: str, only_ext: Optional[str]) -> List[Template]:
        root = view_path / directory if directory else view_path
        if not root.is_dir():
            return []

        matches = []
        for entry in root.iterdir():
            if not entry.is_file():
                continue
            match = self._match(entry.name, base, only_ext)
            if match is None:
                continue
            rank, fmt, handler = match
            matches.append((rank, entry.name, entry, fmt, handler))

        matches.sort(key=lambda m: (m[0], m[1]))

        templates = []
        for _, _, entry, fmt, handler in matches:
            if not self._is_within_root(str(entry), view_path):
                logger.warning(f"Ignoring view outside of {view_path}: {entry}")
                continue
            template = self._load(entry, join_virtual(directory, base), fmt, handler)
            if template:
                templates.append(template)
        return templates

    def _match(self, filename: str, base: str, only_ext: Optional[str]) -> Optional[Tuple[Tuple[int, int], Optional[str], TemplateHandler]]:
        """Returns (rank, format, handler) if filename renders `base`."""
        if not filename.startswith(base + "."):
            return None

        parts = filename[len(base) + 1:].split(".")
        if len(parts) == 1:
            fmt, ext = None, parts[0]
        elif len(parts) == 2:
            fmt, ext = parts
        else:
            return None

        ext = ext.lower()
        handler = self.registry.for_extension(ext)
        if handler is None or (only_ext and ext != only_ext):
            return None
        if fmt is not None and fmt not in self.formats:
            return None

        format_rank = self.formats.index(fmt) if fmt is not None else len(self.formats)
        handler_rank = self.registry.extensions.index(ext)
        return (format_rank, handler_rank), fmt, handler

    def _load(self, path: Path, virtual_path: str, fmt: Optional[str], handler: TemplateHandler) -> Optional[Template]:
        try:
            source = path.read_text(encoding="utf-8")
            updated_at = datetime.fromtimestamp(path.stat().st_mtime)
        except OSError as e:
            logger.warning(f"Failed to read view {path}: {e}")
            return None

        return Template(
            identifier=normalize_path(str(path)),
            virtual_path=virtual_path,
            source=source,
            handler=handler,
            format=fmt,
            updated_at=updated_at,
        )

    @staticmethod
    def _is_within_root(resolved_path: str, root: Path) -> bool:
        """Ensures a resolved path stays within the view path."""
        try:
            Path(resolved_path).resolve().relative_to(root.resolve())
            return True
        except ValueError:
            return False
