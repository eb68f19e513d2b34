import logging
from typing import Optional

from ..engine import SassEngine
from ..lookup import LookupContext
from ..models import HandlerKind, ImportOptions, Template
from ..utils import parent_prefix
from .base import Importer

logger = logging.getLogger(__name__)

class ViewImporter(Importer):
    """
    Loads Sass files as though they were views of the host framework.
    Doesn't cache anything; the lookup context owns that.

    Unlike regular view rendering, importing a partial isn't a distinct
    action: an import first looks for a non-partial view and, failing
    that, falls back on the partial, the way Sass imports do.

    Each instance is local to a single request for a single view and
    holds that request's lookup context.
    """

    def __init__(self, lookup_context: LookupContext):
        self.lookup_context = lookup_context

    def find_relative(self, uri: str, base: str, options: Optional[ImportOptions] = None) -> Optional[SassEngine]:
        return self._find(uri, parent_prefix(base), options)

    def find(self, uri: str, options: Optional[ImportOptions] = None, prefix: Optional[str] = None) -> Optional[SassEngine]:
        return self._find(uri, prefix, options)

    def mtime(self, uri: str, options: Optional[ImportOptions] = None) -> Optional[int]:
        # Separate lookup from find(); an unstable candidate order in the
        # host could make this report a different template than find() loads.
        template = self._find_template(uri, None, partial=False) or \
            self._find_template(uri, None, partial=True)
        if template is None:
            return None
        return int(template.updated_at.timestamp())

    def __str__(self) -> str:
        return "(view importer)"

    def _find(self, uri: str, prefix: Optional[str], options: Optional[ImportOptions]) -> Optional[SassEngine]:
        template = self._find_template(uri, prefix, partial=False) or \
            self._find_template(uri, prefix, partial=True)
        return self._prepare_template(template, options)

    def _find_template(self, uri: str, prefix: Optional[str], partial: bool) -> Optional[Template]:
        for template in self.lookup_context.find_all(uri, prefix, partial):
            if template.handler_kind == HandlerKind.SASS:
                return template
        return None

    def _prepare_template(self, template: Optional[Template], options: Optional[ImportOptions]) -> Optional[SassEngine]:
        if template is None:
            return None

        options = (options or ImportOptions()).model_copy(update={
            "syntax": template.handler.syntax,
            "filename": template.virtual_path,
            "importer": self,
        })
        logger.debug(f"Resolved {template.virtual_path} -> {template.identifier}")
        return SassEngine(template.source, options)
