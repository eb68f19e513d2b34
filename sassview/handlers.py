from typing import Dict, List, Optional
from .models import HandlerKind

class TemplateHandler:
    """Renders views with a given extension. Anything that isn't Sass."""

    kind = HandlerKind.OTHER

    def __init__(self, extension: str):
        self.extension = extension

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.extension!r})"

class SassTemplateHandler(TemplateHandler):
    """Handler for Sass stylesheets; `syntax` is 'scss' or 'sass'."""

    kind = HandlerKind.SASS

    def __init__(self, syntax: str):
        super().__init__(syntax)
        self.syntax = syntax

class HandlerRegistry:
    """
    Ordered mapping of file extension -> handler.
    Registration order is the order candidates are returned in
    when several files in one directory share a name.
    """

    def __init__(self):
        self._handlers: Dict[str, TemplateHandler] = {}

    def register(self, extension: str, handler: TemplateHandler):
        self._handlers[extension.lstrip(".").lower()] = handler

    def for_extension(self, extension: str) -> Optional[TemplateHandler]:
        return self._handlers.get(extension.lstrip(".").lower())

    @property
    def extensions(self) -> List[str]:
        return list(self._handlers)

def default_registry() -> HandlerRegistry:
    registry = HandlerRegistry()
    registry.register("scss", SassTemplateHandler("scss"))
    registry.register("sass", SassTemplateHandler("sass"))
    for ext in ("css", "erb", "html"):
        registry.register(ext, TemplateHandler(ext))
    return registry
