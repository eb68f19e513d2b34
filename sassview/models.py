from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .config import OUTPUT_STYLE, PRECISION

class HandlerKind(str, Enum):
    """Tag a template handler declares; importers filter candidates on it."""
    SASS = "sass"
    OTHER = "other"

class Template(BaseModel):
    """A view candidate returned by a lookup context."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    identifier: str = Field(..., description="Absolute POSIX path of the template file")
    virtual_path: str = Field(..., description="Logical path, e.g. 'stylesheets/_mixins'")
    source: str
    handler: Any
    format: Optional[str] = None
    updated_at: datetime

    @property
    def handler_kind(self) -> HandlerKind:
        return getattr(self.handler, "kind", HandlerKind.OTHER)

class ImportOptions(BaseModel):
    """Compiler options. Frozen: derive new values with model_copy(update=...)."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    syntax: str = "scss"  # scss, sass
    filename: Optional[str] = None
    importer: Optional[Any] = None
    style: str = OUTPUT_STYLE
    load_paths: List[str] = Field(default_factory=list)
    precision: int = PRECISION
