import sys
import logging
import asyncio
import builtins
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from fastmcp import FastMCP

# --- STDOUT FORTRESS ---
_original_print = builtins.print

def safe_print(*args, **kwargs):
    if 'file' not in kwargs or kwargs['file'] is None or kwargs['file'] == sys.stdout:
        kwargs['file'] = sys.stderr
    _original_print(*args, **kwargs)

from .config import LOG_DIR, VIEW_PATHS, OUTPUT_STYLE, OUTPUT_STYLES
from .cache import CompileCache
from .engine import SassSyntaxError
from .graph import ImportGraph
from .importers.views import ViewImporter
from .lookup import FileSystemLookupContext
from .models import ImportOptions
from .staleness import StalenessChecker

# Configure logging to file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(LOG_DIR / "server.log", encoding='utf-8'),
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger("server")

# Initialize components
mcp = FastMCP("Sass View Importer")
compile_cache = CompileCache()
import_graph = ImportGraph()

def _view_paths(view_path: Optional[str]) -> List[Path]:
    paths = [view_path] if view_path else VIEW_PATHS
    return [Path(p).resolve() for p in paths]

def _importer_for(view_path: Optional[str]) -> ViewImporter:
    """One importer per request, as the host framework would build it."""
    return ViewImporter(FileSystemLookupContext(_view_paths(view_path)))

async def render_stylesheet_impl(name: str, view_path: Optional[str] = None, prefix: Optional[str] = None, style: Optional[str] = None) -> str:
    if style and style not in OUTPUT_STYLES:
        return f"Error: Unknown output style '{style}'. Use one of: {', '.join(sorted(OUTPUT_STYLES))}."

    try:
        importer = _importer_for(view_path)
        options = ImportOptions(style=style or OUTPUT_STYLE)
        engine = importer.find(name, options, prefix=prefix)
        if engine is None:
            return f"Error: Stylesheet '{name}' not found."

        imports = StalenessChecker(importer, import_graph).closure(engine.filename, options)
        roots = ",".join(p.as_posix() for p in importer.lookup_context.view_paths)
        key = CompileCache.key_for(
            [(engine.filename, engine.source)] + [(dep.filename, dep.source) for dep in imports],
            f"{roots}:{options.style}:{options.precision}",
        )

        css = compile_cache.get(key)
        if css is None:
            css = await asyncio.to_thread(engine.render)
            compile_cache.set(key, css, engine.filename)
        else:
            logger.info(f"Cache hit for {engine.filename}")
        return css
    except SassSyntaxError as e:
        return f"Error: Failed to compile {e.filename or name}: {e}"
    except Exception as e:
        logger.error(f"Rendering {name} failed: {e}")
        return f"Error rendering stylesheet: {e}"

@mcp.tool()
async def render_stylesheet(name: str, view_path: Optional[str] = None, prefix: Optional[str] = None, style: Optional[str] = None) -> str:
    """
    Compiles a Sass stylesheet that lives among the application's views to CSS.

    Imports inside the stylesheet are resolved like views: relative to the
    importing file first, non-partial before partial (`_name`).

    Args:
        name: Logical stylesheet name, e.g. "application" or "admin/forms".
        view_path: Root directory holding the views. Defaults to the configured view paths.
        prefix: Namespace to look the name up under, e.g. "stylesheets".
        style: Output style: nested, expanded, compact or compressed.
    """
    return await render_stylesheet_impl(name, view_path, prefix, style)

async def stylesheet_mtime_impl(name: str, view_path: Optional[str] = None) -> str:
    try:
        mtime = _importer_for(view_path).mtime(name)
        if mtime is None:
            return f"Stylesheet '{name}' not found."
        return f"{name}: {mtime} ({datetime.fromtimestamp(mtime).isoformat()})"
    except Exception as e:
        return f"Error reading modification time: {e}"

@mcp.tool()
async def stylesheet_mtime(name: str, view_path: Optional[str] = None) -> str:
    """
    Reports when a stylesheet view was last modified (epoch seconds).

    Args:
        name: Logical stylesheet name.
        view_path: Root directory holding the views.
    """
    return await stylesheet_mtime_impl(name, view_path)

async def list_imports_impl(name: str, view_path: Optional[str] = None) -> str:
    try:
        importer = _importer_for(view_path)
        if importer.find(name) is None:
            return f"Stylesheet '{name}' not found."

        paths = StalenessChecker(importer, import_graph).dependency_paths(name)
        if not paths:
            return f"{name} has no resolvable imports."
        return "\n".join([f"Imports of {name}:"] + [f"- {p}" for p in paths])
    except Exception as e:
        return f"Error listing imports: {e}"

@mcp.tool()
async def list_imports(name: str, view_path: Optional[str] = None) -> str:
    """
    Lists every stylesheet `name` imports, directly or transitively,
    and records the relationships for find_dependents.

    Args:
        name: Logical stylesheet name.
        view_path: Root directory holding the views.
    """
    return await list_imports_impl(name, view_path)

async def find_dependents_impl(name: str) -> str:
    try:
        dependents = import_graph.dependents(name)
        if not dependents:
            return f"No recorded stylesheets import '{name}'."
        return "\n".join(["Imported by:"] + [f"- {d}" for d in dependents])
    except Exception as e:
        return f"Error finding dependents: {e}"

@mcp.tool()
async def find_dependents(name: str) -> str:
    """
    Finds stylesheets known to import `name` (by virtual path, e.g.
    "stylesheets/_colors"). Only relationships seen by list_imports or
    render_stylesheet are known.

    Args:
        name: Virtual path of the imported stylesheet.
    """
    return await find_dependents_impl(name)

if __name__ == "__main__":
    # Apply stdout protection only when running as a server
    builtins.print = safe_print
    mcp.run()
