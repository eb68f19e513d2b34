import re
import logging
from typing import List, Optional

import tree_sitter_css
from tree_sitter import Language, Parser, Node, Query, QueryCursor

from .config import CSS_IMPORT_PREFIXES

logger = logging.getLogger(__name__)

# Indented syntax: "@import foo, bar" on its own line, no semicolons
_INDENTED_IMPORT = re.compile(r"^\s*@import\s+(.+?)\s*$", re.MULTILINE)

class ImportScanner:
    """Extracts the `@import` URIs a stylesheet depends on."""

    def __init__(self):
        self.language: Optional[Language] = None
        self.parser: Optional[Parser] = None
        self.query: Optional[Query] = None
        self._init_language()

    def _init_language(self):
        """Initialize the Tree-sitter CSS grammar."""
        try:
            self.language = Language(tree_sitter_css.language())
            self.parser = Parser(self.language)
            self.query = Query(self.language, "(import_statement) @stmt")
        except Exception as e:
            logger.warning(f"CSS grammar unavailable, using line-based scanning: {e}")

    def scan(self, source: str, syntax: str = "scss") -> List[str]:
        """
        Returns import URIs in source order, without duplicates and
        without plain CSS imports (url(...), *.css, remote URLs).
        """
        if syntax == "sass" or self.parser is None or self.query is None:
            uris = self._fallback_scan(source)
        else:
            tree = self.parser.parse(bytes(source, "utf8"))
            uris = self._extract_imports(tree.root_node)

        seen = set()
        result = []
        for uri in uris:
            if uri in seen or self._is_css_import(uri):
                continue
            seen.add(uri)
            result.append(uri)
        return result

    def _extract_imports(self, root_node: Node) -> List[str]:
        captures = QueryCursor(self.query).captures(root_node)

        statements = []
        for tag, found in captures.items():
            statements.extend(found)
        statements.sort(key=lambda n: n.start_byte)

        uris = []
        for stmt in statements:
            uris.extend(self._strings_in(stmt))
        return uris

    def _strings_in(self, node: Node) -> List[str]:
        """
        String arguments of an import statement in order. "a", "b" lists
        parse with all but the last string under an ERROR child.
        """
        strings = []
        for child in node.children:
            if child.type == "string_value":
                strings.append(child.text.decode("utf-8", errors="replace").strip("'\""))
            elif child.type != "call_expression":
                strings.extend(self._strings_in(child))
        return strings

    def _fallback_scan(self, source: str) -> List[str]:
        uris = []
        for match in _INDENTED_IMPORT.finditer(source):
            for part in match.group(1).split(","):
                part = part.strip().rstrip(";").strip()
                if part and not part.startswith("url("):
                    uris.append(part.strip("'\""))
        return uris

    @staticmethod
    def _is_css_import(uri: str) -> bool:
        return uri.endswith(".css") or uri.startswith(CSS_IMPORT_PREFIXES) or uri.startswith("url(")
