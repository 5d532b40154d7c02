"""Tree-sitter backed extraction of Java methods and the calls they make."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from mutant_context.analysis.model import UNKNOWN_TYPE, AnalysisError, CallSite, MethodRecord, SourceLocation

LOGGER = logging.getLogger(__name__)

JAVA_SUFFIXES = (".java",)

CLASS_NODE_TYPES = ("class_declaration", "interface_declaration", "enum_declaration", "record_declaration")
COMMENT_NODE_TYPES = ("line_comment", "block_comment")

LITERAL_TYPES = {
    "string_literal": "String",
    "text_block": "String",
    "character_literal": "char",
    "true": "boolean",
    "false": "boolean",
}
INTEGER_LITERALS = (
    "decimal_integer_literal",
    "hex_integer_literal",
    "octal_integer_literal",
    "binary_integer_literal",
)
FLOAT_LITERALS = ("decimal_floating_point_literal", "hex_floating_point_literal")


@lru_cache(maxsize=1)
def java_language() -> Language:
    return Language(tree_sitter_java.language())


def _parser() -> Parser:
    return Parser(java_language())


# --- Tree-sitter plumbing ----------------------------------------------------

def node_text(source_bytes: bytes, node: Node) -> str:
    """Slice the node's byte range out of the original source."""

    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _column(source_bytes: bytes, offset: int) -> int:
    """Characters between the start of the line and ``offset``; tree-sitter columns count bytes."""

    line_start = source_bytes.rfind(b"\n", 0, offset) + 1
    return len(source_bytes[line_start:offset].decode("utf-8", errors="replace"))


def node_location(source_bytes: bytes, file_path: str, node: Node) -> SourceLocation:
    """Tree-sitter points are 0-based with an exclusive end; locations are 1-based and inclusive."""

    return SourceLocation(
        file_path,
        node.start_point[0] + 1,
        _column(source_bytes, node.start_byte) + 1,
        node.end_point[0] + 1,
        _column(source_bytes, node.end_byte),
    )


def _read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise AnalysisError(f"Source file not found: {path}") from exc
    except OSError as exc:
        raise AnalysisError(f"Failed to read source file {path}: {exc}") from exc


def _parse(source_bytes: bytes, file_path: str) -> Node:
    tree = _parser().parse(source_bytes)
    if tree.root_node.has_error:
        raise AnalysisError(f"Failed to parse file: {file_path}")
    return tree.root_node


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal in document order."""

    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _package_name(source_bytes: bytes, root: Node) -> str:
    for child in root.children:
        if child.type != "package_declaration":
            continue
        for part in child.named_children:
            if part.type in ("scoped_identifier", "identifier"):
                return node_text(source_bytes, part)
    return ""


def _enclosing_class(source_bytes: bytes, node: Node) -> str:
    parent = node.parent
    while parent is not None:
        if parent.type in CLASS_NODE_TYPES:
            name_node = parent.child_by_field_name("name")
            if name_node is not None:
                return node_text(source_bytes, name_node)
        parent = parent.parent
    return ""


def _is_static(source_bytes: bytes, node: Node) -> bool:
    for child in node.children:
        if child.type == "modifiers":
            return any(node_text(source_bytes, modifier) == "static" for modifier in child.children)
    return False


def _parameters(source_bytes: bytes, node: Node) -> List[Tuple[str, str]]:
    """(type, name) pairs of a method's formal parameters; varargs types get a ``...`` suffix."""

    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        return []

    params: List[Tuple[str, str]] = []
    for param in params_node.named_children:
        if param.type == "formal_parameter":
            type_node = param.child_by_field_name("type")
            name_node = param.child_by_field_name("name")
            p_type = node_text(source_bytes, type_node) if type_node else UNKNOWN_TYPE
            p_name = node_text(source_bytes, name_node) if name_node else "param"
            params.append((p_type, p_name))
        elif param.type == "spread_parameter":
            p_type = UNKNOWN_TYPE
            p_name = "args"
            for child in param.named_children:
                if child.type == "modifiers":
                    continue
                if child.type == "variable_declarator":
                    name_node = child.child_by_field_name("name")
                    if name_node is not None:
                        p_name = node_text(source_bytes, name_node)
                elif p_type == UNKNOWN_TYPE:
                    p_type = node_text(source_bytes, child)
            params.append((f"{p_type}...", p_name))
    return params


def _method_record(source_bytes: bytes, node: Node, package_name: str, file_path: str) -> MethodRecord:
    name_node = node.child_by_field_name("name")
    type_node = node.child_by_field_name("type")
    method_name = node_text(source_bytes, name_node) if name_node else "<anonymous>"
    return_type = node_text(source_bytes, type_node) if type_node else "void"
    params = _parameters(source_bytes, node)

    rendered = ", ".join(f"{p_type} {p_name}" for p_type, p_name in params)
    return MethodRecord(
        package_name=package_name,
        class_name=_enclosing_class(source_bytes, node),
        method_name=method_name,
        signature=f"{return_type} {method_name}({rendered})",
        source_code=node_text(source_bytes, node),
        location=node_location(source_bytes, file_path, node),
        is_static=_is_static(source_bytes, node),
        parameter_types=[p_type for p_type, _ in params],
    )


class JavaSourceParser:
    """Source analyzer: every method declaration of a Java compilation unit."""

    def parse_source(self, source: str | bytes, file_path: str = "<memory>") -> List[MethodRecord]:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        root = _parse(source_bytes, file_path)
        package_name = _package_name(source_bytes, root)

        return [
            _method_record(source_bytes, node, package_name, file_path)
            for node in _walk(root)
            if node.type == "method_declaration"
        ]

    def parse_file(self, path: Path) -> List[MethodRecord]:
        path = Path(path)
        methods = self.parse_source(_read_source(path), str(path))
        LOGGER.debug("Parsed %d methods from %s", len(methods), path)
        return methods


def _argument_type(source_bytes: bytes, node: Node) -> str:
    """Best-effort static type of an argument expression, without any inference."""

    kind = node.type
    if kind in LITERAL_TYPES:
        return LITERAL_TYPES[kind]
    if kind in INTEGER_LITERALS:
        return "long" if node_text(source_bytes, node).lower().endswith("l") else "int"
    if kind in FLOAT_LITERALS:
        return "float" if node_text(source_bytes, node).lower().endswith("f") else "double"
    if kind in ("object_creation_expression", "cast_expression"):
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            return node_text(source_bytes, type_node)
    if kind == "parenthesized_expression" and node.named_child_count == 1:
        return _argument_type(source_bytes, node.named_children[0])
    return UNKNOWN_TYPE


def _call_site(source_bytes: bytes, node: Node, file_path: str) -> CallSite:
    name_node = node.child_by_field_name("name")
    args_node = node.child_by_field_name("arguments")
    arguments = []
    if args_node is not None:
        arguments = [
            _argument_type(source_bytes, arg)
            for arg in args_node.named_children
            if arg.type not in COMMENT_NODE_TYPES
        ]
    name = node_text(source_bytes, name_node) if name_node else "<unknown>"
    return CallSite(name, arguments, node_location(source_bytes, file_path, node))


class JavaCallExtractor:
    """Call extractor: re-parses a method's file and lists its ``method_invocation`` nodes."""

    def extract_calls(self, method: MethodRecord) -> List[CallSite]:
        if method.location is None:
            raise AnalysisError(f"No source location recorded for {method.fully_qualified_name}")

        file_path = method.location.file_path
        source_bytes = _read_source(Path(file_path))
        root = _parse(source_bytes, file_path)

        declaration = self._find_declaration(source_bytes, root, method)
        if declaration is None:
            LOGGER.debug("Declaration of %s not found in %s", method.signature, file_path)
            return []

        return [
            _call_site(source_bytes, node, file_path)
            for node in _walk(declaration)
            if node.type == "method_invocation"
        ]

    @staticmethod
    def _find_declaration(source_bytes: bytes, root: Node, method: MethodRecord) -> Optional[Node]:
        fallback: Optional[Node] = None
        for node in _walk(root):
            if node.type != "method_declaration":
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None or node_text(source_bytes, name_node) != method.method_name:
                continue
            if _enclosing_class(source_bytes, node) != method.class_name:
                continue
            if node.start_point[0] + 1 == method.location.begin_line:
                return node
            if fallback is None:
                fallback = node
        return fallback


# --- Directory scanning -------------------------------------------------------

def iter_source_files(root: Path, suffixes: Sequence[str] = JAVA_SUFFIXES) -> Iterator[Path]:
    """Yield ``root`` itself when it is a source file, otherwise every matching file below it."""

    root = Path(root)
    if root.is_file():
        if root.suffix in suffixes:
            yield root
        return
    for candidate in sorted(root.rglob("*")):
        if candidate.is_file() and candidate.suffix in suffixes:
            yield candidate


def collect_methods(
    paths: Iterable[Path],
    parser: Optional[JavaSourceParser] = None,
) -> Tuple[List[MethodRecord], List[str]]:
    """Parse every file in ``paths``; files that fail are logged and reported instead of aborting."""

    parser = parser or JavaSourceParser()
    methods: List[MethodRecord] = []
    errors: List[str] = []
    for path in paths:
        try:
            methods.extend(parser.parse_file(path))
        except AnalysisError as exc:
            LOGGER.warning("Failed to index %s: %s", path, exc)
            errors.append(str(exc))
    return methods, errors


__all__ = [
    "JAVA_SUFFIXES",
    "JavaCallExtractor",
    "JavaSourceParser",
    "collect_methods",
    "iter_source_files",
    "java_language",
    "node_location",
    "node_text",
]
