"""Heuristic analysis of Java source and javap output.

Nothing here parses Java properly. Declarations are found with regular
expressions over comment-free text, which is enough to list the members of a
class and to build cross-reference keys for its methods.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from jarlens.models import MethodInfo

# Types with little value as cross-reference keys
TRIVIAL_TYPES = frozenset(
    {
        "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
        "Boolean", "Byte", "Character", "Short", "Integer", "Long", "Float", "Double", "Void",
        "String",
    }
)

CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch", "synchronized", "try", "do"})

# Words that can precede a parenthesis without being a return type
_NON_TYPES = frozenset(
    {"return", "new", "throw", "else", "case", "yield", "assert", "goto", "record", "class", "enum"}
)

METHOD_MODIFIERS = frozenset(
    {
        "public", "protected", "private", "static", "final", "abstract",
        "synchronized", "native", "default", "strictfp",
    }
)

_ANNOTATIONS = r"(?:@[\w$.]+(?:\s*\((?:[^()]|\([^()]*\))*\))?\s+)*"
_TYPE = r"[\w$.]+(?:\s*<[^;{}()=]*>)?(?:\s*\[\s*\])*(?:\.\.\.)?"

_METHOD = re.compile(
    r"^[ \t]*" + _ANNOTATIONS
    + r"(?P<modifiers>(?:(?:" + "|".join(sorted(METHOD_MODIFIERS)) + r")\s+)*)"
    + r"(?P<type_params><[^;{}()=]*>\s+)?"
    + r"(?P<return_type>" + _TYPE + r")\s+"
    + r"(?P<name>[A-Za-z_$][\w$]*)\s*"
    + r"\((?P<params>(?:[^()]|\([^()]*\))*)\)\s*"
    + r"(?:throws\s+(?P<throws>[\w$.,\s]+?)\s*)?"
    + r"(?P<body>[{;])",
    re.MULTILINE,
)

_FIELD = re.compile(
    r"^[ \t]*" + _ANNOTATIONS
    + r"(?P<modifiers>(?:(?:public|protected|private|static|final|transient|volatile)\s+)+)"
    + r"(?P<type>" + _TYPE + r")\s+"
    + r"(?P<name>[A-Za-z_$][\w$]*)\s*"
    + r"(?:=\s*(?P<initializer>[^;]*))?;",
    re.MULTILINE,
)

_PACKAGE = re.compile(r"^\s*package\s+([\w$.]+)\s*;", re.MULTILINE)
_IMPORT = re.compile(r"^\s*import\s+(static\s+)?([\w$.]+(?:\.\*)?)\s*;", re.MULTILINE)
_KIND = re.compile(r"(?:^|[\s;}])(@interface|class|interface|enum|record)\s+[A-Za-z_$][\w$]*")
_PARAM_ANNOTATION = re.compile(r"@[\w$.]+(?:\s*\((?:[^()]|\([^()]*\))*\))?\s*")
_GENERIC_ARGS = re.compile(r"<[^<>]*>")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class SourceOutline:
    """Members and header information recovered from source text."""

    package: Optional[str] = None
    kind: str = "class"
    imports: list[str] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)


def _skip_literal(text: str, start: int) -> int:
    """Return the index just past the string, char or text-block literal at ``start``."""
    if text.startswith('"""', start):
        end = text.find('"""', start + 3)
        return len(text) if end == -1 else end + 3

    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote or ch == "\n":
            return i + 1
        i += 1
    return len(text)


def strip_comments(source: str) -> str:
    """Remove ``//`` and ``/* */`` comments, leaving string literals intact.

    Newlines inside block comments are kept so line-anchored patterns still
    see declarations at the start of a line.
    """
    out = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch in "\"'":
            end = _skip_literal(source, i)
            out.append(source[i:end])
            i = end
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end == -1 else end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(" " + "\n" * source.count("\n", i, end))
            i = end
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def find_block_end(text: str, open_index: int) -> int:
    """Return the index just past the ``}`` matching the ``{`` at ``open_index``."""
    depth = 0
    i = open_index
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            i = _skip_literal(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(text)


def split_parameters(params: str) -> list[str]:
    """Split a parameter list on commas that are not inside generic brackets."""
    parts = []
    depth = 0
    current = []
    for ch in params:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def parameter_type(parameter: str, named: bool = True) -> str:
    """Type portion of one declared parameter, e.g. ``List<Foo>`` of ``final List<Foo> foos``."""
    text = _PARAM_ANNOTATION.sub("", parameter)
    text = _WHITESPACE.sub(" ", text).strip()
    if text.startswith("final "):
        text = text[len("final "):]
    if not named:
        return text
    type_text, _, _ = text.rpartition(" ")
    return type_text.strip() or text


def simple_type_name(type_name: str) -> str:
    """Reduce a type to its bare simple name: no generics, arrays or package."""
    text = type_name
    while True:
        reduced = _GENERIC_ARGS.sub("", text)
        if reduced == text:
            break
        text = reduced
    text = text.replace("...", "").replace("[]", "").replace(" ", "")
    return text.rsplit(".", 1)[-1]


def normalize_definition(name: str, parameter_types: list[str]) -> str:
    """Build the cross-reference key of a method.

    Only parameter types other than primitives, their boxed forms and
    ``String`` are kept: ``place(OrderDto order, int qty)`` becomes
    ``place(OrderDto)``.
    """
    kept = []
    for type_name in parameter_types:
        simple = simple_type_name(type_name)
        if simple and simple not in TRIVIAL_TYPES:
            kept.append(simple)
    return f"{name}({','.join(kept)})"


def split_normalized_definition(definition: str) -> tuple[str, list[str]]:
    """Inverse of ``normalize_definition``: method name and kept parameter types."""
    name, paren, rest = definition.strip().partition("(")
    if not paren:
        return name.strip(), []
    inner = rest.rsplit(")", 1)[0]
    return name.strip(), [part.strip() for part in inner.split(",") if part.strip()]


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _scan_methods(text: str) -> list[tuple[MethodInfo, int, int]]:
    """Method declarations with the span of each declaration and body."""
    methods = []
    for match in _METHOD.finditer(text):
        name = match.group("name")
        return_type = _collapse(match.group("return_type"))
        if name in CONTROL_KEYWORDS or name in _NON_TYPES:
            continue
        if return_type in _NON_TYPES or return_type in METHOD_MODIFIERS:
            # constructors and statements such as "return foo(x);"
            continue

        params = split_parameters(match.group("params"))
        parameter_types = [parameter_type(p) for p in params]

        signature = _collapse(
            f"{match.group('modifiers')}{match.group('type_params') or ''}"
            f"{return_type} {name}({', '.join(_collapse(p) for p in params)})"
        )
        if match.group("throws"):
            signature += f" throws {_collapse(match.group('throws'))}"

        start = match.start("modifiers")
        end = find_block_end(text, match.start("body")) if match.group("body") == "{" else match.end()

        info = MethodInfo(
            signature=signature,
            normalized_definition=normalize_definition(name, parameter_types),
            parameters=parameter_types,
            return_type=return_type,
            raw_declaration=text[start:end].strip(),
        )
        methods.append((info, start, end))
    return methods


def extract_methods(text: str) -> list[MethodInfo]:
    """Find method declarations in comment-free source text."""
    return [info for info, _, _ in _scan_methods(text)]


def extract_fields(text: str, skip_spans: list[tuple[int, int]] | None = None) -> list[str]:
    """Find modifier-prefixed field declarations, returned without the semicolon.

    Matches starting inside ``skip_spans`` (method bodies) are local
    variables and are ignored.
    """
    fields = []
    for match in _FIELD.finditer(text):
        if skip_spans and any(start <= match.start() < end for start, end in skip_spans):
            continue
        declaration = f"{match.group('modifiers')}{match.group('type')} {match.group('name')}"
        if match.group("initializer") is not None:
            declaration += f" = {match.group('initializer').strip()}"
        fields.append(_collapse(declaration))
    return fields


def find_nested_type(text: str, path: Sequence[str]) -> Optional[tuple[str, str]]:
    """Locate a member type declaration, e.g. ``["Part"]`` inside ``Widget``.

    Each name in ``path`` is searched for inside the body found for the
    previous one. Returns the kind of the innermost type and its body
    including braces, or None if a name has no declaration (anonymous and
    local classes).
    """
    start, end = 0, len(text)
    kind = None
    for name in path:
        declaration = re.compile(
            r"(?:^|[\s;{}])(@interface|class|interface|enum|record)\s+" + re.escape(name) + r"\b"
        )
        match = declaration.search(text, start, end)
        if match is None:
            return None
        brace = text.find("{", match.end(), end)
        if brace == -1:
            return None
        kind = match.group(1)
        start, end = brace, find_block_end(text, brace)
    if kind is None:
        return None
    return kind, text[start:end]


def outline_source(source: str, nested: Sequence[str] = ()) -> SourceOutline:
    """Recover package, imports, kind, fields and methods from Java source.

    With ``nested`` (the names after ``$`` in a binary class name) members
    come from that member type only. Package and imports always come from
    the whole file.
    """
    text = strip_comments(source)
    package = _PACKAGE.search(text)
    kind_match = _KIND.search(text)
    kind = kind_match.group(1) if kind_match else "class"
    body = text
    if nested:
        found = find_nested_type(text, nested)
        if found is not None:
            kind, body = found
    scanned = _scan_methods(body)
    return SourceOutline(
        package=package.group(1) if package else None,
        kind=kind,
        imports=[f"{'static ' if m.group(1) else ''}{m.group(2)}" for m in _IMPORT.finditer(text)],
        fields=extract_fields(body, [(start, end) for _, start, end in scanned]),
        methods=[info for info, _, _ in scanned],
    )


def _javap_method(line: str) -> MethodInfo:
    signature = line.rstrip(";{ ").strip()
    head, _, rest = signature.partition("(")
    params = split_parameters(rest.rsplit(")", 1)[0])
    parameter_types = [parameter_type(p, named=False) for p in params]
    head_parts = head.split()
    name = head_parts[-1].rsplit(".", 1)[-1] if head_parts else ""
    return_type = head_parts[-2] if len(head_parts) >= 2 else None
    if return_type in METHOD_MODIFIERS:
        return_type = None
    return MethodInfo(
        signature=signature,
        normalized_definition=normalize_definition(name, parameter_types),
        parameters=parameter_types,
        return_type=return_type,
        raw_declaration=line,
    )


def outline_disassembly(output: str) -> SourceOutline:
    """Recover members from ``javap -p -s`` output.

    Lines with parentheses are methods, other semicolon-terminated lines are
    fields. ``descriptor:`` lines and static initializers are skipped.
    """
    outline = SourceOutline()
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("Compiled from", "descriptor:", "Package", "static {}", "}")):
            continue
        if stripped.endswith("{") and "(" not in stripped:
            header = " " + stripped
            kind = _KIND.search(header)
            if kind:
                outline.kind = kind.group(1)
                declared = header[kind.end(1):].split()[0]
                if "." in declared:
                    outline.package = declared.rsplit(".", 1)[0]
            continue
        if "(" in stripped and ")" in stripped:
            outline.methods.append(_javap_method(stripped))
        elif stripped.endswith(";"):
            outline.fields.append(stripped.rstrip(";"))
    return outline
