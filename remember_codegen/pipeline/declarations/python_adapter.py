"""
Python source declaration adapter.

Reads annotated classes from Python source files with the built-in ast
module. Nothing is imported or executed: markers from
``remember_codegen.markers`` are recognized by name, the way the
generated code will be compiled against the source as written.
"""

from __future__ import annotations

import ast
from pathlib import Path

from ..errors import DeclarationError
from .json_adapter import ParsedDeclarations
from .nodes import Marker, MarkerKind, ParamDecl, PropertyDecl, TypeDecl, TypeRef

# Marker class name -> marker kind
MARKER_NAMES = {
    "Value": MarkerKind.LITERAL_VALUE,
    "FrameworkInject": MarkerKind.FRAMEWORK_INJECT,
    "NamedInject": MarkerKind.NAMED_INJECT,
    "Provide": MarkerKind.CUSTOM_PROVIDE,
    "AmbientScope": MarkerKind.AMBIENT_SCOPE,
    "Key": MarkerKind.INVALIDATION_KEY,
    "Saveable": MarkerKind.PERSISTED_KEY,
}

# Markers whose first argument is the payload rather than a forwarded argument
PAYLOAD_MARKERS = {MarkerKind.LITERAL_VALUE, MarkerKind.CUSTOM_PROVIDE, MarkerKind.PERSISTED_KEY}

REMEMBER_DECORATOR = "remember"
REMEMBER_SAVEABLE_DECORATOR = "remember_saveable"


def module_name_for(path: Path) -> str:
    """Derive a dotted module name by walking up through package directories."""
    path = path.resolve()
    parts = [] if path.stem == "__init__" else [path.stem]
    parent = path.parent
    while (parent / "__init__.py").exists():
        parts.insert(0, parent.name)
        parent = parent.parent
    return ".".join(parts)


def _terminal_name(node: ast.expr) -> str | None:
    """Return the last identifier of a Name or dotted Attribute."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _string_or_source(node: ast.expr) -> str:
    """A string constant is taken verbatim, anything else as its source text."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return ast.unparse(node)


class PythonSourceAdapter:
    """Reads @remember / @remember_saveable classes from Python source."""

    def parse_file(self, path: Path, module_name: str | None = None) -> ParsedDeclarations:
        """
        Read a Python source file.

        Args:
            path: Path to the .py file
            module_name: Dotted module name; derived from the path if omitted

        Returns:
            The parsed declarations and per-class errors
        """
        with open(path, encoding="utf-8") as f:
            code = f.read()
        return self.parse(code, module_name or module_name_for(path), source=str(path))

    def parse(self, code: str, module_name: str, source: str = "<memory>") -> ParsedDeclarations:
        """
        Parse Python source code.

        Args:
            code: Python source code string
            module_name: Dotted name of the module the code belongs to
            source: Where the code came from

        Returns:
            The parsed declarations and per-class errors
        """
        result = ParsedDeclarations()

        try:
            tree = ast.parse(code)
        except SyntaxError as e:
            result.errors.append(DeclarationError(module_name or source, f"cannot parse source: {e}"))
            return result

        self._module = module_name
        self._imports = self._collect_imports(tree)
        self._local_names = {node.name for node in tree.body if isinstance(node, ast.ClassDef)}

        for node in tree.body:
            if not isinstance(node, ast.ClassDef):
                continue
            class_markers = self._find_class_marker(node)
            if class_markers is None:
                continue
            try:
                result.declarations.append(self._parse_class(node, class_markers, source))
            except DeclarationError as e:
                e.source = e.source or source
                result.errors.append(e)

        return result

    def _collect_imports(self, tree: ast.Module) -> dict[str, str]:
        """Map each imported local name to the module (or qualified path) it refers to."""
        imports: dict[str, str] = {}
        for node in tree.body:
            if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
                for alias in node.names:
                    imports[alias.asname or alias.name] = f"{node.module}.{alias.name}"
            elif isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        imports[alias.asname] = alias.name
                    else:
                        root = alias.name.split(".")[0]
                        imports[root] = root
        return imports

    def _find_class_marker(self, node: ast.ClassDef) -> dict | None:
        """Return the class-level marker arguments, or None if the class is not annotated."""
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            name = _terminal_name(target)
            if name not in (REMEMBER_DECORATOR, REMEMBER_SAVEABLE_DECORATOR):
                continue

            markers = {"persistence": name == REMEMBER_SAVEABLE_DECORATOR}
            if isinstance(decorator, ast.Call):
                for keyword in decorator.keywords:
                    if keyword.arg in ("injector", "injection_mode"):
                        markers[keyword.arg] = _string_or_source(keyword.value)
            return markers
        return None

    def _is_dataclass(self, node: ast.ClassDef) -> bool:
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if _terminal_name(target) == "dataclass":
                return True
        return False

    def _parse_class(self, node: ast.ClassDef, class_markers: dict, source: str) -> TypeDecl:
        decl = TypeDecl(
            name=node.name,
            namespace=self._module,
            persistence=class_markers["persistence"],
            injector=class_markers.get("injector") or None,
            injection_mode=class_markers.get("injection_mode"),
            source=source,
        )
        self._class_name = decl.qualified_name

        init = next(
            (item for item in node.body if isinstance(item, ast.FunctionDef) and item.name == "__init__"),
            None,
        )
        if init is not None:
            decl.params = self._params_from_init(init)
        elif self._is_dataclass(node):
            decl.params = self._params_from_fields(node)

        decl.properties = self._collect_properties(node)
        return decl

    def _params_from_init(self, init: ast.FunctionDef) -> list[ParamDecl]:
        args = init.args
        if args.vararg or args.kwarg:
            raise DeclarationError(self._class_name, "__init__ must not take *args or **kwargs")

        positional = args.posonlyargs + args.args
        params = []
        for arg in positional[1:] + args.kwonlyargs:
            if arg.annotation is None:
                raise DeclarationError(self._class_name, "parameter needs a type annotation", arg.arg)
            type_ref, markers = self._parse_annotation(arg.annotation, arg.arg)
            params.append(ParamDecl(name=arg.arg, type_ref=type_ref, markers=markers))
        return params

    def _params_from_fields(self, node: ast.ClassDef) -> list[ParamDecl]:
        params = []
        for item in node.body:
            if not isinstance(item, ast.AnnAssign) or not isinstance(item.target, ast.Name):
                continue
            if self._is_class_var(item.annotation) or self._is_init_false(item.value):
                continue
            type_ref, markers = self._parse_annotation(item.annotation, item.target.id)
            params.append(ParamDecl(name=item.target.id, type_ref=type_ref, markers=markers))
        return params

    def _collect_properties(self, node: ast.ClassDef) -> list[PropertyDecl]:
        """Collect class attributes and property methods that carry markers."""
        properties = []
        for item in node.body:
            if isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
                type_ref, markers = self._parse_annotation(item.annotation, item.target.id)
                if markers:
                    properties.append(PropertyDecl(name=item.target.id, type_ref=type_ref, markers=markers))

            elif isinstance(item, ast.FunctionDef):
                markers = [
                    marker
                    for decorator in item.decorator_list
                    if (marker := self._parse_marker(decorator, item.name)) is not None
                ]
                if markers:
                    type_ref = None
                    if item.returns is not None:
                        type_ref, _ = self._parse_annotation(item.returns, item.name)
                    properties.append(PropertyDecl(name=item.name, type_ref=type_ref, markers=markers))
        return properties

    def _is_class_var(self, annotation: ast.expr) -> bool:
        target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
        return _terminal_name(target) == "ClassVar"

    def _is_init_false(self, value: ast.expr | None) -> bool:
        if not isinstance(value, ast.Call) or _terminal_name(value.func) != "field":
            return False
        return any(
            keyword.arg == "init" and isinstance(keyword.value, ast.Constant) and keyword.value.value is False
            for keyword in value.keywords
        )

    def _parse_annotation(self, annotation: ast.expr, member: str) -> tuple[TypeRef, list[Marker]]:
        """Split an annotation into its type and the markers in Annotated metadata."""
        if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
            try:
                annotation = ast.parse(annotation.value, mode="eval").body
            except SyntaxError as e:
                raise DeclarationError(self._class_name, f"cannot parse annotation: {e}", member) from e

        if (
            isinstance(annotation, ast.Subscript)
            and _terminal_name(annotation.value) == "Annotated"
            and isinstance(annotation.slice, ast.Tuple)
        ):
            base, *metadata = annotation.slice.elts
            markers = [marker for item in metadata if (marker := self._parse_marker(item, member)) is not None]
            return self._parse_type(base, member), markers

        return self._parse_type(annotation, member), []

    def _parse_marker(self, node: ast.expr, member: str) -> Marker | None:
        """Turn a marker call such as Provide("load_user") into a Marker."""
        if not isinstance(node, ast.Call):
            return None
        kind = MARKER_NAMES.get(_terminal_name(node.func))
        if kind is None:
            return None

        args = [_string_or_source(arg) for arg in node.args]
        value = None
        if kind in PAYLOAD_MARKERS:
            if not args:
                # An empty payload is reported by the validator with the right error kind
                args = [""]
            value, *args = args
        return Marker(kind=kind, value=value, args=tuple(args))

    def _parse_type(self, node: ast.expr, member: str) -> TypeRef:
        """Translate a type expression into a TypeRef."""
        if isinstance(node, ast.Constant):
            if node.value is None:
                return TypeRef(name="None")
            if isinstance(node.value, str):
                return self._parse_annotation(node, member)[0]

        if isinstance(node, ast.Name):
            return self._named_type(node.id)

        if isinstance(node, ast.Attribute):
            base = ast.unparse(node.value)
            head, _, rest = base.partition(".")
            resolved = self._imports.get(head, head)
            return TypeRef(name=node.attr, module=f"{resolved}.{rest}" if rest else resolved)

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._union(self._flatten_union(node), member)

        if isinstance(node, ast.Subscript):
            outer = self._parse_type(node.value, member)
            elements = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
            type_args = [self._parse_type(element, member) for element in elements]
            if outer.name == "Optional":
                return TypeRef(
                    name=type_args[0].name,
                    module=type_args[0].module,
                    type_args=type_args[0].type_args,
                    nullable=True,
                )
            if outer.name == "Union":
                return self._union(elements, member)
            return TypeRef(name=outer.name, module=outer.module, type_args=tuple(type_args))

        raise DeclarationError(self._class_name, f"unsupported annotation '{ast.unparse(node)}'", member)

    def _flatten_union(self, node: ast.expr) -> list[ast.expr]:
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._flatten_union(node.left) + self._flatten_union(node.right)
        return [node]

    def _union(self, members: list[ast.expr], member: str) -> TypeRef:
        types = [self._parse_type(m, member) for m in members]
        non_null = [t for t in types if t.name != "None"]
        nullable = len(non_null) != len(types)
        if len(non_null) == 1:
            single = non_null[0]
            return TypeRef(name=single.name, module=single.module, type_args=single.type_args, nullable=nullable)
        return TypeRef(name="Union", module="typing", type_args=tuple(non_null), nullable=nullable)

    def _named_type(self, name: str) -> TypeRef:
        """Resolve a bare name through the module's classes and imports (builtins stay unqualified)."""
        if name in self._local_names:
            return TypeRef(name=name, module=self._module)
        qualified = self._imports.get(name)
        if qualified is None:
            return TypeRef(name=name)
        module, _, original = qualified.rpartition(".")
        return TypeRef(name=original, module=module or None)
