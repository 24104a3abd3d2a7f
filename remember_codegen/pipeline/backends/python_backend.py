"""
Python code generation backend.

Generates keyword-only remember functions and map-based savers that call
into a configurable runtime module.
"""

from __future__ import annotations

import ast
import collections
import json
import sys
from pathlib import PurePosixPath
from typing import Any

from ..analyzer.model import ClassModel, DefaultKind, ParamSpec, ResolvedDefault
from ..analyzer.resolver import Call
from ..declarations.nodes import TypeRef
from .base import CodeBackend


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"
    SAVE_ARG = "_state"
    RESTORE_ARG = "_saved"

    def factory_function_name(self, model: ClassModel) -> str:
        return f"remember_{self._pascal_to_snake(model.simple_name)}"

    def persistence_function_name(self, model: ClassModel) -> str:
        return f"remember_saveable_{self._pascal_to_snake(model.simple_name)}"

    def saver_function_name(self, model: ClassModel) -> str:
        return f"get_{self._pascal_to_snake(model.simple_name)}_saver"

    def factory_file_name(self, model: ClassModel) -> str:
        return f"remember_{self._file_stem(model)}.py"

    def persistence_file_name(self, model: ClassModel) -> str:
        return f"remember_saveable_{self._file_stem(model)}.py"

    def _file_stem(self, model: ClassModel) -> str:
        # Sibling modules may declare classes with the same name
        module = model.namespace.rpartition(".")[2]
        snake = self._pascal_to_snake(model.simple_name)
        return f"{module}_{snake}" if module else snake

    def output_directory(self, model: ClassModel) -> PurePosixPath:
        # Units live next to the module declaring the class
        package, _, _ = model.namespace.rpartition(".")
        return PurePosixPath(*package.split(".")) if package else PurePosixPath()

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate a type reference to Python syntax (list[str] | None)."""
        if type_ref.name == "Union" and type_ref.type_args:
            result = " | ".join(self.translate_type(arg) for arg in type_ref.type_args)
        else:
            result = type_ref.name
            if type_ref.type_args:
                result += "[" + ", ".join(self.translate_type(arg) for arg in type_ref.type_args) + "]"

        if type_ref.nullable and not result.endswith(" | None"):
            result = f"{result} | None"

        return result

    def string_literal(self, value: str) -> str:
        return json.dumps(value)

    def type_imports(self, type_ref: TypeRef, model: ClassModel) -> set[tuple[str, str]]:
        imports: set[tuple[str, str]] = set()
        if type_ref.module and type_ref.module != "builtins" and not (type_ref.name == "Union" and type_ref.type_args):
            imports.add((type_ref.module, type_ref.name))
        for arg in type_ref.type_args:
            imports |= self.type_imports(arg, model)
        return imports

    def framework_inject_call(self, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        call_args = ", ".join((self.translate_type(param.declared_type), *args))
        name, imported = self._private(self.config.python_injection_module, "inject")
        return f"{name}({call_args})", (imported,)

    def named_inject_call(self, injector: str, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        call_args = ", ".join((self.translate_type(param.declared_type), *args))
        return self._local_call(injector, call_args, model)

    def provider_call(self, provider: str, args: tuple[str, ...], model: ClassModel) -> Call:
        return self._local_call(provider, ", ".join(args), model)

    def ambient_scope_call(self, model: ClassModel) -> Call:
        name, imported = self._private(self.config.python_runtime_module, "remember_coroutine_scope")
        return f"{name}()", (imported,)

    def _local_call(self, function: str, call_args: str, model: ClassModel) -> Call:
        """Call a function given by dotted path, or declared next to the class."""
        module, name = self._split_callable(function)
        if module is None and name.isidentifier() and model.namespace:
            module = model.namespace
        if module is None:
            return f"{name}({call_args})", ()
        alias, imported = self._private(module, name)
        return f"{alias}({call_args})", (imported,)

    @staticmethod
    def _private(module: str, name: str) -> tuple[str, tuple[str, str]]:
        """Import a callable under a private alias, so no parameter can shadow it."""
        alias = f"_{name}"
        return alias, (module, f"{name} as {alias}")

    def _base_imports(self, model: ClassModel, persistence: bool) -> set[tuple[str, str]]:
        runtime = self.config.python_runtime_module
        imports: set[tuple[str, str]] = set()
        if model.namespace:
            imports.add((model.namespace, model.simple_name))
        if persistence:
            imports |= {(runtime, "Saver"), ("typing", "Any")}
            imports.add(self._private(runtime, "remember_saveable")[1])
            imports.add(self._private(runtime, "map_saver")[1])
            if model.saved_params:
                imports.add(self._private("typing", "cast")[1])
        else:
            imports.add(self._private(runtime, "remember")[1])
        return imports

    def _is_stdlib(self, module: str) -> bool:
        return module.split(".")[0] in sys.stdlib_module_names

    def _format_imports(self, imports: set[tuple[str, str]], model: ClassModel) -> list[str]:
        """Group imports by module: standard library first, then everything else."""
        groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in imports:
            groups[module].add(name)

        stdlib = sorted(module for module in groups if self._is_stdlib(module))
        others = sorted(module for module in groups if not self._is_stdlib(module))

        lines = [f"from {module} import {', '.join(sorted(groups[module]))}" for module in stdlib]
        if stdlib and others:
            lines.append("")
        lines += [f"from {module} import {', '.join(sorted(groups[module]))}" for module in others]
        return lines

    def _param_context(self, param: ParamSpec, default: ResolvedDefault) -> dict[str, Any]:
        type_str = self.translate_type(param.declared_type)
        context = {"name": param.name, "type": type_str, "default_suffix": "", "deferred": None}

        if default.kind is DefaultKind.LITERAL and _is_shared_safe(default.expression):
            context["default_suffix"] = f" = {default.expression}"
        elif default.kind is not DefaultKind.NONE:
            # Evaluated per call, not once when the function is defined
            if not type_str.endswith(" | None"):
                context["type"] = f"{type_str} | None"
            context["default_suffix"] = " = None"
            context["deferred"] = default.expression
        return context

    def _restore_arg(self, param: ParamSpec, saved: str) -> dict[str, Any]:
        if param.saveable_key is None:
            return {"name": param.name, "value": param.name}
        type_str = self.string_literal(self.translate_type(param.declared_type))
        key = self.string_literal(param.saveable_key)
        return {"name": param.name, "value": f"_cast({type_str}, {saved}[{key}])"}


def _is_shared_safe(expression: str) -> bool:
    """Whether a literal default can be evaluated once, when the function is defined."""
    try:
        node = ast.parse(expression, mode="eval").body
    except SyntaxError:
        return False
    return _is_immutable(node)


def _is_immutable(node: ast.expr) -> bool:
    if isinstance(node, ast.UnaryOp):
        return _is_immutable(node.operand)
    if isinstance(node, ast.Tuple):
        return all(_is_immutable(element) for element in node.elts)
    return isinstance(node, (ast.Constant, ast.Name, ast.Attribute))
