"""
Kotlin code generation backend.

Generates Jetpack Compose remember functions and mapSaver-based savers.
"""

from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Any

from ..analyzer.model import ClassModel, DefaultKind, ParamSpec, ResolvedDefault
from ..analyzer.resolver import Call
from ..declarations.nodes import TypeRef
from .base import CodeBackend

COMPOSABLE = ("androidx.compose.runtime", "Composable")
REMEMBER = ("androidx.compose.runtime", "remember")
REMEMBER_COROUTINE_SCOPE = ("androidx.compose.runtime", "rememberCoroutineScope")
REMEMBER_SAVEABLE = ("androidx.compose.runtime.saveable", "rememberSaveable")
SAVER = ("androidx.compose.runtime.saveable", "Saver")
MAP_SAVER = ("androidx.compose.runtime.saveable", "mapSaver")
KOIN_INJECT = ("org.koin.compose", "koinInject")
PARAMETERS_OF = ("org.koin.core.parameter", "parametersOf")

# Packages Kotlin imports by default
DEFAULT_IMPORTED_PACKAGES = {
    "kotlin",
    "kotlin.annotation",
    "kotlin.collections",
    "kotlin.comparisons",
    "kotlin.io",
    "kotlin.jvm",
    "kotlin.ranges",
    "kotlin.sequences",
    "kotlin.text",
    "java.lang",
}


class KotlinBackend(CodeBackend):
    """Kotlin (Jetpack Compose) code generation backend."""

    TEMPLATE_LANG = "kotlin"
    FILE_EXTENSION = "kt"

    def factory_function_name(self, model: ClassModel) -> str:
        return f"remember{model.simple_name}"

    def persistence_function_name(self, model: ClassModel) -> str:
        return f"rememberSaveable{model.simple_name}"

    def saver_function_name(self, model: ClassModel) -> str:
        return f"get{model.simple_name}Saver"

    def factory_file_name(self, model: ClassModel) -> str:
        return f"Remember{model.simple_name}.kt"

    def persistence_file_name(self, model: ClassModel) -> str:
        return f"RememberSaveable{model.simple_name}.kt"

    def output_directory(self, model: ClassModel) -> PurePosixPath:
        return PurePosixPath(*model.namespace.split(".")) if model.namespace else PurePosixPath()

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate a type reference to Kotlin syntax (List<String>?)."""
        result = type_ref.name
        if type_ref.type_args:
            result += "<" + ", ".join(self.translate_type(arg) for arg in type_ref.type_args) + ">"
        if type_ref.nullable:
            result += "?"
        return result

    def string_literal(self, value: str) -> str:
        # JSON escapes are valid Kotlin escapes; only string templates need extra care
        return json.dumps(value).replace("$", "\\$")

    def type_imports(self, type_ref: TypeRef, model: ClassModel) -> set[tuple[str, str]]:
        imports: set[tuple[str, str]] = set()
        if type_ref.module and type_ref.module != model.namespace and type_ref.module not in DEFAULT_IMPORTED_PACKAGES:
            imports.add((type_ref.module, type_ref.name))
        for arg in type_ref.type_args:
            imports |= self.type_imports(arg, model)
        return imports

    def framework_inject_call(self, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        if not args:
            return "koinInject()", (KOIN_INJECT,)
        return f"koinInject {{ parametersOf({', '.join(args)}) }}", (KOIN_INJECT, PARAMETERS_OF)

    def named_inject_call(self, injector: str, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        module, name = self._split_callable(injector)
        imports = ((module, name),) if module and module != model.namespace else ()
        return f"{name}<{self.translate_type(param.declared_type)}>({', '.join(args)})", imports

    def provider_call(self, provider: str, args: tuple[str, ...], model: ClassModel) -> Call:
        module, name = self._split_callable(provider)
        imports = ((module, name),) if module and module != model.namespace else ()
        return f"{name}({', '.join(args)})", imports

    def ambient_scope_call(self, model: ClassModel) -> Call:
        return "rememberCoroutineScope()", (REMEMBER_COROUTINE_SCOPE,)

    def _base_imports(self, model: ClassModel, persistence: bool) -> set[tuple[str, str]]:
        if persistence:
            return {COMPOSABLE, REMEMBER_SAVEABLE, SAVER, MAP_SAVER}
        return {COMPOSABLE, REMEMBER}

    def _format_imports(self, imports: set[tuple[str, str]], model: ClassModel) -> list[str]:
        return sorted(f"{module}.{name}" for module, name in imports)

    def _param_context(self, param: ParamSpec, default: ResolvedDefault) -> dict[str, Any]:
        suffix = "" if default.kind is DefaultKind.NONE else f" = {default.expression}"
        return {
            "name": param.name,
            "type": self.translate_type(param.declared_type),
            "default_suffix": suffix,
        }

    def _restore_arg(self, param: ParamSpec, saved: str) -> dict[str, Any]:
        if param.saveable_key is None:
            return {"name": param.name, "value": param.name}
        key = self.string_literal(param.saveable_key)
        return {"name": param.name, "value": f"{saved}[{key}] as {self.translate_type(param.declared_type)}"}

    def _common_context(self, model: ClassModel, header: str, footer: str) -> dict[str, Any]:
        context = super()._common_context(model, header, footer)
        visibility = self.config.kotlin_visibility.strip()
        context["visibility"] = f"{visibility} " if visibility else ""
        return context
