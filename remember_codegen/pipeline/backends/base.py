"""
Base class for code generation backends.

Defines the interface that all host-language backends must implement and
the template context shared by the factory and persistence emitters.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

import jinja2

from ..analyzer.model import NO_DEFAULT, ClassModel, DefaultKind, ParamSpec, ResolvedDefault
from ..analyzer.resolver import Call, DefaultStrategyResolver
from ..config import CodeGeneratorConfig
from ..declarations.nodes import TypeRef

# A plain, possibly dotted function name (no generics, no call syntax)
_DOTTED_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*")


@dataclass(frozen=True)
class GeneratedUnit:
    """One generated source file.

    Attributes:
        class_name: Qualified name of the class it was generated for
        namespace: Namespace the unit belongs to
        directory: Output directory relative to the output root
        file_name: File name including extension
        content: Generated source text
        language: Backend language ("kotlin" or "python")
    """

    class_name: str
    namespace: str
    directory: PurePosixPath
    file_name: str
    content: str
    language: str

    @property
    def relative_path(self) -> PurePosixPath:
        return self.directory / self.file_name


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Lambda arguments of the saver's save and restore functions
    SAVE_ARG: str = "state"
    RESTORE_ARG: str = "saved"

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.resolver = DefaultStrategyResolver(self)
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            undefined=jinja2.StrictUndefined,
        )
        self.jinja_env.filters["string_literal"] = self.string_literal

        self.factory_template = self.jinja_env.get_template(f"remember.{self.FILE_EXTENSION}.jinja2")
        self.persistence_template = self.jinja_env.get_template(f"remember_saveable.{self.FILE_EXTENSION}.jinja2")

    # Naming

    @abstractmethod
    def factory_function_name(self, model: ClassModel) -> str:
        """Name of the memoized construction function."""

    @abstractmethod
    def persistence_function_name(self, model: ClassModel) -> str:
        """Name of the persistence-aware construction function."""

    @abstractmethod
    def saver_function_name(self, model: ClassModel) -> str:
        """Name of the saver factory function."""

    @abstractmethod
    def factory_file_name(self, model: ClassModel) -> str:
        """File name of the factory unit."""

    @abstractmethod
    def persistence_file_name(self, model: ClassModel) -> str:
        """File name of the persistence unit."""

    @abstractmethod
    def output_directory(self, model: ClassModel) -> PurePosixPath:
        """Directory of the model's namespace, relative to the output root."""

    # Types and literals

    @abstractmethod
    def translate_type(self, type_ref: TypeRef) -> str:
        """
        Translate a type reference to a host-language type string.

        Args:
            type_ref: The type reference

        Returns:
            Host-language type string
        """

    @abstractmethod
    def string_literal(self, value: str) -> str:
        """Quote a string as a host-language string literal."""

    @abstractmethod
    def type_imports(self, type_ref: TypeRef, model: ClassModel) -> set[tuple[str, str]]:
        """(module, name) imports needed to mention a type in a unit of the model's namespace."""

    # Expression syntax used by the resolver

    @abstractmethod
    def framework_inject_call(self, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        """Call into the injection framework."""

    @abstractmethod
    def named_inject_call(self, injector: str, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call:
        """Call of the class-level injector with the parameter type."""

    @abstractmethod
    def provider_call(self, provider: str, args: tuple[str, ...], model: ClassModel) -> Call:
        """Call of a provider function."""

    @abstractmethod
    def ambient_scope_call(self, model: ClassModel) -> Call:
        """Call of the ambient scope accessor."""

    # Rendering

    @abstractmethod
    def _format_imports(self, imports: set[tuple[str, str]], model: ClassModel) -> list[str]:
        """Render import lines for a unit."""

    @abstractmethod
    def _param_context(self, param: ParamSpec, default: ResolvedDefault) -> dict[str, Any]:
        """Template context of one parameter of a construction function."""

    def render_factory(self, model: ClassModel, header: str = "", footer: str = "") -> GeneratedUnit:
        """
        Render the memoized construction function of a class.

        Args:
            model: The validated class model
            header: Comment placed at the top of the file
            footer: Comment placed at the end of the file

        Returns:
            The generated unit
        """
        defaults = self.resolver.resolve_all(model)
        imports = self._base_imports(model, persistence=False)
        imports |= self._param_imports(model, defaults)

        context = self._common_context(model, header, footer)
        context.update(
            {
                "function_name": self.factory_function_name(model),
                "params": [self._param_context(p, d) for p, d in zip(model.params, defaults)],
                "imports": self._format_imports(imports, model),
            }
        )
        return self._unit(model, self.factory_file_name(model), self.factory_template.render(context))

    def render_persistence(self, model: ClassModel, header: str = "", footer: str = "") -> GeneratedUnit:
        """
        Render the saver and the persistence-aware construction function.

        Saveable parameters are supplied by the caller or by the restored
        map, so they never get a default in the persistence-aware function.

        Args:
            model: The validated class model (persistence mode)
            header: Comment placed at the top of the file
            footer: Comment placed at the end of the file

        Returns:
            The generated unit
        """
        defaults = [
            default if param.saveable_key is None else NO_DEFAULT
            for param, default in zip(model.params, self.resolver.resolve_all(model))
        ]
        save_arg = self._fresh_name(self.SAVE_ARG, model)
        restore_arg = self._fresh_name(self.RESTORE_ARG, model)
        imports = self._base_imports(model, persistence=True)
        imports |= self._param_imports(model, defaults)

        context = self._common_context(model, header, footer)
        context.update(
            {
                "function_name": self.persistence_function_name(model),
                "saver_function_name": self.saver_function_name(model),
                "params": [self._param_context(p, d) for p, d in zip(model.params, defaults)],
                "saver_params": [
                    {"name": param.name, "type": self.translate_type(param.declared_type)}
                    for param in model.saver_params
                ],
                "save_entries": [
                    {"key": prop.saveable_key, "property": prop.name} for prop in model.saveable_properties
                ],
                "save_arg": save_arg,
                "restore_arg": restore_arg,
                "restore_args": [self._restore_arg(param, restore_arg) for param in model.params],
                "imports": self._format_imports(imports, model),
            }
        )
        return self._unit(model, self.persistence_file_name(model), self.persistence_template.render(context))

    @abstractmethod
    def _base_imports(self, model: ClassModel, persistence: bool) -> set[tuple[str, str]]:
        """Imports every unit of the given kind needs."""

    @abstractmethod
    def _restore_arg(self, param: ParamSpec, saved: str) -> dict[str, Any]:
        """Template context of one constructor argument in restore, reading from the map named saved."""

    @staticmethod
    def _fresh_name(base: str, model: ClassModel) -> str:
        """A local name that no constructor parameter uses."""
        taken = {param.name for param in model.params}
        name = base
        while name in taken:
            name += "_"
        return name

    def _common_context(self, model: ClassModel, header: str, footer: str) -> dict[str, Any]:
        return {
            "header": header,
            "footer": footer,
            "namespace": model.namespace,
            "class_name": model.simple_name,
            "keys": model.invalidation_keys,
        }

    def _param_imports(self, model: ClassModel, defaults: list[ResolvedDefault]) -> set[tuple[str, str]]:
        imports: set[tuple[str, str]] = set()
        for param, default in zip(model.params, defaults):
            imports |= self.type_imports(param.declared_type, model)
            if default.kind is DefaultKind.CALL:
                imports.update(default.imports)
        return imports

    def _unit(self, model: ClassModel, file_name: str, content: str) -> GeneratedUnit:
        return GeneratedUnit(
            class_name=model.qualified_name,
            namespace=model.namespace,
            directory=self.output_directory(model),
            file_name=file_name,
            content=content.rstrip("\n") + "\n",
            language=self.TEMPLATE_LANG,
        )

    def _get_comment_prefix(self) -> str:
        """Get the comment prefix for the language."""
        return "#" if self.FILE_EXTENSION == "py" else "//"

    def comment(self, text: str) -> str:
        """Render a single-line comment."""
        return f"{self._get_comment_prefix()} {text}"

    @staticmethod
    def _split_callable(name: str) -> tuple[str | None, str]:
        """Split a dotted function name into (module, simple name); anything else is kept verbatim."""
        if _DOTTED_NAME.fullmatch(name) and "." in name:
            module, _, simple = name.rpartition(".")
            return module, simple
        return None, name

    @staticmethod
    def _pascal_to_snake(text: str) -> str:
        """Convert PascalCase to snake_case."""
        return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", text).lower()
