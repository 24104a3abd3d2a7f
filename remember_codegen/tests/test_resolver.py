import pytest

from remember_codegen.pipeline.analyzer import (
    NO_DEFAULT,
    AmbientScope,
    ClassModel,
    CustomProvide,
    DefaultKind,
    DefaultStrategyResolver,
    FrameworkInject,
    LiteralValue,
    NamedInject,
    NoDefault,
    ParamSpec,
)
from remember_codegen.pipeline.backends import KotlinBackend, PythonBackend
from remember_codegen.pipeline.config import CodeGeneratorConfig, InjectionMode
from remember_codegen.pipeline.declarations import TypeRef
from remember_codegen.pipeline.errors import MissingProviderName, UnresolvableDefault

USER = TypeRef(name="User", module="com.example.user")

FRAMEWORK = InjectionMode.FRAMEWORK_CALL
NONE = InjectionMode.NONE


def resolve(backend_class, policy, injector=None, injection_mode=NONE, type_ref=USER):
    param = ParamSpec(name="user", declared_type=type_ref, default_policy=policy)
    model = ClassModel(
        qualified_name="com.example.Widget",
        namespace="com.example",
        simple_name="Widget",
        params=(param,),
        injector_name=injector,
        injection_mode=injection_mode,
    )
    return DefaultStrategyResolver(backend_class(CodeGeneratorConfig())).resolve(param, model)


# (policy, injector, injection mode, expected Kotlin expression)
KOTLIN_CASES = [
    (LiteralValue(expression="10"), None, NONE, "10"),
    (FrameworkInject(), None, FRAMEWORK, "koinInject()"),
    (FrameworkInject(args=("id", "name")), None, FRAMEWORK, "koinInject { parametersOf(id, name) }"),
    (NamedInject(), "injectClass", NONE, "injectClass<User>()"),
    (NamedInject(args=("id",)), "injectClass", FRAMEWORK, "injectClass<User>(id)"),
    (NamedInject(), None, FRAMEWORK, "koinInject()"),
    (CustomProvide(provider_name="injectClass"), None, NONE, "injectClass()"),
    (CustomProvide(provider_name="com.example.di.loadUser", args=("id",)), None, NONE, "loadUser(id)"),
    (AmbientScope(), None, NONE, "rememberCoroutineScope()"),
]


class TestDefaultStrategyResolver:
    """Test cases for mapping default policies to expressions"""

    def test_no_default(self):
        assert resolve(KotlinBackend, NoDefault()) is NO_DEFAULT
        assert NO_DEFAULT.is_required

    @pytest.mark.parametrize("policy, injector, mode, expected", KOTLIN_CASES)
    def test_kotlin_expressions(self, policy, injector, mode, expected):
        default = resolve(KotlinBackend, policy, injector, mode)
        assert default.expression == expected
        assert not default.is_required

    def test_literal_is_not_a_call(self):
        assert resolve(KotlinBackend, LiteralValue(expression="10")).kind is DefaultKind.LITERAL
        assert resolve(KotlinBackend, CustomProvide(provider_name="make")).kind is DefaultKind.CALL

    def test_call_imports(self):
        default = resolve(KotlinBackend, CustomProvide(provider_name="com.example.di.loadUser"))
        assert default.imports == (("com.example.di", "loadUser"),)

        default = resolve(KotlinBackend, FrameworkInject(args=("id",)), injection_mode=FRAMEWORK)
        assert ("org.koin.compose", "koinInject") in default.imports
        assert ("org.koin.core.parameter", "parametersOf") in default.imports

    def test_python_expressions(self):
        assert resolve(PythonBackend, FrameworkInject(args=("7",)), injection_mode=FRAMEWORK).expression == "_inject(User, 7)"
        assert resolve(PythonBackend, NamedInject(), injector="app.di.inject_class").expression == "_inject_class(User)"
        assert resolve(PythonBackend, AmbientScope()).expression == "_remember_coroutine_scope()"

        default = resolve(PythonBackend, CustomProvide(provider_name="load_user"))
        assert default.expression == "_load_user()"
        # Undotted providers live next to the class
        assert default.imports == (("com.example", "load_user as _load_user"),)

    def test_framework_inject_disabled(self):
        with pytest.raises(UnresolvableDefault):
            resolve(KotlinBackend, FrameworkInject())

    def test_named_inject_unresolvable(self):
        with pytest.raises(UnresolvableDefault):
            resolve(KotlinBackend, NamedInject())

    def test_blank_provider(self):
        with pytest.raises(MissingProviderName):
            resolve(KotlinBackend, CustomProvide(provider_name=" "))

    def test_resolve_all_keeps_order(self):
        params = (
            ParamSpec(name="a", declared_type=USER, default_policy=LiteralValue(expression="1")),
            ParamSpec(name="b", declared_type=USER),
            ParamSpec(name="c", declared_type=USER, default_policy=CustomProvide(provider_name="make")),
        )
        model = ClassModel(qualified_name="p.W", namespace="p", simple_name="W", params=params)
        defaults = DefaultStrategyResolver(KotlinBackend(CodeGeneratorConfig())).resolve_all(model)
        assert [d.expression for d in defaults] == ["1", "", "make()"]


if __name__ == "__main__":
    pytest.main([__file__])
