import pytest

from remember_codegen.pipeline.declarations import TypeParseError, TypeRef, parse_type


class TestTypeParser:
    """Test cases for generic type notation parsing"""

    def test_simple_name(self):
        assert parse_type("Int") == TypeRef(name="Int")

    def test_qualified_name(self):
        type_ref = parse_type("com.example.user.User")
        assert type_ref.name == "User"
        assert type_ref.module == "com.example.user"
        assert type_ref.qualified_name == "com.example.user.User"

    def test_nullable(self):
        assert parse_type("String?") == TypeRef(name="String", nullable=True)

    def test_nested_generics(self):
        type_ref = parse_type("kotlin.collections.Map<String, List<app.model.User?>>?")
        assert type_ref.name == "Map"
        assert type_ref.module == "kotlin.collections"
        assert type_ref.nullable
        key, value = type_ref.type_args
        assert key == TypeRef(name="String")
        assert value.name == "List"
        assert value.type_args == (TypeRef(name="User", module="app.model", nullable=True),)

    def test_star_projection(self):
        type_ref = parse_type("List<*>")
        assert type_ref.type_args == (TypeRef(name="*"),)

    def test_whitespace_is_ignored(self):
        assert parse_type("  Pair< Int ,String >  ") == parse_type("Pair<Int, String>")

    @pytest.mark.parametrize("text", ["", "List<", "List<Int", "Int>", "Map<,>", "Int Int", "1Int", "List<Int>>"])
    def test_malformed(self, text):
        with pytest.raises(TypeParseError):
            parse_type(text)


if __name__ == "__main__":
    pytest.main([__file__])
