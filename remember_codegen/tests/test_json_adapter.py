import json

import pytest

from remember_codegen.pipeline.declarations import JsonDeclarationAdapter, Marker, MarkerKind, TypeRef
from remember_codegen.pipeline.errors import DeclarationError

COUNTER_DOCUMENT = {
    "declarations": [
        {
            "name": "CounterState",
            "namespace": "com.example.counter",
            "persistence": True,
            "injector": "injectClass",
            "params": [
                {
                    "name": "initialIndex",
                    "type": "Int",
                    "markers": [{"type": "literal-value", "value": 10}, "invalidation-key"],
                },
                {
                    "name": "index",
                    "type": {"name": "Int"},
                    "markers": [{"type": "persisted-key", "key": "index"}],
                },
                {
                    "name": "user",
                    "type": {"name": "User", "module": "com.example.user", "nullable": True},
                    "markers": [{"type": "custom-provide", "provider": "loadUser", "args": ["initialIndex"]}],
                },
            ],
            "properties": [
                {"name": "index", "type": "Int", "markers": [{"type": "persisted-key", "key": "index"}]},
            ],
        }
    ]
}


class TestJsonDeclarationAdapter:
    """Test cases for reading JSON declaration documents"""

    def test_parse_document(self):
        result = JsonDeclarationAdapter().parse(COUNTER_DOCUMENT)
        assert result.errors == []
        (decl,) = result.declarations

        assert decl.qualified_name == "com.example.counter.CounterState"
        assert decl.persistence
        assert decl.injector == "injectClass"
        assert [p.name for p in decl.params] == ["initialIndex", "index", "user"]

        initial, index, user = decl.params
        assert initial.markers == [
            Marker(kind=MarkerKind.LITERAL_VALUE, value="10"),
            Marker(kind=MarkerKind.INVALIDATION_KEY),
        ]
        assert index.markers == [Marker(kind=MarkerKind.PERSISTED_KEY, value="index")]
        assert user.type_ref == TypeRef(name="User", module="com.example.user", nullable=True)
        assert user.markers == [Marker(kind=MarkerKind.CUSTOM_PROVIDE, value="loadUser", args=("initialIndex",))]

        (prop,) = decl.properties
        assert prop.name == "index"
        assert prop.markers == [Marker(kind=MarkerKind.PERSISTED_KEY, value="index")]

    def test_bare_list(self):
        result = JsonDeclarationAdapter().parse([{"name": "Empty"}])
        assert [d.name for d in result.declarations] == ["Empty"]
        assert result.declarations[0].params == []

    def test_errors_are_collected_per_declaration(self):
        document = [
            {"name": "Broken", "params": [{"name": "x", "type": "List<"}]},
            {"name": "UnknownMarker", "params": [{"name": "y", "type": "Int", "markers": ["remember-me"]}]},
            {"name": "Fine", "params": [{"name": "z", "type": "Int"}]},
        ]
        result = JsonDeclarationAdapter().parse(document)

        assert [d.name for d in result.declarations] == ["Fine"]
        assert [e.class_name for e in result.errors] == ["Broken", "UnknownMarker"]
        assert all(isinstance(e, DeclarationError) for e in result.errors)
        assert result.errors[0].member == "x"

    def test_missing_name(self):
        result = JsonDeclarationAdapter().parse({"declarations": [{"namespace": "a.b"}]})
        assert result.declarations == []
        assert len(result.errors) == 1

    def test_missing_type(self):
        result = JsonDeclarationAdapter().parse([{"name": "NoType", "params": [{"name": "x"}]}])
        assert result.errors[0].member == "x"

    def test_parse_file(self, tmp_path):
        path = tmp_path / "declarations.json"
        path.write_text(json.dumps(COUNTER_DOCUMENT))
        result = JsonDeclarationAdapter().parse_file(path)
        assert result.declarations[0].source == str(path)

    def test_errors_carry_source(self):
        result = JsonDeclarationAdapter().parse([{"name": "NoType", "params": [{"name": "x"}]}], source="decl.json")
        assert result.errors[0].source == "decl.json"
        assert str(result.errors[0]).startswith("DeclarationError in NoType.x: ")
        assert str(result.errors[0]).endswith(" (decl.json)")

    def test_null_namespace(self):
        result = JsonDeclarationAdapter().parse([{"name": "Widget", "namespace": None}])
        assert result.declarations[0].namespace == ""
        assert result.declarations[0].qualified_name == "Widget"

    def test_parse_file_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = JsonDeclarationAdapter().parse_file(path)
        assert result.declarations == []
        assert "invalid JSON" in str(result.errors[0])


if __name__ == "__main__":
    pytest.main([__file__])
