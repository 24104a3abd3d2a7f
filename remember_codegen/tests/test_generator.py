import json
from datetime import datetime

import pytest

from remember_codegen import __version__
from remember_codegen.pipeline import (
    CodeGeneratorConfig,
    GenerationResult,
    PipelineGenerator,
    load_declarations,
    strip_generation_timestamp,
)
from remember_codegen.pipeline.declarations import JsonDeclarationAdapter

WIDGET = {
    "name": "Widget",
    "namespace": "com.example",
    "params": [{"name": "size", "type": "Int", "markers": [{"type": "literal-value", "value": "1"}]}],
}


def declarations(*entries):
    return JsonDeclarationAdapter().parse(list(entries)).declarations


def fixed_clock(moment):
    return lambda: moment


class TestPipelineGenerator:
    """Test cases for the generation entry point"""

    def test_header_comment(self):
        (unit,) = PipelineGenerator(CodeGeneratorConfig(), "kotlin").generate(declarations(WIDGET)).units
        assert unit.content.startswith(f"// Generated by remember_codegen v{__version__} : remember_codegen\n\npackage com.example\n")

    def test_python_header_uses_hash_comment(self):
        entry = dict(WIDGET, namespace="app.widgets")
        (unit,) = PipelineGenerator(CodeGeneratorConfig(), "python").generate(declarations(entry)).units
        assert unit.content.startswith("# Generated by remember_codegen v")

    def test_timestamp_footer(self):
        config = CodeGeneratorConfig(include_timestamp=True)
        moment = datetime(2024, 5, 17, 9, 30, 0)
        generator = PipelineGenerator(config, "kotlin", clock=fixed_clock(moment))
        (unit,) = generator.generate(declarations(WIDGET)).units
        assert unit.content.endswith("}\n\n// Generated at 2024-05-17T09:30:00\n")

    def test_output_equal_modulo_timestamp(self):
        config = CodeGeneratorConfig(include_timestamp=True)
        first = PipelineGenerator(config, "kotlin", clock=fixed_clock(datetime(2024, 1, 1))).generate(declarations(WIDGET))
        second = PipelineGenerator(config, "kotlin", clock=fixed_clock(datetime(2025, 6, 1))).generate(declarations(WIDGET))
        assert first.units[0].content != second.units[0].content
        assert strip_generation_timestamp(first.units[0].content) == strip_generation_timestamp(second.units[0].content)

        plain = PipelineGenerator(CodeGeneratorConfig(), "kotlin").generate(declarations(WIDGET))
        assert strip_generation_timestamp(first.units[0].content) == plain.units[0].content

    def test_strip_is_a_no_op_without_timestamp(self):
        content = "fun f() {}\n"
        assert strip_generation_timestamp(content) == content

    def test_unsupported_language(self):
        with pytest.raises(ValueError):
            PipelineGenerator(CodeGeneratorConfig(), "swift")

    def test_every_failure_is_reported(self):
        entries = [
            {"name": "A", "params": [{"name": "x", "type": "Int", "markers": ["framework-inject"]}]},
            {"name": "B", "params": [{"name": "y", "type": "Job", "markers": ["ambient-scope"]}]},
            WIDGET,
        ]
        result = PipelineGenerator(CodeGeneratorConfig(), "kotlin").generate(declarations(*entries))
        assert [(f.class_name, f.kind) for f in result.failures] == [
            ("A", "UnresolvableDefault"),
            ("B", "InvalidAmbientScopeUsage"),
        ]
        assert len(result.units) == 1

    def test_colliding_outputs_fail_per_class(self):
        other = dict(WIDGET, name="Gadget")
        result = PipelineGenerator(CodeGeneratorConfig(), "kotlin").generate(declarations(WIDGET, WIDGET, other))
        assert [(f.class_name, f.kind) for f in result.failures] == [("com.example.Widget", "OutputCollision")]
        assert [u.file_name for u in result.units] == ["RememberWidget.kt", "RememberGadget.kt"]

    def test_failure_names_its_source(self):
        entry = {"name": "A", "params": [{"name": "x", "type": "Int", "markers": ["framework-inject"]}]}
        parsed = JsonDeclarationAdapter().parse([entry], source="decl.json")
        (failure,) = PipelineGenerator(CodeGeneratorConfig(), "kotlin").generate(parsed.declarations).failures
        assert failure.source == "decl.json"
        assert str(failure).endswith("(decl.json)")

    def test_null_namespace_is_the_root(self):
        entry = dict(WIDGET, namespace=None)
        result = PipelineGenerator(CodeGeneratorConfig(), "python").generate(declarations(entry))
        assert result.ok
        assert [str(u.relative_path) for u in result.units] == ["remember_widget.py"]

    def test_empty_result_is_ok(self):
        assert GenerationResult().ok


class TestLoadDeclarations:
    """Test cases for reading input files by extension"""

    def test_mixed_inputs(self, tmp_path):
        json_path = tmp_path / "decl.json"
        json_path.write_text(json.dumps({"declarations": [WIDGET]}))
        py_path = tmp_path / "models.py"
        py_path.write_text(
            "from remember_codegen.markers import remember\n\n\n"
            "@remember\nclass Gadget:\n    def __init__(self, size: int):\n        pass\n"
        )

        result = load_declarations([json_path, py_path])
        assert [d.qualified_name for d in result.declarations] == ["com.example.Widget", "models.Gadget"]


if __name__ == "__main__":
    pytest.main([__file__])
