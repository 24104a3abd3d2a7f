import pytest

from remember_codegen.pipeline import CodeGeneratorConfig, FormatterConfig, InjectionMode, OutputMode


class TestCodeGeneratorConfig:
    """Test cases for configuration loading"""

    def test_defaults(self):
        config = CodeGeneratorConfig()
        assert config.injection_mode is InjectionMode.NONE
        assert config.ambient_scope_type == "CoroutineScope"
        assert config.add_generation_comment
        assert not config.include_timestamp
        assert config.output.mode is OutputMode.FORCE
        assert not config.formatter.enabled

    def test_from_dict(self):
        config = CodeGeneratorConfig.from_dict(
            {
                "injection_mode": "framework_call",
                "kotlin_visibility": "",
                "formatter": {"enabled": True, "line_length": 88},
                "output": {"mode": "error"},
                "unknown_option": 1,
            }
        )
        assert config.injection_mode is InjectionMode.FRAMEWORK_CALL
        assert config.kotlin_visibility == ""
        assert config.formatter == FormatterConfig(enabled=True, line_length=88)
        assert config.output.mode is OutputMode.ERROR_IF_EXISTS
        assert not hasattr(config, "unknown_option")

    def test_round_trip(self):
        config = CodeGeneratorConfig.from_dict({"injection_mode": "framework_call", "include_timestamp": True})
        assert CodeGeneratorConfig.from_dict(config.to_dict()) == config

    def test_invalid_injection_mode(self):
        with pytest.raises(ValueError):
            CodeGeneratorConfig.from_dict({"injection_mode": "always"})


if __name__ == "__main__":
    pytest.main([__file__])
