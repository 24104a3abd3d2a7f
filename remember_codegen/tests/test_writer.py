from pathlib import Path, PurePosixPath

import pytest

from remember_codegen.pipeline import AtomicWriter, CodeGeneratorConfig, OutputValidationError, OutputWriter
from remember_codegen.pipeline.backends import GeneratedUnit
from remember_codegen.pipeline.config import OutputConfig, OutputMode

KOTLIN_SOURCE = "package a.b\n\nfun rememberX(): X {\n    return remember { X() }\n}\n"


def unit(file_name="RememberX.kt", content=KOTLIN_SOURCE, directory="a/b", language="kotlin", class_name="a.b.X"):
    return GeneratedUnit(
        class_name=class_name,
        namespace="a.b",
        directory=PurePosixPath(directory),
        file_name=file_name,
        content=content,
        language=language,
    )


def writer(mode=OutputMode.FORCE, **output_fields):
    return OutputWriter(CodeGeneratorConfig(output=OutputConfig(mode=mode, **output_fields)))


class TestOutputWriter:
    """Test cases for writing generated units"""

    def test_writes_into_namespace_directory(self, tmp_path):
        report = writer().write([unit()], tmp_path)
        path = tmp_path / "a" / "b" / "RememberX.kt"
        assert report.written == [path]
        assert path.read_text() == KOTLIN_SOURCE

    def test_unchanged_files_are_not_rewritten(self, tmp_path):
        writer().write([unit()], tmp_path)
        path = tmp_path / "a" / "b" / "RememberX.kt"
        mtime = path.stat().st_mtime_ns

        report = writer().write([unit()], tmp_path)
        assert report.written == []
        assert report.unchanged == [path]
        assert path.stat().st_mtime_ns == mtime

    def test_force_overwrites(self, tmp_path):
        writer().write([unit()], tmp_path)
        changed = KOTLIN_SOURCE.replace("X()", "X(1)")
        writer().write([unit(content=changed)], tmp_path)
        assert (tmp_path / "a" / "b" / "RememberX.kt").read_text() == changed

    def test_error_if_exists(self, tmp_path):
        writer().write([unit()], tmp_path)
        with pytest.raises(FileExistsError):
            writer(OutputMode.ERROR_IF_EXISTS).write([unit(file_name="RememberY.kt"), unit()], tmp_path)
        # Nothing is written when any target exists
        assert not (tmp_path / "a" / "b" / "RememberY.kt").exists()

    def test_duplicate_targets(self, tmp_path):
        with pytest.raises(ValueError):
            writer().write([unit(), unit(class_name="a.b.Other")], tmp_path)

    def test_invalid_python_is_not_written(self, tmp_path):
        bad = unit(file_name="remember_x.py", content="def broken(:\n", language="python")
        with pytest.raises(OutputValidationError):
            writer().write([bad], tmp_path)
        assert list((tmp_path / "a" / "b").iterdir()) == []

    def test_validation_can_be_disabled(self, tmp_path):
        bad = unit(content="fun broken( {\n")
        writer(validate_before_write=False).write([bad], tmp_path)
        assert (tmp_path / "a" / "b" / "RememberX.kt").exists()

    def test_non_atomic_write_still_validates(self, tmp_path):
        bad = unit(content="fun broken( {\n")
        with pytest.raises(OutputValidationError):
            writer(atomic_write=False).write([bad], tmp_path)

        writer(atomic_write=False).write([unit()], tmp_path)
        assert (tmp_path / "a" / "b" / "RememberX.kt").read_text() == KOTLIN_SOURCE


class TestAtomicWriter:
    """Test cases for atomic writes and content validation"""

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "out" / "remember_x.py"
        AtomicWriter().write(path, "def remember_x():\n    pass\n", "python")
        assert [p.name for p in path.parent.iterdir()] == ["remember_x.py"]

    def test_temp_file_removed_on_failure(self, tmp_path):
        path = tmp_path / "RememberX.kt"
        with pytest.raises(OutputValidationError):
            AtomicWriter().write(path, "class X {\n", "kotlin")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize(
        "content",
        [
            "val x = 1\n",
            "fun f() {\n",
            "fun f() {{\n}\n",
        ],
    )
    def test_kotlin_validation(self, content):
        with pytest.raises(OutputValidationError):
            AtomicWriter().validate(content, "kotlin")

    def test_python_without_function(self):
        with pytest.raises(OutputValidationError):
            AtomicWriter().validate("x = 1\n", "python")

    def test_custom_validator(self, tmp_path):
        seen = []
        AtomicWriter(validate_python=seen.append).write(Path(tmp_path / "a.py"), "x = 1\n", "python")
        assert seen == ["x = 1\n"]


if __name__ == "__main__":
    pytest.main([__file__])
