from typing import Annotated, get_type_hints

import pytest

from remember_codegen.markers import Key, Provide, Saveable, Value, remember, remember_saveable


@remember_saveable(injector="inject_class")
class Counter:
    def __init__(self, start: Annotated[int, Value("0"), Key()], user: Annotated[str, Provide("load_user", "start")]):
        self.start = start
        self.user = user

    @property
    @Saveable("start")
    def current(self) -> int:
        return self.start


class TestMarkers:
    """Test cases for the runtime markers"""

    def test_decorators_return_the_class(self):
        class Plain:
            pass

        assert remember(Plain) is Plain
        assert remember(injection_mode="none")(Plain) is Plain
        assert remember_saveable(Plain) is Plain

    def test_annotated_class_still_works(self):
        counter = Counter(start=2, user="ada")
        assert counter.current == 2

    def test_markers_are_kept_in_annotations(self):
        hints = get_type_hints(Counter.__init__, include_extras=True)
        assert hints["start"].__metadata__ == (Value("0"), Key())
        assert hints["user"].__metadata__ == (Provide("load_user", "start"),)

    def test_marker_equality(self):
        assert Saveable("a") == Saveable("a")
        assert Saveable("a") != Saveable("b")
        assert Key() != Value("x")
        assert repr(Provide("make", "x")) == "Provide('make', 'x')"


if __name__ == "__main__":
    pytest.main([__file__])
