"""Demo three-level hierarchy used by CLI examples and smoke checks.

    diffkit diff diffpack.demo:demo_first diffpack.demo:demo_second --climb 1
"""

from __future__ import annotations

from typing import Any, ClassVar


class DemoParent:
    kind: ClassVar[str] = "demo"

    parent_field: int
    __parent_secret: Any

    def __init__(self, parent_secret: Any = None) -> None:
        self.parent_field = 0
        self.__parent_secret = parent_secret


class DemoChild(DemoParent):
    child_field: Any

    def __init__(self, parent_secret: Any = None) -> None:
        super().__init__(parent_secret)
        self.child_field = None


class DemoGrandChild(DemoChild):
    __grand_child_secret: Any

    def __init__(self, parent_secret: Any = None) -> None:
        super().__init__(parent_secret)
        self.__grand_child_secret = parent_secret


def build_demo_instance(
    *,
    parent_field: int = 0,
    child_field: Any = None,
    secret: Any = None,
) -> DemoGrandChild:
    instance = DemoGrandChild(secret)
    instance.parent_field = parent_field
    instance.child_field = child_field
    return instance


def demo_first() -> DemoGrandChild:
    return build_demo_instance(parent_field=1, child_field="alpha")


def demo_second() -> DemoGrandChild:
    return build_demo_instance(parent_field=2, child_field="alpha")
