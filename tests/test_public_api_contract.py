import inspect

import diffkit
from diffpack.demo import demo_first, demo_second


def test_public_api_symbol_list_is_explicit_and_stable() -> None:
    assert diffkit.__all__ == [
        "__version__",
        "DIFF_CLASS_TYPES",
        "FieldDiff",
        "DiffResult",
        "InstanceDiff",
        "AssertionResult",
        "EqualityRegistry",
        "DiffError",
        "FieldAccessError",
        "AccessError",
        "EqualityError",
        "InstanceMismatchError",
        "register_field_table",
        "unregister_field_table",
        "diff",
        "diff_only",
        "diff_excluding",
        "assert_instances",
    ]
    assert diffkit.DIFF_CLASS_TYPES == "__class__"


def test_public_api_function_signatures_and_annotations() -> None:
    expected_parameter_order = {
        "diff": ("first", "second", "climb_level", "equality"),
        "diff_only": ("first", "second", "names", "climb_level", "equality"),
        "diff_excluding": ("first", "second", "names", "climb_level", "equality"),
        "assert_instances": (
            "expected",
            "actual",
            "only",
            "exclude",
            "climb_level",
            "equality",
            "raise_on_failure",
        ),
    }
    positional_counts = {"diff": 2, "diff_only": 3, "diff_excluding": 3, "assert_instances": 2}

    for name, parameters in expected_parameter_order.items():
        function = getattr(diffkit, name)
        signature = inspect.signature(function)
        assert tuple(signature.parameters.keys()) == parameters
        assert "return" in function.__annotations__
        assert function.__doc__ is not None
        assert function.__doc__.strip() != ""

        for index, parameter in enumerate(signature.parameters.values()):
            if index < positional_counts[name]:
                assert parameter.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
            else:
                assert parameter.kind is inspect.Parameter.KEYWORD_ONLY


def test_core_workflow_works_via_public_api_only() -> None:
    first = demo_first()
    second = demo_second()

    assert diffkit.diff(first, first).identical
    assert diffkit.diff(first, second).field_names == frozenset({"parent_field"})
    assert diffkit.diff(first, second, climb_level=1).identical
    assert diffkit.diff_only(first, second, {"child_field"}).identical
    assert diffkit.diff_excluding(first, second, {"parent_field"}).identical
    assert diffkit.InstanceDiff(first, second).diff_all() == diffkit.diff(first, second)
    assert diffkit.assert_instances(first, second, exclude={"parent_field"}).passed
