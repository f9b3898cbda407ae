from diffpack.diff.models import DIFF_CLASS_TYPES, DiffResult, FieldDiff, type_mismatch_result


def test_field_diff_identity_is_the_field_name() -> None:
    first = FieldDiff("a", 1, 2, level=0)
    second = FieldDiff("a", 3, 4, level=2)

    assert first == second
    assert hash(first) == hash(second)
    assert first != FieldDiff("b", 1, 2)


def test_field_diffs_sort_by_field_name() -> None:
    diffs = [FieldDiff("c", 0, 1), FieldDiff("a", 0, 1), FieldDiff("b", 0, 1)]

    assert [diff.field_name for diff in sorted(diffs)] == ["a", "b", "c"]


def test_diff_result_keeps_first_diff_per_field_name() -> None:
    result = DiffResult([FieldDiff("a", 1, 2, level=0), FieldDiff("a", 5, 6, level=2)])

    assert len(result) == 1
    kept = result.get("a")
    assert kept is not None
    assert kept.level == 0
    assert kept.first_value == 1


def test_diff_result_membership_and_set_equality() -> None:
    result = DiffResult([FieldDiff("a", 1, 2), FieldDiff("b", None, 0)])

    assert "a" in result
    assert FieldDiff("b", "ignored", "ignored") in result
    assert 42 not in result
    assert result == {FieldDiff("a", 0, 0), FieldDiff("b", 0, 0)}
    assert result.field_names == frozenset({"a", "b"})
    assert not hasattr(result, "add")


def test_empty_result_is_identical() -> None:
    result = DiffResult()

    assert result.identical is True
    assert result.is_type_mismatch is False
    assert len(result) == 0
    assert result.get("a") is None


def test_diff_result_to_dict_is_sorted() -> None:
    result = DiffResult([FieldDiff("b", 1, 2), FieldDiff("a", "x", "y", level=1, declaring_type="m.T")])

    payload = result.to_dict()

    assert payload["identical"] is False
    assert payload["diff_count"] == 2
    assert payload["field_names"] == ["a", "b"]
    assert payload["diffs"][0] == {
        "field_name": "a",
        "first_value": "x",
        "second_value": "y",
        "level": 1,
        "declaring_type": "m.T",
    }


def test_type_mismatch_result_names_both_types() -> None:
    result = type_mismatch_result([0], "text")

    assert result.is_type_mismatch is True
    (mismatch,) = result
    assert mismatch.field_name == DIFF_CLASS_TYPES
    assert mismatch.first_value == "builtins.list"
    assert mismatch.second_value == "builtins.str"
