import pytest
from tree_sitter import Parser

from go2ts.go_parser import type_expr_to_string
from go2ts.go_parser.go_parser import GO_LANGUAGE


def _type_node(type_source):
    source = f"package p\n\ntype X {type_source}\n".encode("utf-8")
    tree = Parser(GO_LANGUAGE).parse(source)
    assert not tree.root_node.has_error
    for decl in tree.root_node.named_children:
        if decl.type != "type_declaration":
            continue
        for spec in decl.named_children:
            if spec.type == "type_spec":
                return spec.child_by_field_name("type")
    raise AssertionError(f"no type_spec in {type_source!r}")


@pytest.mark.parametrize(
    "type_source, expected",
    [
        ("int", "int"),
        ("time.Time", "time.Time"),
        ("*User", "*User"),
        ("**int", "**int"),
        ("[]string", "[]string"),
        ("map[string][]*pkg.User", "map[string][]*pkg.User"),
        ("map[map[string]int]bool", "map[map[string]int]bool"),
        ("Result[T]", "Result[T]"),
        ("Result[T, Pair[K, V]]", "Result[T, Pair[K, V]]"),
        ("pkg.Option[string]", "pkg.Option[string]"),
        ("interface{}", "interface{}"),
        ("interface{ String() string }", "interface{}"),
        ("func(int) error", "func"),
        ("struct{}", "struct{}"),
        ("chan int", ""),
    ],
)
def test_type_expr_to_string(type_source, expected):
    assert type_expr_to_string(_type_node(type_source)) == expected


def test_struct_literal_fields():
    node = _type_node("struct {\n\tA [4]int\n\tB, C string\n\t*Base\n\tpkg.Embedded\n}")
    assert type_expr_to_string(node) == "struct{ A []int; B, C string; *Base; pkg.Embedded }"


def test_nested_struct_literal():
    node = _type_node("struct {\n\tInner struct {\n\t\tX int\n\t}\n\tTags []string\n}")
    assert type_expr_to_string(node) == "struct{ Inner struct{ X int }; Tags []string }"


def test_missing_node():
    assert type_expr_to_string(None) == ""
