"""Turn tree-sitter Go type nodes into canonical type-expression strings.

The mapper never looks at syntax trees; it only consumes the strings produced
here. The grammar is intentionally small:

    Name | pkg.Name | *T | []T | map[K]V | Base[A, B] | interface{} | func
    | struct{} | struct{ a T; b, c U; Embedded }

Node shapes with no equivalent (channels, negated constraints, ...) become
the empty string, which the mapper treats as "unknown".
"""

from tree_sitter import Node

_IDENTIFIER_NODES = frozenset({
    "type_identifier",
    "identifier",
    "field_identifier",
    "package_identifier",
})

_ARRAY_NODES = frozenset({
    "slice_type",
    "array_type",
    "implicit_length_array_type",
})


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _first_named_child(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _type_arguments(node: Node) -> list[str]:
    args = []
    for child in node.named_children:
        if child.type == "comment":
            continue
        args.append(type_expr_to_string(child))
    return args


def _struct_to_string(node: Node) -> str:
    field_list = None
    for child in node.named_children:
        if child.type == "field_declaration_list":
            field_list = child
            break
    if field_list is None:
        return "struct{}"

    parts = []
    for field in field_list.named_children:
        if field.type != "field_declaration":
            continue
        type_str = type_expr_to_string(field.child_by_field_name("type"))
        names = [node_text(name) for name in field.children_by_field_name("name")]
        if not names:
            # embedded field; the '*' of an embedded pointer is an anonymous child
            if any(child.type == "*" for child in field.children):
                type_str = "*" + type_str
            parts.append(type_str)
            continue
        parts.append(f"{', '.join(names)} {type_str}")

    if not parts:
        return "struct{}"
    return "struct{ " + "; ".join(parts) + " }"


def type_expr_to_string(node: Node | None) -> str:
    if node is None:
        return ""

    kind = node.type
    if kind in _IDENTIFIER_NODES:
        return node_text(node)

    if kind == "pointer_type":
        return "*" + type_expr_to_string(_first_named_child(node))

    if kind == "qualified_type":
        package = node_text(node.child_by_field_name("package"))
        name = node_text(node.child_by_field_name("name"))
        return f"{package}.{name}"

    if kind in _ARRAY_NODES:
        return "[]" + type_expr_to_string(node.child_by_field_name("element"))

    if kind == "map_type":
        key = type_expr_to_string(node.child_by_field_name("key"))
        value = type_expr_to_string(node.child_by_field_name("value"))
        return f"map[{key}]{value}"

    if kind == "generic_type":
        base = type_expr_to_string(node.child_by_field_name("type"))
        arguments = node.child_by_field_name("type_arguments")
        args = _type_arguments(arguments) if arguments is not None else []
        return f"{base}[{', '.join(args)}]"

    if kind in ("type_elem", "type_constraint"):
        members = _type_arguments(node)
        return " | ".join(member for member in members if member)

    if kind == "parenthesized_type":
        return type_expr_to_string(_first_named_child(node))

    if kind == "interface_type":
        return "interface{}"

    if kind == "function_type":
        return "func"

    if kind == "struct_type":
        return _struct_to_string(node)

    return ""
