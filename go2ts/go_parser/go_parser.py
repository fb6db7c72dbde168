import os
from dataclasses import dataclass, field

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from go2ts import logging as go2ts_logging, utils
from go2ts.errors import ExtractionError

from .alias_info import AliasInfo
from .expr_normalizer import node_text, type_expr_to_string
from .struct_info import FieldInfo, StructInfo

logger = go2ts_logging.get_logger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

_TYPE_PARAM_DECLS = ("type_parameter_declaration", "parameter_declaration")


@dataclass
class GoFileData:
    structs: list[StructInfo] = field(default_factory=list)
    aliases: list[AliasInfo] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    def extend(self, other: "GoFileData") -> None:
        self.structs.extend(other.structs)
        self.aliases.extend(other.aliases)
        self.files.extend(other.files)

    def alias_map(self) -> dict[str, str]:
        return {alias.name: alias.underlying for alias in self.aliases}

    def struct_map(self) -> dict[str, StructInfo]:
        return {struct.name: struct for struct in self.structs}


def _first_error_node(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error_node(child)
        if found is not None:
            return found
    return node


def embedded_field_name(type_str: str) -> str:
    """Return the implicit field name Go gives an embedded type: `*pkg.Base[T]` -> `Base`."""
    name = type_str.lstrip("*")
    if "[" in name:
        name = name[:name.index("[")]
    return name.rsplit(".", 1)[-1]


def _strip_tag(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] == "`":
        return raw[1:-1]
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        return raw[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return raw


class GoParser:
    def __init__(self, filename, source: bytes | None = None, omit_error=False):
        self.filename = str(filename)

        if source is None:
            try:
                source = utils.read_file_bytes(self.filename)
            except OSError as exc:
                raise ExtractionError(self.filename, str(exc)) from exc
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ExtractionError(self.filename, f"source is not valid UTF-8: {exc}") from exc

        parser = Parser(GO_LANGUAGE)
        self.tree = parser.parse(source)
        root = self.tree.root_node
        if root.has_error:
            error_node = _first_error_node(root)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            if not omit_error:
                raise ExtractionError(self.filename, "syntax error", line=line)
            logger.warning("Syntax error in %s near line %s; extracting what parsed", self.filename, line)

        self._structs: dict[str, StructInfo] = {}
        self._struct_order: list[StructInfo] = []
        self._aliases: list[AliasInfo] = []
        self._extract_type_declarations(root)

    def _location(self, node: Node) -> str:
        return f"{self.filename}:{node.start_point[0] + 1}"

    def _extract_type_declarations(self, root: Node):
        for decl in root.named_children:
            if decl.type != "type_declaration":
                continue
            for spec in decl.named_children:
                if spec.type in ("type_spec", "type_alias"):
                    self._extract_type_spec(spec)

    @staticmethod
    def _type_params(spec: Node) -> list[str]:
        param_list = spec.child_by_field_name("type_parameters")
        if param_list is None:
            return []
        params = []
        for decl in param_list.named_children:
            if decl.type not in _TYPE_PARAM_DECLS:
                continue
            params.extend(node_text(name) for name in decl.children_by_field_name("name"))
        return params

    def _extract_type_spec(self, spec: Node):
        name = node_text(spec.child_by_field_name("name"))
        type_node = spec.child_by_field_name("type")
        type_params = self._type_params(spec)
        location = self._location(spec)

        if type_node is not None and type_node.type == "struct_type":
            struct = self._extract_struct(name, type_node, type_params, location)
            if name in self._structs:
                logger.debug("Struct %s redeclared at %s", name, location)
            self._structs[name] = struct
            self._struct_order.append(struct)
            return

        alias = AliasInfo(
            name,
            type_expr_to_string(type_node),
            type_params=type_params,
            location=location,
        )
        self._aliases.append(alias)

    def _extract_struct(self, name, struct_node: Node, type_params, location) -> StructInfo:
        fields: list[FieldInfo] = []
        embedded: list[FieldInfo] = []

        field_list = None
        for child in struct_node.named_children:
            if child.type == "field_declaration_list":
                field_list = child
                break

        if field_list is not None:
            for decl in field_list.named_children:
                if decl.type != "field_declaration":
                    continue
                type_str = type_expr_to_string(decl.child_by_field_name("type"))
                tag_node = decl.child_by_field_name("tag")
                tag = _strip_tag(node_text(tag_node)) if tag_node is not None else ""
                names = decl.children_by_field_name("name")
                if not names:
                    if any(child.type == "*" for child in decl.children):
                        type_str = "*" + type_str
                    embedded.append(FieldInfo(embedded_field_name(type_str), type_str, tag))
                    continue
                for field_name in names:
                    fields.append(FieldInfo(node_text(field_name), type_str, tag))

        return StructInfo(
            name,
            fields=fields,
            type_params=type_params,
            embedded=embedded,
            location=location,
        )

    def get_structs(self) -> list[StructInfo]:
        return list(self._struct_order)

    def get_struct_info(self, name) -> StructInfo:
        if name not in self._structs:
            raise ValueError(f"Struct {name} not found")
        return self._structs[name]

    def get_aliases(self) -> list[AliasInfo]:
        return list(self._aliases)

    def to_file_data(self) -> GoFileData:
        return GoFileData(
            structs=self.get_structs(),
            aliases=self.get_aliases(),
            files=[self.filename],
        )

    def statistic(self) -> str:
        return (f"{self.filename}: {len(self._struct_order)} structs, "
                f"{len(self._aliases)} aliases")


def iter_go_files(directory, skip_test_files=True, exclude_dirs=()):
    """Yield ``.go`` files under ``directory`` in a stable, sorted order."""
    excluded = set(exclude_dirs or ())
    for root, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if not filename.endswith(".go"):
                continue
            if skip_test_files and filename.endswith("_test.go"):
                continue
            yield os.path.join(root, filename)


def parse_go_files(directory, skip_test_files=True, exclude_dirs=()) -> GoFileData:
    """Parse every Go file below ``directory`` into struct and alias declarations.

    Any unreadable or syntactically invalid file aborts the whole run with an
    ExtractionError; nothing is translated from a partially parsed tree.
    """
    directory = str(directory)
    if not os.path.isdir(directory):
        raise ExtractionError(directory, "input directory does not exist")

    data = GoFileData()
    for path in iter_go_files(directory, skip_test_files, exclude_dirs):
        go_parser = GoParser(path)
        logger.debug(go_parser.statistic())
        data.extend(go_parser.to_file_data())

    logger.info(
        "Parsed %d Go files: %d structs, %d aliases",
        len(data.files), len(data.structs), len(data.aliases),
    )
    return data
