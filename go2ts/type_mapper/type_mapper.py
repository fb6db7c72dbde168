from typing import Mapping, Sequence

from go2ts import logging as go2ts_logging, type_table
from go2ts.go_parser import AliasInfo, FieldInfo, StructInfo

from .generics import is_generic_instantiation, split_generic_type

logger = go2ts_logging.get_logger(__name__)

# nested maps, struct literals, generics and alias hops; pointer and slice
# prefixes do not count
MAX_NESTING = 128

ANY = "any"
NULL_SUFFIX = " | null"
ARRAY_SUFFIX = "[]"
INDEX_SIGNATURE_PREFIX = "{ [key:"
UNKNOWN_FIELD = "unknown: any"


def is_alias_name(type_name: str) -> bool:
    """Exported Go names start with an upper-case letter."""
    if not type_name:
        return False
    return "A" <= type_name[0] <= "Z"


def _is_parenthesized(ts_type: str) -> bool:
    return ts_type.startswith("(")


def _split_top_level(text: str, separator: str) -> list[str]:
    parts = []
    buf = []
    depth = 0
    for ch in text:
        if ch in "[{(":
            depth += 1
        elif ch in "]})":
            depth -= 1
        if ch == separator and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    parts.append("".join(buf))
    return parts


def _split_map_type(go_type: str) -> tuple[str, str] | None:
    inner = go_type[len("map["):]
    depth = 1
    for idx, ch in enumerate(inner):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return inner[:idx].strip(), inner[idx + 1:].strip()
    return None


class TypeMapper:
    """Maps canonical Go type expressions to TypeScript type text.

    One mapper holds the tables of a single conversion run: the alias table
    (name -> underlying expression, one level deep) and the struct table.
    Mapping is total: malformed or unknown input degrades to ``any`` or to
    the name itself, and alias cycles are cut by a per-call visited set.
    """

    def __init__(
        self,
        alias_map: Mapping[str, str] | None = None,
        struct_map: Mapping[str, StructInfo] | None = None,
        *,
        extra_types: Mapping[str, str] | None = None,
        parenthesize_union_elements: bool = False,
    ):
        self.alias_map: dict[str, str] = dict(alias_map or {})
        self.struct_map: dict[str, StructInfo] = dict(struct_map or {})
        self.special_cases = type_table.get_special_cases()
        self.basic_types = type_table.get_basic_type_map(extra_types)
        self.integer_key_types = frozenset(type_table.iter_integer_key_types())
        self.index_key_kinds = frozenset(type_table.iter_index_key_kinds())
        self.parenthesize_union_elements = parenthesize_union_elements
        self._depth = 0

    def is_user_defined_struct(self, name: str) -> bool:
        return name in self.struct_map

    def map_type(
        self,
        go_type: str,
        type_params: Sequence[str] = (),
        type_param_mapping: Mapping[str, str] | None = None,
        visited: set[str] | None = None,
    ) -> str:
        if visited is None:
            visited = set()
        if type_param_mapping is None:
            type_param_mapping = {}
        go_type = go_type.strip()

        if go_type in visited:
            return ANY
        if self._depth >= MAX_NESTING:
            logger.warning("Type nested deeper than %d levels mapped to %s: %.80s", MAX_NESTING, ANY, go_type)
            return ANY

        visited.add(go_type)
        self._depth += 1
        try:
            return self._resolve(go_type, type_params, type_param_mapping, visited)
        finally:
            self._depth -= 1
            visited.discard(go_type)

    def _resolve(self, go_type, type_params, type_param_mapping, visited) -> str:
        if go_type in type_param_mapping:
            return type_param_mapping[go_type]

        if go_type == "":
            return ""

        special = self.special_cases.get(go_type)
        if special is not None:
            return special

        if go_type in type_params:
            return go_type

        if go_type.startswith("*") or go_type.startswith("[]"):
            return self._map_wrapped(go_type, type_params, type_param_mapping, visited)

        if go_type.startswith("map["):
            return self.map_map_type(go_type, type_params, type_param_mapping, visited)

        if go_type.startswith("struct{"):
            return self.map_struct_literal(go_type, type_params, type_param_mapping, visited)

        if is_generic_instantiation(go_type):
            return self.map_generic_type(go_type, type_params, type_param_mapping, visited)

        if go_type in self.alias_map:
            underlying = self.alias_map[go_type]
            if underlying.strip() == go_type:
                return ANY
            return self.map_type(underlying, type_params, type_param_mapping, visited)

        basic = self.basic_types.get(go_type)
        if basic is not None:
            return basic

        if "." in go_type:
            return ANY
        if any(sigil in go_type for sigil in "*[]"):
            return ANY

        if is_alias_name(go_type) and not self.is_user_defined_struct(go_type):
            logger.debug("%s is not a struct of this run; emitting the name as is", go_type)
        return go_type

    def _is_wrapper(self, go_type, type_params, type_param_mapping) -> bool:
        # mirrors the checks _resolve makes before its pointer and slice branch
        if go_type in type_param_mapping or go_type in self.special_cases or go_type in type_params:
            return False
        return go_type.startswith("*") or go_type.startswith("[]")

    def _map_wrapped(self, go_type, type_params, type_param_mapping, visited) -> str:
        """Map a run of ``*`` and ``[]`` prefixes without one frame per prefix.

        Each peeled level stays on the visited path while the innermost type
        is mapped, exactly as if every level had been mapped recursively.
        """
        layers: list[str] = []
        peeled: list[str] = []
        current = go_type
        try:
            while True:
                prefix = "*" if current.startswith("*") else "[]"
                layers.append(prefix)
                current = current[len(prefix):].strip()
                if current in visited or not self._is_wrapper(current, type_params, type_param_mapping):
                    break
                visited.add(current)
                peeled.append(current)
            ts_type = self.map_type(current, type_params, type_param_mapping, visited)
        finally:
            for key in peeled:
                visited.discard(key)

        for prefix in reversed(layers):
            if prefix == "*":
                ts_type += NULL_SUFFIX
            else:
                ts_type = self._slice_element(ts_type) + ARRAY_SUFFIX
        return ts_type

    def _slice_element(self, elem: str) -> str:
        if _is_parenthesized(elem):
            return elem
        if elem.startswith(INDEX_SIGNATURE_PREFIX):
            return f"({elem})"
        if self.parenthesize_union_elements and "|" in elem:
            return f"({elem})"
        return elem

    def _map_key_type(self, raw_key, type_params, type_param_mapping, visited) -> str:
        if raw_key.startswith("struct{"):
            return "string"
        if raw_key in self.integer_key_types:
            return "number"

        key_resolved = raw_key
        visited_keys: set[str] = set()
        while key_resolved not in visited_keys:
            visited_keys.add(key_resolved)
            underlying = self.alias_map.get(key_resolved)
            if underlying is None or underlying == key_resolved:
                break
            key_resolved = underlying

        key_ts = self.map_type(key_resolved, type_params, type_param_mapping, visited)
        if key_ts not in self.index_key_kinds:
            key_ts = "string"
        return key_ts

    def map_map_type(self, go_type, type_params=(), type_param_mapping=None, visited=None) -> str:
        if type_param_mapping is None:
            type_param_mapping = {}
        if visited is None:
            visited = set()

        split = _split_map_type(go_type)
        if split is None:
            return ANY
        raw_key, raw_value = split

        key_ts = self._map_key_type(raw_key, type_params, type_param_mapping, visited)
        value_ts = self.map_type(raw_value, type_params, type_param_mapping, visited)
        if "|" in value_ts and not value_ts.endswith(ARRAY_SUFFIX) and not _is_parenthesized(value_ts):
            value_ts = f"({value_ts})"
        return f"{{ [key: {key_ts}]: {value_ts} }}"

    def map_struct_literal(self, go_type, type_params=(), type_param_mapping=None, visited=None) -> str:
        """Map ``struct{ A int; B, C string }`` to ``{ A: number; B: string; C: string }``."""
        if type_param_mapping is None:
            type_param_mapping = {}
        if visited is None:
            visited = set()

        body = go_type[len("struct{"):]
        if body.endswith("}"):
            body = body[:-1]

        ts_fields = []
        for raw_field in _split_top_level(body, ";"):
            raw_field = raw_field.strip()
            if not raw_field:
                continue
            tokens = raw_field.split()
            if len(tokens) < 2:
                # embedded field: no explicit name to emit
                ts_fields.append(UNKNOWN_FIELD)
                continue

            names = []
            idx = 0
            while idx < len(tokens) - 1 and tokens[idx].endswith(","):
                names.append(tokens[idx].rstrip(","))
                idx += 1
            names.append(tokens[idx])
            field_type = " ".join(tokens[idx + 1:])
            if not field_type:
                ts_fields.append(UNKNOWN_FIELD)
                continue

            ts_type = self.map_type(field_type, type_params, type_param_mapping, visited)
            for name in names:
                ts_fields.append(f"{name}: {ts_type}")

        return "{ " + "; ".join(ts_fields) + " }"

    def map_generic_type(self, go_type, type_params=(), type_param_mapping=None, visited=None) -> str:
        """Map ``Result[T, E]`` to ``Result<T, E>``, resolving an aliased base."""
        if type_param_mapping is None:
            type_param_mapping = {}
        if visited is None:
            visited = set()

        base, params = split_generic_type(go_type)
        ts_params = []
        for param in params or []:
            ts_param = self.map_type(param, type_params, type_param_mapping, visited)
            ts_params.append(ts_param or ANY)

        base_alias = self.alias_map.get(base)
        if base_alias is not None and base_alias != base:
            base = self.map_type(base_alias, type_params, type_param_mapping, visited)

        return f"{base}<{', '.join(ts_params)}>"

    def map_field(self, field: FieldInfo, type_params: Sequence[str] = (),
                  type_param_mapping: Mapping[str, str] | None = None) -> str:
        return self.map_type(field.type, type_params, type_param_mapping) or ANY

    def map_record_fields(
        self,
        struct: StructInfo,
        type_args: Sequence[str] | None = None,
    ) -> list[tuple[FieldInfo, str]]:
        """Map every field of ``struct``.

        ``type_args`` are TypeScript texts substituted for the struct's own
        generic parameters, in declaration order; missing arguments leave the
        parameter as a type variable.
        """
        type_param_mapping: dict[str, str] = {}
        if type_args:
            for param, arg in zip(struct.type_params, type_args):
                type_param_mapping[param] = arg or ANY

        return [
            (field, self.map_field(field, struct.type_params, type_param_mapping))
            for field in struct.fields
        ]

    def map_alias(self, alias: AliasInfo) -> str:
        # the alias itself is on the path: "type A B; type B A" stops at A
        visited = {alias.name}
        underlying = alias.underlying.strip()
        if underlying == alias.name:
            return ANY
        return self.map_type(underlying, alias.type_params, None, visited) or ANY
