import json
import re
from typing import Any, Dict

from go2ts import logging as go2ts_logging, utils
from go2ts.errors import OutputError
from go2ts.go_parser import AliasInfo, FieldInfo, GoFileData, StructInfo
from go2ts.type_mapper import TypeMapper, split_generic_type

logger = go2ts_logging.get_logger(__name__)

_TS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _tag_value(tag: str, key: str) -> str | None:
    match = re.search(rf'(?:^|\s){re.escape(key)}:"', tag or "")
    if match is None:
        return None
    start = match.end()
    end = tag.find('"', start)
    if end == -1:
        return None
    return tag[start:end]


def extract_tag_name(tag: str, key: str = "json") -> str:
    """Return the field name a struct tag assigns, or "" when it assigns none.

    `json:"name,omitempty"` -> "name"; `json:"-"`, `json:""`, a missing key
    and an unterminated value all give "".
    """
    value = _tag_value(tag, key)
    if not value or value == "-":
        return ""
    return value.split(",", 1)[0]


def tag_options(tag: str, key: str = "json") -> list[str]:
    value = _tag_value(tag, key)
    if not value or "," not in value:
        return []
    return [option.strip() for option in value.split(",")[1:] if option.strip()]


def is_ignored_tag(tag: str, key: str = "json") -> bool:
    return _tag_value(tag, key) == "-"


def format_property_name(name: str) -> str:
    if _TS_IDENTIFIER.match(name):
        return name
    return json.dumps(name)


def _format_type_params(type_params) -> str:
    if not type_params:
        return ""
    return "<" + ", ".join(type_params) + ">"


class TypeScriptGenerator:
    def __init__(self, data: GoFileData, config: Dict[str, Any] | None = None):
        self.data = data
        self.config = config if config is not None else utils.load_default_config()

        emitter_cfg = self.config.get("emitter", {})
        self.tag_key: str = emitter_cfg.get("tag_key", "json")
        self.banner: str = emitter_cfg.get("banner", "")
        self.indent: str = emitter_cfg.get("indent", "  ")
        self.export: bool = emitter_cfg.get("export", False)
        self.optional_omitempty: bool = emitter_cfg.get("optional_omitempty", False)
        self.skip_ignored_fields: bool = emitter_cfg.get("skip_ignored_fields", False)

        mapper_cfg = self.config.get("mapper", {})
        overrides = self.config.get("types", {}).get("overrides", {})
        self.mapper = TypeMapper(
            data.alias_map(),
            data.struct_map(),
            extra_types=overrides,
            parenthesize_union_elements=mapper_cfg.get("parenthesize_union_elements", False),
        )

    def _keyword(self, keyword: str) -> str:
        return f"export {keyword}" if self.export else keyword

    def emit_alias(self, alias: AliasInfo) -> str:
        ts_type = self.mapper.map_alias(alias)
        params = _format_type_params(alias.type_params)
        return f"{self._keyword('type')} {alias.name}{params} = {ts_type};"

    def _field_name(self, struct: StructInfo, field: FieldInfo) -> str | None:
        """Return the emitted property name, or None when the field is dropped."""
        if is_ignored_tag(field.tag, self.tag_key):
            if self.skip_ignored_fields:
                logger.debug("Skipping %s.%s: tagged '-'", struct.name, field.name)
                return None
            logger.warning(
                "Field %s.%s is tagged '%s:\"-\"' but is still emitted",
                struct.name, field.name, self.tag_key,
            )
        tag_name = extract_tag_name(field.tag, self.tag_key)
        return tag_name if tag_name else field.name

    def _emit_property(self, struct: StructInfo, field: FieldInfo, ts_type: str) -> str | None:
        name = self._field_name(struct, field)
        if name is None:
            return None
        optional = ""
        if self.optional_omitempty and "omitempty" in tag_options(field.tag, self.tag_key):
            optional = "?"
        return f"{self.indent}{format_property_name(name)}{optional}: {ts_type};"

    def _resolve_embedded(self, struct: StructInfo) -> tuple[list[str], list[FieldInfo]]:
        """Split embedded fields into `extends` targets and plain named fields.

        An embedded field with a tag name is a regular field in the JSON
        encoding; an untagged embedded struct has its fields promoted, which
        maps to interface inheritance.
        """
        extends: list[str] = []
        named: list[FieldInfo] = []
        for embedded in struct.embedded:
            tag_name = extract_tag_name(embedded.tag, self.tag_key)
            if tag_name or is_ignored_tag(embedded.tag, self.tag_key):
                named.append(embedded)
                continue
            stripped = embedded.type.lstrip("*")
            base, _ = split_generic_type(stripped)
            if not self.mapper.is_user_defined_struct(base):
                logger.debug(
                    "Skipping embedded %s in %s: not a struct of this run",
                    embedded.type, struct.name,
                )
                continue
            extends.append(self.mapper.map_type(stripped, struct.type_params))
        return extends, named

    def emit_struct(self, struct: StructInfo, type_args=None) -> str:
        extends, embedded_fields = self._resolve_embedded(struct)
        header = f"{self._keyword('interface')} {struct.name}{_format_type_params(struct.type_params)}"
        if extends:
            header += " extends " + ", ".join(extends)

        lines = [header + " {"]
        for field in embedded_fields:
            prop = self._emit_property(struct, field, self.mapper.map_field(field, struct.type_params))
            if prop is not None:
                lines.append(prop)
        for field, ts_type in self.mapper.map_record_fields(struct, type_args):
            prop = self._emit_property(struct, field, ts_type)
            if prop is not None:
                lines.append(prop)
        lines.append("}")
        return "\n".join(lines)

    def generate(self) -> str:
        blocks: list[str] = []
        if self.banner:
            blocks.append(self.banner)

        seen_aliases: set[str] = set()
        for alias in self.data.aliases:
            if alias.name in seen_aliases:
                logger.debug("Alias %s already emitted; skipping duplicate at %s", alias.name, alias.location)
                continue
            seen_aliases.add(alias.name)
            blocks.append(self.emit_alias(alias))

        for struct in self.data.structs:
            blocks.append(self.emit_struct(struct))

        return "\n\n".join(blocks) + "\n"

    def write(self, output_file, atomic: bool | None = None) -> str:
        if atomic is None:
            atomic = self.config.get("general", {}).get("atomic_write", True)
        text = self.generate()
        try:
            utils.write_text(str(output_file), text, atomic=atomic)
        except OSError as exc:
            raise OutputError(output_file, exc.strerror or str(exc)) from exc
        logger.info(
            "Wrote %d aliases and %d structs to %s",
            len({alias.name for alias in self.data.aliases}), len(self.data.structs), output_file,
        )
        return text


def generate_typescript(data: GoFileData, output_file, config: Dict[str, Any] | None = None) -> str:
    """Generate TypeScript declarations for ``data`` and write them to ``output_file``."""
    return TypeScriptGenerator(data, config).write(output_file)
