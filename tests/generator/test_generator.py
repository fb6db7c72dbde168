import logging
import os

import pytest

from go2ts.errors import OutputError
from go2ts.generator import (TypeScriptGenerator, extract_tag_name,
                             format_property_name, generate_typescript,
                             is_ignored_tag, tag_options)
from go2ts.go_parser import (AliasInfo, FieldInfo, GoFileData, StructInfo,
                             parse_go_files)

EXPECTED_MODEL_OUTPUT = '''// Code generated by go2ts. DO NOT EDIT.

type CustomInt = number;

type Email = string;

type UserStatus = number;

type Payload = any;

type Lookup = { [key: number]: string };

type UserResult = Result<UserAccount>;

type Handler = (...args: any[]) => any;

type SelfRef = any;

type Money = number;

interface BasicPersonInfo {
  id: number;
  name: string;
  age: number | null;
}

interface EmbeddedBasicInfo extends BasicPersonInfo {
  extra_field: string;
}

interface AnonymousEmbeddedBasic extends BasicPersonInfo {
  score: number;
}

interface UserAccount {
  id: string;
  email: string;
  status: number;
  created_at: string;
  updated_at: string;
  profile: UserProfile | null;
  permissions: string[];
  metadata: { [key: string]: any };
  Password: string;
  internal: boolean;
}

interface UserProfile {
  nickname: string;
  website: string;
  preferences: { [key: string]: string };
  avatar: Uint8Array;
}

interface UserCache {
  items: { [key: string]: UserAccount | null[] };
  ttl_seconds: number;
}

interface Result<T> {
  data: T;
  error: string;
}

interface Pair<K, V> {
  key: K;
  value: V;
}

interface Page<T> extends Result<T> {
  items: Pair<string, T>[];
  next: number | null;
}

interface Invoice {
  number: string;
  total: number;
  lines: InvoiceLine[];
  discount: number | null;
  extra: { [key: string]: number };
  address: { Street: string; City: string };
}

interface InvoiceLine {
  sku: string;
  qty: number;
}
'''


@pytest.mark.parametrize(
    "tag, expected",
    [
        ('json:"name"', "name"),
        ('json:"name,omitempty"', "name"),
        ('json:"-"', ""),
        ('json:"-,"', "-"),
        ('json:""', ""),
        ('json:",omitempty"', ""),
        ("", ""),
        ('xml:"name"', ""),
        ('db:"user_id" json:"id"', "id"),
        ('myjson:"wrong"', ""),
        ('json:"unterminated', ""),
    ],
)
def test_extract_tag_name(tag, expected):
    assert extract_tag_name(tag) == expected


def test_tag_helpers():
    assert tag_options('json:"name,omitempty,string"') == ["omitempty", "string"]
    assert tag_options('json:"name"') == []
    assert tag_options('yaml:"name,omitempty"', key="yaml") == ["omitempty"]
    assert is_ignored_tag('json:"-"')
    assert not is_ignored_tag('json:"-,"')
    assert not is_ignored_tag("")
    assert extract_tag_name('yaml:"other" json:"name"', key="yaml") == "other"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("name", "name"),
        ("$ref", "$ref"),
        ("_id", "_id"),
        ("created-at", '"created-at"'),
        ("1st", '"1st"'),
        ("-", '"-"'),
        ("with space", '"with space"'),
    ],
)
def test_format_property_name(name, expected):
    assert format_property_name(name) == expected


def test_generate_model(model_dir, config):
    data = parse_go_files(model_dir)
    generator = TypeScriptGenerator(data, config)
    assert generator.generate() == EXPECTED_MODEL_OUTPUT
    # same input, same bytes
    assert TypeScriptGenerator(data, config).generate() == EXPECTED_MODEL_OUTPUT


def test_ignored_field_warns(model_dir, config, caplog):
    data = parse_go_files(model_dir)
    with caplog.at_level(logging.WARNING):
        TypeScriptGenerator(data, config).generate()
    assert any("UserAccount.Password" in r.getMessage() for r in caplog.records)


def test_skip_ignored_fields(config):
    config["emitter"]["skip_ignored_fields"] = True
    struct = StructInfo("Secret", fields=[
        FieldInfo("Token", "string", 'json:"-"'),
        FieldInfo("Dash", "string", 'json:"-,"'),
        FieldInfo("Name", "string"),
    ])
    text = TypeScriptGenerator(GoFileData(structs=[struct]), config).emit_struct(struct)
    assert text == 'interface Secret {\n  "-": string;\n  Name: string;\n}'


def test_export_and_optional(config):
    config["emitter"]["export"] = True
    config["emitter"]["optional_omitempty"] = True
    struct = StructInfo("User", fields=[
        FieldInfo("ID", "int", 'json:"id"'),
        FieldInfo("Nick", "*string", 'json:"nick,omitempty"'),
    ])
    alias = AliasInfo("UserID", "int")
    generator = TypeScriptGenerator(GoFileData(structs=[struct], aliases=[alias]), config)

    assert generator.emit_alias(alias) == "export type UserID = number;"
    assert generator.emit_struct(struct) == (
        "export interface User {\n"
        "  id: number;\n"
        "  nick?: string | null;\n"
        "}"
    )


def test_embedded_variants(config):
    base = StructInfo("Base", fields=[FieldInfo("ID", "int", 'json:"id"')])
    audit = StructInfo("Audit", fields=[FieldInfo("By", "string", 'json:"by"')])
    struct = StructInfo(
        "Doc",
        fields=[FieldInfo("Title", "string", 'json:"title"')],
        embedded=[
            FieldInfo("Base", "Base"),
            FieldInfo("Audit", "*Audit", 'json:"audit"'),
            FieldInfo("Time", "time.Time"),
        ],
    )
    data = GoFileData(structs=[base, audit, struct])
    text = TypeScriptGenerator(data, config).emit_struct(struct)
    assert text == (
        "interface Doc extends Base {\n"
        "  audit: Audit | null;\n"
        "  title: string;\n"
        "}"
    )


def test_generic_struct_with_type_args(config):
    box = StructInfo("Box", fields=[FieldInfo("Items", "[]T", 'json:"items"')], type_params=["T"])
    generator = TypeScriptGenerator(GoFileData(structs=[box]), config)
    assert generator.emit_struct(box) == "interface Box<T> {\n  items: T[];\n}"
    assert generator.emit_struct(box, ["string"]) == "interface Box<T> {\n  items: string[];\n}"


def test_duplicate_aliases_and_unknown_types(config):
    config["emitter"]["banner"] = ""
    aliases = [
        AliasInfo("ID", "string", location="a.go:3"),
        AliasInfo("ID", "int", location="b.go:3"),
        AliasInfo("Box", "[]T", type_params=["T"]),
    ]
    struct = StructInfo("Odd", fields=[
        FieldInfo("Ch", ""),
        FieldInfo("Ext", "pkg.Thing"),
        FieldInfo("Mystery", "SomethingElse"),
    ])
    text = TypeScriptGenerator(GoFileData(structs=[struct], aliases=aliases), config).generate()
    assert text == (
        "type ID = string;\n\n"
        "type Box<T> = T[];\n\n"
        "interface Odd {\n"
        "  Ch: any;\n"
        "  Ext: any;\n"
        "  Mystery: SomethingElse;\n"
        "}\n"
    )


def test_empty_input(config):
    text = TypeScriptGenerator(GoFileData(), config).generate()
    assert text == "// Code generated by go2ts. DO NOT EDIT.\n"


def test_type_overrides(config):
    config["types"]["overrides"] = {"time.Time": "Date"}
    config["mapper"]["parenthesize_union_elements"] = True
    struct = StructInfo("Event", fields=[
        FieldInfo("At", "time.Time", 'json:"at"'),
        FieldInfo("Tags", "[]*string", 'json:"tags"'),
    ])
    text = TypeScriptGenerator(GoFileData(structs=[struct]), config).emit_struct(struct)
    assert text == "interface Event {\n  at: Date;\n  tags: (string | null)[];\n}"


def test_write(model_dir, config, tmp_path):
    data = parse_go_files(model_dir)
    output = tmp_path / "types.ts"
    output.write_text("stale", encoding="utf-8")

    text = generate_typescript(data, output, config)
    assert text == EXPECTED_MODEL_OUTPUT
    assert output.read_text(encoding="utf-8") == EXPECTED_MODEL_OUTPUT
    # no temporary files left behind
    assert os.listdir(tmp_path) == ["types.ts"]


def test_write_not_atomic(config, tmp_path):
    config["general"]["atomic_write"] = False
    output = tmp_path / "plain.ts"
    TypeScriptGenerator(GoFileData(), config).write(output)
    assert output.read_text(encoding="utf-8") == "// Code generated by go2ts. DO NOT EDIT.\n"


@pytest.mark.parametrize("atomic", [True, False])
def test_write_missing_parent(config, tmp_path, atomic):
    output = tmp_path / "missing" / "types.ts"
    with pytest.raises(OutputError) as exc_info:
        TypeScriptGenerator(GoFileData(), config).write(output, atomic=atomic)
    assert exc_info.value.path == str(output)
    assert not (tmp_path / "missing").exists()
