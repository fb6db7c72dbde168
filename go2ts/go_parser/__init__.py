from .alias_info import AliasInfo
from .expr_normalizer import type_expr_to_string
from .go_parser import GoFileData, GoParser, iter_go_files, parse_go_files
from .struct_info import FieldInfo, StructInfo

__all__ = [
    'AliasInfo',
    'FieldInfo',
    'GoFileData',
    'GoParser',
    'StructInfo',
    'iter_go_files',
    'parse_go_files',
    'type_expr_to_string',
]
