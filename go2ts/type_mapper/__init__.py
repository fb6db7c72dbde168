from .generics import is_generic_instantiation, split_generic_type
from .type_mapper import ANY, TypeMapper, is_alias_name

__all__ = [
    'ANY',
    'TypeMapper',
    'is_alias_name',
    'is_generic_instantiation',
    'split_generic_type',
]
