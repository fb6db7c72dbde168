from .generator import (TypeScriptGenerator, extract_tag_name,
                        format_property_name, generate_typescript,
                        is_ignored_tag, tag_options)

__all__ = [
    'TypeScriptGenerator',
    'extract_tag_name',
    'format_property_name',
    'generate_typescript',
    'is_ignored_tag',
    'tag_options',
]
