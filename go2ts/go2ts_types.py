from dataclasses import dataclass, field


@dataclass
class ConvertResult:
    input_dir: str
    output_file: str
    files: list[str] = field(default_factory=list)
    struct_count: int = 0
    alias_count: int = 0
    text: str = ""
    formatted: bool = False
