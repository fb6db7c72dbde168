from .errors import ExtractionError, Go2TSError, OutputError
from .go2ts import Go2TS
from .go2ts_types import ConvertResult


def convert(input_dir, output_file, **kwargs) -> ConvertResult:
    return Go2TS.convert(input_dir, output_file, **kwargs)


__all__ = [
    'ConvertResult',
    'ExtractionError',
    'Go2TS',
    'Go2TSError',
    'OutputError',
    'convert',
]
