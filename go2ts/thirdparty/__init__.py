from .prettier import Prettier
from .thirdparty import ThirdParty


def check_all_requirements() -> list[str]:
    result = []
    result.extend(Prettier.check_requirements())
    return result


__all__ = [
    'Prettier',
    'ThirdParty',
    'check_all_requirements',
]
