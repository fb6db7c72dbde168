import shutil
from abc import ABC, abstractmethod


class ThirdParty(ABC):
    """An external command-line tool run over a generated file."""

    # executables that must be on PATH
    executables: tuple[str, ...] = ()

    def __init__(self, file_path):
        self.file_path = file_path

    @classmethod
    def check_requirements(cls) -> list[str]:
        return [name for name in cls.executables if not shutil.which(name)]

    @abstractmethod
    def format(self):
        pass
