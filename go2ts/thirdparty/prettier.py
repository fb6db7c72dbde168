from typing import override

from go2ts import utils

from .thirdparty import ThirdParty


class Prettier(ThirdParty):
    executables = ("prettier",)

    def __init__(self, file_path, timeout: float | None = None):
        super().__init__(file_path)
        self.timeout = timeout

    @override
    def format(self):
        cmd = ["prettier", "--write", "--parser", "typescript", str(self.file_path)]
        result = utils.run_command(cmd, timeout=self.timeout)
        if result.returncode != 0:
            raise OSError(f"prettier failed on {self.file_path}: {result.stderr.strip()}")
