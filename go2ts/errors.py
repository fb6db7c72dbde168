class Go2TSError(Exception):
    """Base class for errors that abort a conversion run."""


class ExtractionError(Go2TSError):
    def __init__(self, path, message, line=None):
        self.path = str(path)
        self.line = line
        location = self.path if line is None else f"{self.path}:{line}"
        super().__init__(f"failed to parse Go files in {location!r}: {message}")


class OutputError(Go2TSError):
    def __init__(self, path, message):
        self.path = str(path)
        super().__init__(f"failed to generate TypeScript file {self.path!r}: {message}")
