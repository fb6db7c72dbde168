

class AliasInfo:
    """A named non-struct type: ``type Name T`` or ``type Name = T``."""

    def __init__(self, name, underlying, type_params=None, location=""):
        self.name: str = name
        self.underlying: str = underlying
        self.type_params: list[str] = type_params if type_params is not None else []
        self.location: str = location

    def __hash__(self):
        return hash(self.name) + hash(self.location)

    def __eq__(self, other):
        if not isinstance(other, AliasInfo):
            return NotImplemented
        return self.name == other.name and self.location == other.location

    def __repr__(self):
        return f"AliasInfo({self.name} = {self.underlying})"
