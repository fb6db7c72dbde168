

class FieldInfo:
    def __init__(self, name, type_expr, tag=""):
        self.name: str = name
        self.type: str = type_expr
        self.tag: str = tag or ""

    def __eq__(self, other):
        if not isinstance(other, FieldInfo):
            return NotImplemented
        return (self.name, self.type, self.tag) == (other.name, other.type, other.tag)

    def __hash__(self):
        return hash((self.name, self.type, self.tag))

    def __repr__(self):
        return f"FieldInfo({self.name} {self.type})"


class StructInfo:
    def __init__(self, name, fields=None, type_params=None, embedded=None, location=""):
        self.name: str = name
        self.fields: list[FieldInfo] = fields if fields is not None else []
        self.type_params: list[str] = type_params if type_params is not None else []
        # anonymous fields; name is the implicit Go field name, type keeps any "*"
        self.embedded: list[FieldInfo] = embedded if embedded is not None else []
        self.location: str = location

    def get_field(self, name) -> FieldInfo | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def __hash__(self):
        return hash(self.name) + hash(self.location)

    def __eq__(self, other):
        if not isinstance(other, StructInfo):
            return NotImplemented
        return self.name == other.name and self.location == other.location

    def __repr__(self):
        return f"StructInfo({self.name})"
