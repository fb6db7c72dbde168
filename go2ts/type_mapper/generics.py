import re

# an identifier directly followed by a bracketed parameter list, e.g. "Result[T, E]"
GENERIC_TYPE_PATTERN = re.compile(r"[a-zA-Z0-9_]+\[.*\]")


def is_generic_instantiation(go_type: str) -> bool:
    return GENERIC_TYPE_PATTERN.search(go_type) is not None


def split_generic_type(go_type: str) -> tuple[str, list[str] | None]:
    """Split ``"Result[T, Pair[K, V]]"`` into ``("Result", ["T", "Pair[K, V]"])``.

    Only commas at bracket depth zero separate parameters. Returns
    ``(go_type, None)`` when the text is not generic, including unbalanced
    input such as ``"Broken[Param"``. ``"Base[]"`` yields ``("Base", [""])``
    so callers can tell an empty argument list from no generics at all.
    """
    lidx = go_type.find("[")
    ridx = go_type.rfind("]")
    if lidx < 0 or ridx <= lidx:
        return go_type, None

    base = go_type[:lidx]
    param_str = go_type[lidx + 1:ridx]
    if param_str == "":
        return base, [""]

    parts: list[str] = []
    buf: list[str] = []
    depth = 0

    def flush():
        part = "".join(buf).strip()
        if part:
            parts.append(part)
        buf.clear()

    for ch in param_str:
        if ch == "," and depth == 0:
            flush()
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        buf.append(ch)

    flush()
    return base, parts
