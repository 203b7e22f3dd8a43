"""Path parameter patterns.

Built-in converters for route path segments like ``{id:int}``. Captured
values stay strings; the converter only decides what a segment may look
like.
"""

# converter name -> regex for a single captured value
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}
