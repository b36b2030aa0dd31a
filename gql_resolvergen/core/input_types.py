"""Distinct input types per owning type.

One input type may be reached through several fields and arguments of the
same owner, and through other input types. Each owner declares every input
it needs exactly once, in first-seen order.
"""

from .ir import IRInputType


def distinct_input_types(
    type_name: str,
    associations: dict[str, list[str]],
    registry: dict[str, IRInputType],
) -> list[str]:
    """Return the deduplicated input type names an owner must declare.

    Inputs referenced by other inputs' fields are included right after the
    input that references them (depth-first preorder).
    """
    seen: set[str] = set()
    ordered: list[str] = []

    def visit(input_name: str):
        if input_name in seen or input_name not in registry:
            return
        seen.add(input_name)
        ordered.append(input_name)
        for input_field in registry[input_name].fields:
            visit(input_field.type.name)

    for input_name in associations.get(type_name, []):
        visit(input_name)
    return ordered
