"""Context assembly for a run."""

from typing import Any, Dict, Mapping


def assemble_context(persisted: Mapping[str, Any], overrides: Mapping[str, str]) -> Dict[str, Any]:
    """
    Merge a flow's persisted context with environment overrides.

    Overrides win on key collision. The result is a new dict owned by the
    run; the persisted mapping is not modified.
    """
    context = dict(persisted)
    context.update(overrides)
    return context
