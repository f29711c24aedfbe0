"""Usage examples for hook pages that lack one."""

from __future__ import annotations

import re

from ..models import HookRecord

EXAMPLE_HEADING = "## Usage Example"
SINCE_HEADING = "### Since"


def has_example(markdown: str) -> bool:
    return EXAMPLE_HEADING in markdown


def example_code(hook: HookRecord) -> str:
    """PHP snippet registering a callback for ``hook``."""
    if hook.kind == "action":
        return _action_code(hook)
    return _filter_code(hook)


def example_block(hook: HookRecord) -> str:
    return f"{EXAMPLE_HEADING}\n\n```php\n{example_code(hook)}\n```\n\n"


def insert_example(markdown: str, hook: HookRecord) -> str:
    """Return ``markdown`` with an example before the Since section.

    Pages that already have an example are returned unchanged.
    """
    if has_example(markdown):
        return markdown
    block = example_block(hook)
    position = markdown.find(SINCE_HEADING)
    if position == -1:
        return markdown.rstrip() + "\n\n" + block.rstrip() + "\n"
    return markdown[:position] + block + markdown[position:]


def _callback_name(hook: HookRecord, suffix: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "_", hook.name, flags=re.IGNORECASE)
    return f"my_custom_{slug}_{suffix}"


def _registration_args(hook: HookRecord) -> str:
    count = len(hook.parameters)
    return f", 10, {count}" if count else ""


def _signature(hook: HookRecord) -> str:
    return ", ".join(f"${param.name}" for param in hook.parameters)


def _param_doc(hook: HookRecord) -> list[str]:
    return [f" * @param {param.type} ${param.name} {param.description}" for param in hook.parameters]


def _action_code(hook: HookRecord) -> str:
    callback = _callback_name(hook, "handler")
    doc = _param_doc(hook) or [" * @return void"]
    lines = [
        "/**",
        f" * Hook into {hook.name}",
        " *",
        *doc,
        " */",
        f"add_action( '{hook.name}', '{callback}'{_registration_args(hook)} );",
        "",
        f"function {callback}({_signature(hook)}) {{",
        "    // Your custom code here",
        "}",
    ]
    return "\n".join(lines)


def _filter_code(hook: HookRecord) -> str:
    callback = _callback_name(hook, "filter")
    if hook.parameters:
        first = hook.parameters[0]
        returned, returned_type = first.name, first.type
        doc = _param_doc(hook) + [f" * @return {returned_type} Modified {returned}"]
        signature = _signature(hook)
    else:
        returned = "value"
        doc = [" * @param mixed $value The value to filter", " * @return mixed Modified value"]
        signature = "$value"
    lines = [
        "/**",
        f" * Filter {hook.name}",
        " *",
        *doc,
        " */",
        f"add_filter( '{hook.name}', '{callback}'{_registration_args(hook)} );",
        "",
        f"function {callback}({signature}) {{",
        f"    // Modify ${returned} as needed",
        "",
        f"    return ${returned};",
        "}",
    ]
    return "\n".join(lines)


__all__ = ["EXAMPLE_HEADING", "example_block", "example_code", "has_example", "insert_example"]
