"""
Reconciliation of managed shell variables against a .env mapping.

The names exported by the previous run travel in ENVTOOL_MANAGED_ENV_VARS.
Given that list and the freshly parsed .env mapping, reconcile() produces the
directives that move the shell from the old managed state to the new one:

1. Removal pass: unset every previously managed name that is no longer wanted
2. Export pass: export every desired name, sorted
3. Bookkeeping pass: export the new managed list for the next run

Names outside the old and new managed sets are never touched.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional


MANAGED_ENV_VARS_KEY = "ENVTOOL_MANAGED_ENV_VARS"
MANAGED_SEPARATOR = ","

# Same safe set as shlex.quote
_UNSAFE_CHARS = re.compile(r'[^\w@%+=:,./-]', re.ASCII)


class DirectiveType(Enum):
    """Shell directive kinds."""
    UNSET = "unset"
    EXPORT = "export"


@dataclass
class Directive:
    """A single shell directive. EXPORT values are already shell-quoted."""
    type: DirectiveType
    name: str
    value: Optional[str] = None

    def render(self) -> str:
        if self.type == DirectiveType.UNSET:
            return f"unset {self.name}"
        return f"export {self.name}={self.value}"


@dataclass
class Reconciliation:
    """
    Result of one reconciliation run.

    Attributes:
        directives: Ordered directives for the shell to evaluate
        managed: Sorted names managed once the directives are applied
    """
    directives: List[Directive] = field(default_factory=list)
    managed: List[str] = field(default_factory=list)

    @property
    def unset_names(self) -> List[str]:
        return [d.name for d in self.directives if d.type == DirectiveType.UNSET]

    @property
    def exported_names(self) -> List[str]:
        return [
            d.name for d in self.directives
            if d.type == DirectiveType.EXPORT and d.name != MANAGED_ENV_VARS_KEY
        ]

    def render(self) -> str:
        """Join directives into text for `eval`, without a trailing newline."""
        return "\n".join(d.render() for d in self.directives)


def parse_managed(raw: Optional[str]) -> List[str]:
    """
    Split a serialized managed set.

    Empty segments are dropped and repeated names keep their first position.

    Args:
        raw: Comma-joined names, or None when the variable is unset

    Returns:
        List of managed names in their serialized order
    """
    if not raw:
        return []

    names: List[str] = []
    for name in raw.split(MANAGED_SEPARATOR):
        if name and name not in names:
            names.append(name)
    return names


def serialize_managed(names: Iterable[str]) -> str:
    """Sorted, comma-joined form stored in ENVTOOL_MANAGED_ENV_VARS."""
    return MANAGED_SEPARATOR.join(sorted(names))


def quote_value(value: str) -> str:
    """
    Quote a value for a POSIX `export` directive.

    A value starting with a single quote is taken as already quoted and
    passed through. Values made only of safe characters stay bare. Anything
    else is single-quoted, with each embedded ' written as '\\''.

    Args:
        value: Raw value from the .env mapping

    Returns:
        Shell-safe representation of the value
    """
    if value.startswith("'"):
        return value
    if not value:
        return "''"
    if _UNSAFE_CHARS.search(value) is None:
        return value
    return "'" + value.replace("'", "'\\''") + "'"


def reconcile(previously_managed: Iterable[str], desired: Dict[str, str]) -> Reconciliation:
    """
    Compute the directives that bring the shell in line with `desired`.

    Args:
        previously_managed: Names exported by the previous run, in stored order
        desired: Freshly parsed .env mapping (may be empty)

    Returns:
        Reconciliation with the ordered directives and the new managed names
    """
    result = Reconciliation()

    seen = set()
    for name in previously_managed:
        if not name or name in desired or name in seen:
            continue
        seen.add(name)
        result.directives.append(Directive(DirectiveType.UNSET, name))

    keys = sorted(desired)
    for key in keys:
        result.directives.append(
            Directive(DirectiveType.EXPORT, key, quote_value(desired[key]))
        )

    # An empty mapping leaves the previous bookkeeping value in the shell.
    if keys:
        result.directives.append(
            Directive(DirectiveType.EXPORT, MANAGED_ENV_VARS_KEY, quote_value(serialize_managed(keys)))
        )

    result.managed = keys
    return result


def generate_export_commands(current_vars: Iterable[str], new_vars: Dict[str, str]) -> str:
    """
    Render the directives for a managed list and a .env mapping.

    Args:
        current_vars: Previously managed names
        new_vars: Desired key-value pairs

    Returns:
        Newline-joined shell directives
    """
    return reconcile(current_vars, new_vars).render()
