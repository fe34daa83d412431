"""
Hooks are the events addons react to. Each hook is a dataclass, and its
fields are passed to the addon method of the same name.
"""
import re
import warnings
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import is_dataclass
from typing import Any
from typing import ClassVar


def _hook_name(cls: type) -> str:
    # NavigationCompletedHook -> navigation_completed
    base = cls.__name__.replace("Hook", "")
    return re.sub("(?!^)([A-Z]+)", r"_\1", base).lower()


class Hook:
    name: ClassVar[str]

    def args(self) -> list[Any]:
        """The handler arguments, in field order."""
        return [getattr(self, f.name) for f in fields(self)]  # type: ignore[arg-type]

    def __new__(cls, *args, **kwargs):
        if cls is Hook:
            raise TypeError("Hook may not be instantiated directly.")
        if not is_dataclass(cls):
            raise TypeError("Subclass is not a dataclass.")
        return super().__new__(cls)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("name") is None:
            cls.name = _hook_name(cls)
        if not cls.name:
            # abstract intermediate classes
            return
        if (other := all_hooks.get(cls.name)) is not None:
            warnings.warn(
                f"Two conflicting event classes for {cls.name}: {cls} and {other}",
                RuntimeWarning,
            )
        all_hooks[cls.name] = cls
        # Two events are never equal, even with equal fields.
        cls.__hash__ = object.__hash__  # type: ignore
        cls.__eq__ = object.__eq__  # type: ignore


all_hooks: dict[str, type[Hook]] = {}
"""All hook classes, by name."""


@dataclass
class ConfigureHook(Hook):
    """
    Called when configuration changes. The updated argument is a
    set-like object containing the keys of all changed options. Addons
    start out with default option values and only see changes here.
    """

    updated: set[str]


@dataclass
class DoneHook(Hook):
    """
    Called when the addon shuts down, either by being removed from
    the master, or when the master itself shuts down. This is the
    final event an addon sees.
    """


@dataclass
class RunningHook(Hook):
    """
    Called when the master is up and running. At this point all addons
    are loaded and all options are set.
    """
