"""
The addon chain. Hooks are dispatched to addons by name, in chain order.
"""
import contextlib
import inspect
import logging
import sys
from collections.abc import Iterator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from navredirect import exceptions
from navredirect import hooks

logger = logging.getLogger(__name__)


def _get_name(addon) -> str:
    return getattr(addon, "name", type(addon).__name__.lower())


def _strip_dispatch_frames(tb):
    """
    Drop the traceback frames up to and including our own dispatch
    functions, so errors point at the addon.
    """
    start = tb
    while tb is not None:
        if tb.tb_frame.f_code.co_name in ("invoke_addon", "invoke_addon_sync"):
            start = tb.tb_next
        tb = tb.tb_next
    return start


@contextlib.contextmanager
def safecall():
    """
    Log exceptions raised by an addon instead of propagating them.
    AddonHalt and OptionsError still propagate, the caller handles those.
    """
    try:
        yield
    except (exceptions.AddonHalt, exceptions.OptionsError):
        raise
    except Exception as e:
        tb = _strip_dispatch_frames(sys.exc_info()[2]) or e.__traceback__
        logger.error(f"Addon error: {e}", exc_info=(type(e), e, tb))


class Loader:
    """
    Passed to an addon's load event, lets the addon declare its options.
    """

    def __init__(self, master):
        self.master = master

    def add_option(
        self,
        name: str,
        typespec: type | object,
        default: Any,
        help: str,
        choices: Sequence[str] | None = None,
    ) -> None:
        """
        Declare an option. The help text is a single paragraph and should
        not mention the type, which is added by tools that show it.
        """
        assert not isinstance(choices, str)
        existing = self.master.options._options.get(name)
        if existing is not None:
            if (existing.typespec, existing.default, existing.help, existing.choices) == (
                typespec,
                default,
                " ".join(help.split()),
                choices,
            ):
                return
            logger.warning(f"Over-riding existing option {name}")
        self.master.options.add_option(name, typespec, default, help, choices)


def traverse(chain) -> Iterator:
    """
    Yield every addon in the chain, followed by its sub-addons.
    """
    for addon in chain:
        yield addon
        yield from traverse(getattr(addon, "addons", []))


@dataclass
class LoadHook(hooks.Hook):
    """
    Called once when an addon is added. Addons declare their options
    on the loader here.
    """

    loader: Loader


class AddonManager:
    def __init__(self, master):
        self.lookup: dict[str, Any] = {}
        self.chain: list = []
        self.master = master
        master.options.changed.connect(self._configure_all)

    def _configure_all(self, updated):
        self.trigger(hooks.ConfigureHook(updated))

    def clear(self):
        """
        Send done to every addon and empty the chain.
        """
        for addon in self.chain:
            self.invoke_addon_sync(addon, hooks.DoneHook())
        self.lookup = {}
        self.chain = []

    def get(self, name):
        """
        Look up an addon by its name attribute, or its lower-cased class
        name if it has none.
        """
        return self.lookup.get(name)

    def register(self, addon):
        """
        Load an addon and its sub-addons and make them available through
        get(), without putting the addon into the chain.
        """
        names = [_get_name(a) for a in traverse([addon])]
        for name in names:
            if name in self.lookup:
                raise exceptions.AddonManagerError(
                    f"An addon called '{name}' already exists."
                )
        self.invoke_addon_sync(addon, LoadHook(Loader(self.master)))
        for a in traverse([addon]):
            self.lookup[_get_name(a)] = a
        self.master.options.process_deferred()
        return addon

    def add(self, *addons):
        """
        Register addons and append them to the chain.
        """
        for addon in addons:
            self.chain.append(self.register(addon))

    def remove(self, addon):
        """
        Remove an addon and its sub-addons, then send it done.
        """
        for a in traverse([addon]):
            name = _get_name(a)
            if name not in self.lookup:
                raise exceptions.AddonManagerError(f"No such addon: {name}")
            del self.lookup[name]
            self.chain = [x for x in self.chain if x is not a]
        self.invoke_addon_sync(addon, hooks.DoneHook())

    def __len__(self):
        return len(self.chain)

    def __str__(self):
        return ", ".join(_get_name(a) for a in self.chain)

    def __contains__(self, addon):
        return _get_name(addon) in self.lookup

    def _iter_hooks(self, addon, event: hooks.Hook):
        """
        Yield (addon, handler) for the event across an addon and its children.
        """
        assert isinstance(event, hooks.Hook)
        for a in traverse([addon]):
            handler = getattr(a, event.name, None)
            if handler is None or inspect.ismodule(handler):
                # a module imported under a hook's name is not a handler
                continue
            if not callable(handler):
                raise exceptions.AddonManagerError(
                    f"Addon handler {event.name} ({a}) not callable"
                )
            yield a, handler

    async def invoke_addon(self, addon, event: hooks.Hook):
        """
        Call an event's handlers on an addon, awaiting the async ones.
        """
        for _, handler in self._iter_hooks(addon, event):
            ret = handler(*event.args())
            if inspect.isawaitable(ret):
                await ret

    def invoke_addon_sync(self, addon, event: hooks.Hook):
        """
        Call an event's handlers on an addon. Async handlers are an error.
        """
        for a, handler in self._iter_hooks(addon, event):
            if inspect.iscoroutinefunction(handler):
                raise exceptions.AddonManagerError(
                    f"Async handler {event.name} ({a}) cannot be called from sync context"
                )
            handler(*event.args())

    async def trigger_event(self, event: hooks.Hook):
        """
        Dispatch an event to the whole chain. An addon raising AddonHalt
        stops the event from reaching the addons after it.
        """
        for addon in self.chain:
            try:
                with safecall():
                    await self.invoke_addon(addon, event)
            except exceptions.AddonHalt:
                return

    def trigger(self, event: hooks.Hook):
        """
        Like trigger_event, for events whose handlers are all sync.
        """
        for addon in self.chain:
            try:
                with safecall():
                    self.invoke_addon_sync(addon, event)
            except exceptions.AddonHalt:
                return
