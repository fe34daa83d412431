"""
Synchronous signals. Receivers are held through weak references, so
connecting to a signal never keeps the receiver alive.
"""
from __future__ import annotations

import inspect
import weakref
from collections.abc import Callable
from typing import Any
from typing import cast
from typing import Generic
from typing import ParamSpec

P = ParamSpec("P")


def make_weak_ref(obj: Any) -> weakref.ReferenceType:
    """
    weakref.ref for functions, weakref.WeakMethod for bound methods.
    A plain ref to a bound method would die immediately.
    """
    if inspect.ismethod(obj):
        return cast(weakref.ref, weakref.WeakMethod(obj))
    return weakref.ref(obj)


class _SyncSignal(Generic[P]):
    def __init__(self) -> None:
        self.receivers: list[weakref.ref[Callable]] = []

    def connect(self, receiver: Callable[P, None]) -> None:
        assert not inspect.iscoroutinefunction(receiver)
        self.receivers.append(make_weak_ref(receiver))

    def disconnect(self, receiver: Callable[P, None]) -> None:
        self.receivers = [r for r in self.receivers if r() != receiver]

    def send(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """
        Call all live receivers in connection order. Exceptions raised by a
        receiver propagate to the sender.
        """
        for ref in list(self.receivers):
            receiver = ref()
            if receiver is None:
                continue
            ret = receiver(*args, **kwargs)
            assert not inspect.isawaitable(ret)
        self.receivers = [r for r in self.receivers if r() is not None]


# noinspection PyPep8Naming
def SyncSignal(receiver_spec: Callable[P, None]) -> _SyncSignal[P]:
    """
    Create a signal. receiver_spec only documents (and type-checks) the
    signature receivers must have:

        changed = SyncSignal(lambda updated: None)
        changed.connect(on_change)
        changed.send(updated={"redirect_cooldown"})
    """
    return cast(_SyncSignal[P], _SyncSignal())
