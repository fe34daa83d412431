import asyncio
import os
import time
from collections.abc import Coroutine
from collections.abc import Iterator
from contextlib import contextmanager

# Fire-and-forget tasks, referenced here until they are done.
_running_tasks: set[asyncio.Task] = set()


def create_task(
    coro: Coroutine,
    *,
    name: str,
    keep_ref: bool,
) -> asyncio.Task:
    """
    `asyncio.create_task` with a descriptive name.

    The event loop only holds weak references to tasks. Pass keep_ref for
    tasks nobody awaits, or they may be garbage collected while pending.
    """
    task = asyncio.create_task(coro)
    set_task_debug_info(task, name=name)
    if keep_ref and not task.done():
        _running_tasks.add(task)
        task.add_done_callback(_running_tasks.discard)
    return task


def set_task_debug_info(task: asyncio.Task, *, name: str) -> None:
    """Name a task and note its creation time. Under pytest, the name includes the test."""
    task.created = time.time()  # type: ignore
    if test := os.environ.get("PYTEST_CURRENT_TEST"):
        name = f"{name} [created in {test}]"
    task.set_name(name)


def task_repr(task: asyncio.Task) -> str:
    created: float = getattr(task, "created", 0)
    if not created:
        return task.get_name()
    return f"{task.get_name()} (age: {time.time() - created:.0f}s)"


@contextmanager
def install_exception_handler(handler) -> Iterator[None]:
    """Use handler as the running loop's exception handler within the block."""
    loop = asyncio.get_running_loop()
    previous = loop.get_exception_handler()
    loop.set_exception_handler(handler)
    try:
        yield
    finally:
        loop.set_exception_handler(previous)
