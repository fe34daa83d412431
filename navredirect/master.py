import asyncio
import logging

from navredirect import addonmanager
from navredirect import ctx as navredirect_ctx
from navredirect import hooks
from navredirect import navigation
from navredirect import options
from navredirect import tabs as navredirect_tabs
from navredirect.addons import termlog
from navredirect.utils import asyncio_utils

logger = logging.getLogger(__name__)


class Master:
    """
    The master owns the event loop, the options and the addon chain. Event
    sources call into it, and it dispatches their events as hooks.

    All handlers run on a single event loop, one event at a time up to
    their next await.
    """

    event_loop: asyncio.AbstractEventLoop
    _termlog_addon: termlog.TermLog | None = None

    def __init__(
        self,
        opts: options.Options | None,
        tabs: navredirect_tabs.Tabs | None = None,
        event_loop: asyncio.AbstractEventLoop | None = None,
        with_termlog: bool = False,
    ):
        self.options: options.Options = opts or options.Options()
        self.tabs: navredirect_tabs.Tabs = tabs or navredirect_tabs.LoggingTabs()
        self.addons = addonmanager.AddonManager(self)

        if with_termlog:
            self._termlog_addon = termlog.TermLog()
            self.addons.add(self._termlog_addon)

        # Some addons spawn tasks during the initial configuration phase,
        # which happens before run().
        self.event_loop = event_loop or asyncio.get_running_loop()
        self.should_exit = asyncio.Event()
        navredirect_ctx.master = self
        navredirect_ctx.options = self.options

    async def run(self) -> None:
        with asyncio_utils.install_exception_handler(self._asyncio_exception_handler):
            self.should_exit.clear()
            try:
                await self.running()
                await self.should_exit.wait()
            finally:
                await self.done()

    def shutdown(self):
        """
        Shut down. This method is thread-safe.
        """
        self.event_loop.call_soon_threadsafe(self.should_exit.set)

    async def running(self) -> None:
        await self.addons.trigger_event(hooks.RunningHook())

    async def done(self) -> None:
        await self.addons.trigger_event(hooks.DoneHook())
        if self._termlog_addon is not None:
            self._termlog_addon.uninstall()

    async def navigation_completed(self, event: navigation.NavigationEvent) -> None:
        """
        Entry point for the platform's navigation event source.
        """
        await self.addons.trigger_event(navigation.NavigationCompletedHook(event))

    async def tab_removed(self, tab_id: int) -> None:
        """
        Entry point for the platform's tab lifecycle source.
        """
        await self.addons.trigger_event(navigation.TabRemovedHook(tab_id))

    def _asyncio_exception_handler(self, loop, context) -> None:
        try:
            exc: Exception = context["exception"]
        except KeyError:
            logger.error(f"Unhandled asyncio error: {context}")
        else:
            where = "task"
            if task := context.get("task"):
                where = f"task {asyncio_utils.task_repr(task)}"
            logger.error(
                f"Unhandled error in {where}.",
                exc_info=(type(exc), exc, exc.__traceback__),
            )
