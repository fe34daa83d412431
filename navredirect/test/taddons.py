import asyncio

import navredirect.master
import navredirect.options
from navredirect import hooks
from navredirect import tabs as navredirect_tabs
from navredirect.test import tevents


class context:
    """
    A context for testing addons, which sets up the navredirect.ctx module so
    handlers can run as they would within navredirect. The context also
    provides a number of helper methods for common testing scenarios.

    Tab commands are recorded in `.tabs.navigations`.
    """

    def __init__(self, *addons, options=None, tabs=None):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = asyncio.new_event_loop()

        options = options or navredirect.options.Options()
        self.tabs = tabs or navredirect_tabs.RecordingTabs()
        self.master = navredirect.master.Master(options, tabs=self.tabs, event_loop=loop)
        self.options = self.master.options

        for a in addons:
            self.master.addons.add(a)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False

    def configure(self, addon, **kwargs):
        """
        A helper for testing configure methods. Modifies the registered
        Options object with the given keyword arguments, then calls the
        configure method on the addon with the updated value.
        """
        if addon not in self.master.addons:
            self.master.addons.register(addon)
        with self.options.rollback(kwargs.keys(), reraise=True):
            if kwargs:
                self.options.update(**kwargs)
            else:
                self.master.addons.invoke_addon_sync(addon, hooks.ConfigureHook(set()))

    async def navigate(self, tab_id=1, url="https://example.com/", frame_id=0):
        """
        Deliver a navigation event through the whole addon chain, and give
        spawned tab commands a chance to run.
        """
        await self.master.navigation_completed(
            tevents.tnavigation(tab_id=tab_id, url=url, frame_id=frame_id)
        )
        await asyncio.sleep(0)
