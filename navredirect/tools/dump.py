from navredirect import addons
from navredirect import master
from navredirect import options
from navredirect import tabs as navredirect_tabs
from navredirect.addons import readevents


class RedirectMaster(master.Master):
    """
    A master that replays recorded platform events and logs the tab
    commands the engine issues.
    """

    def __init__(
        self,
        options: options.Options,
        tabs: navredirect_tabs.Tabs | None = None,
        loop=None,
        with_termlog=True,
    ) -> None:
        super().__init__(options, tabs=tabs, event_loop=loop, with_termlog=with_termlog)
        self.addons.add(*addons.default_addons())
        self.addons.add(readevents.ReadEvents())
