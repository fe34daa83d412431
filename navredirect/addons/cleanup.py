import logging

from navredirect import ctx
from navredirect import exceptions

logger = logging.getLogger(__name__)

CLEANUP_ALARM = "redirectCleanup"
CLEANUP_INTERVAL = 300


class Cleanup:
    """
    Periodically evict expired loop guard entries, so that tabs which are
    redirected once and never navigate again are not remembered forever.
    """

    def __init__(self) -> None:
        self.scheduled = False

    def load(self, loader):
        loader.add_option(
            "cleanup_interval",
            int,
            CLEANUP_INTERVAL,
            "Interval in seconds at which expired loop guard entries are evicted.",
        )

    def configure(self, updated):
        if "cleanup_interval" in updated:
            if ctx.options.cleanup_interval <= 0:
                raise exceptions.OptionsError(
                    f"cleanup_interval must be positive, not {ctx.options.cleanup_interval}"
                )
            if self.scheduled:
                self.schedule()

    def schedule(self) -> None:
        ctx.master.addons.get("alarms").create(
            CLEANUP_ALARM, ctx.options.cleanup_interval
        )
        self.scheduled = True

    def running(self):
        self.schedule()

    def alarm(self, alarm):
        if alarm.name != CLEANUP_ALARM:
            return
        evicted = ctx.master.addons.get("loopguard").sweep()
        if evicted:
            logger.debug(f"Evicted {evicted} expired loop guard entries.")

    def done(self):
        self.scheduled = False
