import logging

from navredirect import ctx
from navredirect import log
from navredirect import navigation
from navredirect import rules
from navredirect.utils import asyncio_utils

logger = logging.getLogger(__name__)


class Redirector:
    """
    Redirect top-level http(s) navigations that match a rule.

    For each navigation, the rules are loaded fresh and the first enabled
    rule that matches wins. Every failure along the way means "no redirect",
    the navigation then proceeds unmodified.
    """

    async def navigation_completed(self, event: navigation.NavigationEvent) -> None:
        if not ctx.options.redirects_enabled:
            return
        if not event.is_top_level or not event.is_http:
            return

        guard = ctx.master.addons.get("loopguard")
        if guard.is_suppressed(event.tab_id):
            logger.debug(
                f"Suppressed, recently redirected: {event.url}",
                extra={"tab_id": event.tab_id},
            )
            return

        rule_list = await ctx.master.addons.get("rulestore").enabled_rules()
        rule = rules.select_rule(rule_list, event.url)
        if rule is None:
            return

        # Another navigation on this tab may have redirected while we were
        # waiting for the rules.
        if guard.is_suppressed(event.tab_id):
            return

        logger.log(
            log.ALERT,
            f'Rule "{rule.name}" matched: {event.url} -> {rule.redirect_url}',
            extra={"tab_id": event.tab_id},
        )
        guard.record(event.tab_id, rule.redirect_url)
        asyncio_utils.create_task(
            self.navigate(event.tab_id, rule.redirect_url),
            name=f"navigate tab {event.tab_id}",
            keep_ref=True,
        )

    async def navigate(self, tab_id: int, url: str) -> None:
        try:
            await ctx.master.tabs.navigate(tab_id, url)
        except Exception as e:
            # The tab may have been closed in the meantime. The loop guard
            # entry expires on its own.
            logger.warning(
                f"Cannot navigate to {url}: {e}",
                extra={"tab_id": tab_id},
            )
