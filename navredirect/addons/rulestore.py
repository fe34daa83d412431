from __future__ import annotations

import logging
from typing import Optional

from navredirect import ctx
from navredirect import exceptions
from navredirect import rules
from navredirect import store

logger = logging.getLogger(__name__)


class RuleStore:
    """
    Gives other addons access to the current rule collection.

    By default, rules are kept in memory. Setting rules_file switches to a
    file-backed store.
    """

    def __init__(self, default_store: store.Store | None = None) -> None:
        self.default_store = default_store or store.MemoryStore()
        self.store: store.Store = self.default_store

    def load(self, loader):
        loader.add_option(
            "rules_file",
            Optional[str],
            None,
            """
            Read redirect rules from a YAML or JSON file. The file is
            re-read for every navigation, so edits take effect immediately.
            """,
        )
        loader.add_option(
            "rules_key",
            str,
            rules.RULES_KEY,
            "Store key under which the redirect rule collection is kept.",
        )

    def configure(self, updated):
        if "rules_key" in updated and not ctx.options.rules_key:
            raise exceptions.OptionsError("rules_key must not be empty.")
        if "rules_file" in updated:
            if ctx.options.rules_file:
                self.store = store.FileStore(ctx.options.rules_file)
            else:
                self.store = self.default_store

    async def get_rules(self) -> list[rules.Rule]:
        """
        All rules, in order. Raises StoreError if the store cannot be read.
        """
        data = await self.store.get(ctx.options.rules_key, [])
        if not isinstance(data, (list, tuple)):
            raise exceptions.StoreError(
                f"{ctx.options.rules_key} is not a sequence of rules."
            )
        return rules.parse_rules(data)

    async def set_rules(self, rule_list: list[rules.Rule]) -> None:
        await self.store.set(ctx.options.rules_key, [r.get_state() for r in rule_list])

    async def enabled_rules(self) -> list[rules.Rule]:
        """
        The enabled rules, in order. Never raises: if the store cannot be
        read, there are no rules.
        """
        try:
            rule_list = await self.get_rules()
        except Exception as e:
            logger.warning(f"Cannot load redirect rules: {e}")
            return []
        return [r for r in rule_list if r.enabled]
