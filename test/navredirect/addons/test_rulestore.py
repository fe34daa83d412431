import pytest

from navredirect import exceptions
from navredirect import store
from navredirect.addons import rulestore
from navredirect.test import taddons
from navredirect.test import tevents


class BrokenStore(store.Store):
    async def get(self, key, default=None):
        raise exceptions.StoreError("storage is unavailable")


class TestRuleStore:
    async def test_memory(self):
        rs = rulestore.RuleStore()
        with taddons.context(rs):
            assert await rs.get_rules() == []
            r1 = tevents.trule(name="one")
            r2 = tevents.trule(name="two", enabled=False)
            await rs.set_rules([r1, r2])
            assert await rs.get_rules() == [r1, r2]
            assert await rs.enabled_rules() == [r1]

    async def test_rules_key(self):
        s = store.MemoryStore({"custom": [tevents.trule().get_state()]})
        rs = rulestore.RuleStore(s)
        with taddons.context(rs) as tctx:
            assert await rs.get_rules() == []
            tctx.configure(rs, rules_key="custom")
            assert await rs.get_rules() == [tevents.trule()]
            with pytest.raises(exceptions.OptionsError):
                tctx.configure(rs, rules_key="")

    async def test_rules_file(self, tmp_path):
        p = tmp_path / "rules.yaml"
        p.write_text(
            "redirectRules:\n"
            "  - name: one\n"
            "    matchType: wildcard\n"
            "    matchPattern: https://*.example.com/*\n"
            "    redirectUrl: https://example.org/\n"
            "    enabled: true\n"
            "  - name: two\n"
            "    matchType: contains\n"
            "    matchPattern: foo\n"
            "    redirectUrl: https://example.org/\n"
            "    enabled: false\n"
        )
        rs = rulestore.RuleStore()
        with taddons.context(rs) as tctx:
            tctx.configure(rs, rules_file=str(p))
            assert isinstance(rs.store, store.FileStore)
            rule_list = await rs.enabled_rules()
            assert [r.name for r in rule_list] == ["one"]

            tctx.configure(rs, rules_file=None)
            assert rs.store is rs.default_store

    async def test_store_failure(self, caplog):
        rs = rulestore.RuleStore(BrokenStore())
        with taddons.context(rs):
            with pytest.raises(exceptions.StoreError):
                await rs.get_rules()
            assert await rs.enabled_rules() == []
            assert "Cannot load redirect rules: storage is unavailable" in caplog.text

    async def test_not_a_sequence(self, caplog):
        rs = rulestore.RuleStore(store.MemoryStore({"redirectRules": "nope"}))
        with taddons.context(rs):
            assert await rs.enabled_rules() == []
            assert "not a sequence of rules" in caplog.text

    async def test_malformed_rules_skipped(self, caplog):
        s = store.MemoryStore(
            {"redirectRules": [{"name": "broken"}, tevents.trule(name="ok").get_state()]}
        )
        rs = rulestore.RuleStore(s)
        with taddons.context(rs):
            assert [r.name for r in await rs.enabled_rules()] == ["ok"]
