import asyncio
import io
import logging

import pytest

from navredirect import exceptions
from navredirect import store
from navredirect.addons import loopguard
from navredirect.addons import readevents
from navredirect.addons import redirector
from navredirect.addons import rulestore
from navredirect.test import taddons
from navredirect.test import tevents

EVENTS = """\
# a redirect, and the navigation it causes
{"event": "navigation", "tabId": 1, "url": "https://example.com/"}
{"event": "navigation", "tabId": 1, "url": "https://redirected.example.org/"}

{"event": "navigation", "tabId": 2, "url": "https://example.com/ad", "frameId": 3}
{"event": "removed", "tabId": 1}
{"event": "navigation", "tabId": 1, "url": "https://example.com/again"}
{"event": "wait", "ms": 1}
"""


def make_context():
    s = store.MemoryStore({"redirectRules": [tevents.trule().get_state()]})
    rd = readevents.ReadEvents()
    tctx = taddons.context(
        loopguard.LoopGuard(), rulestore.RuleStore(s), redirector.Redirector(), rd
    )
    return tctx, rd


class TestReadEvents:
    async def test_load_events(self):
        tctx, rd = make_context()
        with tctx:
            cnt = await rd.load_events(io.StringIO(EVENTS))
            assert cnt == 6
            await tctx.tabs.wait_for(2)
            assert tctx.tabs.navigations == [
                (1, "https://redirected.example.org/"),
                (1, "https://redirected.example.org/"),
            ]

    @pytest.mark.parametrize(
        "line,err",
        [
            ("not json", "Line 1"),
            ("[1, 2]", "not a JSON object"),
            ('{"event": "explode"}', "Unknown event type"),
            ('{"event": "navigation", "url": "https://a.com/"}', "missing 'tabId'"),
            ('{"event": "removed", "tabId": "1"}', "tabId must be an integer"),
            ('{"event": "wait", "ms": -1}', "Invalid wait time"),
        ],
    )
    async def test_load_events_err(self, line, err):
        tctx, rd = make_context()
        with tctx:
            with pytest.raises(exceptions.EventReadException, match=err):
                await rd.load_events(io.StringIO(line))

    async def test_read_file(self, tmp_path, caplog_async):
        caplog_async.set_level(logging.INFO)
        p = tmp_path / "events.jsonl"
        p.write_text(EVENTS)
        tctx, rd = make_context()
        with tctx:
            tctx.configure(rd, rfile=str(p))
            rd.running()
            assert rd.reading()
            await caplog_async.await_log("Replayed 6 events")
            await asyncio.sleep(0)
            assert not rd.reading()
            assert tctx.master.should_exit.is_set()

    async def test_read_missing_file(self, tmp_path, caplog_async):
        tctx, rd = make_context()
        with tctx:
            tctx.configure(rd, rfile=str(tmp_path / "nonexistent"), keepserving=True)
            rd.running()
            await caplog_async.await_log("Failed to read")
            assert not tctx.master.should_exit.is_set()

    def test_no_rfile(self):
        tctx, rd = make_context()
        with tctx:
            rd.running()
            assert not rd.reading()
