import asyncio
import logging

from navredirect import ctx
from navredirect import master
from navredirect import options
from navredirect import tabs
from navredirect.test import tevents


class Recorder:
    def __init__(self):
        self.events = []

    def running(self):
        self.events.append("running")

    def navigation_completed(self, event):
        self.events.append(("navigation", event.tab_id, event.url))

    def tab_removed(self, tab_id):
        self.events.append(("removed", tab_id))

    def done(self):
        self.events.append("done")


async def test_entry_points():
    m = master.Master(options.Options(), tabs=tabs.RecordingTabs())
    r = Recorder()
    m.addons.add(r)
    assert ctx.master is m
    assert ctx.options is m.options

    await m.navigation_completed(tevents.tnavigation(tab_id=2, url="https://a.com/"))
    await m.tab_removed(2)
    assert r.events == [("navigation", 2, "https://a.com/"), ("removed", 2)]


async def test_run_and_shutdown():
    m = master.Master(None)
    assert isinstance(m.tabs, tabs.LoggingTabs)
    r = Recorder()
    m.addons.add(r)
    task = asyncio.create_task(m.run())
    await asyncio.sleep(0)
    m.shutdown()
    await asyncio.wait_for(task, 1)
    assert r.events == ["running", "done"]


async def test_termlog(capsys):
    logging.getLogger().setLevel(logging.DEBUG)
    m = master.Master(None, with_termlog=True)
    logging.info("hello from master")
    await m.done()
    out, _ = capsys.readouterr()
    assert "hello from master" in out


async def test_asyncio_exception_handler(caplog):
    m = master.Master(None)
    m._asyncio_exception_handler(None, {"message": "oops"})
    assert "Unhandled asyncio error" in caplog.text
    try:
        raise ValueError("task failure")
    except ValueError as e:
        m._asyncio_exception_handler(None, {"exception": e})
    assert "Unhandled error in task." in caplog.text
