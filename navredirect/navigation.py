"""
Events delivered by the browser platform, and the hooks they are dispatched as.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from navredirect import hooks

TOP_LEVEL_FRAME = 0
"""Frame id of a tab's main frame. Sub-frames have positive ids."""

HTTP_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class NavigationEvent:
    """A completed frame navigation."""

    tab_id: int
    url: str
    frame_id: int = TOP_LEVEL_FRAME

    @property
    def is_top_level(self) -> bool:
        return self.frame_id == TOP_LEVEL_FRAME

    @property
    def is_http(self) -> bool:
        """
        True for http(s) URLs. Internal browser pages, extension pages
        and the like are never redirected.
        """
        return self.url.lower().startswith(HTTP_SCHEMES)

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> NavigationEvent:
        try:
            tab_id = state["tabId"]
            url = state["url"]
        except KeyError as e:
            raise ValueError(f"Navigation event is missing {e.args[0]!r}") from e
        frame_id = state.get("frameId", TOP_LEVEL_FRAME)
        if not isinstance(tab_id, int) or not isinstance(frame_id, int):
            raise ValueError("tabId and frameId must be integers")
        if not isinstance(url, str):
            raise ValueError("url must be a string")
        return cls(tab_id=tab_id, url=url, frame_id=frame_id)

    def get_state(self) -> dict[str, Any]:
        return {"tabId": self.tab_id, "url": self.url, "frameId": self.frame_id}


@dataclass
class NavigationCompletedHook(hooks.Hook):
    """
    A navigation has completed in some frame of a tab. This is called
    for every frame, addons filter out the ones they are not interested in.
    """

    event: NavigationEvent


@dataclass
class TabRemovedHook(hooks.Hook):
    """
    A tab has been closed. No further events will be delivered for it.
    """

    tab_id: int
