from navredirect import navigation
from navredirect import rules
from navredirect.matcher import MatchType


def tnavigation(tab_id=1, url="https://example.com/", frame_id=0):
    return navigation.NavigationEvent(tab_id=tab_id, url=url, frame_id=frame_id)


def trule(
    name="rule",
    pattern="example.com",
    redirect_url="https://redirected.example.org/",
    match_type=MatchType.CONTAINS,
    enabled=True,
):
    return rules.Rule(
        name=name,
        match_type=match_type,
        match_pattern=pattern,
        redirect_url=redirect_url,
        enabled=enabled,
    )


class FakeClock:
    """A clock in epoch milliseconds that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms
