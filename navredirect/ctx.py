from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    import navredirect.master
    import navredirect.options

master: navredirect.master.Master
options: navredirect.options.Options
