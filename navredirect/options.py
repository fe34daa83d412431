from navredirect import optmanager

CONF_DIR = "~/.navredirect"


class Options(optmanager.OptManager):
    def __init__(self, **kwargs) -> None:
        super().__init__()
        self.add_option(
            "confdir",
            str,
            CONF_DIR,
            "Location of the default navredirect configuration files.",
        )
        self.add_option(
            "redirects_enabled",
            bool,
            True,
            """
            Redirect matching top-level navigations. When disabled, navigation
            events are observed but never acted upon.
            """,
        )
        self.update(**kwargs)
