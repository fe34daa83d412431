import platform
import sys

VERSION = "1.0.0"


def dump_system_info() -> str:
    data = [
        f"navredirect: {VERSION}",
        f"Python:      {platform.python_version()}",
        f"Platform:    {platform.platform()}",
    ]
    return "\n".join(data)


if __name__ == "__main__":  # pragma: no cover
    print(VERSION, file=sys.stdout)
