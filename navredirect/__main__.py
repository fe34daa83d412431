from navredirect.tools.main import navredirect

if __name__ == "__main__":  # pragma: no cover
    navredirect()
