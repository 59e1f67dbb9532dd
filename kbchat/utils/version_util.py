from importlib.metadata import PackageNotFoundError


def get_current_version() -> str:
    from importlib.metadata import version
    try:
        return str(version('kbchat'))
    except PackageNotFoundError:
        return "0.0.0.dev0"
