from __future__ import annotations
import sys, platform, datetime

from mirrorc import __version__ as app_ver, __dev__ as is_dev

def _ensure_utf8_stdout() -> None:
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is None:
        return
    try:
        reconfigure(encoding="utf-8")
    except (ValueError, OSError):
        pass

def _get_versions() -> dict[str, str]:
    from importlib.metadata import version, PackageNotFoundError
    try:
        lark_ver = version("lark")
    except PackageNotFoundError:
        lark_ver = "unknown"

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": lark_ver,
    }

def print_banner(stream=None) -> None:
    stream = stream or sys.stdout
    if stream is sys.stdout:
        _ensure_utf8_stdout()
    v = _get_versions()
    today = datetime.date.today().isoformat()

    # Plain text when piped or redirected
    if getattr(stream, "isatty", lambda: False)():
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    dev_marker = " (dev)" if is_dev else ""
    print(
        f"{BOLD}mirrorc{RESET} • {v['app']}{dev_marker}\n"
        f"{DIM}Python {v['python']} • lark {v['lark']} • {today}{RESET}\n",
        file=stream,
    )
