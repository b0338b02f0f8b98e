import platform
import sys
import logging

from quizmaster.constants import APP_NAME

log = logging.getLogger("quizmaster")


def startup_banner(
    *,
    provider: str,
    model: str,
    api: str,
    address: str,
    version: str,
    mode: str,
) -> None:
    python_ver = sys.version.split()[0]
    os_name = platform.system()

    rows = [
        ("CORE", f"{APP_NAME} v{version}"),
        ("ENV", mode),
        ("RUNTIME", f"Python {python_ver}"),
        ("HOST", os_name),
        ("PROVIDER", provider),
        ("AI-ENGINE", model),
        ("LINK", api),
        ("LISTEN", address),
    ]

    width = 44
    line = "─" * width

    log.info(line)
    log.info(" ?!? %s is starting", APP_NAME)
    log.info("")

    label_width = max(len(k) for k, _ in rows)

    for k, v in rows:
        log.info(f"{k.ljust(label_width)} : {v}")

    log.info(line)
