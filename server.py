import logging

import uvicorn

from config import ENV, HOST, LLM_PROVIDER, LOG_DIR, LOG_LEVEL, PORT
from quizmaster.constants import APP_VERSION
from quizmaster.utils.logger_setup import setup_logging
from quizmaster.utils.startup_banner import startup_banner

log = logging.getLogger("quizmaster")


def main() -> None:
    setup_logging(log_dir=LOG_DIR, console_level=LOG_LEVEL, file_level="DEBUG")

    from quizmaster.web.core.deps import provider_settings, requires_api_key

    base_url, model, api_key = provider_settings()
    if requires_api_key() and not api_key:
        log.warning(
            "AI_API_KEY missing in .env: generation requests will fail with 500"
        )

    startup_banner(
        provider=LLM_PROVIDER,
        model=model,
        api=base_url.replace("http://", "").replace("https://", ""),
        address=f"http://{HOST}:{PORT}",
        version=APP_VERSION,
        mode=ENV or "development",
    )

    uvicorn.run(
        "quizmaster.web.main:app",
        host=HOST,
        port=PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
