"""Run the scorebook server: ``python -m scorebook.server``."""

import uvicorn

from scorebook.server.settings import ScorebookServerSettings


def main() -> None:  # pragma: no cover
    settings = ScorebookServerSettings()
    uvicorn.run(
        "scorebook.server.app:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
