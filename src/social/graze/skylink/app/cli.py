import os
import logging
from logging.config import dictConfig
import json

import sentry_sdk

from social.graze.skylink.app.config import Settings


def configure_logging(settings: Settings | None = None):
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    if settings is None:
        settings = Settings()

    logging.basicConfig()
    logging.getLogger().setLevel(logging.DEBUG if settings.debug else logging.INFO)


def configure_sentry(settings: Settings):
    if settings.sentry_dsn is None:
        return
    sentry_sdk.init(dsn=settings.sentry_dsn)


def invoke():
    settings = Settings()
    configure_logging(settings)
    configure_sentry(settings)

    from social.graze.skylink.resolve.__main__ import main

    main()


if __name__ == "__main__":
    invoke()
