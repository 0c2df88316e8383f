from __future__ import annotations
import logging

from .client.api_client import StudioClient
from .client.console import Console
from .client.view_config import ViewConfig
from .config import ClientSettings
from .logging_config import configure_logging


def main() -> None:
    configure_logging(logging.WARNING)
    cfg = ClientSettings.load()

    client = StudioClient(cfg.api_base_url)
    console = Console(client, cfg.password, ViewConfig.from_settings(cfg))
    console.run()


if __name__ == "__main__":
    main()
