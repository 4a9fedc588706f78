import logging
import sys

import uvicorn

from alias_proxy.config import load_config, parse_address
from alias_proxy.errors import ConfigLoadError
from alias_proxy.server import create_app
from alias_proxy.vars import CONFIG_PATH, LOG_LEVEL

logger = logging.getLogger("uvicorn.error")


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL.upper())
    try:
        config = load_config(CONFIG_PATH)
        host, port = parse_address(config.settings.address)
    except ConfigLoadError as e:
        logger.critical(f"Failed to load config: {e}")
        sys.exit(1)

    logger.info(f"Server is ready to running at http://{config.settings.address}")
    logger.info("Proxies sites: ")
    for rule in config.host_rules:
        logger.info(rule.alias)

    uvicorn.run(create_app(config), host=host, port=port, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
