import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import uvicorn

logger = logging.getLogger(__name__)

APP_MODULE = "golf_admin.main:app"
DEFAULT_PORT = 8000
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "info"
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    key_password: Optional[str] = None

    @property
    def https(self) -> bool:
        return bool(self.certfile and self.keyfile)

    def uvicorn_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"host": self.host, "port": self.port, "log_level": self.log_level}
        if self.https:
            options["ssl_certfile"] = self.certfile
            options["ssl_keyfile"] = self.keyfile
            if self.key_password:
                options["ssl_keyfile_password"] = self.key_password
        return options


def _first_port(*names: str) -> int:
    """First of ``names`` holding an integer; unparsable values are skipped with a warning."""
    for name in names:
        raw = os.getenv(name)
        if not raw:
            continue
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%s (not an integer)", name, raw)
    return DEFAULT_PORT


def load_server_config() -> ServerConfig:
    certfile = os.getenv("SSL_CERT_FILE") or None
    keyfile = os.getenv("SSL_KEY_FILE") or None
    if bool(certfile) != bool(keyfile):
        logger.warning("HTTPS needs both SSL_CERT_FILE and SSL_KEY_FILE; serving plain HTTP.")
        certfile = keyfile = None
    return ServerConfig(
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=_first_port("APP_PORT", "PORT"),
        log_level=os.getenv("UVICORN_LOG_LEVEL", "info").lower(),
        certfile=certfile,
        keyfile=keyfile,
        key_password=os.getenv("SSL_KEY_PASSWORD") or None,
    )


def main() -> None:
    config = load_server_config()
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)
    if config.https:
        logger.info("Serving golf admin over HTTPS with %s", config.certfile)
    uvicorn.run(APP_MODULE, **config.uvicorn_options())


if __name__ == "__main__":
    main()
