from __future__ import annotations

import argparse
import logging

import uvicorn

from .config import Settings, settings
from .main import create_app

log = logging.getLogger(__name__)


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='dirshare', description='Browse and download a directory tree over HTTP.')
    parser.add_argument('--port', type=int, default=defaults.app_port, help='Server port')
    parser.add_argument('--root', default=defaults.serve_root, help='Root directory to serve files from')
    parser.add_argument('--host', default=defaults.app_host, help='Address to listen on')
    parser.add_argument('--log-level', default=defaults.log_level, help='Logging level')
    return parser


def settings_from_args(argv: list[str] | None = None, defaults: Settings | None = None) -> Settings:
    defaults = defaults or settings
    args = build_parser(defaults).parse_args(argv)
    return defaults.model_copy(
        update={
            'app_port': args.port,
            'serve_root': args.root,
            'app_host': args.host,
            'log_level': args.log_level,
        }
    )


def main(argv: list[str] | None = None) -> None:
    config = settings_from_args(argv)
    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app(config)
    log.info('Serving on %s:%d', config.app_host, config.app_port)
    uvicorn.run(app, host=config.app_host, port=config.app_port, log_level=config.log_level.lower())


if __name__ == '__main__':
    main()
