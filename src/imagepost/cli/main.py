import argparse
import logging
import sys

import uvicorn

from imagepost.exceptions import ConfigurationError
from imagepost.logging_config import configure_logging
from imagepost.settings import Settings
from imagepost.tracing import configure_tracing

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Image post upload gateway backed by S3")
    parser.add_argument("--bucket", help="S3 bucket name (falls back to BUCKET_NAME)")
    parser.add_argument("--host", help="Host interface to bind")
    parser.add_argument("--port", type=int, help="Host port to bind (default 8080)")
    parser.add_argument(
        "--caption-layout",
        choices=["embedded", "sibling"],
        help="Fold the caption into the key or store it as post.txt",
    )
    parser.add_argument(
        "--max-caption-length",
        type=int,
        help="Caption length cap in characters, 0 disables it (default 256)",
    )
    parser.add_argument(
        "--require-caption",
        action="store_true",
        default=None,
        help="Reject posts without a caption",
    )
    return parser


def load_settings(argv=None) -> Settings:
    args = build_parser().parse_args(argv)
    overrides = {
        "bucket": args.bucket,
        "host": args.host,
        "port": args.port,
        "caption_layout": args.caption_layout,
        "require_caption": args.require_caption,
        "max_caption_length": args.max_caption_length,
    }
    return Settings.from_env(**overrides)


def main(argv=None):
    try:
        settings = load_settings(argv)
    except ConfigurationError as exc:
        configure_logging()
        logger.error("Startup aborted: %s", exc.message)
        sys.exit(1)

    configure_logging(settings.log_level)
    configure_tracing()

    from imagepost.main import create_app

    app = create_app(settings)
    logger.info("service started: %s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
