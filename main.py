from loguru import logger

from area_authz.cli import app


def main() -> None:
    logger.debug("area-authz CLI started")
    app()


if __name__ == "__main__":
    main()
