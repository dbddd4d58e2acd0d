import argparse
from pathlib import Path

import uvicorn

from quotebook.config import Settings


def main(argv: list[str] | None = None) -> None:
    defaults = Settings()
    parser = argparse.ArgumentParser(prog="quotebook", description="Serve the quote board")
    parser.add_argument("-f", dest="quotes_folder", type=Path, default=defaults.quotes_folder, help="where to store the quotes")
    parser.add_argument("-p", dest="password", default=defaults.password, help="password")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    args = parser.parse_args(argv)

    config = defaults.model_copy(update=vars(args))

    from quotebook.main import create_app

    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
