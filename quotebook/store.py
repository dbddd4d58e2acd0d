"""One JSON file per quote in a folder."""

import json
import logging
from datetime import datetime
from pathlib import Path

from quotebook.models import Quote

logger = logging.getLogger(__name__)

FILENAME_FORMAT = "%Y-%m-%d_%H-%M-%S"


def quote_to_dict(quote: Quote) -> dict:
    return {
        "Time": quote.time.isoformat() if quote.time else None,
        "WhoSaidTheSillyThing": quote.who_said,
        "WhatSillyThingDidTheySay": quote.what_said,
    }


def quote_from_dict(data: dict) -> Quote:
    raw_time = data.get("Time")
    return Quote(
        time=datetime.fromisoformat(raw_time) if raw_time else None,
        who_said=data.get("WhoSaidTheSillyThing", ""),
        what_said=data.get("WhatSillyThingDidTheySay", ""),
    )


class QuoteStore:
    def __init__(self, folder: Path | str):
        self.folder = Path(folder)

    def ensure_folder(self) -> Path:
        self.folder.mkdir(parents=True, exist_ok=True)
        return self.folder

    def _path_for(self, quote: Quote) -> Path:
        stem = quote.time.strftime(FILENAME_FORMAT)
        path = self.folder / f"{stem}.json"
        n = 1
        while path.exists():
            path = self.folder / f"{stem}-{n}.json"
            n += 1
        return path

    def save(self, quote: Quote) -> Path:
        """Write ``quote`` to a new file named after its timestamp and return the path."""
        if quote.time is None:
            raise ValueError("quote has no time set")
        self.ensure_folder()
        path = self._path_for(quote)
        with path.open("w", encoding="utf-8") as f:
            json.dump(quote_to_dict(quote), f, indent=4, ensure_ascii=False)
            f.write("\n")
        logger.info(f"Saved quote to {path.name}")
        return path

    def read(self, name: str) -> Quote:
        path = self.folder / name
        with path.open(encoding="utf-8") as f:
            return quote_from_dict(json.load(f))

    def list(self) -> list[Quote]:
        """All stored quotes, newest first."""
        quotes = [self.read(p.name) for p in self.folder.iterdir() if p.is_file() and p.suffix == ".json"]
        quotes.sort(key=lambda q: q.time.timestamp() if q.time else float("-inf"), reverse=True)
        return quotes
