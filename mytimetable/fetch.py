"""
Download a published timetable file into the local data directory.

Many departments publish the current timetable as an .xlsx or .csv link.
This fetches it once and caches it, so all other commands work offline.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import requests

from mytimetable.parse import TimetableSourceError, default_data_dir


logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "timetable.xlsx"
_KNOWN_SUFFIXES = (".xlsx", ".xlsm", ".xls", ".csv")


def _filename_from_url(url: str) -> str:
    """
    'https://x.edu/files/TT%20Fall.xlsx?dl=1' -> 'TT Fall.xlsx'
    """
    name = Path(unquote(urlparse(url).path)).name
    if name and Path(name).suffix.lower() in _KNOWN_SUFFIXES:
        return name
    return DEFAULT_FILENAME


def fetch_timetable(url: str, out_dir: Optional[Path] = None, refresh: bool = False) -> Path:
    """
    Download url into out_dir and return the local path.

    An existing file is reused unless refresh is set.
    """
    target_dir = Path(out_dir) if out_dir is not None else default_data_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    out_file = target_dir / _filename_from_url(url)

    if out_file.exists() and not refresh:
        logger.info("SKIP %s (already downloaded)", out_file.name)
        return out_file

    logger.info("FETCH %s", url)
    try:
        resp = requests.get(url, timeout=30)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise TimetableSourceError(f"Download failed: {exc}") from exc

    out_file.write_bytes(resp.content)
    return out_file


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mytimetable.fetch", description="Download a timetable file (.xlsx/.csv)")
    p.add_argument("url", type=str, help="Link to the published timetable file")
    p.add_argument("--out-dir", type=Path, default=None, help="Target directory (default: data directory)")
    p.add_argument("--refresh", action="store_true", help="Re-download and overwrite an existing file")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        path = fetch_timetable(args.url.strip(), out_dir=args.out_dir, refresh=args.refresh)
    except TimetableSourceError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)
    print(f"Timetable saved to {path}")


if __name__ == "__main__":
    main()
