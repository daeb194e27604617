"""CLI entry point for labelling a moon-phase table with estimated Hijri dates.

    uv run lunisolar-hijri resources/moon-phases-601-to-4000-with-eclipses-UT.csv --from 2024-01-01 --to 2024-12-31
    uv run lunisolar-hijri --png 2024-03
    uv run lunisolar-hijri --skyfield --from 2024-01-01 --to 2024-06-30
"""

import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from dotenv import load_dotenv

from lunisolarhijri.calendar_view import build_calendar
from lunisolarhijri.config import load_settings
from lunisolarhijri.i18n import t
from lunisolarhijri.models import CalendarEntry, MoonPhaseEvent
from lunisolarhijri.renderers.static import save_static_month
from lunisolarhijri.sources import (
    EventSourceError,
    PhaseTableSource,
    SkyfieldPhaseSource,
    parse_timestamp,
)


def _year_month(text: str) -> tuple[int, int]:
    year, _, month = text.partition("-")
    try:
        parsed = int(year), int(month)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {text!r}") from None
    if not 1 <= parsed[1] <= 12:
        raise argparse.ArgumentTypeError(f"month out of range in {text!r}")
    return parsed


def _date(text: str) -> datetime:
    try:
        return parse_timestamp(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lunisolar-hijri",
        description="Overlay estimated lunisolar Hijri dates on moon-phase events.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="Phase table path or URL (default: LUNISOLAR_PHASE_TABLE)",
    )
    parser.add_argument("--lang", choices=("en", "ar"), help="Label language")
    parser.add_argument("--from", dest="start", type=_date, help="Print entries on/after YYYY-MM-DD")
    parser.add_argument("--to", dest="end", type=_date, help="Print entries on/before YYYY-MM-DD")
    parser.add_argument("--png", type=_year_month, metavar="YYYY-MM", help="Save a month chart PNG")
    parser.add_argument(
        "--skyfield",
        action="store_true",
        help="Compute phases with skyfield between --from and --to instead of reading a table",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _window(
    entries: Iterable[CalendarEntry], start: datetime | None, end: datetime | None
) -> Iterator[CalendarEntry]:
    for entry in entries:
        if start is not None and entry.start < start:
            continue
        if end is not None and entry.start.date() > end.date():
            continue
        yield entry


def format_entry(entry: CalendarEntry) -> str:
    line = f"{entry.gregorian_date}  {entry.title}"
    if entry.eclipse:
        line += f"  [{entry.eclipse}]"
    return line


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    lang = args.lang or settings.lang
    if args.skyfield:
        if args.start is None or args.end is None:
            print(t("error", lang).format(error="--skyfield needs --from and --to"), file=sys.stderr)
            return 2
        source: Iterable[MoonPhaseEvent] = SkyfieldPhaseSource(
            args.start,
            args.end + timedelta(days=1),
            data_dir=settings.data_dir,
            ephemeris=settings.ephemeris,
        )
    else:
        source = PhaseTableSource(
            args.source or settings.phase_table, timeout=settings.http_timeout
        )

    try:
        view = build_calendar(source, lang=lang)
    except EventSourceError as e:
        print(t("error", lang).format(error=e), file=sys.stderr)
        return 1

    if not view.entries:
        print(t("no_events", lang), file=sys.stderr)
        return 1

    for entry in _window(view.entries, args.start, args.end):
        print(format_entry(entry))

    if args.png is not None:
        year, month = args.png
        path = save_static_month(view, year, month, lang=lang)
        print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
