"""Event sources: phase table parsing, fetching, and skyfield phase computation."""

import io
import logging
import re
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import httpx
import pandas as pd
from pytz import utc

from lunisolarhijri.config import Settings, is_url
from lunisolarhijri.estimator import as_utc
from lunisolarhijri.models import MoonPhase, MoonPhaseEvent

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("phase", "datetime")
_CHUNK_ROWS = 2000

# Years may carry fewer than four digits ("601-01-05 12:00:00"), which strptime rejects.
_TIMESTAMP_RE = re.compile(
    r"^(?P<year>\d{1,4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
    r"(?:[ T](?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?$"
)

# skyfield.almanac.moon_phases codes: 0=New, 1=First Quarter, 2=Full, 3=Last Quarter
_SKYFIELD_PHASES = (
    MoonPhase.NEW_MOON,
    MoonPhase.FIRST_QUARTER,
    MoonPhase.FULL_MOON,
    MoonPhase.LAST_QUARTER,
)


class EventSourceError(Exception):
    """Phase data could not be read or parsed."""


def parse_timestamp(text: str) -> datetime:
    """Parse a "YYYY-MM-DD HH:MM:SS" UT string into an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid date/time.
    """
    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        raise ValueError(f"unrecognised timestamp {text!r}")
    parts = {k: int(v) for k, v in match.groupdict().items() if v is not None}
    return datetime(tzinfo=utc, **parts)


def parse_phase_table(text: str) -> Iterator[MoonPhaseEvent]:
    """Parse CSV phase table text into MoonPhaseEvents, lazily and in file order.

    Expected header: ``phase,datetime[,eclipse,...]``. Extra columns are ignored.
    Blank rows are skipped.

    Raises:
        EventSourceError: On missing columns or an unparseable timestamp.
    """
    if not text.strip():
        return
    reader = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
        skipinitialspace=True,
        chunksize=_CHUNK_ROWS,
    )

    row_number = 1  # header
    with reader:
        for chunk in _chunks(reader):
            chunk = chunk.fillna("")
            chunk.columns = [str(c).strip() for c in chunk.columns]
            missing = [c for c in _REQUIRED_COLUMNS if c not in chunk.columns]
            if missing:
                raise EventSourceError(
                    f"Phase table is missing column(s): {', '.join(missing)}"
                )
            has_eclipse = "eclipse" in chunk.columns
            for record in chunk.to_dict("records"):
                row_number += 1
                stamp = record["datetime"].strip()
                label = record["phase"].strip()
                if not stamp and not label:
                    continue
                try:
                    timestamp = parse_timestamp(stamp)
                except ValueError as e:
                    raise EventSourceError(f"Row {row_number}: {e}") from e
                phase = MoonPhase.parse(label)
                if not isinstance(phase, MoonPhase):
                    logger.warning("Row %d: unknown phase label %r", row_number, label)
                eclipse = record["eclipse"].strip() if has_eclipse else ""
                yield MoonPhaseEvent(
                    timestamp=timestamp, phase=phase, eclipse=eclipse or None
                )


def _chunks(reader: Iterator[pd.DataFrame]) -> Iterator[pd.DataFrame]:
    """Re-raise pandas tokenizer failures as EventSourceError."""
    while True:
        try:
            chunk = next(reader)
        except StopIteration:
            return
        except pd.errors.ParserError as e:
            raise EventSourceError(f"Malformed phase table: {e}") from e
        yield chunk


def fetch_phase_table(
    url: str, timeout: float = 10, client: httpx.Client | None = None
) -> str:
    """Download a phase table. Wraps transport and HTTP status errors.

    Args:
        url: http(s) URL of the CSV file.
        timeout: Request timeout in seconds.
        client: Optional preconfigured httpx client (tests inject a mock transport).

    Returns:
        Response body text.

    Raises:
        EventSourceError: On any httpx error or non-2xx status.
    """
    try:
        if client is None:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        else:
            resp = client.get(url, timeout=timeout)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise EventSourceError(f"Could not fetch {url}: {e}") from e
    return resp.text


class PhaseTableSource:
    """Restartable event stream over a CSV phase table at a path or URL.

    Each iteration re-parses the table. A fetched URL body is kept so that
    restarting does not download again.
    """

    def __init__(
        self,
        location: str | Path,
        timeout: float = 10,
        client: httpx.Client | None = None,
    ) -> None:
        self.location = str(location)
        self._timeout = timeout
        self._client = client
        self._text: str | None = None

    def _read(self) -> str:
        if self._text is not None:
            return self._text
        if is_url(self.location):
            text = fetch_phase_table(self.location, self._timeout, self._client)
            self._text = text
        else:
            try:
                text = Path(self.location).read_text(encoding="utf-8")
            except OSError as e:
                raise EventSourceError(f"Could not read {self.location}: {e}") from e
        logger.info("Loaded phase table from %s", self.location)
        return text

    def __iter__(self) -> Iterator[MoonPhaseEvent]:
        return parse_phase_table(self._read())


class SkyfieldPhaseSource:
    """Restartable event stream computed with skyfield between two UTC dates.

    The ephemeris bounds the usable range (de421 covers 1899–2053).
    """

    def __init__(
        self,
        start: datetime,
        end: datetime,
        data_dir: str | Path = "resources",
        ephemeris: str = "de421.bsp",
    ) -> None:
        self.start = as_utc(start)
        self.end = as_utc(end)
        self.data_dir = Path(data_dir)
        self.ephemeris = ephemeris

    def __iter__(self) -> Iterator[MoonPhaseEvent]:
        from skyfield import almanac
        from skyfield.api import Loader

        loader = Loader(str(self.data_dir))
        eph = loader(self.ephemeris)
        ts = loader.timescale()
        times, codes = almanac.find_discrete(
            ts.from_datetime(self.start),
            ts.from_datetime(self.end),
            almanac.moon_phases(eph),
        )
        logger.info(
            "Computed %d moon phases between %s and %s", len(times), self.start, self.end
        )
        return events_from_phase_codes(
            (t.utc_datetime() for t in times), (int(c) for c in codes)
        )


def events_from_phase_codes(
    instants: Iterator[datetime], codes: Iterator[int]
) -> Iterator[MoonPhaseEvent]:
    """Pair skyfield event instants with their phase codes."""
    for instant, code in zip(instants, codes):
        yield MoonPhaseEvent(timestamp=as_utc(instant), phase=_SKYFIELD_PHASES[code])


def open_source(settings: Settings) -> PhaseTableSource:
    """Table source for the configured location."""
    return PhaseTableSource(settings.phase_table, timeout=settings.http_timeout)
