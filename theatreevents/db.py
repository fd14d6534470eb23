import sqlite3
from pathlib import Path
from typing import Optional

from theatreevents.models import Event, Venue


def connect(db_path: Path) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    _create_schema(conn)
    return conn


def _create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS venues (
            name     TEXT PRIMARY KEY,
            website  TEXT NOT NULL DEFAULT '',
            address  TEXT NOT NULL DEFAULT '',
            email    TEXT NOT NULL DEFAULT '',
            phone    TEXT NOT NULL DEFAULT ''
        );

        CREATE TABLE IF NOT EXISTS events (
            id                          TEXT PRIMARY KEY,
            title                       TEXT NOT NULL,
            theatre_name                TEXT NOT NULL,
            event_type                  TEXT NOT NULL,
            date                        TEXT NOT NULL,
            time                        TEXT NOT NULL,
            description                 TEXT NOT NULL DEFAULT '',
            website_url                 TEXT NOT NULL DEFAULT '',
            ticket_url                  TEXT,
            venue                       TEXT,
            price                       TEXT,
            sign_language_interpreting  INTEGER NOT NULL DEFAULT 0,
            UNIQUE(title, theatre_name, date, time)
        );
    """)
    conn.commit()


class SqliteStore:
    """Event store backed by SQLite.

    Appends never touch rows already stored: a clash on the venue name or on
    the event identity columns is left to the table constraints and ignored.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def append(self, venues: list[Venue], events: list[Event]) -> tuple[int, int]:
        """Append venues and events in one transaction; nothing is kept if either fails."""
        with self.conn:
            return self._insert_venues(venues), self._insert_events(events)

    # --- Venues ---

    def list_venues(self) -> list[Venue]:
        rows = self.conn.execute(
            "SELECT name, website, address, email, phone FROM venues ORDER BY name"
        ).fetchall()
        return [
            Venue(name=r["name"], website=r["website"], address=r["address"], email=r["email"], phone=r["phone"])
            for r in rows
        ]

    def append_venues(self, venues: list[Venue]) -> int:
        with self.conn:
            return self._insert_venues(venues)

    def _insert_venues(self, venues: list[Venue]) -> int:
        added = 0
        for venue in venues:
            cursor = self.conn.execute(
                """
                INSERT INTO venues (name, website, address, email, phone)
                VALUES (:name, :website, :address, :email, :phone)
                ON CONFLICT(name) DO NOTHING
                """,
                venue.to_dict(),
            )
            added += cursor.rowcount
        return added

    # --- Events ---

    def list_events(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> list[Event]:
        """Stored events ordered by date and time, optionally within [start_date, end_date]."""
        query = """
            SELECT id, title, theatre_name, event_type, date, time, description, website_url,
                   ticket_url, venue, price, sign_language_interpreting
            FROM events
        """
        clauses, params = [], []
        if start_date:
            clauses.append("date >= ?")
            params.append(start_date)
        if end_date:
            clauses.append("date <= ?")
            params.append(end_date)
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY date, time"
        return [_row_to_event(r) for r in self.conn.execute(query, params).fetchall()]

    def append_events(self, events: list[Event]) -> int:
        with self.conn:
            return self._insert_events(events)

    def _insert_events(self, events: list[Event]) -> int:
        added = 0
        for event in events:
            cursor = self.conn.execute(
                """
                INSERT INTO events (id, title, theatre_name, event_type, date, time, description,
                                    website_url, ticket_url, venue, price, sign_language_interpreting)
                VALUES (:id, :title, :theatre_name, :event_type, :date, :time, :description,
                        :website_url, :ticket_url, :venue, :price, :sign_language_interpreting)
                ON CONFLICT DO NOTHING
                """,
                {
                    "id":                         event.id,
                    "title":                      event.title,
                    "theatre_name":               event.theatre_name,
                    "event_type":                 event.event_type,
                    "date":                       event.date,
                    "time":                       event.time,
                    "description":                event.description,
                    "website_url":                event.website_url,
                    "ticket_url":                 event.ticket_url,
                    "venue":                      event.venue,
                    "price":                      event.price,
                    "sign_language_interpreting": 1 if event.sign_language_interpreting else 0,
                },
            )
            added += cursor.rowcount
        return added


def _row_to_event(row: sqlite3.Row) -> Event:
    return Event(
        id=row["id"],
        title=row["title"],
        theatre_name=row["theatre_name"],
        event_type=row["event_type"],
        date=row["date"],
        time=row["time"],
        description=row["description"],
        website_url=row["website_url"],
        ticket_url=row["ticket_url"],
        venue=row["venue"],
        price=row["price"],
        sign_language_interpreting=bool(row["sign_language_interpreting"]),
    )
