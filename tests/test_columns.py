from theatreevents.importer.columns import (
    ABSENT,
    COMPANY_COLUMNS,
    SHOW_COLUMNS,
    ColumnResolver,
    resolve,
)
from theatreevents.models import Number, Text


def test_aliases_are_tried_in_priority_order():
    row = {"Title": Text("Second"), "NAME": Text("First")}
    assert resolve(row, "title") == Text("First")


def test_blank_cell_falls_through_to_next_alias():
    row = {"Name": Text("   "), "Title": Text("Cats")}
    assert resolve(row, "title") == Text("Cats")


def test_start_time_beats_time():
    row = {"Time": Text("8:00"), "StartTime": Text("7:30")}
    assert resolve(row, "time") == Text("7:30")


def test_absent_when_no_column_matches():
    result = resolve({"Something": Text("x")}, "title")
    assert result is ABSENT
    assert not result


def test_matching_is_exact_key():
    assert resolve({"nAmE": Text("Cats")}, "title") is ABSENT


def test_resolver_narrows_to_sheet_headers():
    resolver = ColumnResolver(["Name", "Company", "Date"])
    assert resolver.columns["title"] == ("Name",)
    assert "time" in resolver.missing()
    assert resolver.get({"Name": Text("Cats")}, "title") == Text("Cats")
    assert resolver.get({"Date": Number(45905)}, "date") == Number(45905)


def test_show_website_column_precedence_on_companies_sheet():
    resolver = ColumnResolver(
        ["Company", "ShowWebsite", "ShowWebsite (if different)"], COMPANY_COLUMNS
    )
    row = {
        "ShowWebsite": Text("https://plain.example"),
        "ShowWebsite (if different)": Text("https://show.example"),
    }
    assert resolver.get(row, "show_website") == Text("https://show.example")


def test_ticket_url_aliases_include_spaced_header():
    assert "Ticket URL" in SHOW_COLUMNS["ticket_url"]
    assert resolve({"Ticket URL": Text("https://t.example")}, "ticket_url") == Text("https://t.example")
