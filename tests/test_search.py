from streamtv import search as search_module
from streamtv.search import search


def test_substring_matches_titles_and_names(conn):
    results = search(conn, "an")
    assert [r["title"] for r in results["shows"]] == ["Band of Brothers"]
    assert sorted((r["fname"], r["lname"]) for r in results["actors"]) == [("Anna", "Lee"), ("Dan", "Ford")]


def test_case_insensitive(conn):
    results = search(conn, "OZARK")
    assert [r["showID"] for r in results["shows"]] == ["S02"]


def test_matches_last_name_alone(conn):
    results = search(conn, "garn")
    assert results["shows"] == []
    assert [r["actID"] for r in results["actors"]] == ["A04"]


def test_blank_term_does_not_query(conn, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("search should not hit the store for a blank term")

    monkeypatch.setattr(search_module, "query", fail)
    assert search(conn, "") == {"shows": [], "actors": []}
    assert search(conn, "   ") == {"shows": [], "actors": []}
    assert search(conn, None) == {"shows": [], "actors": []}


def test_wildcards_are_literal(conn):
    assert search(conn, "%") == {"shows": [], "actors": []}
    assert search(conn, "_") == {"shows": [], "actors": []}


def test_accented_titles_and_names_match(conn):
    conn.execute("INSERT INTO shows (showID, title) VALUES ('S09', 'École des Stars')")
    conn.execute("INSERT INTO actor (actID, fname, lname) VALUES ('A09', 'Émile', 'Zola')")

    assert [r["showID"] for r in search(conn, "École")["shows"]] == ["S09"]
    assert [r["showID"] for r in search(conn, "école")["shows"]] == ["S09"]
    assert [r["actID"] for r in search(conn, "Émile")["actors"]] == ["A09"]
    assert [r["actID"] for r in search(conn, "ÉMILE")["actors"]] == ["A09"]
