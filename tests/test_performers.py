from qobuz_api.metadata.performers import (
    PerformerCredit,
    extract_artist_names,
    extract_composers,
    extract_producers,
    parse_performers,
)


def test_parse_keeps_order_and_roles():
    credits = parse_performers("Jane Doe, MainArtist - John Smith, Composer, Lyricist")
    assert credits == [
        PerformerCredit("Jane Doe", ["MainArtist"]),
        PerformerCredit("John Smith", ["Composer", "Lyricist"]),
    ]


def test_artist_and_composer_extraction():
    text = "Jane Doe, MainArtist - John Smith, Composer, Lyricist"
    assert extract_artist_names(text) == ["Jane Doe"]
    assert extract_composers(text) == ["John Smith"]


def test_malformed_groups_are_skipped():
    text = " - , Composer - Bob, Producer -  "
    assert [c.name for c in parse_performers(text)] == ["Bob"]
    assert extract_producers(text) == ["Bob"]


def test_none_and_empty_input():
    assert parse_performers(None) == []
    assert parse_performers("") == []
    assert extract_artist_names(None) == []


def test_roles_match_by_substring():
    text = (
        "Berlin Phil, Orchestra - Karajan, Conductor - Side Player, AssociatedPerformer"
        " - Engineer Ed, Engineer - Lyric Lou, ComposerLyricist"
    )
    assert extract_artist_names(text) == ["Berlin Phil", "Karajan", "Side Player"]
    assert extract_composers(text) == ["Lyric Lou"]


def test_composers_deduplicated_producers_not():
    text = "A, Composer - A, Lyricist - P, Producer - P, Co-Producer"
    assert extract_composers(text) == ["A"]
    assert extract_producers(text) == ["P", "P"]
