from qobuz_api.metadata import extract_comprehensive_metadata
from qobuz_api.models import Album, Artist, Track


def test_missing_records_give_empty_map():
    assert extract_comprehensive_metadata(None, None, None) == {}
    assert extract_comprehensive_metadata(Track(), Album(), Artist()) == {}


def test_composers_aggregate_from_performers():
    track = Track(performers="Jane Doe, MainArtist - John Smith, Composer, Lyricist")
    data = extract_comprehensive_metadata(track, Album(), Artist(name="Jane Doe"))
    assert data["COMPOSER"] == "John Smith"
    assert data["ARTIST"] == "Jane Doe"
    assert data["PERFORMER"] == track.performers


def test_composer_sources_deduplicated():
    track = Track(performers="Miles Davis, Composer", composer={"name": "M. Davis"})
    album = Album(composer={"name": "Gil Evans"})
    data = extract_comprehensive_metadata(track, album, None)
    assert data["COMPOSER"] == "Miles Davis/Gil Evans"


def test_full_map(track, album, artist):
    track = track.model_copy(
        update={
            "maximum_bit_depth": 24.0,
            "maximum_sampling_rate": 96.0,
            "maximum_channel_count": 2.0,
            "hires": True,
            "hires_streamable": False,
        }
    )
    album = album.model_copy(update={"subtitle": "Sub", "release_date_stream": "2020-05-02"})
    data = extract_comprehensive_metadata(track, album, artist)

    assert data["TITLE"] == "Song"
    assert data["ALBUM"] == "Random Album"
    assert data["VERSION"] == "Deluxe"
    assert data["LABEL"] == "Indie Label"
    assert data["GENRE"] == "Pop"
    assert data["TRACKNUMBER"] == "3"
    assert data["TRACKTOTAL"] == "12"
    assert data["DISCNUMBER"] == "1"
    assert data["DISCTOTAL"] == "2"
    assert data["DATE"] == "2018-02-02"
    assert data["RELEASE_DATE_STREAM"] == "2020-05-02"
    assert data["RELEASE_DATE_DOWNLOAD"] == "2020-05-01"
    assert data["SUBTITLE"] == "Sub"
    assert data["UPC"] == "0060254772227"
    assert data["DESCRIPTION"] == "Liner notes"
    assert data["BIT_DEPTH"] == "24"
    assert data["SAMPLING_RATE"] == "96"
    assert data["CHANNELS"] == "2"
    assert data["HIRES"] == "true"
    assert data["HIRES_STREAMABLE"] == "false"
    assert all(isinstance(v, str) for v in data.values())


def test_fractional_sampling_rate_kept():
    data = extract_comprehensive_metadata(Track(maximum_sampling_rate=44.1), None, None)
    assert data == {"SAMPLING_RATE": "44.1"}
