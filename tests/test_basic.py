"""Basic tests for qobuz-api."""

from importlib.util import find_spec


def test_import():
    """Test that package is importable without side effects."""
    assert find_spec("qobuz_api") is not None


def test_cli_import():
    """Test that CLI can be imported."""
    from qobuz_api.cli import app

    assert app is not None


def test_public_api():
    """The client and the embedding entry points are exported at package level."""
    from qobuz_api.api import QobuzClient
    from qobuz_api.metadata import embed_metadata_in_file, extract_comprehensive_metadata

    assert callable(embed_metadata_in_file)
    assert callable(extract_comprehensive_metadata)
    assert hasattr(QobuzClient, "download_album")
