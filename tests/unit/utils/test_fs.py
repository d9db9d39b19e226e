"""Tests for filesystem utilities module."""

from livetex.utils.fs import atomic_write


class TestAtomicWrite:
    """Tests for atomic_write function."""

    def test_writes_content(self, tmp_path):
        """Test writing a new file."""
        target = tmp_path / "page.html"

        atomic_write(target, "<p>π</p>")

        assert target.read_text(encoding="utf-8") == "<p>π</p>"

    def test_replaces_existing_file(self, tmp_path):
        """Test replacing a file leaves no temp files behind."""
        target = tmp_path / "page.html"
        target.write_text("old", encoding="utf-8")

        atomic_write(target, "new")

        assert target.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [target]

    def test_creates_parent(self, tmp_path):
        target = tmp_path / "a" / "b" / "page.html"

        atomic_write(target, "x")

        assert target.exists()
