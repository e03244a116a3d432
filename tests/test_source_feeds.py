"""Tests for source/feeds.py module."""

from unittest.mock import MagicMock, patch

from openwrt_builder.source.feeds import install_feeds, register_feed, update_feeds

FEED_LINE = "src-git customfeed https://example.com/custom-feed.git"


class TestRegisterFeed:
    """Tests for register_feed function."""

    def test_appends_once(self, tmp_path):
        """Should append the line and not duplicate it on a second call."""
        conf = tmp_path / "feeds.conf.default"
        conf.write_text("src-git packages https://example.com/packages.git\n")

        assert register_feed(conf, FEED_LINE) is True
        assert register_feed(conf, FEED_LINE) is False

        lines = conf.read_text().splitlines()
        assert lines.count(FEED_LINE) == 1
        assert lines[0] == "src-git packages https://example.com/packages.git"

    def test_whole_line_match_only(self, tmp_path):
        """A commented or longer line should not count as registered."""
        conf = tmp_path / "feeds.conf.default"
        conf.write_text(f"#{FEED_LINE}\n{FEED_LINE}-extra\n")

        assert register_feed(conf, FEED_LINE) is True
        assert conf.read_text().splitlines()[-1] == FEED_LINE

    def test_adds_missing_newline(self, tmp_path):
        """Should not glue the new line onto an unterminated last line."""
        conf = tmp_path / "feeds.conf.default"
        conf.write_text("src-git luci https://example.com/luci.git")

        register_feed(conf, FEED_LINE)

        assert conf.read_text().splitlines() == [
            "src-git luci https://example.com/luci.git",
            FEED_LINE,
        ]

    def test_creates_missing_file(self, tmp_path):
        """Should create the file when it does not exist."""
        conf = tmp_path / "feeds.conf.default"

        assert register_feed(conf, FEED_LINE) is True
        assert conf.read_text() == f"{FEED_LINE}\n"


class TestFeedCommands:
    """Tests for the feeds script invocations."""

    def test_update_and_install(self, tmp_path):
        """Should run the feeds script inside the source tree."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout=None)

            update_feeds(tmp_path)
            install_feeds(tmp_path)

            commands = [c[0][0] for c in mock_run.call_args_list]
            assert commands == [
                ["./scripts/feeds", "update", "-a"],
                ["./scripts/feeds", "install", "-a"],
            ]
            assert all(c[1]["cwd"] == tmp_path for c in mock_run.call_args_list)
