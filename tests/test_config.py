"""Tests for configuration loading."""

from huddle.config import Config, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()
        assert config.ongoing_labels == ("Your ongoing activity :", "Your ongoing activities :")

    def test_parses_keys(self, tmp_path):
        path = tmp_path / "huddle.conf"
        path.write_text(
            "# Huddle settings\n"
            "DATA_FILE=~/huddle/data/activities.json\n"
            'USER_ID="alice"  # signed in as\n'
            "TIMEZONE=Europe/Zurich # local display\n"
            "UPCOMING_SINGULAR='Next up :'\n"
            "\n"
            "not a setting\n"
            "UNKNOWN_KEY=whatever\n"
        )

        config = load_config(path)

        assert config.data_file == "~/huddle/data/activities.json"
        assert config.user_id == "alice"
        assert config.timezone == "Europe/Zurich"
        assert config.upcoming_labels == ("Next up :", "Your upcoming activities :")

    def test_unterminated_quote_keeps_rest(self, tmp_path):
        path = tmp_path / "huddle.conf"
        path.write_text('USER_ID="bob\n')

        assert load_config(path).user_id == "bob"
