"""Tests for renderer configuration loading."""

import pytest

from inlinemark.config import (
    CONFIG_FILE,
    ESCAPE_STRING,
    MARKERS,
    Marker,
    RendererConfig,
    find_config_file,
    load_config,
)
from inlinemark.markup_converter import MarkerRenderer


def _write(tmp_path, text):
    path = tmp_path / CONFIG_FILE
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_no_file_gives_defaults(self):
        assert load_config(None) == RendererConfig.default()

    def test_default_dialect(self):
        config = RendererConfig.default()
        assert [m.symbol for m in config.markers] == ["_", "__", "'"]
        assert config.escape_string == ESCAPE_STRING
        assert config.escape_table == {"_": ("__",)}
        assert config.paragraph_tags == ("<p>", "</p>")
        assert config.header == ("#", "<h1>", "</h1>")

    def test_default_markers_are_not_shared(self):
        config = RendererConfig.default()
        assert config.markers == tuple(MARKERS)
        assert config.markers is not MARKERS


class TestFindConfigFile:
    def test_found(self, tmp_path):
        path = _write(tmp_path, "[inlinemark]\n")
        assert find_config_file(tmp_path) == path

    def test_missing(self, tmp_path):
        assert find_config_file(tmp_path) is None


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = _write(
            tmp_path,
            "[inlinemark]\n"
            "escape = !\n"
            "paragraph = <div> </div>\n"
            "header = ##\n"
            "header_tags = <h2> </h2>\n"
            "\n"
            "[markers]\n"
            "** = <b> </b>\n"
            "* = <i> </i>\n"
            "\n"
            "[escapes]\n"
            "* = **\n",
        )
        config = load_config(path)
        assert config.markers == (
            Marker("**", "<b>", "</b>"),
            Marker("*", "<i>", "</i>"),
        )
        assert config.escape_string == "!"
        assert config.escape_table == {"*": ("**",)}
        assert config.paragraph_tags == ("<div>", "</div>")
        assert config.header == ("##", "<h2>", "</h2>")

    def test_missing_sections_keep_defaults(self, tmp_path):
        path = _write(tmp_path, "[inlinemark]\nparagraph = <div> </div>\n")
        config = load_config(path)
        assert config.markers == RendererConfig.default().markers
        assert config.escape_table == {"_": ("__",)}
        assert config.paragraph_tags == ("<div>", "</div>")

    def test_backslash_escape_is_read_verbatim(self, tmp_path):
        path = _write(tmp_path, "[inlinemark]\nescape = \\\n")
        assert load_config(path).escape_string == "\\"

    def test_empty_header_disables_header(self, tmp_path):
        path = _write(tmp_path, "[inlinemark]\nheader =\n")
        config = load_config(path)
        assert config.header is None
        assert MarkerRenderer.from_config(config).render("# x") == "<p> # x </p>"

    def test_default_escapes_follow_replaced_markers(self, tmp_path):
        path = _write(tmp_path, "[markers]\n_ = <i> </i>\n")
        config = load_config(path)
        assert config.markers == (Marker("_", "<i>", "</i>"),)
        assert config.escape_table == {"_": ()}

    def test_marker_case_is_preserved(self, tmp_path):
        path = _write(tmp_path, "[markers]\nQ = <q> </q>\n")
        assert load_config(path).markers[0].symbol == "Q"

    def test_loaded_config_drives_renderer(self, tmp_path):
        path = _write(
            tmp_path,
            "[markers]\n** = <b> </b>\n* = <i> </i>\n\n[escapes]\n* = **\n",
        )
        renderer = MarkerRenderer.from_config(load_config(path))
        assert renderer.render("**a** *b*") == "<p> <b>a</b> <i>b</i> </p>"


class TestInvalidConfig:
    @pytest.mark.parametrize(
        "text, message",
        [
            ("[markers]\n_ = <em>\n", "expected an open and a close tag"),
            ("[inlinemark]\nparagraph = <p> </p> <x>\n", "paragraph"),
            ("[inlinemark]\nheader_tags = <h1>\n", "header_tags"),
            ("[inlinemark]\nescape =\n", "escape string must not be empty"),
            ("[escapes]\n_ = ~\n", "unknown marker"),
            ("[escapes]\n~ = _\n", "unknown marker"),
            ("[markers]\n", "at least one marker"),
            ("_ = <em> </em>\n", "no section headers"),
            ("[markers]\n_ = <em> </em>\n_ = <i> </i>\n", "already exists"),
            ("[markers]\n_ = <span class=\"x\"> </span>\n", "expected an open and a close tag"),
        ],
    )
    def test_rejected(self, tmp_path, text, message):
        path = _write(tmp_path, text)
        with pytest.raises(ValueError, match=message):
            load_config(path)
