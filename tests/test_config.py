"""Tests for chapterkit.config module."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from chapterkit.config import ChapterKitConfig, find_config, load_config
from chapterkit.exceptions import ConfigError


class TestChapterKitConfig:
    def test_defaults(self) -> None:
        config = ChapterKitConfig()
        assert config.output_dir == Path("output")
        assert config.max_height == 1080
        assert config.audio_codec == "libmp3lame"
        assert config.audio_bitrate == "192k"
        assert config.affirmative == "oui"
        assert config.chapter_failure == "isolate"

    def test_format_selector_caps_height(self) -> None:
        config = ChapterKitConfig()
        assert config.format_selector == "bestvideo[height<=1080]+bestaudio/best[height<=1080]"

    def test_custom_height(self) -> None:
        config = ChapterKitConfig(max_height=720)
        assert "height<=720" in config.format_selector

    def test_http_headers(self) -> None:
        config = ChapterKitConfig()
        assert config.http_headers == {"Referer": "youtube.com", "User-Agent": "googlebot"}

    def test_http_headers_can_be_disabled(self) -> None:
        config = ChapterKitConfig(referer=None, user_agent=None)
        assert config.http_headers == {}

    def test_extension_dot_stripped(self) -> None:
        assert ChapterKitConfig(container_ext=".webm").container_ext == "webm"

    def test_invalid_extension_raises(self) -> None:
        with pytest.raises(ValueError):
            ChapterKitConfig(audio_ext="mp/3")

    def test_invalid_policy_raises(self) -> None:
        with pytest.raises(ValueError):
            ChapterKitConfig(chapter_failure="retry")

    def test_invalid_bitrate_raises(self) -> None:
        with pytest.raises(ValueError):
            ChapterKitConfig(audio_bitrate="loud")

    def test_invalid_height_raises(self) -> None:
        with pytest.raises(ValueError):
            ChapterKitConfig(max_height=0)

    def test_empty_affirmative_raises(self) -> None:
        with pytest.raises(ValueError):
            ChapterKitConfig(affirmative="  ")


class TestLoadConfig:
    def test_explicit_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(yaml.dump({"max_height": 720, "affirmative": "yes"}))
        config = load_config(config_file)
        assert config.max_height == 720
        assert config.affirmative == "yes"

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "chapterkit.yaml"
        config_file.write_text("")
        assert load_config(config_file) == ChapterKitConfig()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "chapterkit.yaml"
        config_file.write_text("max_height: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_file)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "chapterkit.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_file)

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "chapterkit.yaml"
        config_file.write_text(yaml.dump({"chapter_failure": "sometimes"}))
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(config_file)

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        original_cwd = os.getcwd()
        try:
            os.chdir(tmp_path)
            assert load_config() == ChapterKitConfig()
        finally:
            os.chdir(original_cwd)

    def test_discovers_file_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "chapterkit.yaml").write_text(yaml.dump({"container_ext": "webm"}))
        original_cwd = os.getcwd()
        try:
            os.chdir(tmp_path)
            assert load_config().container_ext == "webm"
        finally:
            os.chdir(original_cwd)


class TestFindConfig:
    def test_found(self, tmp_path: Path) -> None:
        (tmp_path / "chapterkit.yaml").write_text("{}")
        assert find_config(tmp_path) == tmp_path / "chapterkit.yaml"

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None
