"""
Tests for file and HTTP loading and registry assembly.
"""
import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from font_tagger.config import TaggerConfig
from font_tagger.errors import LoadError, SchemaError
from font_tagger.loaders import DataSource, load_registries, load_store, load_text
from font_tagger.models import VariableTagging


class TestLoadText:
    def test_local_file(self, tmp_path):
        path = tmp_path / "a.csv"
        path.write_text("x,y\n", encoding="utf-8")
        assert load_text(str(path)) == "x,y\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError) as exc:
            load_text(str(tmp_path / "absent.csv"))
        assert "absent.csv" in str(exc.value)

    def test_http(self):
        response = MagicMock(text="payload")
        with patch("font_tagger.loaders.requests.get", return_value=response) as get:
            assert load_text("https://example.com/a.json", timeout=3) == "payload"
        get.assert_called_once_with("https://example.com/a.json", timeout=3)
        response.raise_for_status.assert_called_once()

    def test_http_error_wrapped(self):
        with patch(
            "font_tagger.loaders.requests.get",
            side_effect=requests.ConnectionError("refused"),
        ):
            with pytest.raises(LoadError, match="refused"):
                load_text("http://example.com/a.json")


class TestDataSource:
    def test_concurrent_loads_share_one_read(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("hello", encoding="utf-8")
        source = DataSource()

        async def run():
            return await asyncio.gather(source.load(str(path)), source.load(str(path)))

        with patch("font_tagger.loaders.load_text", return_value="hello") as reader:
            assert asyncio.run(run()) == ["hello", "hello"]
        assert reader.call_count == 1

    def test_failure_propagates(self, tmp_path):
        source = DataSource()
        with pytest.raises(LoadError):
            asyncio.run(source.load(str(tmp_path / "absent.txt")))


class TestLoadRegistries:
    def test_load_from_directory(self, data_dir):
        config = TaggerConfig(data_dir=str(data_dir))
        registries = asyncio.run(load_registries(config))
        assert "/Expressive/Loud" in registries.tags
        assert len(registries.fonts) == 5
        assert len(registries.rules) == 2

    def test_missing_file_raises(self, data_dir):
        (data_dir / "embeddings.json").unlink()
        with pytest.raises(LoadError):
            asyncio.run(load_registries(TaggerConfig(data_dir=str(data_dir))))

    def test_schema_failure(self, data_dir):
        (data_dir / "family_data.json").write_text('{"families": []}', encoding="utf-8")
        with pytest.raises(SchemaError):
            asyncio.run(load_registries(TaggerConfig(data_dir=str(data_dir))))

    def test_load_store_imports_taggings(self, data_dir):
        store = asyncio.run(load_store(TaggerConfig(data_dir=str(data_dir))))
        assert len(store) == 3
        flex = store.registries.fonts.require("Roboto Flex").tagging("/Expressive/Loud")
        assert isinstance(flex, VariableTagging)

    def test_missing_taggings_file_leaves_store_empty(self, data_dir):
        (data_dir / "taggings.csv").unlink()
        store = asyncio.run(load_store(TaggerConfig(data_dir=str(data_dir))))
        assert len(store) == 0
