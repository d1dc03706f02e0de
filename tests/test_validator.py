"""
Tests for the catalog validator.
"""
import json

from font_tagger.models import LintRule, Severity
from font_tagger.registry import RegistryBuilder
from font_tagger.store import TaggingStore
from font_tagger.validator import CatalogValidator, main


def messages(issues):
    return [f"{i.subject}: {i.message}" for i in issues]


class TestCatalogValidator:
    def test_clean_catalog_passes(self, store):
        store.add("/Expressive/Loud", "Roboto", score=90)
        validator = CatalogValidator(store.registries, store)
        assert validator.validate()
        assert validator.get_exit_code() == 0

    def test_tag_problems(self):
        definitions = {
            "NoSlash": {"description": "x"},
            "/A/Self": {"description": "x", "related": ["/A/Self", "/A/Missing"]},
            "/A/Empty": {},
        }
        registries = (
            RegistryBuilder()
            .with_tag_definitions(json.dumps(definitions))
            .with_tag_metadata("/A/Range,50,50\n")
            .build()
        )
        validator = CatalogValidator(registries)
        assert not validator.validate()
        errors = messages(validator.errors)
        assert any(e.startswith("NoSlash: Tag name must be a slash path") for e in errors)
        assert "/A/Self: Tag lists itself as related" in errors
        assert "/A/Self: Related tag '/A/Missing' does not exist" in errors
        assert any(e.startswith("/A/Range: lowest score 50") for e in errors)
        assert "/A/Empty: Tag has no description" in messages(validator.warnings)

    def test_rules_must_compile(self, registries):
        broken = type(registries)(
            tags=registries.tags,
            fonts=registries.fonts,
            rules=(LintRule("tags[", "broken", Severity.WARN),),
            embeddings=registries.embeddings,
        )
        validator = CatalogValidator(broken)
        validator.validate()
        assert [i.subject for i in validator.errors] == ["tags["]

    def test_scores_out_of_range(self, registries):
        store = TaggingStore(registries)
        store.add("/Expressive/Loud", "Roboto", score=150)
        store.add("/Expressive/Loud", "Roboto Flex", scores=[({"wght": 400}, -1)])
        validator = CatalogValidator(registries, store)
        validator.validate()
        assert messages(validator.errors) == [
            "Roboto /Expressive/Loud: score 150 outside [0, 100]",
            "Roboto Flex /Expressive/Loud: score -1 outside [0, 100]",
        ]

    def test_strict_mode_fails_on_warnings(self):
        registries = RegistryBuilder().with_tag_definitions(json.dumps({"/A/B": {}})).build()
        lenient = CatalogValidator(registries)
        lenient.validate()
        assert lenient.get_exit_code() == 0
        strict = CatalogValidator(registries, strict=True)
        strict.validate()
        assert strict.get_exit_code() == 1

    def test_print_report(self, registries, capsys):
        validator = CatalogValidator(registries)
        validator.validate()
        validator.print_report()
        out = capsys.readouterr().out
        assert "CATALOG VALIDATION REPORT" in out
        assert "VALIDATION PASSED" in out


class TestMain:
    def test_main_on_data_dir(self, data_dir, capsys):
        config = data_dir / "font_tagger.yml"
        config.write_text(f"data:\n  dir: {data_dir}\n", encoding="utf-8")
        assert main(["--config", str(config)]) == 0
        assert "Taggings: 3" in capsys.readouterr().out

    def test_main_load_failure(self, tmp_path, capsys):
        config = tmp_path / "font_tagger.yml"
        config.write_text(f"data:\n  dir: {tmp_path / 'nothing'}\n", encoding="utf-8")
        assert main(["--config", str(config)]) == 2
        assert "Failed to load" in capsys.readouterr().err
