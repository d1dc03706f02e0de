"""
Tests for the lint engine.
"""
from font_tagger.lint import build_context, has_blocking, lint_store, run_lint
from font_tagger.models import LintRule, Severity


def rule(text, description="violation", severity=Severity.WARN):
    return LintRule(rule=text, description=description, severity=severity)


class TestBuildContext:
    def test_only_static_taggings(self, store):
        store.add("/Expressive/Loud", "Roboto Flex", scores=[({"wght": 400}, 90)])
        store.add("/Purpose/Easy Reading", "Roboto Flex", score=60)
        context = build_context(store.registries.fonts.require("Roboto Flex"))
        assert dict(context.tag_scores) == {"/Purpose/Easy Reading": 60}
        assert context.family_name == "Roboto Flex"


class TestRunLint:
    def test_end_to_end_loud_roboto(self, store):
        store.add("/Expressive/Loud", "Roboto", score=90)
        store.add("/Expressive/Loud", "Comic Sans MS", score=90)
        rules = store.registries.rules

        roboto = run_lint(rules, store.registries.fonts.require("Roboto"))
        assert [(w.description, w.severity) for w in roboto] == [
            ("Roboto should not be loud", Severity.WARN)
        ]
        comic = run_lint(rules, store.registries.fonts.require("Comic Sans MS"))
        assert [w.description for w in comic] == ["Novelty family"]

    def test_unparseable_rule_yields_one_error(self, store):
        font = store.registries.fonts.require("Roboto")
        rules = [rule("tags[", "broken"), rule("true", "always")]
        warnings = run_lint(rules, font)
        assert len(warnings) == 2
        assert warnings[0].severity is Severity.ERROR
        assert warnings[0].description == "Rule could not be parsed: tags["
        assert warnings[1].description == "always"

    def test_deeply_nested_rule_yields_one_error(self, store):
        font = store.registries.fonts.require("Lato")
        rules = [rule("(" * 400 + "1 >", "nested"), rule("true", "always")]
        warnings = run_lint(rules, font)
        assert [w.severity for w in warnings] == [Severity.ERROR, Severity.WARN]
        assert warnings[0].description.startswith("Rule could not be parsed: (((")
        assert warnings[1].description == "always"

    def test_loud_roboto_rule_ignores_other_families(self, store):
        store.add("/Expressive/Loud", "Roboto", score=90)
        store.add("/Expressive/Loud", "Comic Sans MS", score=90)
        rules = [
            LintRule(
                rule='tags["/Expressive/Loud"] > 80 && family == "Roboto"',
                description="Roboto should not be loud",
                severity=Severity.WARN,
            )
        ]
        assert run_lint(rules, store.registries.fonts.require("Comic Sans MS")) == []
        roboto = run_lint(rules, store.registries.fonts.require("Roboto"))
        assert [(w.description, w.severity) for w in roboto] == [
            ("Roboto should not be loud", Severity.WARN)
        ]

    def test_order_and_no_dedup(self, store):
        font = store.registries.fonts.require("Lato")
        rules = [rule("true", "b"), rule("true", "a"), rule("true", "b"), rule("false", "c")]
        assert [w.description for w in run_lint(rules, font)] == ["b", "a", "b"]

    def test_at_most_one_warning_per_rule(self, store):
        font = store.registries.fonts.require("Lato")
        rules = [rule("true"), rule("bogus ("), rule("1 > 0 or 2 > 1")]
        assert len(run_lint(rules, font)) <= len(rules)

    def test_missing_tag_does_not_fire(self, store):
        font = store.registries.fonts.require("Lato")
        assert run_lint([rule('tags["/Expressive/Loud"] < 50')], font) == []

    def test_no_rules(self, store):
        assert run_lint([], store.registries.fonts.require("Lato")) == []


class TestLintStore:
    def test_only_fonts_with_warnings_in_name_order(self, store):
        store.add("/Expressive/Loud", "Roboto", score=90)
        results = lint_store(store.registries.rules, store)
        assert list(results) == ["Comic Sans MS", "Roboto"]
        assert not has_blocking(results)

    def test_blocking(self, store):
        results = lint_store([rule("true", "bad", Severity.FAIL)], store)
        assert len(results) == len(store.registries.fonts)
        assert has_blocking(results)
