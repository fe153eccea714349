"""Tests for the .dootignore matcher."""

from pathlib import Path

import pytest

from doot.ignore import IgnoreMatcher, PatternError, compile_rules, load_ignore_file


class TestNegation:
    def test_ignore_everything_but_listed_files(self):
        matcher = compile_rules(["*", "!.bashrc", "!.profile"])
        assert matcher.matches(".vimrc")
        assert matcher.matches(".config", is_directory=True)
        assert not matcher.matches(".bashrc")
        assert not matcher.matches(".profile")

    def test_excluded_parent_cannot_be_reincluded(self):
        matcher = compile_rules(["build/", "!build/keep.txt"])
        assert matcher.matches("build/keep.txt")

    def test_last_matching_rule_wins(self):
        assert not compile_rules(["*.log", "!debug.log"]).matches("debug.log")
        assert compile_rules(["*.log", "!debug.log", "debug.log"]).matches("debug.log")

    def test_negation_without_earlier_match_is_noop(self):
        matcher = compile_rules(["!keep.txt"])
        assert not matcher.matches("keep.txt")
        assert not matcher.matches("other.txt")


class TestAnchoring:
    def test_leading_slash_anchors_to_root(self):
        matcher = compile_rules(["/foo"])
        assert matcher.matches("foo")
        assert not matcher.matches("sub/foo")

    def test_bare_name_matches_at_any_depth(self):
        matcher = compile_rules(["foo"])
        assert matcher.matches("foo")
        assert matcher.matches("a/b/foo")

    def test_inner_slash_anchors(self):
        matcher = compile_rules(["doc/*.txt"])
        assert matcher.matches("doc/notes.txt")
        assert not matcher.matches("other/doc/notes.txt")
        assert not matcher.matches("doc/sub/notes.txt")


class TestGlobs:
    def test_star_stays_in_segment(self):
        matcher = compile_rules(["/*.txt"])
        assert matcher.matches("a.txt")
        assert not matcher.matches("dir/a.txt")

    def test_question_mark(self):
        matcher = compile_rules(["?.txt"])
        assert matcher.matches("a.txt")
        assert not matcher.matches("ab.txt")

    def test_leading_double_star(self):
        matcher = compile_rules(["**/logs"])
        assert matcher.matches("logs", is_directory=True)
        assert matcher.matches("a/b/logs", is_directory=True)

    def test_trailing_double_star(self):
        matcher = compile_rules(["logs/**"])
        assert matcher.matches("logs/a/b.txt")
        assert not matcher.matches("logs", is_directory=True)

    def test_middle_double_star(self):
        matcher = compile_rules(["a/**/b"])
        assert matcher.matches("a/b")
        assert matcher.matches("a/x/y/b")
        assert not matcher.matches("c/a/b")

    def test_slash_inside_brackets_is_accepted(self):
        matcher = compile_rules(["a[/]b", "*.log"])
        assert len(matcher.rules) == 2
        assert matcher.matches("x.log")

    def test_leading_whitespace_is_part_of_the_name(self):
        matcher = compile_rules([" foo"])
        assert not matcher.matches("foo")
        assert matcher.matches(" foo")

    def test_negated_directory_does_not_reinclude_contents(self):
        matcher = compile_rules(["*.txt", "!docs"])
        assert not matcher.matches("docs", is_directory=True)
        assert matcher.matches("docs/a.txt")

    def test_character_classes(self):
        assert compile_rules(["[abc].txt"]).matches("b.txt")
        assert not compile_rules(["[abc].txt"]).matches("d.txt")
        assert compile_rules(["[!abc].txt"]).matches("d.txt")
        assert not compile_rules(["[!abc].txt"]).matches("a.txt")


class TestDirectoryOnly:
    def test_trailing_slash_matches_directories_only(self):
        matcher = compile_rules(["cache/"])
        assert matcher.matches("cache", is_directory=True)
        assert not matcher.matches("cache", is_directory=False)

    def test_contents_of_ignored_directory(self):
        matcher = compile_rules(["cache/"])
        assert matcher.matches("cache/blob.bin")
        assert matcher.matches("sub/cache/blob.bin")


class TestComments:
    def test_blank_and_comment_lines_skipped(self):
        matcher = compile_rules(["# a comment", "", "   "])
        assert matcher.rules == ()

    def test_escaped_hash_is_literal(self):
        assert compile_rules(["\\#notes"]).matches("#notes")

    def test_inline_comment(self):
        matcher = compile_rules(["*.swp  # editor junk"])
        assert matcher.matches("a.swp")
        assert matcher.rules[0].pattern == "*.swp"


class TestErrors:
    def test_unterminated_class_reports_line(self):
        with pytest.raises(PatternError) as exc_info:
            compile_rules(["ok.txt", "[abc"])
        assert exc_info.value.line_no == 2
        assert "[abc" in str(exc_info.value)

    def test_trailing_backslash(self):
        with pytest.raises(PatternError):
            compile_rules(["foo\\"])


class TestDeterminism:
    def test_same_input_same_rules(self):
        lines = ["*", "!.bashrc", "/build/", "**/*.log"]
        assert compile_rules(lines).rules == compile_rules(lines).rules

    def test_matching_is_repeatable(self):
        matcher = compile_rules(["*.log", "!keep.log"])
        first = [matcher.matches(p) for p in ("a.log", "keep.log", "x.txt")]
        second = [matcher.matches(p) for p in ("a.log", "keep.log", "x.txt")]
        assert first == second == [True, False, False]


class TestMatcher:
    def test_empty_matcher_ignores_nothing(self):
        assert not IgnoreMatcher().matches("anything")

    def test_extend_returns_new_matcher(self):
        base = compile_rules(["*.log"])
        extended = base.extend(["/.dootignore"])
        assert extended.matches(".dootignore")
        assert not base.matches(".dootignore")
        assert len(extended.rules) == 2


class TestLoadIgnoreFile:
    def test_missing_file_is_empty(self, tmp_path: Path):
        assert load_ignore_file(tmp_path / ".dootignore").rules == ()

    def test_loads_rules(self, tmp_path: Path):
        path = tmp_path / ".dootignore"
        path.write_text("*.swp\n# comment\n!keep.swp\n")
        matcher = load_ignore_file(path)
        assert len(matcher.rules) == 2
        assert matcher.matches("x.swp")
        assert not matcher.matches("keep.swp")

    def test_invalid_file_raises(self, tmp_path: Path):
        path = tmp_path / ".dootignore"
        path.write_text("good\n[bad\n")
        with pytest.raises(PatternError):
            load_ignore_file(path)
