"""Tests for option label building."""

from versioning.formatter import build_label, format_options, truncate
from versioning.models import DisplayOption, OutdatedPackage


def _pkg(name, current="1.0.0", latest="2.0.0", group="dependencies"):
    return OutdatedPackage(name=name, current=current, latest=latest, group=group)


class TestTruncate:
    """Name truncation."""

    def test_short_text_unchanged(self):
        assert truncate("left-pad", 30) == "left-pad"

    def test_exact_length_unchanged(self):
        text = "x" * 30
        assert truncate(text, 30) == text

    def test_one_over_is_cut(self):
        result = truncate("y" * 31, 30)
        assert result == "y" * 27 + "..."
        assert len(result) == 30


class TestBuildLabel:
    """Fixed-width label layout."""

    def test_long_name_label(self):
        pkg = _pkg("a-very-extremely-long-package-name-example", "1.0.0", "2.0.0")

        label = build_label(pkg)

        expected = (
            "a-very-extremely-long-packa..."
            + " " * 5
            + "1.0.0"
            + " " * 5
            + "→ 2.0.0"
        )
        assert label == expected
        assert label.index("1.0.0") == 35
        assert label.index("→") == 45

    def test_short_name_label(self):
        label = build_label(_pkg("left-pad", "1.0.0", "1.3.0"))

        assert label == "left-pad".ljust(35) + "1.0.0".ljust(10) + "→ 1.3.0"

    def test_long_current_version_is_not_cut(self):
        label = build_label(_pkg("x", "1.0.0-alpha.12345", "2.0.0"))

        assert label == "x".ljust(35) + "1.0.0-alpha.12345→ 2.0.0"

    def test_no_trailing_padding(self):
        assert build_label(_pkg("left-pad")).endswith("→ 2.0.0")


class TestFormatOptions:
    """One option per record, in order."""

    def test_order_and_values_preserved(self):
        packages = [_pkg("b"), _pkg("a"), _pkg("c", group="devDependencies")]

        options = format_options(packages)

        assert [option.value for option in options] == packages
        assert all(isinstance(option, DisplayOption) for option in options)
        assert options[0].label == build_label(packages[0])

    def test_empty_input(self):
        assert format_options([]) == []
