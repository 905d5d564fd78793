"""Unit tests for mailblocks.validator.validator, mailblocks.validator.rules,
and mailblocks.validator.diagnostics, covering all three modules in one file.
"""
from __future__ import annotations

import dataclasses

import pytest

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import DocumentNode
from mailblocks.registry.components import DEFAULT_REGISTRY
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity
from mailblocks.validator.rules import (
    DEFAULT_RULES,
    STRUCTURAL_RULES,
    rule_duplicate_ids,
    rule_image_source,
    rule_leaf_children,
    rule_link_target,
    rule_missing_ids,
    rule_nested_root,
    rule_unknown_type,
)
from mailblocks.validator.validator import TreeValidator, ensure_valid, validate_tree

# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def _root(*children: DocumentNode) -> DocumentNode:
    return DocumentNode("root", "Root", children=children)


def _section(node_id: str, *children: DocumentNode) -> DocumentNode:
    return DocumentNode(node_id, "Section", children=children)


def _text(node_id: str, content: str = "x") -> DocumentNode:
    return DocumentNode(node_id, "Text", content=content)


# ---------------------------------------------------------------------------
# Diagnostic
# ---------------------------------------------------------------------------


class TestDiagnosticSeverity:
    def test_all_levels_exist(self) -> None:
        names = {s.name for s in DiagnosticSeverity}
        assert names == {"ERROR", "WARNING", "INFORMATION", "HINT"}


class TestDiagnostic:
    def _diag(self, severity: DiagnosticSeverity = DiagnosticSeverity.ERROR, **kwargs: object) -> Diagnostic:
        return Diagnostic(severity=severity, code="MB001", message="bad", **kwargs)  # type: ignore[arg-type]

    def test_is_error_true_for_error_severity(self) -> None:
        assert self._diag().is_error

    def test_is_error_false_for_warning(self) -> None:
        assert not self._diag(DiagnosticSeverity.WARNING).is_error

    def test_str_contains_code_severity_and_path(self) -> None:
        text = str(self._diag(path="root.children[0]"))
        assert "[MB001] ERROR" in text
        assert "at root.children[0]" in text

    def test_str_includes_suggestion_when_present(self) -> None:
        assert "(hint: rename)" in str(self._diag(suggestion="rename"))

    def test_diagnostic_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            self._diag().code = "X"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TestRuleUnknownType:
    def test_known_types_pass(self, sample_tree: DocumentNode) -> None:
        assert rule_unknown_type(sample_tree, DEFAULT_REGISTRY) == []

    def test_unknown_type_reported_with_path(self) -> None:
        tree = _root(_section("s", DocumentNode("c", "Carousel")))
        diags = rule_unknown_type(tree, DEFAULT_REGISTRY)
        assert [d.code for d in diags] == ["MB001"]
        assert diags[0].path == "root.children[0].children[0]"


class TestRuleLeafChildren:
    def test_leaf_with_children_is_error(self) -> None:
        tree = _root(DocumentNode("t", "Text", children=(_text("inner"),)))
        diags = rule_leaf_children(tree, DEFAULT_REGISTRY)
        assert diags[0].code == "MB002"
        assert diags[0].is_error

    def test_leaf_with_empty_children_passes(self) -> None:
        tree = _root(DocumentNode("t", "Text", children=()))
        assert rule_leaf_children(tree, DEFAULT_REGISTRY) == []


class TestRuleDuplicateIds:
    def test_second_occurrence_reported(self) -> None:
        tree = _root(_text("a"), _section("s", _text("a")))
        diags = rule_duplicate_ids(tree, DEFAULT_REGISTRY)
        assert len(diags) == 1
        assert diags[0].path == "root.children[1].children[0]"
        assert "root.children[0]" in diags[0].message


class TestRuleMissingIds:
    def test_empty_id(self) -> None:
        assert rule_missing_ids(_root(_text("")), DEFAULT_REGISTRY)[0].code == "MB004"


class TestRuleNestedRoot:
    def test_nested_root_reported(self) -> None:
        tree = _root(_section("s", DocumentNode("r2", "Root", children=())))
        assert [d.code for d in rule_nested_root(tree, DEFAULT_REGISTRY)] == ["MB005"]

    def test_top_level_root_passes(self, sample_tree: DocumentNode) -> None:
        assert rule_nested_root(sample_tree, DEFAULT_REGISTRY) == []


class TestRuleWarnings:
    def test_image_without_src(self) -> None:
        diags = rule_image_source(_root(DocumentNode("i", "Image")), DEFAULT_REGISTRY)
        assert diags[0].code == "MB006"
        assert diags[0].severity == DiagnosticSeverity.WARNING

    def test_button_without_href(self) -> None:
        diags = rule_link_target(_root(DocumentNode("b", "Button", content="Go")), DEFAULT_REGISTRY)
        assert diags[0].code == "MB007"

    def test_link_with_href_passes(self) -> None:
        link = DocumentNode("l", "Link", {"href": "https://x.test"}, content="x")
        assert rule_link_target(_root(link), DEFAULT_REGISTRY) == []


# ---------------------------------------------------------------------------
# TreeValidator
# ---------------------------------------------------------------------------


class TestTreeValidator:
    def test_valid_tree_has_no_diagnostics(self, sample_tree: DocumentNode) -> None:
        assert TreeValidator().validate(sample_tree) == []

    def test_default_rule_count(self) -> None:
        assert TreeValidator().rule_count == len(DEFAULT_RULES)
        assert set(STRUCTURAL_RULES) < set(DEFAULT_RULES)

    def test_results_in_document_order(self) -> None:
        tree = _root(DocumentNode("i", "Image"), _text(""), DocumentNode("c", "Carousel"))
        diags = TreeValidator().validate(tree)
        assert [d.code for d in diags] == ["MB006", "MB004", "MB001"]

    def test_strict_promotes_warnings(self) -> None:
        diags = TreeValidator(strict=True).validate(_root(DocumentNode("i", "Image")))
        assert diags[0].severity == DiagnosticSeverity.ERROR

    def test_add_rule(self) -> None:
        def rule_no_dividers(tree: DocumentNode, registry: object) -> list[Diagnostic]:
            return [Diagnostic(DiagnosticSeverity.HINT, "X001", "divider")] if tree.children else []

        validator = TreeValidator(rules=[])
        validator.add_rule(rule_no_dividers)  # type: ignore[arg-type]
        assert validator.rule_count == 1
        assert validator.validate(_root(_text("a")))[0].code == "X001"

    def test_validate_tree_function(self, sample_tree: DocumentNode) -> None:
        assert validate_tree(sample_tree) == []


class TestEnsureValid:
    def test_valid_tree_passes(self, sample_tree: DocumentNode) -> None:
        ensure_valid(sample_tree)

    def test_raises_first_error_with_path(self) -> None:
        tree = _root(_text("ok"), DocumentNode("c", "Carousel"))
        with pytest.raises(StructuralError) as exc_info:
            ensure_valid(tree)
        assert exc_info.value.path == "root.children[1]"

    def test_warnings_do_not_raise(self) -> None:
        ensure_valid(_root(DocumentNode("i", "Image")))
