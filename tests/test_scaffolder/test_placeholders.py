"""Tests for crabgen.scaffolder.placeholders.

Covers:
- Default token table and precedence ordering
- Prefix-sharing tokens ($MODEL_NAME vs $MODEL_NAMEChangeset)
- Single-pass substitution (replaced text is never rescanned)
- Strict mode rejecting unknown tokens
- Table validation
"""

from __future__ import annotations

import pytest

from crabgen.naming import ResourceNameSet
from crabgen.scaffolder.errors import TemplateError
from crabgen.scaffolder.placeholders import DEFAULT_PLACEHOLDERS, PlaceholderExpander, expand

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------


class TestExpand:
    def test_replaces_every_default_token(self, post_names: ResourceNameSet) -> None:
        template = "$MODEL_NAME $FILE_NAME $TABLE_NAME $RAW_NAME"
        assert expand(template, post_names) == "Post post posts Post"

    def test_model_name_prefix_of_changeset(self, post_names: ResourceNameSet) -> None:
        assert expand("$MODEL_NAMEChangeset", post_names) == "PostChangeset"

    def test_multiword_names(self, user_session_names: ResourceNameSet) -> None:
        template = "use crate::schema::$TABLE_NAME; mod $FILE_NAME; struct $MODEL_NAME;"
        assert expand(template, user_session_names) == (
            "use crate::schema::user_sessions; mod user_session; struct UserSession;"
        )

    def test_is_deterministic(self, post_names: ResourceNameSet) -> None:
        template = "impl $MODEL_NAME { fn t() -> &str { \"$TABLE_NAME\" } }"
        assert expand(template, post_names) == expand(template, post_names)

    def test_text_without_tokens_is_unchanged(self, post_names: ResourceNameSet) -> None:
        template = "fn main() { println!(\"$5 and $lower\"); }"
        assert expand(template, post_names) == template

    def test_unknown_tokens_kept_in_lenient_mode(self, post_names: ResourceNameSet) -> None:
        assert expand("$UNKNOWN $MODEL_NAME", post_names) == "$UNKNOWN Post"

    def test_substituted_text_is_not_rescanned(self) -> None:
        names = ResourceNameSet(
            raw="$MODEL_NAME",
            pascal_case="ModelName",
            snake_case="model_name",
            table_case="model_names",
        )
        assert expand("$RAW_NAME", names) == "$MODEL_NAME"


# ---------------------------------------------------------------------------
# Table ordering & validation
# ---------------------------------------------------------------------------


class TestPlaceholderTable:
    def test_longer_tokens_precede_their_prefixes(self) -> None:
        expander = PlaceholderExpander([("$A", "raw"), ("$AB", "pascal_case")])
        assert expander.tokens == ["$AB", "$A"]

    def test_prefix_token_wins_only_without_longer_match(
        self, post_names: ResourceNameSet
    ) -> None:
        expander = PlaceholderExpander([("$A", "raw"), ("$AB", "table_case")])
        assert expander.expand("$AB $A $AC", post_names) == "posts Post PostC"

    def test_equal_length_keeps_declaration_order(self) -> None:
        expander = PlaceholderExpander([("$X", "raw"), ("$Y", "raw")])
        assert expander.tokens == ["$X", "$Y"]

    def test_default_table_has_all_tokens(self) -> None:
        expander = PlaceholderExpander()
        assert set(expander.tokens) == {token for token, _ in DEFAULT_PLACEHOLDERS}

    def test_empty_table_rejected(self) -> None:
        with pytest.raises(ValueError, match="At least one placeholder"):
            PlaceholderExpander([])

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="unknown field"):
            PlaceholderExpander([("$X", "kebab_case")])


# ---------------------------------------------------------------------------
# Strict mode
# ---------------------------------------------------------------------------


class TestStrictMode:
    def test_unknown_token_raises(self, post_names: ResourceNameSet) -> None:
        with pytest.raises(TemplateError) as exc_info:
            expand("struct $MODEL_NAME { $COLUMNS }", post_names, strict=True)
        assert exc_info.value.token == "$COLUMNS"

    def test_source_is_reported(self, post_names: ResourceNameSet) -> None:
        expander = PlaceholderExpander(strict=True)
        with pytest.raises(TemplateError, match="resource/model.rs"):
            expander.expand("$NOPE", post_names, source="resource/model.rs")

    def test_suffixed_known_token_passes(self, post_names: ResourceNameSet) -> None:
        result = expand("$MODEL_NAMEChangeset $MODEL_NAME_LIST", post_names, strict=True)
        assert result == "PostChangeset Post_LIST"

    def test_known_tokens_expand_normally(self, post_names: ResourceNameSet) -> None:
        assert expand("$FILE_NAME.rs", post_names, strict=True) == "post.rs"
