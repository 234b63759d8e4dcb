"""Unit tests for identifier and text validation."""

from __future__ import annotations

import pytest
from bson import ObjectId


class TestValidateId:
    """validate_id turns raw identifiers into ObjectIds or fails early."""

    def test_valid_hex_string(self) -> None:
        from app.services.validators import validate_id

        oid = ObjectId()
        assert validate_id(str(oid), "Reel") == oid

    def test_surrounding_whitespace_is_ignored(self) -> None:
        from app.services.validators import validate_id

        oid = ObjectId()
        assert validate_id(f"  {oid} ", "Reel") == oid

    def test_object_id_passes_through(self) -> None:
        from app.services.validators import validate_id

        oid = ObjectId()
        assert validate_id(oid) is oid

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value: str | None) -> None:
        from app.core.exceptions import MissingIdentifier
        from app.services.validators import validate_id

        with pytest.raises(MissingIdentifier) as excinfo:
            validate_id(value, "Reel")
        assert excinfo.value.message == "Reel ID is missing"
        assert excinfo.value.status_code == 400

    @pytest.mark.parametrize("value", ["abc", "12345", "z" * 24, 42])
    def test_invalid(self, value: object) -> None:
        from app.core.exceptions import InvalidIdentifier
        from app.services.validators import validate_id

        with pytest.raises(InvalidIdentifier) as excinfo:
            validate_id(value, "Comment")
        assert excinfo.value.message == "Comment ID is invalid"

    def test_no_label(self) -> None:
        from app.core.exceptions import MissingIdentifier
        from app.services.validators import validate_id

        with pytest.raises(MissingIdentifier, match="^ID is missing$"):
            validate_id(None)


class TestRequireText:
    def test_trims(self) -> None:
        from app.services.validators import require_text

        assert require_text("  nice reel  ") == "nice reel"

    @pytest.mark.parametrize("value", [None, "", " \t\n "])
    def test_blank_rejected(self, value: str | None) -> None:
        from app.core.exceptions import EmptyText
        from app.services.validators import require_text

        with pytest.raises(EmptyText, match="Comment is missing"):
            require_text(value)

    def test_custom_message(self) -> None:
        from app.core.exceptions import EmptyText
        from app.services.validators import require_text

        with pytest.raises(EmptyText, match="Caption is required"):
            require_text("", "Caption is required")
