"""Tests for the Credential model and token masking."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from betexport.services.credentials.types import Credential, mask_token

TOKEN = "abcdefghij.KLMNOPQRST.uvwxyz0123"  # noqa: S105


class TestMaskToken:
    def test_keeps_head_and_tail(self) -> None:
        assert mask_token(TOKEN) == "abcdef...0123"


class TestCredential:
    def test_repr_uses_masked_token(self) -> None:
        # setup
        credential = Credential(access_token=TOKEN, customer_id="1234567")

        # act
        text = repr(credential)

        # assert
        assert mask_token(TOKEN) in text
        assert TOKEN not in text
        assert str(credential) == text

    def test_token_is_stripped(self) -> None:
        credential = Credential(access_token=f"  {TOKEN}\n", customer_id="1234567")

        assert credential.access_token == TOKEN

    @pytest.mark.parametrize("token", ["", "   ", "two words"])
    def test_blank_or_spaced_token_rejected(self, token: str) -> None:
        with pytest.raises(ValidationError):
            Credential(access_token=token, customer_id="1234567")

    def test_customer_id_must_be_digits(self) -> None:
        with pytest.raises(ValidationError):
            Credential(access_token=TOKEN, customer_id="AB-1234")
