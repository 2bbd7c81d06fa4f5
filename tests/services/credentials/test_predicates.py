"""Tests for credential candidate predicates and the nested walk."""

from __future__ import annotations

import pytest

from betexport.services.credentials.predicates import (
    customer_candidate,
    customer_id_from_claims,
    known_key_token,
    normalize_customer_id,
    search_nested,
    token_candidate,
    walk_members,
)

JWT = "abcdefghij.KLMNOPQRST.uvwxyz0123"


class TestTokenCandidate:
    def test_jwt_shaped_accepted_regardless_of_key(self) -> None:
        assert token_candidate("unrelated", JWT) == JWT
        assert token_candidate(None, JWT) == JWT

    def test_long_dotted_value_under_token_key_accepted(self) -> None:
        # input
        value = "opaque." + "x" * 60

        # act
        result = token_candidate("SessionToken", value)

        # assert
        assert result == value

    def test_long_dotted_value_without_token_key_rejected(self) -> None:
        assert token_candidate("session", "opaque." + "x" * 60) is None

    def test_token_key_needs_more_than_sixty_chars(self) -> None:
        value = "a." + "x" * 58
        assert len(value) == 60
        assert token_candidate("token", value) is None

    def test_two_segment_value_rejected(self) -> None:
        assert token_candidate("jwt", "abcdefghij.KLMNOPQRST") is None

    def test_non_string_rejected(self) -> None:
        assert token_candidate("token", 123) is None
        assert token_candidate("token", {"a": JWT}) is None


class TestKnownKeyToken:
    def test_known_key_case_insensitive(self) -> None:
        assert known_key_token("AccessTokenV2", f"  {JWT} ") == JWT

    def test_unknown_key(self) -> None:
        assert known_key_token("something", JWT) is None

    def test_known_key_requires_jwt_shape(self) -> None:
        assert known_key_token("cxp-token", "not-a-jwt") is None


class TestNormalizeCustomerId:
    def test_strips_non_digits(self) -> None:
        assert normalize_customer_id("AB-12345-CD") == "12345"

    def test_ten_digits_rejected(self) -> None:
        assert normalize_customer_id("1234567890") is None

    def test_three_digits_rejected(self) -> None:
        assert normalize_customer_id("123") is None

    @pytest.mark.parametrize("value", ["1234", "123456789"])
    def test_bounds_inclusive(self, value: str) -> None:
        assert normalize_customer_id(value) == value


class TestCustomerCandidate:
    def test_string_value(self) -> None:
        assert customer_candidate("anything", " 7654321 ") == "7654321"

    def test_number_value_is_rounded(self) -> None:
        assert customer_candidate("id", 7654320.6) == "7654321"

    def test_bool_is_not_a_number(self) -> None:
        assert customer_candidate("id", True) is None

    def test_infinite_number_rejected(self) -> None:
        assert customer_candidate("id", float("inf")) is None

    def test_unrelated_long_string_rejected(self) -> None:
        assert customer_candidate("blob", "token 12345678901234") is None


class TestCustomerIdFromClaims:
    def test_cust_id_claim(self, make_jwt) -> None:
        assert customer_id_from_claims(make_jwt(custId=1234567)) == "1234567"

    def test_account_no_fallback(self, make_jwt) -> None:
        assert customer_id_from_claims(make_jwt(accountNo="998877")) == "998877"

    def test_non_digit_claim_ignored(self, make_jwt) -> None:
        assert customer_id_from_claims(make_jwt(custId="C-1234")) is None

    def test_missing_claim(self, make_jwt) -> None:
        assert customer_id_from_claims(make_jwt()) is None


class TestWalkMembers:
    def test_depth_first_document_order(self) -> None:
        # input
        tree = {"a": {"b": 1, "c": [10, {"d": 2}]}, "e": 3}

        # act
        keys = [key for key, _ in walk_members(tree)]

        # expected
        expected = ["a", "b", "c", "0", "1", "d", "e"]

        # assert
        assert keys == expected

    def test_scalar_root_yields_nothing(self) -> None:
        assert list(walk_members("just a string")) == []

    def test_cycles_are_not_followed(self) -> None:
        # setup
        node: dict[str, object] = {"name": "loop"}
        node["self"] = node

        # act
        keys = [key for key, _ in walk_members(node)]

        # assert
        assert keys == ["name", "self"]

    def test_visit_cap(self) -> None:
        tree = {str(i): i for i in range(100)}

        members = list(walk_members(tree, max_nodes=10))

        assert len(members) == 10


class TestSearchNested:
    def test_first_hit_in_traversal_order(self) -> None:
        # input
        tree = {
            "profile": {"session": {"accessToken": JWT}},
            "other": {"token": "zzzzzzzzzz.zzzzzzzzzz.zzzzzzzzzz"},
        }

        # act
        result = search_nested(tree, token_candidate)

        # assert
        assert result == JWT

    def test_no_hit(self) -> None:
        assert search_nested({"a": {"b": "c"}}, token_candidate) is None
