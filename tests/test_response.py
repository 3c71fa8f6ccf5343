"""Tests for jsonrest.http.response: the Response value and M shorthand."""

import dataclasses

import pytest

from jsonrest.http.response import M, Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.body is None
        assert response.status == 200
        assert response.headers == ()

    def test_chaining_returns_new_objects(self) -> None:
        base = Response({"id": 1})
        created = base.with_status(201).with_header("Location", "/users/1")
        assert base.status == 200
        assert created.status == 201
        assert created.headers == (("Location", "/users/1"),)

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Response().status = 500  # type: ignore[misc]


def test_m_is_a_dict() -> None:
    assert M(message="hi") == {"message": "hi"}
