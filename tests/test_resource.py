"""
Unit tests for apicall/resource.py

Tests cover:
- Factories produce the matching variant and status
- Predicates (is_success, is_error, ...)
- Immutability and value equality
- Stack traces captured from exceptions
- data_or and when dispatch
"""

import dataclasses

import pytest

from apicall.resource import (
    Empty,
    Error,
    ExceptionState,
    Loading,
    Resource,
    ResourceStatus,
    Success,
)


# =============================================================================
# Factory Tests
# =============================================================================


class TestFactories:
    def test_loading(self):
        r = Resource.loading()
        assert isinstance(r, Loading)
        assert r.status is ResourceStatus.LOADING

    def test_success(self):
        r = Resource.success({"id": 5})
        assert isinstance(r, Success)
        assert r.data == {"id": 5}

    def test_error(self):
        r = Resource.error("bad input")
        assert isinstance(r, Error)
        assert r.message == "bad input"

    def test_empty(self):
        assert isinstance(Resource.empty(), Empty)

    def test_exception_captures_stack_trace(self):
        try:
            raise ValueError("boom")
        except ValueError as e:
            r = Resource.exception(e)
        assert isinstance(r, ExceptionState)
        assert r.error.args == ("boom",)
        assert "ValueError: boom" in r.stack_trace
        assert "test_exception_captures_stack_trace" in r.stack_trace

    def test_exception_without_traceback(self):
        r = Resource.exception(RuntimeError("never raised"))
        assert r.stack_trace == ""

    def test_exception_explicit_stack_trace(self):
        r = Resource.exception(RuntimeError("x"), "custom trace")
        assert r.stack_trace == "custom trace"


# =============================================================================
# Predicate Tests
# =============================================================================


class TestPredicates:
    @pytest.mark.parametrize("resource, attr", [
        (Resource.loading(), "is_loading"),
        (Resource.success(1), "is_success"),
        (Resource.error("x"), "is_error"),
        (Resource.exception(RuntimeError()), "is_exception"),
        (Resource.empty(), "is_empty"),
    ])
    def test_exactly_one_predicate_true(self, resource, attr):
        predicates = ["is_loading", "is_success", "is_error", "is_exception", "is_empty"]
        active = [p for p in predicates if getattr(resource, p)]
        assert active == [attr]


# =============================================================================
# Value Semantics Tests
# =============================================================================


class TestValueSemantics:
    def test_success_is_frozen(self):
        r = Resource.success(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.data = 2

    def test_error_is_frozen(self):
        r = Resource.error("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.message = "y"

    def test_equality(self):
        assert Resource.success(5) == Success(5)
        assert Resource.error("a") == Error("a")
        assert Resource.loading() == Loading()
        assert Resource.empty() == Empty()

    def test_different_variants_not_equal(self):
        assert Resource.loading() != Resource.empty()
        assert Resource.success("a") != Resource.error("a")


# =============================================================================
# data_or / when Tests
# =============================================================================


class TestAccessors:
    def test_data_or_success(self):
        assert Resource.success(0).data_or(10) == 0

    def test_data_or_other_variants(self):
        assert Resource.error("x").data_or(10) == 10
        assert Resource.empty().data_or() is None

    def test_when_success(self):
        result = Resource.success(2).when(success=lambda data: data * 10)
        assert result == 20

    def test_when_error(self):
        result = Resource.error("nope").when(
            success=lambda data: "ok",
            error=lambda message: f"error: {message}",
        )
        assert result == "error: nope"

    def test_when_exception_receives_stack(self):
        r = Resource.exception(RuntimeError("x"), "trace")
        result = r.when(exception=lambda error, stack: (type(error), stack))
        assert result == (RuntimeError, "trace")

    def test_when_loading_and_empty(self):
        assert Resource.loading().when(loading=lambda: "spinner") == "spinner"
        assert Resource.empty().when(empty=lambda: "nothing") == "nothing"

    def test_when_falls_back_to_otherwise(self):
        result = Resource.empty().when(success=lambda data: data, otherwise=lambda: "fallback")
        assert result == "fallback"

    def test_when_without_matching_handler_raises(self):
        with pytest.raises(ValueError, match="empty"):
            Resource.empty().when(success=lambda data: data)
