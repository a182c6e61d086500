"""Tests for RequestConfig and NavState value semantics."""

from __future__ import annotations

import dataclasses

import pytest
from helpers import FakeApi

from siren_nav.siren import EmbeddedEntity
from siren_nav.state import NavState, RequestConfig


class TestRequestConfig:
    def test_with_accept_appends(self):
        config = RequestConfig().with_accept("a").with_accept("b")
        assert config.headers["Accept"] == "a, b"

    def test_copy_on_write(self):
        original = RequestConfig(base_url="/api", headers={"X-Token": "t"})
        changed = original.with_header("X-Token", "u")
        assert original.headers["X-Token"] == "t"
        assert changed.headers["X-Token"] == "u"
        assert changed.base_url == "/api"

    def test_headers_are_read_only(self):
        config = RequestConfig(headers={"Accept": "a"})
        with pytest.raises(TypeError):
            config.headers["Accept"] = "b"  # type: ignore[index]

    def test_caller_dict_is_copied(self):
        headers = {"Accept": "a"}
        config = RequestConfig(headers=headers)
        headers["Accept"] = "b"
        assert config.headers["Accept"] == "a"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RequestConfig().base_url = "x"  # type: ignore[misc]

    def test_with_seed(self):
        seed = EmbeddedEntity(rel=["item"], properties={"n": 1})
        config = RequestConfig(base_url="/api").with_seed(seed)
        assert config.seed is seed
        assert config.with_seed(None).seed is None


class TestNavState:
    def test_at_acquires_handle(self):
        api = FakeApi()
        state = NavState.at("/a", "/api", RequestConfig(), api.cache)
        assert state.cache_entry is api.cache.get_or("/a")

    def test_moved_to_keeps_root_and_reacquires(self):
        api = FakeApi()
        state = NavState.at("/a", "/api", RequestConfig(base_url="/api"), api.cache)
        moved = state.moved_to("/b", api.cache)
        assert moved.current == "/b"
        assert moved.root == "/api"
        assert moved.config == state.config
        assert moved.cache_entry is api.cache.get_or("/b")
        assert state.current == "/a"

    def test_with_config_keeps_handle(self):
        api = FakeApi()
        state = NavState.at("/a", "/api", RequestConfig(), api.cache)
        changed = state.with_config(RequestConfig().with_accept("text/html"))
        assert changed.cache_entry is state.cache_entry
        assert "Accept" not in state.config.headers
