"""Tests for smallwork.__init__: every public name resolves lazily."""

import pytest

import smallwork


@pytest.mark.parametrize("name", smallwork.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(smallwork, name)
    assert obj is not None, f"smallwork.{name} resolved to None"


def test_resolved_names_are_canonical() -> None:
    from smallwork.app import App
    from smallwork.errors import UnknownBinding
    from smallwork.middleware.builtin import CORSMiddleware

    assert smallwork.App is App
    assert smallwork.UnknownBinding is UnknownBinding
    assert smallwork.CORSMiddleware is CORSMiddleware


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        smallwork.__getattr__("ThisDoesNotExist")


def test_version() -> None:
    assert smallwork.__version__ == "0.1.0"
