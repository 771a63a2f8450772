"""Locate the velix App named by a ``"module:attribute"`` string."""

import importlib

from velix.app import App


def resolve_app(import_string: str) -> App:
    """Load the velix ``App`` named by *import_string*.

    ``"pkg.module:name"`` looks up ``name``; a bare ``"pkg.module"`` looks
    up ``app``. When the attribute is a zero-argument factory rather than
    an App, it is called once and must return one.

    Import and attribute errors propagate unchanged (``ModuleNotFoundError``,
    ``AttributeError``); anything that does not yield an App is a
    ``TypeError``.
    """
    module_name, _, attribute = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attribute or "app")

    if isinstance(target, App):
        return target

    if callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc
        if isinstance(target, App):
            return target

    msg = f"{import_string!r} resolved to {type(target).__name__}, not a velix.App instance"
    raise TypeError(msg)
