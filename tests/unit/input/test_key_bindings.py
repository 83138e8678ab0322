"""Tests for default bindings, user overrides, and key dispatch."""

from __future__ import annotations

import unittest

from lazygrep.input import keys
from lazygrep.input.keys import (
    ACTIONS,
    MODE_EDITING,
    MODE_SEARCH_RESULT,
    KeyComboBinding,
    KeyComboRegistry,
    build_registry,
    default_bindings,
    is_printable_key,
    merge_bindings,
)


class DefaultBindingTests(unittest.TestCase):
    def test_every_default_binding_names_a_known_action(self) -> None:
        for table in default_bindings().values():
            self.assertLessEqual(set(table.values()), ACTIONS)

    def test_default_bindings_are_copies(self) -> None:
        bindings = default_bindings()
        bindings[MODE_SEARCH_RESULT]["q"] = "toggle-legend"
        self.assertEqual(keys.DEFAULT_SEARCH_RESULT_BINDINGS["q"], "quit")

    def test_merge_layers_overrides_per_mode(self) -> None:
        merged = merge_bindings({MODE_SEARCH_RESULT: {"x": "quit", "q": "toggle-legend"}, "bogus": {"y": "quit"}})
        self.assertEqual(merged[MODE_SEARCH_RESULT]["x"], "quit")
        self.assertEqual(merged[MODE_SEARCH_RESULT]["q"], "toggle-legend")
        self.assertEqual(merged[MODE_SEARCH_RESULT]["ESC"], "quit")
        self.assertEqual(merged[MODE_EDITING], keys.DEFAULT_EDITING_BINDINGS)
        self.assertNotIn("bogus", merged)


class RegistryTests(unittest.TestCase):
    def test_dispatch_returns_none_for_unbound_keys(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(combos=("a", "b"), handler=lambda: calls.append("ab") or True)
        )
        self.assertTrue(registry.dispatch("b"))
        self.assertIsNone(registry.dispatch("c"))
        self.assertEqual(calls, ["ab"])

    def test_build_registry_performs_named_actions(self) -> None:
        performed: list[str] = []

        def perform(action: str) -> bool:
            performed.append(action)
            return True

        registry = build_registry({"j": "cursor-down", "DOWN": "cursor-down", "k": "cursor-up"}, perform)
        registry.dispatch("DOWN")
        registry.dispatch("k")
        registry.dispatch("j")
        self.assertEqual(performed, ["cursor-down", "cursor-up", "cursor-down"])

    def test_is_printable_key(self) -> None:
        self.assertTrue(is_printable_key("a"))
        self.assertTrue(is_printable_key("あ"))
        self.assertTrue(is_printable_key(" "))
        self.assertFalse(is_printable_key("UP"))
        self.assertFalse(is_printable_key(""))
        self.assertFalse(is_printable_key("\x1b"))


if __name__ == "__main__":
    unittest.main()
