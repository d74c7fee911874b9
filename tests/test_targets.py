from __future__ import annotations

import dataclasses
import unittest

from psi_exporter.domain.targets import Strategy, Target, expand_targets


class TestExpandTargets(unittest.TestCase):
    def test_crosses_urls_with_both_strategies_in_order(self) -> None:
        targets = expand_targets(["https://a.com", " ", "https://b.com "])

        self.assertEqual(
            targets,
            [
                Target(url="https://a.com", strategy=Strategy.MOBILE),
                Target(url="https://a.com", strategy=Strategy.DESKTOP),
                Target(url="https://b.com", strategy=Strategy.MOBILE),
                Target(url="https://b.com", strategy=Strategy.DESKTOP),
            ],
        )

    def test_blank_only_input_yields_nothing(self) -> None:
        self.assertEqual(expand_targets(["", "   ", "\t"]), [])
        self.assertEqual(expand_targets([]), [])

    def test_duplicates_are_kept(self) -> None:
        targets = expand_targets(["https://a.com", "https://a.com"])

        self.assertEqual(len(targets), 4)

    def test_target_is_immutable(self) -> None:
        target = Target(url="https://a.com", strategy=Strategy.MOBILE)

        with self.assertRaises(dataclasses.FrozenInstanceError):
            target.url = "https://b.com"  # type: ignore[misc]

    def test_strategy_values_match_api_parameters(self) -> None:
        self.assertEqual([strategy.value for strategy in Strategy], ["mobile", "desktop"])
