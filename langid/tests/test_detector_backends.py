"""Tests for the detector registry and backends.

The CLD3 backend is exercised against a stand-in ``gcld3`` module so the
native extension is not required; langdetect is a regular dependency and
is patched only where exact probabilities matter.
"""
from __future__ import annotations

import sys
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from langdetect.lang_detect_exception import LangDetectException

from langid.clients.detector.providers import langdetect as langdetect_provider
from langid.clients.detector.providers.langdetect import LangdetectDetector
from langid.clients.detector.registry import DetectorRegistry, default_registry
from langid.gateway.types import LanguageGuess
from langid.tests.helpers import FakeDetector


def _cld3_result(language, probability=0.9, is_reliable=True, proportion=1.0):
    return SimpleNamespace(
        language=language, probability=probability, is_reliable=is_reliable, proportion=proportion
    )


class TestDetectorRegistry(unittest.TestCase):
    def test_register_and_build(self) -> None:
        registry = DetectorRegistry()
        registry.register("fake", lambda cfg: FakeDetector())
        self.assertEqual(registry.names, ["fake"])
        self.assertIsInstance(registry.build("fake", {}), FakeDetector)

    def test_unknown_backend(self) -> None:
        with self.assertRaises(KeyError):
            DetectorRegistry().build("nope", {})

    def test_default_backends(self) -> None:
        self.assertEqual(default_registry.names, ["cld3", "langdetect"])


class TestCld3Detector(unittest.TestCase):
    def setUp(self) -> None:
        self.identifier = MagicMock()
        self.gcld3 = SimpleNamespace(NNetLanguageIdentifier=MagicMock(return_value=self.identifier))
        patcher = patch.dict(sys.modules, {"gcld3": self.gcld3})
        patcher.start()
        self.addCleanup(patcher.stop)

    def _build(self, **cfg):
        return default_registry.build("cld3", cfg)

    def test_builds_identifier_with_byte_bounds(self) -> None:
        detector = self._build(cld_min_bytes=5, cld_max_bytes=700)
        self.gcld3.NNetLanguageIdentifier.assert_called_once_with(min_num_bytes=5, max_num_bytes=700)
        self.assertEqual(detector.provider, "cld3")

    def test_find_language(self) -> None:
        self.identifier.FindLanguage.return_value = _cld3_result("pl", 0.98, True, 1.0)
        guess = self._build().find_language("Dzień dobry")
        self.assertEqual(guess, LanguageGuess("pl", 0.98, True, 1.0))
        self.identifier.FindLanguage.assert_called_once_with(text="Dzień dobry")

    def test_find_top_n_drops_padding(self) -> None:
        self.identifier.FindTopNMostFreqLangs.return_value = [
            _cld3_result("en", proportion=0.7),
            _cld3_result("de", proportion=0.3),
            _cld3_result("und", 0.0, False, 0.0),
        ]
        guesses = self._build().find_top_n("Hello und guten Tag", 3)
        self.assertEqual([g.language for g in guesses], ["en", "de"])
        self.identifier.FindTopNMostFreqLangs.assert_called_once_with(text="Hello und guten Tag", num_langs=3)

    def test_dispose_is_repeatable_and_blocks_use(self) -> None:
        detector = self._build()
        detector.dispose()
        detector.dispose()
        with self.assertRaises(RuntimeError):
            detector.find_language("text")


class TestLangdetectDetector(unittest.TestCase):
    def test_maps_probabilities(self) -> None:
        langs = [SimpleNamespace(lang="pl", prob=0.95), SimpleNamespace(lang="cs", prob=0.04)]
        with patch.object(langdetect_provider, "detect_langs", return_value=langs):
            detector = LangdetectDetector()
            single = detector.find_language("Dzień dobry, jak się masz?")
            ranked = detector.find_top_n("Dzień dobry, jak się masz?", 1)
        self.assertEqual(single, LanguageGuess("pl", 0.95, True, 0.95))
        self.assertEqual(ranked, [single])

    def test_low_probability_is_unreliable(self) -> None:
        with patch.object(langdetect_provider, "detect_langs", return_value=[SimpleNamespace(lang="en", prob=0.5)]):
            guess = LangdetectDetector().find_language("ok then")
        self.assertFalse(guess.is_reliable)

    def test_no_features_is_undetermined(self) -> None:
        with patch.object(langdetect_provider, "detect_langs", side_effect=LangDetectException(0, "No features in text.")):
            detector = LangdetectDetector()
            self.assertEqual(detector.find_language("12345 !!!"), LanguageGuess.undetermined())
            self.assertEqual(detector.find_top_n("12345 !!!", 3), [])

    def test_real_detection(self) -> None:
        detector = default_registry.build("langdetect", {})
        guess = detector.find_language("This is a perfectly ordinary English sentence about the weather.")
        self.assertEqual(guess.language, "en")
        self.assertEqual(detector.provider, "langdetect")


if __name__ == "__main__":
    unittest.main()
