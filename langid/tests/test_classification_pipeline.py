"""Unit tests for ClassificationPipeline."""
from __future__ import annotations

import json
import unittest
from unittest.mock import patch

from langid.config.service import ServiceConfig
from langid.core.exceptions import DetectionFailedError, EmptyInputError, NotReadyError, ValidationError
from langid.gateway.cache import LRUCache
from langid.gateway.keys import DigestKeyBuilder, ExactKeyBuilder
from langid.gateway.lifecycle import DetectorLifecycle
from langid.gateway.pipeline import ClassificationPipeline, build_pipeline
from langid.gateway.types import ClassificationResponse, LanguageGuess
from langid.tests.helpers import POLISH, RANKED, FakeDetector, _run


def _ready_pipeline(detector=None, *, cache_max=100, min_len=0, max_input_chars=0, key_builder=None):
    detector = detector or FakeDetector()
    lifecycle = DetectorLifecycle(lambda: detector)
    _run(lifecycle.initialize())
    pipeline = ClassificationPipeline(
        lifecycle,
        LRUCache(cache_max),
        key_builder or ExactKeyBuilder(),
        min_len=min_len,
        max_input_chars=max_input_chars,
    )
    return pipeline, detector


class TestReadinessGate(unittest.TestCase):
    def test_rejects_before_ready_without_touching_cache(self) -> None:
        detector = FakeDetector()
        pipeline = ClassificationPipeline(DetectorLifecycle(lambda: detector), LRUCache(10))
        with self.assertRaises(NotReadyError):
            _run(pipeline.classify("Dzień dobry, jak się masz?"))
        self.assertEqual(pipeline.cache.stats()["misses"], 0)
        self.assertEqual(detector.calls, 0)

    def test_not_ready_wins_over_empty_input(self) -> None:
        pipeline = ClassificationPipeline(DetectorLifecycle(FakeDetector), LRUCache(10))
        with self.assertRaises(NotReadyError):
            _run(pipeline.classify("   "))


class TestNormalization(unittest.TestCase):
    def test_trims_whitespace(self) -> None:
        pipeline, detector = _ready_pipeline()
        response = _run(pipeline.classify("  \n Dzień dobry, jak się masz?\t "))
        self.assertEqual(detector.single_calls, ["Dzień dobry, jak się masz?"])
        self.assertEqual(response.input_len, 26)

    def test_truncates_to_max_input_chars(self) -> None:
        pipeline, detector = _ready_pipeline(max_input_chars=5)
        response = _run(pipeline.classify("abcdefghij"))
        self.assertEqual(detector.single_calls, ["abcde"])
        self.assertEqual(response.input_len, 5)

    def test_coerces_non_string_input(self) -> None:
        pipeline, detector = _ready_pipeline()
        _run(pipeline.classify(1234567890123))
        self.assertEqual(detector.single_calls, ["1234567890123"])

    def test_blank_text_raises_empty_input(self) -> None:
        pipeline, detector = _ready_pipeline()
        for raw in ("", "   ", "\n\t", None):
            with self.assertRaises(EmptyInputError) as ctx:
                _run(pipeline.classify(raw))
            self.assertEqual(ctx.exception.message, "Empty 'text'.")
            self.assertEqual(ctx.exception.http_status, 400)
        self.assertEqual(detector.calls, 0)

    def test_top_n_out_of_range(self) -> None:
        pipeline, _ = _ready_pipeline()
        for bad in (0, 11, True, 2.0):
            with self.assertRaises(ValidationError):
                _run(pipeline.classify("hello world again", bad))  # type: ignore[arg-type]


class TestFastFail(unittest.TestCase):
    def test_short_text_single_undetermined(self) -> None:
        pipeline, detector = _ready_pipeline(min_len=10)
        response = _run(pipeline.classify("hi"))
        self.assertEqual(
            response.to_dict(),
            {"input_len": 2, "cld3": {"language": "und", "probability": 0, "is_reliable": False, "proportion": 0}},
        )
        self.assertEqual(detector.calls, 0)

    def test_short_text_top_n_is_empty_list(self) -> None:
        pipeline, _ = _ready_pipeline(min_len=10)
        response = _run(pipeline.classify("hi", 3))
        self.assertEqual(response.to_dict(), {"input_len": 2, "cld3": []})

    def test_fast_fail_bypasses_cache(self) -> None:
        pipeline, _ = _ready_pipeline(min_len=10)
        before = pipeline.cache.stats()
        with patch.object(pipeline.cache, "get", wraps=pipeline.cache.get) as get, \
                patch.object(pipeline.cache, "set", wraps=pipeline.cache.set) as set_:
            _run(pipeline.classify("hi", 2))
            _run(pipeline.classify("yo!", 2))
        get.assert_not_called()
        set_.assert_not_called()
        self.assertEqual(pipeline.cache.stats(), before)
        self.assertEqual(pipeline.cache.size, 0)

    def test_threshold_applies_after_truncation(self) -> None:
        pipeline, detector = _ready_pipeline(min_len=10, max_input_chars=4)
        response = _run(pipeline.classify("long enough text"))
        self.assertEqual(response.input_len, 4)
        self.assertEqual(detector.calls, 0)

    def test_min_len_zero_disables_fast_fail(self) -> None:
        pipeline, detector = _ready_pipeline(min_len=0)
        _run(pipeline.classify("a"))
        self.assertEqual(detector.calls, 1)


class TestCaching(unittest.TestCase):
    def test_repeat_hits_cache(self) -> None:
        pipeline, detector = _ready_pipeline()
        first = _run(pipeline.classify("Dzień dobry, jak się masz?"))
        second = _run(pipeline.classify("Dzień dobry, jak się masz?"))
        self.assertEqual(detector.calls, 1)
        self.assertIs(first, second)
        self.assertEqual(json.dumps(first.to_dict()), json.dumps(second.to_dict()))

    def test_whitespace_variants_share_entry(self) -> None:
        pipeline, detector = _ready_pipeline()
        _run(pipeline.classify("Dzień dobry, jak się masz?"))
        _run(pipeline.classify("   Dzień dobry, jak się masz?  "))
        self.assertEqual(detector.calls, 1)

    def test_cached_input_len_is_not_recomputed(self) -> None:
        pipeline, _ = _ready_pipeline()
        key = pipeline.key_builder.build_key(1, "some cached text")
        planted = ClassificationResponse(input_len=999, cld3=POLISH)
        pipeline.cache.set(key, planted)
        self.assertIs(_run(pipeline.classify("some cached text")), planted)

    def test_top_n_values_cached_separately(self) -> None:
        pipeline, detector = _ready_pipeline()
        single = _run(pipeline.classify("hello world, how are you"))
        ranked = _run(pipeline.classify("hello world, how are you", 3))
        self.assertIsInstance(single.cld3, LanguageGuess)
        self.assertIsInstance(ranked.cld3, list)
        self.assertEqual(len(detector.single_calls), 1)
        self.assertEqual(len(detector.top_n_calls), 1)
        self.assertEqual(pipeline.cache.size, 2)

    def test_cache_disabled_always_calls_detector(self) -> None:
        pipeline, detector = _ready_pipeline(cache_max=0)
        _run(pipeline.classify("hello world, how are you"))
        _run(pipeline.classify("hello world, how are you"))
        self.assertEqual(detector.calls, 2)
        self.assertEqual(pipeline.cache.size, 0)

    def test_digest_keys_work_end_to_end(self) -> None:
        pipeline, detector = _ready_pipeline(key_builder=DigestKeyBuilder())
        _run(pipeline.classify("hello world, how are you"))
        _run(pipeline.classify("hello world, how are you"))
        self.assertEqual(detector.calls, 1)


class TestDetectorInvocation(unittest.TestCase):
    def test_single_guess_for_top_n_one(self) -> None:
        pipeline, detector = _ready_pipeline()
        response = _run(pipeline.classify("Dzień dobry, jak się masz?"))
        self.assertEqual(
            response.to_dict(),
            {
                "input_len": 26,
                "cld3": {"language": "pl", "probability": 0.98, "is_reliable": True, "proportion": 1.0},
            },
        )

    def test_ranked_list_for_top_n(self) -> None:
        pipeline, detector = _ready_pipeline()
        response = _run(pipeline.classify("mixed language text here", 3))
        self.assertEqual(detector.top_n_calls, [("mixed language text here", 3)])
        self.assertEqual(response.cld3, RANKED[:3])
        self.assertLessEqual(len(response.to_dict()["cld3"]), 3)

    def test_detector_failure_is_typed_and_not_cached(self) -> None:
        detector = FakeDetector(error=RuntimeError("model crashed"))
        pipeline, _ = _ready_pipeline(detector)
        with self.assertRaises(DetectionFailedError) as ctx:
            _run(pipeline.classify("hello world, how are you"))
        self.assertEqual(ctx.exception.http_status, 500)
        self.assertIsInstance(ctx.exception.cause, RuntimeError)
        self.assertEqual(pipeline.cache.size, 0)

        detector.error = None
        _run(pipeline.classify("hello world, how are you"))
        self.assertEqual(detector.calls, 2)


class TestBuildPipeline(unittest.TestCase):
    def test_wires_config(self) -> None:
        config = ServiceConfig(cache_max=7, cache_key_mode="digest", min_len=3, max_input_chars=50)
        pipeline = build_pipeline(config, detector_factory=FakeDetector)
        self.assertEqual(pipeline.cache.max_size, 7)
        self.assertEqual(pipeline.key_builder.mode, "digest")
        self.assertEqual(pipeline.min_len, 3)
        self.assertEqual(pipeline.max_input_chars, 50)
        self.assertFalse(pipeline.lifecycle.is_ready)

    def test_uses_registry_backend(self) -> None:
        seen = {}

        class _Registry:
            def build(self, backend, options):
                seen["backend"] = backend
                seen["options"] = options
                return FakeDetector()

        config = ServiceConfig(detector_backend="langdetect", cld_min_bytes=2, cld_max_bytes=500)
        pipeline = build_pipeline(config, registry=_Registry())  # type: ignore[arg-type]
        _run(pipeline.lifecycle.initialize())
        self.assertTrue(pipeline.lifecycle.is_ready)
        self.assertEqual(seen, {"backend": "langdetect", "options": {"cld_min_bytes": 2, "cld_max_bytes": 500}})

    def test_stats(self) -> None:
        pipeline, _ = _ready_pipeline()
        _run(pipeline.classify("hello world, how are you"))
        stats = pipeline.stats()
        self.assertEqual(stats["state"], "ready")
        self.assertEqual(stats["detector"], "fake")
        self.assertEqual(stats["cache_key_mode"], "exact")
        self.assertEqual(stats["cache"]["size"], 1)


if __name__ == "__main__":
    unittest.main()
