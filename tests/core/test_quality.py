import unittest

from core.quality import SCORING_PRESETS, ConfidenceScorer, ResearchSignals, weighted_mean


class ConfidenceScorerTests(unittest.TestCase):
    def setUp(self):
        self.scorer = ConfidenceScorer()

    def test_complete_exact_finding_scores_full(self):
        signals = ResearchSignals(
            targets_attempted=1, targets_with_data=1, calls=2, failed_calls=0,
            relevant=True, source_count=3,
        )
        self.assertEqual(self.scorer.score(signals), 1.0)

    def test_nothing_found_scores_zero(self):
        self.assertEqual(self.scorer.score(ResearchSignals(calls=3)), 0.0)
        self.assertEqual(
            self.scorer.score(ResearchSignals(targets_attempted=2, calls=3, source_count=1)),
            0.0,
        )

    def test_partial_coverage_lowers_score(self):
        full = ResearchSignals(2, 2, 4, 0, True, 4)
        half = ResearchSignals(2, 1, 4, 0, True, 2)
        self.assertGreater(self.scorer.score(full), self.scorer.score(half))
        self.assertEqual(self.scorer.score(half), 0.8)

    def test_failed_calls_lower_score(self):
        clean = ResearchSignals(1, 1, 4, 0, True, 2)
        flaky = ResearchSignals(1, 1, 4, 2, True, 2)
        self.assertGreater(self.scorer.score(clean), self.scorer.score(flaky))

    def test_irrelevant_records_lower_score(self):
        relevant = ResearchSignals(1, 1, 1, 0, True, 1)
        loose = ResearchSignals(1, 1, 1, 0, False, 1)
        self.assertGreater(self.scorer.score(relevant), self.scorer.score(loose))

    def test_preset_can_shift_weights(self):
        loose = ResearchSignals(1, 1, 1, 0, False, 1)
        strict = ConfidenceScorer("strict")
        lenient = ConfidenceScorer("lenient")
        self.assertLess(strict.score(loose), lenient.score(loose))

    def test_unknown_preset_falls_back_to_balanced(self):
        scorer = ConfidenceScorer("does-not-exist")
        self.assertEqual(scorer.weights, SCORING_PRESETS["balanced"]["weights"])

    def test_scores_stay_in_range(self):
        for preset in SCORING_PRESETS:
            scorer = ConfidenceScorer(preset)
            for signals in (
                ResearchSignals(1, 1, 1, 0, True, 1),
                ResearchSignals(3, 1, 10, 9, False, 1),
                ResearchSignals(0, 1, 0, 0, True, 1),
            ):
                score = scorer.score(signals)
                self.assertGreaterEqual(score, 0.0)
                self.assertLessEqual(score, 1.0)


class WeightedMeanTests(unittest.TestCase):
    def test_unweighted(self):
        self.assertAlmostEqual(weighted_mean([0.2, 0.4]), 0.3)

    def test_weighted(self):
        self.assertAlmostEqual(weighted_mean([1.0, 0.0], [3, 1]), 0.75)

    def test_empty(self):
        self.assertEqual(weighted_mean([]), 0.0)
        self.assertEqual(weighted_mean([0.5], [0]), 0.0)


if __name__ == "__main__":
    unittest.main()
