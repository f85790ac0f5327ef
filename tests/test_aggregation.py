import unittest
from datetime import date, datetime

from aggregation import (
    AggregationMode,
    DeltaBucket,
    SeverityBucket,
    body_map,
    delta_bucket,
    severity_bucket,
    summarize_day,
    summarize_period,
)
from config import BODY_MAP_SCALE, HEATMAP_SCALE
from models import BodyRegion, DeltaScale, SeverityScale

from tests.helpers import make_condition, make_log


class SeverityBucketTests(unittest.TestCase):
    def test_heatmap_tiers(self):
        expected = {
            1: SeverityBucket.LOW, 3: SeverityBucket.LOW,
            4: SeverityBucket.MODERATE, 6: SeverityBucket.MODERATE,
            7: SeverityBucket.HIGH, 8: SeverityBucket.HIGH,
            9: SeverityBucket.EXTREME, 10: SeverityBucket.EXTREME,
        }
        for value, bucket in expected.items():
            self.assertEqual(severity_bucket(value, HEATMAP_SCALE), bucket, value)

    def test_body_map_tiers(self):
        self.assertEqual(severity_bucket(3, BODY_MAP_SCALE), SeverityBucket.LOW)
        self.assertEqual(severity_bucket(7, BODY_MAP_SCALE), SeverityBucket.MODERATE)
        self.assertEqual(severity_bucket(8, BODY_MAP_SCALE), SeverityBucket.HIGH)
        self.assertEqual(severity_bucket(10, BODY_MAP_SCALE), SeverityBucket.HIGH)

    def test_no_data_is_empty(self):
        self.assertEqual(severity_bucket(None), SeverityBucket.EMPTY)

    def test_scale_must_increase(self):
        with self.assertRaises(ValueError):
            SeverityScale(low_max=5, moderate_max=5)
        with self.assertRaises(ValueError):
            SeverityScale(low_max=3, moderate_max=6, high_max=10)


class DeltaBucketTests(unittest.TestCase):
    def test_bucket_edges(self):
        expected = {
            -4.0: DeltaBucket.LARGE_IMPROVEMENT,
            -3.0: DeltaBucket.LARGE_IMPROVEMENT,
            -2.5: DeltaBucket.IMPROVED,
            -1.0: DeltaBucket.IMPROVED,
            -0.5: DeltaBucket.STABLE,
            0.0: DeltaBucket.STABLE,
            0.99: DeltaBucket.STABLE,
            1.0: DeltaBucket.WORSENED,
            2.9: DeltaBucket.WORSENED,
            3.0: DeltaBucket.LARGE_WORSENING,
        }
        for mean, bucket in expected.items():
            self.assertEqual(delta_bucket(mean), bucket, mean)

    def test_only_first_occurrences_is_new(self):
        self.assertEqual(delta_bucket(None), DeltaBucket.NEW)

    def test_custom_scale(self):
        scale = DeltaScale(change=2, large_change=5)
        self.assertEqual(delta_bucket(1.5, scale), DeltaBucket.STABLE)
        self.assertEqual(delta_bucket(-4, scale), DeltaBucket.IMPROVED)

    def test_delta_mode_needs_changes(self):
        log = make_log("a", "c", datetime(2024, 3, 1, 9), 5)
        with self.assertRaises(ValueError):
            summarize_day([log], AggregationMode.DELTA)


class PeriodSummaryTests(unittest.TestCase):
    def test_mean_and_day_span(self):
        logs = [
            make_log("a", "c", datetime(2024, 3, 3, 9), 4),
            make_log("b", "c", datetime(2024, 3, 1, 9), 5),
            make_log("c", "c", datetime(2024, 3, 2, 9), 8),
        ]
        summary = summarize_period(logs, "March 2024")
        self.assertEqual(summary.count, 3)
        self.assertEqual(summary.mean_intensity, 5.7)
        self.assertEqual(summary.first_day, date(2024, 3, 1))
        self.assertEqual(summary.last_day, date(2024, 3, 3))

    def test_empty_period(self):
        summary = summarize_period([], "Nothing")
        self.assertEqual(summary.count, 0)
        self.assertIsNone(summary.mean_intensity)
        self.assertIsNone(summary.first_day)

    def test_severity_summary_count_matches_logs(self):
        logs = [make_log(str(i), "c", datetime(2024, 3, 1, i), 2) for i in range(5)]
        self.assertEqual(summarize_day(logs).count, 5)
        self.assertEqual(summarize_day(logs).max_intensity, 2)


class BodyMapTests(unittest.TestCase):
    def test_max_intensity_per_region(self):
        conditions = [
            make_condition("migraine", region=BodyRegion.HEAD),
            make_condition("tension", region=BodyRegion.HEAD),
            make_condition("knee", region=BodyRegion.LEFT_SHIN),
            make_condition("insomnia"),
        ]
        when = datetime(2024, 3, 1, 9)
        logs = [
            make_log("1", "migraine", when, 4),
            make_log("2", "tension", when, 9),
            make_log("3", "knee", when, 5),
            make_log("4", "insomnia", when, 10),
        ]
        regions = {r.region: r for r in body_map(logs, conditions)}
        self.assertEqual(len(regions), len(BodyRegion))
        self.assertEqual(regions[BodyRegion.HEAD].max_intensity, 9)
        self.assertEqual(regions[BodyRegion.HEAD].bucket, SeverityBucket.HIGH)
        self.assertEqual(regions[BodyRegion.LEFT_SHIN].bucket, SeverityBucket.MODERATE)
        self.assertIsNone(regions[BodyRegion.CHEST].max_intensity)
        self.assertEqual(regions[BodyRegion.CHEST].bucket, SeverityBucket.EMPTY)

    def test_region_labels(self):
        self.assertEqual(BodyRegion("arm-l").label, "Left Arm")
        self.assertEqual(BodyRegion.HEAD.label, "Head")


if __name__ == "__main__":
    unittest.main()
