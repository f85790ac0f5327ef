import unittest
from datetime import date, datetime

from aggregation import SeverityBucket, body_map
from chronology import logs_descending
from grouping import Granularity, _ordinal, day_label, group_logs, month_label, week_label
from summaries import condition_summary, day_detail, history, overview
from trends import DashboardStatus, Trend

from tests.helpers import make_condition, make_log

TODAY = date(2024, 3, 6)
NOW = datetime(2024, 3, 6, 18, 0)


class LabelTests(unittest.TestCase):
    def test_ordinals(self):
        cases = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 31: "31st"}
        for n, expected in cases.items():
            self.assertEqual(_ordinal(n), expected)

    def test_day_labels(self):
        self.assertEqual(day_label(TODAY, TODAY), "Today")
        self.assertEqual(day_label(date(2024, 3, 5), TODAY), "Yesterday")
        self.assertEqual(day_label(date(2024, 3, 4), TODAY), "Monday, March 4th")
        self.assertEqual(day_label(date(2023, 12, 31), TODAY), "Sunday, December 31st, 2023")

    def test_week_label_spans_year_end(self):
        self.assertEqual(week_label(TODAY, 6), "Mar 3 – Mar 9, 2024")
        self.assertEqual(week_label(date(2024, 1, 2), 6), "Dec 31 – Jan 6, 2024")
        self.assertEqual(week_label(TODAY, 0), "Mar 4 – Mar 10, 2024")

    def test_month_label(self):
        self.assertEqual(month_label(date(2024, 2, 29)), "February 2024")


class GroupLogsTests(unittest.TestCase):
    def setUp(self):
        self.logs = [
            make_log("t1", "c", datetime(2024, 3, 6, 8), 4, seq=5),
            make_log("y1", "c", datetime(2024, 3, 5, 21), 6, seq=4),
            make_log("y2", "c", datetime(2024, 3, 5, 7), 2, seq=3),
            make_log("f1", "c", datetime(2024, 2, 28, 12), 9, seq=2),
            make_log("d1", "c", datetime(2023, 12, 31, 12), 3, seq=1),
        ]

    def test_day_groups_in_first_seen_order(self):
        groups = group_logs(self.logs, Granularity.DAY, NOW)
        self.assertEqual(
            [g.label for g in groups],
            ["Today", "Yesterday", "Wednesday, February 28th", "Sunday, December 31st, 2023"],
        )
        self.assertEqual([l.id for l in groups[1].logs], ["y1", "y2"])
        self.assertEqual(groups[1].summary.mean_intensity, 4.0)

    def test_flattening_groups_gives_back_the_input(self):
        for granularity in Granularity:
            groups = group_logs(self.logs, granularity, NOW)
            flat = [l.id for g in groups for l in g.logs]
            self.assertEqual(flat, [l.id for l in self.logs])
            self.assertEqual(len({g.label for g in groups}), len(groups))

    def test_week_and_month_groups(self):
        weeks = group_logs(self.logs, Granularity.WEEK, NOW)
        self.assertEqual([g.label for g in weeks][:2], ["Mar 3 – Mar 9, 2024", "Feb 25 – Mar 2, 2024"])
        months = group_logs(self.logs, "month", NOW)
        self.assertEqual([g.label for g in months], ["March 2024", "February 2024", "December 2023"])

    def test_same_weekday_in_different_years_does_not_collide(self):
        logs = logs_descending([
            make_log("a", "c", datetime(2024, 1, 10, 9), 3),
            make_log("b", "c", datetime(2023, 1, 10, 9), 3),
        ])
        labels = [g.label for g in group_logs(logs, Granularity.DAY, NOW)]
        self.assertEqual(len(labels), 2)


class SummaryTests(unittest.TestCase):
    def setUp(self):
        self.migraine = make_condition("migraine", "Chronic Migraine", location="Left Temple")
        self.back = make_condition("back", "Lumbar Strain", is_archived=True)
        self.logs = [
            make_log("m1", "migraine", datetime(2024, 3, 1, 9), 3, seq=1),
            make_log("m2", "migraine", datetime(2024, 3, 2, 9), 6, seq=2, medication="Ibuprofen"),
            make_log("m3", "migraine", datetime(2024, 3, 6, 9), 9, seq=3),
            make_log("b1", "back", datetime(2024, 3, 6, 10), 5, seq=4),
        ]

    def test_condition_summary(self):
        summary = condition_summary(self.migraine, self.logs, sparkline_points=2, recent_count=2)
        self.assertEqual(summary.total_logs, 3)
        self.assertEqual(summary.current_intensity, 9)
        self.assertEqual(summary.current_level, SeverityBucket.HIGH)
        self.assertEqual(summary.since_last, 3)
        self.assertEqual(summary.latest_change.trend, Trend.WORSENED)
        self.assertEqual(summary.average_intensity, 6.0)
        self.assertEqual(summary.last_logged, date(2024, 3, 6))
        self.assertEqual(summary.status, DashboardStatus.CRITICAL)
        self.assertEqual([p[1] for p in summary.sparkline], [6, 9])
        self.assertEqual([l.id for l in summary.recent_logs], ["m3", "m2"])

    def test_condition_summary_without_logs(self):
        summary = condition_summary(make_condition("new"), self.logs)
        self.assertEqual(summary.total_logs, 0)
        self.assertIsNone(summary.current_intensity)
        self.assertIsNone(summary.since_last)
        self.assertEqual(summary.current_level, SeverityBucket.EMPTY)
        self.assertEqual(summary.status, DashboardStatus.NONE)

    def test_overview_counts_recent_window(self):
        later = datetime(2024, 3, 8, 12, 0)
        result = overview([self.migraine, self.back], self.logs, later)
        self.assertEqual(result.active_conditions, 1)
        # m1 is more than seven days before 'later'.
        self.assertEqual(result.recent_entries, 3)
        self.assertEqual(result.recent_average, 6.7)

    def test_overview_ignores_logs_after_now(self):
        # m3 and b1 fall after this instant.
        earlier = datetime(2024, 3, 3, 12, 0)
        result = overview([self.migraine, self.back], self.logs, earlier)
        self.assertEqual(result.recent_entries, 2)
        self.assertEqual(result.recent_average, 4.5)

    def test_day_detail_oldest_first_with_previous(self):
        entries = day_detail(TODAY, [self.migraine, self.back], self.logs)
        self.assertEqual([e.log.id for e in entries], ["m3", "b1"])
        self.assertEqual(entries[0].previous_intensity, 6)
        self.assertEqual(entries[0].condition_label, "Chronic Migraine")
        self.assertTrue(entries[1].change.is_first_occurrence)

    def test_dangling_condition_reference_shows_unknown(self):
        logs = self.logs + [make_log("x1", "gone", datetime(2024, 3, 6, 11), 4, seq=5)]
        with self.assertLogs("summaries", level="WARNING"):
            groups = history([self.migraine, self.back], logs, Granularity.DAY, NOW)
        today = groups[0]
        self.assertEqual(today.label, "Today")
        labels = {e.log.id: e.condition_label for e in today.entries}
        self.assertEqual(labels["x1"], "Unknown")
        self.assertEqual(today.count, 3)

    def test_history_entries_carry_trend(self):
        groups = history([self.migraine, self.back], self.logs, Granularity.MONTH, NOW)
        self.assertEqual(len(groups), 1)
        trends = {e.log.id: e.change.trend for e in groups[0].entries}
        self.assertEqual(trends["m1"], Trend.FIRST)
        self.assertEqual(trends["m2"], Trend.WORSENED)
        self.assertEqual([e.log.id for e in groups[0].entries], ["b1", "m3", "m2", "m1"])


class EmptyInputTests(unittest.TestCase):
    def test_grouping_without_logs(self):
        for granularity in Granularity:
            self.assertEqual(group_logs([], granularity, NOW), [])
            self.assertEqual(history([], [], granularity, NOW), [])

    def test_overview_without_data(self):
        result = overview([], [], NOW)
        self.assertEqual(result.active_conditions, 0)
        self.assertEqual(result.recent_entries, 0)
        self.assertIsNone(result.recent_average)

    def test_day_detail_without_data(self):
        self.assertEqual(day_detail(TODAY, [], []), ())

    def test_body_map_without_data(self):
        regions = body_map([], [])
        self.assertEqual(len(regions), 11)
        for region in regions:
            self.assertIsNone(region.max_intensity)
            self.assertEqual(region.bucket, SeverityBucket.EMPTY)


if __name__ == "__main__":
    unittest.main()
