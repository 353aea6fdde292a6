"""
Tests for data models
"""

import unittest

from pydantic import ValidationError

from src.station_monitor.models import (
    Detector,
    DetectorState,
    ObjectState,
    OngoingTask,
    Step,
    TrackedTemplate,
    UntrackedTemplate,
    parse_detector_state,
    parse_task_snapshot,
    parse_template,
    parse_templates,
    template_to_dict,
)


class TestTemplate(unittest.TestCase):
    """Test template variants and parsing."""

    def test_untracked_without_present_key(self):
        template = parse_template({"name": "Drill", "x": 1, "y": 2, "width": 3, "height": 4})

        self.assertIsInstance(template, UntrackedTemplate)
        self.assertFalse(template.is_tracked)
        self.assertEqual(template.bottom_right, (4, 6))

    def test_tracked_with_present_key(self):
        template = parse_template(
            {"name": "Drill", "x": 0, "y": 0, "width": 3, "height": 4, "present": True}
        )

        self.assertIsInstance(template, TrackedTemplate)
        self.assertTrue(template.is_tracked)
        self.assertTrue(template.present)

    def test_present_false_is_tracked(self):
        """Test an absent object is still a tracked template."""
        template = parse_template(
            {"name": "Drill", "x": 0, "y": 0, "width": 3, "height": 4, "present": False}
        )

        self.assertTrue(template.is_tracked)
        self.assertFalse(template.present)

    def test_missing_field(self):
        with self.assertRaises(ValueError):
            parse_template({"name": "Drill", "x": 0, "y": 0, "width": 3})

    def test_null_coordinate_rejected(self):
        with self.assertRaises(ValueError):
            parse_template({"name": "Drill", "x": None, "y": 0, "width": 3, "height": 4})

    def test_non_mapping_item_rejected(self):
        with self.assertRaises(ValueError) as ctx:
            parse_templates([{"name": "a", "x": 0, "y": 0, "width": 1, "height": 1}, "bin-1"])
        self.assertIn("bin-1", str(ctx.exception))

    def test_non_finite_size_rejected(self):
        for value in ("nan", float("nan"), "inf", float("-inf")):
            with self.subTest(value=value), self.assertRaises(ValueError):
                parse_template({"name": "Drill", "x": 0, "y": 0, "width": value, "height": 4})

    def test_negative_size_in_data_rejected(self):
        with self.assertRaises(ValueError):
            parse_template({"name": "Drill", "x": 0, "y": 0, "width": -3, "height": 4})

    def test_numeric_strings_and_names_coerced(self):
        template = parse_template({"name": 7, "x": "1.5", "y": 2, "width": "3", "height": 4})

        self.assertEqual(template.name, "7")
        self.assertEqual((template.x, template.width), (1.5, 3.0))

    def test_direct_construction_rejects_nan(self):
        with self.assertRaises(ValueError):
            UntrackedTemplate(name="bad", x=float("nan"), y=0, width=1, height=1)

    def test_negative_size_rejected(self):
        with self.assertRaises(ValueError):
            UntrackedTemplate(name="bad", x=0, y=0, width=-1, height=5)

    def test_zero_size_allowed(self):
        template = UntrackedTemplate(name="dot", x=5, y=5, width=0, height=0)
        self.assertEqual(template.bottom_right, (5, 5))

    def test_templates_are_immutable(self):
        template = UntrackedTemplate(name="a", x=0, y=0, width=1, height=1)
        with self.assertRaises(AttributeError):
            template.x = 10

    def test_round_trip_keeps_variant(self):
        raw = [
            {"name": "a", "x": 0.0, "y": 0.0, "width": 1.0, "height": 1.0},
            {"name": "b", "x": 0.0, "y": 0.0, "width": 1.0, "height": 1.0, "present": True},
        ]

        self.assertEqual([template_to_dict(t) for t in parse_templates(raw)], raw)


class TestTaskSnapshot(unittest.TestCase):
    """Test parsing backend task snapshots."""

    SNAPSHOT = {
        "id": 3,
        "name": "Morning kit",
        "type": "ToolKit",
        "maxOrderNum": 2,
        "steps": [
            {
                "id": 1,
                "orderNum": 1,
                "exInitState": "Present",
                "exSubsState": "Missing",
                "object": {"id": 10, "name": "Hammer", "x": 5, "y": 6, "width": 50, "height": 20},
            },
            {
                "id": 2,
                "orderNum": 2,
                "exInitState": "Missing",
                "exSubsState": "Present",
                "object": {
                    "id": 11,
                    "name": "Saw",
                    "coordinates": {"x": 100, "y": 110, "width": 30, "height": 40},
                },
            },
        ],
        "ongoingInstance": {
            "id": 7,
            "state": "InProgress",
            "currentOrderNum": 2,
            "currentOrderNumRemainingSteps": [
                {
                    "id": 2,
                    "orderNum": 2,
                    "exInitState": "Missing",
                    "exSubsState": "Present",
                    "object": {"id": 11, "name": "Saw", "x": 100, "y": 110, "width": 30, "height": 40},
                }
            ],
        },
        "unrelatedField": "ignored",
    }

    def test_camel_case_keys(self):
        task = parse_task_snapshot(self.SNAPSHOT)

        self.assertIsInstance(task, OngoingTask)
        self.assertEqual(task.max_order_num, 2)
        self.assertEqual(task.steps[0].order_num, 1)
        self.assertEqual(task.ongoing_instance.current_order_num, 2)

    def test_nested_coordinates_flattened(self):
        task = parse_task_snapshot(self.SNAPSHOT)

        self.assertEqual(task.steps[1].object.as_rect(), (100, 110, 30, 40))

    def test_regions(self):
        task = parse_task_snapshot(self.SNAPSHOT)

        self.assertEqual([r.name for r in task.all_regions()], ["Hammer", "Saw"])
        self.assertEqual([r.name for r in task.remaining_regions()], ["Saw"])

    def test_no_instance_has_no_remaining(self):
        data = {k: v for k, v in self.SNAPSHOT.items() if k != "ongoingInstance"}
        task = parse_task_snapshot(data)

        self.assertEqual(task.remaining_steps(), [])
        self.assertEqual(len(task.all_regions()), 2)

    def test_empty_snapshot_is_none(self):
        self.assertIsNone(parse_task_snapshot(None))
        self.assertIsNone(parse_task_snapshot({}))

    def test_negative_region_rejected(self):
        bad = {"steps": [{"object": {"x": 0, "y": 0, "width": -5, "height": 5}}]}
        with self.assertRaises(ValidationError):
            parse_task_snapshot(bad)

    def test_snake_case_accepted(self):
        task = parse_task_snapshot({"max_order_num": 4})
        self.assertEqual(task.max_order_num, 4)

    def test_action_labels(self):
        def make_step(init, subs):
            return Step(
                ex_init_state=init,
                ex_subs_state=subs,
                object={"x": 0, "y": 0, "width": 1, "height": 1},
            )

        self.assertEqual(make_step("Present", "Missing").action_label(), "remove")
        self.assertEqual(make_step("Missing", "Present").action_label(), "replace")
        self.assertEqual(
            make_step(ObjectState.UNCERTAIN, ObjectState.PRESENT).action_label(),
            "Uncertain -> Present",
        )


class TestDetector(unittest.TestCase):
    """Test detector parsing."""

    def test_parse_state_drops_unknown(self):
        self.assertEqual(
            parse_detector_state("Streaming, Bogus,Monitoring"),
            [DetectorState.STREAMING, DetectorState.MONITORING],
        )

    def test_parse_empty_state(self):
        self.assertEqual(parse_detector_state(""), [])

    def test_from_dict(self):
        detector = Detector.from_dict(
            {"id": 4, "name": "bench-4", "macAddress": "aa:bb", "state": "Standby"}
        )

        self.assertEqual(detector.id, 4)
        self.assertEqual(detector.mac_address, "aa:bb")
        self.assertEqual(detector.state, [DetectorState.STANDBY])
        self.assertTrue(detector.is_streamable)

    def test_detector_without_id_not_streamable(self):
        self.assertFalse(Detector(id=None).is_streamable)
        self.assertFalse(Detector.from_dict({}).is_streamable)


if __name__ == "__main__":
    unittest.main()
