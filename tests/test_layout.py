"""
Tests for the layout reconstruction module.
"""

import pytest
import itertools
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def make_obs(text, min_x, max_x, mid_y, confidence=1.0):
    from wordscan.layout import BoundingBox, TextObservation
    return TextObservation(
        text=text,
        bbox=BoundingBox(min_x=min_x, max_x=max_x, mid_y=mid_y),
        confidence=confidence
    )


class TestBoundingBox:
    """Test BoundingBox class."""

    def test_bbox_properties(self):
        """Test computed properties."""
        from wordscan.layout import BoundingBox

        bbox = BoundingBox(min_x=0.25, max_x=0.75, mid_y=0.5, height=0.25)

        assert bbox.width == 0.5
        assert bbox.min_y == 0.375
        assert bbox.max_y == 0.625

    def test_bbox_from_pixels_flips_y(self):
        """Test that text near the top of the image gets the larger midY."""
        from wordscan.layout import BoundingBox

        top = BoundingBox.from_pixels(100, 50, 200, 20, 1000, 500)
        bottom = BoundingBox.from_pixels(100, 400, 200, 20, 1000, 500)

        assert top.min_x == pytest.approx(0.1)
        assert top.max_x == pytest.approx(0.3)
        assert top.mid_y == pytest.approx(0.88)
        assert top.height == pytest.approx(0.04)
        assert top.mid_y > bottom.mid_y

    def test_bbox_from_pixels_invalid_page(self):
        """Test rejection of an empty page size."""
        from wordscan.layout import BoundingBox

        with pytest.raises(ValueError):
            BoundingBox.from_pixels(0, 0, 10, 10, 0, 100)

    def test_bbox_from_normalized_rect(self):
        """Test creation from a bottom-left origin rect."""
        from wordscan.layout import BoundingBox

        bbox = BoundingBox.from_normalized_rect(0.125, 0.5, 0.25, 0.125)

        assert bbox.min_x == 0.125
        assert bbox.max_x == 0.375
        assert bbox.mid_y == 0.5625

    def test_bbox_from_dict_min_max_y(self):
        """Test dict form with explicit vertical extent."""
        from wordscan.layout import BoundingBox

        bbox = BoundingBox.from_dict({"min_x": 0.1, "max_x": 0.2, "min_y": 0.5, "max_y": 0.75})

        assert bbox.mid_y == 0.625
        assert bbox.height == 0.25

    def test_observation_dict_round_trip(self):
        """Test observation serialization."""
        from wordscan.layout import TextObservation

        obs = make_obs("water", 0.1, 0.3, 0.8, confidence=0.9)
        assert TextObservation.from_dict(obs.to_dict()) == obs


class TestClusterRows:
    """Test row clustering."""

    def test_empty_input(self):
        """Test that no observations give no rows."""
        from wordscan.layout import cluster_rows

        assert cluster_rows([]) == []

    def test_single_observation(self):
        """Test a single observation forms a single row."""
        from wordscan.layout import cluster_rows

        obs = make_obs("water", 0.1, 0.3, 0.5)
        rows = cluster_rows([obs])

        assert len(rows) == 1
        assert rows[0].members == [obs]

    def test_rows_ordered_top_to_bottom(self):
        """Test rows come out in descending midY order."""
        from wordscan.layout import cluster_rows

        rows = cluster_rows([
            make_obs("middle", 0.1, 0.3, 0.5),
            make_obs("top", 0.1, 0.3, 0.9),
            make_obs("low", 0.1, 0.3, 0.2),
        ])

        assert [r.anchor.text for r in rows] == ["top", "middle", "low"]

    def test_nearby_observations_share_row(self):
        """Test observations within threshold of the anchor join one row."""
        from wordscan.layout import cluster_rows

        rows = cluster_rows([
            make_obs("a", 0.1, 0.2, 0.80),
            make_obs("b", 0.3, 0.4, 0.79),
            make_obs("c", 0.5, 0.6, 0.815),
        ])

        assert len(rows) == 1
        assert rows[0].anchor.text == "c"
        assert len(rows[0]) == 3

    def test_compares_against_anchor_not_neighbour(self):
        """Test a chain of close observations does not drift into one row."""
        from wordscan.layout import cluster_rows

        rows = cluster_rows([
            make_obs("a", 0.1, 0.2, 0.80),
            make_obs("b", 0.3, 0.4, 0.78),
            make_obs("c", 0.5, 0.6, 0.76),
        ])

        assert [[m.text for m in r.members] for r in rows] == [["a", "b"], ["c"]]

    def test_threshold_is_configurable(self):
        """Test a tighter threshold separates rows."""
        from wordscan.layout import cluster_rows

        observations = [
            make_obs("a", 0.1, 0.2, 0.800),
            make_obs("b", 0.3, 0.4, 0.785),
        ]

        assert len(cluster_rows(observations)) == 1
        assert len(cluster_rows(observations, threshold=0.01)) == 2

    def test_row_members_within_threshold_of_anchor(self):
        """Test every member is within threshold of its row's anchor."""
        from wordscan.layout import cluster_rows

        observations = [
            make_obs(f"w{i}", 0.05 * i, 0.05 * i + 0.04, 0.9 - 0.011 * i)
            for i in range(15)
        ]
        for row in cluster_rows(observations, threshold=0.03):
            for member in row.members:
                assert abs(member.mid_y - row.anchor.mid_y) < 0.03


class TestSerializeRow:
    """Test column splitting and line serialization."""

    def test_single_member(self):
        """Test a one-member row is just its text."""
        from wordscan.layout import Row, serialize_row

        row = Row(members=[make_obs("Weekly Words", 0.3, 0.7, 0.9)])
        assert serialize_row(row) == "Weekly Words"

    def test_two_columns(self):
        """Test the gap between two members becomes the marker."""
        from wordscan.layout import Row, serialize_row

        row = Row(members=[
            make_obs("vatten", 0.60, 0.80, 0.5),
            make_obs("1. water", 0.05, 0.30, 0.5),
        ])
        assert serialize_row(row) == "1. water |SPLIT| vatten"

    def test_split_at_widest_gap(self):
        """Test the cut lands at the widest gap only."""
        from wordscan.layout import Row, serialize_row

        row = Row(members=[
            make_obs("1.", 0.05, 0.08, 0.5),
            make_obs("ice", 0.10, 0.16, 0.5),
            make_obs("cream", 0.18, 0.30, 0.5),
            make_obs("glass", 0.60, 0.75, 0.5),
        ])
        assert serialize_row(row) == "1. ice cream |SPLIT| glass"

    def test_equal_gaps_split_leftmost(self):
        """Test ties resolve to the leftmost candidate split."""
        from wordscan.layout import Row, serialize_row

        row = Row(members=[
            make_obs("a", 0.0, 0.125, 0.5),
            make_obs("b", 0.25, 0.375, 0.5),
            make_obs("c", 0.5, 0.625, 0.5),
        ])
        assert serialize_row(row) == "a |SPLIT| b c"

    def test_overlapping_members_split_after_first(self):
        """Test rows without a positive gap split after the first member."""
        from wordscan.layout import Row, find_column_split, serialize_row

        members = [
            make_obs("a", 0.1, 0.5, 0.5),
            make_obs("b", 0.3, 0.6, 0.5),
        ]
        assert find_column_split(members) == 0
        assert serialize_row(Row(members=members)) == "a |SPLIT| b"

    def test_empty_right_side_has_no_marker(self):
        """Test that no marker is emitted when the right side has no text."""
        from wordscan.layout import Row, serialize_row

        row = Row(members=[
            make_obs("water", 0.1, 0.3, 0.5),
            make_obs("", 0.6, 0.7, 0.5),
        ])
        assert serialize_row(row) == "water"


class TestBuildLines:
    """Test the combined clustering and serialization."""

    @pytest.fixture
    def page_observations(self):
        """Observations of a small two-column word list."""
        return [
            make_obs("Weekly Words", 0.30, 0.70, 0.950),
            make_obs("1. water", 0.05, 0.30, 0.850),
            make_obs("vatten", 0.60, 0.80, 0.845),
            make_obs("2. house", 0.05, 0.28, 0.780),
            make_obs("hus", 0.60, 0.70, 0.790),
            make_obs("3. ice cream", 0.05, 0.35, 0.710),
            make_obs("glass", 0.60, 0.75, 0.705),
        ]

    def test_empty(self):
        """Test no observations give no lines."""
        from wordscan.layout import build_lines

        assert build_lines([]) == []

    def test_page_lines(self, page_observations):
        """Test the expected serialized lines for a word list page."""
        from wordscan.layout import build_lines

        assert build_lines(page_observations) == [
            "Weekly Words",
            "1. water |SPLIT| vatten",
            "2. house |SPLIT| hus",
            "3. ice cream |SPLIT| glass",
        ]

    def test_result_independent_of_input_order(self, page_observations):
        """Test that any arrival order yields the same lines."""
        from wordscan.layout import build_lines

        expected = build_lines(page_observations)
        for perm in itertools.islice(itertools.permutations(page_observations), 200):
            assert build_lines(list(perm)) == expected
        assert build_lines(list(reversed(page_observations))) == expected

    def test_tilted_row_stays_together(self):
        """Test a slightly tilted row is still one line."""
        from wordscan.layout import build_lines

        lines = build_lines([
            make_obs("1. water", 0.05, 0.30, 0.500),
            make_obs("vatten", 0.60, 0.80, 0.522),
        ])
        assert lines == ["1. water |SPLIT| vatten"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
