"""
Tests for TableRenderer, MediaRenderer and FooterRenderer.
"""

import logging

import pytest

from inspectdoc.config import LayoutConfig
from inspectdoc.layout.media_grid import plan_grid
from inspectdoc.layout.rows import Cell, MediaTile, Segment
from inspectdoc.media.raster import RasterBuffer
from inspectdoc.models import MediaType
from inspectdoc.renderers.footer_renderer import FooterRenderer
from inspectdoc.renderers.table_renderer import TableRenderer

from .factories import buffer_for


def photo_tile(uri, caption=None, buffer=True):
    return MediaTile(kind=MediaType.PHOTO, uri=uri, buffer=buffer_for(uri) if buffer else None, caption=caption)


def video_tile(uri):
    return MediaTile(kind=MediaType.VIDEO, uri=uri)


class TestRowHeight:
    """Test cases for row measurement."""

    @pytest.fixture
    def renderer(self, surface, layout_config):
        return TableRenderer(surface, layout_config)

    def test_geometry(self, renderer):
        assert renderer.table_width == pytest.approx(523)
        assert renderer.column_x(0) == pytest.approx(36)
        assert renderer.column_x(2) == pytest.approx(276)
        assert renderer.inner_width(2) == pytest.approx(154)

    def test_empty_row_uses_minimum(self, renderer):
        assert renderer.row_height([Cell(), Cell(), Cell(), Cell()]) == pytest.approx(24)
        assert renderer.row_height([]) == pytest.approx(24)

    def test_single_line_row(self, renderer):
        assert renderer.row_height([Cell.of("Door")]) == pytest.approx(28)

    def test_tallest_cell_wins(self, renderer):
        cells = [Cell.of("Hall"), Cell.of("a\nb\nc"), Cell.of("x")]
        assert renderer.row_height(cells) == pytest.approx(3 * 12 + 16)

    def test_segments_are_spaced(self, renderer):
        cell = Cell(segments=(Segment(text="one"), Segment(text=""), Segment(text="two")))
        assert renderer.cell_height(cell, 100) == pytest.approx(12 + 12 + 12)

    def test_segment_with_text_and_photos(self, renderer):
        tiles = tuple(photo_tile(f"p{i}") for i in range(5))
        segment = Segment(text="Inspector: A", photos=tiles)
        grid = plan_grid(5, None, 154, 100)

        expected = 12 + 8 + grid.total_height
        assert renderer.segment_height(segment, 154) == pytest.approx(expected)
        assert renderer.row_height([Cell(), Cell(), Cell(segments=(segment,))]) == pytest.approx(expected + 16)

    def test_photos_and_videos_are_separated_by_gutter(self, renderer):
        segment = Segment(photos=(photo_tile("p"),), videos=(video_tile("v"),))
        assert renderer.segment_height(segment, 154) == pytest.approx(100 + 8 + 64)


class TestSplitCells:
    """Test cases for breaking rows between wrapped lines."""

    @pytest.fixture
    def renderer(self, surface, layout_config):
        return TableRenderer(surface, layout_config)

    def test_text_breaks_between_lines(self, renderer):
        cells = [Cell.of("Hall", bold=True), Cell(), Cell.of("\n".join(f"line {i}" for i in range(10))), Cell.of("Good")]
        head, tail = renderer.split_cells(cells, 16 + 4 * 12)

        assert head[2].text == "line 0\nline 1\nline 2\nline 3"
        assert tail[2].text == "\n".join(f"line {i}" for i in range(4, 10))
        assert head[0].text == "Hall" and head[0].bold
        assert tail[0].segments == () and tail[0].bold
        assert tail[3].segments == ()
        assert renderer.row_height(head) <= 16 + 4 * 12

    def test_media_segment_moves_whole(self, renderer):
        segment = Segment(text="Inspector: A", photos=(photo_tile("p0"),))
        head, tail = renderer.split_cells([Cell(), Cell(), Cell(segments=(segment,)), Cell()], 60)

        assert head[2].text == "Inspector: A"
        assert head[2].segments[0].photos == ()
        assert tail[2].segments[0].text is None
        assert tail[2].segments[0].photos == segment.photos

    def test_no_room_for_a_line(self, renderer):
        cells = [Cell.of("a\nb")]
        head, tail = renderer.split_cells(cells, 20)

        assert head is None
        assert tail == cells


class TestDrawRow:
    """Test cases for drawing rows."""

    @pytest.fixture
    def renderer(self, surface, layout_config):
        return TableRenderer(surface, layout_config)

    def test_header_uses_header_fill(self, renderer, surface, layout_config):
        height = renderer.draw_header(36)
        rects = surface.ops_named("rect")

        assert height == pytest.approx(28)
        assert len(rects) == 4
        assert {op.params["fill"] for op in rects} == {layout_config.header_fill}
        assert surface.texts() == ["Location", "Item", "Subtask", "Condition"]
        assert all(op.params["font_name"] == "Helvetica-Bold" for op in surface.ops_named("text"))

    def test_row_draws_one_rect_per_column(self, renderer, surface):
        height = renderer.draw_row(100, [Cell.of("Hall"), Cell.of("1. Bedroom"), Cell(), Cell.of("Good")], background="#eef2ff")
        rects = surface.ops_named("rect")

        assert [op.params["x"] for op in rects] == pytest.approx([36, 156, 276, 446])
        assert all(op.params["height"] == pytest.approx(height) for op in rects)
        assert all(op.params["fill_opacity"] == pytest.approx(0.6) for op in rects)
        assert surface.ops_named("text")[0].params["y"] == pytest.approx(108)

    def test_merged_row_draws_single_rect(self, renderer, surface):
        cells = [Cell.of("r1"), Cell.of("r2"), Cell(), Cell()]
        renderer.draw_row(50, cells, background="#f8fafc", merge_columns=True)
        rects = surface.ops_named("rect")

        assert len(rects) == 1
        assert rects[0].params["width"] == pytest.approx(523)
        assert surface.texts() == ["r1", "r2"]

    def test_text_precedes_media_in_segment(self, renderer, surface):
        segment = Segment(text="Inspector: A", photos=(photo_tile("p0"),))
        renderer.draw_row(36, [Cell(), Cell(), Cell(segments=(segment,)), Cell()])
        names = [op.name for op in surface.ops if op.name in {"text", "image"}]
        text_op = surface.ops_named("text")[0]
        image_op = surface.ops_named("image")[0]

        assert names == ["text", "image"]
        assert image_op.params["y"] == pytest.approx(text_op.params["y"] + 12 + 8)

    def test_media_chunk_height_matches_drawing(self, renderer, surface):
        tiles = [photo_tile(f"p{i}", caption="Door" if i == 5 else None) for i in range(9)]
        plan = renderer.media.plan(tiles, renderer.block_content_width, renderer.config.photo_grid)

        expected = renderer.media_chunk_height("Inspector: A", plan, 0, 2)
        drawn = renderer.draw_media_chunk(36, "Inspector: A", tiles, plan, 0, 2)

        assert drawn == pytest.approx(expected)
        assert expected == pytest.approx(8 + 12 + 8 + 100 + 8 + 100 + 4 + 9.6 + 8)
        assert surface.image_sources() == [f"p{i}" for i in range(8)]

    def test_media_chunk_is_bordered_and_inset(self, renderer, surface, layout_config):
        tiles = [photo_tile(f"p{i}") for i in range(4)]
        plan = renderer.media.plan(tiles, renderer.block_content_width, layout_config.photo_grid)
        height = renderer.draw_media_chunk(36, "Inspector: A", tiles, plan, 0, 1)

        border = surface.ops_named("rect")[0]
        assert (border.params["x"], border.params["y"]) == pytest.approx((36, 36))
        assert (border.params["width"], border.params["height"]) == pytest.approx((523, height))
        assert border.params["fill"] is None
        assert border.params["line_width"] == pytest.approx(0.7)

        text_op = surface.ops_named("text")[0]
        images = surface.ops_named("image")
        assert (text_op.params["x"], text_op.params["y"]) == pytest.approx((44, 44))
        assert text_op.params["width"] == pytest.approx(507)
        assert images[0].params["x"] == pytest.approx(44)
        assert images[-1].params["x"] + plan.tile_width == pytest.approx(36 + 523 - 8)

    def test_media_chunk_without_text(self, renderer):
        plan = plan_grid(4, None, 507, 100)
        assert renderer.media_chunk_height(None, plan, 0, 1) == pytest.approx(116)
        assert renderer.media_chunk_height(None, plan, 0, 0) == pytest.approx(16)


class TestMediaRenderer:
    """Test cases for tile drawing."""

    @pytest.fixture
    def renderer(self, surface, layout_config):
        return TableRenderer(surface, layout_config).media

    def test_missing_buffer_draws_placeholder(self, renderer, surface, layout_config):
        renderer.draw_photo(photo_tile("gone", buffer=False), 36, 40, 120, 100)

        rect = surface.ops_named("rect")[0]
        assert rect.params["stroke"] == layout_config.placeholder_color
        assert surface.texts() == ["Photo unavailable"]
        assert surface.ops_named("image") == []

    def test_undrawable_buffer_falls_back_to_placeholder(self, renderer, surface, caplog):
        broken = MediaTile(kind=MediaType.PHOTO, uri="bad", buffer=RasterBuffer(b"", 1, 1, "JPEG", "bad"))
        with caplog.at_level(logging.ERROR):
            renderer.draw_photo(broken, 36, 40, 120, 100)

        assert surface.texts() == ["Photo unavailable"]
        assert "Failed to draw photo bad" in caplog.text

    def test_video_tile(self, renderer, surface, layout_config):
        renderer.draw_video(video_tile("v"), 3, 36, 40, 120, 64)

        rect = surface.ops_named("rect")[0]
        assert rect.params["fill"] == layout_config.video_fill
        assert rect.params["radius"] == pytest.approx(8)
        assert len(surface.ops_named("circle")) == 1
        assert len(surface.ops_named("polygon")[0].params["points"]) == 3
        assert surface.texts() == ["Video 3"]

    def test_video_rows_are_numbered(self, renderer, surface, layout_config):
        tiles = [video_tile(f"v{i}") for i in range(6)]
        plan = renderer.plan(tiles, 523, layout_config.video_grid)
        height = renderer.draw_rows(tiles, plan, layout_config.video_grid, 36, 40, 1, 1, video=True)

        assert height == pytest.approx(64)
        assert surface.texts() == ["Video 5", "Video 6"]

    def test_captions_below_tiles(self, renderer, surface, layout_config):
        tiles = [photo_tile("p0", caption="Door - Hinge")]
        plan = renderer.plan(tiles, 523, layout_config.photo_grid)
        renderer.draw_rows(tiles, plan, layout_config.photo_grid, 36, 40)

        caption = surface.ops_named("text")[0]
        assert caption.params["text"] == "Door - Hinge"
        assert caption.params["y"] == pytest.approx(40 + 100 + 4)
        assert caption.params["font_size"] == pytest.approx(8)


class TestFooterRenderer:
    """Test cases for the footer band."""

    def test_footer_on_every_page(self, surface):
        FooterRenderer(LayoutConfig(), "Inspection Report").attach(surface)
        surface.add_page()
        surface.add_page()

        assert [t for t in surface.texts() if t.startswith("Page ")] == ["Page 1", "Page 2", "Page 3"]
        assert surface.texts().count("Inspection Report") == 3
        assert {op.page for op in surface.ops_named("line")} == {1, 2, 3}

    def test_footer_sits_in_reserved_band(self, surface):
        config = LayoutConfig()
        FooterRenderer(config).attach(surface)
        bottom = surface.page_height - config.margin - config.footer_reserved

        line = surface.ops_named("line")[0]
        assert line.params["y1"] == pytest.approx(bottom)
        for op in surface.ops_named("text"):
            assert op.params["y"] >= bottom
            assert op.params["y"] + op.params["height"] <= surface.page_height - config.margin
