"""Tests for scene building, interaction, resizes and rebuilds."""

import pytest

from drillmap.config import LayoutConfig, VisualizationConfig
from drillmap.exceptions import ErrorCode
from drillmap.hierarchy import aggregate
from drillmap.render import NO_DATA_MESSAGE, RenderCoordinator
from drillmap.translation import LabelTranslator

from conftest import COUNTRY_SET, WEIGHT


class RecordingSurface:
    def __init__(self):
        self.scenes = []

    def draw(self, scene):
        self.scenes.append(scene)


def make_config(**layout):
    layout.setdefault("margin", 0.0)
    layout.setdefault("padding_inner", 0.0)
    return VisualizationConfig(width=300, height=100, layout=LayoutConfig(**layout))


@pytest.fixture
def coordinator(hierarchy, diagnostics):
    return RenderCoordinator(hierarchy, make_config(), diagnostics=diagnostics)


class TestScene:
    def test_top_level_cells(self, coordinator, hierarchy):
        scene = coordinator.render()
        top = {c.key: c for c in scene.top_level()}
        assert top["Togo"].rect.width == pytest.approx(250)
        assert top["Benin"].rect.width == pytest.approx(50)
        assert top["Togo"].is_group
        assert top["Togo"].zoom_target_id == hierarchy.find("Togo").node_id

    def test_nested_cells_zoom_to_their_group(self, coordinator, hierarchy):
        scene = coordinator.render()
        togo = hierarchy.find("Togo")
        nested = [c for c in scene.cells if c.depth == 2 and c.zoom_target_id == togo.node_id]
        assert [c.key for c in nested] == ["A", "B"]
        a, b = nested
        assert a.rect.area / b.rect.area == pytest.approx(2.0)
        # Label band and outer padding
        assert a.rect.y0 == pytest.approx(16)
        assert a.rect.x0 == pytest.approx(3)

    def test_flat_view(self, hierarchy):
        scene = RenderCoordinator(hierarchy, make_config(show_nested=False)).render()
        assert [c.key for c in scene.cells] == ["Togo", "Benin"]

    def test_margin(self, hierarchy):
        scene = RenderCoordinator(hierarchy, make_config(margin=10, show_nested=False)).render()
        assert scene.cells[0].rect.x0 == pytest.approx(10)
        assert sum(c.rect.area for c in scene.cells) == pytest.approx(280 * 80)

    def test_labels_and_colors(self, hierarchy):
        coordinator = RenderCoordinator(
            hierarchy, make_config(), translator=LabelTranslator({"Togo": "Togoland"})
        )
        scene = coordinator.render()
        togo = scene.cell(hierarchy.find("Togo").node_id)
        assert togo.label == "Togoland"
        assert togo.fill == coordinator.colors.color_for(hierarchy.find("Togo"))

    def test_min_share_prunes(self, hierarchy):
        scene = RenderCoordinator(hierarchy, make_config(min_share=0.2)).render()
        assert [c.key for c in scene.top_level()] == ["Togo"]
        assert scene.top_level()[0].rect.width == pytest.approx(300)

    def test_leaf_focus_fills_view(self, records):
        scene = RenderCoordinator(aggregate(records, [], WEIGHT), make_config()).render()
        assert len(scene.cells) == 1
        assert scene.cells[0].rect.area == pytest.approx(300 * 100)
        assert scene.cells[0].zoom_target_id is None

    def test_empty_tree(self):
        scene = RenderCoordinator(aggregate([], COUNTRY_SET), make_config()).render()
        assert scene.is_empty
        assert scene.message == NO_DATA_MESSAGE

    def test_zero_size(self, coordinator, diagnostics):
        coordinator.resize(0, 100)
        scene = coordinator.render()
        assert scene.cells == []
        assert ErrorCode.DM200 in diagnostics.codes()

    def test_hit_test_prefers_nested(self, coordinator, hierarchy):
        scene = coordinator.render()
        assert scene.hit_test(10, 50).node_id == hierarchy.find("Togo", "A").node_id
        assert scene.hit_test(10, 5).node_id == hierarchy.find("Togo").node_id
        assert scene.hit_test(-1, -1) is None

    def test_draws_on_surface(self, hierarchy):
        surface = RecordingSurface()
        coordinator = RenderCoordinator(hierarchy, make_config(), surface=surface)
        coordinator.render()
        coordinator.render()
        assert len(surface.scenes) == 2
        assert surface.scenes[0] is surface.scenes[1]


class TestInteraction:
    def test_click_group(self, coordinator, hierarchy):
        togo = hierarchy.find("Togo")
        coordinator.render()
        assert coordinator.click(togo.node_id)
        scene = coordinator.render()
        assert scene.focus_id == togo.node_id
        assert [c.label for c in scene.breadcrumb] == ["All", "Togo"]
        assert scene.can_go_back
        assert [c.key for c in scene.cells] == ["A", "B"]

    def test_click_nested_cell_zooms_to_group(self, coordinator, hierarchy):
        assert coordinator.click(hierarchy.find("Benin", "A").node_id)
        assert coordinator.navigator.focus is hierarchy.find("Benin")

    def test_click_at(self, coordinator, hierarchy):
        assert coordinator.click_at(10, 5)
        assert coordinator.navigator.focus is hierarchy.find("Togo")
        assert not coordinator.click_at(-5, -5)

    def test_click_leaf(self, coordinator, hierarchy, diagnostics):
        coordinator.click(hierarchy.find("Togo").node_id)
        assert not coordinator.click(hierarchy.find("Togo", "A").node_id)
        assert diagnostics.codes()[-1] == ErrorCode.DM301

    def test_click_invisible(self, coordinator, hierarchy, diagnostics):
        coordinator.click(hierarchy.find("Benin").node_id)
        assert not coordinator.click(hierarchy.find("Togo", "A").node_id)
        assert diagnostics.codes() == [ErrorCode.DM400]

    def test_click_unknown_id(self, coordinator, diagnostics):
        assert not coordinator.click(-1)
        assert diagnostics.codes() == [ErrorCode.DM302]

    def test_back_and_home(self, coordinator, hierarchy):
        coordinator.click(hierarchy.find("Togo").node_id)
        assert coordinator.back()
        assert not coordinator.back()
        coordinator.click(hierarchy.find("Togo").node_id)
        coordinator.home()
        assert coordinator.navigator.at_root

    def test_jump(self, coordinator, hierarchy):
        coordinator.click(hierarchy.find("Togo").node_id)
        assert coordinator.jump(hierarchy.root.node_id)
        assert coordinator.render().breadcrumb[-1].label == "All"

    def test_layout_cached_until_navigation(self, coordinator, hierarchy):
        coordinator.render()
        coordinator.render()
        coordinator.hover(hierarchy.find("Togo").node_id)
        assert coordinator.layout_passes == 1
        coordinator.click(hierarchy.find("Togo").node_id)
        coordinator.render()
        assert coordinator.layout_passes == 2

    def test_hover(self, coordinator, hierarchy):
        data = coordinator.hover(hierarchy.find("Togo", "A").node_id)
        assert data.percent_of_parent == pytest.approx(66.667, abs=0.01)
        assert coordinator.hover_at(-1, -1) is None
        assert coordinator.tooltips.hovered is None

    def test_legend_follows_focus(self, coordinator, hierarchy):
        assert [e.key for e in coordinator.legend()] == ["Togo", "Benin"]
        coordinator.click(hierarchy.find("Togo").node_id)
        assert [e.key for e in coordinator.legend()] == ["A", "B"]


class TestResize:
    def test_resize_invalidates(self, coordinator):
        coordinator.render()
        assert coordinator.resize(600, 200)
        assert not coordinator.resize(600, 200)
        scene = coordinator.render()
        assert (scene.width, scene.height) == (600, 200)
        assert coordinator.layout_passes == 2

    def test_burst_applies_latest_only(self, coordinator):
        coordinator.render()
        for size in [(310, 100), (320, 110), (500, 250)]:
            coordinator.notify_resize(*size)
        assert coordinator.flush_resize()
        coordinator.render()
        assert coordinator.size == (500, 250)
        assert coordinator.layout_passes == 2
        assert not coordinator.flush_resize()

    def test_resize_keeps_focus(self, coordinator, hierarchy):
        coordinator.click(hierarchy.find("Togo").node_id)
        coordinator.notify_resize(400, 400)
        coordinator.flush_resize()
        assert coordinator.render().focus_id == hierarchy.find("Togo").node_id


class TestRebuild:
    def test_rebuild_resets_focus(self, coordinator, hierarchy, records):
        coordinator.click(hierarchy.find("Togo").node_id)
        coordinator.hover(hierarchy.find("Togo", "A").node_id)
        rebuilt = aggregate(records[:2], COUNTRY_SET, WEIGHT)
        coordinator.set_hierarchy(rebuilt)
        scene = coordinator.render()
        assert coordinator.hierarchy is rebuilt
        assert scene.focus_id == rebuilt.root.node_id
        assert [c.key for c in scene.top_level()] == ["Togo"]
        assert coordinator.tooltips.hovered is None

    def test_rebuild_keeps_pending_size(self, coordinator, records, diagnostics):
        surface = RecordingSurface()
        coordinator.surface = surface
        coordinator.notify_resize(800, 600)
        coordinator.set_hierarchy(aggregate(records, COUNTRY_SET, WEIGHT))
        scene = coordinator.render()
        assert (scene.width, scene.height) == (800, 600)
        assert surface.scenes == [scene]
        assert sum(c.rect.area for c in scene.top_level()) == pytest.approx(800 * 600)
        assert diagnostics.count(ErrorCode.DM401) == 0

    def test_timer_armed_before_rebuild_is_discarded(self, coordinator, records, diagnostics):
        token = coordinator.notify_resize(800, 600)
        coordinator.set_hierarchy(aggregate(records, COUNTRY_SET, WEIGHT))
        assert not coordinator.flush_resize(token)
        assert coordinator.size == (800, 600)
        assert diagnostics.count(ErrorCode.DM401) == 1

    def test_resize_after_rebuild_applies(self, coordinator, records):
        coordinator.set_hierarchy(aggregate(records, COUNTRY_SET, WEIGHT))
        token = coordinator.notify_resize(800, 600)
        assert coordinator.flush_resize(token)
        assert coordinator.size == (800, 600)

    def test_stale_click_after_rebuild(self, coordinator, hierarchy, records, diagnostics):
        coordinator.render()
        old_benin = hierarchy.find("Benin")
        coordinator.set_hierarchy(aggregate(records[:2], COUNTRY_SET, WEIGHT))
        assert not coordinator.click(old_benin.node_id)
        assert coordinator.navigator.at_root

    def test_old_id_alive_in_new_tree(self, coordinator, hierarchy, records, diagnostics):
        coordinator.render()
        old_togo = hierarchy.find("Togo").node_id
        # Benin now leads, so it takes the slot Togo held in the old tree
        rebuilt = aggregate(records + [{"country": "Benin", "set": "C", "weight": 500}], COUNTRY_SET, WEIGHT)
        coordinator.set_hierarchy(rebuilt)
        coordinator.render()
        assert rebuilt.root.children[0].key == "Benin"
        assert not coordinator.click(old_togo)
        assert coordinator.navigator.at_root
        assert diagnostics.codes() == [ErrorCode.DM302]
        assert coordinator.hover(old_togo) is None
        assert coordinator.tooltips.hovered is None


class TestColors:
    COUNTRIES = [
        "Benin",
        "Burkina Faso",
        "Côte d'Ivoire",
        "Niger",
        "Nigeria",
        "Togo",
        "Ghana",
        "Mali",
        "Senegal",
        "Guinea",
    ]

    @pytest.mark.parametrize("count", range(1, 11))
    def test_top_level_colors_distinct(self, count):
        records = [{"country": c, "set": "A"} for c in self.COUNTRIES[:count]]
        coordinator = RenderCoordinator(aggregate(records, COUNTRY_SET), make_config())
        fills = [c.fill for c in coordinator.render().top_level()]
        assert len(fills) == count
        assert len(set(fills)) == count
        assert len({e.color for e in coordinator.legend()}) == count

    def test_legend_matches_cells(self, coordinator):
        fills = {c.key: c.fill for c in coordinator.render().top_level()}
        assert {e.key: e.color for e in coordinator.legend()} == fills

    def test_rebuild_rebinds_colors(self, coordinator):
        rebuilt = aggregate([{"country": c, "set": "A"} for c in self.COUNTRIES], COUNTRY_SET)
        coordinator.set_hierarchy(rebuilt)
        assert len({c.fill for c in coordinator.render().top_level()}) == len(self.COUNTRIES)
