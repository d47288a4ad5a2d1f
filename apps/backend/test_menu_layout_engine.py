"""
Test the menu layout engine end to end.
Covers the layout guarantees (column and font bounds, monotonic font size,
determinism), the override rules, multi-slide rendering and the stage trace.
"""

import pytest
from pydantic import ValidationError

from config.menu_layout import LayoutEngineSettings, MenuLayoutConstants
from models.menu import (
    DEFAULT_MENU_CONFIG,
    AutoOptimizationsConfig,
    ColumnControlConfig,
    FontScalingConfig,
    GroupSelection,
    LayoutResult,
    ManualOverrideConfig,
    MenuSlide,
    MenuTemplateConfig,
    Product,
    ProductGroup,
    dump_menu_model,
)
from services.menu_layout import MenuLayoutEngine, SlideNotFoundError
from utils.layout_trace import LAYOUT_STAGES, LayoutTraceRecorder

FONT_12_48 = FontScalingConfig(auto_scale=True, min_font_size=12, max_font_size=48)
ALL_HEURISTICS = ColumnControlConfig(
    auto_optimizations=AutoOptimizationsConfig(
        prevent_empty_columns=True, prevent_overflow=True, optimize_for_full_width=True, density_threshold=0.85
    )
)


@pytest.fixture
def engine():
    return MenuLayoutEngine(default_screen_width=1920, font_bounds=(12, 48))


def make_catalog(group_sizes):
    return [
        ProductGroup(id=index + 1, name=f"Group {index + 1}", products=[
            Product(id=f"g{index + 1}-p{n}", name=f"Item {n}", price=1.0 + n) for n in range(size)
        ])
        for index, size in enumerate(group_sizes)
    ]


def select_all(catalog, slide_id="slide-1", **slide_fields):
    return MenuSlide(slide_id=slide_id, group_selections=[
        GroupSelection(group_id=group.id, product_ids=[p.id for p in group.products], display_order=index)
        for index, group in enumerate(catalog)
    ], **slide_fields)


def test_scenario_small_menu_uses_two_columns(engine):
    assert engine.calculate_layout(2, 10, FONT_12_48).column_count == 2


def test_scenario_large_menu_caps_at_six_columns(engine):
    assert engine.calculate_layout(10, 80, FONT_12_48).column_count == 6


def test_layout_bounds_hold_for_any_content(engine):
    for control in (None, ALL_HEURISTICS):
        for groups in range(0, 21):
            for products in range(0, 201):
                result = engine.calculate_layout(groups, products, FONT_12_48, control)
                assert 2 <= result.column_count <= 6
                assert 12 <= result.font_size_px <= 48
                assert result.grid_template_columns == f"repeat({result.column_count}, 1fr)"


@pytest.mark.parametrize("control", [None, ColumnControlConfig(), ALL_HEURISTICS], ids=["off", "default", "all"])
def test_font_size_never_grows_with_more_products(engine, control):
    for groups in range(0, 21):
        previous = None
        for products in range(0, 201):
            size = engine.calculate_layout(groups, products, FONT_12_48, control).font_size_px
            if previous is not None:
                assert size <= previous, f"{groups} groups: {products} products grew to {size}px"
            previous = size


def test_default_column_control_keeps_planned_columns(engine):
    # 12.5 units over 4 columns keeps all four columns
    control = ColumnControlConfig()
    assert engine.calculate_layout(5, 5, FONT_12_48, control).font_size_px <= \
        engine.calculate_layout(5, 4, FONT_12_48, control).font_size_px
    assert engine.calculate_layout(5, 5, FONT_12_48, control).column_count == 4


def test_identical_inputs_give_identical_results(engine):
    first = engine.calculate_layout(4, 37, FONT_12_48, ALL_HEURISTICS, 1366)
    second = engine.calculate_layout(4, 37, FONT_12_48, ALL_HEURISTICS, 1366)
    assert first == second
    assert first is not second


def test_manual_column_override_wins(engine):
    control = ColumnControlConfig(
        manual_override=ManualOverrideConfig(enabled=True, adjustment=1),
        auto_optimizations=AutoOptimizationsConfig(
            prevent_empty_columns=True, prevent_overflow=True, optimize_for_full_width=True, density_threshold=0.01
        ),
    )
    assert engine.calculate_layout(3, 10, FONT_12_48).column_count == 3
    assert engine.calculate_layout(3, 10, FONT_12_48, control).column_count == 4


def test_manual_font_size_wins(engine):
    scaling = FontScalingConfig(auto_scale=False, manual_font_size=30, min_font_size=12, max_font_size=48)
    assert engine.calculate_layout(8, 120, scaling).font_size_px == 30


def test_malformed_font_config_stays_in_global_bound(engine):
    scaling = FontScalingConfig(auto_scale=True, min_font_size=4, max_font_size=96)
    for products in (0, 20, 200):
        assert 12 <= engine.calculate_layout(2, products, scaling).font_size_px <= 48


def test_screen_width_only_matters_for_full_width(engine):
    narrow = engine.calculate_layout(2, 10, FONT_12_48, ALL_HEURISTICS, screen_width=640)
    wide = engine.calculate_layout(2, 10, FONT_12_48, ALL_HEURISTICS, screen_width=1920)
    assert narrow.column_count == 2
    assert wide.column_count == 3


def test_layout_result_is_frozen():
    result = LayoutResult.build(3, 24)
    with pytest.raises(ValidationError):
        result.column_count = 4
    assert result.to_style_variables() == {"--menu-columns": "3", "--menu-font-size": "24px"}
    assert dump_menu_model(result) == {"columnCount": 3, "fontSizePx": 24, "gridTemplateColumns": "repeat(3, 1fr)"}


def test_render_slide(engine):
    catalog = make_catalog([4, 3, 5])
    catalog[1].products[0].image_url = "/img/bg.jpg"
    config = MenuTemplateConfig(
        background_product_id="g2-p0",
        slides=[select_all(catalog)],
        font_scaling=FONT_12_48,
    )
    before = dump_menu_model(config)

    slide = engine.render_slide(catalog, config)

    assert [g.id for g in slide.groups] == [1, 2, 3]
    assert slide.total_product_count == 12
    assert slide.background_image_url == "/img/bg.jpg"
    assert slide.layout == engine.calculate_layout(3, 12, FONT_12_48)
    assert engine.compute_layout(catalog, config) == slide.layout
    assert dump_menu_model(config) == before

    data = slide.to_dict()
    assert data["layout"]["columnCount"] == slide.layout.column_count
    assert data["styleVariables"]["--menu-columns"] == str(slide.layout.column_count)
    assert data["columnSummary"] == "Column control off: using the automatic column count"


def test_render_empty_slide_does_not_raise(engine):
    catalog = make_catalog([3])
    config = MenuTemplateConfig(slides=[MenuSlide(slide_id="empty", group_selections=[])])
    slide = engine.render_slide(catalog, config)
    assert slide.groups == []
    assert slide.layout.column_count == 2


def test_render_all_slides(engine):
    catalog = make_catalog([6, 6, 6, 6, 6, 6, 6])
    config = MenuTemplateConfig(
        layout="multi-slide",
        background_product_id="g1-p0",
        slides=[select_all(catalog[:2], "drinks"), select_all(catalog, "everything")],
        font_scaling=FONT_12_48,
    )
    slides = engine.render_all(catalog, config)
    assert [s.slide_id for s in slides] == ["drinks", "everything"]
    assert slides[0].layout.column_count < slides[1].layout.column_count
    assert slides[0].layout.font_size_px > slides[1].layout.font_size_px


def test_unknown_slide_index(engine):
    with pytest.raises(SlideNotFoundError):
        engine.render_slide([], DEFAULT_MENU_CONFIG, slide_index=3)


def test_stage_trace(engine):
    catalog = make_catalog([10, 10])
    config = MenuTemplateConfig(
        background_product_id="g1-p0",
        slides=[select_all(catalog)],
        font_scaling=FONT_12_48,
        column_control=ColumnControlConfig(
            auto_optimizations=AutoOptimizationsConfig(prevent_empty_columns=False, prevent_overflow=True,
                                                       density_threshold=0.85)
        ),
    )
    recorder = LayoutTraceRecorder()
    slide = engine.render_slide(catalog, config, observer=recorder)

    assert tuple(recorder.stages) == LAYOUT_STAGES
    assert recorder.get("content_selection").outputs["total_product_count"] == 20
    plan = recorder.get("column_plan").outputs
    assert plan["effective_units"] == 24.0
    policy = recorder.get("layout_policy")
    assert policy.inputs["auto_columns"] == plan["columns"]
    assert policy.inputs["effective_units"] == 23.0
    assert recorder.get("font_scale").inputs["column_count"] == policy.outputs["final_columns"]
    assert recorder.get("result").outputs["columnCount"] == slide.layout.column_count

    recorder.clear()
    engine.calculate_layout(2, 20, FONT_12_48, observer=recorder)
    assert recorder.stages == list(LAYOUT_STAGES[1:])
    assert recorder.get("content_selection") is None


def test_failing_observer_does_not_change_layout(engine):
    def broken(event):
        raise RuntimeError("observer down")

    assert engine.calculate_layout(3, 30, FONT_12_48, observer=broken) == engine.calculate_layout(3, 30, FONT_12_48)


def test_estimate_font_size(engine):
    assert engine.estimate_font_size(2, 10, FONT_12_48) == 27


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MENU_SCREEN_WIDTH", "1280")
    monkeypatch.setenv("MENU_TRACE_LAYOUT", "true")
    settings = LayoutEngineSettings()
    assert settings.default_screen_width == 1280
    assert settings.trace_layout is True


def test_settings_validation():
    with pytest.raises(ValueError):
        LayoutEngineSettings(global_min_font_size=48, global_max_font_size=12).validate()
    with pytest.raises(ValueError):
        LayoutEngineSettings(default_screen_width=0).validate()


def test_logging_profiles(monkeypatch):
    from config.logging_config import get_logging_config

    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("DEBUG", raising=False)
    production = get_logging_config()
    assert production["environment"] == "production"
    assert "services.menu_layout.font_scaler" in production["suppress_modules"]

    monkeypatch.setenv("DEBUG", "true")
    assert get_logging_config()["default_level"] == "DEBUG"


@pytest.mark.parametrize("value", [float("inf"), float("nan")])
def test_non_finite_manual_font_size_does_not_raise(engine, value):
    scaling = FontScalingConfig.model_construct(auto_scale=False, manual_font_size=value,
                                                min_font_size=12, max_font_size=48)
    result = engine.calculate_layout(2, 10, scaling)
    assert 12 <= result.font_size_px <= 48


def test_wider_column_table():
    constants = MenuLayoutConstants(MAX_COLUMNS=8)
    engine = MenuLayoutEngine(constants=constants, default_screen_width=1920, font_bounds=(12, 48))
    result = engine.calculate_layout(10, 80, FONT_12_48)
    assert result.column_count == 8
    assert result.grid_template_columns == "repeat(8, 1fr)"
