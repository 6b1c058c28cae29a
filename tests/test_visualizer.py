# tests/test_visualizer.py
from core.incentives import combine_incentive
from core.types import Product, Role
from ui.components.visualizer import combined_incentive_chart, comparison_frame

PRODUCTS = [
    Product(id="p1", name="Strategy Session", commission="10%", bonus="50€"),
    Product(id="p2", name="Workshop", commission="5%", bonus="10€"),
]
ROLES = [
    Role(id=1, title="Closer", description="Closes deals."),
    Role(id=2, title="Setter", description="Books calls."),
]


def test_comparison_frame_marks_non_contributing_roles():
    combined = [combine_incentive(PRODUCTS[0], [1, 2]), combine_incentive(PRODUCTS[1], [2])]

    df = comparison_frame(PRODUCTS, ROLES, combined)

    assert list(df["Product"]) == ["Strategy Session", "Workshop"]
    assert list(df["Closer (#1)"]) == ["10%", "-"]
    assert list(df["Combined commission"]) == ["20%", "5%"]


def test_chart_is_none_without_data():
    assert combined_incentive_chart(PRODUCTS, []) is None


def test_chart_plots_combined_commission():
    fig = combined_incentive_chart(PRODUCTS, [combine_incentive(PRODUCTS[0], [1, 2])])
    assert list(fig.data[0].y) == [20.0]


def test_roles_with_the_same_title_keep_separate_columns():
    twins = [
        Role(id=1, title="Closer", description="Closes deals."),
        Role(id=4, title="Closer", description="Closes enterprise deals."),
    ]
    df = comparison_frame(PRODUCTS, twins, [combine_incentive(PRODUCTS[0], [4])])

    assert list(df["Closer (#1)"]) == ["-"]
    assert list(df["Closer (#4)"]) == ["10%"]
