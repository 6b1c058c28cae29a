# tests/test_queries.py
"""
CRUD and invariant checks for the query layer.
"""
import pytest

from database import queries
from database.seed import SEED_PRODUCTS, SEED_ROLES, seed_database


def test_first_role_becomes_default(engine, make_role):
    first = make_role(title="Closer")
    second = make_role(title="Setter")
    assert first.is_default is True
    assert second.is_default is False


def test_creating_default_role_clears_previous_default(engine, make_role):
    first = make_role(title="Closer")
    second = make_role(title="Setter", is_default=True)

    assert second.is_default is True
    assert queries.get_role(first.id).is_default is False


def test_update_role_keeps_default_until_another_is_marked(engine, make_role):
    first = make_role(title="Closer")
    updated = queries.update_role(
        first.id, title="Closer II", description="Closes the biggest deals.", permissions=["edit"], is_default=False
    )
    assert updated.title == "Closer II"
    assert updated.permissions == ["edit"]
    assert updated.is_default is True


def test_update_missing_role_returns_none(engine):
    assert queries.update_role(99, title="Ghost", description="Does not exist anywhere.") is None


def test_delete_last_role_is_rejected(engine, make_role):
    only = make_role()
    with pytest.raises(queries.LastRoleError):
        queries.delete_role(only.id)
    assert queries.get_role_count() == 1


def test_role_count_never_drops_below_one(engine, make_role):
    ids = [make_role(title=f"Role {i}").id for i in range(3)]
    for role_id in ids[:-1]:
        assert queries.delete_role(role_id) is True
        assert queries.get_role_count() >= 1
    with pytest.raises(queries.LastRoleError):
        queries.delete_role(ids[-1])


def test_deleting_default_role_promotes_lowest_remaining(engine, make_role):
    default = make_role(title="Closer")
    setter = make_role(title="Setter")
    make_role(title="Senior Closer")

    queries.delete_role(default.id)

    assert queries.get_role(setter.id).is_default is True
    assert sum(1 for r in queries.get_all_roles() if r.is_default) == 1


def test_delete_unknown_role_returns_false(engine, make_role):
    make_role()
    make_role(title="Setter")
    assert queries.delete_role(12345) is False


def test_set_role_as_default(engine, make_role):
    first = make_role(title="Closer")
    second = make_role(title="Setter")

    assert queries.set_role_as_default(second.id).is_default is True
    assert queries.get_role(first.id).is_default is False
    assert queries.set_role_as_default(999) is None


def test_update_product_role_assignments_adds_and_removes(engine, make_role, make_product):
    role = make_role()
    for pid in ("p1", "p2", "p3"):
        make_product(id=pid, name=f"Product {pid}")

    queries.update_product_role_assignments(role.id, ["p1", "p2"])
    products = queries.update_product_role_assignments(role.id, ["p2", "p3"])

    assert sorted(p.id for p in products) == ["p2", "p3"]


def test_update_assignments_with_unknown_product_changes_nothing(engine, make_role, make_product):
    role = make_role()
    make_product(id="p1")
    queries.update_product_role_assignments(role.id, ["p1"])

    with pytest.raises(queries.ProductNotFoundError):
        queries.update_product_role_assignments(role.id, ["p1", "missing"])

    assert [p.id for p in queries.get_products_for_role(role.id)] == ["p1"]


def test_update_assignments_for_unknown_role(engine):
    with pytest.raises(queries.RoleNotFoundError):
        queries.update_product_role_assignments(42, [])


def test_repeated_assignment_is_idempotent(engine, make_role, make_product):
    role = make_role()
    make_product(id="p1")

    queries.update_product_role_assignments(role.id, ["p1", "p1"])
    queries.update_product_role_assignments(role.id, ["p1"])
    assert len(queries.get_products_for_role(role.id)) == 1

    assert queries.update_product_role_assignments(role.id, []) == []
    assert queries.get_products_for_role(role.id) == []


def test_products_with_role_assignments_flags_selected(engine, make_role, make_product):
    role = make_role()
    make_product(id="p1", name="Alpha")
    make_product(id="p2", name="Beta")
    queries.update_product_role_assignments(role.id, ["p2"])

    rows = {row["product"].id: row for row in queries.get_products_with_role_assignments()}

    assert rows["p1"]["selected"] is False
    assert rows["p2"]["selected"] is True
    assert rows["p2"]["role_ids"] == [role.id]


def test_deleting_role_removes_its_assignments(engine, make_role, make_product):
    keep = make_role(title="Closer")
    gone = make_role(title="Setter")
    make_product(id="p1")
    queries.update_product_role_assignments(gone.id, ["p1"])

    queries.delete_role(gone.id)

    rows = queries.get_products_with_role_assignments()
    assert rows[0]["selected"] is False
    assert queries.get_role(keep.id) is not None


def test_delete_product_removes_assignments(engine, make_role, make_product):
    role = make_role()
    make_product(id="p1")
    queries.update_product_role_assignments(role.id, ["p1"])

    assert queries.delete_product("p1") is True
    assert queries.get_products_for_role(role.id) == []
    assert queries.delete_product("p1") is False


def test_seed_only_fills_empty_tables(engine):
    first = seed_database()
    second = seed_database()

    assert first == {"roles": len(SEED_ROLES), "products": len(SEED_PRODUCTS)}
    assert second == {"roles": 0, "products": 0}
    default = [r for r in queries.get_all_roles() if r.is_default]
    assert [r.title for r in default] == ["Closer"]
    assert queries.get_products_for_role(default[0].id)
