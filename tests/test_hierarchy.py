import pytest
from sqlalchemy import update

from bookstore.errors import ConstraintViolation, HierarchyCycleError
from bookstore.models import Category, Employee
from bookstore.services.hierarchy import (
    ancestors,
    assert_no_cycle,
    category_path,
    find_cycles,
    reporting_chain,
    set_category_parent,
    set_employee_manager,
)
from conftest import make_employee


@pytest.fixture
def staff(db_session):
    """Owner <- Manager <- Clerk."""
    owner = make_employee(db_session, "owner@example.com", first_name="Nomsa", position="Owner")
    manager = make_employee(
        db_session,
        "manager@example.com",
        first_name="Thandi",
        position="Store Manager",
        manager_id=owner.employee_id,
    )
    clerk = make_employee(
        db_session,
        "clerk@example.com",
        first_name="Pieter",
        manager_id=manager.employee_id,
    )
    db_session.commit()
    return {"owner": owner, "manager": manager, "clerk": clerk}


@pytest.mark.hierarchy
class TestCategoryHierarchy:
    def test_path_from_root(self, app, category_tree):
        path = category_path(category_tree["noir"].category_id)

        assert path == ["Fiction", "Crime", "Nordic Noir"]

    def test_path_of_root_category(self, app, category_tree):
        assert category_path(category_tree["non_fiction"].category_id) == ["Non-Fiction"]

    def test_path_of_missing_category(self, app, category_tree):
        assert category_path(9999) == []

    def test_ancestors_nearest_first(self, app, category_tree):
        chain = ancestors(Category, category_tree["noir"].category_id)

        assert chain == [
            category_tree["crime"].category_id,
            category_tree["fiction"].category_id,
        ]

    def test_reparent(self, app, db_session, category_tree):
        noir_id = category_tree["noir"].category_id

        set_category_parent(noir_id, category_tree["non_fiction"].category_id)

        assert category_path(noir_id) == ["Non-Fiction", "Nordic Noir"]

    def test_detach_to_root(self, app, db_session, category_tree):
        crime_id = category_tree["crime"].category_id

        category = set_category_parent(crime_id, None)

        assert category.parent_category_id is None
        assert category_path(category_tree["noir"].category_id) == ["Crime", "Nordic Noir"]

    def test_self_parent_rejected(self, app, category_tree):
        crime_id = category_tree["crime"].category_id

        with pytest.raises(HierarchyCycleError) as exc_info:
            set_category_parent(crime_id, crime_id)

        assert exc_info.value.table == "categories"
        assert exc_info.value.constraint == "parent_category_id"

    def test_descendant_as_parent_rejected(self, app, db_session, category_tree):
        fiction_id = category_tree["fiction"].category_id

        with pytest.raises(HierarchyCycleError):
            set_category_parent(fiction_id, category_tree["noir"].category_id)

        db_session.expire_all()
        assert db_session.get(Category, fiction_id).parent_category_id is None

    def test_cycle_error_is_a_constraint_violation(self, app, category_tree):
        with pytest.raises(ConstraintViolation) as exc_info:
            assert_no_cycle(
                Category,
                category_tree["crime"].category_id,
                category_tree["noir"].category_id,
            )

        assert exc_info.value.to_dict()["error"] == "hierarchy_cycle"

    def test_missing_category_raises_lookup_error(self, app, category_tree):
        with pytest.raises(LookupError):
            set_category_parent(9999, category_tree["fiction"].category_id)

    def test_missing_parent_rejected_by_database(self, app, category_tree):
        with pytest.raises(ConstraintViolation) as exc_info:
            set_category_parent(category_tree["crime"].category_id, 9999)

        assert exc_info.value.kind == "referential"


@pytest.mark.hierarchy
class TestEmployeeHierarchy:
    def test_reporting_chain(self, app, staff):
        chain = reporting_chain(staff["clerk"].employee_id)

        assert [row["employee_id"] for row in chain] == [
            staff["manager"].employee_id,
            staff["owner"].employee_id,
        ]
        assert chain[0]["name"] == "Thandi Member"
        assert chain[0]["position"] == "Store Manager"

    def test_top_of_chain_has_no_managers(self, app, staff):
        assert reporting_chain(staff["owner"].employee_id) == []

    def test_manager_cannot_report_to_subordinate(self, app, staff):
        with pytest.raises(HierarchyCycleError):
            set_employee_manager(staff["owner"].employee_id, staff["clerk"].employee_id)

    def test_change_manager(self, app, staff):
        clerk = set_employee_manager(staff["clerk"].employee_id, staff["owner"].employee_id)

        assert clerk.manager_id == staff["owner"].employee_id


@pytest.mark.hierarchy
class TestCycleAudit:
    """Loops written around the service layer are still found."""

    def test_no_cycles_in_clean_data(self, app, staff, category_tree):
        assert find_cycles(Employee) == []
        assert find_cycles(Category) == []

    def test_loop_written_directly(self, app, db_session, staff):
        owner_id = staff["owner"].employee_id
        clerk_id = staff["clerk"].employee_id
        db_session.execute(
            update(Employee).where(Employee.employee_id == owner_id).values(manager_id=clerk_id)
        )
        db_session.commit()

        cycles = find_cycles(Employee)

        assert len(cycles) == 1
        assert sorted(cycles[0]) == sorted(
            [owner_id, staff["manager"].employee_id, clerk_id]
        )

    def test_chain_walk_stops_on_loop(self, app, db_session, category_tree):
        fiction_id = category_tree["fiction"].category_id
        noir_id = category_tree["noir"].category_id
        db_session.execute(
            update(Category)
            .where(Category.category_id == fiction_id)
            .values(parent_category_id=noir_id)
        )
        db_session.commit()

        path = category_path(noir_id)

        assert path == ["Fiction", "Crime", "Nordic Noir"]
        assert len(find_cycles(Category)) == 1
