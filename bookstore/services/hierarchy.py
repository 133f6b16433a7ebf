"""
Self-referential hierarchies: category parents and employee managers.

The schema only stores a nullable parent link and happily accepts loops
(A manages B manages A). Writes made through this module walk the parent
chain first and refuse any change that would close a loop.
"""

from typing import Dict, List, Optional

from flask import current_app
from sqlalchemy import select

from bookstore.errors import HierarchyCycleError, guarded_commit
from bookstore.extensions import db
from bookstore.models import Category, Employee

HIERARCHIES = {
    Category: ("category_id", "parent_category_id"),
    Employee: ("employee_id", "manager_id"),
}


def parent_map(model) -> Dict[int, Optional[int]]:
    """{node id: parent id} for every row of a hierarchical table."""
    key_name, parent_name = HIERARCHIES[model]
    rows = db.session.execute(
        select(getattr(model, key_name), getattr(model, parent_name))
    ).all()
    return {node_id: parent_id for node_id, parent_id in rows}


def ancestors(model, node_id: int) -> List[int]:
    """Parent chain of a node, nearest first. Stops if it runs into a loop."""
    parents = parent_map(model)
    chain = []
    seen = {node_id}
    current = parents.get(node_id)
    while current is not None and current not in seen:
        chain.append(current)
        seen.add(current)
        current = parents.get(current)
    return chain


def assert_no_cycle(model, node_id: int, new_parent_id: Optional[int]) -> None:
    """Raise HierarchyCycleError if node_id would become its own ancestor."""
    if new_parent_id is None:
        return

    table = model.__tablename__
    _, parent_name = HIERARCHIES[model]

    if new_parent_id == node_id:
        raise HierarchyCycleError(
            f"{table} {node_id} cannot be its own parent",
            constraint=parent_name,
            table=table,
        )

    parents = parent_map(model)
    seen = set()
    current = new_parent_id
    while current is not None and current not in seen:
        if current == node_id:
            raise HierarchyCycleError(
                f"Setting {parent_name}={new_parent_id} on {table} {node_id} creates a cycle",
                constraint=parent_name,
                table=table,
            )
        seen.add(current)
        current = parents.get(current)


def find_cycles(model) -> List[List[int]]:
    """
    Every loop already present in the table, each as a list of node ids.

    Rows written with raw SQL bypass assert_no_cycle, so this is the way to
    audit an existing database.
    """
    parents = parent_map(model)
    state = {}  # node id -> "visiting" | "done"
    cycles = []

    for start in parents:
        if start in state:
            continue
        path = []
        current = start
        while current is not None and current not in state:
            state[current] = "visiting"
            path.append(current)
            current = parents.get(current)

        if current is not None and state.get(current) == "visiting":
            cycles.append(path[path.index(current):])

        for node in path:
            state[node] = "done"

    return cycles


def _reparent(model, node_id: int, new_parent_id: Optional[int]):
    _, parent_name = HIERARCHIES[model]
    node = db.session.get(model, node_id)
    if node is None:
        raise LookupError(f"{model.__tablename__} {node_id} not found")

    assert_no_cycle(model, node_id, new_parent_id)

    with guarded_commit(db.session):
        setattr(node, parent_name, new_parent_id)

    current_app.logger.info(
        f"{model.__tablename__} {node_id}: {parent_name} set to {new_parent_id}"
    )
    return node


def set_category_parent(category_id: int, parent_category_id: Optional[int]) -> Category:
    return _reparent(Category, category_id, parent_category_id)


def set_employee_manager(employee_id: int, manager_id: Optional[int]) -> Employee:
    return _reparent(Employee, employee_id, manager_id)


def category_path(category_id: int) -> List[str]:
    """Category names from the root down to category_id."""
    chain = [category_id] + ancestors(Category, category_id)
    names = dict(
        db.session.execute(
            select(Category.category_id, Category.name).where(Category.category_id.in_(chain))
        ).all()
    )
    return [names[node_id] for node_id in reversed(chain) if node_id in names]


def reporting_chain(employee_id: int) -> List[dict]:
    """Managers above an employee, direct manager first."""
    chain = ancestors(Employee, employee_id)
    if not chain:
        return []

    employees = {
        e.employee_id: e
        for e in db.session.execute(
            select(Employee).where(Employee.employee_id.in_(chain))
        ).scalars()
    }
    return [
        {
            "employee_id": node_id,
            "name": f"{employees[node_id].first_name} {employees[node_id].last_name}",
            "position": employees[node_id].position,
        }
        for node_id in chain
        if node_id in employees
    ]
