import pytest

from cafe import ConstraintViolation, DatabaseManager, StorageFailure


def test_query_rows_carry_column_names(db):
    rows = db.query("SELECT item_name, price FROM menu WHERE item_name=?;", ("Coffee",))
    assert len(rows) == 1
    assert rows[0]["item_name"] == "Coffee"
    assert rows[0]["price"] == pytest.approx(2.50)


def test_execute_returns_rows_affected(db):
    assert db.execute("UPDATE menu SET description=? WHERE type=?;", ("hot", "Soup")) == 2
    assert db.execute("UPDATE menu SET description=? WHERE type=?;", ("x", "Nothing")) == 0


def test_query_count(db):
    assert db.query_count("SELECT * FROM menu WHERE type=?;", ("Drinks",)) == 3


def test_query_scalar_tracks_order_sequence(db):
    assert db.query_scalar("orders") == -1
    db.execute("INSERT INTO orders(login, total) VALUES(?, ?);", ("admin", 1.0))
    db.execute("INSERT INTO orders(login, total) VALUES(?, ?);", ("admin", 2.0))
    assert db.query_scalar("orders") == 2


def test_bound_parameters_are_not_interpreted(db):
    assert db.query("SELECT * FROM users WHERE login=?;", ("' OR '1'='1",)) == []


def test_malformed_sql_is_storage_failure(db):
    with pytest.raises(StorageFailure):
        db.query("SELEC nonsense;")


def test_unique_violation_is_constraint_violation(db):
    with pytest.raises(ConstraintViolation):
        db.execute("INSERT INTO users(login, password) VALUES(?, ?);", ("admin", "x"))


def test_price_must_be_positive(db):
    with pytest.raises(StorageFailure):
        db.execute("INSERT INTO menu(item_name, type, price) VALUES(?, ?, ?);", ("Free Lunch", "Soup", 0))


def test_paid_orders_cannot_be_reopened(db):
    db.execute("INSERT INTO orders(login, paid, total) VALUES(?, 1, ?);", ("admin", 3.0))
    with pytest.raises(StorageFailure):
        db.execute("UPDATE orders SET paid=0;")


def test_unknown_order_owner_rejected(db):
    with pytest.raises(ConstraintViolation):
        db.execute("INSERT INTO orders(login, total) VALUES(?, ?);", ("ghost", 1.0))


def test_unreachable_database_is_storage_failure(tmp_path):
    with pytest.raises(StorageFailure):
        DatabaseManager(str(tmp_path / "missing" / "dir" / "cafe.db"))


def test_seeding_is_idempotent(tmp_path):
    path = str(tmp_path / "cafe.db")
    first = DatabaseManager(path)
    count = first.query_count("SELECT * FROM menu;")
    first.close()
    second = DatabaseManager(path)
    assert second.query_count("SELECT * FROM menu;") == count
    assert second.query_count("SELECT * FROM users WHERE login=?;", ("admin",)) == 1
    second.close()
