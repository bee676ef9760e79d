import pytest

from cafe import DuplicateLogin, InvalidInput, NotFound, Role, Unauthenticated


def test_register_then_authenticate(app):
    account = app.accounts.register("alice", "pw1", "555-0001")
    assert account.login == "alice"
    assert account.role is Role.CUSTOMER
    assert account.fav_items == ""
    assert app.accounts.authenticate("alice", "pw1") == account


def test_wrong_password_is_unauthenticated(app):
    app.accounts.register("alice", "pw1", "555-0001")
    with pytest.raises(Unauthenticated):
        app.accounts.authenticate("alice", "nope")


def test_duplicate_login(app, db):
    app.accounts.register("alice", "pw1", "555-0001")
    with pytest.raises(DuplicateLogin):
        app.accounts.register("alice", "other", "555-9999")
    assert db.query_count("SELECT * FROM users WHERE login=?;", ("alice",)) == 1


def test_blank_login_rejected(app):
    with pytest.raises(InvalidInput):
        app.accounts.register("", "pw", "555")


def test_resolve_role(app, staff):
    assert app.accounts.resolve_role("admin") is Role.MANAGER
    assert app.accounts.resolve_role(staff) is Role.EMPLOYEE
    with pytest.raises(NotFound):
        app.accounts.resolve_role("ghost")


def test_role_comparison_is_exact():
    assert Role.from_stored("Manager") is Role.MANAGER
    assert Role.from_stored("Manager ") is Role.CUSTOMER
    assert not Role.from_stored("employee").is_staff


def test_vanished_account_drops_session(app, session, alice, db):
    db.execute("UPDATE users SET login=? WHERE login=?;", ("alice2", "alice"))
    with pytest.raises(Unauthenticated):
        app.accounts.current_role()
    assert session.login is None


def test_login_prompt_loops_until_valid(app, session, console):
    app.accounts.register("alice", "pw1", "555-0001")
    console.feed("alice", "wrong", "alice", "pw1")
    app.accounts.login_prompt()
    assert session.login == "alice"
    assert "invalid login or password" in console.text


def test_login_prompt_blank_cancels(app, session, console):
    console.feed("")
    with pytest.raises(Unauthenticated):
        app.accounts.login_prompt()
    assert session.login is None


def test_register_prompt_and_whoami(app, session, console):
    console.feed("carol", "secret", "555-0003")
    app.accounts.register_prompt()
    assert "user successfully created!" in console.text
    app.accounts.login_prompt("carol", "secret")
    app.accounts.whoami()
    assert "you are logged in as" in console.output[-1]
    app.accounts.logout()
    assert session.login is None
