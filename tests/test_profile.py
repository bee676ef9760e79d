import pytest

from cafe import DuplicateLogin, InvalidInput, NotFound, ProfileField, Role


def test_update_own_phone(app, alice):
    account = app.profiles.update_field(alice, ProfileField.PHONE, "555-1111")
    assert account.phone == "555-1111"


def test_update_password_changes_credentials(app, alice):
    app.profiles.update_field(alice, ProfileField.PASSWORD, "newpw")
    assert app.accounts.authenticate(alice, "newpw").login == alice


def test_role_must_be_exact(app, alice):
    with pytest.raises(InvalidInput):
        app.profiles.update_field(alice, ProfileField.ROLE, "manager")
    assert app.profiles.update_field(alice, ProfileField.ROLE, "Employee").role is Role.EMPLOYEE


def test_rename_own_login_follows_session_and_orders(app, session, alice):
    order = app.orders.place_order(alice, ["Coffee"])
    account = app.profiles.update_field(alice, ProfileField.LOGIN, "alicia")
    assert account.login == "alicia"
    assert session.login == "alicia"
    assert app.orders.get_order(order.order_id).login == "alicia"


def test_rename_to_taken_login(app, alice):
    with pytest.raises(DuplicateLogin):
        app.profiles.update_field(alice, ProfileField.LOGIN, "admin")


def test_update_missing_account(app):
    with pytest.raises(NotFound):
        app.profiles.update_field("ghost", ProfileField.PHONE, "1")


def test_customer_prompt_edits_only_self(app, alice, console):
    console.feed("3", "555-2222")
    app.profiles.edit_profile_prompt()
    assert app.accounts.get_account(alice).phone == "555-2222"
    assert "phone changed! updated information as follows:" in console.output


def test_manager_prompt_edits_target_then_self(app, alice, session, console):
    session.login = "admin"
    console.feed(alice, "3", "555-3333", "3", "555-4444")
    app.profiles.edit_profile_prompt()
    assert app.accounts.get_account(alice).phone == "555-3333"
    assert app.accounts.get_account("admin").phone == "555-4444"


def test_manager_prompt_missing_target_aborts(app, session, console):
    session.login = "admin"
    console.feed("ghost", "3", "555-5555")
    with pytest.raises(NotFound):
        app.profiles.edit_profile_prompt()
    assert app.accounts.get_account("admin").phone == ""


def test_prompt_rejects_unknown_field(app, alice, console):
    console.feed("7")
    with pytest.raises(InvalidInput):
        app.profiles.edit_profile_prompt()
