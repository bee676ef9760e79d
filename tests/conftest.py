import pytest

from cafe import Application, Console, DatabaseManager, Role, Session


class ScriptedConsole(Console):
    """feeds canned answers and records everything said"""
    def __init__(self):
        self.answers: list[str] = []
        self.output: list[str] = []

    def feed(self, *answers: str):
        self.answers.extend(answers)

    def ask(self, prompt, color="magenta"):
        self.output.append(prompt)
        if not self.answers:
            raise EOFError(prompt)
        return self.answers.pop(0).strip()

    def say(self, text="", color=None, attrs=None):
        self.output.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.output)


@pytest.fixture
def db():
    db = DatabaseManager(":memory:")
    yield db
    db.close()


@pytest.fixture
def console():
    return ScriptedConsole()


@pytest.fixture
def session(db, console):
    return Session(db, console)


@pytest.fixture
def app(session):
    return Application(session)


@pytest.fixture
def alice(app, session):
    """registered customer, logged in"""
    app.accounts.register("alice", "pw1", "555-0001")
    session.login = "alice"
    return "alice"


@pytest.fixture
def staff(app, db):
    """registered employee (not logged in)"""
    app.accounts.register("bob", "pw2", "555-0002")
    db.execute("UPDATE users SET type=? WHERE login=?;", (Role.EMPLOYEE.value, "bob"))
    return "bob"
