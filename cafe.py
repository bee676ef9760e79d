#!/usr/bin/env python3.13

#   ___ __ _ / _| ___
#  / __/ _` | |_ / _ \
# | (_| (_| |  _|  __/
#  \___\__,_|_|  \___|  counter ☕
#
# ordering + fulfillment console for a small food counter
# --sql is used for syntax highlighting inline sql queries

import os
import sys
import signal
import atexit
import inspect
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence
from enum import Enum

from dotenv import load_dotenv
from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation

# fix windows terminal misinterpreting ansi escape sequences
enable_windows_ansi_interpretation()
load_dotenv()

# constants
DB_PATH = os.getenv("CAFE_DB_PATH", "cafe.db")
PLACEHOLDER_TOTAL = 666.666
ITEM_SENTINEL = "q"
LINE_STATUS_STARTED = "Started"
HISTORY_LIMIT = 5
HISTORY_WINDOW = "-1 day"

# helpers
def safe_int(value: str, minimum: int | None = None):
    """return int value or none if invalid / below minimum"""
    try:
        v = int(value)
        if minimum is not None and v < minimum:
            return None
        return v
    except ValueError:
        return None

def color_money(amount: float) -> str:
    """format amount as green money string"""
    return colored(f"${amount:.2f}", "green")

def parse_boolean_input(prompt: str, handle_invalid: bool = False) -> bool:
    """parse y/n style input; optionally warn on invalid"""
    p = prompt.lower().strip()
    if p in ("y", "yes"):
        return True
    if p in ("n", "no"):
        return False
    if handle_invalid:
        cprint("invalid input, please try again.", "red")
    return False

# errors
class CafeError(Exception):
    """base for errors reported back to the console (never fatal)"""

class Unauthenticated(CafeError):
    """bad credentials or no live session"""

class NotAuthorized(CafeError):
    """role too low for the command"""

class DuplicateLogin(CafeError):
    """login already taken"""

class NotFound(CafeError):
    """missing account / menu item / order"""

class OrderSettled(CafeError):
    """mutation attempted on a paid order"""

class LineNotFound(CafeError):
    """removal of an item that is not on the order"""

class InvalidInput(CafeError):
    """console answer that cannot be used"""

class StorageFailure(CafeError):
    """any error raised by the store"""

class ConstraintViolation(StorageFailure):
    """unique / foreign key / trigger constraint rejected the statement"""

@contextmanager
def translate_errors():
    """re-raise sqlite errors as storage failures"""
    try:
        yield
    except sqlite3.IntegrityError as e:
        raise ConstraintViolation(str(e)) from e
    except sqlite3.Error as e:
        raise StorageFailure(str(e)) from e

# console boundary
class Console:
    """line based prompt/response channel on stdin/stdout"""
    def ask(self, prompt: str, color: str | None = "magenta") -> str:
        return input(colored(prompt, color)).strip()

    def say(self, text: str = "", color: str | None = None, attrs: list[str] | None = None):
        cprint(text, color, attrs=attrs)

    def error(self, text: str):
        self.say(text, "red")

    def read_choice(self, prompt: str = "please make your choice: ") -> int:
        """keep asking until an integer is entered"""
        while True:
            choice = safe_int(self.ask(prompt, None))
            if choice is not None:
                return choice
            self.error("your input is invalid!")

    def table(self, rows: Sequence[dict]) -> int:
        """print rows under bold column headers, return row count"""
        if not rows:
            return 0
        headers = list(rows[0].keys())
        widths = {h: max(len(h), *(len(str(r[h])) for r in rows)) for h in headers}
        self.say("  ".join(h.ljust(widths[h]) for h in headers), attrs=["bold"])
        for r in rows:
            self.say("  ".join(str(r[h]).ljust(widths[h]) for h in headers))
        return len(rows)

# database layer
class DatabaseManager:
    """storage gateway: a single sqlite connection, parameters always bound"""
    def __init__(self, path: str = DB_PATH):
        with translate_errors():
            self.conn = sqlite3.connect(path)
        self.conn.row_factory = sqlite3.Row
        self.conn.autocommit = True
        self.execute("--sql\nPRAGMA foreign_keys=ON;")
        self._create_schema()
        self._seed_menu()
        self._seed_default_user()

    def _create_schema(self):
        """create tables / triggers if missing"""
        with translate_errors():
            self.conn.executescript(
                """--sql
                CREATE TABLE IF NOT EXISTS users (
                    login TEXT PRIMARY KEY,
                    password TEXT NOT NULL, -- stored as typed, no hashing
                    phone_num TEXT,
                    fav_items TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL DEFAULT 'Customer'
                );
                CREATE TABLE IF NOT EXISTS menu (
                    item_name TEXT PRIMARY KEY,
                    type TEXT NOT NULL,
                    price REAL NOT NULL,
                    description TEXT,
                    image_url TEXT
                );
                CREATE TABLE IF NOT EXISTS orders (
                    order_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    login TEXT NOT NULL,
                    paid INTEGER NOT NULL DEFAULT 0,
                    received_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    total REAL NOT NULL,
                    FOREIGN KEY(login) REFERENCES users(login) ON UPDATE CASCADE
                );
                CREATE TABLE IF NOT EXISTS item_status (
                    order_id INTEGER NOT NULL,
                    item_name TEXT NOT NULL,
                    last_updated TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    status TEXT NOT NULL,
                    comments TEXT,
                    FOREIGN KEY(order_id) REFERENCES orders(order_id),
                    FOREIGN KEY(item_name) REFERENCES menu(item_name)
                );
                CREATE TRIGGER IF NOT EXISTS trg_menu_price_insert
                BEFORE INSERT ON menu
                WHEN NEW.price <= 0
                BEGIN
                    SELECT RAISE(ABORT, 'price must be positive');
                END;
                CREATE TRIGGER IF NOT EXISTS trg_orders_paid_final
                BEFORE UPDATE OF paid ON orders
                WHEN OLD.paid = 1 AND NEW.paid = 0
                BEGIN
                    SELECT RAISE(ABORT, 'paid orders cannot be reopened');
                END;
                """
            )

    def _seed_menu(self):
        """seed the default menu once"""
        items = [
            ("Coffee", "Drinks", 2.50, "drip coffee, bottomless refills"),
            ("Latte", "Drinks", 3.75, "espresso with steamed milk"),
            ("Hot Chocolate", "Drinks", 3.00, "with whipped cream"),
            ("Bagel", "Bakery", 1.75, "plain, toasted on request"),
            ("Croissant", "Bakery", 2.25, "butter croissant"),
            ("Brownie", "Sweets", 2.00, "chocolate fudge brownie"),
            ("Cheesecake", "Sweets", 4.50, "new york style slice"),
            ("Tomato Soup", "Soup", 4.00, "cup of tomato basil soup"),
            ("Clam Chowder", "Soup", 5.25, "bread bowl clam chowder"),
        ]
        with translate_errors():
            self.conn.executemany(
                """--sql
                INSERT OR IGNORE INTO menu(item_name, type, price, description) VALUES(?, ?, ?, ?);
                """,
                items
            )

    def _seed_default_user(self):
        """create a default manager account if missing"""
        self.execute(
            """--sql
            INSERT OR IGNORE INTO users(login, password, phone_num, fav_items, type)
            VALUES (?, ?, ?, ?, ?);
            """,
            ("admin", "admin", "", "", Role.MANAGER.value)
        )

    def execute(self, sql: str, params: Sequence = ()) -> int:
        """run a command, return rows affected"""
        with translate_errors():
            return self.conn.execute(sql, params).rowcount

    def query(self, sql: str, params: Sequence = ()) -> list[sqlite3.Row]:
        """run a query, return rows addressable by column name"""
        with translate_errors():
            return self.conn.execute(sql, params).fetchall()

    def query_count(self, sql: str, params: Sequence = ()) -> int:
        """number of rows a query returns"""
        return len(self.query(sql, params))

    def query_scalar(self, sequence: str) -> int:
        """current value of an autoincrement sequence (-1 if never used)"""
        rows = self.query("SELECT seq FROM sqlite_sequence WHERE name=?;", (sequence,))
        return rows[0]["seq"] if rows else -1

    def close(self):
        self.conn.close()

# domain models
class Role(Enum):
    """authority level stored in users.type"""
    CUSTOMER = "Customer"
    EMPLOYEE = "Employee"
    MANAGER = "Manager"

    @classmethod
    def from_stored(cls, value: str) -> "Role":
        # exact match only; unrecognised strings get customer authority
        try:
            return cls(value)
        except ValueError:
            return cls.CUSTOMER

    @property
    def is_staff(self) -> bool:
        return self in (Role.EMPLOYEE, Role.MANAGER)

    @property
    def rank(self) -> int:
        return list(Role).index(self)

class ProfileField(Enum):
    """editable account fields, numbered as offered on the console"""
    LOGIN = 1
    PASSWORD = 2
    PHONE = 3
    ROLE = 4

PROFILE_COLUMNS = {
    ProfileField.LOGIN: "login",
    ProfileField.PASSWORD: "password",
    ProfileField.PHONE: "phone_num",
    ProfileField.ROLE: "type",
}

@dataclass
class Account:
    """registered user (password never leaves the store)"""
    login: str
    phone: str
    fav_items: str
    role: Role

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Account":
        return cls(row["login"], row["phone_num"] or "", row["fav_items"] or "", Role.from_stored(row["type"]))

    def display(self) -> dict:
        return {"login": self.login, "phone": self.phone or "-", "role": self.role.value,
                "favorites": self.fav_items or "-"}

@dataclass
class MenuItem:
    """catalog entry"""
    name: str
    category: str
    price: float
    description: str = ""

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "MenuItem":
        return cls(row["item_name"], row["type"], row["price"], row["description"] or "")

    def display(self) -> dict:
        return {"item": self.name, "type": self.category, "price": f"${self.price:.2f}",
                "description": self.description}

@dataclass
class Order:
    """order row"""
    order_id: int
    login: str
    paid: bool
    received_at: str
    total: float

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Order":
        return cls(row["order_id"], row["login"], bool(row["paid"]), row["received_at"], row["total"])

    def display(self) -> dict:
        return {"order id": self.order_id, "login": self.login, "paid": "yes" if self.paid else "no",
                "received": self.received_at, "total": f"${self.total:.2f}"}

@dataclass
class OrderLine:
    """one item instance on an order"""
    order_id: int
    item_name: str
    last_updated: str
    status: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "OrderLine":
        return cls(row["order_id"], row["item_name"], row["last_updated"], row["status"])

    def display(self) -> dict:
        return {"item": self.item_name, "status": self.status, "last updated": self.last_updated}

@dataclass
class Session:
    """per-console context: store handle, console boundary and who is logged in"""
    db: DatabaseManager
    console: Console
    login: str | None = None

# catalog
class MenuCatalog:
    """read-only menu lookups"""
    def __init__(self, session: Session):
        self.session = session
        self.db = session.db

    def list_all(self) -> list[MenuItem]:
        rows = self.db.query("SELECT item_name, type, price, description FROM menu ORDER BY type, item_name;")
        return [MenuItem.from_row(r) for r in rows]

    def find(self, text: str) -> list[MenuItem]:
        """items whose category or name equals text"""
        rows = self.db.query(
            "SELECT item_name, type, price, description FROM menu WHERE type=? OR item_name=? ORDER BY item_name;",
            (text, text)
        )
        return [MenuItem.from_row(r) for r in rows]

    def exists(self, name: str) -> bool:
        return self.db.query_count("SELECT 1 FROM menu WHERE item_name=?;", (name,)) > 0

    def price_of(self, name: str) -> float:
        rows = self.db.query("SELECT price FROM menu WHERE item_name=?;", (name,))
        if not rows:
            raise NotFound(f"'{name}' is not on the menu")
        return rows[0]["price"]

    def show_menu(self):
        """print the whole menu grouped by type"""
        console = self.session.console
        items = self.list_all()
        if not items:
            console.error("menu empty"); return
        current_type = None
        for item in items:
            if item.category != current_type:
                current_type = item.category
                console.say(f"\n{current_type}:", "green", attrs=["bold"])
            console.say(f"{item.name}: ${item.price:.2f}", "green")

    def search_prompt(self, text: str | None = None):
        """look up items by type (drinks, sweets, soup...) or by exact name"""
        console = self.session.console
        if text is None:
            text = console.ask("enter item type (Drinks, Bakery, Sweets or Soup) or name: ")
        items = self.find(text)
        if not items:
            console.say("no items found", "yellow"); return
        console.table([i.display() for i in items])

# accounts/auth
class AccountManager:
    """registration, credential checks and session role resolution"""
    def __init__(self, session: Session):
        self.session = session
        self.db = session.db

    def register(self, login: str, password: str, phone: str) -> Account:
        """insert a new customer account"""
        if not login:
            raise InvalidInput("login cannot be blank")
        try:
            self.db.execute(
                "INSERT INTO users(login, password, phone_num, fav_items, type) VALUES(?, ?, ?, ?, ?);",
                (login, password, phone, "", Role.CUSTOMER.value)
            )
        except ConstraintViolation as e:
            raise DuplicateLogin(f"login '{login}' is already taken") from e
        return self.get_account(login)

    def authenticate(self, login: str, password: str) -> Account:
        """exact login + password match"""
        rows = self.db.query(
            "SELECT login, phone_num, fav_items, type FROM users WHERE login=? AND password=?;",
            (login, password)
        )
        if not rows:
            raise Unauthenticated("invalid login or password")
        return Account.from_row(rows[0])

    def get_account(self, login: str) -> Account:
        rows = self.db.query("SELECT login, phone_num, fav_items, type FROM users WHERE login=?;", (login,))
        if not rows:
            raise NotFound(f"no users found with login '{login}'")
        return Account.from_row(rows[0])

    def resolve_role(self, login: str) -> Role:
        rows = self.db.query("SELECT type FROM users WHERE login=?;", (login,))
        if not rows:
            raise NotFound(f"no users found with login '{login}'")
        return Role.from_stored(rows[0]["type"])

    def current_role(self) -> Role:
        """role of the logged in account; drops the session if the account vanished"""
        if self.session.login is None:
            raise Unauthenticated("please login first")
        try:
            return self.resolve_role(self.session.login)
        except NotFound:
            self.session.login = None
            raise Unauthenticated("your account no longer exists, please login again") from None

    def _start_session(self, account: Account):
        self.session.login = account.login
        prefix = f"{account.role.value.lower()}: " if account.role.is_staff else ""
        self.session.console.say(f"logged in as {prefix}{colored(account.login, 'yellow', attrs=['bold'])}", "green")

    def login_prompt(self, username: str | None = None, password: str | None = None):
        """interactive login (or non-interactive if args provided)"""
        console = self.session.console
        if self.session.login is not None:
            console.say("already logged in", "yellow")
            if not parse_boolean_input(console.ask("log out first? (y/N): ", None)):
                return
            self.logout()
        if username and password:
            self._start_session(self.authenticate(username, password))
            return
        while True:
            user = console.ask("login (blank to cancel): ")
            if not user:
                raise Unauthenticated("login cancelled")
            pwd = console.ask("password: ")
            try:
                account = self.authenticate(user, pwd)
            except Unauthenticated as e:
                console.error(str(e))
                continue
            self._start_session(account)
            return

    def logout(self):
        """log out current user"""
        console = self.session.console
        if self.session.login is None:
            console.error("no user logged in"); return
        console.say(f"logged out {self.session.login}", "green")
        self.session.login = None

    def register_prompt(self, login: str | None = None, password: str | None = None, phone: str | None = None):
        """create a new customer account"""
        console = self.session.console
        if login is None:
            login = console.ask("choose a login: ")
        if password is None:
            password = console.ask("choose a password: ")
        if phone is None:
            phone = console.ask("phone number: ")
        self.register(login, password, phone)
        console.say("user successfully created!", "green")

    def register_or_login(self):
        """prompt visitor to pick register / login"""
        console = self.session.console
        ans = console.ask(f"would you like to ({colored('r', 'light_blue')})egister or ({colored('l', 'light_blue')})ogin?: ", None).lower()
        if ans == "r":
            self.register_prompt()
            self.login_prompt()
        elif ans == "l":
            self.login_prompt()
        else:
            console.error("invalid option")

    def whoami(self):
        """print current user identity"""
        console = self.session.console
        if self.session.login is None:
            console.error("no user currently logged in"); return
        account = self.get_account(self.session.login)
        prefix = f"{account.role.value.lower()}: " if account.role.is_staff else ""
        console.say(f"you are logged in as {prefix}{colored(account.login, 'yellow', attrs=['bold'])}", "green")

# profiles
class ProfileManager:
    """one-field account edits; managers may edit other accounts first"""
    def __init__(self, session: Session, accounts: AccountManager):
        self.session = session
        self.db = session.db
        self.accounts = accounts

    def update_field(self, target: str, field: ProfileField, value: str) -> Account:
        """overwrite one field of the target account (last write wins)"""
        if field is ProfileField.ROLE:
            try:
                value = Role(value).value
            except ValueError:
                raise InvalidInput(f"role must be one of: {', '.join(r.value for r in Role)}") from None
        if field is ProfileField.LOGIN and not value:
            raise InvalidInput("login cannot be blank")
        try:
            changed = self.db.execute(
                f"UPDATE users SET {PROFILE_COLUMNS[field]}=? WHERE login=?;",
                (value, target)
            )
        except ConstraintViolation as e:
            raise DuplicateLogin(f"login '{value}' is already taken") from e
        if not changed:
            raise NotFound(f"no users found with login '{target}'")
        if field is ProfileField.LOGIN:
            if self.session.login == target:
                self.session.login = value
            target = value
        return self.accounts.get_account(target)

    def _edit_field_prompt(self, target: str):
        console = self.session.console
        console.say(f"editing {target}, which field would you like to edit?")
        for field in ProfileField:
            console.say(f"{field.value}. {field.name.lower()}")
        try:
            field = ProfileField(console.read_choice())
        except ValueError:
            raise InvalidInput("unrecognized choice!") from None
        value = console.ask(f"new {field.name.lower()}: ")
        account = self.update_field(target, field, value)
        console.say(f"{field.name.lower()} changed! updated information as follows:", "green")
        console.table([account.display()])

    def edit_profile_prompt(self):
        """manager edits a target account, then everyone edits their own"""
        console = self.session.console
        if self.accounts.current_role() is Role.MANAGER:
            target = console.ask("enter login of user to modify: ")
            account = self.accounts.get_account(target)
            console.table([account.display()])
            self._edit_field_prompt(target)
        self._edit_field_prompt(self.session.login)

# order management
class PlacementState(Enum):
    """place-order state machine"""
    OPEN = "open"
    ACCUMULATING = "accumulating"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

class OrderPlacement:
    """a single pass through placing an order

    the running total lives here only and is written to the order once,
    on finalize. lines already inserted stay if a later step fails.
    """
    def __init__(self, orders: "OrderManager", owner: str):
        self.orders = orders
        self.owner = owner
        self.state = PlacementState.OPEN
        self.order_id: int | None = None
        self.total = 0.0
        self.items: list[str] = []

    def _require(self, state: PlacementState):
        if self.state is not state:
            raise RuntimeError(f"order placement is {self.state.value}, expected {state.value}")

    @contextmanager
    def _abandon_on_failure(self):
        try:
            yield
        except StorageFailure:
            self.state = PlacementState.ABANDONED
            raise

    def open(self) -> int:
        self._require(PlacementState.OPEN)
        with self._abandon_on_failure():
            self.order_id = self.orders.open_order(self.owner)
        self.state = PlacementState.ACCUMULATING
        return self.order_id

    def accumulate(self, item_name: str) -> bool:
        """attach one item; false once the sentinel ends accumulation"""
        self._require(PlacementState.ACCUMULATING)
        if item_name == ITEM_SENTINEL:
            self.state = PlacementState.FINALIZING
            return False
        with self._abandon_on_failure():
            price = self.orders.add_line(self.order_id, item_name)
        self.total += price
        self.items.append(item_name)
        return True

    def finalize(self) -> Order:
        if self.state is PlacementState.ACCUMULATING:
            self.state = PlacementState.FINALIZING
        self._require(PlacementState.FINALIZING)
        with self._abandon_on_failure():
            self.orders.finalize_total(self.order_id, self.total)
            order = self.orders.get_order(self.order_id)
        self.state = PlacementState.COMPLETED
        return order

class OrderManager:
    """place, settle, mutate and list orders"""
    def __init__(self, session: Session, accounts: AccountManager, catalog: MenuCatalog):
        self.session = session
        self.db = session.db
        self.accounts = accounts
        self.catalog = catalog

    # order db ops
    def open_order(self, owner: str) -> int:
        """insert an unpaid placeholder order and look its id back up"""
        self.db.execute(
            "INSERT INTO orders(login, paid, total) VALUES(?, 0, ?);",
            (owner, PLACEHOLDER_TOTAL)
        )
        # not atomic with the insert: another placeholder order for the same owner can win
        rows = self.db.query(
            "SELECT order_id FROM orders WHERE login=? AND paid=0 AND total=? ORDER BY order_id DESC LIMIT 1;",
            (owner, PLACEHOLDER_TOTAL)
        )
        if not rows:
            raise StorageFailure("newly placed order could not be found")
        return rows[0]["order_id"]

    def add_line(self, order_id: int, item_name: str) -> float:
        """attach one started item to the order, return its price"""
        price = self.catalog.price_of(item_name)
        self.db.execute(
            "INSERT INTO item_status(order_id, item_name, status) VALUES(?, ?, ?);",
            (order_id, item_name, LINE_STATUS_STARTED)
        )
        return price

    def finalize_total(self, order_id: int, total: float):
        self.db.execute("UPDATE orders SET total=? WHERE order_id=?;", (round(total, 2), order_id))

    def get_order(self, order_id: int, owner: str | None = None) -> Order:
        """order by id, optionally only if it belongs to owner"""
        rows = self.db.query("SELECT * FROM orders WHERE order_id=?;", (order_id,))
        if not rows or (owner is not None and rows[0]["login"] != owner):
            raise NotFound(f"order #{order_id} not found")
        return Order.from_row(rows[0])

    def orders_for(self, login: str) -> list[Order]:
        rows = self.db.query("SELECT * FROM orders WHERE login=? ORDER BY order_id;", (login,))
        return [Order.from_row(r) for r in rows]

    def lines_for(self, order_id: int) -> list[OrderLine]:
        rows = self.db.query("SELECT * FROM item_status WHERE order_id=? ORDER BY rowid;", (order_id,))
        return [OrderLine.from_row(r) for r in rows]

    def adjust_total(self, order_id: int, delta: float) -> float:
        """stored total plus one item price (no re-summing of lines)"""
        # read then write: a concurrent adjustment in between is lost
        rows = self.db.query("SELECT total FROM orders WHERE order_id=?;", (order_id,))
        if not rows:
            raise NotFound(f"order #{order_id} not found")
        total = round(rows[0]["total"] + delta, 2)
        self.db.execute("UPDATE orders SET total=? WHERE order_id=?;", (total, order_id))
        return total

    def _require_unpaid(self, order_id: int) -> Order:
        order = self.get_order(order_id)
        if order.paid:
            raise OrderSettled(f"order #{order_id} has been paid, changes cannot be made")
        return order

    # workflow
    def place_order(self, owner: str, items: Iterable[str]) -> Order:
        """non-interactive placement; stops early at the sentinel"""
        placement = OrderPlacement(self, owner)
        placement.open()
        for name in items:
            if not placement.accumulate(name):
                break
        return placement.finalize()

    # mutation
    def settle(self, order_id: int, owner: str | None = None) -> Order:
        """mark paid and touch every line's last_updated"""
        if self.get_order(order_id, owner).paid:
            raise OrderSettled(f"order #{order_id} has already been paid")
        self.db.execute("UPDATE orders SET paid=1 WHERE order_id=?;", (order_id,))
        self.db.execute("UPDATE item_status SET last_updated=CURRENT_TIMESTAMP WHERE order_id=?;", (order_id,))
        return self.get_order(order_id)

    def add_item(self, order_id: int, item_name: str) -> float:
        self._require_unpaid(order_id)
        price = self.add_line(order_id, item_name)
        return self.adjust_total(order_id, price)

    def remove_item(self, order_id: int, item_name: str) -> float:
        """drop one instance of the item from an unpaid order"""
        self._require_unpaid(order_id)
        removed = self.db.execute(
            """--sql
            DELETE FROM item_status
            WHERE rowid IN (
                SELECT rowid FROM item_status
                WHERE order_id=? AND item_name=?
                LIMIT 1
            );
            """,
            (order_id, item_name)
        )
        if not removed:
            raise LineNotFound(f"'{item_name}' is not on order #{order_id}")
        return self.adjust_total(order_id, -self.catalog.price_of(item_name))

    # history
    def history(self, login: str, role: Role) -> list[Order]:
        """staff: unpaid orders from the last day; customers: their latest few"""
        if role.is_staff:
            rows = self.db.query(
                """--sql
                SELECT * FROM orders
                WHERE paid=0 AND received_at >= datetime('now', ?)
                ORDER BY received_at DESC, order_id DESC;
                """,
                (HISTORY_WINDOW,)
            )
        else:
            rows = self.db.query(
                "SELECT * FROM orders WHERE login=? ORDER BY received_at DESC, order_id DESC LIMIT ?;",
                (login, HISTORY_LIMIT)
            )
        return [Order.from_row(r) for r in rows]

    # console flows
    def print_order(self, order: Order):
        """print single order summary"""
        console = self.session.console
        console.say(f"order #{order.order_id} ({order.login}):", "green")
        lines = self.lines_for(order.order_id)
        console.say("\titems: " + (", ".join(l.item_name for l in lines) or "none"))
        console.say(f"\treceived: {order.received_at}")
        console.say(f"\ttotal: {color_money(order.total)}")
        console.say(f"\tpaid: {'yes' if order.paid else 'no'}")

    def _list_orders(self, login: str) -> list[Order]:
        orders = self.orders_for(login)
        if not orders:
            self.session.console.error("no orders found")
        else:
            self.session.console.table([o.display() for o in orders])
        return orders

    def _ask_order_id(self, prompt: str) -> int:
        order_id = safe_int(self.session.console.ask(prompt), minimum=1)
        if order_id is None:
            raise InvalidInput("invalid order id")
        return order_id

    def place_order_prompt(self):
        """read item names until the sentinel, then finalize"""
        console = self.session.console
        self.catalog.show_menu()
        console.say(f"\nwhat would you like to order? (enter '{ITEM_SENTINEL}' to complete order)")
        placement = OrderPlacement(self, self.session.login)
        placement.open()
        while placement.state is PlacementState.ACCUMULATING:
            name = console.ask("item: ")
            try:
                if placement.accumulate(name):
                    console.say(f"added {name}, running total {color_money(placement.total)}", "green")
            except NotFound:
                console.error("item by that name does not exist in the menu, please try again")
        order = placement.finalize()
        console.say(f"order has been placed with order id {order.order_id}", "green")
        self.print_order(order)

    def settle_prompt(self):
        """staff: mark one of a customer's orders paid"""
        console = self.session.console
        target = console.ask("enter login of user of order to update: ")
        if not self._list_orders(target):
            return
        order_id = self._ask_order_id("enter order id of order to change to paid: ")
        order = self.settle(order_id, owner=target)
        console.say("updated paid order status", "green")
        self.print_order(order)

    def update_order_prompt(self):
        """staff settle; customers add/remove items on their unpaid orders"""
        if self.accounts.current_role().is_staff:
            return self.settle_prompt()
        console = self.session.console
        login = self.session.login
        if not self._list_orders(login):
            return
        order_id = self._ask_order_id("enter order id of order to update: ")
        order = self.get_order(order_id, owner=login)
        if order.paid:
            self.print_order(order)
            raise OrderSettled(f"order #{order_id} has been paid, changes cannot be made")
        console.table([l.display() for l in self.lines_for(order_id)])
        choice = console.read_choice("remove or add items? (0 for remove, 1 for add): ")
        if choice == 0:
            name = console.ask("item to remove: ")
            total = self.remove_item(order_id, name)
            console.say(f"removed {name} from order #{order_id}", "green")
        elif choice == 1:
            name = console.ask("item to add: ")
            total = self.add_item(order_id, name)
            console.say(f"added {name} to order #{order_id}", "green")
        else:
            raise InvalidInput("unrecognized choice!")
        console.say(f"new order total: {color_money(total)}")

    def history_prompt(self):
        console = self.session.console
        role = self.accounts.current_role()
        orders = self.history(self.session.login, role)
        if not orders:
            console.say("no orders found", "yellow"); return
        if role.is_staff:
            console.say("unpaid orders from the last 24 hours", "green", attrs=["bold"])
        else:
            console.say(f"your {HISTORY_LIMIT} most recent orders", "green", attrs=["bold"])
        console.table([o.display() for o in orders])

# command infrastructure
class Command:
    """bind a command name to a function"""
    def __init__(self, name: str, function: Callable, description: str,
                 privilege_level: Role | None = Role.CUSTOMER):
        self.name = name
        self._fn = function
        self.description = description
        self.privilege_level = privilege_level

    def execute(self, tokens: list[str]):
        """validate arg count and invoke function"""
        params = list(inspect.signature(self._fn).parameters.values())
        required = sum(
            p.default is inspect.Parameter.empty and p.kind in (
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                inspect.Parameter.POSITIONAL_ONLY
            )
            for p in params
        )
        if not (required <= len(tokens) <= len(params)):
            raise InvalidInput(f"invalid args for '{self.name}' (expected {required}-{len(params)}, got {len(tokens)})")
        return self._fn(*tokens)

class CommandParser:
    """simple repl parser"""
    def __init__(self, session: Session, accounts: AccountManager):
        self.session = session
        self.accounts = accounts
        self.commands: list[Command] = [
            Command("help", self.show_help, "show this help", None),
            Command("h", self.show_help, "alias help", None),
            Command("quit", self.quit, "exit program", None),
            Command("exit", self.quit, "alias quit", None),
        ]

    def _match(self, tokens: list[str]) -> Command | None:
        # longest command name wins ("menu search" before "menu")
        for cmd in sorted(self.commands, key=lambda c: len(c.name.split()), reverse=True):
            parts = cmd.name.split()
            if tokens[:len(parts)] == parts:
                return cmd
        return None

    def _authorize(self, cmd: Command):
        if cmd.privilege_level is None:
            return
        if self.session.login is None:
            self.session.console.say("please login/register first", "yellow")
            self.accounts.register_or_login()
        if self.session.login is None:
            raise Unauthenticated("authentication required")
        if self.accounts.current_role().rank < cmd.privilege_level.rank:
            raise NotAuthorized("insufficient privileges")

    def parse_and_execute(self, input_str: str):
        """parse the raw input string and attempt to execute a command"""
        console = self.session.console
        tokens = input_str.strip().split()
        if not tokens:
            return
        cmd = self._match(tokens)
        if cmd is None:
            console.error("unknown command. type 'help'"); return
        try:
            self._authorize(cmd)
            return cmd.execute(tokens[len(cmd.name.split()):])
        except StorageFailure as e:
            console.error(f"storage failure: {e}")
        except CafeError as e:
            console.error(str(e))

    def show_help(self):
        """display help with all available command names and descriptions"""
        console = self.session.console
        role = None
        if self.session.login is not None:
            role = self.accounts.resolve_role(self.session.login)
        console.say("available commands:", "green", attrs=["bold"])
        width = max(len(c.name) for c in self.commands)
        for cmd in self.commands:
            if (cmd.privilege_level is not None and cmd.privilege_level.is_staff
                    and (role is None or role.rank < cmd.privilege_level.rank)):
                continue
            params = " ".join(
                f"<{p}>" if prm.default is inspect.Parameter.empty else f"[{p}]"
                for p, prm in inspect.signature(cmd._fn).parameters.items()
            )
            line = f"{colored(cmd.name, 'blue')} {colored(params, 'cyan')}".strip()
            console.say(f"{line.ljust(width + 25)} - {cmd.description}")

    def quit(self):
        """interactive quit confirmation"""
        console = self.session.console
        if parse_boolean_input(console.ask("are you sure you want to quit? (y/N): ", "yellow")):
            console.say("okay, see ya!", "green")
            sys.exit(0)
        console.say("continuing...", "green")

    def start_repl(self):
        """main repl loop"""
        console = self.session.console
        while True:
            try:
                user_input = console.ask("\n> ", "blue")
                if user_input:
                    self.parse_and_execute(user_input)
            except EOFError:
                console.say()
                break

# application wiring
class Application:
    """wire managers + commands for one session"""
    def __init__(self, session: Session):
        self.session = session
        self.accounts = AccountManager(session)
        self.catalog = MenuCatalog(session)
        self.orders = OrderManager(session, self.accounts, self.catalog)
        self.profiles = ProfileManager(session, self.accounts)
        self.parser = CommandParser(session, self.accounts)

        # visitor commands
        self.parser.commands += [
            Command("menu", self.catalog.show_menu, "show menu", None),
            Command("menu search", self.catalog.search_prompt, "find items by type or name", None),
            Command("account register", self.accounts.register_prompt, "register", None),
            Command("account login", self.accounts.login_prompt, "login", None),
            Command("account logout", self.accounts.logout, "logout", None),
            Command("account whoami", self.accounts.whoami, "current user", None),
        ]

        # logged in commands
        self.parser.commands += [
            Command("profile edit", self.profiles.edit_profile_prompt, "edit account details"),
            Command("order place", self.orders.place_order_prompt, "place an order"),
            Command("order update", self.orders.update_order_prompt, "add/remove items, or settle (staff)"),
            Command("order history", self.orders.history_prompt, "recent orders"),
            Command("order settle", self.orders.settle_prompt, "mark an order paid", Role.EMPLOYEE),
        ]

    def run(self, *args: str):
        """print banner, run any command given on the command line, then start repl"""
        console = self.session.console
        console.say("""
welcome to the cafe counter ☕
order, track and settle from one console
    """, "green", attrs=["bold"])
        console.say("""for more information, type 'help' or 'h' at any time.
to exit the program, type 'quit' or 'exit'.""")
        if args:
            self.parser.parse_and_execute(" ".join(args))
        self.parser.start_repl()

# signal handler
class SignalHandler:
    """custom ctrl+c handler to nag user politely"""
    @staticmethod
    def sigint(_, __):
        """handle ctrl+c"""
        cprint("\nnext time, use quit!", "yellow")
        sys.exit(0)

# entry point
def main():
    """entrypoint wrapper"""
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    try:
        db = DatabaseManager()
    except StorageFailure as e:
        cprint(f"error - unable to connect to database: {e}", "red")
        sys.exit(1)
    atexit.register(db.close)
    Application(Session(db, Console())).run(*sys.argv[1:])

if __name__ == "__main__":
    main()
