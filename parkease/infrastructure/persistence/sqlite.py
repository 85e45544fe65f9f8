import json
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from ...domain.errors import EmailAlreadyRegistered
from ...domain.models import (
    Booking,
    BookingStatus,
    ContentPage,
    Location,
    LocationStatus,
    PageStatus,
    PaymentMethod,
    Role,
    StoredToken,
    TokenPurpose,
    User,
    Vehicle,
)
from ...domain.models.booking import CANCELLABLE_STATUSES, OCCUPYING_STATUSES
from ...domain.ports.persistence import PersistenceGateway


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT,
                    first_name TEXT NOT NULL DEFAULT '',
                    last_name TEXT NOT NULL DEFAULT '',
                    phone TEXT,
                    avatar TEXT,
                    role TEXT NOT NULL DEFAULT 'CUSTOMER',
                    email_verified INTEGER NOT NULL DEFAULT 0,
                    is_guest INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS auth_tokens (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    purpose TEXT NOT NULL,
                    token_hash TEXT NOT NULL UNIQUE,
                    expires_at TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE(user_id, purpose),
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS vehicles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    make TEXT NOT NULL,
                    model TEXT NOT NULL,
                    year INTEGER,
                    color TEXT,
                    license_plate TEXT NOT NULL,
                    state TEXT,
                    is_default INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_vehicles_user_id ON vehicles(user_id);

                CREATE TABLE IF NOT EXISTS payment_methods (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    brand TEXT NOT NULL,
                    last4 TEXT NOT NULL,
                    expiry_month INTEGER NOT NULL,
                    expiry_year INTEGER NOT NULL,
                    cardholder_name TEXT,
                    is_default INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_payment_methods_user_id ON payment_methods(user_id);

                CREATE TABLE IF NOT EXISTS bookings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    location_name TEXT NOT NULL,
                    location_address TEXT,
                    check_in TEXT NOT NULL,
                    check_out TEXT NOT NULL,
                    status TEXT NOT NULL,
                    total_price REAL NOT NULL,
                    confirmation_code TEXT NOT NULL UNIQUE,
                    vehicle_plate TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_bookings_user_check_in
                    ON bookings(user_id, check_in DESC);

                CREATE TABLE IF NOT EXISTS locations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER,
                    name TEXT NOT NULL,
                    address TEXT NOT NULL,
                    city TEXT NOT NULL,
                    airport_code TEXT,
                    latitude REAL,
                    longitude REAL,
                    price_per_day REAL NOT NULL,
                    total_spots INTEGER NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    amenities TEXT NOT NULL DEFAULT '[]',
                    covered INTEGER NOT NULL DEFAULT 0,
                    shuttle INTEGER NOT NULL DEFAULT 0,
                    valet INTEGER NOT NULL DEFAULT 0,
                    description TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(owner_id) REFERENCES users(id) ON DELETE SET NULL
                );

                CREATE INDEX IF NOT EXISTS idx_locations_status_name ON locations(status, name);

                CREATE TABLE IF NOT EXISTS cms_pages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    slug TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    meta_title TEXT,
                    meta_description TEXT,
                    status TEXT NOT NULL DEFAULT 'draft',
                    published_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        with self._lock:
            cur = self._conn.execute("PRAGMA table_info(bookings)")
            columns = {row[1] for row in cur.fetchall()}
        with self._lock, self._conn:
            if "location_id" not in columns:
                self._conn.execute(
                    "ALTER TABLE bookings ADD COLUMN location_id INTEGER REFERENCES locations(id) ON DELETE SET NULL"
                )
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_bookings_location_id ON bookings(location_id, status)"
            )

    def close(self) -> None:
        self._conn.close()

    # UserRepository API ----------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email.lower(),))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def create_user(
        self,
        email: str,
        password_hash: Optional[str],
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        role: Role = Role.CUSTOMER,
        email_verified: bool = False,
        is_guest: bool = False,
    ) -> User:
        now = self._now()
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO users (
                        email, password_hash, first_name, last_name, phone,
                        role, email_verified, is_guest, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        email.lower(),
                        password_hash,
                        first_name,
                        last_name,
                        phone,
                        role.name,
                        int(email_verified),
                        int(is_guest),
                        now,
                        now,
                    ),
                )
                user_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            if "users.email" in str(exc):
                raise EmailAlreadyRegistered() from exc
            raise
        if not row:
            raise RuntimeError("Failed to persist user.")
        return self._row_to_user(row)

    def update_user_profile(
        self,
        user_id: int,
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Optional[User]:
        updates = []
        params: List[Any] = []
        if first_name is not None:
            updates.append("first_name = ?")
            params.append(first_name)
        if last_name is not None:
            updates.append("last_name = ?")
            params.append(last_name)
        if phone is not None:
            updates.append("phone = ?")
            params.append(phone)
        if avatar is not None:
            updates.append("avatar = ?")
            params.append(avatar)
        return self._update_user(user_id, updates, params)

    def update_user_password(self, user_id: int, password_hash: str) -> Optional[User]:
        return self._update_user(user_id, ["password_hash = ?"], [password_hash])

    def mark_email_verified(self, user_id: int) -> Optional[User]:
        return self._update_user(user_id, ["email_verified = 1"], [])

    def _update_user(self, user_id: int, updates: List[str], params: List[Any]) -> Optional[User]:
        with self._lock, self._conn:
            if updates:
                updates.append("updated_at = ?")
                params.append(self._now())
                params.append(user_id)
                statement = f"UPDATE users SET {', '.join(updates)} WHERE id = ?"
                self._conn.execute(statement, params)
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    # TokenRepository API ---------------------------------------------------
    def save_token(
        self,
        user_id: int,
        purpose: TokenPurpose,
        token_hash: str,
        expires_at: datetime,
    ) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT INTO auth_tokens (user_id, purpose, token_hash, expires_at, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, purpose) DO UPDATE SET
                    token_hash = excluded.token_hash,
                    expires_at = excluded.expires_at,
                    created_at = excluded.created_at
                """,
                (user_id, purpose.value, token_hash, self._format_datetime(expires_at), self._now()),
            )

    def consume_token(self, token_hash: str, purpose: TokenPurpose) -> Optional[StoredToken]:
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                DELETE FROM auth_tokens
                WHERE token_hash = ? AND purpose = ?
                RETURNING user_id, purpose, token_hash, expires_at
                """,
                (token_hash, purpose.value),
            )
            rows = cur.fetchall()
        if not rows:
            return None
        row = rows[0]
        return StoredToken(
            user_id=row["user_id"],
            purpose=TokenPurpose(row["purpose"]),
            token_hash=row["token_hash"],
            expires_at=self._parse_datetime(row["expires_at"]),
        )

    # VehicleRepository API -------------------------------------------------
    def list_vehicles(self, user_id: int) -> List[Vehicle]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM vehicles WHERE user_id = ? ORDER BY is_default DESC, created_at DESC, id DESC",
                (user_id,),
            )
            rows = cur.fetchall()
        return [self._row_to_vehicle(row) for row in rows]

    def get_vehicle(self, vehicle_id: int, user_id: int) -> Optional[Vehicle]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM vehicles WHERE id = ? AND user_id = ?",
                (vehicle_id, user_id),
            )
            row = cur.fetchone()
        return self._row_to_vehicle(row) if row else None

    def create_vehicle(
        self,
        user_id: int,
        make: str,
        model: str,
        license_plate: str,
        year: Optional[int] = None,
        color: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Vehicle:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO vehicles (
                    user_id, make, model, year, color, license_plate, state,
                    is_default, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (user_id, make, model, year, color, license_plate, state, now, now),
            )
            vehicle_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM vehicles WHERE id = ?", (vehicle_id,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist vehicle.")
        return self._row_to_vehicle(row)

    def update_vehicle(
        self,
        vehicle_id: int,
        user_id: int,
        *,
        make: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
        color: Optional[str] = None,
        license_plate: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Optional[Vehicle]:
        updates = []
        params: List[Any] = []
        for column, value in (
            ("make", make),
            ("model", model),
            ("year", year),
            ("color", color),
            ("license_plate", license_plate),
            ("state", state),
        ):
            if value is not None:
                updates.append(f"{column} = ?")
                params.append(value)

        if updates:
            updates.append("updated_at = ?")
            params.append(self._now())
            params.extend([vehicle_id, user_id])
            statement = f"UPDATE vehicles SET {', '.join(updates)} WHERE id = ? AND user_id = ?"
            with self._lock, self._conn:
                self._conn.execute(statement, params)
        return self.get_vehicle(vehicle_id, user_id)

    def delete_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        with self._lock, self._conn:
            cur = self._conn.execute(
                "DELETE FROM vehicles WHERE id = ? AND user_id = ?",
                (vehicle_id, user_id),
            )
            return cur.rowcount > 0

    def set_default_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        return self._set_default("vehicles", vehicle_id, user_id)

    # PaymentMethodRepository API -------------------------------------------
    def list_payment_methods(self, user_id: int) -> List[PaymentMethod]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM payment_methods WHERE user_id = ? ORDER BY is_default DESC, created_at DESC, id DESC",
                (user_id,),
            )
            rows = cur.fetchall()
        return [self._row_to_payment_method(row) for row in rows]

    def find_payment_method(
        self,
        user_id: int,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
    ) -> Optional[PaymentMethod]:
        with self._lock:
            cur = self._conn.execute(
                """
                SELECT * FROM payment_methods
                WHERE user_id = ? AND brand = ? AND last4 = ?
                    AND expiry_month = ? AND expiry_year = ?
                """,
                (user_id, brand, last4, expiry_month, expiry_year),
            )
            row = cur.fetchone()
        return self._row_to_payment_method(row) if row else None

    def get_payment_method(self, payment_method_id: int, user_id: int) -> Optional[PaymentMethod]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM payment_methods WHERE id = ? AND user_id = ?",
                (payment_method_id, user_id),
            )
            row = cur.fetchone()
        return self._row_to_payment_method(row) if row else None

    def create_payment_method(
        self,
        user_id: int,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
        cardholder_name: Optional[str] = None,
    ) -> PaymentMethod:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO payment_methods (
                    user_id, brand, last4, expiry_month, expiry_year,
                    cardholder_name, is_default, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (user_id, brand, last4, expiry_month, expiry_year, cardholder_name, now, now),
            )
            payment_method_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM payment_methods WHERE id = ?", (payment_method_id,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist payment method.")
        return self._row_to_payment_method(row)

    def delete_payment_method(self, payment_method_id: int, user_id: int) -> bool:
        with self._lock, self._conn:
            cur = self._conn.execute(
                "DELETE FROM payment_methods WHERE id = ? AND user_id = ?",
                (payment_method_id, user_id),
            )
            return cur.rowcount > 0

    def set_default_payment_method(self, payment_method_id: int, user_id: int) -> bool:
        return self._set_default("payment_methods", payment_method_id, user_id)

    # BookingRepository API -------------------------------------------------
    def list_bookings(self, user_id: int) -> List[Booking]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM bookings WHERE user_id = ? ORDER BY check_in DESC, id DESC",
                (user_id,),
            )
            rows = cur.fetchall()
        return [self._row_to_booking(row) for row in rows]

    def get_booking(self, booking_id: int, user_id: int) -> Optional[Booking]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM bookings WHERE id = ? AND user_id = ?",
                (booking_id, user_id),
            )
            row = cur.fetchone()
        return self._row_to_booking(row) if row else None

    def create_booking(
        self,
        user_id: int,
        location_name: str,
        check_in: datetime,
        check_out: datetime,
        total_price: float,
        confirmation_code: str,
        location_address: Optional[str] = None,
        vehicle_plate: Optional[str] = None,
        status: BookingStatus = BookingStatus.CONFIRMED,
        location_id: Optional[int] = None,
    ) -> Booking:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO bookings (
                    user_id, location_id, location_name, location_address, check_in, check_out,
                    status, total_price, confirmation_code, vehicle_plate,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    location_id,
                    location_name,
                    location_address,
                    self._format_datetime(check_in),
                    self._format_datetime(check_out),
                    status.value,
                    total_price,
                    confirmation_code,
                    vehicle_plate,
                    now,
                    now,
                ),
            )
            booking_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist booking.")
        return self._row_to_booking(row)

    def cancel_booking(self, booking_id: int, user_id: int) -> bool:
        placeholders = ", ".join("?" for _ in CANCELLABLE_STATUSES)
        with self._lock, self._conn:
            cur = self._conn.execute(
                f"""
                UPDATE bookings SET status = ?, updated_at = ?
                WHERE id = ? AND user_id = ? AND status IN ({placeholders})
                """,
                (
                    BookingStatus.CANCELLED.value,
                    self._now(),
                    booking_id,
                    user_id,
                    *(status.value for status in CANCELLABLE_STATUSES),
                ),
            )
            return cur.rowcount > 0

    # LocationRepository API ------------------------------------------------
    def list_locations(self, status: LocationStatus = LocationStatus.ACTIVE) -> List[Location]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM locations WHERE status = ? ORDER BY name, id",
                (status.value,),
            )
            rows = cur.fetchall()
        return [self._row_to_location(row) for row in rows]

    def get_location(self, location_id: int) -> Optional[Location]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM locations WHERE id = ?", (location_id,))
            row = cur.fetchone()
        return self._row_to_location(row) if row else None

    def search_locations(
        self,
        city: Optional[str] = None,
        airport_code: Optional[str] = None,
    ) -> List[Location]:
        filters = []
        params: List[Any] = [LocationStatus.ACTIVE.value]
        if city:
            filters.append("instr(lower(city), lower(?)) > 0")
            params.append(city)
        if airport_code:
            filters.append("upper(airport_code) = upper(?)")
            params.append(airport_code)
        statement = "SELECT * FROM locations WHERE status = ?"
        if filters:
            statement += f" AND ({' OR '.join(filters)})"
        statement += " ORDER BY name, id"
        with self._lock:
            cur = self._conn.execute(statement, params)
            rows = cur.fetchall()
        return [self._row_to_location(row) for row in rows]

    def count_overlapping_bookings(self, location_id: int, check_in: datetime, check_out: datetime) -> int:
        placeholders = ", ".join("?" for _ in OCCUPYING_STATUSES)
        with self._lock:
            cur = self._conn.execute(
                f"""
                SELECT check_in, check_out FROM bookings
                WHERE location_id = ? AND status IN ({placeholders})
                """,
                (location_id, *(status.value for status in OCCUPYING_STATUSES)),
            )
            rows = cur.fetchall()
        start = self._as_utc(check_in)
        end = self._as_utc(check_out)
        return sum(
            1
            for row in rows
            if self._parse_datetime(row["check_in"]) < end and self._parse_datetime(row["check_out"]) > start
        )

    def create_location(
        self,
        name: str,
        address: str,
        city: str,
        price_per_day: float,
        total_spots: int,
        airport_code: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        owner_id: Optional[int] = None,
        status: LocationStatus = LocationStatus.ACTIVE,
        amenities: Optional[List[str]] = None,
        covered: bool = False,
        shuttle: bool = False,
        valet: bool = False,
        description: Optional[str] = None,
    ) -> Location:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO locations (
                    owner_id, name, address, city, airport_code, latitude, longitude,
                    price_per_day, total_spots, status, amenities, covered, shuttle,
                    valet, description, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner_id,
                    name,
                    address,
                    city,
                    airport_code.upper() if airport_code else None,
                    latitude,
                    longitude,
                    price_per_day,
                    total_spots,
                    status.value,
                    json.dumps(amenities or []),
                    int(covered),
                    int(shuttle),
                    int(valet),
                    description,
                    now,
                    now,
                ),
            )
            location_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM locations WHERE id = ?", (location_id,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist location.")
        return self._row_to_location(row)

    # ContentRepository API -------------------------------------------------
    def get_page_by_slug(self, slug: str, status: PageStatus = PageStatus.PUBLISHED) -> Optional[ContentPage]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM cms_pages WHERE slug = ? AND status = ?",
                (slug, status.value),
            )
            row = cur.fetchone()
        return self._row_to_page(row) if row else None

    def create_page(
        self,
        slug: str,
        title: str,
        content: str,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
        status: PageStatus = PageStatus.DRAFT,
    ) -> ContentPage:
        now = self._now()
        published_at = now if status is PageStatus.PUBLISHED else None
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO cms_pages (
                        slug, title, content, meta_title, meta_description,
                        status, published_at, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (slug, title, content, meta_title, meta_description, status.value, published_at, now, now),
                )
                page_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM cms_pages WHERE id = ?", (page_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            raise ValueError("A page with this slug already exists.") from exc
        if not row:
            raise RuntimeError("Failed to persist page.")
        return self._row_to_page(row)

    # Helpers ----------------------------------------------------------------
    def _set_default(self, table: str, row_id: int, user_id: int) -> bool:
        # Single statement: flips the flag on every row of the owner, and
        # only when the target row belongs to that owner.
        with self._lock, self._conn:
            cur = self._conn.execute(
                f"""
                UPDATE {table}
                SET is_default = CASE WHEN id = ? THEN 1 ELSE 0 END, updated_at = ?
                WHERE user_id = ?
                    AND EXISTS (SELECT 1 FROM {table} WHERE id = ? AND user_id = ?)
                """,
                (row_id, self._now(), user_id, row_id, user_id),
            )
            return cur.rowcount > 0

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def _format_datetime(cls, value: datetime) -> str:
        return cls._as_utc(value).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        try:
            result = datetime.fromisoformat(value)
        except ValueError:
            # Fallback for legacy formats without 'T'
            result = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            phone=row["phone"],
            avatar=row["avatar"],
            role=Role.parse(row["role"]),
            email_verified=bool(row["email_verified"]),
            is_guest=bool(row["is_guest"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_vehicle(self, row: sqlite3.Row) -> Vehicle:
        return Vehicle(
            id=row["id"],
            user_id=row["user_id"],
            make=row["make"],
            model=row["model"],
            year=row["year"],
            color=row["color"],
            license_plate=row["license_plate"],
            state=row["state"],
            is_default=bool(row["is_default"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_payment_method(self, row: sqlite3.Row) -> PaymentMethod:
        return PaymentMethod(
            id=row["id"],
            user_id=row["user_id"],
            brand=row["brand"],
            last4=row["last4"],
            expiry_month=row["expiry_month"],
            expiry_year=row["expiry_year"],
            cardholder_name=row["cardholder_name"],
            is_default=bool(row["is_default"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_booking(self, row: sqlite3.Row) -> Booking:
        return Booking(
            id=row["id"],
            user_id=row["user_id"],
            location_id=row["location_id"],
            location_name=row["location_name"],
            location_address=row["location_address"],
            check_in=self._parse_datetime(row["check_in"]),
            check_out=self._parse_datetime(row["check_out"]),
            status=BookingStatus(row["status"]),
            total_price=row["total_price"],
            confirmation_code=row["confirmation_code"],
            vehicle_plate=row["vehicle_plate"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_location(self, row: sqlite3.Row) -> Location:
        return Location(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            address=row["address"],
            city=row["city"],
            airport_code=row["airport_code"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            price_per_day=row["price_per_day"],
            total_spots=row["total_spots"],
            status=LocationStatus(row["status"]),
            amenities=json.loads(row["amenities"] or "[]"),
            covered=bool(row["covered"]),
            shuttle=bool(row["shuttle"]),
            valet=bool(row["valet"]),
            description=row["description"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_page(self, row: sqlite3.Row) -> ContentPage:
        return ContentPage(
            id=row["id"],
            slug=row["slug"],
            title=row["title"],
            content=row["content"],
            meta_title=row["meta_title"],
            meta_description=row["meta_description"],
            status=PageStatus(row["status"]),
            published_at=self._parse_datetime(row["published_at"]) if row["published_at"] else None,
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
