"""ActiveRecord-style base Model class.

Provides object-relational mapping with ActiveRecord pattern:
- Class methods for creation and queries (create, find_by_id, find_by, where,
  all, list_by_foreign_key)
- Instance methods for persistence (save, update, delete)
- Guarded deletes (delete_by_id) that consult the referential integrity guard

Decimal columns go through data_normalization on the way in and out, so
attributes always hold exact Decimal values and the table holds exact text.
"""

import logging
import re
from typing import Any, Optional

from fundledger.data_normalization import (
    from_storage,
    normalize_timestamp,
    parse_timestamp,
    to_storage,
    utc_now,
)
from fundledger.database import Database, SQLiteIntegrityError
from fundledger.models.errors import (
    ActiveModelError,
    UniqueConstraintError,
    ValidationError,
)
from fundledger.models.integrity import DependentLookup, ensure_no_dependents

logger = logging.getLogger(__name__)

_UNIQUE_FAILURE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")

TIMESTAMP_FIELDS = ("created_at", "updated_at")


class ActiveModel:
    """Base class for ActiveRecord-style models.

    Subclasses must define:
    - table_name: Name of the database table
    - primary_key: Name of the INTEGER primary key column
    - entity_name: Display name used in messages (e.g. "Investor")

    Subclasses may define:
    - _allowed_fields: Every column name
    - _required_fields: Columns that must be present and non-empty
    - _decimal_fields: Column -> (precision, scale) for exact decimals
    - _date_fields: Business date columns stored as ISO-8601 text
    - _enum_fields: Column -> allowed values
    - _foreign_keys: Column -> (parent table, parent entity name)
    - _unique_fields: Columns unique across the table
    - _cascade_deletes: (table, foreign key) pairs removed with the record
    - _updatable: False for records with no update path
    """

    table_name: str
    primary_key: str
    entity_name: str

    _allowed_fields: set[str] = set()
    _required_fields: tuple[str, ...] = ()
    _decimal_fields: dict[str, tuple[int, int]] = {}
    _date_fields: tuple[str, ...] = ()
    _enum_fields: dict[str, tuple[str, ...]] = {}
    _foreign_keys: dict[str, tuple[str, str]] = {}
    _unique_fields: tuple[str, ...] = ()
    _cascade_deletes: tuple[tuple[str, str], ...] = ()
    _updatable: bool = True

    def __init__(self, database: Database, **kwargs):
        """Initialize model instance.

        Args:
            database: Database instance for connections
            **kwargs: Model attributes (column values)

        Raises:
            ValueError: If kwargs contain names that are not columns
        """
        # Validate required class attributes
        if not hasattr(self, "table_name"):
            raise AttributeError(
                f"{self.__class__.__name__} must define 'table_name' class attribute"
            )
        if not hasattr(self, "primary_key"):
            raise AttributeError(
                f"{self.__class__.__name__} must define 'primary_key' class attribute"
            )

        invalid_fields = set(kwargs.keys()) - self._allowed_fields
        if invalid_fields:
            raise ValueError(f"Invalid fields: {sorted(invalid_fields)}")

        self._database = database

        for field in self._allowed_fields:
            setattr(self, field, kwargs.get(field))

        # Initialize timestamps if not provided
        now = utc_now()
        if self.created_at is None:
            self.created_at = now
        if self.updated_at is None:
            self.updated_at = self.created_at

    @classmethod
    def kind(cls) -> str:
        """Lower-case entity name used in integrity messages."""
        return cls.entity_name.lower()

    def _get_attributes(self) -> dict[str, Any]:
        """Get all non-private attributes for database operations.

        Returns:
            Dictionary of column names and values (excluding _database)
        """
        attrs = {}
        for key, value in self.__dict__.items():
            if not key.startswith("_"):
                attrs[key] = value
        return attrs

    def to_dict(self) -> dict[str, Any]:
        """Column values keyed by column name, in a stable order."""
        attrs = self._get_attributes()
        ordered = [self.primary_key] + sorted(
            k for k in attrs if k not in (self.primary_key, *TIMESTAMP_FIELDS)
        )
        return {key: attrs[key] for key in [*ordered, *TIMESTAMP_FIELDS]}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _field_errors(self) -> list[str]:
        """Check and normalize declared fields.

        Decimal fields are quantized to their column scale and date fields
        parsed, so range checks in subclasses compare exact values.

        Returns:
            List of error messages (empty when all fields are valid)
        """
        errors = []

        current_fields = set(self._get_attributes().keys())
        invalid_fields = current_fields - self._allowed_fields
        if invalid_fields:
            errors.append(
                f"Invalid fields detected before save: {sorted(invalid_fields)}"
            )

        for field in self._required_fields:
            value = getattr(self, field, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"{field} is required")

        for field, allowed in self._enum_fields.items():
            value = getattr(self, field, None)
            if value is not None and value not in allowed:
                errors.append(
                    f"{field} must be one of {', '.join(allowed)}, got {value!r}"
                )

        for field, (precision, scale) in self._decimal_fields.items():
            value = getattr(self, field, None)
            if value is None:
                continue
            try:
                setattr(self, field, from_storage(to_storage(value, scale, precision)))
            except ValueError as e:
                errors.append(f"{field}: {e}")

        for field in self._date_fields:
            value = getattr(self, field, None)
            if value is None:
                continue
            try:
                setattr(self, field, parse_timestamp(normalize_timestamp(value)))
            except ValueError as e:
                errors.append(f"{field}: {e}")

        for field in self._foreign_keys:
            value = getattr(self, field, None)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int)
            ):
                errors.append(f"{field} must be an integer ID, got {value!r}")

        return errors

    @staticmethod
    def _raise_if_errors(errors: list[str]) -> None:
        if errors:
            raise ValidationError(f"Validation failed: {', '.join(errors)}")

    def validate(self) -> None:
        """Validate the record.

        Subclasses extend this with their business rules.

        Raises:
            ValidationError: If validation fails
        """
        self._raise_if_errors(self._field_errors())

    def _check_foreign_keys(self, conn) -> None:
        """Verify every foreign key references an existing parent row."""
        errors = []
        for field, (parent_table, parent_name) in self._foreign_keys.items():
            value = getattr(self, field, None)
            if value is None:
                continue
            row = conn.execute(
                f"SELECT 1 FROM {parent_table} WHERE id = ?", (value,)
            ).fetchone()
            if row is None:
                errors.append(f"{parent_name} with ID {value} not found")
        self._raise_if_errors(errors)

    def _check_unique(self, conn) -> None:
        """Reject values already used by another row in a unique column."""
        own_pk = getattr(self, self.primary_key, None)
        for field in self._unique_fields:
            value = getattr(self, field, None)
            rows = conn.execute(
                f"SELECT {self.primary_key} FROM {self.table_name} WHERE {field} = ?",
                (value,),
            ).fetchall()
            if any(row[0] != own_pk for row in rows):
                raise UniqueConstraintError(
                    f"{self.entity_name} with {field} {value!r} already exists",
                    column=field,
                )

    def _translate_integrity_error(self, error: SQLiteIntegrityError) -> Exception:
        """Map a storage constraint failure to a model error."""
        message = str(error)
        match = _UNIQUE_FAILURE.search(message)
        if match:
            field = match.group(1)
            return UniqueConstraintError(
                f"{self.entity_name} with {field} "
                f"{getattr(self, field, None)!r} already exists",
                column=field,
            )
        if "FOREIGN KEY constraint failed" in message:
            return ValidationError(
                f"Validation failed: {self.entity_name} references a missing parent"
            )
        if "CHECK constraint failed" in message:
            return ValidationError(f"Validation failed: {message}")
        return error

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _before_save(self) -> None:
        """Hook called before save operation.

        Raises:
            ValidationError: If validation fails
        """
        self.validate()

    def _to_row(self) -> dict[str, Any]:
        """Attributes converted to their storage representation."""
        attrs = self._get_attributes()
        for field, (precision, scale) in self._decimal_fields.items():
            if attrs.get(field) is not None:
                attrs[field] = to_storage(attrs[field], scale, precision)
        for field in self._date_fields:
            if attrs.get(field) is not None:
                attrs[field] = normalize_timestamp(attrs[field])
        return attrs

    @classmethod
    def _from_row(cls, database: Database, data: dict[str, Any]) -> "ActiveModel":
        """Build an instance from a stored row."""
        for field in cls._decimal_fields:
            if data.get(field) is not None:
                data[field] = from_storage(str(data[field]))
        for field in cls._date_fields:
            if data.get(field) is not None:
                data[field] = parse_timestamp(data[field])
        return cls(database, **data)

    def _save_to_database(self, conn, is_new: bool) -> None:
        """Perform the actual database INSERT or UPDATE.

        Args:
            conn: Database connection inside an open transaction
            is_new: True for INSERT, False for UPDATE

        Raises:
            SQLiteError: If database operation fails
            ActiveModelError: If the record to update no longer exists
        """
        cursor = conn.cursor()

        if is_new:
            # Timestamps are assigned once, at insert
            self.created_at = self.updated_at = utc_now()
            attrs = self._to_row()
            # INTEGER PRIMARY KEY auto-increments, exclude from INSERT
            attrs.pop(self.primary_key, None)

            columns = ", ".join(attrs.keys())
            placeholders = ", ".join("?" * len(attrs))
            query = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders})"
            cursor.execute(query, list(attrs.values()))

            setattr(self, self.primary_key, cursor.lastrowid)

        else:
            self.updated_at = max(utc_now(), self.created_at)
            attrs = self._to_row()

            # created_at is append-only
            update_cols = [
                col for col in attrs if col not in (self.primary_key, "created_at")
            ]
            set_clauses = ", ".join(f"{col} = ?" for col in update_cols)
            query = (
                f"UPDATE {self.table_name} SET {set_clauses} "
                f"WHERE {self.primary_key} = ?"
            )
            values = [attrs[col] for col in update_cols]
            values.append(getattr(self, self.primary_key))

            cursor.execute(query, values)
            if cursor.rowcount == 0:
                raise ActiveModelError(
                    f"{self.entity_name} with ID "
                    f"{getattr(self, self.primary_key)} no longer exists"
                )

    def _after_save(self) -> None:
        """Hook called after successful save operation."""
        pass

    def save(self) -> bool:
        """Save record (insert or update).

        Uses template method pattern with hooks:
        1. _before_save() - validation/normalization hook
        2. foreign key and uniqueness checks, inside the write transaction
        3. _save_to_database() - actual persistence
        4. _after_save() - post-save hook

        Returns:
            True on success

        Raises:
            ValidationError: If validation fails or a parent is missing
            UniqueConstraintError: If a unique column is already taken
            ActiveModelError: If the record has no update path
            SQLiteError: If database operation fails
        """
        is_new = getattr(self, self.primary_key, None) is None
        if not is_new and not self._updatable:
            raise ActiveModelError(
                f"{self.entity_name} records cannot be updated once created"
            )

        self._before_save()

        try:
            with self._database.transaction() as conn:
                self._check_foreign_keys(conn)
                self._check_unique(conn)
                self._save_to_database(conn, is_new)
        except SQLiteIntegrityError as e:
            translated = self._translate_integrity_error(e)
            if translated is e:
                raise
            raise translated from e

        self._after_save()
        return True

    @classmethod
    def create(cls, database: Database, **kwargs) -> "ActiveModel":
        """Validate and insert a new record.

        Args:
            database: Database instance
            **kwargs: Column values; the primary key and timestamps are
                assigned by the store

        Returns:
            The saved instance with id and timestamps populated

        Raises:
            ValidationError: If input is invalid or a parent is missing
            UniqueConstraintError: If a unique column is already taken
        """
        assigned = [
            field
            for field in (cls.primary_key, *TIMESTAMP_FIELDS)
            if kwargs.get(field) is not None
        ]
        if assigned:
            raise ValidationError(
                f"Validation failed: {', '.join(assigned)} assigned by the database"
            )
        record = cls(database, **kwargs)
        record.save()
        logger.info(
            f"Created {cls.entity_name} {getattr(record, cls.primary_key)}"
        )
        return record

    def update(self, **changes) -> "ActiveModel":
        """Apply a partial update and save.

        The in-memory record is restored if the save is rejected.

        Raises:
            ActiveModelError: If the model has no update path or is unsaved
            ValueError: If changes name unknown or read-only fields
            ValidationError: If the updated record is invalid
            UniqueConstraintError: If a unique column is already taken
        """
        if not self._updatable:
            raise ActiveModelError(
                f"{self.entity_name} records cannot be updated once created"
            )
        if getattr(self, self.primary_key, None) is None:
            raise ActiveModelError(
                f"Cannot update {self.entity_name} that has not been saved"
            )

        writable = self._allowed_fields - {self.primary_key, *TIMESTAMP_FIELDS}
        invalid_fields = set(changes) - writable
        if invalid_fields:
            raise ValueError(f"Invalid fields: {sorted(invalid_fields)}")

        snapshot = self._get_attributes()
        for key, value in changes.items():
            setattr(self, key, value)

        try:
            self.save()
        except Exception:
            for key, value in snapshot.items():
                setattr(self, key, value)
            raise

        return self

    @classmethod
    def update_by_id(
        cls, database: Database, pk_value: Any, **changes
    ) -> Optional["ActiveModel"]:
        """Partially update a record by primary key.

        Returns:
            The updated instance, or None if no record matches
        """
        record = cls.find_by_id(database, pk_value)
        if record is None:
            return None
        return record.update(**changes)

    def delete(self) -> bool:
        """Delete record from database.

        Returns:
            True on success, False if the record was already gone

        Raises:
            ValueError: If primary key is not set
            IntegrityViolationError: If dependents still reference the record
        """
        pk_value = getattr(self, self.primary_key, None)
        if pk_value is None:
            raise ValueError(
                f"Cannot delete {self.__class__.__name__} without {self.primary_key}"
            )
        return self.delete_by_id(self._database, pk_value)

    @classmethod
    def _dependent_lookups(cls) -> list[DependentLookup]:
        """Dependents that block deletion. Parents override this."""
        return []

    @classmethod
    def _before_delete(cls, conn, row: dict[str, Any]) -> None:
        """Hook called inside the delete transaction, after the guard passes.

        Args:
            conn: Connection inside the delete's transaction
            row: The stored row about to be deleted
        """
        pass

    @classmethod
    def delete_by_id(cls, database: Database, pk_value: Any) -> bool:
        """Delete a record by primary key, guarding its dependents.

        Existence check, dependent count, cascades and the delete itself run
        in one write transaction.

        Returns:
            True if the record was deleted, False if it did not exist

        Raises:
            IntegrityViolationError: If dependents still reference the record
            SQLiteError: If database operation fails
        """
        with database.transaction() as conn:
            rows = cls._select_rows(conn, _limit=1, **{cls.primary_key: pk_value})
            if not rows:
                logger.debug(f"{cls.entity_name} {pk_value} not found, nothing to delete")
                return False

            ensure_no_dependents(conn, cls.kind(), pk_value, cls._dependent_lookups())
            cls._before_delete(conn, rows[0])

            for table, foreign_key in cls._cascade_deletes:
                cursor = conn.execute(
                    f"DELETE FROM {table} WHERE {foreign_key} = ?", (pk_value,)
                )
                if cursor.rowcount:
                    logger.info(
                        f"Removed {cursor.rowcount} row(s) from {table} "
                        f"with {cls.entity_name} {pk_value}"
                    )

            conn.execute(
                f"DELETE FROM {cls.table_name} WHERE {cls.primary_key} = ?",
                (pk_value,),
            )

        logger.info(f"Deleted {cls.entity_name} {pk_value}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @classmethod
    def _select_rows(cls, conn, **kwargs) -> list[dict[str, Any]]:
        """Select raw rows matching equality criteria, in insertion order.

        Special: _limit parameter can be used to limit results
        """
        limit = kwargs.pop("_limit", None)

        unknown = set(kwargs) - cls._allowed_fields
        if unknown:
            raise ValueError(f"Invalid fields: {sorted(unknown)}")

        if kwargs:
            where_clauses = " AND ".join(f"{col} = ?" for col in kwargs.keys())
            query = f"SELECT * FROM {cls.table_name} WHERE {where_clauses}"
        else:
            query = f"SELECT * FROM {cls.table_name}"

        query += f" ORDER BY {cls.primary_key}"

        if limit:
            query += f" LIMIT {int(limit)}"

        cursor = conn.cursor()
        cursor.execute(query, list(kwargs.values()))
        rows = cursor.fetchall()

        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    @classmethod
    def find_by_id(cls, database: Database, pk_value: Any) -> Optional["ActiveModel"]:
        """Find record by primary key.

        Args:
            database: Database instance
            pk_value: Primary key value

        Returns:
            Model instance or None if not found
        """
        return cls.find_by(database, **{cls.primary_key: pk_value})

    @classmethod
    def find_by(cls, database: Database, **kwargs) -> Optional["ActiveModel"]:
        """Find first record matching criteria.

        Args:
            database: Database instance
            **kwargs: Column name and value pairs to match

        Returns:
            Model instance or None if not found
        """
        results = cls.where(database, **kwargs, _limit=1)
        return results[0] if results else None

    @classmethod
    def where(cls, database: Database, **kwargs) -> list["ActiveModel"]:
        """Find all records matching criteria, in insertion order.

        Args:
            database: Database instance
            **kwargs: Column name and value pairs to match
                Special: _limit parameter can be used to limit results

        Returns:
            List of Model instances (empty when nothing matches)
        """
        with database.connection() as conn:
            rows = cls._select_rows(conn, **kwargs)
        return [cls._from_row(database, row) for row in rows]

    @classmethod
    def all(cls, database: Database) -> list["ActiveModel"]:
        """Get all records from table, in insertion order.

        Args:
            database: Database instance

        Returns:
            List of Model instances
        """
        return cls.where(database)

    @classmethod
    def list_by_foreign_key(
        cls, database: Database, foreign_key: str, parent_id: Any
    ) -> list["ActiveModel"]:
        """List records whose foreign key equals parent_id.

        A parent with no children and a parent that does not exist both
        yield an empty list.

        Raises:
            ValueError: If foreign_key is not declared on this model
        """
        cls._require_foreign_key(foreign_key)
        return cls.where(database, **{foreign_key: parent_id})

    @classmethod
    def dependent_lookup(cls, foreign_key: str) -> DependentLookup:
        """Describe this model as a dependent of the parent behind foreign_key."""
        cls._require_foreign_key(foreign_key)
        return DependentLookup(
            kind=cls.kind(),
            find=lambda conn, parent_id: cls._select_rows(
                conn, **{foreign_key: parent_id}
            ),
        )

    @classmethod
    def _require_foreign_key(cls, foreign_key: str) -> None:
        if foreign_key not in cls._foreign_keys:
            raise ValueError(
                f"{cls.entity_name} has no foreign key {foreign_key!r}"
            )


__all__ = ["ActiveModel", "ActiveModelError"]
