from enum import Enum


class DatabaseType(Enum):
    """Enum of Database types for standardization and type checking."""
    MYSQL = 1
    POSTGRESQL = 2
    SQLITE = 3

    @property
    def placeholder(self) -> str:
        """The positional parameter placeholder used by this database's driver (%s or ?)."""
        return '?' if self is DatabaseType.SQLITE else '%s'
