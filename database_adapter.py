"""
Database adapter that works with both Supabase and SQLite

Tests and local development use SQLite; production uses Supabase.
Both backends are driven through the same Supabase-style query builder:

    db.table("blog_posts").select("*").eq("slug", "hello-world").execute()
"""
from typing import Optional, Dict, List, Any, Union
from sqlalchemy import create_engine, Column, String, Integer, BigInteger, Text, JSON
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime, UTC
import uuid

Base = declarative_base()


def utcnow_ms() -> int:
    """Current UTC time as integer milliseconds since the epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


# SQLAlchemy models for SQLite
class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    excerpt = Column(Text, default="")
    content = Column(Text, nullable=False, default="")
    cover_image = Column(Text)
    tags = Column(JSON, default=list)
    status = Column(String, nullable=False, default="draft", index=True)  # 'draft', 'published'
    published_at = Column(BigInteger, index=True)  # milliseconds since epoch
    created_at = Column(BigInteger, nullable=False, default=utcnow_ms)
    updated_at = Column(BigInteger, nullable=False, default=utcnow_ms)
    reading_time = Column(Integer, nullable=False, default=1)  # minutes
    author_id = Column(String)


class User(Base):
    """Local identities for TEST_MODE dev tokens (production users live in Supabase Auth)."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True)
    name = Column(String)
    avatar_url = Column(String)
    created_at = Column(BigInteger, default=utcnow_ms)


class QueryResult:
    """Minimal stand-in for the Supabase APIResponse (``.data`` and ``.count``)."""

    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = len(data) if count is None else count


class DatabaseAdapter:
    """
    Database adapter that works with both Supabase and SQLite

    Usage:
        # Automatically uses SQLite if DATABASE_URL is set (tests)
        # Otherwise uses Supabase (production)

        db = DatabaseAdapter(settings)
        db.init()

        # Same API for both backends
        result = db.table("blog_posts").select("*").eq("id", "123").execute()
    """

    def __init__(self, settings=None):
        from config import get_settings
        self.settings = settings or get_settings()
        self.engine = None
        self.Session = None
        self.supabase = None
        self._initialized = False

        # Determine which backend to use
        if self.settings.DATABASE_URL:
            self.backend = "sqlite"
            # Remove aiosqlite:// prefix for synchronous engine
            db_url = self.settings.DATABASE_URL.replace("sqlite+aiosqlite://", "sqlite://")
            self.engine = create_engine(db_url, echo=False)
            self.Session = sessionmaker(bind=self.engine)
        elif self.settings.SUPABASE_URL:
            self.backend = "supabase"
            from supabase import create_client
            self.supabase = create_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_KEY
            )
        else:
            raise ValueError("Must provide either DATABASE_URL or SUPABASE_URL")

    def init(self):
        """Initialize database (create tables for SQLite)"""
        if self.backend == "sqlite" and not self._initialized:
            Base.metadata.create_all(self.engine)
            self._initialized = True

    def cleanup(self):
        """Clean up database (for testing)"""
        if self.backend == "sqlite":
            Base.metadata.drop_all(self.engine)
            Base.metadata.create_all(self.engine)

    def table(self, table_name: str):
        """Get table interface (compatible with Supabase API)"""
        if self.backend == "sqlite":
            return SQLiteTable(table_name, self.Session)
        else:
            return self.supabase.table(table_name)


class SQLiteTable:
    """
    SQLite table interface that mimics Supabase table API

    Only the builder calls used by this service are supported.
    """

    # Map table names to SQLAlchemy models
    MODELS = {
        "blog_posts": BlogPost,
        "users": User,
    }

    def __init__(self, table_name: str, Session):
        self.table_name = table_name
        self.Session = Session
        self.model = self.MODELS.get(table_name)
        self._select_cols = "*"
        self._filters = []
        self._insert_data = None
        self._update_data = None
        self._delete = False
        self._limit_val = None
        self._order_col = None
        self._order_desc = False

        if not self.model:
            raise ValueError(f"Unknown table: {table_name}")

    def select(self, columns: str = "*"):
        """Select columns"""
        self._select_cols = columns
        return self

    def insert(self, data: Union[Dict, List[Dict]]):
        """Insert data"""
        self._insert_data = data if isinstance(data, list) else [data]
        return self

    def update(self, data: Dict):
        """Update data"""
        self._update_data = data
        return self

    def eq(self, column: str, value: Any):
        """Filter by equality"""
        self._filters.append((column, "==", value))
        return self

    def neq(self, column: str, value: Any):
        """Filter by inequality"""
        self._filters.append((column, "!=", value))
        return self

    def in_(self, column: str, values: List[Any]):
        """Filter by inclusion set"""
        self._filters.append((column, "in", values))
        return self

    def limit(self, count: int):
        """Limit results"""
        self._limit_val = count
        return self

    def order(self, column: str, desc: bool = False):
        """Order results"""
        self._order_col = column
        self._order_desc = desc
        return self

    def delete(self):
        """Delete matching records"""
        self._delete = True
        return self

    def execute(self) -> QueryResult:
        """Execute the query"""
        session = self.Session()

        try:
            # Handle INSERT
            if self._insert_data:
                objects = []
                for item in self._insert_data:
                    obj = self.model(**self._prepare_data(item))
                    session.add(obj)
                    objects.append(obj)
                session.commit()

                # Refresh to get generated values
                for obj in objects:
                    session.refresh(obj)

                return QueryResult([self._model_to_dict(obj) for obj in objects])

            # Handle UPDATE
            elif self._update_data:
                query = self._apply_filters(session.query(self.model))
                objects = query.all()

                prepared_update = self._prepare_data(self._update_data)
                for obj in objects:
                    for key, value in prepared_update.items():
                        setattr(obj, key, value)

                session.commit()

                for obj in objects:
                    session.refresh(obj)

                return QueryResult([self._model_to_dict(obj) for obj in objects])

            # Handle DELETE
            elif self._delete:
                query = self._apply_filters(session.query(self.model))
                count = query.delete(synchronize_session=False)
                session.commit()
                return QueryResult([], count)

            # Handle SELECT
            else:
                query = self._apply_filters(session.query(self.model))

                if self._order_col:
                    col = getattr(self.model, self._order_col)
                    query = query.order_by(col.desc() if self._order_desc else col)

                if self._limit_val:
                    query = query.limit(self._limit_val)

                return QueryResult([self._model_to_dict(obj) for obj in query.all()])

        finally:
            session.close()

    def _apply_filters(self, query):
        """Apply filters to query"""
        for column, op, value in self._filters:
            col = getattr(self.model, column)
            if op == "==":
                query = query.filter(col == value)
            elif op == "!=":
                query = query.filter(col != value)
            elif op == "in":
                query = query.filter(col.in_(value))
        return query

    def _model_to_dict(self, obj) -> Dict[str, Any]:
        """Convert SQLAlchemy model to dict, honouring the selected column list"""
        columns = [column.name for column in obj.__table__.columns]
        if self._select_cols and self._select_cols.strip() != "*":
            wanted = {c.strip() for c in self._select_cols.split(",")}
            columns = [name for name in columns if name in wanted]
        return {name: getattr(obj, name) for name in columns}

    def _prepare_data(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Only keep keys that exist on the model."""
        model_columns = {col.name for col in self.model.__table__.columns}
        return {key: value for key, value in item.items() if key in model_columns}
