from sqlalchemy import Column, DateTime, Float, Integer, String

from book_service.database import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False)
    title = Column(String(100), nullable=False)
    author = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    isbn = Column(String(13), nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    # UPDATE/DELETE statements carry "WHERE version = <loaded version>" and
    # the version is bumped on every flushed update.
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Book id={self.id} version={self.version} title={self.title!r}>"
