"""
Price upload audit model.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from app.core.database import Base


class PriceUpload(Base):
    """
    Append-only audit row per price-list ingestion or clear.

    Table: price_uploads
    parsed_rows is the number of rows upserted, or the negated number of
    rows deleted for a clear (filename "CLEAR").
    """
    __tablename__ = "price_uploads"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    stored_path = Column(Text, nullable=False)
    mimetype = Column(String(255), nullable=True)
    size_bytes = Column(Integer, nullable=True)
    parsed_rows = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<PriceUpload(id={self.id}, filename='{self.filename}', parsed_rows={self.parsed_rows})>"
