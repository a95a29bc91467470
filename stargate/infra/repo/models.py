"""SQLAlchemy models for persistence layer (Person, AstronautDuty, AstronautDetail)."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class PersonORM(Base):
    """Personne suivie (identité, nom unique)."""

    __tablename__ = "person"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)

    detail = relationship("AstronautDetailORM", back_populates="person", uselist=False)
    duties = relationship(
        "AstronautDutyORM",
        back_populates="person",
        order_by="AstronautDutyORM.duty_start_date",
    )

    def __repr__(self) -> str:
        return f"PersonORM(id={self.id!r}, name={self.name!r})"


class AstronautDutyORM(Base):
    """Affectation d'une personne sur une période (fin nulle = affectation courante)."""

    __tablename__ = "astronaut_duty"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("person.id"), nullable=False, index=True)
    rank = Column(String(64), nullable=False)
    duty_title = Column(String(128), nullable=False)
    duty_start_date = Column(Date, nullable=False)
    duty_end_date = Column(Date, nullable=True)

    person = relationship("PersonORM", back_populates="duties")

    __table_args__ = (
        UniqueConstraint(
            "person_id", "duty_title", "duty_start_date", name="uq_duty_person_title_start"
        ),
        # Une seule affectation ouverte par personne
        Index(
            "uq_duty_one_open_per_person",
            "person_id",
            unique=True,
            sqlite_where=text("duty_end_date IS NULL"),
            postgresql_where=text("duty_end_date IS NULL"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"AstronautDutyORM(id={self.id!r}, person_id={self.person_id!r}, "
            f"duty_title={self.duty_title!r}, duty_start_date={self.duty_start_date!r}, "
            f"duty_end_date={self.duty_end_date!r})"
        )


class AstronautDetailORM(Base):
    """Projection matérialisée de l'état courant d'une personne (1:1)."""

    __tablename__ = "astronaut_detail"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("person.id"), nullable=False, unique=True)
    current_duty_title = Column(String(128), nullable=False)
    current_rank = Column(String(64), nullable=False)
    career_start_date = Column(Date, nullable=False)
    career_end_date = Column(Date, nullable=True)

    person = relationship("PersonORM", back_populates="detail")
