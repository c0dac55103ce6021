import uuid

from sqlalchemy import Column, ForeignKey, Uuid
from sqlmodel import Field, SQLModel


class MovieActor(SQLModel, table=True):
    __tablename__ = "movie_actors"

    movie_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True
        )
    )
    actor_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("actors.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        )
    )
