"""
Define functions/aliases for dependency injection
"""
from collections.abc import Generator
from typing import Annotated, TypeAlias
from sqlmodel import Session
from fastapi import Depends

from core.db import get_engine

# Define db dependency
# Each request checks a connection out of the engine pool and
# returns it when the session closes, on success or error.
def get_db() -> Generator[Session, None, None]:
  with Session(get_engine()) as session:
    yield session

SessionDep: TypeAlias = Annotated[Session, Depends(get_db)]
